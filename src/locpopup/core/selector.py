"""Pick the diagnostic nearest the cursor on the cursor's line."""

from __future__ import annotations

from typing import Iterable

from ..host.types import CursorPosition, LocationEntry

# Cursor columns and location-list columns are reported with different bases.
COLUMN_TOLERANCE = 1


def entries_on_line(entries: Iterable[LocationEntry], line: int) -> list[LocationEntry]:
    return [entry for entry in entries if entry.line == line]


def select_nearest(
    entries: Iterable[LocationEntry],
    cursor: CursorPosition,
) -> LocationEntry | None:
    """Return the entry at or left of the cursor, or ``None`` for an empty line.

    Entries on the cursor line are walked from the highest column down and
    the first one with ``column - 1 <= cursor.column`` wins. When none
    qualifies the walk ends on the smallest column and that entry is used.
    """

    candidates = entries_on_line(entries, cursor.line)
    if not candidates:
        return None
    if len(candidates) > 1:
        # sorted() is stable, so equal columns keep their host order.
        candidates = sorted(candidates, key=lambda entry: entry.column, reverse=True)
    selected = candidates[-1]
    for entry in candidates:
        if cursor.column >= entry.column - COLUMN_TOLERANCE:
            selected = entry
            break
    return selected


__all__ = ["COLUMN_TOLERANCE", "entries_on_line", "select_nearest"]
