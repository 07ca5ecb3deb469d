"""Error/warning totals over a location list."""

from __future__ import annotations

from typing import Iterable

from ..host.types import AggregateCounts, Category, LocationEntry


def count_diagnostics(entries: Iterable[LocationEntry]) -> AggregateCounts:
    """Count errors and warnings across every entry, ignoring the cursor."""

    errors = 0
    warnings = 0
    for entry in entries:
        category = entry.category
        if category is Category.ERROR:
            errors += 1
        elif category is Category.WARNING:
            warnings += 1
    return AggregateCounts(errors=errors, warnings=warnings)


__all__ = ["count_diagnostics"]
