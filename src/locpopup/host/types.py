"""Value types and decoding helpers for host query results."""

from __future__ import annotations

import logging
from dataclasses import dataclass
from enum import Enum
from typing import Any, Mapping, Sequence

LOGGER = logging.getLogger(__name__)

__all__ = [
    "AggregateCounts",
    "Category",
    "CursorPosition",
    "GuardedSkip",
    "HostQueryFailure",
    "LocPopupError",
    "LocationEntry",
    "MalformedEntry",
    "decode_cursor",
    "decode_location_entry",
    "decode_location_list",
]


class LocPopupError(Exception):
    """Base class for every recoverable popup controller failure."""


class HostQueryFailure(LocPopupError):
    """Raised when one of the host reads fails or returns an unusable shape."""


class GuardedSkip(LocPopupError):
    """Raised when the host is in a state where diagnostics are never shown."""


class MalformedEntry(LocPopupError):
    """Raised when a location-list record is missing a required field."""


class Category(str, Enum):
    """Diagnostic severity reported by the host as a one-letter code."""

    ERROR = "E"
    WARNING = "W"
    OTHER = ""

    @classmethod
    def from_code(cls, code: str) -> "Category":
        if code == cls.ERROR.value:
            return cls.ERROR
        if code == cls.WARNING.value:
            return cls.WARNING
        return cls.OTHER


@dataclass(slots=True, frozen=True)
class CursorPosition:
    """Cursor location; ``line`` is 1-indexed, ``column`` follows the host."""

    line: int
    column: int


@dataclass(slots=True, frozen=True)
class LocationEntry:
    """One diagnostic record from the host's location list.

    ``code`` keeps the raw host type string (``"E"``, ``"W"``, ...) because
    that is what the popup stores and compares; ``category`` is the decoded
    severity used for counting.
    """

    line: int
    column: int
    code: str
    text: str = ""

    @property
    def category(self) -> Category:
        return Category.from_code(self.code)


@dataclass(slots=True, frozen=True)
class AggregateCounts:
    """Error and warning totals over a whole location list."""

    errors: int = 0
    warnings: int = 0


def decode_location_entry(record: Mapping[str, Any]) -> LocationEntry:
    """Decode one host record into a :class:`LocationEntry`.

    Raises :class:`MalformedEntry` when ``lnum``, ``col`` or ``type`` is
    missing or cannot be interpreted.
    """

    if not isinstance(record, Mapping):
        raise MalformedEntry(f"location record must be a mapping, got {type(record).__name__}")
    line = _require_int(record, "lnum")
    column = _require_int(record, "col")
    code = record.get("type")
    if not isinstance(code, str):
        raise MalformedEntry("location record is missing its 'type' field")
    text = record.get("text")
    return LocationEntry(line=line, column=column, code=code, text="" if text is None else str(text))


def decode_location_list(payload: Any) -> list[LocationEntry]:
    """Decode a full location list, skipping records that are malformed."""

    if not isinstance(payload, (list, tuple)):
        raise HostQueryFailure(f"location list must be a list, got {type(payload).__name__}")
    entries: list[LocationEntry] = []
    for index, record in enumerate(payload):
        try:
            entries.append(decode_location_entry(record))
        except MalformedEntry as exc:
            LOGGER.debug("Skipping location record %d: %s", index, exc)
    return entries


def decode_cursor(payload: Any) -> CursorPosition:
    if not isinstance(payload, Sequence) or isinstance(payload, (str, bytes)) or len(payload) != 2:
        raise HostQueryFailure(f"cursor position must be a (line, column) pair, got {payload!r}")
    try:
        line, column = (_coerce_int(value) for value in payload)
    except (TypeError, ValueError) as exc:
        raise HostQueryFailure(f"cursor position is not numeric: {payload!r}") from exc
    return CursorPosition(line=line, column=column)


def _require_int(record: Mapping[str, Any], key: str) -> int:
    if record.get(key) is None:
        raise MalformedEntry(f"location record is missing its {key!r} field")
    try:
        return _coerce_int(record[key])
    except (TypeError, ValueError) as exc:
        raise MalformedEntry(f"location record field {key!r} is not an integer: {record[key]!r}") from exc


def _coerce_int(value: Any) -> int:
    if isinstance(value, bool):
        raise TypeError("booleans are not positions")
    if isinstance(value, int):
        return value
    if isinstance(value, float):
        if not value.is_integer():
            raise ValueError(f"{value!r} is not integral")
        return int(value)
    if isinstance(value, str):
        return int(value.strip(), 10)
    raise TypeError(f"unsupported position type {type(value).__name__}")
