"""Read-only queries against the editor host's RPC session."""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Any, Protocol

from .types import (
    CursorPosition,
    GuardedSkip,
    HostQueryFailure,
    LocationEntry,
    decode_cursor,
    decode_location_list,
)

LOGGER = logging.getLogger(__name__)

TERMINAL_BUFFER_KIND = "terminal"
NORMAL_MODE = "n"

__all__ = [
    "DiagnosticQueryClient",
    "HostQuery",
    "NORMAL_MODE",
    "NvimQueryClient",
    "TERMINAL_BUFFER_KIND",
]


@dataclass(slots=True, frozen=True)
class HostQuery:
    """Everything one controller pass needs from the host."""

    cursor: CursorPosition
    entries: tuple[LocationEntry, ...]


class DiagnosticQueryClient(Protocol):
    """Capability used by the controller to read diagnostics.

    Implementations raise :class:`HostQueryFailure` when a read fails and
    :class:`GuardedSkip` when the buffer or mode rules out a popup.
    """

    def query(self) -> HostQuery:  # pragma: no cover - protocol stub
        ...


class NvimQueryClient:
    """Query client over a pynvim-compatible session object.

    The session is expected to expose ``current.buffer.options``,
    ``current.window.cursor`` and ``call(function, *args)``. Transport setup
    is the caller's business.
    """

    def __init__(self, session: Any, *, location_window: int = 0) -> None:
        self._session = session
        self._location_window = location_window

    @property
    def session(self) -> Any:
        return self._session

    def query(self) -> HostQuery:
        buffer_kind = self.buffer_kind()
        if buffer_kind == TERMINAL_BUFFER_KIND:
            raise GuardedSkip("terminal buffer")
        mode = self.mode()
        if mode != NORMAL_MODE:
            raise GuardedSkip(f"mode {mode!r} is not normal mode")
        cursor = self.cursor()
        entries = self.location_list()
        return HostQuery(cursor=cursor, entries=tuple(entries))

    def buffer_kind(self) -> str:
        value = self._read("buftype", lambda: self._session.current.buffer.options["buftype"])
        return _expect_str("buftype", value)

    def mode(self) -> str:
        value = self._read("mode", lambda: self._session.call("mode"))
        return _expect_str("mode", value)

    def cursor(self) -> CursorPosition:
        return decode_cursor(self._read("cursor", lambda: self._session.current.window.cursor))

    def location_list(self) -> list[LocationEntry]:
        payload = self._read(
            "getloclist", lambda: self._session.call("getloclist", self._location_window)
        )
        return decode_location_list(payload)

    def _read(self, label: str, reader: Any) -> Any:
        try:
            return reader()
        except Exception as exc:
            raise HostQueryFailure(f"host read {label!r} failed: {exc}") from exc


def _expect_str(label: str, value: Any) -> str:
    if isinstance(value, bytes):
        value = value.decode("utf-8", errors="replace")
    if not isinstance(value, str):
        raise HostQueryFailure(f"host read {label!r} returned {type(value).__name__}, expected str")
    return value
