"""Shared test helpers and stub classes."""

from __future__ import annotations

from typing import Any

from locpopup.host.client import HostQuery
from locpopup.host.types import CursorPosition, LocationEntry


class StubQueryClient:
    """Query client returning a canned result or raising a canned error."""

    def __init__(self, result: HostQuery | Exception | None = None) -> None:
        self.result = result or HostQuery(cursor=CursorPosition(1, 0), entries=())
        self.calls = 0

    def query(self) -> HostQuery:
        self.calls += 1
        if isinstance(self.result, Exception):
            raise self.result
        return self.result


class NotificationRecorder:
    def __init__(self) -> None:
        self.count = 0

    def __call__(self) -> None:
        self.count += 1


def entry(line: int, column: int, code: str = "E", text: str = "") -> LocationEntry:
    return LocationEntry(line=line, column=column, code=code, text=text or f"{code}@{line}:{column}")


def record(**fields: Any) -> dict[str, Any]:
    payload: dict[str, Any] = {"lnum": 1, "col": 1, "type": "E", "text": "boom"}
    payload.update(fields)
    return payload


def host_query(line: int, column: int, *entries: LocationEntry) -> HostQuery:
    return HostQuery(cursor=CursorPosition(line, column), entries=tuple(entries))
