"""In-memory host session that plays back recorded query responses."""

from __future__ import annotations

import json
from collections import deque
from dataclasses import dataclass, field
from pathlib import Path
from types import SimpleNamespace
from typing import Any, Callable, Iterable, Mapping, Sequence

__all__ = ["ReplayError", "ReplayStep", "ScriptedSession", "load_transcript"]


class ReplayError(RuntimeError):
    """Raised by a scripted read that the transcript marks as failing."""


@dataclass(slots=True)
class ReplayStep:
    """Host responses for one controller pass.

    ``fail`` names a read (``"buftype"``, ``"mode"``, ``"cursor"`` or
    ``"getloclist"``) that should raise instead of answering.
    """

    buffer_kind: str = ""
    mode: str = "n"
    cursor: Sequence[int] = (1, 0)
    loclist: list[Any] = field(default_factory=list)
    fail: str | None = None

    @classmethod
    def from_mapping(cls, payload: Mapping[str, Any]) -> "ReplayStep":
        cursor = payload.get("cursor", (1, 0))
        loclist = payload.get("loclist") or []
        return cls(
            buffer_kind=str(payload.get("buffer_kind", "")),
            mode=str(payload.get("mode", "n")),
            cursor=tuple(cursor) if isinstance(cursor, (list, tuple)) else cursor,
            loclist=list(loclist),
            fail=payload.get("fail"),
        )


def load_transcript(path: Path | str) -> list[ReplayStep]:
    """Read a ``{"steps": [...]}`` JSON transcript from disk."""

    body = Path(path).read_text(encoding="utf-8")
    payload = json.loads(body)
    raw_steps = payload.get("steps") if isinstance(payload, Mapping) else payload
    if not isinstance(raw_steps, list):
        raise ValueError("Transcript must contain a list of steps")
    return [ReplayStep.from_mapping(step) for step in raw_steps if isinstance(step, Mapping)]


class _Options:
    def __init__(self, owner: "ScriptedSession") -> None:
        self._owner = owner

    def __getitem__(self, name: str) -> Any:
        if name != "buftype":
            raise KeyError(name)
        return self._owner._answer("buftype", lambda step: step.buffer_kind)


class _Window:
    def __init__(self, owner: "ScriptedSession") -> None:
        self._owner = owner

    @property
    def cursor(self) -> Sequence[int]:
        return self._owner._answer("cursor", lambda step: step.cursor)


class ScriptedSession:
    """Session double exposing the surface :class:`NvimQueryClient` reads.

    It also records subscriptions and commands, and :meth:`run_loop` plays
    queued notifications through the registered callback, so event wiring
    can be exercised without a running editor.
    """

    def __init__(self, steps: Iterable[ReplayStep] | None = None) -> None:
        self._steps = list(steps or [])
        self._step = ReplayStep()
        self.subscriptions: list[str] = []
        self.commands: list[str] = []
        self.calls: list[tuple[Any, ...]] = []
        self.notification_callbacks: list[Callable[[str, list[Any]], Any]] = []
        self._pending: deque[tuple[str, list[Any], ReplayStep | None]] = deque()
        self.current = SimpleNamespace(
            buffer=SimpleNamespace(options=_Options(self)),
            window=_Window(self),
        )

    @property
    def steps(self) -> list[ReplayStep]:
        return list(self._steps)

    def load(self, step: ReplayStep) -> None:
        self._step = step

    def call(self, function: str, *args: Any) -> Any:
        self.calls.append((function, *args))
        if function == "mode":
            return self._answer("mode", lambda step: step.mode)
        if function == "getloclist":
            return self._answer("getloclist", lambda step: step.loclist)
        raise ReplayError(f"unsupported scripted call {function!r}")

    def subscribe(self, event: str) -> None:
        self.subscriptions.append(event)

    def command(self, command: str) -> None:
        self.commands.append(command)

    def notify(self, name: str, *args: Any, step: ReplayStep | None = None) -> None:
        """Queue a host notification, optionally loading ``step`` before delivery."""

        self._pending.append((name, list(args), step))

    def run_loop(
        self,
        request_cb: Callable[..., Any] | None,
        notification_cb: Callable[[str, list[Any]], Any],
        setup_cb: Callable[[], None] | None = None,
        err_cb: Callable[[str], None] | None = None,
    ) -> None:
        del request_cb, err_cb
        self.notification_callbacks.append(notification_cb)
        if setup_cb is not None:
            setup_cb()
        while self._pending:
            name, args, step = self._pending.popleft()
            if step is not None:
                self._step = step
            notification_cb(name, args)

    def _answer(self, read: str, getter: Callable[[ReplayStep], Any]) -> Any:
        if self._step.fail == read:
            raise ReplayError(f"scripted failure for {read!r}")
        return getter(self._step)
