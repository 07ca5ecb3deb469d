"""Editor event subscription that drives controller passes.

The popup must refresh whenever the cursor can land on a different
diagnostic or the editing mode changes, so the subscriber registers for
exactly :data:`TRIGGER_EVENTS` and turns each host notification into one
controller pass.
"""

from __future__ import annotations

import logging
import threading
from concurrent.futures import Executor, Future
from typing import Any, Sequence

from .core.controller import LocPopupController, PassOutcome

LOGGER = logging.getLogger(__name__)

TRIGGER_EVENTS: tuple[str, ...] = ("CursorMoved", "CursorHold", "InsertEnter", "InsertLeave")
DEFAULT_NOTIFICATION_METHOD = "LocPopup"
UPDATE_ACTION = "update"

__all__ = [
    "DEFAULT_NOTIFICATION_METHOD",
    "EventSubscriber",
    "TRIGGER_EVENTS",
    "UPDATE_ACTION",
    "build_autocmd",
]


def build_autocmd(method: str = DEFAULT_NOTIFICATION_METHOD) -> str:
    """Return the host command that forwards trigger events as notifications."""

    events = ",".join(TRIGGER_EVENTS)
    return f'autocmd {events} * call rpcnotify(0, "{method}", "{UPDATE_ACTION}")'


class EventSubscriber:
    """Wires host notifications to :meth:`LocPopupController.update`.

    ``executor`` is optional; without one, passes run on the thread that
    delivers the notification. Ordering between passes is enforced by the
    controller lock either way.
    """

    def __init__(
        self,
        session: Any,
        controller: LocPopupController,
        *,
        method: str = DEFAULT_NOTIFICATION_METHOD,
        enabled: bool = True,
        executor: Executor | None = None,
    ) -> None:
        self._session = session
        self._controller = controller
        self._method = method
        self._enabled = enabled
        self._executor = executor
        self._subscribed = False
        self._subscribe_lock = threading.Lock()

    @property
    def method(self) -> str:
        return self._method

    @property
    def subscribed(self) -> bool:
        return self._subscribed

    def subscribe(self) -> bool:
        """Register with the host once; return ``True`` on the first success."""

        if not self._enabled:
            LOGGER.debug("Location popup disabled; not subscribing to %s", self._method)
            return False
        with self._subscribe_lock:
            if self._subscribed:
                return False
            self._session.subscribe(self._method)
            self._session.command(build_autocmd(self._method))
            self._subscribed = True
        LOGGER.info("Subscribed to %s for %s", self._method, ", ".join(TRIGGER_EVENTS))
        return True

    def run(self) -> bool:
        """Subscribe, then block in the session loop delivering notifications.

        Returns ``False`` without entering the loop when the popup is
        disabled; otherwise returns once the session loop stops.
        """

        if not self._enabled:
            LOGGER.debug("Location popup disabled; not running the notification loop")
            return False
        self.subscribe()
        LOGGER.debug("Entering host notification loop for %s", self._method)
        self._session.run_loop(None, self.handle_notification)
        return True

    def handle_notification(self, name: str, args: Sequence[Any]) -> PassOutcome | Future[PassOutcome] | None:
        """Route one RPC notification; unrelated notifications are ignored.

        The signature matches the notification callback of a pynvim
        session loop.
        """

        if not self._enabled or name != self._method:
            return None
        if not args or not isinstance(args[0], str):
            LOGGER.debug("Ignoring %s notification without an action: %r", name, args)
            return None
        action = args[0]
        if action != UPDATE_ACTION:
            LOGGER.debug("Ignoring unknown %s action %r", name, action)
            return None
        return self.dispatch()

    def dispatch(self) -> PassOutcome | Future[PassOutcome]:
        if self._executor is None:
            return self._controller.update()
        future = self._executor.submit(self._controller.update)
        future.add_done_callback(_log_failed_pass)
        return future


def _log_failed_pass(future: Future[PassOutcome]) -> None:
    if future.cancelled():
        return
    exc = future.exception()
    if exc is not None:
        LOGGER.error("Popup pass failed", exc_info=(type(exc), exc, exc.__traceback__))
