"""Controller that turns host diagnostics into popup state transitions."""

from __future__ import annotations

import logging
import threading
from dataclasses import dataclass
from typing import Callable

from ..host.client import DiagnosticQueryClient
from ..host.types import AggregateCounts, GuardedSkip, HostQueryFailure
from .aggregator import count_diagnostics
from .selector import select_nearest
from .state import PopupState, PopupStateStore

LOGGER = logging.getLogger(__name__)

RedrawNotifier = Callable[[], None]
StatusSink = Callable[[AggregateCounts], None]

__all__ = ["LocPopupController", "PassOutcome", "RedrawNotifier", "StatusSink"]


@dataclass(slots=True, frozen=True)
class PassOutcome:
    """Summary of one pass, returned for logging and tooling."""

    state: PopupState
    counts: AggregateCounts | None
    notified: bool
    skipped: str | None = None


class LocPopupController:
    """Runs query → aggregate → select → diff → notify passes.

    Every pass holds ``_lock`` from the first host read to the last
    notification, so passes never overlap and state transitions happen in
    the order passes acquire the lock. The rendering layer reads
    :attr:`state` and :attr:`counts` but never writes them.
    """

    def __init__(
        self,
        client: DiagnosticQueryClient,
        notifier: RedrawNotifier,
        *,
        status_sink: StatusSink | None = None,
    ) -> None:
        self._client = client
        self._notifier = notifier
        self._status_sink = status_sink
        self._store = PopupStateStore()
        self._counts = AggregateCounts()
        self._lock = threading.Lock()

    @property
    def state(self) -> PopupState:
        return self._store.state

    @property
    def counts(self) -> AggregateCounts:
        return self._counts

    def update(self) -> PassOutcome:
        """Run one full pass; host failures degrade to hiding the popup."""

        with self._lock:
            try:
                return self._run_pass()
            except Exception:
                self._hide()
                raise

    def _run_pass(self) -> PassOutcome:
        try:
            result = self._client.query()
        except GuardedSkip as exc:
            LOGGER.debug("Popup pass skipped: %s", exc)
            return self._outcome(None, self._hide(), skipped=f"guarded: {exc}")
        except HostQueryFailure as exc:
            LOGGER.debug("Popup pass aborted: %s", exc)
            return self._outcome(None, self._hide(), skipped=f"host failure: {exc}")

        counts = count_diagnostics(result.entries)
        self._counts = counts
        self._forward_counts(counts)

        entry = select_nearest(result.entries, result.cursor)
        if entry is None:
            return self._outcome(counts, self._hide())
        notified = False
        if self._store.show(entry.code, entry.text):
            notified = self._notify()
        return self._outcome(counts, notified)

    def _hide(self) -> bool:
        if not self._store.hide():
            return False
        return self._notify()

    def _outcome(
        self,
        counts: AggregateCounts | None,
        notified: bool,
        skipped: str | None = None,
    ) -> PassOutcome:
        return PassOutcome(state=self._store.state, counts=counts, notified=notified, skipped=skipped)

    def _forward_counts(self, counts: AggregateCounts) -> None:
        if self._status_sink is None:
            return
        try:
            self._status_sink(counts)
        except Exception:
            LOGGER.exception("Status sink failed for %s", counts)

    def _notify(self) -> bool:
        try:
            self._notifier()
        except Exception:
            LOGGER.exception("Popup redraw notifier failed")
        return True
