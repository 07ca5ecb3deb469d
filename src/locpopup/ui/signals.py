"""Qt signals used to hand controller output to the GUI thread."""

from __future__ import annotations

from PySide6.QtCore import QObject, Signal

from ..host.types import AggregateCounts


class QtRedrawNotifier(QObject):
    """Notifier and status sink for :class:`~locpopup.core.controller.LocPopupController`.

    Emitting signals lets controller passes run off the GUI thread while
    slots connected with the default connection type still run on the
    thread that owns the receiving widget.
    """

    redraw_requested = Signal()
    counts_changed = Signal(int, int)

    def __call__(self) -> None:
        self.redraw_requested.emit()

    def forward_counts(self, counts: AggregateCounts) -> None:
        self.counts_changed.emit(counts.errors, counts.warnings)


__all__ = ["QtRedrawNotifier"]
