"""Selection, aggregation and change detection for the location popup."""

from .aggregator import count_diagnostics
from .controller import LocPopupController, PassOutcome
from .selector import select_nearest
from .state import PopupState, PopupStateStore

__all__ = [
    "LocPopupController",
    "PassOutcome",
    "PopupState",
    "PopupStateStore",
    "count_diagnostics",
    "select_nearest",
]
