"""Proximity diagnostic popup for editor location lists."""

from .core.controller import LocPopupController
from .core.state import PopupState
from .host.types import AggregateCounts, Category, CursorPosition, LocationEntry

__all__ = [
    "AggregateCounts",
    "Category",
    "CursorPosition",
    "LocPopupController",
    "LocationEntry",
    "PopupState",
]
