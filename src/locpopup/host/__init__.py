"""Typed boundary between the popup controller and the editor host."""

from .client import DiagnosticQueryClient, HostQuery, NvimQueryClient
from .types import (
    AggregateCounts,
    Category,
    CursorPosition,
    GuardedSkip,
    HostQueryFailure,
    LocationEntry,
    LocPopupError,
    MalformedEntry,
)

__all__ = [
    "AggregateCounts",
    "Category",
    "CursorPosition",
    "DiagnosticQueryClient",
    "GuardedSkip",
    "HostQuery",
    "HostQueryFailure",
    "LocPopupError",
    "LocationEntry",
    "MalformedEntry",
    "NvimQueryClient",
]
