"""Presentation layer for the location popup."""

from .presentation import PopupPresentation, StatusPresentation, present_popup, present_status

__all__ = ["PopupPresentation", "StatusPresentation", "present_popup", "present_status"]
