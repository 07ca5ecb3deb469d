"""Headless translation of popup state into display text and styling."""

from __future__ import annotations

from dataclasses import dataclass

from ..core.state import PopupState
from ..host.types import AggregateCounts, Category

ERROR_BACKGROUND = "rgba(204, 62, 68, 1)"
WARNING_BACKGROUND = "rgba(203, 203, 65, 1)"
POPUP_FOREGROUND = "rgba(205, 211, 222, 1)"
POPUP_BACKGROUND = "rgba(24, 29, 34, 1)"

__all__ = [
    "ERROR_BACKGROUND",
    "POPUP_BACKGROUND",
    "POPUP_FOREGROUND",
    "PopupPresentation",
    "PopupPalette",
    "StatusPresentation",
    "WARNING_BACKGROUND",
    "popup_stylesheet",
    "present_popup",
    "present_status",
]


@dataclass(slots=True, frozen=True)
class PopupPalette:
    error_background: str = ERROR_BACKGROUND
    warning_background: str = WARNING_BACKGROUND
    foreground: str = POPUP_FOREGROUND
    background: str = POPUP_BACKGROUND


@dataclass(slots=True, frozen=True)
class PopupPresentation:
    """What the popup widget should display.

    ``label`` and ``label_style`` are ``None`` for categories the popup has
    no styling for; the widget then keeps whatever label it showed last.
    """

    visible: bool
    text: str = ""
    label: str | None = None
    label_style: str | None = None


@dataclass(slots=True, frozen=True)
class StatusPresentation:
    errors: int
    warnings: int

    @property
    def text(self) -> str:
        return f"E {self.errors}  W {self.warnings}"


def present_popup(state: PopupState, palette: PopupPalette | None = None) -> PopupPresentation:
    if not state.visible:
        return PopupPresentation(visible=False)
    colors = palette or PopupPalette()
    category = Category.from_code(state.category)
    if category is Category.ERROR:
        return PopupPresentation(
            visible=True,
            text=state.text,
            label="Error",
            label_style=f"background-color: {colors.error_background};",
        )
    if category is Category.WARNING:
        return PopupPresentation(
            visible=True,
            text=state.text,
            label="Warning",
            label_style=f"background-color: {colors.warning_background};",
        )
    return PopupPresentation(visible=True, text=state.text)


def present_status(counts: AggregateCounts) -> StatusPresentation:
    return StatusPresentation(errors=counts.errors, warnings=counts.warnings)


def popup_stylesheet(palette: PopupPalette | None = None) -> str:
    colors = palette or PopupPalette()
    return (
        ".QWidget { border: 1px solid #000; } "
        f"* {{color: {colors.foreground}; background-color: {colors.background};}}"
    )
