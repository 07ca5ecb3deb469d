"""Tests for :mod:`locpopup.ui.presentation`."""

from __future__ import annotations

from locpopup.core.state import PopupState
from locpopup.host.types import AggregateCounts
from locpopup.ui.presentation import (
    ERROR_BACKGROUND,
    WARNING_BACKGROUND,
    PopupPalette,
    popup_stylesheet,
    present_popup,
    present_status,
)


def test_hidden_state_presents_nothing() -> None:
    presentation = present_popup(PopupState(visible=False, category="E", text="stale"))

    assert presentation.visible is False
    assert presentation.text == ""


def test_error_presentation_uses_error_label_and_background() -> None:
    presentation = present_popup(PopupState(visible=True, category="E", text="bad"))

    assert presentation.label == "Error"
    assert presentation.text == "bad"
    assert presentation.label_style == f"background-color: {ERROR_BACKGROUND};"


def test_warning_presentation_uses_warning_label_and_background() -> None:
    presentation = present_popup(PopupState(visible=True, category="W", text="meh"))

    assert presentation.label == "Warning"
    assert presentation.label_style == f"background-color: {WARNING_BACKGROUND};"


def test_other_categories_leave_label_untouched() -> None:
    presentation = present_popup(PopupState(visible=True, category="I", text="info"))

    assert presentation.visible is True
    assert presentation.label is None
    assert presentation.label_style is None


def test_custom_palette_is_applied() -> None:
    palette = PopupPalette(error_background="red", background="black")

    presentation = present_popup(PopupState(visible=True, category="E", text="x"), palette)

    assert presentation.label_style == "background-color: red;"
    assert "background-color: black;" in popup_stylesheet(palette)


def test_status_text_lists_errors_then_warnings() -> None:
    assert present_status(AggregateCounts(errors=3, warnings=1)).text == "E 3  W 1"
