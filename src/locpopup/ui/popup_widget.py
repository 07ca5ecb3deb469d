"""Popup and status widgets with Qt + headless fallbacks.

Display decisions live in :mod:`locpopup.ui.presentation`; this module
only applies them. When PySide6 is importable and a ``QApplication``
exists the widgets build real Qt controls, otherwise they keep the last
rendered values in memory so tests and the replay tool can inspect them.
"""

from __future__ import annotations

import logging
from typing import Any

from ..core.state import PopupState
from ..host.types import AggregateCounts
from .presentation import (
    PopupPalette,
    PopupPresentation,
    StatusPresentation,
    popup_stylesheet,
    present_popup,
    present_status,
)

QApplication: Any = None
QHBoxLayout: Any = None
QLabel: Any = None
QWidget: Any = None

try:  # pragma: no cover - PySide6 optional in CI
    from PySide6.QtWidgets import (
        QApplication as _QtApplication,
        QHBoxLayout as _QtHBoxLayout,
        QLabel as _QtLabel,
        QWidget as _QtWidget,
    )

    QApplication = _QtApplication
    QHBoxLayout = _QtHBoxLayout
    QLabel = _QtLabel
    QWidget = _QtWidget
except Exception:  # pragma: no cover - runtime fallback
    pass

LOGGER = logging.getLogger(__name__)

__all__ = ["LintStatusIndicator", "LocPopupWidget"]


def _qt_available() -> bool:
    return QApplication is not None and QApplication.instance() is not None


class LocPopupWidget:
    """Category label + message label shown next to the cursor."""

    def __init__(
        self,
        *,
        palette: PopupPalette | None = None,
        enable_qt: bool = True,
        parent: Any = None,
    ) -> None:
        self._palette = palette or PopupPalette()
        self.visible = False
        self.label_text = ""
        self.label_style = ""
        self.content_text = ""
        self.last_presentation: PopupPresentation | None = None
        self._widget: Any = None
        self._type_label: Any = None
        self._content_label: Any = None
        if enable_qt and _qt_available():
            self._build_qt(parent)

    @property
    def widget(self) -> Any:
        return self._widget

    def render(self, state: PopupState) -> PopupPresentation:
        """Apply ``state``; hidden state hides, visible state re-shows."""

        presentation = present_popup(state, self._palette)
        self.last_presentation = presentation
        if not presentation.visible:
            self.visible = False
            self._call_widget("hide")
            return presentation

        self.content_text = presentation.text
        self._set_label_text(self._content_label, presentation.text)
        if presentation.label is not None:
            self.label_text = presentation.label
            self.label_style = presentation.label_style or ""
            self._set_label_text(self._type_label, presentation.label)
            if self._type_label is not None:
                self._type_label.setStyleSheet(self.label_style)
        self.visible = True
        # Hide then show so the popup re-sizes to the new text.
        self._call_widget("hide")
        self._call_widget("show")
        return presentation

    def _build_qt(self, parent: Any) -> None:
        widget = QWidget(parent)
        widget.setObjectName("locpopup")
        widget.setContentsMargins(8, 8, 8, 8)
        layout = QHBoxLayout()
        layout.setContentsMargins(0, 0, 0, 0)
        layout.setSpacing(4)
        widget.setLayout(layout)
        widget.setStyleSheet(popup_stylesheet(self._palette))

        type_label = QLabel()
        type_label.setObjectName("locpopup-type")
        type_label.setContentsMargins(4, 1, 4, 1)
        content_label = QLabel()
        content_label.setObjectName("locpopup-content")
        content_label.setContentsMargins(0, 0, 0, 0)
        layout.addWidget(type_label)
        layout.addWidget(content_label)
        widget.hide()

        self._widget = widget
        self._type_label = type_label
        self._content_label = content_label
        LOGGER.debug("Location popup widget created")

    def _call_widget(self, method: str) -> None:
        if self._widget is None:
            return
        getattr(self._widget, method)()

    @staticmethod
    def _set_label_text(label: Any, text: str) -> None:
        if label is not None:
            label.setText(text)


class LintStatusIndicator:
    """Error/warning counter installed in a status bar."""

    def __init__(self) -> None:
        self.errors = 0
        self.warnings = 0
        self.text = present_status(AggregateCounts()).text
        self._label: Any = None

    def install(self, status_bar: Any | None) -> None:
        if status_bar is None or QLabel is None:
            return
        label = QLabel(self.text)
        label.setObjectName("locpopup-status-lint")
        label.setContentsMargins(8, 0, 8, 0)
        status_bar.addPermanentWidget(label)
        self._label = label

    def update_counts(self, counts: AggregateCounts) -> StatusPresentation:
        presentation = present_status(counts)
        self.errors = presentation.errors
        self.warnings = presentation.warnings
        self.text = presentation.text
        if self._label is not None:
            self._label.setText(self.text)
        return presentation
