"""Popup state and the change detection that guards redraws."""

from __future__ import annotations

import logging
from dataclasses import dataclass, replace

LOGGER = logging.getLogger(__name__)

__all__ = ["PopupState", "PopupStateStore"]


@dataclass(slots=True, frozen=True)
class PopupState:
    """What the popup currently displays.

    ``category`` and ``text`` only mean something while ``visible`` is true;
    hiding keeps the previous strings around.
    """

    visible: bool = False
    category: str = ""
    text: str = ""


class PopupStateStore:
    """Holds the last displayed :class:`PopupState`.

    The store does no locking of its own. The controller is its only
    writer and holds its pass lock around every call; readers get the
    current frozen instance, which is replaced wholesale on change.
    """

    def __init__(self, initial: PopupState | None = None) -> None:
        self._state = initial or PopupState()

    @property
    def state(self) -> PopupState:
        return self._state

    def show(self, category: str, text: str) -> bool:
        """Store a visible candidate; return ``True`` when anything changed."""

        candidate = PopupState(visible=True, category=category, text=text)
        if candidate == self._state:
            return False
        LOGGER.debug("Popup state %s -> %s", self._state, candidate)
        self._state = candidate
        return True

    def hide(self) -> bool:
        """Mark the popup hidden; return ``True`` if it was visible."""

        if not self._state.visible:
            return False
        LOGGER.debug("Popup hidden (was %r)", self._state.category)
        self._state = replace(self._state, visible=False)
        return True
