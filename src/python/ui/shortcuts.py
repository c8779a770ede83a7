"""Keyboard shortcut handling for the flame graph viewer."""

from typing import Callable
from PyQt6.QtCore import QObject, Qt
from PyQt6.QtGui import QKeyEvent
from enums import NavigationKey
import logging

logger = logging.getLogger(__name__)


class KeyboardShortcutHandler(QObject):
    """Maps W/A/S/D key presses to navigation actions.

    - W / S: zoom in / out around the middle of the graph
    - A / D: pan towards earlier / later times

    Physical Qt keys are used, so the shortcuts do not depend on modifiers
    or the character a keyboard layout produces.
    """

    # Keyed by the integer key code QKeyEvent.key() returns
    NAVIGATION_KEY_MAP = {
        Qt.Key.Key_W.value: NavigationKey.ZOOM_IN,
        Qt.Key.Key_S.value: NavigationKey.ZOOM_OUT,
        Qt.Key.Key_A.value: NavigationKey.PAN_LEFT,
        Qt.Key.Key_D.value: NavigationKey.PAN_RIGHT,
    }

    def __init__(self, on_navigate: Callable[[NavigationKey], None]) -> None:
        """Initialize the keyboard shortcut handler.

        Args:
            on_navigate: Callback receiving the NavigationKey for a handled press
        """
        super().__init__()
        self.on_navigate = on_navigate

    def handle_key_press(self, event: QKeyEvent) -> bool:
        """Handle a key press; returns True if it was a navigation key."""
        nav = self.navigation_key(event.key())
        if nav is None:
            return False
        logger.debug("Navigation key: %s", nav.name)
        self.on_navigate(nav)
        return True

    @classmethod
    def navigation_key(cls, key: int | Qt.Key) -> NavigationKey | None:
        return cls.NAVIGATION_KEY_MAP.get(getattr(key, "value", key))
