"""
Enumerations for the flame graph viewer using Python 3.11+ StrEnum.

This module defines string-based enumerations for the constants shared by
the engine, its controller and the Qt host.
"""

from enum import StrEnum


class DeltaMode(StrEnum):
    """Unit of a wheel delta.

    Attributes:
        PIXEL: Delta is already in pixels
        LINE: Delta counts text lines
        PAGE: Delta counts pages
    """
    PIXEL = "pixel"
    LINE = "line"
    PAGE = "page"


class DragState(StrEnum):
    """Interaction controller states.

    Attributes:
        IDLE: No pointer button held
        DRAGGING: Pointer pressed, moves pan the viewport
    """
    IDLE = "idle"
    DRAGGING = "dragging"


class NavigationKey(StrEnum):
    """Directional keyboard shortcuts.

    Attributes:
        ZOOM_IN: Narrow the window around the canvas midpoint
        ZOOM_OUT: Widen the window around the canvas midpoint
        PAN_LEFT: Move the window towards earlier times
        PAN_RIGHT: Move the window towards later times
    """
    ZOOM_IN = "w"
    ZOOM_OUT = "s"
    PAN_LEFT = "a"
    PAN_RIGHT = "d"


class GraphEvent(StrEnum):
    """Event types an EventSource delivers to the engine."""
    POINTER_DOWN = "pointer-down"
    POINTER_MOVE = "pointer-move"
    POINTER_UP = "pointer-up"
    WHEEL = "wheel"
    KEY_PRESS = "key-press"


class TextBaseline(StrEnum):
    """Vertical anchor of a text draw."""
    TOP = "top"
    MIDDLE = "middle"
