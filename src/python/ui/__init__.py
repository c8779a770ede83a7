"""UI components package for the flame graph viewer."""

from ui.flame_graph_widget import FlameGraphWidget
from ui.overview import OverviewHistogram
from ui.qt_surface import QtDrawingSurface, QtFrameScheduler
from ui.shortcuts import KeyboardShortcutHandler

__all__ = [
    "FlameGraphWidget",
    "OverviewHistogram",
    "QtDrawingSurface",
    "QtFrameScheduler",
    "KeyboardShortcutHandler",
]
