"""
Qt host widget for the flame graph engine.

FlameGraphWidget is the layout container and event source of a FlameGraph:
it reports its size and device pixel ratio, turns Qt mouse/wheel/key events
into engine events, and blits the engine's QImage surface when repainted.
"""

from typing import Any, Callable, Optional
from PyQt6.QtCore import QRectF, Qt, pyqtSignal
from PyQt6.QtGui import QColor, QKeyEvent, QMouseEvent, QPainter, QPaintEvent, QWheelEvent
from PyQt6.QtWidgets import QWidget
import logging

from config_manager import config
from custom_types import OverviewObserver, Unsubscribe
from enums import DeltaMode, DragState, GraphEvent, NavigationKey
from flame_graph import FlameGraph
from graph_options import GraphOptions
from ui.qt_surface import QtDrawingSurface, QtFrameScheduler
from ui.shortcuts import KeyboardShortcutHandler

logger = logging.getLogger(__name__)

# One notch of a classic mouse wheel is 120 eighths of a degree and scrolls 3 lines
ANGLE_UNITS_PER_LINE = 120 / 3


def normalize_wheel_delta(pixel_dx: float, pixel_dy: float,
                          angle_dx: float, angle_dy: float) -> tuple[float, float, DeltaMode]:
    """Convert Qt wheel deltas to (delta_x, delta_y, mode).

    Positive deltas scroll towards later times (x) and zoom out (y), the
    opposite sign of Qt's angleDelta.
    """
    if pixel_dx or pixel_dy:
        return -pixel_dx, -pixel_dy, DeltaMode.PIXEL
    return -angle_dx / ANGLE_UNITS_PER_LINE, -angle_dy / ANGLE_UNITS_PER_LINE, DeltaMode.LINE


class FlameGraphWidget(QWidget):
    """Widget that hosts one FlameGraph."""

    pointer_pressed = pyqtSignal(float, float)
    pointer_moved = pyqtSignal(float, float)
    pointer_released = pyqtSignal(float, float)
    wheel_scrolled = pyqtSignal(float, float, float, str)
    key_pressed = pyqtSignal(str)

    def __init__(
        self,
        parent: Optional[QWidget] = None,
        options: GraphOptions | None = None,
        overview: OverviewObserver | None = None,
    ) -> None:
        super().__init__(parent)
        self.setFocusPolicy(Qt.FocusPolicy.StrongFocus)
        self.setMinimumSize(200, 100)
        self.background = QColor(config.get_color("background", "#ffffff"))

        self._event_signals = {
            GraphEvent.POINTER_DOWN: self.pointer_pressed,
            GraphEvent.POINTER_MOVE: self.pointer_moved,
            GraphEvent.POINTER_UP: self.pointer_released,
            GraphEvent.WHEEL: self.wheel_scrolled,
            GraphEvent.KEY_PRESS: self.key_pressed,
        }

        self.surface = QtDrawingSurface(on_flush=self.update)
        self.scheduler = QtFrameScheduler(config.get_frame_interval_ms(), parent=self)
        self.shortcut_handler = KeyboardShortcutHandler(on_navigate=self._on_navigate)

        self.graph = FlameGraph(
            self, self.surface, self.scheduler, events=self,
            options=options, overview=overview, parent=self,
        )
        self.graph.controller.drag_state_changed.connect(self._on_drag_state_changed)

    # ------------------------------------------------------------------
    # LayoutContainer / EventSource
    # ------------------------------------------------------------------

    def layout_size(self) -> tuple[float, float]:
        return float(self.width()), float(self.height())

    def device_pixel_ratio(self) -> float:
        return self.devicePixelRatioF()

    def subscribe(self, event_type: str, handler: Callable[..., Any]) -> Unsubscribe:
        signal = self._event_signals[GraphEvent(event_type)]
        signal.connect(handler)

        def unsubscribe() -> None:
            signal.disconnect(handler)

        return unsubscribe

    # ------------------------------------------------------------------
    # Qt events
    # ------------------------------------------------------------------

    def paintEvent(self, event: QPaintEvent) -> None:
        painter = QPainter(self)
        painter.fillRect(self.rect(), self.background)
        painter.drawImage(QRectF(self.rect()), self.surface.image)
        painter.end()

    def mousePressEvent(self, event: QMouseEvent) -> None:
        if event.button() != Qt.MouseButton.LeftButton:
            super().mousePressEvent(event)
            return
        pos = event.position()
        self.setFocus()
        self.pointer_pressed.emit(pos.x(), pos.y())
        event.accept()

    def mouseMoveEvent(self, event: QMouseEvent) -> None:
        pos = event.position()
        self.pointer_moved.emit(pos.x(), pos.y())
        event.accept()

    def mouseReleaseEvent(self, event: QMouseEvent) -> None:
        if event.button() != Qt.MouseButton.LeftButton:
            super().mouseReleaseEvent(event)
            return
        pos = event.position()
        self.pointer_released.emit(pos.x(), pos.y())
        event.accept()

    def wheelEvent(self, event: QWheelEvent) -> None:
        pixel = event.pixelDelta()
        angle = event.angleDelta()
        delta_x, delta_y, mode = normalize_wheel_delta(pixel.x(), pixel.y(), angle.x(), angle.y())
        self.wheel_scrolled.emit(event.position().x(), delta_x, delta_y, mode.value)
        event.accept()

    def keyPressEvent(self, event: QKeyEvent) -> None:
        if self.shortcut_handler.handle_key_press(event):
            event.accept()
            return
        super().keyPressEvent(event)

    def closeEvent(self, event: Any) -> None:
        self.teardown()
        super().closeEvent(event)

    # ------------------------------------------------------------------

    def _on_navigate(self, key: NavigationKey) -> None:
        self.key_pressed.emit(key.value)

    def _on_drag_state_changed(self, state: str) -> None:
        if state == DragState.DRAGGING:
            self.setCursor(Qt.CursorShape.ClosedHandCursor)
        else:
            self.unsetCursor()

    def teardown(self) -> None:
        """Destroy the hosted graph; safe to call more than once."""
        if not self.graph.is_destroyed:
            logger.debug("Tearing down flame graph widget")
        self.graph.destroy()
