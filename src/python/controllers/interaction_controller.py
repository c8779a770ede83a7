"""Interaction controller: pointer, wheel and keyboard navigation of a flame graph."""

from dataclasses import dataclass
from typing import Protocol
from PyQt6.QtCore import QObject, pyqtSignal
from enums import DeltaMode, DragState, NavigationKey
from graph_options import GraphOptions
from view_state import ViewState
import logging

logger = logging.getLogger(__name__)


class CanvasGeometry(Protocol):
    """Device-pixel geometry of the surface the controller navigates."""

    @property
    def width(self) -> float:
        ...

    @property
    def pixel_ratio(self) -> float:
        ...


@dataclass(frozen=True)
class DragAnchor:
    """Pointer and viewport captured at pointer-down, in device pixels."""
    pointer_origin_x: float
    pointer_origin_y: float
    origin_vertical_offset: float
    anchor_start: float
    anchor_end: float


class InteractionController(QObject):
    """Translates input events into ViewState mutations.

    Two states: IDLE and DRAGGING. Pointer-down captures a DragAnchor,
    pointer-move drags the window relative to it, pointer-up drops it.
    Wheel and keyboard input work in either state and share apply_zoom /
    apply_pan. Every mutation emits view_changed.
    """

    view_changed = pyqtSignal()
    drag_state_changed = pyqtSignal(str)

    def __init__(self, view_state: ViewState, canvas: CanvasGeometry,
                 options: GraphOptions | None = None) -> None:
        """Initialize InteractionController.

        Args:
            view_state: The viewport model this controller mutates
            canvas: Provides the canvas width and pixel ratio
            options: Sensitivities and wheel unit sizes
        """
        super().__init__()
        self.view_state = view_state
        self.canvas = canvas
        self.options = options or GraphOptions()
        self.drag_anchor: DragAnchor | None = None

    @property
    def state(self) -> DragState:
        return DragState.IDLE if self.drag_anchor is None else DragState.DRAGGING

    def _scale(self) -> float:
        return self.view_state.scale(self.canvas.width)

    def _to_device(self, value: float) -> float:
        return value * self.canvas.pixel_ratio

    # ------------------------------------------------------------------
    # Pointer
    # ------------------------------------------------------------------

    def on_pointer_down(self, x: float, y: float) -> None:
        """Start dragging; ``x``/``y`` are container coordinates in CSS pixels."""
        vs = self.view_state
        self.drag_anchor = DragAnchor(
            pointer_origin_x=self._to_device(x),
            pointer_origin_y=self._to_device(y),
            origin_vertical_offset=vs.vertical_offset,
            anchor_start=vs.start,
            anchor_end=vs.end,
        )
        logger.debug("Drag started at (%.1f, %.1f) on %r", x, y, vs)
        self.drag_state_changed.emit(DragState.DRAGGING.value)

    def on_pointer_move(self, x: float, y: float) -> None:
        anchor = self.drag_anchor
        if anchor is None:
            return
        scale = self._scale()
        if scale == 0:
            return

        move_delta_x = (anchor.pointer_origin_x - self._to_device(x)) / scale
        move_delta_y = anchor.pointer_origin_y - self._to_device(y)
        self.view_state.drag_to(
            anchor.anchor_start,
            anchor.anchor_end,
            move_delta_x,
            anchor.origin_vertical_offset + move_delta_y,
        )
        self.view_changed.emit()

    def on_pointer_up(self, x: float | None = None, y: float | None = None) -> None:
        if self.drag_anchor is None:
            return
        self.drag_anchor = None
        logger.debug("Drag finished at %r", self.view_state)
        self.drag_state_changed.emit(DragState.IDLE.value)

    def cancel_drag(self) -> None:
        """Discard any drag in progress without touching the view."""
        self.drag_anchor = None

    # ------------------------------------------------------------------
    # Wheel and keyboard
    # ------------------------------------------------------------------

    def units_per_wheel_delta(self, mode: DeltaMode | str) -> float:
        """Pixel-equivalent size of one wheel delta unit."""
        try:
            mode = DeltaMode(mode)
        except ValueError:
            return 0.0
        if mode is DeltaMode.LINE:
            return self.options.wheel_line_height
        if mode is DeltaMode.PAGE:
            return self.options.wheel_page_height
        return 1.0

    def on_wheel(self, x: float, delta_x: float, delta_y: float,
                 delta_mode: DeltaMode | str = DeltaMode.PIXEL) -> None:
        """Zoom with the vertical delta and pan with the horizontal delta.

        ``x`` is the pointer position in CSS pixels from the container's left edge.
        """
        units = self.units_per_wheel_delta(delta_mode)
        if delta_y:
            self.apply_zoom(self._to_device(x), delta_y * units)
        if delta_x:
            self.apply_pan(delta_x * units)

    def on_key(self, key: str) -> bool:
        """Handle a W/A/S/D shortcut; returns whether the key was used."""
        try:
            nav = NavigationKey(key.lower())
        except ValueError:
            return False

        step = self.options.keyboard_step
        center = self.canvas.width / 2
        if nav is NavigationKey.ZOOM_IN:
            self.apply_zoom(center, -step)
        elif nav is NavigationKey.ZOOM_OUT:
            self.apply_zoom(center, step)
        elif nav is NavigationKey.PAN_LEFT:
            self.apply_pan(-step)
        else:
            self.apply_pan(step)
        return True

    def apply_zoom(self, pointer_x: float, delta_px: float) -> None:
        """Zoom around device pixel column ``pointer_x``; negative deltas zoom in."""
        scale = self._scale()
        canvas_width = self.canvas.width
        if scale == 0 or canvas_width <= 0:
            return
        vector = delta_px * self.options.wheel_zoom_sensitivity / scale
        # start moves by pointer_x * vector, end by (canvas_width - pointer_x) * vector
        self.view_state.zoom(pointer_x / canvas_width, vector * canvas_width)
        self.view_changed.emit()

    def apply_pan(self, delta_px: float) -> None:
        """Shift the window horizontally; positive deltas move towards later times."""
        scale = self._scale()
        if scale == 0:
            return
        vector = delta_px * self.options.wheel_scroll_sensitivity / scale
        self.view_state.pan(vector)
        self.view_changed.emit()
