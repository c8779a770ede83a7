"""
FlameGraph: the flame graph engine instance.

Owns the dataset, the ViewState, the dirty flag, the text width cache and
the interaction controller of one graph. The host supplies a layout
container, a drawing surface, a frame scheduler and (optionally) an event
source; the engine repaints on frame callbacks only when something changed.

Example usage:
    graph = FlameGraph(container, surface, scheduler, events)
    graph.ready.connect(lambda: graph.set_data(layers))
    ...
    graph.destroy()
"""

import logging
from typing import Any, Callable, Iterable

from PyQt6.QtCore import QObject, pyqtSignal

from controllers.interaction_controller import InteractionController
from custom_types import (
    DrawingSurface,
    EventSource,
    FrameScheduler,
    LayoutContainer,
    LayerDict,
    OverviewObserver,
    Unsubscribe,
)
from enums import GraphEvent
from error_handler import ErrorHandler, InvalidFlameDataError, SurfaceUnavailableError
from flame_data import DataExtent, Layer, build_geometry, parse_layers
from flame_renderer import FlameGraphRenderer, RenderStats
from graph_options import GraphOptions
from label_fitter import LabelFitter
from text_metrics import TextMetricsCache
from tick_planner import TickPlanner
from view_state import ViewState

logger = logging.getLogger(__name__)

REQUIRED_SURFACE_METHODS = (
    "resize",
    "begin_frame",
    "end_frame",
    "clear_rect",
    "fill_rect",
    "fill_rects",
    "stroke_lines",
    "fill_text",
    "measure_text",
)


class Subscriptions:
    """Event subscriptions released together."""

    def __init__(self) -> None:
        self._unsubscribers: list[Unsubscribe] = []

    def subscribe(self, source: EventSource, event_type: str, handler: Callable[..., None]) -> None:
        self._unsubscribers.append(source.subscribe(event_type, handler))

    def dispose(self) -> None:
        """Call every unsubscribe callable; the first failure is re-raised at the end."""
        failures: list[Exception] = []
        while self._unsubscribers:
            unsubscribe = self._unsubscribers.pop()
            try:
                unsubscribe()
            except Exception as e:
                ErrorHandler.log_exception(e, "Removing event listener")
                failures.append(e)
        if failures:
            raise failures[0]

    def __len__(self) -> int:
        return len(self._unsubscribers)


def check_surface(surface: Any) -> None:
    """Raise SurfaceUnavailableError unless every drawing primitive is present."""
    if surface is None:
        raise SurfaceUnavailableError("No drawing surface")
    missing = [name for name in REQUIRED_SURFACE_METHODS
               if not callable(getattr(surface, name, None))]
    if missing:
        raise SurfaceUnavailableError(
            f"Drawing surface {type(surface).__name__} lacks: {', '.join(missing)}")


class FlameGraph(QObject):
    """A flame graph engine bound to one drawing surface."""

    ready = pyqtSignal()
    graph_destroyed = pyqtSignal()
    window_changed = pyqtSignal(float, float)

    def __init__(
        self,
        container: LayoutContainer,
        surface: DrawingSurface,
        scheduler: FrameScheduler,
        events: EventSource | None = None,
        options: GraphOptions | None = None,
        overview: OverviewObserver | None = None,
        parent: QObject | None = None,
    ) -> None:
        """
        Args:
            container: Measurable layout box the surface fills
            surface: Immediate-mode drawing surface in device pixels
            scheduler: Next-frame scheduler driving repaints
            events: Pointer/wheel/key source, None for a non-interactive graph
            options: Rendering and navigation options (config defaults if None)
            overview: Companion display told about the visible window

        Raises:
            SurfaceUnavailableError: if the surface is missing or incomplete
        """
        super().__init__(parent)
        check_surface(surface)

        self.container = container
        self.surface = surface
        self.scheduler = scheduler
        self.overview = overview
        self.options = options or GraphOptions.from_config()

        self._pixel_ratio = float(self.options.sharpness or container.device_pixel_ratio() or 1.0)
        self._width = 0
        self._height = 0
        self._needs_redraw = False
        self._is_ready = False
        self._is_destroyed = False
        self._layers: list[Layer] | None = None
        self._geometry = []
        self._frame_handle: Any = None
        self._subscriptions = Subscriptions()

        block_font = self.options.block_font(self._pixel_ratio)
        self.metrics = TextMetricsCache(
            lambda text: surface.measure_text(text, block_font),
            self.options.text_width_cache_size,
        )
        self.fitter = LabelFitter(self.metrics, self.options.overflow_char)
        self.tick_planner = TickPlanner(
            self._pixel_ratio, self.options.ticks_multiple, self.options.ticks_spacing_min)
        self.renderer = FlameGraphRenderer(
            surface, self.options, self._pixel_ratio, self.fitter, self.tick_planner)

        self.view_state = ViewState(min_selection_width=self.options.min_selection_width)
        self.controller = InteractionController(self.view_state, self, self.options)
        self.controller.view_changed.connect(self.mark_dirty)

        self._update_canvas_size()

        try:
            if events is not None:
                self._subscribe(events)
            self._frame_handle = scheduler.request_frame(self._on_frame)
        except Exception:
            self._subscriptions.dispose()
            raise

        logger.debug("FlameGraph created: %dx%d device px, pixel ratio %s",
                     self._width, self._height, self._pixel_ratio)

    # ------------------------------------------------------------------
    # Read-only geometry
    # ------------------------------------------------------------------

    @property
    def width(self) -> int:
        """Surface width in device pixels."""
        return self._width

    @property
    def height(self) -> int:
        """Surface height in device pixels."""
        return self._height

    @property
    def pixel_ratio(self) -> float:
        return self._pixel_ratio

    @property
    def is_ready(self) -> bool:
        return self._is_ready

    @property
    def is_destroyed(self) -> bool:
        return self._is_destroyed

    @property
    def needs_redraw(self) -> bool:
        return self._needs_redraw

    @property
    def layers(self) -> list[Layer] | None:
        return self._layers

    @property
    def data_extent(self) -> DataExtent:
        return self.view_state.extent

    # ------------------------------------------------------------------
    # Data and window
    # ------------------------------------------------------------------

    def set_data(self, layers: Iterable[Layer | LayerDict]) -> None:
        """Replace the dataset and show all of it.

        Raises:
            InvalidFlameDataError: if a layer or block does not validate; the
                previous dataset is kept
        """
        try:
            parsed = parse_layers(layers)
        except InvalidFlameDataError as e:
            ErrorHandler.log_exception(e, "Rejected flame graph data")
            raise

        geometry = build_geometry(parsed)
        extent = DataExtent.from_geometry(geometry)

        self.controller.cancel_drag()
        self._layers = parsed
        self._geometry = geometry
        self.view_state.reset(extent)
        self.mark_dirty()

        logger.info("Flame graph data set: %d layers, %d blocks, extent %s",
                    len(parsed), sum(len(g) for g in geometry), extent)

    def get_data_window_start(self) -> float:
        return self.view_state.start

    def get_data_window_end(self) -> float:
        return self.view_state.end

    def mark_dirty(self) -> None:
        """Request a repaint on the next frame."""
        self._needs_redraw = True

    # ------------------------------------------------------------------
    # Frames
    # ------------------------------------------------------------------

    def _on_frame(self) -> None:
        self._frame_handle = self.scheduler.request_frame(self._on_frame)
        self.draw_widget()

    def _update_canvas_size(self) -> bool:
        """Resize the surface to the container; return whether the size changed."""
        width, height = self.container.layout_size()
        width = self.options.fixed_width or width
        height = self.options.fixed_height or height
        width_px = max(0, int(width * self._pixel_ratio))
        height_px = max(0, int(height * self._pixel_ratio))
        if (width_px, height_px) == (self._width, self._height):
            return False
        self._width = width_px
        self._height = height_px
        self.surface.resize(width_px, height_px)
        return True

    def draw_widget(self) -> RenderStats | None:
        """Repaint if dirty or resized. Returns render statistics when painted."""
        self.view_state.normalize()

        if self._update_canvas_size():
            self._needs_redraw = True

        if not self._is_ready and self._width > 0 and self._height > 0:
            self._is_ready = True
            self.ready.emit()

        if not self._needs_redraw or self._layers is None:
            return None

        start, end = self.view_state.window
        self.window_changed.emit(start, end)
        if self.overview is not None:
            self.overview.highlight_time_range(start, end)

        stats = self.renderer.render(self._geometry, self.view_state, self._width, self._height)
        self._needs_redraw = False
        return stats

    # ------------------------------------------------------------------
    # Events and teardown
    # ------------------------------------------------------------------

    def _subscribe(self, events: EventSource) -> None:
        c = self.controller
        self._subscriptions.subscribe(events, GraphEvent.POINTER_DOWN, c.on_pointer_down)
        self._subscriptions.subscribe(events, GraphEvent.POINTER_MOVE, c.on_pointer_move)
        self._subscriptions.subscribe(events, GraphEvent.POINTER_UP, c.on_pointer_up)
        self._subscriptions.subscribe(events, GraphEvent.WHEEL, c.on_wheel)
        self._subscriptions.subscribe(events, GraphEvent.KEY_PRESS, c.on_key)

    def destroy(self) -> None:
        """Cancel the frame callback, drop listeners and data, emit graph_destroyed."""
        if self._is_destroyed:
            return
        self._is_destroyed = True

        if self._frame_handle is not None:
            self.scheduler.cancel_frame(self._frame_handle)
            self._frame_handle = None
        try:
            self._subscriptions.dispose()
        finally:
            self.controller.cancel_drag()
            self._layers = None
            self._geometry = []
            logger.debug("FlameGraph destroyed (text widths: %d cached, %d hits, %d misses)",
                         len(self.metrics), self.metrics.hits, self.metrics.misses)
            self.metrics.clear()
            self.graph_destroyed.emit()
