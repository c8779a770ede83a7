"""
Flame graph renderer.

Projects the dataset into device pixels for the current view, culls blocks
that are off screen or too thin to see, fills each layer with a single
batched path, then draws the labels and finally the header ruler on top.
"""

import logging
from typing import NamedTuple, Sequence

import numpy as np

from custom_types import DrawingSurface, LineSegment
from enums import TextBaseline
from flame_data import LayerGeometry
from graph_options import GraphOptions
from label_fitter import LabelFitter
from tick_planner import TickPlanner
from view_state import ViewState

logger = logging.getLogger(__name__)


class RenderStats(NamedTuple):
    blocks_drawn: int
    labels_drawn: int
    ticks_drawn: int


class FlameGraphRenderer:
    """Draws one frame of a flame graph onto a DrawingSurface."""

    def __init__(
        self,
        surface: DrawingSurface,
        options: GraphOptions,
        pixel_ratio: float,
        fitter: LabelFitter,
        tick_planner: TickPlanner,
    ) -> None:
        self.surface = surface
        self.options = options
        self.pixel_ratio = pixel_ratio
        self.fitter = fitter
        self.tick_planner = tick_planner
        self.block_font = options.block_font(pixel_ratio)
        self.header_font = options.header_font(pixel_ratio)

    def render(
        self,
        geometry: Sequence[LayerGeometry],
        view_state: ViewState,
        canvas_width: float,
        canvas_height: float,
    ) -> RenderStats:
        """Repaint the whole surface for the given view."""
        scale = view_state.scale(canvas_width)

        self.surface.begin_frame()
        try:
            self.surface.clear_rect(0, 0, canvas_width, canvas_height)
            blocks_drawn = labels_drawn = 0
            if scale > 0:
                blocks_drawn, labels_drawn = self._draw_pyramid(
                    geometry, view_state, scale, canvas_width, canvas_height)
            ticks_drawn = self._draw_ticks(view_state.start, scale, canvas_width, canvas_height)
        finally:
            self.surface.end_frame()

        stats = RenderStats(blocks_drawn, labels_drawn, ticks_drawn)
        logger.debug("Rendered window [%.3f, %.3f] offset %.1f: %s",
                     view_state.start, view_state.end, view_state.vertical_offset, stats)
        return stats

    def project(self, x, y, width, height, start: float, scale: float, offset: float):
        """Map block coordinates (scalars or arrays) to device pixel rectangles."""
        pr = self.pixel_ratio
        rect_left = x * pr * scale - start * scale
        rect_top = (y + self.options.header_height - offset) * pr
        return rect_left, rect_top, width * pr * scale, height * pr

    def _draw_pyramid(self, geometry, view_state, scale, canvas_width, canvas_height):
        labelled: list[tuple[LayerGeometry, int]] = []
        blocks_drawn = 0
        for layer in geometry:
            drawn, label_indices = self._draw_blocks_fill(
                layer, view_state, scale, canvas_width, canvas_height)
            blocks_drawn += drawn
            labelled.extend((layer, int(i)) for i in label_indices)

        labels_drawn = 0
        for layer, index in labelled:
            if self._draw_block_text(layer.blocks[index], view_state, scale):
                labels_drawn += 1
        return blocks_drawn, labels_drawn

    def _draw_blocks_fill(self, layer, view_state, scale, canvas_width, canvas_height):
        """Fill all visible blocks of one layer; return the count and label candidates."""
        if not len(layer):
            return 0, ()
        border = self.options.block_border
        left, top, width, height = self.project(
            layer.x, layer.y, layer.width, layer.height,
            view_state.start, scale, view_state.vertical_offset)

        # Too far right, too far left, or below the bottom edge
        on_screen = (left <= canvas_width) & (left >= -width) & (top <= canvas_height)

        # Clamp partially hidden blocks to start at 0 so labels stay inside
        clipped = on_screen & (left < 0)
        width = np.where(clipped, width + left, width)
        left = np.where(clipped, 0.0, left)

        visible = on_screen & (width > border) & (height > border)
        count = int(np.count_nonzero(visible))
        if count:
            rects = np.column_stack((
                left[visible],
                top[visible],
                width[visible] - border,
                height[visible] - border,
            ))
            self.surface.fill_rects(rects, layer.color)

        label_indices = np.flatnonzero(visible & (width > self.fitter.overflow_width))
        return count, label_indices

    def _draw_block_text(self, block, view_state, scale) -> bool:
        pr = self.pixel_ratio
        opts = self.options
        rect_left, _, rect_width, _ = self.project(
            block.x, block.y, block.width, block.height,
            view_state.start, scale, view_state.vertical_offset)
        if rect_left < 0:
            rect_width += rect_left
            rect_left = 0.0

        text_left = rect_left + opts.block_padding_left * pr
        text_top = ((block.y + block.height / 2 + opts.header_height - view_state.vertical_offset) * pr
                    + opts.block_padding_top * pr)
        available = rect_width - (opts.block_padding_left + opts.block_padding_right) * pr

        fitted = self.fitter.fit(block.text, available)
        if not fitted:
            return False
        self.surface.fill_text(fitted, text_left, text_top, opts.block_text_color,
                               self.block_font, TextBaseline.MIDDLE)
        return True

    def _draw_ticks(self, start: float, scale: float, canvas_width: float, canvas_height: float) -> int:
        """Draw the header band, its time labels and the gridlines."""
        pr = self.pixel_ratio
        opts = self.options
        self.surface.fill_rect(0, 0, canvas_width, opts.header_height * pr, opts.header_background)

        available = canvas_width - opts.header_safe_bounds * pr
        text_left_padding = opts.header_padding_left * pr
        text_top = opts.header_padding_top * pr

        lines: list[LineSegment] = []
        for line_left, time in self.tick_planner.ticks(start, scale, available):
            label = f"{time} {opts.timeline_tick_units}".rstrip()
            self.surface.fill_text(label, line_left + text_left_padding, text_top,
                                   opts.header_text_color, self.header_font, TextBaseline.TOP)
            lines.append((line_left, 0.0, line_left, canvas_height))

        if lines:
            self.surface.stroke_lines(lines, opts.timeline_strokes)
        return len(lines)
