"""
ViewState: the visible time window and vertical scroll offset of a flame graph.
"""

from custom_types import TimeWindow
from flame_data import DataExtent

# Narrowest window (in time units) a zoom step may produce
MIN_SELECTION_WIDTH = 10.0
# Floor for a configured minimum so zoom never collapses the window to zero width
MIN_SELECTION_WIDTH_FLOOR = 1e-6


class ViewState:
    """Manage the selection window [start, end] and vertical offset within a data extent.

    Every public mutation leaves ``extent.min_time <= start``,
    ``end <= extent.max_time`` and ``0 <= vertical_offset <= extent.max_depth``.
    Out-of-range requests are clamped, never rejected.
    """
    def __init__(self, extent: DataExtent | None = None,
                 min_selection_width: float = MIN_SELECTION_WIDTH):
        self.min_selection_width = max(float(min_selection_width), MIN_SELECTION_WIDTH_FLOOR)
        self.reset(extent or DataExtent())

    def reset(self, extent: DataExtent | None = None) -> None:
        """Show the whole extent, scrolled to the top."""
        if extent is not None:
            self.extent = extent
        self.start = float(self.extent.min_time)
        self.end = float(self.extent.max_time)
        self.vertical_offset = 0.0

    @property
    def width(self) -> float:
        """Length of the visible window in time units."""
        return self.end - self.start

    @property
    def max_depth(self) -> float:
        return self.extent.max_depth

    @property
    def window(self) -> TimeWindow:
        return self.start, self.end

    def scale(self, canvas_width: float) -> float:
        """Device pixels per time unit for a canvas of the given width."""
        width = self.width
        if width <= 0:
            return 0.0
        return canvas_width / width

    def normalize(self) -> None:
        """Clamp the window into the extent and the offset into [0, max_depth].

        The minimum selection width is not enforced here, only by zoom().
        """
        if self.start < self.extent.min_time:
            self.start = float(self.extent.min_time)
        if self.end > self.extent.max_time:
            self.end = float(self.extent.max_time)
        self.vertical_offset = self._clamp_offset(self.vertical_offset)

    def _clamp_offset(self, offset: float) -> float:
        return min(max(float(offset), 0.0), float(self.extent.max_depth))

    def _clamp_time_delta(self, start: float, end: float, delta: float) -> float:
        # Shrink delta so the nearer edge stops on the extent boundary
        if start + delta <= self.extent.min_time:
            delta = self.extent.min_time - start
        if end + delta >= self.extent.max_time:
            delta = self.extent.max_time - end
        return delta

    def pan(self, delta_time: float, delta_vertical: float = 0.0) -> None:
        """Shift the window by ``delta_time`` keeping its width, and scroll vertically."""
        delta = self._clamp_time_delta(self.start, self.end, float(delta_time))
        self.start += delta
        self.end += delta
        self.vertical_offset = self._clamp_offset(self.vertical_offset + delta_vertical)
        self.normalize()

    def zoom(self, anchor_frac: float, width_delta: float) -> None:
        """Grow (positive) or shrink (negative) the window by ``width_delta`` time units.

        The change is split around ``anchor_frac`` (0.0 = left edge, 1.0 = right
        edge) so that the time at the anchor stays in place. Zooming in never
        narrows the window below ``min_selection_width``.
        """
        anchor_frac = min(max(float(anchor_frac), 0.0), 1.0)
        width_delta = float(width_delta)
        if width_delta < 0 and self.width + width_delta < self.min_selection_width:
            width_delta = min(0.0, self.min_selection_width - self.width)
        self.start -= anchor_frac * width_delta
        self.end += (1.0 - anchor_frac) * width_delta
        self.normalize()

    def drag_to(self, anchor_start: float, anchor_end: float,
                delta_time: float, vertical_offset: float) -> None:
        """Place the window at an anchored window shifted by ``delta_time``."""
        delta = self._clamp_time_delta(anchor_start, anchor_end, float(delta_time))
        self.start = anchor_start + delta
        self.end = anchor_end + delta
        self.vertical_offset = self._clamp_offset(vertical_offset)
        self.normalize()

    def __repr__(self) -> str:
        return (f"ViewState(start={self.start!r}, end={self.end!r}, "
                f"vertical_offset={self.vertical_offset!r})")
