"""Ruler tick spacing for the flame graph header."""

import math
from typing import Iterator

TICKS_MULTIPLE = 5         # time units
TICKS_SPACING_MIN = 75     # CSS pixels


class TickPlanner:
    """Choose tick intervals that never crowd the header, at any zoom level."""

    def __init__(self, pixel_ratio: float = 1.0, multiple: int = TICKS_MULTIPLE,
                 spacing_min: float = TICKS_SPACING_MIN):
        self.pixel_ratio = pixel_ratio
        self.multiple = max(1, int(multiple))
        self.spacing_min = spacing_min * pixel_ratio

    def optimal_interval(self, scale: float) -> float:
        """Pixel distance between ticks for ``scale`` device pixels per time unit.

        The time step starts at ``multiple`` and doubles until the ticks are at
        least ``spacing_min`` device pixels apart.
        """
        if scale > self.spacing_min and math.isfinite(scale):
            return scale
        if not scale > 0 or not math.isfinite(scale):
            return 1

        step = self.multiple
        while step * scale < self.spacing_min:
            step <<= 1
        return step * scale

    def ticks(self, start: float, scale: float, available_width: float) -> Iterator[tuple[float, int]]:
        """Yield ``(line_left, time)`` for every tick left of ``available_width``."""
        if scale <= 0 or not math.isfinite(scale):
            return
        interval = self.optimal_interval(scale)
        scaled_offset = start * scale
        index = 0
        line_left = 0.0
        while line_left < available_width:
            yield line_left, round((scaled_offset + line_left) / scale / self.pixel_ratio)
            index += 1
            line_left = index * interval
