"""
Text width measurement cache.

Measuring text on the drawing surface is expensive and labels are re-fitted
on every zoom step, so exact widths are memoized per string. An average
character width sampled over printable ASCII gives a cheap approximation.
"""

import logging
from collections import OrderedDict
from typing import Callable

logger = logging.getLogger(__name__)

# Sampled range for the average character width: space (32) through "z" (122)
SAMPLE_FIRST_CODE_POINT = 32
SAMPLE_END_CODE_POINT = 123

DEFAULT_MAX_ENTRIES = 4096


class TextMetricsCache:
    """Bounded LRU cache of text widths for one font configuration."""

    def __init__(self, measure: Callable[[str], float], max_entries: int = DEFAULT_MAX_ENTRIES):
        """
        Args:
            measure: Returns the exact rendered width of a string
            max_entries: Least recently used widths are evicted beyond this
        """
        self._measure = measure
        self.max_entries = max(1, int(max_entries))
        self._widths: OrderedDict[str, float] = OrderedDict()
        self._average_char_width: float | None = None
        self.hits = 0
        self.misses = 0

    def width(self, text: str) -> float:
        """Exact width of ``text``, measured at most once while cached."""
        cached = self._widths.get(text)
        if cached is not None:
            self._widths.move_to_end(text)
            self.hits += 1
            return cached

        self.misses += 1
        measured = float(self._measure(text))
        if len(self._widths) >= self.max_entries:
            self._widths.popitem(last=False)
        self._widths[text] = measured
        return measured

    @property
    def average_char_width(self) -> float:
        if self._average_char_width is None:
            total = sum(
                self.width(chr(code))
                for code in range(SAMPLE_FIRST_CODE_POINT, SAMPLE_END_CODE_POINT)
            )
            self._average_char_width = total / (SAMPLE_END_CODE_POINT - SAMPLE_FIRST_CODE_POINT)
            logger.debug("Average character width: %.3f", self._average_char_width)
        return self._average_char_width

    def approx_width(self, text: str) -> float:
        """Character count times the average character width."""
        return len(text) * self.average_char_width

    def clear(self) -> None:
        """Forget every width, e.g. after a font change."""
        self._widths.clear()
        self._average_char_width = None

    def __len__(self) -> int:
        return len(self._widths)

    def __contains__(self, text: str) -> bool:
        return text in self._widths
