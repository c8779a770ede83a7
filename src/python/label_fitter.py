"""Fit block labels into the pixel width available inside a block."""

from text_metrics import TextMetricsCache

ELLIPSIS = "…"


class LabelFitter:
    """Clamp label text at the end so it fits a given width.

    Exact widths come from the metrics cache; candidate prefixes are judged
    with the approximate width so trimming stays linear in the label length.
    """

    def __init__(self, metrics: TextMetricsCache, overflow_char: str = ELLIPSIS):
        self.metrics = metrics
        self.overflow_char = overflow_char
        self.overflow_width = metrics.width(overflow_char)

    def fit(self, text: str, available_width: float) -> str:
        """Return ``text``, a shortened prefix ending in the overflow marker, or ""."""
        if self.metrics.width(text) <= available_width:
            return text
        if self.overflow_width > available_width:
            return ""

        for keep in range(len(text) - 1, -1, -1):
            trimmed = text[:keep]
            trimmed_width = self.metrics.approx_width(trimmed) + self.overflow_width
            if trimmed_width < available_width:
                return trimmed + self.overflow_char
        return ""
