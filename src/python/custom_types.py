"""
Type definitions for the flame graph viewer.

This module defines common types, aliases, TypedDict structures and the
Protocols describing the collaborators the engine consumes from its host.
"""

from dataclasses import dataclass
from typing import Any, Callable, Protocol, TypedDict

import numpy as np
import numpy.typing as npt

# NumPy array type aliases
CoordArray = npt.NDArray[np.float64]  # Per-block coordinates of one layer
RectArray = npt.NDArray[np.float64]   # (N, 4) rows of left, top, width, height


class GraphSettings(TypedDict, total=False):
    """The 'graph' section of config.json."""
    headerHeight: float
    headerSafeBounds: float
    headerFontSize: float
    headerPaddingLeft: float
    headerPaddingTop: float
    blockBorder: float
    blockFontSize: float
    blockPaddingTop: float
    blockPaddingLeft: float
    blockPaddingRight: float
    ticksMultiple: int
    ticksSpacingMin: float
    wheelZoomSensitivity: float
    wheelScrollSensitivity: float
    minSelectionWidth: float
    wheelLineHeight: float
    wheelPageHeight: float
    keyboardStep: float
    textWidthCacheSize: int


class LayerDict(TypedDict):
    """A layer in the raw data-source format accepted by set_data."""
    color: str
    blocks: list[dict[str, Any]]


@dataclass(frozen=True)
class FontSpec:
    """Font family and pixel size used for a text draw or measurement."""
    family: str
    size: float


# Type aliases for common values
ColorHex = str                         # Any color string the surface understands
TimeWindow = tuple[float, float]       # (start, end)
LineSegment = tuple[float, float, float, float]  # (x0, y0, x1, y1)
Unsubscribe = Callable[[], None]
FrameCallback = Callable[[], None]


# Protocol definitions
class LayoutContainer(Protocol):
    """The element hosting the drawing surface."""

    def layout_size(self) -> tuple[float, float]:
        """Width and height of the layout box in CSS pixels."""
        ...

    def device_pixel_ratio(self) -> float:
        """Device pixels per CSS pixel."""
        ...


class DrawingSurface(Protocol):
    """Immediate-mode 2D surface addressed in device pixels."""

    def resize(self, width: int, height: int) -> None:
        ...

    def begin_frame(self) -> None:
        ...

    def end_frame(self) -> None:
        ...

    def clear_rect(self, x: float, y: float, width: float, height: float) -> None:
        ...

    def fill_rect(self, x: float, y: float, width: float, height: float, color: ColorHex) -> None:
        ...

    def fill_rects(self, rects: RectArray, color: ColorHex) -> None:
        """Fill all rectangles as one path."""
        ...

    def stroke_lines(self, lines: list[LineSegment], color: ColorHex) -> None:
        """Stroke all segments as one path."""
        ...

    def fill_text(self, text: str, x: float, y: float, color: ColorHex,
                  font: FontSpec, baseline: str) -> None:
        ...

    def measure_text(self, text: str, font: FontSpec) -> float:
        ...


class FrameScheduler(Protocol):
    """Next-frame scheduling primitive."""

    def request_frame(self, callback: FrameCallback) -> Any:
        ...

    def cancel_frame(self, handle: Any) -> None:
        ...


class EventSource(Protocol):
    """Source of pointer, wheel and key events."""

    def subscribe(self, event_type: str, handler: Callable[..., None]) -> Unsubscribe:
        ...


class OverviewObserver(Protocol):
    """Companion display told about the visible time window."""

    def highlight_time_range(self, start: float, end: float) -> None:
        ...
