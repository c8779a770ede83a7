"""
Qt implementations of the drawing surface and frame scheduler.

QtDrawingSurface paints into a device-pixel QImage that the hosting widget
blits in its paintEvent; QtFrameScheduler drives frame callbacks from a
single-shot QTimer.
"""

from typing import Any, Callable
from PyQt6.QtCore import QObject, QPointF, QRectF, QTimer, Qt
from PyQt6.QtGui import QBrush, QColor, QFont, QFontMetricsF, QImage, QPainter, QPainterPath, QPen
import logging

from custom_types import ColorHex, FontSpec, FrameCallback, LineSegment, RectArray
from enums import TextBaseline

logger = logging.getLogger(__name__)

GENERIC_FAMILIES = {
    "sans-serif": QFont.StyleHint.SansSerif,
    "serif": QFont.StyleHint.Serif,
    "monospace": QFont.StyleHint.Monospace,
}


class QtDrawingSurface:
    """DrawingSurface backed by a QImage in device pixels."""

    IMAGE_FORMAT = QImage.Format.Format_ARGB32_Premultiplied

    def __init__(self, on_flush: Callable[[], None] | None = None) -> None:
        """
        Args:
            on_flush: Called after every finished frame (e.g. QWidget.update)
        """
        self.on_flush = on_flush
        self.image = self._new_image(1, 1)
        self._painter: QPainter | None = None
        self._fonts: dict[FontSpec, QFont] = {}

    def _new_image(self, width: int, height: int) -> QImage:
        image = QImage(max(1, width), max(1, height), self.IMAGE_FORMAT)
        image.fill(Qt.GlobalColor.transparent)
        return image

    def qfont(self, spec: FontSpec) -> QFont:
        font = self._fonts.get(spec)
        if font is None:
            font = QFont()
            hint = GENERIC_FAMILIES.get(spec.family)
            if hint is not None:
                font.setStyleHint(hint)
                font.setFamily(font.defaultFamily())
            else:
                font.setFamily(spec.family)
            font.setPixelSize(max(1, round(spec.size)))
            self._fonts[spec] = font
        return font

    @property
    def painter(self) -> QPainter:
        if self._painter is None:
            raise RuntimeError("Drawing outside begin_frame()/end_frame()")
        return self._painter

    def resize(self, width: int, height: int) -> None:
        if self._painter is not None:
            self.end_frame()
        self.image = self._new_image(width, height)
        logger.debug("Surface resized to %dx%d", width, height)

    def begin_frame(self) -> None:
        self._painter = QPainter(self.image)
        self._painter.setRenderHint(QPainter.RenderHint.TextAntialiasing)

    def end_frame(self) -> None:
        painter, self._painter = self._painter, None
        if painter is not None:
            painter.end()
        if self.on_flush is not None:
            self.on_flush()

    def clear_rect(self, x: float, y: float, width: float, height: float) -> None:
        p = self.painter
        p.setCompositionMode(QPainter.CompositionMode.CompositionMode_Source)
        p.fillRect(QRectF(x, y, width, height), Qt.GlobalColor.transparent)
        p.setCompositionMode(QPainter.CompositionMode.CompositionMode_SourceOver)

    def fill_rect(self, x: float, y: float, width: float, height: float, color: ColorHex) -> None:
        self.painter.fillRect(QRectF(x, y, width, height), QColor(color))

    def fill_rects(self, rects: RectArray, color: ColorHex) -> None:
        path = QPainterPath()
        path.setFillRule(Qt.FillRule.WindingFill)
        for left, top, width, height in rects.tolist():
            path.addRect(left, top, width, height)
        self.painter.fillPath(path, QBrush(QColor(color)))

    def stroke_lines(self, lines: list[LineSegment], color: ColorHex) -> None:
        path = QPainterPath()
        for x0, y0, x1, y1 in lines:
            path.moveTo(x0, y0)
            path.lineTo(x1, y1)
        self.painter.strokePath(path, QPen(QColor(color), 1))

    def fill_text(self, text: str, x: float, y: float, color: ColorHex,
                  font: FontSpec, baseline: str) -> None:
        qfont = self.qfont(font)
        metrics = QFontMetricsF(qfont)
        if baseline == TextBaseline.MIDDLE:
            y += (metrics.ascent() - metrics.descent()) / 2
        else:
            y += metrics.ascent()
        p = self.painter
        p.setFont(qfont)
        p.setPen(QColor(color))
        p.drawText(QPointF(x, y), text)

    def measure_text(self, text: str, font: FontSpec) -> float:
        return QFontMetricsF(self.qfont(font)).horizontalAdvance(text)


class QtFrameScheduler:
    """FrameScheduler with one outstanding frame at a time."""

    def __init__(self, interval_ms: int = 16, parent: QObject | None = None) -> None:
        self._timer = QTimer(parent)
        self._timer.setSingleShot(True)
        self._timer.setInterval(int(interval_ms))
        self._timer.timeout.connect(self._fire)
        self._callback: FrameCallback | None = None
        self._handle = 0

    @property
    def pending(self) -> bool:
        return self._callback is not None

    def request_frame(self, callback: FrameCallback) -> int:
        self._handle += 1
        self._callback = callback
        self._timer.start()
        return self._handle

    def cancel_frame(self, handle: Any) -> None:
        if handle != self._handle:
            return
        self._timer.stop()
        self._callback = None

    def _fire(self) -> None:
        callback, self._callback = self._callback, None
        if callback is not None:
            callback()
