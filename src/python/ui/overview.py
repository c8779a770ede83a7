"""
PyQtGraph overview of a flame graph dataset.

Shows how much block time falls into each slice of the data extent and
highlights the window currently visible in the flame graph.
"""
from PyQt6.QtWidgets import QWidget, QVBoxLayout
from PyQt6.QtGui import QColor
from typing import Iterable, Optional
from config_manager import config
from flame_data import DataExtent, Layer, LayerGeometry, build_geometry
import pyqtgraph as pg
import numpy as np
import logging

logger = logging.getLogger(__name__)

HIGHLIGHT_ALPHA = 60


def coverage_histogram(geometry: Iterable[LayerGeometry], bins: int,
                       extent: DataExtent | None = None) -> tuple[np.ndarray, np.ndarray]:
    """Block duration per time bin, binned by block midpoint.

    Returns:
        (counts, edges) with len(edges) == len(counts) + 1
    """
    geometry = list(geometry)
    extent = extent or DataExtent.from_geometry(geometry)
    bins = max(1, int(bins))
    time_range = (extent.min_time, extent.max_time)
    if extent.duration <= 0:
        time_range = (extent.min_time, extent.min_time + 1)

    if geometry:
        midpoints = np.concatenate([g.x + g.width / 2 for g in geometry])
        weights = np.concatenate([g.width for g in geometry])
    else:
        midpoints = weights = np.empty(0)
    counts, edges = np.histogram(midpoints, bins=bins, range=time_range, weights=weights)
    return counts, edges


class OverviewHistogram(QWidget):
    """Compact histogram of the whole dataset with the visible window highlighted."""

    def __init__(self, parent: Optional[QWidget] = None, bins: int | None = None) -> None:
        super().__init__(parent)
        self.bins = bins or config.get_ui_setting("overview", "bins", 200)

        self.layout = QVBoxLayout(self)
        self.layout.setContentsMargins(0, 0, 0, 0)

        self.plot_widget = pg.PlotWidget()
        self.plot_widget.setBackground(QColor(config.get_color("background", "#ffffff")))
        self.plot = self.plot_widget.getPlotItem()
        self.plot.hideAxis('left')
        self.plot.setMouseEnabled(x=False, y=False)
        self.plot.setMenuEnabled(False)
        self.plot.hideButtons()
        self.plot.getViewBox().enableAutoRange(axis='x', enable=False)

        fill = QColor(config.get_color("overviewFill", "#7aa6da"))
        self.histogram = pg.PlotDataItem(
            stepMode="center", fillLevel=0, brush=pg.mkBrush(fill), pen=pg.mkPen(fill))
        self.plot.addItem(self.histogram)

        highlight = QColor(config.get_color("overviewHighlight", "#3070c0"))
        highlight.setAlpha(HIGHLIGHT_ALPHA)
        self.region = pg.LinearRegionItem(values=[0, 1], movable=False, brush=pg.mkBrush(highlight))
        self.region.setZValue(10)
        self.plot.addItem(self.region)

        self.layout.addWidget(self.plot_widget)
        self.setFixedHeight(config.get_ui_setting("overview", "height", 80))

    def set_data(self, layers: Iterable[Layer]) -> None:
        geometry = build_geometry(list(layers))
        counts, edges = coverage_histogram(geometry, self.bins)
        self.histogram.setData(edges, counts)
        self.plot.setXRange(edges[0], edges[-1], padding=0)
        logger.debug("Overview histogram: %d bins over [%s, %s]", len(counts), edges[0], edges[-1])

    def highlight_time_range(self, start: float, end: float) -> None:
        self.region.setRegion((start, end))
