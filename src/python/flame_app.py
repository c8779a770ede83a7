"""
Flame graph viewer application.

Opens a window with a dataset overview on top and the interactive flame
graph below. Without a dataset argument a synthetic call tree is shown.
"""

from PyQt6.QtWidgets import QApplication, QMainWindow, QWidget, QVBoxLayout
import argparse
import logging
import sys
from typing import Sequence

from config_manager import config
from error_handler import ErrorHandler, FlameGraphError
from flame_data import Layer, generate_sample_layers, load_layers
from graph_options import GraphOptions
from logging_config import setup_logging
from ui.flame_graph_widget import FlameGraphWidget
from ui.overview import OverviewHistogram

logger = logging.getLogger(__name__)


class FlameGraphWindow(QMainWindow):
    def __init__(self, layers: Sequence[Layer], options: GraphOptions | None = None) -> None:
        super().__init__()
        self._layers = list(layers)
        self.options = options or GraphOptions.from_config()
        self.setWindowTitle(config.get_nested_string("app.windowTitle", "Flame Graph Viewer"))

        central = QWidget(self)
        layout = QVBoxLayout(central)
        layout.setContentsMargins(4, 4, 4, 4)

        self.overview = OverviewHistogram(central)
        self.graph_widget = FlameGraphWidget(central, options=self.options, overview=self.overview)
        layout.addWidget(self.overview)
        layout.addWidget(self.graph_widget, stretch=1)
        self.setCentralWidget(central)

        self.overview.set_data(self._layers)

        graph = self.graph_widget.graph
        graph.ready.connect(self._on_graph_ready)
        graph.window_changed.connect(self._on_window_changed)

        self.resize(config.get_ui_setting("window", "width", 1200),
                    config.get_ui_setting("window", "height", 700))

    def _on_graph_ready(self) -> None:
        self.graph_widget.graph.set_data(self._layers)
        self.graph_widget.setFocus()

    def _on_window_changed(self, start: float, end: float) -> None:
        units = self.options.timeline_tick_units
        self.statusBar().showMessage(f"{start:.2f} - {end:.2f} {units}".rstrip())

    def closeEvent(self, event) -> None:
        self.graph_widget.teardown()
        super().closeEvent(event)


def main(argv: Sequence[str] | None = None) -> int:
    parser = argparse.ArgumentParser(description='Interactive flame graph viewer')
    parser.add_argument('dataset', nargs='?',
                        help='JSON file with a list of layers ({"color": ..., "blocks": [...]})')
    parser.add_argument('--synthetic', '-n', type=int, default=8, metavar='DEPTH',
                        help='Depth of the generated sample call tree when no dataset is given (default: 8)')
    parser.add_argument('--units', '-u', default=None,
                        help='Unit suffix for the timeline labels (default: from config)')
    parser.add_argument('--debug', '-d', action='store_true', help='Enable debug logging')
    args = parser.parse_args(argv)

    setup_logging(debug=args.debug)

    try:
        if args.dataset:
            layers = load_layers(args.dataset)
        else:
            layers = generate_sample_layers(max_depth=max(1, args.synthetic))
    except (OSError, ValueError, FlameGraphError) as e:
        message = ErrorHandler.log_exception(e, f"Loading {args.dataset or 'sample data'}")
        print(f"Error: {message}", file=sys.stderr)
        return 1

    overrides = {}
    if args.units is not None:
        overrides['timeline_tick_units'] = args.units
    options = GraphOptions.from_config(**overrides)

    app = QApplication.instance() or QApplication(sys.argv[:1])
    window = FlameGraphWindow(layers, options)
    window.show()
    logger.info("Showing %d layers", len(layers))
    return app.exec()


if __name__ == "__main__":
    sys.exit(main())
