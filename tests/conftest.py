"""
conftest.py - Shared pytest fixtures for flame graph tests

This module provides standardized test fixtures for use across all tests.
It includes fixtures for:
- Path setup and Python path configuration
- Configuration management
- Recording fakes of the host collaborators (container, surface, scheduler, events)
- Sample flame graph datasets
- GUI testing support
"""
import os
import sys
import json
import pathlib
import pytest
from unittest.mock import MagicMock

# Qt widgets are created without a display
os.environ.setdefault("QT_QPA_PLATFORM", "offscreen")

# Add the src/python directory to the Python path
sys.path.insert(0, str(pathlib.Path(__file__).parent.parent / "src" / "python"))

# Imports from project modules (now that path is configured)
from config_manager import ConfigManager
from flame_data import Block, Layer
from graph_options import GraphOptions

# Width of every character measured by FakeSurface
CHAR_WIDTH = 6.0


# Path and Environment Fixtures
# ----------------------------

@pytest.fixture
def project_paths():
    """Provide standard paths to key project directories."""
    root_dir = pathlib.Path(__file__).parent.parent
    return {
        'root': root_dir,
        'src': root_dir / 'src',
        'python': root_dir / 'src' / 'python',
        'config': root_dir / 'config',
        'tests': root_dir / 'tests'
    }


# Configuration Fixtures
# ---------------------

@pytest.fixture
def test_config_data():
    """Create minimal test configuration data."""
    return {
        "colors": {
            "palette": {
                "background": "#101010",
                "headerBackground": "#fafafa",
                "headerText": "#222222",
                "timelineStrokes": "#cccccc",
                "blockText": "#111111"
            },
            "fonts": {
                "header": "Arial",
                "block": "Courier"
            }
        },
        "strings": {
            "app": {
                "name": "Flame Test",
                "windowTitle": "Flame Test Window"
            },
            "graph": {
                "tickUnits": "us",
                "overflowChar": "~"
            }
        },
        "ui": {
            "graph": {
                "sharpness": 2,
                "fixedWidth": None,
                "fixedHeight": 300,
                "frameIntervalMs": 20
            },
            "overview": {
                "bins": 50
            }
        },
        "graph": {
            "headerHeight": 24,
            "ticksMultiple": 10,
            "wheelZoomSensitivity": 0.001,
            "keyboardStep": 50
        },
        "logging": {
            "level": "DEBUG",
            "raiseOnError": False
        }
    }


@pytest.fixture
def test_config_files(tmp_path, test_config_data):
    """Create a temporary config file."""
    config_file = tmp_path / "test_config.json"

    with open(config_file, 'w') as f:
        json.dump(test_config_data, f)

    return {
        "config_path": config_file,
        "tmp_path": tmp_path
    }


@pytest.fixture
def test_config_manager(test_config_files):
    """Create a ConfigManager instance with test configuration."""
    return ConfigManager(
        cfg_path=test_config_files["config_path"],
        exit_on_error=False
    )


@pytest.fixture
def mock_config_manager():
    """Create a mocked ConfigManager for lightweight tests."""
    mock_manager = MagicMock(spec=ConfigManager)

    mock_manager.colors = {"background": "#ffffff", "blockText": "#000"}
    mock_manager.fonts = {"block": "sans-serif"}
    mock_manager.strings = {"graph": {"tickUnits": "ms"}}
    mock_manager.ui = {"graph": {"frameIntervalMs": 16}}

    mock_manager.get_string.return_value = "Test String"
    mock_manager.get_nested_string.return_value = "Test Nested String"
    mock_manager.get_ui_setting.return_value = None
    mock_manager.get_setting.return_value = "Test Setting"

    return mock_manager


# Host Collaborator Fakes
# ----------------------

class FakeContainer:
    """LayoutContainer with a settable size."""

    def __init__(self, width=800.0, height=600.0, pixel_ratio=1.0):
        self.width = width
        self.height = height
        self.pixel_ratio = pixel_ratio

    def layout_size(self):
        return self.width, self.height

    def device_pixel_ratio(self):
        return self.pixel_ratio


class FakeSurface:
    """DrawingSurface that records every call; each character is CHAR_WIDTH wide."""

    def __init__(self):
        self.calls = []
        self.size = (0, 0)
        self.measured = []

    def resize(self, width, height):
        self.size = (width, height)
        self.calls.append(("resize", width, height))

    def begin_frame(self):
        self.calls.append(("begin_frame",))

    def end_frame(self):
        self.calls.append(("end_frame",))

    def clear_rect(self, x, y, width, height):
        self.calls.append(("clear_rect", x, y, width, height))

    def fill_rect(self, x, y, width, height, color):
        self.calls.append(("fill_rect", x, y, width, height, color))

    def fill_rects(self, rects, color):
        self.calls.append(("fill_rects", rects.copy(), color))

    def stroke_lines(self, lines, color):
        self.calls.append(("stroke_lines", list(lines), color))

    def fill_text(self, text, x, y, color, font, baseline):
        self.calls.append(("fill_text", text, x, y, color, font, baseline))

    def measure_text(self, text, font):
        self.measured.append(text)
        return len(text) * CHAR_WIDTH

    def named(self, name):
        return [call for call in self.calls if call[0] == name]

    def reset(self):
        self.calls.clear()


class FakeScheduler:
    """FrameScheduler driven by hand with run_frame()."""

    def __init__(self):
        self.pending = None
        self.handles = 0
        self.cancelled = []

    def request_frame(self, callback):
        self.handles += 1
        self.pending = (self.handles, callback)
        return self.handles

    def cancel_frame(self, handle):
        self.cancelled.append(handle)
        if self.pending is not None and self.pending[0] == handle:
            self.pending = None

    def run_frame(self):
        assert self.pending is not None, "no frame requested"
        _, callback = self.pending
        self.pending = None
        callback()


class FakeEventSource:
    """EventSource delivering events synchronously through emit()."""

    def __init__(self):
        self.handlers = {}

    def subscribe(self, event_type, handler):
        self.handlers.setdefault(str(event_type), []).append(handler)

        def unsubscribe():
            self.handlers[str(event_type)].remove(handler)

        return unsubscribe

    def emit(self, event_type, *args):
        for handler in list(self.handlers.get(str(event_type), [])):
            handler(*args)

    def listener_count(self):
        return sum(len(handlers) for handlers in self.handlers.values())


@pytest.fixture
def container():
    return FakeContainer()


@pytest.fixture
def surface():
    return FakeSurface()


@pytest.fixture
def scheduler():
    return FakeScheduler()


@pytest.fixture
def events():
    return FakeEventSource()


@pytest.fixture
def options():
    """Options independent of config.json."""
    return GraphOptions()


# Dataset Fixtures
# ---------------

@pytest.fixture
def single_block_layers():
    """One layer holding a single 100-unit block."""
    return [{"color": "#f29f8c", "blocks": [{"x": 0, "y": 0, "width": 100, "height": 20, "text": "abc"}]}]


@pytest.fixture
def nested_layers():
    """Three depths of a small call tree spread over two colors."""
    return [
        Layer(color="#f29f8c", blocks=(
            Block(x=0, y=0, width=1000, height=15, text="main"),
            Block(x=100, y=30, width=200, height=15, text="parse"),
        )),
        Layer(color="#8cb4e0", blocks=(
            Block(x=0, y=15, width=600, height=15, text="run"),
            Block(x=650, y=15, width=300, height=15, text="render"),
            Block(x=700, y=30, width=50, height=15, text="paint"),
        )),
    ]


# GUI Testing Fixtures
# ------------------

@pytest.fixture(scope="session")
def qt_app():
    """Create a QApplication instance that persists for the test session."""
    from PyQt6.QtWidgets import QApplication

    app = QApplication.instance()
    if app is None:
        app = QApplication([''])

    yield app
