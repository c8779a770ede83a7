import json
import pathlib
import sys
import logging
from typing import Any

from custom_types import GraphSettings

logger = logging.getLogger(__name__)


def config_search_paths() -> list[pathlib.Path]:
    """Locations of config/config.json: the source checkout, then the install prefix."""
    checkout = pathlib.Path(__file__).parent.parent.parent
    return [
        checkout / "config" / "config.json",
        pathlib.Path(sys.prefix) / "config" / "config.json",
    ]


class ConfigManager:
    """Manages application configuration, including colors, fonts, strings and graph tuning"""

    colors: dict[str, str]
    fonts: dict[str, str]
    strings: dict[str, Any]
    ui: dict[str, Any]
    graph: GraphSettings
    exit_on_error: bool
    _cfg: dict[str, Any]
    cfg_path: str | pathlib.Path

    def __init__(
        self,
        cfg_path: str | pathlib.Path | None = None,
        exit_on_error: bool = True
    ) -> None:
        """Initialize the ConfigManager with an optional custom path.

        Args:
            cfg_path: Path to the config.json file (defaults to standard location if None)
            exit_on_error: Whether to exit the program on configuration errors
        """
        self.colors = {}
        self.fonts = {}
        self.strings = {}
        self.ui = {}
        self.graph = {}
        self.exit_on_error = exit_on_error
        self._cfg = {}

        self.cfg_path = cfg_path if cfg_path is not None else self._default_config_path()

        self.load_config()

    def _default_config_path(self) -> pathlib.Path:
        """Get the default path to the config.json file.

        The first existing candidate from config_search_paths() wins; the
        source checkout location is reported when none exists.
        """
        candidates = config_search_paths()
        for candidate in candidates:
            if candidate.is_file():
                return candidate
        return candidates[0]

    def _fail(self, message: str, exc_type: type[Exception] = RuntimeError) -> None:
        logger.error(message)
        if self.exit_on_error:
            sys.exit(1)
        raise exc_type(message)

    def load_config(self) -> None:
        """Load master configuration from the configured path."""
        try:
            with open(self.cfg_path, 'r', encoding='utf-8') as f:
                self._cfg = json.load(f)
        except Exception as e:
            self._fail(f"Critical error loading configuration '{self.cfg_path}': {e}")

        # Validate and assign sections
        try:
            c = self._cfg["colors"]
            self.colors = c["palette"]
            self.fonts = c["fonts"]
            self.strings = self._cfg["strings"]
            self.ui = self._cfg["ui"]
            self.graph = self._cfg["graph"]
        except KeyError as e:
            self._fail(f"Configuration missing key: {e}", KeyError)

        logger.debug("Loaded configuration from %s", self.cfg_path)

    def get_color(self, key: str, default: str | None = None) -> str:
        """Get a color string from the palette by key"""
        return self.colors.get(key, default or "#000000")

    def get_font(self, key: str = "primary") -> str:
        """Get a font family by key"""
        return self.fonts.get(key, "sans-serif")

    def get_string(self, category: str, key: str, default: str | None = None) -> str:
        """Get a string resource by category and key"""
        if category in self.strings and key in self.strings[category]:
            return self.strings[category][key]
        return key if default is None else default

    def get_nested_string(self, path: str, default: str | None = None) -> str | list[Any]:
        """Get a string resource by dot-notation path (e.g., 'app.windowTitle')"""
        parts = path.split('.')
        current: Any = self.strings

        for part in parts:
            if isinstance(current, dict) and part in current:
                current = current[part]
            else:
                return default or path

        return current if isinstance(current, (str, list)) else default or path

    def get_ui_setting(self, category: str, key: str, default: Any = None) -> Any:
        """Get a UI setting value by category and key"""
        if category in self.ui and key in self.ui[category]:
            return self.ui[category][key]
        return default

    def get_graph_setting(self, key: str, default: Any = None) -> Any:
        """Get a flame graph tuning value (sizes, paddings, sensitivities)"""
        return self.graph.get(key, default)

    def get_setting(self, section: str, key: str, default: Any = None) -> Any:
        """Get a generic setting from the master config"""
        section_data = self._cfg.get(section, {})
        if not isinstance(section_data, dict):
            return default
        return section_data.get(key, default)

    def get_logging_setting(self, key: str, default: Any = None) -> Any:
        """Get a logging configuration setting"""
        return self.get_setting("logging", key, default)

    # ============================================================================
    # Graph Configuration Accessors
    # ============================================================================

    def get_wheel_config(self) -> dict[str, float]:
        """Get wheel and keyboard navigation tuning.

        Returns:
            dict: Navigation configuration with keys:
                - zoomSensitivity: Time-window growth per wheel pixel
                - scrollSensitivity: Pan distance per wheel pixel
                - lineHeight: Pixels per wheel line
                - pageHeight: Pixels per wheel page
                - keyboardStep: Synthetic wheel delta for W/A/S/D
        """
        return {
            "zoomSensitivity": self.get_graph_setting("wheelZoomSensitivity", 0.00035),
            "scrollSensitivity": self.get_graph_setting("wheelScrollSensitivity", 0.5),
            "lineHeight": self.get_graph_setting("wheelLineHeight", 15),
            "pageHeight": self.get_graph_setting("wheelPageHeight", 400),
            "keyboardStep": self.get_graph_setting("keyboardStep", 100),
        }

    def get_frame_interval_ms(self, default: int = 16) -> int:
        """Get the repaint timer interval in milliseconds."""
        return self.get_ui_setting("graph", "frameIntervalMs", default)


# Create a singleton instance
config = ConfigManager()
