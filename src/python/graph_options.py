"""
Rendering and navigation options of a flame graph instance.

GraphOptions is an immutable snapshot of the 'graph', 'colors', 'strings'
and 'ui.graph' configuration sections. Engine instances never read the
configuration directly, so two graphs can run with different options.
"""

from dataclasses import dataclass, fields
from typing import Any

from config_manager import ConfigManager, config
from custom_types import FontSpec
from label_fitter import ELLIPSIS


@dataclass(frozen=True)
class GraphOptions:
    # Header ruler
    header_height: float = 18
    header_safe_bounds: float = 50
    header_font_size: float = 9
    header_font_family: str = "sans-serif"
    header_padding_left: float = 6
    header_padding_top: float = 5
    header_background: str = "white"
    header_text_color: str = "#18191a"
    timeline_strokes: str = "#ddd"
    timeline_tick_units: str = ""

    # Blocks
    block_border: float = 1
    block_text_color: str = "#000"
    block_font_size: float = 9
    block_font_family: str = "sans-serif"
    block_padding_top: float = 1
    block_padding_left: float = 3
    block_padding_right: float = 3
    overflow_char: str = ELLIPSIS

    # Ticks
    ticks_multiple: int = 5
    ticks_spacing_min: float = 75

    # Navigation
    wheel_zoom_sensitivity: float = 0.00035
    wheel_scroll_sensitivity: float = 0.5
    wheel_line_height: float = 15
    wheel_page_height: float = 400
    keyboard_step: float = 100
    min_selection_width: float = 10

    # Surface
    sharpness: float | None = None
    fixed_width: float | None = None
    fixed_height: float | None = None
    text_width_cache_size: int = 4096

    def block_font(self, pixel_ratio: float) -> FontSpec:
        return FontSpec(self.block_font_family, self.block_font_size * pixel_ratio)

    def header_font(self, pixel_ratio: float) -> FontSpec:
        return FontSpec(self.header_font_family, self.header_font_size * pixel_ratio)

    @classmethod
    def from_config(cls, cfg: ConfigManager | None = None, **overrides: Any) -> "GraphOptions":
        """Build options from a ConfigManager (the module-level one by default)."""
        cfg = cfg or config
        defaults = cls()
        g = cfg.get_graph_setting
        values = dict(
            header_height=g("headerHeight", defaults.header_height),
            header_safe_bounds=g("headerSafeBounds", defaults.header_safe_bounds),
            header_font_size=g("headerFontSize", defaults.header_font_size),
            header_font_family=cfg.get_font("header"),
            header_padding_left=g("headerPaddingLeft", defaults.header_padding_left),
            header_padding_top=g("headerPaddingTop", defaults.header_padding_top),
            header_background=cfg.get_color("headerBackground", defaults.header_background),
            header_text_color=cfg.get_color("headerText", defaults.header_text_color),
            timeline_strokes=cfg.get_color("timelineStrokes", defaults.timeline_strokes),
            timeline_tick_units=cfg.get_string("graph", "tickUnits", defaults.timeline_tick_units),
            block_border=g("blockBorder", defaults.block_border),
            block_text_color=cfg.get_color("blockText", defaults.block_text_color),
            block_font_size=g("blockFontSize", defaults.block_font_size),
            block_font_family=cfg.get_font("block"),
            block_padding_top=g("blockPaddingTop", defaults.block_padding_top),
            block_padding_left=g("blockPaddingLeft", defaults.block_padding_left),
            block_padding_right=g("blockPaddingRight", defaults.block_padding_right),
            overflow_char=cfg.get_string("graph", "overflowChar", defaults.overflow_char),
            ticks_multiple=g("ticksMultiple", defaults.ticks_multiple),
            ticks_spacing_min=g("ticksSpacingMin", defaults.ticks_spacing_min),
            min_selection_width=g("minSelectionWidth", defaults.min_selection_width),
            sharpness=cfg.get_ui_setting("graph", "sharpness", defaults.sharpness),
            fixed_width=cfg.get_ui_setting("graph", "fixedWidth", defaults.fixed_width),
            fixed_height=cfg.get_ui_setting("graph", "fixedHeight", defaults.fixed_height),
            text_width_cache_size=g("textWidthCacheSize", defaults.text_width_cache_size),
        )
        wheel = cfg.get_wheel_config()
        values.update(
            wheel_zoom_sensitivity=wheel["zoomSensitivity"],
            wheel_scroll_sensitivity=wheel["scrollSensitivity"],
            wheel_line_height=wheel["lineHeight"],
            wheel_page_height=wheel["pageHeight"],
            keyboard_step=wheel["keyboardStep"],
        )
        known = {f.name for f in fields(cls)}
        unknown = set(overrides) - known
        if unknown:
            raise TypeError(f"Unknown graph options: {', '.join(sorted(unknown))}")
        values.update(overrides)
        return cls(**values)
