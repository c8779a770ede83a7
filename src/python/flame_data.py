"""
Flame graph dataset model.

A dataset is an ordered sequence of layers; every layer groups the blocks
that share one fill color. Blocks carry a time range (``x``, ``width``), a
depth band in pixels (``y``, ``height``) and a label. The data extent is the
bounding box of all blocks and falls back to a fixed default for empty data.
"""

import json
import logging
import pathlib
from dataclasses import dataclass, field
from typing import Iterable, Sequence

import numpy as np
from pydantic import BaseModel, ConfigDict, Field, ValidationError

from custom_types import CoordArray, LayerDict
from error_handler import InvalidFlameDataError

logger = logging.getLogger(__name__)

# Extent used when the dataset holds no blocks at all
DEFAULT_MIN_TIME = 0.0
DEFAULT_MAX_TIME = 1000.0
DEFAULT_MAX_DEPTH = 2000.0

SAMPLE_PALETTE = (
    "#f29f8c", "#f5b971", "#f7d56e", "#b5d97c",
    "#8ccfb9", "#8cb4e0", "#b39ddb", "#e59ac4",
)


class Block(BaseModel):
    """One rectangle of the flame graph."""
    model_config = ConfigDict(frozen=True, allow_inf_nan=False)

    x: float = Field(..., description="Start time")
    y: float = Field(..., description="Depth offset in pixels")
    width: float = Field(..., ge=0, description="Duration")
    height: float = Field(..., ge=0, description="Height in pixels")
    text: str = Field("", description="Label")


class Layer(BaseModel):
    """Blocks painted together with one fill color."""
    model_config = ConfigDict(frozen=True)

    color: str = Field(..., min_length=1, description="Fill color")
    blocks: tuple[Block, ...] = Field((), description="Blocks of this color")


def parse_layers(layers: Iterable[Layer | LayerDict]) -> list[Layer]:
    """Validate raw layer mappings (or pass through Layer models).

    Raises:
        InvalidFlameDataError: if any layer or block fails validation
    """
    parsed: list[Layer] = []
    for index, layer in enumerate(layers):
        if isinstance(layer, Layer):
            parsed.append(layer)
            continue
        try:
            parsed.append(Layer.model_validate(layer))
        except ValidationError as e:
            raise InvalidFlameDataError(f"Layer {index} is invalid: {e}") from e
    return parsed


@dataclass(frozen=True, eq=False)
class LayerGeometry:
    """Block coordinates of one layer packed into numpy arrays."""
    color: str
    blocks: tuple[Block, ...]
    x: CoordArray = field(repr=False)
    y: CoordArray = field(repr=False)
    width: CoordArray = field(repr=False)
    height: CoordArray = field(repr=False)

    @classmethod
    def from_layer(cls, layer: Layer) -> "LayerGeometry":
        count = len(layer.blocks)
        coords = np.array(
            [(b.x, b.y, b.width, b.height) for b in layer.blocks],
            dtype=np.float64,
        ).reshape(count, 4)
        return cls(
            color=layer.color,
            blocks=layer.blocks,
            x=coords[:, 0].copy(),
            y=coords[:, 1].copy(),
            width=coords[:, 2].copy(),
            height=coords[:, 3].copy(),
        )

    def __len__(self) -> int:
        return len(self.blocks)


def build_geometry(layers: Sequence[Layer]) -> list[LayerGeometry]:
    return [LayerGeometry.from_layer(layer) for layer in layers]


@dataclass(frozen=True)
class DataExtent:
    """Time and depth bounding box of a dataset."""
    min_time: float = DEFAULT_MIN_TIME
    max_time: float = DEFAULT_MAX_TIME
    max_depth: float = DEFAULT_MAX_DEPTH

    @property
    def duration(self) -> float:
        return self.max_time - self.min_time

    @classmethod
    def from_geometry(cls, geometry: Sequence[LayerGeometry]) -> "DataExtent":
        populated = [g for g in geometry if len(g)]
        if not populated:
            return cls()
        starts = np.concatenate([g.x for g in populated])
        ends = np.concatenate([g.x + g.width for g in populated])
        depths = np.concatenate([g.y + g.height for g in populated])
        return cls(
            min_time=float(starts.min()),
            max_time=float(ends.max()),
            max_depth=float(depths.max()),
        )

    @classmethod
    def from_layers(cls, layers: Sequence[Layer]) -> "DataExtent":
        return cls.from_geometry(build_geometry(layers))


def load_layers(path: str | pathlib.Path) -> list[Layer]:
    """Read a dataset in the data-source format from a JSON file.

    The file holds either a list of layers or an object with a "layers" key.
    """
    with open(path, 'r', encoding='utf-8') as f:
        raw = json.load(f)
    if isinstance(raw, dict):
        raw = raw.get("layers", [])
    if not isinstance(raw, list):
        raise InvalidFlameDataError(f"{path}: expected a list of layers")
    layers = parse_layers(raw)
    logger.info("Loaded %d layers from %s", len(layers), path)
    return layers


def generate_sample_layers(
    max_depth: int = 8,
    fanout: int = 4,
    duration: float = 1000.0,
    row_height: float = 15.0,
    seed: int = 0,
    palette: Sequence[str] = SAMPLE_PALETTE,
) -> list[Layer]:
    """Build a deterministic nested call tree as flame graph layers.

    Children split up to 90% of their parent's interval; colors cycle by
    function name so every depth mixes several layers.
    """
    rng = np.random.default_rng(seed)
    blocks_by_color: dict[str, list[Block]] = {color: [] for color in palette}

    stack = [(0.0, duration, 0, "root")]
    while stack:
        start, width, depth, name = stack.pop()
        color = palette[hash_name(name) % len(palette)]
        blocks_by_color[color].append(
            Block(x=start, y=depth * row_height, width=width, height=row_height, text=name)
        )
        if depth + 1 >= max_depth or width <= 0:
            continue
        shares = rng.random(fanout) + 0.05
        shares = shares / shares.sum() * rng.uniform(0.5, 0.9)
        gaps = (width * (1.0 - shares.sum())) / fanout
        cursor = start
        for child, share in enumerate(shares):
            child_width = float(width * share)
            stack.append((cursor, child_width, depth + 1, f"{name}/f{depth + 1}_{child}"))
            cursor += child_width + gaps

    return [
        Layer(color=color, blocks=tuple(blocks))
        for color, blocks in blocks_by_color.items()
        if blocks
    ]


def hash_name(name: str) -> int:
    """Stable (process independent) hash for palette selection."""
    value = 0
    for char in name:
        value = (value * 31 + ord(char)) & 0xFFFFFFFF
    return value
