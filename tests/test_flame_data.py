"""
Tests for the flame graph dataset model.
"""
import json
import math
import numpy as np
import pytest

from error_handler import InvalidFlameDataError
from flame_data import (
    DEFAULT_MAX_DEPTH,
    DEFAULT_MAX_TIME,
    DEFAULT_MIN_TIME,
    Block,
    DataExtent,
    Layer,
    LayerGeometry,
    build_geometry,
    generate_sample_layers,
    hash_name,
    load_layers,
    parse_layers,
)


class TestParseLayers:
    def test_parses_raw_mappings(self, single_block_layers):
        layers = parse_layers(single_block_layers)
        assert len(layers) == 1
        block = layers[0].blocks[0]
        assert (block.x, block.y, block.width, block.height, block.text) == (0, 0, 100, 20, "abc")

    def test_layer_models_pass_through(self, nested_layers):
        assert parse_layers(nested_layers) == nested_layers

    def test_text_defaults_to_empty(self):
        layer = parse_layers([{"color": "red", "blocks": [{"x": 1, "y": 2, "width": 3, "height": 4}]}])[0]
        assert layer.blocks[0].text == ""

    @pytest.mark.parametrize("block", [
        {"x": 0, "y": 0, "width": -1, "height": 10},
        {"x": 0, "y": 0, "width": 10, "height": -1},
        {"x": math.nan, "y": 0, "width": 10, "height": 10},
        {"x": 0, "y": math.inf, "width": 10, "height": 10},
        {"y": 0, "width": 10, "height": 10},
        {"x": "soon", "y": 0, "width": 10, "height": 10},
    ])
    def test_invalid_blocks_rejected(self, block):
        with pytest.raises(InvalidFlameDataError, match="Layer 0"):
            parse_layers([{"color": "red", "blocks": [block]}])

    def test_missing_color_rejected(self):
        with pytest.raises(InvalidFlameDataError):
            parse_layers([{"blocks": []}])

    def test_blocks_are_immutable(self):
        block = Block(x=0, y=0, width=1, height=1)
        with pytest.raises(Exception):
            block.x = 5


class TestGeometry:
    def test_arrays_follow_blocks(self, nested_layers):
        geometry = build_geometry(nested_layers)
        assert [g.color for g in geometry] == ["#f29f8c", "#8cb4e0"]
        second = geometry[1]
        assert len(second) == 3
        np.testing.assert_array_equal(second.x, [0, 650, 700])
        np.testing.assert_array_equal(second.width, [600, 300, 50])
        np.testing.assert_array_equal(second.y, [15, 15, 30])
        assert second.x.dtype == np.float64

    def test_empty_layer(self):
        geometry = LayerGeometry.from_layer(Layer(color="red"))
        assert len(geometry) == 0
        assert geometry.x.shape == (0,)


class TestDataExtent:
    def test_empty_dataset_uses_defaults(self):
        extent = DataExtent.from_layers([])
        assert extent == DataExtent(DEFAULT_MIN_TIME, DEFAULT_MAX_TIME, DEFAULT_MAX_DEPTH)
        assert (extent.min_time, extent.max_time, extent.max_depth) == (0, 1000, 2000)

    def test_layers_without_blocks_use_defaults(self):
        assert DataExtent.from_layers([Layer(color="red")]) == DataExtent()

    def test_bounding_box(self, nested_layers):
        extent = DataExtent.from_layers(nested_layers)
        assert extent.min_time == 0
        assert extent.max_time == 1000
        assert extent.max_depth == 45
        assert extent.duration == 1000

    def test_degenerate_single_point(self):
        extent = DataExtent.from_layers([Layer(color="red", blocks=(Block(x=7, y=0, width=0, height=0),))])
        assert (extent.min_time, extent.max_time, extent.max_depth) == (7, 7, 0)


class TestLoadLayers:
    def test_load_list(self, tmp_path, single_block_layers):
        path = tmp_path / "layers.json"
        path.write_text(json.dumps(single_block_layers), encoding="utf-8")
        layers = load_layers(path)
        assert layers[0].color == "#f29f8c"

    def test_load_object_with_layers_key(self, tmp_path, single_block_layers):
        path = tmp_path / "layers.json"
        path.write_text(json.dumps({"layers": single_block_layers}), encoding="utf-8")
        assert len(load_layers(str(path))) == 1

    def test_load_rejects_other_shapes(self, tmp_path):
        path = tmp_path / "layers.json"
        path.write_text(json.dumps("nope"), encoding="utf-8")
        with pytest.raises(InvalidFlameDataError):
            load_layers(path)

    def test_missing_file(self, tmp_path):
        with pytest.raises(OSError):
            load_layers(tmp_path / "missing.json")


class TestSampleLayers:
    def test_deterministic(self):
        assert generate_sample_layers(seed=3) == generate_sample_layers(seed=3)

    def test_structure(self):
        layers = generate_sample_layers(max_depth=4, fanout=3, duration=500.0, row_height=10.0)
        blocks = [b for layer in layers for b in layer.blocks]
        assert len(blocks) == 1 + 3 + 9 + 27

        root = next(b for b in blocks if b.text == "root")
        assert (root.x, root.width, root.y) == (0.0, 500.0, 0.0)

        for block in blocks:
            assert block.y % 10.0 == 0
            assert block.y < 40.0
            assert 0.0 <= block.x
            assert block.x + block.width <= 500.0 + 1e-9

    def test_children_nest_inside_parent(self):
        layers = generate_sample_layers(max_depth=3, fanout=2)
        by_name = {b.text: b for layer in layers for b in layer.blocks}
        for name, block in by_name.items():
            if name == "root":
                continue
            parent = by_name[name.rsplit("/", 1)[0]]
            assert block.y == parent.y + 15.0
            assert parent.x <= block.x
            assert block.x + block.width <= parent.x + parent.width + 1e-9

    def test_single_depth(self):
        layers = generate_sample_layers(max_depth=1)
        assert sum(len(layer.blocks) for layer in layers) == 1


def test_hash_name_is_stable():
    assert hash_name("") == 0
    assert hash_name("a") == 97
    assert hash_name("ab") == 97 * 31 + 98
