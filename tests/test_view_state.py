"""
Unit tests for ViewState class.
"""
import pytest

from flame_data import DataExtent
from view_state import ViewState


def assert_invariants(vs):
    assert vs.extent.min_time <= vs.start <= vs.end <= vs.extent.max_time
    assert 0 <= vs.vertical_offset <= vs.extent.max_depth


def test_init_defaults():
    vs = ViewState()
    assert vs.start == pytest.approx(0.0)
    assert vs.end == pytest.approx(1000.0)
    assert vs.max_depth == pytest.approx(2000.0)
    assert vs.vertical_offset == 0.0
    assert vs.width == pytest.approx(1000.0)


def test_reset_is_idempotent():
    vs = ViewState(DataExtent(10, 110, 50))
    vs.pan(20, 30)
    vs.reset(DataExtent(0, 400, 90))
    first = (vs.start, vs.end, vs.vertical_offset)
    vs.reset(DataExtent(0, 400, 90))
    assert (vs.start, vs.end, vs.vertical_offset) == first == (0.0, 400.0, 0.0)


def test_reset_without_extent_keeps_extent():
    vs = ViewState(DataExtent(5, 50, 10))
    vs.zoom(0.5, -20)
    vs.reset()
    assert vs.window == (5.0, 50.0)


def test_scale():
    vs = ViewState(DataExtent(0, 200, 10))
    assert vs.scale(800) == pytest.approx(4.0)


def test_scale_zero_width_window():
    vs = ViewState(DataExtent(5, 5, 10))
    assert vs.scale(800) == 0.0


def test_pan_clamps_to_min_exactly_and_keeps_width():
    vs = ViewState(DataExtent(0, 1000, 100))
    vs.zoom(0.0, -800)  # window [0, 200]
    vs.pan(100)
    assert vs.window == pytest.approx((100.0, 300.0))

    vs.pan(-500)
    assert vs.start == 0.0
    assert vs.end - vs.start == pytest.approx(200.0)


def test_pan_clamps_to_max_and_keeps_width():
    vs = ViewState(DataExtent(0, 1000, 100))
    vs.zoom(0.0, -900)  # window [0, 100]
    vs.pan(5000)
    assert vs.end == 1000.0
    assert vs.start == pytest.approx(900.0)


def test_pan_full_window_does_not_move():
    vs = ViewState(DataExtent(0, 1000, 100))
    vs.pan(250)
    assert vs.window == (0.0, 1000.0)


@pytest.mark.parametrize("delta_vertical,expected", [
    (50, 50.0),
    (-10, 0.0),
    (500, 100.0),
])
def test_pan_vertical_offset_clamped(delta_vertical, expected):
    vs = ViewState(DataExtent(0, 1000, 100))
    vs.pan(0, delta_vertical)
    assert vs.vertical_offset == pytest.approx(expected)


@pytest.mark.parametrize("anchor_frac", [0.0, 0.25, 0.5, 0.8, 1.0])
def test_zoom_keeps_anchor_time(anchor_frac):
    vs = ViewState(DataExtent(0, 1000, 100))
    vs.zoom(0.5, -500)  # window [250, 750]
    anchored = vs.start + anchor_frac * vs.width
    vs.zoom(anchor_frac, -100)
    assert vs.start + anchor_frac * vs.width == pytest.approx(anchored)
    assert vs.width == pytest.approx(400.0)


def test_zoom_out_clamped_to_extent():
    vs = ViewState(DataExtent(0, 1000, 100))
    vs.zoom(0.5, -500)
    vs.zoom(0.5, 10_000)
    assert vs.window == (0.0, 1000.0)
    assert_invariants(vs)


def test_zoom_in_respects_min_selection_width():
    vs = ViewState(DataExtent(0, 1000, 100), min_selection_width=10)
    vs.zoom(0.5, -995)
    assert vs.width == pytest.approx(10.0)
    assert vs.start == pytest.approx(495.0)

    vs.zoom(0.5, -5)
    assert vs.width == pytest.approx(10.0)


@pytest.mark.parametrize("configured", [0, -5])
def test_zoom_in_never_collapses_window(configured):
    vs = ViewState(DataExtent(0, 100, 20), min_selection_width=configured)
    vs.zoom(0.5, -1e6)
    assert vs.width > 0
    assert vs.scale(800) > 0

    narrowest = vs.width
    vs.zoom(0.5, narrowest)
    assert vs.width > narrowest


def test_zoom_anchor_fraction_clamped():
    vs = ViewState(DataExtent(0, 1000, 100))
    vs.zoom(3.0, -100)
    assert vs.end == pytest.approx(1000.0)
    assert vs.start == pytest.approx(100.0)


def test_normalize_does_not_enforce_min_width():
    vs = ViewState(DataExtent(0, 1000, 100), min_selection_width=10)
    vs.start, vs.end = 500.0, 502.0
    vs.normalize()
    assert vs.window == (500.0, 502.0)


def test_normalize_clamps_edges_and_offset():
    vs = ViewState(DataExtent(0, 1000, 100))
    vs.start, vs.end, vs.vertical_offset = -50.0, 1200.0, -3.0
    vs.normalize()
    assert vs.window == (0.0, 1000.0)
    assert vs.vertical_offset == 0.0


def test_drag_to_shifts_anchor_window():
    vs = ViewState(DataExtent(0, 1000, 100))
    vs.drag_to(200, 400, 50, 20)
    assert vs.window == pytest.approx((250.0, 450.0))
    assert vs.vertical_offset == 20.0

    vs.drag_to(200, 400, -1000, 500)
    assert vs.window == pytest.approx((0.0, 200.0))
    assert vs.vertical_offset == 100.0


@pytest.mark.parametrize("ops", [
    [("pan", (-1e9,)), ("zoom", (0.1, -1e6)), ("pan", (1e9, 1e9))],
    [("zoom", (0.9, 1e6)), ("drag_to", (900, 1100, 300, -40))],
    [("zoom", (0.5, -999)), ("pan", (0.3, -0.1)), ("zoom", (-2, 5))],
])
def test_invariants_hold_after_any_mutation(ops):
    vs = ViewState(DataExtent(0, 1000, 100))
    for name, args in ops:
        getattr(vs, name)(*args)
        assert_invariants(vs)


def test_repr():
    assert repr(ViewState()) == "ViewState(start=0.0, end=1000.0, vertical_offset=0.0)"
