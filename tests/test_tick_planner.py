"""
Tests for header tick spacing.
"""
import math
import pytest

from tick_planner import TickPlanner


@pytest.mark.parametrize("scale", [0, 0.0, -3.0, math.nan, math.inf])
def test_degenerate_scale_returns_one(scale):
    assert TickPlanner().optimal_interval(scale) == 1


@pytest.mark.parametrize("scale,expected", [
    (100.0, 100.0),   # already wider than the minimum spacing
    (10.0, 100.0),    # 5 -> 10 time units
    (1.0, 80.0),      # 5 -> 10 -> 20 -> 40 -> 80
    (0.01, 102.4),    # 5 * 2**11 time units
])
def test_optimal_interval(scale, expected):
    assert TickPlanner().optimal_interval(scale) == pytest.approx(expected)


def test_interval_never_below_minimum_spacing():
    planner = TickPlanner()
    for scale in (0.001, 0.37, 3.3, 12.0, 74.9):
        assert planner.optimal_interval(scale) >= 75


def test_pixel_ratio_scales_minimum_spacing():
    planner = TickPlanner(pixel_ratio=2.0)
    assert planner.spacing_min == 150
    assert planner.optimal_interval(1.0) == pytest.approx(160.0)


def test_multiple_is_at_least_one():
    assert TickPlanner(multiple=0).multiple == 1


def test_ticks_from_origin():
    ticks = list(TickPlanner().ticks(start=0, scale=1.0, available_width=400))
    assert [left for left, _ in ticks] == [0, 80, 160, 240, 320]
    assert [time for _, time in ticks] == [0, 80, 160, 240, 320]


def test_ticks_with_offset_window():
    ticks = list(TickPlanner().ticks(start=100, scale=2.0, available_width=300))
    assert [left for left, _ in ticks] == [0, 80, 160, 240]
    assert [time for _, time in ticks] == [100, 140, 180, 220]


def test_ticks_divide_by_pixel_ratio():
    ticks = list(TickPlanner(pixel_ratio=2.0).ticks(start=0, scale=2.0, available_width=400))
    # interval 5 -> ... -> 80 units * 2 = 160 device px
    assert [left for left, _ in ticks] == [0, 160, 320]
    assert [time for _, time in ticks] == [0, 40, 80]


@pytest.mark.parametrize("scale", [0.0, -1.0, math.inf])
def test_no_ticks_for_degenerate_scale(scale):
    assert list(TickPlanner().ticks(0, scale, 500)) == []


def test_no_ticks_without_room():
    assert list(TickPlanner().ticks(0, 1.0, 0)) == []
