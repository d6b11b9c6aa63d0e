"""
Tests for the shared chart primitives: scales, ranges, colors, frames.
"""

from __future__ import annotations

import math

import pytest

from healthlog.charts.geometry import (
    Frame,
    grid_positions,
    hash_hue,
    hash_to_color,
    legend_item,
    nice_min_max,
    scale_linear,
)


class TestScaleLinear:

    def test_maps_endpoints(self):
        s = scale_linear(0, 10, 100, 200)
        assert s(0) == 100
        assert s(10) == 200
        assert s(5) == 150

    def test_inverted_range(self):
        s = scale_linear(0, 4, 252, 48)
        assert s(0) == 252
        assert s(4) == 48

    def test_zero_width_domain(self):
        s = scale_linear(5, 5, 0, 100)
        assert s(5) == 0
        assert s(6) == 100
        assert all(math.isfinite(s(v)) for v in (4, 5, 6))


class TestNiceMinMax:

    def test_pads_eight_percent(self):
        lo, hi = nice_min_max([10, 20])
        assert lo == pytest.approx(9.2)
        assert hi == pytest.approx(20.8)

    def test_flat_series_widened(self):
        lo, hi = nice_min_max([5, 5, 5])
        assert lo == pytest.approx(3.84)
        assert hi == pytest.approx(6.16)
        assert lo < 5 < hi

    def test_ignores_absent_and_non_finite(self):
        lo, hi = nice_min_max([None, float("nan"), 3, float("inf"), 7, "x"])
        assert lo == pytest.approx(3 - 0.32)
        assert hi == pytest.approx(7 + 0.32)

    def test_no_values(self):
        assert nice_min_max([]) == (0.0, 1.0)
        assert nice_min_max([None, None]) == (0.0, 1.0)


class TestColors:

    def test_known_hues(self):
        assert hash_hue("") == 0
        assert hash_hue("a") == 97
        assert hash_hue("ab") == (97 * 31 + 98) % 360

    def test_color_string(self):
        assert hash_to_color("a") == "hsl(97 85% 65%)"

    def test_stable_and_in_range(self):
        for label in ("Weight (kg)", "Fasting", "Grip Left", "Supplements checked", "Ünïcode ✓"):
            h = hash_hue(label)
            assert 0 <= h < 360
            assert hash_hue(label) == h

    def test_wraps_at_32_bits(self):
        long_label = "x" * 200
        assert 0 <= hash_hue(long_label) < 360

    def test_legend_item(self):
        item = legend_item("Systolic")
        assert item.label == "Systolic"
        assert item.color == hash_to_color("Systolic")
        assert item.hue == hash_hue("Systolic")


class TestFrame:

    def test_grid_positions(self):
        ys = grid_positions(300, 48, lines=5)
        assert len(ys) == 6
        assert ys[0] == 48
        assert ys[-1] == pytest.approx(252)

    def test_frame_bounds(self):
        f = Frame(width=900, height=300, pad=48)
        assert (f.left, f.right, f.top, f.bottom) == (48, 852, 48, 252)
