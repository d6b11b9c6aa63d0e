"""
Chart geometry: scales, axis ranges, colors, line and bar layouts.

Everything except ``render`` is pure and renderer-agnostic; ``render``
rasterizes a Dashboard with matplotlib and is imported on demand.
"""

from healthlog.charts.geometry import hash_to_color, nice_min_max, scale_linear
from healthlog.charts.line_chart import LineChart, SeriesSpec, build_line_chart
from healthlog.charts.bar_chart import BarChart, BarGroup, build_bar_chart
from healthlog.charts.dashboard import CHART_RANGES, Dashboard, build_dashboard

__all__ = [
    "scale_linear", "nice_min_max", "hash_to_color",
    "SeriesSpec", "LineChart", "build_line_chart",
    "BarGroup", "BarChart", "build_bar_chart",
    "CHART_RANGES", "Dashboard", "build_dashboard",
]
