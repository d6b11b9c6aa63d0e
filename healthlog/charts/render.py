"""
Rasterize dashboard geometry to a PNG.

Each chart is drawn in its own panel using the geometry's pixel
coordinates directly (origin top-left, y grows downward), so the image
matches what any other renderer of the same geometry would show.
"""

from __future__ import annotations

import colorsys
import os

import matplotlib
matplotlib.use("Agg")
from matplotlib.figure import Figure
from matplotlib.patches import Rectangle

from healthlog.charts.bar_chart import BarChart
from healthlog.charts.dashboard import Dashboard
from healthlog.charts.geometry import COLOR_LIGHTNESS, COLOR_SATURATION, TextLabel
from healthlog.charts.line_chart import LineChart
from healthlog.utils.exceptions import StorageUnavailable
from healthlog.utils.logger import get_logger

logger = get_logger(__name__)

BG = "#0f1724"
AXIS = (1, 1, 1, 0.55)
GRID = (1, 1, 1, 0.20)
TEXT = (1, 1, 1, 0.85)
DPI = 100
_HA = {"start": "left", "middle": "center", "end": "right"}


def hue_to_rgb(hue: int) -> tuple:
    return colorsys.hls_to_rgb(hue / 360, COLOR_LIGHTNESS / 100, COLOR_SATURATION / 100)


def _text(ax, label: TextLabel, size: int = 9):
    ax.text(label.x, label.y, label.text, color=TEXT, fontsize=size, ha=_HA.get(label.anchor, "left"))


def _frame(ax, width: float, height: float, pad: float):
    ax.set_xlim(0, width)
    ax.set_ylim(height, 0)
    ax.set_facecolor(BG)
    ax.axis("off")
    ax.plot([pad, pad, width - pad], [pad, height - pad, height - pad], color=AXIS, linewidth=1.25)


def draw_line_chart(ax, chart: LineChart):
    f = chart.frame
    _frame(ax, f.width, f.height, f.pad)
    for y in f.grid_lines:
        ax.plot([f.left, f.right], [y, y], color=GRID, linewidth=1)
    ax.text(f.pad, 14, chart.y_label, color=TEXT, fontsize=9)
    for label in chart.y_ticks + chart.x_labels:
        _text(ax, label)
    for series in chart.series:
        if not series.has_line:
            continue
        rgb = hue_to_rgb(series.hue)
        xs = [p.x for p in series.points]
        ys = [p.y for p in series.points]
        ax.plot(xs, ys, color=rgb, linewidth=2.1, marker="o", markersize=4, label=series.label)
    if any(s.has_line for s in chart.series):
        ax.legend(loc="upper right", fontsize=8, facecolor=BG, labelcolor=TEXT, framealpha=0.6)


def draw_bar_chart(ax, chart: BarChart):
    f = chart.frame
    _frame(ax, f.width, f.height, f.pad)
    ax.text(f.pad, 14, chart.y_label, color=TEXT, fontsize=9)
    for label in chart.y_ticks:
        _text(ax, label)
    for bar in chart.bars:
        ax.add_patch(Rectangle((bar.x, bar.y), bar.width, bar.height,
                               facecolor=hue_to_rgb(bar.hue), alpha=0.85,
                               edgecolor=(1, 1, 1, 0.25)))
        _text(ax, bar.value_label)
        _text(ax, bar.category_label, size=8)


def render_dashboard_png(dashboard: Dashboard, path: str) -> str:
    charts = list(dashboard.line_charts) + [dashboard.bar_chart]
    width = max(c.frame.width for c in charts)
    height = sum(c.frame.height for c in charts)

    fig = Figure(figsize=(width / DPI, height / DPI), dpi=DPI, facecolor=BG)
    axes = fig.subplots(len(charts), 1, gridspec_kw={"hspace": 0.05})
    fig.subplots_adjust(left=0, right=1, top=1, bottom=0)
    for ax, chart in zip(axes, charts):
        if isinstance(chart, BarChart):
            draw_bar_chart(ax, chart)
        else:
            draw_line_chart(ax, chart)
        ax.set_title(chart.title, color=TEXT, fontsize=10, loc="right", y=0.88)

    try:
        os.makedirs(os.path.dirname(path) or ".", exist_ok=True)
        fig.savefig(path, facecolor=BG)
    except OSError as e:
        raise StorageUnavailable(f"Cannot write chart image {path}", detail=str(e)) from e
    logger.info("dashboard_rendered", path=path, charts=len(charts), records=dashboard.record_count)
    return path
