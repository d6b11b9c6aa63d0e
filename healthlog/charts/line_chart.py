"""
Multi-series line chart geometry.

X positions come from record index (0..N-1), not calendar distance, so
days without a log close up rather than leaving a gap on the axis.
A reading that is absent drops out of its own series only; the remaining
points of that series still join up when there are at least two.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Callable, Optional, Sequence

from pydantic import BaseModel, Field

from healthlog.charts.geometry import (
    Frame,
    LegendItem,
    TextLabel,
    finite_or_none,
    grid_positions,
    legend_item,
    nice_min_max,
    scale_linear,
)
from healthlog.records.log_models import DailyLog

LINE_PAD = 48


@dataclass(frozen=True)
class SeriesSpec:
    label: str
    get: Callable[[DailyLog], Optional[float]]


class ChartPoint(BaseModel):
    index: int
    date: str
    value: float
    x: float
    y: float


class SeriesGeometry(BaseModel):
    label: str
    color: str
    hue: int
    points: list[ChartPoint] = Field(default_factory=list)
    has_line: bool = False      # False below two finite points; nothing is drawn


class LineChart(BaseModel):
    key: str = ""
    title: str = ""
    y_label: str = ""
    frame: Frame
    x_min: float = 0
    x_max: float = 1
    y_min: float = 0
    y_max: float = 1
    y_ticks: list[TextLabel] = Field(default_factory=list)
    x_labels: list[TextLabel] = Field(default_factory=list)
    series: list[SeriesGeometry] = Field(default_factory=list)
    legend: list[LegendItem] = Field(default_factory=list)


def build_line_chart(
    logs_asc: Sequence[DailyLog],
    series: Sequence[SeriesSpec],
    y_label: str,
    *,
    key: str = "",
    title: str = "",
    width: int = 900,
    height: int = 300,
    pad: float = LINE_PAD,
) -> LineChart:
    values = [s.get(log) for s in series for log in logs_asc]
    y_min, y_max = nice_min_max(values)
    x_min, x_max = 0, max(1, len(logs_asc) - 1)

    frame = Frame(width=width, height=height, pad=pad, grid_lines=grid_positions(height, pad))
    x_scale = scale_linear(x_min, x_max, frame.left, frame.right)
    y_scale = scale_linear(y_min, y_max, frame.bottom, frame.top)

    y_ticks = [
        TextLabel(text=f"{y_max:.1f}", x=6, y=frame.top + 4),
        TextLabel(text=f"{y_min:.1f}", x=6, y=frame.bottom + 4),
    ]
    x_labels = []
    if logs_asc:
        x_labels.append(TextLabel(text=logs_asc[0].date, x=frame.left, y=height - 14))
        x_labels.append(TextLabel(text=logs_asc[-1].date, x=frame.right, y=height - 14, anchor="end"))

    geoms, legend = [], []
    for series_def in series:
        item = legend_item(series_def.label)
        points = []
        for i, log in enumerate(logs_asc):
            value = finite_or_none(series_def.get(log))
            if value is None:
                continue
            points.append(ChartPoint(index=i, date=log.date, value=value,
                                     x=x_scale(i), y=y_scale(value)))
        geoms.append(SeriesGeometry(label=series_def.label, color=item.color, hue=item.hue,
                                    points=points, has_line=len(points) >= 2))
        legend.append(item)

    return LineChart(
        key=key, title=title, y_label=y_label, frame=frame,
        x_min=x_min, x_max=x_max, y_min=y_min, y_max=y_max,
        y_ticks=y_ticks, x_labels=x_labels, series=geoms, legend=legend,
    )
