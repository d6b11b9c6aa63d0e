from __future__ import annotations

from dataclasses import dataclass
from typing import Callable, Sequence

import numpy as np
from pydantic import BaseModel, Field

from healthlog.charts.geometry import Frame, LegendItem, TextLabel, legend_item, scale_linear
from healthlog.records.log_models import DailyLog

BAR_PAD = 58
BAR_GAP = 16
MIN_BAR_WIDTH = 22


@dataclass(frozen=True)
class BarGroup:
    label: str
    count: Callable[[DailyLog], int]


class Bar(BaseModel):
    label: str
    count: int
    color: str
    hue: int
    x: float
    y: float
    width: float
    height: float
    value_label: TextLabel
    category_label: TextLabel


class BarChart(BaseModel):
    key: str = ""
    title: str = ""
    y_label: str = "Count"
    frame: Frame
    max_count: int = 1
    bar_width: float = 0
    gap: float = BAR_GAP
    y_ticks: list[TextLabel] = Field(default_factory=list)
    bars: list[Bar] = Field(default_factory=list)
    legend: list[LegendItem] = Field(default_factory=list)


def group_totals(logs: Sequence[DailyLog], groups: Sequence[BarGroup]) -> list[int]:
    return [int(np.sum([g.count(log) for log in logs], dtype=np.int64)) for g in groups]


def build_bar_chart(
    logs_asc: Sequence[DailyLog],
    groups: Sequence[BarGroup],
    *,
    key: str = "",
    title: str = "",
    width: int = 900,
    height: int = 300,
    pad: float = BAR_PAD,
    gap: float = BAR_GAP,
    min_bar_width: float = MIN_BAR_WIDTH,
) -> BarChart:
    """
    One bar per group, height proportional to the group's total over
    ``logs_asc``. The tallest bar fills the plot; an all-zero chart keeps
    a denominator of 1 so every bar is simply flat.
    """
    totals = group_totals(logs_asc, groups)
    max_count = max([1, *totals])
    frame = Frame(width=width, height=height, pad=pad)

    n = len(groups)
    bar_area = width - 2 * pad
    bar_width = max(min_bar_width, (bar_area - gap * (n - 1)) / n) if n else 0.0
    h_scale = scale_linear(0, max_count, 0, height - 2 * pad)

    y_ticks = [
        TextLabel(text=str(max_count), x=12, y=frame.top + 4),
        TextLabel(text="0", x=18, y=frame.bottom + 4),
    ]

    bars, legend = [], []
    for idx, (group, count) in enumerate(zip(groups, totals)):
        item = legend_item(group.label)
        x = frame.left + idx * (bar_width + gap)
        bar_h = h_scale(count)
        y = frame.bottom - bar_h
        center = x + bar_width / 2
        bars.append(Bar(
            label=group.label, count=count, color=item.color, hue=item.hue,
            x=x, y=y, width=bar_width, height=bar_h,
            value_label=TextLabel(text=str(count), x=center, y=max(frame.top + 14, y - 6), anchor="middle"),
            category_label=TextLabel(text=group.label, x=center, y=frame.bottom + 20, anchor="middle"),
        ))
        legend.append(item)

    return BarChart(key=key, title=title, frame=frame, max_count=max_count,
                    bar_width=bar_width, gap=gap, y_ticks=y_ticks, bars=bars, legend=legend)
