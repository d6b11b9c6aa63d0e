"""
The chart page: five measurement line charts plus the adherence bars,
all over the same trailing day window.
"""

from __future__ import annotations

from dataclasses import dataclass
from datetime import date
from operator import attrgetter
from typing import Iterable, Optional, Tuple

from pydantic import BaseModel, Field

from healthlog.charts.bar_chart import BarChart, BarGroup, build_bar_chart
from healthlog.charts.line_chart import LineChart, SeriesSpec, build_line_chart
from healthlog.records.log_models import DailyLog
from healthlog.records.log_query import (
    ALL_TIME,
    exercises_done,
    last_n_days,
    sort_by_date_asc,
    supplements_taken,
)

CHART_RANGES = (7, 14, 30, 90, 180, 365, ALL_TIME)


@dataclass(frozen=True)
class LineChartSpec:
    key: str
    title: str
    y_label: str
    series: Tuple[SeriesSpec, ...]


LINE_CHARTS: Tuple[LineChartSpec, ...] = (
    LineChartSpec("sugar", "Blood sugar", "mmol/L", (
        SeriesSpec("Fasting", attrgetter("fasting_blood_sugar")),
        SeriesSpec("Pre-dinner", attrgetter("pre_dinner_sugar")),
        SeriesSpec("Post-dinner", attrgetter("post_dinner_sugar")),
    )),
    LineChartSpec("weight_fat", "Weight & fat", "kg / %", (
        SeriesSpec("Weight (kg)", attrgetter("weight")),
        SeriesSpec("Fat (%)", attrgetter("fat_percentage")),
    )),
    LineChartSpec("waist", "Waist", "cm", (
        SeriesSpec("Waist (cm)", attrgetter("waist_size")),
    )),
    LineChartSpec("blood_pressure", "Blood pressure", "mmHg", (
        SeriesSpec("Systolic", attrgetter("blood_pressure_systolic")),
        SeriesSpec("Diastolic", attrgetter("blood_pressure_diastolic")),
    )),
    LineChartSpec("grip", "Grip strength", "kg", (
        SeriesSpec("Grip Left", attrgetter("grip_strength_left")),
        SeriesSpec("Grip Right", attrgetter("grip_strength_right")),
    )),
)

ADHERENCE_GROUPS: Tuple[BarGroup, ...] = (
    BarGroup("Supplements checked", supplements_taken),
    BarGroup("Exercises checked", exercises_done),
    BarGroup("Fasted days", lambda log: 1 if log.fasted else 0),
    BarGroup("Water fasted days", lambda log: 1 if log.water_fasted else 0),
)


class Dashboard(BaseModel):
    days: int
    start_date: Optional[str] = None
    end_date: Optional[str] = None
    record_count: int = 0
    line_charts: list[LineChart] = Field(default_factory=list)
    bar_chart: BarChart


def build_dashboard(
    logs: Iterable[DailyLog],
    days: Optional[int] = 30,
    *,
    today: Optional[date] = None,
    width: int = 900,
    height: int = 300,
) -> Dashboard:
    window = last_n_days(sort_by_date_asc(logs), days, today)
    line_charts = [
        build_line_chart(window, chart_def.series, chart_def.y_label, key=chart_def.key,
                         title=chart_def.title, width=width, height=height)
        for chart_def in LINE_CHARTS
    ]
    bar_chart = build_bar_chart(window, ADHERENCE_GROUPS, key="activity", title="Activity counts",
                                width=width, height=height)
    return Dashboard(
        days=ALL_TIME if days is None else days,
        start_date=window[0].date if window else None,
        end_date=window[-1].date if window else None,
        record_count=len(window),
        line_charts=line_charts,
        bar_chart=bar_chart,
    )
