"""
Log Analytics: history view, day summaries and chart input
==========================================================

Thin layer binding the pure helpers in ``log_query`` to a LogStore
snapshot. Each call reads the full record set once.
"""

from __future__ import annotations

from datetime import date
from typing import Any, Dict, List, Optional, Sequence

import pandas as pd

from healthlog.records import log_query as q
from healthlog.records.log_models import MEASUREMENT_FIELDS, DailyLog
from healthlog.records.log_store import LogStore


class LogAnalytics:
    """
    Read-side views over the store.
    Used by the CLI for history listings, single-day summaries and charts.
    """

    def __init__(self, store: LogStore):
        self._store = store

    def history(self, query: str = "", limit: Optional[int] = q.NO_LIMIT) -> List[DailyLog]:
        return q.search_history(self._store.list_all(), query, limit)

    def window(self, days: Optional[int], today: Optional[date] = None) -> List[DailyLog]:
        """Ascending logs inside the trailing ``days`` window."""
        return q.last_n_days(q.sort_by_date_asc(self._store.list_all()), days, today)

    def day_summary(self, log_date: str) -> Dict[str, Any]:
        log = self._store.get_or_empty(log_date)
        return self.summarize(log)

    @staticmethod
    def summarize(log: DailyLog) -> Dict[str, Any]:
        completion = q.supplement_summary(log)
        return {
            "date": log.date,
            "supplements": completion.to_dict(),
            "supplements_taken": q.list_taken_supplements(log),
            "exercises_done": q.list_done_exercises(log),
            "exercise_count": q.exercises_done(log),
            "fasted": log.fasted,
            "water_fasted": log.water_fasted,
            "measurements": {k: v for k, v in log.measurements().items() if v is not None},
        }

    def adherence_totals(self, days: Optional[int], today: Optional[date] = None) -> Dict[str, int]:
        logs = self.window(days, today)
        return {
            "days_logged": len(logs),
            "supplements_checked": sum(q.supplements_taken(log) for log in logs),
            "exercises_checked": sum(q.exercises_done(log) for log in logs),
            "fasted_days": sum(1 for log in logs if log.fasted),
            "water_fasted_days": sum(1 for log in logs if log.water_fasted),
        }

    def measurement_stats(self, days: Optional[int], today: Optional[date] = None) -> Dict[str, Dict[str, Any]]:
        """Per-measurement count/min/max/mean/latest over the window; unmeasured fields omitted."""
        frame = measurement_frame(self.window(days, today))
        stats: Dict[str, Dict[str, Any]] = {}
        for name in MEASUREMENT_FIELDS:
            col = frame[name].dropna()
            if col.empty:
                continue
            stats[name] = {
                "count": int(col.count()),
                "min": float(col.min()),
                "max": float(col.max()),
                "mean": round(float(col.mean()), 2),
                "latest": float(col.iloc[-1]),
                "latest_date": col.index[-1],
            }
        return stats


def measurement_frame(logs: Sequence[DailyLog]) -> pd.DataFrame:
    """Date-indexed frame of measurements; absent readings are NaN."""
    rows = [{"date": log.date, **log.measurements()} for log in logs]
    frame = pd.DataFrame(rows, columns=["date", *MEASUREMENT_FIELDS])
    frame[list(MEASUREMENT_FIELDS)] = frame[list(MEASUREMENT_FIELDS)].astype(float)
    return frame.set_index("date").sort_index()
