"""
Pure query and tally helpers over an in-memory snapshot of DailyLogs.

Nothing here touches storage: callers pass whatever ``LogStore.list_all``
returned. ISO date strings sort lexicographically in calendar order, so
sorting compares the strings directly.
"""

from __future__ import annotations

import math
from dataclasses import dataclass
from datetime import date, timedelta
from typing import Iterable, List, Mapping, Optional, Sequence

from healthlog.records.catalog import EXERCISE_IDS, EXERCISES, SUPPLEMENT_IDS, SUPPLEMENTS, CatalogItem
from healthlog.records.log_models import DailyLog

ALL_TIME = 99999
NO_LIMIT = 99999


@dataclass(frozen=True)
class CompletionSummary:
    taken: int
    total: int
    percentage: int

    def to_dict(self) -> dict:
        return {"taken": self.taken, "total": self.total, "percentage": self.percentage}


def sort_by_date_asc(logs: Iterable[DailyLog]) -> List[DailyLog]:
    return sorted(logs, key=lambda log: log.date)


def sort_by_date_desc(logs: Iterable[DailyLog]) -> List[DailyLog]:
    return sorted(logs, key=lambda log: log.date, reverse=True)


def last_n_days(logs_asc: Sequence[DailyLog], n: Optional[int],
                today: Optional[date] = None) -> List[DailyLog]:
    """Keep logs dated within the trailing ``n`` days, today included."""
    if n is None or n >= ALL_TIME:
        return list(logs_asc)
    today = today or date.today()
    cutoff = (today - timedelta(days=n - 1)).isoformat()
    return [log for log in logs_asc if log.date >= cutoff]


def limit_logs(logs_desc: Sequence[DailyLog], limit: Optional[int]) -> List[DailyLog]:
    if limit is None or limit >= NO_LIMIT:
        return list(logs_desc)
    return list(logs_desc[:max(0, limit)])


def count_true(checklist: Mapping[str, bool], catalog_ids: Sequence[str]) -> int:
    """Catalog ids marked True; ids outside the catalog never count."""
    return sum(1 for cid in catalog_ids if checklist.get(cid) is True)


def supplements_taken(log: DailyLog) -> int:
    taken = count_true(log.supplements, SUPPLEMENT_IDS)
    if log.has_custom_item and log.custom_vitamin_taken:
        taken += 1
    return taken


def supplements_possible(log: DailyLog) -> int:
    return len(SUPPLEMENT_IDS) + (1 if log.has_custom_item else 0)


def exercises_done(log: DailyLog) -> int:
    return count_true(log.exercises, EXERCISE_IDS)


def completion_percentage(taken: int, total: int) -> int:
    if total <= 0:
        return 0
    # half-up: 12.5 -> 13
    return int(math.floor(taken / total * 100 + 0.5))


def supplement_summary(log: DailyLog) -> CompletionSummary:
    taken = supplements_taken(log)
    total = supplements_possible(log)
    return CompletionSummary(taken=taken, total=total, percentage=completion_percentage(taken, total))


def _checked_names(checklist: Mapping[str, bool], catalog: Sequence[CatalogItem]) -> List[str]:
    return [item.name for item in catalog if checklist.get(item.id) is True]


def list_taken_supplements(log: DailyLog) -> List[str]:
    taken = _checked_names(log.supplements, SUPPLEMENTS)
    if log.has_custom_item and log.custom_vitamin_taken:
        taken.append(log.custom_vitamin_name)
    return taken


def list_done_exercises(log: DailyLog) -> List[str]:
    return _checked_names(log.exercises, EXERCISES)


def matches_search(log: DailyLog, query: str) -> bool:
    """Case-insensitive substring match on date, custom item, or checked item names."""
    if not query:
        return True
    q = query.strip().lower()
    if not q:
        return True
    if q in log.date.lower():
        return True
    if q in log.custom_vitamin_name.lower():
        return True
    if q in " ".join(list_taken_supplements(log)).lower():
        return True
    return q in " ".join(list_done_exercises(log)).lower()


def search_history(logs: Iterable[DailyLog], query: str = "",
                   limit: Optional[int] = NO_LIMIT) -> List[DailyLog]:
    """Newest first, truncated to ``limit``, then filtered by ``query``."""
    window = limit_logs(sort_by_date_desc(logs), limit)
    return [log for log in window if matches_search(log, query)]
