"""
Daily Log Records
=================

Architecture:
  catalog.py       Fixed supplement and exercise catalogs
  log_models.py    DailyLog dataclass and its normalization rules
  log_store.py     SQLite date-keyed store (upsert, delete, range clear, import merge)
  log_query.py     Pure sort / window / search / tally helpers
  log_analytics.py Store-bound history, summaries and measurement stats
  log_io.py        JSON and CSV import/export
"""

from healthlog.records.catalog import (
    EXERCISES,
    SUPPLEMENTS,
    CatalogItem,
    ItemGroup,
)
from healthlog.records.log_models import DailyLog
from healthlog.records.log_store import ImportReport, LogStore
from healthlog.records.log_analytics import LogAnalytics

__all__ = [
    # Catalog
    "CatalogItem", "ItemGroup", "SUPPLEMENTS", "EXERCISES",
    # Models
    "DailyLog",
    # Engines
    "LogStore", "ImportReport", "LogAnalytics",
]
