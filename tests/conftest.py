"""
Shared fixtures for the health log tests.

Every test gets its own SQLite file and log file under tmp_path, and
settings are reloaded from the environment so nothing touches ./data or
./logs.
"""

from __future__ import annotations

from datetime import date, timedelta

import pytest

from healthlog.records.log_models import DailyLog
from healthlog.records.log_store import LogStore
from healthlog.utils.config import reload_settings


TODAY = date(2024, 3, 15)


# ─────────────────────────────────────────────────────────
# Environment
# ─────────────────────────────────────────────────────────

@pytest.fixture(autouse=True)
def isolated_settings(tmp_path, monkeypatch):
    monkeypatch.setenv("HEALTHLOG_DB_PATH", str(tmp_path / "data" / "healthlog.db"))
    monkeypatch.setenv("HEALTHLOG_LOG_FILE", str(tmp_path / "logs" / "healthlog.log"))
    monkeypatch.setenv("HEALTHLOG_EXPORT_DIR", str(tmp_path / "exports"))
    settings = reload_settings()
    yield settings
    monkeypatch.undo()
    reload_settings()


@pytest.fixture
def store(tmp_path):
    s = LogStore(str(tmp_path / "store" / "logs.db"))
    yield s
    s.close()


# ─────────────────────────────────────────────────────────
# Sample data
# ─────────────────────────────────────────────────────────

def make_log(log_date: str, **fields) -> DailyLog:
    return DailyLog(date=log_date, **fields)


def day(offset: int, base: date = TODAY) -> str:
    """ISO date ``offset`` days before ``base``."""
    return (base - timedelta(days=offset)).isoformat()


@pytest.fixture
def sample_logs() -> list[DailyLog]:
    """Five days ending on TODAY with a mix of checklists and readings."""
    return [
        make_log(day(4), supplements={"vitamin_d3": True, "nac": True}, weight=82.4,
                 fasting_blood_sugar=5.6, exercises={"treadmill": True}),
        make_log(day(3), fasted=True, weight=82.0, blood_pressure_systolic=128,
                 blood_pressure_diastolic=82),
        make_log(day(2), custom_vitamin_name="Zinc", custom_vitamin_taken=True,
                 exercises={"weight_training": True, "foot_exercise": True}),
        make_log(day(1), water_fasted=True, fasted=True, weight=81.6, waist_size=94.5),
        make_log(day(0), supplements={"metformin": True}, grip_strength_left=38,
                 grip_strength_right=41, fasting_blood_sugar=5.2),
    ]


@pytest.fixture
def populated_store(store, sample_logs):
    for log in sample_logs:
        store.put(log)
    return store
