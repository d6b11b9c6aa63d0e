from __future__ import annotations

from typing import Optional

from pydantic import Field
from pydantic_settings import BaseSettings


class Settings(BaseSettings):
    db_path: str = Field(default="data/healthlog.db", description="SQLite database holding the daily logs")

    log_level: str = Field(default="INFO", description="Logging level")
    log_file: str = Field(default="logs/healthlog.log", description="Log file path")

    chart_days: int = Field(default=30, description="Default chart window in days (99999 = all time)")
    chart_width: int = Field(default=900, description="Chart canvas width in pixels")
    chart_height: int = Field(default=300, description="Chart canvas height in pixels")
    history_limit: int = Field(default=30, description="Default number of history rows (99999 = no limit)")
    export_dir: str = Field(default="exports", description="Directory for JSON/CSV exports")

    model_config = {"env_file": ".env", "env_file_encoding": "utf-8", "env_prefix": "HEALTHLOG_", "extra": "ignore"}


_settings: Optional[Settings] = None


def get_settings() -> Settings:
    global _settings
    if _settings is None:
        _settings = Settings()
    return _settings


def reload_settings() -> Settings:
    global _settings
    _settings = Settings()
    return _settings
