"""
Daily Log Storage Engine: SQLite-backed, one row per calendar date
==================================================================

Table:
  daily_logs: date is the primary key, so a write for an existing date
              replaces the previous log (upsert, never append).

Every mutation is a single transaction: a put either fully commits one
log or fails, and a range clear is one DELETE rather than a rewrite of
the surviving rows.
"""

from __future__ import annotations

import json
import os
import sqlite3
import threading
from dataclasses import dataclass
from datetime import datetime
from typing import Any, Dict, Iterable, List, Mapping, Optional, Union

from healthlog.records.log_models import DailyLog, is_valid_date, validate_date
from healthlog.utils.exceptions import ImportAborted, StorageUnavailable, ValidationError
from healthlog.utils.logger import get_logger

logger = get_logger(__name__)


@dataclass
class ImportReport:
    imported: int = 0
    skipped: int = 0

    def to_dict(self) -> dict:
        return {"imported": self.imported, "skipped": self.skipped}


class LogStore:
    """
    Durable date-keyed store of DailyLogs.
    Single writer, connection per thread.
    """

    def __init__(self, db_path: str = "data/healthlog.db"):
        self._db_path = db_path
        self._local = threading.local()
        try:
            os.makedirs(os.path.dirname(db_path) or ".", exist_ok=True)
        except OSError as e:
            raise StorageUnavailable(f"Cannot create database directory for {db_path}", detail=str(e)) from e
        self._init_db()
        logger.info("log_store_initialized", db_path=db_path)

    @property
    def db_path(self) -> str:
        return self._db_path

    def _get_conn(self) -> sqlite3.Connection:
        if getattr(self._local, "conn", None) is None:
            try:
                conn = sqlite3.connect(self._db_path, timeout=10)
                conn.row_factory = sqlite3.Row
                conn.execute("PRAGMA journal_mode=WAL")
                conn.execute("PRAGMA synchronous=NORMAL")
            except sqlite3.Error as e:
                raise StorageUnavailable(f"Cannot open log database {self._db_path}", detail=str(e)) from e
            self._local.conn = conn
        return self._local.conn

    def _init_db(self):
        conn = self._get_conn()
        try:
            conn.executescript("""
                CREATE TABLE IF NOT EXISTS daily_logs (
                    date        TEXT PRIMARY KEY,
                    log_id      TEXT NOT NULL,
                    updated_at  TEXT DEFAULT '',
                    data        TEXT DEFAULT '{}'
                );

                CREATE INDEX IF NOT EXISTS idx_dl_log_id ON daily_logs(log_id);
            """)
            conn.commit()
        except sqlite3.Error as e:
            raise StorageUnavailable("Cannot create daily_logs table", detail=str(e)) from e

    def _write(self, sql: str, params: tuple = ()) -> int:
        """Run one mutating statement in its own transaction; returns rowcount."""
        conn = self._get_conn()
        try:
            with conn:
                cur = conn.execute(sql, params)
            return cur.rowcount
        except sqlite3.Error as e:
            raise StorageUnavailable("Log database write failed", detail=str(e)) from e

    def _read(self, sql: str, params: tuple = ()) -> List[sqlite3.Row]:
        conn = self._get_conn()
        try:
            return conn.execute(sql, params).fetchall()
        except sqlite3.Error as e:
            raise StorageUnavailable("Log database read failed", detail=str(e)) from e

    @staticmethod
    def _row_to_log(row: sqlite3.Row) -> DailyLog:
        return DailyLog.from_dict(json.loads(row["data"]))

    def close(self) -> None:
        conn = getattr(self._local, "conn", None)
        if conn is not None:
            conn.close()
            self._local.conn = None

    # ─── SINGLE-DATE OPERATIONS ─────────────────────────────────

    def put(self, log: Union[DailyLog, Mapping[str, Any]]) -> DailyLog:
        """
        Insert or replace the log for ``log.date``. Returns the normalized log.

        A mapping without an ``id`` takes over the id already stored for
        its date, so repeating the same put leaves the row unchanged.
        """
        keep_stored_id = False
        if not isinstance(log, DailyLog):
            if not isinstance(log, Mapping):
                raise ValidationError("Log must be a DailyLog or a mapping", detail=type(log).__name__)
            keep_stored_id = not log.get("id")
            log = DailyLog.from_dict(log)
        validate_date(log.date)
        if keep_stored_id:
            rows = self._read("SELECT log_id FROM daily_logs WHERE date = ?", (log.date,))
            if rows:
                log.id = rows[0]["log_id"]
        log.normalize()

        d = log.to_dict()
        self._write("""
            INSERT OR REPLACE INTO daily_logs (date, log_id, updated_at, data)
            VALUES (?, ?, ?, ?)
        """, (d["date"], d["id"], datetime.now().isoformat(), json.dumps(d)))
        logger.debug("log_saved", date=log.date, log_id=log.id)
        return log

    def get(self, log_date: str) -> Optional[DailyLog]:
        """The log stored for ``log_date``, or None when the day has no entry."""
        rows = self._read("SELECT data FROM daily_logs WHERE date = ?", (log_date,))
        if rows:
            return self._row_to_log(rows[0])
        return None

    def get_or_empty(self, log_date: str) -> DailyLog:
        validate_date(log_date)
        return self.get(log_date) or DailyLog.empty(log_date)

    def delete(self, log_date: str) -> bool:
        removed = self._write("DELETE FROM daily_logs WHERE date = ?", (log_date,))
        if removed:
            logger.info("log_deleted", date=log_date)
        return removed > 0

    # ─── BULK OPERATIONS ────────────────────────────────────────

    def list_all(self) -> List[DailyLog]:
        """Every stored log. Order is not guaranteed; sort explicitly."""
        logs = []
        for row in self._read("SELECT data FROM daily_logs"):
            try:
                logs.append(self._row_to_log(row))
            except (ValueError, TypeError) as e:
                logger.error("log_row_unreadable", error=str(e))
        return logs

    def count(self) -> int:
        return self._read("SELECT COUNT(*) AS c FROM daily_logs")[0]["c"]

    def clear_all(self) -> int:
        removed = self._write("DELETE FROM daily_logs")
        logger.info("logs_cleared", removed=removed)
        return removed

    def clear_range(self, from_date: str, to_date: str) -> int:
        """Delete every log with ``from_date <= date <= to_date``."""
        validate_date(from_date, "from_date")
        validate_date(to_date, "to_date")
        if from_date > to_date:
            raise ValidationError("from_date must not be after to_date", detail=f"{from_date} > {to_date}")
        removed = self._write(
            "DELETE FROM daily_logs WHERE date >= ? AND date <= ?", (from_date, to_date))
        logger.info("log_range_cleared", from_date=from_date, to_date=to_date, removed=removed)
        return removed

    # ─── IMPORT ─────────────────────────────────────────────────

    def merge_item(self, raw: Mapping[str, Any]) -> DailyLog:
        """
        Merge one externally supplied item into the store.

        Layers: empty skeleton for the date, then the stored log (if any),
        then the incoming fields. Incoming wins field by field; checklist
        maps merge key by key.
        """
        log_date = raw.get("date")
        validate_date(log_date)
        merged = DailyLog.empty(log_date)
        existing = self.get(log_date)
        if existing is not None:
            merged = merged.overlay(existing.to_dict())
        merged = merged.overlay(raw)
        merged.date = log_date
        return self.put(merged)

    def import_items(self, items: Iterable[Any]) -> ImportReport:
        """
        Sequentially merge ``items``. Unusable items are skipped; a storage
        failure stops the loop with ImportAborted, keeping earlier items.
        """
        report = ImportReport()
        for index, raw in enumerate(items):
            if not isinstance(raw, Mapping) or not is_valid_date(raw.get("date")):
                report.skipped += 1
                logger.warning("import_item_skipped", index=index,
                               date=raw.get("date") if isinstance(raw, Mapping) else None)
                continue
            try:
                self.merge_item(raw)
            except StorageUnavailable as e:
                logger.error("import_aborted", index=index, imported=report.imported, error=str(e))
                raise ImportAborted("Import stopped by a storage failure",
                                    imported=report.imported, detail=e.detail) from e
            report.imported += 1
        logger.info("logs_imported", **report.to_dict())
        return report

    # ─── STATS ──────────────────────────────────────────────────

    def get_db_stats(self) -> Dict[str, Any]:
        """Database health metrics."""
        row = self._read("SELECT COUNT(*) AS c, MIN(date) AS first, MAX(date) AS last FROM daily_logs")[0]
        stats: Dict[str, Any] = {
            "logs": row["c"],
            "first_date": row["first"],
            "last_date": row["last"],
        }
        stats["db_size_bytes"] = os.path.getsize(self._db_path) if os.path.exists(self._db_path) else 0
        stats["db_size_mb"] = round(stats["db_size_bytes"] / 1048576, 2)
        return stats
