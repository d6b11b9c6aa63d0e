"""
JSON and CSV serialization at the import/export boundary.

JSON export is an ascending array of full log dicts (the wire contract).
CSV export flattens every checklist to one 1/0 column per catalog id; a
CSV produced here can be parsed back by column position and imported.
"""

from __future__ import annotations

import csv
import io
import json
import os
from datetime import date
from typing import Any, Dict, Iterable, List, Optional

from healthlog.records.catalog import EXERCISE_IDS, SUPPLEMENT_IDS
from healthlog.records.log_models import FLAG_FIELDS, MEASUREMENT_FIELDS, DailyLog
from healthlog.records.log_query import sort_by_date_asc
from healthlog.utils.exceptions import StorageUnavailable, ValidationError
from healthlog.utils.logger import get_logger

logger = get_logger(__name__)

SUPPLEMENT_COLUMNS = [f"supp_{sid}" for sid in SUPPLEMENT_IDS]
EXERCISE_COLUMNS = [f"ex_{eid}" for eid in EXERCISE_IDS]

CSV_COLUMNS = [
    "id", "date",
    *SUPPLEMENT_COLUMNS,
    "custom_vitamin_name", "custom_vitamin_taken",
    *EXERCISE_COLUMNS,
    *FLAG_FIELDS,
    *MEASUREMENT_FIELDS,
]

EXPORT_FORMATS = ("json", "csv")


def _flag(value: bool) -> str:
    return "1" if value else "0"


def _fmt_num(value: Optional[float]) -> str:
    if value is None:
        return ""
    if float(value).is_integer():
        return str(int(value))
    return repr(float(value))


# ─── JSON ─────────────────────────────────────────────────────

def export_json(logs: Iterable[DailyLog]) -> str:
    return json.dumps([log.to_dict() for log in sort_by_date_asc(logs)], indent=2, ensure_ascii=False)


def parse_json(text: str) -> List[Any]:
    """Decode an import file: a single log object or an array of them."""
    try:
        data = json.loads(text)
    except json.JSONDecodeError as e:
        raise ValidationError("Import file is not valid JSON", detail=str(e)) from e
    if isinstance(data, dict):
        return [data]
    if isinstance(data, list):
        return data
    raise ValidationError("Import JSON must be an object or an array", detail=type(data).__name__)


# ─── CSV ──────────────────────────────────────────────────────

def csv_row(log: DailyLog) -> List[str]:
    row = [log.id, log.date]
    row.extend(_flag(log.supplements.get(sid, False)) for sid in SUPPLEMENT_IDS)
    row.append(log.custom_vitamin_name)
    row.append(_flag(log.custom_vitamin_taken))
    row.extend(_flag(log.exercises.get(eid, False)) for eid in EXERCISE_IDS)
    row.extend(_flag(getattr(log, f)) for f in FLAG_FIELDS)
    row.extend(_fmt_num(getattr(log, f)) for f in MEASUREMENT_FIELDS)
    return row


def export_csv(logs: Iterable[DailyLog]) -> str:
    buf = io.StringIO()
    writer = csv.writer(buf, lineterminator="\n", quoting=csv.QUOTE_MINIMAL)
    writer.writerow(CSV_COLUMNS)
    for log in sort_by_date_asc(logs):
        writer.writerow(csv_row(log))
    return buf.getvalue().rstrip("\n")


def parse_csv(text: str) -> List[Dict[str, Any]]:
    """
    Read an exported CSV back into raw log dicts, by column position.
    Rows with the wrong number of cells are skipped.
    """
    # no cell can be longer than the whole file
    if len(text) >= csv.field_size_limit():
        csv.field_size_limit(len(text) + 1)
    try:
        return _read_csv_items(text)
    except csv.Error as e:
        raise ValidationError("CSV import file is malformed", detail=str(e)) from e


def _read_csv_items(text: str) -> List[Dict[str, Any]]:
    reader = csv.reader(io.StringIO(text))
    header = next(reader, None)
    if header is None:
        raise ValidationError("CSV import file is empty")
    if len(header) != len(CSV_COLUMNS) or header[:2] != ["id", "date"]:
        raise ValidationError("CSV header does not match the export layout",
                              detail=f"{len(header)} columns, expected {len(CSV_COLUMNS)}")

    n_supp = len(SUPPLEMENT_IDS)
    n_ex = len(EXERCISE_IDS)
    items: List[Dict[str, Any]] = []
    for line_no, cells in enumerate(reader, start=2):
        if not cells:
            continue
        if len(cells) != len(CSV_COLUMNS):
            logger.warning("csv_row_skipped", line=line_no, cells=len(cells))
            continue
        pos = 2
        supplements = {sid: cells[pos + i] == "1" for i, sid in enumerate(SUPPLEMENT_IDS)}
        pos += n_supp
        custom_name, custom_taken = cells[pos], cells[pos + 1] == "1"
        pos += 2
        exercises = {eid: cells[pos + i] == "1" for i, eid in enumerate(EXERCISE_IDS)}
        pos += n_ex
        item: Dict[str, Any] = {
            "id": cells[0],
            "date": cells[1],
            "supplements": supplements,
            "custom_vitamin_name": custom_name,
            "custom_vitamin_taken": custom_taken,
            "exercises": exercises,
        }
        for flag in FLAG_FIELDS:
            item[flag] = cells[pos] == "1"
            pos += 1
        for name in MEASUREMENT_FIELDS:
            item[name] = cells[pos] or None
            pos += 1
        items.append(item)
    return items


# ─── FILES ────────────────────────────────────────────────────

def default_export_path(export_dir: str, fmt: str, today: Optional[date] = None) -> str:
    stamp = (today or date.today()).isoformat()
    return os.path.join(export_dir, f"health-tracker-export-{stamp}.{fmt}")


def write_export(logs: Iterable[DailyLog], fmt: str, path: str) -> str:
    if fmt not in EXPORT_FORMATS:
        raise ValidationError(f"Unknown export format {fmt!r}", detail=f"choose one of {EXPORT_FORMATS}")
    text = export_json(logs) if fmt == "json" else export_csv(logs)
    try:
        os.makedirs(os.path.dirname(path) or ".", exist_ok=True)
        with open(path, "w", encoding="utf-8", newline="") as f:
            f.write(text)
    except OSError as e:
        raise StorageUnavailable(f"Cannot write export file {path}", detail=str(e)) from e
    logger.info("logs_exported", format=fmt, path=path)
    return path


def read_import_file(path: str) -> List[Any]:
    """Raw import items from a .json or .csv file."""
    try:
        with open(path, "r", encoding="utf-8", newline="") as f:
            text = f.read()
    except (OSError, UnicodeDecodeError) as e:
        raise ValidationError(f"Cannot read import file {path}", detail=str(e)) from e
    if path.lower().endswith(".csv"):
        return parse_csv(text)
    return parse_json(text)
