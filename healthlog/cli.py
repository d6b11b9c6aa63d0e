from __future__ import annotations

import argparse
import json
import os
import sys
from datetime import date
from typing import Any, Dict, List, Optional

from healthlog.charts.dashboard import CHART_RANGES, build_dashboard
from healthlog.records.catalog import EXERCISE_IDS, EXERCISES, SUPPLEMENT_IDS, supplements_by_group
from healthlog.records.log_analytics import LogAnalytics
from healthlog.records.log_io import EXPORT_FORMATS, default_export_path, read_import_file, write_export
from healthlog.records.log_models import MEASUREMENT_FIELDS, DailyLog, safe_num, validate_date
from healthlog.records.log_query import ALL_TIME, exercises_done, supplements_taken
from healthlog.records.log_store import LogStore
from healthlog.utils.config import get_settings
from healthlog.utils.exceptions import HealthLogError, ImportAborted, ValidationError
from healthlog.utils.logger import get_logger, setup_logging

logger = get_logger(__name__)


def eprint(*args: Any) -> None:
    print(*args, file=sys.stderr)


def _print_json(data: Any) -> None:
    print(json.dumps(data, indent=2, ensure_ascii=False, default=str))


def _count_or_all(raw: str) -> int:
    if raw.lower() == "all":
        return ALL_TIME
    try:
        days = int(raw)
    except ValueError:
        raise argparse.ArgumentTypeError(f"expected a number or 'all', got {raw!r}")
    if days < 1:
        raise argparse.ArgumentTypeError("value must be at least 1")
    return days


def _check_ids(ids: List[str], catalog_ids, kind: str) -> None:
    unknown = [i for i in ids if i not in catalog_ids]
    if unknown:
        raise ValidationError(f"Unknown {kind} id(s): {', '.join(unknown)}",
                              detail=f"known: {', '.join(catalog_ids)}")


def _parse_assignments(pairs: List[str]) -> Dict[str, str]:
    out = {}
    for pair in pairs:
        name, sep, value = pair.partition("=")
        if not sep or name not in MEASUREMENT_FIELDS:
            raise ValidationError(f"Bad measurement assignment {pair!r}",
                                  detail=f"use FIELD=VALUE with FIELD in {', '.join(MEASUREMENT_FIELDS)}")
        if value.strip() and safe_num(value) is None:
            raise ValidationError(f"{name} must be a finite number", detail=repr(value))
        out[name] = value
    return out


def apply_edits(log: DailyLog, args: argparse.Namespace) -> DailyLog:
    """Apply ``log`` subcommand options to a day's log in place."""
    _check_ids(args.take + args.untake, SUPPLEMENT_IDS, "supplement")
    _check_ids(args.exercise + args.skip_exercise, EXERCISE_IDS, "exercise")
    for sid in args.take:
        log.supplements[sid] = True
    for sid in args.untake:
        log.supplements[sid] = False
    for eid in args.exercise:
        log.exercises[eid] = True
    for eid in args.skip_exercise:
        log.exercises[eid] = False
    if args.custom is not None:
        log.custom_vitamin_name = args.custom
    if args.custom_taken is not None:
        log.custom_vitamin_taken = args.custom_taken
    if args.fasted is not None:
        log.fasted = args.fasted
    if args.water_fasted is not None:
        log.water_fasted = args.water_fasted
    for name, value in _parse_assignments(args.set).items():
        setattr(log, name, value)
    for name in args.unset:
        if name not in MEASUREMENT_FIELDS:
            raise ValidationError(f"Unknown measurement {name!r}")
        setattr(log, name, None)
    return log.normalize()


# ─── COMMANDS ───────────────────────────────────────────────────

def cmd_show(store: LogStore, args) -> int:
    log_date = validate_date(args.date or date.today().isoformat())
    _print_json(LogAnalytics(store).day_summary(log_date))
    return 0


def cmd_log(store: LogStore, args) -> int:
    log_date = validate_date(args.date or date.today().isoformat())
    log = apply_edits(store.get_or_empty(log_date), args)
    store.put(log)
    _print_json(LogAnalytics.summarize(log))
    eprint(f"Saved {log_date} locally.")
    return 0


def cmd_delete(store: LogStore, args) -> int:
    log_date = validate_date(args.date)
    if store.delete(log_date):
        eprint(f"Deleted {log_date}.")
        return 0
    eprint(f"Nothing to delete for {log_date}.")
    return 0


def cmd_history(store: LogStore, args) -> int:
    logs = LogAnalytics(store).history(args.search, args.limit)
    if not logs:
        print("No logs found.")
        return 0
    for log in logs:
        print(f"{log.date}  {supplements_taken(log)} supplements • "
              f"{exercises_done(log)} exercises • Fasted: {'Yes' if log.fasted else 'No'}")
    return 0


def cmd_export(store: LogStore, args) -> int:
    path = args.out or default_export_path(get_settings().export_dir, args.format)
    print(write_export(store.list_all(), args.format, path))
    return 0


def cmd_import(store: LogStore, args) -> int:
    items = read_import_file(args.file)
    try:
        report = store.import_items(items)
    except ImportAborted as e:
        eprint(f"Import stopped after {e.imported} log(s): {e}")
        return 1
    print(f"Imported {report.imported} log(s).")
    if report.skipped:
        eprint(f"Skipped {report.skipped} item(s) without a usable date.")
    return 0


def cmd_clear(store: LogStore, args) -> int:
    if not args.yes:
        eprint("Refusing to delete without --yes.")
        return 2
    if args.all:
        removed = store.clear_all()
        eprint(f"All data cleared ({removed} log(s)).")
        return 0
    if not args.from_date or not args.to_date:
        raise ValidationError("Pick both --from and --to dates, or --all")
    removed = store.clear_range(args.from_date, args.to_date)
    eprint(f"Range {args.from_date}..{args.to_date} cleared ({removed} log(s)).")
    return 0


def cmd_charts(store: LogStore, args) -> int:
    settings = get_settings()
    days = args.days if args.days is not None else settings.chart_days
    dashboard = build_dashboard(store.list_all(), days,
                                width=settings.chart_width, height=settings.chart_height)
    if args.json:
        print(dashboard.model_dump_json(indent=2))
        return 0
    from healthlog.charts.render import render_dashboard_png

    path = args.out or os.path.join(settings.export_dir, f"charts-{date.today().isoformat()}.png")
    print(render_dashboard_png(dashboard, path))
    return 0


def cmd_stats(store: LogStore, args) -> int:
    days = args.days if args.days is not None else get_settings().chart_days
    analytics = LogAnalytics(store)
    _print_json({
        "days": days,
        "adherence": analytics.adherence_totals(days),
        "measurements": analytics.measurement_stats(days),
    })
    return 0


def cmd_status(store: LogStore, args) -> int:
    _print_json({"db_path": store.db_path, **store.get_db_stats()})
    return 0


def cmd_catalog(store: LogStore, args) -> int:
    for group, items in supplements_by_group().items():
        print(f"{group.value}:")
        for item in items:
            print(f"  {item.id:<22} {item.name}")
    print("Exercise:")
    for item in EXERCISES:
        print(f"  {item.id:<22} {item.name}")
    return 0


COMMANDS = {
    "show": cmd_show,
    "log": cmd_log,
    "delete": cmd_delete,
    "history": cmd_history,
    "export": cmd_export,
    "import": cmd_import,
    "clear": cmd_clear,
    "charts": cmd_charts,
    "stats": cmd_stats,
    "status": cmd_status,
    "catalog": cmd_catalog,
}


def build_parser() -> argparse.ArgumentParser:
    settings = get_settings()
    ap = argparse.ArgumentParser(prog="healthlog", description="Offline daily health log.")
    ap.add_argument("--db", default=None, help=f"SQLite database path (default: {settings.db_path})")
    sub = ap.add_subparsers(dest="command", required=True)

    p = sub.add_parser("show", help="Show one day's log (default: today)")
    p.add_argument("date", nargs="?", default=None, help="YYYY-MM-DD")

    p = sub.add_parser("log", help="Create or update a day's log")
    p.add_argument("date", nargs="?", default=None, help="YYYY-MM-DD (default: today)")
    p.add_argument("--take", nargs="+", default=[], metavar="ID", help="Mark supplements taken")
    p.add_argument("--untake", nargs="+", default=[], metavar="ID", help="Mark supplements not taken")
    p.add_argument("--exercise", nargs="+", default=[], metavar="ID", help="Mark exercises done")
    p.add_argument("--skip-exercise", nargs="+", default=[], metavar="ID", help="Mark exercises not done")
    p.add_argument("--custom", default=None, metavar="NAME", help="Name of an extra vitamin for the day")
    p.add_argument("--custom-taken", action=argparse.BooleanOptionalAction, default=None)
    p.add_argument("--fasted", action=argparse.BooleanOptionalAction, default=None)
    p.add_argument("--water-fasted", action=argparse.BooleanOptionalAction, default=None)
    p.add_argument("--set", nargs="+", default=[], metavar="FIELD=VALUE", help="Set measurements")
    p.add_argument("--unset", nargs="+", default=[], metavar="FIELD", help="Clear measurements")

    p = sub.add_parser("delete", help="Delete one day's log")
    p.add_argument("date", help="YYYY-MM-DD")

    p = sub.add_parser("history", help="List logs, newest first")
    p.add_argument("--search", default="", help="Match date, vitamin or exercise names")
    p.add_argument("--limit", type=_count_or_all, default=settings.history_limit,
                   help=f"Max rows, or 'all' (default: {settings.history_limit})")

    p = sub.add_parser("export", help="Export every log to JSON or CSV")
    p.add_argument("format", choices=EXPORT_FORMATS)
    p.add_argument("--out", default=None, help="Output path (default: export dir, dated file name)")

    p = sub.add_parser("import", help="Merge logs from a JSON (or exported CSV) file")
    p.add_argument("file")

    p = sub.add_parser("clear", help="Delete all logs or an inclusive date range")
    p.add_argument("--all", action="store_true")
    p.add_argument("--from", dest="from_date", default=None, help="YYYY-MM-DD")
    p.add_argument("--to", dest="to_date", default=None, help="YYYY-MM-DD")
    p.add_argument("--yes", action="store_true", help="Confirm deletion")

    ranges = ", ".join("all" if r == ALL_TIME else str(r) for r in CHART_RANGES)
    p = sub.add_parser("charts", help="Render the chart page")
    p.add_argument("--days", type=_count_or_all, default=None, help=f"Window in days ({ranges})")
    p.add_argument("--out", default=None, help="PNG output path")
    p.add_argument("--json", action="store_true", help="Print chart geometry as JSON instead")

    p = sub.add_parser("stats", help="Adherence totals and measurement stats")
    p.add_argument("--days", type=_count_or_all, default=None)

    sub.add_parser("status", help="Database statistics")
    sub.add_parser("catalog", help="List supplement and exercise ids")
    return ap


def main(argv: Optional[List[str]] = None) -> int:
    args = build_parser().parse_args(argv)
    setup_logging()
    try:
        store = LogStore(args.db or get_settings().db_path)
        try:
            return COMMANDS[args.command](store, args)
        finally:
            store.close()
    except HealthLogError as e:
        logger.error("command_failed", command=args.command, error=str(e))
        eprint(f"Error: {e}")
        return 1


if __name__ == "__main__":
    sys.exit(main())
