"""
End-to-end tests for the healthlog command line.
"""

from __future__ import annotations

import json

import pytest

from healthlog.cli import build_parser, main
from healthlog.records.log_query import ALL_TIME
from healthlog.records.log_store import LogStore


@pytest.fixture
def db(tmp_path):
    return str(tmp_path / "cli.db")


def run(db, *args):
    return main(["--db", db, *args])


def stored(db, log_date):
    s = LogStore(db)
    try:
        return s.get(log_date)
    finally:
        s.close()


class TestLogAndShow:

    def test_log_creates_entry(self, db, capsys):
        code = run(db, "log", "2024-01-05", "--take", "nac", "vitamin_d3", "--exercise", "treadmill",
                   "--fasted", "--set", "weight=80.5", "fasting_blood_sugar=5.4")
        assert code == 0
        summary = json.loads(capsys.readouterr().out)
        assert summary["supplements"]["taken"] == 2
        assert summary["exercise_count"] == 1
        log = stored(db, "2024-01-05")
        assert log.supplements["nac"] is True
        assert log.fasted is True
        assert log.weight == 80.5

    def test_log_updates_in_place(self, db):
        run(db, "log", "2024-01-05", "--take", "nac", "--set", "weight=80")
        first_id = stored(db, "2024-01-05").id
        run(db, "log", "2024-01-05", "--untake", "nac", "--take", "tmg", "--unset", "weight", "--no-fasted")
        log = stored(db, "2024-01-05")
        assert log.id == first_id
        assert log.supplements["nac"] is False
        assert log.supplements["tmg"] is True
        assert log.weight is None

    def test_custom_item(self, db, capsys):
        run(db, "log", "2024-01-05", "--custom", "Zinc", "--custom-taken")
        summary = json.loads(capsys.readouterr().out)
        assert summary["supplements"]["total"] == 23
        assert "Zinc" in summary["supplements_taken"]

    def test_unknown_id_rejected(self, db, capsys):
        assert run(db, "log", "2024-01-05", "--take", "unicorn_dust") == 1
        assert "Error" in capsys.readouterr().err
        assert stored(db, "2024-01-05") is None

    @pytest.mark.parametrize("pair", ["weight", "height=180", "weight=abc"])
    def test_bad_measurement_rejected(self, db, pair):
        assert run(db, "log", "2024-01-05", "--set", pair) == 1

    def test_bad_date_rejected(self, db):
        assert run(db, "log", "2024-02-30") == 1

    def test_show_missing_day(self, db, capsys):
        assert run(db, "show", "2024-01-05") == 0
        summary = json.loads(capsys.readouterr().out)
        assert summary["supplements"] == {"taken": 0, "total": 22, "percentage": 0}


class TestHistoryAndDelete:

    def test_history_newest_first(self, db, capsys):
        for d in ("2024-01-01", "2024-01-03", "2024-01-02"):
            run(db, "log", d)
        capsys.readouterr()
        run(db, "history", "--limit", "all")
        lines = capsys.readouterr().out.strip().splitlines()
        assert [line.split()[0] for line in lines] == ["2024-01-03", "2024-01-02", "2024-01-01"]

    def test_history_empty(self, db, capsys):
        run(db, "history")
        assert "No logs found." in capsys.readouterr().out

    def test_delete(self, db):
        run(db, "log", "2024-01-01")
        assert run(db, "delete", "2024-01-01") == 0
        assert stored(db, "2024-01-01") is None
        assert run(db, "delete", "2024-01-01") == 0


class TestClear:

    def test_requires_confirmation(self, db):
        run(db, "log", "2024-01-01")
        assert run(db, "clear", "--all") == 2
        assert stored(db, "2024-01-01") is not None

    def test_clear_range(self, db):
        for d in ("2024-01-01", "2024-01-02", "2024-01-03"):
            run(db, "log", d)
        assert run(db, "clear", "--from", "2024-01-02", "--to", "2024-01-03", "--yes") == 0
        assert stored(db, "2024-01-01") is not None
        assert stored(db, "2024-01-02") is None

    def test_clear_range_needs_both_bounds(self, db):
        assert run(db, "clear", "--from", "2024-01-02", "--yes") == 1

    def test_clear_all(self, db):
        run(db, "log", "2024-01-01")
        assert run(db, "clear", "--all", "--yes") == 0
        assert stored(db, "2024-01-01") is None


class TestExportImport:

    @pytest.mark.parametrize("fmt", ["json", "csv"])
    def test_export_then_import(self, db, tmp_path, capsys, fmt):
        run(db, "log", "2024-01-01", "--take", "nac", "--set", "weight=80")
        out = str(tmp_path / f"backup.{fmt}")
        assert run(db, "export", fmt, "--out", out) == 0
        capsys.readouterr()

        other = str(tmp_path / "other.db")
        assert run(other, "import", out) == 0
        assert "Imported 1 log(s)." in capsys.readouterr().out
        assert stored(other, "2024-01-01") == stored(db, "2024-01-01")

    def test_import_bad_file(self, db, tmp_path):
        path = tmp_path / "broken.json"
        path.write_text("{oops", encoding="utf-8")
        assert run(db, "import", str(path)) == 1

    def test_import_non_utf8_file(self, db, tmp_path, capsys):
        path = tmp_path / "latin1.json"
        path.write_bytes(b'[{"date": "2024-01-05", "custom_vitamin_name": "Zn\xff"}]')
        assert run(db, "import", str(path)) == 1
        assert "Error" in capsys.readouterr().err
        assert stored(db, "2024-01-05") is None

    def test_long_custom_name_survives_csv(self, db, tmp_path):
        name = "Magnesium glycinate, \"buffered\" " * 7000
        run(db, "log", "2024-01-05", "--custom", name, "--custom-taken")
        out = str(tmp_path / "long.csv")
        assert run(db, "export", "csv", "--out", out) == 0
        other = str(tmp_path / "other.db")
        assert run(other, "import", out) == 0
        assert stored(other, "2024-01-05") == stored(db, "2024-01-05")

    @pytest.mark.parametrize("command", [["export", "json"], ["charts"]])
    def test_output_path_is_directory(self, db, tmp_path, capsys, command):
        target = tmp_path / "a_directory"
        target.mkdir()
        assert run(db, *command, "--out", str(target)) == 1
        assert "Error" in capsys.readouterr().err


class TestChartsAndStats:

    def test_charts_json(self, db, capsys):
        run(db, "log", "--set", "weight=80")
        capsys.readouterr()
        assert run(db, "charts", "--days", "7", "--json") == 0
        data = json.loads(capsys.readouterr().out)
        assert data["days"] == 7
        assert len(data["line_charts"]) == 5
        assert data["record_count"] == 1

    def test_charts_png(self, db, tmp_path, capsys):
        out = str(tmp_path / "charts.png")
        assert run(db, "charts", "--days", "all", "--out", out) == 0
        with open(out, "rb") as f:
            assert f.read(4) == b"\x89PNG"

    def test_stats(self, db, capsys):
        run(db, "log", "--fasted", "--set", "weight=80")
        capsys.readouterr()
        run(db, "stats", "--days", "all")
        data = json.loads(capsys.readouterr().out)
        assert data["adherence"]["fasted_days"] == 1
        assert data["measurements"]["weight"]["latest"] == 80.0

    def test_status(self, db, capsys):
        run(db, "log", "2024-01-01")
        capsys.readouterr()
        run(db, "status")
        assert json.loads(capsys.readouterr().out)["logs"] == 1

    def test_catalog(self, db, capsys):
        run(db, "catalog")
        out = capsys.readouterr().out
        assert "Morning:" in out
        assert "treadmill" in out


class TestParser:

    def test_days_accepts_all(self):
        args = build_parser().parse_args(["charts", "--days", "all"])
        assert args.days == ALL_TIME

    @pytest.mark.parametrize("value", ["0", "-3", "week"])
    def test_days_rejects(self, value):
        with pytest.raises(SystemExit):
            build_parser().parse_args(["charts", "--days", value])
