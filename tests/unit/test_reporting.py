"""
Unit tests for JSON payloads, settings and the command-line entry point.
"""

import json
from datetime import datetime, timedelta, timezone

import pytest

from swimtrack.cli import main
from swimtrack.config.settings import Settings, get_settings
from swimtrack.core.sessions.models import Lap, Session, SourceFormat
from swimtrack.core.stats import analyze
from swimtrack.reporting import SessionPayload, StatisticsReportPayload


BASE = datetime(2024, 1, 1, 7, 0, tzinfo=timezone.utc)


def history(count: int = 12) -> list[Session]:
    paces = [2.1, 2.0, 2.2, 1.9, 2.0, 2.3, 2.1, 1.8, 2.0, 2.1, 1.2, 2.0]
    return [
        Session(
            date=BASE + timedelta(days=i * 3),
            distance=1000,
            duration_minutes=paces[i] * 10,
            pace=paces[i],
            source=SourceFormat.COMPACT_CSV,
        )
        for i in range(count)
    ]


# ---------------------------------------------------------------------------
# Payloads
# ---------------------------------------------------------------------------

class TestPayloads:

    def test_session_payload_serializes(self):
        session = Session(
            date=BASE, distance=50, duration_minutes=1, source=SourceFormat.FIT,
            laps=(Lap(number=1, distance=25, duration_seconds=30, strokes=14, avg_pace=2.0),),
        )

        data = json.loads(SessionPayload.from_domain(session).model_dump_json())

        assert data["id"] == str(session.id)
        assert data["source"] == "fit"
        assert data["laps"][0]["strokes"] == 14
        assert data["swolf"] is None

    def test_report_references_sessions_by_id(self):
        sessions = history()
        report = analyze(sessions)

        payload = StatisticsReportPayload.from_domain(report)

        assert payload.session_count == 12
        flagged = payload.anomalies.anomalies[0]
        assert flagged.session.id in {s.id for s in sessions}
        assert flagged.metric == "pace"

    def test_insufficient_report_serializes(self):
        payload = StatisticsReportPayload.from_domain(analyze(history(2)))

        data = json.loads(payload.model_dump_json())

        assert data["anomalies"]["has_sufficient_data"] is False
        assert data["monthly"]["best_month"] is None


# ---------------------------------------------------------------------------
# Settings
# ---------------------------------------------------------------------------

class TestSettings:

    @pytest.fixture(autouse=True)
    def clear_cache(self):
        get_settings.cache_clear()
        yield
        get_settings.cache_clear()

    def test_defaults_match_analysis_defaults(self):
        settings = Settings(_env_file=None)

        config = settings.analysis_config

        assert config.lookback_days is None
        assert config.moderate_sigma == 2.0
        assert settings.session_gap == timedelta(minutes=5)
        assert settings.validate_thresholds() == []

    def test_environment_overrides(self, monkeypatch):
        monkeypatch.setenv("SESSION_GAP_MINUTES", "10")
        monkeypatch.setenv("LOOKBACK_DAYS", "90")

        settings = get_settings()

        assert settings.session_gap == timedelta(minutes=10)
        assert settings.analysis_config.lookback_days == 90
        assert settings.ingest_options.session_gap == timedelta(minutes=10)

    def test_validation_problems(self):
        settings = Settings(_env_file=None, swolf_band_min_m=70, default_timezone="Mars/Olympus")

        problems = settings.validate_thresholds()

        assert any("SWOLF_BAND_MIN_M" in p for p in problems)
        assert any("DEFAULT_TIMEZONE" in p for p in problems)

    def test_unknown_timezone_falls_back_to_utc(self):
        settings = Settings(_env_file=None, default_timezone="Mars/Olympus")

        assert settings.timezone_info is timezone.utc


# ---------------------------------------------------------------------------
# CLI
# ---------------------------------------------------------------------------

class TestCli:

    @pytest.fixture(autouse=True)
    def isolated(self, tmp_path, monkeypatch):
        monkeypatch.chdir(tmp_path)
        get_settings.cache_clear()
        yield
        get_settings.cache_clear()

    def test_ingest_prints_sessions(self, tmp_path, capsys):
        log = tmp_path / "log.csv"
        log.write_text("date,distance,duration,pace,strokes\n2024-01-05,1500,40,2.67,700\n")

        exit_code = main(["ingest", str(log)])

        output = json.loads(capsys.readouterr().out)
        assert exit_code == 0
        assert output[0]["source"] == "compact_csv"
        assert output[0]["sessions"][0]["distance"] == 1500

    def test_analyze_prints_report(self, tmp_path, capsys):
        log = tmp_path / "log.csv"
        rows = "\n".join(f"2024-01-{day:02d},1000,20,2.0,500" for day in range(1, 8))
        log.write_text("date,distance,duration,pace,strokes\n" + rows + "\n")

        exit_code = main(["analyze", str(log), "--lookback-days", "3650"])

        output = json.loads(capsys.readouterr().out)
        assert exit_code == 0
        assert output["lookback_days"] == 3650

    def test_all_files_failing_exits_non_zero(self, tmp_path, capsys):
        exit_code = main(["ingest", str(tmp_path / "missing.fit")])

        output = json.loads(capsys.readouterr().out)
        assert exit_code == 1
        assert output[0]["error"]
