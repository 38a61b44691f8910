"""
Unit tests for batch ingestion.

Files are written to pytest's tmp_path and ingested with asyncio.run, so the
real thread-offloaded read path is exercised.
"""

import asyncio
from datetime import timedelta

import pytest

from swimtrack.core.sessions.models import SourceFormat
from swimtrack.infrastructure.parsers import IngestOptions, ingest_content, ingest_paths


COMPACT_CSV = """date,distance,duration,pace,strokes,swolf,calories
2024-01-05,1500,40,2.67,700,38,320
2024-01-07,1000,30,3.0,500,40,250
"""

LAP_CSV = """startDate,endDate,value
2025-10-03 07:50:00 +0000,2025-10-03 07:50:30 +0000,25
2025-10-03 07:51:00 +0000,2025-10-03 07:51:30 +0000,25
2025-10-03 09:00:00 +0000,2025-10-03 09:00:30 +0000,25
"""

VO2_CSV = "date,vo2max\n2024-01-01,41.5\n"


@pytest.fixture
def files(tmp_path):
    paths = {
        "compact": tmp_path / "log.csv",
        "broken": tmp_path / "broken.tcx",
        "laps": tmp_path / "laps.csv",
        "vo2": tmp_path / "vo2.csv",
    }
    paths["compact"].write_text(COMPACT_CSV)
    paths["broken"].write_text("<TrainingCenterDatabase>")
    paths["laps"].write_text(LAP_CSV)
    paths["vo2"].write_text(VO2_CSV)
    return paths


class TestIngestPaths:
    """Tests for concurrent, per-file-isolated ingestion."""

    def test_bad_file_does_not_affect_others(self, files):
        """One malformed file still lets the good file's sessions through."""
        order = [files["broken"], files["compact"]]

        summary = asyncio.run(ingest_paths(order))

        assert [r.path for r in summary.results] == [str(p) for p in order]
        assert not summary.results[0].ok
        assert "broken.tcx" in summary.results[0].error
        assert len(summary.results[1].sessions) == 2
        assert not summary.all_failed

    def test_results_follow_input_order(self, files):
        order = [files["vo2"], files["laps"], files["compact"]]

        summary = asyncio.run(ingest_paths(order))

        assert [r.source for r in summary.results] == [
            SourceFormat.VO2MAX_CSV,
            SourceFormat.APPLE_HEALTH_LAPS,
            SourceFormat.COMPACT_CSV,
        ]
        assert len(summary.vo2max) == 1
        assert len(summary.sessions) == 4

    def test_lap_files_are_grouped(self, files):
        summary = asyncio.run(ingest_paths([files["laps"]]))

        sessions = summary.results[0].sessions
        assert [len(s.laps) for s in sessions] == [2, 1]

    def test_session_gap_option(self, files):
        options = IngestOptions(session_gap=timedelta(hours=2))

        summary = asyncio.run(ingest_paths([files["laps"]], options))

        assert len(summary.sessions) == 1

    def test_missing_file_is_reported(self, tmp_path):
        summary = asyncio.run(ingest_paths([tmp_path / "nope.fit"]))

        assert summary.all_failed
        assert "nope.fit" in summary.results[0].error

    def test_empty_batch(self):
        summary = asyncio.run(ingest_paths([]))

        assert summary.results == []
        assert not summary.all_failed


class TestIngestContent:

    def test_unsupported_format_captured(self):
        result = ingest_content("notes.txt", b"hello")

        assert not result.ok
        assert "Unsupported file type" in result.error

    def test_sessions_are_normalized(self):
        result = ingest_content("log.csv", COMPACT_CSV)

        assert result.source is SourceFormat.COMPACT_CSV
        assert [s.swolf for s in result.sessions] == [38, 40]
