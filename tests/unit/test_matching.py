"""
Unit tests for merge helpers and lap-level pacing analysis.
"""

from datetime import datetime, timedelta, timezone

import pytest

from swimtrack.core.sessions.matching import attach_vo2max, find_match_candidates
from swimtrack.core.sessions.models import Lap, Session, SourceFormat, VO2MaxReading
from swimtrack.core.sessions.pacing import calculate_fatigue_index, detect_pacing_strategy


T = datetime(2024, 1, 5, 7, 0, tzinfo=timezone.utc)


def make_session(date: datetime, distance: float = 1000, duration: float = 30) -> Session:
    return Session(date=date, distance=distance, duration_minutes=duration, source=SourceFormat.FIT)


def make_laps(paces: list[float]) -> list[Lap]:
    return [
        Lap(number=i, distance=100, duration_seconds=pace * 60, avg_pace=pace)
        for i, pace in enumerate(paces, start=1)
    ]


# ---------------------------------------------------------------------------
# VO2 max attachment
# ---------------------------------------------------------------------------

class TestAttachVO2Max:
    """Each session takes the latest reading at or before its start."""

    @pytest.fixture
    def readings(self):
        return [
            VO2MaxReading(date=datetime(2024, 1, 10, tzinfo=timezone.utc), value=42.0),
            VO2MaxReading(date=datetime(2024, 1, 1, tzinfo=timezone.utc), value=40.0),
        ]

    def test_nearest_preceding_reading(self, readings):
        session = make_session(T)

        matches = attach_vo2max([session], readings)

        assert matches[session.id].value == 40.0

    def test_reading_at_same_instant_counts(self, readings):
        session = make_session(datetime(2024, 1, 10, tzinfo=timezone.utc))

        assert attach_vo2max([session], readings)[session.id].value == 42.0

    def test_sessions_before_every_reading_are_omitted(self, readings):
        session = make_session(datetime(2023, 12, 31, tzinfo=timezone.utc))

        assert attach_vo2max([session], readings) == {}


# ---------------------------------------------------------------------------
# Match candidates
# ---------------------------------------------------------------------------

class TestFindMatchCandidates:

    def test_candidates_scored_and_sorted(self):
        parsed = make_session(T)
        close_in_time = make_session(T + timedelta(minutes=10), duration=31)
        close_in_distance = make_session(T + timedelta(minutes=5), distance=1050)

        candidates = find_match_candidates(parsed, [close_in_distance, close_in_time])

        assert [c.session for c in candidates] == [close_in_time, close_in_distance]
        assert [c.score for c in candidates] == [88, 85]

    def test_far_sessions_are_not_candidates(self):
        parsed = make_session(T)
        too_late = make_session(T + timedelta(hours=2))
        too_long = make_session(T, distance=1200)

        assert find_match_candidates(parsed, [too_late, too_long]) == []


# ---------------------------------------------------------------------------
# Pacing
# ---------------------------------------------------------------------------

class TestPacingStrategy:

    def test_even_pacing(self):
        result = detect_pacing_strategy(make_laps([2.0] * 6))

        assert result.strategy == "even"
        assert result.consistency == 100

    def test_negative_split(self):
        result = detect_pacing_strategy(make_laps([2.2, 2.2, 2.0, 2.0, 1.9, 1.9]))

        assert result.strategy == "negative"

    def test_erratic_pacing(self):
        result = detect_pacing_strategy(make_laps([1.0, 3.0, 1.0, 3.0, 1.0, 3.0]))

        assert result.strategy == "erratic"

    def test_too_few_laps(self):
        assert detect_pacing_strategy(make_laps([2.0, 2.1])).strategy == "unknown"


class TestFatigueIndex:

    def test_fading_final_third(self):
        result = calculate_fatigue_index(make_laps([2.2, 2.0, 2.0, 2.0, 2.3, 2.3]))

        assert result.fatigue_index == 15
        assert result.fading_laps == 2
        assert result.description.startswith("Significant fatigue")

    def test_needs_five_laps(self):
        result = calculate_fatigue_index(make_laps([2.0] * 4))

        assert result.description == "Insufficient data"
