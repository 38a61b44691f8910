"""
Unit tests for the statistics engine.

Each analysis is pure and gated on a minimum sample size. Tests build small
session collections by hand so the expected statistics can be checked by
eye.
"""

from datetime import datetime, timedelta, timezone

import pytest

from swimtrack.core.sessions.models import Session, SourceFormat
from swimtrack.core.stats import (
    AnalysisConfig,
    Metric,
    Severity,
    StreakType,
    analyze,
    analyze_day_of_week,
    analyze_monthly_patterns,
    detect_anomalies,
    detect_streak,
    detect_sudden_changes,
    select_window,
)
from swimtrack.core.stats.descriptive import format_pace


BASE = datetime(2024, 1, 1, 7, 0, tzinfo=timezone.utc)  # a Monday


def swim(day: int, pace=2.0, distance: float = 1000, swolf=None, date=None) -> Session:
    """A session `day` days after BASE."""
    return Session(
        date=date or BASE + timedelta(days=day),
        distance=distance,
        duration_minutes=(pace or 0) * distance / 100,
        pace=pace,
        swolf=swolf,
        source=SourceFormat.COMPACT_CSV,
    )


# ---------------------------------------------------------------------------
# Anomalies
# ---------------------------------------------------------------------------

class TestAnomalies:
    """Tests for sigma-based anomaly detection."""

    def test_fast_outlier_is_extreme_and_positive(self):
        """Ten 2:00 swims and one 1:00 swim: only the fast one is flagged."""
        sessions = [swim(i, pace=2.0) for i in range(10)]
        outlier = swim(10, pace=1.0)

        report = detect_anomalies(sessions + [outlier])

        assert report.has_sufficient_data
        assert len(report.anomalies) == 1
        anomaly = report.anomalies[0]
        assert anomaly.session is outlier
        assert anomaly.metric is Metric.PACE
        assert anomaly.severity is Severity.EXTREME
        assert anomaly.direction == "positive"
        assert anomaly.z_score < -3
        assert anomaly.deviation_pct < 0

    def test_three_sigma_exactly_is_only_moderate(self):
        """Thresholds are strict: z == 3 stays moderate."""
        sessions = [swim(i, distance=1000) for i in range(9)] + [swim(9, distance=2000)]

        report = detect_anomalies(sessions)

        assert len(report.anomalies) == 1
        anomaly = report.anomalies[0]
        assert anomaly.metric is Metric.DISTANCE
        assert anomaly.severity is Severity.MODERATE
        assert anomaly.direction == "positive"
        assert report.distance_stats.std_dev == pytest.approx(300)

    def test_constant_metric_yields_no_anomalies(self):
        report = detect_anomalies([swim(i) for i in range(8)])

        assert report.has_sufficient_data
        assert report.anomalies == ()

    def test_too_few_sessions(self):
        report = detect_anomalies([swim(i) for i in range(4)])

        assert not report.has_sufficient_data
        assert report.anomalies == ()

    def test_metric_gated_on_valid_values(self):
        """Sessions without a pace don't count towards the pace sample."""
        report = detect_anomalies([swim(i, pace=None) for i in range(6)])

        assert report.has_sufficient_data
        assert report.pace_stats is None
        assert report.distance_stats is not None

    def test_session_reported_once(self):
        """A swim that is anomalous on two metrics keeps a single entry."""
        sessions = [swim(i, pace=2.0, distance=1000) for i in range(10)]
        odd = swim(10, pace=1.0, distance=3000)

        report = detect_anomalies(sessions + [odd])

        assert len(report.anomalies) == 1
        assert report.anomalies[0].session is odd

    def test_swolf_reports_extreme_only(self):
        sessions = [swim(i, swolf=40) for i in range(9)] + [swim(9, swolf=60)]

        report = detect_anomalies(sessions)

        # z == 3 for the 60, which is moderate and therefore not reported
        assert report.anomalies == ()
        assert report.swolf_stats.mean == pytest.approx(42)


# ---------------------------------------------------------------------------
# Sudden changes
# ---------------------------------------------------------------------------

class TestSuddenChanges:

    def test_pace_and_distance_jumps(self):
        sessions = [swim(0, 2.0), swim(1, 2.0), swim(2, 1.6, distance=1500)]

        report = detect_sudden_changes(sessions)

        kinds = {(c.metric, c.direction) for c in report.changes}
        assert kinds == {(Metric.PACE, "improvement"), (Metric.DISTANCE, "increase")}
        pace_change = next(c for c in report.changes if c.metric is Metric.PACE)
        assert pace_change.change_pct == pytest.approx(-20)

    def test_small_changes_ignored(self):
        sessions = [swim(0, 2.0), swim(1, 2.1, distance=1200), swim(2, 2.0)]

        assert detect_sudden_changes(sessions).changes == ()

    def test_zero_previous_distance_skipped(self):
        sessions = [swim(0, pace=0.0, distance=0), swim(1), swim(2)]

        assert detect_sudden_changes(sessions).changes == ()

    def test_input_order_does_not_matter(self):
        sessions = [swim(2, 1.6), swim(0, 2.0), swim(1, 2.0)]

        report = detect_sudden_changes(sessions)

        assert len(report.changes) == 1
        assert report.changes[0].direction == "improvement"

    def test_needs_three_sessions(self):
        assert not detect_sudden_changes([swim(0), swim(1, 1.0)]).has_sufficient_data


# ---------------------------------------------------------------------------
# Day of week
# ---------------------------------------------------------------------------

class TestDayOfWeek:

    @pytest.fixture
    def week(self):
        # Mondays at 2:00, weekend swims at 2:24
        return [swim(0, 2.0), swim(7, 2.0), swim(14, 2.0), swim(5, 2.4), swim(6, 2.4)]

    def test_best_worst_and_frequency(self, week):
        report = analyze_day_of_week(week)

        assert report.best_pace_day.day == "Monday"
        assert report.worst_pace_day.day == "Saturday"
        assert report.most_frequent_day.day == "Monday"
        assert report.least_frequent_day.day == "Saturday"
        assert [d.day for d in report.day_stats] == ["Monday", "Saturday", "Sunday"]

    def test_insights(self, week):
        report = analyze_day_of_week(week)

        kinds = [insight.kind for insight in report.insights]
        assert kinds == ["pace", "frequency", "weekend-vs-weekday"]
        assert "weekdays" in report.insights[2].message
        assert report.weekend_avg_pace == pytest.approx(2.4)
        assert report.weekday_avg_pace == pytest.approx(2.0)

    def test_weekend_average_ignores_paceless_sessions(self, week):
        report = analyze_day_of_week(week + [swim(12, pace=None)])  # Saturday, no pace

        assert report.weekend_avg_pace == pytest.approx(2.4)

    def test_no_weekend_comparison_without_weekend_pace(self):
        sessions = [swim(0), swim(1), swim(2), swim(5, pace=None)]

        report = analyze_day_of_week(sessions)

        assert report.weekend_avg_pace is None
        assert all(i.kind != "weekend-vs-weekday" for i in report.insights)

    def test_uses_the_sessions_own_offset(self):
        """Saturday 23:30 in New York is Sunday in UTC but buckets as Saturday."""
        eastern = timezone(timedelta(hours=-5))
        late = swim(0, date=datetime(2024, 1, 6, 23, 30, tzinfo=eastern))

        report = analyze_day_of_week([late, swim(0), swim(1)])

        assert "Saturday" in [d.day for d in report.day_stats]
        assert "Sunday" not in [d.day for d in report.day_stats]

    def test_needs_three_sessions(self):
        assert not analyze_day_of_week([swim(0), swim(1)]).has_sufficient_data


# ---------------------------------------------------------------------------
# Streaks
# ---------------------------------------------------------------------------

class TestStreaks:

    def test_improving_streak(self):
        sessions = [swim(i, pace) for i, pace in enumerate([3.0, 2.9, 2.8, 2.7])]

        report = detect_streak(sessions)

        assert report.has_streak
        assert report.streak_type is StreakType.IMPROVING
        assert report.streak_length == 4
        assert len(report.sessions) == 4

    def test_change_of_direction_resets(self):
        sessions = [swim(i, pace) for i, pace in enumerate([3.0, 2.9, 2.8, 2.7, 2.9])]

        report = detect_streak(sessions)

        assert report.has_sufficient_data
        assert not report.has_streak

    def test_consistent_streak(self):
        report = detect_streak([swim(i, 2.0) for i in range(5)])

        assert report.streak_type is StreakType.CONSISTENT
        assert report.streak_length == 5

    def test_only_recent_window_counts(self):
        """An old declining run is outside the 10-swim window."""
        old = [swim(i, 2.0 + i * 0.1) for i in range(10)]
        recent = [swim(20 + i, 2.0) for i in range(10)]

        report = detect_streak(old + recent)

        assert report.streak_type is StreakType.CONSISTENT
        assert report.streak_length == 10

    def test_needs_four_sessions(self):
        sessions = [swim(i, pace) for i, pace in enumerate([3.0, 2.9, 2.8])]

        assert not detect_streak(sessions).has_sufficient_data


# ---------------------------------------------------------------------------
# Monthly patterns
# ---------------------------------------------------------------------------

class TestMonthlyPatterns:

    def test_paceless_month_never_best(self):
        january = [swim(i, pace=None) for i in (0, 2, 4)]
        february = [swim(i, pace=2.5) for i in (31, 33, 35)]

        report = analyze_monthly_patterns(january + february)

        assert report.has_sufficient_data
        assert report.best_month.month == "2024-02"
        assert report.best_month.avg_pace == pytest.approx(2.5)

    def test_most_active_ties_go_to_earliest(self):
        sessions = [swim(i) for i in (0, 2, 4, 31, 33, 35)]

        assert analyze_monthly_patterns(sessions).most_active_month.month == "2024-01"

    def test_single_session_months_are_not_eligible(self):
        sessions = [swim(31 * i) for i in range(6)]

        report = analyze_monthly_patterns(sessions)

        assert not report.has_sufficient_data
        assert len(report.month_stats) == 6

    def test_no_pace_anywhere_gives_no_best_month(self):
        report = analyze_monthly_patterns([swim(i, pace=None) for i in range(6)])

        assert report.has_sufficient_data
        assert report.best_month is None

    def test_needs_six_sessions(self):
        assert not analyze_monthly_patterns([swim(i) for i in range(5)]).has_sufficient_data


# ---------------------------------------------------------------------------
# Engine
# ---------------------------------------------------------------------------

class TestEngine:

    @pytest.fixture
    def history(self):
        paces = [2.1, 2.0, 2.2, 1.9, 2.0, 2.3, 2.1, 1.8, 2.0, 2.1, 1.2, 2.0]
        return [swim(i * 3, pace, distance=800 + i * 50) for i, pace in enumerate(paces)]

    def test_rerun_gives_identical_report(self, history):
        assert analyze(history) == analyze(history)

    def test_input_order_does_not_matter(self, history):
        assert analyze(history) == analyze(list(reversed(history)))

    def test_lookback_window(self):
        now = datetime(2024, 3, 1, tzinfo=timezone.utc)
        recent = swim(0, date=now - timedelta(days=10))
        old = swim(0, date=now - timedelta(days=60))
        future = swim(0, date=now + timedelta(days=1))

        window = select_window([recent, old, future], lookback_days=30, now=now)

        assert window == [recent]

    def test_all_time_keeps_everything(self, history):
        assert len(select_window(history, None)) == len(history)

    def test_report_carries_window_size(self, history):
        now = BASE + timedelta(days=40)

        report = analyze(history, AnalysisConfig(lookback_days=10), now=now)

        assert report.session_count == len([s for s in history if s.date >= now - timedelta(days=10)])
        assert report.lookback_days == 10

    def test_lookback_across_utc_offsets(self):
        """Sessions recorded in different zones share one window and ordering."""
        now = datetime(2024, 3, 1, tzinfo=timezone.utc)
        eastern = timezone(timedelta(hours=-5))
        sessions = [
            swim(0, date=(now - timedelta(days=day)).astimezone(eastern if day % 2 else timezone.utc))
            for day in range(1, 7)
        ]

        report = analyze(sessions, AnalysisConfig(lookback_days=30), now=now)

        assert report.session_count == 6
        assert report.lookback_days == 30

    def test_naive_sessions_never_reach_the_engine(self):
        with pytest.raises(ValueError, match="timezone-aware"):
            swim(0, date=datetime(2024, 1, 1, 7, 0))

    def test_config_rejects_inverted_sigmas(self):
        with pytest.raises(ValueError, match="moderate_sigma"):
            AnalysisConfig(moderate_sigma=4, extreme_sigma=3)


class TestFormatPace:

    def test_minutes_and_seconds(self):
        assert format_pace(2.5) == "2:30"
        assert format_pace(1.999) == "2:00"
