"""
Statistics engine facade.

Runs the five independent analyses over one window of a swimmer's history.
The engine holds no state and performs no I/O; caching results across runs,
if wanted, belongs to the caller.
"""

import logging
from dataclasses import dataclass
from datetime import datetime, timedelta, timezone
from typing import Iterable, Optional

from ..sessions.models import Session
from . import anomalies, changes, monthly, streaks, weekdays
from .models import StatisticsReport


logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class AnalysisConfig:
    """
    Thresholds for every analysis.

    Defaults match the module constants; the application layer builds one
    from settings.
    """
    lookback_days: Optional[int] = None
    anomaly_min_sessions: int = anomalies.MIN_SESSIONS
    moderate_sigma: float = 2.0
    extreme_sigma: float = 3.0
    sudden_pace_change_pct: float = changes.PACE_CHANGE_PCT
    sudden_distance_change_pct: float = changes.DISTANCE_CHANGE_PCT
    streak_window: int = streaks.WINDOW
    streak_change_pct: float = streaks.CHANGE_PCT
    min_streak: int = streaks.MIN_STREAK
    weekend_gap_pct: float = weekdays.WEEKEND_GAP_PCT

    def __post_init__(self) -> None:
        if self.lookback_days is not None and self.lookback_days <= 0:
            raise ValueError("lookback_days must be positive (or None for all-time)")
        if self.moderate_sigma > self.extreme_sigma:
            raise ValueError("moderate_sigma must not exceed extreme_sigma")


def select_window(
    sessions: Iterable[Session],
    lookback_days: Optional[int],
    now: Optional[datetime] = None,
) -> list[Session]:
    """
    Keep sessions dated within the last `lookback_days` days.

    None means all-time. `now` defaults to the current UTC time; pass it
    explicitly for reproducible results.
    """
    sessions = list(sessions)
    if lookback_days is None:
        return sessions

    now = now or datetime.now(timezone.utc)
    cutoff = now - timedelta(days=lookback_days)
    return [session for session in sessions if cutoff <= session.date <= now]


def analyze(
    sessions: Iterable[Session],
    config: AnalysisConfig = AnalysisConfig(),
    now: Optional[datetime] = None,
) -> StatisticsReport:
    """Run all five analyses over the configured window."""
    window = select_window(sessions, config.lookback_days, now)

    report = StatisticsReport(
        session_count=len(window),
        lookback_days=config.lookback_days,
        anomalies=anomalies.detect_anomalies(
            window,
            min_sessions=config.anomaly_min_sessions,
            moderate_sigma=config.moderate_sigma,
            extreme_sigma=config.extreme_sigma,
        ),
        sudden_changes=changes.detect_sudden_changes(
            window,
            pace_change_pct=config.sudden_pace_change_pct,
            distance_change_pct=config.sudden_distance_change_pct,
        ),
        day_of_week=weekdays.analyze_day_of_week(
            window,
            weekend_gap_pct=config.weekend_gap_pct,
        ),
        streak=streaks.detect_streak(
            window,
            window=config.streak_window,
            change_pct=config.streak_change_pct,
            min_streak=config.min_streak,
        ),
        monthly=monthly.analyze_monthly_patterns(window),
    )

    logger.info(
        "Statistics computed",
        extra={
            "sessions": report.session_count,
            "lookback_days": config.lookback_days,
            "anomalies": len(report.anomalies.anomalies),
            "sudden_changes": len(report.sudden_changes.changes),
        },
    )
    return report
