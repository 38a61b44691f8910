"""
Result models for the statistics engine.

Every result is a frozen value that references the Session(s) it was derived
from, so consumers can link an insight back to the swim that caused it.
Every report carries `has_sufficient_data`; when it is False the remaining
fields hold their empty defaults and nothing was guessed.
"""

from dataclasses import dataclass
from enum import Enum
from typing import Optional

from ..sessions.models import Session


class Metric(Enum):
    PACE = "pace"
    DISTANCE = "distance"
    SWOLF = "swolf"

    @property
    def lower_is_better(self) -> bool:
        return self in (Metric.PACE, Metric.SWOLF)


class Severity(Enum):
    MODERATE = "moderate"
    EXTREME = "extreme"

    @property
    def rank(self) -> int:
        return 2 if self is Severity.EXTREME else 1


class StreakType(Enum):
    IMPROVING = "improving"
    DECLINING = "declining"
    CONSISTENT = "consistent"


# ---------------------------------------------------------------------------
# Anomalies
# ---------------------------------------------------------------------------

@dataclass(frozen=True)
class MetricStats:
    """Population mean / standard deviation and the derived thresholds."""
    mean: float
    std_dev: float
    count: int
    moderate_sigma: float = 2.0
    extreme_sigma: float = 3.0

    @property
    def upper_threshold(self) -> float:
        return self.mean + self.moderate_sigma * self.std_dev

    @property
    def lower_threshold(self) -> float:
        return self.mean - self.moderate_sigma * self.std_dev

    @property
    def extreme_upper_threshold(self) -> float:
        return self.mean + self.extreme_sigma * self.std_dev

    @property
    def extreme_lower_threshold(self) -> float:
        return self.mean - self.extreme_sigma * self.std_dev

    def z_score(self, value: float) -> float:
        if self.std_dev == 0:
            return 0.0
        return (value - self.mean) / self.std_dev

    def deviation_pct(self, value: float) -> float:
        if self.mean == 0:
            return 0.0
        return (value - self.mean) / self.mean * 100


@dataclass(frozen=True)
class Anomaly:
    """A session whose metric sits far outside the swimmer's usual range."""
    session: Session
    metric: Metric
    severity: Severity
    direction: str  # 'positive' or 'negative'
    value: float
    z_score: float
    deviation_pct: float
    message: str


@dataclass(frozen=True)
class AnomalyReport:
    has_sufficient_data: bool
    anomalies: tuple[Anomaly, ...] = ()
    pace_stats: Optional[MetricStats] = None
    distance_stats: Optional[MetricStats] = None
    swolf_stats: Optional[MetricStats] = None


# ---------------------------------------------------------------------------
# Sudden changes
# ---------------------------------------------------------------------------

@dataclass(frozen=True)
class SuddenChange:
    """A large jump in pace or distance between two consecutive swims."""
    metric: Metric
    previous_session: Session
    current_session: Session
    change_pct: float
    direction: str  # pace: 'improvement'/'decline'; distance: 'increase'/'decrease'
    message: str


@dataclass(frozen=True)
class SuddenChangeReport:
    has_sufficient_data: bool
    changes: tuple[SuddenChange, ...] = ()


# ---------------------------------------------------------------------------
# Day of week
# ---------------------------------------------------------------------------

@dataclass(frozen=True)
class DayStats:
    """Aggregates for one weekday (0 = Monday)."""
    weekday: int
    day: str
    count: int
    avg_distance: float
    avg_duration: float
    avg_pace: float
    avg_swolf: float
    total_distance: float
    sessions: tuple[Session, ...] = ()


@dataclass(frozen=True)
class Insight:
    kind: str  # 'pace', 'frequency', 'weekend-vs-weekday'
    severity: str  # 'positive', 'neutral'
    message: str


@dataclass(frozen=True)
class DayOfWeekReport:
    has_sufficient_data: bool
    day_stats: tuple[DayStats, ...] = ()
    best_pace_day: Optional[DayStats] = None
    worst_pace_day: Optional[DayStats] = None
    most_frequent_day: Optional[DayStats] = None
    least_frequent_day: Optional[DayStats] = None
    weekend_avg_pace: Optional[float] = None
    weekday_avg_pace: Optional[float] = None
    insights: tuple[Insight, ...] = ()


# ---------------------------------------------------------------------------
# Streaks
# ---------------------------------------------------------------------------

@dataclass(frozen=True)
class StreakReport:
    """The pace streak ending at the most recent session, if any."""
    has_sufficient_data: bool
    has_streak: bool = False
    streak_type: Optional[StreakType] = None
    streak_length: int = 0
    message: Optional[str] = None
    sessions: tuple[Session, ...] = ()


# ---------------------------------------------------------------------------
# Monthly patterns
# ---------------------------------------------------------------------------

@dataclass(frozen=True)
class MonthStats:
    month: str  # 'YYYY-MM'
    count: int
    total_distance: float
    avg_pace: float
    sessions: tuple[Session, ...] = ()


@dataclass(frozen=True)
class MonthlyReport:
    has_sufficient_data: bool
    month_stats: tuple[MonthStats, ...] = ()
    best_month: Optional[MonthStats] = None
    most_active_month: Optional[MonthStats] = None


# ---------------------------------------------------------------------------
# Combined
# ---------------------------------------------------------------------------

@dataclass(frozen=True)
class StatisticsReport:
    """All five analyses over one session window."""
    session_count: int
    lookback_days: Optional[int]
    anomalies: AnomalyReport
    sudden_changes: SuddenChangeReport
    day_of_week: DayOfWeekReport
    streak: StreakReport
    monthly: MonthlyReport
