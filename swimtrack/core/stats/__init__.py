"""
Statistics engine.

Five independent, pure analyses over a collection of normalized Sessions.
"""

from .models import (
    Anomaly,
    AnomalyReport,
    DayOfWeekReport,
    DayStats,
    Insight,
    Metric,
    MetricStats,
    MonthlyReport,
    MonthStats,
    Severity,
    StatisticsReport,
    StreakReport,
    StreakType,
    SuddenChange,
    SuddenChangeReport,
)
from .anomalies import detect_anomalies
from .changes import detect_sudden_changes
from .weekdays import analyze_day_of_week
from .streaks import detect_streak
from .monthly import analyze_monthly_patterns
from .engine import AnalysisConfig, analyze, select_window

__all__ = [
    "Anomaly",
    "AnomalyReport",
    "DayOfWeekReport",
    "DayStats",
    "Insight",
    "Metric",
    "MetricStats",
    "MonthlyReport",
    "MonthStats",
    "Severity",
    "StatisticsReport",
    "StreakReport",
    "StreakType",
    "SuddenChange",
    "SuddenChangeReport",
    "detect_anomalies",
    "detect_sudden_changes",
    "analyze_day_of_week",
    "detect_streak",
    "analyze_monthly_patterns",
    "AnalysisConfig",
    "analyze",
    "select_window",
]
