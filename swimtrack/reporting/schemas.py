"""
JSON payloads for sessions and statistics.

Pydantic models mirror the frozen domain results one-to-one. Analysis
results reference sessions by id and date only; the full session is
emitted once, by the ingest output.
"""

from datetime import datetime
from typing import Optional
from uuid import UUID

from pydantic import BaseModel, Field

from ..core.sessions.models import Lap, Session, VO2MaxReading
from ..core.stats.models import (
    Anomaly,
    AnomalyReport,
    DayOfWeekReport,
    DayStats,
    Insight,
    MetricStats,
    MonthlyReport,
    MonthStats,
    StatisticsReport,
    StreakReport,
    SuddenChange,
    SuddenChangeReport,
)
from ..infrastructure.parsers.ingest import IngestResult


# ---------------------------------------------------------------------------
# Sessions
# ---------------------------------------------------------------------------

class LapPayload(BaseModel):
    """One lap within a session."""
    number: int = Field(description="1-based lap number")
    distance: float = Field(description="Lap distance in meters")
    duration_seconds: float = Field(description="Lap duration in seconds")
    strokes: Optional[int] = Field(None, description="Stroke count, when recorded")
    avg_pace: float = Field(description="Minutes per 100 m, 0 when the lap has no distance")

    @classmethod
    def from_domain(cls, lap: Lap) -> "LapPayload":
        return cls(
            number=lap.number,
            distance=lap.distance,
            duration_seconds=lap.duration_seconds,
            strokes=lap.strokes,
            avg_pace=lap.avg_pace,
        )


class SessionPayload(BaseModel):
    """A normalized swim session."""
    id: UUID = Field(description="Session identifier")
    date: datetime = Field(description="Start of the swim")
    source: str = Field(description="Provenance tag of the source file format")
    distance: float = Field(description="Distance in meters")
    duration_minutes: float = Field(description="Duration in minutes")
    pace: Optional[float] = Field(None, description="Minutes per 100 m; null when not measured")
    strokes: Optional[int] = Field(None, description="Total stroke count")
    swolf: Optional[int] = Field(None, description="Strokes plus seconds per length")
    calories: Optional[float] = Field(None, description="Energy burned, when the source reports it")
    laps: list[LapPayload] = Field(default_factory=list, description="Per-lap detail")
    rating: Optional[bool] = Field(None, description="User rating; null when not rated")

    @classmethod
    def from_domain(cls, session: Session) -> "SessionPayload":
        return cls(
            id=session.id,
            date=session.date,
            source=session.source.value,
            distance=session.distance,
            duration_minutes=session.duration_minutes,
            pace=session.pace,
            strokes=session.strokes,
            swolf=session.swolf,
            calories=session.calories,
            laps=[LapPayload.from_domain(lap) for lap in session.laps],
            rating=session.rating,
        )


class SessionRef(BaseModel):
    """Pointer from an analysis result back to a session."""
    id: UUID = Field(description="Session identifier")
    date: datetime = Field(description="Start of the swim")

    @classmethod
    def from_domain(cls, session: Session) -> "SessionRef":
        return cls(id=session.id, date=session.date)


class VO2MaxPayload(BaseModel):
    date: datetime = Field(description="When the reading was taken")
    value: float = Field(description="VO2 max in ml/kg/min")

    @classmethod
    def from_domain(cls, reading: VO2MaxReading) -> "VO2MaxPayload":
        return cls(date=reading.date, value=reading.value)


class IngestResultPayload(BaseModel):
    """Outcome of ingesting one file."""
    path: str = Field(description="File that was read")
    source: Optional[str] = Field(None, description="Detected format, when detection succeeded")
    sessions: list[SessionPayload] = Field(default_factory=list)
    vo2max: list[VO2MaxPayload] = Field(default_factory=list)
    error: Optional[str] = Field(None, description="Why the file failed, if it did")

    @classmethod
    def from_domain(cls, result: IngestResult) -> "IngestResultPayload":
        return cls(
            path=result.path,
            source=result.source.value if result.source else None,
            sessions=[SessionPayload.from_domain(s) for s in result.sessions],
            vo2max=[VO2MaxPayload.from_domain(r) for r in result.vo2max],
            error=result.error,
        )


# ---------------------------------------------------------------------------
# Statistics
# ---------------------------------------------------------------------------

class MetricStatsPayload(BaseModel):
    mean: float
    std_dev: float
    count: int
    lower_threshold: float = Field(description="Mean minus the moderate sigma band")
    upper_threshold: float = Field(description="Mean plus the moderate sigma band")

    @classmethod
    def from_domain(cls, stats: Optional[MetricStats]) -> Optional["MetricStatsPayload"]:
        if stats is None:
            return None
        return cls(
            mean=stats.mean,
            std_dev=stats.std_dev,
            count=stats.count,
            lower_threshold=stats.lower_threshold,
            upper_threshold=stats.upper_threshold,
        )


class AnomalyPayload(BaseModel):
    session: SessionRef
    metric: str
    severity: str = Field(description="moderate or extreme")
    direction: str = Field(description="positive (better than usual) or negative")
    value: float
    z_score: float = Field(description="Standard deviations from the mean")
    deviation_pct: float = Field(description="Percentage deviation from the mean")
    message: str

    @classmethod
    def from_domain(cls, anomaly: Anomaly) -> "AnomalyPayload":
        return cls(
            session=SessionRef.from_domain(anomaly.session),
            metric=anomaly.metric.value,
            severity=anomaly.severity.value,
            direction=anomaly.direction,
            value=anomaly.value,
            z_score=anomaly.z_score,
            deviation_pct=anomaly.deviation_pct,
            message=anomaly.message,
        )


class AnomalyReportPayload(BaseModel):
    has_sufficient_data: bool
    anomalies: list[AnomalyPayload] = Field(default_factory=list)
    pace_stats: Optional[MetricStatsPayload] = None
    distance_stats: Optional[MetricStatsPayload] = None
    swolf_stats: Optional[MetricStatsPayload] = None

    @classmethod
    def from_domain(cls, report: AnomalyReport) -> "AnomalyReportPayload":
        return cls(
            has_sufficient_data=report.has_sufficient_data,
            anomalies=[AnomalyPayload.from_domain(a) for a in report.anomalies],
            pace_stats=MetricStatsPayload.from_domain(report.pace_stats),
            distance_stats=MetricStatsPayload.from_domain(report.distance_stats),
            swolf_stats=MetricStatsPayload.from_domain(report.swolf_stats),
        )


class SuddenChangePayload(BaseModel):
    metric: str
    previous_session: SessionRef
    current_session: SessionRef
    change_pct: float
    direction: str
    message: str

    @classmethod
    def from_domain(cls, change: SuddenChange) -> "SuddenChangePayload":
        return cls(
            metric=change.metric.value,
            previous_session=SessionRef.from_domain(change.previous_session),
            current_session=SessionRef.from_domain(change.current_session),
            change_pct=change.change_pct,
            direction=change.direction,
            message=change.message,
        )


class SuddenChangeReportPayload(BaseModel):
    has_sufficient_data: bool
    changes: list[SuddenChangePayload] = Field(default_factory=list)

    @classmethod
    def from_domain(cls, report: SuddenChangeReport) -> "SuddenChangeReportPayload":
        return cls(
            has_sufficient_data=report.has_sufficient_data,
            changes=[SuddenChangePayload.from_domain(c) for c in report.changes],
        )


class DayStatsPayload(BaseModel):
    day: str
    count: int
    avg_distance: float
    avg_duration: float
    avg_pace: float
    avg_swolf: float
    total_distance: float
    sessions: list[SessionRef] = Field(default_factory=list)

    @classmethod
    def from_domain(cls, stats: Optional[DayStats]) -> Optional["DayStatsPayload"]:
        if stats is None:
            return None
        return cls(
            day=stats.day,
            count=stats.count,
            avg_distance=stats.avg_distance,
            avg_duration=stats.avg_duration,
            avg_pace=stats.avg_pace,
            avg_swolf=stats.avg_swolf,
            total_distance=stats.total_distance,
            sessions=[SessionRef.from_domain(s) for s in stats.sessions],
        )


class InsightPayload(BaseModel):
    kind: str
    severity: str
    message: str

    @classmethod
    def from_domain(cls, insight: Insight) -> "InsightPayload":
        return cls(kind=insight.kind, severity=insight.severity, message=insight.message)


class DayOfWeekReportPayload(BaseModel):
    has_sufficient_data: bool
    day_stats: list[DayStatsPayload] = Field(default_factory=list)
    best_pace_day: Optional[str] = None
    worst_pace_day: Optional[str] = None
    most_frequent_day: Optional[str] = None
    least_frequent_day: Optional[str] = None
    weekend_avg_pace: Optional[float] = None
    weekday_avg_pace: Optional[float] = None
    insights: list[InsightPayload] = Field(default_factory=list)

    @classmethod
    def from_domain(cls, report: DayOfWeekReport) -> "DayOfWeekReportPayload":
        def day_name(stats: Optional[DayStats]) -> Optional[str]:
            return stats.day if stats else None

        return cls(
            has_sufficient_data=report.has_sufficient_data,
            day_stats=[DayStatsPayload.from_domain(d) for d in report.day_stats],
            best_pace_day=day_name(report.best_pace_day),
            worst_pace_day=day_name(report.worst_pace_day),
            most_frequent_day=day_name(report.most_frequent_day),
            least_frequent_day=day_name(report.least_frequent_day),
            weekend_avg_pace=report.weekend_avg_pace,
            weekday_avg_pace=report.weekday_avg_pace,
            insights=[InsightPayload.from_domain(i) for i in report.insights],
        )


class StreakReportPayload(BaseModel):
    has_sufficient_data: bool
    has_streak: bool
    streak_type: Optional[str] = None
    streak_length: int = 0
    message: Optional[str] = None
    sessions: list[SessionRef] = Field(default_factory=list)

    @classmethod
    def from_domain(cls, report: StreakReport) -> "StreakReportPayload":
        return cls(
            has_sufficient_data=report.has_sufficient_data,
            has_streak=report.has_streak,
            streak_type=report.streak_type.value if report.streak_type else None,
            streak_length=report.streak_length,
            message=report.message,
            sessions=[SessionRef.from_domain(s) for s in report.sessions],
        )


class MonthStatsPayload(BaseModel):
    month: str = Field(description="Calendar month as YYYY-MM")
    count: int
    total_distance: float
    avg_pace: float

    @classmethod
    def from_domain(cls, stats: Optional[MonthStats]) -> Optional["MonthStatsPayload"]:
        if stats is None:
            return None
        return cls(
            month=stats.month,
            count=stats.count,
            total_distance=stats.total_distance,
            avg_pace=stats.avg_pace,
        )


class MonthlyReportPayload(BaseModel):
    has_sufficient_data: bool
    month_stats: list[MonthStatsPayload] = Field(default_factory=list)
    best_month: Optional[MonthStatsPayload] = None
    most_active_month: Optional[MonthStatsPayload] = None

    @classmethod
    def from_domain(cls, report: MonthlyReport) -> "MonthlyReportPayload":
        return cls(
            has_sufficient_data=report.has_sufficient_data,
            month_stats=[MonthStatsPayload.from_domain(m) for m in report.month_stats],
            best_month=MonthStatsPayload.from_domain(report.best_month),
            most_active_month=MonthStatsPayload.from_domain(report.most_active_month),
        )


class StatisticsReportPayload(BaseModel):
    """Every analysis over one session window."""
    session_count: int = Field(description="Sessions inside the analysis window")
    lookback_days: Optional[int] = Field(None, description="Window length; null means all-time")
    anomalies: AnomalyReportPayload
    sudden_changes: SuddenChangeReportPayload
    day_of_week: DayOfWeekReportPayload
    streak: StreakReportPayload
    monthly: MonthlyReportPayload

    @classmethod
    def from_domain(cls, report: StatisticsReport) -> "StatisticsReportPayload":
        return cls(
            session_count=report.session_count,
            lookback_days=report.lookback_days,
            anomalies=AnomalyReportPayload.from_domain(report.anomalies),
            sudden_changes=SuddenChangeReportPayload.from_domain(report.sudden_changes),
            day_of_week=DayOfWeekReportPayload.from_domain(report.day_of_week),
            streak=StreakReportPayload.from_domain(report.streak),
            monthly=MonthlyReportPayload.from_domain(report.monthly),
        )
