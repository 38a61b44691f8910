"""
Day-of-week performance.

Buckets sessions by the weekday of their own timestamp (the swimmer's local
time when the source recorded an offset) and compares the buckets.
"""

from collections import defaultdict
from typing import Iterable, Optional

from ..sessions.models import Session
from .descriptive import chronological, mean_or_zero
from .models import DayOfWeekReport, DayStats, Insight


MIN_SESSIONS = 3
MIN_FREQUENT_COUNT = 3
WEEKEND_GAP_PCT = 5.0

DAY_NAMES = ("Monday", "Tuesday", "Wednesday", "Thursday", "Friday", "Saturday", "Sunday")
WEEKEND = (5, 6)


def _day_stats(weekday: int, sessions: list[Session]) -> DayStats:
    count = len(sessions)
    total_distance = sum(s.distance for s in sessions)
    return DayStats(
        weekday=weekday,
        day=DAY_NAMES[weekday],
        count=count,
        avg_distance=total_distance / count,
        avg_duration=sum(s.duration_minutes for s in sessions) / count,
        avg_pace=mean_or_zero(s.pace for s in sessions if s.has_valid_pace),
        avg_swolf=mean_or_zero(s.swolf for s in sessions if s.has_valid_swolf),
        total_distance=total_distance,
        sessions=tuple(sessions),
    )


def _weekend_comparison(
    sessions: list[Session], gap_pct: float
) -> tuple[Optional[float], Optional[float], Optional[Insight]]:
    weekend = [s.pace for s in sessions if s.has_valid_pace and s.date.weekday() in WEEKEND]
    weekday = [s.pace for s in sessions if s.has_valid_pace and s.date.weekday() not in WEEKEND]
    if not weekend or not weekday:
        return None, None, None

    weekend_pace = mean_or_zero(weekend)
    weekday_pace = mean_or_zero(weekday)
    pct = abs(weekend_pace - weekday_pace) / max(weekend_pace, weekday_pace) * 100

    insight = None
    if pct > gap_pct:
        better = "weekends" if weekend_pace < weekday_pace else "weekdays"
        insight = Insight(
            kind="weekend-vs-weekday",
            severity="neutral",
            message=f"You tend to swim {pct:.1f}% faster on {better}.",
        )
    return weekend_pace, weekday_pace, insight


def analyze_day_of_week(
    sessions: Iterable[Session],
    min_sessions: int = MIN_SESSIONS,
    weekend_gap_pct: float = WEEKEND_GAP_PCT,
) -> DayOfWeekReport:
    """
    Per-weekday counts and averages, plus best/worst and frequency insights.

    A bucket's average pace only uses sessions with a valid pace, so a day can
    have sessions yet an average pace of 0. Such days never become the best or
    worst pace day.
    """
    ordered = chronological(sessions)
    if len(ordered) < min_sessions:
        return DayOfWeekReport(has_sufficient_data=False)

    buckets: dict[int, list[Session]] = defaultdict(list)
    for session in ordered:
        buckets[session.date.weekday()].append(session)

    day_stats = [_day_stats(weekday, buckets[weekday]) for weekday in sorted(buckets)]
    with_pace = [day for day in day_stats if day.avg_pace > 0]

    best = min(with_pace, key=lambda day: day.avg_pace) if with_pace else None
    worst = max(with_pace, key=lambda day: day.avg_pace) if with_pace else None
    # min/max return the first of equal counts, i.e. the earliest weekday
    most_frequent = max(day_stats, key=lambda day: day.count)
    least_frequent = min(day_stats, key=lambda day: day.count)

    insights = []
    if best and worst and best.weekday != worst.weekday:
        pct = (worst.avg_pace - best.avg_pace) / worst.avg_pace * 100
        insights.append(Insight(
            kind="pace",
            severity="positive",
            message=f"You swim {pct:.1f}% faster on {best.day}s compared to {worst.day}s.",
        ))

    if most_frequent.count >= MIN_FREQUENT_COUNT:
        insights.append(Insight(
            kind="frequency",
            severity="neutral",
            message=f"{most_frequent.day} is your most common swim day ({most_frequent.count} swims).",
        ))

    weekend_pace, weekday_pace, comparison = _weekend_comparison(ordered, weekend_gap_pct)
    if comparison is not None:
        insights.append(comparison)

    return DayOfWeekReport(
        has_sufficient_data=True,
        day_stats=tuple(day_stats),
        best_pace_day=best,
        worst_pace_day=worst,
        most_frequent_day=most_frequent,
        least_frequent_day=least_frequent,
        weekend_avg_pace=weekend_pace,
        weekday_avg_pace=weekday_pace,
        insights=tuple(insights),
    )
