"""Monthly pattern analysis."""

from collections import defaultdict
from typing import Iterable

from ..sessions.models import Session
from .descriptive import chronological, mean_or_zero
from .models import MonthlyReport, MonthStats


MIN_SESSIONS = 6
MIN_MONTH_SESSIONS = 2


def analyze_monthly_patterns(
    sessions: Iterable[Session],
    min_sessions: int = MIN_SESSIONS,
    min_month_sessions: int = MIN_MONTH_SESSIONS,
) -> MonthlyReport:
    """
    Bucket sessions by calendar month and pick the best and busiest months.

    Only months with at least `min_month_sessions` swims are eligible. The
    best month is the eligible month with the lowest average pace above zero;
    a month whose sessions never recorded a pace is never chosen, even though
    its 0 average would win a plain minimum.
    """
    ordered = chronological(sessions)
    if len(ordered) < min_sessions:
        return MonthlyReport(has_sufficient_data=False)

    buckets: dict[str, list[Session]] = defaultdict(list)
    for session in ordered:
        buckets[session.date.strftime("%Y-%m")].append(session)

    month_stats = tuple(
        MonthStats(
            month=month,
            count=len(buckets[month]),
            total_distance=sum(s.distance for s in buckets[month]),
            avg_pace=mean_or_zero(s.pace for s in buckets[month] if s.has_valid_pace),
            sessions=tuple(buckets[month]),
        )
        for month in sorted(buckets)
    )

    eligible = [month for month in month_stats if month.count >= min_month_sessions]
    if not eligible:
        return MonthlyReport(has_sufficient_data=False, month_stats=month_stats)

    with_pace = [month for month in eligible if month.avg_pace > 0]
    best = min(with_pace, key=lambda month: month.avg_pace) if with_pace else None
    most_active = max(eligible, key=lambda month: month.count)

    return MonthlyReport(
        has_sufficient_data=True,
        month_stats=month_stats,
        best_month=best,
        most_active_month=most_active,
    )
