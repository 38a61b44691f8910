"""
Anomaly detection.

Flags sessions whose pace, distance or SWOLF sit unusually far from the
swimmer's own mean. "Moderate" is beyond 2 standard deviations, "extreme"
beyond 3. Direction is metric-aware: a low pace or SWOLF is good news
("positive"), as is a long distance.
"""

import logging
from typing import Callable, Iterable, Optional, Sequence

from ..sessions.models import Session
from .descriptive import chronological, format_pace, population_stats
from .models import Anomaly, AnomalyReport, Metric, MetricStats, Severity


logger = logging.getLogger(__name__)

MIN_SESSIONS = 5


def _describe(metric: Metric, severity: Severity, direction: str, value: float, pct: float) -> str:
    extreme = severity is Severity.EXTREME
    if metric is Metric.PACE:
        if direction == "positive":
            prefix = "Exceptionally fast pace" if extreme else "Notably fast pace"
            relation = "faster"
        else:
            prefix = "Unusually slow pace" if extreme else "Notably slow pace"
            relation = "slower"
        return f"{prefix}: {format_pace(value)} ({abs(pct):.1f}% {relation} than average)"

    if metric is Metric.DISTANCE:
        if direction == "positive":
            prefix = "Exceptionally long swim" if extreme else "Notably long swim"
            relation = "longer"
        else:
            prefix = "Unusually short swim" if extreme else "Notably short swim"
            relation = "shorter"
        return f"{prefix}: {value / 1000:.2f}km ({abs(pct):.1f}% {relation} than average)"

    if direction == "positive":
        return f"Exceptionally efficient swim: SWOLF {value:.0f}"
    return f"Unusually inefficient swim: SWOLF {value:.0f}"


def _classify(
    session: Session,
    metric: Metric,
    value: float,
    stats: MetricStats,
    extreme_only: bool = False,
) -> Optional[Anomaly]:
    if value > stats.extreme_upper_threshold:
        severity, above = Severity.EXTREME, True
    elif value < stats.extreme_lower_threshold:
        severity, above = Severity.EXTREME, False
    elif extreme_only:
        return None
    elif value > stats.upper_threshold:
        severity, above = Severity.MODERATE, True
    elif value < stats.lower_threshold:
        severity, above = Severity.MODERATE, False
    else:
        return None

    if metric.lower_is_better:
        direction = "negative" if above else "positive"
    else:
        direction = "positive" if above else "negative"

    pct = stats.deviation_pct(value)
    return Anomaly(
        session=session,
        metric=metric,
        severity=severity,
        direction=direction,
        value=value,
        z_score=stats.z_score(value),
        deviation_pct=pct,
        message=_describe(metric, severity, direction, value, pct),
    )


def _scan(
    sessions: Sequence[Session],
    metric: Metric,
    value_of: Callable[[Session], float],
    min_sessions: int,
    moderate_sigma: float,
    extreme_sigma: float,
    extreme_only: bool = False,
) -> tuple[Optional[MetricStats], list[Anomaly]]:
    if len(sessions) < min_sessions:
        return None, []

    values = [value_of(session) for session in sessions]
    stats = population_stats(values, moderate_sigma, extreme_sigma)

    found = []
    for session, value in zip(sessions, values):
        anomaly = _classify(session, metric, value, stats, extreme_only)
        if anomaly is not None:
            found.append(anomaly)
    return stats, found


def _most_severe_first(anomaly: Anomaly) -> tuple:
    return (-anomaly.severity.rank, -abs(anomaly.z_score), anomaly.session.date, str(anomaly.session.id))


def detect_anomalies(
    sessions: Iterable[Session],
    min_sessions: int = MIN_SESSIONS,
    moderate_sigma: float = 2.0,
    extreme_sigma: float = 3.0,
) -> AnomalyReport:
    """
    Find unusual sessions across pace, distance and SWOLF.

    Each metric is gated separately on `min_sessions` qualifying sessions;
    pace and SWOLF only count sessions with a value above zero. SWOLF reports
    extreme outliers only. A session anomalous on several metrics is reported
    once, under its most severe anomaly (tier first, then |z|).
    """
    ordered = chronological(sessions)
    if len(ordered) < min_sessions:
        return AnomalyReport(has_sufficient_data=False)

    with_pace = [s for s in ordered if s.has_valid_pace]
    with_swolf = [s for s in ordered if s.has_valid_swolf]

    pace_stats, pace_anomalies = _scan(
        with_pace, Metric.PACE, lambda s: s.pace,
        min_sessions, moderate_sigma, extreme_sigma,
    )
    distance_stats, distance_anomalies = _scan(
        ordered, Metric.DISTANCE, lambda s: s.distance,
        min_sessions, moderate_sigma, extreme_sigma,
    )
    swolf_stats, swolf_anomalies = _scan(
        with_swolf, Metric.SWOLF, lambda s: float(s.swolf),
        min_sessions, moderate_sigma, extreme_sigma, extreme_only=True,
    )

    unique = []
    seen = set()
    for anomaly in sorted(pace_anomalies + distance_anomalies + swolf_anomalies, key=_most_severe_first):
        if anomaly.session.id in seen:
            continue
        seen.add(anomaly.session.id)
        unique.append(anomaly)

    logger.debug(
        "Anomaly detection complete",
        extra={"sessions": len(ordered), "anomalies": len(unique)},
    )

    return AnomalyReport(
        has_sufficient_data=True,
        anomalies=tuple(unique),
        pace_stats=pace_stats,
        distance_stats=distance_stats,
        swolf_stats=swolf_stats,
    )
