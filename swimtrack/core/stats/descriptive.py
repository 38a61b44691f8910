"""Small descriptive-statistics helpers shared by the analyses."""

import statistics
from typing import Iterable, Sequence

from ..sessions.models import Session
from .models import MetricStats


def population_stats(
    values: Sequence[float],
    moderate_sigma: float = 2.0,
    extreme_sigma: float = 3.0,
) -> MetricStats:
    """Population (not sample) mean and standard deviation."""
    if not values:
        raise ValueError("Cannot compute statistics of an empty sequence")
    return MetricStats(
        mean=statistics.fmean(values),
        std_dev=statistics.pstdev(values),
        count=len(values),
        moderate_sigma=moderate_sigma,
        extreme_sigma=extreme_sigma,
    )


def mean_or_zero(values: Iterable[float]) -> float:
    values = list(values)
    return statistics.fmean(values) if values else 0.0


def chronological(sessions: Iterable[Session]) -> list[Session]:
    """Sort oldest first; ties broken by id so the order never depends on input order."""
    return sorted(sessions, key=lambda session: (session.date, str(session.id)))


def format_pace(pace: float) -> str:
    """Format minutes per 100m as M:SS."""
    minutes = int(pace)
    seconds = round((pace - minutes) * 60)
    if seconds == 60:
        minutes, seconds = minutes + 1, 0
    return f"{minutes}:{seconds:02d}"
