"""Sudden-change detection between consecutive swims."""

from typing import Iterable

from ..sessions.models import Session
from .descriptive import chronological
from .models import Metric, SuddenChange, SuddenChangeReport


MIN_SESSIONS = 3
PACE_CHANGE_PCT = 15.0
DISTANCE_CHANGE_PCT = 30.0


def detect_sudden_changes(
    sessions: Iterable[Session],
    min_sessions: int = MIN_SESSIONS,
    pace_change_pct: float = PACE_CHANGE_PCT,
    distance_change_pct: float = DISTANCE_CHANGE_PCT,
) -> SuddenChangeReport:
    """
    Walk sessions oldest to newest and flag large swings.

    A pace change beyond 15% (lower is an improvement) or a distance change
    beyond 30% between neighbours is reported. Pairs where either pace is not
    valid are skipped for pace; a previous distance of 0 is skipped for
    distance.
    """
    ordered = chronological(sessions)
    if len(ordered) < min_sessions:
        return SuddenChangeReport(has_sufficient_data=False)

    changes = []
    for prev, curr in zip(ordered, ordered[1:]):
        if prev.has_valid_pace and curr.has_valid_pace:
            change = (curr.pace - prev.pace) / prev.pace * 100
            if abs(change) > pace_change_pct:
                improved = change < 0
                changes.append(SuddenChange(
                    metric=Metric.PACE,
                    previous_session=prev,
                    current_session=curr,
                    change_pct=change,
                    direction="improvement" if improved else "decline",
                    message=(
                        f"Pace {'improved' if improved else 'declined'} by "
                        f"{abs(change):.1f}% from previous swim"
                    ),
                ))

        if prev.distance > 0:
            change = (curr.distance - prev.distance) / prev.distance * 100
            if abs(change) > distance_change_pct:
                longer = change > 0
                changes.append(SuddenChange(
                    metric=Metric.DISTANCE,
                    previous_session=prev,
                    current_session=curr,
                    change_pct=change,
                    direction="increase" if longer else "decrease",
                    message=(
                        f"Distance {'increased' if longer else 'decreased'} by "
                        f"{abs(change):.1f}% from previous swim"
                    ),
                ))

    return SuddenChangeReport(has_sufficient_data=True, changes=tuple(changes))
