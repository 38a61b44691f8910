"""
Pace streak detection.

Looks at the most recent swims and reports a run of consecutive transitions
of one kind (improving, declining or consistent pace) that ends at the latest
swim. Only one streak type can ever be active: a transition of a different
kind resets every counter.
"""

from typing import Iterable, Optional

from ..sessions.models import Session
from .descriptive import chronological
from .models import StreakReport, StreakType


WINDOW = 10
CHANGE_PCT = 2.0
MIN_STREAK = 3

_MESSAGES = {
    StreakType.IMPROVING: "You're on an improving streak! {n} consecutive swims with better pace.",
    StreakType.DECLINING: (
        "Your pace has been slower for {n} consecutive swims. "
        "Consider rest or technique work."
    ),
    StreakType.CONSISTENT: "Great consistency! {n} swims with similar pace.",
}


def _classify(prev: Session, curr: Session, change_pct: float) -> StreakType:
    # Positive change means the pace number dropped, i.e. the swimmer got faster
    change = (prev.pace - curr.pace) / prev.pace * 100
    if change > change_pct:
        return StreakType.IMPROVING
    if change < -change_pct:
        return StreakType.DECLINING
    return StreakType.CONSISTENT


def detect_streak(
    sessions: Iterable[Session],
    window: int = WINDOW,
    change_pct: float = CHANGE_PCT,
    min_streak: int = MIN_STREAK,
) -> StreakReport:
    """
    Report the current pace streak over the last `window` swims.

    A streak needs `min_streak` transitions, so its length in swims is
    transitions + 1. Pairs where either swim has no valid pace are skipped
    without breaking the run.
    """
    ordered = chronological(sessions)
    if len(ordered) < min_streak + 1:
        return StreakReport(has_sufficient_data=False)

    recent = ordered[-window:]
    current: Optional[StreakType] = None
    transitions = 0
    run: list[Session] = []

    for prev, curr in zip(recent, recent[1:]):
        if not (prev.has_valid_pace and curr.has_valid_pace):
            continue

        kind = _classify(prev, curr, change_pct)
        if kind is current:
            transitions += 1
            run.append(curr)
        else:
            current = kind
            transitions = 1
            run = [prev, curr]

    if current is None or transitions < min_streak:
        return StreakReport(has_sufficient_data=True, has_streak=False)

    length = transitions + 1
    return StreakReport(
        has_sufficient_data=True,
        has_streak=True,
        streak_type=current,
        streak_length=length,
        message=_MESSAGES[current].format(n=length),
        sessions=tuple(run),
    )
