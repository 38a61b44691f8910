"""
Matching helpers for the external merge steps.

Attaching VO2 max readings and supplementary lap detail to stored sessions is
done by the persistence layer as an upsert. These functions only decide what
goes where; they never modify a Session.
"""

from dataclasses import dataclass
from typing import Iterable
from uuid import UUID

from .models import Session, VO2MaxReading


MAX_MATCH_MINUTES = 60.0
MAX_MATCH_DISTANCE_M = 100.0


def attach_vo2max(
    sessions: Iterable[Session],
    readings: Iterable[VO2MaxReading],
) -> dict[UUID, VO2MaxReading]:
    """
    Pair each session with the most recent reading taken on or before it.

    Sessions that predate every reading are left out of the result.
    """
    ordered = sorted(readings, key=lambda reading: reading.date)
    matches: dict[UUID, VO2MaxReading] = {}

    for session in sessions:
        latest = None
        for reading in ordered:
            if reading.date <= session.date:
                latest = reading
            else:
                break
        if latest is not None:
            matches[session.id] = latest

    return matches


@dataclass(frozen=True)
class MatchCandidate:
    """An existing session that a freshly grouped lap session may belong to."""
    session: Session
    score: int
    minutes_apart: float
    distance_diff: float
    duration_diff: float


def find_match_candidates(
    parsed: Session,
    existing: Iterable[Session],
) -> list[MatchCandidate]:
    """
    Rank stored sessions as merge targets for `parsed`, best first.

    Sessions more than an hour apart or differing by more than 100m are not
    candidates. The score starts at 100 and loses one point per minute apart,
    one point per 5m of distance difference and two points per minute of
    duration difference.
    """
    candidates = []

    for session in existing:
        minutes_apart = abs((session.date - parsed.date).total_seconds()) / 60
        distance_diff = abs(session.distance - parsed.distance)
        duration_diff = abs(session.duration_minutes - parsed.duration_minutes)

        if minutes_apart > MAX_MATCH_MINUTES or distance_diff > MAX_MATCH_DISTANCE_M:
            continue

        score = 100 - minutes_apart - distance_diff / 5 - duration_diff * 2
        candidates.append(MatchCandidate(
            session=session,
            score=max(0, round(score)),
            minutes_apart=minutes_apart,
            distance_diff=distance_diff,
            duration_diff=duration_diff,
        ))

    candidates.sort(key=lambda candidate: candidate.score, reverse=True)
    return candidates
