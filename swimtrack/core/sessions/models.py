"""
Domain models for swim sessions.

These models represent the canonical shape every source file is mapped into.
They have no dependencies on file formats, parsing libraries, or storage.
A Session is created once from one source file (or one grouped cluster of
lap rows) and is never mutated afterwards, hence the frozen dataclasses.
"""

from dataclasses import dataclass, field
from datetime import datetime
from enum import Enum
from typing import Optional
from uuid import UUID, uuid4


class SourceFormat(Enum):
    """
    Provenance tag identifying which parser produced a record.

    Downstream code uses the tag to decide which fields can be trusted:
    a TCX session without calories has "no calorie data", not "zero calories".
    """
    FIT = "fit"
    TCX = "tcx"
    COMPACT_CSV = "compact_csv"
    ANNOTATED_CSV = "annotated_csv"
    VO2MAX_CSV = "vo2max_csv"
    APPLE_HEALTH_LAPS = "apple_health_laps"

    @property
    def label(self) -> str:
        """Human-readable provenance label."""
        return _SOURCE_LABELS[self]

    @property
    def supplies_calories(self) -> bool:
        return self in (
            SourceFormat.FIT,
            SourceFormat.COMPACT_CSV,
            SourceFormat.ANNOTATED_CSV,
        )

    @property
    def supplies_swolf(self) -> bool:
        return self in (
            SourceFormat.FIT,
            SourceFormat.COMPACT_CSV,
            SourceFormat.ANNOTATED_CSV,
        )

    @property
    def supplies_strokes(self) -> bool:
        # TCX strokes are approximated from cadence, still reported
        return self not in (SourceFormat.VO2MAX_CSV, SourceFormat.APPLE_HEALTH_LAPS)


_SOURCE_LABELS = {
    SourceFormat.FIT: "FIT file",
    SourceFormat.TCX: "TCX file",
    SourceFormat.COMPACT_CSV: "CSV file",
    SourceFormat.ANNOTATED_CSV: "Apple Health CSV",
    SourceFormat.VO2MAX_CSV: "VO2 max CSV",
    SourceFormat.APPLE_HEALTH_LAPS: "Apple Health CSV (lap data)",
}


@dataclass(frozen=True)
class Lap:
    """
    One contiguous segment within a session.

    Distance is in meters, duration in seconds, avg_pace in minutes per 100m.
    """
    number: int
    distance: float
    duration_seconds: float
    strokes: Optional[int] = None
    avg_pace: float = 0.0

    def __post_init__(self) -> None:
        if self.number < 1:
            raise ValueError("Lap number must be 1-based")
        if self.distance < 0 or self.duration_seconds < 0:
            raise ValueError("Lap distance and duration cannot be negative")


@dataclass(frozen=True)
class Session:
    """
    One completed swim activity with aggregate metrics.

    - distance: meters
    - duration_minutes: decimal minutes (seconds are preserved)
    - pace: minutes per 100m; 0 when nothing was swum, None when not measured
    - swolf / calories / strokes: None when the source did not measure them
    - rating: tri-state user rating (True / False / not rated)
    """
    date: datetime
    distance: float
    duration_minutes: float
    source: SourceFormat
    pace: Optional[float] = 0.0
    strokes: Optional[int] = None
    swolf: Optional[int] = None
    calories: Optional[int] = None
    laps: tuple[Lap, ...] = ()
    rating: Optional[bool] = None
    id: UUID = field(default_factory=uuid4)

    def __post_init__(self) -> None:
        if self.date.tzinfo is None or self.date.utcoffset() is None:
            raise ValueError("Session date must be timezone-aware")
        if self.distance < 0:
            raise ValueError("Session distance cannot be negative")
        if self.duration_minutes < 0:
            raise ValueError("Session duration cannot be negative")

    @property
    def has_laps(self) -> bool:
        return len(self.laps) > 0

    @property
    def has_valid_pace(self) -> bool:
        """True when the session recorded a usable (> 0) pace."""
        return self.pace is not None and self.pace > 0

    @property
    def has_valid_swolf(self) -> bool:
        return self.swolf is not None and self.swolf > 0

    @property
    def duration_seconds(self) -> float:
        return self.duration_minutes * 60


@dataclass(frozen=True)
class VO2MaxReading:
    """A single VO2 max measurement (ml/kg/min)."""
    date: datetime
    value: float

    def __post_init__(self) -> None:
        if self.date.tzinfo is None or self.date.utcoffset() is None:
            raise ValueError("VO2 max date must be timezone-aware")
        if self.value <= 0:
            raise ValueError("VO2 max value must be positive")
