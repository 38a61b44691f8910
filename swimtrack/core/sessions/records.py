"""
Raw per-format records.

Each source format gets its own record type carrying values in that format's
native units. Nothing here is normalized: a FIT record still holds elapsed
seconds, a TCX lap still holds a cadence rather than a stroke count. Values
that were absent or unreadable in the source are None.

The union of these types is what the normalizer accepts.
"""

from dataclasses import dataclass
from datetime import datetime
from typing import Optional, Union

from .models import SourceFormat


@dataclass(frozen=True)
class FitLap:
    """A `lap` message from a FIT file."""
    total_distance: Optional[float] = None
    total_elapsed_time: Optional[float] = None
    total_timer_time: Optional[float] = None
    total_strokes: Optional[float] = None

    @property
    def elapsed_seconds(self) -> float:
        return self.total_elapsed_time or self.total_timer_time or 0.0


@dataclass(frozen=True)
class FitRecord:
    """The `session` summary message of a FIT file plus its laps."""
    start_time: datetime
    total_distance: Optional[float] = None
    total_elapsed_time: Optional[float] = None
    total_timer_time: Optional[float] = None
    total_strokes: Optional[float] = None
    total_calories: Optional[float] = None
    laps: tuple[FitLap, ...] = ()

    source = SourceFormat.FIT

    @property
    def elapsed_seconds(self) -> float:
        return self.total_elapsed_time or self.total_timer_time or 0.0


@dataclass(frozen=True)
class TcxLap:
    """A `Lap` element; cadence is strokes per minute, not a count."""
    distance_meters: Optional[float] = None
    total_time_seconds: Optional[float] = None
    cadence: Optional[float] = None


@dataclass(frozen=True)
class TcxRecord:
    """One `Activity` element of a TCX document."""
    start_time: datetime
    laps: tuple[TcxLap, ...] = ()

    source = SourceFormat.TCX


@dataclass(frozen=True)
class CompactCsvRecord:
    """
    A row of the compact CSV dialect.

    Columns: date, distance (m), duration (min), pace (min/100m), strokes,
    swolf, calories.
    """
    date: datetime
    distance: Optional[float] = None
    duration_minutes: Optional[float] = None
    pace: Optional[float] = None
    strokes: Optional[float] = None
    swolf: Optional[float] = None
    calories: Optional[float] = None

    source = SourceFormat.COMPACT_CSV


@dataclass(frozen=True)
class AnnotatedCsvRecord:
    """A row of the unit-annotated CSV dialect, already stripped of unit suffixes."""
    date: datetime
    distance_meters: Optional[float] = None
    duration_seconds: Optional[float] = None
    strokes: Optional[float] = None
    calories: Optional[float] = None

    source = SourceFormat.ANNOTATED_CSV


@dataclass(frozen=True)
class LapRow:
    """One Apple Health lap-distance reading."""
    start_time: datetime
    end_time: datetime
    distance: float

    @property
    def duration_seconds(self) -> float:
        return (self.end_time - self.start_time).total_seconds()


@dataclass(frozen=True)
class LapGroup:
    """A cluster of lap rows judged to belong to the same swim."""
    laps: tuple[LapRow, ...]

    source = SourceFormat.APPLE_HEALTH_LAPS

    def __post_init__(self) -> None:
        if not self.laps:
            raise ValueError("A lap group must contain at least one lap")

    @property
    def start_time(self) -> datetime:
        return self.laps[0].start_time

    @property
    def end_time(self) -> datetime:
        return self.laps[-1].end_time


RawRecord = Union[FitRecord, TcxRecord, CompactCsvRecord, AnnotatedCsvRecord, LapGroup]
