"""
Session normalizer.

Maps any raw per-format record onto the canonical Session. This is a pure
function with no I/O: it never raises for bad values, it coerces them.

Coercion rules:
- distance / duration / strokes that are missing or unreadable become 0
- pace / SWOLF that are missing or unreadable become None ("not measured",
  as opposed to 0 for "not swum")
- calories that are missing become None
"""

import logging
import math
from typing import Callable, Optional

from .metrics import (
    DEFAULT_REFERENCE_LENGTH_M,
    DEFAULT_SWOLF_BAND,
    SwolfBand,
    calculate_lap_swolf,
    calculate_pace,
    calculate_session_swolf,
    round_half_up,
)
from .models import Lap, Session
from .records import (
    AnnotatedCsvRecord,
    CompactCsvRecord,
    FitRecord,
    LapGroup,
    RawRecord,
    TcxRecord,
)


logger = logging.getLogger(__name__)


def _number(value: Optional[float]) -> float:
    """Coerce to a finite, non-negative float; anything else is 0."""
    if value is None:
        return 0.0
    try:
        number = float(value)
    except (TypeError, ValueError):
        return 0.0
    if not math.isfinite(number) or number < 0:
        return 0.0
    return number


def _count(value: Optional[float]) -> int:
    return round_half_up(_number(value))


def _optional_positive(value: Optional[float]) -> Optional[float]:
    number = _number(value)
    return number if number > 0 else None


def _optional_count(value: Optional[float]) -> Optional[int]:
    number = _optional_positive(value)
    return round_half_up(number) if number is not None else None


# ---------------------------------------------------------------------------
# Per-format mappings
# ---------------------------------------------------------------------------

def _normalize_fit(record: FitRecord, band: SwolfBand, reference_length: float) -> Session:
    distance = _number(record.total_distance)
    elapsed_seconds = _number(record.elapsed_seconds)

    lap_strokes = sum(_count(lap.total_strokes) for lap in record.laps)
    strokes = _count(record.total_strokes) or lap_strokes

    laps = tuple(
        Lap(
            number=index,
            distance=_number(lap.total_distance),
            duration_seconds=_number(lap.elapsed_seconds),
            strokes=_count(lap.total_strokes),
            avg_pace=calculate_pace(
                _number(lap.elapsed_seconds) / 60, _number(lap.total_distance)
            ),
        )
        for index, lap in enumerate(record.laps, start=1)
    )

    if laps:
        swolf = calculate_lap_swolf(
            ((lap.distance, lap.strokes, lap.duration_seconds) for lap in laps),
            band,
        )
    else:
        swolf = calculate_session_swolf(strokes, elapsed_seconds, distance, reference_length)

    return Session(
        date=record.start_time,
        distance=distance,
        duration_minutes=elapsed_seconds / 60,
        pace=calculate_pace(elapsed_seconds / 60, distance),
        strokes=strokes,
        swolf=swolf,
        calories=_count(record.total_calories) if record.total_calories is not None else None,
        laps=laps,
        source=record.source,
    )


def _normalize_tcx(record: TcxRecord, band: SwolfBand, reference_length: float) -> Session:
    laps = []
    total_distance = 0.0
    total_seconds = 0.0
    total_strokes = 0.0

    for index, raw_lap in enumerate(record.laps, start=1):
        distance = _number(raw_lap.distance_meters)
        seconds = _number(raw_lap.total_time_seconds)
        # Cadence is a rate (strokes/min); the count is approximated from it
        strokes = _number(raw_lap.cadence) * (seconds / 60)

        total_distance += distance
        total_seconds += seconds
        total_strokes += strokes

        laps.append(Lap(
            number=index,
            distance=distance,
            duration_seconds=seconds,
            strokes=round_half_up(strokes),
            avg_pace=calculate_pace(seconds / 60, distance),
        ))

    return Session(
        date=record.start_time,
        distance=total_distance,
        duration_minutes=total_seconds / 60,
        pace=calculate_pace(total_seconds / 60, total_distance),
        strokes=round_half_up(total_strokes),
        swolf=None,
        calories=None,
        laps=tuple(laps),
        source=record.source,
    )


def _normalize_compact_csv(
    record: CompactCsvRecord, band: SwolfBand, reference_length: float
) -> Session:
    distance = _number(record.distance)
    pace = record.pace
    if distance == 0:
        pace = 0.0
    elif pace is not None and (not math.isfinite(pace) or pace < 0):
        pace = None

    return Session(
        date=record.date,
        distance=distance,
        duration_minutes=_number(record.duration_minutes),
        pace=pace,
        strokes=_count(record.strokes),
        swolf=_optional_count(record.swolf),
        calories=_optional_count(record.calories),
        laps=(),
        source=record.source,
    )


def _normalize_annotated_csv(
    record: AnnotatedCsvRecord, band: SwolfBand, reference_length: float
) -> Session:
    distance = _number(record.distance_meters)
    seconds = _number(record.duration_seconds)
    strokes = _count(record.strokes)

    return Session(
        date=record.date,
        distance=distance,
        duration_minutes=seconds / 60,
        pace=calculate_pace(seconds / 60, distance),
        strokes=strokes,
        swolf=calculate_session_swolf(strokes, seconds, distance, reference_length),
        calories=_optional_count(record.calories),
        laps=(),
        source=record.source,
    )


def _normalize_lap_group(record: LapGroup, band: SwolfBand, reference_length: float) -> Session:
    distance = sum(_number(lap.distance) for lap in record.laps)
    # Wall-clock span of the group, so short rests between laps count as session time
    total_seconds = max((record.end_time - record.start_time).total_seconds(), 0.0)

    laps = tuple(
        Lap(
            number=index,
            distance=_number(lap.distance),
            duration_seconds=max(lap.duration_seconds, 0.0),
            strokes=None,
            avg_pace=calculate_pace(max(lap.duration_seconds, 0.0) / 60, _number(lap.distance)),
        )
        for index, lap in enumerate(record.laps, start=1)
    )

    return Session(
        date=record.start_time,
        distance=distance,
        duration_minutes=total_seconds / 60,
        pace=calculate_pace(total_seconds / 60, distance),
        strokes=None,
        swolf=None,
        calories=None,
        laps=laps,
        source=record.source,
    )


_NORMALIZERS: dict[type, Callable[..., Session]] = {
    FitRecord: _normalize_fit,
    TcxRecord: _normalize_tcx,
    CompactCsvRecord: _normalize_compact_csv,
    AnnotatedCsvRecord: _normalize_annotated_csv,
    LapGroup: _normalize_lap_group,
}


def normalize(
    record: RawRecord,
    *,
    band: SwolfBand = DEFAULT_SWOLF_BAND,
    reference_length: float = DEFAULT_REFERENCE_LENGTH_M,
) -> Session:
    """
    Turn a raw per-format record into a canonical Session.

    `band` selects the laps used for lap-based SWOLF; `reference_length` is
    the pool length assumed by the session-level SWOLF approximation.
    """
    try:
        mapper = _NORMALIZERS[type(record)]
    except KeyError:
        raise TypeError(f"Unsupported record type: {type(record).__name__}") from None

    return mapper(record, band, reference_length)


def normalize_all(
    records: list[RawRecord],
    *,
    band: SwolfBand = DEFAULT_SWOLF_BAND,
    reference_length: float = DEFAULT_REFERENCE_LENGTH_M,
) -> list[Session]:
    """Normalize a batch of records, preserving order."""
    sessions = [
        normalize(record, band=band, reference_length=reference_length)
        for record in records
    ]
    logger.debug("Normalized records", extra={"count": len(sessions)})
    return sessions
