"""
Derived swim metrics.

Every format adapter computes pace and SWOLF through these functions, so the
formulas live in exactly one place. None of them raise: degenerate inputs
(zero distance, missing strokes) produce the documented 0 / None sentinels and
leave judging their meaning to the statistics engine.

Units:
- pace: minutes per 100 meters
- SWOLF: strokes per length + seconds per length (lower is better)
- distance per stroke: meters per stroke (higher is better)
"""

import math
from dataclasses import dataclass
from typing import Iterable, Optional


DEFAULT_REFERENCE_LENGTH_M = 25.0


@dataclass(frozen=True)
class SwolfBand:
    """
    Range of lap distances that plausibly represent a single pool length.

    Laps outside the band (rest segments, partial final lengths, multi-length
    splits) are noise for SWOLF and are discarded. The default band assumes a
    25m pool.
    """
    min_distance: float = 20.0
    max_distance: float = 60.0

    def __post_init__(self) -> None:
        if self.min_distance > self.max_distance:
            raise ValueError("SWOLF band minimum must not exceed its maximum")

    def contains(self, distance: Optional[float]) -> bool:
        if distance is None:
            return False
        return self.min_distance <= distance <= self.max_distance

    @classmethod
    def for_pool_length(cls, pool_length: float) -> "SwolfBand":
        """Scale the 25m band (20-60m) proportionally to another pool length."""
        factor = pool_length / DEFAULT_REFERENCE_LENGTH_M
        return cls(min_distance=20.0 * factor, max_distance=60.0 * factor)


DEFAULT_SWOLF_BAND = SwolfBand()


def round_half_up(value: float) -> int:
    """Round to the nearest integer, halves away from zero."""
    return int(math.floor(abs(value) + 0.5)) * (1 if value >= 0 else -1)


def calculate_pace(duration_minutes: float, distance_meters: float) -> float:
    """
    Pace in minutes per 100m.

    Returns exactly 0 unless the distance is a positive finite number, never
    NaN or infinity.
    """
    if not distance_meters or not math.isfinite(distance_meters) or distance_meters <= 0:
        return 0.0
    if not math.isfinite(duration_minutes) or duration_minutes < 0:
        return 0.0
    return duration_minutes / (distance_meters / 100)


def calculate_session_swolf(
    strokes: Optional[float],
    duration_seconds: float,
    distance_meters: float,
    reference_length: float = DEFAULT_REFERENCE_LENGTH_M,
) -> Optional[int]:
    """
    Approximate SWOLF from session totals when no lap breakdown exists.

    strokes/(distance/L) + seconds/(distance/L) for reference length L.
    Returns None when the session has no distance or no stroke count.
    """
    if not distance_meters or distance_meters <= 0:
        return None
    if not strokes or strokes <= 0:
        return None

    lengths = distance_meters / reference_length
    strokes_per_length = strokes / lengths
    seconds_per_length = duration_seconds / lengths
    return round_half_up(strokes_per_length + seconds_per_length)


def calculate_lap_swolf(
    laps: Iterable[tuple[Optional[float], Optional[float], Optional[float]]],
    band: SwolfBand = DEFAULT_SWOLF_BAND,
) -> Optional[int]:
    """
    Mean per-lap SWOLF over laps that look like a single pool length.

    `laps` yields (distance, strokes, elapsed_seconds) triples. Only laps
    inside the band with a positive stroke count take part. Returns None when
    no lap qualifies.
    """
    scores = [
        (strokes or 0) + (seconds or 0)
        for distance, strokes, seconds in laps
        if band.contains(distance) and strokes and strokes > 0
    ]
    if not scores:
        return None
    return round_half_up(sum(scores) / len(scores))


def distance_per_stroke(distance_meters: float, strokes: Optional[float]) -> float:
    """
    Meters covered per stroke.

    Not stored on Session; exposed for display code that wants the view.
    """
    if not strokes or strokes <= 0 or not distance_meters or distance_meters <= 0:
        return 0.0
    return distance_meters / strokes
