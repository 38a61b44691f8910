"""
Lap-level pacing analysis.

Works on the laps of a single session: how evenly was it paced, and did the
swimmer fade towards the end.
"""

import statistics
from dataclasses import dataclass
from typing import Optional, Sequence

from .models import Lap


@dataclass(frozen=True)
class PacingStrategy:
    """Pacing pattern across a session's laps."""
    strategy: str  # 'negative', 'positive', 'even', 'erratic', 'unknown'
    consistency: int = 0
    variation: int = 0
    pace_change_pct: Optional[int] = None
    avg_pace: Optional[float] = None


@dataclass(frozen=True)
class FatigueIndex:
    """Slowdown of the final laps relative to the early-session baseline."""
    fatigue_index: int
    fading_laps: int
    description: str
    baseline_pace: Optional[float] = None
    final_pace: Optional[float] = None


def _lap_paces(laps: Sequence[Lap]) -> list[float]:
    """Per-lap pace in seconds per 100m, valid laps only."""
    return [lap.avg_pace * 60 for lap in laps if lap.avg_pace and lap.avg_pace > 0]


def detect_pacing_strategy(laps: Sequence[Lap]) -> PacingStrategy:
    """
    Classify the pacing of a session.

    Needs three laps with a valid pace. Coefficient of variation above 15% is
    'erratic'; otherwise the first and last thirds are compared: more than 3%
    faster at the end is a negative split, more than 3% slower a positive one.
    """
    paces = _lap_paces(laps)
    if len(paces) < 3:
        return PacingStrategy(strategy="unknown")

    mean_pace = statistics.fmean(paces)
    cv = statistics.pstdev(paces) / mean_pace * 100

    third = len(paces) // 3
    avg_first = statistics.fmean(paces[:third])
    avg_last = statistics.fmean(paces[-third:])
    pace_change = (avg_last - avg_first) / avg_first * 100

    if cv > 15:
        strategy = "erratic"
    elif pace_change < -3:
        strategy = "negative"
    elif pace_change > 3:
        strategy = "positive"
    else:
        strategy = "even"

    consistency = max(0.0, min(100.0, 100 - cv * 5))

    return PacingStrategy(
        strategy=strategy,
        consistency=round(consistency),
        variation=round(cv),
        pace_change_pct=round(pace_change),
        avg_pace=mean_pace / 60,
    )


def _describe_fatigue(index: float) -> str:
    if index < 2:
        return "Excellent endurance - minimal fatigue"
    if index < 5:
        return "Good pacing - slight slowdown at end"
    if index < 10:
        return "Moderate fatigue - consider pacing strategy"
    return "Significant fatigue - focus on endurance"


def calculate_fatigue_index(laps: Sequence[Lap]) -> FatigueIndex:
    """
    Compare the final third of a session against laps 2-4.

    The first lap is treated as warm-up and left out of the baseline. Laps more
    than 5% slower than the baseline count as fading.
    """
    paces = _lap_paces(laps)
    if len(paces) < 5:
        return FatigueIndex(fatigue_index=0, fading_laps=0, description="Insufficient data")

    baseline = statistics.fmean(paces[1:4])
    final_laps = paces[-(len(paces) // 3):]

    fading = sum(1 for pace in final_laps if pace > baseline * 1.05)
    avg_final = statistics.fmean(final_laps)
    index = (avg_final - baseline) / baseline * 100

    return FatigueIndex(
        fatigue_index=round(index),
        fading_laps=fading,
        description=_describe_fatigue(index),
        baseline_pace=baseline / 60,
        final_pace=avg_final / 60,
    )
