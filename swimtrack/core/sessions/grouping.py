"""
Apple Health lap grouping.

Apple Health exports swimming distance as one row per lap with no notion of
which swim the lap belonged to. Laps are partitioned into sessions with a
temporal-gap heuristic: a pause longer than the threshold between one lap
ending and the next starting means a new swim.

The grouper needs the whole lap list before it can close any group, since a
group only ends when a later gap is observed. Clock skew and midnight
rollover in the source data are not handled.
"""

import logging
from dataclasses import dataclass, field
from datetime import timedelta
from typing import Iterable

from .metrics import DEFAULT_SWOLF_BAND, SwolfBand
from .models import Session
from .normalizer import normalize
from .records import LapGroup, LapRow


logger = logging.getLogger(__name__)

SESSION_GAP_THRESHOLD = timedelta(minutes=5)


@dataclass
class _GroupingState:
    """Accumulator for the left fold over sorted laps."""
    threshold: timedelta
    closed: list[LapGroup] = field(default_factory=list)
    open_laps: list[LapRow] = field(default_factory=list)

    def step(self, lap: LapRow) -> None:
        if self.open_laps:
            gap = lap.start_time - self.open_laps[-1].end_time
            if gap > self.threshold:
                self.close()
        self.open_laps.append(lap)

    def close(self) -> None:
        if self.open_laps:
            self.closed.append(LapGroup(laps=tuple(self.open_laps)))
            self.open_laps = []


def group_laps(
    laps: Iterable[LapRow],
    threshold: timedelta = SESSION_GAP_THRESHOLD,
) -> list[LapGroup]:
    """
    Partition lap rows into groups separated by gaps longer than `threshold`.

    A gap of exactly `threshold` keeps the laps together. Empty input yields
    no groups; a lone lap forms a group of one.
    """
    state = _GroupingState(threshold=threshold)
    for lap in sorted(laps, key=lambda row: row.start_time):
        state.step(lap)
    state.close()

    logger.debug(
        "Grouped laps into sessions",
        extra={"groups": len(state.closed), "threshold_seconds": threshold.total_seconds()},
    )
    return state.closed


def build_lap_sessions(
    laps: Iterable[LapRow],
    threshold: timedelta = SESSION_GAP_THRESHOLD,
    band: SwolfBand = DEFAULT_SWOLF_BAND,
) -> list[Session]:
    """Group lap rows and aggregate each group into a Session."""
    return [normalize(group, band=band) for group in group_laps(laps, threshold)]
