"""
Swim session domain logic.

Contains the canonical Session model, the raw per-format records, the
normalizer and derived metrics, and the Apple Health lap grouper.
"""

from .models import (
    Lap,
    Session,
    SourceFormat,
    VO2MaxReading,
)
from .records import (
    AnnotatedCsvRecord,
    CompactCsvRecord,
    FitLap,
    FitRecord,
    LapGroup,
    LapRow,
    RawRecord,
    TcxLap,
    TcxRecord,
)
from .metrics import (
    DEFAULT_SWOLF_BAND,
    SwolfBand,
    calculate_lap_swolf,
    calculate_pace,
    calculate_session_swolf,
    distance_per_stroke,
)
from .normalizer import normalize, normalize_all
from .grouping import SESSION_GAP_THRESHOLD, build_lap_sessions, group_laps
from .matching import MatchCandidate, attach_vo2max, find_match_candidates
from .pacing import (
    FatigueIndex,
    PacingStrategy,
    calculate_fatigue_index,
    detect_pacing_strategy,
)

__all__ = [
    "Lap",
    "Session",
    "SourceFormat",
    "VO2MaxReading",
    "AnnotatedCsvRecord",
    "CompactCsvRecord",
    "FitLap",
    "FitRecord",
    "LapGroup",
    "LapRow",
    "RawRecord",
    "TcxLap",
    "TcxRecord",
    "DEFAULT_SWOLF_BAND",
    "SwolfBand",
    "calculate_lap_swolf",
    "calculate_pace",
    "calculate_session_swolf",
    "distance_per_stroke",
    "normalize",
    "normalize_all",
    "SESSION_GAP_THRESHOLD",
    "build_lap_sessions",
    "group_laps",
    "MatchCandidate",
    "attach_vo2max",
    "find_match_candidates",
    "FatigueIndex",
    "PacingStrategy",
    "calculate_fatigue_index",
    "detect_pacing_strategy",
]
