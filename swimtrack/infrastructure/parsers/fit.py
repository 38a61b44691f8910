"""
FIT (binary activity container) parser.

Decoding is done by fitparse; this module only picks the messages a swim
needs. A FIT file without a `session` summary message is rejected as a
whole; per-lap messages are optional.
"""

import io
import logging
from datetime import datetime, timezone
from typing import Any, Optional

from fitparse import FitFile, FitParseError

from ...core.sessions.records import FitLap, FitRecord
from .base import ParseError, ensure_aware, to_float


logger = logging.getLogger(__name__)


def _strokes(values: dict[str, Any]) -> Optional[float]:
    # Swim files expose the stroke count as a subfield of total_cycles
    strokes = to_float(values.get("total_strokes"))
    return strokes if strokes is not None else to_float(values.get("total_cycles"))


def _read_messages(content: bytes) -> tuple[list[dict], list[dict], list[dict]]:
    """Decode the file and return (session, lap, file_id) message values."""
    try:
        fit = FitFile(io.BytesIO(content), check_crc=False)
        sessions = [message.get_values() for message in fit.get_messages("session")]
        laps = [message.get_values() for message in fit.get_messages("lap")]
        file_ids = [message.get_values() for message in fit.get_messages("file_id")]
    except FitParseError as e:
        raise ParseError(f"Failed to parse FIT file: {e}") from e
    return sessions, laps, file_ids


def build_fit_record(
    session: Optional[dict[str, Any]],
    laps: list[dict[str, Any]],
    file_id: Optional[dict[str, Any]] = None,
) -> FitRecord:
    """
    Assemble a FitRecord from decoded message values.

    The start time falls back from the session to the first lap and then to
    the file creation time. Timestamps without an offset are UTC in FIT,
    whatever zone the rest of the import defaults to.
    """
    if not session:
        raise ParseError("No session data found in FIT file")

    candidates = [session.get("start_time")]
    if laps:
        candidates.append(laps[0].get("start_time"))
    if file_id:
        candidates.append(file_id.get("time_created"))
    start_time = next((value for value in candidates if isinstance(value, datetime)), None)
    if start_time is None:
        raise ParseError("No start time found in FIT file")

    fit_laps = tuple(
        FitLap(
            total_distance=to_float(lap.get("total_distance")),
            total_elapsed_time=to_float(lap.get("total_elapsed_time")),
            total_timer_time=to_float(lap.get("total_timer_time")),
            total_strokes=_strokes(lap),
        )
        for lap in laps
    )

    return FitRecord(
        start_time=ensure_aware(start_time, timezone.utc),
        total_distance=to_float(session.get("total_distance")),
        total_elapsed_time=to_float(session.get("total_elapsed_time")),
        total_timer_time=to_float(session.get("total_timer_time")),
        total_strokes=_strokes(session),
        total_calories=to_float(session.get("total_calories")),
        laps=fit_laps,
    )


def parse_fit(content: bytes) -> list[FitRecord]:
    """Parse a FIT file into a single FitRecord (the first session message)."""
    sessions, laps, file_ids = _read_messages(content)

    if len(sessions) > 1:
        logger.warning(
            "FIT file has multiple sessions, using the first",
            extra={"session_count": len(sessions)},
        )

    record = build_fit_record(
        sessions[0] if sessions else None,
        laps,
        file_ids[0] if file_ids else None,
    )
    logger.debug("Parsed FIT file", extra={"laps": len(record.laps)})
    return [record]
