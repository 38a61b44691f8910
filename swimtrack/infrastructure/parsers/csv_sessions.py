"""
Session CSV parsers.

Two dialects are understood:

- compact: `date,distance,duration,pace,strokes,swolf,calories` with
  distance in meters and duration in minutes
- unit-annotated: a wearable export whose header carries `startDate` and
  `totalDistance`, with values such as "675 m" or "2834.6 sec"

Bad rows are skipped with a warning; the file only fails when it has no
data lines or no usable row at all.
"""

import logging
from datetime import timezone, tzinfo
from typing import Optional, Union

from ...core.sessions.records import AnnotatedCsvRecord, CompactCsvRecord
from .base import (
    ParseError,
    normalize_header,
    parse_timestamp,
    read_csv_rows,
    row_to_dict,
    strip_to_float,
    to_float,
    unit_of,
)


logger = logging.getLogger(__name__)

MIN_COLUMNS = 5

COMPACT_COLUMNS = ("date", "distance", "duration", "pace", "strokes", "swolf", "calories")

# Multipliers to meters / seconds; an absent unit means the base unit
DISTANCE_UNITS = {"": 1.0, "m": 1.0, "km": 1000.0, "yd": 0.9144, "mi": 1609.344}
DURATION_UNITS = {"": 1.0, "s": 1.0, "sec": 1.0, "min": 60.0, "h": 3600.0, "hr": 3600.0}

CALORIE_COLUMNS = ("totalenergyburned", "activeenergyburned", "calories")

CsvRecord = Union[CompactCsvRecord, AnnotatedCsvRecord]


def is_annotated_header(header: list[str]) -> bool:
    names = normalize_header(header)
    return "startdate" in names and "totaldistance" in names


def _split_rows(content: bytes | str) -> tuple[list[str], list[list[str]]]:
    rows = read_csv_rows(content)
    if len(rows) < 2:
        raise ParseError("CSV file must have a header and at least one data row")
    return normalize_header(rows[0]), rows[1:]


def _convert(value: Optional[str], units: dict[str, float], column: str) -> Optional[float]:
    number = strip_to_float(value)
    if number is None:
        return None
    unit = unit_of(value)
    if unit not in units:
        logger.warning("Unknown unit, assuming base unit", extra={"column": column, "unit": unit})
        return number
    return number * units[unit]


# ---------------------------------------------------------------------------
# Compact dialect
# ---------------------------------------------------------------------------

def parse_compact_csv(content: bytes | str, default_tz: tzinfo = timezone.utc) -> list[CompactCsvRecord]:
    """
    Parse the compact dialect.

    Columns are located by header name; a header that names none of them is
    read positionally in the documented column order.
    """
    header, rows = _split_rows(content)
    if not any(name in COMPACT_COLUMNS for name in header):
        header = list(COMPACT_COLUMNS)

    records = []
    for line_number, row in enumerate(rows, start=2):
        if len(row) < MIN_COLUMNS:
            logger.warning("Skipping short CSV row", extra={"line": line_number, "columns": len(row)})
            continue

        values = row_to_dict(header, row)
        date = parse_timestamp(values.get("date"), default_tz)
        if date is None:
            logger.warning("Skipping CSV row with unreadable date", extra={"line": line_number})
            continue

        distance = to_float(values.get("distance"))
        if distance is None or distance <= 0:
            logger.warning("Skipping CSV row without a positive distance", extra={"line": line_number})
            continue

        records.append(
            CompactCsvRecord(
                date=date,
                distance=distance,
                duration_minutes=to_float(values.get("duration")),
                pace=to_float(values.get("pace")),
                strokes=to_float(values.get("strokes")),
                swolf=to_float(values.get("swolf")),
                calories=to_float(values.get("calories")),
            )
        )

    if not records:
        raise ParseError("No valid sessions found in CSV file")
    return records


# ---------------------------------------------------------------------------
# Unit-annotated dialect
# ---------------------------------------------------------------------------

def parse_annotated_csv(content: bytes | str, default_tz: tzinfo = timezone.utc) -> list[AnnotatedCsvRecord]:
    """Parse the unit-annotated wearable export dialect."""
    header, rows = _split_rows(content)
    if not is_annotated_header(header):
        raise ParseError("CSV header lacks startDate and totalDistance columns")

    records = []
    for line_number, row in enumerate(rows, start=2):
        if len(row) < MIN_COLUMNS:
            logger.warning("Skipping short CSV row", extra={"line": line_number, "columns": len(row)})
            continue

        values = row_to_dict(header, row)
        date = parse_timestamp(values.get("startdate"), default_tz)
        if date is None:
            logger.warning("Skipping CSV row with unreadable date", extra={"line": line_number})
            continue

        distance = _convert(values.get("totaldistance"), DISTANCE_UNITS, "totalDistance")
        if distance is None or distance <= 0:
            logger.warning("Skipping CSV row without a positive distance", extra={"line": line_number})
            continue

        calories = next(
            (strip_to_float(values[name]) for name in CALORIE_COLUMNS if values.get(name)),
            None,
        )

        records.append(
            AnnotatedCsvRecord(
                date=date,
                distance_meters=distance,
                duration_seconds=_convert(values.get("duration"), DURATION_UNITS, "duration"),
                strokes=strip_to_float(values.get("totalswimmingstrokecount")),
                calories=calories,
            )
        )

    if not records:
        raise ParseError("No valid sessions found in CSV file")
    return records


def parse_session_csv(content: bytes | str, default_tz: tzinfo = timezone.utc) -> list[CsvRecord]:
    """Parse either session dialect, choosing by the header."""
    header, _ = _split_rows(content)
    if is_annotated_header(header):
        return parse_annotated_csv(content, default_tz)
    return parse_compact_csv(content, default_tz)
