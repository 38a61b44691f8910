"""
VO2-max CSV parser.

Two layouts exist: a headed file (`date,vo2max` or `startDate,value`) and a
headerless wearable export where every line is a typed sample:

    type,sourceName,sourceVersion,device,unit,startDate,endDate,unit,value,...

Readings are returned in file order; attaching them to sessions is done by
`swimtrack.core.sessions.matching.attach_vo2max`.
"""

import logging
from datetime import timezone, tzinfo

from ...core.sessions.models import VO2MaxReading
from .base import ParseError, normalize_header, parse_timestamp, read_csv_rows, row_to_dict, to_float


logger = logging.getLogger(__name__)

VO2MAX_MARKER = "HKQuantityTypeIdentifierVO2Max"

# Headerless export columns
EXPORT_DATE_COLUMN = 5
EXPORT_VALUE_COLUMN = 8


def is_headerless_export(first_line: str) -> bool:
    return VO2MAX_MARKER in first_line


def _reading(date_text: str, value_text: str, line_number: int, default_tz: tzinfo):
    value = to_float(value_text)
    if value is None or value <= 0:
        logger.warning("Skipping VO2 max row with invalid value", extra={"line": line_number, "value": value_text})
        return None
    date = parse_timestamp(date_text, default_tz)
    if date is None:
        logger.warning("Skipping VO2 max row with unreadable date", extra={"line": line_number})
        return None
    return VO2MaxReading(date=date, value=value)


def _parse_export(rows: list[list[str]], default_tz: tzinfo) -> list[VO2MaxReading]:
    readings = []
    for line_number, row in enumerate(rows, start=1):
        if len(row) <= EXPORT_VALUE_COLUMN:
            logger.warning("Skipping VO2 max row with too few columns", extra={"line": line_number})
            continue
        reading = _reading(row[EXPORT_DATE_COLUMN], row[EXPORT_VALUE_COLUMN], line_number, default_tz)
        if reading:
            readings.append(reading)
    return readings


def _parse_headed(rows: list[list[str]], default_tz: tzinfo) -> list[VO2MaxReading]:
    if len(rows) < 2:
        raise ParseError("VO2 max CSV file must have a header and at least one data row")

    header = normalize_header(rows[0])
    if "startdate" in header and "value" in header:
        date_column, value_column = "startdate", "value"
    elif "date" in header and "vo2max" in header:
        date_column, value_column = "date", "vo2max"
    else:
        raise ParseError(
            'VO2 max CSV must contain "date" and "vo2max" columns, or "startDate" and "value" '
            f"columns. Found headers: {', '.join(header)}"
        )

    readings = []
    for line_number, row in enumerate(rows[1:], start=2):
        values = row_to_dict(header, row)
        reading = _reading(values[date_column], values[value_column], line_number, default_tz)
        if reading:
            readings.append(reading)
    return readings


def parse_vo2max_csv(content: bytes | str, default_tz: tzinfo = timezone.utc) -> list[VO2MaxReading]:
    """
    Parse a VO2-max CSV in either layout.

    Raises:
        ParseError: If the file is empty, has an unrecognised header, or
            contains no usable reading
    """
    rows = read_csv_rows(content)
    if not rows:
        raise ParseError("VO2 max CSV file is empty")

    if is_headerless_export(",".join(rows[0])):
        readings = _parse_export(rows, default_tz)
    else:
        readings = _parse_headed(rows, default_tz)

    if not readings:
        raise ParseError("No valid VO2 max readings found in CSV file")

    logger.debug("Parsed VO2 max CSV", extra={"readings": len(readings)})
    return readings
