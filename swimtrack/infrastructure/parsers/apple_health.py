"""
Apple Health lap-distance CSV parser.

Each data row is one lap (`startDate`, `endDate`, `value` in meters). Rows
are returned unordered and ungrouped; `swimtrack.core.sessions.grouping`
turns them into sessions.
"""

import logging
from datetime import timezone, tzinfo

from ...core.sessions.records import LapRow
from .base import ParseError, normalize_header, parse_timestamp, read_csv_rows, row_to_dict, to_float


logger = logging.getLogger(__name__)

REQUIRED_COLUMNS = ("startdate", "enddate", "value")


def is_lap_header(header: list[str]) -> bool:
    names = normalize_header(header)
    return all(column in names for column in REQUIRED_COLUMNS)


def parse_lap_csv(content: bytes | str, default_tz: tzinfo = timezone.utc) -> list[LapRow]:
    """
    Parse lap rows.

    Raises:
        ParseError: If the header lacks startDate, endDate or value, or no
            row is usable
    """
    rows = read_csv_rows(content)
    if len(rows) < 2:
        raise ParseError("CSV file must have a header and at least one data row")

    header = normalize_header(rows[0])
    if not is_lap_header(header):
        raise ParseError("CSV missing required columns: startDate, endDate, value")

    laps = []
    for line_number, row in enumerate(rows[1:], start=2):
        values = row_to_dict(header, row)
        start_time = parse_timestamp(values["startdate"], default_tz)
        end_time = parse_timestamp(values["enddate"], default_tz)
        distance = to_float(values["value"])

        if start_time is None or end_time is None or distance is None:
            logger.warning("Skipping unreadable lap row", extra={"line": line_number})
            continue
        if end_time < start_time or distance < 0:
            logger.warning("Skipping impossible lap row", extra={"line": line_number})
            continue

        laps.append(LapRow(start_time=start_time, end_time=end_time, distance=distance))

    if not laps:
        raise ParseError("No valid laps found in CSV file")

    logger.debug("Parsed lap CSV", extra={"laps": len(laps)})
    return laps
