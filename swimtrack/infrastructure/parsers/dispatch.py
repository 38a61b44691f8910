"""
Format detection and parser dispatch.

The extension picks the family (.fit, .tcx, .csv); CSV files are further
told apart by sniffing the header and first data row.
"""

import logging
from datetime import timezone, tzinfo
from pathlib import PurePath
from typing import Callable, Optional

from ...core.sessions.models import SourceFormat
from .apple_health import is_lap_header, parse_lap_csv
from .base import ParseError, UnsupportedFormatError, normalize_header, read_csv_rows
from .csv_sessions import is_annotated_header, parse_annotated_csv, parse_compact_csv
from .fit import parse_fit
from .tcx import parse_tcx
from .vo2max import VO2MAX_MARKER, is_headerless_export, parse_vo2max_csv


logger = logging.getLogger(__name__)

_PARSERS: dict[SourceFormat, Callable] = {
    SourceFormat.TCX: parse_tcx,
    SourceFormat.COMPACT_CSV: parse_compact_csv,
    SourceFormat.ANNOTATED_CSV: parse_annotated_csv,
    SourceFormat.VO2MAX_CSV: parse_vo2max_csv,
    SourceFormat.APPLE_HEALTH_LAPS: parse_lap_csv,
}


def sniff_csv(content: bytes | str) -> SourceFormat:
    """
    Identify a CSV dialect from its first two rows.

    Raises:
        UnsupportedFormatError: If the header matches no known dialect
    """
    rows = read_csv_rows(content)
    if not rows:
        raise ParseError("CSV file is empty")

    first_line = ",".join(rows[0])
    if is_headerless_export(first_line):
        return SourceFormat.VO2MAX_CSV

    header = normalize_header(rows[0])
    if "vo2max" in header:
        return SourceFormat.VO2MAX_CSV
    if is_annotated_header(header):
        return SourceFormat.ANNOTATED_CSV
    if is_lap_header(header):
        # Health exports share this header for every quantity type
        first_row = ",".join(rows[1]) if len(rows) > 1 else ""
        if VO2MAX_MARKER.lower() in first_row.lower() or "vo2max" in first_row.lower():
            return SourceFormat.VO2MAX_CSV
        return SourceFormat.APPLE_HEALTH_LAPS
    if "startdate" in header and "value" in header and "enddate" not in header:
        return SourceFormat.VO2MAX_CSV
    if "distance" in header:
        return SourceFormat.COMPACT_CSV

    raise UnsupportedFormatError(f"Unrecognised CSV header: {', '.join(header)}")


def detect_format(filename: str, content: bytes | str) -> SourceFormat:
    """
    Decide which parser handles a file.

    Raises:
        UnsupportedFormatError: For unknown extensions or CSV layouts
    """
    extension = PurePath(filename).suffix.lower()
    if extension == ".fit":
        return SourceFormat.FIT
    if extension == ".tcx":
        return SourceFormat.TCX
    if extension == ".csv":
        return sniff_csv(content)
    raise UnsupportedFormatError(f"Unsupported file type: {extension or '(none)'}")


def parse_content(
    filename: str,
    content: bytes | str,
    source: Optional[SourceFormat] = None,
    default_tz: tzinfo = timezone.utc,
) -> tuple[SourceFormat, list]:
    """
    Parse file content with the parser for its format.

    `source` skips detection when the caller already knows the format.
    Returns the format together with its raw records (VO2MaxReadings for
    VO2-max files, LapRows for lap files). Errors carry the filename.
    """
    try:
        source = source or detect_format(filename, content)
        if source is SourceFormat.FIT:
            if isinstance(content, str):
                raise ParseError("FIT content must be binary")
            # FIT timestamps are UTC by definition
            records = parse_fit(content)
        else:
            records = _PARSERS[source](content, default_tz)
    except ParseError as e:
        e.filename = e.filename or filename
        raise

    logger.debug(
        "Parsed file",
        extra={"file": filename, "format": source.value, "records": len(records)},
    )
    return source, records
