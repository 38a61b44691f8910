"""
Swim file parsers.

One module per source format, plus dispatch (format detection) and the
async ingestion service that ties parsing to normalization.
"""

from .base import ParseError, UnsupportedFormatError, parse_timestamp, strip_to_float
from .fit import build_fit_record, parse_fit
from .tcx import parse_tcx
from .csv_sessions import parse_annotated_csv, parse_compact_csv, parse_session_csv
from .vo2max import parse_vo2max_csv
from .apple_health import parse_lap_csv
from .dispatch import detect_format, parse_content, sniff_csv
from .ingest import (
    IngestOptions,
    IngestResult,
    IngestSummary,
    ingest_content,
    ingest_file,
    ingest_paths,
)

__all__ = [
    "ParseError",
    "UnsupportedFormatError",
    "parse_timestamp",
    "strip_to_float",
    "build_fit_record",
    "parse_fit",
    "parse_tcx",
    "parse_annotated_csv",
    "parse_compact_csv",
    "parse_session_csv",
    "parse_vo2max_csv",
    "parse_lap_csv",
    "detect_format",
    "parse_content",
    "sniff_csv",
    "IngestOptions",
    "IngestResult",
    "IngestSummary",
    "ingest_content",
    "ingest_file",
    "ingest_paths",
]
