"""
Shared parsing primitives.

Errors, text decoding, CSV row reading, and the lenient number/timestamp
readers that every text format relies on.
"""

import csv
import io
import logging
import math
import re
from datetime import datetime, timezone, tzinfo
from typing import Optional


logger = logging.getLogger(__name__)


class ParseError(Exception):
    """Raised when a whole file cannot be parsed."""

    def __init__(self, message: str, filename: Optional[str] = None) -> None:
        super().__init__(message)
        self.filename = filename

    def __str__(self) -> str:
        message = super().__str__()
        return f"{self.filename}: {message}" if self.filename else message


class UnsupportedFormatError(ParseError):
    """Raised when a file's extension or layout matches no known format."""
    pass


# ---------------------------------------------------------------------------
# Text and CSV
# ---------------------------------------------------------------------------

def decode_text(content: bytes | str) -> str:
    """Decode file content, tolerating a BOM and stray non-UTF-8 bytes."""
    if isinstance(content, str):
        return content
    return content.decode("utf-8-sig", errors="replace")


def read_csv_rows(content: bytes | str) -> list[list[str]]:
    """
    Split CSV content into rows of stripped cells.

    Blank lines are dropped and a leading Excel-style `sep=,` line is skipped.
    """
    lines = [line for line in decode_text(content).splitlines() if line.strip()]
    if lines and lines[0].strip().lower().startswith("sep="):
        lines = lines[1:]
    return [[cell.strip() for cell in row] for row in csv.reader(io.StringIO("\n".join(lines)))]


def normalize_header(cells: list[str]) -> list[str]:
    return [cell.strip().lower() for cell in cells]


def row_to_dict(header: list[str], row: list[str]) -> dict[str, str]:
    return {name: (row[index] if index < len(row) else "") for index, name in enumerate(header)}


# ---------------------------------------------------------------------------
# Numbers
# ---------------------------------------------------------------------------

_NON_NUMERIC = re.compile(r"[^0-9.]")
_UNIT = re.compile(r"[a-zA-Z]+")


def to_float(value: object) -> Optional[float]:
    """Parse a plain number; None when empty, non-numeric or not finite."""
    if value is None:
        return None
    if isinstance(value, (int, float)):
        number = float(value)
    else:
        text = str(value).strip()
        if not text:
            return None
        try:
            number = float(text)
        except ValueError:
            return None
    return number if math.isfinite(number) else None


def strip_to_float(value: Optional[str]) -> Optional[float]:
    """
    Parse a number embedded in a string with unit text around it.

    "675 m" -> 675.0, "2834.6 sec" -> 2834.6. Every character that is not a
    digit or a dot is removed first.
    """
    if not value:
        return None
    return to_float(_NON_NUMERIC.sub("", value))


def unit_of(value: Optional[str]) -> str:
    """The first alphabetic token in a value, lower-cased ("675 m" -> "m")."""
    if not value:
        return ""
    match = _UNIT.search(value)
    return match.group(0).lower() if match else ""


# ---------------------------------------------------------------------------
# Timestamps
# ---------------------------------------------------------------------------

_TIMESTAMP_FORMATS = (
    "%Y-%m-%d %H:%M:%S %z",
    "%Y-%m-%d %H:%M:%S",
    "%Y-%m-%d %H:%M",
    "%Y/%m/%d %H:%M:%S",
    "%Y/%m/%d",
    "%m/%d/%Y",
)


def parse_timestamp(value: Optional[str], default_tz: tzinfo = timezone.utc) -> Optional[datetime]:
    """
    Parse the timestamp styles found in swim exports.

    Accepts ISO-8601 (including a trailing Z), "YYYY-MM-DD HH:MM:SS +0000" and
    a few plain date layouts. Naive results are placed in `default_tz`.
    Returns None when nothing matches.
    """
    if not value or not value.strip():
        return None
    text = value.strip()

    parsed = None
    try:
        parsed = datetime.fromisoformat(text.replace("Z", "+00:00"))
    except ValueError:
        for fmt in _TIMESTAMP_FORMATS:
            try:
                parsed = datetime.strptime(text, fmt)
                break
            except ValueError:
                continue

    if parsed is None:
        return None
    if parsed.tzinfo is None:
        parsed = parsed.replace(tzinfo=default_tz)
    return parsed


def ensure_aware(value: datetime, default_tz: tzinfo = timezone.utc) -> datetime:
    return value if value.tzinfo is not None else value.replace(tzinfo=default_tz)
