"""
Batch ingestion service.

Reads files off the event loop, parses them concurrently, and turns raw
records into Sessions. One bad file never affects the others: its error is
reported on its own IngestResult and the batch carries on.
"""

import asyncio
import logging
from dataclasses import dataclass, field
from datetime import timedelta, timezone, tzinfo
from pathlib import Path
from typing import Iterable, Optional, Union

from ...core.sessions.grouping import SESSION_GAP_THRESHOLD, build_lap_sessions
from ...core.sessions.metrics import DEFAULT_REFERENCE_LENGTH_M, DEFAULT_SWOLF_BAND, SwolfBand
from ...core.sessions.models import Session, SourceFormat, VO2MaxReading
from ...core.sessions.normalizer import normalize_all
from .base import ParseError
from .dispatch import parse_content


logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class IngestOptions:
    """Parsing and normalization options, usually built from settings."""
    default_tz: tzinfo = timezone.utc
    band: SwolfBand = DEFAULT_SWOLF_BAND
    reference_length: float = DEFAULT_REFERENCE_LENGTH_M
    session_gap: timedelta = SESSION_GAP_THRESHOLD


@dataclass(frozen=True)
class IngestResult:
    """Outcome of ingesting one file."""
    path: str
    source: Optional[SourceFormat] = None
    sessions: tuple[Session, ...] = ()
    vo2max: tuple[VO2MaxReading, ...] = ()
    error: Optional[str] = None

    @property
    def ok(self) -> bool:
        return self.error is None


@dataclass
class IngestSummary:
    """Results of a batch, in input order."""
    results: list[IngestResult] = field(default_factory=list)

    @property
    def sessions(self) -> list[Session]:
        return [session for result in self.results for session in result.sessions]

    @property
    def vo2max(self) -> list[VO2MaxReading]:
        return [reading for result in self.results for reading in result.vo2max]

    @property
    def failures(self) -> list[IngestResult]:
        return [result for result in self.results if not result.ok]

    @property
    def all_failed(self) -> bool:
        return bool(self.results) and len(self.failures) == len(self.results)


def ingest_content(
    path: str,
    content: Union[bytes, str],
    options: IngestOptions = IngestOptions(),
    source: Optional[SourceFormat] = None,
) -> IngestResult:
    """Parse and normalize one file's content, capturing any failure."""
    try:
        source, records = parse_content(path, content, source, options.default_tz)
    except ParseError as e:
        logger.error("Failed to parse file", extra={"path": path, "error": str(e)})
        return IngestResult(path=path, source=source, error=str(e))
    except Exception as e:
        logger.error("Unexpected error parsing file", extra={"path": path}, exc_info=True)
        return IngestResult(path=path, source=source, error=f"{path}: {e}")

    if source is SourceFormat.VO2MAX_CSV:
        return IngestResult(path=path, source=source, vo2max=tuple(records))

    if source is SourceFormat.APPLE_HEALTH_LAPS:
        sessions = build_lap_sessions(records, options.session_gap, options.band)
    else:
        sessions = normalize_all(
            records,
            band=options.band,
            reference_length=options.reference_length,
        )
    return IngestResult(path=path, source=source, sessions=tuple(sessions))


async def ingest_file(
    path: Union[str, Path],
    options: IngestOptions = IngestOptions(),
    source: Optional[SourceFormat] = None,
) -> IngestResult:
    """Read one file in a worker thread, then ingest it."""
    path = str(path)
    try:
        content = await asyncio.to_thread(Path(path).read_bytes)
    except OSError as e:
        logger.error("Failed to read file", extra={"path": path, "error": str(e)})
        return IngestResult(path=path, source=source, error=f"{path}: {e.strerror or e}")

    return await asyncio.to_thread(ingest_content, path, content, options, source)


async def ingest_paths(
    paths: Iterable[Union[str, Path]],
    options: IngestOptions = IngestOptions(),
) -> IngestSummary:
    """
    Ingest many files concurrently.

    Results come back in the order the paths were given, regardless of
    which file finished first.
    """
    results = await asyncio.gather(*(ingest_file(path, options) for path in paths))
    summary = IngestSummary(results=list(results))

    logger.info(
        "Ingestion complete",
        extra={
            "files": len(summary.results),
            "failed": len(summary.failures),
            "sessions": len(summary.sessions),
            "vo2max_readings": len(summary.vo2max),
        },
    )
    return summary
