"""
JSON-ready payloads for sessions, ingestion results and statistics reports.
"""

from .schemas import (
    IngestResultPayload,
    LapPayload,
    SessionPayload,
    SessionRef,
    StatisticsReportPayload,
    VO2MaxPayload,
)

__all__ = [
    "IngestResultPayload",
    "LapPayload",
    "SessionPayload",
    "SessionRef",
    "StatisticsReportPayload",
    "VO2MaxPayload",
]
