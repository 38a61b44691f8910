"""
TCX (Training Center XML) parser.

Lap elements are read with ElementTree. Garmin writes the TCX v2 namespace,
some exporters write bare element names, so every lookup tries the
namespaced tag first and the bare tag second.
"""

import logging
import xml.etree.ElementTree as ET
from datetime import timezone, tzinfo
from typing import Optional

from ...core.sessions.records import TcxLap, TcxRecord
from .base import ParseError, decode_text, parse_timestamp, to_float


logger = logging.getLogger(__name__)

TCX_NS = "http://www.garmin.com/xmlschemas/TrainingCenterDatabase/v2"


def _find_all(element: ET.Element, name: str) -> list[ET.Element]:
    found = element.findall(f".//{{{TCX_NS}}}{name}")
    return found or element.findall(f".//{name}")


def _child_text(element: ET.Element, name: str) -> Optional[str]:
    child = element.find(f"{{{TCX_NS}}}{name}")
    if child is None:
        child = element.find(name)
    return child.text if child is not None else None


def _cadence(lap: ET.Element) -> Optional[float]:
    # Lap/Cadence in most exports, Lap/Extensions/LX/AvgRunCadence in a few
    value = to_float(_child_text(lap, "Cadence"))
    if value is not None:
        return value
    for element in lap.iter():
        if element.tag.endswith("AvgRunCadence") or element.tag.endswith("AvgCadence"):
            return to_float(element.text)
    return None


def _parse_activity(activity: ET.Element, default_tz: tzinfo) -> Optional[TcxRecord]:
    laps = [lap for lap in activity if lap.tag in (f"{{{TCX_NS}}}Lap", "Lap")]

    start_time = parse_timestamp(_child_text(activity, "Id"), default_tz)
    if start_time is None and laps:
        start_time = parse_timestamp(laps[0].get("StartTime"), default_tz)
    if start_time is None:
        return None

    return TcxRecord(
        start_time=start_time,
        laps=tuple(
            TcxLap(
                distance_meters=to_float(_child_text(lap, "DistanceMeters")),
                total_time_seconds=to_float(_child_text(lap, "TotalTimeSeconds")),
                cadence=_cadence(lap),
            )
            for lap in laps
        ),
    )


def parse_tcx(content: bytes | str, default_tz: tzinfo = timezone.utc) -> list[TcxRecord]:
    """
    Parse a TCX document into one TcxRecord per Activity element.

    Raises:
        ParseError: If the XML is malformed or holds no Activity element
    """
    try:
        root = ET.fromstring(decode_text(content).strip())
    except ET.ParseError as e:
        raise ParseError(f"Malformed TCX file: {e}") from e

    activities = _find_all(root, "Activity")
    if not activities:
        raise ParseError("No activity data found in TCX file")

    records = []
    for index, activity in enumerate(activities):
        record = _parse_activity(activity, default_tz)
        if record is None:
            logger.warning("Skipping TCX activity without a start time", extra={"activity": index})
            continue
        records.append(record)

    if not records:
        raise ParseError("No activity in TCX file has a start time")

    logger.debug("Parsed TCX file", extra={"activities": len(records)})
    return records
