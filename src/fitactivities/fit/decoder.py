"""
FIT file decoder: converts a Garmin .fit activity file into raw session and
record structs (see fit.messages).

fitparse applies scale/offset and turns invalid values into None. We read the
raw (unscaled) value of each field instead and put the base type's sentinel
back wherever the device did not report a value, so the aggregator sees one
encoding for "no reading" regardless of how the field went missing.
"""
import logging
from datetime import timezone
from pathlib import Path
from typing import Any, List, Optional

import fitparse

from fitactivities.fit.messages import (
    SINT8_INVALID,
    UINT8_INVALID,
    UINT16_INVALID,
    UINT32_INVALID,
    DecodedActivity,
    RawRecord,
    RawSession,
)

logger = logging.getLogger(__name__)


class FitParseError(Exception):
    """Raised when a FIT file cannot be decoded into an activity."""


def _raw(message: Any, name: str, invalid: int) -> int:
    """Raw integer value of a field, or the sentinel if it is missing/invalid."""
    value = message.get_raw_value(name)
    if value is None or isinstance(value, (tuple, list)):
        return invalid
    return int(value)


def _file_type(fit: fitparse.FitFile) -> Optional[str]:
    for file_id in fit.get_messages("file_id"):
        file_type = file_id.get_value("type")
        if file_type is not None:
            return str(file_type)
    return None


def _to_session(message: Any) -> RawSession:
    return RawSession(
        total_distance=_raw(message, "total_distance", UINT32_INVALID),
        total_ascent=_raw(message, "total_ascent", UINT16_INVALID),
        total_descent=_raw(message, "total_descent", UINT16_INVALID),
        total_elapsed_time=_raw(message, "total_elapsed_time", UINT32_INVALID),
        total_timer_time=_raw(message, "total_timer_time", UINT32_INVALID),
    )


def _to_record(message: Any) -> Optional[RawRecord]:
    timestamp = message.get_value("timestamp")
    if timestamp is None:
        return None  # records without a timestamp can't be placed in time
    if timestamp.tzinfo is None:
        timestamp = timestamp.replace(tzinfo=timezone.utc)

    return RawRecord(
        timestamp=timestamp,
        distance=_raw(message, "distance", UINT32_INVALID),
        speed=_raw(message, "speed", UINT16_INVALID),
        enhanced_speed=_raw(message, "enhanced_speed", UINT32_INVALID),
        altitude=_raw(message, "altitude", UINT16_INVALID),
        enhanced_altitude=_raw(message, "enhanced_altitude", UINT32_INVALID),
        temperature=_raw(message, "temperature", SINT8_INVALID),
        gps_accuracy=_raw(message, "gps_accuracy", UINT8_INVALID),
        heart_rate=_raw(message, "heart_rate", UINT8_INVALID),
    )


def decode_fit_file(path: Path) -> DecodedActivity:
    """
    Decode a FIT activity file into raw sessions and records.

    Args:
        path: Path to the .fit file

    Returns:
        DecodedActivity with sessions and records in file order.

    Raises:
        FitParseError: if the file doesn't exist, cannot be decoded, or is
            not an activity file.
    """
    if not path.exists():
        raise FitParseError(f"FIT file not found: {path}")

    try:
        fit = fitparse.FitFile(str(path))
        file_type = _file_type(fit)
        session_messages = list(fit.get_messages("session"))
        record_messages = list(fit.get_messages("record"))
    except Exception as exc:
        raise FitParseError(f"Failed to parse FIT file {path}: {exc}") from exc

    if file_type is not None and file_type != "activity":
        raise FitParseError(f"Expected an activity FIT file, got '{file_type}': {path}")

    sessions = [_to_session(m) for m in session_messages]
    records: List[RawRecord] = []
    for message in record_messages:
        record = _to_record(message)
        if record is not None:
            records.append(record)

    logger.debug(
        "Decoded %s: %d sessions, %d records", path.name, len(sessions), len(records)
    )
    return DecodedActivity(sessions=sessions, records=records)
