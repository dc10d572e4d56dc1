"""
Statistics aggregator: raw FIT sessions + records → ActivityData.

One pass over the records builds both the per-record series and the channel
statistics; one pass over the sessions sums the per-session totals.

  channel        source                                  aggregated over
  distance       session.total_distance                  sessions (sum)
  ascent/descent session.total_ascent / total_descent    sessions (sum)
  duration       session.total_elapsed_time / timer_time sessions (sum)
  speed          record.enhanced_speed, else speed       records (min/avg/max)
  altitude       record.enhanced_altitude, else altitude records (min/avg/max)
  temperature    record.temperature                      records (min/avg/max)
  gps accuracy   record.gps_accuracy                     records (min/avg/max)
  heart rate     record.heart_rate                       records (min/avg/max)

A value equal to its base type's invalid sentinel is "no reading": it is left
out of the statistics and the matching RecordData field is None.
"""
from typing import Iterable, List, Optional, Sequence

from fitactivities.analysis.stats import StatAccumulator, round_half_away_from_zero
from fitactivities.fit.decoder import FitParseError
from fitactivities.fit.messages import (
    ALTITUDE_OFFSET,
    ALTITUDE_SCALE,
    SINT8_INVALID,
    UINT8_INVALID,
    UINT16_INVALID,
    UINT32_INVALID,
    DecodedActivity,
    RawRecord,
    RawSession,
)
from fitactivities.models.activity import (
    ActivityData,
    DurationStats,
    ElevationStats,
    RecordData,
)


class EmptyActivityError(FitParseError):
    """Raised when a decoded activity has no sessions or no records."""


def _valid(value: int, invalid: int) -> Optional[int]:
    return None if value == invalid else value


def _preferred(enhanced: int, enhanced_invalid: int, legacy: int, legacy_invalid: int) -> Optional[int]:
    """Enhanced field if valid, else the legacy field if valid, else None."""
    value = _valid(enhanced, enhanced_invalid)
    if value is None:
        value = _valid(legacy, legacy_invalid)
    return value


def record_speed(record: RawRecord) -> Optional[float]:
    """Speed in mm/s, preferring enhanced_speed over speed."""
    raw = _preferred(record.enhanced_speed, UINT32_INVALID, record.speed, UINT16_INVALID)
    return float(raw) if raw is not None else None


def record_altitude(record: RawRecord) -> Optional[float]:
    """Altitude in meters, preferring enhanced_altitude over altitude."""
    raw = _preferred(
        record.enhanced_altitude, UINT32_INVALID, record.altitude, UINT16_INVALID
    )
    if raw is None:
        return None
    return raw / ALTITUDE_SCALE - ALTITUDE_OFFSET


def _sum_valid(values: Iterable[int], invalid: int) -> Optional[int]:
    """Sum of the valid values, or None if there were none."""
    total: Optional[int] = None
    for value in values:
        if value == invalid:
            continue
        total = value if total is None else total + value
    return total


def _duration(sessions: Sequence[RawSession]) -> DurationStats:
    total = _sum_valid((s.total_elapsed_time for s in sessions), UINT32_INVALID)
    active = _sum_valid((s.total_timer_time for s in sessions), UINT32_INVALID)
    pause: Optional[int] = None
    if total is not None and active is not None:
        pause = max(total - active, 0)
    return DurationStats(total=total, active=active, pause=pause)


def aggregate(sessions: Sequence[RawSession], records: Sequence[RawRecord]) -> ActivityData:
    """
    Build the ActivityData summary of one activity.

    Args:
        sessions: session messages in file order (multi-sport files have several)
        records: record messages in file order

    Returns:
        ActivityData with per-record series and per-activity statistics.

    Raises:
        EmptyActivityError: if there are no sessions or no records.
    """
    if not sessions:
        raise EmptyActivityError("Activity has no sessions")
    if not records:
        raise EmptyActivityError("Activity has no records")

    speed = StatAccumulator()
    altitude = StatAccumulator()
    temperature = StatAccumulator()
    gps_accuracy = StatAccumulator()
    heart_rate = StatAccumulator()

    series: List[RecordData] = []
    for raw in records:
        row = RecordData(
            time=raw.timestamp,
            distance=_valid(raw.distance, UINT32_INVALID),
            speed=record_speed(raw),
            temperature=_valid(raw.temperature, SINT8_INVALID),
            altitude=record_altitude(raw),
            gps_accuracy=_valid(raw.gps_accuracy, UINT8_INVALID),
            heart_rate=_valid(raw.heart_rate, UINT8_INVALID),
        )
        speed.add(row.speed)
        altitude.add(row.altitude)
        temperature.add(row.temperature)
        gps_accuracy.add(row.gps_accuracy)
        heart_rate.add(row.heart_rate)
        series.append(row)

    return ActivityData(
        duration=_duration(sessions),
        total_distance=_sum_valid((s.total_distance for s in sessions), UINT32_INVALID),
        speed=speed.result(),
        temperature=temperature.result(round_half_away_from_zero),
        altitude=altitude.result(),
        gps_accuracy=gps_accuracy.result(round_half_away_from_zero),
        heart_rate=heart_rate.result(round_half_away_from_zero),
        elevation=ElevationStats(
            ascent=_sum_valid((s.total_ascent for s in sessions), UINT16_INVALID),
            descent=_sum_valid((s.total_descent for s in sessions), UINT16_INVALID),
        ),
        no_sessions=len(sessions),
        records=tuple(series),
    )


def aggregate_decoded(decoded: DecodedActivity) -> ActivityData:
    return aggregate(decoded.sessions, decoded.records)
