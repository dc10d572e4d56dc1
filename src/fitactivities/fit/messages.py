"""
Raw FIT session/record structs, as handed from the decoder to the aggregator.

Values are kept in FIT native (unscaled) units. A field the device did not
report holds its base type's "invalid" sentinel rather than None, exactly as
it appears in the file:

  field               base type   unit (raw)
  timestamp           date_time   datetime (UTC)
  distance            uint32      cm
  speed               uint16      mm/s
  enhanced_speed      uint32      mm/s
  altitude            uint16      (m + 500) * 5
  enhanced_altitude   uint32      (m + 500) * 5
  temperature         sint8       °C
  gps_accuracy        uint8       m
  heart_rate          uint8       bpm
  total_distance      uint32      cm
  total_ascent        uint16      m
  total_descent       uint16      m
  total_elapsed_time  uint32      ms
  total_timer_time    uint32      ms
"""
from dataclasses import dataclass, field
from datetime import datetime
from typing import List

# FIT base type "invalid" sentinels
UINT8_INVALID = 0xFF
SINT8_INVALID = 0x7F
UINT16_INVALID = 0xFFFF
UINT32_INVALID = 0xFFFFFFFF

# Altitude is stored as (meters + offset) * scale
ALTITUDE_SCALE = 5
ALTITUDE_OFFSET = 500


@dataclass(frozen=True)
class RawRecord:
    timestamp: datetime
    distance: int = UINT32_INVALID
    speed: int = UINT16_INVALID
    enhanced_speed: int = UINT32_INVALID
    altitude: int = UINT16_INVALID
    enhanced_altitude: int = UINT32_INVALID
    temperature: int = SINT8_INVALID
    gps_accuracy: int = UINT8_INVALID
    heart_rate: int = UINT8_INVALID


@dataclass(frozen=True)
class RawSession:
    total_distance: int = UINT32_INVALID
    total_ascent: int = UINT16_INVALID
    total_descent: int = UINT16_INVALID
    total_elapsed_time: int = UINT32_INVALID
    total_timer_time: int = UINT32_INVALID


@dataclass
class DecodedActivity:
    """Everything the aggregator needs from one FIT activity file."""
    sessions: List[RawSession] = field(default_factory=list)
    records: List[RawRecord] = field(default_factory=list)
