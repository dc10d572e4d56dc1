"""Activity data models: per-record samples, per-activity statistics, and the
Activity list item that tracks import state and playback position."""
from dataclasses import dataclass, field
from datetime import datetime
from typing import Generic, Optional, Tuple, TypeVar

from fitactivities.asyncdata import AsyncData

N = TypeVar("N", int, float)


@dataclass(frozen=True)
class RecordData:
    """
    One timestamped sample from a FIT activity.
    Every field except `time` is None when the sensor had no valid reading.
    """

    time: datetime
    distance: Optional[int] = None        # cm, cumulative from activity start
    speed: Optional[float] = None         # mm/s
    temperature: Optional[int] = None     # °C
    altitude: Optional[float] = None      # meters above sea level
    gps_accuracy: Optional[int] = None    # meters
    heart_rate: Optional[int] = None      # bpm


@dataclass(frozen=True)
class Stat(Generic[N]):
    """Min/avg/max of one channel. All None if the channel had no valid sample."""

    min: Optional[N] = None
    avg: Optional[N] = None
    max: Optional[N] = None


@dataclass(frozen=True)
class DurationStats:
    total: Optional[int] = None    # ms, elapsed time incl. pauses
    active: Optional[int] = None   # ms, timer time
    pause: Optional[int] = None    # ms, total - active


@dataclass(frozen=True)
class ElevationStats:
    ascent: Optional[int] = None   # meters
    descent: Optional[int] = None  # meters


@dataclass(frozen=True)
class ActivityData:
    """
    Statistics summary of one FIT activity file, built once by the aggregator.

    `records` keeps the file's chronological order and is never reordered.
    """

    duration: DurationStats
    total_distance: Optional[int]  # cm, summed across sessions
    speed: Stat[float]
    temperature: Stat[int]
    altitude: Stat[float]
    gps_accuracy: Stat[int]
    heart_rate: Stat[int]
    elevation: ElevationStats
    no_sessions: int
    records: Tuple[RecordData, ...] = ()

    @property
    def no_records(self) -> int:
        return len(self.records)

    @property
    def start_time(self) -> Optional[datetime]:
        return self.records[0].time if self.records else None

    @property
    def finish_time(self) -> Optional[datetime]:
        return self.records[-1].time if self.records else None


ActivityAD = AsyncData[Exception, ActivityData]


@dataclass(eq=False)
class Activity:
    """
    One FIT file in the activity list.

    `data` is replaced (never mutated) as the import progresses.
    `record_index` is the playback position; it only means something once
    `data` is a Success and always stays within the record bounds.
    """

    path: str
    data: ActivityAD = field(default_factory=AsyncData.not_asked)
    record_index: int = 0

    @property
    def activity_data(self) -> Optional[ActivityData]:
        return self.data.get_success()

    @property
    def total_distance(self) -> int:
        data = self.activity_data
        if data is not None and data.total_distance is not None:
            return data.total_distance
        return 0

    @property
    def start_time(self) -> Optional[datetime]:
        data = self.activity_data
        return data.start_time if data is not None else None

    @property
    def current_record(self) -> Optional[RecordData]:
        data = self.activity_data
        if data is None or not data.records:
            return None
        return data.records[self.record_index]

    def move_record_index(self, delta: int) -> bool:
        """
        Move the playback position by `delta` records, clamped to the record
        bounds. Returns False (and does nothing) unless data is a Success.
        """
        data = self.activity_data
        if data is None:
            return False
        if not data.records:
            self.record_index = 0
            return True
        last = len(data.records) - 1
        self.record_index = max(0, min(last, self.record_index + delta))
        return True

    def reset_record_index(self) -> None:
        self.record_index = 0

    def rps(self) -> float:
        """Records per second over the total duration; 1.0 if either is missing."""
        data = self.activity_data
        if data is not None and data.duration.total:
            total_seconds = data.duration.total / 1000.0
            if total_seconds > 0 and data.records:
                return len(data.records) / total_seconds
        return 1.0
