"""
Playback scrubber: replays an activity's records against the wall clock.

Two ways to move through the records:
  - manual: advance(delta), only while paused; BOOST_RECORDS jumps ~5 min
    at 1 record/s
  - timed:  tick(now), only while playing; advances in proportion to the time
    since the last advance, the activity's records per second (RPS) and the
    speed multiplier

Timed playback only resets its reference time when it actually moves, so the
fractional part of a tick carries over to the next one. An activity with less
than one record per tick still moves, just every few ticks.

`now` is a monotonic clock reading in seconds (time.monotonic()).
"""
import logging
import math
from typing import Iterable, Optional

from fitactivities.models.activity import Activity

logger = logging.getLogger(__name__)

BOOST_RECORDS = 300
MIN_SPEED = 1
MAX_SPEED = 10


def _clamp_speed(speed: int) -> int:
    return max(MIN_SPEED, min(MAX_SPEED, speed))


class PlaybackScrubber:
    """Play/pause state, speed multiplier and timing for the selected activity."""

    def __init__(self, speed: int = MIN_SPEED, speed_boost: int = 20):
        self.playing = False
        self.speed = _clamp_speed(speed)
        self.speed_boost = speed_boost
        self._boost = 0
        self._last_update: Optional[float] = None

    # ─── Play / pause ─────────────────────────────────────────────────────────

    def toggle(self, now: float) -> None:
        """Flip play/pause. Time spent paused is never caught up."""
        self.playing = not self.playing
        self._boost = 0
        self._last_update = now
        logger.debug("Playback %s", "started" if self.playing else "paused")

    def stop(self, now: float) -> None:
        self.playing = False
        self._boost = 0
        self._last_update = now

    # ─── Speed ────────────────────────────────────────────────────────────────

    def set_speed(self, speed: int) -> None:
        self.speed = _clamp_speed(speed)

    def set_speed_from_digit(self, digit: str) -> None:
        """Digit keys: "1".."9" → 1..9, "0" → 10."""
        value = int(digit)
        self.set_speed(MAX_SPEED if value == 0 else value)

    def speed_up(self) -> None:
        if self.playing:
            self.set_speed(self.speed + 1)

    def slow_down(self) -> None:
        if self.playing:
            self.set_speed(self.speed - 1)

    def boost(self) -> None:
        """Add speed_boost to the multiplier for the next tick only."""
        if self.playing:
            self._boost = self.speed_boost

    @property
    def effective_speed(self) -> int:
        return self.speed + self._boost

    # ─── Moving through records ───────────────────────────────────────────────

    def advance(self, activity: Activity, delta: int) -> bool:
        """
        Manual step by `delta` records (negative = back), clamped to bounds.

        Returns:
            True if the step was applied; False while playing or if the
            activity has no parsed data.
        """
        if self.playing:
            return False
        return activity.move_record_index(delta)

    def tick(self, activity: Activity, now: float) -> int:
        """
        Timed advance for one UI tick.

        Returns:
            Number of records the index actually moved.
        """
        if not self.playing:
            return 0
        if self._last_update is None:
            self._last_update = now
            return 0

        elapsed_ms = (now - self._last_update) * 1000
        speed = self.effective_speed
        self._boost = 0
        records = math.floor(elapsed_ms * activity.rps() / 1000 * speed)
        if records <= 0:
            return 0

        before = activity.record_index
        if not activity.move_record_index(records):
            return 0
        self._last_update = now

        data = activity.activity_data
        if data is not None and activity.record_index >= data.no_records - 1:
            self.playing = False
            logger.debug("Playback reached the last record of %s", activity.path)
        return activity.record_index - before

    # ─── Reset ────────────────────────────────────────────────────────────────

    @staticmethod
    def reset_index(activity: Activity) -> None:
        activity.reset_record_index()

    @staticmethod
    def reset_all(activities: Iterable[Activity]) -> None:
        for activity in activities:
            activity.reset_record_index()
