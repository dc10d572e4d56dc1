"""
Single-pass min/avg/max accumulator shared by every sensor channel.

Min and max are seeded from the first valid sample rather than from zero, so
a sparse channel (e.g. a device that only sometimes reports temperature)
never gets a false 0 floor or ceiling. A channel that never sees a valid
sample reports None for all three values.
"""
import math
from typing import Callable, Optional, Union

from fitactivities.models.activity import Stat

Number = Union[int, float]


def round_half_away_from_zero(value: float) -> int:
    """Round to the nearest int, ties away from zero (2.5 → 3, -2.5 → -3)."""
    return int(math.copysign(math.floor(abs(value) + 0.5), value))


class StatAccumulator:
    """Running min/max/sum/count of the valid samples of one channel."""

    def __init__(self) -> None:
        self.count = 0
        self.total: Number = 0
        self.min: Optional[Number] = None
        self.max: Optional[Number] = None

    def add(self, value: Optional[Number]) -> None:
        """Fold one sample in. None (no valid reading) is ignored."""
        if value is None:
            return
        if self.count == 0:
            self.min = value
            self.max = value
        else:
            if value < self.min:
                self.min = value
            if value > self.max:
                self.max = value
        self.total += value
        self.count += 1

    def average(self) -> Optional[float]:
        if self.count == 0:
            return None
        return self.total / self.count

    def result(self, rounding: Optional[Callable[[float], Number]] = None) -> Stat:
        """
        Snapshot as a Stat.

        Args:
            rounding: applied to the average (e.g. round_half_away_from_zero
                for integer channels). The exact mean is kept if None.
        """
        avg = self.average()
        if avg is not None and rounding is not None:
            avg = rounding(avg)
        return Stat(min=self.min, avg=avg, max=self.max)
