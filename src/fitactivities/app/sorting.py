"""
Ordering of the activity list by start time or total distance.

Sorting is stable (ties keep their previous order) and returns a new list of
the same Activity objects. Activities that are not parsed yet sort as if they
started at the Unix epoch and covered no distance.
"""
from datetime import datetime, timezone
from enum import Enum
from typing import Any, Callable, Dict, List

from fitactivities.models.activity import Activity

EPOCH = datetime(1970, 1, 1, tzinfo=timezone.utc)


class SortField(Enum):
    TIME = "time"
    DISTANCE = "distance"


class SortKey(Enum):
    TIME_DESC = (SortField.TIME, True)
    TIME_ASC = (SortField.TIME, False)
    DISTANCE_DESC = (SortField.DISTANCE, True)
    DISTANCE_ASC = (SortField.DISTANCE, False)

    @property
    def field(self) -> SortField:
        return self.value[0]

    @property
    def descending(self) -> bool:
        return self.value[1]


def _start_time(activity: Activity) -> datetime:
    return activity.start_time or EPOCH


def _distance(activity: Activity) -> int:
    return activity.total_distance


_SORT_VALUES: Dict[SortField, Callable[[Activity], Any]] = {
    SortField.TIME: _start_time,
    SortField.DISTANCE: _distance,
}


def sort_activities(activities: List[Activity], key: SortKey) -> List[Activity]:
    return sorted(activities, key=_SORT_VALUES[key.field], reverse=key.descending)


def next_sort_key(current: SortKey, field: SortField) -> SortKey:
    """
    Key to use after the user picks `field`.

    Picking the active field flips its direction; picking the other field
    switches to it, descending first.
    """
    if current.field is field:
        for key in SortKey:
            if key.field is field and key.descending != current.descending:
                return key
    return SortKey.TIME_DESC if field is SortField.TIME else SortKey.DISTANCE_DESC
