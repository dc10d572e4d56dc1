"""Shared test fixtures."""
from datetime import datetime, timedelta, timezone
from typing import List, Optional

import pytest

from fitactivities.analysis.aggregator import aggregate
from fitactivities.asyncdata import AsyncData
from fitactivities.config import Settings
from fitactivities.fit.messages import UINT8_INVALID, RawRecord, RawSession
from fitactivities.models.activity import Activity, ActivityData

START = datetime(2025, 6, 1, 7, 30, tzinfo=timezone.utc)


@pytest.fixture(name="make_activity_data")
def make_activity_data_fixture():
    """
    Factory for ActivityData built through the real aggregator.

    One record per second from `start`, one session with the given distance
    and duration (timer time = duration).
    """

    def _make(
        n_records: int = 10,
        duration_ms: int = 10_000,
        distance_cm: int = 100_000,
        start: datetime = START,
        heart_rates: Optional[List[int]] = None,
    ) -> ActivityData:
        records = [
            RawRecord(
                timestamp=start + timedelta(seconds=i),
                distance=i * 100,
                heart_rate=heart_rates[i] if heart_rates else UINT8_INVALID,
            )
            for i in range(n_records)
        ]
        sessions = [
            RawSession(
                total_distance=distance_cm,
                total_elapsed_time=duration_ms,
                total_timer_time=duration_ms,
            )
        ]
        return aggregate(sessions, records)

    return _make


@pytest.fixture(name="make_activity")
def make_activity_fixture(make_activity_data):
    """Factory for an Activity whose data is a Success."""

    def _make(path: str = "ride.fit", **kwargs) -> Activity:
        return Activity(path=path, data=AsyncData.success(make_activity_data(**kwargs)))

    return _make


@pytest.fixture(name="settings")
def settings_fixture() -> Settings:
    return Settings(tick_hz=1000, playback_speed=1, speed_boost=20, log_file=None)
