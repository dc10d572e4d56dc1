"""Tests for the PlaybackScrubber.

Time is simulated: every call gets an explicit `now` (seconds), so nothing
sleeps.
"""
import pytest

from fitactivities.app.playback import BOOST_RECORDS, MAX_SPEED, MIN_SPEED, PlaybackScrubber
from fitactivities.models.activity import Activity

T = 100.0  # arbitrary monotonic start


@pytest.fixture
def two_rps(make_activity):
    """20 records over 10 s → 2 records per second."""
    return make_activity(n_records=20, duration_ms=10_000)


@pytest.fixture
def long_two_rps(make_activity):
    """1000 records over 500 s → 2 records per second."""
    return make_activity(n_records=1000, duration_ms=500_000)


class TestManualStepping:
    def test_step_forward_and_back(self, long_two_rps):
        scrubber = PlaybackScrubber()
        assert scrubber.advance(long_two_rps, 5) is True
        assert long_two_rps.record_index == 5
        scrubber.advance(long_two_rps, -2)
        assert long_two_rps.record_index == 3

    def test_round_trip_returns_to_start(self, long_two_rps):
        scrubber = PlaybackScrubber()
        scrubber.advance(long_two_rps, 50)
        scrubber.advance(long_two_rps, 10)
        scrubber.advance(long_two_rps, -10)
        assert long_two_rps.record_index == 50

    def test_round_trip_broken_by_clamp(self, long_two_rps):
        scrubber = PlaybackScrubber()
        scrubber.advance(long_two_rps, 2)
        scrubber.advance(long_two_rps, -5)
        scrubber.advance(long_two_rps, 5)
        assert long_two_rps.record_index == 5

    def test_boost_jump_clamped(self, two_rps):
        scrubber = PlaybackScrubber()
        scrubber.advance(two_rps, BOOST_RECORDS)
        assert two_rps.record_index == 19
        scrubber.advance(two_rps, -BOOST_RECORDS)
        assert two_rps.record_index == 0

    def test_single_record_never_moves(self, make_activity):
        act = make_activity(n_records=1, duration_ms=1_000)
        scrubber = PlaybackScrubber()
        for delta in (1, -1, BOOST_RECORDS, -BOOST_RECORDS):
            scrubber.advance(act, delta)
            assert act.record_index == 0

    def test_ignored_while_playing(self, two_rps):
        scrubber = PlaybackScrubber()
        scrubber.toggle(T)
        assert scrubber.advance(two_rps, 3) is False
        assert two_rps.record_index == 0

    def test_unparsed_activity(self):
        assert PlaybackScrubber().advance(Activity(path="a.fit"), 3) is False


class TestTimedPlayback:
    def test_paused_tick_does_nothing(self, two_rps):
        scrubber = PlaybackScrubber()
        assert scrubber.tick(two_rps, T + 5) == 0
        assert two_rps.record_index == 0

    def test_speed_one_at_two_rps_advances_two_per_second(self, long_two_rps):
        scrubber = PlaybackScrubber(speed=1)
        scrubber.toggle(T)
        for i in range(1, 61):  # one second of 60 Hz ticks
            scrubber.tick(long_two_rps, T + i / 60)
        assert abs(long_two_rps.record_index - 2) <= 1

    def test_single_long_tick(self, long_two_rps):
        scrubber = PlaybackScrubber(speed=1)
        scrubber.toggle(T)
        assert scrubber.tick(long_two_rps, T + 1.0) == 2

    def test_speed_multiplier(self, long_two_rps):
        scrubber = PlaybackScrubber(speed=5)
        scrubber.toggle(T)
        assert scrubber.tick(long_two_rps, T + 1.0) == 10

    def test_slow_activity_still_advances(self, make_activity):
        act = make_activity(n_records=5, duration_ms=10_000)  # 0.5 records/s
        scrubber = PlaybackScrubber(speed=1)
        scrubber.toggle(T)
        for i in range(1, 121):  # two seconds of 60 Hz ticks
            scrubber.tick(act, T + i / 60)
        assert act.record_index == 1

    def test_fraction_carries_over_between_ticks(self, long_two_rps):
        scrubber = PlaybackScrubber(speed=1)
        scrubber.toggle(T)
        assert scrubber.tick(long_two_rps, T + 0.25) == 0  # 0.5 records
        assert scrubber.tick(long_two_rps, T + 0.5) == 1  # 1.0 records since T

    def test_toggle_discards_paused_time(self, long_two_rps):
        scrubber = PlaybackScrubber(speed=1)
        scrubber.toggle(T)
        scrubber.toggle(T + 1)  # pause
        scrubber.toggle(T + 100)  # play again after a long pause
        assert scrubber.tick(long_two_rps, T + 100.5) == 1

    def test_stops_at_last_record(self, two_rps):
        scrubber = PlaybackScrubber(speed=10)
        scrubber.toggle(T)
        scrubber.tick(two_rps, T + 60)
        assert two_rps.record_index == 19
        assert scrubber.playing is False

    def test_tick_on_unparsed_activity(self):
        scrubber = PlaybackScrubber()
        scrubber.toggle(T)
        assert scrubber.tick(Activity(path="a.fit"), T + 10) == 0


class TestSpeed:
    @pytest.mark.parametrize("value,expected", [
        (0, MIN_SPEED),
        (1, 1),
        (7, 7),
        (10, 10),
        (15, MAX_SPEED),
    ])
    def test_set_speed_clamped(self, value, expected):
        scrubber = PlaybackScrubber()
        scrubber.set_speed(value)
        assert scrubber.speed == expected

    @pytest.mark.parametrize("digit,expected", [("1", 1), ("5", 5), ("9", 9), ("0", 10)])
    def test_digit_keys(self, digit, expected):
        scrubber = PlaybackScrubber()
        scrubber.set_speed_from_digit(digit)
        assert scrubber.speed == expected

    def test_increment_only_while_playing(self):
        scrubber = PlaybackScrubber(speed=3)
        scrubber.speed_up()
        assert scrubber.speed == 3
        scrubber.toggle(T)
        scrubber.speed_up()
        assert scrubber.speed == 4
        scrubber.slow_down()
        scrubber.slow_down()
        assert scrubber.speed == 2

    def test_increment_clamped(self):
        scrubber = PlaybackScrubber(speed=10)
        scrubber.toggle(T)
        scrubber.speed_up()
        assert scrubber.speed == 10

    def test_boost_lasts_one_tick(self, long_two_rps):
        scrubber = PlaybackScrubber(speed=1, speed_boost=20)
        scrubber.toggle(T)
        scrubber.boost()
        assert scrubber.effective_speed == 21
        assert scrubber.tick(long_two_rps, T + 1.0) == 42
        assert scrubber.effective_speed == 1
        assert scrubber.speed == 1
        assert scrubber.tick(long_two_rps, T + 2.0) == 2

    def test_boost_dropped_by_pause(self, long_two_rps):
        scrubber = PlaybackScrubber(speed=1, speed_boost=20)
        scrubber.toggle(T)
        scrubber.boost()
        scrubber.toggle(T + 0.001)  # pause before the boosted tick
        scrubber.toggle(T + 50)
        assert scrubber.tick(long_two_rps, T + 51) == 2

    def test_boost_ignored_while_paused(self):
        scrubber = PlaybackScrubber(speed=1)
        scrubber.boost()
        assert scrubber.effective_speed == 1


class TestReset:
    def test_reset_index_idempotent(self, two_rps):
        two_rps.move_record_index(7)
        PlaybackScrubber.reset_index(two_rps)
        PlaybackScrubber.reset_index(two_rps)
        assert two_rps.record_index == 0

    def test_reset_all(self, make_activity):
        acts = [make_activity(path=f"{i}.fit") for i in range(3)]
        for act in acts:
            act.move_record_index(4)
        PlaybackScrubber.reset_all(acts)
        PlaybackScrubber.reset_all(acts)
        assert [a.record_index for a in acts] == [0, 0, 0]
