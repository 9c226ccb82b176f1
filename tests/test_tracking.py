import json
from pathlib import Path

import pytest

from tourgen.directions import to_plain
from tourgen.tracking import WARNING_MESSAGES, GeolocationError, LocationTracker


class FakeClock:
    def __init__(self):
        self.t = 100.0

    def __call__(self):
        return self.t


def load_plain():
    path = Path(__file__).parent / "fixtures" / "directions_walking.json"
    with open(path, "r", encoding="utf-8") as f:
        return to_plain(json.load(f))


@pytest.fixture
def clock():
    return FakeClock()


@pytest.fixture
def tracker(clock):
    return LocationTracker(load_plain(), now=clock)


def test_position_highlights_nearby_step(tracker):
    assert tracker.on_position(52.5200, 13.4050) == 0
    assert tracker.on_position(52.5205, 13.4060) == 1
    assert tracker.current_step_index == 1


def test_far_position_keeps_current_step(tracker):
    tracker.on_position(52.5205, 13.4060)
    assert tracker.on_position(48.8566, 2.3522) is None
    assert tracker.current_step_index == 1


def test_paused_tracker_ignores_positions(tracker):
    assert tracker.toggle_pause() is True
    assert tracker.on_position(52.5205, 13.4060) is None
    assert tracker.current_step_index == 0

    tracker.resume()
    assert tracker.on_position(52.5205, 13.4060) == 1


def test_error_waits_for_grace_period(tracker, clock):
    tracker.on_error(GeolocationError.TIMEOUT)
    assert tracker.warning() is None

    clock.t += 9
    assert tracker.warning() is None

    clock.t += 1
    assert tracker.warning() == WARNING_MESSAGES[GeolocationError.TIMEOUT]


def test_repeated_errors_keep_first_error_time(tracker, clock):
    tracker.on_error(1)
    clock.t += 6
    tracker.on_error("position_unavailable")
    clock.t += 5
    assert tracker.warning() == WARNING_MESSAGES[GeolocationError.POSITION_UNAVAILABLE]


def test_position_clears_error(tracker, clock):
    tracker.on_error(GeolocationError.PERMISSION_DENIED)
    clock.t += 30
    assert tracker.warning() is not None

    tracker.on_position(52.52, 13.405)
    assert tracker.warning() is None


def test_each_error_has_its_own_message():
    messages = {WARNING_MESSAGES[code] for code in GeolocationError}
    assert len(messages) == 3


def test_empty_response_has_no_steps(clock):
    tracker = LocationTracker({"routes": []}, now=clock)
    assert tracker.on_position(52.52, 13.405) is None
