import logging

import pytest

from tourgen import config
from tourgen.models import LatLng, Stop, TourVariation
from tourgen.storage import TourHandoff, TourStore


class FakeClock:
    def __init__(self, start=1_700_000_000.0):
        self.t = start

    def __call__(self):
        return self.t


@pytest.fixture
def clock():
    return FakeClock()


@pytest.fixture
def store(tmp_path, clock):
    s = TourStore(str(tmp_path / "tours.db"), now=clock)
    yield s
    s.close()


def make_route(name="Compact Tour"):
    return {"name": name, "locations": [], "response": None}


def test_save_and_load_current_tour(store, clock):
    state = store.save_tour_state(make_route(), 60)
    assert state["timestamp"] == clock.t

    loaded = store.load_tour_state()
    assert loaded == {"selectedRoute": make_route(), "duration": 60, "timestamp": clock.t}


def test_current_tour_expires_after_a_day(store, clock):
    store.save_tour_state(make_route(), 60)

    clock.t += config.TOUR_STATE_MAX_AGE_SECONDS
    assert store.load_tour_state() is not None

    clock.t += 1
    assert store.load_tour_state() is None
    # Expired state is removed, not just hidden.
    assert store._get(config.STORE_KEY_CURRENT_TOUR) is None


def test_history_is_newest_first_and_capped(store, clock):
    for i in range(7):
        clock.t += 60
        store.save_tour_state(make_route(f"Tour {i}"), 30)

    history = store.get_tour_history()
    assert len(history) == config.TOUR_HISTORY_MAX
    assert [entry["selectedRoute"]["name"] for entry in history] == [
        "Tour 6",
        "Tour 5",
        "Tour 4",
        "Tour 3",
        "Tour 2",
    ]


def test_history_drops_expired_entries(store, clock):
    store.save_tour_state(make_route("Old"), 30)
    clock.t += config.TOUR_STATE_MAX_AGE_SECONDS - 10
    store.save_tour_state(make_route("New"), 90)

    clock.t += 20
    history = store.get_tour_history()
    assert [entry["selectedRoute"]["name"] for entry in history] == ["New"]
    assert len(store._get(config.STORE_KEY_TOUR_HISTORY)) == 1


def test_corrupt_value_is_ignored(store, caplog):
    store.conn.execute(
        "INSERT OR REPLACE INTO kv (key, value_json, updated_at) VALUES (?, ?, ?)",
        (config.STORE_KEY_CURRENT_TOUR, "{not json", "2024-01-01T00:00:00+00:00"),
    )
    store.conn.commit()

    with caplog.at_level(logging.ERROR, logger="tourgen.storage"):
        assert store.load_tour_state() is None
    assert "corrupt" in caplog.text


def test_state_without_timestamp_counts_as_expired(store):
    store._set(config.STORE_KEY_CURRENT_TOUR, {"selectedRoute": make_route(), "duration": 60})
    assert store.load_tour_state() is None


def test_clear_tour_data(store):
    store.save_tour_state(make_route(), 60)
    store.clear_tour_data()
    assert store.load_tour_state() is None
    assert store.get_tour_history() == []


def test_state_survives_reopening(tmp_path, clock):
    path = str(tmp_path / "tours.db")
    first = TourStore(path, now=clock)
    first.save_tour_state(make_route(), 120)
    first.close()

    second = TourStore(path, now=clock)
    try:
        assert second.load_tour_state()["duration"] == 120
    finally:
        second.close()


def test_handoff_round_trip(store):
    stops = [
        Stop("s1", "Blue Fox", "Kera", LatLng(52.52, 13.405), "fox.jpg"),
        Stop("s2", "Night Tram", "Vogt", LatLng(52.521, 13.407)),
    ]
    route = TourVariation(
        name="Compact Tour",
        description="Shortest walk",
        stops=stops,
        kind="compact",
        response={"routes": [], "geocoded_waypoints": [], "request": None},
        estimated_time_min=12,
        distance_m=900,
        distance_text="900 m",
    )
    handoff = TourHandoff(selected_route=route, duration=60)

    handoff.persist(store)
    restored = TourHandoff.from_store(store)

    assert restored == handoff
    assert store.get_tour_history()[0]["selectedRoute"]["locations"][0]["imageUrl"] == "fox.jpg"


def test_handoff_from_empty_store(store):
    assert TourHandoff.from_store(store) is None
