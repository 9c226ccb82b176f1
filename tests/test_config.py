import json

import pytest

from tourgen import config
from tourgen.budget import stop_budget, validate_tour_length


@pytest.fixture
def restore_config(monkeypatch):
    for name in (
        "VIEWING_MINUTES_PER_STOP",
        "WALKING_TIME_SHARE",
        "ARRIVAL_THRESHOLD_M",
        "TOUR_LENGTH_CHOICES",
        "TOUR_HISTORY_MAX",
    ):
        monkeypatch.setattr(config, name, getattr(config, name))


def test_missing_config_file_keeps_defaults(tmp_path, restore_config):
    assert config.load_tour_config(str(tmp_path / "nope.json")) is False
    assert config.VIEWING_MINUTES_PER_STOP == 3
    assert config.WALKING_TIME_SHARE == 0.5


def test_config_file_overrides_tunables(tmp_path, restore_config):
    path = tmp_path / "tour_config.json"
    path.write_text(
        json.dumps(
            {
                "viewing_minutes_per_stop": 5,
                "walking_time_share": 0.4,
                "arrival_threshold_m": 25,
                "tour_length_choices": [45, 90],
                "tour_history_max": None,
            }
        ),
        encoding="utf-8",
    )

    assert config.load_tour_config(str(path)) is True
    assert config.VIEWING_MINUTES_PER_STOP == 5
    assert config.ARRIVAL_THRESHOLD_M == 25.0
    assert config.TOUR_LENGTH_CHOICES == (45, 90)
    assert config.TOUR_HISTORY_MAX == 5

    # 90 minutes, 60% viewing at 5 minutes each.
    assert stop_budget(90) == 10
    assert validate_tour_length(45) == 45
    with pytest.raises(ValueError):
        validate_tour_length(60)
