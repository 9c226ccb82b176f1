"""Project configuration.

Loads tunable tour parameters from tour_config.json when available,
falling back to sensible defaults. Keep API request shapes centralized here.
"""
from __future__ import annotations

import json
from pathlib import Path
from typing import Any, Dict, Optional

_REPO_ROOT = Path(__file__).resolve().parent.parent

# --- API endpoints ---

DIRECTIONS_URL = "https://maps.googleapis.com/maps/api/directions/json"
DIRECTIONS_TRAVEL_MODE = "walking"
DIRECTIONS_OPTIMIZE_WAYPOINTS = True

# --- Tour planning ---

TOUR_LENGTH_CHOICES = (30, 60, 90, 120)
VIEWING_MINUTES_PER_STOP = 3
# Half of the tour is spent walking, half looking at art.
WALKING_TIME_SHARE = 0.5

# --- Geo ---

EARTH_RADIUS_KM = 6371.0

# --- Reconciliation and live tracking ---

ARRIVAL_THRESHOLD_M = 20.0
STEP_TRACKING_THRESHOLD_M = 50.0
GEOLOCATION_GRACE_SECONDS = 10.0

# --- Directions requests ---

DIRECTIONS_MAX_ATTEMPTS = 3
DIRECTIONS_MAX_WORKERS = 3

# --- HTTP ---

HTTP_TIMEOUT_SECONDS = 20
HTTP_RETRY_MAX = 2
HTTP_BACKOFF_BASE = 0.5
HTTP_BACKOFF_MAX = 8.0

# --- Persisted tour state ---

STORE_DB_PATH = "tours.db"
STORE_KEY_CURRENT_TOUR = "stours_current_tour"
STORE_KEY_TOUR_HISTORY = "stours_history"
TOUR_HISTORY_MAX = 5
TOUR_STATE_MAX_AGE_SECONDS = 24 * 60 * 60

# --- Outputs ---

OUTPUT_DIR = "out"

_TUNABLE_KEYS: Dict[str, type] = {
    "viewing_minutes_per_stop": int,
    "walking_time_share": float,
    "arrival_threshold_m": float,
    "step_tracking_threshold_m": float,
    "geolocation_grace_seconds": float,
    "directions_max_attempts": int,
    "directions_max_workers": int,
    "http_timeout_seconds": int,
    "http_retry_max": int,
    "tour_history_max": int,
    "tour_state_max_age_seconds": int,
    "store_db_path": str,
    "output_dir": str,
}


def load_tour_config(path: Optional[str] = None) -> bool:
    """Load tunable tour parameters from a JSON file.

    Updates module-level globals with values from the config file.
    Returns True if config was loaded, False if file not found.
    """
    if path is None:
        path = str(_REPO_ROOT / "tour_config.json")

    config_path = Path(path)
    if not config_path.exists():
        return False

    with open(config_path, "r", encoding="utf-8") as f:
        data: Dict[str, Any] = json.load(f)

    globals_ref = globals()

    for key, cast in _TUNABLE_KEYS.items():
        if data.get(key) is not None:
            globals_ref[key.upper()] = cast(data[key])

    lengths = data.get("tour_length_choices")
    if lengths:
        globals_ref["TOUR_LENGTH_CHOICES"] = tuple(int(v) for v in lengths)

    return True
