"""SQLite key-value store for the current tour draft and recent tours."""
from __future__ import annotations

import json
import logging
import sqlite3
import time
from dataclasses import dataclass
from datetime import datetime, timezone
from typing import Any, Callable, Dict, List, Optional

from . import config
from .models import TourVariation

logger = logging.getLogger(__name__)


def utc_now_iso() -> str:
    return datetime.now(timezone.utc).replace(microsecond=0).isoformat()


class TourStore:
    def __init__(self, db_path: str = config.STORE_DB_PATH, now: Callable[[], float] = time.time) -> None:
        self.db_path = db_path
        self.now = now
        self.conn = sqlite3.connect(self.db_path)
        self.conn.row_factory = sqlite3.Row
        self._init_db()

    def _init_db(self) -> None:
        cur = self.conn.cursor()
        cur.execute(
            """
            CREATE TABLE IF NOT EXISTS kv (
                key TEXT PRIMARY KEY,
                value_json TEXT,
                updated_at TEXT
            )
            """
        )
        self.conn.commit()

    def close(self) -> None:
        self.conn.close()

    def _get(self, key: str) -> Optional[Any]:
        cur = self.conn.cursor()
        cur.execute("SELECT value_json FROM kv WHERE key = ?", (key,))
        row = cur.fetchone()
        if not row:
            return None
        try:
            return json.loads(row["value_json"])
        except ValueError:
            logger.error("Discarding corrupt stored value for %s", key)
            return None

    def _set(self, key: str, value: Any) -> None:
        cur = self.conn.cursor()
        cur.execute(
            "INSERT OR REPLACE INTO kv (key, value_json, updated_at) VALUES (?, ?, ?)",
            (key, json.dumps(value), utc_now_iso()),
        )
        self.conn.commit()

    def _delete(self, key: str) -> None:
        cur = self.conn.cursor()
        cur.execute("DELETE FROM kv WHERE key = ?", (key,))
        self.conn.commit()

    def _expired(self, state: Dict[str, Any]) -> bool:
        timestamp = state.get("timestamp")
        if not isinstance(timestamp, (int, float)):
            return True
        return self.now() - timestamp > config.TOUR_STATE_MAX_AGE_SECONDS

    def save_tour_state(self, selected_route: Dict[str, Any], duration: int) -> Dict[str, Any]:
        state = {
            "selectedRoute": selected_route,
            "duration": duration,
            "timestamp": self.now(),
        }
        self._set(config.STORE_KEY_CURRENT_TOUR, state)

        history = self.get_tour_history()
        history.insert(0, state)
        self._set(config.STORE_KEY_TOUR_HISTORY, history[: config.TOUR_HISTORY_MAX])
        return state

    def load_tour_state(self) -> Optional[Dict[str, Any]]:
        state = self._get(config.STORE_KEY_CURRENT_TOUR)
        if not isinstance(state, dict):
            return None
        if self._expired(state):
            self._delete(config.STORE_KEY_CURRENT_TOUR)
            return None
        return state

    def get_tour_history(self) -> List[Dict[str, Any]]:
        history = self._get(config.STORE_KEY_TOUR_HISTORY)
        if not isinstance(history, list):
            return []
        fresh = [entry for entry in history if isinstance(entry, dict) and not self._expired(entry)]
        if len(fresh) != len(history):
            self._set(config.STORE_KEY_TOUR_HISTORY, fresh)
        return fresh

    def clear_tour_data(self) -> None:
        self._delete(config.STORE_KEY_CURRENT_TOUR)
        self._delete(config.STORE_KEY_TOUR_HISTORY)


@dataclass
class TourHandoff:
    """What the tour screen receives: the chosen, directions-enriched variation."""

    selected_route: TourVariation
    duration: int

    def persist(self, store: TourStore) -> Dict[str, Any]:
        return store.save_tour_state(self.selected_route.to_dict(), self.duration)

    @classmethod
    def from_store(cls, store: TourStore) -> Optional["TourHandoff"]:
        state = store.load_tour_state()
        if state is None:
            return None
        return cls(
            selected_route=TourVariation.from_dict(state["selectedRoute"]),
            duration=int(state["duration"]),
        )
