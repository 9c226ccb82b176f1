"""Live position tracking along a walking route."""
from __future__ import annotations

import enum
import logging
import time
from typing import Any, Callable, Dict, List, Mapping, Optional, Union

from . import config
from .geo import haversine_m
from .models import LatLng

logger = logging.getLogger(__name__)


class GeolocationError(enum.IntEnum):
    PERMISSION_DENIED = 1
    POSITION_UNAVAILABLE = 2
    TIMEOUT = 3


WARNING_MESSAGES: Dict[GeolocationError, str] = {
    GeolocationError.PERMISSION_DENIED: (
        "Location access was denied. Enable location permissions to follow the tour."
    ),
    GeolocationError.POSITION_UNAVAILABLE: (
        "Your location is currently unavailable. Directions will update once it is found."
    ),
    GeolocationError.TIMEOUT: (
        "Finding your location is taking too long. Check your signal and try again."
    ),
}


def _step_anchor(step: Mapping[str, Any]) -> Optional[LatLng]:
    path = step.get("path") or []
    point = path[0] if path else step.get("start_location")
    if not point:
        return None
    return LatLng(point["lat"], point["lng"])


class LocationTracker:
    """Follows position updates and highlights the step being walked.

    Location errors are only reported once they have lasted the grace period,
    so a slow permission prompt does not flash a warning.
    """

    def __init__(
        self,
        plain_response: Mapping[str, Any],
        grace_seconds: Optional[float] = None,
        threshold_m: Optional[float] = None,
        now: Callable[[], float] = time.monotonic,
    ) -> None:
        self.grace_seconds = config.GEOLOCATION_GRACE_SECONDS if grace_seconds is None else grace_seconds
        self.threshold_m = config.STEP_TRACKING_THRESHOLD_M if threshold_m is None else threshold_m
        self.now = now
        self.paused = False
        self.position: Optional[LatLng] = None
        self.current_step_index = 0
        self._error: Optional[GeolocationError] = None
        self._error_since: Optional[float] = None

        routes = plain_response.get("routes") or []
        legs = routes[0].get("legs") if routes else None
        self._steps: List[Mapping[str, Any]] = list(legs[0].get("steps") or []) if legs else []

    def on_position(self, lat: float, lng: float) -> Optional[int]:
        self.position = LatLng(lat, lng)
        self._error = None
        self._error_since = None
        if self.paused:
            return None

        for index, step in enumerate(self._steps):
            anchor = _step_anchor(step)
            if anchor is not None and haversine_m(anchor, self.position) < self.threshold_m:
                self.current_step_index = index
                return index
        return None

    def on_error(self, code: Union[int, str, GeolocationError]) -> None:
        if isinstance(code, str):
            error = GeolocationError[code.upper()]
        else:
            error = GeolocationError(code)
        if self._error_since is None:
            self._error_since = self.now()
        self._error = error
        logger.info("Geolocation error: %s", error.name)

    def warning(self) -> Optional[str]:
        if self._error is None or self._error_since is None:
            return None
        if self.now() - self._error_since < self.grace_seconds:
            return None
        return WARNING_MESSAGES[self._error]

    def pause(self) -> None:
        self.paused = True

    def resume(self) -> None:
        self.paused = False

    def toggle_pause(self) -> bool:
        self.paused = not self.paused
        return self.paused
