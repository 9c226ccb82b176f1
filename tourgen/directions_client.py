"""Directions API client and per-variation route enrichment."""
from __future__ import annotations

import logging
from concurrent.futures import ThreadPoolExecutor, as_completed
from typing import Any, Dict, List, Mapping, Optional, Sequence, Tuple

import requests

from . import config
from .directions import to_plain
from .http import HttpClient
from .models import Stop, TourVariation

logger = logging.getLogger(__name__)


class DirectionsError(RuntimeError):
    def __init__(self, status: str, message: str = "") -> None:
        super().__init__(f"Directions request failed: {status}" + (f" ({message})" if message else ""))
        self.status = status


def _latlng_param(stop: Stop) -> str:
    return f"{stop.location.lat},{stop.location.lng}"


def build_directions_params(
    stops: Sequence[Stop],
    mode: str = config.DIRECTIONS_TRAVEL_MODE,
    optimize: bool = config.DIRECTIONS_OPTIMIZE_WAYPOINTS,
) -> Dict[str, Any]:
    if len(stops) < 2:
        raise ValueError("A walking route needs at least two stops")
    params: Dict[str, Any] = {
        "origin": _latlng_param(stops[0]),
        "destination": _latlng_param(stops[-1]),
        "mode": mode,
    }
    waypoints = [_latlng_param(stop) for stop in stops[1:-1]]
    if waypoints:
        if optimize:
            waypoints.insert(0, "optimize:true")
        params["waypoints"] = "|".join(waypoints)
    return params


class DirectionsClient:
    def __init__(self, http_client: HttpClient, api_key: Optional[str]) -> None:
        self.http = http_client
        self.api_key = api_key

    def compute_route(self, stops: Sequence[Stop]) -> Dict[str, Any]:
        params = build_directions_params(stops)
        if self.api_key:
            params["key"] = self.api_key
        # Retries are counted per variation by resolve_variations.
        response = self.http.get_json(config.DIRECTIONS_URL, params, retry_max=1)
        status = response.get("status", "OK")
        if status != "OK":
            raise DirectionsError(status, response.get("error_message") or "")
        return response

    def backoff(self, attempt: int) -> None:
        self.http._sleep_backoff(attempt)


def summarize_route(plain: Mapping[str, Any], route_index: int = 0) -> Tuple[int, int]:
    """Total (duration seconds, distance meters) over the legs of one route."""
    routes = plain.get("routes") or []
    if route_index >= len(routes):
        return 0, 0
    duration_s = 0
    distance_m = 0
    for leg in routes[route_index].get("legs") or []:
        duration_s += int((leg.get("duration") or {}).get("value") or 0)
        distance_m += int((leg.get("distance") or {}).get("value") or 0)
    return duration_s, distance_m


def format_distance(distance_m: int) -> str:
    if distance_m < 1000:
        return f"{distance_m} m"
    return f"{distance_m / 1000:.1f} km"


def _resolve_one(
    client: DirectionsClient, variation: TourVariation, max_attempts: int
) -> Tuple[Optional[Dict[str, Any]], Optional[str]]:
    last_error: Optional[str] = None
    for attempt in range(1, max_attempts + 1):
        try:
            return to_plain(client.compute_route(variation.stops)), None
        except (DirectionsError, requests.RequestException, ValueError) as exc:
            last_error = str(exc)
            logger.warning(
                "Directions for %s failed (attempt %s/%s): %s",
                variation.name,
                attempt,
                max_attempts,
                exc,
            )
            if attempt < max_attempts:
                client.backoff(attempt)
    return None, last_error


def resolve_variations(
    variations: List[TourVariation],
    client: DirectionsClient,
    max_attempts: Optional[int] = None,
    max_workers: Optional[int] = None,
) -> List[TourVariation]:
    """Attach walking directions to every variation, one request per variation.

    Requests run concurrently and retry independently. A variation that keeps
    failing is marked unresolved; the others are unaffected.
    """
    if max_attempts is None:
        max_attempts = config.DIRECTIONS_MAX_ATTEMPTS
    if max_workers is None:
        max_workers = config.DIRECTIONS_MAX_WORKERS

    pending: Dict[int, TourVariation] = {}
    for index, variation in enumerate(variations):
        if len(variation.stops) < 2:
            variation.mark_unresolved("Not enough stops for a walking route")
            continue
        pending[index] = variation

    if not pending:
        return variations

    with ThreadPoolExecutor(max_workers=max(1, max_workers)) as pool:
        futures = {
            pool.submit(_resolve_one, client, variation, max_attempts): index
            for index, variation in pending.items()
        }
        for future in as_completed(futures):
            index = futures[future]
            variation = variations[index]
            plain, error = future.result()
            if plain is None:
                logger.error("Giving up on directions for %s: %s", variation.name, error)
                variation.mark_unresolved(error or "Directions unavailable")
                continue
            duration_s, distance_m = summarize_route(plain)
            variation.attach_directions(
                plain,
                estimated_time_min=int(round(duration_s / 60)),
                distance_m=distance_m,
                distance_text=format_distance(distance_m),
            )
    return variations
