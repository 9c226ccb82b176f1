"""Geospatial helpers."""
from __future__ import annotations

import math
from typing import Optional, Sequence, Tuple

from . import config
from .models import LatLng


def haversine_km(lat1: float, lon1: float, lat2: float, lon2: float) -> float:
    if lat1 == lat2 and lon1 == lon2:
        return 0.0
    r = config.EARTH_RADIUS_KM
    phi1 = math.radians(lat1)
    phi2 = math.radians(lat2)
    dphi = math.radians(lat2 - lat1)
    dlambda = math.radians(lon2 - lon1)

    a = math.sin(dphi / 2) ** 2 + math.cos(phi1) * math.cos(phi2) * math.sin(dlambda / 2) ** 2
    # Rounding can push a just outside [0, 1] for antipodal points.
    a = min(1.0, max(0.0, a))
    c = 2 * math.atan2(math.sqrt(a), math.sqrt(1 - a))
    return r * c


def haversine_m(a: LatLng, b: LatLng) -> float:
    return haversine_km(a.lat, a.lng, b.lat, b.lng) * 1000.0


def is_within_distance(a: LatLng, b: LatLng, max_m: float) -> bool:
    return haversine_m(a, b) < max_m


def find_closest(target: LatLng, points: Sequence[LatLng]) -> Optional[Tuple[int, float]]:
    """Index and distance in meters of the closest point; the first minimum wins."""
    best: Optional[Tuple[int, float]] = None
    for index, point in enumerate(points):
        distance = haversine_m(target, point)
        if best is None or distance < best[1]:
            best = (index, distance)
    return best
