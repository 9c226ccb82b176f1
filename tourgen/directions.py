"""Directions response conversion between provider objects and plain data.

Provider responses arrive in two shapes: JSON from the directions web
service, where coordinates are plain numbers, and map-widget objects, where
coordinates are accessor methods (``lat()``/``lng()``). ``normalize_latlng``
is the one place that tells the two apart. Everything past ``to_plain`` works
on plain dicts only.

The plain form always carries the same keys; optional members that the
provider did not send are ``None``. That keeps
``to_plain(to_native(to_plain(x))) == to_plain(x)``.
"""
from __future__ import annotations

import copy
from dataclasses import dataclass, field
from typing import Any, Dict, List, Mapping, Optional, Sequence

from .route_validation import ValidationError, log_validation_errors, validate_directions_result

PlainLatLng = Dict[str, float]


class SerializationError(ValueError):
    def __init__(self, message: str, errors: Optional[List[ValidationError]] = None) -> None:
        super().__init__(message)
        self.message = message
        self.errors = list(errors or [])

    @property
    def detail(self) -> str:
        return "\n".join(str(error) for error in self.errors)


class NativeLatLng:
    """Provider-style coordinate with accessor methods."""

    __slots__ = ("_lat", "_lng")

    def __init__(self, lat: float, lng: float) -> None:
        self._lat = float(lat)
        self._lng = float(lng)

    def lat(self) -> float:
        return self._lat

    def lng(self) -> float:
        return self._lng

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, NativeLatLng):
            return NotImplemented
        return self._lat == other._lat and self._lng == other._lng

    def __repr__(self) -> str:
        return f"NativeLatLng({self._lat}, {self._lng})"


class NativeBounds:
    __slots__ = ("_sw", "_ne")

    def __init__(self, southwest: NativeLatLng, northeast: NativeLatLng) -> None:
        self._sw = southwest
        self._ne = northeast

    def get_south_west(self) -> NativeLatLng:
        return self._sw

    def get_north_east(self) -> NativeLatLng:
        return self._ne


@dataclass
class DirectionsStep:
    instructions: Optional[str]
    travel_mode: Optional[str]
    start_location: Optional[NativeLatLng]
    end_location: Optional[NativeLatLng]
    distance: Optional[Dict[str, Any]] = None
    duration: Optional[Dict[str, Any]] = None
    path: Optional[List[NativeLatLng]] = None
    polyline: Optional[Dict[str, str]] = None


@dataclass
class DirectionsLeg:
    start_address: Optional[str]
    end_address: Optional[str]
    start_location: Optional[NativeLatLng]
    end_location: Optional[NativeLatLng]
    steps: List[DirectionsStep] = field(default_factory=list)
    distance: Optional[Dict[str, Any]] = None
    duration: Optional[Dict[str, Any]] = None
    via_waypoints: Optional[List[NativeLatLng]] = None


@dataclass
class DirectionsRoute:
    bounds: Optional[NativeBounds]
    legs: List[DirectionsLeg] = field(default_factory=list)
    overview_polyline: Optional[Dict[str, str]] = None
    overview_path: Optional[List[NativeLatLng]] = None
    summary: Optional[str] = None
    copyrights: str = ""
    warnings: List[str] = field(default_factory=list)
    waypoint_order: List[int] = field(default_factory=list)


@dataclass
class DirectionsResult:
    routes: List[DirectionsRoute] = field(default_factory=list)
    geocoded_waypoints: List[Dict[str, Any]] = field(default_factory=list)
    request: Optional[Any] = None


def _get(obj: Any, name: str, default: Any = None) -> Any:
    if obj is None:
        return default
    if isinstance(obj, Mapping):
        return obj.get(name, default)
    return getattr(obj, name, default)


def _number(value: Any, name: str) -> float:
    if callable(value):
        value = value()
    if isinstance(value, bool) or not isinstance(value, (int, float)):
        raise ValueError(f"{name} must be a number, got {value!r}")
    return float(value)


def normalize_latlng(value: Any) -> PlainLatLng:
    """Plain ``{"lat", "lng"}`` pair from any supported coordinate source."""
    if value is None:
        raise ValueError("Coordinate is missing")
    if isinstance(value, Mapping):
        lat = value.get("lat", value.get("latitude"))
        lng = value.get("lng", value.get("lon", value.get("longitude")))
        return {"lat": _number(lat, "lat"), "lng": _number(lng, "lng")}
    if isinstance(value, (tuple, list)) and len(value) == 2:
        return {"lat": _number(value[0], "lat"), "lng": _number(value[1], "lng")}
    lat = getattr(value, "lat", None)
    lng = getattr(value, "lng", None)
    if lat is not None and lng is not None:
        return {"lat": _number(lat, "lat"), "lng": _number(lng, "lng")}
    raise ValueError(f"Unsupported coordinate source: {value!r}")


def _maybe_latlng(value: Any) -> Optional[PlainLatLng]:
    if value is None:
        return None
    return normalize_latlng(value)


def _points(values: Any) -> Optional[List[PlainLatLng]]:
    if values is None:
        return None
    return [normalize_latlng(v) for v in values]


def _text_value(value: Any) -> Optional[Dict[str, Any]]:
    if value is None:
        return None
    return {"text": _get(value, "text"), "value": _get(value, "value")}


def _polyline(value: Any) -> Optional[Dict[str, str]]:
    if value is None:
        return None
    if isinstance(value, str):
        return {"points": value}
    points = _get(value, "points")
    if points is None:
        return None
    return {"points": points}


def _bounds(value: Any) -> Optional[Dict[str, PlainLatLng]]:
    if value is None:
        return None
    get_ne = _get(value, "get_north_east")
    get_sw = _get(value, "get_south_west")
    if callable(get_ne) and callable(get_sw):
        return {"northeast": normalize_latlng(get_ne()), "southwest": normalize_latlng(get_sw())}
    if isinstance(value, Mapping) and "north" in value:
        return {
            "northeast": {"lat": _number(value["north"], "north"), "lng": _number(value["east"], "east")},
            "southwest": {"lat": _number(value["south"], "south"), "lng": _number(value["west"], "west")},
        }
    return {
        "northeast": normalize_latlng(_get(value, "northeast")),
        "southwest": normalize_latlng(_get(value, "southwest")),
    }


def decode_polyline(points: str) -> List[PlainLatLng]:
    """Decode an encoded polyline (precision 5) into coordinates."""
    coords: List[PlainLatLng] = []
    index = 0
    lat = 0
    lng = 0
    length = len(points)
    while index < length:
        deltas = []
        for _ in range(2):
            shift = 0
            result = 0
            while True:
                if index >= length:
                    raise ValueError("Encoded polyline is truncated")
                byte = ord(points[index]) - 63
                index += 1
                result |= (byte & 0x1F) << shift
                shift += 5
                if byte < 0x20:
                    break
            deltas.append(~(result >> 1) if result & 1 else result >> 1)
        lat += deltas[0]
        lng += deltas[1]
        coords.append({"lat": lat / 1e5, "lng": lng / 1e5})
    return coords


def _step_to_plain(step: Any) -> Dict[str, Any]:
    instructions = _get(step, "instructions")
    if instructions is None:
        instructions = _get(step, "html_instructions")
    travel_mode = _get(step, "travel_mode")
    polyline = _polyline(_get(step, "polyline"))
    path = _points(_get(step, "path"))
    if path is None and polyline is not None:
        path = decode_polyline(polyline["points"])
    return {
        "instructions": instructions,
        "travel_mode": str(travel_mode).upper() if travel_mode else travel_mode,
        "start_location": _maybe_latlng(_get(step, "start_location")),
        "end_location": _maybe_latlng(_get(step, "end_location")),
        "distance": _text_value(_get(step, "distance")),
        "duration": _text_value(_get(step, "duration")),
        "path": path,
        "polyline": polyline,
    }


def _leg_to_plain(leg: Any) -> Dict[str, Any]:
    return {
        "start_address": _get(leg, "start_address"),
        "end_address": _get(leg, "end_address"),
        "start_location": _maybe_latlng(_get(leg, "start_location")),
        "end_location": _maybe_latlng(_get(leg, "end_location")),
        "distance": _text_value(_get(leg, "distance")),
        "duration": _text_value(_get(leg, "duration")),
        "steps": [_step_to_plain(step) for step in _get(leg, "steps") or []],
        "via_waypoints": _points(_get(leg, "via_waypoints")),
    }


def _route_to_plain(route: Any) -> Dict[str, Any]:
    polyline = _polyline(_get(route, "overview_polyline"))
    overview_path = _points(_get(route, "overview_path"))
    if overview_path is None and polyline is not None:
        overview_path = decode_polyline(polyline["points"])
    return {
        "bounds": _bounds(_get(route, "bounds")),
        "legs": [_leg_to_plain(leg) for leg in _get(route, "legs") or []],
        "overview_polyline": polyline,
        "overview_path": overview_path,
        "summary": _get(route, "summary"),
        "copyrights": _get(route, "copyrights") or "",
        "warnings": list(_get(route, "warnings") or []),
        "waypoint_order": [int(v) for v in _get(route, "waypoint_order") or []],
    }


def to_plain(response: Any) -> Dict[str, Any]:
    """Serializable mirror of a directions response. Never shares arrays with the input."""
    if response is None:
        raise ValueError("Directions response is missing")
    return {
        "routes": [_route_to_plain(route) for route in _get(response, "routes") or []],
        "geocoded_waypoints": copy.deepcopy(list(_get(response, "geocoded_waypoints") or [])),
        "request": None,
    }


def _native_latlng(point: Optional[Mapping[str, float]]) -> Optional[NativeLatLng]:
    if point is None:
        return None
    return NativeLatLng(point["lat"], point["lng"])


def _native_points(points: Optional[Sequence[Mapping[str, float]]]) -> Optional[List[NativeLatLng]]:
    if points is None:
        return None
    return [NativeLatLng(p["lat"], p["lng"]) for p in points]


def to_native(plain: Mapping[str, Any]) -> DirectionsResult:
    """Rebuild provider-shaped objects from the plain form."""
    routes = []
    for route in plain.get("routes") or []:
        bounds = route.get("bounds")
        legs = []
        for leg in route.get("legs") or []:
            steps = [
                DirectionsStep(
                    instructions=step.get("instructions"),
                    travel_mode=step.get("travel_mode"),
                    start_location=_native_latlng(step.get("start_location")),
                    end_location=_native_latlng(step.get("end_location")),
                    distance=copy.deepcopy(step.get("distance")),
                    duration=copy.deepcopy(step.get("duration")),
                    path=_native_points(step.get("path")),
                    polyline=copy.deepcopy(step.get("polyline")),
                )
                for step in leg.get("steps") or []
            ]
            legs.append(
                DirectionsLeg(
                    start_address=leg.get("start_address"),
                    end_address=leg.get("end_address"),
                    start_location=_native_latlng(leg.get("start_location")),
                    end_location=_native_latlng(leg.get("end_location")),
                    steps=steps,
                    distance=copy.deepcopy(leg.get("distance")),
                    duration=copy.deepcopy(leg.get("duration")),
                    via_waypoints=_native_points(leg.get("via_waypoints")),
                )
            )
        routes.append(
            DirectionsRoute(
                bounds=(
                    NativeBounds(
                        _native_latlng(bounds["southwest"]), _native_latlng(bounds["northeast"])
                    )
                    if bounds
                    else None
                ),
                legs=legs,
                overview_polyline=copy.deepcopy(route.get("overview_polyline")),
                overview_path=_native_points(route.get("overview_path")),
                summary=route.get("summary"),
                copyrights=route.get("copyrights") or "",
                warnings=list(route.get("warnings") or []),
                waypoint_order=list(route.get("waypoint_order") or []),
            )
        )
    return DirectionsResult(
        routes=routes,
        geocoded_waypoints=copy.deepcopy(list(plain.get("geocoded_waypoints") or [])),
    )


def serialize_for_handoff(response: Any) -> Dict[str, Any]:
    """Plain form of ``response`` that passed structural validation."""
    try:
        plain = to_plain(response)
    except ValueError as exc:
        raise SerializationError(
            "The route could not be prepared for navigation.",
            [ValidationError("response", str(exc))],
        ) from exc

    result = validate_directions_result(plain)
    if not result.is_valid:
        log_validation_errors(result.errors)
        raise SerializationError(
            "The route returned by the directions service is incomplete.", result.errors
        )
    return plain
