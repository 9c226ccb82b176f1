"""Structural validation of plain (serializable) directions responses."""
from __future__ import annotations

import logging
from dataclasses import dataclass, field
from typing import Any, List, Mapping, Optional

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class ValidationError:
    field: str
    message: str
    path: Optional[str] = None

    def __str__(self) -> str:
        prefix = f"[{self.path}] " if self.path else ""
        return f"{prefix}{self.field}: {self.message}"


@dataclass
class ValidationResult:
    is_valid: bool
    errors: List[ValidationError] = field(default_factory=list)


def _is_number(value: Any) -> bool:
    return isinstance(value, (int, float)) and not isinstance(value, bool)


def validate_lat_lng(point: Any, path: str) -> List[ValidationError]:
    if not isinstance(point, Mapping):
        return [ValidationError("latLng", "LatLng object is missing", path)]

    errors: List[ValidationError] = []
    lat = point.get("lat")
    lng = point.get("lng")
    if not _is_number(lat):
        errors.append(ValidationError("lat", "Latitude is missing or not a number", path))
    if not _is_number(lng):
        errors.append(ValidationError("lng", "Longitude is missing or not a number", path))
    if errors:
        return errors

    if lat < -90 or lat > 90:
        errors.append(ValidationError("lat", "Latitude must be between -90 and 90", path))
    if lng < -180 or lng > 180:
        errors.append(ValidationError("lng", "Longitude must be between -180 and 180", path))
    return errors


def validate_bounds(bounds: Any, path: str) -> List[ValidationError]:
    if not isinstance(bounds, Mapping):
        return [ValidationError("bounds", "Bounds object is missing", path)]

    ne = bounds.get("northeast")
    sw = bounds.get("southwest")
    errors = validate_lat_lng(ne, f"{path}.northeast")
    errors.extend(validate_lat_lng(sw, f"{path}.southwest"))
    if errors:
        return errors

    if ne["lat"] < sw["lat"]:
        errors.append(
            ValidationError(
                "bounds", "Northeast latitude must be greater than southwest latitude", path
            )
        )
    # A westward span under 180 degrees is inverted; larger ones cross the antimeridian.
    if ne["lng"] < sw["lng"] and abs(ne["lng"] - sw["lng"]) < 180:
        errors.append(ValidationError("bounds", "Invalid longitude span", path))
    return errors


def _validate_points(points: Any, path: str) -> List[ValidationError]:
    if points is None:
        return []
    if not isinstance(points, list):
        return [ValidationError("path", "Point list must be an array", path)]
    errors: List[ValidationError] = []
    for index, point in enumerate(points):
        errors.extend(validate_lat_lng(point, f"{path}[{index}]"))
    return errors


def validate_step(step: Any, path: str) -> List[ValidationError]:
    if not isinstance(step, Mapping):
        return [ValidationError("step", "Step object is missing", path)]

    errors: List[ValidationError] = []
    if not step.get("instructions"):
        errors.append(ValidationError("instructions", "Step instructions are missing", path))
    if not step.get("travel_mode"):
        errors.append(ValidationError("travel_mode", "Travel mode is missing", path))
    errors.extend(validate_lat_lng(step.get("start_location"), f"{path}.start_location"))
    errors.extend(validate_lat_lng(step.get("end_location"), f"{path}.end_location"))
    errors.extend(_validate_points(step.get("path"), f"{path}.path"))
    return errors


def validate_leg(leg: Any, path: str) -> List[ValidationError]:
    if not isinstance(leg, Mapping):
        return [ValidationError("leg", "Leg object is missing", path)]

    errors: List[ValidationError] = []
    if not leg.get("start_address"):
        errors.append(ValidationError("start_address", "Start address is missing", path))
    if not leg.get("end_address"):
        errors.append(ValidationError("end_address", "End address is missing", path))
    errors.extend(validate_lat_lng(leg.get("start_location"), f"{path}.start_location"))
    errors.extend(validate_lat_lng(leg.get("end_location"), f"{path}.end_location"))

    steps = leg.get("steps")
    if not isinstance(steps, list) or not steps:
        errors.append(ValidationError("steps", "Steps array is empty or missing", path))
    else:
        for index, step in enumerate(steps):
            errors.extend(validate_step(step, f"{path}.steps[{index}]"))

    errors.extend(_validate_points(leg.get("via_waypoints"), f"{path}.via_waypoints"))
    return errors


def validate_route(route: Any, path: str) -> List[ValidationError]:
    if not isinstance(route, Mapping):
        return [ValidationError("route", "Route object is missing", path)]

    errors = validate_bounds(route.get("bounds"), f"{path}.bounds")

    legs = route.get("legs")
    if not isinstance(legs, list) or not legs:
        errors.append(ValidationError("legs", "Route legs array is empty or missing", path))
    else:
        for index, leg in enumerate(legs):
            errors.extend(validate_leg(leg, f"{path}.legs[{index}]"))

    polyline = route.get("overview_polyline")
    if not polyline:
        errors.append(ValidationError("overview_polyline", "Overview polyline is missing", path))
    elif isinstance(polyline, Mapping) and not polyline.get("points"):
        errors.append(
            ValidationError("overview_polyline", "Overview polyline points is missing", path)
        )

    # Walking routes can come back with an empty summary.
    if route.get("summary") is None:
        errors.append(ValidationError("summary", "Route summary is missing", path))

    errors.extend(_validate_points(route.get("overview_path"), f"{path}.overview_path"))
    return errors


def validate_directions_result(result: Any) -> ValidationResult:
    if not isinstance(result, Mapping):
        return ValidationResult(
            is_valid=False,
            errors=[ValidationError("result", "Directions result is null or undefined")],
        )

    errors: List[ValidationError] = []
    routes = result.get("routes")
    if not isinstance(routes, list) or not routes:
        errors.append(ValidationError("routes", "Routes array is empty or missing"))
    else:
        for index, route in enumerate(routes):
            errors.extend(validate_route(route, f"routes[{index}]"))

    if not result.get("geocoded_waypoints"):
        errors.append(
            ValidationError("geocoded_waypoints", "Geocoded waypoints array is empty or missing")
        )

    return ValidationResult(is_valid=not errors, errors=errors)


def log_validation_errors(errors: List[ValidationError]) -> None:
    for error in errors:
        logger.error("Route validation: %s", error)
