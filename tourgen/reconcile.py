"""Match walking steps to the artworks they arrive at."""
from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Dict, List, Optional, Sequence

from . import config
from .directions import to_plain
from .geo import find_closest
from .models import LatLng, Stop


@dataclass(frozen=True)
class StepArrival:
    leg_index: int
    step_index: int
    stop_index: Optional[int]
    distance_m: Optional[float]

    @property
    def arrives(self) -> bool:
        return self.stop_index is not None


def reconcile_steps(
    response: Any,
    stops: Sequence[Stop],
    threshold_m: Optional[float] = None,
    route_index: int = 0,
) -> List[StepArrival]:
    """One entry per step of the chosen route, in walking order.

    A step arrives at the stop closest to its end point when that stop is
    strictly closer than ``threshold_m``.
    """
    if threshold_m is None:
        threshold_m = config.ARRIVAL_THRESHOLD_M
    plain = to_plain(response)
    routes = plain.get("routes") or []
    if route_index >= len(routes):
        return []

    stop_points = [stop.location for stop in stops]
    arrivals: List[StepArrival] = []
    for leg_index, leg in enumerate(routes[route_index].get("legs") or []):
        for step_index, step in enumerate(leg.get("steps") or []):
            end = step.get("end_location")
            closest = None
            if end is not None:
                closest = find_closest(LatLng(end["lat"], end["lng"]), stop_points)
            if closest is not None and closest[1] < threshold_m:
                arrivals.append(StepArrival(leg_index, step_index, closest[0], closest[1]))
            else:
                arrivals.append(StepArrival(leg_index, step_index, None, None))
    return arrivals


def arrivals_by_stop(arrivals: Sequence[StepArrival]) -> Dict[int, List[StepArrival]]:
    grouped: Dict[int, List[StepArrival]] = {}
    for arrival in arrivals:
        if arrival.stop_index is not None:
            grouped.setdefault(arrival.stop_index, []).append(arrival)
    return grouped


def unvisited_stops(arrivals: Sequence[StepArrival], stops: Sequence[Stop]) -> List[int]:
    visited = arrivals_by_stop(arrivals)
    return [index for index in range(len(stops)) if index not in visited]
