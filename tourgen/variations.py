"""Tour variation generators.

Each generator is a pure function of a candidate list and a stop budget:

- compact: greedy nearest-neighbour walk starting at the first candidate.
  Locally greedy only; it does not find the shortest possible tour.
- diverse: round robin across artists so every artist appears once before
  any artist appears twice.
- popular: random order. There is no ranking signal in the catalog yet, so
  this stays a placeholder until ratings exist.

When every candidate fits the budget, all generators return the candidates
in their original order.
"""
from __future__ import annotations

import enum
import random
from collections import OrderedDict
from typing import Callable, Dict, List, Optional, Sequence

from .geo import haversine_km
from .models import Stop, TourVariation


class VariationKind(str, enum.Enum):
    COMPACT = "compact"
    DIVERSE = "diverse"
    POPULAR = "popular"


VARIATION_INFO: Dict[VariationKind, Dict[str, str]] = {
    VariationKind.COMPACT: {
        "name": "Compact Tour",
        "description": "Shortest walking route between artworks",
    },
    VariationKind.DIVERSE: {
        "name": "Diverse Artists Tour",
        "description": "Features works from as many different artists as possible",
    },
    VariationKind.POPULAR: {
        "name": "Popular Tour",
        "description": "Features the most popular artworks in the area",
    },
}


def _fits(candidates: Sequence[Stop], max_stops: int) -> bool:
    return len(candidates) <= max_stops


def _stop_distance_km(a: Stop, b: Stop) -> float:
    return haversine_km(a.location.lat, a.location.lng, b.location.lat, b.location.lng)


def compact_tour(
    candidates: Sequence[Stop], max_stops: int, rng: Optional[random.Random] = None
) -> List[Stop]:
    if max_stops <= 0:
        return []
    if _fits(candidates, max_stops):
        return list(candidates)

    remaining = list(candidates[1:])
    tour = [candidates[0]]
    while len(tour) < max_stops and remaining:
        last = tour[-1]
        best_index = 0
        best_distance = _stop_distance_km(last, remaining[0])
        for index in range(1, len(remaining)):
            distance = _stop_distance_km(last, remaining[index])
            if distance < best_distance:
                best_index = index
                best_distance = distance
        tour.append(remaining.pop(best_index))
    return tour


def diverse_tour(
    candidates: Sequence[Stop], max_stops: int, rng: Optional[random.Random] = None
) -> List[Stop]:
    if max_stops <= 0:
        return []
    if _fits(candidates, max_stops):
        return list(candidates)

    by_artist: "OrderedDict[str, List[Stop]]" = OrderedDict()
    for stop in candidates:
        by_artist.setdefault(stop.artist, []).append(stop)

    groups = list(by_artist.values())
    tour: List[Stop] = []
    while len(tour) < max_stops and any(groups):
        for group in groups:
            if not group:
                continue
            tour.append(group.pop(0))
            if len(tour) >= max_stops:
                break
    return tour


def popular_tour(
    candidates: Sequence[Stop], max_stops: int, rng: Optional[random.Random] = None
) -> List[Stop]:
    if max_stops <= 0:
        return []
    if _fits(candidates, max_stops):
        return list(candidates)

    shuffled = list(candidates)
    (rng or random).shuffle(shuffled)
    return shuffled[:max_stops]


Generator = Callable[[Sequence[Stop], int, Optional[random.Random]], List[Stop]]

GENERATORS: Dict[VariationKind, Generator] = {
    VariationKind.COMPACT: compact_tour,
    VariationKind.DIVERSE: diverse_tour,
    VariationKind.POPULAR: popular_tour,
}


def generate_variation(
    kind: VariationKind,
    candidates: Sequence[Stop],
    max_stops: int,
    rng: Optional[random.Random] = None,
) -> TourVariation:
    info = VARIATION_INFO[kind]
    stops = GENERATORS[kind](candidates, max_stops, rng)
    return TourVariation(
        name=info["name"],
        description=info["description"],
        stops=stops,
        kind=kind.value,
    )


def generate_variations(
    candidates: Sequence[Stop], max_stops: int, rng: Optional[random.Random] = None
) -> List[TourVariation]:
    return [generate_variation(kind, candidates, max_stops, rng) for kind in VariationKind]
