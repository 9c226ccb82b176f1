"""Tour planning orchestration."""
from __future__ import annotations

import dataclasses
import logging
import random
from dataclasses import dataclass
from typing import Dict, List, Optional

from .budget import stop_budget
from .candidates import assemble_candidates
from .directions import SerializationError, serialize_for_handoff
from .models import Catalog, Stop, TourVariation
from .selection import TourSelection
from .storage import TourHandoff
from .variations import generate_variations

logger = logging.getLogger(__name__)


@dataclass
class TourPlan:
    duration: int
    max_stops: int
    candidates: List[Stop]
    variations: List[TourVariation]


def plan_tour(
    selection: TourSelection, catalog: Catalog, rng: Optional[random.Random] = None
) -> TourPlan:
    if selection.duration_min is None:
        raise ValueError("Pick a tour length first")
    if not selection.neighborhood_id:
        raise ValueError("Pick a neighborhood first")

    logger.info("Stage 1: stop budget")
    max_stops = stop_budget(selection.duration_min)

    logger.info("Stage 2: candidates")
    candidates = assemble_candidates(selection, catalog, max_stops, rng)

    logger.info("Stage 3: variations")
    variations = generate_variations(candidates, max_stops, rng)
    if not candidates:
        logger.info("No artworks fit a %s minute tour", selection.duration_min)

    return TourPlan(
        duration=selection.duration_min,
        max_stops=max_stops,
        candidates=candidates,
        variations=variations,
    )


def select_variation(plan: TourPlan, index: int) -> TourHandoff:
    if not 0 <= index < len(plan.variations):
        raise ValueError(f"No tour variation at index {index}")
    variation = plan.variations[index]
    if not variation.is_selectable:
        raise ValueError(f"{variation.name} has no walking route and cannot be selected")
    if variation.response is None:
        raise ValueError(f"{variation.name} has no directions yet")
    plain = serialize_for_handoff(variation.response)
    return TourHandoff(selected_route=dataclasses.replace(variation, response=plain), duration=plan.duration)


def error_panel(exc: Exception) -> Dict[str, str]:
    if isinstance(exc, SerializationError):
        return {"title": "Unable to load this tour", "message": exc.message, "detail": exc.detail}
    return {"title": "Something went wrong", "message": str(exc), "detail": repr(exc)}
