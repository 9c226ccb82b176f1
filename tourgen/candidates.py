"""Candidate stop assembly from the catalog and the current selection."""
from __future__ import annotations

import logging
import random
from typing import Callable, List, Optional

from .models import Artwork, Catalog, Stop
from .selection import TourSelection, is_wildcard

logger = logging.getLogger(__name__)


def _shuffled_stops(
    artworks: List[Artwork],
    catalog: Catalog,
    max_stops: int,
    rng: Optional[random.Random],
) -> List[Stop]:
    artists_by_id = catalog.artists_by_id()
    stops = [Stop.from_artwork(art, artists_by_id) for art in artworks]
    (rng or random).shuffle(stops)
    return stops[: max(0, max_stops)]


def random_from_neighborhood(
    selection: TourSelection, catalog: Catalog, max_stops: int, rng: Optional[random.Random] = None
) -> List[Stop]:
    pool = catalog.artworks_in(selection.neighborhood_id)
    return _shuffled_stops(pool, catalog, max_stops, rng)


def random_from_artworks(
    selection: TourSelection, catalog: Catalog, max_stops: int, rng: Optional[random.Random] = None
) -> List[Stop]:
    chosen = selection.artworks.ids
    pool = [art for art in catalog.artworks_in(selection.neighborhood_id) if art.id in chosen]
    return _shuffled_stops(pool, catalog, max_stops, rng)


def random_from_artists(
    selection: TourSelection, catalog: Catalog, max_stops: int, rng: Optional[random.Random] = None
) -> List[Stop]:
    chosen = selection.artists.ids
    pool = [art for art in catalog.artworks_in(selection.neighborhood_id) if art.artist_id in chosen]
    return _shuffled_stops(pool, catalog, max_stops, rng)


def confirmed_stops(
    selection: TourSelection, catalog: Catalog, max_stops: int, rng: Optional[random.Random] = None
) -> List[Stop]:
    # User-ordered picks are kept as-is, even past the budget.
    return list(selection.confirmed_stops)


Assembler = Callable[[TourSelection, Catalog, int, Optional[random.Random]], List[Stop]]


def pick_assembler(selection: TourSelection) -> Assembler:
    artists_wild = is_wildcard(selection.artists)
    artworks_wild = is_wildcard(selection.artworks)
    if artists_wild and artworks_wild:
        return random_from_neighborhood
    if artists_wild:
        return random_from_artworks
    if artworks_wild:
        return random_from_artists
    return confirmed_stops


def assemble_candidates(
    selection: TourSelection,
    catalog: Catalog,
    max_stops: int,
    rng: Optional[random.Random] = None,
) -> List[Stop]:
    assembler = pick_assembler(selection)
    candidates = assembler(selection, catalog, max_stops, rng)
    logger.info(
        "Assembled %s candidates via %s (budget %s)",
        len(candidates),
        assembler.__name__,
        max_stops,
    )
    return candidates
