"""Artist and artwork selection state for the tour builder.

A selection is either the "surprise me" wildcard or an explicit set of ids.
The two states are separate types so a real id can never be mistaken for
the wildcard.
"""
from __future__ import annotations

from dataclasses import dataclass, field
from typing import FrozenSet, Iterable, List, Optional, Union

from .models import Stop


class Wildcard:
    _instance: Optional["Wildcard"] = None

    def __new__(cls) -> "Wildcard":
        if cls._instance is None:
            cls._instance = super().__new__(cls)
        return cls._instance

    def __repr__(self) -> str:
        return "WILDCARD"

    def __reduce__(self):
        return (Wildcard, ())


WILDCARD = Wildcard()


@dataclass(frozen=True)
class Explicit:
    ids: FrozenSet[str] = frozenset()

    def __contains__(self, item: object) -> bool:
        return item in self.ids

    def __len__(self) -> int:
        return len(self.ids)


Selection = Union[Wildcard, Explicit]
EMPTY = Explicit()


def explicit(ids: Iterable[str]) -> Explicit:
    return Explicit(frozenset(ids))


def is_wildcard(selection: Selection) -> bool:
    return isinstance(selection, Wildcard)


def toggle(current: Selection, item: Union[Wildcard, str]) -> Selection:
    if isinstance(item, Wildcard):
        return EMPTY if is_wildcard(current) else WILDCARD

    ids = set() if is_wildcard(current) else set(current.ids)
    if item in ids:
        ids.remove(item)
    else:
        ids.add(item)
    return Explicit(frozenset(ids))


@dataclass
class TourSelection:
    neighborhood_id: Optional[str] = None
    artists: Selection = EMPTY
    artworks: Selection = EMPTY
    confirmed_stops: List[Stop] = field(default_factory=list)
    duration_min: Optional[int] = None

    def set_neighborhood(self, neighborhood_id: str) -> None:
        if neighborhood_id == self.neighborhood_id:
            return
        self.neighborhood_id = neighborhood_id
        self.artists = EMPTY
        self.artworks = EMPTY
        self.confirmed_stops = []

    def toggle_artist(self, item: Union[Wildcard, str]) -> None:
        self.artists = toggle(self.artists, item)
        # Artwork picks depend on the chosen artists.
        self.artworks = EMPTY
        self.confirmed_stops = []

    def toggle_artwork(self, item: Union[Wildcard, str]) -> None:
        self.artworks = toggle(self.artworks, item)

    def confirm_stops(self, stops: Iterable[Stop]) -> None:
        self.confirmed_stops = list(stops)
