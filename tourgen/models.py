"""Catalog and tour data types."""
from __future__ import annotations

import json
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Dict, List, Mapping, Optional

UNKNOWN_ARTIST = "Unknown artist"


@dataclass(frozen=True)
class LatLng:
    lat: float
    lng: float

    def as_dict(self) -> Dict[str, float]:
        return {"lat": self.lat, "lng": self.lng}


@dataclass(frozen=True)
class Artist:
    id: str
    name: str
    bio: str = ""
    image: str = ""


@dataclass(frozen=True)
class Neighborhood:
    id: str
    name: str
    city_id: str = ""
    image: str = ""


@dataclass(frozen=True)
class Artwork:
    id: str
    title: str
    artist_id: str
    neighborhood_id: str
    location: LatLng
    image: str = ""


@dataclass(frozen=True)
class Stop:
    id: str
    title: str
    artist: str
    location: LatLng
    image: str = ""

    @classmethod
    def from_artwork(cls, artwork: Artwork, artists_by_id: Mapping[str, Artist]) -> "Stop":
        artist = artists_by_id.get(artwork.artist_id)
        return cls(
            id=artwork.id,
            title=artwork.title,
            artist=artist.name if artist is not None else UNKNOWN_ARTIST,
            location=artwork.location,
            image=artwork.image,
        )

    def to_dict(self) -> Dict[str, Any]:
        return {
            "id": self.id,
            "title": self.title,
            "artist": self.artist,
            "coordinates": self.location.as_dict(),
            "imageUrl": self.image,
        }

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> "Stop":
        coords = data.get("coordinates") or {}
        return cls(
            id=str(data["id"]),
            title=data.get("title") or "",
            artist=data.get("artist") or UNKNOWN_ARTIST,
            location=LatLng(float(coords["lat"]), float(coords["lng"])),
            image=data.get("imageUrl") or "",
        )


@dataclass
class TourVariation:
    name: str
    description: str
    stops: List[Stop]
    kind: str
    response: Optional[Dict[str, Any]] = None
    estimated_time_min: Optional[int] = None
    distance_m: Optional[int] = None
    distance_text: Optional[str] = None
    unresolved: bool = False
    error: Optional[str] = None

    @property
    def is_selectable(self) -> bool:
        return not self.unresolved

    def attach_directions(
        self,
        response: Dict[str, Any],
        estimated_time_min: int,
        distance_m: int,
        distance_text: str,
    ) -> None:
        if self.response is not None:
            raise RuntimeError(f"Directions already attached to {self.name}")
        self.response = response
        self.estimated_time_min = estimated_time_min
        self.distance_m = distance_m
        self.distance_text = distance_text

    def mark_unresolved(self, error: str) -> None:
        self.unresolved = True
        self.error = error

    def to_dict(self) -> Dict[str, Any]:
        return {
            "name": self.name,
            "description": self.description,
            "kind": self.kind,
            "locations": [stop.to_dict() for stop in self.stops],
            "response": self.response,
            "estimatedTime": self.estimated_time_min,
            "distanceMeters": self.distance_m,
            "distance": self.distance_text,
            "unresolved": self.unresolved,
            "error": self.error,
        }

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> "TourVariation":
        return cls(
            name=data["name"],
            description=data.get("description") or "",
            stops=[Stop.from_dict(item) for item in data.get("locations") or []],
            kind=data.get("kind") or "",
            response=data.get("response"),
            estimated_time_min=data.get("estimatedTime"),
            distance_m=data.get("distanceMeters"),
            distance_text=data.get("distance"),
            unresolved=bool(data.get("unresolved")),
            error=data.get("error"),
        )


@dataclass
class Catalog:
    artists: List[Artist] = field(default_factory=list)
    neighborhoods: List[Neighborhood] = field(default_factory=list)
    artworks: List[Artwork] = field(default_factory=list)

    def artists_by_id(self) -> Dict[str, Artist]:
        return {artist.id: artist for artist in self.artists}

    def artworks_in(self, neighborhood_id: Optional[str]) -> List[Artwork]:
        return [art for art in self.artworks if art.neighborhood_id == neighborhood_id]


def _parse_location(raw: Mapping[str, Any]) -> LatLng:
    if "latitude" in raw:
        return LatLng(float(raw["latitude"]), float(raw["longitude"]))
    return LatLng(float(raw["lat"]), float(raw["lng"]))


def parse_catalog(data: Mapping[str, Any]) -> Catalog:
    artists = [
        Artist(
            id=str(item["id"]),
            name=item.get("name") or "",
            bio=item.get("bio") or "",
            image=item.get("heroImage") or item.get("image") or "",
        )
        for item in data.get("artists") or []
    ]
    neighborhoods = [
        Neighborhood(
            id=str(item["id"]),
            name=item.get("name") or "",
            city_id=str(item.get("cityId") or item.get("city_id") or ""),
            image=item.get("heroImage") or item.get("image") or "",
        )
        for item in data.get("neighborhoods") or []
    ]
    artworks = []
    for item in data.get("street_art") or data.get("artworks") or []:
        location = item.get("location")
        if not location:
            # Unlocated artworks cannot be part of a walking tour.
            continue
        artworks.append(
            Artwork(
                id=str(item["id"]),
                title=item.get("title") or "",
                artist_id=str(item.get("artistId") or item.get("artist_id") or ""),
                neighborhood_id=str(item.get("neighborhoodId") or item.get("neighborhood_id") or ""),
                location=_parse_location(location),
                image=item.get("image") or "",
            )
        )
    return Catalog(artists=artists, neighborhoods=neighborhoods, artworks=artworks)


def load_catalog(path: str) -> Catalog:
    with open(Path(path), "r", encoding="utf-8") as f:
        return parse_catalog(json.load(f))
