# src/station_drain/station/models.py

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, Union

COVER_ART_SUFFIX = "?size=480&style=quad-flush"


@dataclass(slots=True, frozen=True)
class Track:
    """A single song announced by a station's next-track endpoint."""

    id: str
    title: str
    album: str
    artist: str
    genre: str | None = None
    cover_art_url: str | None = None

    def __str__(self) -> str:
        return f"{self.title} by {self.artist}"


@dataclass(slots=True)
class Station:
    """A remote station and the tracks retrieved from it so far."""

    id: str
    endpoint_base: str

    # Filled in once the station metadata has been fetched
    name: str | None = None
    description: str | None = None
    cover_art_url: str | None = None

    tracks: list[Track] = field(default_factory=list)

    @property
    def url(self) -> str:
        return f"{self.endpoint_base}/{self.id}"

    @property
    def next_url(self) -> str:
        return f"{self.url}/next"


@dataclass(slots=True, frozen=True)
class TrackReceived:
    track: Track
    listen_url: str


@dataclass(slots=True, frozen=True)
class EndOfStation:
    message: str


@dataclass(slots=True, frozen=True)
class TransientAPIError:
    message: str


@dataclass(slots=True, frozen=True)
class FatalAPIError:
    message: str


PollOutcome = Union[TrackReceived, EndOfStation, TransientAPIError, FatalAPIError]


def new_station(station_id: str, endpoint_base: str) -> Station:
    """Create a station whose metadata has not been fetched yet."""
    station_id = station_id.strip()
    if not station_id:
        msg = "station_id must not be empty."
        raise ValueError(msg)
    return Station(id=station_id, endpoint_base=endpoint_base.rstrip("/"))


def apply_station_metadata(station: Station, raw: dict[str, Any]) -> None:
    """Populate name, description and artwork from a metadata response."""
    name = raw.get("name")
    if not name:
        msg = f"Station {station.id} metadata has no name."
        raise ValueError(msg)

    station.name = str(name)
    station.description = raw.get("description")

    cover = raw.get("cover_url")
    station.cover_art_url = f"{cover}{COVER_ART_SUFFIX}" if cover else None


def track_from_payload(raw: dict[str, Any]) -> Track:
    """Convert the `song` object of a next-track response into a Track."""
    artist = raw["artist"]
    if isinstance(artist, dict):
        artist = artist["name"]

    title = raw["title"]
    if title is None or artist is None:
        msg = f"Song {raw.get('id')} has no title or artist."
        raise ValueError(msg)

    return Track(
        id=str(raw["id"]),
        title=str(title),
        album=str(raw.get("album") or ""),
        artist=str(artist),
        genre=raw.get("genre"),
        cover_art_url=raw.get("cover_url"),
    )
