"""Shared fixtures: a scripted station API and a recording transcoder."""

from __future__ import annotations

from collections import deque
from collections.abc import Callable, Iterator
from pathlib import Path
from typing import Any

import httpx
import pytest

from station_drain.errors import TranscodeError

API_BASE = "http://api.test/station"
CDN_BASE = "http://cdn.test"


def song(title: str, artist: str, album: str = "Signals", song_id: int = 1) -> dict[str, Any]:
    return {
        "id": song_id,
        "title": title,
        "album": album,
        "artist": {"name": artist},
        "genre": "Indie",
        "cover_url": f"{CDN_BASE}/covers/{song_id}.jpg",
    }


class ScriptedStation:
    """Serves station metadata, a scripted list of poll answers and CDN files.

    Poll script entries are either an httpx.Response or an exception, which
    is raised as a transport error for that poll.
    """

    def __init__(self, station_id: str = "1393492", name: str = "Late Night Drive") -> None:
        self.station_id = station_id
        self.name = name
        self.polls: deque[httpx.Response | Exception] = deque()
        self.assets: dict[str, httpx.Response] = {}
        self.events: list[str] = []
        self.metadata_response: httpx.Response | None = None

    def add_track(
        self,
        title: str,
        artist: str,
        album: str = "Signals",
        *,
        asset_status: int = 200,
    ) -> str:
        song_id = len(self.polls) + 1
        listen_url = f"{CDN_BASE}/audio/{song_id}.m4a"
        self.polls.append(
            httpx.Response(
                200,
                json={"song": song(title, artist, album, song_id), "listen_url": listen_url},
            )
        )
        if asset_status == 200:
            self.assets[listen_url] = httpx.Response(200, content=f"audio-{song_id}".encode())
        else:
            self.assets[listen_url] = httpx.Response(asset_status, text="Not Found")
        return listen_url

    def add_end(self, message: str = "You have reached the end of this playlist.") -> None:
        self.polls.append(httpx.Response(404, json={"message": message}))

    def add_poll(self, item: httpx.Response | Exception) -> None:
        self.polls.append(item)

    @property
    def poll_count(self) -> int:
        return self.events.count("poll")

    def handler(self, request: httpx.Request) -> httpx.Response:
        url = str(request.url)

        if url == f"{API_BASE}/{self.station_id}":
            self.events.append("metadata")
            if self.metadata_response is not None:
                return self.metadata_response
            return httpx.Response(
                200,
                json={
                    "name": self.name,
                    "description": "Songs for the road.",
                    "cover_url": f"{CDN_BASE}/station.jpg",
                },
            )

        if url == f"{API_BASE}/{self.station_id}/next":
            self.events.append("poll")
            if not self.polls:
                raise AssertionError("poll issued after the script ran out")
            item = self.polls.popleft()
            if isinstance(item, Exception):
                raise item
            return item

        if url in self.assets:
            self.events.append("fetch")
            return self.assets[url]

        return httpx.Response(404, text=f"unexpected url {url}")


class RecordingTranscoder:
    """Copies source to target and records every call."""

    def __init__(self, events: list[str] | None = None, *, fail: bool = False) -> None:
        self.calls: list[dict[str, Any]] = []
        self.events = events if events is not None else []
        self.fail = fail

    def transcode(
        self,
        source: Path,
        target: Path,
        *,
        artist: str,
        title: str,
        album: str,
    ) -> None:
        self.events.append("tag")
        self.calls.append(
            {"source": source, "target": target, "artist": artist, "title": title, "album": album}
        )
        if self.fail:
            msg = f"An error occurred writing tags for file ({source}): exit 1"
            raise TranscodeError(msg)
        target.write_bytes(source.read_bytes())


@pytest.fixture
def scripted_station() -> ScriptedStation:
    return ScriptedStation()


@pytest.fixture
def make_http() -> Iterator[Callable[[ScriptedStation], httpx.Client]]:
    clients: list[httpx.Client] = []

    def _make(station: ScriptedStation) -> httpx.Client:
        client = httpx.Client(transport=httpx.MockTransport(station.handler))
        clients.append(client)
        return client

    yield _make

    for client in clients:
        client.close()


@pytest.fixture
def temp_dir(tmp_path: Path) -> Path:
    directory = tmp_path / "tmp"
    directory.mkdir()
    return directory
