"""Tests for station bootstrap."""

from __future__ import annotations

from pathlib import Path

import httpx
import pytest

from conftest import API_BASE, ScriptedStation
from station_drain.errors import StationMetadataError
from station_drain.station.client import StationClient
from station_drain.station.models import new_station
from station_drain.station.session import StationSession


def _session(scripted: ScriptedStation, http: httpx.Client, root: Path) -> StationSession:
    station = new_station(scripted.station_id, API_BASE)
    return StationSession(station, StationClient(http), root)


def test_bootstrap_fetches_metadata_and_creates_directories(
    scripted_station, make_http, tmp_path
) -> None:
    root = tmp_path / "songs"
    session = _session(scripted_station, make_http(scripted_station), root)

    station_dir = session.bootstrap()

    assert session.station.name == "Late Night Drive"
    assert session.station.description == "Songs for the road."
    assert session.station.cover_art_url.endswith("?size=480&style=quad-flush")
    assert station_dir == root / "Late Night Drive"
    assert station_dir.is_dir()


def test_ensure_directories_twice_is_safe(scripted_station, make_http, tmp_path) -> None:
    session = _session(scripted_station, make_http(scripted_station), tmp_path / "songs")
    session.bootstrap()

    assert session.ensure_directories().is_dir()
    assert scripted_station.events == ["metadata"]


def test_metadata_failure_is_fatal(scripted_station, make_http, tmp_path) -> None:
    scripted_station.metadata_response = httpx.Response(500, text="boom")
    root = tmp_path / "songs"
    session = _session(scripted_station, make_http(scripted_station), root)

    with pytest.raises(StationMetadataError):
        session.bootstrap()

    assert session.station.name is None
    assert not root.exists()


def test_metadata_without_name_is_fatal(scripted_station, make_http, tmp_path) -> None:
    scripted_station.metadata_response = httpx.Response(200, json={"description": "?"})
    session = _session(scripted_station, make_http(scripted_station), tmp_path / "songs")

    with pytest.raises(StationMetadataError, match="no name"):
        session.fetch_metadata()
