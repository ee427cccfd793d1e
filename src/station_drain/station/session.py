# src/station_drain/station/session.py

from __future__ import annotations

import logging
from pathlib import Path

from station_drain.errors import StationMetadataError
from station_drain.station.client import StationClient
from station_drain.station.models import Station, apply_station_metadata
from station_drain.station.storage import ensure_directories

logger = logging.getLogger(__name__)


class StationSession:
    """Owns a station's metadata and its output directory."""

    def __init__(self, station: Station, client: StationClient, output_root: Path) -> None:
        self.station = station
        self._client = client
        self._output_root = output_root

    def fetch_metadata(self) -> None:
        """Fetch name, description and artwork. Failure is fatal for the run."""
        raw = self._client.fetch_metadata(self.station)
        try:
            apply_station_metadata(self.station, raw)
        except ValueError as exc:
            raise StationMetadataError(str(exc)) from exc

        logger.info("Station %s: %s", self.station.id, self.station.name)
        if self.station.description:
            logger.debug("Description: %s", self.station.description)

    def ensure_directories(self) -> Path:
        """Create the root and station directories; safe to call repeatedly."""
        if self.station.name is None:
            self.fetch_metadata()
        assert self.station.name is not None

        station_dir = ensure_directories(self._output_root, self.station.name)
        logger.debug("Output directory ready: %s", station_dir)
        return station_dir

    def bootstrap(self) -> Path:
        self.fetch_metadata()
        return self.ensure_directories()
