# src/station_drain/station/poller.py

from __future__ import annotations

import logging
from dataclasses import dataclass
from enum import Enum
from pathlib import Path

from station_drain.errors import AssetFetchError, PollError
from station_drain.station.client import PollThrottle, StationClient
from station_drain.station.fetcher import AssetFetcher
from station_drain.station.models import (
    EndOfStation,
    FatalAPIError,
    PollOutcome,
    Station,
    Track,
    TrackReceived,
    TransientAPIError,
)
from station_drain.station.storage import temp_download_path, track_output_path
from station_drain.station.transcoder import Transcoder

logger = logging.getLogger(__name__)


class PollState(str, Enum):
    POLLING = "polling"
    TRACK_RECEIVED = "track_received"
    END = "end"
    ERROR = "error"


@dataclass(slots=True, frozen=True)
class PollResult:
    state: PollState
    count: int


class TrackPipeline:
    """Fetches one track's audio, tags it and moves it into the station directory."""

    def __init__(
        self,
        fetcher: AssetFetcher,
        transcoder: Transcoder,
        *,
        output_root: Path,
        audio_ext: str,
        temp_dir: Path | None = None,
    ) -> None:
        self._fetcher = fetcher
        self._transcoder = transcoder
        self._output_root = output_root
        self._audio_ext = audio_ext
        self._temp_dir = temp_dir

    def process(self, station: Station, track: Track, listen_url: str) -> Path | None:
        """Run fetch then tag for one track.

        Returns:
            The stored file, or None if the download failed and the track
            was skipped.

        Raises:
            TranscodeError: if tagging fails. The temporary download is left
                where it is.
            StorageError: if the station has no name yet.
        """
        source = temp_download_path(self._temp_dir)

        try:
            self._fetcher.fetch(listen_url, source)
        except AssetFetchError as exc:
            logger.error("An error occurred while downloading: %s (%s)", listen_url, exc)
            return None

        target = track_output_path(self._output_root, station, track, self._audio_ext)
        self._transcoder.transcode(
            source,
            target,
            artist=track.artist,
            title=track.title,
            album=track.album,
        )
        source.unlink()

        logger.debug("Stored %s at %s.", track, target)
        return target


class StationPoller:
    """Drains a station one track at a time until it reports its end.

    Every iteration waits, polls, and for a track runs the whole fetch+tag
    pipeline before the next wait begins, so at most one track is in flight.
    """

    def __init__(
        self,
        station: Station,
        client: StationClient,
        pipeline: TrackPipeline,
        throttle: PollThrottle,
    ) -> None:
        self.station = station
        self._client = client
        self._pipeline = pipeline
        self._throttle = throttle
        self._state = PollState.POLLING
        self._count = 0

    @property
    def state(self) -> PollState:
        return self._state

    @property
    def count(self) -> int:
        return self._count

    def poll_once(self) -> PollOutcome:
        self._throttle.wait()
        return self._client.next_track(self.station)

    def run(self) -> PollResult:
        """Poll until end-of-station.

        Raises:
            PollError: when a poll fails for any reason other than the end
                of the station. Tracks stored so far stay on disk.
            TranscodeError: when a track cannot be tagged.
        """
        while True:
            self._state = PollState.POLLING
            outcome = self.poll_once()

            if isinstance(outcome, TrackReceived):
                self._state = PollState.TRACK_RECEIVED
                self._handle_track(outcome)
                continue

            if isinstance(outcome, EndOfStation):
                self._state = PollState.END
                logger.info("Retrieved %s songs from API.", self._count)
                return PollResult(state=self._state, count=self._count)

            # No retries: a transient error ends the run like a fatal one.
            self._state = PollState.ERROR
            assert isinstance(outcome, (FatalAPIError, TransientAPIError))
            logger.debug("Poll for station %s failed after %s songs.", self.station.id, self._count)
            raise PollError(outcome.message)

    def _handle_track(self, outcome: TrackReceived) -> None:
        track = outcome.track
        self.station.tracks.append(track)
        self._count += 1
        logger.info("%s. %s", self._count, track)

        try:
            self._pipeline.process(self.station, track, outcome.listen_url)
        except Exception:
            self._state = PollState.ERROR
            raise
