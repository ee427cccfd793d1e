# src/station_drain/station/cli.py

from __future__ import annotations

import argparse
import logging
import sys

from station_drain.config import Settings, get_station_id
from station_drain.errors import StationDrainError
from station_drain.station.client import PollThrottle, StationClient, build_http_client
from station_drain.station.fetcher import AssetFetcher
from station_drain.station.models import new_station
from station_drain.station.poller import PollResult, StationPoller, TrackPipeline
from station_drain.station.session import StationSession
from station_drain.station.transcoder import FfmpegTranscoder

logger = logging.getLogger(__name__)


def main(argv: list[str] | None = None) -> None:
    """Entry point for the station-drain CLI."""
    parser = _build_arg_parser()
    args = parser.parse_args(argv)

    _configure_logging(verbose=args.verbose)

    station_id = args.station_id or get_station_id()
    if not station_id:
        parser.error("a station id is required (argument or STATION_ID).")

    try:
        settings = Settings.from_env()
        run(station_id, settings)
    except KeyboardInterrupt:
        logger.warning("Interrupted by user. Exiting.")
        sys.exit(1)
    except (StationDrainError, ValueError) as exc:
        logger.error("%s", exc)
        sys.exit(1)


def run(station_id: str, settings: Settings) -> PollResult:
    """Bootstrap the station, then drain it into the output directory."""
    station = new_station(station_id, settings.api_base)

    with build_http_client(settings) as http:
        client = StationClient(http)

        session = StationSession(station, client, settings.output_root)
        session.bootstrap()

        pipeline = TrackPipeline(
            AssetFetcher(http),
            FfmpegTranscoder(settings.ffmpeg),
            output_root=settings.output_root,
            audio_ext=settings.audio_ext,
        )
        poller = StationPoller(
            station,
            client,
            pipeline,
            PollThrottle(settings.poll_delay),
        )
        return poller.run()


def _build_arg_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="station-drain",
        description="Download every track of a radio station, tagged, into a folder.",
    )
    parser.add_argument(
        "station_id",
        nargs="?",
        help="Station identifier (default: $STATION_ID).",
    )
    parser.add_argument(
        "-v",
        "--verbose",
        action="store_true",
        help="Enable verbose logging.",
    )
    return parser


def _configure_logging(*, verbose: bool) -> None:
    level = logging.DEBUG if verbose else logging.INFO
    logging.basicConfig(
        level=level,
        format="%(asctime)s [%(levelname)s] %(name)s: %(message)s",
    )


if __name__ == "__main__":
    # python -m station_drain.station.cli -v 1393492
    main()
