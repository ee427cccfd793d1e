# src/station_drain/station/client.py

from __future__ import annotations

import logging
import re
import time
from typing import Any

import httpx

from station_drain.config import Settings
from station_drain.errors import StationMetadataError
from station_drain.station.models import (
    EndOfStation,
    FatalAPIError,
    PollOutcome,
    Station,
    TrackReceived,
    track_from_payload,
)

logger = logging.getLogger(__name__)


# The API reports the end of a station only through its error message.
END_OF_STATION_PATTERN = re.compile(r"end of this (playlist|station)", re.IGNORECASE)
GENERIC_API_ERROR = (
    "An unexpected error occurred with the station API. Please try again."
)


def build_http_client(
    settings: Settings,
    *,
    transport: httpx.BaseTransport | None = None,
) -> httpx.Client:
    """Create the one HTTP client shared by the API calls and asset downloads.

    The client keeps a cookie jar for the whole run and sends a fixed
    browser User-Agent, which the station API expects.
    """
    return httpx.Client(
        headers={"User-Agent": settings.user_agent},
        timeout=settings.http_timeout,
        follow_redirects=True,
        transport=transport,
    )


class PollThrottle:
    """Fixed pause taken before every call to the next-track endpoint.

    Unlike a rate limiter this also waits before the very first call.
    """

    def __init__(self, delay: float) -> None:
        if delay < 0:
            msg = "delay must be non-negative."
            raise ValueError(msg)

        self._delay = delay

    def wait(self) -> None:
        if self._delay:
            time.sleep(self._delay)


class StationClient:
    """Calls the station metadata and next-track endpoints."""

    def __init__(self, http: httpx.Client) -> None:
        self._http = http

    def fetch_metadata(self, station: Station) -> dict[str, Any]:
        """Fetch the station's metadata document.

        Raises:
            StationMetadataError: on any transport error, non-200 status or
                a body that is not a JSON object.
        """
        try:
            response = self._http.get(station.url)
        except httpx.RequestError as exc:
            msg = f"Could not fetch station {station.id}: {exc}"
            raise StationMetadataError(msg) from exc

        if response.status_code != 200:
            detail = _error_message(response) or f"status {response.status_code}"
            msg = f"Could not fetch station {station.id}: {detail}"
            raise StationMetadataError(msg)

        body = _json_or_none(response)
        if not isinstance(body, dict):
            msg = f"Station {station.id} metadata is not a JSON object."
            raise StationMetadataError(msg)

        logger.debug("Fetched metadata for station %s.", station.id)
        return body

    def next_track(self, station: Station) -> PollOutcome:
        """Issue one poll and classify the answer. Never raises for API errors."""
        try:
            response = self._http.get(station.next_url)
        except httpx.RequestError as exc:
            logger.debug("Poll for station %s failed: %s", station.id, exc)
            return FatalAPIError(f"Request to {station.next_url} failed: {exc}")

        return classify_poll_response(response)


def classify_poll_response(response: httpx.Response) -> PollOutcome:
    """Map a next-track HTTP response onto a poll outcome.

    The end-of-station message is only looked at for non-200 responses.
    """
    if response.status_code == 200:
        body = _json_or_none(response)
        if not isinstance(body, dict) or not body.get("song"):
            return FatalAPIError("Next-track response did not contain a song.")
        listen_url = body.get("listen_url")
        if not listen_url:
            return FatalAPIError("Next-track response did not contain a listen_url.")
        try:
            track = track_from_payload(body["song"])
        except (KeyError, TypeError, ValueError) as exc:
            return FatalAPIError(f"Malformed song payload in next-track response: {exc!r}")
        return TrackReceived(track=track, listen_url=str(listen_url))

    message = _error_message(response)
    if message and END_OF_STATION_PATTERN.search(message):
        return EndOfStation(message=message)

    return FatalAPIError(message=message or GENERIC_API_ERROR)


def _json_or_none(response: httpx.Response) -> Any:
    try:
        return response.json()
    except ValueError:
        return None


def _error_message(response: httpx.Response) -> str | None:
    """Return the API's `message` field, or the raw body text."""
    body = _json_or_none(response)
    if isinstance(body, dict):
        message = body.get("message")
        if message:
            return str(message)

    text = response.text.strip()
    return text or None
