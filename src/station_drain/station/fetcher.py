# src/station_drain/station/fetcher.py

from __future__ import annotations

import logging
from pathlib import Path

import httpx

from station_drain.errors import AssetFetchError

logger = logging.getLogger(__name__)

CHUNK_SIZE = 128 * 1024


class AssetFetcher:
    """Streams a single audio asset from the CDN to a local file.

    One attempt per call; there is no retry.
    """

    def __init__(self, http: httpx.Client, *, chunk_size: int = CHUNK_SIZE) -> None:
        if chunk_size <= 0:
            msg = "chunk_size must be positive."
            raise ValueError(msg)

        self._http = http
        self._chunk_size = chunk_size

    def fetch(self, url: str, destination: Path) -> int:
        """Download `url` into `destination` and return the number of bytes written.

        Returns only once the response body has been fully drained.

        Raises:
            AssetFetchError: on a transport error or a non-200 response. Any
                partially written file is removed first.
        """
        written = 0
        try:
            with self._http.stream("GET", url) as response:
                if response.status_code != 200:
                    msg = f"Got response code {response.status_code} from CDN."
                    raise AssetFetchError(msg)

                with destination.open("wb") as f:
                    for chunk in response.iter_bytes(self._chunk_size):
                        f.write(chunk)
                        written += len(chunk)
        except httpx.HTTPError as exc:
            destination.unlink(missing_ok=True)
            raise AssetFetchError(str(exc) or exc.__class__.__name__) from exc
        except AssetFetchError:
            destination.unlink(missing_ok=True)
            raise

        logger.debug("Downloaded %s bytes from %s to %s.", written, url, destination)
        return written
