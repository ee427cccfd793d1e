# station_drain/errors.py

"""Exceptions raised while draining a station."""

from __future__ import annotations


class StationDrainError(Exception):
    """Base class for all station-drain errors."""


class StationMetadataError(StationDrainError):
    """Raised when the station metadata cannot be fetched."""


class StorageError(StationDrainError):
    """Raised when the output directories cannot be prepared."""


class PollError(StationDrainError):
    """Raised when the next-track endpoint fails for a reason other than end-of-station."""


class AssetFetchError(StationDrainError):
    """Raised when a track's audio asset cannot be downloaded.

    The track pipeline catches this and skips the track; it never ends a run.
    """


class TranscodeError(StationDrainError):
    """Raised when rewriting a track's tags fails."""
