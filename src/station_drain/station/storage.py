# src/station_drain/station/storage.py

from __future__ import annotations

import tempfile
import time
from pathlib import Path

from station_drain.errors import StorageError
from station_drain.station.models import Station, Track

_BASE36 = "0123456789abcdefghijklmnopqrstuvwxyz"


def ensure_directories(root: Path, station_name: str) -> Path:
    """Create `<root>/<station_name>`, one level at a time.

    Existing directories are fine, so calling this twice is safe. Any other
    filesystem error is raised as StorageError.
    """
    station_dir = root / _safe_component(station_name)
    for directory in (root, station_dir):
        try:
            directory.mkdir(exist_ok=True)
        except OSError as exc:
            msg = f"Could not create directory {directory}: {exc}"
            raise StorageError(msg) from exc
    return station_dir


def track_output_path(root: Path, station: Station, track: Track, ext: str) -> Path:
    """Return `<root>/<station-name>/<artist> - <title>.<ext>` for a track."""
    if station.name is None:
        msg = f"Station {station.id} has no name yet; cannot place {track}."
        raise StorageError(msg)

    filename = _safe_component(f"{track.artist} - {track.title}.{ext}")
    return root / _safe_component(station.name) / filename


def temp_download_path(directory: Path | None = None) -> Path:
    """Return a fresh temporary file path named after the current time."""
    base = Path(directory) if directory is not None else Path(tempfile.gettempdir())
    while True:
        candidate = base / _to_base36(time.time_ns())
        if not candidate.exists():
            return candidate


def _safe_component(name: str) -> str:
    # Keep names inside their parent directory; quotes stay as they are.
    name = name.replace("/", "_").replace("\\", "_")
    if not name.strip("."):
        return "_"
    return name


def _to_base36(value: int) -> str:
    digits = []
    while value:
        value, rem = divmod(value, 36)
        digits.append(_BASE36[rem])
    return "".join(reversed(digits)) or "0"
