# station_drain/config.py

"""Shared configuration and environment setup."""

from __future__ import annotations

from dataclasses import dataclass
from os import getenv
from pathlib import Path

from dotenv import load_dotenv

load_dotenv(override=True)

DEFAULT_API_BASE = "http://songza.com/api/1/station"
DEFAULT_OUTPUT_ROOT = "songs"
DEFAULT_POLL_DELAY = 0.5
DEFAULT_HTTP_TIMEOUT = 30.0
DEFAULT_USER_AGENT = (
    "Mozilla/5.0 (Macintosh; Intel Mac OS X 10_10_0) AppleWebKit/537.36 "
    "(KHTML, like Gecko) Chrome/39.0.2145.2 Safari/537.36"
)
DEFAULT_FFMPEG = "ffmpeg"
DEFAULT_AUDIO_EXT = "m4a"


@dataclass(slots=True, frozen=True)
class Settings:
    """Runtime settings for one station run."""

    api_base: str = DEFAULT_API_BASE
    output_root: Path = Path(DEFAULT_OUTPUT_ROOT)
    poll_delay: float = DEFAULT_POLL_DELAY
    http_timeout: float = DEFAULT_HTTP_TIMEOUT
    user_agent: str = DEFAULT_USER_AGENT
    ffmpeg: str = DEFAULT_FFMPEG
    audio_ext: str = DEFAULT_AUDIO_EXT

    @classmethod
    def from_env(cls) -> "Settings":
        """Build settings from STATION_* environment variables (and .env)."""
        return cls(
            api_base=getenv("STATION_API_BASE", DEFAULT_API_BASE).rstrip("/"),
            output_root=Path(getenv("STATION_OUTPUT_ROOT", DEFAULT_OUTPUT_ROOT)),
            poll_delay=_float_env("STATION_POLL_DELAY", DEFAULT_POLL_DELAY),
            http_timeout=_float_env("STATION_HTTP_TIMEOUT", DEFAULT_HTTP_TIMEOUT),
            user_agent=getenv("STATION_USER_AGENT", DEFAULT_USER_AGENT),
            ffmpeg=getenv("STATION_FFMPEG", DEFAULT_FFMPEG),
            audio_ext=getenv("STATION_AUDIO_EXT", DEFAULT_AUDIO_EXT).lstrip("."),
        )


def get_station_id() -> str | None:
    """Return the station id configured in the environment, if any."""
    return getenv("STATION_ID") or None


def _float_env(name: str, default: float) -> float:
    raw = getenv(name)
    if raw is None or not raw.strip():
        return default
    try:
        value = float(raw)
    except ValueError as exc:
        msg = f"{name} must be a number, got {raw!r}."
        raise ValueError(msg) from exc
    if value < 0:
        msg = f"{name} must be non-negative."
        raise ValueError(msg)
    return value
