# src/station_drain/station/transcoder.py

"""Rewrites a downloaded file's tags with ffmpeg and writes it to its final path."""

from __future__ import annotations

import logging
import shlex
import subprocess
from pathlib import Path
from typing import Protocol

from station_drain.errors import TranscodeError

logger = logging.getLogger(__name__)


class Transcoder(Protocol):
    def transcode(
        self,
        source: Path,
        target: Path,
        *,
        artist: str,
        title: str,
        album: str,
    ) -> None:
        """Write a tagged copy of `source` to `target`. Must not delete `source`."""


class FfmpegTranscoder:
    """Runs `ffmpeg -y -i <source> -metadata ... <target>`.

    Arguments are handed to the process as a vector, never through a shell,
    so quotes or spaces inside a tag value reach ffmpeg unchanged.
    """

    def __init__(self, binary: str = "ffmpeg") -> None:
        self._binary = binary

    def build_command(
        self,
        source: Path,
        target: Path,
        *,
        artist: str,
        title: str,
        album: str,
    ) -> list[str]:
        return [
            self._binary,
            "-y",
            "-i",
            str(source),
            "-metadata",
            f"artist={artist}",
            "-metadata",
            f"title={title}",
            "-metadata",
            f"album={album}",
            str(target),
        ]

    def transcode(
        self,
        source: Path,
        target: Path,
        *,
        artist: str,
        title: str,
        album: str,
    ) -> None:
        cmd = self.build_command(source, target, artist=artist, title=title, album=album)
        logger.debug("Running: %s", shlex.join(cmd))

        try:
            subprocess.run(cmd, check=True, capture_output=True, text=True)
        except subprocess.CalledProcessError as exc:
            stderr = (exc.stderr or "").strip()
            msg = (
                f"An error occurred writing tags for file ({source}): "
                f"ffmpeg exited with status {exc.returncode}"
            )
            if stderr:
                msg = f"{msg}: {stderr.splitlines()[-1]}"
            raise TranscodeError(msg) from exc
        except OSError as exc:
            msg = f"An error occurred writing tags for file ({source}): {exc}"
            raise TranscodeError(msg) from exc
