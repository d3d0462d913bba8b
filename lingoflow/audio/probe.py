"""Playback-duration probing for produced audio files."""

from __future__ import annotations

from pathlib import Path

import mutagen
from loguru import logger
from mutagen import MutagenError

DEFAULT_FALLBACK_DURATION_MS = 3000


class DurationProber:
    """Read container-level duration metadata with a fixed fallback.

    Durations only drive chapter boundaries, so unreadable metadata degrades
    chapter accuracy instead of failing the run.
    """

    def __init__(self, fallback_ms: int = DEFAULT_FALLBACK_DURATION_MS) -> None:
        if fallback_ms < 0:
            raise ValueError("Fallback duration must not be negative.")
        self.fallback_ms = fallback_ms

    def probe(self, path: Path) -> int:
        """Return the playback duration of `path` in whole milliseconds."""

        try:
            audio = mutagen.File(str(path))
        except (MutagenError, OSError) as exc:
            logger.debug("duration probe failed for {}: {}", path.name, exc)
            return self.fallback_ms

        length = getattr(getattr(audio, "info", None), "length", None)
        if not length or length <= 0:
            logger.debug("no duration metadata for {}, using fallback", path.name)
            return self.fallback_ms
        return int(round(length * 1000))
