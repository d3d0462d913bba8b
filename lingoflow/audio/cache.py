"""Persistent narration audio cache keyed by `(topic_id, text_id)`.

Responsibilities:
- Map a text identity to a deterministic filesystem path.
- Reuse previously synthesized narration across pipeline runs.
- Track hit/miss counters for run telemetry.

Entries are keyed by identity, not content hash; invalidation is external.
"""

from __future__ import annotations

from dataclasses import dataclass, field
import os
from pathlib import Path
import tempfile

from ..errors import CacheWriteFailure


@dataclass(slots=True)
class NarrationCache:
    """Filesystem-backed narration cache shared by concurrent pipeline runs."""

    root: Path
    suffix: str = ".mp3"
    hits: int = field(default=0, init=False)
    misses: int = field(default=0, init=False)

    def path_for(self, topic_id: str, text_id: str) -> Path:
        """Return the cache path for one text identity."""

        return self.root / topic_id / f"{text_id}{self.suffix}"

    def get(self, topic_id: str, text_id: str) -> bytes | None:
        """Return cached audio bytes, or `None` on a miss."""

        path = self.path_for(topic_id, text_id)
        try:
            data = path.read_bytes()
        except OSError:
            self.misses += 1
            return None
        if not data:
            self.misses += 1
            return None
        self.hits += 1
        return data

    def put(self, topic_id: str, text_id: str, audio: bytes) -> Path:
        """Persist audio bytes atomically and return the cache path.

        Raises:
            CacheWriteFailure: If the directory or file cannot be written.
        """

        path = self.path_for(topic_id, text_id)
        temp_name: str | None = None
        try:
            path.parent.mkdir(parents=True, exist_ok=True)
            with tempfile.NamedTemporaryFile(
                dir=path.parent,
                prefix=f".{path.stem}.",
                suffix=".part",
                delete=False,
            ) as handle:
                temp_name = handle.name
                handle.write(audio)
            os.replace(temp_name, path)
        except OSError as exc:
            if temp_name is not None and os.path.exists(temp_name):
                try:
                    os.unlink(temp_name)
                except OSError:
                    pass
            raise CacheWriteFailure(
                f"Failed to write narration cache entry `{path}`: {exc}"
            ) from exc
        return path

    def hit_rate(self) -> float:
        """Return cache hit rate for the current cache lifecycle."""

        total = self.hits + self.misses
        if total == 0:
            return 0.0
        return self.hits / float(total)
