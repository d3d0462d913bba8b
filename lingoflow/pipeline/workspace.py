"""Per-run temporary file registry with guaranteed cleanup.

Responsibilities:
- Give each pipeline run a private directory named by a unique run token.
- Track every intermediate path a run produces.
- Remove all tracked paths exactly once when the run ends, whatever the outcome.
"""

from __future__ import annotations

from pathlib import Path
import shutil
from types import TracebackType
import uuid

from loguru import logger


class TempWorkspace:
    """Context-managed temp namespace for one pipeline invocation.

    Paths should be tracked before the file is produced so that a failing
    producer never leaves an untracked partial file behind.
    """

    def __init__(self, root: Path, run_token: str | None = None) -> None:
        self.run_token = run_token or uuid.uuid4().hex
        self.run_dir = root / f"run-{self.run_token}"
        self._tracked: list[Path] = []
        self._released = False

    def __enter__(self) -> TempWorkspace:
        self.run_dir.mkdir(parents=True, exist_ok=False)
        return self

    def __exit__(
        self,
        exc_type: type[BaseException] | None,
        exc: BaseException | None,
        traceback: TracebackType | None,
    ) -> None:
        self.release_all()

    @property
    def tracked(self) -> tuple[Path, ...]:
        """Return tracked paths in registration order."""

        return tuple(self._tracked)

    def path(self, name: str) -> Path:
        """Return a path inside the private run directory without tracking it."""

        return self.run_dir / name

    def track(self, path: Path) -> Path:
        """Register `path` for removal at release time and return it."""

        if self._released:
            raise RuntimeError("Cannot track paths after the workspace was released.")
        self._tracked.append(path)
        return path

    def release_all(self) -> None:
        """Delete every tracked path, then the run directory with anything left in it."""

        if self._released:
            return
        self._released = True

        removed = 0
        for path in self._tracked:
            try:
                path.unlink(missing_ok=True)
                removed += 1
            except OSError as exc:
                logger.debug("failed to remove temp file {}: {}", path, exc)
        self._tracked.clear()

        shutil.rmtree(self.run_dir, ignore_errors=True)
        if self.run_dir.exists():
            logger.debug("failed to remove run directory {}", self.run_dir)
        logger.debug("released run workspace token={} files={}", self.run_token, removed)
