"""Structured run logging utilities.

Responsibilities:
- Emit concise, deterministic phase-level runtime logs through `loguru`.
- Keep context tokens shell-safe so log lines stay grep-friendly.
"""

from __future__ import annotations

import sys
from typing import Any, TextIO
import uuid

from loguru import logger


def _sanitize_context_value(value: object) -> str:
    """Convert context values into stable, shell-safe tokens."""

    raw = str(value).strip()
    if not raw:
        return "none"
    return "".join(
        character if character.isalnum() or character in {"-", "_", ".", ":", "/"} else "_"
        for character in raw
    )


def _format_context(context: dict[str, object]) -> str:
    """Serialize context key/value pairs in deterministic key order."""

    if not context:
        return ""
    tokens = [
        f"{key}={_sanitize_context_value(context[key])}"
        for key in sorted(context.keys())
    ]
    return " " + " ".join(tokens)


class RunLogger:
    """Emit deterministic phase logs for CLI-observable pipeline activity."""

    def __init__(self, sink: TextIO | None = None, level: str = "INFO") -> None:
        """Attach a dedicated loguru handler writing plain messages to `sink`.

        Only this handler is added and later removed, so several run loggers
        can coexist in one process. The handler receives this logger's phase
        lines and unbound module logs, never another run logger's lines.
        """

        self._sink = sink or sys.stderr
        self._token = uuid.uuid4().hex
        self._logger = logger.bind(run_logger=self._token)
        self._handler_id: int | None = logger.add(
            self._sink,
            format="{message}",
            level=level,
            colorize=False,
            filter=self._accepts,
        )

    def _accepts(self, record: dict[str, Any]) -> bool:
        """Return whether a loguru record belongs on this handler."""

        owner = record["extra"].get("run_logger")
        return owner is None or owner == self._token

    def close(self) -> None:
        """Detach this logger's handler; safe to call more than once."""

        if self._handler_id is None:
            return
        logger.remove(self._handler_id)
        self._handler_id = None

    def _emit(self, level: str, event: str, stage: str, **context: object) -> None:
        """Emit one structured runtime log line."""

        line = f"[phase] level={level} stage={stage} event={event}{_format_context(context)}"
        self._logger.log(level, line)

    def log_stage_start(self, stage: str) -> None:
        """Emit a stage-start runtime event."""

        self._emit("INFO", "start", stage)

    def log_stage_complete(self, stage: str, **context: object) -> None:
        """Emit a stage-complete runtime event."""

        self._emit("INFO", "complete", stage, **context)

    def log_stage_failure(self, stage: str, error_type: str) -> None:
        """Emit a stage-failure runtime event without sensitive payload details."""

        self._emit("ERROR", "failure", stage, error_type=error_type)

    def log_event(self, stage: str, event: str, level: str = "INFO", **context: object) -> None:
        """Emit a non-transition event such as a cache hit or a skipped selection."""

        self._emit(level, event, stage, **context)
