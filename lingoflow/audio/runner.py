"""Blocking external-command execution used by every ffmpeg invocation.

Responsibilities:
- Define the `CommandRunner` seam so tests can substitute a fake runner.
- Run one command to completion and capture exit status plus diagnostics.
"""

from __future__ import annotations

from collections.abc import Sequence
from dataclasses import dataclass
import subprocess
from typing import Protocol

from loguru import logger

_EXIT_NOT_STARTED = 127


@dataclass(frozen=True, slots=True)
class CommandResult:
    """Outcome of one finished external command.

    Attributes:
        returncode: Process exit status (`127` when the process could not start).
        stdout: Captured standard output.
        stderr: Captured standard error, used as failure diagnostics.
    """

    returncode: int
    stdout: str = ""
    stderr: str = ""

    @property
    def ok(self) -> bool:
        """Return whether the command exited successfully."""

        return self.returncode == 0


class CommandRunner(Protocol):
    """Protocol for synchronous external-command execution."""

    def run(self, command: Sequence[str]) -> CommandResult:
        """Run `command`, wait for it to exit, and return its captured result."""


class SubprocessRunner:
    """`CommandRunner` backed by `subprocess.run`."""

    def run(self, command: Sequence[str]) -> CommandResult:
        """Run one command and map start failures to exit status `127`."""

        argv = [str(token) for token in command]
        logger.debug("running external command: {}", " ".join(argv))
        try:
            completed = subprocess.run(
                argv,
                check=False,
                capture_output=True,
                encoding="utf-8",
                errors="replace",
            )
        except OSError as exc:
            return CommandResult(
                returncode=_EXIT_NOT_STARTED,
                stderr=f"Failed to start `{argv[0]}`: {exc}",
            )
        return CommandResult(
            returncode=completed.returncode,
            stdout=completed.stdout or "",
            stderr=completed.stderr or "",
        )
