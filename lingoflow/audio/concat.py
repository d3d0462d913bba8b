"""Lossless concatenation of same-format segment files with ffmpeg.

Responsibilities:
- Write the ffmpeg concat manifest listing segment paths in emission order.
- Stream-copy the listed files into one output without re-encoding.
"""

from __future__ import annotations

from collections.abc import Sequence
from pathlib import Path

from ..errors import ConcatenationFailure
from ..parsing import normalize_optional_string
from .runner import CommandRunner, SubprocessRunner


class AudioConcatenator:
    """Concatenate ordered segment files through the ffmpeg concat demuxer."""

    def __init__(self, runner: CommandRunner | None = None, ffmpeg: str = "ffmpeg") -> None:
        self._runner = runner if runner is not None else SubprocessRunner()
        self._ffmpeg = ffmpeg

    def concatenate(
        self,
        files: Sequence[Path],
        output_path: Path,
        manifest_path: Path,
    ) -> Path:
        """Concatenate `files` into `output_path` using `manifest_path` as list file.

        The caller owns `manifest_path` and is responsible for removing it.
        """

        if not files:
            raise ValueError("Concatenation requires at least one input file.")

        self.write_manifest(files, manifest_path)
        command = [
            self._ffmpeg,
            "-y",
            "-hide_banner",
            "-loglevel",
            "error",
            "-f",
            "concat",
            "-safe",
            "0",
            "-i",
            str(manifest_path),
            "-c",
            "copy",
            str(output_path),
        ]
        result = self._runner.run(command)
        if not result.ok:
            stderr = normalize_optional_string(result.stderr) or "no stderr output"
            raise ConcatenationFailure(
                f"ffmpeg concat failed with exit code {result.returncode}: {stderr}",
                exit_code=result.returncode,
                diagnostics=result.stderr,
            )
        return output_path

    def write_manifest(self, files: Sequence[Path], manifest_path: Path) -> Path:
        """Write an ffmpeg concat list file with one quoted path per line."""

        lines = [f"file '{self._escape_concat_path(path.resolve())}'" for path in files]
        manifest_path.write_text("\n".join(lines) + "\n", encoding="utf-8")
        return manifest_path

    def _escape_concat_path(self, path: Path) -> str:
        """Escape one file path for ffmpeg concat list format."""

        return str(path).replace("'", "'\\''")
