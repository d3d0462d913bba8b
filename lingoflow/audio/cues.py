"""Cue tone, silence, and format-normalization clips produced with ffmpeg.

Responsibilities:
- Generate the fixed transition clips (cue tone and silences).
- Re-encode arbitrary input audio to the common podcast format.
- Map non-zero ffmpeg exits to `SubprocessFailure` with captured diagnostics.
"""

from __future__ import annotations

from pathlib import Path

from ..errors import SubprocessFailure
from ..models.datatypes import AudioFormat
from ..parsing import normalize_optional_string
from .runner import CommandRunner, SubprocessRunner

CUE_FREQUENCY_HZ = 800
CUE_DURATION_SECONDS = 0.6
CUE_FADE_FILTER = "afade=t=in:st=0:d=0.05,afade=t=out:st=0.4:d=0.2"


class CueSynthesizer:
    """Produce fixed-parameter transition clips in the common audio format."""

    def __init__(
        self,
        runner: CommandRunner | None = None,
        ffmpeg: str = "ffmpeg",
        audio_format: AudioFormat | None = None,
    ) -> None:
        self._runner = runner if runner is not None else SubprocessRunner()
        self._ffmpeg = ffmpeg
        self._format = audio_format if audio_format is not None else AudioFormat()

    def make_cue(self, output_path: Path) -> Path:
        """Write a short sine cue tone with fade-in/out to `output_path`."""

        source = f"sine=frequency={CUE_FREQUENCY_HZ}:duration={CUE_DURATION_SECONDS}"
        self._execute(
            "cue",
            [*self._lavfi_input(source), "-af", CUE_FADE_FILTER],
            output_path,
        )
        return output_path

    def make_silence(self, output_path: Path, duration_seconds: float) -> Path:
        """Write pure silence of `duration_seconds` to `output_path`."""

        if duration_seconds <= 0:
            raise ValueError("Silence duration must be positive.")
        layout = "stereo" if self._format.channels == 2 else "mono"
        source = f"anullsrc=r={self._format.sample_rate}:cl={layout}"
        self._execute(
            "silence",
            [*self._lavfi_input(source), "-t", f"{duration_seconds:g}"],
            output_path,
        )
        return output_path

    def normalize(self, input_path: Path, output_path: Path) -> Path:
        """Re-encode `input_path` into the common format at `output_path`."""

        self._execute("normalize", ["-i", str(input_path), "-vn"], output_path)
        return output_path

    def _lavfi_input(self, source: str) -> list[str]:
        """Return ffmpeg arguments for a generated `lavfi` source."""

        return ["-f", "lavfi", "-i", source]

    def _execute(self, label: str, input_args: list[str], output_path: Path) -> None:
        """Run one ffmpeg invocation writing `output_path` in the common format."""

        command = [
            self._ffmpeg,
            "-y",
            "-hide_banner",
            "-loglevel",
            "error",
            *input_args,
            *self._format.ffmpeg_args(),
            str(output_path),
        ]
        result = self._runner.run(command)
        if result.ok:
            return

        stderr = normalize_optional_string(result.stderr) or "no stderr output"
        raise SubprocessFailure(
            f"ffmpeg {label} failed for `{output_path.name}` "
            f"with exit code {result.returncode}: {stderr}",
            exit_code=result.returncode,
            diagnostics=result.stderr,
        )
