"""Unit tests for ffmpeg command construction and failure mapping."""

from __future__ import annotations

import subprocess
import sys
from pathlib import Path

import pytest

from lingoflow.audio.concat import AudioConcatenator
from lingoflow.audio.cues import CueSynthesizer
from lingoflow.audio.runner import CommandResult, SubprocessRunner
from lingoflow.errors import ConcatenationFailure, SubprocessFailure
from tests.fakes import FakeRunner


def test_cue_command_uses_sine_source_with_fades(tmp_path: Path, fake_runner: FakeRunner) -> None:
    output = tmp_path / "cue.mp3"

    CueSynthesizer(runner=fake_runner, ffmpeg="/opt/ffmpeg").make_cue(output)

    command = fake_runner.commands[0]
    assert command[:5] == ["/opt/ffmpeg", "-y", "-hide_banner", "-loglevel", "error"]
    assert command[command.index("-i") + 1] == "sine=frequency=800:duration=0.6"
    assert command[command.index("-af") + 1] == "afade=t=in:st=0:d=0.05,afade=t=out:st=0.4:d=0.2"
    assert command[command.index("-c:a") + 1] == "libmp3lame"
    assert command[command.index("-ar") + 1] == "44100"
    assert command[command.index("-ac") + 1] == "2"
    assert command[-1] == str(output)
    assert output.exists()


def test_silence_command_uses_anullsrc_and_duration(tmp_path: Path, fake_runner: FakeRunner) -> None:
    CueSynthesizer(runner=fake_runner).make_silence(tmp_path / "pause.mp3", 0.7)

    command = fake_runner.commands[0]
    assert command[command.index("-i") + 1] == "anullsrc=r=44100:cl=stereo"
    assert command[command.index("-t") + 1] == "0.7"


def test_silence_rejects_non_positive_duration(tmp_path: Path, fake_runner: FakeRunner) -> None:
    with pytest.raises(ValueError):
        CueSynthesizer(runner=fake_runner).make_silence(tmp_path / "pause.mp3", 0)
    assert fake_runner.commands == []


def test_normalize_reencodes_input_into_common_format(tmp_path: Path, fake_runner: FakeRunner) -> None:
    source = tmp_path / "raw.mp3"
    source.write_bytes(b"provider")
    target = tmp_path / "normalized.mp3"

    CueSynthesizer(runner=fake_runner).normalize(source, target)

    command = fake_runner.commands[0]
    assert command[command.index("-i") + 1] == str(source)
    assert "-vn" in command
    assert command[command.index("-b:a") + 1] == "128k"
    assert target.read_bytes() == b"norm:provider"


def test_non_zero_exit_raises_subprocess_failure_with_diagnostics(tmp_path: Path) -> None:
    """A failing ffmpeg run should surface its exit code and stderr."""

    runner = FakeRunner(fail_when=lambda argv: 1)

    with pytest.raises(SubprocessFailure) as exc_info:
        CueSynthesizer(runner=runner).make_cue(tmp_path / "cue.mp3")

    assert exc_info.value.exit_code == 1
    assert exc_info.value.diagnostics == "simulated ffmpeg failure"
    assert "cue.mp3" in exc_info.value.detail


def test_manifest_lists_resolved_paths_in_order_with_quote_escaping(tmp_path: Path) -> None:
    first = tmp_path / "a.mp3"
    second = tmp_path / "it's.mp3"
    manifest = tmp_path / "concat.txt"

    AudioConcatenator().write_manifest([first, second], manifest)

    assert manifest.read_text(encoding="utf-8").splitlines() == [
        f"file '{first.resolve()}'",
        "file '" + str(second.resolve()).replace("'", "'\\''") + "'",
    ]


def test_concatenate_stream_copies_inputs(tmp_path: Path, fake_runner: FakeRunner) -> None:
    """Concatenation should use the concat demuxer without re-encoding."""

    parts = []
    for name, payload in (("a.mp3", b"A"), ("b.mp3", b"B"), ("c.mp3", b"C")):
        path = tmp_path / name
        path.write_bytes(payload)
        parts.append(path)
    output = tmp_path / "combined.mp3"

    AudioConcatenator(runner=fake_runner).concatenate(parts, output, tmp_path / "concat.txt")

    command = fake_runner.commands[0]
    assert command[command.index("-f") + 1] == "concat"
    assert command[command.index("-safe") + 1] == "0"
    assert command[command.index("-c") + 1] == "copy"
    assert "-c:a" not in command
    assert output.read_bytes() == b"ABC"


def test_concatenate_rejects_empty_file_list(tmp_path: Path, fake_runner: FakeRunner) -> None:
    with pytest.raises(ValueError):
        AudioConcatenator(runner=fake_runner).concatenate([], tmp_path / "out.mp3", tmp_path / "list.txt")
    assert fake_runner.commands == []


def test_concatenate_failure_raises_concatenation_failure(tmp_path: Path) -> None:
    part = tmp_path / "a.mp3"
    part.write_bytes(b"A")
    runner = FakeRunner(fail_when=lambda argv: 183 if "concat" in argv else None)

    with pytest.raises(ConcatenationFailure) as exc_info:
        AudioConcatenator(runner=runner).concatenate([part], tmp_path / "out.mp3", tmp_path / "list.txt")

    assert exc_info.value.stage == "concat"
    assert exc_info.value.exit_code == 183
    assert isinstance(exc_info.value, SubprocessFailure)


def test_subprocess_runner_maps_missing_binary_to_exit_127(monkeypatch: pytest.MonkeyPatch) -> None:
    def _raise_missing(*args: object, **kwargs: object) -> None:
        raise FileNotFoundError("ffmpeg")

    monkeypatch.setattr("lingoflow.audio.runner.subprocess.run", _raise_missing)

    result = SubprocessRunner().run(["ffmpeg", "-version"])

    assert result.returncode == 127
    assert not result.ok
    assert "ffmpeg" in result.stderr


def test_subprocess_runner_captures_exit_status_and_output(monkeypatch: pytest.MonkeyPatch) -> None:
    captured: dict[str, object] = {}

    def _fake_run(argv: list[str], **kwargs: object) -> subprocess.CompletedProcess[str]:
        captured["argv"] = argv
        captured["kwargs"] = kwargs
        return subprocess.CompletedProcess(argv, 2, stdout="out", stderr="bad input")

    monkeypatch.setattr("lingoflow.audio.runner.subprocess.run", _fake_run)

    result = SubprocessRunner().run(["ffmpeg", Path("x.mp3")])

    assert result == CommandResult(returncode=2, stdout="out", stderr="bad input")
    assert captured["argv"] == ["ffmpeg", "x.mp3"]
    assert captured["kwargs"] == {
        "check": False,
        "capture_output": True,
        "encoding": "utf-8",
        "errors": "replace",
    }


def test_subprocess_runner_tolerates_undecodable_diagnostics(tmp_path: Path) -> None:
    """Non-UTF-8 stderr bytes should be replaced so the failure can still be mapped."""

    script = "import sys; sys.stderr.buffer.write(b'bad \\xe9 path'); sys.exit(1)"

    result = SubprocessRunner().run([sys.executable, "-c", script])

    assert result.returncode == 1
    assert result.stderr == "bad � path"

    class _ReplayRunner:
        def run(self, command: object) -> CommandResult:
            return result

    with pytest.raises(SubprocessFailure) as exc_info:
        CueSynthesizer(runner=_ReplayRunner()).make_cue(tmp_path / "cue.mp3")

    assert exc_info.value.diagnostics == "bad � path"
