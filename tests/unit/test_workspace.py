from __future__ import annotations

from pathlib import Path

import pytest

from lingoflow.pipeline.workspace import TempWorkspace


def test_workspace_creates_private_run_directory(tmp_path: Path) -> None:
    """Each workspace should live in its own `run-<token>` directory under the root."""

    with TempWorkspace(tmp_path / "temp", run_token="abc") as workspace:
        assert workspace.run_dir == tmp_path / "temp" / "run-abc"
        assert workspace.run_dir.is_dir()
        assert workspace.path("intro.mp3") == workspace.run_dir / "intro.mp3"

    assert not (tmp_path / "temp" / "run-abc").exists()


def test_concurrent_workspaces_get_distinct_directories(tmp_path: Path) -> None:
    with TempWorkspace(tmp_path) as first, TempWorkspace(tmp_path) as second:
        assert first.run_dir != second.run_dir
        assert first.run_token != second.run_token


def test_release_removes_tracked_files_and_tolerates_missing_ones(tmp_path: Path) -> None:
    """Tracked paths never produced should not prevent cleanup of the others."""

    workspace = TempWorkspace(tmp_path, run_token="t1")
    with workspace:
        produced = workspace.track(workspace.path("produced.mp3"))
        produced.write_bytes(b"data")
        workspace.track(workspace.path("never-written.mp3"))
        assert workspace.tracked == (produced, workspace.path("never-written.mp3"))

    assert not produced.exists()
    assert workspace.tracked == ()
    assert list(tmp_path.iterdir()) == []


def test_release_runs_when_body_raises(tmp_path: Path) -> None:
    """Cleanup should happen on failure paths and the original error should propagate."""

    with pytest.raises(RuntimeError, match="boom"):
        with TempWorkspace(tmp_path, run_token="t2") as workspace:
            partial = workspace.track(workspace.path("partial.mp3"))
            partial.write_bytes(b"half")
            raise RuntimeError("boom")

    assert list(tmp_path.iterdir()) == []


def test_release_all_is_idempotent(tmp_path: Path) -> None:
    with TempWorkspace(tmp_path, run_token="t3") as workspace:
        workspace.track(workspace.path("a.mp3")).write_bytes(b"a")
        workspace.release_all()
        workspace.release_all()

    assert list(tmp_path.iterdir()) == []


def test_track_after_release_is_rejected(tmp_path: Path) -> None:
    with TempWorkspace(tmp_path, run_token="t4") as workspace:
        pass

    with pytest.raises(RuntimeError):
        workspace.track(tmp_path / "late.mp3")


def test_release_removes_untracked_leftovers_in_run_directory(tmp_path: Path) -> None:
    """Side files an external tool drops into the run directory should not survive."""

    with TempWorkspace(tmp_path, run_token="t5") as workspace:
        workspace.track(workspace.path("tracked.mp3")).write_bytes(b"a")
        workspace.path("ffmpeg2pass-0.log").write_text("side file", encoding="utf-8")
        (workspace.run_dir / "nested").mkdir()
        (workspace.run_dir / "nested" / "chunk.bin").write_bytes(b"b")

    assert list(tmp_path.iterdir()) == []
