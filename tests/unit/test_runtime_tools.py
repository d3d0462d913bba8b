from __future__ import annotations

from pathlib import Path

import pytest

from lingoflow import runtime_tools


def test_resolve_prefers_bundled_binary(monkeypatch: pytest.MonkeyPatch, tmp_path: Path) -> None:
    bundled = tmp_path / "bin" / "ffmpeg"
    bundled.parent.mkdir()
    bundled.write_text("", encoding="utf-8")
    monkeypatch.setattr(runtime_tools, "_app_root", lambda: tmp_path)
    monkeypatch.setattr(runtime_tools.shutil, "which", lambda name: "/usr/bin/ffmpeg")

    assert runtime_tools.resolve_executable("ffmpeg") == str(bundled)


def test_resolve_falls_back_to_path_then_raw_name(monkeypatch: pytest.MonkeyPatch, tmp_path: Path) -> None:
    monkeypatch.setattr(runtime_tools, "_app_root", lambda: tmp_path)
    monkeypatch.setattr(runtime_tools.shutil, "which", lambda name: "/usr/bin/ffmpeg")
    assert runtime_tools.resolve_executable("ffmpeg") == "/usr/bin/ffmpeg"

    monkeypatch.setattr(runtime_tools.shutil, "which", lambda name: None)
    assert runtime_tools.resolve_executable("ffmpeg") == "ffmpeg"


def test_resolve_keeps_existing_explicit_path(tmp_path: Path) -> None:
    explicit = tmp_path / "custom-ffmpeg"
    explicit.write_text("", encoding="utf-8")

    assert runtime_tools.resolve_executable(str(explicit)) == str(explicit)
