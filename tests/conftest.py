"""Shared pytest fixtures for the LingoFlow test suite."""

from __future__ import annotations

from collections.abc import Callable
from pathlib import Path

import pytest

from lingoflow.audio.cache import NarrationCache
from lingoflow.audio.concat import AudioConcatenator
from lingoflow.audio.cues import CueSynthesizer
from lingoflow.io.content_store import MarkdownContentStore
from lingoflow.pipeline import PodcastPipeline
from tests.fakes import FakeRunner, FakeSynthesizer, NamedDurationProber

BERLIN_TOPIC = """# Berlin
Die Hauptstadt.

## Intro
Hallo Welt.

## Am Bahnhof
Der Zug kommt.
Wir steigen ein.
"""

MUENCHEN_TOPIC = """# München

---

## Oktoberfest
Es ist laut.
"""


@pytest.fixture
def content_dir(tmp_path: Path) -> Path:
    """Write a small Markdown content directory with two topics."""

    root = tmp_path / "content"
    root.mkdir()
    (root / "berlin.md").write_text(BERLIN_TOPIC, encoding="utf-8")
    (root / "muenchen.md").write_text(MUENCHEN_TOPIC, encoding="utf-8")
    return root


@pytest.fixture
def fake_runner() -> FakeRunner:
    return FakeRunner()


@pytest.fixture
def fake_synthesizer() -> FakeSynthesizer:
    return FakeSynthesizer()


@pytest.fixture
def temp_root(tmp_path: Path) -> Path:
    return tmp_path / "temp"


@pytest.fixture
def build_pipeline(
    content_dir: Path,
    tmp_path: Path,
    temp_root: Path,
) -> Callable[..., PodcastPipeline]:
    """Return a factory wiring a pipeline to fakes for ffmpeg, speech, and probing."""

    def _build(
        *,
        runner: FakeRunner,
        synthesizer: FakeSynthesizer,
        cache: NarrationCache | None = None,
        **options: object,
    ) -> PodcastPipeline:
        return PodcastPipeline(
            content_store=MarkdownContentStore(content_dir),
            synthesizer=synthesizer,
            cache=cache if cache is not None else NarrationCache(tmp_path / "cache"),
            temp_root=temp_root,
            cue_synthesizer=CueSynthesizer(runner=runner),
            prober=NamedDurationProber(),
            concatenator=AudioConcatenator(runner=runner),
            **options,
        )

    return _build
