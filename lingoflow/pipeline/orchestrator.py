"""Podcast assembly orchestration.

Responsibilities:
- Resolve ordered text selections against the content store.
- Materialize intro, cue, pause, and narration segments per selection.
- Compute chapter boundaries, concatenate segments, and embed chapter tags.
- Remove every intermediate file when the run ends, on success or failure.

Key types:
- `PodcastPipeline`: orchestration facade.
- `AssembledPodcast`: in-memory result with audio bytes and chapters.
"""

from __future__ import annotations

from collections.abc import Callable, Sequence
from dataclasses import dataclass
from pathlib import Path
import shutil
from typing import TypeVar

from loguru import logger

from ..audio.cache import NarrationCache
from ..audio.concat import AudioConcatenator
from ..audio.cues import CueSynthesizer
from ..audio.probe import DurationProber
from ..audio.runner import SubprocessRunner
from ..audio.tags import AlbumTags, ChapterTagWriter
from ..config import PodcastConfig
from ..errors import CacheWriteFailure, NoContentGenerated, SynthesisFailure
from ..io.content_store import ContentStore, MarkdownContentStore
from ..models.datatypes import (
    SEGMENT_ORDER,
    ChapterInfo,
    Segment,
    SelectionSegments,
    Text,
    TextSelection,
    Topic,
)
from ..runtime_tools import resolve_executable
from ..telemetry.logger import RunLogger
from ..tts.synthesizer import OpenAISpeechSynthesizer, SpeechSynthesizer
from .timeline import build_timeline
from .workspace import TempWorkspace

_StageResult = TypeVar("_StageResult")


def intro_line(topic: Topic, text: Text) -> str:
    """Return the spoken announcement that precedes one narration."""

    return f"New text: {text.title}. Topic: {topic.title}."


def chapter_title(topic: Topic, text: Text) -> str:
    """Return the chapter title shown by players for one selection."""

    return f"{topic.title} — {text.title}"


@dataclass(frozen=True, slots=True)
class AssembledPodcast:
    """Final tagged podcast audio and the chapters embedded in it."""

    audio: bytes
    chapters: tuple[ChapterInfo, ...]
    duration_ms: int


@dataclass(frozen=True, slots=True)
class _ClipTemplates:
    """Shared transition clips generated once per run and copied per selection."""

    pause_after_intro: Path
    cue: Path
    pause_after_cue: Path


class PodcastPipeline:
    """Coordinate all stages of one podcast assembly run."""

    _PHASE_SEQUENCE = ("resolve", "segments", "timeline", "concat", "tag")

    def __init__(
        self,
        *,
        content_store: ContentStore,
        synthesizer: SpeechSynthesizer,
        cache: NarrationCache,
        temp_root: Path,
        cue_synthesizer: CueSynthesizer | None = None,
        prober: DurationProber | None = None,
        concatenator: AudioConcatenator | None = None,
        tag_writer: ChapterTagWriter | None = None,
        album_tags: AlbumTags | None = None,
        pause_after_intro_seconds: float = 0.5,
        pause_after_cue_seconds: float = 0.7,
        run_logger: RunLogger | None = None,
        stage_progress_callback: Callable[[str, int, int], None] | None = None,
    ) -> None:
        self._content_store = content_store
        self._synthesizer = synthesizer
        self._cache = cache
        self._temp_root = temp_root
        self._cues = cue_synthesizer if cue_synthesizer is not None else CueSynthesizer()
        self._prober = prober if prober is not None else DurationProber()
        self._concatenator = concatenator if concatenator is not None else AudioConcatenator()
        self._tag_writer = tag_writer if tag_writer is not None else ChapterTagWriter()
        self._album_tags = album_tags if album_tags is not None else AlbumTags()
        self._pause_after_intro_seconds = pause_after_intro_seconds
        self._pause_after_cue_seconds = pause_after_cue_seconds
        self._run_logger = run_logger
        self._stage_progress_callback = stage_progress_callback

    @classmethod
    def from_config(
        cls,
        config: PodcastConfig,
        run_logger: RunLogger | None = None,
        stage_progress_callback: Callable[[str, int, int], None] | None = None,
    ) -> PodcastPipeline:
        """Build a pipeline wired to ffmpeg, OpenAI speech, and the Markdown store."""

        config.validate()
        runner = SubprocessRunner()
        ffmpeg = resolve_executable(config.ffmpeg_executable)
        return cls(
            content_store=MarkdownContentStore(config.content_dir),
            synthesizer=OpenAISpeechSynthesizer(
                api_key=config.api_key,
                model=config.tts_model,
                voice=config.tts_voice,
            ),
            cache=NarrationCache(config.cache_dir),
            temp_root=config.temp_dir,
            cue_synthesizer=CueSynthesizer(runner=runner, ffmpeg=ffmpeg),
            prober=DurationProber(fallback_ms=config.fallback_duration_ms),
            concatenator=AudioConcatenator(runner=runner, ffmpeg=ffmpeg),
            album_tags=config.album_tags(),
            pause_after_intro_seconds=config.pause_after_intro_seconds,
            pause_after_cue_seconds=config.pause_after_cue_seconds,
            run_logger=run_logger,
            stage_progress_callback=stage_progress_callback,
        )

    def assemble(self, selections: Sequence[TextSelection]) -> bytes:
        """Return tagged podcast audio for `selections` in caller order."""

        return self.build(selections).audio

    def build(self, selections: Sequence[TextSelection]) -> AssembledPodcast:
        """Run the full assembly and return audio together with its chapters.

        Raises:
            NoContentGenerated: If no selection resolves to an existing text.
            SynthesisFailure: If intro or narration synthesis returns no audio.
            SubprocessFailure: If an ffmpeg clip or normalization step fails.
            ConcatenationFailure: If segment concatenation fails.
        """

        with TempWorkspace(self._temp_root) as workspace:
            topics = self._run_stage("resolve", self._content_store.get_topics)
            groups = self._run_stage(
                "segments",
                lambda: self._build_segments(workspace, topics, selections),
            )
            timeline = self._run_stage("timeline", lambda: build_timeline(groups))
            combined = self._run_stage(
                "concat",
                lambda: self._concatenate(workspace, timeline.files),
            )
            audio = self._run_stage(
                "tag",
                lambda: self._tag(workspace, combined, timeline.chapters),
            )
            return AssembledPodcast(
                audio=audio,
                chapters=timeline.chapters,
                duration_ms=timeline.total_ms,
            )

    def _build_segments(
        self,
        workspace: TempWorkspace,
        topics: Sequence[Topic],
        selections: Sequence[TextSelection],
    ) -> list[SelectionSegments]:
        """Materialize segment files for every resolvable selection in order."""

        topics_by_id = {topic.id: topic for topic in topics}
        templates: _ClipTemplates | None = None
        groups: list[SelectionSegments] = []

        for index, selection in enumerate(selections):
            topic = topics_by_id.get(selection.topic_id)
            text = topic.find_text(selection.text_id) if topic is not None else None
            if topic is None or text is None:
                self._log_event(
                    "resolve",
                    "skip_selection",
                    level="DEBUG",
                    topic=selection.topic_id,
                    text=selection.text_id,
                )
                continue
            if templates is None:
                templates = self._make_templates(workspace)
            groups.append(self._build_selection(workspace, templates, index, topic, text))

        if not groups:
            raise NoContentGenerated(
                f"No audio generated: none of {len(selections)} selection(s) resolved to a text."
            )
        return groups

    def _make_templates(self, workspace: TempWorkspace) -> _ClipTemplates:
        """Generate the shared cue and pause clips for this run."""

        pause_after_intro = workspace.track(workspace.path("template_pause_intro.mp3"))
        cue = workspace.track(workspace.path("template_cue.mp3"))
        pause_after_cue = workspace.track(workspace.path("template_pause_cue.mp3"))
        self._cues.make_silence(pause_after_intro, self._pause_after_intro_seconds)
        self._cues.make_cue(cue)
        self._cues.make_silence(pause_after_cue, self._pause_after_cue_seconds)
        return _ClipTemplates(pause_after_intro=pause_after_intro, cue=cue, pause_after_cue=pause_after_cue)

    def _build_selection(
        self,
        workspace: TempWorkspace,
        templates: _ClipTemplates,
        index: int,
        topic: Topic,
        text: Text,
    ) -> SelectionSegments:
        """Produce the five segment files of one selection and probe their durations."""

        prefix = f"{index:03d}"
        intro_audio = self._synthesizer.synthesize(intro_line(topic, text))
        if not intro_audio:
            raise SynthesisFailure(
                f"Intro synthesis returned no audio for `{topic.id}/{text.id}`."
            )
        intro = self._normalize_bytes(workspace, intro_audio, f"{prefix}_intro")

        pause_after_intro = self._copy_template(
            workspace, templates.pause_after_intro, f"{prefix}_pause_intro.mp3"
        )
        cue = self._copy_template(workspace, templates.cue, f"{prefix}_cue.mp3")
        pause_after_cue = self._copy_template(
            workspace, templates.pause_after_cue, f"{prefix}_pause_cue.mp3"
        )

        narration = self._narration_audio(topic, text)
        content = self._normalize_bytes(workspace, narration, f"{prefix}_content")

        paths = (intro, pause_after_intro, cue, pause_after_cue, content)
        segments = tuple(
            Segment(kind=kind, path=path, duration_ms=self._prober.probe(path))
            for kind, path in zip(SEGMENT_ORDER, paths)
        )
        return SelectionSegments(chapter_title=chapter_title(topic, text), segments=segments)

    def _narration_audio(self, topic: Topic, text: Text) -> bytes:
        """Return cached narration audio, synthesizing and caching it on a miss."""

        cached = self._cache.get(topic.id, text.id)
        if cached is not None:
            self._log_event("tts", "cache_hit", topic=topic.id, text=text.id)
            return cached

        self._log_event("tts", "cache_miss", topic=topic.id, text=text.id)
        audio = self._synthesizer.synthesize(" ".join(text.content))
        if not audio:
            raise SynthesisFailure(
                f"Narration synthesis returned no audio for `{topic.id}/{text.id}`."
            )

        try:
            self._cache.put(topic.id, text.id, audio)
        except CacheWriteFailure as exc:
            self._log_event(
                "cache",
                "write_failure",
                level="WARNING",
                topic=topic.id,
                text=text.id,
                error_type=type(exc.__cause__ or exc).__name__,
            )
        return audio

    def _normalize_bytes(self, workspace: TempWorkspace, audio: bytes, stem: str) -> Path:
        """Write raw provider audio and re-encode it into the common format."""

        raw_path = workspace.track(workspace.path(f"{stem}_raw.mp3"))
        normalized_path = workspace.track(workspace.path(f"{stem}.mp3"))
        raw_path.write_bytes(audio)
        self._cues.normalize(raw_path, normalized_path)
        return normalized_path

    def _copy_template(self, workspace: TempWorkspace, template: Path, name: str) -> Path:
        """Duplicate one shared clip into a selection-owned file."""

        target = workspace.track(workspace.path(name))
        shutil.copyfile(template, target)
        return target

    def _concatenate(self, workspace: TempWorkspace, files: Sequence[Path]) -> Path:
        """Concatenate ordered segment files into one untagged output."""

        manifest = workspace.track(workspace.path("concat.txt"))
        combined = workspace.track(workspace.path("combined.mp3"))
        return self._concatenator.concatenate(files, combined, manifest)

    def _tag(
        self,
        workspace: TempWorkspace,
        combined: Path,
        chapters: Sequence[ChapterInfo],
    ) -> bytes:
        """Tag a fresh copy of the combined file and read it back into memory."""

        tagged = workspace.track(workspace.path("tagged.mp3"))
        shutil.copyfile(combined, tagged)
        self._tag_writer.tag_chapters(tagged, chapters, self._album_tags)
        return tagged.read_bytes()

    def _log_event(self, stage: str, event: str, level: str = "INFO", **context: object) -> None:
        """Route notable run events to the run logger, or to loguru debug output."""

        if self._run_logger is not None:
            self._run_logger.log_event(stage, event, level=level, **context)
            return
        logger.debug("stage={} event={} {}", stage, event, context)

    def _stage_position(self, stage_name: str) -> tuple[int, int] | None:
        """Return 1-based stage index and total stage count for known stages."""

        try:
            index = self._PHASE_SEQUENCE.index(stage_name) + 1
        except ValueError:
            return None
        return index, len(self._PHASE_SEQUENCE)

    def _run_stage(self, stage_name: str, action: Callable[[], _StageResult]) -> _StageResult:
        """Run one named stage and emit start/complete/failure telemetry events."""

        stage_position = self._stage_position(stage_name)
        if stage_position and self._stage_progress_callback is not None:
            self._stage_progress_callback(stage_name, stage_position[0], stage_position[1])
        if self._run_logger is not None:
            self._run_logger.log_stage_start(stage_name)
        try:
            result = action()
        except Exception as exc:
            if self._run_logger is not None:
                self._run_logger.log_stage_failure(stage_name, type(exc).__name__)
            raise
        if self._run_logger is not None:
            self._run_logger.log_stage_complete(stage_name)
        return result
