"""Core datatypes shared across LingoFlow modules.

Responsibilities:
- Represent immutable records exchanged between content, audio, and pipeline layers.
- Provide explicit typing for segment bookkeeping and chapter computation.

Key types:
- `Topic`, `Text`, `TextSelection`, `SegmentKind`, `Segment`,
  `SelectionSegments`, `ChapterInfo`, `ChapterTimeline`, and `AudioFormat`.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from pathlib import Path


@dataclass(frozen=True, slots=True)
class Text:
    """One readable text inside a topic.

    Attributes:
        id: Slug identifier derived from the text title.
        title: Human-readable title.
        content: Ordered paragraph strings.
    """

    id: str
    title: str
    content: tuple[str, ...] = field(default_factory=tuple)


@dataclass(frozen=True, slots=True)
class Topic:
    """A topic grouping several texts.

    Attributes:
        id: Topic identifier (source filename without extension).
        title: Human-readable title.
        description: Optional free-form description.
        texts: Ordered texts of the topic.
    """

    id: str
    title: str
    description: str | None = None
    texts: tuple[Text, ...] = field(default_factory=tuple)

    def find_text(self, text_id: str) -> Text | None:
        """Return the text with `text_id`, or `None` when it does not exist."""

        for text in self.texts:
            if text.id == text_id:
                return text
        return None


@dataclass(frozen=True, slots=True)
class TextSelection:
    """One `(topic, text)` pair requested for inclusion in an assembled podcast."""

    topic_id: str
    text_id: str


class SegmentKind(str, Enum):
    """Kinds of physical clips emitted for one selection."""

    INTRO = "intro"
    PAUSE_AFTER_INTRO = "pause_after_intro"
    CUE = "cue"
    PAUSE_AFTER_CUE = "pause_after_cue"
    CONTENT = "content"


SEGMENT_ORDER: tuple[SegmentKind, ...] = (
    SegmentKind.INTRO,
    SegmentKind.PAUSE_AFTER_INTRO,
    SegmentKind.CUE,
    SegmentKind.PAUSE_AFTER_CUE,
    SegmentKind.CONTENT,
)


@dataclass(frozen=True, slots=True)
class Segment:
    """One contiguous audio clip plus its measured duration."""

    kind: SegmentKind
    path: Path
    duration_ms: int


@dataclass(frozen=True, slots=True)
class SelectionSegments:
    """All segments produced for one resolved selection, in emission order."""

    chapter_title: str
    segments: tuple[Segment, ...]

    def __post_init__(self) -> None:
        kinds = tuple(segment.kind for segment in self.segments)
        if kinds != SEGMENT_ORDER:
            raise ValueError(
                "Selection segments must follow intro, pause, cue, pause, content order."
            )


@dataclass(frozen=True, slots=True)
class ChapterInfo:
    """A named time range in the final output, in milliseconds."""

    title: str
    start_ms: int
    end_ms: int


@dataclass(frozen=True, slots=True)
class ChapterTimeline:
    """Ordered concat inputs and the chapters derived from their durations."""

    files: tuple[Path, ...]
    chapters: tuple[ChapterInfo, ...]
    total_ms: int


@dataclass(frozen=True, slots=True)
class AudioFormat:
    """Common encoding every segment is normalized to before concatenation."""

    codec: str = "libmp3lame"
    sample_rate: int = 44100
    channels: int = 2
    bitrate: str = "128k"

    def ffmpeg_args(self) -> list[str]:
        """Return ffmpeg output arguments that enforce this format."""

        return [
            "-c:a",
            self.codec,
            "-b:a",
            self.bitrate,
            "-ar",
            str(self.sample_rate),
            "-ac",
            str(self.channels),
        ]
