"""Chapter timeline computation over ordered selection segments."""

from __future__ import annotations

from collections.abc import Sequence
from pathlib import Path

from ..models.datatypes import ChapterInfo, ChapterTimeline, SelectionSegments


def build_timeline(groups: Sequence[SelectionSegments]) -> ChapterTimeline:
    """Fold segment durations into concat order and chapter boundaries.

    Each chapter starts where its intro starts and ends after its content
    segment, so the cue and both pauses belong to the chapter.
    """

    files: list[Path] = []
    chapters: list[ChapterInfo] = []
    elapsed_ms = 0

    for group in groups:
        start_ms = elapsed_ms
        for segment in group.segments:
            if segment.duration_ms < 0:
                raise ValueError(f"Segment `{segment.path.name}` has a negative duration.")
            files.append(segment.path)
            elapsed_ms += segment.duration_ms
        chapters.append(ChapterInfo(title=group.chapter_title, start_ms=start_ms, end_ms=elapsed_ms))

    return ChapterTimeline(files=tuple(files), chapters=tuple(chapters), total_ms=elapsed_ms)
