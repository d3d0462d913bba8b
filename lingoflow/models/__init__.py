"""Typed models used by the podcast assembly pipeline."""

from .datatypes import (
    SEGMENT_ORDER,
    AudioFormat,
    ChapterInfo,
    ChapterTimeline,
    Segment,
    SegmentKind,
    SelectionSegments,
    Text,
    TextSelection,
    Topic,
)

__all__ = [
    "AudioFormat",
    "ChapterInfo",
    "ChapterTimeline",
    "SEGMENT_ORDER",
    "Segment",
    "SegmentKind",
    "SelectionSegments",
    "Text",
    "TextSelection",
    "Topic",
]
