"""Audio components: narration cache, clip synthesis, probing, concat, and tagging."""

from .cache import NarrationCache
from .concat import AudioConcatenator
from .cues import CueSynthesizer
from .probe import DurationProber
from .runner import CommandResult, CommandRunner, SubprocessRunner
from .tags import AlbumTags, ChapterTagWriter

__all__ = [
    "AlbumTags",
    "AudioConcatenator",
    "ChapterTagWriter",
    "CommandResult",
    "CommandRunner",
    "CueSynthesizer",
    "DurationProber",
    "NarrationCache",
    "SubprocessRunner",
]
