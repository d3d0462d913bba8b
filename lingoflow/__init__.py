"""Top-level package for LingoFlow podcast assembly.

This package turns an ordered list of `(topic, text)` selections into one MP3
with spoken introductions, cue tones, narrated texts, and ID3 chapter markers.
The main orchestration entry point is `PodcastPipeline`.
"""

from .pipeline import PodcastPipeline

__all__ = ["PodcastPipeline", "__version__"]

__version__ = "0.1.0"
