"""LingoFlow pipeline package.

This package contains the assembly orchestrator, the pure chapter timeline
fold, and the per-run temporary workspace.
"""

from .orchestrator import AssembledPodcast, PodcastPipeline
from .timeline import build_timeline
from .workspace import TempWorkspace

__all__ = ["AssembledPodcast", "PodcastPipeline", "TempWorkspace", "build_timeline"]
