"""Domain exceptions for podcast assembly and CLI diagnostics."""

from __future__ import annotations


class PipelineStageError(RuntimeError):
    """Raised when a specific pipeline stage fails."""

    def __init__(
        self,
        *,
        stage: str,
        detail: str,
        hint: str | None = None,
    ) -> None:
        """Initialize a stage-scoped pipeline error."""

        super().__init__(detail)
        self.stage = stage
        self.detail = detail
        self.hint = hint


class SynthesisFailure(PipelineStageError):
    """Raised when the speech service returns no audio for an intro or narration."""

    def __init__(self, detail: str, hint: str | None = None) -> None:
        super().__init__(
            stage="tts",
            detail=detail,
            hint=hint or "Check speech provider credentials, quota, and connectivity.",
        )


class SubprocessFailure(PipelineStageError):
    """Raised when the external audio tool exits non-zero or cannot be started.

    Attributes:
        exit_code: Process exit status reported by the runner.
        diagnostics: Captured stderr output of the failed invocation.
    """

    def __init__(
        self,
        detail: str,
        *,
        exit_code: int | None,
        diagnostics: str = "",
        stage: str = "audio",
        hint: str | None = None,
    ) -> None:
        super().__init__(
            stage=stage,
            detail=detail,
            hint=hint or "Verify that ffmpeg is installed and supports `libmp3lame`.",
        )
        self.exit_code = exit_code
        self.diagnostics = diagnostics


class ConcatenationFailure(SubprocessFailure):
    """Raised when lossless concatenation of segment files fails."""

    def __init__(self, detail: str, *, exit_code: int | None, diagnostics: str = "") -> None:
        super().__init__(
            detail,
            exit_code=exit_code,
            diagnostics=diagnostics,
            stage="concat",
            hint="All segments must share the common MP3 format before concatenation.",
        )


class NoContentGenerated(PipelineStageError):
    """Raised when none of the requested selections resolve to existing content."""

    def __init__(self, detail: str = "No audio generated: no selection resolved to a text.") -> None:
        super().__init__(
            stage="resolve",
            detail=detail,
            hint="Run `lingoflow list-texts` to see available `topic/text` identifiers.",
        )


class CacheWriteFailure(PipelineStageError):
    """Raised when narration audio cannot be persisted to the cache."""

    def __init__(self, detail: str) -> None:
        super().__init__(
            stage="cache",
            detail=detail,
            hint="Check permissions and free space of the cache directory.",
        )
