"""Speech-synthesis interface and OpenAI-backed implementation.

Responsibilities:
- Define the `SpeechSynthesizer` protocol consumed by the pipeline.
- Report provider failures as "no audio" so the pipeline decides fatality.
"""

from __future__ import annotations

from typing import Protocol

from loguru import logger

from .openai_client import OpenAIProviderError, OpenAISpeechClient

DEFAULT_TTS_MODEL = "gpt-4o-mini-tts"
DEFAULT_TTS_VOICE = "onyx"


class SpeechSynthesizer(Protocol):
    """Protocol for text-to-speech providers."""

    def synthesize(self, text: str) -> bytes | None:
        """Return audio bytes for `text`, or `None` when no audio was produced."""


class OpenAISpeechSynthesizer:
    """Synthesize MP3 narration through OpenAI `/audio/speech`."""

    def __init__(
        self,
        api_key: str | None = None,
        model: str = DEFAULT_TTS_MODEL,
        voice: str = DEFAULT_TTS_VOICE,
        client: OpenAISpeechClient | None = None,
    ) -> None:
        self.model = model
        self.voice = voice
        self.client = client if client is not None else OpenAISpeechClient(api_key=api_key)

    def synthesize(self, text: str) -> bytes | None:
        """Synthesize one MP3 payload; provider errors are logged and yield `None`."""

        if not text.strip():
            return None
        try:
            return self.client.synthesize_speech(
                model=self.model,
                voice=self.voice,
                text=text,
                response_format="mp3",
            )
        except OpenAIProviderError as exc:
            logger.warning(
                "speech synthesis failed kind={} status={}: {}",
                exc.failure_kind,
                exc.status_code,
                exc,
            )
            return None
