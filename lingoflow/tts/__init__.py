"""Text-to-speech provider abstractions."""

from .openai_client import OpenAIProviderError, OpenAISpeechClient
from .synthesizer import OpenAISpeechSynthesizer, SpeechSynthesizer

__all__ = [
    "OpenAIProviderError",
    "OpenAISpeechClient",
    "OpenAISpeechSynthesizer",
    "SpeechSynthesizer",
]
