"""OpenAI HTTP client for speech synthesis.

Responsibilities:
- Send minimal `/audio/speech` requests to OpenAI's REST API.
- Raise actionable provider exceptions with a classified failure kind.
- Keep API keys out of error messages.
"""

from __future__ import annotations

import json
import re
import socket
from typing import Any

import requests


class OpenAIProviderError(RuntimeError):
    """Raised when an OpenAI provider request fails or returns malformed output."""

    def __init__(
        self,
        message: str,
        *,
        failure_kind: str = "unknown",
        status_code: int | None = None,
        provider_code: str | None = None,
    ) -> None:
        """Initialize provider error metadata for stage-aware diagnostics."""

        super().__init__(message)
        self.failure_kind = failure_kind
        self.status_code = status_code
        self.provider_code = provider_code


class OpenAISpeechClient:
    """Minimal requests-based OpenAI speech HTTP client."""

    _MAX_PROVIDER_MESSAGE_CHARS = 180

    def __init__(
        self,
        *,
        api_key: str | None,
        base_url: str = "https://api.openai.com/v1",
        timeout_seconds: float = 120.0,
    ) -> None:
        self.api_key = api_key.strip() if isinstance(api_key, str) else ""
        self.base_url = base_url.rstrip("/")
        self.timeout_seconds = timeout_seconds

    def synthesize_speech(
        self,
        *,
        model: str,
        voice: str,
        text: str,
        response_format: str = "mp3",
        speed: float = 1.0,
    ) -> bytes:
        """Return synthesized audio bytes from OpenAI `/audio/speech`."""

        if not self.api_key:
            raise OpenAIProviderError(
                "Missing OpenAI API key. Set `OPENAI_API_KEY` or pass `--api-key`.",
                failure_kind="invalid_api_key",
            )

        payload = {
            "model": model,
            "voice": voice,
            "input": text,
            "response_format": response_format,
            "speed": speed,
        }
        response_bytes = self._post_json_bytes("/audio/speech", payload)
        if not response_bytes:
            raise OpenAIProviderError("OpenAI speech response is empty.", failure_kind="empty")
        return response_bytes

    def _post_json_bytes(self, endpoint_path: str, payload: dict[str, Any]) -> bytes:
        """Execute an OpenAI JSON POST request and map failures consistently."""

        headers = {
            "Authorization": f"Bearer {self.api_key}",
            "Content-Type": "application/json",
        }
        try:
            response = requests.post(
                f"{self.base_url}{endpoint_path}",
                headers=headers,
                json=payload,
                timeout=self.timeout_seconds,
            )
            response.raise_for_status()
            return bytes(response.content)
        except requests.HTTPError as exc:
            raise self._http_error_to_provider_error(exc) from exc
        except requests.RequestException as exc:
            if isinstance(exc, requests.Timeout):
                raise OpenAIProviderError(
                    "OpenAI request timed out.", failure_kind="timeout"
                ) from exc
            raise OpenAIProviderError(
                f"OpenAI request transport error: {self._short_message(str(exc))}",
                failure_kind="transport",
            ) from exc
        except (TimeoutError, socket.timeout) as exc:
            raise OpenAIProviderError("OpenAI request timed out.", failure_kind="timeout") from exc

    @classmethod
    def _short_message(cls, text: str) -> str:
        """Normalize and cap user-facing provider message length."""

        compact = " ".join(text.split())
        if len(compact) <= cls._MAX_PROVIDER_MESSAGE_CHARS:
            return compact
        return f"{compact[: cls._MAX_PROVIDER_MESSAGE_CHARS - 1]}..."

    @staticmethod
    def _redact_sensitive_tokens(text: str) -> str:
        """Redact API-key-like tokens from provider error content."""

        redacted = re.sub(r"\bsk-[A-Za-z0-9_-]{8,}\b", "[redacted-key]", text)
        return re.sub(
            r"(?i)bearer\s+[A-Za-z0-9._-]{12,}",
            "Bearer [redacted-token]",
            redacted,
        )

    @classmethod
    def _extract_provider_message(cls, body: str) -> tuple[str, str | None]:
        """Extract a concise provider message and optional provider error code."""

        if not body:
            return "", None
        try:
            payload = json.loads(body)
        except json.JSONDecodeError:
            return cls._short_message(cls._redact_sensitive_tokens(body)), None

        message = body
        provider_code: str | None = None
        error_payload = payload.get("error") if isinstance(payload, dict) else None
        if isinstance(error_payload, dict):
            code_value = error_payload.get("code")
            if isinstance(code_value, str) and code_value.strip():
                provider_code = code_value.strip()
            message_value = error_payload.get("message")
            if isinstance(message_value, str) and message_value.strip():
                message = message_value.strip()
        return cls._short_message(cls._redact_sensitive_tokens(message)), provider_code

    @staticmethod
    def _classify_http_failure(status_code: int, message: str, provider_code: str | None) -> str:
        """Classify OpenAI HTTP errors into diagnostic kinds."""

        message_lower = message.lower()
        if status_code == 401 or "api key" in message_lower:
            return "invalid_api_key"
        if provider_code == "insufficient_quota" or (status_code == 429 and "quota" in message_lower):
            return "insufficient_quota"
        if status_code == 429:
            return "rate_limited"
        if status_code in {408, 504} or "timed out" in message_lower:
            return "timeout"
        return "http_error"

    @classmethod
    def _http_error_to_provider_error(cls, exc: requests.HTTPError) -> OpenAIProviderError:
        """Convert HTTP errors into normalized provider exceptions with metadata."""

        response = exc.response
        status_code = response.status_code if response is not None else 0
        body = ""
        if response is not None:
            body = bytes(response.content or b"").decode("utf-8", errors="replace").strip()
        message, provider_code = cls._extract_provider_message(body)
        failure_kind = cls._classify_http_failure(status_code, message, provider_code)
        detail = f"OpenAI speech request failed (HTTP {status_code})"
        detail = f"{detail}: {message}" if message else f"{detail}."
        return OpenAIProviderError(
            detail,
            failure_kind=failure_kind,
            status_code=status_code,
            provider_code=provider_code,
        )
