"""Configuration model and loaders for LingoFlow podcast assembly.

Responsibilities:
- Define runtime configuration as a typed dataclass.
- Provide loader entry points for YAML- and environment-based configuration.

Key types:
- `PodcastConfig`: normalized runtime settings for pipeline runs.
- `ConfigLoader`: static construction helpers for `PodcastConfig`.
"""

from __future__ import annotations

from dataclasses import dataclass
import os
from pathlib import Path
from typing import Any, Mapping

import yaml

from .audio.probe import DEFAULT_FALLBACK_DURATION_MS
from .audio.tags import (
    DEFAULT_ALBUM_ARTIST,
    DEFAULT_ALBUM_NAME,
    DEFAULT_ALBUM_TITLE,
    AlbumTags,
)
from .parsing import normalize_optional_string
from .tts.synthesizer import DEFAULT_TTS_MODEL, DEFAULT_TTS_VOICE

_DEFAULT_CACHE_DIR = Path(".cache") / "podcast"
_DEFAULT_TEMP_DIR = Path(".cache") / "temp"


@dataclass(slots=True)
class PodcastConfig:
    """Runtime configuration for podcast assembly.

    Attributes:
        content_dir: Directory with `<topic_id>.md` content files.
        cache_dir: Root of the shared narration cache.
        temp_dir: Root under which each run creates its private directory.
        tts_model: Speech model identifier.
        tts_voice: Speech voice identifier.
        api_key: Optional provider API key (never logged).
        ffmpeg_executable: ffmpeg command name or path.
        pause_after_intro_seconds: Silence between intro and cue tone.
        pause_after_cue_seconds: Silence between cue tone and narration.
        fallback_duration_ms: Duration assumed when a clip cannot be probed.
        album_title: ID3 title of the assembled file.
        album_artist: ID3 artist of the assembled file.
        album_name: ID3 album of the assembled file.
    """

    content_dir: Path
    cache_dir: Path = _DEFAULT_CACHE_DIR
    temp_dir: Path = _DEFAULT_TEMP_DIR
    tts_model: str = DEFAULT_TTS_MODEL
    tts_voice: str = DEFAULT_TTS_VOICE
    api_key: str | None = None
    ffmpeg_executable: str = "ffmpeg"
    pause_after_intro_seconds: float = 0.5
    pause_after_cue_seconds: float = 0.7
    fallback_duration_ms: int = DEFAULT_FALLBACK_DURATION_MS
    album_title: str = DEFAULT_ALBUM_TITLE
    album_artist: str = DEFAULT_ALBUM_ARTIST
    album_name: str = DEFAULT_ALBUM_NAME

    def validate(self) -> None:
        """Validate runtime configuration values before pipeline execution."""

        self._require_non_empty(self.tts_model, "tts_model")
        self._require_non_empty(self.tts_voice, "tts_voice")
        self._require_non_empty(self.ffmpeg_executable, "ffmpeg_executable")
        if self.pause_after_intro_seconds <= 0:
            raise ValueError("`pause_after_intro_seconds` must be positive.")
        if self.pause_after_cue_seconds <= 0:
            raise ValueError("`pause_after_cue_seconds` must be positive.")
        if self.fallback_duration_ms < 0:
            raise ValueError("`fallback_duration_ms` must not be negative.")

    def album_tags(self) -> AlbumTags:
        """Return album-level tag values for assembled output."""

        return AlbumTags(title=self.album_title, artist=self.album_artist, album=self.album_name)

    @staticmethod
    def _require_non_empty(value: str, field_name: str) -> None:
        """Require a non-empty string value."""

        if normalize_optional_string(value) is None:
            raise ValueError(f"`{field_name}` must be a non-empty string.")


class ConfigLoader:
    """Factory methods for creating `PodcastConfig` from external sources."""

    _REQUIRED_YAML_KEYS = frozenset({"content_dir"})
    _PATH_KEYS = ("content_dir", "cache_dir", "temp_dir")
    _STRING_KEYS = (
        "tts_model",
        "tts_voice",
        "api_key",
        "ffmpeg_executable",
        "album_title",
        "album_artist",
        "album_name",
    )
    _FLOAT_KEYS = ("pause_after_intro_seconds", "pause_after_cue_seconds")
    _INT_KEYS = ("fallback_duration_ms",)
    _SUPPORTED_YAML_KEYS = frozenset(_PATH_KEYS + _STRING_KEYS + _FLOAT_KEYS + _INT_KEYS)

    @staticmethod
    def from_yaml(path: Path) -> PodcastConfig:
        """Create a validated config from a YAML file."""

        payload = yaml.safe_load(path.read_text(encoding="utf-8"))
        if payload is None:
            payload = {}
        if not isinstance(payload, Mapping):
            raise ValueError(f"YAML config `{path}` must contain a top-level mapping/object.")
        return ConfigLoader.from_mapping(payload, source_label=f"YAML `{path}`")

    @staticmethod
    def from_env(env: Mapping[str, str] | None = None) -> PodcastConfig:
        """Create a validated config from `LINGOFLOW_*` environment variables."""

        env_map: Mapping[str, str] = os.environ if env is None else env
        payload: dict[str, Any] = {}
        for key in ConfigLoader._SUPPORTED_YAML_KEYS:
            value = normalize_optional_string(env_map.get(f"LINGOFLOW_{key.upper()}"))
            if value is not None:
                payload[key] = value
        if "api_key" not in payload:
            api_key = normalize_optional_string(env_map.get("OPENAI_API_KEY"))
            if api_key is not None:
                payload["api_key"] = api_key
        if "content_dir" not in payload:
            raise ValueError("Environment variable `LINGOFLOW_CONTENT_DIR` is required.")
        return ConfigLoader.from_mapping(payload, source_label="environment")

    @staticmethod
    def from_mapping(payload: Mapping[str, Any], source_label: str) -> PodcastConfig:
        """Build a validated config from a normalized mapping payload."""

        ConfigLoader._validate_keys(payload, source_label)
        values: dict[str, Any] = {}

        for key in ConfigLoader._PATH_KEYS:
            value = ConfigLoader._optional_non_empty_string(payload, key)
            if value is not None:
                values[key] = Path(value).expanduser()
        if "content_dir" not in values:
            raise ValueError(f"{source_label} requires non-empty `content_dir`.")

        for key in ConfigLoader._STRING_KEYS:
            value = ConfigLoader._optional_non_empty_string(payload, key)
            if value is not None:
                values[key] = value
        for key in ConfigLoader._FLOAT_KEYS:
            if key in payload:
                values[key] = ConfigLoader._positive_number(payload[key], key, source_label, float)
        for key in ConfigLoader._INT_KEYS:
            if key in payload:
                values[key] = ConfigLoader._positive_number(
                    payload[key], key, source_label, int, allow_zero=True
                )

        config = PodcastConfig(**values)
        config.validate()
        return config

    @staticmethod
    def _validate_keys(payload: Mapping[str, Any], source_label: str) -> None:
        """Validate supported and required keys."""

        unknown = sorted(set(payload).difference(ConfigLoader._SUPPORTED_YAML_KEYS))
        if unknown:
            raise ValueError(f"{source_label} includes unsupported key(s): {', '.join(unknown)}.")

        missing = sorted(key for key in ConfigLoader._REQUIRED_YAML_KEYS if key not in payload)
        if missing:
            raise ValueError(f"{source_label} is missing required key(s): {', '.join(missing)}.")

    @staticmethod
    def _optional_non_empty_string(payload: Mapping[str, Any], key: str) -> str | None:
        """Read an optional string field and normalize blank values to `None`."""

        if key not in payload:
            return None
        return normalize_optional_string(payload[key])

    @staticmethod
    def _positive_number(
        raw_value: Any,
        key: str,
        source_label: str,
        kind: type,
        *,
        allow_zero: bool = False,
    ) -> Any:
        """Parse a positive (or non-negative) int/float field, rejecting booleans and blanks."""

        requirement = "a non-negative number" if allow_zero else "a positive number"
        if isinstance(raw_value, bool):
            raise ValueError(f"{source_label} field `{key}` must be {requirement}.")
        try:
            parsed = kind(raw_value)
        except (TypeError, ValueError) as exc:
            raise ValueError(f"{source_label} field `{key}` must be {requirement}.") from exc
        if parsed < 0 or (parsed == 0 and not allow_zero):
            raise ValueError(f"{source_label} field `{key}` must be {requirement}.")
        return parsed
