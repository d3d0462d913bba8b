"""Shared parsing helpers for config values and CLI selection tokens."""

from __future__ import annotations

from .models.datatypes import TextSelection


def normalize_optional_string(value: object) -> str | None:
    """Normalize an optional value to a stripped non-empty string.

    Args:
        value: Arbitrary input value.

    Returns:
        Stripped string value, or `None` when the value is empty after trimming.
    """

    if value is None:
        return None
    text = str(value).strip()
    if not text:
        return None
    return text


def parse_selection(token: str) -> TextSelection:
    """Parse one `topic_id/text_id` token into a `TextSelection`.

    Raises:
        ValueError: If the token does not contain exactly two non-empty identifiers.
    """

    normalized = normalize_optional_string(token)
    if normalized is None or normalized.count("/") != 1:
        raise ValueError(f"Selection `{token}` must have the form `topic_id/text_id`.")

    topic_id, text_id = (part.strip() for part in normalized.split("/"))
    if not topic_id or not text_id:
        raise ValueError(f"Selection `{token}` must have the form `topic_id/text_id`.")
    return TextSelection(topic_id=topic_id, text_id=text_id)
