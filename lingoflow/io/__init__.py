"""Content input adapters."""

from .content_store import ContentStore, MarkdownContentStore, parse_topic, text_id_from_title

__all__ = ["ContentStore", "MarkdownContentStore", "parse_topic", "text_id_from_title"]
