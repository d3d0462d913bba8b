"""Topic/text content store backed by a directory of Markdown files.

Responsibilities:
- Define the `ContentStore` protocol consumed by the podcast pipeline.
- Parse `<topic_id>.md` files into `Topic` and `Text` records.

File format:
- `# Title` sets the topic title; following lines form the description.
- `## Text title` starts a new text; non-empty lines become paragraphs.
- `---` separator lines are ignored.
"""

from __future__ import annotations

from pathlib import Path
import re
from typing import Protocol

from loguru import logger

from ..models.datatypes import Text, Topic

_TEXT_ID_RE = re.compile(r"[^a-z0-9]+")


class ContentStore(Protocol):
    """Protocol for topic/text providers."""

    def get_topics(self) -> list[Topic]:
        """Return every available topic with its texts."""


def text_id_from_title(title: str) -> str:
    """Derive the link-stable text id used by shared selection lists."""

    return _TEXT_ID_RE.sub("-", title.lower())


def parse_topic(topic_id: str, markdown: str) -> Topic | None:
    """Parse one topic document, returning `None` when it has no `# ` title."""

    title = ""
    description_lines: list[str] = []
    texts: list[Text] = []
    current_title: str | None = None
    current_paragraphs: list[str] = []
    in_description = True

    def _flush() -> None:
        if current_title is not None:
            texts.append(
                Text(
                    id=text_id_from_title(current_title),
                    title=current_title,
                    content=tuple(current_paragraphs),
                )
            )

    for raw_line in markdown.splitlines():
        line = raw_line.strip()
        if line.startswith("# "):
            title = line[2:].strip()
            in_description = True
        elif line.startswith("## "):
            in_description = False
            _flush()
            current_title = line[3:].strip()
            current_paragraphs = []
        elif line == "---" or not line:
            continue
        elif in_description:
            description_lines.append(line)
        elif current_title is not None:
            current_paragraphs.append(line)

    _flush()

    if not title:
        return None
    return Topic(
        id=topic_id,
        title=title,
        description="\n".join(description_lines) or None,
        texts=tuple(texts),
    )


class MarkdownContentStore:
    """Read topics from `*.md` files in one directory, sorted by filename."""

    def __init__(self, root: Path) -> None:
        self.root = root

    def get_topics(self) -> list[Topic]:
        """Parse every topic file; storage errors yield an empty list."""

        try:
            paths = sorted(self.root.glob("*.md"), key=lambda item: item.name)
            topics: list[Topic] = []
            for path in paths:
                topic = parse_topic(
                    path.stem,
                    path.read_text(encoding="utf-8", errors="replace"),
                )
                if topic is not None:
                    topics.append(topic)
        except OSError as exc:
            logger.error("failed to load topics from {}: {}", self.root, exc)
            return []
        return topics
