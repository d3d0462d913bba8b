from __future__ import annotations

from pathlib import Path

import pytest

from lingoflow.io.content_store import MarkdownContentStore, parse_topic, text_id_from_title
from lingoflow.models.datatypes import TextSelection
from lingoflow.parsing import parse_selection


def test_parse_topic_collects_title_description_and_texts() -> None:
    topic = parse_topic(
        "berlin",
        "# Berlin\nDie Hauptstadt.\nSehr gross.\n\n## Intro\nHallo Welt.\n\n## Am Bahnhof\nEins.\nZwei.\n",
    )

    assert topic is not None
    assert topic.id == "berlin"
    assert topic.title == "Berlin"
    assert topic.description == "Die Hauptstadt.\nSehr gross."
    assert [text.id for text in topic.texts] == ["intro", "am-bahnhof"]
    assert topic.texts[1].content == ("Eins.", "Zwei.")


def test_parse_topic_ignores_separators_and_missing_description() -> None:
    topic = parse_topic("muenchen", "# München\n\n---\n\n## Oktoberfest\nEs ist laut.\n---\n")

    assert topic is not None
    assert topic.description is None
    assert topic.texts[0].title == "Oktoberfest"
    assert topic.texts[0].content == ("Es ist laut.",)


def test_parse_topic_without_title_is_skipped() -> None:
    assert parse_topic("orphan", "## Text\nInhalt.\n") is None


def test_text_ids_replace_every_non_alphanumeric_run() -> None:
    assert text_id_from_title("Am Bahnhof") == "am-bahnhof"
    assert text_id_from_title("Café & Kuchen!") == "caf-kuchen-"
    assert text_id_from_title("Teil 2: Die Reise") == "teil-2-die-reise"


def test_find_text_returns_none_for_unknown_id() -> None:
    topic = parse_topic("berlin", "# Berlin\n## Intro\nHallo.\n")

    assert topic is not None
    assert topic.find_text("intro") is topic.texts[0]
    assert topic.find_text("missing") is None


def test_store_reads_topics_sorted_by_filename(content_dir: Path) -> None:
    (content_dir / "notes.txt").write_text("# Ignored\n", encoding="utf-8")
    (content_dir / "aaa.md").write_text("no title here\n", encoding="utf-8")

    topics = MarkdownContentStore(content_dir).get_topics()

    assert [topic.id for topic in topics] == ["berlin", "muenchen"]


def test_store_returns_empty_list_for_missing_directory(tmp_path: Path) -> None:
    assert MarkdownContentStore(tmp_path / "missing").get_topics() == []


def test_store_decodes_invalid_utf8_with_replacement(content_dir: Path) -> None:
    """A topic file with stray Latin-1 bytes should not hide the other topics."""

    (content_dir / "zz.md").write_bytes(b"# Caf\xe9 Kultur\n## Im Caf\xe9\nKaffee.\n")

    topics = MarkdownContentStore(content_dir).get_topics()

    assert [topic.id for topic in topics] == ["berlin", "muenchen", "zz"]
    assert topics[2].title == "Caf� Kultur"
    assert topics[2].texts[0].id == "im-caf-"
    assert topics[2].texts[0].content == ("Kaffee.",)


def test_parse_selection_splits_topic_and_text() -> None:
    assert parse_selection(" berlin/am-bahnhof ") == TextSelection(topic_id="berlin", text_id="am-bahnhof")


@pytest.mark.parametrize("token", ["berlin", "berlin/", "/intro", "a/b/c", "   "])
def test_parse_selection_rejects_malformed_tokens(token: str) -> None:
    with pytest.raises(ValueError):
        parse_selection(token)
