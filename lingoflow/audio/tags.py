"""ID3 chapter metadata for assembled podcast files.

Responsibilities:
- Write album-level title/artist/album frames.
- Write one `CHAP` frame per chapter and an ordered top-level `CTOC` frame.
- Keep tagging idempotent so rewriting a file replaces earlier chapter frames.
"""

from __future__ import annotations

from collections.abc import Sequence
from dataclasses import dataclass
from pathlib import Path

from mutagen.id3 import CHAP, CTOC, ID3, TALB, TIT2, TPE1, CTOCFlags, ID3NoHeaderError

from ..models.datatypes import ChapterInfo

_TOC_ELEMENT_ID = "toc1"
_TOC_TITLE = "Chapters"
_UTF8 = 3

DEFAULT_ALBUM_TITLE = "LingoFlow - German Learning"
DEFAULT_ALBUM_ARTIST = "LingoFlow"
DEFAULT_ALBUM_NAME = "German Learning Texts"


@dataclass(frozen=True, slots=True)
class AlbumTags:
    """Album-level tag values applied to every assembled podcast.

    Attributes:
        title: Track title (`TIT2`).
        artist: Artist name (`TPE1`).
        album: Album name (`TALB`).
    """

    title: str = DEFAULT_ALBUM_TITLE
    artist: str = DEFAULT_ALBUM_ARTIST
    album: str = DEFAULT_ALBUM_NAME


def chapter_element_id(index: int) -> str:
    """Return the `CHAP` element id for a 0-based chapter index."""

    return f"chap{index + 1}"


class ChapterTagWriter:
    """Write ID3v2 chapter and table-of-contents frames with `mutagen`."""

    def tag_chapters(
        self,
        audio_path: Path,
        chapters: Sequence[ChapterInfo],
        album: AlbumTags | None = None,
    ) -> Path:
        """Embed chapters and album tags into `audio_path` in place."""

        album_tags = album if album is not None else AlbumTags()
        try:
            tags = ID3(str(audio_path))
        except ID3NoHeaderError:
            tags = ID3()

        for frame_id in ("CHAP", "CTOC", "TIT2", "TPE1", "TALB"):
            tags.delall(frame_id)

        tags.add(TIT2(encoding=_UTF8, text=[album_tags.title]))
        tags.add(TPE1(encoding=_UTF8, text=[album_tags.artist]))
        tags.add(TALB(encoding=_UTF8, text=[album_tags.album]))

        element_ids: list[str] = []
        for index, chapter in enumerate(chapters):
            element_id = chapter_element_id(index)
            element_ids.append(element_id)
            tags.add(
                CHAP(
                    element_id=element_id,
                    start_time=int(chapter.start_ms),
                    end_time=int(chapter.end_ms),
                    start_offset=0xFFFFFFFF,
                    end_offset=0xFFFFFFFF,
                    sub_frames=[TIT2(encoding=_UTF8, text=[chapter.title])],
                )
            )

        tags.add(
            CTOC(
                element_id=_TOC_ELEMENT_ID,
                flags=CTOCFlags.TOP_LEVEL | CTOCFlags.ORDERED,
                child_element_ids=element_ids,
                sub_frames=[TIT2(encoding=_UTF8, text=[_TOC_TITLE])],
            )
        )
        tags.save(str(audio_path), v2_version=4)
        return audio_path
