"""CLI output and error rendering helpers.

This module centralizes user-facing CLI presentation for command diagnostics,
chapter listings, and available text rows.
"""

from __future__ import annotations

from collections.abc import Sequence
from typing import NoReturn

import typer

from .errors import PipelineStageError
from .models.datatypes import ChapterInfo, Topic


def exit_with_command_error(command_name: str, exc: Exception) -> NoReturn:
    """Print concise diagnostics for command failures and exit with code 1."""

    if isinstance(exc, PipelineStageError):
        typer.secho(
            f"{command_name} failed at stage `{exc.stage}`: {exc.detail}",
            fg=typer.colors.RED,
            err=True,
        )
        if exc.hint:
            typer.secho(f"Hint: {exc.hint}", fg=typer.colors.YELLOW, err=True)
    else:
        typer.secho(f"{command_name} failed: {exc}", fg=typer.colors.RED, err=True)
    raise typer.Exit(code=1) from exc


def format_timestamp(milliseconds: int) -> str:
    """Format milliseconds as `H:MM:SS.mmm`."""

    seconds, millis = divmod(max(0, int(milliseconds)), 1000)
    minutes, seconds = divmod(seconds, 60)
    hours, minutes = divmod(minutes, 60)
    return f"{hours}:{minutes:02d}:{seconds:02d}.{millis:03d}"


def echo_chapter_list(chapters: Sequence[ChapterInfo]) -> None:
    """Print one row per chapter with its start/end offsets."""

    for index, chapter in enumerate(chapters, start=1):
        typer.echo(
            f"{index}. [{format_timestamp(chapter.start_ms)} - "
            f"{format_timestamp(chapter.end_ms)}] {chapter.title}"
        )


def echo_text_list(topics: Sequence[Topic]) -> None:
    """Print `topic_id/text_id` rows usable as assemble selections."""

    for topic in topics:
        typer.echo(f"{topic.id}: {topic.title}")
        for text in topic.texts:
            typer.echo(f"  {topic.id}/{text.id}  {text.title}")
