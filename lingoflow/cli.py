"""Command-line interface for LingoFlow.

Responsibilities:
- Expose user-facing commands for podcast assembly and content listing.
- Convert CLI arguments into `PodcastConfig` and run the pipeline.

Key public functions:
- `app`: Typer application instance.
- `main`: invoke the Typer application.
"""

from __future__ import annotations

from contextlib import suppress
from dataclasses import replace
import os
from pathlib import Path
from typing import Annotated

import typer
from loguru import logger

from .cli_rendering import echo_chapter_list, echo_text_list, exit_with_command_error
from .config import ConfigLoader, PodcastConfig
from .errors import PipelineStageError
from .io.content_store import MarkdownContentStore
from .parsing import normalize_optional_string, parse_selection
from .pipeline import PodcastPipeline
from .telemetry.logger import RunLogger

_LOGURU_DEFAULT_HANDLER_ID = 0

app = typer.Typer(
    name="lingoflow",
    no_args_is_help=True,
    help="LingoFlow podcast CLI.",
)


class AssembleProgressIndicator:
    """Render per-stage progress lines for long-running commands."""

    _SPINNER_FRAMES = "|/-\\"

    def __init__(self, command_name: str) -> None:
        self._command_name = command_name

    def on_stage_start(self, stage_name: str, stage_index: int, stage_total: int) -> None:
        """Print one progress line for a stage start transition."""

        spinner = self._SPINNER_FRAMES[(stage_index - 1) % len(self._SPINNER_FRAMES)]
        typer.echo(
            f"[progress] command={self._command_name} "
            f"{spinner} {stage_index}/{stage_total} stage={stage_name}"
        )


def _silence_default_log_handler() -> None:
    """Drop loguru's stock stderr handler so run logs are printed once."""

    with suppress(ValueError):
        logger.remove(_LOGURU_DEFAULT_HANDLER_ID)


def _load_yaml_config(config_path: Path | None) -> PodcastConfig | None:
    """Load a YAML config file when requested and map failures to stage errors."""

    if config_path is None:
        return None

    try:
        return ConfigLoader.from_yaml(config_path)
    except FileNotFoundError as exc:
        raise PipelineStageError(
            stage="config",
            detail=f"Config file not found: `{config_path}`.",
            hint="Provide an existing path via `--config <path.yaml>`.",
        ) from exc
    except ValueError as exc:
        raise PipelineStageError(
            stage="config",
            detail=f"Invalid config file `{config_path}`: {exc}",
            hint="Fix config schema/values and rerun.",
        ) from exc
    except Exception as exc:
        raise PipelineStageError(
            stage="config",
            detail=f"Failed to load config file `{config_path}`: {exc}",
            hint="Verify YAML syntax and file permissions.",
        ) from exc


def _resolve_config(
    config_file: Path | None,
    content_dir: Path | None,
    overrides: dict[str, object] | None = None,
) -> PodcastConfig:
    """Resolve effective config from YAML or environment, then apply CLI overrides."""

    config = _load_yaml_config(config_file)
    if config is None:
        if content_dir is None and os.environ.get("LINGOFLOW_CONTENT_DIR"):
            try:
                config = ConfigLoader.from_env()
            except ValueError as exc:
                raise PipelineStageError(
                    stage="config",
                    detail=f"Invalid environment configuration: {exc}",
                    hint="Fix `LINGOFLOW_*` environment variables and rerun.",
                ) from exc
        elif content_dir is None:
            raise PipelineStageError(
                stage="config",
                detail="Content directory is required when `--config` is not provided.",
                hint="Pass `--content-dir <dir>`, set `LINGOFLOW_CONTENT_DIR`, or use `--config`.",
            )
        else:
            config = PodcastConfig(content_dir=content_dir)

    resolved = {key: value for key, value in (overrides or {}).items() if value is not None}
    if content_dir is not None:
        resolved["content_dir"] = content_dir
    if config.api_key is None and "api_key" not in resolved:
        env_key = normalize_optional_string(os.environ.get("OPENAI_API_KEY"))
        if env_key is not None:
            resolved["api_key"] = env_key
    config = replace(config, **resolved)

    try:
        config.validate()
    except ValueError as exc:
        raise PipelineStageError(
            stage="config",
            detail=str(exc),
            hint="Update config values and rerun the command.",
        ) from exc
    return config


@app.command("assemble")
def assemble_command(
    selections: Annotated[
        list[str],
        typer.Argument(help="Ordered `topic_id/text_id` selections to include."),
    ],
    out: Annotated[
        Path,
        typer.Option("--out", help="Output MP3 path."),
    ] = Path("lingoflow-podcast.mp3"),
    config_file: Annotated[
        Path | None,
        typer.Option("--config", help="Path to YAML config file with command defaults."),
    ] = None,
    content_dir: Annotated[
        Path | None,
        typer.Option("--content-dir", help="Directory with topic Markdown files."),
    ] = None,
    cache_dir: Annotated[
        Path | None,
        typer.Option("--cache-dir", help="Narration cache directory."),
    ] = None,
    temp_dir: Annotated[
        Path | None,
        typer.Option("--temp-dir", help="Root directory for per-run temporary files."),
    ] = None,
    tts_model: Annotated[
        str | None,
        typer.Option("--tts-model", help="Speech model id override."),
    ] = None,
    tts_voice: Annotated[
        str | None,
        typer.Option("--tts-voice", help="Speech voice id override."),
    ] = None,
    api_key: Annotated[
        str | None,
        typer.Option("--api-key", help="Speech provider API key override."),
    ] = None,
    verbose: Annotated[
        bool,
        typer.Option("--verbose", help="Emit debug-level run logs."),
    ] = False,
) -> None:
    """Assemble one chaptered podcast MP3 from text selections."""

    try:
        parsed_selections = [parse_selection(token) for token in selections]
        config = _resolve_config(
            config_file,
            content_dir,
            {
                "cache_dir": cache_dir,
                "temp_dir": temp_dir,
                "tts_model": tts_model,
                "tts_voice": tts_voice,
                "api_key": api_key,
            },
        )
        progress = AssembleProgressIndicator(command_name="assemble")
        _silence_default_log_handler()
        run_logger = RunLogger(level="DEBUG" if verbose else "INFO")
        try:
            pipeline = PodcastPipeline.from_config(
                config,
                run_logger=run_logger,
                stage_progress_callback=progress.on_stage_start,
            )
            podcast = pipeline.build(parsed_selections)
        finally:
            run_logger.close()
        out.parent.mkdir(parents=True, exist_ok=True)
        out.write_bytes(podcast.audio)
    except Exception as exc:
        exit_with_command_error("assemble", exc)

    typer.echo(f"Podcast: {out}")
    typer.echo(f"Size (bytes): {len(podcast.audio)}")
    typer.echo(f"Chapters: {len(podcast.chapters)}")
    echo_chapter_list(podcast.chapters)


@app.command("list-texts")
def list_texts_command(
    config_file: Annotated[
        Path | None,
        typer.Option("--config", help="Path to YAML config file with command defaults."),
    ] = None,
    content_dir: Annotated[
        Path | None,
        typer.Option("--content-dir", help="Directory with topic Markdown files."),
    ] = None,
) -> None:
    """List available `topic_id/text_id` selections."""

    try:
        config = _resolve_config(config_file, content_dir)
        topics = MarkdownContentStore(config.content_dir).get_topics()
    except Exception as exc:
        exit_with_command_error("list-texts", exc)

    if not topics:
        typer.echo("No topics found.")
        return
    echo_text_list(topics)


def main() -> None:
    """CLI entrypoint for console scripts."""
    app()


if __name__ == "__main__":
    main()
