# Copyright (c) 2026 Pointmatic
#
# This Source Code Form is subject to the terms of the Mozilla Public
# License, v. 2.0. If a copy of the MPL was not distributed with this
# file, You can obtain one at https://mozilla.org/MPL/2.0/.

"""CLI entry point for yt-transcript."""

from __future__ import annotations

import asyncio
import json
import sys
from pathlib import Path

import click

from yt_transcript import __version__
from yt_transcript.core.formatter import FALLBACK_METHOD
from yt_transcript.core.logging import setup_logging, get_logger
from yt_transcript.core.models import TranscriptOptions
from yt_transcript.core.options import ExtractorSettings


# Exit codes
EXIT_OK = 0
EXIT_INVALID_INPUT = 1
EXIT_FALLBACK = 2


def _settings_options(fn):
    """Shared Click options that map to ExtractorSettings fields."""
    decorators = [
        click.option("--official-api-key", type=str, default=None, help="YouTube Data API key."),
        click.option("--third-party-api-key", type=str, default=None, help="Key for keyed third-party transcript services."),
        click.option("--speech-to-text-api-key", type=str, default=None, help="Key for the speech-to-text service."),
        click.option("--strategy-timeout", type=float, default=None, help="Seconds allowed per strategy."),
        click.option("--verbose", is_flag=True, default=None, help="Verbose console output."),
    ]
    for decorator in reversed(decorators):
        fn = decorator(fn)
    return fn


def _build_settings(**cli_kwargs) -> ExtractorSettings:
    """Build ExtractorSettings from CLI kwargs, filtering out unset (None) values.

    Only explicitly-provided CLI flags are passed as init overrides. Unset
    flags fall through to env vars → YAML → defaults.
    """
    overrides = {key: value for key, value in cli_kwargs.items() if value is not None}
    return ExtractorSettings(**overrides)


@click.group()
@click.version_option(version=__version__, prog_name="yt_transcript")
def cli() -> None:
    """YouTube transcript extraction with a multi-strategy fallback chain."""


@cli.command()
@click.argument("video")
@click.option("--language", type=str, default=None, help="Preferred caption language.")
@click.option("--timestamps/--no-timestamps", default=True, help="Prefix lines with [start - end].")
@click.option("--format", "format_", type=click.Choice(["text", "json", "srt"]), default="text", help="Transcript output format.")
@click.option("--out", type=click.Path(path_type=Path), default=None, help="Write output to this file.")
@click.option("--json", "as_json", is_flag=True, default=False, help="Emit the full response JSON.")
@click.option("--strict", is_flag=True, default=False, help="Exit 2 when only the structured fallback was produced.")
@click.option("--log-jsonl", type=click.Path(path_type=Path), default=None, help="Also write structured JSONL logs here.")
@_settings_options
def extract(video, language, timestamps, format_, out, as_json, strict, log_jsonl, **kwargs):
    """Extract the transcript for VIDEO (URL or video ID)."""
    settings = _build_settings(**kwargs)
    setup_logging(verbose=settings.verbose, jsonl_path=log_jsonl)
    log = get_logger()

    options = TranscriptOptions(
        language=language or settings.default_language,
        include_timestamps=timestamps,
        format=format_,
    )

    from yt_transcript.core.orchestrator import TranscriptOrchestrator

    response = asyncio.run(TranscriptOrchestrator(settings=settings).extract(video, options))

    if not response.success:
        log.error(response.error)
        sys.exit(EXIT_INVALID_INPUT)

    if out is not None:
        from yt_transcript.core.writer import write_response

        path = write_response(response, out, as_json=as_json)
        log.info("Wrote transcript to %s", path)
    elif as_json:
        click.echo(json.dumps(response.to_wire(), indent=2, ensure_ascii=False))
    else:
        click.echo(response.transcript)

    method = response.metadata.extraction_method if response.metadata else None
    if strict and method == FALLBACK_METHOD:
        sys.exit(EXIT_FALLBACK)
    sys.exit(EXIT_OK)


@cli.command()
@click.option("--host", default="127.0.0.1", show_default=True, help="Bind address.")
@click.option("--port", type=int, default=8000, show_default=True, help="Bind port.")
@_settings_options
def serve(host, port, **kwargs):
    """Run the HTTP service."""
    settings = _build_settings(**kwargs)
    setup_logging(verbose=settings.verbose)

    import uvicorn

    from yt_transcript.api import create_app

    uvicorn.run(create_app(settings=settings), host=host, port=port, log_config=None)


@cli.command()
@_settings_options
def strategies(**kwargs):
    """List the extraction chain and whether each strategy will run."""
    settings = _build_settings(**kwargs)

    from yt_transcript.strategies.registry import default_strategies

    for position, strategy in enumerate(default_strategies(settings.audio_timeout), start=1):
        if strategy.enabled(settings):
            state = "enabled"
        else:
            state = f"disabled (set {strategy.requires})"
        click.echo(f"{position}. {strategy.name}: {state}")


if __name__ == "__main__":
    cli()
