"""yt-transcript: YouTube transcript extraction with a multi-strategy fallback chain."""

__version__ = "0.1.0"

import asyncio

from yt_transcript.core.models import TranscriptOptions, TranscriptResponse
from yt_transcript.core.options import ExtractorSettings


async def aextract_transcript(
    url_or_id: str,
    options: TranscriptOptions | None = None,
    settings: ExtractorSettings | None = None,
) -> TranscriptResponse:
    """Extract a transcript from within a running event loop.

    Args:
        url_or_id: YouTube video URL or 11-character video ID.
        options: Language, timestamp and output-format options.
        settings: Configuration. Loaded from env/YAML if not provided.

    Returns:
        TranscriptResponse; ``success`` is False only for invalid input.
    """
    from yt_transcript.core.orchestrator import TranscriptOrchestrator

    return await TranscriptOrchestrator(settings=settings).extract(url_or_id, options)


def extract_transcript(
    url_or_id: str,
    options: TranscriptOptions | None = None,
    settings: ExtractorSettings | None = None,
) -> TranscriptResponse:
    """Extract a transcript for a single video.

    This is the primary library entry point. It runs its own event loop, so
    call :func:`aextract_transcript` instead from async code.
    """
    return asyncio.run(aextract_transcript(url_or_id, options, settings))


__all__ = [
    "__version__",
    "aextract_transcript",
    "extract_transcript",
    "ExtractorSettings",
    "TranscriptOptions",
    "TranscriptResponse",
]
