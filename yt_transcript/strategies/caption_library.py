"""Transcript fetching via youtube-transcript-api."""

from __future__ import annotations

import asyncio
import logging

from youtube_transcript_api import YouTubeTranscriptApi
from youtube_transcript_api import TranscriptsDisabled

from yt_transcript.core.models import StrategyResult, TranscriptOptions, TranscriptSegment
from yt_transcript.services.caption_tracks import preferred_languages, select_track
from yt_transcript.services.content_parser import clean_text
from yt_transcript.strategies.base import StrategyContext

logger = logging.getLogger("yt_transcript")


class CaptionLibraryError(Exception):
    """Raised when the caption library cannot list or fetch a transcript."""


def _fetch_blocking(video_id: str, languages: list[str]) -> StrategyResult | None:
    api = YouTubeTranscriptApi()

    try:
        transcript_list = api.list(video_id)
    except TranscriptsDisabled as exc:
        raise CaptionLibraryError(f"Transcripts are disabled for {video_id}") from exc
    except Exception as exc:
        raise CaptionLibraryError(f"Failed to list transcripts for {video_id}: {exc}") from exc

    available = list(transcript_list)
    selected = select_track(available, languages=languages)
    if selected is None:
        return None

    try:
        fetched = selected.fetch()
    except Exception as exc:
        raise CaptionLibraryError(f"Failed to fetch transcript for {video_id}: {exc}") from exc

    segments = []
    for snippet in fetched:
        text = clean_text(snippet.text)
        if text:
            segments.append(
                TranscriptSegment(
                    start=max(0.0, snippet.start),
                    duration=max(0.0, snippet.duration),
                    text=text,
                )
            )
    if not segments:
        return None

    segments.sort(key=lambda seg: seg.start)
    return StrategyResult(
        segments=segments,
        language=fetched.language_code,
        is_generated=fetched.is_generated,
        quality="medium" if fetched.is_generated else "high",
    )


async def fetch_with_caption_library(
    video_id: str, options: TranscriptOptions, ctx: StrategyContext
) -> StrategyResult | None:
    """Run the blocking library client in a worker thread."""
    try:
        return await asyncio.to_thread(
            _fetch_blocking, video_id, preferred_languages(options.language)
        )
    except CaptionLibraryError as exc:
        logger.info("caption-library: %s", exc)
        return None
