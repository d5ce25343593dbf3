"""YouTube Data API v3: video details plus caption-track listing.

The Data API cannot download caption content for videos the key's owner
does not manage, so this strategy lists the tracks, then tries the public
timed-text endpoint for the best listed language. When that yields
nothing it reports a partial result carrying only the video details.
"""

from __future__ import annotations

import asyncio
import logging

from googleapiclient.discovery import build
from googleapiclient.errors import HttpError

from yt_transcript.core.models import CaptionTrack, StrategyResult, TranscriptOptions
from yt_transcript.services.caption_tracks import preferred_languages, select_track
from yt_transcript.services.id_parser import watch_url
from yt_transcript.services.metadata import parse_iso8601_duration
from yt_transcript.strategies.base import StrategyContext
from yt_transcript.strategies.captions_api import caption_api_attempts, download_captions

logger = logging.getLogger("yt_transcript")

PARTIAL_NOTE = (
    "Video details were retrieved from the YouTube Data API, but caption "
    "content is only downloadable there by the video owner."
)


class DataApiError(Exception):
    """Raised when the Data API request fails."""


def _query_blocking(video_id: str, api_key: str) -> tuple[dict | None, list[dict]]:
    try:
        youtube = build("youtube", "v3", developerKey=api_key, cache_discovery=False)
        videos = youtube.videos().list(part="snippet,contentDetails", id=video_id).execute()
        items = videos.get("items", [])
        if not items:
            return None, []
        captions = youtube.captions().list(part="snippet", videoId=video_id).execute()
    except HttpError as exc:
        raise DataApiError(f"YouTube API request failed for {video_id}: {exc}") from exc
    except Exception as exc:
        raise DataApiError(f"YouTube API error for {video_id}: {exc}") from exc
    return items[0], captions.get("items", [])


def _caption_tracks(items: list[dict]) -> list[CaptionTrack]:
    tracks = []
    for item in items:
        snippet = item.get("snippet", {})
        if not snippet.get("language"):
            continue
        tracks.append(
            CaptionTrack(
                language_code=snippet["language"],
                is_generated=str(snippet.get("trackKind", "")).lower() == "asr",
                name=snippet.get("name") or None,
                track_id=item.get("id"),
            )
        )
    return tracks


async def fetch_data_api(
    video_id: str, options: TranscriptOptions, ctx: StrategyContext
) -> StrategyResult | None:
    api_key = ctx.settings.official_api_key
    if not api_key:
        return None

    try:
        video, caption_items = await asyncio.to_thread(_query_blocking, video_id, api_key)
    except DataApiError as exc:
        logger.warning("official-data-api: %s", exc)
        return None

    if video is None:
        logger.info("official-data-api: video %s not found", video_id)
        return None

    snippet = video.get("snippet", {})
    details = video.get("contentDetails", {})
    title = snippet.get("title")
    author = snippet.get("channelTitle")
    duration = parse_iso8601_duration(details.get("duration", ""))

    track = select_track(
        _caption_tracks(caption_items), languages=preferred_languages(options.language)
    )
    if track is not None:
        found = await download_captions(
            ctx,
            caption_api_attempts(video_id, track.language_code),
            referer=watch_url(video_id),
            label="official-data-api",
        )
        if found is not None:
            _, segments = found
            return StrategyResult(
                segments=segments,
                language=track.language_code,
                title=title,
                author=author,
                duration=duration,
                is_generated=track.is_generated,
                quality="medium" if track.is_generated else "high",
            )

    return StrategyResult(
        language=track.language_code if track is not None else None,
        title=title,
        author=author,
        duration=duration,
        partial=True,
        note=PARTIAL_NOTE,
    )
