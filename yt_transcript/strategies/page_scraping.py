"""Watch-page and embed-page scraping for the embedded caption manifest."""

from __future__ import annotations

import logging

import httpx

from yt_transcript.core.models import CaptionTrack, StrategyResult, TranscriptOptions
from yt_transcript.services.caption_tracks import (
    CaptionManifestNotFound,
    extract_caption_tracks,
    preferred_languages,
    select_track,
    track_download_urls,
)
from yt_transcript.services.http import HttpStatusError, browser_headers, get_text
from yt_transcript.services.id_parser import embed_url, watch_url
from yt_transcript.strategies.base import StrategyContext
from yt_transcript.strategies.captions_api import download_captions

logger = logging.getLogger("yt_transcript")

HTML_ACCEPT = "text/html,application/xhtml+xml,application/xml;q=0.9,*/*;q=0.8"


async def scrape_page_captions(
    page_url: str,
    video_id: str,
    options: TranscriptOptions,
    ctx: StrategyContext,
    *,
    label: str,
) -> StrategyResult | None:
    """Fetch a page, pick the best caption track from its manifest and download it."""
    try:
        page = await get_text(
            ctx.client, page_url, headers=browser_headers(ctx.settings, accept=HTML_ACCEPT)
        )
    except (HttpStatusError, httpx.HTTPError) as exc:
        logger.info("%s: page fetch failed for %s: %s", label, video_id, exc)
        return None

    try:
        tracks = extract_caption_tracks(page)
    except CaptionManifestNotFound:
        logger.info("%s: no caption manifest on page for %s", label, video_id)
        return None

    track: CaptionTrack | None = select_track(
        tracks, languages=preferred_languages(options.language)
    )
    if track is None or not track.base_url:
        return None

    logger.debug(
        "%s: selected track %s (generated=%s) for %s",
        label,
        track.language_code,
        track.is_generated,
        video_id,
    )
    found = await download_captions(
        ctx, track_download_urls(track.base_url), referer=page_url, label=label
    )
    if found is None:
        return None

    _, segments = found
    return StrategyResult(
        segments=segments,
        language=track.language_code or options.language,
        is_generated=track.is_generated,
        quality="medium" if track.is_generated else "high",
    )


async def scrape_watch_page(
    video_id: str, options: TranscriptOptions, ctx: StrategyContext
) -> StrategyResult | None:
    return await scrape_page_captions(
        watch_url(video_id), video_id, options, ctx, label="watch-page-scraping"
    )


async def scrape_embed_page(
    video_id: str, options: TranscriptOptions, ctx: StrategyContext
) -> StrategyResult | None:
    return await scrape_page_captions(
        embed_url(video_id), video_id, options, ctx, label="embed-page-scraping"
    )
