"""Official timed-text captions endpoint, tried over language/format permutations."""

from __future__ import annotations

import logging
from urllib.parse import parse_qs, urlencode, urlparse

from yt_transcript.core.models import StrategyResult, TranscriptOptions, TranscriptSegment
from yt_transcript.services.content_parser import CaptionFormat, detect_format, parse_captions
from yt_transcript.services.http import browser_headers, first_success, get_text
from yt_transcript.services.id_parser import watch_url
from yt_transcript.strategies.base import StrategyContext

logger = logging.getLogger("yt_transcript")

TIMEDTEXT_URL = "https://www.youtube.com/api/timedtext"
CAPTION_FORMATS = ("srv3", "json3", "vtt")
CAPTION_ACCEPT = "text/xml,application/xml,application/json,text/vtt,text/plain,*/*"


def caption_api_attempts(video_id: str, language: str | None) -> list[str]:
    """Ordered timed-text URLs: requested language, en, en-US, then no language."""
    languages: list[str | None] = list(dict.fromkeys(
        lang for lang in (language, "en", "en-US") if lang
    ))
    languages.append(None)

    urls = []
    for lang in languages:
        for fmt in CAPTION_FORMATS:
            params = {"v": video_id}
            if lang:
                params["lang"] = lang
            params["fmt"] = fmt
            urls.append(f"{TIMEDTEXT_URL}?{urlencode(params)}")
    return urls


async def download_captions(
    ctx: StrategyContext,
    urls: list[str],
    *,
    referer: str | None = None,
    label: str,
) -> tuple[str, list[TranscriptSegment]] | None:
    """Fetch caption URLs in order; return the first (url, segments) with real markup."""
    headers = browser_headers(ctx.settings, accept=CAPTION_ACCEPT)
    if referer:
        headers["Referer"] = referer

    async def fetch(url: str) -> tuple[str, list[TranscriptSegment]] | None:
        body = await get_text(ctx.client, url, headers=headers)
        if not body.strip() or detect_format(body) is CaptionFormat.TEXT:
            return None
        segments = parse_captions(body)
        return (url, segments) if segments else None

    return await first_success(
        urls, fetch, base_delay=ctx.settings.backoff_base_delay, label=label
    )


async def fetch_official_captions(
    video_id: str, options: TranscriptOptions, ctx: StrategyContext
) -> StrategyResult | None:
    found = await download_captions(
        ctx,
        caption_api_attempts(video_id, options.language),
        referer=watch_url(video_id),
        label="official-captions-api",
    )
    if found is None:
        logger.info("No caption markup from timed-text endpoint for %s", video_id)
        return None

    url, segments = found
    language = parse_qs(urlparse(url).query).get("lang", [None])[0]
    return StrategyResult(
        segments=segments,
        language=language or options.language,
        is_generated=False,
        quality="high",
    )
