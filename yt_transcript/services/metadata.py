"""Lightweight video metadata lookups (oEmbed, Data API durations)."""

from __future__ import annotations

import logging
import re
from urllib.parse import quote_plus

import httpx

from yt_transcript.services.http import HttpStatusError, get_json
from yt_transcript.services.id_parser import watch_url

logger = logging.getLogger("yt_transcript")

OEMBED_URL = "https://www.youtube.com/oembed?url={url}&format=json"


async def fetch_oembed(client: httpx.AsyncClient, video_id: str) -> dict[str, str]:
    """Best-effort title/author lookup via the public oEmbed endpoint.

    Returns an empty dict when the endpoint is unreachable or the video is
    private/unknown; never raises for network or decoding problems.
    """
    url = OEMBED_URL.format(url=quote_plus(watch_url(video_id)))
    try:
        data = await get_json(client, url)
    except (HttpStatusError, httpx.HTTPError, ValueError) as exc:
        logger.debug("oEmbed lookup failed for %s: %s", video_id, exc)
        return {}

    if not isinstance(data, dict):
        return {}

    result: dict[str, str] = {}
    if data.get("title"):
        result["title"] = str(data["title"])
    if data.get("author_name"):
        result["author"] = str(data["author_name"])
    if data.get("thumbnail_url"):
        result["thumbnail"] = str(data["thumbnail_url"])
    return result


def parse_iso8601_duration(duration: str) -> float | None:
    """Parse an ISO 8601 duration (e.g. PT4M13S) to seconds."""
    match = re.match(
        r"^P(?:(\d+)D)?T?(?:(\d+)H)?(?:(\d+)M)?(?:(\d+)S)?$",
        duration or "",
    )
    if not match or duration in ("P", "PT"):
        return None
    days = int(match.group(1) or 0)
    hours = int(match.group(2) or 0)
    minutes = int(match.group(3) or 0)
    seconds = int(match.group(4) or 0)
    return float(days * 86400 + hours * 3600 + minutes * 60 + seconds)
