"""Third-party transcript services, tried in configured order."""

from __future__ import annotations

import logging
from dataclasses import dataclass

from yt_transcript.core.models import StrategyResult, TranscriptOptions, TranscriptSegment
from yt_transcript.services.content_parser import (
    CaptionFormat,
    clean_text,
    detect_format,
    parse_captions,
    parse_simple_text,
)
from yt_transcript.services.http import first_success, get_json
from yt_transcript.strategies.base import StrategyContext

logger = logging.getLogger("yt_transcript")

KEY_MARKER = "{key}"
MILLIS_MARKER = "{ms}"


@dataclass(frozen=True)
class ThirdPartyEndpoint:
    """One expanded endpoint template.

    ``keyed`` endpoints get the API key as an ``x-api-key`` header;
    ``millis`` endpoints report offsets and durations in milliseconds.
    """

    url: str
    keyed: bool = False
    millis: bool = False

    def __str__(self) -> str:
        return self.url


def parse_endpoint_template(template: str) -> tuple[str, bool, bool]:
    """Strip the leading markers off a template: (template, keyed, millis)."""
    keyed = millis = False
    while True:
        if template.startswith(KEY_MARKER):
            keyed = True
            template = template[len(KEY_MARKER):]
        elif template.startswith(MILLIS_MARKER):
            millis = True
            template = template[len(MILLIS_MARKER):]
        else:
            return template, keyed, millis


def third_party_attempts(
    templates: list[str], video_id: str, language: str, api_key: str | None
) -> list[ThirdPartyEndpoint]:
    """Expand endpoint templates; keyed endpoints are dropped without a key."""
    endpoints = []
    for raw in templates:
        template, keyed, millis = parse_endpoint_template(raw)
        if keyed and not api_key:
            continue
        url = template.format(video_id=video_id, language=language)
        endpoints.append(ThirdPartyEndpoint(url, keyed=keyed, millis=millis))
    return endpoints


def _number(entry: dict, *names: str) -> float | None:
    """First of ``names`` that holds a usable number."""
    for name in names:
        value = entry.get(name)
        if value is None:
            continue
        try:
            return float(value)
        except (TypeError, ValueError):
            continue
    return None


def _segments_from_list(items: list, *, millis: bool) -> list[TranscriptSegment]:
    scale = 1000.0 if millis else 1.0
    segments = []
    for index, item in enumerate(items):
        if isinstance(item, str):
            text = clean_text(item)
            if text:
                segments.append(TranscriptSegment(start=index * 3.0, text=text))
            continue
        if not isinstance(item, dict):
            continue
        text = clean_text(str(item.get("text") or item.get("snippet") or ""))
        if not text:
            continue
        start = _number(item, "start", "offset")
        duration = _number(item, "duration", "dur")
        segments.append(
            TranscriptSegment(
                start=max(0.0, (start or 0.0) / scale),
                duration=max(0.0, duration / scale) if duration is not None else 3.0,
                text=text,
            )
        )
    segments.sort(key=lambda seg: seg.start)
    return segments


def _segments_from_string(body: str) -> list[TranscriptSegment]:
    if detect_format(body) is CaptionFormat.TEXT:
        return parse_simple_text(body)
    return parse_captions(body)


def parse_third_party_payload(payload: object, *, millis: bool = False) -> list[TranscriptSegment]:
    """Normalize the response shapes these services return.

    Accepts a bare list of entries, or an object carrying the transcript
    under ``transcript``, ``content`` or ``text`` as either a list of
    entries or a single string.
    """
    if isinstance(payload, list):
        return _segments_from_list(payload, millis=millis)
    if isinstance(payload, str):
        return _segments_from_string(payload)
    if not isinstance(payload, dict):
        return []

    for key in ("transcript", "content", "text"):
        value = payload.get(key)
        if isinstance(value, list):
            return _segments_from_list(value, millis=millis)
        if isinstance(value, str) and value.strip():
            return _segments_from_string(value)
    return []


async def fetch_third_party(
    video_id: str, options: TranscriptOptions, ctx: StrategyContext
) -> StrategyResult | None:
    settings = ctx.settings
    api_key = settings.third_party_api_key
    endpoints = third_party_attempts(
        settings.third_party_endpoints, video_id, options.language, api_key
    )
    if not endpoints:
        return None

    async def fetch(endpoint: ThirdPartyEndpoint) -> tuple[list[TranscriptSegment], str | None] | None:
        headers = {"Accept": "application/json"}
        if endpoint.keyed:
            headers["x-api-key"] = api_key
        payload = await get_json(ctx.client, endpoint.url, headers=headers)
        segments = parse_third_party_payload(payload, millis=endpoint.millis)
        if not segments:
            return None
        language = payload.get("lang") if isinstance(payload, dict) else None
        return segments, language

    found = await first_success(
        endpoints, fetch, base_delay=settings.backoff_base_delay, label="third-party-api"
    )
    if found is None:
        return None

    segments, language = found
    return StrategyResult(
        segments=segments,
        language=language or options.language,
        quality="medium",
    )
