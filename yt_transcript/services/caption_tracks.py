# Copyright (c) 2026 Pointmatic
#
# This Source Code Form is subject to the terms of the Mozilla Public
# License, v. 2.0. If a copy of the MPL was not distributed with this
# file, You can obtain one at https://mozilla.org/MPL/2.0/.

"""Caption-track manifest discovery in watch/embed HTML and track selection."""

from __future__ import annotations

import json
import logging
import re

from yt_transcript.core.models import CaptionTrack

logger = logging.getLogger("yt_transcript")

_decoder = json.JSONDecoder()

# Where the player response has been embedded in page HTML over time. Each
# pattern ends right before a JSON value; tried in order.
MANIFEST_PATTERNS: tuple[re.Pattern[str], ...] = (
    re.compile(r"ytInitialPlayerResponse\s*=\s*"),
    re.compile(r'"playerResponse"\s*:\s*'),
    re.compile(r'"embedded_player_response"\s*:\s*'),
    re.compile(r'"captions"\s*:\s*(?=\{)'),
    re.compile(r'"captionTracks"\s*:\s*'),
)


class CaptionManifestNotFound(Exception):
    """Raised when page HTML holds no decodable caption manifest."""


def extract_caption_tracks(page_html: str) -> list[CaptionTrack]:
    """Locate the caption manifest in page HTML and return its tracks.

    Raises CaptionManifestNotFound when no pattern yields any track.
    """
    for pattern in MANIFEST_PATTERNS:
        for match in pattern.finditer(page_html):
            value = _decode_at(page_html, match.end())
            if value is None:
                continue
            tracks = _tracks_from(value)
            if tracks:
                logger.debug("Caption manifest found via %s", pattern.pattern)
                return tracks
    raise CaptionManifestNotFound("No caption tracks found in page")


def _decode_at(text: str, index: int) -> object | None:
    try:
        value, _ = _decoder.raw_decode(text, index)
    except json.JSONDecodeError:
        return None
    # The embed page carries the player response as a JSON-encoded string.
    if isinstance(value, str) and value.lstrip().startswith("{"):
        try:
            return json.loads(value)
        except json.JSONDecodeError:
            return None
    return value


def _tracks_from(value: object) -> list[CaptionTrack]:
    if isinstance(value, dict):
        if "captions" in value:
            value = value["captions"]
        if isinstance(value, dict) and "playerCaptionsTracklistRenderer" in value:
            value = value["playerCaptionsTracklistRenderer"]
        if isinstance(value, dict):
            value = value.get("captionTracks")
    if not isinstance(value, list):
        return []
    return [track for track in (_to_track(raw) for raw in value) if track is not None]


def _to_track(raw: object) -> CaptionTrack | None:
    if not isinstance(raw, dict) or not raw.get("baseUrl"):
        return None
    name = raw.get("name") or {}
    if isinstance(name, dict):
        label = name.get("simpleText") or "".join(
            run.get("text", "") for run in name.get("runs", []) if isinstance(run, dict)
        )
    else:
        label = str(name)
    vss_id = str(raw.get("vssId", ""))
    return CaptionTrack(
        language_code=str(raw.get("languageCode", "")),
        is_generated=raw.get("kind") == "asr" or vss_id.startswith("a."),
        base_url=str(raw["baseUrl"]).replace("\\u0026", "&"),
        name=label or None,
        track_id=vss_id or None,
    )


def select_track(
    available: list,
    *,
    languages: list[str],
    allow_generated: bool = True,
    allow_any_language: bool = True,
) -> object | None:
    """Select the best caption track from available options.

    Works on anything exposing ``language_code`` and ``is_generated``.

    A track matches a language on its exact code or a regional variant of
    it ("en" matches "en-US"), exact codes first.

    Priority:
    1. Manual track in a preferred language (in order).
    2. Generated track in that language (if allow_generated).
    3. Any manual track (if allow_any_language).
    4. Any generated track (if allow_any_language and allow_generated).
    5. None.
    """
    for lang in dict.fromkeys(languages):
        candidates = _matching_tracks(available, lang)
        manual = [t for t in candidates if not t.is_generated]
        generated = [t for t in candidates if t.is_generated]

        if manual:
            return manual[0]
        if allow_generated and generated:
            return generated[0]

    if allow_any_language:
        all_manual = [t for t in available if not t.is_generated]
        all_generated = [t for t in available if t.is_generated]

        if all_manual:
            return all_manual[0]
        if allow_generated and all_generated:
            return all_generated[0]

    return None


def _matching_tracks(available: list, lang: str) -> list:
    exact = [t for t in available if t.language_code == lang]
    regional = [t for t in available if t.language_code.startswith(lang + "-")]
    return exact + regional


def preferred_languages(language: str | None) -> list[str]:
    """Requested language first, then English."""
    return list(dict.fromkeys([lang for lang in (language, "en") if lang]))


def track_download_urls(base_url: str) -> list[str]:
    """Attempt templates for downloading a track's content."""
    urls = [base_url]
    if "fmt=" not in base_url:
        sep = "&" if "?" in base_url else "?"
        urls.extend(f"{base_url}{sep}fmt={fmt}" for fmt in ("srv3", "json3", "vtt"))
    return urls
