# Copyright (c) 2026 Pointmatic
#
# This Source Code Form is subject to the terms of the Mozilla Public
# License, v. 2.0. If a copy of the MPL was not distributed with this
# file, You can obtain one at https://mozilla.org/MPL/2.0/.

"""Caption payload parsing (WebVTT/SRT, XML/TTML, JSON3, plain text).

Every parser returns a list of TranscriptSegment ordered by start time with
no empty texts. A payload with nothing usable yields an empty list; parsers
never raise on malformed content.
"""

from __future__ import annotations

import html
import json
import re
from enum import Enum
from typing import Callable

from yt_transcript.core.models import TranscriptSegment
from yt_transcript.utils.time_fmt import clock_to_seconds, seconds_to_clock

DEFAULT_SEGMENT_DURATION = 3.0


class CaptionFormat(str, Enum):
    WEBVTT = "webvtt"
    XML = "xml"
    JSON3 = "json3"
    TEXT = "text"


_TIMING_RE = re.compile(
    r"((?:\d+:)?\d{1,2}:\d{2}[.,]\d{1,3})\s*-->\s*((?:\d+:)?\d{1,2}:\d{2}[.,]\d{1,3})"
)
_TAG_RE = re.compile(r"</?[A-Za-z][^<>]*>|<\d[\d:.,]*>")
_DIRECTIVE_RE = re.compile(r"\{[^}]*\}")
_WS_RE = re.compile(r"\s+")

_XML_TEXT_RE = re.compile(r"<text\b([^>]*?)(?:/>|>(.*?)</text>)", re.DOTALL)
_XML_P_RE = re.compile(r"<p\b([^>]*?)(?:/>|>(.*?)</p>)", re.DOTALL)
_ATTR_RE = re.compile(r"""([\w:-]+)\s*=\s*(?:"([^"]*)"|'([^']*)')""")

# Non-speech markers seen across caption languages, mapped to one vocabulary.
_TAG_VARIANTS: dict[str, tuple[str, ...]] = {
    "[Music]": (
        "music", "música", "musica", "musique", "musik", "musika", "muziek",
        "muzyka", "музыка", "音楽", "音乐", "음악", "background music",
    ),
    "[Applause]": (
        "applause", "aplausos", "aplauso", "applaudissements", "applaus",
        "applausi", "palakpakan", "аплодисменты", "拍手", "掌声", "박수",
    ),
    "[Laughter]": (
        "laughter", "laughs", "laughing", "risas", "risa", "rires", "rire",
        "lachen", "gelächter", "risate", "tawanan", "смех", "笑", "笑声", "웃음",
    ),
}
_CANONICAL_TAG_RE = {
    canonical: re.compile(
        r"[\[(]\s*(?:" + "|".join(re.escape(v) for v in variants) + r")\s*[\])]",
        re.IGNORECASE,
    )
    for canonical, variants in _TAG_VARIANTS.items()
}
_MUSIC_NOTES_RE = re.compile(r"(?:♪\s*)+♪|♪")


def clean_text(text: str) -> str:
    """Decode entities, strip markup and collapse whitespace."""
    text = html.unescape(html.unescape(text))
    text = _TAG_RE.sub("", text)
    text = text.replace("\xa0", " ")
    return _WS_RE.sub(" ", text).strip()


def detect_format(content: str) -> CaptionFormat:
    """Guess the caption format of a raw payload from its markers."""
    stripped = content.lstrip("\ufeff \t\r\n")
    if stripped[:1] in ("{", "[") and '"events"' in stripped:
        return CaptionFormat.JSON3
    if stripped.startswith("WEBVTT") or _TIMING_RE.search(content):
        return CaptionFormat.WEBVTT
    if "<text" in content or "<p " in content or "<tt" in content:
        return CaptionFormat.XML
    return CaptionFormat.TEXT


def parse_webvtt(content: str) -> list[TranscriptSegment]:
    """Parse WebVTT (and SRT, which shares the cue timing syntax)."""
    segments: list[TranscriptSegment] = []
    start: float | None = None
    end = 0.0
    lines: list[str] = []
    in_block = False

    def flush() -> None:
        if start is None:
            return
        text = clean_text(_DIRECTIVE_RE.sub("", " ".join(lines)))
        if text:
            segments.append(
                TranscriptSegment(start=start, duration=max(0.0, end - start), text=text)
            )

    for raw_line in content.replace("\r\n", "\n").replace("\r", "\n").split("\n"):
        line = raw_line.strip()
        if not line:
            flush()
            start, lines, in_block = None, [], False
            continue
        if in_block:
            continue
        if line.startswith(("WEBVTT", "NOTE", "STYLE", "REGION", "Kind:", "Language:")):
            in_block = line.startswith(("NOTE", "STYLE", "REGION"))
            continue
        timing = _TIMING_RE.search(line)
        if timing:
            flush()
            start = clock_to_seconds(timing.group(1))
            end = clock_to_seconds(timing.group(2)) or 0.0
            lines = []
            continue
        if start is not None:
            lines.append(line)

    flush()
    segments.sort(key=lambda seg: seg.start)
    return segments


def _attrs(raw: str) -> dict[str, str]:
    return {m.group(1): m.group(2) if m.group(2) is not None else m.group(3) for m in _ATTR_RE.finditer(raw)}


def _to_float(value: str | None, default: float | None = None) -> float | None:
    if value is None:
        return default
    try:
        return float(value)
    except ValueError:
        return default


def _ttml_time(value: str | None) -> float | None:
    """TTML times come as clock values or offsets like '12.5s' / '1500ms'."""
    if value is None:
        return None
    value = value.strip()
    if value.endswith("ms"):
        return _to_float(value[:-2], 0.0) / 1000
    if value.endswith("s"):
        return _to_float(value[:-1])
    return clock_to_seconds(value)


def parse_xml(content: str) -> list[TranscriptSegment]:
    """Parse timed-text XML: <text start dur>, srv3 <p t d> or TTML <p begin end>."""
    segments: list[TranscriptSegment] = []

    for match in _XML_TEXT_RE.finditer(content):
        attrs = _attrs(match.group(1))
        start = _to_float(attrs.get("start"))
        if start is None:
            continue
        duration = _to_float(attrs.get("dur"), DEFAULT_SEGMENT_DURATION)
        text = clean_text(match.group(2) or "")
        if text:
            segments.append(TranscriptSegment(start=max(0.0, start), duration=max(0.0, duration), text=text))

    if not segments:
        for match in _XML_P_RE.finditer(content):
            attrs = _attrs(match.group(1))
            body = re.sub(r"<br\s*/?>", " ", match.group(2) or "")
            text = clean_text(body)
            if not text:
                continue
            if "t" in attrs:
                start = _to_float(attrs["t"], 0.0) / 1000
                duration = _to_float(attrs.get("d"), DEFAULT_SEGMENT_DURATION * 1000) / 1000
            elif "begin" in attrs:
                start = _ttml_time(attrs["begin"])
                if start is None:
                    continue
                end = _ttml_time(attrs.get("end"))
                dur = _ttml_time(attrs.get("dur"))
                if end is not None:
                    duration = end - start
                elif dur is not None:
                    duration = dur
                else:
                    duration = DEFAULT_SEGMENT_DURATION
            else:
                continue
            segments.append(TranscriptSegment(start=max(0.0, start), duration=max(0.0, duration), text=text))

    segments.sort(key=lambda seg: seg.start)
    return segments


def parse_json3(content: str) -> list[TranscriptSegment]:
    """Parse the JSON3 timed-text format (events with utf8 segs, times in ms)."""
    try:
        data = json.loads(content)
    except (json.JSONDecodeError, TypeError):
        return []

    events = data.get("events") if isinstance(data, dict) else None
    if not isinstance(events, list):
        return []

    segments: list[TranscriptSegment] = []
    for event in events:
        if not isinstance(event, dict):
            continue
        segs = event.get("segs")
        if not isinstance(segs, list):
            continue
        text = clean_text(
            "".join(str(seg.get("utf8", "")) for seg in segs if isinstance(seg, dict))
        )
        if not text:
            continue
        start = _to_float(str(event.get("tStartMs", 0)), 0.0) / 1000
        duration = _to_float(
            str(event.get("dDurationMs", DEFAULT_SEGMENT_DURATION * 1000)),
            DEFAULT_SEGMENT_DURATION * 1000,
        ) / 1000
        segments.append(TranscriptSegment(start=max(0.0, start), duration=max(0.0, duration), text=text))

    segments.sort(key=lambda seg: seg.start)
    return segments


def parse_simple_text(content: str) -> list[TranscriptSegment]:
    """Fallback: one synthetic 3-second slot per non-blank line."""
    segments: list[TranscriptSegment] = []
    current = 0.0
    for line in content.splitlines():
        text = clean_text(line)
        if not text:
            continue
        segments.append(TranscriptSegment(start=current, duration=DEFAULT_SEGMENT_DURATION, text=text))
        current += DEFAULT_SEGMENT_DURATION
    return segments


PARSERS: dict[CaptionFormat, Callable[[str], list[TranscriptSegment]]] = {
    CaptionFormat.WEBVTT: parse_webvtt,
    CaptionFormat.XML: parse_xml,
    CaptionFormat.JSON3: parse_json3,
    CaptionFormat.TEXT: parse_simple_text,
}


def parse_captions(content: str) -> list[TranscriptSegment]:
    """Detect the payload format and parse it into segments."""
    if not content or not content.strip():
        return []
    return PARSERS[detect_format(content)](content)


def canonicalize_tags(text: str) -> str:
    """Map language-specific non-speech markers onto [Music]/[Applause]/[Laughter]."""
    for canonical, pattern in _CANONICAL_TAG_RE.items():
        text = pattern.sub(canonical, text)
    return _MUSIC_NOTES_RE.sub("[Music]", text)


def format_as_flat_text(segments: list[TranscriptSegment]) -> str:
    """Join segments into natural-flowing prose."""
    text = " ".join(seg.text for seg in segments)
    return normalize_prose(text)


def normalize_prose(text: str) -> str:
    text = canonicalize_tags(text)
    text = _WS_RE.sub(" ", text).strip()
    text = re.sub(r"\s+([.!?,])", r"\1", text)
    text = re.sub(r"([.!?])(?=[A-Z])", r"\1 ", text)
    text = re.sub(r",(?=[^\W\d_])", ", ", text)
    return text


def format_with_timestamps(segments: list[TranscriptSegment]) -> str:
    """One '[start - end] text' line per segment."""
    return "\n".join(
        f"[{seconds_to_clock(seg.start)} - {seconds_to_clock(seg.end)}] "
        f"{_WS_RE.sub(' ', canonicalize_tags(seg.text)).strip()}"
        for seg in segments
    )
