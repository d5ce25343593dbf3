# Copyright (c) 2026 Pointmatic
#
# This Source Code Form is subject to the terms of the Mozilla Public
# License, v. 2.0. If a copy of the MPL was not distributed with this
# file, You can obtain one at https://mozilla.org/MPL/2.0/.

"""AI audio transcription: audio-only stream via yt-dlp, then speech-to-text."""

from __future__ import annotations

import asyncio
import logging
from dataclasses import dataclass, field

import httpx
import yt_dlp

from yt_transcript.core.models import StrategyResult, TranscriptOptions, TranscriptSegment
from yt_transcript.services.content_parser import clean_text
from yt_transcript.services.http import HttpStatusError
from yt_transcript.services.id_parser import watch_url
from yt_transcript.strategies.base import StrategyContext

logger = logging.getLogger("yt_transcript")


class AudioError(Exception):
    """Raised when the audio stream cannot be resolved or downloaded."""


class AudioTooLarge(AudioError):
    """Raised when the audio stream exceeds the upload ceiling."""

    def __init__(self, size: int, limit: int) -> None:
        super().__init__(f"Audio is {size} bytes, over the {limit} byte limit")
        self.size = size
        self.limit = limit


@dataclass
class AudioStream:
    url: str
    ext: str = "m4a"
    filesize: int | None = None
    headers: dict[str, str] = field(default_factory=dict)


def _pick_audio_format(formats: list[dict]) -> dict | None:
    """Smallest audio-only format; the upload ceiling matters more than bitrate."""
    audio_only = [
        f for f in formats
        if f.get("url") and f.get("vcodec") == "none" and f.get("acodec") not in (None, "none")
    ]
    if not audio_only:
        return None
    return min(
        audio_only,
        key=lambda f: f.get("filesize") or f.get("filesize_approx") or float("inf"),
    )


def resolve_audio_stream(video_id: str) -> AudioStream:
    """Ask yt-dlp for the video's formats and return the audio-only stream."""
    ydl_opts = {
        "quiet": True,
        "no_warnings": True,
        "no_color": True,
        "skip_download": True,
        "format": "bestaudio/best",
    }
    try:
        with yt_dlp.YoutubeDL(ydl_opts) as ydl:
            info = ydl.extract_info(watch_url(video_id), download=False)
    except yt_dlp.utils.DownloadError as exc:
        raise AudioError(f"Failed to resolve audio for {video_id}: {exc}") from exc

    if info is None:
        raise AudioError(f"No stream info returned for {video_id}")

    chosen = _pick_audio_format(info.get("formats") or [])
    if chosen is None:
        raise AudioError(f"No audio-only format for {video_id}")

    size = chosen.get("filesize") or chosen.get("filesize_approx")
    return AudioStream(
        url=chosen["url"],
        ext=chosen.get("ext") or "m4a",
        filesize=int(size) if size else None,
        headers=dict(chosen.get("http_headers") or {}),
    )


async def download_audio(
    client: httpx.AsyncClient, stream: AudioStream, *, max_bytes: int
) -> bytes:
    """Stream the audio into memory, aborting once it passes max_bytes."""
    if stream.filesize and stream.filesize > max_bytes:
        raise AudioTooLarge(stream.filesize, max_bytes)

    async with client.stream("GET", stream.url, headers=stream.headers) as response:
        if response.status_code >= 400:
            raise HttpStatusError(response.status_code, stream.url)

        declared = response.headers.get("Content-Length")
        if declared and declared.isdigit() and int(declared) > max_bytes:
            raise AudioTooLarge(int(declared), max_bytes)

        chunks = bytearray()
        async for chunk in response.aiter_bytes():
            chunks.extend(chunk)
            if len(chunks) > max_bytes:
                raise AudioTooLarge(len(chunks), max_bytes)
    return bytes(chunks)


def segments_from_transcription(payload: dict) -> list[TranscriptSegment]:
    """Map a verbose_json transcription to segments.

    Falls back to a single segment spanning the reported duration when the
    service returns only the full text.
    """
    segments = []
    for item in payload.get("segments") or []:
        if not isinstance(item, dict):
            continue
        text = clean_text(str(item.get("text", "")))
        if not text:
            continue
        start = max(0.0, float(item.get("start") or 0.0))
        end = float(item.get("end") or start)
        segments.append(
            TranscriptSegment(start=start, duration=max(0.0, end - start), text=text)
        )
    if segments:
        segments.sort(key=lambda seg: seg.start)
        return segments

    text = clean_text(str(payload.get("text") or ""))
    if not text:
        return []
    duration = payload.get("duration")
    return [
        TranscriptSegment(
            start=0.0,
            duration=float(duration) if duration else 3.0,
            text=text,
        )
    ]


async def transcribe_audio(
    ctx: StrategyContext, audio: bytes, *, filename: str, language: str
) -> dict:
    settings = ctx.settings
    response = await ctx.client.post(
        settings.speech_to_text_url,
        headers={"Authorization": f"Bearer {settings.speech_to_text_api_key}"},
        data={
            "model": settings.speech_to_text_model,
            "response_format": "verbose_json",
            "language": language,
        },
        files={"file": (filename, audio, "application/octet-stream")},
        timeout=settings.audio_timeout,
    )
    if response.status_code >= 400:
        raise HttpStatusError(response.status_code, settings.speech_to_text_url)
    payload = response.json()
    if not isinstance(payload, dict):
        raise ValueError("Unexpected transcription payload")
    return payload


async def fetch_audio_transcription(
    video_id: str, options: TranscriptOptions, ctx: StrategyContext
) -> StrategyResult | None:
    settings = ctx.settings
    if not settings.speech_to_text_api_key:
        return None

    try:
        stream = await asyncio.to_thread(resolve_audio_stream, video_id)
        audio = await download_audio(ctx.client, stream, max_bytes=settings.max_audio_bytes)
        logger.debug("audio-transcription: %d bytes of %s audio", len(audio), stream.ext)
        payload = await transcribe_audio(
            ctx, audio, filename=f"{video_id}.{stream.ext}", language=options.language
        )
        segments = segments_from_transcription(payload)
    except AudioTooLarge as exc:
        logger.warning("audio-transcription: %s for %s", exc, video_id)
        return None
    except (AudioError, HttpStatusError, httpx.HTTPError, TypeError, ValueError) as exc:
        logger.warning("audio-transcription failed for %s: %s", video_id, exc)
        return None

    if not segments:
        return None
    return StrategyResult(
        segments=segments,
        language=payload.get("language") or options.language,
        is_generated=True,
        quality="basic",
    )
