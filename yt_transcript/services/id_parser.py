"""URL/ID parsing and validation."""

from __future__ import annotations

import re

_VIDEO_ID_RE = re.compile(r"^[A-Za-z0-9_-]{11}$")

# Tried in order; the first capture that is also a valid ID wins.
_URL_PATTERNS: tuple[re.Pattern[str], ...] = (
    re.compile(r"youtube(?:-nocookie)?\.com/watch\?(?:[^#\s]*&)?v=([^&#?/\s]+)", re.IGNORECASE),
    re.compile(r"youtu\.be/([^&#?/\s]+)", re.IGNORECASE),
    re.compile(r"youtube(?:-nocookie)?\.com/embed/([^&#?/\s]+)", re.IGNORECASE),
    re.compile(r"youtube\.com/shorts/([^&#?/\s]+)", re.IGNORECASE),
    re.compile(r"youtube\.com/live/([^&#?/\s]+)", re.IGNORECASE),
    re.compile(r"youtube\.com/v/([^&#?/\s]+)", re.IGNORECASE),
)


def validate_video_id(candidate: str) -> bool:
    """Check if a string looks like a valid YouTube video ID."""
    return bool(_VIDEO_ID_RE.match(candidate))


def extract_video_id(input_str: str) -> str | None:
    """Extract a YouTube video ID from a URL or raw ID string.

    Returns None if input cannot be parsed.
    """
    text = (input_str or "").strip()
    if not text:
        return None

    if validate_video_id(text):
        return text

    for pattern in _URL_PATTERNS:
        match = pattern.search(text)
        if match and validate_video_id(match.group(1)):
            return match.group(1)

    return None


def watch_url(video_id: str) -> str:
    return f"https://www.youtube.com/watch?v={video_id}"


def embed_url(video_id: str) -> str:
    return f"https://www.youtube.com/embed/{video_id}"
