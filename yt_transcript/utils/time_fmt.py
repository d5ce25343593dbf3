"""Timestamp formatting and parsing helpers (clock, VTT, SRT)."""

from __future__ import annotations

import re

_CLOCK_RE = re.compile(r"^(?:(\d+):)?(\d{1,2}):(\d{1,2})(?:[.,](\d{1,3}))?$")


def seconds_to_clock(seconds: float) -> str:
    """Convert seconds to a short display timestamp: MM:SS, or H:MM:SS past an hour."""
    seconds = max(0.0, seconds)
    total = int(seconds)
    h = total // 3600
    m = (total % 3600) // 60
    s = total % 60
    if h:
        return f"{h}:{m:02d}:{s:02d}"
    return f"{m:02d}:{s:02d}"


def seconds_to_srt(seconds: float) -> str:
    """Convert seconds to SRT timestamp: HH:MM:SS,mmm"""
    seconds = max(0.0, seconds)
    h = int(seconds // 3600)
    m = int((seconds % 3600) // 60)
    s = int(seconds % 60)
    ms = int(round((seconds % 1) * 1000))
    if ms >= 1000:
        ms = 999
    return f"{h:02d}:{m:02d}:{s:02d},{ms:03d}"


def clock_to_seconds(value: str) -> float | None:
    """Parse HH:MM:SS.mmm, MM:SS.mmm or SRT-style HH:MM:SS,mmm into seconds.

    Returns None for anything that is not a clock value.
    """
    match = _CLOCK_RE.match(value.strip())
    if not match:
        return None
    hours = int(match.group(1) or 0)
    minutes = int(match.group(2))
    secs = int(match.group(3))
    fraction = match.group(4) or "0"
    millis = int(fraction.ljust(3, "0"))
    return hours * 3600 + minutes * 60 + secs + millis / 1000
