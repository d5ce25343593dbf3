"""TranscriptResponse construction and transcript rendering."""

from __future__ import annotations

import json

from yt_transcript.core.models import (
    ExtractionAttempt,
    StrategyResult,
    TranscriptMetadata,
    TranscriptOptions,
    TranscriptResponse,
    TranscriptSegment,
)
from yt_transcript.services.content_parser import (
    canonicalize_tags,
    format_as_flat_text,
    format_with_timestamps,
)
from yt_transcript.services.id_parser import watch_url
from yt_transcript.utils.time_fmt import seconds_to_srt

FALLBACK_METHOD = "structured-fallback"


def render_srt(segments: list[TranscriptSegment]) -> str:
    parts = []
    for i, seg in enumerate(segments, start=1):
        parts.append(str(i))
        parts.append(f"{seconds_to_srt(seg.start)} --> {seconds_to_srt(seg.end)}")
        parts.append(canonicalize_tags(seg.text))
        parts.append("")
    return "\n".join(parts)


def render_json(segments: list[TranscriptSegment]) -> str:
    return json.dumps(
        [seg.model_dump(mode="json") for seg in segments],
        ensure_ascii=False,
    )


def render_transcript(segments: list[TranscriptSegment], options: TranscriptOptions) -> str:
    """Render segments in the requested output mode."""
    if options.format == "json":
        return render_json(segments)
    if options.format == "srt":
        return render_srt(segments)
    if options.include_timestamps:
        return format_with_timestamps(segments)
    return format_as_flat_text(segments)


def transcript_duration(segments: list[TranscriptSegment]) -> float:
    """Duration implied by the segments: the end of the last one."""
    if not segments:
        return 0.0
    return max(seg.end for seg in segments)


def derive_quality(result: StrategyResult) -> str:
    if result.quality:
        return result.quality
    return "medium" if result.is_generated else "high"


def build_success_response(
    video_id: str,
    method: str,
    result: StrategyResult,
    options: TranscriptOptions,
    *,
    attempts: list[ExtractionAttempt] | None = None,
) -> TranscriptResponse:
    segments = result.segments
    metadata = TranscriptMetadata(
        video_id=video_id,
        title=result.title,
        author=result.author,
        language=result.language or options.language,
        duration=transcript_duration(segments) or (result.duration or 0.0),
        segment_count=len(segments),
        extraction_method=method,
        quality=derive_quality(result),
    )
    return TranscriptResponse(
        success=True,
        transcript=render_transcript(segments, options),
        metadata=metadata,
        attempts=attempts or [],
    )


def build_partial_response(
    video_id: str,
    method: str,
    result: StrategyResult,
    options: TranscriptOptions,
    *,
    attempts: list[ExtractionAttempt] | None = None,
) -> TranscriptResponse:
    """Metadata-only success, e.g. the Data API without caption access."""
    title = result.title or f"YouTube Video {video_id}"
    lines = [f"Video Title: {title}"]
    if result.author:
        lines.append(f"Channel: {result.author}")
    lines.append("")
    lines.append(result.note or "Video details were found but no transcript content.")
    return TranscriptResponse(
        success=True,
        transcript="\n".join(lines),
        metadata=TranscriptMetadata(
            video_id=video_id,
            title=result.title,
            author=result.author,
            language=result.language or options.language,
            duration=result.duration or 0.0,
            segment_count=0,
            extraction_method=method,
            quality="basic",
        ),
        attempts=attempts or [],
    )


def fallback_document(
    video_id: str,
    *,
    title: str | None = None,
    author: str | None = None,
    attempted: list[str] | None = None,
) -> str:
    """Note scaffold returned when no strategy produced a transcript."""
    lines = [f"Video Title: {title or f'YouTube Video {video_id}'}"]
    if author:
        lines.append(f"Channel: {author}")
    lines.append(f"Video URL: {watch_url(video_id)}")
    lines += [
        "",
        "This video's transcript could not be automatically extracted. This may be because:",
        "- The video doesn't have captions available",
        "- The video is private or restricted",
        "- Captions are disabled by the creator",
        "- The video is a live stream",
    ]
    if attempted:
        lines += ["", "Methods attempted:"]
        lines += [f"- {name}" for name in attempted]
    lines += [
        "",
        "You can:",
        "1. Visit the video directly to check for captions",
        "2. Add your own notes about this video below",
        "3. Try again later as captions may become available",
        "",
        "---",
        "",
        "## My Notes",
        "",
        "### Key Points",
        "- ",
        "",
        "### Timestamps & Moments",
        "- 00:00 - ",
        "",
        "### Reflections",
        "- ",
        "",
        "### Summary",
        "",
    ]
    return "\n".join(lines)


def build_fallback_response(
    video_id: str,
    options: TranscriptOptions,
    *,
    title: str | None = None,
    author: str | None = None,
    attempts: list[ExtractionAttempt] | None = None,
) -> TranscriptResponse:
    attempts = attempts or []
    attempted = [a.strategy for a in attempts if a.outcome != "skipped"]
    return TranscriptResponse(
        success=True,
        transcript=fallback_document(
            video_id, title=title, author=author, attempted=attempted
        ),
        metadata=TranscriptMetadata(
            video_id=video_id,
            title=title,
            author=author,
            language=options.language,
            duration=0.0,
            segment_count=0,
            extraction_method=FALLBACK_METHOD,
            quality="basic",
        ),
        attempts=attempts,
    )


def build_input_error_response(raw_input: str | None) -> TranscriptResponse:
    shown = (raw_input or "").strip()
    error = (
        f"Could not find a YouTube video ID in {shown!r}"
        if shown
        else "A YouTube video URL or ID is required"
    )
    return TranscriptResponse(
        success=False,
        transcript=(
            "Provide a YouTube link (youtube.com/watch?v=..., youtu.be/..., "
            "/embed/, /shorts/, /live/) or an 11-character video ID."
        ),
        error=error,
    )
