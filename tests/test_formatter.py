"""Tests for yt_transcript.core.formatter."""

import json

from yt_transcript.core.formatter import (
    FALLBACK_METHOD,
    build_fallback_response,
    build_input_error_response,
    build_partial_response,
    build_success_response,
    derive_quality,
    fallback_document,
    render_srt,
    render_transcript,
    transcript_duration,
)
from yt_transcript.core.models import (
    ExtractionAttempt,
    StrategyResult,
    TranscriptOptions,
    TranscriptSegment,
)

SEGMENTS = [
    TranscriptSegment(start=0.0, duration=2.5, text="Hello there (music)"),
    TranscriptSegment(start=2.5, duration=3.0, text="General Kenobi ,you are bold"),
]


class TestRenderTranscript:
    def test_flat(self):
        text = render_transcript(SEGMENTS, TranscriptOptions(include_timestamps=False))
        assert text == "Hello there [Music] General Kenobi, you are bold"

    def test_timestamps(self):
        text = render_transcript(SEGMENTS, TranscriptOptions())
        assert text.splitlines() == [
            "[00:00 - 00:02] Hello there [Music]",
            "[00:02 - 00:05] General Kenobi ,you are bold",
        ]

    def test_json_ignores_timestamp_flag(self):
        text = render_transcript(
            SEGMENTS, TranscriptOptions(format="json", include_timestamps=False)
        )
        data = json.loads(text)
        assert data[0] == {"start": 0.0, "duration": 2.5, "text": "Hello there (music)"}
        assert len(data) == 2

    def test_srt(self):
        text = render_srt(SEGMENTS)
        assert text.split("\n")[:4] == [
            "1",
            "00:00:00,000 --> 00:00:02,500",
            "Hello there [Music]",
            "",
        ]
        assert "2\n00:00:02,500 --> 00:00:05,500\n" in text


class TestDurationAndQuality:
    def test_duration_is_last_end(self):
        assert transcript_duration(SEGMENTS) == 5.5

    def test_empty_duration(self):
        assert transcript_duration([]) == 0.0

    def test_explicit_quality_wins(self):
        assert derive_quality(StrategyResult(quality="basic", is_generated=False)) == "basic"

    def test_generated_is_medium(self):
        assert derive_quality(StrategyResult(is_generated=True)) == "medium"

    def test_manual_is_high(self):
        assert derive_quality(StrategyResult(is_generated=False)) == "high"
        assert derive_quality(StrategyResult()) == "high"


class TestSuccessResponse:
    def test_metadata(self):
        result = StrategyResult(segments=SEGMENTS, title="T", author="A", is_generated=True)
        response = build_success_response(
            "dQw4w9WgXcQ", "caption-library", result, TranscriptOptions(language="de")
        )
        meta = response.metadata
        assert response.success is True
        assert meta.video_id == "dQw4w9WgXcQ"
        assert meta.language == "de"
        assert meta.segment_count == 2
        assert meta.duration == 5.5
        assert meta.quality == "medium"

    def test_wire_shape(self):
        result = StrategyResult(segments=SEGMENTS, language="en")
        wire = build_success_response(
            "dQw4w9WgXcQ", "watch-page-scraping", result, TranscriptOptions()
        ).to_wire()
        assert set(wire) == {"success", "transcript", "metadata"}
        assert wire["metadata"]["videoId"] == "dQw4w9WgXcQ"
        assert wire["metadata"]["extractionMethod"] == "watch-page-scraping"
        assert wire["metadata"]["segmentCount"] == 2
        assert "title" not in wire["metadata"]


class TestPartialResponse:
    def test_metadata_only(self):
        result = StrategyResult(
            title="Some Talk", author="Some Channel", duration=600.0, partial=True, note="No captions."
        )
        response = build_partial_response(
            "dQw4w9WgXcQ", "official-data-api", result, TranscriptOptions()
        )
        assert response.success is True
        assert response.metadata.segment_count == 0
        assert response.metadata.duration == 600.0
        assert response.metadata.quality == "basic"
        assert response.transcript.splitlines()[:2] == [
            "Video Title: Some Talk",
            "Channel: Some Channel",
        ]
        assert "No captions." in response.transcript


class TestFallback:
    def test_document_sections(self):
        doc = fallback_document("dQw4w9WgXcQ", attempted=["a", "b"])
        assert doc.startswith("Video Title: YouTube Video dQw4w9WgXcQ\n")
        assert "Video URL: https://www.youtube.com/watch?v=dQw4w9WgXcQ" in doc
        assert "Methods attempted:\n- a\n- b" in doc
        for heading in (
            "## My Notes",
            "### Key Points",
            "### Timestamps & Moments",
            "### Reflections",
            "### Summary",
        ):
            assert heading in doc
        assert "Channel:" not in doc

    def test_document_with_metadata(self):
        doc = fallback_document("dQw4w9WgXcQ", title="Song", author="Singer")
        assert "Video Title: Song" in doc
        assert "Channel: Singer" in doc
        assert "Methods attempted" not in doc

    def test_response(self):
        attempts = [
            ExtractionAttempt(strategy="official-data-api", outcome="skipped"),
            ExtractionAttempt(strategy="caption-library", outcome="failed", reason="x"),
        ]
        response = build_fallback_response(
            "dQw4w9WgXcQ", TranscriptOptions(language="es"), attempts=attempts
        )
        assert response.success is True
        assert response.error is None
        assert response.metadata.extraction_method == FALLBACK_METHOD == "structured-fallback"
        assert response.metadata.segment_count == 0
        assert response.metadata.language == "es"
        assert "- caption-library" in response.transcript
        assert "- official-data-api" not in response.transcript


class TestInputError:
    def test_empty(self):
        response = build_input_error_response("")
        assert response.success is False
        assert response.error == "A YouTube video URL or ID is required"
        assert response.metadata is None
        assert response.transcript

    def test_unparseable(self):
        response = build_input_error_response("https://vimeo.com/1")
        assert "vimeo.com/1" in response.error
        assert "metadata" not in response.to_wire()
