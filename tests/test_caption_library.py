"""Tests for yt_transcript.strategies.caption_library."""

from dataclasses import dataclass
from unittest.mock import patch

import httpx
from youtube_transcript_api import TranscriptsDisabled

from yt_transcript.core.models import TranscriptOptions
from yt_transcript.strategies.caption_library import fetch_with_caption_library


# --- Helpers for mocking youtube-transcript-api objects ---


@dataclass
class FakeSnippet:
    text: str
    start: float
    duration: float


@dataclass
class FakeFetchedTranscript:
    language_code: str
    is_generated: bool
    snippets: list

    def __iter__(self):
        return iter(self.snippets)


@dataclass
class FakeTranscriptEntry:
    """Mimics a Transcript object from youtube-transcript-api's TranscriptList."""

    language_code: str
    is_generated: bool

    def fetch(self):
        return FakeFetchedTranscript(
            language_code=self.language_code,
            is_generated=self.is_generated,
            snippets=[
                FakeSnippet(text="World &amp; more", start=2.0, duration=3.0),
                FakeSnippet(text="Hello", start=0.0, duration=2.0),
                FakeSnippet(text="  ", start=5.0, duration=1.0),
            ],
        )


def _offline(request):
    return httpx.Response(500)


class TestFetchWithCaptionLibrary:
    @patch("yt_transcript.strategies.caption_library.YouTubeTranscriptApi")
    def test_manual_track(self, mock_api, run_strategy):
        mock_api.return_value.list.return_value = [
            FakeTranscriptEntry("en", True),
            FakeTranscriptEntry("en", False),
        ]
        result = run_strategy(fetch_with_caption_library, _offline)

        mock_api.return_value.list.assert_called_once_with("dQw4w9WgXcQ")
        assert result.quality == "high"
        assert result.is_generated is False
        assert result.language == "en"
        assert [seg.text for seg in result.segments] == ["Hello", "World & more"]

    @patch("yt_transcript.strategies.caption_library.YouTubeTranscriptApi")
    def test_generated_track_in_requested_language(self, mock_api, run_strategy):
        mock_api.return_value.list.return_value = [
            FakeTranscriptEntry("en", False),
            FakeTranscriptEntry("es", True),
        ]
        result = run_strategy(
            fetch_with_caption_library, _offline, options=TranscriptOptions(language="es")
        )
        assert result.language == "es"
        assert result.quality == "medium"

    @patch("yt_transcript.strategies.caption_library.YouTubeTranscriptApi")
    def test_no_tracks(self, mock_api, run_strategy):
        mock_api.return_value.list.return_value = []
        assert run_strategy(fetch_with_caption_library, _offline) is None

    @patch("yt_transcript.strategies.caption_library.YouTubeTranscriptApi")
    def test_transcripts_disabled(self, mock_api, run_strategy):
        mock_api.return_value.list.side_effect = TranscriptsDisabled("dQw4w9WgXcQ")
        assert run_strategy(fetch_with_caption_library, _offline) is None

    @patch("yt_transcript.strategies.caption_library.YouTubeTranscriptApi")
    def test_listing_error(self, mock_api, run_strategy):
        mock_api.return_value.list.side_effect = RuntimeError("blocked")
        assert run_strategy(fetch_with_caption_library, _offline) is None

    @patch("yt_transcript.strategies.caption_library.YouTubeTranscriptApi")
    def test_fetch_error(self, mock_api, run_strategy):
        entry = FakeTranscriptEntry("en", False)
        with patch.object(FakeTranscriptEntry, "fetch", side_effect=RuntimeError("429")):
            mock_api.return_value.list.return_value = [entry]
            assert run_strategy(fetch_with_caption_library, _offline) is None
