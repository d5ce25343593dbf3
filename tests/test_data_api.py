"""Tests for yt_transcript.strategies.data_api."""

from unittest.mock import MagicMock, patch

import httpx
import pytest

from yt_transcript.strategies.data_api import fetch_data_api

VIDEO_ITEM = {
    "id": "dQw4w9WgXcQ",
    "snippet": {"title": "Never Gonna Give You Up", "channelTitle": "Rick Astley"},
    "contentDetails": {"duration": "PT3M33S"},
}

XML_BODY = '<transcript><text start="0" dur="2">We are no strangers to love</text></transcript>'


def _youtube(videos, captions):
    youtube = MagicMock()
    youtube.videos.return_value.list.return_value.execute.return_value = {"items": videos}
    youtube.captions.return_value.list.return_value.execute.return_value = {"items": captions}
    return youtube


@pytest.fixture
def keyed_settings(settings):
    return settings.model_copy(update={"official_api_key": "api-key"})


class TestFetchDataApi:
    @patch("yt_transcript.strategies.data_api.build")
    def test_partial_when_content_unavailable(self, mock_build, run_strategy, keyed_settings):
        mock_build.return_value = _youtube(
            [VIDEO_ITEM], [{"id": "c1", "snippet": {"language": "en", "trackKind": "standard"}}]
        )
        result = run_strategy(
            fetch_data_api, lambda request: httpx.Response(200), settings_override=keyed_settings
        )

        assert result.partial is True
        assert result.segments == []
        assert result.title == "Never Gonna Give You Up"
        assert result.author == "Rick Astley"
        assert result.duration == 213.0
        assert result.language == "en"
        assert result.note
        mock_build.assert_called_once_with(
            "youtube", "v3", developerKey="api-key", cache_discovery=False
        )

    @patch("yt_transcript.strategies.data_api.build")
    def test_downloads_listed_track(self, mock_build, run_strategy, keyed_settings):
        mock_build.return_value = _youtube(
            [VIDEO_ITEM], [{"id": "c1", "snippet": {"language": "en", "trackKind": "asr"}}]
        )
        langs = []

        def handler(request):
            langs.append(request.url.params.get("lang"))
            return httpx.Response(200, text=XML_BODY)

        result = run_strategy(fetch_data_api, handler, settings_override=keyed_settings)
        assert result.partial is False
        assert result.quality == "medium"
        assert result.title == "Never Gonna Give You Up"
        assert result.segments[0].text == "We are no strangers to love"
        assert langs[0] == "en"

    @patch("yt_transcript.strategies.data_api.build")
    def test_partial_without_caption_tracks(self, mock_build, run_strategy, keyed_settings):
        mock_build.return_value = _youtube([VIDEO_ITEM], [])
        result = run_strategy(
            fetch_data_api, lambda request: httpx.Response(500), settings_override=keyed_settings
        )
        assert result.partial is True
        assert result.language is None

    @patch("yt_transcript.strategies.data_api.build")
    def test_video_not_found(self, mock_build, run_strategy, keyed_settings):
        youtube = _youtube([], [])
        mock_build.return_value = youtube
        result = run_strategy(
            fetch_data_api, lambda request: httpx.Response(200), settings_override=keyed_settings
        )
        assert result is None
        youtube.captions.assert_not_called()

    @patch("yt_transcript.strategies.data_api.build")
    def test_api_error(self, mock_build, run_strategy, keyed_settings):
        mock_build.side_effect = RuntimeError("quota exceeded")
        result = run_strategy(
            fetch_data_api, lambda request: httpx.Response(200), settings_override=keyed_settings
        )
        assert result is None

    @patch("yt_transcript.strategies.data_api.build")
    def test_without_key(self, mock_build, run_strategy):
        assert run_strategy(fetch_data_api, lambda request: httpx.Response(200)) is None
        mock_build.assert_not_called()
