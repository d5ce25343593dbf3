"""The default extraction chain, in the order the orchestrator tries it."""

from __future__ import annotations

from yt_transcript.strategies.audio import fetch_audio_transcription
from yt_transcript.strategies.base import Strategy, StrategyContext
from yt_transcript.strategies.caption_library import fetch_with_caption_library
from yt_transcript.strategies.captions_api import fetch_official_captions
from yt_transcript.strategies.data_api import fetch_data_api
from yt_transcript.strategies.page_scraping import scrape_embed_page, scrape_watch_page
from yt_transcript.strategies.third_party import fetch_third_party


def default_strategies(audio_timeout: float | None = None) -> list[Strategy]:
    return [
        Strategy("official-captions-api", fetch_official_captions),
        Strategy("caption-library", fetch_with_caption_library),
        Strategy("watch-page-scraping", scrape_watch_page),
        Strategy("embed-page-scraping", scrape_embed_page),
        Strategy("third-party-api", fetch_third_party),
        Strategy("official-data-api", fetch_data_api, requires="official_api_key"),
        Strategy(
            "audio-transcription",
            fetch_audio_transcription,
            requires="speech_to_text_api_key",
            timeout=audio_timeout,
        ),
    ]


__all__ = ["Strategy", "StrategyContext", "default_strategies"]
