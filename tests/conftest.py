"""Shared fixtures: offline settings and a MockTransport-backed strategy runner."""

from __future__ import annotations

import asyncio

import httpx
import pytest

from yt_transcript.core.models import TranscriptOptions
from yt_transcript.core.options import ExtractorSettings
from yt_transcript.strategies.base import StrategyContext


@pytest.fixture
def settings():
    return ExtractorSettings(
        official_api_key=None,
        third_party_api_key=None,
        speech_to_text_api_key=None,
        backoff_base_delay=0.0,
        enrich_metadata=False,
    )


@pytest.fixture
def run_strategy(settings):
    """Run a strategy function against a fake network.

    ``handler`` receives each httpx.Request and returns an httpx.Response.
    """

    def run(func, handler, *, video_id="dQw4w9WgXcQ", options=None, settings_override=None):
        async def go():
            async with httpx.AsyncClient(transport=httpx.MockTransport(handler)) as client:
                ctx = StrategyContext(client=client, settings=settings_override or settings)
                return await func(video_id, options or TranscriptOptions(), ctx)

        return asyncio.run(go())

    return run
