# Copyright (c) 2026 Pointmatic
#
# This Source Code Form is subject to the terms of the Mozilla Public
# License, v. 2.0. If a copy of the MPL was not distributed with this
# file, You can obtain one at https://mozilla.org/MPL/2.0/.

"""Per-request extraction chain: strategies in order, first success wins."""

from __future__ import annotations

import asyncio
import logging
import time

import httpx

from yt_transcript.core.formatter import (
    build_fallback_response,
    build_input_error_response,
    build_partial_response,
    build_success_response,
)
from yt_transcript.core.logging import log_attempt, log_event
from yt_transcript.core.models import (
    ExtractionAttempt,
    StrategyResult,
    TranscriptOptions,
    TranscriptResponse,
)
from yt_transcript.core.options import ExtractorSettings
from yt_transcript.services.content_parser import format_as_flat_text
from yt_transcript.services.http import create_client
from yt_transcript.services.id_parser import extract_video_id
from yt_transcript.services.metadata import fetch_oembed
from yt_transcript.strategies.base import Strategy, StrategyContext
from yt_transcript.strategies.registry import default_strategies

logger = logging.getLogger("yt_transcript")


class TranscriptOrchestrator:
    """Run the extraction strategies for one video at a time.

    Holds no per-request state, so one instance can serve concurrent
    requests. Each call to :meth:`extract` opens its own HTTP client.
    """

    def __init__(
        self,
        settings: ExtractorSettings | None = None,
        strategies: list[Strategy] | None = None,
        transport: httpx.AsyncBaseTransport | None = None,
    ) -> None:
        self.settings = settings or ExtractorSettings()
        if strategies is None:
            strategies = default_strategies(audio_timeout=self.settings.audio_timeout)
        self.strategies = strategies
        self.transport = transport

    async def extract(
        self, url_or_id: str | None, options: TranscriptOptions | None = None
    ) -> TranscriptResponse:
        """Extract a transcript for a YouTube URL or video ID.

        Invalid input returns ``success=False`` without running any strategy.
        Every other outcome, including total failure, returns ``success=True``.
        """
        video_id = extract_video_id(url_or_id or "")
        if video_id is None:
            log_event(logging.INFO, "Rejected input", event="invalid_input", details=url_or_id)
            return build_input_error_response(url_or_id)

        if options is None:
            options = TranscriptOptions(language=self.settings.default_language)

        async with create_client(self.settings, self.transport) as client:
            ctx = StrategyContext(client=client, settings=self.settings)
            return await self._run_chain(video_id, options, ctx)

    async def _run_chain(
        self, video_id: str, options: TranscriptOptions, ctx: StrategyContext
    ) -> TranscriptResponse:
        attempts: list[ExtractionAttempt] = []
        partial: tuple[str, StrategyResult] | None = None

        for strategy in self.strategies:
            if not strategy.enabled(self.settings):
                attempt = ExtractionAttempt(
                    strategy=strategy.name,
                    outcome="skipped",
                    reason=f"{strategy.requires} not configured",
                )
                attempts.append(attempt)
                log_attempt(video_id, attempt)
                continue

            started = time.perf_counter()
            result, failure = await self._run_strategy(strategy, video_id, options, ctx)
            elapsed = time.perf_counter() - started

            if failure is not None:
                attempt = ExtractionAttempt(
                    strategy=strategy.name, outcome="failed", reason=failure, elapsed=elapsed
                )
            elif result is None:
                attempt = ExtractionAttempt(
                    strategy=strategy.name, outcome="no_result", elapsed=elapsed
                )
            elif result.partial:
                attempt = ExtractionAttempt(
                    strategy=strategy.name, outcome="partial", reason=result.note, elapsed=elapsed
                )
                if partial is None:
                    partial = (strategy.name, result)
            else:
                length = len(format_as_flat_text(result.segments))
                if length > self.settings.min_content_length:
                    attempt = ExtractionAttempt(
                        strategy=strategy.name, outcome="success", elapsed=elapsed
                    )
                    attempts.append(attempt)
                    log_attempt(video_id, attempt)
                    result = await self._enrich(video_id, result, ctx)
                    return build_success_response(
                        video_id, strategy.name, result, options, attempts=attempts
                    )
                attempt = ExtractionAttempt(
                    strategy=strategy.name,
                    outcome="no_result",
                    reason=f"content too short ({length} chars)",
                    elapsed=elapsed,
                )

            attempts.append(attempt)
            log_attempt(video_id, attempt)

        if partial is not None:
            name, result = partial
            result = await self._enrich(video_id, result, ctx)
            return build_partial_response(video_id, name, result, options, attempts=attempts)

        log_event(
            logging.WARNING,
            f"All strategies failed for {video_id}, returning structured fallback",
            video_id=video_id,
            event="structured_fallback",
            details=", ".join(f"{a.strategy}={a.outcome}" for a in attempts),
        )
        oembed = await fetch_oembed(ctx.client, video_id)
        return build_fallback_response(
            video_id,
            options,
            title=oembed.get("title"),
            author=oembed.get("author"),
            attempts=attempts,
        )

    async def _run_strategy(
        self,
        strategy: Strategy,
        video_id: str,
        options: TranscriptOptions,
        ctx: StrategyContext,
    ) -> tuple[StrategyResult | None, str | None]:
        """Run one strategy under its timeout; returns (result, failure reason)."""
        timeout = strategy.timeout or self.settings.strategy_timeout
        try:
            result = await asyncio.wait_for(strategy(video_id, options, ctx), timeout)
        except asyncio.TimeoutError:
            return None, f"timed out after {timeout:g}s"
        except Exception as exc:
            logger.debug("%s raised for %s", strategy.name, video_id, exc_info=True)
            return None, f"{type(exc).__name__}: {exc}"
        return result, None

    async def _enrich(
        self, video_id: str, result: StrategyResult, ctx: StrategyContext
    ) -> StrategyResult:
        if not self.settings.enrich_metadata or (result.title and result.author):
            return result
        oembed = await fetch_oembed(ctx.client, video_id)
        return result.model_copy(
            update={
                "title": result.title or oembed.get("title"),
                "author": result.author or oembed.get("author"),
            }
        )
