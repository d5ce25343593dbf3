"""Common strategy shape: an async function plus the name it reports under."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Awaitable, Callable

import httpx

from yt_transcript.core.models import StrategyResult, TranscriptOptions
from yt_transcript.core.options import ExtractorSettings


@dataclass(frozen=True)
class StrategyContext:
    """Per-request collaborators handed to every strategy."""

    client: httpx.AsyncClient
    settings: ExtractorSettings


StrategyFunc = Callable[[str, TranscriptOptions, StrategyContext], Awaitable[StrategyResult | None]]


@dataclass(frozen=True)
class Strategy:
    """One extraction method in the orchestrator's chain.

    ``requires`` names an ExtractorSettings field that must be set for the
    strategy to run; ``timeout`` overrides the settings' strategy_timeout.
    """

    name: str
    func: StrategyFunc
    requires: str | None = None
    timeout: float | None = None

    def enabled(self, settings: ExtractorSettings) -> bool:
        return self.requires is None or bool(getattr(settings, self.requires, None))

    async def __call__(
        self, video_id: str, options: TranscriptOptions, ctx: StrategyContext
    ) -> StrategyResult | None:
        return await self.func(video_id, options, ctx)
