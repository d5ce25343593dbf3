# Copyright (c) 2026 Pointmatic
#
# This Source Code Form is subject to the terms of the Mozilla Public
# License, v. 2.0. If a copy of the MPL was not distributed with this
# file, You can obtain one at https://mozilla.org/MPL/2.0/.

"""Pydantic data models for yt-transcript."""

from __future__ import annotations

from typing import Literal

from pydantic import BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel

Quality = Literal["high", "medium", "basic"]
OutputFormat = Literal["text", "json", "srt"]
AttemptOutcome = Literal["success", "partial", "no_result", "failed", "skipped"]


class _WireModel(BaseModel):
    """Base for models that cross the HTTP boundary with camelCase keys."""

    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)


class TranscriptSegment(BaseModel):
    start: float = Field(ge=0.0)
    duration: float = Field(default=3.0, ge=0.0)
    text: str

    @property
    def end(self) -> float:
        return self.start + self.duration


class CaptionTrack(BaseModel):
    language_code: str
    is_generated: bool = False
    base_url: str | None = None
    name: str | None = None
    track_id: str | None = None


class StrategyResult(BaseModel):
    segments: list[TranscriptSegment] = []
    language: str | None = None
    title: str | None = None
    author: str | None = None
    duration: float | None = None
    is_generated: bool | None = None
    quality: Quality | None = None
    partial: bool = False
    note: str | None = None


class ExtractionAttempt(BaseModel):
    strategy: str
    outcome: AttemptOutcome
    reason: str | None = None
    elapsed: float = 0.0


class TranscriptOptions(_WireModel):
    language: str = "en"
    include_timestamps: bool = True
    format: OutputFormat = "text"


class TranscriptRequest(_WireModel):
    video_id: str | None = None
    url: str | None = None
    options: TranscriptOptions = Field(default_factory=TranscriptOptions)


class TranscriptMetadata(_WireModel):
    video_id: str
    title: str | None = None
    author: str | None = None
    language: str | None = None
    duration: float = 0.0
    segment_count: int = 0
    extraction_method: str
    quality: Quality | None = None


class TranscriptResponse(_WireModel):
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True, frozen=True)

    success: bool
    transcript: str
    metadata: TranscriptMetadata | None = None
    error: str | None = None
    attempts: list[ExtractionAttempt] = Field(default_factory=list, exclude=True)

    def to_wire(self) -> dict:
        """Serialize to the JSON shape consumed by the note-taking UI."""
        return self.model_dump(mode="json", by_alias=True, exclude_none=True)
