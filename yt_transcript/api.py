# Copyright (c) 2026 Pointmatic
#
# This Source Code Form is subject to the terms of the Mozilla Public
# License, v. 2.0. If a copy of the MPL was not distributed with this
# file, You can obtain one at https://mozilla.org/MPL/2.0/.

"""HTTP service exposing the transcript pipeline."""

from __future__ import annotations

import logging

from fastapi import FastAPI, Query, Request, status
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse

from yt_transcript import __version__
from yt_transcript.core.formatter import build_input_error_response
from yt_transcript.core.models import OutputFormat, TranscriptOptions, TranscriptRequest
from yt_transcript.core.options import ExtractorSettings
from yt_transcript.core.orchestrator import TranscriptOrchestrator
from yt_transcript.services.id_parser import extract_video_id, validate_video_id

logger = logging.getLogger("yt_transcript")

INTERNAL_ERROR_BODY = {"success": False, "error": "Internal server error", "transcript": ""}


def resolve_input(video_id: str | None, url: str | None) -> str | None:
    """Pick the reference to extract from: a valid videoId first, else url."""
    if video_id and validate_video_id(video_id.strip()):
        return video_id.strip()
    if url and extract_video_id(url):
        return url
    return None


def with_default_language(options: TranscriptOptions, settings: ExtractorSettings) -> TranscriptOptions:
    if "language" in options.model_fields_set:
        return options
    return options.model_copy(update={"language": settings.default_language})


def create_app(
    settings: ExtractorSettings | None = None,
    orchestrator: TranscriptOrchestrator | None = None,
) -> FastAPI:
    """Build the FastAPI app around one shared orchestrator.

    Requests that leave the language out get ``settings.default_language``.
    """
    if orchestrator is None:
        orchestrator = TranscriptOrchestrator(settings=settings)
        settings = orchestrator.settings
    elif settings is None:
        settings = ExtractorSettings()

    app = FastAPI(title="yt-transcript", version=__version__)
    app.state.orchestrator = orchestrator

    @app.exception_handler(RequestValidationError)
    async def validation_error(request: Request, exc: RequestValidationError) -> JSONResponse:
        first = exc.errors()[0] if exc.errors() else {}
        detail = first.get("msg", "Invalid request")
        body = build_input_error_response(None).to_wire()
        body["error"] = f"Invalid request: {detail}"
        return JSONResponse(status_code=status.HTTP_400_BAD_REQUEST, content=body)

    async def respond(request: TranscriptRequest) -> JSONResponse:
        reference = resolve_input(request.video_id, request.url)
        if reference is None:
            response = build_input_error_response(request.video_id or request.url)
            return JSONResponse(
                status_code=status.HTTP_400_BAD_REQUEST, content=response.to_wire()
            )
        options = with_default_language(request.options, settings)
        try:
            response = await app.state.orchestrator.extract(reference, options)
        except Exception:
            logger.exception("Unexpected error extracting transcript for %s", reference)
            return JSONResponse(
                status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
                content=INTERNAL_ERROR_BODY,
            )
        code = status.HTTP_200_OK if response.success else status.HTTP_400_BAD_REQUEST
        return JSONResponse(status_code=code, content=response.to_wire())

    @app.get("/health")
    def health() -> dict[str, str]:
        return {"status": "ok", "service": "yt-transcript"}

    @app.post("/transcript")
    async def post_transcript(payload: TranscriptRequest) -> JSONResponse:
        return await respond(payload)

    @app.get("/transcript")
    async def get_transcript(
        video_id: str | None = Query(None, alias="videoId"),
        url: str | None = Query(None),
        language: str | None = Query(None),
        include_timestamps: bool = Query(True, alias="includeTimestamps"),
        format: OutputFormat = Query("text"),
    ) -> JSONResponse:
        fields = {"include_timestamps": include_timestamps, "format": format}
        if language:
            fields["language"] = language
        options = TranscriptOptions(**fields)
        return await respond(TranscriptRequest(video_id=video_id, url=url, options=options))

    return app
