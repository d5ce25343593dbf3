"""Shared async HTTP helpers for the extraction strategies."""

from __future__ import annotations

import logging
from typing import Awaitable, Callable, Sequence, TypeVar

import httpx

from yt_transcript.core.options import ExtractorSettings
from yt_transcript.utils.retry import backoff, is_retryable_http_status, retry

logger = logging.getLogger("yt_transcript")

T = TypeVar("T")
A = TypeVar("A")


class HttpStatusError(Exception):
    """Raised when an endpoint answers with a non-2xx status."""

    def __init__(self, status_code: int, url: str) -> None:
        super().__init__(f"HTTP {status_code} from {url}")
        self.status_code = status_code
        self.url = url

    @property
    def retryable(self) -> bool:
        return is_retryable_http_status(self.status_code)


def browser_headers(settings: ExtractorSettings, *, accept: str | None = None) -> dict[str, str]:
    headers = {
        "User-Agent": settings.user_agent,
        "Accept-Language": "en-US,en;q=0.9",
    }
    if accept:
        headers["Accept"] = accept
    return headers


def create_client(
    settings: ExtractorSettings,
    transport: httpx.AsyncBaseTransport | None = None,
) -> httpx.AsyncClient:
    """Build the per-request client; every call inherits the request timeout."""
    return httpx.AsyncClient(
        timeout=httpx.Timeout(settings.request_timeout),
        follow_redirects=True,
        headers={"User-Agent": settings.user_agent},
        transport=transport,
    )


@retry()
async def get_text(
    client: httpx.AsyncClient,
    url: str,
    *,
    headers: dict[str, str] | None = None,
    params: dict | None = None,
) -> str:
    """GET a URL and return its body, raising HttpStatusError on non-2xx."""
    response = await client.get(url, headers=headers, params=params)
    if response.status_code >= 400:
        raise HttpStatusError(response.status_code, str(response.url))
    return response.text


@retry()
async def get_json(
    client: httpx.AsyncClient,
    url: str,
    *,
    headers: dict[str, str] | None = None,
    params: dict | None = None,
) -> object:
    """GET a URL and decode its JSON body. Raises ValueError on bad JSON."""
    response = await client.get(url, headers=headers, params=params)
    if response.status_code >= 400:
        raise HttpStatusError(response.status_code, str(response.url))
    return response.json()


async def first_success(
    attempts: Sequence[A],
    fetch: Callable[[A], Awaitable[T | None]],
    *,
    base_delay: float,
    label: str,
) -> T | None:
    """Try attempts in order until one yields a non-None value.

    A rate-limited or server-error response pauses (exponential backoff)
    before the next attempt. Transport and status errors are logged and
    skipped; only cancellation escapes.
    """
    backoffs = 0
    for attempt in attempts:
        try:
            result = await fetch(attempt)
        except HttpStatusError as exc:
            logger.debug("%s: %s", label, exc)
            if exc.retryable:
                await backoff(backoffs, base_delay)
                backoffs += 1
            continue
        except (httpx.HTTPError, ValueError) as exc:
            logger.debug("%s: %s failed: %s", label, attempt, exc)
            continue
        if result is not None:
            return result
    return None
