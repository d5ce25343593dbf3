"""Backoff helpers shared by the HTTP layer and the strategies."""

from __future__ import annotations

import asyncio
import functools
import logging
import random
from typing import Awaitable, Callable, Sequence, TypeVar

import httpx

logger = logging.getLogger("yt_transcript")

T = TypeVar("T")

# The request never got a response, so repeating it is safe.
TRANSPORT_ERRORS: tuple[type[Exception], ...] = (
    httpx.ConnectError,
    httpx.ReadError,
    httpx.RemoteProtocolError,
)


def compute_delay(
    attempt: int,
    base_delay: float,
    multiplier: float = 2.0,
    jitter: float = 0.25,
) -> float:
    """Exponential delay for the given zero-based attempt, with +/- jitter."""
    delay = base_delay * (multiplier ** attempt)
    spread = delay * jitter
    return max(0.0, delay + random.uniform(-spread, spread))


async def backoff(attempt: int, base_delay: float) -> float:
    """Pause before the next sub-attempt of a strategy. Returns the delay used."""
    delay = compute_delay(attempt, base_delay)
    if delay > 0:
        await asyncio.sleep(delay)
    return delay


def retry(
    max_retries: int = 2,
    base_delay: float = 0.5,
    multiplier: float = 2.0,
    jitter: float = 0.25,
    retryable: Sequence[type[Exception]] | None = None,
) -> Callable[[Callable[..., Awaitable[T]]], Callable[..., Awaitable[T]]]:
    """Retry a coroutine function on transport errors.

    ``max_retries`` counts repeats after the first call, so the wrapped
    function runs at most ``max_retries + 1`` times. Any exception outside
    ``retryable`` propagates immediately.
    """
    caught = tuple(retryable) if retryable is not None else TRANSPORT_ERRORS

    def decorator(func: Callable[..., Awaitable[T]]) -> Callable[..., Awaitable[T]]:
        name = getattr(func, "__name__", repr(func))

        @functools.wraps(func)
        async def wrapper(*args, **kwargs) -> T:
            attempt = 0
            while True:
                try:
                    return await func(*args, **kwargs)
                except caught as exc:
                    if attempt == max_retries:
                        logger.debug("%s gave up after %d calls: %s", name, attempt + 1, exc)
                        raise
                    delay = compute_delay(attempt, base_delay, multiplier, jitter)
                    logger.debug(
                        "%s failed (%s), retry %d/%d in %.2fs",
                        name, exc, attempt + 1, max_retries, delay,
                    )
                    attempt += 1
                    await asyncio.sleep(delay)

        return wrapper

    return decorator


def is_retryable_http_status(status_code: int) -> bool:
    """429 and 5xx answers are worth another try; other errors are final."""
    return status_code == 429 or 500 <= status_code < 600
