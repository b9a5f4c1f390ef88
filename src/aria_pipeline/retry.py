"""Bounded retry with exponential backoff for transient reasoning-service failures."""

from __future__ import annotations

import logging
import random
from typing import Awaitable, Callable, TypeVar

import anyio

from aria_pipeline.errors import ReasoningClientError

T = TypeVar("T")

logger = logging.getLogger(__name__)

RETRYABLE_STATUS_CODES = frozenset({408, 429, 500, 502, 503, 504})


def backoff_delay(attempt: int, base_seconds: float, max_seconds: float = 30.0) -> float:
    # Exponential backoff with +/-30% jitter.
    delay = base_seconds * (2**attempt) * (0.7 + random.random() * 0.6)
    return min(delay, max_seconds)


async def call_with_retries(
    fn: Callable[[], Awaitable[T]],
    *,
    retries: int,
    base_seconds: float,
    sleep: Callable[[float], Awaitable[None]] = anyio.sleep,
) -> T:
    """
    Await fn(), retrying up to `retries` more times when it raises a retryable ReasoningClientError.
    Non-retryable errors and the last failure propagate unchanged.
    """
    attempt = 0
    while True:
        try:
            return await fn()
        except ReasoningClientError as exc:
            if not exc.retryable or attempt >= retries:
                raise
            delay = backoff_delay(attempt, base_seconds)
            logger.warning(
                "Reasoning call failed (%s); retry %d/%d in %.2fs",
                exc,
                attempt + 1,
                retries,
                delay,
            )
            attempt += 1
            await sleep(delay)
