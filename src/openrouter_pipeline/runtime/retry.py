"""
MIT License
Copyright (c) 2026 arpan404
See LICENSE file for full license text.

Module: runtime/retry.py.
"""

from __future__ import annotations

import asyncio
import logging
import socket
from collections.abc import Awaitable, Callable
from dataclasses import dataclass
from typing import TypeVar

import httpx

from ..errors import (
    ErrorKind,
    NetworkError,
    OpenRouterError,
    RateLimitError,
    RequestTimeoutError,
    UnknownAPIError,
)
from .contracts import RetryPolicy

T = TypeVar("T")

Sleep = Callable[[float], Awaitable[None]]

logger = logging.getLogger("openrouter_pipeline.retry")


@dataclass(frozen=True, slots=True)
class RetryAttempt:
    """One failed attempt and the delay chosen before the next one."""

    attempt: int
    kind: ErrorKind
    delay_s: float


def classify_error(error: BaseException) -> OpenRouterError:
    """Map arbitrary exceptions onto the classified taxonomy."""
    if isinstance(error, OpenRouterError):
        return error
    if isinstance(error, (httpx.TimeoutException, asyncio.TimeoutError, TimeoutError, socket.timeout)):
        return RequestTimeoutError(str(error) or "Request timed out")
    if isinstance(error, (httpx.TransportError, ConnectionError, OSError)):
        return NetworkError(str(error) or "Network error")
    return UnknownAPIError(str(error) or type(error).__name__)


def backoff_delay(step: int, policy: RetryPolicy) -> float:
    """Delay for the `step`-th backoff retry (1-based), capped at `max_delay_s`."""
    exponent = max(0, step - 1)
    try:
        delay = policy.base_delay_s * (policy.backoff_factor**exponent)
    except OverflowError:
        return policy.max_delay_s
    return min(delay, policy.max_delay_s)


async def call_with_retry(
    fn: Callable[[], Awaitable[T]],
    *,
    policy: RetryPolicy,
    sleep: Sleep = asyncio.sleep,
) -> T:
    """
    Execute `fn` under bounded retry policy.

    Attempts run strictly one after another. `asyncio.CancelledError` is not
    intercepted, so cancelling the caller stops any further attempts.
    """
    backoff_step = 0
    for attempt in range(1, policy.max_attempts + 1):
        try:
            return await fn()
        except Exception as error:
            classified = classify_error(error)
            if not classified.retryable or attempt >= policy.max_attempts:
                if classified is error:
                    raise
                raise classified from error

            if isinstance(classified, RateLimitError) and classified.retry_after_s is not None:
                delay = max(0.0, classified.retry_after_s)
            else:
                backoff_step += 1
                delay = backoff_delay(backoff_step, policy)

            record = RetryAttempt(attempt=attempt, kind=classified.kind, delay_s=delay)
            logger.warning(
                "Attempt %d/%d failed (%s): %s; retrying in %.2fs",
                record.attempt,
                policy.max_attempts,
                record.kind.value,
                classified.message,
                record.delay_s,
            )
            await sleep(delay)
    raise UnknownAPIError("Retry loop exhausted")
