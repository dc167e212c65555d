"""
MIT License
Copyright (c) 2026 arpan404
See LICENSE file for full license text.

Module: runtime/rate_limit.py.
"""

from __future__ import annotations

import asyncio
import logging
import time
from collections import deque
from collections.abc import Awaitable, Callable

from ..errors import RateLimitError
from .contracts import RateLimitPolicy

logger = logging.getLogger("openrouter_pipeline.rate_limit")


class SlidingWindowRateLimiter:
    """
    Concurrency-safe sliding-window limiter.

    `admit` and `record` are deliberately separate so a caller can check
    admission and then decide not to proceed without consuming a slot.
    `acquire` performs both under one lock for callers that always proceed.
    """

    def __init__(
        self,
        policy: RateLimitPolicy | None = None,
        *,
        clock: Callable[[], float] = time.monotonic,
        sleep: Callable[[float], Awaitable[None]] = asyncio.sleep,
    ) -> None:
        self.policy = policy or RateLimitPolicy()
        self._clock = clock
        self._sleep = sleep
        self._window: deque[float] = deque()
        self._lock = asyncio.Lock()

    def _prune(self, now: float) -> None:
        cutoff = now - self.policy.window_s
        while self._window and self._window[0] < cutoff:
            self._window.popleft()

    def _admit(self) -> bool:
        self._prune(self._clock())
        return len(self._window) < self.policy.max_requests

    def _time_until_reset(self) -> float:
        now = self._clock()
        self._prune(now)
        if not self._window:
            return 0.0
        return max(0.0, self._window[0] + self.policy.window_s - now)

    async def admit(self) -> bool:
        async with self._lock:
            return self._admit()

    async def record(self) -> None:
        async with self._lock:
            self._window.append(self._clock())

    async def time_until_reset(self) -> float:
        async with self._lock:
            return self._time_until_reset()

    async def reset(self) -> None:
        async with self._lock:
            self._window.clear()

    async def acquire(self, *, block: bool | None = None) -> None:
        """Wait for (or demand) a free slot and record it atomically."""
        should_block = self.policy.block if block is None else block
        while True:
            async with self._lock:
                if self._admit():
                    self._window.append(self._clock())
                    return
                wait_s = self._time_until_reset()

            if not should_block:
                raise RateLimitError(
                    "Client-side rate limit exceeded.",
                    retry_after_s=wait_s,
                )
            logger.debug("Rate window full; waiting %.3fs", wait_s)
            await self._sleep(max(wait_s, 0.001))

    def __len__(self) -> int:
        return len(self._window)
