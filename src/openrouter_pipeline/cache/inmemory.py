"""
MIT License
Copyright (c) 2026 arpan404
See LICENSE file for full license text.

Module: cache/inmemory.py.
"""

from __future__ import annotations

import asyncio
import logging
import math
import time
from collections.abc import Callable

from .base import CacheEntry, ResponseCache
from ..types import GenerationResult

logger = logging.getLogger("openrouter_pipeline.cache")


def _check_key(key: str) -> None:
    if not isinstance(key, str) or not key:
        raise ValueError(f"Cache key must be a non-empty string, got {key!r}")


def _check_ttl(ttl_s: float) -> None:
    if isinstance(ttl_s, bool) or not isinstance(ttl_s, (int, float)):
        raise ValueError(f"Cache TTL must be a number, got {ttl_s!r}")
    if not math.isfinite(ttl_s) or ttl_s < 0:
        raise ValueError(f"Cache TTL must be finite and non-negative, got {ttl_s!r}")


class InMemoryResponseCache(ResponseCache):
    """Process-local TTL cache; entries expire by time only."""

    def __init__(
        self,
        default_ttl_s: float = 300.0,
        *,
        clock: Callable[[], float] = time.monotonic,
    ) -> None:
        _check_ttl(default_ttl_s)
        self.default_ttl_s = default_ttl_s
        self._clock = clock
        self._rows: dict[str, CacheEntry] = {}
        self._lock = asyncio.Lock()

    async def get(self, key: str) -> GenerationResult | None:
        _check_key(key)
        async with self._lock:
            row = self._rows.get(key)
            if row is None:
                return None
            if not row.is_live(self._clock()):
                self._rows.pop(key, None)
                logger.debug("Evicted expired cache entry %s", key[:12])
                return None
            return row.value

    async def set(
        self,
        key: str,
        value: GenerationResult,
        ttl_s: float | None = None,
    ) -> None:
        _check_key(key)
        ttl = self.default_ttl_s if ttl_s is None else ttl_s
        _check_ttl(ttl)
        async with self._lock:
            self._rows[key] = CacheEntry(
                value=value,
                created_at_s=self._clock(),
                ttl_s=float(ttl),
            )

    async def delete(self, key: str) -> None:
        _check_key(key)
        async with self._lock:
            self._rows.pop(key, None)

    async def clear(self) -> None:
        async with self._lock:
            self._rows.clear()

    def __len__(self) -> int:
        return len(self._rows)

    def __contains__(self, key: object) -> bool:
        return key in self._rows
