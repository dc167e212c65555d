"""
MIT License
Copyright (c) 2026 arpan404
See LICENSE file for full license text.

Module: cache/base.py.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Protocol

from ..types import GenerationResult


@dataclass(frozen=True, slots=True)
class CacheEntry:
    """One cached response with its creation time and lifetime."""

    value: GenerationResult
    created_at_s: float
    ttl_s: float

    def is_live(self, now_s: float) -> bool:
        return now_s - self.created_at_s <= self.ttl_s


class ResponseCache(Protocol):
    """Protocol implemented by response caches used by the client."""

    async def get(self, key: str) -> GenerationResult | None: ...

    async def set(
        self,
        key: str,
        value: GenerationResult,
        ttl_s: float | None = None,
    ) -> None: ...

    async def delete(self, key: str) -> None: ...

    async def clear(self) -> None: ...
