"""
MIT License
Copyright (c) 2026 arpan404
See LICENSE file for full license text.

Typed runtime policies for the request pipeline.
"""

from __future__ import annotations

import math
from dataclasses import dataclass


@dataclass(frozen=True, slots=True)
class RetryPolicy:
    """Retry semantics for one request path."""

    max_attempts: int = 3
    base_delay_s: float = 1.0
    max_delay_s: float = 30.0
    backoff_factor: float = 2.0

    def __post_init__(self) -> None:
        if self.max_attempts < 1:
            raise ValueError("max_attempts must be at least 1")
        if not math.isfinite(self.base_delay_s) or self.base_delay_s < 0:
            raise ValueError("base_delay_s must be finite and non-negative")
        if not math.isfinite(self.max_delay_s) or self.max_delay_s < self.base_delay_s:
            raise ValueError("max_delay_s must be finite and >= base_delay_s")
        if self.backoff_factor <= 1:
            raise ValueError("backoff_factor must be greater than 1")


@dataclass(frozen=True, slots=True)
class TimeoutPolicy:
    """Timeout semantics for unary and stream operations."""

    request_timeout_s: float | None = 30.0
    stream_idle_timeout_s: float | None = 45.0


@dataclass(frozen=True, slots=True)
class RateLimitPolicy:
    """
    Sliding-window admission policy.

    `block=True` waits for the window to free a slot; `block=False` fails
    fast with a `RateLimitError` carrying the time until reset.
    """

    max_requests: int = 20
    window_s: float = 60.0
    block: bool = True

    def __post_init__(self) -> None:
        if self.max_requests < 1:
            raise ValueError("max_requests must be at least 1")
        if not math.isfinite(self.window_s) or self.window_s <= 0:
            raise ValueError("window_s must be a positive, finite duration")


@dataclass(frozen=True, slots=True)
class CachePolicy:
    """Response cache controls."""

    enabled: bool = True
    ttl_s: float = 300.0
