"""
MIT License
Copyright (c) 2026 arpan404
See LICENSE file for full license text.

Module: runtime/__init__.py.
"""

from .contracts import CachePolicy, RateLimitPolicy, RetryPolicy, TimeoutPolicy
from .rate_limit import SlidingWindowRateLimiter
from .retry import RetryAttempt, backoff_delay, call_with_retry, classify_error
from .streaming import DONE_SENTINEL, StreamDecoder, decode_sse_stream

__all__ = [
    "RetryPolicy",
    "TimeoutPolicy",
    "RateLimitPolicy",
    "CachePolicy",
    "SlidingWindowRateLimiter",
    "RetryAttempt",
    "backoff_delay",
    "call_with_retry",
    "classify_error",
    "DONE_SENTINEL",
    "StreamDecoder",
    "decode_sse_stream",
]
