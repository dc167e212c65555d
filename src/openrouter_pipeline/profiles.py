"""
MIT License
Copyright (c) 2026 arpan404
See LICENSE file for full license text.

Module: profiles.py.
"""

from __future__ import annotations

from .runtime.contracts import (
    CachePolicy,
    RateLimitPolicy,
    RetryPolicy,
    TimeoutPolicy,
)


PROFILES = {
    "development": {
        "retry": RetryPolicy(max_attempts=2, base_delay_s=0.2, max_delay_s=2.0),
        "timeout": TimeoutPolicy(request_timeout_s=30.0, stream_idle_timeout_s=90.0),
        "rate_limit": RateLimitPolicy(max_requests=60, window_s=60.0),
        "cache": CachePolicy(enabled=False, ttl_s=15.0),
    },
    "production": {
        "retry": RetryPolicy(max_attempts=4, base_delay_s=1.0, max_delay_s=30.0),
        "timeout": TimeoutPolicy(request_timeout_s=30.0, stream_idle_timeout_s=45.0),
        "rate_limit": RateLimitPolicy(max_requests=20, window_s=60.0),
        "cache": CachePolicy(enabled=True, ttl_s=300.0),
    },
    "high_throughput": {
        "retry": RetryPolicy(max_attempts=3, base_delay_s=0.5, max_delay_s=10.0, backoff_factor=1.5),
        "timeout": TimeoutPolicy(request_timeout_s=20.0, stream_idle_timeout_s=40.0),
        "rate_limit": RateLimitPolicy(max_requests=200, window_s=60.0),
        "cache": CachePolicy(enabled=True, ttl_s=60.0),
    },
    "low_latency": {
        "retry": RetryPolicy(max_attempts=2, base_delay_s=0.1, max_delay_s=1.0),
        "timeout": TimeoutPolicy(request_timeout_s=10.0, stream_idle_timeout_s=20.0),
        "rate_limit": RateLimitPolicy(max_requests=30, window_s=10.0, block=False),
        "cache": CachePolicy(enabled=True, ttl_s=30.0),
    },
}
