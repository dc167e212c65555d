"""
MIT License
Copyright (c) 2026 arpan404
See LICENSE file for full license text.

Module: builder.py.
"""

from __future__ import annotations

from dataclasses import replace

import httpx

from .cache import ResponseCache
from .client import OpenRouterClient
from .profiles import PROFILES
from .runtime.contracts import (
    CachePolicy,
    RateLimitPolicy,
    RetryPolicy,
    TimeoutPolicy,
)
from .settings import OpenRouterSettings


class OpenRouterClientBuilder:
    """Builder-first DX for creating configured OpenRouter clients."""

    def __init__(self, settings: OpenRouterSettings | None = None) -> None:
        self._settings = settings or OpenRouterSettings.from_env()
        self._http_client: httpx.AsyncClient | None = None
        self._cache: ResponseCache | None = None

        self._retry_policy: RetryPolicy | None = None
        self._timeout_policy: TimeoutPolicy | None = None
        self._rate_limit_policy: RateLimitPolicy | None = None
        self._cache_policy: CachePolicy | None = None

    def settings(self, settings: OpenRouterSettings) -> "OpenRouterClientBuilder":
        """Replace builder settings with an explicit `OpenRouterSettings` instance."""
        self._settings = settings
        return self

    def api_key(self, api_key: str) -> "OpenRouterClientBuilder":
        self._settings = replace(self._settings, api_key=api_key)
        return self

    def model(self, model: str) -> "OpenRouterClientBuilder":
        """Override the default model in builder settings."""
        self._settings = replace(self._settings, default_model=model)
        return self

    def profile(self, name: str) -> "OpenRouterClientBuilder":
        """Apply one named runtime profile from `PROFILES`."""
        key = name.strip().lower()
        row = PROFILES.get(key)
        if row is None:
            raise ValueError(f"Unknown client profile '{name}'")
        self._retry_policy = row["retry"]
        self._timeout_policy = row["timeout"]
        self._rate_limit_policy = row["rate_limit"]
        self._cache_policy = row["cache"]
        return self

    def with_retry(self, policy: RetryPolicy) -> "OpenRouterClientBuilder":
        self._retry_policy = policy
        return self

    def with_rate_limit(self, policy: RateLimitPolicy) -> "OpenRouterClientBuilder":
        self._rate_limit_policy = policy
        return self

    def with_timeouts(self, policy: TimeoutPolicy) -> "OpenRouterClientBuilder":
        self._timeout_policy = policy
        return self

    def with_cache(
        self,
        policy: CachePolicy | None = None,
        cache: ResponseCache | None = None,
    ) -> "OpenRouterClientBuilder":
        """Set cache controls and, optionally, a shared cache instance."""
        if policy is not None:
            self._cache_policy = policy
        if cache is not None:
            self._cache = cache
        return self

    def with_http_client(self, http_client: httpx.AsyncClient) -> "OpenRouterClientBuilder":
        """Use a caller-owned `httpx.AsyncClient`; it is not closed by the client."""
        self._http_client = http_client
        return self

    def build(self) -> OpenRouterClient:
        """Materialize one configured `OpenRouterClient` instance."""
        return OpenRouterClient(
            self._settings,
            http_client=self._http_client,
            cache=self._cache,
            retry_policy=self._retry_policy,
            timeout_policy=self._timeout_policy,
            rate_limit_policy=self._rate_limit_policy,
            cache_policy=self._cache_policy,
        )
