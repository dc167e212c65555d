"""
MIT License
Copyright (c) 2026 arpan404
See LICENSE file for full license text.

OpenRouter client settings and explicit environment loading.
"""

from __future__ import annotations

import math
import os
from dataclasses import dataclass

from .errors import ConfigurationError

DEFAULT_BASE_URL = "https://openrouter.ai/api/v1"
DEFAULT_MODEL = "openai/gpt-4o-mini"


@dataclass(frozen=True, slots=True)
class OpenRouterSettings:
    """Explicit settings consumed by the transport and client."""

    api_key: str | None = None
    base_url: str = DEFAULT_BASE_URL
    default_model: str = DEFAULT_MODEL
    default_temperature: float = 0.7
    default_max_tokens: int = 1000
    default_top_p: float = 1.0

    # Sent as `HTTP-Referer` / `X-Title` so OpenRouter can attribute traffic.
    site_url: str | None = None
    app_name: str | None = None

    timeout_s: float = 30.0
    stream_idle_timeout_s: float | None = 45.0
    max_attempts: int = 3
    rate_limit_max_requests: int = 20
    rate_limit_window_s: float = 60.0
    cache_ttl_s: float = 300.0

    @staticmethod
    def from_env() -> "OpenRouterSettings":
        """Load settings from environment variables."""
        idle = os.getenv("OPENROUTER_STREAM_IDLE_TIMEOUT_S", "45")
        return OpenRouterSettings(
            api_key=os.getenv("OPENROUTER_API_KEY"),
            base_url=os.getenv("OPENROUTER_BASE_URL", DEFAULT_BASE_URL),
            default_model=os.getenv("OPENROUTER_DEFAULT_MODEL", DEFAULT_MODEL),
            default_temperature=float(os.getenv("OPENROUTER_TEMPERATURE", "0.7")),
            default_max_tokens=int(os.getenv("OPENROUTER_MAX_TOKENS", "1000")),
            default_top_p=float(os.getenv("OPENROUTER_TOP_P", "1.0")),
            site_url=os.getenv("OPENROUTER_SITE_URL"),
            app_name=os.getenv("OPENROUTER_APP_NAME"),
            timeout_s=float(os.getenv("OPENROUTER_TIMEOUT_S", "30")),
            stream_idle_timeout_s=float(idle) if idle.strip() else None,
            max_attempts=int(os.getenv("OPENROUTER_MAX_ATTEMPTS", "3")),
            rate_limit_max_requests=int(
                os.getenv("OPENROUTER_RATE_LIMIT_MAX_REQUESTS", "20")
            ),
            rate_limit_window_s=float(os.getenv("OPENROUTER_RATE_LIMIT_WINDOW_S", "60")),
            cache_ttl_s=float(os.getenv("OPENROUTER_CACHE_TTL_S", "300")),
        )

    def validate(self) -> "OpenRouterSettings":
        """Raise `ConfigurationError` for missing or out-of-range values."""
        if not self.api_key:
            raise ConfigurationError("OPENROUTER_API_KEY is required")
        if not self.base_url.startswith(("http://", "https://")):
            raise ConfigurationError(f"Invalid base URL '{self.base_url}'")
        if not self.default_model.strip():
            raise ConfigurationError("Default model must be non-empty")
        if not 0.0 <= self.default_temperature <= 2.0:
            raise ConfigurationError("Default temperature must be within [0, 2]")
        if self.default_max_tokens <= 0:
            raise ConfigurationError("Default max tokens must be positive")
        if not 0.0 <= self.default_top_p <= 1.0:
            raise ConfigurationError("Default top_p must be within [0, 1]")
        if not math.isfinite(self.timeout_s) or self.timeout_s <= 0:
            raise ConfigurationError("Timeout must be a positive number of seconds")
        if self.max_attempts < 1:
            raise ConfigurationError("Max attempts must be at least 1")
        if self.rate_limit_max_requests < 1 or self.rate_limit_window_s <= 0:
            raise ConfigurationError("Rate limit window must admit at least one request")
        if not math.isfinite(self.cache_ttl_s) or self.cache_ttl_s < 0:
            raise ConfigurationError("Cache TTL must be a finite, non-negative number")
        return self

    @property
    def completions_url(self) -> str:
        return f"{self.base_url.rstrip('/')}/chat/completions"
