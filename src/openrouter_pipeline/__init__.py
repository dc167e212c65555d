"""
MIT License
Copyright (c) 2026 arpan404
See LICENSE file for full license text.

Module: __init__.py.
"""

from __future__ import annotations

from .builder import OpenRouterClientBuilder
from .cache import CacheEntry, InMemoryResponseCache, ResponseCache, build_cache_key
from .client import OpenRouterClient
from .errors import (
    AuthenticationError,
    ConfigurationError,
    ErrorKind,
    InvalidRequestError,
    NetworkError,
    OpenRouterError,
    RateLimitError,
    RequestTimeoutError,
    ServerError,
    UnknownAPIError,
)
from .models import MODELS, ModelInfo, estimate_cost, get_model_info, list_models
from .profiles import PROFILES
from .runtime import (
    CachePolicy,
    RateLimitPolicy,
    RetryPolicy,
    SlidingWindowRateLimiter,
    StreamDecoder,
    TimeoutPolicy,
    call_with_retry,
    decode_sse_stream,
)
from .settings import OpenRouterSettings
from .transport import OpenRouterTransport
from .types import GenerationOptions, GenerationRequest, GenerationResult, Message, Usage
from .usage import UsageTracker

__all__ = [
    "OpenRouterClient",
    "OpenRouterClientBuilder",
    "OpenRouterSettings",
    "OpenRouterTransport",
    "PROFILES",
    "Message",
    "GenerationOptions",
    "GenerationRequest",
    "GenerationResult",
    "Usage",
    "UsageTracker",
    "CacheEntry",
    "ResponseCache",
    "InMemoryResponseCache",
    "build_cache_key",
    "RetryPolicy",
    "RateLimitPolicy",
    "CachePolicy",
    "TimeoutPolicy",
    "SlidingWindowRateLimiter",
    "StreamDecoder",
    "call_with_retry",
    "decode_sse_stream",
    "ErrorKind",
    "OpenRouterError",
    "AuthenticationError",
    "RateLimitError",
    "InvalidRequestError",
    "RequestTimeoutError",
    "ServerError",
    "NetworkError",
    "UnknownAPIError",
    "ConfigurationError",
    "MODELS",
    "ModelInfo",
    "get_model_info",
    "list_models",
    "estimate_cost",
]
