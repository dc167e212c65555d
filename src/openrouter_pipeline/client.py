"""
MIT License
Copyright (c) 2026 arpan404
See LICENSE file for full license text.

Module: client.py.
"""

from __future__ import annotations

import asyncio
import logging
from collections.abc import AsyncIterator, Awaitable, Callable, Sequence
from contextlib import aclosing
from dataclasses import replace
from typing import TypeVar

import httpx

from .cache import InMemoryResponseCache, ResponseCache, build_cache_key
from .errors import RequestTimeoutError
from .prompts import explain_code_prompt, generate_code_prompt, optimize_code_prompt
from .runtime.contracts import CachePolicy, RateLimitPolicy, RetryPolicy, TimeoutPolicy
from .runtime.rate_limit import SlidingWindowRateLimiter
from .runtime.retry import call_with_retry
from .runtime.streaming import decode_sse_stream
from .settings import OpenRouterSettings
from .transport import OpenRouterTransport, build_request, resolve_options
from .types import GenerationOptions, GenerationResult, Message
from .usage import UsageTracker
from .utils import run_sync

logger = logging.getLogger("openrouter_pipeline.client")

T = TypeVar("T")


class OpenRouterClient:
    """
    Resilient OpenRouter client: cache, rate limiter and retry around one
    HTTP executor.

    One instance may be shared by concurrent tasks; the cache and limiter
    serialize their own mutations.
    """

    def __init__(
        self,
        settings: OpenRouterSettings | None = None,
        *,
        transport: OpenRouterTransport | None = None,
        http_client: httpx.AsyncClient | None = None,
        cache: ResponseCache | None = None,
        rate_limiter: SlidingWindowRateLimiter | None = None,
        retry_policy: RetryPolicy | None = None,
        rate_limit_policy: RateLimitPolicy | None = None,
        cache_policy: CachePolicy | None = None,
        timeout_policy: TimeoutPolicy | None = None,
        sleep: Callable[[float], Awaitable[None]] = asyncio.sleep,
    ) -> None:
        self.settings = settings or OpenRouterSettings.from_env()
        self._transport = transport or OpenRouterTransport(
            self.settings,
            http_client=http_client,
        )
        self._sleep = sleep

        self._retry_policy = retry_policy or RetryPolicy(
            max_attempts=self.settings.max_attempts,
        )
        self._timeout_policy = timeout_policy or TimeoutPolicy(
            request_timeout_s=self.settings.timeout_s,
            stream_idle_timeout_s=self.settings.stream_idle_timeout_s,
        )
        self._rate_limit_policy = rate_limit_policy or RateLimitPolicy(
            max_requests=self.settings.rate_limit_max_requests,
            window_s=self.settings.rate_limit_window_s,
        )
        self._cache_policy = cache_policy or CachePolicy(ttl_s=self.settings.cache_ttl_s)

        self._cache = cache or InMemoryResponseCache(self._cache_policy.ttl_s)
        self._rate_limiter = rate_limiter or SlidingWindowRateLimiter(
            self._rate_limit_policy,
            sleep=sleep,
        )

    @property
    def cache(self) -> ResponseCache:
        return self._cache

    @property
    def rate_limiter(self) -> SlidingWindowRateLimiter:
        return self._rate_limiter

    async def generate_completion(
        self,
        messages: Sequence[Message],
        options: GenerationOptions | None = None,
        *,
        usage: UsageTracker | None = None,
    ) -> GenerationResult:
        """
        Execute one non-streaming completion.

        Order: cache lookup, then per attempt a rate-limiter slot and one HTTP
        call under the retry policy. Successful results are cached and, when
        a tracker is given, added to it. Cache hits are not counted.
        """
        messages = list(messages)
        opts = resolve_options(options, self.settings)
        req = build_request(messages, opts, self.settings)
        self._transport.preflight(req)

        cache_key: str | None = None
        if self._cache_policy.enabled:
            cache_key = build_cache_key(messages, opts)
            cached = await self._cache.get(cache_key)
            if cached is not None:
                logger.debug("Cache hit for %s", cache_key[:12])
                return cached

        async def _attempt() -> GenerationResult:
            await self._rate_limiter.acquire()
            return await self._within_request_timeout(self._transport.complete(req))

        result = await call_with_retry(_attempt, policy=self._retry_policy, sleep=self._sleep)

        if cache_key is not None:
            await self._cache.set(cache_key, result, ttl_s=self._cache_policy.ttl_s)
        if usage is not None:
            usage.add(result)
        return result

    async def stream_completion(
        self,
        messages: Sequence[Message],
        options: GenerationOptions | None = None,
    ) -> AsyncIterator[str]:
        """
        Stream text deltas for one completion.

        Retry covers opening the stream only; once deltas flow, failures
        propagate. Wrap the iterator in `contextlib.aclosing` to release the
        connection immediately when stopping early.
        """
        req = build_request(list(messages), options, self.settings, stream=True)
        self._transport.preflight(req)

        async def _open() -> httpx.Response:
            await self._rate_limiter.acquire()
            return await self._within_request_timeout(self._transport.open_stream(req))

        response = await call_with_retry(_open, policy=self._retry_policy, sleep=self._sleep)
        byte_stream = self._transport.iter_stream_bytes(
            response,
            idle_timeout_s=self._timeout_policy.stream_idle_timeout_s,
        )
        try:
            async with aclosing(byte_stream), aclosing(decode_sse_stream(byte_stream)) as texts:
                async for text in texts:
                    yield text
        finally:
            await response.aclose()

    async def _within_request_timeout(self, awaitable: Awaitable[T]) -> T:
        timeout_s = self._timeout_policy.request_timeout_s
        if timeout_s is None:
            return await awaitable
        try:
            return await asyncio.wait_for(awaitable, timeout=timeout_s)
        except asyncio.TimeoutError as error:
            raise RequestTimeoutError(f"Request timed out after {timeout_s:g}s") from error

    def _with_system_prompt(
        self,
        options: GenerationOptions | None,
        system_prompt: str,
    ) -> GenerationOptions:
        return replace(options or GenerationOptions(), system_prompt=system_prompt)

    async def explain_code(
        self,
        code: str,
        language: str | None = None,
        options: GenerationOptions | None = None,
    ) -> GenerationResult:
        return await self.generate_completion(
            [Message(role="user", content=code)],
            self._with_system_prompt(options, explain_code_prompt(language)),
        )

    async def optimize_code(
        self,
        code: str,
        language: str | None = None,
        options: GenerationOptions | None = None,
    ) -> GenerationResult:
        return await self.generate_completion(
            [Message(role="user", content=code)],
            self._with_system_prompt(options, optimize_code_prompt(language)),
        )

    async def generate_code(
        self,
        description: str,
        language: str | None = None,
        options: GenerationOptions | None = None,
    ) -> GenerationResult:
        return await self.generate_completion(
            [Message(role="user", content=description)],
            self._with_system_prompt(options, generate_code_prompt(language)),
        )

    def generate_completion_sync(
        self,
        messages: Sequence[Message],
        options: GenerationOptions | None = None,
        *,
        usage: UsageTracker | None = None,
    ) -> GenerationResult:
        """Synchronous wrapper around `generate_completion`."""

        async def _run() -> GenerationResult:
            try:
                return await self.generate_completion(messages, options, usage=usage)
            finally:
                # The owned connection pool is bound to this event loop.
                await self._transport.aclose()

        return run_sync(_run())

    async def clear_cache(self) -> None:
        await self._cache.clear()

    async def aclose(self) -> None:
        await self._transport.aclose()

    async def __aenter__(self) -> "OpenRouterClient":
        return self

    async def __aexit__(self, *exc_info: object) -> None:
        await self.aclose()
