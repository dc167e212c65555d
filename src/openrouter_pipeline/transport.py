"""
MIT License
Copyright (c) 2026 arpan404
See LICENSE file for full license text.

HTTP executor for one OpenRouter chat-completions call.
"""

from __future__ import annotations

import asyncio
import logging
import math
from collections.abc import AsyncIterator, Mapping, Sequence
from datetime import datetime, timezone
from email.utils import parsedate_to_datetime
from typing import Any

import httpx
from pydantic import ValidationError

from .errors import (
    AuthenticationError,
    InvalidRequestError,
    NetworkError,
    OpenRouterError,
    RequestTimeoutError,
    UnknownAPIError,
    error_for_status,
)
from .settings import OpenRouterSettings
from .types import ROLES, GenerationOptions, GenerationRequest, GenerationResult, Message, Usage
from .wire import ChatCompletionResponse, ErrorEnvelope

logger = logging.getLogger("openrouter_pipeline.transport")


def build_request(
    messages: Sequence[Message],
    options: GenerationOptions | None,
    settings: OpenRouterSettings,
    *,
    stream: bool = False,
) -> GenerationRequest:
    """Resolve options against settings defaults and prepend the system prompt."""
    if not messages:
        raise InvalidRequestError("At least one message is required")
    opts = resolve_options(options, settings)
    resolved: list[Message] = []
    if opts.system_prompt:
        resolved.append(Message(role="system", content=opts.system_prompt))
    resolved.extend(messages)
    return GenerationRequest(
        messages=tuple(resolved),
        model=opts.model,
        temperature=opts.temperature,
        max_tokens=opts.max_tokens,
        top_p=opts.top_p,
        stream=stream,
    )


def resolve_options(
    options: GenerationOptions | None,
    settings: OpenRouterSettings,
) -> GenerationOptions:
    """Fill unset option fields from settings defaults."""
    opts = options or GenerationOptions()
    return GenerationOptions(
        model=opts.model or settings.default_model,
        temperature=settings.default_temperature if opts.temperature is None else opts.temperature,
        max_tokens=settings.default_max_tokens if opts.max_tokens is None else opts.max_tokens,
        top_p=settings.default_top_p if opts.top_p is None else opts.top_p,
        system_prompt=opts.system_prompt,
    )


def validate_request(req: GenerationRequest) -> None:
    """Reject requests that the API would refuse, before any network access."""
    if not req.messages:
        raise InvalidRequestError("At least one message is required")
    for message in req.messages:
        if message.role not in ROLES:
            raise InvalidRequestError(f"Unsupported message role '{message.role}'")
    if not req.model.strip():
        raise InvalidRequestError("Model identifier must be non-empty")
    if not (math.isfinite(req.temperature) and 0.0 <= req.temperature <= 2.0):
        raise InvalidRequestError("temperature must be within [0, 2]")
    if req.max_tokens <= 0:
        raise InvalidRequestError("max_tokens must be a positive integer")
    if not (math.isfinite(req.top_p) and 0.0 <= req.top_p <= 1.0):
        raise InvalidRequestError("top_p must be within [0, 1]")


def build_payload(req: GenerationRequest) -> dict[str, Any]:
    return {
        "model": req.model,
        "messages": [{"role": m.role, "content": m.content} for m in req.messages],
        "temperature": req.temperature,
        "max_tokens": req.max_tokens,
        "top_p": req.top_p,
        "stream": req.stream,
    }


def build_headers(settings: OpenRouterSettings) -> dict[str, str]:
    headers = {
        "Authorization": f"Bearer {settings.api_key}",
        "Content-Type": "application/json",
    }
    if settings.site_url:
        headers["HTTP-Referer"] = settings.site_url
    if settings.app_name:
        headers["X-Title"] = settings.app_name
    return headers


def parse_retry_after(value: str | None) -> float | None:
    """Parse a `Retry-After` header (delta-seconds or HTTP-date) into seconds."""
    if value is None or not value.strip():
        return None
    value = value.strip()
    try:
        seconds = float(value)
    except ValueError:
        try:
            when = parsedate_to_datetime(value)
        except (TypeError, ValueError):
            return None
        if when.tzinfo is None:
            when = when.replace(tzinfo=timezone.utc)
        return max(0.0, (when - datetime.now(timezone.utc)).total_seconds())
    if not math.isfinite(seconds):
        return None
    return max(0.0, seconds)


def classify_response(
    status: int,
    headers: Mapping[str, str],
    body: Any,
) -> OpenRouterError:
    """Map a non-success HTTP response onto the error taxonomy."""
    payload = body if isinstance(body, dict) else {}
    message = f"OpenRouter request failed with status {status}"
    try:
        message = ErrorEnvelope.model_validate(payload).error.message
    except ValidationError:
        pass
    return error_for_status(
        status,
        message,
        retry_after_s=parse_retry_after(headers.get("retry-after")),
        payload=payload,
    )


def parse_completion(body: Any, *, fallback_model: str) -> GenerationResult:
    try:
        parsed = ChatCompletionResponse.model_validate(body)
    except ValidationError as error:
        raise UnknownAPIError(f"Malformed completion response: {error}") from error
    choice = parsed.choices[0]
    usage = parsed.usage
    return GenerationResult(
        content=choice.message.content or "",
        model=parsed.model or fallback_model,
        usage=Usage(
            prompt_tokens=usage.prompt_tokens,
            completion_tokens=usage.completion_tokens,
            total_tokens=usage.total_tokens,
        )
        if usage is not None
        else Usage(),
        finish_reason=choice.finish_reason,
        id=parsed.id,
        raw=body if isinstance(body, dict) else {},
    )


def _json_or_empty(response: httpx.Response) -> Any:
    try:
        return response.json()
    except ValueError:
        return {}


class OpenRouterTransport:
    """
    Issues one outbound completion call and classifies its outcome.

    Holds no cache or limiter state. The underlying `httpx.AsyncClient` is
    created lazily unless injected, and released by `aclose()`.
    """

    def __init__(
        self,
        settings: OpenRouterSettings,
        *,
        http_client: httpx.AsyncClient | None = None,
    ) -> None:
        self.settings = settings
        self._client = http_client
        self._owns_client = http_client is None

    def _get_client(self) -> httpx.AsyncClient:
        if self._client is None:
            self._client = httpx.AsyncClient(timeout=self.settings.timeout_s)
        return self._client

    def preflight(self, req: GenerationRequest) -> None:
        """Fail before any network access on a missing key or invalid request."""
        if not self.settings.api_key:
            raise AuthenticationError("OpenRouter API key is missing")
        validate_request(req)

    async def complete(self, req: GenerationRequest) -> GenerationResult:
        self.preflight(req)
        client = self._get_client()
        try:
            response = await client.post(
                self.settings.completions_url,
                json=build_payload(req),
                headers=build_headers(self.settings),
                timeout=self.settings.timeout_s,
            )
        except httpx.TimeoutException as error:
            raise RequestTimeoutError(f"Request timed out: {error}") from error
        except httpx.TransportError as error:
            raise NetworkError(f"Network error: {error}") from error

        body = _json_or_empty(response)
        if not response.is_success:
            raise classify_response(response.status_code, response.headers, body)
        result = parse_completion(body, fallback_model=req.model)
        logger.debug("Completion %s served by %s", result.id, result.model)
        return result

    async def open_stream(self, req: GenerationRequest) -> httpx.Response:
        """Open a streaming response; the caller must `aclose()` it."""
        self.preflight(req)
        client = self._get_client()
        headers = build_headers(self.settings)
        headers["Accept"] = "text/event-stream"
        request = client.build_request(
            "POST",
            self.settings.completions_url,
            json=build_payload(req),
            headers=headers,
            timeout=self.settings.timeout_s,
        )
        try:
            response = await client.send(request, stream=True)
        except httpx.TimeoutException as error:
            raise RequestTimeoutError(f"Request timed out: {error}") from error
        except httpx.TransportError as error:
            raise NetworkError(f"Network error: {error}") from error

        if not response.is_success:
            try:
                await response.aread()
                body = _json_or_empty(response)
            except httpx.HTTPError:
                body = {}
            finally:
                await response.aclose()
            raise classify_response(response.status_code, response.headers, body)
        return response

    async def iter_stream_bytes(
        self,
        response: httpx.Response,
        *,
        idle_timeout_s: float | None = None,
    ) -> AsyncIterator[bytes]:
        """
        Yield raw body chunks, translating transport failures.

        With `idle_timeout_s` set, a gap longer than that between two chunks
        raises `RequestTimeoutError`.
        """
        body = response.aiter_bytes()
        try:
            while True:
                try:
                    data = await asyncio.wait_for(anext(body), timeout=idle_timeout_s)
                except StopAsyncIteration:
                    return
                except asyncio.TimeoutError as error:
                    raise RequestTimeoutError(
                        f"Stream idle for more than {idle_timeout_s:g}s"
                    ) from error
                yield data
        except httpx.TimeoutException as error:
            raise RequestTimeoutError(f"Stream timed out: {error}") from error
        except httpx.TransportError as error:
            raise NetworkError(f"Stream interrupted: {error}") from error
        finally:
            await body.aclose()
            await response.aclose()

    async def aclose(self) -> None:
        if self._client is not None and self._owns_client:
            await self._client.aclose()
            self._client = None
