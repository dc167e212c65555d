from __future__ import annotations

import asyncio
import json

import httpx
import pytest

from openrouter_pipeline import (
    AuthenticationError,
    GenerationOptions,
    GenerationRequest,
    InvalidRequestError,
    Message,
    NetworkError,
    OpenRouterSettings,
    RateLimitError,
    RequestTimeoutError,
    ServerError,
    UnknownAPIError,
)
from openrouter_pipeline.transport import (
    OpenRouterTransport,
    build_headers,
    build_request,
    classify_response,
    parse_retry_after,
)


def run_async(coro):
    return asyncio.run(coro)


SETTINGS = OpenRouterSettings(
    api_key="sk-test",
    site_url="https://example.dev",
    app_name="pipeline-tests",
)

COMPLETION = {
    "id": "gen-1",
    "object": "chat.completion",
    "created": 1700000000,
    "model": "openai/gpt-4o-mini",
    "choices": [
        {
            "index": 0,
            "message": {"role": "assistant", "content": "Hello there"},
            "finish_reason": "stop",
        }
    ],
    "usage": {"prompt_tokens": 5, "completion_tokens": 2, "total_tokens": 7},
}


def _transport(handler, settings: OpenRouterSettings = SETTINGS) -> OpenRouterTransport:
    client = httpx.AsyncClient(transport=httpx.MockTransport(handler))
    return OpenRouterTransport(settings, http_client=client)


def _request(**options):
    return build_request([Message(role="user", content="hi")], GenerationOptions(**options), SETTINGS)


def test_complete_sends_expected_request_and_parses_result():
    seen: list[httpx.Request] = []

    def handler(request: httpx.Request) -> httpx.Response:
        seen.append(request)
        return httpx.Response(200, json=COMPLETION)

    transport = _transport(handler)
    result = run_async(transport.complete(_request(system_prompt="be brief", temperature=0.3)))

    assert result.content == "Hello there"
    assert result.usage.total_tokens == 7
    assert result.model == "openai/gpt-4o-mini"
    assert result.finish_reason == "stop"

    request = seen[0]
    assert request.method == "POST"
    assert str(request.url) == "https://openrouter.ai/api/v1/chat/completions"
    assert request.headers["Authorization"] == "Bearer sk-test"
    assert request.headers["HTTP-Referer"] == "https://example.dev"
    assert request.headers["X-Title"] == "pipeline-tests"
    body = json.loads(request.content)
    assert body == {
        "model": "openai/gpt-4o-mini",
        "messages": [
            {"role": "system", "content": "be brief"},
            {"role": "user", "content": "hi"},
        ],
        "temperature": 0.3,
        "max_tokens": 1000,
        "top_p": 1.0,
        "stream": False,
    }


def test_missing_api_key_fails_before_network():
    calls = []

    def handler(request):
        calls.append(request)
        return httpx.Response(200, json=COMPLETION)

    transport = _transport(handler, OpenRouterSettings(api_key=""))
    with pytest.raises(AuthenticationError):
        run_async(transport.complete(_request()))
    assert calls == []


@pytest.mark.parametrize(
    "options",
    [{"temperature": 2.5}, {"max_tokens": 0}, {"top_p": 1.5}],
)
def test_out_of_range_options_fail_before_network(options):
    transport = _transport(lambda request: pytest.fail("network used"))
    with pytest.raises(InvalidRequestError):
        run_async(transport.complete(_request(**options)))


def test_empty_messages_are_rejected():
    transport = _transport(lambda request: pytest.fail("network used"))
    with pytest.raises(InvalidRequestError):
        build_request([], None, SETTINGS)
    with pytest.raises(InvalidRequestError):
        run_async(transport.complete(GenerationRequest(messages=(), model="openai/gpt-4o-mini")))


def test_system_prompt_does_not_stand_in_for_messages():
    with pytest.raises(InvalidRequestError):
        build_request([], GenerationOptions(system_prompt="sys"), SETTINGS)
    with pytest.raises(InvalidRequestError):
        build_request([], GenerationOptions(system_prompt="sys"), SETTINGS, stream=True)


@pytest.mark.parametrize(
    ("status", "error_type"),
    [
        (401, AuthenticationError),
        (429, RateLimitError),
        (400, InvalidRequestError),
        (500, ServerError),
        (502, ServerError),
        (503, ServerError),
        (404, UnknownAPIError),
        (504, UnknownAPIError),
    ],
)
def test_status_codes_are_classified(status, error_type):
    def handler(request):
        return httpx.Response(status, json={"error": {"message": f"status {status}", "code": status}})

    with pytest.raises(error_type) as excinfo:
        run_async(_transport(handler).complete(_request()))
    assert excinfo.value.status == status
    assert excinfo.value.message == f"status {status}"


def test_rate_limit_carries_retry_after():
    def handler(request):
        return httpx.Response(429, headers={"retry-after": "2"}, json={"error": {"message": "slow"}})

    with pytest.raises(RateLimitError) as excinfo:
        run_async(_transport(handler).complete(_request()))
    assert excinfo.value.retry_after_s == 2.0
    assert "wait 2 seconds" in excinfo.value.user_message()


def test_timeout_and_network_failures_are_classified():
    def timeout_handler(request):
        raise httpx.ReadTimeout("slow", request=request)

    def network_handler(request):
        raise httpx.ConnectError("refused", request=request)

    with pytest.raises(RequestTimeoutError):
        run_async(_transport(timeout_handler).complete(_request()))
    with pytest.raises(NetworkError):
        run_async(_transport(network_handler).complete(_request()))


def test_malformed_success_body_is_unknown_error():
    with pytest.raises(UnknownAPIError):
        run_async(_transport(lambda r: httpx.Response(200, json={"choices": []})).complete(_request()))


def test_open_stream_classifies_error_status():
    def handler(request):
        assert request.headers["Accept"] == "text/event-stream"
        return httpx.Response(401, json={"error": {"message": "no key"}})

    req = build_request([Message(role="user", content="hi")], None, SETTINGS, stream=True)
    with pytest.raises(AuthenticationError):
        run_async(_transport(handler).open_stream(req))


class _StallingBody(httpx.AsyncByteStream):
    """Sends one chunk, then goes silent."""

    def __init__(self) -> None:
        self.closed = False

    async def __aiter__(self):
        yield b'data: {"choices":[{"delta":{"content":"a"}}]}\n'
        await asyncio.sleep(10)
        yield b"data: [DONE]\n"

    async def aclose(self) -> None:
        self.closed = True


def test_stream_idle_gap_raises_timeout_and_closes_body():
    body = _StallingBody()
    transport = _transport(lambda request: httpx.Response(200, stream=body))
    req = build_request([Message(role="user", content="hi")], None, SETTINGS, stream=True)

    async def scenario() -> list[bytes]:
        seen = []
        response = await transport.open_stream(req)
        with pytest.raises(RequestTimeoutError, match="idle"):
            async for data in transport.iter_stream_bytes(response, idle_timeout_s=0.05):
                seen.append(data)
        return seen

    assert len(run_async(scenario())) == 1
    assert body.closed


def test_stream_without_idle_timeout_reads_to_end():
    payload = b'data: {"choices":[{"delta":{"content":"a"}}]}\n' b"data: [DONE]\n"
    transport = _transport(lambda request: httpx.Response(200, content=payload))
    req = build_request([Message(role="user", content="hi")], None, SETTINGS, stream=True)

    async def scenario() -> bytes:
        response = await transport.open_stream(req)
        return b"".join([data async for data in transport.iter_stream_bytes(response)])

    assert run_async(scenario()) == payload


def test_parse_retry_after_formats():
    assert parse_retry_after(None) is None
    assert parse_retry_after("") is None
    assert parse_retry_after("1.5") == 1.5
    assert parse_retry_after("-3") == 0.0
    assert parse_retry_after("Wed, 21 Oct 2015 07:28:00 GMT") == 0.0
    assert parse_retry_after("soon") is None


def test_classify_response_without_error_body():
    error = classify_response(503, {}, "<html>")
    assert isinstance(error, ServerError)
    assert "503" in error.message


def test_headers_omit_optional_identifiers():
    headers = build_headers(OpenRouterSettings(api_key="k"))
    assert headers == {"Authorization": "Bearer k", "Content-Type": "application/json"}
