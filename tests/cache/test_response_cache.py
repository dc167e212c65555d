from __future__ import annotations

import asyncio
import math

import pytest

from openrouter_pipeline import GenerationOptions, GenerationResult, Message
from openrouter_pipeline.cache import InMemoryResponseCache, build_cache_key


def run_async(coro):
    return asyncio.run(coro)


class _Clock:
    def __init__(self) -> None:
        self.now = 0.0

    def __call__(self) -> float:
        return self.now


def _result(text: str = "cached") -> GenerationResult:
    return GenerationResult(content=text, model="openai/gpt-4o-mini")


def test_entry_visible_within_ttl_and_removed_after():
    clock = _Clock()
    cache = InMemoryResponseCache(default_ttl_s=60.0, clock=clock)

    async def scenario() -> None:
        await cache.set("k", _result(), ttl_s=0.100)
        clock.now = 0.050
        assert await cache.get("k") == _result()
        clock.now = 0.150
        assert await cache.get("k") is None
        assert "k" not in cache
        assert len(cache) == 0

    run_async(scenario())


def test_set_overwrites_and_resets_creation_time():
    clock = _Clock()
    cache = InMemoryResponseCache(default_ttl_s=10.0, clock=clock)

    async def scenario() -> None:
        await cache.set("k", _result("old"))
        clock.now = 8.0
        await cache.set("k", _result("new"))
        clock.now = 15.0
        row = await cache.get("k")
        assert row is not None and row.content == "new"

    run_async(scenario())


def test_clear_and_delete():
    cache = InMemoryResponseCache()

    async def scenario() -> None:
        await cache.set("a", _result())
        await cache.set("b", _result())
        await cache.delete("a")
        assert await cache.get("a") is None
        assert await cache.get("b") is not None
        await cache.clear()
        assert len(cache) == 0

    run_async(scenario())


@pytest.mark.parametrize("ttl", [math.inf, math.nan, -1.0, "10"])
def test_non_finite_or_invalid_ttl_fails_fast(ttl):
    cache = InMemoryResponseCache()
    with pytest.raises(ValueError):
        run_async(cache.set("k", _result(), ttl_s=ttl))


@pytest.mark.parametrize("key", ["", None, 42])
def test_malformed_keys_fail_fast(key):
    cache = InMemoryResponseCache()
    with pytest.raises(ValueError):
        run_async(cache.get(key))


def test_cache_key_is_deterministic():
    messages = [Message(role="user", content="hi"), Message(role="assistant", content="hello")]
    options = GenerationOptions(model="m", temperature=0.2, max_tokens=10, top_p=0.9, system_prompt="s")

    key = build_cache_key(messages, options)

    assert key == build_cache_key(list(messages), GenerationOptions(**{
        "model": "m", "temperature": 0.2, "max_tokens": 10, "top_p": 0.9, "system_prompt": "s",
    }))
    assert len(key) == 64


@pytest.mark.parametrize(
    "changed",
    [
        {"model": "other"},
        {"temperature": 0.3},
        {"max_tokens": 11},
        {"top_p": 0.8},
        {"system_prompt": "t"},
    ],
)
def test_cache_key_changes_with_any_option(changed):
    messages = [Message(role="user", content="hi")]
    base = {"model": "m", "temperature": 0.2, "max_tokens": 10, "top_p": 0.9, "system_prompt": "s"}

    assert build_cache_key(messages, GenerationOptions(**base)) != build_cache_key(
        messages, GenerationOptions(**{**base, **changed})
    )


def test_cache_key_is_order_sensitive_and_role_aware():
    a = Message(role="user", content="one")
    b = Message(role="user", content="two")

    assert build_cache_key([a, b]) != build_cache_key([b, a])
    assert build_cache_key([a]) != build_cache_key([Message(role="system", content="one")])
    # Content that looks like field boundaries cannot collide.
    assert build_cache_key([Message(role="user", content='a","b')]) != build_cache_key(
        [Message(role="user", content="a"), Message(role="user", content="b")]
    )
