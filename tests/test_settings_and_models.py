from __future__ import annotations

import pytest

from openrouter_pipeline import (
    ConfigurationError,
    OpenRouterSettings,
    Usage,
    estimate_cost,
    get_model_info,
    list_models,
)


def test_from_env_reads_openrouter_variables(monkeypatch):
    monkeypatch.setenv("OPENROUTER_API_KEY", "sk-env")
    monkeypatch.setenv("OPENROUTER_DEFAULT_MODEL", "openai/gpt-4o")
    monkeypatch.setenv("OPENROUTER_TEMPERATURE", "0.2")
    monkeypatch.setenv("OPENROUTER_MAX_TOKENS", "256")
    monkeypatch.setenv("OPENROUTER_APP_NAME", "demo")
    monkeypatch.setenv("OPENROUTER_STREAM_IDLE_TIMEOUT_S", "")

    settings = OpenRouterSettings.from_env().validate()

    assert settings.api_key == "sk-env"
    assert settings.default_model == "openai/gpt-4o"
    assert settings.default_temperature == 0.2
    assert settings.default_max_tokens == 256
    assert settings.app_name == "demo"
    assert settings.stream_idle_timeout_s is None
    assert settings.completions_url == "https://openrouter.ai/api/v1/chat/completions"


@pytest.mark.parametrize(
    "overrides",
    [
        {"api_key": None},
        {"base_url": "ftp://nope"},
        {"default_temperature": 3.0},
        {"default_max_tokens": 0},
        {"default_top_p": -0.1},
        {"max_attempts": 0},
        {"cache_ttl_s": float("inf")},
    ],
)
def test_validate_rejects_bad_settings(overrides):
    settings = OpenRouterSettings(**{"api_key": "k", **overrides})
    with pytest.raises(ConfigurationError):
        settings.validate()


def test_model_table_lookup_and_cost():
    info = get_model_info("openai/gpt-4o-mini")
    assert info is not None and info.context_length == 128_000
    assert get_model_info("nobody/unknown") is None
    assert [m.id for m in list_models()] == sorted(m.id for m in list_models())

    usage = Usage(prompt_tokens=1_000_000, completion_tokens=1_000_000, total_tokens=2_000_000)
    assert estimate_cost("openai/gpt-4o-mini", usage) == pytest.approx(0.75)
    assert estimate_cost("nobody/unknown", usage) == 0.0
