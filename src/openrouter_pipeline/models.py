"""
MIT License
Copyright (c) 2026 arpan404
See LICENSE file for full license text.

Static lookup table of commonly used OpenRouter models.
"""

from __future__ import annotations

from dataclasses import dataclass

from .types import Usage


@dataclass(frozen=True, slots=True)
class ModelInfo:
    """Display and pricing metadata; prices are USD per million tokens."""

    id: str
    name: str
    context_length: int
    prompt_price_per_m: float
    completion_price_per_m: float


MODELS: dict[str, ModelInfo] = {
    row.id: row
    for row in (
        ModelInfo("anthropic/claude-3.5-sonnet", "Claude 3.5 Sonnet", 200_000, 3.0, 15.0),
        ModelInfo("anthropic/claude-3-haiku", "Claude 3 Haiku", 200_000, 0.25, 1.25),
        ModelInfo("openai/gpt-4o", "GPT-4o", 128_000, 2.5, 10.0),
        ModelInfo("openai/gpt-4o-mini", "GPT-4o mini", 128_000, 0.15, 0.6),
        ModelInfo("google/gemini-pro-1.5", "Gemini Pro 1.5", 2_000_000, 1.25, 5.0),
        ModelInfo("meta-llama/llama-3.1-70b-instruct", "Llama 3.1 70B Instruct", 131_072, 0.4, 0.4),
        ModelInfo("mistralai/mistral-large", "Mistral Large", 128_000, 2.0, 6.0),
    )
}


def get_model_info(model_id: str) -> ModelInfo | None:
    return MODELS.get(model_id.strip())


def list_models() -> list[ModelInfo]:
    return sorted(MODELS.values(), key=lambda row: row.id)


def estimate_cost(model_id: str, usage: Usage) -> float:
    """Estimated USD cost of one call; 0.0 for models not in the table."""
    info = get_model_info(model_id)
    if info is None:
        return 0.0
    return (
        usage.prompt_tokens * info.prompt_price_per_m
        + usage.completion_tokens * info.completion_price_per_m
    ) / 1_000_000
