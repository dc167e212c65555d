"""
MIT License
Copyright (c) 2026 arpan404
See LICENSE file for full license text.

Caller-owned usage accounting.
"""

from __future__ import annotations

from dataclasses import dataclass, field

from .models import estimate_cost
from .types import GenerationResult


@dataclass(slots=True)
class UsageTracker:
    """
    Running token and cost totals for one caller.

    The client never keeps global counters; callers pass a tracker into
    `generate_completion(..., usage=tracker)` and own its lifetime.
    """

    requests: int = 0
    prompt_tokens: int = 0
    completion_tokens: int = 0
    total_tokens: int = 0
    estimated_cost_usd: float = 0.0
    by_model: dict[str, int] = field(default_factory=dict)

    def add(self, result: GenerationResult) -> None:
        self.requests += 1
        self.prompt_tokens += result.usage.prompt_tokens
        self.completion_tokens += result.usage.completion_tokens
        self.total_tokens += result.usage.total_tokens
        self.estimated_cost_usd += estimate_cost(result.model, result.usage)
        self.by_model[result.model] = self.by_model.get(result.model, 0) + result.usage.total_tokens

    def reset(self) -> None:
        self.requests = 0
        self.prompt_tokens = 0
        self.completion_tokens = 0
        self.total_tokens = 0
        self.estimated_cost_usd = 0.0
        self.by_model.clear()
