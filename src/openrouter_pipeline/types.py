"""
MIT License
Copyright (c) 2026 arpan404
See LICENSE file for full license text.

This module defines the request/response types that flow through the pipeline.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, Literal

Role = Literal["user", "assistant", "system"]

ROLES: tuple[str, ...] = ("user", "assistant", "system")


@dataclass(frozen=True, slots=True)
class Message:
    """One chat message in a conversation."""

    role: Role
    content: str


@dataclass(frozen=True, slots=True)
class GenerationOptions:
    """
    Per-call generation options.

    Fields left as `None` are filled from `OpenRouterSettings` defaults when
    the request is built.
    """

    model: str | None = None
    temperature: float | None = None
    max_tokens: int | None = None
    top_p: float | None = None
    system_prompt: str | None = None


@dataclass(frozen=True, slots=True)
class GenerationRequest:
    """Fully-resolved request handed to the executor."""

    messages: tuple[Message, ...]
    model: str
    temperature: float = 0.7
    max_tokens: int = 1000
    top_p: float = 1.0
    stream: bool = False


@dataclass(frozen=True, slots=True)
class Usage:
    """Token usage counters returned by the API."""

    prompt_tokens: int = 0
    completion_tokens: int = 0
    total_tokens: int = 0


@dataclass(frozen=True, slots=True)
class GenerationResult:
    """Normalized result of one successful completion call."""

    content: str
    model: str
    usage: Usage = field(default_factory=Usage)
    finish_reason: str | None = None
    id: str | None = None
    raw: dict[str, Any] = field(default_factory=dict, compare=False)
