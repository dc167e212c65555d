"""
MIT License
Copyright (c) 2026 arpan404
See LICENSE file for full license text.

Pydantic models for the OpenRouter chat-completions wire format.
"""

from __future__ import annotations

from pydantic import BaseModel, ConfigDict, Field


class _WireModel(BaseModel):
    model_config = ConfigDict(extra="ignore")


class WireMessage(_WireModel):
    role: str = "assistant"
    content: str | None = None


class WireChoice(_WireModel):
    index: int = 0
    message: WireMessage
    finish_reason: str | None = None


class WireUsage(_WireModel):
    prompt_tokens: int = 0
    completion_tokens: int = 0
    total_tokens: int = 0


class ChatCompletionResponse(_WireModel):
    """Non-streaming response body."""

    id: str | None = None
    object: str | None = None
    created: int | None = None
    model: str | None = None
    choices: list[WireChoice] = Field(min_length=1)
    usage: WireUsage | None = None


class WireDelta(_WireModel):
    role: str | None = None
    content: str | None = None


class WireStreamChoice(_WireModel):
    index: int = 0
    delta: WireDelta = Field(default_factory=WireDelta)
    finish_reason: str | None = None


class WireError(_WireModel):
    message: str = "OpenRouter error"
    code: int | str | None = None


class StreamChunk(_WireModel):
    """One `data:` record of a streaming response."""

    id: str | None = None
    model: str | None = None
    choices: list[WireStreamChoice] = Field(default_factory=list)
    error: WireError | None = None

    def text(self) -> str | None:
        if not self.choices:
            return None
        return self.choices[0].delta.content


class ErrorEnvelope(_WireModel):
    """Error body returned alongside non-2xx statuses."""

    error: WireError
