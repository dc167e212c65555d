"""
MIT License
Copyright (c) 2026 arpan404
See LICENSE file for full license text.

Module: cache/keys.py.
"""

from __future__ import annotations

import hashlib
import json
from collections.abc import Sequence

from ..types import GenerationOptions, Message


def build_cache_key(
    messages: Sequence[Message],
    options: GenerationOptions | None = None,
) -> str:
    """
    Build a deterministic, order-sensitive cache key.

    The payload is a list of explicit `[field, value]` pairs rather than a
    serialized mapping, so two requests share a key only when every message
    (in order) and every output-affecting option match.
    """
    opts = options or GenerationOptions()
    payload = [
        ["messages", [[m.role, m.content] for m in messages]],
        ["model", opts.model],
        ["temperature", opts.temperature],
        ["max_tokens", opts.max_tokens],
        ["top_p", opts.top_p],
        ["system_prompt", opts.system_prompt],
    ]
    normalized = json.dumps(payload, ensure_ascii=True, separators=(",", ":"), allow_nan=False)
    return hashlib.sha256(normalized.encode("utf-8")).hexdigest()
