"""
MIT License
Copyright (c) 2026 arpan404
See LICENSE file for full license text.

Module: cache/__init__.py.
"""

from .base import CacheEntry, ResponseCache
from .inmemory import InMemoryResponseCache
from .keys import build_cache_key

__all__ = [
    "CacheEntry",
    "ResponseCache",
    "InMemoryResponseCache",
    "build_cache_key",
]
