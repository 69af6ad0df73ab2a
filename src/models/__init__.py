"""Read-through cache models: the stored entry and the validator verdict."""

from __future__ import annotations

from src.models.cache_entry import (
    CacheEntry,
    CacheMeta,
    ValidationOutcome,
    decode_entry,
    encode_entry,
)

__all__ = [
    "CacheEntry",
    "CacheMeta",
    "ValidationOutcome",
    "decode_entry",
    "encode_entry",
]
