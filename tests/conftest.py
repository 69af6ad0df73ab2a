"""Shared pytest fixtures for the read-through cache test suite."""

from __future__ import annotations

from typing import Any

import pytest

from src.models.cache_entry import CacheEntry, CacheMeta, encode_entry
from src.providers.store.memory_store import MemoryStoreProvider
from src.services.read_through_cache import ReadThroughCache

# Fixed "now" used by the fake clock: 2023-11-14T22:13:20Z.
NOW = 1_700_000_000
ONE_HOUR = 3600


class FakeClock:
    """Callable clock returning a settable Unix time."""

    def __init__(self, now: float = NOW) -> None:
        self.now = now

    def __call__(self) -> float:
        return self.now


def entry_bytes(data: Any, created: int, updated: int) -> bytes:
    """Encode a stored entry the way the cache writes it."""
    return encode_entry(CacheEntry(data=data, meta=CacheMeta(created=created, updated=updated)))


# ---------------------------------------------------------------------------
# Fixtures
# ---------------------------------------------------------------------------


@pytest.fixture
def clock() -> FakeClock:
    return FakeClock()


@pytest.fixture
def store() -> MemoryStoreProvider:
    return MemoryStoreProvider(max_size=100)


@pytest.fixture
def cache(store: MemoryStoreProvider, clock: FakeClock) -> ReadThroughCache:
    return ReadThroughCache(store, clock=clock)
