"""In-process key-value store backed by ``cachetools.LRUCache``.

Fast and dependency-light, but not shared across processes.  Suitable for
development, tests and single-worker deployments; use
:class:`~src.providers.store.redis_store.RedisStoreProvider` when several
workers must share one cache.
"""

from __future__ import annotations

import structlog
from cachetools import LRUCache

from src.interfaces.store_provider import IKeyValueStore
from src.utils.logging import get_logger

logger: structlog.stdlib.BoundLogger = get_logger(__name__)


class MemoryStoreProvider(IKeyValueStore):
    """Bounded in-memory byte store.

    Entries never expire on their own; staleness is judged by the cache from
    entry metadata.  When *max_size* is reached the least-recently-used key
    is evicted, which the cache sees as an ordinary miss.

    Parameters
    ----------
    max_size:
        Maximum number of keys held before eviction.
    """

    def __init__(self, max_size: int = 10000) -> None:
        self._data: LRUCache[str, bytes] = LRUCache(maxsize=max_size)

    # ------------------------------------------------------------------
    # IKeyValueStore implementation
    # ------------------------------------------------------------------

    async def get(self, key: str) -> bytes | None:
        value = self._data.get(key)
        logger.debug("store_get", key=key, found=value is not None)
        return value

    async def set(self, key: str, value: bytes) -> None:
        self._data[key] = value
        logger.debug("store_set", key=key, size=len(value))

    async def delete(self, key: str) -> None:
        """Remove *key* (no-op if absent)."""
        self._data.pop(key, None)
        logger.debug("store_delete", key=key)

    def __len__(self) -> int:
        return len(self._data)

    def __contains__(self, key: object) -> bool:
        return key in self._data
