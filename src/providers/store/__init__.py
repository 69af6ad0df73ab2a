"""Backing store providers.

MemoryStoreProvider keeps entries in a process-local LRU map.
RedisStoreProvider talks to a shared Redis server.  Both implement
IKeyValueStore, so the cache is unaware of which one it is given.
"""

from src.providers.store.memory_store import MemoryStoreProvider
from src.providers.store.redis_store import RedisStoreProvider

__all__ = ["MemoryStoreProvider", "RedisStoreProvider"]
