"""Public interface definitions for external collaborators.

The read-through cache reaches its backing store only through the abstract
base class defined here.  Concrete adapters live in ``src/providers/`` and
are chosen at startup by ``src/main.py``.

    Interface        ->  Concrete implementations (in src/providers/store/)
    -----------------------------------------------------------------------
    IKeyValueStore   ->  MemoryStoreProvider, RedisStoreProvider
"""

from src.interfaces.store_provider import IKeyValueStore

__all__ = ["IKeyValueStore"]
