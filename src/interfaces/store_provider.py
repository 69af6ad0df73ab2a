"""Abstract base class for backing key-value stores.

The read-through cache talks to its store only through this contract, so
the backend (Redis, an in-process dict, anything else) can be swapped
without touching the lookup and refresh logic.
"""

from __future__ import annotations

from abc import ABC, abstractmethod


class IKeyValueStore(ABC):
    """Contract for a remote or local byte-oriented key-value store.

    All operations are async so network-backed stores do not block the
    event loop.  Implementations raise
    :class:`~src.utils.errors.StoreUnavailableError` on transport problems;
    key absence is never an error.
    """

    @abstractmethod
    async def get(self, key: str) -> bytes | None:
        """Return the raw bytes stored under *key*.

        Parameters
        ----------
        key:
            The store key to look up.

        Returns
        -------
        bytes or None
            The stored value, or ``None`` if *key* is absent.
        """

    @abstractmethod
    async def set(self, key: str, value: bytes) -> None:
        """Store *value* under *key*, overwriting any existing value.

        No store-native expiry is applied.

        Parameters
        ----------
        key:
            The store key.
        value:
            The encoded entry.
        """

    @abstractmethod
    async def delete(self, key: str) -> None:
        """Remove *key* from the store.

        This is a no-op if the key does not exist.

        Parameters
        ----------
        key:
            The store key to delete.
        """
