"""Redis-backed key-value store using ``redis.asyncio``.

Values are stored as raw bytes (``decode_responses=False``) and written
with a plain ``SET``; no Redis-native expiry is ever attached because the
cache computes staleness from the entry metadata itself.

Every transport or protocol failure is re-raised as
:class:`StoreUnavailableError` with ``provider_name="redis"``, which is the
single error type the cache expects from a store.
"""

from __future__ import annotations

import redis.asyncio as redis
import structlog
from redis.exceptions import RedisError

from src.interfaces.store_provider import IKeyValueStore
from src.utils.errors import StoreUnavailableError
from src.utils.logging import get_logger

logger: structlog.stdlib.BoundLogger = get_logger(__name__)

_PROVIDER_NAME = "redis"


class RedisStoreProvider(IKeyValueStore):
    """Key-value store on a Redis server.

    Parameters
    ----------
    url:
        Connection URL, e.g. ``redis://localhost:6379/0``.
    key_prefix:
        Namespace prepended to every key, e.g. ``"rtc:"``.
    socket_timeout:
        Connect and read timeout in seconds.
    client:
        Pre-built ``redis.asyncio.Redis`` client.  When given, *url* and
        *socket_timeout* are ignored.
    """

    def __init__(
        self,
        url: str = "redis://localhost:6379/0",
        key_prefix: str = "",
        socket_timeout: float = 5.0,
        client: redis.Redis | None = None,
    ) -> None:
        self._key_prefix = key_prefix
        if client is None:
            client = redis.from_url(
                url,
                decode_responses=False,
                socket_connect_timeout=socket_timeout,
                socket_timeout=socket_timeout,
            )
        self._client = client

    def _key(self, key: str) -> str:
        return f"{self._key_prefix}{key}"

    # ------------------------------------------------------------------
    # IKeyValueStore implementation
    # ------------------------------------------------------------------

    async def get(self, key: str) -> bytes | None:
        try:
            value = await self._client.get(self._key(key))
        except (RedisError, OSError) as exc:
            raise StoreUnavailableError(
                f"GET {self._key(key)} failed: {exc}", provider_name=_PROVIDER_NAME
            ) from exc
        if isinstance(value, str):
            # Injected clients may have been built with decode_responses=True.
            return value.encode("utf-8")
        return value

    async def set(self, key: str, value: bytes) -> None:
        try:
            await self._client.set(self._key(key), value)
        except (RedisError, OSError) as exc:
            raise StoreUnavailableError(
                f"SET {self._key(key)} failed: {exc}", provider_name=_PROVIDER_NAME
            ) from exc

    async def delete(self, key: str) -> None:
        try:
            await self._client.delete(self._key(key))
        except (RedisError, OSError) as exc:
            raise StoreUnavailableError(
                f"DEL {self._key(key)} failed: {exc}", provider_name=_PROVIDER_NAME
            ) from exc

    async def ping(self) -> bool:
        """Return ``True`` if the server answers ``PING``."""
        try:
            return bool(await self._client.ping())
        except (RedisError, OSError) as exc:
            logger.warning("redis_ping_failed", error=str(exc))
            return False

    async def close(self) -> None:
        """Release the connection pool."""
        await self._client.aclose()
        logger.info("redis_store_closed")
