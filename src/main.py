"""Factories that wire a ReadThroughCache from Settings.

Typical use::

    cache = build_cache()
    profile = await cache.get(
        f"profile:{user_id}",
        lambda: fetch_profile(user_id),
    )  # ttl falls back to Settings.default_ttl
    ...
    await cache.drain()
"""

from __future__ import annotations

import structlog

from src.config.settings import Settings
from src.interfaces.store_provider import IKeyValueStore
from src.providers.store.memory_store import MemoryStoreProvider
from src.providers.store.redis_store import RedisStoreProvider
from src.services.read_through_cache import ReadThroughCache
from src.utils.errors import ConfigurationError
from src.utils.logging import configure_logging, get_logger

logger: structlog.stdlib.BoundLogger = get_logger(__name__)

_STORE_BACKENDS = ("memory", "redis")


def build_store(app_settings: Settings) -> IKeyValueStore:
    """Return the store provider selected by ``store_backend``.

    Raises
    ------
    ConfigurationError
        If ``store_backend`` names an unknown backend.
    """
    backend = app_settings.store_backend.strip().lower()
    if backend == "memory":
        return MemoryStoreProvider(max_size=app_settings.memory_store_max_size)
    if backend == "redis":
        return RedisStoreProvider(
            url=app_settings.redis_url,
            key_prefix=app_settings.store_key_prefix,
            socket_timeout=app_settings.redis_socket_timeout,
        )
    raise ConfigurationError(
        f"Unknown store_backend {app_settings.store_backend!r}; "
        f"expected one of {', '.join(_STORE_BACKENDS)}"
    )


def build_cache(
    app_settings: Settings | None = None,
    store: IKeyValueStore | None = None,
) -> ReadThroughCache:
    """Configure logging and assemble a :class:`ReadThroughCache`.

    Parameters
    ----------
    app_settings:
        Settings to use.  Read from the environment when ``None``.
    store:
        Store to wrap.  Built from *app_settings* when ``None``.
    """
    if app_settings is None:
        app_settings = Settings()

    configure_logging(app_settings)

    if store is None:
        store = build_store(app_settings)

    logger.info(
        "read_through_cache_ready",
        store=type(store).__name__,
        default_ttl=app_settings.default_ttl,
    )
    return ReadThroughCache(store, default_ttl=app_settings.default_ttl)
