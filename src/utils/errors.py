"""Exception hierarchy for the read-through cache.

Every exception raised by the cache's collaborators inherits from
:class:`ReadThroughCacheError`, which carries an optional ``provider_name``
so log handlers can tell which backing store (e.g. "redis", "memory")
produced the failure.

    ReadThroughCacheError  (base)
    +-- StoreUnavailableError  (store transport failure)
    +-- EntryDecodeError       (stored bytes are not a valid cache entry)
    +-- EntryEncodeError       (fresh data cannot be serialised)
    +-- ConfigurationError     (invalid settings at startup)

None of these escape :meth:`ReadThroughCache.get`.  Store and codec errors
are absorbed there and turned into a refresh; only the caller's own
read-operation failure reaches the caller.
"""


class ReadThroughCacheError(Exception):
    """Base exception for all read-through cache errors.

    ``__str__`` prefixes the provider name in brackets, e.g.
    ``[redis] Connection refused``.
    """

    def __init__(
        self,
        message: str = "An unexpected cache error occurred",
        provider_name: str | None = None,
    ) -> None:
        self._message = message
        self._provider_name = provider_name
        super().__init__(self._message)

    @property
    def message(self) -> str:
        return self._message

    @property
    def provider_name(self) -> str | None:
        return self._provider_name

    def __str__(self) -> str:
        if self._provider_name:
            return f"[{self._provider_name}] {self._message}"
        return self._message


# ---------------------------------------------------------------------------
# Backing store errors
# ---------------------------------------------------------------------------

class StoreUnavailableError(ReadThroughCacheError):
    """Raised by a store provider when the backing store cannot be reached.

    Distinct from a miss: a miss is ``None`` from ``get``, this is "don't
    know".  The cache still handles both the same way.
    """

    def __init__(
        self,
        message: str = "Backing store is unavailable",
        provider_name: str | None = None,
    ) -> None:
        super().__init__(message=message, provider_name=provider_name)


# ---------------------------------------------------------------------------
# Entry codec errors
# ---------------------------------------------------------------------------

class EntryDecodeError(ReadThroughCacheError):
    """Raised when stored bytes do not decode into a well-formed cache entry."""

    def __init__(
        self,
        message: str = "Cache entry could not be decoded",
        provider_name: str | None = None,
    ) -> None:
        super().__init__(message=message, provider_name=provider_name)


class EntryEncodeError(ReadThroughCacheError):
    """Raised when a payload cannot be serialised into a cache entry."""

    def __init__(
        self,
        message: str = "Cache entry could not be encoded",
        provider_name: str | None = None,
    ) -> None:
        super().__init__(message=message, provider_name=provider_name)


# ---------------------------------------------------------------------------
# Configuration errors
# ---------------------------------------------------------------------------

class ConfigurationError(ReadThroughCacheError):
    """Raised when configuration is invalid or missing at startup."""

    def __init__(
        self,
        message: str = "Invalid or missing configuration",
        provider_name: str | None = None,
    ) -> None:
        super().__init__(message=message, provider_name=provider_name)
