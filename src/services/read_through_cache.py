"""Read-through cache over an async key-value store.

Every :meth:`ReadThroughCache.get` either serves a stored value or runs the
caller's (expensive) read operation and returns its result.  Which one
happens, and whether the fresh result is persisted, is decided by:

* the store read itself (failure, miss, undecodable bytes),
* a hard TTL computed from ``meta.updated``,
* a cached-data validator returning a :class:`ValidationOutcome`,
* a fresh-data validator returning ``bool``.

Lookup dispositions and the refresh mode they select:

    ====================================  ============  ===========
    disposition                           baseline      skip_saving
    ====================================  ============  ===========
    store error / miss / decode failure   none          False
    expired                               stored meta   False
    INVALID                               stored meta   False
    UNSTABLE                              stored meta   True
    VALID                                 (served, no refresh)
    ====================================  ============  ===========

Store trouble never reaches the caller: reads degrade to a refresh and
writes/prunes run detached (see :mod:`src.utils.concurrency`).  The only
exception ``get`` lets through is one raised by the read operation.

Concurrent ``get`` calls for the same key are not coordinated.  Each may
run the read operation, and the last store write wins.
"""

from __future__ import annotations

import asyncio
import inspect
import time
from typing import Any, Awaitable, Callable, Coroutine, Union

import structlog

from src.interfaces.store_provider import IKeyValueStore
from src.models.cache_entry import (
    CacheEntry,
    CacheMeta,
    ValidationOutcome,
    decode_entry,
    encode_entry,
)
from src.utils.concurrency import drain_tasks, fire_and_forget
from src.utils.errors import EntryDecodeError
from src.utils.logging import get_logger

logger: structlog.stdlib.BoundLogger = get_logger(__name__)

ReadOperation = Callable[[], Union[Awaitable[Any], Any]]
CacheValidator = Callable[[Any, CacheMeta], ValidationOutcome]
FreshValidator = Callable[[Any], bool]


def always_valid(data: Any, meta: CacheMeta) -> ValidationOutcome:
    """Default cached-data validator: every stored entry is servable."""
    return ValidationOutcome.VALID


def always_fresh(data: Any) -> bool:
    """Default fresh-data validator: every fresh result is persisted."""
    return True


class ReadThroughCache:
    """Serve from a key-value store, falling back to a caller read operation.

    Parameters
    ----------
    store:
        Backing store.  Fixed for the lifetime of the cache.
    clock:
        Returns the current Unix time in seconds.  Rounded to an int once
        per ``get``.  Tests inject a fake.
    default_ttl:
        TTL applied when ``get`` is called without one.  ``0`` disables
        expiry.
    """

    def __init__(
        self,
        store: IKeyValueStore,
        clock: Callable[[], float] = time.time,
        default_ttl: int = 0,
    ) -> None:
        # The store handle is never re-pointed after construction, so it is
        # the only state shared between concurrent ``get`` calls.
        self._store = store
        self._clock = clock
        self._default_ttl = default_ttl
        # Strong references to detached save/prune tasks.  The event loop
        # only holds weak references, so without this set a pending write
        # could be garbage collected before it reaches the store.
        self._pending: set[asyncio.Task[Any]] = set()

    @property
    def default_ttl(self) -> int:
        return self._default_ttl

    @property
    def store(self) -> IKeyValueStore:
        return self._store

    @property
    def pending_writes(self) -> int:
        """Number of detached store writes/prunes still in flight."""
        return len(self._pending)

    async def drain(self) -> None:
        """Wait for every dispatched write/prune to finish.

        Failures remain absorbed.  Use at shutdown, or in tests before
        inspecting the store.
        """
        await drain_tasks(self._pending)

    # ------------------------------------------------------------------
    # Lookup
    # ------------------------------------------------------------------

    async def get(
        self,
        key: str,
        read_operation: ReadOperation,
        ttl: int | None = None,
        cache_validator: CacheValidator = always_valid,
        fresh_validator: FreshValidator = always_fresh,
    ) -> Any:
        """Return the data for *key*, from the store or from *read_operation*.

        Parameters
        ----------
        key:
            Store key.
        read_operation:
            Zero-argument callable producing fresh data.  May return an
            awaitable, which is awaited.  Only called when a refresh is due.
        ttl:
            Seconds after ``meta.updated`` at which an entry is refreshed
            regardless of *cache_validator*.  ``<= 0`` disables expiry;
            ``None`` uses the cache's ``default_ttl``.
        cache_validator:
            ``(data, meta) -> ValidationOutcome`` judging a non-expired entry.
        fresh_validator:
            ``(data) -> bool`` deciding whether fresh data is persisted
            (``True``) or the key is pruned (``False``).

        Returns
        -------
        Any
            Cached or freshly produced data.

        Raises
        ------
        Exception
            Whatever *read_operation* raises, unchanged.
        TypeError
            If *cache_validator* returns something other than a
            :class:`ValidationOutcome`.
        """
        # ``now`` is captured once so expiry, created/updated stamping and
        # the log lines of this call all agree on the same second.
        now = round(self._clock())
        if ttl is None:
            ttl = self._default_ttl

        # -- 1. Store read ------------------------------------------------
        # A transport failure, a missing key and an undecodable payload are
        # handled identically: refresh with no metadata baseline, persisting
        # the result.  Only the log event differs, so "cache down" can still
        # be told apart from "cache cold" when reading the logs.
        try:
            raw = await self._store.get(key)
        except Exception as exc:
            logger.warning("cache_store_unavailable", key=key, error=str(exc))
            return await self._refresh(key, read_operation, fresh_validator, False, None, now)

        if raw is None:
            logger.debug("cache_miss", key=key)
            return await self._refresh(key, read_operation, fresh_validator, False, None, now)

        try:
            entry = decode_entry(raw)
        except EntryDecodeError as exc:
            logger.warning("cache_entry_undecodable", key=key, error=str(exc))
            return await self._refresh(key, read_operation, fresh_validator, False, None, now)

        # -- 2. Hard TTL --------------------------------------------------
        # Checked before the validator: an expired entry is refreshed even
        # if the validator would have accepted it.  An entry exactly ``ttl``
        # seconds old counts as expired.
        meta = entry.meta
        age = now - meta.updated
        if ttl > 0 and age >= ttl:
            logger.debug("cache_entry_expired", key=key, age=age, ttl=ttl)
            return await self._refresh(key, read_operation, fresh_validator, False, meta, now)

        # -- 3. Cached-data validator -------------------------------------
        # Every ValidationOutcome member is handled explicitly; anything
        # else (a bare bool included) is a caller bug and fails loudly.
        outcome = cache_validator(entry.data, meta)
        if outcome is ValidationOutcome.VALID:
            logger.debug("cache_hit", key=key)
            return entry.data
        if outcome is ValidationOutcome.INVALID:
            logger.debug("cache_entry_invalid", key=key)
            return await self._refresh(key, read_operation, fresh_validator, False, meta, now)
        if outcome is ValidationOutcome.UNSTABLE:
            # Serve fresh data for this call only; skip_saving=True keeps the
            # stored entry byte-for-byte as it is.
            logger.debug("cache_entry_unstable", key=key)
            return await self._refresh(key, read_operation, fresh_validator, True, meta, now)
        raise TypeError(
            f"cache_validator must return a ValidationOutcome, got {outcome!r}"
        )

    # ------------------------------------------------------------------
    # Refresh
    # ------------------------------------------------------------------

    async def _refresh(
        self,
        key: str,
        read_operation: ReadOperation,
        fresh_validator: FreshValidator,
        skip_saving: bool,
        baseline: CacheMeta | None,
        now: int,
    ) -> Any:
        # Exceptions from the read operation propagate untouched, before
        # anything is written to or deleted from the store.
        fresh = read_operation()
        if inspect.isawaitable(fresh):
            fresh = await fresh

        if skip_saving:
            return fresh

        # Persistence is detached: the caller gets ``fresh`` back as soon as
        # the save or prune has been scheduled, not once it has completed.
        if fresh_validator(fresh):
            self._dispatch(self._save(key, fresh, baseline, now), key)
        else:
            logger.debug("cache_fresh_data_rejected", key=key)
            self._dispatch(self._prune(key), key)

        return fresh

    def _dispatch(self, coro: Coroutine[Any, Any, None], key: str) -> None:
        fire_and_forget(
            coro,
            self._pending,
            logger=logger,
            event="cache_persistence_failed",
            key=key,
        )

    async def _save(
        self,
        key: str,
        data: Any,
        baseline: CacheMeta | None,
        now: int,
    ) -> None:
        # The entry is built and encoded inside the detached task, so a
        # payload that cannot be stamped or serialised ends up as a logged
        # ``cache_persistence_failed`` instead of an error from ``get``.
        entry = CacheEntry.stamp(data, now, baseline)
        await self._store.set(key, encode_entry(entry))
        logger.debug(
            "cache_entry_saved",
            key=key,
            created=entry.meta.created,
            updated=entry.meta.updated,
        )

    async def _prune(self, key: str) -> None:
        await self._store.delete(key)
        logger.debug("cache_entry_pruned", key=key)
