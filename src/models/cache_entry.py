"""Cache entry models and the wire codec for the read-through cache.

A stored entry is a JSON object with exactly two top-level fields:

    {"data": <caller payload>, "meta": {"created": <int>, "updated": <int>}}

``data`` is opaque to the cache.  ``meta`` holds integer Unix seconds:
``created`` marks the first successful write of this key's lineage and is
carried forward across refreshes; ``updated`` marks the latest write.

Decoding is strict.  Any other shape (extra or missing fields, string or
float timestamps, ``created > updated``) raises :class:`EntryDecodeError`,
which the cache treats exactly like a miss.
"""

from __future__ import annotations

from enum import Enum
from typing import Any

from pydantic import BaseModel, ConfigDict, StrictInt, ValidationError, model_validator
from pydantic_core import PydanticSerializationError

from src.utils.errors import EntryDecodeError, EntryEncodeError


# ---------------------------------------------------------------------------
# ValidationOutcome: verdict of the cached-data validator.
# ---------------------------------------------------------------------------
class ValidationOutcome(str, Enum):  # noqa: UP042
    """Verdict returned by a cached-data validator.

    VALID serves the cached data as-is.  INVALID refreshes and persists the
    result.  UNSTABLE refreshes for this call only and leaves the stored
    entry untouched.
    """

    VALID = "VALID"
    INVALID = "INVALID"
    UNSTABLE = "UNSTABLE"


# ---------------------------------------------------------------------------
# CacheMeta / CacheEntry: the stored record.
# ---------------------------------------------------------------------------
class CacheMeta(BaseModel):
    """Persistence timestamps of a cache entry, in integer Unix seconds."""

    model_config = ConfigDict(frozen=True, extra="forbid")

    # StrictInt rejects "123", 123.0 and true.
    created: StrictInt
    updated: StrictInt

    @model_validator(mode="after")
    def _created_not_after_updated(self) -> CacheMeta:
        if self.created > self.updated:
            raise ValueError(
                f"created ({self.created}) is later than updated ({self.updated})"
            )
        return self


class CacheEntry(BaseModel):
    """A caller payload together with its persistence metadata."""

    model_config = ConfigDict(frozen=True, extra="forbid")

    data: Any
    meta: CacheMeta

    @classmethod
    def stamp(cls, data: Any, now: int, baseline: CacheMeta | None = None) -> CacheEntry:
        """Build the entry written after a successful refresh at *now*.

        ``created`` is inherited from *baseline* when one exists, otherwise
        it starts a new lineage at *now*.
        """
        if baseline is None:
            created = now
        else:
            # A baseline written by a host whose clock runs ahead (or before
            # an NTP step back here) can carry created > now.  Clamp so the
            # created <= updated invariant holds for the entry we write.
            created = min(baseline.created, now)
        return cls(data=data, meta=CacheMeta(created=created, updated=now))


def encode_entry(entry: CacheEntry) -> bytes:
    """Serialise *entry* to UTF-8 JSON bytes.

    Raises
    ------
    EntryEncodeError
        If ``entry.data`` contains values that cannot be rendered as JSON.
    """
    try:
        return entry.model_dump_json().encode("utf-8")
    except PydanticSerializationError as exc:
        raise EntryEncodeError(f"Payload is not JSON serialisable: {exc}") from exc


def decode_entry(raw: bytes | str) -> CacheEntry:
    """Parse stored bytes into a :class:`CacheEntry`.

    Raises
    ------
    EntryDecodeError
        If *raw* is not valid JSON or does not have the exact entry shape.
    """
    try:
        return CacheEntry.model_validate_json(raw)
    except (ValidationError, ValueError) as exc:
        raise EntryDecodeError(f"Malformed cache entry: {exc}") from exc
