"""Utility modules for the read-through cache.

- **errors** -- exception hierarchy rooted at ReadThroughCacheError.
- **concurrency** -- detached fire-and-forget tasks and draining them.
- **logging** -- structlog setup: coloured console output in development,
  JSON in production.
"""

# -- Exception hierarchy ----------------------------------------------------
from src.utils.errors import (
    ConfigurationError,
    EntryDecodeError,
    EntryEncodeError,
    ReadThroughCacheError,
    StoreUnavailableError,
)

# -- Detached task helpers ---------------------------------------------------
from src.utils.concurrency import drain_tasks, fire_and_forget

# -- Structured logging setup ----------------------------------------------
from src.utils.logging import configure_logging, get_logger

__all__ = [
    "ConfigurationError",
    "EntryDecodeError",
    "EntryEncodeError",
    "ReadThroughCacheError",
    "StoreUnavailableError",
    "configure_logging",
    "drain_tasks",
    "fire_and_forget",
    "get_logger",
]
