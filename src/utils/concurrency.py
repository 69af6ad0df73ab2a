"""Detached-task helpers for fire-and-forget persistence.

The read-through cache must return fresh data without waiting for the
store write (or prune) that follows it.  :func:`fire_and_forget` schedules
such a coroutine on its own :class:`asyncio.Task` and guarantees that:

1. The task is strongly referenced until it finishes.  The event loop only
   keeps weak references to tasks, so an unreferenced task can be garbage
   collected mid-flight.
2. Its outcome is unobservable to whoever dispatched it.  A failure is
   logged once and swallowed; cancellation is ignored silently.

:func:`drain_tasks` is the only way to wait for detached work, used for
graceful shutdown and by tests that need to inspect the store afterwards.
"""

from __future__ import annotations

import asyncio
from typing import Any, Coroutine

import structlog

from src.utils.logging import get_logger

_logger: structlog.stdlib.BoundLogger = get_logger(__name__)


def fire_and_forget(
    coro: Coroutine[Any, Any, Any],
    registry: set[asyncio.Task[Any]],
    logger: structlog.stdlib.BoundLogger | None = None,
    event: str = "background_task_failed",
    **log_context: Any,
) -> asyncio.Task[Any]:
    """Run *coro* on a detached task whose failure never propagates.

    Parameters
    ----------
    coro:
        The coroutine to run.  Must be called from inside a running loop.
    registry:
        A set owned by the caller that holds the task until it completes.
    logger:
        Logger used to report a failure.  Defaults to this module's logger.
    event:
        Event name logged when the coroutine raises.
    **log_context:
        Extra key/value pairs bound to the failure log line (e.g. ``key=``).

    Returns
    -------
    asyncio.Task
        The scheduled task.  Callers normally drop it.
    """
    if logger is None:
        logger = _logger

    # create_task schedules the coroutine on the running loop; it starts on
    # the next loop iteration, after the caller has already moved on.
    task = asyncio.get_running_loop().create_task(coro)
    registry.add(task)

    def _on_done(finished: asyncio.Task[Any]) -> None:
        # Runs once per task, whatever its outcome.  Dropping the reference
        # here is what lets the registry shrink back to empty.
        registry.discard(finished)
        if finished.cancelled():
            # Cancellation comes from loop shutdown or an explicit cancel();
            # neither is a store failure worth reporting.
            return
        # Reading exception() marks it as retrieved, so asyncio does not
        # print "Task exception was never retrieved" at garbage collection.
        error = finished.exception()
        if error is not None:
            logger.warning(event, error=str(error), error_type=type(error).__name__, **log_context)

    task.add_done_callback(_on_done)
    return task


async def drain_tasks(registry: set[asyncio.Task[Any]]) -> None:
    """Wait until every task in *registry* (including late additions) is done.

    Task failures are not re-raised; they were already reported by the
    done-callback installed in :func:`fire_and_forget`.
    """
    # Loop rather than gather once: a task that finishes may itself have
    # dispatched more work into the same registry.
    while registry:
        await asyncio.gather(*list(registry), return_exceptions=True)
        # Done-callbacks run on the next loop iteration; yield so finished
        # tasks are discarded before the registry is checked again.
        await asyncio.sleep(0)
