"""Structured logging for the read-through cache, configured from Settings.

# ─── HOW LOGGING IS WIRED ─────────────────────────────────────────────
#
# structlog builds the event dict (``cache_hit``, ``key=...``) and then
# hands it to a *standard-library* logger named after the module.  A
# single stdlib handler on the root logger renders every record, so the
# cache's own events and the ``redis`` client's log lines come out in one
# format on one stream:
#
#   structlog logger ──► stdlib logger "src.services.read_through_cache" ─┐
#   redis client     ──► stdlib logger "redis.asyncio.connection" ────────┤
#                                                                          ▼
#                                      root handler + ProcessorFormatter
#                                      (ConsoleRenderer or JSONRenderer)
#
# Everything is decided by Settings: ``app_env == "production"`` selects
# JSON, ``log_level`` sets the root level.  Nothing is read from
# os.environ directly, so a value that only lives in ``.env`` behaves the
# same as a real environment variable.
# ──────────────────────────────────────────────────────────────────────
"""

from __future__ import annotations

import logging
import sys

import structlog

from src.config.settings import Settings

# Third-party loggers that are chatty at DEBUG.  They are held at WARNING
# or above even when the cache itself runs at DEBUG.
_QUIET_LOGGERS = ("redis", "asyncio")


def _renderer(app_settings: Settings) -> structlog.types.Processor:
    if app_settings.app_env == "production":
        return structlog.processors.JSONRenderer()
    return structlog.dev.ConsoleRenderer(colors=sys.stdout.isatty())


def configure_logging(app_settings: Settings | None = None) -> structlog.stdlib.BoundLogger:
    """Configure structlog and stdlib logging from *app_settings*.

    Args:
        app_settings: Settings supplying ``log_level`` and ``app_env``.
                      Read from the environment when ``None``.

    Returns:
        A bound logger for the caller's convenience.
    """
    if app_settings is None:
        app_settings = Settings()

    level = logging.getLevelName(app_settings.log_level.upper())
    if not isinstance(level, int):
        # getLevelName returns "Level FOO" for unknown names.
        level = logging.INFO

    # Processors shared by structlog events and foreign (stdlib) records.
    shared_processors: list[structlog.types.Processor] = [
        structlog.contextvars.merge_contextvars,
        structlog.stdlib.add_log_level,
        structlog.stdlib.add_logger_name,
        structlog.processors.TimeStamper(fmt="iso", utc=True),
    ]

    structlog.configure(
        processors=[
            # Drop events below the stdlib level before doing any work.
            structlog.stdlib.filter_by_level,
            *shared_processors,
            structlog.processors.StackInfoRenderer(),
            structlog.dev.set_exc_info,
            # Hand the event dict to ProcessorFormatter for final rendering.
            structlog.stdlib.ProcessorFormatter.wrap_for_formatter,
        ],
        logger_factory=structlog.stdlib.LoggerFactory(),
        wrapper_class=structlog.stdlib.BoundLogger,
        context_class=dict,
        cache_logger_on_first_use=True,
    )

    renderer = _renderer(app_settings)
    final_processors: list[structlog.types.Processor] = [
        structlog.stdlib.ProcessorFormatter.remove_processors_meta,
    ]
    if isinstance(renderer, structlog.processors.JSONRenderer):
        # JSON has no pretty traceback support; flatten exc_info to a string.
        final_processors.append(structlog.processors.format_exc_info)
    final_processors.append(renderer)

    formatter = structlog.stdlib.ProcessorFormatter(
        foreign_pre_chain=shared_processors,
        processors=final_processors,
    )

    handler = logging.StreamHandler(sys.stdout)
    handler.setFormatter(formatter)

    root_logger = logging.getLogger()
    root_logger.handlers.clear()
    root_logger.addHandler(handler)
    root_logger.setLevel(level)

    for name in _QUIET_LOGGERS:
        logging.getLogger(name).setLevel(max(level, logging.WARNING))

    return structlog.stdlib.get_logger()


def get_logger(name: str) -> structlog.stdlib.BoundLogger:
    """Return a structlog logger backed by the stdlib logger *name*.

    Falls back to :func:`configure_logging` with Settings from the
    environment if structlog has not been configured yet.
    """
    if not structlog.is_configured():
        configure_logging()

    return structlog.stdlib.get_logger(name)
