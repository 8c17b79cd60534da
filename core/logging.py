"""Structured logging for the release monitor."""

import logging
import os
import sys
from collections.abc import MutableMapping
from contextlib import AbstractContextManager
from functools import lru_cache
from typing import Any, Protocol

import structlog
from structlog.types import Processor

# Libraries that log every scheduled run or request at INFO.
NOISY_LOGGERS = ("apscheduler", "aiohttp.access")


def _is_development() -> bool:
    from .config import get_settings

    return get_settings().debug or os.getenv("ENV", "development") == "development"


def _add_service(logger: Any, method_name: str, event_dict: MutableMapping[str, Any]) -> MutableMapping[str, Any]:
    """Tag each record with the service name, keeping any explicit value."""
    from .config import get_settings

    event_dict.setdefault("service", get_settings().app_name)
    return event_dict


def get_processors(development: bool | None = None) -> list[Processor]:
    """
    Processor chain: context, level, timestamp, service tag, then a renderer.

    Development renders to the console; anything else renders one JSON
    object per line with tracebacks flattened into the record.
    """
    if development is None:
        development = _is_development()

    processors: list[Processor] = [
        structlog.contextvars.merge_contextvars,
        structlog.stdlib.add_log_level,
        structlog.stdlib.add_logger_name,
        structlog.processors.TimeStamper(fmt="iso", utc=True),
        structlog.processors.StackInfoRenderer(),
        _add_service,
    ]
    if development:
        processors.append(structlog.dev.ConsoleRenderer(exception_formatter=structlog.dev.plain_traceback))
    else:
        processors += [structlog.processors.format_exc_info, structlog.processors.JSONRenderer()]
    return processors


@lru_cache(maxsize=1)
def configure_logging(level: str = "INFO") -> None:
    """Configure structlog over stdlib logging. Safe to call more than once."""
    numeric_level = getattr(logging, level.upper(), logging.INFO)
    logging.basicConfig(format="%(message)s", stream=sys.stdout, level=numeric_level)
    for name in NOISY_LOGGERS:
        logging.getLogger(name).setLevel(max(numeric_level, logging.WARNING))

    structlog.configure(
        processors=get_processors(),
        wrapper_class=structlog.stdlib.BoundLogger,
        context_class=dict,
        logger_factory=structlog.stdlib.LoggerFactory(),
        cache_logger_on_first_use=True,
    )


def get_logger(name: str = __name__) -> structlog.stdlib.BoundLogger:
    if not structlog.is_configured():
        configure_logging()
    return structlog.get_logger(name)  # type: ignore[no-any-return]


def log_context(**fields: Any) -> AbstractContextManager:
    """
    Bind fields to every record logged inside the block.

    Usage:
        with log_context(iteration=12, token_index=1):
            logger.info("events_published", count=3)
    """
    return structlog.contextvars.bound_contextvars(**fields)


# =============================================================================
# Operational Log Sink
# =============================================================================


class LogSink(Protocol):
    """Callable receiving one operational record: an event name plus fields."""

    def __call__(self, event: str, **fields: Any) -> None: ...


def log_event(event: str, **fields: Any) -> None:
    """
    Emit an operational record through structlog.

    Fire-and-forget: a failing renderer or handler never reaches the caller.
    """
    try:
        get_logger("ops").info(event, **fields)
    except Exception as e:  # noqa: BLE001
        sys.stderr.write(f"log_event failed for {event}: {e}\n")


__all__ = [
    "configure_logging",
    "get_logger",
    "get_processors",
    "log_context",
    "LogSink",
    "log_event",
]
