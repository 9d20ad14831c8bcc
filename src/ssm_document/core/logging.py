"""
Structured logging for ssm-document.

A thin layer over structlog so every module logs the same way::

    logger = get_logger(__name__)
    logger.info("reconcile.created", document="demo", format="JSON")

Logs are written to stderr.  Stdout is reserved for the plain
``[name] Creating..`` progress lines the CLI prints, so piping the command
output never mixes the two streams.

Architecture:
    ::

        configure_logging(level="INFO", json_format=None, service="ssm-document")
            │
            ▼
        processor chain:
          1. TimeStamper (iso)
          2. merge_contextvars      ← bind_context(operation="deploy", batch_id=...)
          3. add_log_level
          4. add_service_metadata
          5. ecs_compatible         (JSON mode only)
          6. JSONRenderer | ConsoleRenderer

Tags:
    logging, structlog, observability, json-logging
"""

from __future__ import annotations

import logging
import sys
from typing import Any

import structlog
from structlog._config import BoundLoggerLazyProxy
from structlog.types import EventDict, Processor, WrappedLogger

# Store service name for metadata
_SERVICE_NAME = "ssm-document"


def _add_service_metadata(
    logger: WrappedLogger, method_name: str, event_dict: EventDict
) -> EventDict:
    """Add service-level metadata to all logs."""
    event_dict.setdefault("service.name", _SERVICE_NAME)
    return event_dict


def _ecs_compatible(
    logger: WrappedLogger, method_name: str, event_dict: EventDict
) -> EventDict:
    """Rename fields to their ECS equivalents for log aggregation."""
    if "timestamp" in event_dict:
        event_dict["@timestamp"] = event_dict.pop("timestamp")

    if "level" in event_dict:
        event_dict["log.level"] = event_dict.pop("level")

    return event_dict


def configure_logging(
    level: str = "INFO",
    json_format: bool | None = None,
    service: str = "ssm-document",
    add_timestamp: bool = True,
) -> None:
    """Configure structured logging for the application.

    Args:
        level: Log level (DEBUG, INFO, WARNING, ERROR)
        json_format: True for JSON, False for console, None for auto (JSON if stderr is not a tty)
        service: Service name to include in logs
        add_timestamp: Include ISO timestamp in logs
    """
    global _SERVICE_NAME
    _SERVICE_NAME = service

    numeric_level = getattr(logging, level.upper(), logging.INFO)

    if json_format is None:
        json_format = not sys.stderr.isatty()

    shared_processors: list[Processor] = [
        structlog.contextvars.merge_contextvars,
        structlog.stdlib.add_log_level,
        structlog.processors.StackInfoRenderer(),
        structlog.dev.set_exc_info,
        _add_service_metadata,
    ]

    if add_timestamp:
        shared_processors.insert(0, structlog.processors.TimeStamper(fmt="iso"))

    if json_format:
        shared_processors.append(_ecs_compatible)
        shared_processors.append(structlog.processors.format_exc_info)
        renderer: Processor = structlog.processors.JSONRenderer()
    else:
        renderer = structlog.dev.ConsoleRenderer(colors=sys.stderr.isatty())

    structlog.configure(
        processors=shared_processors + [renderer],
        wrapper_class=structlog.make_filtering_bound_logger(numeric_level),
        context_class=dict,
        logger_factory=structlog.PrintLoggerFactory(file=sys.stderr),
        cache_logger_on_first_use=False,
    )

    # botocore and friends log through the standard library
    logging.basicConfig(
        format="%(message)s",
        stream=sys.stderr,
        level=max(numeric_level, logging.WARNING),
    )


def get_logger(name: str | None = None) -> Any:
    """Get a structured logger (usually ``get_logger(__name__)``).

    The name is carried as the ``logger`` key; the logger stays lazy so a
    later ``configure_logging`` still applies.
    """
    if name is None:
        return structlog.get_logger()
    # ``structlog.get_logger(logger=...)`` collides with wrap_logger's own
    # ``logger`` parameter, so build the lazy proxy with the initial value.
    return BoundLoggerLazyProxy(None, initial_values={"logger": name})


def bind_context(**kwargs: Any) -> None:
    """Bind context to include in all subsequent logs of this thread/task."""
    structlog.contextvars.bind_contextvars(**kwargs)


def unbind_context(*keys: str) -> None:
    """Remove specific keys from logging context."""
    structlog.contextvars.unbind_contextvars(*keys)


def clear_context() -> None:
    """Clear all bound context."""
    structlog.contextvars.clear_contextvars()


class LogContext:
    """Context manager for scoped logging context.

    Example:
        with LogContext(operation="deploy", batch_id="abc123"):
            logger.info("batch.start")
    """

    def __init__(self, **kwargs: Any):
        self._context = kwargs

    def __enter__(self) -> LogContext:
        bind_context(**self._context)
        return self

    def __exit__(self, *args) -> None:
        unbind_context(*self._context.keys())


__all__ = [
    "configure_logging",
    "get_logger",
    "bind_context",
    "unbind_context",
    "clear_context",
    "LogContext",
]
