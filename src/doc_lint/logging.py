"""
doc-lint logging - structured logging for lint runs.

Manifesto:
    A lint run prints its report on stdout. Everything else (which corpus
    was loaded, how many documents were scanned, which rule ran) is a
    structured log event on stderr, so ``doclint check --format json``
    can be piped straight into another tool.

Architecture:
    ::

        configure_logging(level="WARNING", json_format=None)
              │
              ▼
        structlog processor chain:
          1. TimeStamper(fmt="iso")
          2. add_log_level, add_logger_name
          3. _add_service_metadata
          4. JSONRenderer (not a tty) or ConsoleRenderer (tty)
              │
              ▼
        _StderrPrintLogger(name) on sys.stderr

Examples:
    >>> from doc_lint.logging import configure_logging, get_logger
    >>> configure_logging(level="DEBUG", json_format=True)
    >>> logger = get_logger(__name__)
    >>> logger.info("corpus_loaded", documents=14)

Guardrails:
    - Never log to stdout; report output owns it
    - The service name is set once per process by configure_logging

Tags:
    logging, structlog, observability, doc-lint

Doc-Types:
    - API Reference
"""

from __future__ import annotations

import logging
import sys
from typing import Any

import structlog
from structlog.types import EventDict, Processor, WrappedLogger


_SERVICE_NAME = "doc-lint"


def _add_service_metadata(
    logger: WrappedLogger, method_name: str, event_dict: EventDict
) -> EventDict:
    """Stamp every event with the service name."""
    event_dict.setdefault("service", _SERVICE_NAME)
    return event_dict


class _StderrPrintLogger(structlog.PrintLogger):
    """PrintLogger on the current sys.stderr that carries a logger name."""

    def __init__(self, name: str | None = None):
        super().__init__(file=sys.stderr)
        self.name = name or _SERVICE_NAME


def configure_logging(
    level: str = "WARNING",
    json_format: bool | None = None,
    service: str = "doc-lint",
    add_timestamp: bool = True,
) -> None:
    """Configure structlog for a doclint process.

    Args:
        level: Log level (DEBUG, INFO, WARNING, ERROR)
        json_format: True for JSON, False for console, None for auto (JSON if stderr is not a tty)
        service: Service name to include in logs
        add_timestamp: Include ISO timestamp in logs
    """
    global _SERVICE_NAME
    _SERVICE_NAME = service

    numeric_level = getattr(logging, level.upper(), logging.WARNING)

    if json_format is None:
        json_format = not sys.stderr.isatty()

    shared_processors: list[Processor] = [
        structlog.contextvars.merge_contextvars,
        structlog.stdlib.add_log_level,
        structlog.stdlib.add_logger_name,
        structlog.processors.StackInfoRenderer(),
        structlog.dev.set_exc_info,
        _add_service_metadata,
    ]

    if add_timestamp:
        shared_processors.insert(0, structlog.processors.TimeStamper(fmt="iso"))

    if json_format:
        shared_processors.append(structlog.processors.format_exc_info)
        renderer: Processor = structlog.processors.JSONRenderer()
    else:
        renderer = structlog.dev.ConsoleRenderer(colors=sys.stderr.isatty())

    structlog.configure(
        processors=shared_processors + [renderer],
        wrapper_class=structlog.make_filtering_bound_logger(numeric_level),
        context_class=dict,
        # sys.stderr is looked up per call; click's test runner swaps it
        logger_factory=lambda *args: _StderrPrintLogger(*args[:1]),
        cache_logger_on_first_use=False,
    )

    logging.basicConfig(
        format="%(message)s",
        stream=sys.stderr,
        level=numeric_level,
    )


def get_logger(name: str | None = None) -> Any:
    """Get a structured logger.

    Args:
        name: Logger name (usually __name__)

    Returns:
        structlog BoundLogger
    """
    if name:
        return structlog.get_logger(name)
    return structlog.get_logger()


def bind_context(**kwargs: Any) -> None:
    """Bind context to include in all subsequent logs."""
    structlog.contextvars.bind_contextvars(**kwargs)


def unbind_context(*keys: str) -> None:
    """Drop the given keys from the bound context."""
    structlog.contextvars.unbind_contextvars(*keys)


def clear_context() -> None:
    """Drop every key bound with bind_context."""
    structlog.contextvars.clear_contextvars()


class LogContext:
    """Bind keys for the duration of a block, e.g. the corpus being linted.

    Example:
        with LogContext(corpus="ios-standards"):
            logger.info("rule_started", rule="DL001")
        # Context cleared here
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
