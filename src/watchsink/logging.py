"""Structured logging configuration for Watchsink.

structlog renders every entry; stdlib logging only provides the output
handler (stdout or a size-rotated file). Delivery logs carry the identity
of the event being notified, bound for the duration of one dispatch with
``event_context``.

Example usage:
    >>> from watchsink.config import LoggingConfig
    >>> from watchsink.logging import setup_logging, get_logger, event_context
    >>>
    >>> setup_logging(LoggingConfig(level="INFO", format="console"))
    >>>
    >>> logger = get_logger(__name__)
    >>> with event_context(kind="Pod", name="nginx-1", namespace="default"):
    ...     logger.info("webhook_sent", url="https://hooks.example.com")
"""

from __future__ import annotations

import logging
import logging.handlers
import sys
from collections.abc import Iterator
from contextlib import contextmanager

import structlog

from watchsink.config import LoggingConfig


@contextmanager
def event_context(kind: str, name: str, namespace: str) -> Iterator[None]:
    """Attach an event's identity to every log emitted inside the block.

    Values bound by an enclosing block are restored on exit.

    Args:
        kind: Resource kind of the event (e.g. "Pod")
        name: Resource name
        namespace: Resource namespace (empty for cluster-scoped kinds)
    """
    with structlog.contextvars.bound_contextvars(kind=kind, name=name, namespace=namespace):
        yield


def _build_handler(config: LoggingConfig) -> logging.Handler:
    if config.file is None:
        return logging.StreamHandler(sys.stdout)

    config.file.parent.mkdir(parents=True, exist_ok=True)
    return logging.handlers.RotatingFileHandler(
        filename=config.file,
        maxBytes=config.rotation_size_mb * 1024 * 1024,
        backupCount=config.retention_count,
        encoding="utf-8",
    )


def setup_logging(config: LoggingConfig) -> None:
    """Install the output handler and configure structlog.

    Replaces any handlers already on the root logger, so calling it twice
    does not duplicate output.

    Args:
        config: Logging configuration from WatchsinkConfig
    """
    log_level = getattr(logging, config.level)

    handler = _build_handler(config)
    handler.setLevel(log_level)

    root_logger = logging.getLogger()
    root_logger.setLevel(log_level)
    root_logger.handlers.clear()
    root_logger.addHandler(handler)

    if config.format == "json":
        renderer = structlog.processors.JSONRenderer()
    else:
        renderer = structlog.dev.ConsoleRenderer()

    structlog.configure(
        processors=[
            structlog.contextvars.merge_contextvars,
            structlog.stdlib.add_log_level,
            structlog.stdlib.add_logger_name,
            structlog.processors.TimeStamper(fmt="iso"),
            structlog.processors.format_exc_info,
            renderer,
        ],
        wrapper_class=structlog.stdlib.BoundLogger,
        logger_factory=structlog.stdlib.LoggerFactory(),
        context_class=dict,
        cache_logger_on_first_use=True,
    )


def get_logger(name: str) -> structlog.stdlib.BoundLogger:
    """Get a structured logger instance.

    Args:
        name: Logger name (typically __name__ of the calling module)
    """
    return structlog.get_logger(name)
