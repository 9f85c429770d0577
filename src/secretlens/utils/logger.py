"""Structured logging for secretlens.

Library modules call ``get_logger(__name__)`` and emit key/value events.
The CLI calls ``configure_logging()`` once at startup; until then structlog's
defaults apply. Matched secret values must never be passed to a logger.
"""

from __future__ import annotations

import logging
import sys
from typing import Any

import structlog
from structlog.types import Processor


class _StderrProxy:
    """File-like object that always writes to the *current* ``sys.stderr``.

    Test runners swap ``sys.stderr`` in and out; binding the stream at
    configure time would leave loggers writing to a closed buffer.
    """

    def write(self, message: str) -> Any:
        return sys.stderr.write(message)

    def flush(self) -> None:
        sys.stderr.flush()


def configure_logging(log_level: str = "WARNING", json_output: bool = False) -> None:
    """Configure structlog for the process.

    Args:
        log_level: Logging level name (DEBUG, INFO, WARNING, ERROR, CRITICAL).
        json_output: Render JSON lines instead of the console format.
    """
    level = getattr(logging, log_level.upper(), logging.WARNING)

    processors: list[Processor] = [
        structlog.contextvars.merge_contextvars,
        structlog.processors.add_log_level,
        structlog.processors.TimeStamper(fmt="iso"),
        structlog.processors.StackInfoRenderer(),
        structlog.processors.format_exc_info,
    ]
    if json_output:
        processors.append(structlog.processors.JSONRenderer())
    else:
        processors.append(structlog.dev.ConsoleRenderer(colors=False))

    structlog.configure(
        processors=processors,
        wrapper_class=structlog.make_filtering_bound_logger(level),
        context_class=dict,
        logger_factory=structlog.PrintLoggerFactory(file=_StderrProxy()),
        cache_logger_on_first_use=False,
    )


def get_logger(name: str = "secretlens") -> Any:
    """Return a structlog logger bound to *name*."""
    return structlog.get_logger(name)
