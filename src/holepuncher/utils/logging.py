"""Structured logging setup.

Modules obtain a logger with :func:`get_logger` at import time; the CLI
calls :func:`configure_logging` once before running a command.  Log
lines go to stderr so that stdout stays reserved for command output.
"""

from __future__ import annotations

import logging
import sys
from typing import Any

import structlog


def configure_logging(*, verbose: bool = False) -> None:
    """Configure structlog for a single CLI invocation.

    ``verbose`` lowers the threshold from INFO to DEBUG.
    """
    level = logging.DEBUG if verbose else logging.INFO
    structlog.configure(
        processors=[
            structlog.processors.add_log_level,
            structlog.processors.TimeStamper(fmt="iso"),
            structlog.dev.ConsoleRenderer(colors=sys.stderr.isatty()),
        ],
        wrapper_class=structlog.make_filtering_bound_logger(level),
        logger_factory=_stderr_logger_factory,
        cache_logger_on_first_use=False,
    )


def _stderr_logger_factory(*_args: Any) -> structlog.PrintLogger:
    # Looked up per logger so redirected streams are honoured.
    return structlog.PrintLogger(file=sys.stderr)


def get_logger(name: str) -> Any:
    return structlog.get_logger(name)
