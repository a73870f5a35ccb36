"""Structured logging configuration.

This module initializes a structlog logger with a stable structured format.
"""

from __future__ import annotations

import threading
from typing import Any

import structlog

_CONFIGURED = False
_CONFIGURE_LOCK = threading.Lock()


def get_logger(name: str) -> Any:
    """Return a module logger instance.

    Args:
        name: Logger name, usually __name__.

    Returns:
        A structlog logger with JSON output.
    """
    global _CONFIGURED
    with _CONFIGURE_LOCK:
        if not _CONFIGURED:
            structlog.configure(
                processors=[
                    structlog.processors.TimeStamper(fmt="iso"),
                    structlog.processors.add_log_level,
                    structlog.processors.JSONRenderer(),
                ],
                cache_logger_on_first_use=True,
            )
            _CONFIGURED = True
    return structlog.get_logger(name)
