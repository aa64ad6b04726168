"""
Logging setup for the posting core.

Every module asks for its logger through get_logger(), which
places it under the "gl_core" namespace. configure_logging()
attaches one stream handler to that namespace and is safe to
call more than once.
"""

import logging
import sys
import threading

from gl_core.config import get_settings

_LOGGER_PREFIX = "gl_core"

_configured = False
_lock = threading.Lock()


def get_logger(name: str) -> logging.Logger:
    """Get a logger under the gl_core namespace."""
    return logging.getLogger(f"{_LOGGER_PREFIX}.{name}")


def configure_logging(
    *,
    level: str | int | None = None,
    handler: logging.Handler | None = None,
) -> None:
    """Configure the gl_core logger hierarchy (idempotent)."""
    global _configured
    with _lock:
        if _configured:
            return
        _configured = True

    settings = get_settings()
    root_logger = logging.getLogger(_LOGGER_PREFIX)
    root_logger.setLevel(level or settings.LOG_LEVEL)
    root_logger.propagate = False

    h = handler or logging.StreamHandler(sys.stderr)
    h.setFormatter(logging.Formatter(settings.LOG_FORMAT))
    root_logger.addHandler(h)


def reset_logging() -> None:
    """Drop handlers so configure_logging() can run again. Tests only."""
    global _configured
    with _lock:
        _configured = False
    root_logger = logging.getLogger(_LOGGER_PREFIX)
    root_logger.handlers.clear()
    root_logger.setLevel(logging.WARNING)
    root_logger.propagate = True
