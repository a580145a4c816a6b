"""Logging helpers.

Every component logs under the ``linkpacket`` namespace. Nothing is
emitted unless the application configures a handler, either its own or
the one installed by :func:`configure_logging`.
"""

import logging
import sys
from typing import Any


class ReadableFormatter(logging.Formatter):
    """Human-readable single line formatter."""

    def format(self, record: logging.LogRecord) -> str:
        base = f"{record.levelname:<7} {record.name}: {record.getMessage()}"

        if record.exc_info:
            base += "\n" + self.formatException(record.exc_info)

        return base


def configure_logging(level: int = logging.INFO, stream: Any = None) -> logging.Handler:
    """
    Configure linkpacket logging.

    Args:
        level: Logging level
        stream: Output stream (default: stderr)

    Returns the installed handler.
    """
    handler = logging.StreamHandler(stream or sys.stderr)
    handler.setFormatter(ReadableFormatter())

    logger = logging.getLogger("linkpacket")
    logger.setLevel(level)
    logger.handlers.clear()
    logger.addHandler(handler)
    logger.propagate = False

    return handler


def get_logger(name: str) -> logging.Logger:
    """Get a logger for a linkpacket component."""
    return logging.getLogger(f"linkpacket.{name}")


logging.getLogger("linkpacket").addHandler(logging.NullHandler())
