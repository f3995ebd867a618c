"""Diagnostic logging for cwtail.

Diagnostics always go to stderr; stdout carries nothing but tailed records
and listings so that both can be piped.
"""

import logging
import sys
from enum import Enum
from typing import Any

from rich.console import Console
from rich.logging import RichHandler

QUIET_LOGGERS = ("boto3", "botocore", "urllib3")


class LogLevel(str, Enum):
    """Log level enumeration."""

    DEBUG = "debug"
    INFO = "info"
    WARNING = "warning"
    ERROR = "error"

    @classmethod
    def from_verbosity(cls, verbose: int, default: "LogLevel") -> "LogLevel":
        """Map the count of -v flags onto a level, falling back to default."""
        if verbose >= 2:
            return cls.DEBUG
        if verbose == 1:
            return cls.INFO
        return default


def _make_handler(rich_output: bool) -> logging.Handler:
    if rich_output:
        handler: logging.Handler = RichHandler(
            console=Console(stderr=True),
            show_time=True,
            show_path=False,
            rich_tracebacks=True,
        )
        handler.setFormatter(logging.Formatter("%(message)s"))
        return handler

    handler = logging.StreamHandler(sys.stderr)
    handler.setFormatter(
        logging.Formatter(
            "%(asctime)s %(levelname)s %(name)s: %(message)s",
            datefmt="%Y-%m-%d %H:%M:%S",
        )
    )
    return handler


def setup_logging(
    level: LogLevel = LogLevel.WARNING,
    rich_output: bool = True,
) -> logging.Logger:
    """Install a single stderr handler on the root logger.

    Args:
        level: Level for cwtail's own loggers
        rich_output: Render through Rich instead of a plain formatter

    Returns:
        The "cwtail" package logger
    """
    log_level = getattr(logging, level.value.upper())

    root_logger = logging.getLogger()
    for handler in root_logger.handlers[:]:
        root_logger.removeHandler(handler)
    root_logger.addHandler(_make_handler(rich_output))
    root_logger.setLevel(log_level)

    logger = logging.getLogger("cwtail")
    logger.setLevel(log_level)

    for name in QUIET_LOGGERS:
        logging.getLogger(name).setLevel(logging.WARNING)

    return logger


def get_logger(name: str) -> logging.Logger:
    """Get a logger under the "cwtail" namespace.

    Module names (``__name__``) already carry the prefix and are used as is.
    """
    if name.startswith("cwtail."):
        return logging.getLogger(name)
    return logging.getLogger(f"cwtail.{name}")


class StructuredLogger:
    """Logger that appends key=value context to every message.

    The retrieval operations bind the log group once and add per-cycle
    values (cycle number, record counts) on each call.
    """

    def __init__(self, name: str, **context: Any):
        self._logger = get_logger(name)
        self._context: dict[str, Any] = context

    def bind(self, **kwargs: Any) -> "StructuredLogger":
        """Create a new logger with additional context."""
        return StructuredLogger(self._logger.name, **{**self._context, **kwargs})

    def _format_message(self, message: str, **kwargs: Any) -> str:
        context = {**self._context, **kwargs}
        if not context:
            return message
        return "{} [{}]".format(message, " ".join(f"{k}={v}" for k, v in context.items()))

    def debug(self, message: str, **kwargs: Any) -> None:
        if self._logger.isEnabledFor(logging.DEBUG):
            self._logger.debug(self._format_message(message, **kwargs))

    def info(self, message: str, **kwargs: Any) -> None:
        if self._logger.isEnabledFor(logging.INFO):
            self._logger.info(self._format_message(message, **kwargs))
