"""Logging configuration for the CLI process.

Core and infra modules log through ``logging.getLogger(__name__)``; this
module attaches a single handler to the ``redirect_porter`` logger.  Rich
is used when available so log lines and the progress bar share one
console; otherwise a plain stderr handler is installed.
"""

from __future__ import annotations

import logging
import os
import re
import sys

from redirect_porter.exceptions import EnvironmentError

LOGGER_NAME = "redirect_porter"
LOG_LEVEL_ENV = "REDIRECT_PORTER_LOG_LEVEL"


class SensitiveDataFilter(logging.Filter):
    """Mask credentials in log records."""

    PATTERNS = [
        (re.compile(r"(bearer\s+)([^\s,}'\"]+)", re.IGNORECASE), r"\1***MASKED***"),
        (re.compile(r"(authorization[\"']?\s*[:=]\s*[\"']?)([^\"'}\s,]+)", re.IGNORECASE), r"\1***MASKED***"),
        (re.compile(r"(token[\"']?\s*[:=]\s*[\"']?)([^\"'}\s,]+)", re.IGNORECASE), r"\1***MASKED***"),
    ]

    def filter(self, record: logging.LogRecord) -> bool:
        if isinstance(record.msg, str):
            record.msg = self._mask(record.msg)
        if isinstance(record.args, tuple):
            record.args = tuple(
                self._mask(arg) if isinstance(arg, str) else arg for arg in record.args
            )
        return True

    def _mask(self, value: str) -> str:
        for pattern, replacement in self.PATTERNS:
            value = pattern.sub(replacement, value)
        return value


def _resolve_level(verbose: bool) -> int:
    if verbose:
        return logging.DEBUG
    name = os.getenv(LOG_LEVEL_ENV, "INFO").upper()
    level = logging.getLevelName(name)
    return level if isinstance(level, int) else logging.INFO


def _build_handler() -> logging.Handler:
    try:
        from rich.logging import RichHandler

        from redirect_porter.cli.console import get_rich_console

        return RichHandler(
            console=get_rich_console(),
            show_time=False,
            show_path=False,
            markup=False,
        )
    except (ModuleNotFoundError, EnvironmentError):
        handler = logging.StreamHandler(sys.stderr)
        handler.setFormatter(logging.Formatter("%(levelname)s: %(message)s"))
        return handler


def configure_logging(verbose: bool = False) -> logging.Logger:
    """Attach the CLI handler to the package logger and return it.

    Calling this again replaces the previous handler.
    """
    logger = logging.getLogger(LOGGER_NAME)
    level = _resolve_level(verbose)
    logger.setLevel(level)

    for handler in list(logger.handlers):
        logger.removeHandler(handler)

    handler = _build_handler()
    handler.setLevel(level)
    handler.addFilter(SensitiveDataFilter())
    logger.addHandler(handler)
    logger.propagate = False
    return logger
