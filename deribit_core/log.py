"""
Logging setup for the processor.

Components log through stdlib loggers (injected, or their module logger).
configure_logging installs the sinks: console (ERROR and above to stderr,
the rest to stdout) and an optional append-mode log file.
"""

from __future__ import annotations

import logging
import sys
from pathlib import Path

LOG_FORMAT = "%(asctime)s.%(msecs)03d [%(levelname)s] %(message)s"
DATE_FORMAT = "%Y-%m-%d %H:%M:%S"

# Marks handlers installed here so a second call can replace them.
_HANDLER_FLAG = "_deribit_handler"


class _BelowLevelFilter(logging.Filter):
    def __init__(self, level: int) -> None:
        super().__init__()
        self.level = level

    def filter(self, record: logging.LogRecord) -> bool:
        return record.levelno < self.level


def _mark(handler: logging.Handler) -> logging.Handler:
    setattr(handler, _HANDLER_FLAG, True)
    return handler


def configure_logging(
    level: int | str = logging.INFO,
    log_file: str | Path | None = None,
    *,
    console: bool = True,
    logger_name: str | None = None,
) -> logging.Logger:
    """
    Configure severity gating and sinks on a logger (root logger by default).

    Previously installed processor handlers are closed and replaced, so this
    can be called again to change level or sinks. Returns the configured logger.
    """
    target = logging.getLogger(logger_name)
    if isinstance(level, str):
        resolved = logging.getLevelName(level.upper())
        if not isinstance(resolved, int):
            raise ValueError(f"Unknown log level: {level!r}")
        level = resolved
    target.setLevel(level)

    for handler in list(target.handlers):
        if getattr(handler, _HANDLER_FLAG, False):
            target.removeHandler(handler)
            handler.close()

    formatter = logging.Formatter(LOG_FORMAT, datefmt=DATE_FORMAT)

    if console:
        out = logging.StreamHandler(sys.stdout)
        out.addFilter(_BelowLevelFilter(logging.ERROR))
        err = logging.StreamHandler(sys.stderr)
        err.setLevel(logging.ERROR)
        for handler in (out, err):
            handler.setFormatter(formatter)
            target.addHandler(_mark(handler))

    if log_file:
        file_handler = logging.FileHandler(log_file, mode="a", encoding="utf-8")
        file_handler.setFormatter(formatter)
        target.addHandler(_mark(file_handler))

    return target
