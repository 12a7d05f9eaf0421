"""Logging for HostCrawl.

Everything logs through :data:`logger`. The CLI calls :func:`init_logging`
once; stdout is reserved for the rendered tree, so records go to stderr and,
optionally, to a rotating file.
"""
from __future__ import annotations

import logging
import sys
from logging.handlers import RotatingFileHandler
from pathlib import Path
from typing import Final, Union

LOGGER_NAME: Final[str] = "HostCrawl"
_FORMAT: Final[str] = "%(asctime)s | %(levelname)-8s | %(name)s | %(message)s"

logger: logging.Logger = logging.getLogger(LOGGER_NAME)


def init_logging(
    level: Union[int, str] = "INFO", log_file: str | Path | None = None
) -> logging.Logger:
    """Replace the crawler's handlers with stderr (+ *log_file*) at *level*."""
    formatter = logging.Formatter(_FORMAT)
    for handler in list(logger.handlers):
        logger.removeHandler(handler)
        handler.close()

    handlers: list[logging.Handler] = [logging.StreamHandler(sys.stderr)]
    if log_file is not None:
        handlers.append(
            RotatingFileHandler(
                str(log_file), maxBytes=5 * 1024 * 1024, backupCount=3, encoding="utf-8"
            )
        )
    for handler in handlers:
        handler.setFormatter(formatter)
        logger.addHandler(handler)

    logger.setLevel(level)
    logger.propagate = False
    return logger


__all__ = ["logger", "init_logging", "LOGGER_NAME"]
