"""Logging setup for UrlCounter.

All records go through the ``UrlCounter`` logger. Components log through a
child obtained with :func:`get_logger` (``UrlCounter.dispatcher`` and so on),
so one :func:`configure` call controls every module.

Console records are written to *stderr*: stdout belongs to the per-URL lines
and the final ``Total:`` line.
"""
from __future__ import annotations

import logging
import sys
from logging.handlers import RotatingFileHandler
from pathlib import Path
from typing import Final, List, Union

LOGGER_NAME: Final[str] = "UrlCounter"
DEFAULT_FORMAT: Final[str] = "%(asctime)s | %(levelname)-8s | %(name)s | %(message)s"

#: rotation policy of the optional log file
MAX_LOG_BYTES: Final[int] = 5 * 1024 * 1024
LOG_BACKUPS: Final[int] = 3


def _handlers(log_file: Union[str, Path, None], fmt: str) -> List[logging.Handler]:
    handlers: List[logging.Handler] = [logging.StreamHandler(sys.stderr)]
    if log_file is not None:
        handlers.append(
            RotatingFileHandler(
                str(log_file), maxBytes=MAX_LOG_BYTES, backupCount=LOG_BACKUPS, encoding="utf-8"
            )
        )
    formatter = logging.Formatter(fmt)
    for handler in handlers:
        handler.setFormatter(formatter)
    return handlers


def configure(
    *,
    level: Union[int, str] = "WARNING",
    log_file: Union[str, Path, None] = None,
    log_format: str = DEFAULT_FORMAT,
    replace_handlers: bool = True,
) -> logging.Logger:
    """Set level and handlers of the project logger and return it.

    With ``replace_handlers=False`` the new handlers are added next to the
    existing ones; otherwise the old handlers are closed first.
    """
    root = logging.getLogger(LOGGER_NAME)
    root.setLevel(level)
    if replace_handlers:
        for old in list(root.handlers):
            root.removeHandler(old)
            old.close()
    for handler in _handlers(log_file, log_format):
        root.addHandler(handler)
    root.propagate = False
    return root


def init_logging(
    level: Union[int, str] = "WARNING",
    log_file: Union[str, Path, None] = None,
    log_format: str = DEFAULT_FORMAT,
) -> logging.Logger:
    """CLI entry: reconfigure from scratch."""
    return configure(level=level, log_file=log_file, log_format=log_format)


def get_logger(component: str = "") -> logging.Logger:
    """Project logger, or its child ``UrlCounter.<component>``."""
    return logging.getLogger(f"{LOGGER_NAME}.{component}" if component else LOGGER_NAME)


logger: logging.Logger = init_logging()

__all__ = ["logger", "configure", "init_logging", "get_logger", "LOGGER_NAME", "DEFAULT_FORMAT"]
