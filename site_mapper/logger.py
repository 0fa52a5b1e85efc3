# === FILE: site_mapper/logger.py ===
"""
The ``SiteMapper`` logger.

Every module logs through ``logging.getLogger("SiteMapper")``. Records go to
stderr, and to a rotating file when the CLI is given ``--log-file``; stdout
is left to the reports.
"""
from __future__ import annotations

import logging
import sys
from logging.handlers import RotatingFileHandler
from pathlib import Path
from typing import Final, Union

__all__ = ["logger", "configure", "init_logging", "LOGGER_NAME", "DEFAULT_FORMAT"]

DEFAULT_FORMAT: Final[str] = "%(asctime)s | %(levelname)-8s | %(name)s | %(message)s"
LOGGER_NAME: Final[str] = "SiteMapper"

#: rotate the log file at 5 MB, keeping three old files
LOG_FILE_MAX_BYTES: Final[int] = 5 * 1024 * 1024
LOG_FILE_BACKUPS: Final[int] = 3

_Level = Union[int, str]


def _console_handler(fmt: str) -> logging.Handler:
    handler = logging.StreamHandler(sys.stderr)
    handler.setFormatter(logging.Formatter(fmt))
    return handler


def _rotating_handler(path: Union[str, Path], fmt: str) -> logging.Handler:
    handler = RotatingFileHandler(
        filename=str(path),
        maxBytes=LOG_FILE_MAX_BYTES,
        backupCount=LOG_FILE_BACKUPS,
        encoding="utf-8",
    )
    handler.setFormatter(logging.Formatter(fmt))
    return handler


def configure(
    *,
    level: _Level = "INFO",
    log_file: Union[str, Path, None] = None,
    log_format: str = DEFAULT_FORMAT,
    replace_handlers: bool = True,
) -> logging.Logger:
    """
    Set the level and handlers of the ``SiteMapper`` logger and return it.

    With ``replace_handlers`` the previous handlers are closed first, so
    calling this twice does not duplicate output.
    """
    crawl_logger = logging.getLogger(LOGGER_NAME)
    crawl_logger.setLevel(level)
    if replace_handlers:
        for handler in list(crawl_logger.handlers):
            handler.close()
            crawl_logger.removeHandler(handler)

    crawl_logger.addHandler(_console_handler(log_format))
    if log_file is not None:
        crawl_logger.addHandler(_rotating_handler(log_file, log_format))
    crawl_logger.propagate = False
    return crawl_logger


def init_logging(
    level: _Level = "INFO",
    log_file: Union[str, Path, None] = None,
    log_format: str = DEFAULT_FORMAT,
) -> logging.Logger:
    """Start from a clean logger, as the CLI group does on every invocation."""
    return configure(level=level, log_file=log_file, log_format=log_format, replace_handlers=True)


logger: logging.Logger = init_logging()
