# File: sitewatch/logger.py
"""Logging setup for SiteWatch.

Every module logs through the ``SiteWatch`` logger, either by importing
:data:`logger` from here or with ``logging.getLogger("SiteWatch")``::

    from sitewatch.logger import logger
    logger.info("Currently parsed: %d urls", count)

Records go to stdout and, when a log file is given, to a rotating file
(5 MB, 3 backups). The CLI calls :func:`init_logging` once its options
are parsed.
"""
from __future__ import annotations

import logging
import sys
from logging.handlers import RotatingFileHandler
from pathlib import Path
from typing import Final, List, Union

DEFAULT_FORMAT: Final[str] = "%(asctime)s | %(levelname)-8s | %(name)s | %(message)s"
LOGGER_NAME: Final[str] = "SiteWatch"
LOG_FILE_MAX_BYTES: Final[int] = 5 * 1024 * 1024
LOG_FILE_BACKUPS: Final[int] = 3


def _build_handlers(log_file: Union[str, Path, None], fmt: str) -> List[logging.Handler]:
    handlers: List[logging.Handler] = [logging.StreamHandler(sys.stdout)]
    if log_file is not None:
        Path(log_file).expanduser().parent.mkdir(parents=True, exist_ok=True)
        handlers.append(
            RotatingFileHandler(
                filename=str(log_file),
                maxBytes=LOG_FILE_MAX_BYTES,
                backupCount=LOG_FILE_BACKUPS,
                encoding="utf-8",
            )
        )
    formatter = logging.Formatter(fmt)
    for handler in handlers:
        handler.setFormatter(formatter)
    return handlers


def configure(
    *,
    level: Union[int, str] = "INFO",
    log_file: Union[str, Path, None] = None,
    log_format: str = DEFAULT_FORMAT,
    replace_handlers: bool = True,
) -> logging.Logger:
    """Apply *level*, *log_format* and an optional *log_file* to the SiteWatch logger.

    With ``replace_handlers=False`` the new handlers are added next to the
    existing ones.
    """
    log = logging.getLogger(LOGGER_NAME)
    log.setLevel(level)
    if replace_handlers:
        for handler in list(log.handlers):
            log.removeHandler(handler)
            handler.close()
    for handler in _build_handlers(log_file, log_format):
        log.addHandler(handler)
    log.propagate = False
    return log


def init_logging(
    level: Union[int, str] = "INFO",
    log_file: Union[str, Path, None] = None,
    log_format: str = DEFAULT_FORMAT,
) -> logging.Logger:
    return configure(level=level, log_file=log_file, log_format=log_format)


logger: logging.Logger = init_logging()

__all__ = ["logger", "configure", "init_logging", "LOGGER_NAME", "DEFAULT_FORMAT"]
