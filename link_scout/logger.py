# === FILE: link_scout/logger.py ===
"""Logging setup for **LinkScout**.

There is one project logger, ``LinkScout``. Pipeline components write to its
children (``LinkScout.frontier``, ``LinkScout.sitemap`` …) obtained through
:func:`get_logger`, so a single :func:`configure` call controls all of them::

      from link_scout.logger import get_logger
      log = get_logger("frontier")
      log.info("Crawl started")

Console output goes to stderr: stdout is reserved for the JSON the CLI prints.
A rotating log file can be added on top.
"""
from __future__ import annotations

import logging
import sys
from logging.handlers import RotatingFileHandler
from pathlib import Path
from typing import Final, Iterator, Union

DEFAULT_FORMAT: Final[str] = "%(asctime)s | %(levelname)-8s | %(name)s | %(message)s"
ROOT_NAME: Final[str] = "LinkScout"

_MAX_LOG_BYTES: Final[int] = 5 * 1024 * 1024
_LOG_BACKUPS: Final[int] = 3

_LevelT = Union[int, str]


def _handlers(log_format: str, log_file: str | Path | None) -> Iterator[logging.Handler]:
    yield logging.StreamHandler(sys.stderr)
    if log_file is not None:
        yield RotatingFileHandler(
            filename=str(log_file),
            maxBytes=_MAX_LOG_BYTES,
            backupCount=_LOG_BACKUPS,
            encoding="utf-8",
        )


def configure(
    *,
    level: _LevelT = "INFO",
    log_file: str | Path | None = None,
    log_format: str = DEFAULT_FORMAT,
    replace_handlers: bool = True,
) -> logging.Logger:
    """Apply *level*, *log_format* and the optional *log_file* to the project logger.

    With *replace_handlers* the previous handlers are closed and removed,
    otherwise the new ones are appended. Records do not propagate to the
    root logger.
    """
    project = logging.getLogger(ROOT_NAME)
    project.setLevel(level)

    if replace_handlers:
        for old in list(project.handlers):
            project.removeHandler(old)
            old.close()

    formatter = logging.Formatter(log_format)
    for handler in _handlers(log_format, log_file):
        handler.setFormatter(formatter)
        project.addHandler(handler)

    project.propagate = False
    return project


def init_logging(
    level: _LevelT = "INFO",
    log_file: str | Path | None = None,
    log_format: str = DEFAULT_FORMAT,
) -> logging.Logger:
    """CLI entry: fresh handlers, console only unless *log_file* is given."""
    return configure(level=level, log_file=log_file, log_format=log_format, replace_handlers=True)


def get_logger(component: str) -> logging.Logger:
    return logging.getLogger(f"{ROOT_NAME}.{component}")


logger: logging.Logger = init_logging()

__all__ = ["logger", "configure", "init_logging", "get_logger", "DEFAULT_FORMAT"]
