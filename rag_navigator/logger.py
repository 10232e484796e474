# === FILE: rag_navigator/logger.py ===
"""Logging for **RAG Navigator**.

Every module logs through a child of one project logger (``RAGNavigator``),
obtained with :func:`get_logger`. Records go to stderr, and optionally to a
size-rotated file, in a single format. stdout is left to the CLI's JSON
output.

The CLI calls :func:`init_logging` once it has parsed ``--log-level``,
``--log-file`` and ``--log-format``; until then the import-time defaults
apply (INFO, stderr only).
"""
from __future__ import annotations

import logging
import sys
from logging.handlers import RotatingFileHandler
from pathlib import Path
from typing import Final, List, Optional, Union

DEFAULT_FORMAT: Final[str] = "%(asctime)s | %(levelname)-8s | %(name)s | %(message)s"
LOGGER_NAME: Final[str] = "RAGNavigator"

_ROTATE_BYTES: Final[int] = 5 * 1024 * 1024
_ROTATE_KEEP: Final[int] = 3
# marks handlers installed here, so reconfiguring leaves foreign ones alone
_OWNED: Final[str] = "_rag_navigator_owned"

LogLevel = Union[int, str]
PathLike = Union[str, Path]


def _build_handlers(log_file: Optional[PathLike], formatter: logging.Formatter) -> List[logging.Handler]:
    handlers: List[logging.Handler] = [logging.StreamHandler(sys.stderr)]
    if log_file is not None:
        handlers.append(
            RotatingFileHandler(
                Path(log_file),
                maxBytes=_ROTATE_BYTES,
                backupCount=_ROTATE_KEEP,
                encoding="utf-8",
            )
        )
    for handler in handlers:
        handler.setFormatter(formatter)
        setattr(handler, _OWNED, True)
    return handlers


def configure(
    *,
    level: LogLevel = "INFO",
    log_file: Optional[PathLike] = None,
    log_format: str = DEFAULT_FORMAT,
    replace_handlers: bool = True,
) -> logging.Logger:
    """Set level and handlers of the project logger and return it.

    With ``replace_handlers`` the handlers from a previous call are closed
    first; otherwise the new ones are added next to them.
    """
    project = logging.getLogger(LOGGER_NAME)
    project.setLevel(level)
    project.propagate = False

    if replace_handlers:
        for old in [h for h in project.handlers if getattr(h, _OWNED, False)]:
            project.removeHandler(old)
            old.close()

    for handler in _build_handlers(log_file, logging.Formatter(log_format)):
        project.addHandler(handler)
    return project


def init_logging(
    level: LogLevel = "INFO",
    log_file: Optional[PathLike] = None,
    log_format: str = DEFAULT_FORMAT,
) -> logging.Logger:
    return configure(level=level, log_file=log_file, log_format=log_format, replace_handlers=True)


def get_logger(name: str) -> logging.Logger:
    """``get_logger("crawler")`` -> ``RAGNavigator.crawler``."""
    return logging.getLogger(f"{LOGGER_NAME}.{name}")


logger: logging.Logger = init_logging()

__all__ = ["logger", "configure", "init_logging", "get_logger", "DEFAULT_FORMAT", "LOGGER_NAME"]
