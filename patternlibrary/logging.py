"""Loggers for the ``patternlibrary`` tree and the handlers the CLI attaches.

Library modules only call :func:`get_logger`; handlers are installed by
:func:`configure_logging`, and only handlers installed there are ever
replaced or re-levelled.
"""

from __future__ import annotations

import logging
from pathlib import Path
from typing import List, Optional, TextIO

ROOT_LOGGER = "patternlibrary"
CONSOLE_FORMAT = "[patternlibrary] %(levelname)s %(message)s"
FILE_FORMAT = "%(asctime)s %(levelname)s %(name)s: %(message)s"

_OWNED = "_patternlibrary_handler"


def get_logger(name: str | None = None) -> logging.Logger:
    return logging.getLogger(f"{ROOT_LOGGER}.{name}" if name else ROOT_LOGGER)


def verbosity_level(verbose: bool) -> int:
    return logging.DEBUG if verbose else logging.INFO


def configure_logging(
    *,
    verbose: bool = False,
    log_file: Path | str | None = None,
    stream: Optional[TextIO] = None,
) -> logging.Logger:
    """Send build logs to ``stream`` (stderr) and, when given, append them to ``log_file``.

    Calling it again swaps the handlers of the previous call, so a process
    that builds twice never prints a record twice.
    """
    logger = get_logger()
    for handler in owned_handlers(logger):
        logger.removeHandler(handler)
        handler.close()

    console = logging.StreamHandler(stream)
    console.setFormatter(logging.Formatter(CONSOLE_FORMAT))
    handlers: List[logging.Handler] = [console]
    if log_file is not None:
        path = Path(log_file)
        path.parent.mkdir(parents=True, exist_ok=True)
        sink = logging.FileHandler(path, encoding="utf-8")
        sink.setFormatter(logging.Formatter(FILE_FORMAT))
        handlers.append(sink)

    for handler in handlers:
        setattr(handler, _OWNED, True)
        logger.addHandler(handler)
    logger.propagate = False
    set_verbosity(verbose)
    return logger


def set_verbosity(verbose: bool) -> None:
    """Switch the tree and its installed handlers between INFO and DEBUG."""
    level = verbosity_level(verbose)
    logger = get_logger()
    logger.setLevel(level)
    for handler in owned_handlers(logger):
        handler.setLevel(level)


def owned_handlers(logger: logging.Logger) -> List[logging.Handler]:
    return [handler for handler in logger.handlers if getattr(handler, _OWNED, False)]


__all__ = [
    "CONSOLE_FORMAT",
    "FILE_FORMAT",
    "ROOT_LOGGER",
    "configure_logging",
    "get_logger",
    "owned_handlers",
    "set_verbosity",
    "verbosity_level",
]
