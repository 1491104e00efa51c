"""Logging helpers shared by the analysis pipeline and the CLI."""

from __future__ import annotations

import logging
from pathlib import Path

_LOGGER_NAME = "userlens"
_CONSOLE_FORMAT = "[userlens] %(levelname)s %(message)s"
_FILE_FORMAT = "%(asctime)s %(levelname)s %(name)s: %(message)s"

# Cache transitions are tagged so a verbose log reads like an audit trail.
CACHE_HIT = "HIT"
CACHE_MISS = "MISS"
CACHE_STALE = "STALE"
CACHE_DELETE = "DELETE"


def get_logger(name: str | None = None) -> logging.Logger:
    """Return ``userlens.<name>``, or the package logger when no name is given."""
    full_name = f"{_LOGGER_NAME}.{name}" if name else _LOGGER_NAME
    return logging.getLogger(full_name)


def log_cache_event(logger: logging.Logger, event: str, relative_path: str) -> None:
    logger.debug("[CACHE %s] %s", event, relative_path)


def configure_logging(
    *,
    verbose: bool = False,
    quiet: bool = False,
    log_file: Path | None = None,
) -> logging.Logger:
    """Install console (and optional file) handlers on the ``userlens`` logger.

    ``verbose`` enables debug output including per-file cache transitions;
    ``quiet`` limits the console to warnings so only skipped files and fatal
    problems are shown. The file sink always records at the console level.
    """
    if verbose:
        level = logging.DEBUG
    elif quiet:
        level = logging.WARNING
    else:
        level = logging.INFO
    logger = logging.getLogger(_LOGGER_NAME)
    logger.setLevel(level)
    logger.propagate = False

    for handler in list(logger.handlers):
        logger.removeHandler(handler)

    console = logging.StreamHandler()
    console.setLevel(level)
    console.setFormatter(logging.Formatter(_CONSOLE_FORMAT))
    logger.addHandler(console)

    if log_file is not None:
        log_file.parent.mkdir(parents=True, exist_ok=True)
        file_handler = logging.FileHandler(log_file, encoding="utf-8")
        file_handler.setLevel(level)
        file_handler.setFormatter(logging.Formatter(_FILE_FORMAT))
        logger.addHandler(file_handler)

    return logger


__all__ = [
    "CACHE_DELETE",
    "CACHE_HIT",
    "CACHE_MISS",
    "CACHE_STALE",
    "configure_logging",
    "get_logger",
    "log_cache_event",
]
