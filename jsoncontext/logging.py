"""Logging setup shared by the pipeline, the CLI and embedding hosts."""

from __future__ import annotations

import logging
from pathlib import Path

_ROOT = "jsoncontext"
_CONSOLE_FORMAT = "[jsoncontext] %(levelname)s %(message)s"
_FILE_FORMAT = "%(asctime)s %(levelname)s %(name)s: %(message)s"


def get_logger(name: str | None = None) -> logging.Logger:
    """Child of the ``jsoncontext`` logger; modules pass their short name."""
    return logging.getLogger(f"{_ROOT}.{name}" if name else _ROOT)


def configure_logging(
    *,
    verbose: bool = False,
    log_file: Path | None = None,
    handler: logging.Handler | None = None,
) -> logging.Logger:
    """Route jsoncontext records to stderr, or to ``handler`` when a host supplies one.

    Hosts that present their own diagnostics pass a handler; warnings about
    skipped sources then reach it instead of the console. The host keeps
    control of that handler's level and format. Calling again replaces
    whatever a previous call installed.
    """
    level = logging.DEBUG if verbose else logging.INFO
    logger = logging.getLogger(_ROOT)
    logger.setLevel(level)
    logger.propagate = False

    for installed in list(logger.handlers):
        logger.removeHandler(installed)
        if isinstance(installed, logging.FileHandler):
            installed.close()

    if handler is None:
        handler = logging.StreamHandler()
        handler.setLevel(level)
        handler.setFormatter(logging.Formatter(_CONSOLE_FORMAT))
    logger.addHandler(handler)

    if log_file is not None:
        file_handler = logging.FileHandler(log_file, encoding="utf-8")
        file_handler.setLevel(level)
        file_handler.setFormatter(logging.Formatter(_FILE_FORMAT))
        logger.addHandler(file_handler)

    return logger


__all__ = ["configure_logging", "get_logger"]
