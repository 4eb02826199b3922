#  Copyright (c) 2025 Tom Villani, Ph.D.
#
# src/markextract/logging_utils.py
"""Logging setup for the markextract command line."""

from __future__ import annotations

import logging
import sys

PACKAGE_LOGGER = "markextract"


def resolve_level(log_level: int | str) -> int:
    """Map a level name such as ``"debug"`` (or a number) to a logging level."""
    if isinstance(log_level, int):
        return log_level
    level = logging.getLevelName(str(log_level).upper())
    return level if isinstance(level, int) else logging.WARNING


def configure_logging(
    log_level: int | str = logging.WARNING,
    log_file: str | None = None,
    trace_mode: bool = False,
) -> logging.Logger:
    """Attach console (and optional file) handlers to the ``markextract`` logger.

    Python warnings (BeautifulSoup emits some for input that looks like a
    file name or URL) are routed into logging as well.

    Parameters
    ----------
    log_level : int | str, default WARNING
        Numeric logging level or level name
    log_file : str, optional
        Also append log records to this file
    trace_mode : bool, default False
        Include timestamps and logger names in every record

    Returns
    -------
    logging.Logger
        The configured package logger

    """
    level = resolve_level(log_level)
    logger = logging.getLogger(PACKAGE_LOGGER)
    logger.setLevel(level)
    logger.handlers.clear()
    logger.propagate = False

    if trace_mode:
        formatter = logging.Formatter("[%(asctime)s] [%(levelname)s] [%(name)s] %(message)s", "%Y-%m-%d %H:%M:%S")
    else:
        formatter = logging.Formatter("%(levelname)s: %(message)s")

    console_handler = logging.StreamHandler(sys.stderr)
    console_handler.setFormatter(formatter)
    logger.addHandler(console_handler)

    if log_file:
        try:
            file_handler = logging.FileHandler(log_file, mode="a", encoding="utf-8")
        except OSError as exc:
            logger.warning("Could not open log file %s: %s", log_file, exc)
        else:
            file_handler.setFormatter(formatter)
            logger.addHandler(file_handler)
            logger.debug("Logging to file: %s", log_file)

    logging.captureWarnings(True)
    warnings_logger = logging.getLogger("py.warnings")
    warnings_logger.handlers[:] = logger.handlers
    warnings_logger.propagate = False
    return logger
