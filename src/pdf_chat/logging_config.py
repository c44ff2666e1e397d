"""Logging setup shared by every entry point."""

from __future__ import annotations

import logging
import sys

DEFAULT_FORMAT = "%(asctime)s - %(name)s - %(levelname)s - %(message)s"


def setup_logging(level: int | str = logging.INFO, format_string: str | None = None) -> logging.Logger:
    """Configure the ``pdf_chat`` package logger.

    Parameters
    ----------
    level:
        Logging level, as a number or a name such as ``"DEBUG"``.
    format_string:
        Optional custom format; defaults to :data:`DEFAULT_FORMAT`.

    Returns
    -------
    logging.Logger
        The configured package logger.
    """
    if isinstance(level, str):
        level = logging.getLevelName(level.upper())

    formatter = logging.Formatter(format_string or DEFAULT_FORMAT, datefmt="%Y-%m-%d %H:%M:%S")

    logger = logging.getLogger("pdf_chat")
    logger.setLevel(level)
    # Avoid duplicate handlers when called more than once.
    logger.handlers.clear()

    handler = logging.StreamHandler(sys.stdout)
    handler.setLevel(level)
    handler.setFormatter(formatter)
    logger.addHandler(handler)
    return logger
