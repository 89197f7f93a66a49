"""Centralised loguru logger for the Streetwise application."""
from __future__ import annotations

import sys

from loguru import logger

_DEFAULT_FORMAT = (
    "<green>{time:YYYY-MM-DD HH:mm:ss}</green> | <level>{level: <8}</level> | "
    "<cyan>{name}</cyan>:<cyan>{function}</cyan> - <level>{message}</level>"
)


def configure_logging(level: str = "INFO") -> None:
    """Replace the default stderr sink with one filtered at ``level``.

    Unknown level names fall back to ``INFO`` with a warning.
    """

    normalized = str(level or "INFO").strip().upper()
    try:
        logger.level(normalized)
    except ValueError:
        logger.warning("Unknown log level {}; using INFO", level)
        normalized = "INFO"

    logger.remove()
    logger.add(sys.stderr, level=normalized, format=_DEFAULT_FORMAT)


__all__ = ["configure_logging", "logger"]
