"""Logger configuration helpers."""

from __future__ import annotations

import logging
import sys

ROOT_LOGGER_NAME = "splashoverride"
_DEFAULT_FORMATTER = logging.Formatter("%(asctime)s [%(levelname)s] %(name)s: %(message)s")


def get_logger(name: str | None = None) -> logging.Logger:
    """Return a child of the `splashoverride` logger.

    Library modules only ask for a logger; handlers are attached once by
    `configure_logging` (usually from the CLI).
    """

    if not name or name == ROOT_LOGGER_NAME:
        return logging.getLogger(ROOT_LOGGER_NAME)
    return logging.getLogger(f"{ROOT_LOGGER_NAME}.{name}")


def configure_logging(level: int = logging.INFO) -> logging.Logger:
    logger = logging.getLogger(ROOT_LOGGER_NAME)
    logger.setLevel(level)
    if not logger.handlers:
        handler = logging.StreamHandler(sys.stderr)
        handler.setFormatter(_DEFAULT_FORMATTER)
        logger.addHandler(handler)
    return logger
