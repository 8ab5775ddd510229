"""Logging configuration for the API process."""

from __future__ import annotations

import logging
from typing import Optional, Union

PACKAGE_LOGGER = "payment_instructions"
DEFAULT_FORMAT = "%(asctime)s %(name)s %(levelname)s %(message)s"


def resolve_level(level: Union[int, str]) -> int:
    """Accept a level number, a numeric string or a level name; unknown names mean INFO."""

    if isinstance(level, int):
        return level
    name = level.strip().upper()
    if name.isdigit():
        return int(name)
    numeric = logging.getLevelName(name)
    return numeric if isinstance(numeric, int) else logging.INFO


def configure_logging(level: Union[int, str] = logging.INFO, fmt: Optional[str] = None) -> None:
    """Attach one stream handler to the package logger; repeat calls only reset the level."""

    logger = logging.getLogger(PACKAGE_LOGGER)
    logger.setLevel(resolve_level(level))
    if not any(isinstance(handler, logging.StreamHandler) for handler in logger.handlers):
        handler = logging.StreamHandler()
        handler.setFormatter(logging.Formatter(fmt or DEFAULT_FORMAT))
        logger.addHandler(handler)
