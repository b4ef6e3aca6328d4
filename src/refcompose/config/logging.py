"""Logging setup for the refcompose CLI and services."""

from __future__ import annotations

import logging
import os
from typing import Final

from .errors import ConfigurationError

LOG_LEVEL_ENV: Final[str] = "REFCOMPOSE_LOG_LEVEL"
LOG_FORMAT: Final[str] = "%(asctime)s %(levelname)s [%(name)s] %(message)s"


def parse_log_level(value: str) -> int:
    """Translate a level name (``"debug"``) or number (``"10"``) into a level."""

    normalized = value.strip().upper()
    if normalized.isdigit():
        return int(normalized)
    level = logging.getLevelNamesMapping().get(normalized)
    if level is None:
        raise ConfigurationError(f"Unknown log level: {value}")
    return level


def get_log_level(default: int = logging.INFO) -> int:
    value = os.getenv(LOG_LEVEL_ENV)
    if value is None or not value.strip():
        return default
    return parse_log_level(value)


def configure_logging(*, level: int | None = None, force: bool = False) -> None:
    """Initialise the root logger with a terse CLI format.

    ``level`` defaults to ``REFCOMPOSE_LOG_LEVEL`` (INFO when unset). Pass
    ``force=True`` to reconfigure during tests or specialised entry points.
    """

    logging.basicConfig(
        level=get_log_level() if level is None else level,
        format=LOG_FORMAT,
        datefmt="%H:%M:%S",
        force=force,
    )
