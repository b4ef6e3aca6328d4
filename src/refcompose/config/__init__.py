"""Application configuration helpers."""

from __future__ import annotations

from .composition import CompositionConfig, get_composition_config
from .env import env_flag, env_float
from .errors import ConfigurationError
from .logging import configure_logging, parse_log_level
from .storage import DatabaseConfig, StorageConfig, get_database_config, get_storage_config

__all__ = [
    "CompositionConfig",
    "ConfigurationError",
    "DatabaseConfig",
    "StorageConfig",
    "configure_logging",
    "env_flag",
    "env_float",
    "get_composition_config",
    "get_database_config",
    "get_storage_config",
    "parse_log_level",
]
