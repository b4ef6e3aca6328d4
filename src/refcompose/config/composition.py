"""Composition engine settings."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Final

from .env import env_flag, env_float
from .errors import ConfigurationError

STRICT_CHECKSUMS_ENV: Final[str] = "REFCOMPOSE_STRICT_CHECKSUMS"
RESOLVE_TIMEOUT_ENV: Final[str] = "REFCOMPOSE_RESOLVE_TIMEOUT"


@dataclass(frozen=True, slots=True)
class CompositionConfig:
    """``strict_checksums`` escalates checksum mismatches to errors.

    ``resolve_timeout`` bounds one resolution in seconds (``None`` = unbounded).
    """

    strict_checksums: bool = False
    resolve_timeout: float | None = None

    def __post_init__(self) -> None:
        if self.resolve_timeout is not None and self.resolve_timeout <= 0:
            raise ConfigurationError("Resolve timeout must be positive")


def get_composition_config() -> CompositionConfig:
    return CompositionConfig(
        strict_checksums=env_flag(STRICT_CHECKSUMS_ENV),
        resolve_timeout=env_float(RESOLVE_TIMEOUT_ENV),
    )
