"""Domain port definitions for adapters."""

from __future__ import annotations

from .repository import ReferenceSetRepository, WritableReferenceSetRepository

__all__ = [
    "ReferenceSetRepository",
    "WritableReferenceSetRepository",
]
