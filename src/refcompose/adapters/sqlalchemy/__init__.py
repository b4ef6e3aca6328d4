"""SQLAlchemy adapter package for refcompose."""

from __future__ import annotations

from .repositories import SqlAlchemyReferenceSetRepository
from .tables import create_all_tables, metadata
from .unit_of_work import SqlAlchemyUnitOfWork, StartupError, is_started, shutdown, startup

__all__ = [
    "SqlAlchemyReferenceSetRepository",
    "SqlAlchemyUnitOfWork",
    "StartupError",
    "create_all_tables",
    "is_started",
    "metadata",
    "shutdown",
    "startup",
]
