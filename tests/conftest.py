from __future__ import annotations

import os
from typing import TYPE_CHECKING

import pytest
from sqlalchemy import create_engine
from sqlalchemy.engine import Engine  # noqa: TC002
from sqlalchemy.orm import Session, sessionmaker
from sqlalchemy.pool import StaticPool

from refcompose.adapters.sqlalchemy import create_all_tables, shutdown, startup
from refcompose.adapters.sqlalchemy.unit_of_work import SqlAlchemyUnitOfWork
from tests.helpers.references import (
    build_repository,
    make_reference,
    make_reference_set,
)

os.environ.setdefault("DATABASE_URI", "sqlite+pysqlite:///:memory:")

if TYPE_CHECKING:
    from collections.abc import Callable, Iterator

    from refcompose.adapters.memory import InMemoryReferenceSetRepository


@pytest.fixture
def sqlite_engine() -> Iterator[Engine]:
    engine = create_engine(
        "sqlite+pysqlite:///:memory:",
        future=True,
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )
    create_all_tables(engine)
    try:
        yield engine
    finally:
        engine.dispose()


@pytest.fixture
def sqlite_session(sqlite_engine: Engine) -> Iterator[Session]:
    session_factory = sessionmaker(bind=sqlite_engine, future=True)
    session = session_factory()
    try:
        yield session
    finally:
        session.close()


@pytest.fixture
def sqlite_unit_of_work(
    sqlite_engine: Engine,
) -> Iterator[Callable[[], SqlAlchemyUnitOfWork]]:
    startup(engine=sqlite_engine, force=True)

    def factory() -> SqlAlchemyUnitOfWork:
        return SqlAlchemyUnitOfWork()

    try:
        yield factory
    finally:
        shutdown()


@pytest.fixture
def diamond_repository() -> InMemoryReferenceSetRepository:
    """SetB includes SetA; SetC includes SetA and SetB."""

    return build_repository(
        [
            make_reference_set("SetA"),
            make_reference_set("SetB", includes=["SetA"]),
            make_reference_set("SetC", includes=["SetA", "SetB"]),
        ],
        members={
            "SetA": [
                make_reference("chr1", sequence_id="seq1", start=0, length=100),
                make_reference("chr2", sequence_id="seq2", start=0, length=50),
            ],
            "SetB": [make_reference("chrM", sequence_id="seqM", start=0, length=16)],
            "SetC": [make_reference("chrX", sequence_id="seqX", start=0, length=70)],
        },
    )
