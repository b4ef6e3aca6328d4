"""SQLAlchemy table metadata for reference records."""

from __future__ import annotations

import json
import logging
from typing import TYPE_CHECKING, Any, cast

from sqlalchemy import (
    Boolean,
    Column,
    Dialect,
    Enum,
    Float,
    ForeignKey,
    Index,
    Integer,
    MetaData,
    String,
    Table,
    TypeDecorator,
)

from refcompose.domain.model import Strand

if TYPE_CHECKING:
    from sqlalchemy.engine import Engine

log = logging.getLogger(__name__)


class StringListType(TypeDecorator[list[str]]):
    """Ordered list of strings stored as a JSON array."""

    impl = String
    cache_ok = True

    def process_bind_param(
        self, value: list[str] | tuple[str, ...] | None, dialect: Dialect
    ) -> str | None:
        _ = dialect
        if value is None:
            return None
        return json.dumps(list(value))

    def process_result_value(self, value: str | None, dialect: Dialect) -> list[str] | None:
        _ = dialect
        if value is None:
            return None
        loaded = json.loads(value)
        if not isinstance(loaded, list):
            raise TypeError(f"Expected a JSON array, got {type(loaded).__name__}")
        return [str(item) for item in cast(list[Any], loaded)]


metadata = MetaData(
    naming_convention={
        "ix": "ix_%(column_0_label)s",
        "uq": "uq_%(table_name)s_%(column_0_label)s",
        "ck": "ck_%(table_name)s_%(constraint_name)s",
        "fk": "fk_%(table_name)s_%(column_0_label)s_%(referred_table_name)s",
        "pk": "pk_%(table_name)s",
    }
)

reference_set_table = Table(
    "reference_set",
    metadata,
    Column("id", String, primary_key=True),
    Column("md5checksum", String, nullable=False),
    # NULL means the membership is too large to enumerate
    Column("reference_ids", StringListType(), nullable=True),
    Column("ncbi_taxon_id", Integer, nullable=True),
    Column("description", String, nullable=True),
    Column("assembly_id", String, nullable=True),
    Column("source_uri", String, nullable=True),
    Column("source_accessions", StringListType(), nullable=False, default=list),
    Column("is_derived", Boolean, nullable=False, default=False),
)

# included_set_id has no foreign key; dangling inclusions surface as NotFoundError
reference_set_inclusion_table = Table(
    "reference_set_inclusion",
    metadata,
    Column(
        "set_id",
        String,
        ForeignKey("reference_set.id", ondelete="CASCADE"),
        primary_key=True,
    ),
    Column("position", Integer, primary_key=True),
    Column("included_set_id", String, nullable=False),
)

reference_table = Table(
    "reference",
    metadata,
    Column("id", String, primary_key=True),
    Column("sequence_id", String, nullable=False),
    Column("start", Integer, nullable=False),
    Column("length", Integer, nullable=False),
    Column("md5checksum", String(32), nullable=False),
    Column("name", String, nullable=False),
    Column("source_uri", String, nullable=True),
    Column("source_accessions", StringListType(), nullable=False, default=list),
    Column("is_derived", Boolean, nullable=False, default=False),
    Column("source_divergence", Float, nullable=True),
    Column("ncbi_taxon_id", Integer, nullable=True),
    Column("is_primary", Boolean, nullable=False, default=True),
    Index("ix_reference_sequence", "sequence_id", "start"),
)

reference_set_member_table = Table(
    "reference_set_member",
    metadata,
    Column(
        "set_id",
        String,
        ForeignKey("reference_set.id", ondelete="CASCADE"),
        primary_key=True,
    ),
    Column(
        "reference_id",
        String,
        ForeignKey("reference.id", ondelete="CASCADE"),
        primary_key=True,
    ),
)

join_table = Table(
    "join_record",
    metadata,
    Column("id", Integer, primary_key=True, autoincrement=True),
    Column(
        "set_id",
        String,
        ForeignKey("reference_set.id", ondelete="CASCADE"),
        nullable=False,
    ),
    Column("side1_md5checksum", String(32), nullable=False),
    Column("side1_position", Integer, nullable=False),
    Column("side1_strand", Enum(Strand, native_enum=False), nullable=False),
    Column("side2_md5checksum", String(32), nullable=False),
    Column("side2_position", Integer, nullable=False),
    Column("side2_strand", Enum(Strand, native_enum=False), nullable=False),
    Index("ix_join_record_set", "set_id"),
)


def create_all_tables(engine: Engine) -> None:
    """Create database tables for the reference metadata."""

    log.info("Creating all tables")
    metadata.create_all(engine)
