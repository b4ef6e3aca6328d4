"""Repository implementation backed by SQLAlchemy sessions."""

from __future__ import annotations

from typing import TYPE_CHECKING, Any, cast

from sqlalchemy import select

from refcompose.adapters.sqlalchemy.tables import (
    join_table,
    reference_set_inclusion_table,
    reference_set_member_table,
    reference_set_table,
    reference_table,
)
from refcompose.domain.errors import NotFoundError
from refcompose.domain.model import Join, Reference, ReferenceSet, Side, Strand

if TYPE_CHECKING:
    from collections.abc import Mapping, Sequence

    from sqlalchemy import Table
    from sqlalchemy.orm import Session


class SqlAlchemyReferenceSetRepository:
    def __init__(self, session: Session) -> None:
        self.session = session

    def get_reference_set(self, set_id: str) -> ReferenceSet:
        stmt = select(reference_set_table).where(reference_set_table.c.id == set_id)
        row = self.session.execute(stmt).mappings().one_or_none()
        if row is None:
            raise NotFoundError(set_id)
        included_stmt = (
            select(reference_set_inclusion_table.c.included_set_id)
            .where(reference_set_inclusion_table.c.set_id == set_id)
            .order_by(reference_set_inclusion_table.c.position)
        )
        included = self.session.execute(included_stmt).scalars().all()
        reference_ids = row["reference_ids"]
        return ReferenceSet(
            id=row["id"],
            md5checksum=row["md5checksum"],
            reference_ids=None if reference_ids is None else tuple(reference_ids),
            included_reference_sets=tuple(included),
            ncbi_taxon_id=row["ncbi_taxon_id"],
            description=row["description"],
            assembly_id=row["assembly_id"],
            source_uri=row["source_uri"],
            source_accessions=tuple(row["source_accessions"]),
            is_derived=row["is_derived"],
        )

    def get_references_for_set(self, set_id: str) -> Sequence[Reference]:
        stmt = (
            select(reference_table)
            .join(
                reference_set_member_table,
                reference_set_member_table.c.reference_id == reference_table.c.id,
            )
            .where(reference_set_member_table.c.set_id == set_id)
        )
        rows = self.session.execute(stmt).mappings().all()
        return [self._reference_from_row(row) for row in rows]

    def get_joins_for_set(self, set_id: str) -> Sequence[Join]:
        stmt = select(join_table).where(join_table.c.set_id == set_id).order_by(join_table.c.id)
        rows = self.session.execute(stmt).mappings().all()
        return [
            Join(
                side1=Side(
                    md5checksum=row["side1_md5checksum"],
                    position=row["side1_position"],
                    strand=Strand(row["side1_strand"]),
                ),
                side2=Side(
                    md5checksum=row["side2_md5checksum"],
                    position=row["side2_position"],
                    strand=Strand(row["side2_strand"]),
                ),
            )
            for row in rows
        ]

    def add_reference_set(self, reference_set: ReferenceSet) -> None:
        """Insert or replace a set record together with its inclusion list."""

        values = {
            "md5checksum": reference_set.md5checksum,
            "reference_ids": reference_set.reference_ids,
            "ncbi_taxon_id": reference_set.ncbi_taxon_id,
            "description": reference_set.description,
            "assembly_id": reference_set.assembly_id,
            "source_uri": reference_set.source_uri,
            "source_accessions": reference_set.source_accessions,
            "is_derived": reference_set.is_derived,
        }
        if self._row_exists(reference_set_table, reference_set.id):
            self.session.execute(
                reference_set_table.update()
                .where(reference_set_table.c.id == reference_set.id)
                .values(**values)
            )
            self.session.execute(
                reference_set_inclusion_table.delete().where(
                    reference_set_inclusion_table.c.set_id == reference_set.id
                )
            )
        else:
            self.session.execute(reference_set_table.insert().values(id=reference_set.id, **values))
        for position, included_id in enumerate(reference_set.included_reference_sets):
            self.session.execute(
                reference_set_inclusion_table.insert().values(
                    set_id=reference_set.id,
                    position=position,
                    included_set_id=included_id,
                )
            )

    def add_reference(self, reference: Reference, *, set_ids: Sequence[str] = ()) -> None:
        """Insert or replace ``reference`` and add it to each of ``set_ids`` once."""

        values = {
            "sequence_id": reference.sequence_id,
            "start": reference.start,
            "length": reference.length,
            "md5checksum": reference.md5checksum,
            "name": reference.name,
            "source_uri": reference.source_uri,
            "source_accessions": reference.source_accessions,
            "is_derived": reference.is_derived,
            "source_divergence": reference.source_divergence,
            "ncbi_taxon_id": reference.ncbi_taxon_id,
            "is_primary": reference.is_primary,
        }
        if self._row_exists(reference_table, reference.id):
            self.session.execute(
                reference_table.update()
                .where(reference_table.c.id == reference.id)
                .values(**values)
            )
        else:
            self.session.execute(reference_table.insert().values(id=reference.id, **values))
        for set_id in set_ids:
            self.session.execute(
                reference_set_member_table.insert()
                .prefix_with("OR IGNORE", dialect="sqlite")
                .values(set_id=set_id, reference_id=reference.id)
            )

    def add_join(self, join: Join, *, set_ids: Sequence[str] = ()) -> None:
        """Record ``join`` for each of ``set_ids``; repeats within a set are skipped."""

        sides = {
            "side1_md5checksum": join.side1.md5checksum,
            "side1_position": join.side1.position,
            "side1_strand": join.side1.strand,
            "side2_md5checksum": join.side2.md5checksum,
            "side2_position": join.side2.position,
            "side2_strand": join.side2.strand,
        }
        for set_id in set_ids:
            if self._join_exists(set_id, sides):
                continue
            self.session.execute(join_table.insert().values(set_id=set_id, **sides))

    def _row_exists(self, table: Table, row_id: str) -> bool:
        stmt = select(table.c.id).where(table.c.id == row_id)
        return self.session.execute(stmt).scalar_one_or_none() is not None

    def _join_exists(self, set_id: str, sides: Mapping[str, object]) -> bool:
        stmt = select(join_table.c.id).where(
            join_table.c.set_id == set_id,
            *(join_table.c[name] == value for name, value in sides.items()),
        )
        return self.session.execute(stmt.limit(1)).first() is not None

    @staticmethod
    def _reference_from_row(row: Mapping[str, Any]) -> Reference:
        return Reference(
            id=row["id"],
            sequence_id=row["sequence_id"],
            start=row["start"],
            length=row["length"],
            md5checksum=row["md5checksum"],
            name=row["name"],
            source_uri=row["source_uri"],
            source_accessions=tuple(cast("list[str]", row["source_accessions"])),
            is_derived=row["is_derived"],
            source_divergence=row["source_divergence"],
            ncbi_taxon_id=row["ncbi_taxon_id"],
            is_primary=row["is_primary"],
        )


if TYPE_CHECKING:
    from refcompose.domain.ports import WritableReferenceSetRepository

    _session_stub = cast("Session", object())
    _repo_check: WritableReferenceSetRepository = SqlAlchemyReferenceSetRepository(_session_stub)
