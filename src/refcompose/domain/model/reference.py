"""Reference coordinate records.

A ``Reference`` is a named half-open interval over a ``Sequence``; a
``ReferenceSet`` groups references and may include other reference sets.
Both are value objects: frozen, hashable, with no back-references.
"""

from __future__ import annotations

from dataclasses import dataclass

from refcompose.domain.errors import InvalidRecordError
from refcompose.domain.model.primitives import Interval, is_md5_hex


@dataclass(frozen=True, slots=True, kw_only=True)
class Reference:
    id: str
    sequence_id: str
    start: int
    length: int
    md5checksum: str
    name: str
    source_uri: str | None = None
    source_accessions: tuple[str, ...] = ()
    is_derived: bool = False
    source_divergence: float | None = None
    ncbi_taxon_id: int | None = None
    is_primary: bool = True

    def __post_init__(self) -> None:
        if not self.id:
            raise InvalidRecordError("Reference id must not be empty")
        if self.start < 0:
            raise InvalidRecordError(f"Reference {self.id}: start must be >= 0, got {self.start}")
        if self.length < 0:
            raise InvalidRecordError(
                f"Reference {self.id}: length must be >= 0, got {self.length}"
            )
        if not is_md5_hex(self.md5checksum):
            raise InvalidRecordError(
                f"Reference {self.id}: md5checksum must be 32 lowercase hex characters"
            )
        # accept any iterable of accessions but store an owned tuple
        object.__setattr__(self, "source_accessions", tuple(self.source_accessions))

    @property
    def end(self) -> int:
        return self.start + self.length

    @property
    def interval(self) -> Interval:
        return Interval(self.start, self.end)


@dataclass(frozen=True, slots=True, kw_only=True)
class ReferenceSet:
    """A composeable collection of references.

    ``reference_ids`` is ``None`` when the set is too large to enumerate and
    membership has to be queried from the repository.
    """

    id: str
    md5checksum: str
    reference_ids: tuple[str, ...] | None = None
    included_reference_sets: tuple[str, ...] = ()
    ncbi_taxon_id: int | None = None
    description: str | None = None
    assembly_id: str | None = None
    source_uri: str | None = None
    source_accessions: tuple[str, ...] = ()
    is_derived: bool = False

    def __post_init__(self) -> None:
        if not self.id:
            raise InvalidRecordError("ReferenceSet id must not be empty")
        if self.reference_ids is not None:
            object.__setattr__(self, "reference_ids", tuple(self.reference_ids))
        object.__setattr__(self, "included_reference_sets", tuple(self.included_reference_sets))
        object.__setattr__(self, "source_accessions", tuple(self.source_accessions))

    @property
    def includes_itself(self) -> bool:
        return self.id in self.included_reference_sets
