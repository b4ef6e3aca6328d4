"""JSON record schemas for references, reference sets and joins.

Field names and defaults follow the wire contract of the reference schema
(camelCase, nullable fields default to ``null``, list fields default to empty).
"""

from __future__ import annotations

import logging
from typing import ClassVar, Literal

from pydantic import BaseModel, ConfigDict, Field

log = logging.getLogger(__name__)

type StrandChar = Literal["+", "-"]


class RecordBaseModel(BaseModel):
    model_config = ConfigDict(extra="allow", populate_by_name=True, frozen=True)
    _logged_extra_keys: ClassVar[set[str]] = set()

    def model_post_init(self, _context: object, /) -> None:
        extras = self.__pydantic_extra__
        if not extras:
            return
        new_keys = set(extras).difference(self._logged_extra_keys)
        if not new_keys:
            return
        self._logged_extra_keys.update(new_keys)
        log.warning(
            "%s: unmodeled keys: %s",
            type(self).__name__,
            ", ".join(sorted(new_keys)),
        )


class ReferenceDocument(RecordBaseModel):
    id: str
    sequence_id: str = Field(alias="sequenceId")
    start: int = Field(ge=0)
    length: int = Field(ge=0)
    md5checksum: str = Field(pattern=r"^[0-9a-f]{32}$")
    name: str
    source_uri: str | None = Field(default=None, alias="sourceURI")
    source_accessions: list[str] = Field(default_factory=list, alias="sourceAccessions")
    is_derived: bool = Field(default=False, alias="isDerived")
    source_divergence: float | None = Field(default=None, alias="sourceDivergence")
    ncbi_taxon_id: int | None = Field(default=None, alias="ncbiTaxonId")
    is_primary: bool = Field(default=True, alias="isPrimary")


class ReferenceSetDocument(RecordBaseModel):
    id: str
    md5checksum: str
    reference_ids: list[str] | None = Field(default=None, alias="referenceIds")
    included_reference_sets: list[str] = Field(
        default_factory=list, alias="includedReferenceSets"
    )
    ncbi_taxon_id: int | None = Field(default=None, alias="ncbiTaxonId")
    description: str | None = None
    assembly_id: str | None = Field(default=None, alias="assemblyId")
    source_uri: str | None = Field(default=None, alias="sourceURI")
    source_accessions: list[str] = Field(default_factory=list, alias="sourceAccessions")
    is_derived: bool = Field(default=False, alias="isDerived")


class SideDocument(RecordBaseModel):
    md5checksum: str
    position: int = Field(ge=0)
    strand: StrandChar


class JoinDocument(RecordBaseModel):
    side1: SideDocument
    side2: SideDocument
    reference_set_ids: list[str] = Field(default_factory=list, alias="referenceSetIds")


class ReferenceSetBundle(RecordBaseModel):
    """A self-contained collection of records.

    ``memberships`` maps set ids to the ids of their direct references; sets
    missing from it fall back to their own ``referenceIds``.
    """

    reference_sets: list[ReferenceSetDocument] = Field(
        default_factory=list["ReferenceSetDocument"], alias="referenceSets"
    )
    references: list[ReferenceDocument] = Field(default_factory=list["ReferenceDocument"])
    joins: list[JoinDocument] = Field(default_factory=list["JoinDocument"])
    memberships: dict[str, list[str]] = Field(default_factory=dict)
