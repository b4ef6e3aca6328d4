"""Translate record documents into domain objects and back."""

from __future__ import annotations

from typing import TYPE_CHECKING, Any

from refcompose.domain.model import Join, Reference, ReferenceSet, Side, Strand

if TYPE_CHECKING:
    from .schema import JoinDocument, ReferenceDocument, ReferenceSetDocument, SideDocument


def translate_reference(document: ReferenceDocument) -> Reference:
    return Reference(
        id=document.id,
        sequence_id=document.sequence_id,
        start=document.start,
        length=document.length,
        md5checksum=document.md5checksum,
        name=document.name,
        source_uri=document.source_uri,
        source_accessions=tuple(document.source_accessions),
        is_derived=document.is_derived,
        source_divergence=document.source_divergence,
        ncbi_taxon_id=document.ncbi_taxon_id,
        is_primary=document.is_primary,
    )


def translate_reference_set(document: ReferenceSetDocument) -> ReferenceSet:
    reference_ids = None if document.reference_ids is None else tuple(document.reference_ids)
    return ReferenceSet(
        id=document.id,
        md5checksum=document.md5checksum,
        reference_ids=reference_ids,
        included_reference_sets=tuple(document.included_reference_sets),
        ncbi_taxon_id=document.ncbi_taxon_id,
        description=document.description,
        assembly_id=document.assembly_id,
        source_uri=document.source_uri,
        source_accessions=tuple(document.source_accessions),
        is_derived=document.is_derived,
    )


def translate_side(document: SideDocument) -> Side:
    return Side(
        md5checksum=document.md5checksum,
        position=document.position,
        strand=Strand(document.strand),
    )


def translate_join(document: JoinDocument) -> Join:
    return Join(side1=translate_side(document.side1), side2=translate_side(document.side2))


def reference_to_payload(reference: Reference) -> dict[str, Any]:
    """Render a reference with its wire field names."""

    return {
        "id": reference.id,
        "sequenceId": reference.sequence_id,
        "start": reference.start,
        "length": reference.length,
        "md5checksum": reference.md5checksum,
        "name": reference.name,
        "sourceURI": reference.source_uri,
        "sourceAccessions": list(reference.source_accessions),
        "isDerived": reference.is_derived,
        "sourceDivergence": reference.source_divergence,
        "ncbiTaxonId": reference.ncbi_taxon_id,
        "isPrimary": reference.is_primary,
    }


def reference_set_to_payload(reference_set: ReferenceSet) -> dict[str, Any]:
    reference_ids = reference_set.reference_ids
    return {
        "id": reference_set.id,
        "referenceIds": None if reference_ids is None else list(reference_ids),
        "includedReferenceSets": list(reference_set.included_reference_sets),
        "md5checksum": reference_set.md5checksum,
        "ncbiTaxonId": reference_set.ncbi_taxon_id,
        "description": reference_set.description,
        "assemblyId": reference_set.assembly_id,
        "sourceURI": reference_set.source_uri,
        "sourceAccessions": list(reference_set.source_accessions),
        "isDerived": reference_set.is_derived,
    }
