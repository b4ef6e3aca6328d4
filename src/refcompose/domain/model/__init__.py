"""Public domain model surface."""

from __future__ import annotations

from refcompose.domain.model.joins import Join, JoinKey, Side, SideKey, Strand
from refcompose.domain.model.primitives import (
    Interval,
    Md5Checksum,
    NcbiTaxonId,
    ReferenceId,
    ReferenceSetId,
    SequenceId,
    is_md5_hex,
)
from refcompose.domain.model.reference import Reference, ReferenceSet

__all__ = [  # noqa: RUF022
    # records
    "Reference",
    "ReferenceSet",
    # graph mode
    "Join",
    "JoinKey",
    "Side",
    "SideKey",
    "Strand",
    # primitives
    "Interval",
    "Md5Checksum",
    "NcbiTaxonId",
    "ReferenceId",
    "ReferenceSetId",
    "SequenceId",
    "is_md5_hex",
]
