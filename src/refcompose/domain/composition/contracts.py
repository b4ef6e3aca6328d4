"""Result containers shared by the composition stages."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import TYPE_CHECKING, Any

if TYPE_CHECKING:
    from refcompose.domain.errors import ChecksumMismatchWarning
    from refcompose.domain.model import Join, Reference


@dataclass(frozen=True, slots=True)
class ResolvedMembership:
    """Flat, deduplicated members reachable from one reference set."""

    references: frozenset[Reference] = field(default_factory=frozenset["Reference"])
    joins: frozenset[Join] = field(default_factory=frozenset["Join"])

    @property
    def reference_ids(self) -> frozenset[str]:
        return frozenset(reference.id for reference in self.references)


@dataclass(frozen=True, slots=True, kw_only=True)
class ResolvedReferenceSet:
    """Verified view of one reference set with all inclusions flattened."""

    id: str
    references: frozenset[Reference]
    joins: frozenset[Join]
    computed_checksum: str
    declared_checksum: str
    warnings: tuple[ChecksumMismatchWarning, ...] = ()

    @property
    def checksum_matches(self) -> bool:
        return not self.warnings

    def sorted_references(self) -> list[Reference]:
        return sorted(self.references, key=lambda ref: (ref.sequence_id, ref.start, ref.id))

    def to_dict(self) -> dict[str, Any]:
        return {
            "id": self.id,
            "declaredChecksum": self.declared_checksum,
            "computedChecksum": self.computed_checksum,
            "checksumMatches": self.checksum_matches,
            "referenceIds": [reference.id for reference in self.sorted_references()],
            "joinCount": len(self.joins),
            "warnings": [str(warning) for warning in self.warnings],
        }
