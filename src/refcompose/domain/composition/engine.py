"""Orchestrator for reference set composition.

The engine composes the resolution, validation and checksum stages into one
verified view of a reference set. Fatal stage errors propagate unchanged and
no partial view is produced. A declared checksum that disagrees with the
computed one is attached as a warning unless the engine runs in strict mode.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from typing import TYPE_CHECKING

from refcompose.domain.checksum import compute_checksum
from refcompose.domain.errors import ChecksumMismatchError, ChecksumMismatchWarning

from .contracts import ResolvedReferenceSet
from .overlap import validate_overlaps
from .resolve import SetResolver

if TYPE_CHECKING:
    from refcompose.domain.checksum import ComputeChecksum
    from refcompose.domain.ports import ReferenceSetRepository

    from .cancellation import CancellationToken
    from .overlap import ValidateOverlaps

log = logging.getLogger(__name__)


@dataclass(slots=True)
class CompositionEngine:
    """Build verified, flattened views of reference sets."""

    resolver: SetResolver
    validate: ValidateOverlaps = field(default=validate_overlaps)
    checksum: ComputeChecksum = field(default=compute_checksum)
    strict: bool = False

    @classmethod
    def for_repository(
        cls, repository: ReferenceSetRepository, *, strict: bool = False
    ) -> CompositionEngine:
        return cls(resolver=SetResolver(repository), strict=strict)

    def build_resolved_view(
        self,
        root_id: str,
        *,
        cancellation: CancellationToken | None = None,
    ) -> ResolvedReferenceSet:
        """Resolve, validate and checksum ``root_id``."""

        membership = self.resolver.resolve(root_id, cancellation=cancellation)
        self.validate(membership.references)
        computed = self.checksum(membership.references, membership.joins)

        declared = self.resolver.record(root_id, cancellation).md5checksum
        warnings: tuple[ChecksumMismatchWarning, ...] = ()
        if declared.lower() != computed:
            if self.strict:
                raise ChecksumMismatchError(set_id=root_id, declared=declared, computed=computed)
            log.warning(
                "Reference set %s: declared checksum %s does not match computed %s",
                root_id,
                declared,
                computed,
            )
            warnings = (ChecksumMismatchWarning(declared=declared, computed=computed),)

        log.info(
            "Resolved reference set %s: references=%d, joins=%d, checksum=%s",
            root_id,
            len(membership.references),
            len(membership.joins),
            computed,
        )
        return ResolvedReferenceSet(
            id=root_id,
            references=membership.references,
            joins=membership.joins,
            computed_checksum=computed,
            declared_checksum=declared,
            warnings=warnings,
        )


def build_resolved_view(
    root_id: str,
    repository: ReferenceSetRepository,
    *,
    strict: bool = False,
    cancellation: CancellationToken | None = None,
) -> ResolvedReferenceSet:
    """One-shot convenience wrapper around ``CompositionEngine``."""

    engine = CompositionEngine.for_repository(repository, strict=strict)
    return engine.build_resolved_view(root_id, cancellation=cancellation)
