"""Reference set composition core.

Layered flow:
1) resolve transitive inclusion into a deduplicated membership
2) validate the non-overlap invariant per sequence
3) compute the order-independent set checksum
4) compare it with the declared checksum of the root set
"""

from __future__ import annotations

from .cancellation import CancellationToken
from .contracts import ResolvedMembership, ResolvedReferenceSet
from .engine import CompositionEngine, build_resolved_view
from .overlap import find_overlaps, validate_overlaps
from .resolve import SetResolver, resolve_membership

__all__ = [
    "CancellationToken",
    "CompositionEngine",
    "ResolvedMembership",
    "ResolvedReferenceSet",
    "SetResolver",
    "build_resolved_view",
    "find_overlaps",
    "resolve_membership",
    "validate_overlaps",
]
