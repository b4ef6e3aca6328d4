"""Non-overlap validation for references sharing a sequence.

Intervals are half-open, so a reference ending exactly where the next one
starts does not overlap it, and zero-length references never overlap anything.
Every sequence is scanned in full; the error lists all violations.
"""

from __future__ import annotations

import logging
from collections import defaultdict
from typing import TYPE_CHECKING, Protocol

from refcompose.domain.errors import OverlapError, OverlapViolation

if TYPE_CHECKING:
    from collections.abc import Iterable

    from refcompose.domain.model import Reference

log = logging.getLogger(__name__)


class ValidateOverlaps(Protocol):
    """Reject reference collections with overlapping intervals."""

    def __call__(self, references: Iterable[Reference]) -> None: ...


def _sort_key(reference: Reference) -> tuple[int, int, str]:
    return (reference.start, reference.length, reference.id)


def find_overlaps(references: Iterable[Reference]) -> list[OverlapViolation]:
    """Return every overlap in deterministic order (sequence id, then position)."""

    by_sequence: dict[str, list[Reference]] = defaultdict(list)
    for reference in references:
        by_sequence[reference.sequence_id].append(reference)

    violations: list[OverlapViolation] = []
    for sequence_id in sorted(by_sequence):
        violations.extend(_scan_sequence(sequence_id, by_sequence[sequence_id]))
    return violations


def _scan_sequence(sequence_id: str, references: list[Reference]) -> list[OverlapViolation]:
    violations: list[OverlapViolation] = []
    # the reference reaching furthest right so far; compared against each successor
    reach: Reference | None = None
    for reference in sorted(references, key=_sort_key):
        if reference.length == 0:
            continue
        if reach is not None and reach.end > reference.start:
            violations.append(
                OverlapViolation(
                    sequence_id=sequence_id,
                    ref_a=reach.id,
                    ref_b=reference.id,
                    interval_a=reach.interval,
                    interval_b=reference.interval,
                )
            )
        if reach is None or reference.end > reach.end:
            reach = reference
    return violations


def validate_overlaps(references: Iterable[Reference]) -> None:
    """Raise ``OverlapError`` if any two references on one sequence overlap."""

    violations = find_overlaps(references)
    if violations:
        log.debug("Found %d overlap violation(s)", len(violations))
        raise OverlapError(violations)
