"""Error taxonomy for reference set composition.

Fatal conditions are exceptions rooted at ``CompositionError``. A declared
checksum that disagrees with the computed one is advisory by default and is
reported as a ``ChecksumMismatchWarning`` value attached to the result; strict
callers get ``ChecksumMismatchError`` instead.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from collections.abc import Sequence

    from refcompose.domain.model import Interval


class InvalidRecordError(ValueError):
    """Raised when a record violates its own field constraints."""


class CompositionError(RuntimeError):
    """Base class for fatal composition failures."""


class NotFoundError(CompositionError, LookupError):
    """Raised when a referenced record is absent from the repository."""

    def __init__(self, missing_id: str, *, kind: str = "reference_set") -> None:
        self.missing_id = missing_id
        self.kind = kind
        super().__init__(f"{kind.replace('_', ' ').capitalize()} not found: {missing_id}")


class CycleError(CompositionError):
    """Raised when reference set inclusion forms a cycle.

    ``path`` lists the ids forming the cycle in traversal order, with the
    repeated id at both ends (``("a", "b", "a")``; ``("a", "a")`` for a set
    that includes itself).
    """

    def __init__(self, path: Sequence[str]) -> None:
        self.path: tuple[str, ...] = tuple(path)
        super().__init__(f"Reference set inclusion cycle: {' -> '.join(self.path)}")


@dataclass(frozen=True, slots=True)
class OverlapViolation:
    sequence_id: str
    ref_a: str
    ref_b: str
    interval_a: Interval
    interval_b: Interval

    def describe(self) -> str:
        return (
            f"sequence {self.sequence_id}: {self.ref_a} {self.interval_a} "
            f"overlaps {self.ref_b} {self.interval_b}"
        )


class OverlapError(CompositionError):
    """Raised when references on the same sequence have overlapping intervals.

    The scalar attributes describe the first violation in deterministic order;
    ``violations`` holds every violation found during the scan.
    """

    def __init__(self, violations: Sequence[OverlapViolation]) -> None:
        if not violations:
            raise ValueError("OverlapError requires at least one violation")
        self.violations: tuple[OverlapViolation, ...] = tuple(violations)
        first = self.violations[0]
        self.sequence_id = first.sequence_id
        self.ref_a = first.ref_a
        self.ref_b = first.ref_b
        self.interval_a = first.interval_a
        self.interval_b = first.interval_b
        message = f"Overlapping references on {first.describe()}"
        if len(self.violations) > 1:
            message += f" (and {len(self.violations) - 1} more)"
        super().__init__(message)


class ChecksumMismatchError(CompositionError):
    """Raised in strict mode when declared and computed checksums differ."""

    def __init__(self, *, set_id: str, declared: str, computed: str) -> None:
        self.set_id = set_id
        self.declared = declared
        self.computed = computed
        super().__init__(
            f"Checksum mismatch for reference set {set_id}: "
            f"declared={declared}, computed={computed}"
        )


class Cancelled(CompositionError):  # noqa: N818
    """Raised when a resolution is cancelled or exceeds its deadline."""

    def __init__(self, reason: str = "cancelled") -> None:
        self.reason = reason
        super().__init__(f"Resolution aborted: {reason}")


@dataclass(frozen=True, slots=True)
class ChecksumMismatchWarning:
    """Advisory mismatch between a set's declared and computed checksums."""

    declared: str
    computed: str

    def __str__(self) -> str:
        return f"declared checksum {self.declared} != computed {self.computed}"
