"""Graph-mode join records.

Only the checksum-relevant fields of a side are modelled: the anchor's
``md5checksum``, the ``position`` on it, and the ``strand``.
"""

from __future__ import annotations

from dataclasses import dataclass
from enum import StrEnum

from refcompose.domain.errors import InvalidRecordError


class Strand(StrEnum):
    POSITIVE = "+"
    NEGATIVE = "-"


type SideKey = tuple[str, int, str]
type JoinKey = tuple[SideKey, SideKey]


@dataclass(frozen=True, slots=True)
class Side:
    md5checksum: str
    position: int
    strand: Strand

    def __post_init__(self) -> None:
        if self.position < 0:
            raise InvalidRecordError(f"Side position must be >= 0, got {self.position}")
        object.__setattr__(self, "strand", Strand(self.strand))

    @property
    def key(self) -> SideKey:
        return (self.md5checksum, self.position, self.strand.value)


@dataclass(frozen=True, slots=True)
class Join:
    """Two sides in their fixed definition order."""

    side1: Side
    side2: Side

    @property
    def sides(self) -> tuple[Side, Side]:
        return (self.side1, self.side2)

    @property
    def key(self) -> JoinKey:
        return (self.side1.key, self.side2.key)
