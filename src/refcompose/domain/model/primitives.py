"""Domain primitives: scalar aliases + small value objects.

Scalar aliases may be promoted to proper value objects later without changing imports.
"""

from __future__ import annotations

import re
from dataclasses import dataclass
from typing import Final

type ReferenceId = str
type ReferenceSetId = str
type SequenceId = str
type Md5Checksum = str
type NcbiTaxonId = int

MD5_HEX_PATTERN: Final[re.Pattern[str]] = re.compile(r"^[0-9a-f]{32}$")


def is_md5_hex(value: str) -> bool:
    """Return whether ``value`` is a 32-character lowercase hex digest."""

    return MD5_HEX_PATTERN.fullmatch(value) is not None


@dataclass(frozen=True, slots=True, order=True)
class Interval:
    """Half-open coordinate interval ``[start, end)``."""

    start: int
    end: int

    @property
    def length(self) -> int:
        return self.end - self.start

    @property
    def is_empty(self) -> bool:
        return self.end <= self.start

    def overlaps(self, other: Interval) -> bool:
        if self.is_empty or other.is_empty:
            return False
        return self.start < other.end and other.start < self.end

    def __str__(self) -> str:
        return f"[{self.start}, {self.end})"
