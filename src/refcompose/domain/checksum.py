"""Canonical MD5 checksums for references and reference sets.

The set checksum is order-independent: every contributing digest string is
collected, sorted, concatenated without separator and hashed again. Feeding
the same references and joins in any order yields the same result.
"""

from __future__ import annotations

import hashlib
from typing import TYPE_CHECKING, Final, Protocol

if TYPE_CHECKING:
    from collections.abc import Iterable

    from refcompose.domain.model import Join, Reference, Side

EMPTY_MD5: Final[str] = "d41d8cd98f00b204e9800998ecf8427e"


def md5_hexdigest(value: str | bytes) -> str:
    data = value.encode("utf-8") if isinstance(value, str) else value
    return hashlib.md5(data, usedforsecurity=False).hexdigest()


def sequence_checksum(bases: str) -> str:
    """Return the reference checksum of raw ``bases``.

    Whitespace is removed and the remaining bases are upper-cased before hashing.
    """

    normalized = "".join(bases.split()).upper()
    return md5_hexdigest(normalized)


def side_digest(side: Side) -> str:
    return md5_hexdigest(f"{side.md5checksum}{side.position}{side.strand.value}")


def checksum_entries(references: Iterable[Reference], joins: Iterable[Join] = ()) -> list[str]:
    """Return the sorted digest strings that make up a set checksum."""

    entries = [reference.md5checksum for reference in references]
    for join in joins:
        entries.extend(side_digest(side) for side in join.sides)
    entries.sort()
    return entries


def compute_checksum(references: Iterable[Reference], joins: Iterable[Join] = ()) -> str:
    return md5_hexdigest("".join(checksum_entries(references, joins)))


class ComputeChecksum(Protocol):
    """Compute the canonical checksum of a resolved membership."""

    def __call__(self, references: Iterable[Reference], joins: Iterable[Join] = ()) -> str: ...
