"""Ports for reading reference set records."""

from __future__ import annotations

from typing import TYPE_CHECKING, Protocol, runtime_checkable

if TYPE_CHECKING:
    from collections.abc import Sequence

    from refcompose.domain.model import Join, Reference, ReferenceSet


@runtime_checkable
class ReferenceSetRepository(Protocol):
    """Read contract consumed by the composition core.

    ``get_reference_set`` raises ``NotFoundError`` for unknown ids. The other two
    lookups return the direct members of one set only (no inclusions) in any
    order; classic-mode stores return an empty sequence of joins.
    """

    def get_reference_set(self, set_id: str) -> ReferenceSet: ...

    def get_references_for_set(self, set_id: str) -> Sequence[Reference]: ...

    def get_joins_for_set(self, set_id: str) -> Sequence[Join]: ...


@runtime_checkable
class WritableReferenceSetRepository(ReferenceSetRepository, Protocol):
    """Repository that can also ingest records."""

    def add_reference_set(self, reference_set: ReferenceSet) -> None: ...

    def add_reference(self, reference: Reference, *, set_ids: Sequence[str] = ()) -> None: ...

    def add_join(self, join: Join, *, set_ids: Sequence[str] = ()) -> None: ...
