"""Dict-backed reference set repository."""

from __future__ import annotations

from collections import defaultdict
from typing import TYPE_CHECKING

from refcompose.domain.errors import NotFoundError

if TYPE_CHECKING:
    from collections.abc import Iterable, Sequence

    from refcompose.domain.model import Join, Reference, ReferenceSet


class InMemoryReferenceSetRepository:
    def __init__(
        self,
        reference_sets: Iterable[ReferenceSet] = (),
    ) -> None:
        self._sets: dict[str, ReferenceSet] = {}
        self._references: dict[str, Reference] = {}
        self._members: defaultdict[str, list[str]] = defaultdict(list)
        self._joins: defaultdict[str, list[Join]] = defaultdict(list)
        for reference_set in reference_sets:
            self.add_reference_set(reference_set)

    def get_reference_set(self, set_id: str) -> ReferenceSet:
        try:
            return self._sets[set_id]
        except KeyError:
            raise NotFoundError(set_id) from None

    def get_references_for_set(self, set_id: str) -> Sequence[Reference]:
        return [self._references[ref_id] for ref_id in self._members.get(set_id, ())]

    def get_joins_for_set(self, set_id: str) -> Sequence[Join]:
        return list(self._joins.get(set_id, ()))

    def add_reference_set(self, reference_set: ReferenceSet) -> None:
        self._sets[reference_set.id] = reference_set

    def add_reference(self, reference: Reference, *, set_ids: Sequence[str] = ()) -> None:
        self._references[reference.id] = reference
        for set_id in set_ids:
            members = self._members[set_id]
            if reference.id not in members:
                members.append(reference.id)

    def add_join(self, join: Join, *, set_ids: Sequence[str] = ()) -> None:
        for set_id in set_ids:
            joins = self._joins[set_id]
            if join not in joins:
                joins.append(join)

    def reference(self, reference_id: str) -> Reference:
        try:
            return self._references[reference_id]
        except KeyError:
            raise NotFoundError(reference_id, kind="reference") from None

    @property
    def reference_set_ids(self) -> tuple[str, ...]:
        return tuple(self._sets)


if TYPE_CHECKING:
    from refcompose.domain.ports import WritableReferenceSetRepository

    _repo_check: WritableReferenceSetRepository = InMemoryReferenceSetRepository()
