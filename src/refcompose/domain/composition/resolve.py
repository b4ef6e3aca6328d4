"""Flatten reference set inclusion into one deduplicated membership.

Resolution runs in two passes:
1) an iterative depth-first walk over ``included_reference_sets`` that fetches
   set records, rejects cycles and missing sets, and yields the sets still to
   be resolved in post-order (included sets before the sets including them)
2) materialization of each set's membership in that order, merging its direct
   members with the already memoised memberships of the sets it includes

Memoised records and memberships are shared by every ``resolve`` call on one
resolver, and each set record is fetched from the repository at most once.
Each set is materialized under its own lock, and at most one such lock is held
at a time, so concurrent resolutions of overlapping graphs wait for and reuse
each other's work without deadlocking.
"""

from __future__ import annotations

import logging
import threading
from typing import TYPE_CHECKING

from refcompose.domain.errors import CycleError, NotFoundError

from .contracts import ResolvedMembership

if TYPE_CHECKING:
    from collections.abc import Iterator, Sequence

    from refcompose.domain.model import Join, JoinKey, Reference, ReferenceSet
    from refcompose.domain.ports import ReferenceSetRepository

    from .cancellation import CancellationToken

log = logging.getLogger(__name__)


class SetResolver:
    """Memoising inclusion resolver bound to one repository."""

    def __init__(self, repository: ReferenceSetRepository) -> None:
        self.repository = repository
        self._guard = threading.Lock()
        self._records: dict[str, ReferenceSet] = {}
        self._completed: dict[str, ResolvedMembership] = {}
        self._set_locks: dict[str, threading.Lock] = {}
        self._record_locks: dict[str, threading.Lock] = {}

    def resolve(
        self,
        root_id: str,
        *,
        cancellation: CancellationToken | None = None,
    ) -> ResolvedMembership:
        """Return every reference and join reachable from ``root_id``.

        Raises ``NotFoundError`` for unknown sets (root or included),
        ``CycleError`` when inclusion loops back onto the current path, and
        ``Cancelled`` when ``cancellation`` trips between lookups.
        """

        cached = self._memoised(root_id)
        if cached is not None:
            return cached

        pending = self._walk(root_id, cancellation)
        log.debug("Resolving %s: %d set(s) to materialize", root_id, len(pending))
        # post-order always ends with the root
        for set_id in pending[:-1]:
            self._materialize(set_id, cancellation)
        return self._materialize(root_id, cancellation)

    def record(self, set_id: str, cancellation: CancellationToken | None = None) -> ReferenceSet:
        """Return the (cached) record for ``set_id``, fetching it at most once."""

        cached = self._cached_record(set_id)
        if cached is not None:
            return cached
        with _lock_in(self._guard, self._record_locks, set_id):
            cached = self._cached_record(set_id)
            if cached is not None:
                return cached
            if cancellation is not None:
                cancellation.check()
            record = self.repository.get_reference_set(set_id)
            with self._guard:
                self._records[set_id] = record
            return record

    def clear(self) -> None:
        """Forget memoised records and memberships."""

        with self._guard:
            self._records.clear()
            self._completed.clear()
            self._set_locks.clear()
            self._record_locks.clear()

    def _memoised(self, set_id: str) -> ResolvedMembership | None:
        with self._guard:
            return self._completed.get(set_id)

    def _cached_record(self, set_id: str) -> ReferenceSet | None:
        with self._guard:
            return self._records.get(set_id)

    def _walk(self, root_id: str, cancellation: CancellationToken | None) -> list[str]:
        post_order: list[str] = []
        finished: set[str] = set()
        on_path: set[str] = set()
        path: list[str] = []
        stack: list[tuple[str, Iterator[str]]] = []

        def enter(set_id: str) -> None:
            record = self.record(set_id, cancellation)
            on_path.add(set_id)
            path.append(set_id)
            stack.append((set_id, iter(record.included_reference_sets)))

        enter(root_id)
        while stack:
            set_id, children = stack[-1]
            child = next(children, None)
            if child is None:
                stack.pop()
                path.pop()
                on_path.discard(set_id)
                finished.add(set_id)
                post_order.append(set_id)
                continue
            if child in on_path:
                cycle = [*path[path.index(child) :], child]
                raise CycleError(cycle)
            if child in finished or self._memoised(child) is not None:
                continue
            enter(child)
        return post_order

    def _materialize(
        self, set_id: str, cancellation: CancellationToken | None
    ) -> ResolvedMembership:
        with _lock_in(self._guard, self._set_locks, set_id):
            cached = self._memoised(set_id)
            if cached is not None:
                return cached

            record = self.record(set_id, cancellation)
            if cancellation is not None:
                cancellation.check()
            references = self._direct_references(record)
            if cancellation is not None:
                cancellation.check()
            joins = self.repository.get_joins_for_set(set_id)

            membership = self._merge(record, references, joins)
            with self._guard:
                self._completed[set_id] = membership
            log.debug(
                "Materialized %s: references=%d, joins=%d",
                set_id,
                len(membership.references),
                len(membership.joins),
            )
            return membership

    def _direct_references(self, record: ReferenceSet) -> Sequence[Reference]:
        references = self.repository.get_references_for_set(record.id)
        if record.reference_ids is None:
            return references
        by_id = {reference.id: reference for reference in references}
        for reference_id in record.reference_ids:
            if reference_id not in by_id:
                raise NotFoundError(reference_id, kind="reference")
        return [by_id[reference_id] for reference_id in record.reference_ids]

    def _merge(
        self,
        record: ReferenceSet,
        references: Sequence[Reference],
        joins: Sequence[Join],
    ) -> ResolvedMembership:
        references_by_id: dict[str, Reference] = {}
        joins_by_key: dict[JoinKey, Join] = {}

        def add_references(candidates: Sequence[Reference] | frozenset[Reference]) -> None:
            for reference in candidates:
                existing = references_by_id.setdefault(reference.id, reference)
                if existing is not reference and existing != reference:
                    log.warning(
                        "Reference set %s: conflicting records for reference %s; keeping first",
                        record.id,
                        reference.id,
                    )

        def add_joins(candidates: Sequence[Join] | frozenset[Join]) -> None:
            for join in candidates:
                joins_by_key.setdefault(join.key, join)

        add_references(references)
        add_joins(joins)
        for included_id in record.included_reference_sets:
            included = self._memoised(included_id)
            if included is None:  # pragma: no cover - post-order guarantees completion
                raise RuntimeError(f"Included set {included_id} resolved out of order")
            add_references(included.references)
            add_joins(included.joins)

        return ResolvedMembership(
            references=frozenset(references_by_id.values()),
            joins=frozenset(joins_by_key.values()),
        )


def resolve_membership(
    root_id: str,
    repository: ReferenceSetRepository,
    *,
    cancellation: CancellationToken | None = None,
) -> ResolvedMembership:
    """Resolve ``root_id`` with a throwaway resolver."""

    return SetResolver(repository).resolve(root_id, cancellation=cancellation)


def _lock_in(
    guard: threading.Lock, locks: dict[str, threading.Lock], set_id: str
) -> threading.Lock:
    with guard:
        lock = locks.get(set_id)
        if lock is None:
            lock = locks[set_id] = threading.Lock()
        return lock
