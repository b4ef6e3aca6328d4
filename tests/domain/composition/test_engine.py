from __future__ import annotations

from typing import TYPE_CHECKING

import pytest

from refcompose.domain.checksum import compute_checksum
from refcompose.domain.composition import (
    CompositionEngine,
    ResolvedMembership,
    SetResolver,
    build_resolved_view,
)
from refcompose.domain.errors import (
    ChecksumMismatchError,
    ChecksumMismatchWarning,
    CycleError,
    NotFoundError,
    OverlapError,
    OverlapViolation,
)
from refcompose.domain.model import Interval
from tests.helpers.references import (
    build_repository,
    make_join,
    make_reference,
    make_reference_set,
    md5_of,
)

if TYPE_CHECKING:
    from collections.abc import Iterable

    from refcompose.adapters.memory import InMemoryReferenceSetRepository
    from refcompose.domain.model import Join, Reference, ReferenceSet


def _repository_with_declared(declared: str | None) -> InMemoryReferenceSetRepository:
    references = [
        make_reference("r1", start=0, length=100),
        make_reference("r2", start=100, length=100),
    ]
    joins = [make_join(md5_of("x"), 1, md5_of("y"), 2)]
    checksum = declared if declared is not None else compute_checksum(references, joins)
    return build_repository(
        [make_reference_set("root", md5checksum=checksum)],
        members={"root": references},
        joins={"root": joins},
    )


def test_matching_declared_checksum_produces_clean_view() -> None:
    repository = _repository_with_declared(None)

    view = build_resolved_view("root", repository)

    assert view.id == "root"
    assert view.checksum_matches
    assert view.warnings == ()
    assert view.computed_checksum == view.declared_checksum
    assert {reference.id for reference in view.references} == {"r1", "r2"}
    assert len(view.joins) == 1


def test_mismatched_checksum_is_advisory_by_default(caplog: pytest.LogCaptureFixture) -> None:
    repository = _repository_with_declared("f" * 32)

    view = build_resolved_view("root", repository)

    assert not view.checksum_matches
    assert view.warnings == (
        ChecksumMismatchWarning(declared="f" * 32, computed=view.computed_checksum),
    )
    assert "does not match computed" in caplog.text


def test_mismatched_checksum_is_fatal_in_strict_mode() -> None:
    repository = _repository_with_declared("f" * 32)

    with pytest.raises(ChecksumMismatchError) as excinfo:
        build_resolved_view("root", repository, strict=True)

    assert excinfo.value.declared == "f" * 32
    assert excinfo.value.set_id == "root"


def test_declared_checksum_comparison_ignores_case() -> None:
    repository = _repository_with_declared(None)
    declared = repository.get_reference_set("root").md5checksum
    upper = build_repository(
        [make_reference_set("root", md5checksum=declared.upper())],
        members={"root": list(repository.get_references_for_set("root"))},
        joins={"root": list(repository.get_joins_for_set("root"))},
    )

    assert build_resolved_view("root", upper, strict=True).checksum_matches


def test_overlap_aborts_without_view() -> None:
    repository = build_repository(
        [
            make_reference_set("base"),
            make_reference_set("top", includes=["base"]),
        ],
        members={
            "base": [make_reference("inherited", start=0, length=100)],
            "top": [make_reference("direct", start=50, length=10)],
        },
    )

    with pytest.raises(OverlapError) as excinfo:
        build_resolved_view("top", repository)

    assert {excinfo.value.ref_a, excinfo.value.ref_b} == {"inherited", "direct"}


@pytest.mark.parametrize(
    ("sets", "expected"),
    [
        ([make_reference_set("root", includes=["root"])], CycleError),
        ([make_reference_set("root", includes=["missing"])], NotFoundError),
    ],
)
def test_resolution_errors_propagate_unchanged(
    sets: list[ReferenceSet], expected: type[Exception]
) -> None:
    repository = build_repository(sets)

    with pytest.raises(expected):
        build_resolved_view("root", repository)


def test_diamond_view_checksum_counts_shared_references_once(
    diamond_repository: InMemoryReferenceSetRepository,
) -> None:
    view = build_resolved_view("SetC", diamond_repository)

    expected = compute_checksum(
        [
            reference
            for set_id in ("SetA", "SetB", "SetC")
            for reference in diamond_repository.get_references_for_set(set_id)
        ]
    )
    assert view.computed_checksum == expected
    assert [ref.id for ref in view.sorted_references()] == ["chr1", "chr2", "chrM", "chrX"]


def test_engine_runs_stages_in_order(diamond_repository: InMemoryReferenceSetRepository) -> None:
    observed: list[str] = []

    def validate(references: Iterable[Reference]) -> None:
        observed.append(f"validate:{len(list(references))}")

    def checksum(references: Iterable[Reference], joins: Iterable[Join] = ()) -> str:
        observed.append("checksum")
        return "0" * 32

    engine = CompositionEngine(
        resolver=SetResolver(diamond_repository),
        validate=validate,
        checksum=checksum,
    )
    view = engine.build_resolved_view("SetB")

    assert observed == ["validate:3", "checksum"]
    assert view.checksum_matches


def test_failed_validation_skips_checksum(
    diamond_repository: InMemoryReferenceSetRepository,
) -> None:
    calls: list[str] = []

    violation = OverlapViolation(
        sequence_id="seq1",
        ref_a="a",
        ref_b="b",
        interval_a=Interval(0, 10),
        interval_b=Interval(5, 15),
    )

    def validate(references: Iterable[Reference]) -> None:
        raise OverlapError([violation])

    def checksum(references: Iterable[Reference], joins: Iterable[Join] = ()) -> str:
        calls.append("checksum")
        return "0" * 32

    engine = CompositionEngine(
        resolver=SetResolver(diamond_repository), validate=validate, checksum=checksum
    )

    with pytest.raises(OverlapError) as excinfo:
        engine.build_resolved_view("SetA")
    assert excinfo.value.violations == (violation,)
    assert calls == []


def test_view_serialises_to_wire_shaped_dict(
    diamond_repository: InMemoryReferenceSetRepository,
) -> None:
    view = build_resolved_view("SetB", diamond_repository)

    payload = view.to_dict()

    assert payload["id"] == "SetB"
    assert payload["referenceIds"] == ["chr1", "chr2", "chrM"]
    assert payload["checksumMatches"] is False
    assert payload["warnings"] == [str(view.warnings[0])]


def test_resolved_membership_defaults_to_empty() -> None:
    membership = ResolvedMembership()

    assert membership.references == frozenset()
    assert membership.joins == frozenset()
