from __future__ import annotations

import pytest

from refcompose.domain.composition import find_overlaps, validate_overlaps
from refcompose.domain.errors import OverlapError
from refcompose.domain.model import Interval
from tests.helpers.references import make_reference


def test_touching_intervals_do_not_overlap() -> None:
    references = [
        make_reference("left", start=0, length=100),
        make_reference("right", start=100, length=50),
    ]

    validate_overlaps(references)


def test_overlapping_intervals_name_both_references() -> None:
    references = [
        make_reference("outer", start=0, length=100),
        make_reference("inner", start=50, length=10),
    ]

    with pytest.raises(OverlapError) as excinfo:
        validate_overlaps(references)

    error = excinfo.value
    assert {error.ref_a, error.ref_b} == {"outer", "inner"}
    assert error.sequence_id == "seq1"
    assert error.interval_a == Interval(0, 100)
    assert error.interval_b == Interval(50, 60)


def test_references_on_different_sequences_never_conflict() -> None:
    references = [
        make_reference("a", sequence_id="seq1", start=0, length=100),
        make_reference("b", sequence_id="seq2", start=0, length=100),
    ]

    validate_overlaps(references)


def test_zero_length_references_never_overlap() -> None:
    references = [
        make_reference("span", start=0, length=100),
        make_reference("empty", start=10, length=0),
        make_reference("empty-at-start", start=0, length=0),
    ]

    validate_overlaps(references)


def test_overlap_hidden_behind_contained_reference_is_found() -> None:
    references = [
        make_reference("wide", start=0, length=100),
        make_reference("small", start=10, length=5),
        make_reference("late", start=40, length=10),
    ]

    violations = find_overlaps(references)

    pairs = {(violation.ref_a, violation.ref_b) for violation in violations}
    assert pairs == {("wide", "small"), ("wide", "late")}


def test_all_sequences_are_scanned_and_reported_in_order() -> None:
    references = [
        make_reference("z1", sequence_id="seqZ", start=0, length=10),
        make_reference("z2", sequence_id="seqZ", start=5, length=10),
        make_reference("a1", sequence_id="seqA", start=0, length=10),
        make_reference("a2", sequence_id="seqA", start=9, length=1),
    ]

    with pytest.raises(OverlapError) as excinfo:
        validate_overlaps(references)

    error = excinfo.value
    assert [violation.sequence_id for violation in error.violations] == ["seqA", "seqZ"]
    assert error.sequence_id == "seqA"
    assert "and 1 more" in str(error)


def test_report_is_independent_of_input_order() -> None:
    references = [
        make_reference("a", start=0, length=10),
        make_reference("b", start=0, length=20),
        make_reference("c", start=15, length=10),
    ]

    assert find_overlaps(references) == find_overlaps(list(reversed(references)))


def test_identical_start_breaks_ties_by_length_then_id() -> None:
    references = [
        make_reference("long", start=0, length=20),
        make_reference("short", start=0, length=5),
    ]

    violations = find_overlaps(references)

    assert [(v.ref_a, v.ref_b) for v in violations] == [("short", "long")]
