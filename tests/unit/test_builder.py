from __future__ import annotations

from certbatch.models.candidate import CandidateStatus
from certbatch.models.course import CanonicalCourse
from certbatch.models.row_data import NormalizedRow
from certbatch.services.builder import DropReason, build_candidates, resolve_courses


def _row(n: int, name: str = "Ada", email: str = "ada@x.com", courses: str = "Python Programming") -> NormalizedRow:
    return NormalizedRow(row_number=n, name=name, email=email, courses=courses)


def test_build_candidate_defaults():
    [candidate] = build_candidates([_row(2)])
    assert candidate.id == "candidate-0"
    assert candidate.name == "Ada"
    assert candidate.email == "ada@x.com"
    assert candidate.courses == (CanonicalCourse.PYTHON_PROGRAMMING,)
    assert candidate.processed_courses == ()
    assert candidate.certificates_generated == 0
    assert candidate.status is CandidateStatus.PENDING


def test_duplicate_courses_collapse_in_first_occurrence_order():
    [candidate] = build_candidates([_row(2, courses="Cybersecurity, Python Programming, python, PYTHON")])
    assert candidate.courses == (CanonicalCourse.CYBERSECURITY, CanonicalCourse.PYTHON_PROGRAMMING)


def test_unclassified_only_row_is_dropped_silently():
    assert build_candidates([_row(2, courses="Basket Weaving")]) == []


def test_blank_name_or_email_dropped():
    rows = [_row(2, name=" "), _row(3, email=""), _row(4)]
    candidates = build_candidates(rows)
    assert [c.id for c in candidates] == ["candidate-2"]


def test_email_without_at_is_not_a_builder_drop():
    # "@" is checked by the validator only; the builder requires a non-blank email
    [candidate] = build_candidates([_row(2, email="ada.example.com")])
    assert candidate.email == "ada.example.com"


def test_ids_follow_input_position():
    rows = [_row(2, courses="Basket Weaving"), _row(3), _row(4, courses="cyber")]
    assert [c.id for c in build_candidates(rows)] == ["candidate-1", "candidate-2"]


def test_on_drop_hook_reports_reasons():
    seen: list[tuple[int, DropReason, str]] = []
    rows = [
        _row(2, courses="Python Programming, Basket Weaving"),
        _row(3, name=""),
        _row(4, courses="Pottery"),
    ]
    candidates = build_candidates(rows, on_drop=lambda row, reason, detail: seen.append((row.row_number, reason, detail)))
    assert len(candidates) == 1
    assert seen == [
        (2, DropReason.UNCLASSIFIED_COURSE, "Basket Weaving"),
        (3, DropReason.MISSING_NAME, "blank name"),
        (4, DropReason.UNCLASSIFIED_COURSE, "Pottery"),
        (4, DropReason.NO_COURSES, "Pottery"),
    ]


def test_resolve_courses_skips_empty_tokens():
    assert resolve_courses(_row(2, courses=" , cyber, ")) == (CanonicalCourse.CYBERSECURITY,)


def test_build_is_deterministic():
    rows = [_row(2, courses="data analysis, office"), _row(3, name="Grace", courses="cyber")]
    assert build_candidates(rows) == build_candidates(rows)
