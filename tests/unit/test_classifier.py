from __future__ import annotations

import pytest

from certbatch.models.course import CanonicalCourse
from certbatch.services.classifier import classify_course, course_display_name


@pytest.mark.parametrize(
    "token, expected",
    [
        ("Python Programming", CanonicalCourse.PYTHON_PROGRAMMING),
        ("intro to PYTHON", CanonicalCourse.PYTHON_PROGRAMMING),
        ("Data Analysis", CanonicalCourse.DATA_ANALYSIS_ANALYTICS),
        ("data analytics", CanonicalCourse.DATA_ANALYSIS_ANALYTICS),
        ("Data Analysis/Analytics", CanonicalCourse.DATA_ANALYSIS_ANALYTICS),
        ("Microsoft Excel", CanonicalCourse.MS_OFFICE_FOR_ADMINISTRATORS),
        ("MS Office for Administrators", CanonicalCourse.MS_OFFICE_FOR_ADMINISTRATORS),
        ("office skills", CanonicalCourse.MS_OFFICE_FOR_ADMINISTRATORS),
        ("Cyber Security Basics", CanonicalCourse.CYBERSECURITY),
        ("Cybersecurity", CanonicalCourse.CYBERSECURITY),
    ],
)
def test_classify_recognized_tokens(token: str, expected: CanonicalCourse):
    assert classify_course(token) is expected


def test_classify_unmatched_token_returned_trimmed():
    assert classify_course("  Basket Weaving  ") == "Basket Weaving"


def test_data_without_analysis_is_not_data_course():
    # "data" alone does not satisfy the data-analysis rule
    assert classify_course("Data Entry") == "Data Entry"


def test_rule_order_python_wins_over_data_analysis():
    assert classify_course("Data Analysis with Python") is CanonicalCourse.PYTHON_PROGRAMMING


def test_rule_order_data_analysis_wins_over_office():
    assert classify_course("Office data analytics") is CanonicalCourse.DATA_ANALYSIS_ANALYTICS


def test_canonical_display_names_are_fixed_points():
    """Classifying a display name yields the same course (re-normalization is stable)."""
    for course in CanonicalCourse:
        assert classify_course(course.display_name) is course


def test_course_display_name():
    assert course_display_name(CanonicalCourse.CYBERSECURITY) == "Cybersecurity"
    assert course_display_name("Basket Weaving") == "Basket Weaving"
