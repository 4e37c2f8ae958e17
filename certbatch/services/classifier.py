from __future__ import annotations

from collections.abc import Callable

from ..models.course import CanonicalCourse

"""Course classifier: free-text course token -> CanonicalCourse.

大文字小文字を区別しない部分一致ルールを上から順に評価し、最初に一致したものを採用する。
一致しないトークンはトリムした文字列のまま返す (後段の Candidate Builder で除外される)。
ルールを追加する場合も「順序付き・最初の一致」を崩さないこと。
"""

__all__ = [
    "CLASSIFICATION_RULES",
    "classify_course",
    "course_display_name",
]


def _has_all(*needles: str) -> Callable[[str], bool]:
    return lambda text: all(n in text for n in needles)


def _has_any(*needles: str) -> Callable[[str], bool]:
    return lambda text: any(n in text for n in needles)


CLASSIFICATION_RULES: tuple[tuple[Callable[[str], bool], CanonicalCourse], ...] = (
    (_has_any("python"), CanonicalCourse.PYTHON_PROGRAMMING),
    (
        lambda text: "data" in text and _has_any("analytic", "analysis")(text),
        CanonicalCourse.DATA_ANALYSIS_ANALYTICS,
    ),
    (_has_any("microsoft", "ms office", "office"), CanonicalCourse.MS_OFFICE_FOR_ADMINISTRATORS),
    (_has_any("cyber"), CanonicalCourse.CYBERSECURITY),
)


def classify_course(token: str) -> CanonicalCourse | str:
    """Map one course token to a CanonicalCourse, or return it trimmed if no rule matches.

    >>> classify_course("Intro to PYTHON")
    <CanonicalCourse.PYTHON_PROGRAMMING: 'Python Programming'>
    >>> classify_course(" Basket Weaving ")
    'Basket Weaving'
    """
    trimmed = token.strip()
    lowered = trimmed.lower()
    for matches, course in CLASSIFICATION_RULES:
        if matches(lowered):
            return course
    return trimmed


def course_display_name(value: CanonicalCourse | str) -> str:
    """Render a classification result as text (display name or literal token)."""
    if isinstance(value, CanonicalCourse):
        return value.display_name
    return value
