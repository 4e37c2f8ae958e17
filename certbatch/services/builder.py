from __future__ import annotations

import logging
from collections.abc import Callable, Sequence
from enum import Enum

from ..models.candidate import Candidate, CandidateStatus
from ..models.course import CanonicalCourse
from ..models.row_data import NormalizedRow
from .classifier import classify_course

"""Candidate builder: normalized rows -> de-duplicated Candidate records.

除外は無言で行う (エラーは出さない)。監査用に on_drop フックで通知し、
既定では DEBUG ログのみ出力する。
"""

__all__ = [
    "DropReason",
    "DropHook",
    "build_candidates",
    "resolve_courses",
]

logger = logging.getLogger(__name__)


class DropReason(Enum):
    """Why a row or a course token did not make it into a Candidate."""
    UNCLASSIFIED_COURSE = "unclassified_course"  # トークン単位 (行は残りうる)
    MISSING_NAME = "missing_name"
    MISSING_EMAIL = "missing_email"
    NO_COURSES = "no_courses"


# (row, reason, detail)
DropHook = Callable[[NormalizedRow, DropReason, str], None]


def _log_drop(row: NormalizedRow, reason: DropReason, detail: str) -> None:
    logger.debug(f"row {row.row_number} dropped ({reason.value}): {detail}")


def resolve_courses(
    row: NormalizedRow, on_drop: DropHook | None = None
) -> tuple[CanonicalCourse, ...]:
    """Classify a row's course tokens, keeping first occurrences of recognized courses."""
    resolved: list[CanonicalCourse] = []
    for token in row.course_tokens():
        if not token:
            continue
        course = classify_course(token)
        if not isinstance(course, CanonicalCourse):
            if on_drop is not None:
                on_drop(row, DropReason.UNCLASSIFIED_COURSE, token)
            continue
        if course not in resolved:
            resolved.append(course)
    return tuple(resolved)


def build_candidates(
    rows: Sequence[NormalizedRow], on_drop: DropHook | None = None
) -> list[Candidate]:
    """Build Candidates in input order.

    Rows with a blank name, a blank email or no recognized course are skipped
    without an error. Ids are ``candidate-<input index>`` so identical input
    always produces identical output.
    """
    hook = on_drop or _log_drop
    candidates: list[Candidate] = []
    for index, row in enumerate(rows):
        courses = resolve_courses(row, hook)
        name = row.name.strip()
        email = row.email.strip()
        if not name:
            hook(row, DropReason.MISSING_NAME, "blank name")
            continue
        if not email:
            hook(row, DropReason.MISSING_EMAIL, "blank email")
            continue
        if not courses:
            hook(row, DropReason.NO_COURSES, row.courses or "blank courses")
            continue
        candidates.append(
            Candidate(
                id=f"candidate-{index}",
                name=name,
                email=email,
                courses=courses,
                processed_courses=(),
                certificates_generated=0,
                status=CandidateStatus.PENDING,
            )
        )
    logger.debug(f"built {len(candidates)} candidate(s) from {len(rows)} row(s)")
    return candidates
