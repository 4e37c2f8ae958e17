from __future__ import annotations

from dataclasses import dataclass, replace
from enum import Enum

from .course import CanonicalCourse

"""Candidate domain model and CandidateStatus enum.

Candidate は Candidate Builder が一度だけ生成し、以後は copy helper で
新しいインスタンスを返す (in-place 変更なし)。
"""

__all__ = [
    "Candidate",
    "CandidateStatus",
]


class CandidateStatus(Enum):
    """Batch lifecycle of a candidate.

    State transitions: pending → processing → (completed | error)
    """
    PENDING = "pending"
    PROCESSING = "processing"
    COMPLETED = "completed"
    ERROR = "error"


@dataclass(frozen=True)
class Candidate:
    """A validated person-plus-course-set record ready for certificate generation."""
    id: str                                    # unique within the batch
    name: str                                  # non-empty
    email: str                                 # contains '@' when built from a valid row
    courses: tuple[CanonicalCourse, ...]       # ordered, no duplicates
    processed_courses: tuple[CanonicalCourse, ...] = ()
    certificates_generated: int = 0
    status: CandidateStatus = CandidateStatus.PENDING

    @property
    def pending_courses(self) -> tuple[CanonicalCourse, ...]:
        return tuple(c for c in self.courses if c not in self.processed_courses)

    def with_status(self, status: CandidateStatus) -> Candidate:
        return replace(self, status=status)

    def with_processed_course(self, course: CanonicalCourse) -> Candidate:
        """Return a copy with ``course`` recorded as rendered."""
        if course in self.processed_courses:
            return self
        return replace(
            self,
            processed_courses=self.processed_courses + (course,),
            certificates_generated=self.certificates_generated + 1,
        )
