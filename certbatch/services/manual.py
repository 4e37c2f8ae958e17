from __future__ import annotations

import re
from datetime import UTC, datetime

from ..models.candidate import Candidate, CandidateStatus
from ..models.course import CanonicalCourse
from .classifier import classify_course

"""Manual single-candidate entry (no spreadsheet)."""

__all__ = [
    "EMAIL_PATTERN",
    "ManualEntryError",
    "validate_manual_entry",
    "build_manual_candidate",
]

EMAIL_PATTERN = re.compile(r"^[^\s@]+@[^\s@]+\.[^\s@]+$")


class ManualEntryError(Exception):
    """Raised with per-field messages when a manual entry is invalid."""

    def __init__(self, errors: dict[str, str]) -> None:
        self.errors = errors
        super().__init__("; ".join(f"{k}: {v}" for k, v in errors.items()))


def validate_manual_entry(name: str, email: str, course: str) -> dict[str, str]:
    """Return field -> message for every invalid field (empty dict when valid)."""
    errors: dict[str, str] = {}
    if not name.strip():
        errors["name"] = "Name is required"
    if not email.strip():
        errors["email"] = "Email is required"
    elif not EMAIL_PATTERN.match(email.strip()):
        errors["email"] = "Please enter a valid email address"
    if not course.strip():
        errors["course"] = "Please select a course"
    elif not isinstance(classify_course(course), CanonicalCourse):
        errors["course"] = f"Unknown course: {course.strip()}"
    return errors


def build_manual_candidate(
    name: str, email: str, course: str, *, now: datetime | None = None
) -> tuple[Candidate, CanonicalCourse]:
    """Build a one-course Candidate with id ``manual-<epoch ms>``.

    Raises:
        ManualEntryError: one or more fields are invalid
    """
    errors = validate_manual_entry(name, email, course)
    resolved = classify_course(course)
    if errors or not isinstance(resolved, CanonicalCourse):
        raise ManualEntryError(errors)
    now = now or datetime.now(UTC)
    candidate = Candidate(
        id=f"manual-{int(now.timestamp() * 1000)}",
        name=name.strip(),
        email=email.strip(),
        courses=(resolved,),
        status=CandidateStatus.PENDING,
    )
    return candidate, resolved
