from __future__ import annotations

import logging
from collections.abc import Iterable, Mapping

from ..models.row_data import CANONICAL_FIELDS, NormalizedRow, RawRow
from .classifier import classify_course, course_display_name

"""Column normalizer: variant header names -> canonical {Name, Email, Courses}.

ヘッダ判定ルール (lower + strip 後、最初の一致を採用):
  1. "course" を含む               -> Courses
  2. name / full name / candidate name -> Name
  3. email / email address / e-mail    -> Email
  4. それ以外はそのまま通す (正規名と完全一致する場合のみ採用、他は無視)

同じ正規名に複数ヘッダが対応する場合は後勝ち (反復順で後ろのヘッダ)。
"""

__all__ = [
    "canonical_key_for",
    "map_headers",
    "missing_columns",
    "normalize_row",
    "normalize_rows",
]

logger = logging.getLogger(__name__)

NAME_HEADERS = frozenset({"name", "full name", "candidate name"})
EMAIL_HEADERS = frozenset({"email", "email address", "e-mail"})


def canonical_key_for(header: str) -> str | None:
    """Classify one source header. Returns the canonical key or None if ignored."""
    key = header.strip().lower()
    if "course" in key:
        return "Courses"
    if key in NAME_HEADERS:
        return "Name"
    if key in EMAIL_HEADERS:
        return "Email"
    # pass-through: 正規名と一致するものだけ下流で使われる
    if header in CANONICAL_FIELDS:
        return header
    return None


def map_headers(headers: Iterable[str]) -> dict[str, str]:
    """Build canonical key -> source header mapping (last header wins on conflicts)."""
    mapping: dict[str, str] = {}
    for header in headers:
        canonical = canonical_key_for(header)
        if canonical is None:
            continue
        previous = mapping.get(canonical)
        if previous is not None and previous != header:
            logger.debug(f"header '{header}' overrides '{previous}' for column {canonical}")
        mapping[canonical] = header
    return mapping


def missing_columns(mapping: Mapping[str, str]) -> list[str]:
    return [field for field in CANONICAL_FIELDS if field not in mapping]


def _normalize_courses(cell: str) -> str:
    tokens = [t.strip() for t in cell.split(",")]
    if tokens == [""]:
        return ""
    return ", ".join(course_display_name(classify_course(t)) for t in tokens)


def normalize_row(raw: RawRow, mapping: Mapping[str, str], row_number: int) -> NormalizedRow:
    """Build a NormalizedRow from one RawRow using a header mapping from map_headers()."""
    def value(canonical: str) -> str:
        source = mapping.get(canonical)
        if source is None:
            return ""
        cell = raw.get(source)
        return "" if cell is None else str(cell).strip()

    return NormalizedRow(
        row_number=row_number,
        name=value("Name"),
        email=value("Email"),
        courses=_normalize_courses(value("Courses")),
    )


def normalize_rows(raw_rows: list[RawRow]) -> tuple[list[NormalizedRow], dict[str, str]]:
    """Normalize a decoded table. Row numbers start at 2 (header = row 1).

    Returns:
        (normalized rows, header mapping used)
    """
    headers: list[str] = []
    for raw in raw_rows:
        for h in raw:
            if h not in headers:
                headers.append(h)
    mapping = map_headers(headers)
    rows = [normalize_row(raw, mapping, index + 2) for index, raw in enumerate(raw_rows)]
    return rows, mapping
