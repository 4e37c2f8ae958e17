from __future__ import annotations

from collections.abc import Mapping, Sequence

from ..models.error_record import FILE_LEVEL_ROW, HEADER_ROW, ValidationError
from ..models.row_data import NormalizedRow
from .columns import missing_columns

"""Row validator: exhaustive, non-fail-fast checks over normalized rows.

検出したエラーは呼び出し側へ助言として返すのみで、行の除外は行わない
(除外は Candidate Builder 側の独立したフィルタ)。
"""

__all__ = [
    "MSG_EMPTY_FILE",
    "MSG_MISSING_NAME",
    "MSG_INVALID_EMAIL",
    "MSG_MISSING_COURSES",
    "validate_rows",
    "check_columns",
    "format_error_preview",
]

MSG_EMPTY_FILE = "File is empty"
MSG_MISSING_NAME = "Missing candidate name"
MSG_INVALID_EMAIL = "Invalid email address"
MSG_MISSING_COURSES = "Missing course information"


def validate_rows(rows: Sequence[NormalizedRow]) -> list[ValidationError]:
    """Check every row and return all problems in row order.

    Row positions come from NormalizedRow.row_number (first data row = 2).
    An empty input yields a single file-level error and no per-row checks.
    """
    if not rows:
        return [ValidationError(FILE_LEVEL_ROW, MSG_EMPTY_FILE)]

    errors: list[ValidationError] = []
    for row in rows:
        if not row.name.strip():
            errors.append(ValidationError(row.row_number, MSG_MISSING_NAME))
        # 構文的な最低限チェックのみ
        if "@" not in row.email:
            errors.append(ValidationError(row.row_number, MSG_INVALID_EMAIL))
        if not row.courses.strip():
            errors.append(ValidationError(row.row_number, MSG_MISSING_COURSES))
    return errors


def check_columns(mapping: Mapping[str, str]) -> list[ValidationError]:
    """Report canonical columns with no matching source header."""
    missing = missing_columns(mapping)
    if not missing:
        return []
    return [ValidationError(HEADER_ROW, f"Missing required columns: {', '.join(missing)}")]


def format_error_preview(errors: Sequence[ValidationError], limit: int = 5) -> str:
    """Render the first ``limit`` errors plus a count of the rest."""
    if not errors:
        return ""
    lines = [str(e) for e in errors[:limit]]
    rest = len(errors) - limit
    if rest > 0:
        lines.append(f"... and {rest} more error(s)")
    return "\n".join(lines)
