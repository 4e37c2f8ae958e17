from __future__ import annotations

from dataclasses import dataclass

"""Row models for the ingestion pipeline.

RawRow はデコード直後の行 (ヘッダ文字列 -> セル文字列)。
NormalizedRow は列名正規化後の行で、常に Name / Email / Courses の3項目を持つ。
"""

__all__ = [
    "RawRow",
    "NormalizedRow",
    "CANONICAL_FIELDS",
]

RawRow = dict[str, str]

# Canonical column names, in report order
CANONICAL_FIELDS: tuple[str, ...] = ("Name", "Email", "Courses")


@dataclass(frozen=True)
class NormalizedRow:
    """Logical representation of a single input row after column normalization.

    row_number is the line a human would find the row on in the source file
    (header = 1, first data row = 2).
    """
    row_number: int  # 1-based, header offset applied
    name: str = ""
    email: str = ""
    courses: str = ""  # ", " joined classified course tokens

    def course_tokens(self) -> list[str]:
        """Split the courses cell on commas, trimming each token."""
        return [token.strip() for token in self.courses.split(",")]
