from __future__ import annotations

import json
from dataclasses import asdict, dataclass
from datetime import UTC, datetime

"""Error models: per-row ValidationError and the ErrorRecord audit line.

ValidationError はユーザー向けの行単位エラー (row=-1 はファイル単位)。
ErrorRecord は JSON Lines 監査ログ 1 行分 (追加キー禁止)。
"""

__all__ = [
    "ValidationError",
    "ErrorRecord",
    "FILE_LEVEL_ROW",
    "HEADER_ROW",
]

# Sentinel for errors that cannot be tied to a row
FILE_LEVEL_ROW = -1
HEADER_ROW = 1


@dataclass(frozen=True)
class ValidationError:
    """A (row, message) pair surfaced to the user.

    Attributes:
        row: 1-based source line with header offset (first data row = 2).
             -1 for file-level errors, 1 for header-level errors.
        message: Human-readable description
    """
    row: int
    message: str

    def __str__(self) -> str:
        if self.row == FILE_LEVEL_ROW:
            return self.message
        return f"Row {self.row}: {self.message}"


@dataclass(frozen=True)
class ErrorRecord:
    """Structured audit record for JSON Lines logging.

    Attributes:
        timestamp: ISO8601 UTC timestamp with 'Z' suffix
        file: Source file name being ingested
        row: Row number (1-based, header offset). Use -1 where row is unknown
        error_type: Classification in UPPER_SNAKE_CASE format
        message: Description of the problem
    """
    timestamp: str  # ISO8601 UTC
    file: str
    row: int  # 不明な場合 -1 許容
    error_type: str  # UPPER_SNAKE
    message: str

    @staticmethod
    def create(file: str, row: int, error_type: str, message: str) -> ErrorRecord:
        """Create a new ErrorRecord with current UTC timestamp."""
        ts = datetime.now(UTC).isoformat().replace("+00:00", "Z")
        return ErrorRecord(
            timestamp=ts,
            file=file,
            row=row,
            error_type=error_type,
            message=message,
        )

    @staticmethod
    def from_validation_error(file: str, error: ValidationError) -> ErrorRecord:
        return ErrorRecord.create(file, error.row, "VALIDATION", error.message)

    def to_json_line(self) -> str:
        """Serialize ErrorRecord to JSON Lines format."""
        return json.dumps(asdict(self), ensure_ascii=False)
