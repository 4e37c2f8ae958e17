from __future__ import annotations

import logging
from dataclasses import dataclass, field
from pathlib import Path

from ..excel.reader import decode_file, decode_table, detect_format
from ..logging.error_log import AuditLogBuffer
from ..models.candidate import Candidate
from ..models.course import SupportedFileFormat
from ..models.error_record import ErrorRecord, ValidationError
from ..models.row_data import NormalizedRow, RawRow
from .builder import DropHook, DropReason, build_candidates
from .columns import normalize_rows
from .validator import check_columns, validate_rows

"""Ingestion pipeline: decoder -> column normalizer -> validator -> candidate builder.

DecodeError はそのまま呼び出し側へ伝播する (部分データは返さない)。
"""

__all__ = [
    "DroppedEntry",
    "IngestResult",
    "ingest_rows",
    "ingest_bytes",
    "ingest_file",
    "record_audit",
]

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class DroppedEntry:
    """One silently excluded row or course token, kept for auditing."""
    row: int
    reason: DropReason
    detail: str


@dataclass(frozen=True)
class IngestResult:
    """Outcome of ingesting one table."""
    source: str  # ファイル名 (メモリ上の場合は "<memory>")
    raw_row_count: int
    rows: list[NormalizedRow]
    mapping: dict[str, str]  # canonical -> source header
    errors: list[ValidationError]  # ヘッダ + 行単位 (助言のみ)
    candidates: list[Candidate]
    drops: list[DroppedEntry] = field(default_factory=list)
    format: SupportedFileFormat | None = None

    @property
    def accepted_count(self) -> int:
        return len(self.candidates)

    @property
    def dropped_row_count(self) -> int:
        return self.raw_row_count - self.accepted_count


def ingest_rows(
    raw_rows: list[RawRow],
    *,
    source: str = "<memory>",
    fmt: SupportedFileFormat | None = None,
    on_drop: DropHook | None = None,
) -> IngestResult:
    """Run normalization, validation and candidate building over decoded rows."""
    rows, mapping = normalize_rows(raw_rows)
    errors = check_columns(mapping) if raw_rows else []
    errors.extend(validate_rows(rows))

    drops: list[DroppedEntry] = []

    def _collect(row: NormalizedRow, reason: DropReason, detail: str) -> None:
        drops.append(DroppedEntry(row.row_number, reason, detail))
        logger.debug(f"{source} row {row.row_number} dropped ({reason.value}): {detail}")
        if on_drop is not None:
            on_drop(row, reason, detail)

    candidates = build_candidates(rows, on_drop=_collect)
    return IngestResult(
        source=source,
        raw_row_count=len(raw_rows),
        rows=rows,
        mapping=mapping,
        errors=errors,
        candidates=candidates,
        drops=drops,
        format=fmt,
    )


def ingest_bytes(data: bytes, filename: str, *, on_drop: DropHook | None = None) -> IngestResult:
    """Decode ``data`` using the format implied by ``filename`` and ingest it."""
    fmt = detect_format(filename)
    raw_rows = decode_table(data, fmt)
    return ingest_rows(raw_rows, source=Path(filename).name, fmt=fmt, on_drop=on_drop)


def ingest_file(path: Path, *, on_drop: DropHook | None = None) -> IngestResult:
    raw_rows = decode_file(path)
    return ingest_rows(raw_rows, source=path.name, fmt=detect_format(path), on_drop=on_drop)


def record_audit(buffer: AuditLogBuffer, result: IngestResult) -> int:
    """Append validation errors and silent drops to the audit buffer.

    Returns:
        Number of records appended
    """
    count = 0
    for error in result.errors:
        buffer.append(ErrorRecord.from_validation_error(result.source, error))
        count += 1
    for drop in result.drops:
        if drop.reason is DropReason.UNCLASSIFIED_COURSE:
            error_type = "UNCLASSIFIED_COURSE"
        else:
            error_type = f"DROPPED_{drop.reason.name}"
        buffer.append(ErrorRecord.create(result.source, drop.row, error_type, drop.detail))
        count += 1
    return count
