from __future__ import annotations

import json
import logging
from collections.abc import Sequence
from datetime import UTC, datetime
from pathlib import Path
from typing import Any

from ..models.candidate import Candidate, CandidateStatus

"""Batch summary export (JSON).

candidates には status=completed の候補者のみ含める。
metadata の合計値はステータスに関係なくバッチ全体を数える。
"""

__all__ = [
    "build_batch_export",
    "export_filename",
    "write_batch_export",
]

logger = logging.getLogger(__name__)


def _iso_utc(ts: datetime) -> str:
    return ts.astimezone(UTC).isoformat(timespec="milliseconds").replace("+00:00", "Z")


def build_batch_export(
    candidates: Sequence[Candidate],
    *,
    now: datetime | None = None,
    batch_id: str | None = None,
) -> dict[str, Any]:
    """Build the export document for a batch.

    Args:
        candidates: Full batch (every status)
        now: Export timestamp (default: current UTC time)
        batch_id: Identifier (default: ``batch_<epoch milliseconds>``)
    """
    now = now or datetime.now(UTC)
    if batch_id is None:
        batch_id = f"batch_{int(now.timestamp() * 1000)}"
    return {
        "candidates": [
            {
                "name": c.name,
                "email": c.email,
                "courses": [course.display_name for course in c.processed_courses],
                "certificatesGenerated": c.certificates_generated,
            }
            for c in candidates
            if c.status is CandidateStatus.COMPLETED
        ],
        "metadata": {
            "totalCandidates": len(candidates),
            "totalCertificates": sum(c.certificates_generated for c in candidates),
            "exportDate": _iso_utc(now),
            "batchId": batch_id,
        },
    }


def export_filename(batch_id: str) -> str:
    return f"certificate_batch_{batch_id}.json"


def write_batch_export(
    candidates: Sequence[Candidate],
    directory: Path,
    *,
    now: datetime | None = None,
    batch_id: str | None = None,
) -> Path:
    """Write ``certificate_batch_<batchId>.json`` into ``directory`` and return its path."""
    document = build_batch_export(candidates, now=now, batch_id=batch_id)
    directory.mkdir(parents=True, exist_ok=True)
    path = directory / export_filename(document["metadata"]["batchId"])
    path.write_text(json.dumps(document, indent=2, ensure_ascii=False), encoding="utf-8")
    logger.info(f"batch export written: {path}")
    return path
