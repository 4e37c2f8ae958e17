from __future__ import annotations

import logging
import time
from collections.abc import Callable, Sequence
from datetime import datetime

from ..logging.error_log import AuditLogBuffer
from ..models.batch_result import BatchProgress, BatchResult, RenderStatsAccumulator
from ..models.candidate import Candidate, CandidateStatus
from ..models.course import CanonicalCourse
from ..models.error_record import FILE_LEVEL_ROW, ErrorRecord

"""Batch certificate generation.

- 候補者ごとに順番に処理し、コースごとに 1 証明書を生成する
- 候補者単位で失敗を隔離: 例外は status=error として記録し、次の候補者へ進む
- 候補者リストは更新ごとに丸ごと置き換える (入力リストは変更しない)
- 進捗はコールバックで通知。delay_seconds は表示用の任意ウェイトで処理結果には影響しない
"""

__all__ = [
    "Renderer",
    "ProgressCallback",
    "UpdateCallback",
    "count_certificates",
    "run_batch",
    "summarize_batch",
]

logger = logging.getLogger(__name__)

Renderer = Callable[[Candidate, CanonicalCourse], object]
ProgressCallback = Callable[[BatchProgress], None]
UpdateCallback = Callable[[list[Candidate]], None]


def count_certificates(candidates: Sequence[Candidate]) -> int:
    """Number of certificates a batch run would still generate."""
    return sum(len(c.pending_courses) for c in candidates)


def _replace(candidates: list[Candidate], updated: Candidate) -> list[Candidate]:
    return [updated if c.id == updated.id else c for c in candidates]


def run_batch(
    candidates: Sequence[Candidate],
    renderer: Renderer,
    *,
    on_progress: ProgressCallback | None = None,
    on_update: UpdateCallback | None = None,
    delay_seconds: float = 0.0,
    audit: AuditLogBuffer | None = None,
    stats: RenderStatsAccumulator | None = None,
    source: str = "<batch>",
) -> list[Candidate]:
    """Generate every pending certificate and return the updated candidate list.

    Args:
        candidates: Batch to process (not modified)
        renderer: Called once per (candidate, course); any exception marks the candidate as error
        on_progress: Called after each generated certificate
        on_update: Called with the new candidate list after every status change
        delay_seconds: Optional pause after each certificate (presentation only)
        audit: Buffer receiving RENDER_FAILED records
        stats: Accumulator receiving per-certificate render timings
        source: File name used in audit records
    """
    current: list[Candidate] = list(candidates)
    total = count_certificates(current)
    done = 0

    def publish(updated: Candidate) -> None:
        nonlocal current
        current = _replace(current, updated)
        if on_update is not None:
            on_update(current)

    for original in candidates:
        candidate = original.with_status(CandidateStatus.PROCESSING)
        publish(candidate)
        try:
            for course in original.courses:
                if course in candidate.processed_courses:
                    continue
                started = time.perf_counter()
                renderer(candidate, course)
                if stats is not None:
                    stats.add_render_time(time.perf_counter() - started)

                candidate = candidate.with_processed_course(course)
                publish(candidate)
                done += 1
                if on_progress is not None:
                    on_progress(BatchProgress(done, total, candidate.name, course.display_name))
                if delay_seconds > 0:
                    time.sleep(delay_seconds)

            candidate = candidate.with_status(CandidateStatus.COMPLETED)
            publish(candidate)
        except Exception as e:
            logger.error(f"certificate generation failed for {candidate.name} ({candidate.id}): {e}")
            if audit is not None:
                audit.append(
                    ErrorRecord.create(source, FILE_LEVEL_ROW, "RENDER_FAILED", f"{candidate.id}: {e}")
                )
            candidate = candidate.with_status(CandidateStatus.ERROR)
            publish(candidate)

    return current


def summarize_batch(
    candidates: Sequence[Candidate],
    start_time: datetime,
    end_time: datetime,
    stats: RenderStatsAccumulator | None = None,
) -> BatchResult:
    """Aggregate a finished batch into a BatchResult."""
    completed = sum(1 for c in candidates if c.status is CandidateStatus.COMPLETED)
    failed = sum(1 for c in candidates if c.status is CandidateStatus.ERROR)
    certificates = sum(c.certificates_generated for c in candidates)
    elapsed = (end_time - start_time).total_seconds()
    # Avoid division by zero
    throughput = certificates / elapsed if elapsed > 0 else 0.0
    _, avg, p95 = stats.get_stats() if stats is not None else (0, 0.0, 0.0)
    return BatchResult(
        total_candidates=len(candidates),
        completed_candidates=completed,
        failed_candidates=failed,
        pending_candidates=len(candidates) - completed - failed,
        total_certificates=certificates,
        start_time=start_time,
        end_time=end_time,
        elapsed_seconds=elapsed,
        certificates_per_sec=throughput,
        avg_render_seconds=avg,
        p95_render_seconds=p95,
    )
