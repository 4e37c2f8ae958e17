from __future__ import annotations

from ..models.batch_result import BatchResult

"""SUMMARY line rendering for a batch run.

Format:
SUMMARY candidates={total} completed={completed} failed={failed} pending={pending}
certificates={certs} elapsed_sec={elapsed} throughput_cps={throughput}
"""


def _format_number(value: float) -> str:
    if value == 0:
        return "0"
    if value == int(value):
        return str(int(value))
    if value < 0.01:
        # 指数表記を避ける
        return f"{value:.6f}".rstrip("0").rstrip(".")
    return f"{value:.2f}".rstrip("0").rstrip(".")


def render_summary_line(result: BatchResult) -> str:
    """Render a SUMMARY line from a BatchResult.

    Examples:
        >>> from datetime import datetime, timezone
        >>> start = datetime(2025, 7, 20, 10, 0, 0, tzinfo=timezone.utc)
        >>> end = datetime(2025, 7, 20, 10, 0, 2, tzinfo=timezone.utc)
        >>> result = BatchResult(
        ...     total_candidates=3, completed_candidates=2, failed_candidates=1,
        ...     pending_candidates=0, total_certificates=4, start_time=start,
        ...     end_time=end, elapsed_seconds=2.0, certificates_per_sec=2.0,
        ... )
        >>> render_summary_line(result)
        'SUMMARY candidates=3 completed=2 failed=1 pending=0 certificates=4 elapsed_sec=2 throughput_cps=2'
    """
    return (
        f"SUMMARY candidates={result.total_candidates} "
        f"completed={result.completed_candidates} "
        f"failed={result.failed_candidates} "
        f"pending={result.pending_candidates} "
        f"certificates={result.total_certificates} "
        f"elapsed_sec={_format_number(result.elapsed_seconds)} "
        f"throughput_cps={_format_number(result.certificates_per_sec)}"
    )


def render_ingest_line(source: str, raw_rows: int, accepted: int, errors: int) -> str:
    """One-line ingestion report shown before the batch starts."""
    return f"{source}: rows={raw_rows} accepted={accepted} dropped={raw_rows - accepted} errors={errors}"


def render_stats_line(result: BatchResult) -> str:
    """Per-certificate render timings collected by run_batch(stats=...).

    >>> from datetime import datetime, timezone
    >>> ts = datetime(2025, 7, 20, tzinfo=timezone.utc)
    >>> result = BatchResult(
    ...     total_candidates=1, completed_candidates=1, failed_candidates=0,
    ...     pending_candidates=0, total_certificates=2, start_time=ts, end_time=ts,
    ...     elapsed_seconds=0.5, certificates_per_sec=4.0,
    ...     avg_render_seconds=0.25, p95_render_seconds=0.3,
    ... )
    >>> render_stats_line(result)
    'render_stats certificates=2 avg_sec=0.25 p95_sec=0.3'
    """
    return (
        f"render_stats certificates={result.total_certificates} "
        f"avg_sec={_format_number(result.avg_render_seconds)} "
        f"p95_sec={_format_number(result.p95_render_seconds)}"
    )
