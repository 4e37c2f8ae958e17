from __future__ import annotations

import re
from dataclasses import replace
from datetime import datetime, timezone

import pytest

from certbatch.models.batch_result import BatchResult, RenderStatsAccumulator
from certbatch.models.candidate import CandidateStatus
from certbatch.services.batch import summarize_batch
from certbatch.services.summary import render_ingest_line, render_stats_line, render_summary_line

SUMMARY_PATTERN = re.compile(
    r"^SUMMARY\s+candidates=([0-9]+)\s+completed=([0-9]+)\s+failed=([0-9]+)\s+"
    r"pending=([0-9]+)\s+certificates=([0-9]+)\s+elapsed_sec=([0-9]+\.?[0-9]*)\s+"
    r"throughput_cps=([0-9]+\.?[0-9]*)$"
)


def _result(elapsed: float, throughput: float, failed: int = 0) -> BatchResult:
    start = datetime(2025, 7, 20, 10, 0, 0, tzinfo=timezone.utc)
    return BatchResult(
        total_candidates=3,
        completed_candidates=3 - failed,
        failed_candidates=failed,
        pending_candidates=0,
        total_certificates=4,
        start_time=start,
        end_time=start,
        elapsed_seconds=elapsed,
        certificates_per_sec=throughput,
    )


def test_render_summary_line_integers():
    line = render_summary_line(_result(2.0, 2.0))
    m = SUMMARY_PATTERN.match(line)
    assert m, line
    assert m.group(6) == "2"
    assert m.group(7) == "2"


def test_render_summary_line_fractional():
    line = render_summary_line(_result(3.0, 4 / 3, failed=1))
    m = SUMMARY_PATTERN.match(line)
    assert m, line
    assert m.group(3) == "1"
    assert m.group(7) == "1.33"


def test_render_summary_line_tiny_elapsed_avoids_scientific_notation():
    line = render_summary_line(_result(0.000012, 0.0))
    assert "e-" not in line
    assert "elapsed_sec=0.000012" in line
    assert SUMMARY_PATTERN.match(line)


def test_render_ingest_line():
    assert render_ingest_line("cohort.csv", 5, 3, 2) == "cohort.csv: rows=5 accepted=3 dropped=2 errors=2"


def test_render_stats_line_reports_render_timings():
    result = replace(_result(2.0, 2.0), avg_render_seconds=0.125, p95_render_seconds=0.5)
    assert render_stats_line(result) == "render_stats certificates=4 avg_sec=0.12 p95_sec=0.5"


def test_summarize_batch_carries_accumulated_timings(make_candidate):
    stats = RenderStatsAccumulator()
    for t in (0.1, 0.2, 0.3):
        stats.add_render_time(t)
    start = datetime(2025, 7, 20, 10, 0, 0, tzinfo=timezone.utc)
    done = make_candidate(status=CandidateStatus.COMPLETED, certificates_generated=1)

    result = summarize_batch([done], start, start, stats)

    assert result.avg_render_seconds == pytest.approx(0.2)
    assert 0.2 < result.p95_render_seconds <= 0.3
    assert render_stats_line(result).startswith("render_stats certificates=1 avg_sec=0.2 ")
