from __future__ import annotations

import statistics
from dataclasses import dataclass
from datetime import datetime

"""Batch result models for certificate generation.

BatchResult は SUMMARY 行の元データ、BatchProgress は 1 証明書ごとの進捗通知。
"""

__all__ = [
    "BatchProgress",
    "BatchResult",
    "RenderStatsAccumulator",
]


@dataclass(frozen=True)
class BatchProgress:
    """Progress snapshot passed to the batch progress callback after each certificate."""
    completed_certificates: int  # 処理済み証明書数
    total_certificates: int  # バッチ全体の証明書数
    candidate_name: str  # 現在処理中の候補者
    course: str  # 直前に生成したコース表示名


@dataclass(frozen=True)
class BatchResult:
    """Aggregated results of one batch run."""
    total_candidates: int
    completed_candidates: int
    failed_candidates: int  # status=error
    pending_candidates: int  # 未処理 (pending/processing のまま)
    total_certificates: int  # certificates_generated の総和
    start_time: datetime
    end_time: datetime
    elapsed_seconds: float
    certificates_per_sec: float
    # 証明書 1 件あたりの描画時間
    avg_render_seconds: float = 0.0
    p95_render_seconds: float = 0.0

    @property
    def has_failures(self) -> bool:
        return self.failed_candidates > 0


class RenderStatsAccumulator:
    """Collects per-certificate render timings and summarizes them."""

    def __init__(self) -> None:
        self.render_times: list[float] = []

    def add_render_time(self, elapsed_seconds: float) -> None:
        self.render_times.append(elapsed_seconds)

    def get_stats(self) -> tuple[int, float, float]:
        """Calculate render statistics.

        Returns:
            tuple: (total_renders, avg_render_seconds, p95_render_seconds)
        """
        if not self.render_times:
            return (0, 0.0, 0.0)

        total = len(self.render_times)
        avg = statistics.mean(self.render_times)

        if total == 1:
            p95 = self.render_times[0]
        else:
            # 95th percentile (19th of 20 quantiles)
            p95 = statistics.quantiles(self.render_times, n=20, method="inclusive")[18]

        return (total, avg, p95)
