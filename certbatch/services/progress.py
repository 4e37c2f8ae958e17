from __future__ import annotations

import sys
from typing import Any

from tqdm import tqdm
from tqdm.std import tqdm as TqdmType

from ..models.batch_result import BatchProgress

"""Progress display service with tqdm (TTY only).

run_batch() の on_progress コールバックとして使う。非 TTY (CI 等) では
ANSI 制御文字の出力を避けるため進捗バーを生成しない。
"""

__all__ = [
    "ProgressTracker",
    "is_tty_enabled",
]


def is_tty_enabled() -> bool:
    """Return True if stdout is a TTY and progress should be displayed."""
    return sys.stdout.isatty()


class ProgressTracker:
    """Certificate progress bar driven by BatchProgress notifications."""

    def __init__(self, total_certificates: int, *, description: str = "Generating certificates") -> None:
        self.total_certificates = total_certificates
        self.description = description
        self.completed = 0

        # Create tqdm instance only if TTY is enabled
        self.enabled = is_tty_enabled()
        self.pbar: TqdmType[Any] | None
        if self.enabled:
            self.pbar = tqdm(
                total=total_certificates,
                desc=description,
                unit="cert",
                disable=False,
                leave=True,
                position=0,
                ncols=80,
                ascii=True,
            )
        else:
            self.pbar = None

    def __call__(self, progress: BatchProgress) -> None:
        self.update(progress)

    def update(self, progress: BatchProgress) -> None:
        """Advance the bar to ``progress.completed_certificates``."""
        step = progress.completed_certificates - self.completed
        self.completed = progress.completed_certificates
        if self.enabled and self.pbar is not None:
            if step > 0:
                self.pbar.update(step)
            self.pbar.set_postfix(candidate=progress.candidate_name)

    def close(self) -> None:
        if self.enabled and self.pbar is not None:
            self.pbar.close()
            self.pbar = None

    def __enter__(self) -> ProgressTracker:
        return self

    def __exit__(self, exc_type: Any, exc_val: Any, exc_tb: Any) -> None:
        self.close()
