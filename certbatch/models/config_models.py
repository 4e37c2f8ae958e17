from __future__ import annotations

from dataclasses import dataclass, field
from pathlib import Path

"""Config dataclasses for the certificate batch tool.

Loader (certbatch/config/loader.py) が YAML を検証した後にこれらを組み立てる。
"""

__all__ = [
    "AssetConfig",
    "CertificateConfig",
    "BatchConfig",
    "AppConfig",
]


@dataclass(frozen=True)
class AssetConfig:
    """Optional image assets. Missing or unreadable files fall back to drawn shapes."""
    header: Path | None = None
    badge: Path | None = None
    signature: Path | None = None


@dataclass(frozen=True)
class CertificateConfig:
    """Fixed boilerplate printed on every certificate."""
    organization: str = "Bourdillon Omijeh Foundation"
    organization_short: str = "B.O.F"
    conducted_by_line: str = "Course, conducted by Bourdillon Omijeh"
    cohort_line: str = "Foundation (BOF), Cohort 1 on the 20th July, 2025."
    signatory: str = "Bourdillon Omijeh"
    signatory_title_lines: tuple[str, ...] = ("President, Bourdillon Omijeh", "Foundation (BOF)")
    assets: AssetConfig = field(default_factory=AssetConfig)


@dataclass(frozen=True)
class BatchConfig:
    delay_seconds: float = 0.0  # 証明書ごとの表示用ウェイト (0 = なし)
    error_preview_limit: int = 5  # ユーザーに表示するエラー件数上限


@dataclass(frozen=True)
class AppConfig:
    """Root configuration object."""
    output_directory: Path = Path("./certificates")
    logs_directory: Path = Path("./logs")
    batch: BatchConfig = field(default_factory=BatchConfig)
    certificate: CertificateConfig = field(default_factory=CertificateConfig)
    admin_password: str | None = None
