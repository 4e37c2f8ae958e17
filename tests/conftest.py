# Shared pytest fixtures
from __future__ import annotations

import tempfile
from pathlib import Path

import pandas as pd
import pytest

from certbatch.models.candidate import Candidate, CandidateStatus
from certbatch.models.course import CanonicalCourse


@pytest.fixture()
def temp_workdir(monkeypatch) -> Path:
    with tempfile.TemporaryDirectory() as d:
        p = Path(d)
        (p / "config").mkdir()
        (p / "data").mkdir()
        (p / "logs").mkdir()
        monkeypatch.chdir(p)
        yield p


@pytest.fixture()
def sample_config_yaml() -> str:
    return """output_directory: ./certificates
logs_directory: ./logs
batch:
  delay_seconds: 0
  error_preview_limit: 3
certificate:
  organization: Bourdillon Omijeh Foundation
  organization_short: B.O.F
  cohort_line: "Foundation (BOF), Cohort 2 on the 1st March, 2026."
  assets:
    header: ./assets/header.png
"""


@pytest.fixture()
def write_config(temp_workdir: Path, sample_config_yaml: str) -> Path:
    cfg = temp_workdir / "config" / "certbatch.yml"
    cfg.write_text(sample_config_yaml, encoding="utf-8")
    return cfg


@pytest.fixture()
def no_admin_password(monkeypatch) -> None:
    monkeypatch.delenv("CERTBATCH_ADMIN_PASSWORD", raising=False)


def _write_table(path: Path, rows: list[list[object]]) -> Path:
    """Write ``rows`` (first row = header) as .csv or .xlsx depending on the suffix."""
    df = pd.DataFrame(rows[1:], columns=rows[0])
    if path.suffix == ".csv":
        df.to_csv(path, index=False)
    else:
        with pd.ExcelWriter(path, engine="openpyxl") as writer:
            df.to_excel(writer, index=False)
    return path


@pytest.fixture()
def write_table():
    return _write_table

@pytest.fixture()
def candidates_csv(temp_workdir: Path) -> Path:
    return _write_table(
        temp_workdir / "data" / "cohort.csv",
        [
            ["Full Name", "E-mail", "Course"],
            ["Ada Lovelace", "ada@x.com", "cyber security basics"],
            ["Grace Hopper", "grace@navy.mil", "Python Programming, Data Analytics"],
            ["Alan Turing", "alan@bletchley.uk", "Basket Weaving"],
        ],
    )


@pytest.fixture()
def make_candidate():
    def _make(
        index: int = 0,
        name: str = "Ada Lovelace",
        courses: tuple[CanonicalCourse, ...] = (CanonicalCourse.PYTHON_PROGRAMMING,),
        status: CandidateStatus = CandidateStatus.PENDING,
        certificates_generated: int = 0,
    ) -> Candidate:
        return Candidate(
            id=f"candidate-{index}",
            name=name,
            email=f"{name.split()[0].lower()}@example.com",
            courses=courses,
            processed_courses=courses[:certificates_generated],
            certificates_generated=certificates_generated,
            status=status,
        )
    return _make
