from __future__ import annotations

import json
from pathlib import Path

import pytest

from certbatch.cli import main as cli_main
from certbatch.logging.init import reset_logging

"""End-to-end `certbatch run`: file -> PDFs + batch export + audit log."""

ROWS = [
    ["Full Name", "E-mail", "Course"],
    ["Ada Lovelace", "ada@x.com", "cyber security basics"],
    ["Grace Hopper", "grace@navy.mil", "Python Programming, Data Analytics"],
    ["Alan Turing", "alan@bletchley.uk", "Basket Weaving"],
]

EXPECTED_PDFS = {
    "Ada_Lovelace_Cybersecurity_Certificate.pdf",
    "Grace_Hopper_Python_Programming_Certificate.pdf",
    "Grace_Hopper_Data_Analysis_Analytics_Certificate.pdf",
}


@pytest.mark.parametrize("suffix", [".csv", ".xlsx"])
def test_run_generates_certificates(
    suffix: str, write_config, write_table, temp_workdir: Path, no_admin_password, capsys
):
    reset_logging()
    path = write_table(temp_workdir / "data" / f"cohort{suffix}", ROWS)

    code = cli_main(["run", str(path)])
    out = capsys.readouterr().out

    assert code == 0, out
    out_dir = temp_workdir / "certificates"
    pdfs = {p.name for p in out_dir.glob("*.pdf")}
    assert pdfs == EXPECTED_PDFS
    for name in pdfs:
        assert (out_dir / name).read_bytes().startswith(b"%PDF")

    exports = list(out_dir.glob("certificate_batch_batch_*.json"))
    assert len(exports) == 1
    document = json.loads(exports[0].read_text(encoding="utf-8"))
    assert [c["name"] for c in document["candidates"]] == ["Ada Lovelace", "Grace Hopper"]
    assert document["candidates"][1]["courses"] == ["Python Programming", "Data Analysis/Analytics"]
    assert document["metadata"]["totalCandidates"] == 2
    assert document["metadata"]["totalCertificates"] == 3


def test_run_records_dropped_rows_in_audit_log(
    write_config, candidates_csv: Path, temp_workdir: Path, no_admin_password, capsys
):
    reset_logging()
    assert cli_main(["run", str(candidates_csv)]) == 0
    capsys.readouterr()

    logs = list((temp_workdir / "logs").glob("ingest-*.log"))
    assert len(logs) == 1
    records = [json.loads(line) for line in logs[0].read_text(encoding="utf-8").splitlines()]
    assert [(r["row"], r["error_type"]) for r in records] == [
        (4, "UNCLASSIFIED_COURSE"),
        (4, "DROPPED_NO_COURSES"),
    ]
    assert all(r["file"] == "cohort.csv" for r in records)


def test_run_respects_out_and_no_export(
    write_config, candidates_csv: Path, temp_workdir: Path, no_admin_password, capsys
):
    reset_logging()
    code = cli_main(["run", str(candidates_csv), "--out", "issued", "--no-export"])
    capsys.readouterr()

    assert code == 0
    assert len(list((temp_workdir / "issued").glob("*.pdf"))) == 3
    assert not list((temp_workdir / "issued").glob("*.json"))
    assert not (temp_workdir / "certificates").exists()


def test_check_does_not_render(write_config, candidates_csv: Path, temp_workdir: Path, no_admin_password, capsys):
    reset_logging()
    assert cli_main(["check", str(candidates_csv)]) == 0
    out = capsys.readouterr().out
    assert "candidate-1 Grace Hopper <grace@navy.mil>: Python Programming, Data Analysis/Analytics" in out
    assert not (temp_workdir / "certificates").exists()
