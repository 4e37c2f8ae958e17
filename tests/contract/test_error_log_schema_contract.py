from __future__ import annotations

import json
from pathlib import Path

import jsonschema
import pytest
from jsonschema.exceptions import ValidationError as SchemaError

from certbatch.logging.error_log import AuditLogBuffer
from certbatch.models.error_record import ErrorRecord, ValidationError

"""Audit log JSON Lines contract test."""

SCHEMA_PATH = Path(__file__).resolve().parents[2] / "contracts" / "error_log_schema.json"


@pytest.fixture()
def schema() -> dict:
    return json.loads(SCHEMA_PATH.read_text(encoding="utf-8"))


def test_error_log_schema_valid_example(schema):
    record = {
        "timestamp": "2025-07-20T10:12:33.123456Z",
        "file": "cohort.xlsx",
        "row": 4,
        "error_type": "VALIDATION",
        "message": "Invalid email address",
    }
    jsonschema.validate(record, schema)


def test_error_log_schema_rejects_extra_key(schema):
    record = {
        "timestamp": "2025-07-20T10:12:33Z",
        "file": "cohort.xlsx",
        "row": 4,
        "error_type": "VALIDATION",
        "message": "Invalid email address",
        "sheet": "not allowed",
    }
    with pytest.raises(SchemaError):
        jsonschema.validate(record, schema)


def test_flushed_records_match_schema(schema, tmp_path: Path):
    buf = AuditLogBuffer(tmp_path)
    buf.append(ErrorRecord.from_validation_error("cohort.csv", ValidationError(-1, "File is empty")))
    buf.append(ErrorRecord.create("cohort.csv", 3, "UNCLASSIFIED_COURSE", "Basket Weaving"))
    buf.append(ErrorRecord.create("cohort.csv", -1, "RENDER_FAILED", "candidate-0: disk full"))
    fp = buf.flush()
    assert fp is not None

    lines = fp.read_text(encoding="utf-8").splitlines()
    assert len(lines) == 3
    for line in lines:
        jsonschema.validate(json.loads(line), schema)
