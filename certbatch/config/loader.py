from __future__ import annotations

import json
import os
from pathlib import Path
from typing import Any

import jsonschema
import yaml
from jsonschema.exceptions import ValidationError

from ..models.config_models import AppConfig, AssetConfig, BatchConfig, CertificateConfig

"""Config loader.

Responsibilities:
- Load YAML config (config/certbatch.yml by default)
- Validate against certbatch/config/config_schema.json
- Apply defaults for every omitted key
- 環境変数 CERTBATCH_ADMIN_PASSWORD は設定ファイルより優先
"""

SCHEMA_PATH = Path(__file__).with_name("config_schema.json")
DEFAULT_CONFIG_PATH = Path("config/certbatch.yml")
ADMIN_PASSWORD_ENV = "CERTBATCH_ADMIN_PASSWORD"


class ConfigError(Exception):
    pass


def _validate_config_schema(data: dict[str, Any]) -> None:
    """Validate config data against the JSON schema.

    Raises:
        ConfigError: schema file missing/invalid or config fails validation
    """
    if not SCHEMA_PATH.exists():
        raise ConfigError(f"config schema not found: {SCHEMA_PATH}")

    try:
        schema = json.loads(SCHEMA_PATH.read_text(encoding="utf-8"))
        jsonschema.validate(data, schema)
    except json.JSONDecodeError as e:
        raise ConfigError(f"invalid schema file: {e}") from e
    except ValidationError as e:
        raise ConfigError(f"config validation failed: {e.message}") from e


def _optional_path(value: str | None) -> Path | None:
    # 相対パスはカレントディレクトリ基準
    return Path(value) if value else None


def build_config(data: dict[str, Any]) -> AppConfig:
    """Build AppConfig from already-validated config data."""
    defaults = AppConfig()
    batch_raw = data.get("batch") or {}
    cert_raw = data.get("certificate") or {}
    assets_raw = cert_raw.get("assets") or {}
    cert_defaults = defaults.certificate

    certificate = CertificateConfig(
        organization=cert_raw.get("organization", cert_defaults.organization),
        organization_short=cert_raw.get("organization_short", cert_defaults.organization_short),
        conducted_by_line=cert_raw.get("conducted_by_line", cert_defaults.conducted_by_line),
        cohort_line=cert_raw.get("cohort_line", cert_defaults.cohort_line),
        signatory=cert_raw.get("signatory", cert_defaults.signatory),
        signatory_title_lines=tuple(
            cert_raw.get("signatory_title_lines", cert_defaults.signatory_title_lines)
        ),
        assets=AssetConfig(
            header=_optional_path(assets_raw.get("header")),
            badge=_optional_path(assets_raw.get("badge")),
            signature=_optional_path(assets_raw.get("signature")),
        ),
    )
    batch = BatchConfig(
        delay_seconds=float(batch_raw.get("delay_seconds", defaults.batch.delay_seconds)),
        error_preview_limit=int(
            batch_raw.get("error_preview_limit", defaults.batch.error_preview_limit)
        ),
    )
    return AppConfig(
        output_directory=Path(data.get("output_directory", defaults.output_directory)),
        logs_directory=Path(data.get("logs_directory", defaults.logs_directory)),
        batch=batch,
        certificate=certificate,
        admin_password=os.getenv(ADMIN_PASSWORD_ENV) or data.get("admin_password"),
    )


def load_config(path: Path | None = None) -> AppConfig:
    """Load configuration.

    path=None は既定パスを参照し、存在しなければ組み込みの既定値を使う。
    明示されたパスが存在しない場合は ConfigError。
    """
    if path is None:
        if not DEFAULT_CONFIG_PATH.exists():
            return build_config({})
        path = DEFAULT_CONFIG_PATH
    elif not path.exists():
        raise ConfigError(f"config file not found: {path}")

    try:
        data = yaml.safe_load(path.read_text(encoding="utf-8")) or {}
    except yaml.YAMLError as e:
        raise ConfigError(f"invalid yaml: {e}") from e
    if not isinstance(data, dict):
        raise ConfigError(f"config root must be a mapping: {path}")

    _validate_config_schema(data)
    return build_config(data)
