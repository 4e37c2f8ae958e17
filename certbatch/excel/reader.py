from __future__ import annotations

import io
import logging
import math
from pathlib import Path, PurePath
from typing import Any

import pandas as pd

from ..models.course import SupportedFileFormat
from ..models.row_data import RawRow

"""Tabular decoder: file bytes -> list of RawRow.

- 1行目をヘッダ行、2行目以降をデータ行として扱う。
- 全セル空の行はスキップ (CSV の skip_blank_lines と同じ扱い)。
- セル値はすべて文字列化する (空セルは "")。
- ヘッダ + データ 1 行未満、または指定形式で解析できない場合は DecodeError。
"""

__all__ = [
    "DecodeError",
    "UnsupportedFormatError",
    "detect_format",
    "decode_table",
    "decode_file",
]

logger = logging.getLogger(__name__)

# CSV の文字コードは順に試行する (latin-1 は必ず成功する最終手段)
CSV_ENCODINGS = ("utf-8", "utf-8-sig", "cp1252", "latin-1")

_EXCEL_ENGINES = {
    SupportedFileFormat.XLSX: "openpyxl",
    SupportedFileFormat.XLS: "xlrd",
    SupportedFileFormat.ODS: "odf",
}


class DecodeError(Exception):
    """Raised when file bytes cannot be turned into a row grid."""


class UnsupportedFormatError(DecodeError):
    """Raised when a file extension is not one of the supported formats."""


def detect_format(filename: str | PurePath) -> SupportedFileFormat:
    """Resolve the format from a file name's extension (case-insensitive).

    Raises:
        UnsupportedFormatError: extension is not .csv/.xlsx/.xls/.ods
    """
    suffix = PurePath(filename).suffix.lower()
    for fmt in SupportedFileFormat:
        if fmt.extension == suffix:
            return fmt
    raise UnsupportedFormatError(
        f"unsupported file type '{PurePath(filename).name}': "
        f"supported formats are {SupportedFileFormat.supported_extensions()}"
    )


def _cell_to_text(val: Any) -> str:
    if val is None or val is pd.NaT:
        return ""
    if isinstance(val, float):
        if math.isnan(val):
            return ""
        # Excel は整数も float で返すため "12.0" -> "12"
        if val.is_integer():
            return str(int(val))
        return str(val)
    if hasattr(val, "isoformat"):
        return val.isoformat()
    return str(val)


def _read_csv(data: bytes) -> pd.DataFrame:
    last_error: UnicodeDecodeError | None = None
    for enc in CSV_ENCODINGS:
        try:
            return pd.read_csv(
                io.BytesIO(data),
                header=None,
                dtype=str,
                keep_default_na=False,
                skip_blank_lines=True,
                encoding=enc,
            )
        except UnicodeDecodeError as e:
            logger.debug(f"csv decode with {enc} failed: {e}")
            last_error = e
            continue
    # latin-1 で必ず読めるためここには来ない想定
    raise DecodeError(f"CSV: could not decode text: {last_error}")


def _read_frame(data: bytes, fmt: SupportedFileFormat) -> pd.DataFrame:
    if fmt is SupportedFileFormat.CSV:
        return _read_csv(data)
    # 先頭シートのみ対象
    # "NA" / "None" / "null" 等の文字列は CSV と同じく文字列のまま残す (空セルのみ NaN)
    return pd.read_excel(
        io.BytesIO(data),
        sheet_name=0,
        header=None,
        engine=_EXCEL_ENGINES[fmt],
        keep_default_na=False,
        na_values=[""],
    )


def decode_table(data: bytes, fmt: SupportedFileFormat) -> list[RawRow]:
    """Decode raw file bytes into RawRows keyed by the first-row headers.

    Parameters
    ----------
    data: ファイルの生バイト列
    fmt: 宣言された形式 (拡張子から detect_format で決定)

    Raises
    ------
    DecodeError: bytes are not parseable as ``fmt`` or fewer than 2 rows remain
    """
    try:
        df = _read_frame(data, fmt)
    except DecodeError:
        raise
    except Exception as e:
        raise DecodeError(f"{fmt.label}: unable to read file as {fmt.extension}: {e}") from e

    grid: list[list[str]] = []
    for raw in df.itertuples(index=False, name=None):
        cells = [_cell_to_text(v) for v in raw]
        if all(c.strip() == "" for c in cells):
            continue
        grid.append(cells)

    if len(grid) < 2:
        raise DecodeError(
            f"{fmt.label}: file must contain a header row and at least one data row "
            f"(found {len(grid)} non-empty row(s))"
        )

    headers = grid[0]
    rows: list[RawRow] = []
    for cells in grid[1:]:
        rows.append(dict(zip(headers, cells, strict=False)))
    logger.debug(f"decoded {fmt.label}: headers={headers} rows={len(rows)}")
    return rows


def decode_file(path: Path) -> list[RawRow]:
    """Detect the format from ``path`` and decode its contents."""
    fmt = detect_format(path)
    try:
        data = path.read_bytes()
    except OSError as e:
        raise DecodeError(f"{fmt.label}: cannot read {path}: {e}") from e
    return decode_table(data, fmt)
