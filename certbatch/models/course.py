from __future__ import annotations

from enum import Enum

"""Closed enumerations shared by the ingestion pipeline and the certificate renderer.

CanonicalCourse の値はそのまま表示名として使う。
コース追加はデプロイ時の判断であり、実行時には拡張しない。
"""

__all__ = [
    "CanonicalCourse",
    "SupportedFileFormat",
]


class CanonicalCourse(Enum):
    """Recognized training courses.

    Member order is the order used in listings and exports.
    """
    DATA_ANALYSIS_ANALYTICS = "Data Analysis/Analytics"
    MS_OFFICE_FOR_ADMINISTRATORS = "MS Office for Administrators"
    PYTHON_PROGRAMMING = "Python Programming"
    CYBERSECURITY = "Cybersecurity"

    @property
    def display_name(self) -> str:
        return self.value


class SupportedFileFormat(Enum):
    """Tabular encodings accepted by the decoder.

    - CSV: delimited text
    - XLSX: open packaging spreadsheet (openpyxl)
    - XLS: legacy binary spreadsheet (xlrd)
    - ODS: OpenDocument spreadsheet (odfpy)
    """
    CSV = ".csv"
    XLSX = ".xlsx"
    XLS = ".xls"
    ODS = ".ods"

    @property
    def extension(self) -> str:
        return self.value

    @property
    def label(self) -> str:
        return self.value.lstrip(".").upper()

    @classmethod
    def supported_extensions(cls) -> str:
        return ", ".join(member.value for member in cls)
