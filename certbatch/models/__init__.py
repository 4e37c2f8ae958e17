"""Domain models for the certificate batch tool.

This package contains the domain model classes used throughout the application:
course enumerations, input rows, candidates, errors, batch results and config.
"""

from .batch_result import BatchProgress, BatchResult
from .candidate import Candidate, CandidateStatus
from .config_models import AppConfig, AssetConfig, BatchConfig, CertificateConfig
from .course import CanonicalCourse, SupportedFileFormat
from .error_record import ErrorRecord, ValidationError
from .row_data import CANONICAL_FIELDS, NormalizedRow, RawRow

__all__ = [
    # Enumerations
    "CanonicalCourse",
    "SupportedFileFormat",
    # Pipeline models
    "RawRow",
    "NormalizedRow",
    "CANONICAL_FIELDS",
    "Candidate",
    "CandidateStatus",
    "ValidationError",
    "ErrorRecord",
    # Batch models
    "BatchProgress",
    "BatchResult",
    # Configuration models
    "AppConfig",
    "AssetConfig",
    "BatchConfig",
    "CertificateConfig",
]
