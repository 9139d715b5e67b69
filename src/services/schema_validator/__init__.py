"""
Schema Validator Module

Provides:
- Schema registry loading JSON Schema documents by $id
- Event classifier mapping event types to schema ids
- Batch validation of NDJSON event files
- Schema file checks (meta-schema + local $ref targets)
"""

from .classifier import ClassificationResult, EventClassifier, MatchKind
from .errors import (
    ErrorDetail,
    EventParseError,
    FatalIOError,
    SchemaLoadError,
    SchemaValidationError,
    ValidatorError,
)
from .registry import SchemaRegistry
from .schema_checker import SchemaCheckResult, check_schema_directory, check_schema_file
from .validator import (
    CORE_SCHEMA_ID,
    BatchReport,
    BatchValidator,
    ValidationOutcome,
    ValidationRun,
)

__all__ = [
    "CORE_SCHEMA_ID",
    "BatchReport",
    "BatchValidator",
    "ClassificationResult",
    "ErrorDetail",
    "EventClassifier",
    "EventParseError",
    "FatalIOError",
    "MatchKind",
    "SchemaCheckResult",
    "SchemaLoadError",
    "SchemaRegistry",
    "SchemaValidationError",
    "ValidationOutcome",
    "ValidationRun",
    "ValidatorError",
    "check_schema_directory",
    "check_schema_file",
]
