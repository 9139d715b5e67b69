"""
Batch Validation Engine

Validates NDJSON event files against the loaded schema registry.

Features:
- Stream NDJSON files line by line and validate each event
- Core (envelope) schema first, then the event's specific schema
- Report errors with context (file, line, event, schema, JSON Pointer)
- Flag events that only had core validation applied
- Per-line failures are recorded; only I/O failures abort a file
"""

import json
import logging
from collections.abc import Callable, Iterable, Iterator
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any

from jsonschema.protocols import Validator
from referencing.exceptions import Unresolvable

from models.classification import PEEVEM_BASE_URI

from .classifier import EventClassifier
from .errors import (
    ErrorDetail,
    EventParseError,
    FatalIOError,
    SchemaLoadError,
    SchemaValidationError,
    ValidatorError,
)
from .registry import SchemaRegistry

logger = logging.getLogger(__name__)

CORE_SCHEMA_ID = f"{PEEVEM_BASE_URI}core"

# Outcome error types
JSON_PARSE = "json_parse"
VALIDATION = "validation"
MISSING_SCHEMA = "missing_schema"


def json_pointer(parts: Iterable[Any]) -> str:
    """RFC 6901 pointer for a path of keys/indexes ("" is the document root)."""
    return "".join("/" + str(p).replace("~", "~0").replace("/", "~1") for p in parts)


def _reject_constant(name: str):
    raise ValueError(f"{name} is not a valid JSON value")


def parse_event(raw: str) -> Any:
    """
    Strict JSON parse of one NDJSON line.

    Raises ValueError for malformed JSON, including the non-standard NaN,
    Infinity and -Infinity literals, and RecursionError for nesting too deep
    for the decoder.
    """
    return json.loads(raw, parse_constant=_reject_constant)


def collect_errors(validator: Validator, instance: Any) -> list[ErrorDetail]:
    """Every violation of ``instance`` against ``validator``, ordered by location."""
    details = [
        ErrorDetail(
            path=json_pointer(err.absolute_path),
            message=err.message,
            keyword=str(err.validator),
            schema_path=json_pointer(err.absolute_schema_path),
        )
        for err in validator.iter_errors(instance)
    ]
    return sorted(details, key=lambda d: (d.path, d.schema_path, d.message))


@dataclass
class ValidationOutcome:
    """Result of validating one NDJSON line."""

    line: int
    valid: bool
    schema_id: str | None = None
    event: Any = None
    errors: list[ErrorDetail] = field(default_factory=list)
    error_type: str = ""  # 'json_parse', 'validation', 'missing_schema'
    message: str = ""
    unclassified: bool = False  # only core validation applied
    error: ValidatorError | None = None

    def to_dict(self) -> dict:
        """Convert to the report's JSON form."""
        if self.error_type == JSON_PARSE:
            return {"line": self.line, "error": self.message}
        return {
            "line": self.line,
            "event": self.event,
            "schemaId": self.schema_id,
            "errors": [e.to_dict() for e in self.errors],
        }


@dataclass
class BatchReport:
    """Result of validating one NDJSON file."""

    file_path: str
    total_events: int = 0
    valid_count: int = 0
    invalid_count: int = 0
    errors: list[ValidationOutcome] = field(default_factory=list)
    unclassified_lines: list[int] = field(default_factory=list)
    truncated: bool = False

    @property
    def is_success(self) -> bool:
        """True if no invalid events."""
        return self.invalid_count == 0

    @property
    def warning_count(self) -> int:
        return len(self.unclassified_lines)

    def record(self, outcome: ValidationOutcome) -> None:
        """Count an outcome; keep details only for invalid ones."""
        self.total_events += 1
        if outcome.valid:
            self.valid_count += 1
            if outcome.unclassified:
                self.unclassified_lines.append(outcome.line)
        else:
            self.invalid_count += 1
            self.errors.append(outcome)

    def to_dict(self) -> dict:
        return {
            "filePath": self.file_path,
            "totalEvents": self.total_events,
            "validCount": self.valid_count,
            "invalidCount": self.invalid_count,
            "errors": [o.to_dict() for o in self.errors],
            "warnings": [
                {"line": line, "message": "No specific schema applied (core only)"}
                for line in self.unclassified_lines
            ],
            "truncated": self.truncated,
        }


@dataclass
class ValidationRun:
    """Reports for several files plus files that could not be read."""

    reports: list[BatchReport] = field(default_factory=list)
    fatal_errors: list[FatalIOError] = field(default_factory=list)

    @property
    def total_events(self) -> int:
        return sum(r.total_events for r in self.reports)

    @property
    def valid_count(self) -> int:
        return sum(r.valid_count for r in self.reports)

    @property
    def invalid_count(self) -> int:
        return sum(r.invalid_count for r in self.reports)

    @property
    def is_success(self) -> bool:
        return self.invalid_count == 0 and not self.fatal_errors

    @property
    def exit_code(self) -> int:
        """0 when every file was read and no event was invalid, else 1."""
        return 0 if self.is_success else 1

    def to_dict(self) -> dict:
        return {
            "files": [r.to_dict() for r in self.reports],
            "fatalErrors": [{"filePath": e.path, "error": e.message} for e in self.fatal_errors],
            "totalEvents": self.total_events,
            "validCount": self.valid_count,
            "invalidCount": self.invalid_count,
            "isSuccess": self.is_success,
        }


class BatchValidator:
    """
    Validates NDJSON events against a SchemaRegistry.

    Usage:
        registry = SchemaRegistry.load(Path("schemas"))
        validator = BatchValidator(registry)
        report = validator.validate_file(Path("examples/bookmarks.ndjson"))
        for outcome in report.errors:
            print(outcome.line, outcome.errors)
    """

    def __init__(
        self,
        registry: SchemaRegistry,
        classifier: EventClassifier | None = None,
        core_schema_id: str = CORE_SCHEMA_ID,
        max_errors: int | None = None,
    ):
        """
        Initialize the validator.

        Args:
            registry: Loaded schemas; never modified
            classifier: Event -> schema resolution (PEEVEM defaults if None)
            core_schema_id: Envelope schema every event must satisfy
            max_errors: Stop a file after this many invalid events (None = no limit)

        Raises:
            SchemaLoadError: core schema is not in the registry
            ValueError: max_errors is below 1
        """
        if max_errors is not None and max_errors < 1:
            raise ValueError(f"max_errors must be at least 1, got {max_errors}")
        if core_schema_id not in registry:
            raise SchemaLoadError(core_schema_id, "Core schema not found in registry")
        self.registry = registry
        self.classifier = classifier or EventClassifier()
        self.core_schema_id = core_schema_id
        self.max_errors = max_errors

    def _check(self, schema_id: str, event: Any) -> list[ErrorDetail] | None:
        """Violations against one schema; None when the schema is not loaded."""
        validator = self.registry.validator(schema_id)
        if validator is None:
            return None
        try:
            return collect_errors(validator, event)
        except Unresolvable as e:
            return [ErrorDetail(path="", message=f"Unresolvable reference: {e}", keyword="$ref")]
        except RecursionError:
            return [ErrorDetail(path="", message="Event is nested too deeply to validate", keyword="depth")]

    def validate_event(self, event: Any, line: int = 0) -> ValidationOutcome:
        """Validate one parsed event: core schema, then its specific schema."""
        core_errors = self._check(self.core_schema_id, event)
        if core_errors:
            return ValidationOutcome(
                line=line,
                valid=False,
                schema_id=self.core_schema_id,
                event=event,
                errors=core_errors,
                error_type=VALIDATION,
                message=f"Fails {self.core_schema_id} validation",
                error=SchemaValidationError(line, self.core_schema_id, core_errors),
            )

        result = self.classifier.classify(event)
        if not result.resolved:
            logger.debug(
                f"Line {line} has no specific schema validation (only core validated)",
                extra={"line": line},
            )
            return ValidationOutcome(line=line, valid=True, event=event, unclassified=True)

        errors = self._check(result.schema_id, event)
        if errors is None:
            logger.warning(
                f"Line {line}: schema {result.schema_id} is not loaded",
                extra={"line": line, "schema_id": result.schema_id, "event_type": result.event_type},
            )
            details = [
                ErrorDetail(
                    path="",
                    message=f"Schema not found for event type {result.event_type}: {result.schema_id}",
                    keyword=MISSING_SCHEMA,
                )
            ]
            return ValidationOutcome(
                line=line,
                valid=False,
                schema_id=result.schema_id,
                event=event,
                errors=details,
                error_type=MISSING_SCHEMA,
                message=details[0].message,
                error=SchemaValidationError(line, result.schema_id, details),
            )

        if errors:
            return ValidationOutcome(
                line=line,
                valid=False,
                schema_id=result.schema_id,
                event=event,
                errors=errors,
                error_type=VALIDATION,
                message=f"Fails {result.schema_id} validation",
                error=SchemaValidationError(line, result.schema_id, errors),
            )

        return ValidationOutcome(line=line, valid=True, schema_id=result.schema_id, event=event)

    def _parse_failure(self, line: int, message: str) -> ValidationOutcome:
        error = EventParseError(line, message)
        return ValidationOutcome(
            line=line,
            valid=False,
            error_type=JSON_PARSE,
            message=error.message,
            error=error,
        )

    def validate_line(self, raw: str, line: int) -> ValidationOutcome:
        """Parse and validate one non-blank NDJSON line."""
        try:
            event = parse_event(raw)
        except ValueError as e:
            return self._parse_failure(line, str(e))
        except RecursionError:
            return self._parse_failure(line, "nesting too deep to decode")
        return self.validate_event(event, line)

    def iter_outcomes(self, file_path: Path) -> Iterator[ValidationOutcome]:
        """
        Yield an outcome for every non-blank line, valid ones included.

        Lines are read lazily as bytes; blank and whitespace-only lines are
        skipped. A line that is not valid UTF-8 is a parse failure for that
        line only.

        Raises:
            FatalIOError: file cannot be opened or read
        """
        path = Path(file_path)
        try:
            f = open(path, "rb")
        except OSError as e:
            raise FatalIOError(path, f"Cannot open events file: {e}") from e

        with f:
            try:
                for line_num, raw in enumerate(f, 1):
                    raw = raw.strip()
                    if not raw:
                        continue
                    try:
                        text = raw.decode("utf-8")
                    except UnicodeDecodeError as e:
                        yield self._parse_failure(line_num, f"invalid UTF-8 ({e.reason} at byte {e.start})")
                        continue
                    yield self.validate_line(text, line_num)
            except OSError as e:
                raise FatalIOError(path, f"Error reading events file: {e}") from e

    def validate_file(self, file_path: Path) -> BatchReport:
        """
        Validate all events in an NDJSON file.

        With ``max_errors`` set, reading stops once that many invalid events
        are recorded and the report is marked truncated.

        Raises:
            FatalIOError: file cannot be opened or read
        """
        report = BatchReport(file_path=str(file_path))

        for outcome in self.iter_outcomes(file_path):
            report.record(outcome)
            if self.max_errors is not None and report.invalid_count >= self.max_errors:
                report.truncated = True
                logger.warning(
                    f"{file_path}: stopped after {self.max_errors} invalid events",
                    extra={"file_path": str(file_path)},
                )
                break

        logger.info(
            f"{file_path}: {report.total_events} events, "
            f"{report.valid_count} valid, {report.invalid_count} invalid"
        )
        return report

    def validate_paths(
        self,
        paths: Iterable[Path],
        progress_callback: Callable | None = None,
    ) -> ValidationRun:
        """
        Validate several NDJSON files in order.

        A file that cannot be read is recorded on the run and the remaining
        files are still validated.

        Args:
            paths: Files to validate
            progress_callback: Called with (current_file, file_number, total_files)
        """
        files = list(paths)
        run = ValidationRun()

        for i, file_path in enumerate(files):
            if progress_callback:
                progress_callback(file_path, i + 1, len(files))
            try:
                run.reports.append(self.validate_file(file_path))
            except FatalIOError as e:
                logger.error(f"Error processing {e.path}: {e.message}", extra={"file_path": e.path})
                run.fatal_errors.append(e)

        return run
