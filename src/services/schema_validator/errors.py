"""
Validator error taxonomy.

Per-item errors (schema files, NDJSON lines, events) are collected on the
registry and on batch reports as values. Only FatalIOError is raised past a
file boundary.
"""

from dataclasses import dataclass


@dataclass(frozen=True)
class ErrorDetail:
    """A single constraint violation reported by the validation engine."""

    path: str  # JSON Pointer into the event, "" for the root
    message: str
    keyword: str = ""
    schema_path: str = ""

    def to_dict(self) -> dict:
        return {
            "path": self.path,
            "message": self.message,
            "keyword": self.keyword,
            "schemaPath": self.schema_path,
        }


class ValidatorError(Exception):
    """Base class for all validator errors."""


class SchemaLoadError(ValidatorError):
    """A schema file is malformed, fails its meta-schema, or repeats an $id."""

    def __init__(self, path, message: str):
        self.path = str(path)
        self.message = message
        super().__init__(f"{self.path}: {message}")


class EventParseError(ValidatorError):
    """A single NDJSON line is not valid JSON."""

    def __init__(self, line: int, message: str):
        self.line = line
        self.message = f"Invalid JSON: {message}"
        super().__init__(f"Line {line}: {self.message}")


class SchemaValidationError(ValidatorError):
    """A well-formed event fails validation against a schema."""

    def __init__(self, line: int, schema_id: str | None, details: list[ErrorDetail]):
        self.line = line
        self.schema_id = schema_id
        self.details = list(details)
        summary = "; ".join(f"{d.path or '/'}: {d.message}" for d in self.details)
        super().__init__(f"Line {line} fails {schema_id}: {summary}")


class FatalIOError(ValidatorError):
    """The schema directory or an events file cannot be opened or read."""

    def __init__(self, path, message: str):
        self.path = str(path)
        self.message = message
        super().__init__(f"{self.path}: {message}")
