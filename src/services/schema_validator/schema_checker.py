"""
Schema Checker - Lints the schema files themselves

For each schema file:
1. Must parse as JSON and be a valid JSON Schema for its meta-schema
2. Every $ref under the PEEVEM base URI must point at a schema file that
   exists locally (<schemas_dir>/<name>.json)
3. Absolute $refs outside json-schema.org are reported as warnings
"""

import json
import logging
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any

from jsonschema import Draft202012Validator
from jsonschema.exceptions import SchemaError
from jsonschema.validators import validator_for

from models.classification import PEEVEM_BASE_URI

from .errors import FatalIOError

logger = logging.getLogger(__name__)

JSON_SCHEMA_ORG = "https://json-schema.org/"


@dataclass
class SchemaCheckResult:
    """Result of checking one schema file."""

    path: str
    errors: list[str] = field(default_factory=list)
    warnings: list[str] = field(default_factory=list)

    @property
    def valid(self) -> bool:
        return not self.errors

    def to_dict(self) -> dict:
        return {
            "path": self.path,
            "valid": self.valid,
            "errors": self.errors,
            "warnings": self.warnings,
        }


def find_refs(node: Any, refs: list[str] | None = None) -> list[str]:
    """All string ``$ref`` values anywhere in a schema, in document order."""
    if refs is None:
        refs = []
    if isinstance(node, dict):
        ref = node.get("$ref")
        if isinstance(ref, str):
            refs.append(ref)
        for value in node.values():
            find_refs(value, refs)
    elif isinstance(node, list):
        for item in node:
            find_refs(item, refs)
    return refs


def check_references(
    schema: dict,
    schemas_dir: Path,
    base_uri: str = PEEVEM_BASE_URI,
) -> tuple[list[str], list[str]]:
    """Return (errors, warnings) for the $refs in one schema."""
    errors: list[str] = []
    warnings: list[str] = []

    for ref in find_refs(schema):
        if ref.startswith("#"):
            continue
        if ref.startswith(base_uri):
            name = ref[len(base_uri):].split("#", 1)[0]
            local_path = schemas_dir / f"{name}.json"
            if not local_path.is_file():
                errors.append(f"References non-existent schema: {ref} (expected local file: {local_path})")
        elif not ref.startswith(JSON_SCHEMA_ORG):
            warnings.append(f"Contains external reference: {ref} (external references may cause validation issues)")

    return errors, warnings


def check_schema_file(
    path: Path,
    schemas_dir: Path,
    base_uri: str = PEEVEM_BASE_URI,
) -> SchemaCheckResult:
    """Check one schema file against its meta-schema and its references."""
    result = SchemaCheckResult(path=str(path))

    try:
        with open(path, encoding="utf-8") as f:
            schema = json.load(f)
    except json.JSONDecodeError as e:
        result.errors.append(f"Invalid JSON: {e}")
        return result
    except (OSError, UnicodeDecodeError) as e:
        result.errors.append(f"Error processing file: {e}")
        return result

    if not isinstance(schema, dict):
        result.errors.append("Schema document must be a JSON object")
        return result

    try:
        validator_for(schema, default=Draft202012Validator).check_schema(schema)
    except SchemaError as e:
        location = "/".join(str(p) for p in e.absolute_path) or "(root)"
        result.errors.append(f"Not a valid JSON Schema at {location}: {e.message}")
        return result

    errors, warnings = check_references(schema, schemas_dir, base_uri)
    result.errors.extend(errors)
    result.warnings.extend(warnings)
    return result


def check_schema_directory(
    schemas_dir: Path,
    base_uri: str = PEEVEM_BASE_URI,
    recursive: bool = True,
) -> list[SchemaCheckResult]:
    """
    Check every ``*.json`` file in a schema directory, in sorted order.

    Raises:
        FatalIOError: directory is missing
    """
    schemas_dir = Path(schemas_dir)
    if not schemas_dir.is_dir():
        raise FatalIOError(schemas_dir, "Schema directory not found")

    pattern = "**/*.json" if recursive else "*.json"
    results = [
        check_schema_file(path, schemas_dir, base_uri)
        for path in sorted(schemas_dir.glob(pattern))
        if path.is_file()
    ]

    failed = sum(1 for r in results if not r.valid)
    logger.info(f"Checked {len(results)} schema files in {schemas_dir} ({failed} invalid)")
    return results
