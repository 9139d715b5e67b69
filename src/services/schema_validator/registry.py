"""
Schema Registry - Maps schema identifiers ($id) to JSON Schema documents

Built once from a directory snapshot and read-only afterwards, so a single
instance can be shared by any number of validators.

Loading is best-effort: a malformed schema file is logged and recorded in
``load_errors`` instead of blocking validation against unrelated schemas.
Pass ``strict=True`` to raise on the first bad file instead.
"""

import json
import logging
from collections.abc import Iterator, Mapping
from pathlib import Path
from types import MappingProxyType
from typing import Any

from jsonschema import Draft202012Validator, FormatChecker
from jsonschema.exceptions import SchemaError
from jsonschema.protocols import Validator
from jsonschema.validators import validator_for
from referencing import Registry, Resource
from referencing.jsonschema import DRAFT202012

from .errors import FatalIOError, SchemaLoadError

logger = logging.getLogger(__name__)


def _validator_class(schema: dict) -> type[Validator]:
    return validator_for(schema, default=Draft202012Validator)


class SchemaRegistry:
    """
    Immutable identifier -> schema document mapping.

    Usage:
        registry = SchemaRegistry.load(Path("schemas"))
        validator = registry.validator("https://peevem.org/schemas/core")
    """

    def __init__(
        self,
        documents: Mapping[str, dict],
        sources: Mapping[str, Path] | None = None,
        load_errors: list[SchemaLoadError] | None = None,
    ):
        """
        Index already-parsed schema documents.

        Args:
            documents: identifier -> schema, in the order lookups should see them
            sources: identifier -> file the schema came from
            load_errors: errors collected while reading the source directory
        """
        self._schemas: dict[str, dict] = dict(documents)
        self._sources: dict[str, Path] = dict(sources or {})
        self._load_errors: tuple[SchemaLoadError, ...] = tuple(load_errors or ())

        resources = [
            (identifier, Resource.from_contents(schema, default_specification=DRAFT202012))
            for identifier, schema in self._schemas.items()
        ]
        self._resources: Registry = Registry().with_resources(resources)
        self._validators: dict[str, Validator] = {
            identifier: _validator_class(schema)(
                schema,
                registry=self._resources,
                format_checker=FormatChecker(),
            )
            for identifier, schema in self._schemas.items()
        }

    @classmethod
    def load(
        cls,
        directory: Path,
        recursive: bool = True,
        strict: bool = False,
    ) -> "SchemaRegistry":
        """
        Read every ``*.json`` schema file in a directory.

        Files are indexed in sorted path order, so identifier iteration order
        does not depend on the filesystem.

        Raises:
            FatalIOError: directory is missing or cannot be listed
            SchemaLoadError: only when ``strict`` is set
        """
        directory = Path(directory)
        if not directory.is_dir():
            raise FatalIOError(directory, "Schema directory not found")

        pattern = "**/*.json" if recursive else "*.json"
        try:
            files = sorted(p for p in directory.glob(pattern) if p.is_file())
        except OSError as e:
            raise FatalIOError(directory, f"Cannot list schema directory: {e}") from e

        documents: dict[str, dict] = {}
        sources: dict[str, Path] = {}
        errors: list[SchemaLoadError] = []

        for path in files:
            try:
                identifier, schema = cls._read_schema_file(path)
                if identifier in documents:
                    raise SchemaLoadError(
                        path, f"Duplicate schema id {identifier} (already loaded from {sources[identifier]})"
                    )
            except SchemaLoadError as e:
                if strict:
                    raise
                logger.error(f"Error loading schema {path}: {e.message}")
                errors.append(e)
                continue

            documents[identifier] = schema
            sources[identifier] = path
            logger.debug(f"Loaded schema {identifier} from {path}")

        logger.info(f"Loaded {len(documents)} schemas from {directory} ({len(errors)} skipped)")
        return cls(documents, sources, errors)

    @staticmethod
    def _read_schema_file(path: Path) -> tuple[str, dict]:
        try:
            with open(path, encoding="utf-8") as f:
                schema = json.load(f)
        except json.JSONDecodeError as e:
            raise SchemaLoadError(path, f"Invalid JSON: {e}") from e
        except (OSError, UnicodeDecodeError) as e:
            raise SchemaLoadError(path, f"Cannot read schema file: {e}") from e

        if not isinstance(schema, dict):
            raise SchemaLoadError(path, "Schema document must be a JSON object")

        try:
            _validator_class(schema).check_schema(schema)
        except SchemaError as e:
            raise SchemaLoadError(path, f"Not a valid JSON Schema: {e.message}") from e

        identifier = schema.get("$id")
        if not isinstance(identifier, str) or not identifier:
            identifier = path.name
        return identifier, schema

    # -------------------------------------------------------------------------
    # Lookup
    # -------------------------------------------------------------------------

    def get(self, identifier: str) -> dict | None:
        """Exact-match lookup of a schema document."""
        return self._schemas.get(identifier)

    def validator(self, identifier: str) -> Validator | None:
        """Compiled validator for a schema, with cross-schema $refs resolvable."""
        return self._validators.get(identifier)

    def find_by_event_type(self, event_type: str) -> str | None:
        """
        First identifier containing ``event_type`` as a substring.

        Loose matching kept for compatibility with older tooling. Identifiers
        overlap easily (every PEEVEM id contains "schemas"), so classification
        uses an explicit table instead; see ``EventClassifier``.
        """
        if not event_type:
            return None
        for identifier in self._schemas:
            if event_type in identifier:
                return identifier
        return None

    def identifiers(self) -> list[str]:
        return list(self._schemas)

    def source_path(self, identifier: str) -> Path | None:
        return self._sources.get(identifier)

    @property
    def schemas(self) -> Mapping[str, dict]:
        """Read-only view of identifier -> schema."""
        return MappingProxyType(self._schemas)

    @property
    def load_errors(self) -> list[SchemaLoadError]:
        return list(self._load_errors)

    def __contains__(self, identifier: Any) -> bool:
        return identifier in self._schemas

    def __iter__(self) -> Iterator[str]:
        return iter(self._schemas)

    def __len__(self) -> int:
        return len(self._schemas)

    def __repr__(self) -> str:
        return f"SchemaRegistry({len(self)} schemas, {len(self._load_errors)} load errors)"
