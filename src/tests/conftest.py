"""
Shared test fixtures for pytest
"""

import json
from pathlib import Path

import pytest

from services import cleanup_logging, setup_logging
from services.schema_validator import BatchValidator, SchemaRegistry

BASE = "https://peevem.org/schemas/"

CORE_SCHEMA = {
    "$schema": "https://json-schema.org/draft/2020-12/schema",
    "$id": f"{BASE}core",
    "type": "object",
    "minProperties": 1,
    "properties": {
        "event": {"type": "string", "minLength": 1},
        "id": {"type": "string"},
    },
}

EVENT_SCHEMA = {
    "$schema": "https://json-schema.org/draft/2020-12/schema",
    "$id": f"{BASE}event",
    "allOf": [{"$ref": f"{BASE}core"}],
    "type": "object",
    "required": ["event"],
    "properties": {"event": {"type": "string", "pattern": "^[a-z][a-z0-9_]*$"}},
}

BOOKMARK_SCHEMA = {
    "$schema": "https://json-schema.org/draft/2020-12/schema",
    "$id": f"{BASE}bookmark",
    "allOf": [{"$ref": f"{BASE}core"}],
    "type": "object",
    "required": ["event", "url"],
    "properties": {
        "event": {"const": "bookmark"},
        "url": {"type": "string", "minLength": 1},
    },
}

CONTACT_SCHEMA = {
    "$schema": "https://json-schema.org/draft/2020-12/schema",
    "$id": f"{BASE}contact",
    "allOf": [{"$ref": f"{BASE}core"}],
    "type": "object",
    "required": ["event", "contact"],
    "properties": {
        "event": {"enum": ["contact_created", "contact_updated"]},
        "contact": {
            "type": "object",
            "required": ["name"],
            "properties": {"name": {"type": "string", "minLength": 1}},
        },
    },
}

PEEVEM_SCHEMAS = {
    "core.json": CORE_SCHEMA,
    "event.json": EVENT_SCHEMA,
    "bookmark.json": BOOKMARK_SCHEMA,
    "contact.json": CONTACT_SCHEMA,
}

REPO_ROOT = Path(__file__).resolve().parent.parent.parent


def write_schemas(directory: Path, schemas: dict) -> Path:
    """Write filename -> schema (dict, or raw str for malformed files)."""
    directory.mkdir(parents=True, exist_ok=True)
    for name, schema in schemas.items():
        text = schema if isinstance(schema, str) else json.dumps(schema, indent=2)
        target = directory / name
        target.parent.mkdir(parents=True, exist_ok=True)
        target.write_text(text, encoding="utf-8")
    return directory


def write_ndjson(path: Path, lines: list) -> Path:
    """Write NDJSON lines; dicts/lists are dumped, strings written verbatim."""
    with open(path, "w", encoding="utf-8") as f:
        for line in lines:
            f.write((line if isinstance(line, str) else json.dumps(line)) + "\n")
    return path


@pytest.fixture(autouse=True)
def setup_test_logging():
    """Setup logging for all tests"""
    setup_logging({"colored_output": False})
    yield
    cleanup_logging()


@pytest.fixture
def schemas_dir(tmp_path):
    """Directory holding the core, event, bookmark and contact schemas"""
    return write_schemas(tmp_path / "schemas", PEEVEM_SCHEMAS)


@pytest.fixture
def registry(schemas_dir):
    return SchemaRegistry.load(schemas_dir)


@pytest.fixture
def validator(registry):
    return BatchValidator(registry)


@pytest.fixture
def ndjson_file(tmp_path):
    """Factory: ndjson_file([...lines], name="events.ndjson") -> Path"""

    def _make(lines: list, name: str = "events.ndjson") -> Path:
        return write_ndjson(tmp_path / name, lines)

    return _make


@pytest.fixture
def peevem_schemas():
    """Fresh copy of filename -> schema for the four PEEVEM schemas"""
    return json.loads(json.dumps(PEEVEM_SCHEMAS))


@pytest.fixture
def make_schemas_dir(tmp_path):
    """Factory: make_schemas_dir({filename: schema_or_text}, name="schemas") -> Path"""

    def _make(schemas: dict, name: str = "schemas") -> Path:
        return write_schemas(tmp_path / name, schemas)

    return _make


@pytest.fixture
def repo_root():
    return REPO_ROOT
