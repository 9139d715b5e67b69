#!/usr/bin/env python3
"""
Example Validation Script

Validates every examples/**/*.ndjson file against the schemas so the
bundled examples keep conforming to the PEEVEM specification.

Usage:
    python scripts/check_examples.py
    python scripts/check_examples.py --schemas-dir schemas --examples-dir examples
"""

import argparse
import sys
from pathlib import Path

sys.path.insert(0, str(Path(__file__).resolve().parent.parent))

from config import Config, ConfigError
from services.logger import get_logger, set_console_level, setup_logging
from services.schema_validator import (
    BatchValidator,
    EventClassifier,
    FatalIOError,
    SchemaLoadError,
    SchemaRegistry,
)
from services.schema_validator.reporting import format_validation_run


def find_examples(examples_dir: Path) -> list[Path]:
    """All NDJSON files under a directory, sorted."""
    return sorted(p for p in examples_dir.glob("**/*.ndjson") if p.is_file())


def main(argv: list[str] | None = None) -> int:
    parser = argparse.ArgumentParser(description="Validate bundled NDJSON examples against the schemas")
    parser.add_argument("--schemas-dir", type=Path, help="Schema directory (default: PEEVEM_SCHEMAS_DIR or ./schemas)")
    parser.add_argument("--examples-dir", type=Path, help="Examples directory (default: PEEVEM_EXAMPLES_DIR or ./examples)")
    parser.add_argument("--config", help="JSON config file")
    parser.add_argument("-v", "--verbose", action="store_true", help="List core-only events")
    args = parser.parse_args(argv)

    try:
        cfg = Config(config_file=args.config)
    except ConfigError as e:
        print(f"Error: {e}", file=sys.stderr)
        return 1

    setup_logging(cfg.get_logger_settings())
    if args.verbose:
        set_console_level("DEBUG")

    schemas_dir = args.schemas_dir or cfg.SCHEMAS["schemas_dir"]
    examples_dir = args.examples_dir or cfg.SCHEMAS["examples_dir"]

    if not examples_dir.is_dir():
        print(f"Error: Examples directory not found: {examples_dir}", file=sys.stderr)
        return 1

    try:
        registry = SchemaRegistry.load(schemas_dir, recursive=cfg.SCHEMAS["recursive"])
        validator = BatchValidator(
            registry,
            EventClassifier(cfg.get_classifier_config()),
            core_schema_id=cfg.SCHEMAS["core_schema_id"],
        )
    except (FatalIOError, SchemaLoadError, ConfigError) as e:
        print(f"Error: {e}", file=sys.stderr)
        return 1

    for error in registry.load_errors:
        print(f"Error loading schema {error.path}: {error.message}")

    files = find_examples(examples_dir)
    get_logger(__name__).info(f"Found {len(files)} example files in {examples_dir}")
    if not files:
        print(f"No example files found in {examples_dir}")

    run = validator.validate_paths(
        files,
        progress_callback=lambda path, i, total: print(f"Testing {path}... ({i}/{total})"),
    )
    print(format_validation_run(run, verbose=args.verbose))

    return 1 if registry.load_errors else run.exit_code


if __name__ == "__main__":
    sys.exit(main())
