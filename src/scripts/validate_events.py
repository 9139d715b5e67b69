#!/usr/bin/env python3
"""
PEEVEM Event Validator - validate NDJSON event files against JSON Schemas

Loads every schema in a directory, then validates each event: core schema
first, then the schema its event type maps to.

Usage:
    python scripts/validate_events.py schemas/ examples/bookmarks.ndjson
    python scripts/validate_events.py schemas/ a.ndjson b.ndjson --json
    python scripts/validate_events.py schemas/ events.ndjson --config peevem.json

Exit codes:
    0 - all events (and all schema files) valid
    1 - anything invalid, or a file could not be read
"""

import argparse
import json
import logging
import sys
from pathlib import Path

sys.path.insert(0, str(Path(__file__).resolve().parent.parent))

from config import Config, ConfigError
from services.logger import set_console_level, setup_logging
from services.schema_validator import (
    BatchValidator,
    EventClassifier,
    FatalIOError,
    SchemaLoadError,
    SchemaRegistry,
)
from services.schema_validator.reporting import format_validation_run

logger = logging.getLogger(__name__)


def positive_int(value: str) -> int:
    """argparse type for counts that must be at least 1"""
    try:
        number = int(value)
    except ValueError:
        raise argparse.ArgumentTypeError(f"invalid integer: {value!r}")
    if number < 1:
        raise argparse.ArgumentTypeError(f"must be at least 1, got {number}")
    return number


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        description="Validate NDJSON event files against PEEVEM JSON Schemas",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Examples:
  %(prog)s schemas/ examples/bookmarks.ndjson
  %(prog)s schemas/ examples/*.ndjson --json
  %(prog)s schemas/ events.ndjson --max-errors 10
        """,
    )
    parser.add_argument("schemas_dir", type=Path, help="Directory of JSON Schema files")
    parser.add_argument("events", type=Path, nargs="+", help="NDJSON event file(s)")
    parser.add_argument("--config", help="JSON config file (schemas/validation/classification sections)")
    parser.add_argument("--core-schema", help="Core schema id (default: <base uri>core)")
    parser.add_argument("--max-errors", type=positive_int, help="Stop each file after N invalid events (N >= 1)")
    parser.add_argument("--strict", action="store_true", help="Abort if any schema file fails to load")
    parser.add_argument("--json", action="store_true", help="Output the report as JSON")
    parser.add_argument("-v", "--verbose", action="store_true", help="Debug logging and core-only warnings")
    return parser


def main(argv: list[str] | None = None) -> int:
    args = build_parser().parse_args(argv)

    try:
        cfg = Config(config_file=args.config)
    except ConfigError as e:
        print(f"Error: {e}", file=sys.stderr)
        return 1

    setup_logging(cfg.get_logger_settings())
    if args.verbose:
        set_console_level("DEBUG")

    schemas_cfg = cfg.SCHEMAS
    validation_cfg = cfg.VALIDATION

    try:
        registry = SchemaRegistry.load(
            args.schemas_dir,
            recursive=schemas_cfg["recursive"],
            strict=args.strict or validation_cfg["strict"],
        )
        validator = BatchValidator(
            registry,
            EventClassifier(cfg.get_classifier_config()),
            core_schema_id=args.core_schema or schemas_cfg["core_schema_id"],
            max_errors=args.max_errors if args.max_errors is not None else validation_cfg["max_errors"],
        )
    except (FatalIOError, SchemaLoadError, ConfigError) as e:
        logger.error(f"Cannot start validation: {e}")
        print(f"Error: {e}", file=sys.stderr)
        return 1

    run = validator.validate_paths(args.events)
    exit_code = 1 if registry.load_errors else run.exit_code

    if args.json:
        output = {
            "schemasLoaded": len(registry),
            "schemaErrors": [{"path": e.path, "error": e.message} for e in registry.load_errors],
            **run.to_dict(),
        }
        print(json.dumps(output, indent=2))
        return exit_code

    print(f"Loaded {len(registry)} schemas")
    for error in registry.load_errors:
        print(f"Error loading schema {error.path}: {error.message}")
    print(format_validation_run(run, verbose=args.verbose))
    return exit_code


if __name__ == "__main__":
    sys.exit(main())
