#!/usr/bin/env python3
"""
Schema Validation Script

Checks every JSON Schema file in the schemas directory:
1. Valid JSON and valid against its meta-schema (draft 2020-12 by default)
2. $refs to https://peevem.org/schemas/<name> have a local <name>.json
3. Other external $refs are reported as warnings

Usage:
    python scripts/validate_schemas.py
    python scripts/validate_schemas.py --schemas-dir path/to/schemas --json
"""

import argparse
import json
import sys
from pathlib import Path

sys.path.insert(0, str(Path(__file__).resolve().parent.parent))

from config import Config, ConfigError
from services.logger import setup_logging
from services.schema_validator import FatalIOError, check_schema_directory
from services.schema_validator.reporting import exit_code_for, format_schema_check


def main(argv: list[str] | None = None) -> int:
    parser = argparse.ArgumentParser(description="Validate JSON Schema files and their references")
    parser.add_argument("--schemas-dir", type=Path, help="Schema directory (default: PEEVEM_SCHEMAS_DIR or ./schemas)")
    parser.add_argument("--config", help="JSON config file")
    parser.add_argument("--json", action="store_true", help="Output results as JSON")
    args = parser.parse_args(argv)

    try:
        cfg = Config(config_file=args.config)
    except ConfigError as e:
        print(f"Error: {e}", file=sys.stderr)
        return 1

    setup_logging(cfg.get_logger_settings())

    schemas_dir = args.schemas_dir or cfg.SCHEMAS["schemas_dir"]
    try:
        results = check_schema_directory(
            schemas_dir,
            base_uri=cfg.SCHEMAS["base_uri"],
            recursive=cfg.SCHEMAS["recursive"],
        )
    except FatalIOError as e:
        print(f"Error: {e}", file=sys.stderr)
        return 1

    if args.json:
        print(json.dumps([r.to_dict() for r in results], indent=2))
    else:
        if not results:
            print(f"No schema files found in {schemas_dir}")
        else:
            print(format_schema_check(results))

    return exit_code_for(results)


if __name__ == "__main__":
    sys.exit(main())
