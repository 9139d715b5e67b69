"""
Pytest configuration for the command-line tool tests.

Puts src/scripts on sys.path so each tool's main() can be imported as a
plain module (validate_events, validate_schemas, check_examples).
"""

import sys
from pathlib import Path

SCRIPTS_DIR = Path(__file__).resolve().parent.parent.parent / "scripts"
if str(SCRIPTS_DIR) not in sys.path:
    sys.path.insert(0, str(SCRIPTS_DIR))
