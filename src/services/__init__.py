"""Services package.

Keep this module lightweight: importing `services` should only pull in the
logging helpers. The validation engine lives in `services.schema_validator`.
"""

from __future__ import annotations

from .logger import cleanup_logging, get_logger, set_console_level, setup_logging

__all__ = ["cleanup_logging", "get_logger", "set_console_level", "setup_logging"]
