"""
Logger Service Module

Logging setup shared by the validator command-line tools. Reports go to
stdout, so every handler installed here writes to stderr or to a rotating
file under the configured log directory.

Validation code can attach context through ``extra=``; the JSON formatter
keeps the fields listed in CONTEXT_FIELDS:

    logger.error("Cannot read events file", extra={"file_path": str(path)})
"""

import json
import logging
import sys
from datetime import datetime, timezone
from logging.handlers import RotatingFileHandler
from pathlib import Path
from typing import Any

import colorlog

CONTEXT_FIELDS = ("file_path", "line", "schema_id", "event_type")

LEVEL_COLORS = {
    "DEBUG": "cyan",
    "INFO": "green",
    "WARNING": "yellow",
    "ERROR": "red",
    "CRITICAL": "bold_red",
}

DEFAULTS: dict[str, Any] = {
    "log_dir": None,
    "log_file": "validator.log",
    "log_level": "INFO",
    "file_level": "DEBUG",
    "max_bytes": 5 * 1024 * 1024,
    "backup_count": 3,
    "format": "%(asctime)s - %(name)s - %(levelname)s - %(message)s",
    "date_format": "%Y-%m-%d %H:%M:%S",
    "colored_output": True,
    "json_logs": False,
}


def _to_level(value: Any, fallback: int = logging.INFO) -> int:
    if isinstance(value, int):
        return value
    level = logging.getLevelName(str(value).upper())
    return level if isinstance(level, int) else fallback


class JsonFormatter(logging.Formatter):
    """One JSON object per record, validation context included"""

    def format(self, record: logging.LogRecord) -> str:
        payload = {
            "timestamp": datetime.fromtimestamp(record.created, tz=timezone.utc).isoformat(),
            "level": record.levelname,
            "logger": record.name,
            "message": record.getMessage(),
        }
        for name in CONTEXT_FIELDS:
            value = getattr(record, name, None)
            if value is not None:
                payload[name] = value
        if record.exc_info:
            payload["exception"] = self.formatException(record.exc_info)
        return json.dumps(payload, default=str)


class LoggerService:
    """
    Owns the handlers installed on the root logger.

    The root logger accepts every record; each handler filters by its own
    level, so the console can stay at INFO while the log file keeps DEBUG.
    """

    def __init__(self, config: dict[str, Any] | None = None):
        self.config = {**DEFAULTS, **(config or {})}
        self.handlers: list[logging.Handler] = [self._console_handler()]

        file_error = None
        log_file = self.log_file_path()
        if log_file is not None:
            try:
                log_file.parent.mkdir(parents=True, exist_ok=True)
                self.handlers.append(self._file_handler(log_file))
            except OSError as e:
                file_error = f"File logging disabled, cannot write {log_file}: {e}"

        root_logger = logging.getLogger()
        root_logger.setLevel(logging.DEBUG)
        root_logger.handlers = list(self.handlers)

        if file_error:
            logging.getLogger(__name__).warning(file_error)

    def log_file_path(self) -> Path | None:
        if not self.config.get("log_dir"):
            return None
        return Path(self.config["log_dir"]) / self.config["log_file"]

    @property
    def console_handler(self) -> logging.Handler:
        return self.handlers[0]

    def _console_handler(self) -> logging.Handler:
        handler = logging.StreamHandler(sys.stderr)
        handler.setLevel(_to_level(self.config["log_level"]))

        if self.config["colored_output"]:
            handler.setFormatter(
                colorlog.ColoredFormatter(
                    "%(log_color)s" + self.config["format"],
                    datefmt=self.config["date_format"],
                    log_colors=LEVEL_COLORS,
                )
            )
        else:
            handler.setFormatter(
                logging.Formatter(self.config["format"], datefmt=self.config["date_format"])
            )
        return handler

    def _file_handler(self, path: Path) -> logging.Handler:
        handler = RotatingFileHandler(
            path,
            maxBytes=self.config["max_bytes"],
            backupCount=self.config["backup_count"],
            encoding="utf-8",
        )
        handler.setLevel(_to_level(self.config["file_level"], logging.DEBUG))

        if self.config["json_logs"]:
            handler.setFormatter(JsonFormatter())
        else:
            handler.setFormatter(
                logging.Formatter(self.config["format"], datefmt=self.config["date_format"])
            )
        return handler

    def set_level(self, level: str):
        """Change the console level, e.g. for --verbose"""
        self.console_handler.setLevel(_to_level(level))

    def cleanup(self):
        root_logger = logging.getLogger()
        for handler in self.handlers:
            root_logger.removeHandler(handler)
            handler.close()
        self.handlers = []


_logger_service: LoggerService | None = None


def setup_logging(config: dict | None = None) -> logging.Logger:
    """
    Install the validator's handlers on the root logger.

    Settings come from ``config.LOGGING`` with ``config`` applied on top.
    Later calls return the root logger unchanged; use set_console_level()
    to adjust verbosity afterwards.
    """
    global _logger_service

    if _logger_service is None:
        from config import config as app_config

        settings = dict(app_config.LOGGING)
        settings["log_level"] = settings.pop("level", "INFO")
        settings.update(config or {})
        _logger_service = LoggerService(settings)

    return logging.getLogger()


def set_console_level(level: str):
    if _logger_service is None:
        setup_logging()
    _logger_service.set_level(level)


def get_logger(name: str) -> logging.Logger:
    if _logger_service is None:
        setup_logging()
    return logging.getLogger(name)


def cleanup_logging():
    """Remove and close the handlers installed by setup_logging()"""
    global _logger_service

    if _logger_service:
        _logger_service.cleanup()
        _logger_service = None
