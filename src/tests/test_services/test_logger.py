"""
Tests for the logger service
"""

import json
import logging

from services import cleanup_logging, get_logger, set_console_level, setup_logging
from services.logger import JsonFormatter, LoggerService


def make_record(message="hello", **extra):
    record = logging.LogRecord("peevem.test", logging.WARNING, __file__, 1, message, None, None)
    for key, value in extra.items():
        setattr(record, key, value)
    return record


class TestJsonFormatter:
    def test_basic_fields(self):
        data = json.loads(JsonFormatter().format(make_record("bad line")))

        assert data["level"] == "WARNING"
        assert data["logger"] == "peevem.test"
        assert data["message"] == "bad line"
        assert "timestamp" in data

    def test_validation_context(self):
        record = make_record(file_path="a.ndjson", line=4, schema_id="urn:s")
        data = json.loads(JsonFormatter().format(record))

        assert data["file_path"] == "a.ndjson"
        assert data["line"] == 4
        assert data["schema_id"] == "urn:s"
        assert "event_type" not in data


class TestLoggerService:
    def setup_method(self):
        cleanup_logging()

    def teardown_method(self):
        logging.getLogger().handlers = []

    def test_console_only_by_default(self):
        service = LoggerService({"colored_output": False})

        assert service.log_file_path() is None
        assert len(service.handlers) == 1
        assert service.console_handler.level == logging.INFO
        service.cleanup()

    def test_file_handler_writes_json(self, tmp_path):
        service = LoggerService(
            {"colored_output": False, "log_dir": str(tmp_path / "logs"), "json_logs": True}
        )
        logging.getLogger("peevem.test").debug("to file", extra={"line": 9})
        service.cleanup()

        log_file = tmp_path / "logs" / "validator.log"
        lines = log_file.read_text(encoding="utf-8").splitlines()
        record = json.loads(lines[-1])
        assert record["message"] == "to file"
        assert record["line"] == 9

    def test_set_level(self):
        service = LoggerService({"colored_output": False})
        service.set_level("debug")
        assert service.console_handler.level == logging.DEBUG
        service.cleanup()

    def test_unknown_level_falls_back_to_info(self):
        service = LoggerService({"colored_output": False, "log_level": "chatty"})
        assert service.console_handler.level == logging.INFO
        service.cleanup()

    def test_cleanup_detaches_handlers(self):
        service = LoggerService({"colored_output": False})
        handler = service.console_handler
        service.cleanup()

        assert handler not in logging.getLogger().handlers


class TestModuleHelpers:
    def test_setup_is_idempotent(self):
        root = setup_logging()
        before = list(root.handlers)

        setup_logging({"log_level": "ERROR"})
        assert root.handlers == before

    def test_set_console_level(self):
        set_console_level("WARNING")
        assert logging.getLogger().handlers[0].level == logging.WARNING

    def test_get_logger(self):
        assert get_logger("peevem.x").name == "peevem.x"
