"""
Tests for text report formatting and exit codes
"""

from services.schema_validator.errors import FatalIOError
from services.schema_validator.reporting import (
    RULE,
    exit_code_for,
    format_batch_report,
    format_schema_check,
    format_validation_run,
)
from services.schema_validator.schema_checker import SchemaCheckResult
from services.schema_validator.validator import BatchReport, ValidationRun

BASE = "https://peevem.org/schemas/"


class TestFormatBatchReport:
    def test_summary_block(self, validator, ndjson_file):
        path = ndjson_file([{"event": "login"}, {"event": "bookmark"}])
        text = format_batch_report(validator.validate_file(path))

        assert "Validation Summary:" in text
        assert f"File: {path}" in text
        assert "Total Events: 2" in text
        assert "Valid Events: 1" in text
        assert "Invalid Events: 1" in text

    def test_validation_error_details(self, validator, ndjson_file):
        text = format_batch_report(validator.validate_file(ndjson_file([{"event": "bookmark"}])))

        assert "Errors:" in text
        assert "Line 1:" in text
        assert f"Schema: {BASE}bookmark" in text
        assert "Validation errors:" in text
        assert "  - (root): 'url' is a required property" in text

    def test_parse_error_details(self, validator, ndjson_file):
        text = format_batch_report(validator.validate_file(ndjson_file(["{nope"])))

        assert "Line 1:" in text
        assert "Invalid JSON" in text
        assert "Schema:" not in text

    def test_clean_report_has_no_errors_section(self, validator, ndjson_file):
        text = format_batch_report(validator.validate_file(ndjson_file([{"event": "login"}])))
        assert "Errors:" not in text

    def test_core_only_lines(self, validator, ndjson_file):
        report = validator.validate_file(ndjson_file([{"id": "1"}, {"event": "login"}]))

        assert "Core-only Events: 1" in format_batch_report(report)
        assert "Warnings:" not in format_batch_report(report)
        assert "Line 1 has no specific schema validation" in format_batch_report(report, verbose=True)

    def test_truncated(self):
        report = BatchReport(file_path="f.ndjson", truncated=True)
        assert "stopped early" in format_batch_report(report)


class TestFormatValidationRun:
    def test_single_file_has_no_totals(self, validator, ndjson_file):
        run = validator.validate_paths([ndjson_file([{"event": "login"}])])
        assert RULE not in format_validation_run(run)

    def test_totals_and_fatal_errors(self, validator, ndjson_file, tmp_path):
        good = ndjson_file([{"event": "login"}, {}])
        run = validator.validate_paths([good, tmp_path / "gone.ndjson"])
        text = format_validation_run(run)

        assert f"Error processing {tmp_path / 'gone.ndjson'}" in text
        assert "Files: 1 validated, 1 unreadable" in text
        assert "Events: 2 total, 1 valid, 1 invalid" in text


class TestFormatSchemaCheck:
    def test_ok_invalid_and_warnings(self):
        results = [
            SchemaCheckResult(path="a.json"),
            SchemaCheckResult(path="b.json", errors=["Invalid JSON: x"]),
            SchemaCheckResult(path="c.json", warnings=["Contains external reference: y"]),
        ]
        assert format_schema_check(results).splitlines() == [
            "[OK] a.json is a valid JSON Schema",
            "[INVALID] b.json:",
            "  - Invalid JSON: x",
            "[OK] c.json is a valid JSON Schema",
            "  [WARN] Contains external reference: y",
        ]


class TestExitCode:
    def test_all_clean(self):
        assert exit_code_for([SchemaCheckResult(path="a"), BatchReport(file_path="f")]) == 0

    def test_empty(self):
        assert exit_code_for([]) == 0

    def test_invalid_schema(self):
        assert exit_code_for([SchemaCheckResult(path="a", errors=["bad"])]) == 1

    def test_invalid_events(self):
        assert exit_code_for([BatchReport(file_path="f", total_events=1, invalid_count=1)]) == 1

    def test_unreadable_file(self):
        run = ValidationRun(fatal_errors=[FatalIOError("f", "Cannot open events file")])
        assert exit_code_for([run]) == 1
        assert run.exit_code == 1
