"""
Report formatting for the command-line tools.

Renders BatchReport / SchemaCheckResult objects as plain text and maps them
to a process exit code (0 = everything valid, 1 = anything invalid).
"""

import json
from collections.abc import Iterable

from .schema_checker import SchemaCheckResult
from .validator import JSON_PARSE, BatchReport, ValidationRun

RULE = "=" * 70


def format_batch_report(report: BatchReport, verbose: bool = False) -> str:
    """Summary block followed by the details of every invalid line."""
    lines = [
        "",
        "Validation Summary:",
        f"File: {report.file_path}",
        f"Total Events: {report.total_events}",
        f"Valid Events: {report.valid_count}",
        f"Invalid Events: {report.invalid_count}",
    ]
    if report.unclassified_lines:
        lines.append(f"Core-only Events: {report.warning_count}")
    if report.truncated:
        lines.append("(stopped early: error limit reached)")

    if report.errors:
        lines += ["", "Errors:"]
        for outcome in report.errors:
            lines += ["", f"Line {outcome.line}:"]
            if outcome.error_type == JSON_PARSE:
                lines.append(outcome.message)
                continue
            lines.append(f"Event: {json.dumps(outcome.event, indent=2)}")
            lines.append(f"Schema: {outcome.schema_id}")
            lines.append("Validation errors:")
            for detail in outcome.errors:
                lines.append(f"  - {detail.path or '(root)'}: {detail.message}")

    if verbose and report.unclassified_lines:
        lines += ["", "Warnings:"]
        for line in report.unclassified_lines:
            lines.append(f"  Line {line} has no specific schema validation (only core validated)")

    return "\n".join(lines)


def format_validation_run(run: ValidationRun, verbose: bool = False) -> str:
    parts = [format_batch_report(report, verbose) for report in run.reports]
    for error in run.fatal_errors:
        parts.append(f"\nError processing {error.path}: {error.message}")
    if len(run.reports) + len(run.fatal_errors) > 1:
        parts += [
            "",
            RULE,
            f"Files: {len(run.reports)} validated, {len(run.fatal_errors)} unreadable",
            f"Events: {run.total_events} total, {run.valid_count} valid, {run.invalid_count} invalid",
            RULE,
        ]
    return "\n".join(parts)


def format_schema_check(results: Iterable[SchemaCheckResult]) -> str:
    lines = []
    for result in results:
        if result.valid:
            lines.append(f"[OK] {result.path} is a valid JSON Schema")
        else:
            lines.append(f"[INVALID] {result.path}:")
            lines.extend(f"  - {error}" for error in result.errors)
        lines.extend(f"  [WARN] {warning}" for warning in result.warnings)
    return "\n".join(lines)


def exit_code_for(items: Iterable[BatchReport | SchemaCheckResult | ValidationRun]) -> int:
    """0 when every report/result/run is clean, 1 otherwise."""
    for item in items:
        if isinstance(item, SchemaCheckResult):
            ok = item.valid
        else:
            ok = item.is_success
        if not ok:
            return 1
    return 0
