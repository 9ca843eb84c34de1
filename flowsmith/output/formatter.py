"""Output formatting for parse and validation diagnostics."""

import json
from typing import Literal

from ..diagnostics import Diagnostic, DiagnosticReport, Severity, Stage

STAGE_TITLES = {
    Stage.PARSE: "Parse",
    Stage.VALIDATION: "Validation",
}

_SYMBOLS = {
    Severity.ERROR: "✘",
    Severity.WARNING: "⚠",
    Severity.INFO: "ℹ",
}

_SEVERITY_ORDER = [Severity.ERROR, Severity.WARNING, Severity.INFO]


def format_report(
    report: DiagnosticReport,
    format: Literal["text", "json"] = "text",
    source: str | None = None,
) -> str:
    """Format a diagnostic report for output.

    Args:
        report: The report to format.
        format: Output format ("text" or "json").
        source: Model source text; when given, issues with a line number
            are shown with that source line.

    Returns:
        Formatted string representation.
    """
    if format == "json":
        return _format_json(report, source)
    return _format_text(report, source)


def source_excerpt(source: str | None, line: int | None) -> str | None:
    """Get one numbered source line, or None when it is unavailable or blank."""
    text = _source_line(source, line)
    return f"{line:>5} | {text}" if text else None


def _format_text(report: DiagnosticReport, source: str | None) -> str:
    """Format report as human-readable text, grouped by stage."""
    lines: list[str] = []

    for stage, title in STAGE_TITLES.items():
        issues = report.by_stage(stage)
        if not issues:
            continue
        if lines:
            lines.append("")
        lines.append(f"{title} ({_count(issues)}):")
        for issue in sorted(issues, key=lambda i: _SEVERITY_ORDER.index(i.severity)):
            lines.append(f"  {format_diagnostic(issue)}")
            excerpt = source_excerpt(source, issue.line)
            if excerpt:
                lines.append(f"    {excerpt}")

    if not lines:
        lines.append("No issues found")

    # Summary
    errors = report.errors
    warnings = report.warnings
    lines.append("")
    if report.is_valid:
        if warnings:
            lines.append(f"Validation passed with {len(warnings)} warning(s)")
        else:
            lines.append("Validation passed")
    else:
        lines.append(
            f"Validation failed: {len(errors)} error(s), {len(warnings)} warning(s)"
        )

    return "\n".join(lines)


def _count(issues: list[Diagnostic]) -> str:
    errors = sum(1 for i in issues if i.severity == Severity.ERROR)
    warnings = sum(1 for i in issues if i.severity == Severity.WARNING)
    return f"{errors} error(s), {warnings} warning(s)"


def format_diagnostic(issue: Diagnostic) -> str:
    """Format a single diagnostic as one line of text."""
    location = f"[{issue.location}] " if issue.location else ""
    return f"{_SYMBOLS[issue.severity]} {issue.code}: {location}{issue.message}"


def _format_json(report: DiagnosticReport, source: str | None) -> str:
    """Format report as JSON."""
    data = {
        "valid": report.is_valid,
        "error_count": len(report.errors),
        "warning_count": len(report.warnings),
        "stages": {
            stage.value: len(report.by_stage(stage)) for stage in STAGE_TITLES
        },
        "issues": [
            {
                "code": issue.code,
                "message": issue.message,
                "severity": issue.severity.value,
                "stage": issue.stage.value,
                "node": issue.node,
                "line": issue.line,
                "source": _source_line(source, issue.line),
                "details": issue.details,
            }
            for issue in report.issues
        ],
    }
    return json.dumps(data, indent=2)


def _source_line(source: str | None, line: int | None) -> str | None:
    if source is None or line is None:
        return None
    lines = source.splitlines()
    if not 1 <= line <= len(lines):
        return None
    return lines[line - 1].rstrip() if lines[line - 1].strip() else None
