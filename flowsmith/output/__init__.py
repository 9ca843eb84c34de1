"""Output formatting for diagnostics."""

from .formatter import format_diagnostic, format_report, source_excerpt

__all__ = ["format_diagnostic", "format_report", "source_excerpt"]
