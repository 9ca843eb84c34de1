"""Validators for structural checks of workflow models."""

from ..diagnostics import Diagnostic, DiagnosticReport, Severity, Stage
from .identifiers import check_identifiers
from .node_kinds import check_node_kinds
from .reachability import (
    check_reachability,
    check_start_events,
    check_unreachable_nodes,
)
from .reference_integrity import check_reference_integrity
from .runner import run_validators, validate_model_file

__all__ = [
    "Diagnostic",
    "DiagnosticReport",
    "Severity",
    "Stage",
    "check_identifiers",
    "check_node_kinds",
    "check_reachability",
    "check_start_events",
    "check_unreachable_nodes",
    "check_reference_integrity",
    "run_validators",
    "validate_model_file",
]
