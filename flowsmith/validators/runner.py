"""Validation runner that orchestrates all validators."""

from pathlib import Path

from ..diagnostics import DiagnosticReport
from ..graph.builder import build_graph
from ..graph.workflow_graph import WorkflowGraph
from ..schema.models import WorkflowModel
from ..schema.parser import parse_model_file
from .identifiers import check_identifiers
from .node_kinds import check_node_kinds
from .reachability import check_reachability
from .reference_integrity import check_reference_integrity


def run_validators(model: WorkflowModel, graph: WorkflowGraph) -> DiagnosticReport:
    """Run all validators on a model.

    Args:
        model: The parsed workflow model.
        graph: The workflow graph.

    Returns:
        Combined DiagnosticReport from all validators.
    """
    result = DiagnosticReport()

    # Run reference integrity first (most fundamental)
    result.merge(check_reference_integrity(model, graph))

    result.merge(check_node_kinds(model))
    result.merge(check_identifiers(model))

    result.merge(check_reachability(graph))

    return result


def validate_model_file(path: str | Path) -> DiagnosticReport:
    """Load and validate a model file.

    The returned report holds the parse diagnostics followed by the
    validator findings.

    Args:
        path: Path to the model source file.

    Returns:
        DiagnosticReport from parsing and all validators.

    Raises:
        ModelLoadError: If the file cannot be read.
        ParseFailure: If the source is structurally broken.
    """
    parsed = parse_model_file(path)
    graph = build_graph(parsed.model)

    result = DiagnosticReport()
    result.merge(parsed.diagnostics)
    result.merge(run_validators(parsed.model, graph))
    return result
