"""Node reachability validators."""

from ..diagnostics import DiagnosticReport
from ..graph.workflow_graph import WorkflowGraph


def check_start_events(graph: WorkflowGraph) -> DiagnosticReport:
    """Check that a workflow with nodes has at least one StartEvent.

    Args:
        graph: The workflow graph to check.

    Returns:
        DiagnosticReport with a warning when no StartEvent exists.
    """
    result = DiagnosticReport()

    if graph.get_node_ids() and not graph.get_start_nodes():
        result.add_warning(
            code="NO_START_EVENT",
            message="Workflow has nodes but no StartEvent node",
        )

    return result


def check_unreachable_nodes(graph: WorkflowGraph) -> DiagnosticReport:
    """Check for nodes that no StartEvent or Event can lead to.

    An unreachable node indicates either:
    - A missing edge into that node
    - A node that should be removed

    Args:
        graph: The workflow graph to check.

    Returns:
        DiagnosticReport with warnings for unreachable nodes.
    """
    result = DiagnosticReport()

    if not graph.get_entry_nodes():
        return result  # Reported by check_start_events

    reachable = graph.get_reachable_nodes()
    for node_id in graph.get_node_ids():
        if node_id not in reachable:
            result.add_warning(
                code="UNREACHABLE_NODE",
                message=f"Node '{node_id}' cannot be reached from any StartEvent or Event",
                node=node_id,
            )

    return result


def check_reachability(graph: WorkflowGraph) -> DiagnosticReport:
    """Run the start event and unreachable node checks together."""
    result = DiagnosticReport()
    result.merge(check_start_events(graph))
    result.merge(check_unreachable_nodes(graph))
    return result
