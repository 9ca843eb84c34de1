"""Reference integrity validator."""

from ..diagnostics import DiagnosticReport
from ..graph.workflow_graph import WorkflowGraph
from ..schema.models import WorkflowModel


def check_reference_integrity(
    model: WorkflowModel, graph: WorkflowGraph
) -> DiagnosticReport:
    """Check that every edge endpoint names a declared node.

    This validator checks:
    - Edges declare both a start and an end node
    - Edge endpoints reference declared nodes

    Args:
        model: The parsed workflow model.
        graph: The workflow graph.

    Returns:
        DiagnosticReport with errors for broken references.
    """
    result = DiagnosticReport()

    for index, edge in enumerate(model.edges):
        for field_name, node_id in (("startNode", edge.start_node), ("endNode", edge.end_node)):
            if not node_id:
                result.add_error(
                    code="MISSING_EDGE_ENDPOINT",
                    message=f"Edge #{index + 1} has no {field_name}",
                    edge_index=index,
                    field=field_name,
                )

    for node_id in graph.get_undeclared_node_ids():
        result.add_error(
            code="UNDEFINED_NODE_REF",
            message=f"Edge references undefined node '{node_id}'",
            node=node_id,
            referenced_node=node_id,
        )

    return result
