"""Builder for converting WorkflowModel to WorkflowGraph."""

from ..schema.models import WorkflowModel
from .workflow_graph import WorkflowGraph


def build_graph(model: WorkflowModel) -> WorkflowGraph:
    """Build a WorkflowGraph from a WorkflowModel.

    Edges with a missing endpoint are left out of the graph; the reference
    integrity validator reports them from the model.

    Args:
        model: The parsed workflow model.

    Returns:
        A WorkflowGraph representing the model.
    """
    graph = WorkflowGraph()

    # Add all nodes first
    for node_id, node in model.nodes.items():
        graph.add_node(
            node_id,
            kind=node.kind,
            has_output=node.has_output(),
            input_count=len(node.inputs),
        )

    for index, edge in enumerate(model.edges):
        if not edge.start_node or not edge.end_node:
            continue
        graph.add_edge(
            edge.start_node,
            edge.end_node,
            condition=edge.condition,
            index=index,
        )

    return graph
