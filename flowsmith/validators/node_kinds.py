"""Node kind validator."""

from ..diagnostics import DiagnosticReport
from ..schema.models import NodeKind, WorkflowModel

KNOWN_KINDS = {kind.value for kind in NodeKind}


def check_node_kinds(model: WorkflowModel) -> DiagnosticReport:
    """Check that every node carries a kind the generators understand.

    Nodes of other kinds are kept in the model but get no client operation
    and no implementation stub.

    Args:
        model: The parsed workflow model.

    Returns:
        DiagnosticReport with warnings for missing or unknown kinds.
    """
    result = DiagnosticReport()

    for node_id, node in model.nodes.items():
        if not node.kind:
            result.add_warning(
                code="MISSING_NODE_KIND",
                message=f"Node '{node_id}' has no kind",
                node=node_id,
            )
        elif node.kind not in KNOWN_KINDS:
            result.add_warning(
                code="UNKNOWN_NODE_KIND",
                message=(
                    f"Node '{node_id}' has kind '{node.kind}'; expected one of "
                    f"{', '.join(sorted(KNOWN_KINDS))}"
                ),
                node=node_id,
                kind=node.kind,
            )

    return result
