"""Identifier validator."""

from ..diagnostics import DiagnosticReport
from ..naming import is_identifier, to_identifier
from ..schema.models import WorkflowModel


def check_identifiers(model: WorkflowModel) -> DiagnosticReport:
    """Check names that become Python identifiers in generated code.

    Node ids, input names and condition names that are not identifiers are
    renamed by the generators; this reports what they will be renamed to.

    Args:
        model: The parsed workflow model.

    Returns:
        DiagnosticReport with warnings for names that will be renamed.
    """
    result = DiagnosticReport()

    def report(name: str, what: str, node: str | None = None) -> None:
        result.add_warning(
            code="INVALID_IDENTIFIER",
            message=f"{what} '{name}' is not a valid identifier; generated as '{to_identifier(name)}'",
            node=node,
            name=name,
        )

    for node_id, node in model.nodes.items():
        if not is_identifier(node_id):
            report(node_id, "Node id", node=node_id)
        for node_input in node.inputs:
            if not is_identifier(node_input.name):
                report(node_input.name, "Input", node=node_id)

    for condition in model.unique_conditions():
        if not is_identifier(condition):
            report(condition, "Condition")

    return result
