"""Starter model source for new workflows."""

import re

from ..naming import snake_case, to_identifier
from .templating import render


def pascal_case(name: str) -> str:
    """Convert a workflow name to PascalCase."""
    words = [w for w in re.split(r"[^A-Za-z0-9]+", name) if w]
    return "".join(w[0].upper() + w[1:] for w in words)


def render_model_template(workflow_name: str) -> str:
    """Render the model source for a new workflow.

    The model has a StartEvent taking one input, two Activities and the
    edges between them, and parses back without diagnostics.

    Args:
        workflow_name: Name of the new workflow, in any casing.

    Returns:
        The model source text.

    Raises:
        ValueError: If the name has no letters or digits.
    """
    prefix = pascal_case(workflow_name)
    if not prefix:
        raise ValueError(f"Invalid workflow name: {workflow_name!r}")
    if prefix[0].isdigit():
        prefix = f"W{prefix}"

    return render(
        "model.flow.j2",
        workflow_name=workflow_name.strip(),
        class_prefix=prefix,
        snake_name=snake_case(prefix),
        variable_name=to_identifier(prefix[0].lower() + prefix[1:]),
    )
