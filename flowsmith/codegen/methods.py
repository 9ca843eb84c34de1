"""Methods the implementation of a workflow model must provide."""

import structlog

from ..naming import to_identifier
from ..schema.models import Node, NodeKind, WorkflowModel
from .models import MethodKind, MethodSpec
from .type_mapping import TypeMapper, placeholder_value

logger = structlog.get_logger(__name__)

IMPLEMENTED_KINDS = (NodeKind.START_EVENT, NodeKind.ACTIVITY)

# Parameters every implementation method already has
RESERVED_PARAMETERS = ("self", "ctx")


def class_prefix(model: WorkflowModel) -> str:
    """Get the prefix for generated class names."""
    prefix = model.capitalized_name
    if prefix and prefix[0].isdigit():
        return f"_{prefix}"
    return prefix


def node_method(node: Node, mapper: TypeMapper) -> MethodSpec:
    """Build the implementation method for a StartEvent or Activity node."""
    name = to_identifier(node.id)
    return MethodSpec(
        name=name,
        kind=MethodKind.NODE,
        doc=node.description or f"Process the {name} node.",
        params=mapper.parameters(node, reserved=RESERVED_PARAMETERS),
        returns=mapper.annotation(node.output) if node.has_output() else "None",
        placeholder=placeholder_value(node.output) if node.has_output() else None,
    )


def condition_method(condition: str) -> MethodSpec:
    """Build the method that evaluates an edge condition."""
    name = to_identifier(condition)
    return MethodSpec(
        name=name,
        kind=MethodKind.CONDITION,
        doc=f"Evaluate the {condition} condition.",
        returns="bool",
    )


def required_methods(model: WorkflowModel, mapper: TypeMapper | None = None) -> list[MethodSpec]:
    """Get the methods the implementation class must define.

    One method per StartEvent or Activity node in declaration order, then
    one per unique edge condition. When two names normalize to the same
    identifier the first one wins.

    Args:
        model: The workflow model.
        mapper: Type mapper collecting the imports the methods need.

    Returns:
        The required methods, in order.
    """
    mapper = mapper or TypeMapper()
    methods: dict[str, MethodSpec] = {}

    candidates = [
        node_method(node, mapper)
        for node in model.nodes.values()
        if any(node.is_kind(kind) for kind in IMPLEMENTED_KINDS)
    ]
    candidates.extend(condition_method(c) for c in model.unique_conditions())

    for method in candidates:
        if method.name in methods:
            logger.debug("method_name_collision", name=method.name, kind=method.kind.value)
            continue
        methods[method.name] = method

    return list(methods.values())
