"""Field extraction for typed node, edge and descriptor declarations."""

from typing import Any

from ..diagnostics import DiagnosticReport
from .declarations import (
    DescriptorDecl,
    EdgeDecl,
    Expr,
    ListExpr,
    MappingExpr,
    NameRefExpr,
    NodeDecl,
    StringExpr,
)
from .errors import ParseFailure


def string_value(expr: Expr | None) -> str | None:
    """Get the value of a string literal, or None for anything else."""
    if isinstance(expr, StringExpr):
        return expr.value
    return None


def type_reference(expr: Expr | None) -> str | None:
    """Resolve a type-valued field to its textual descriptor.

    Qualified references keep their ``prefix:name`` form; other type
    expressions (``string[]``, ``map<json>``, ``()``) keep their source text.
    """
    match expr:
        case None:
            return None
        case NameRefExpr():
            return expr.qualified_name
        case StringExpr():
            return expr.value
        case _:
            return expr.text.strip()


def node_reference(expr: Expr | None) -> str | None:
    """Resolve an edge endpoint to a node id."""
    match expr:
        case None:
            return None
        case NameRefExpr(prefix=None):
            return expr.name
        case StringExpr():
            return expr.value
        case _:
            return expr.text.strip()


def _fields(expr: MappingExpr) -> dict[str, Expr]:
    # Later duplicates win, as in a record literal
    return dict(expr.fields)


def extract_node(decl: NodeDecl, diagnostics: DiagnosticReport) -> dict[str, Any] | None:
    """Extract node data from a node declaration.

    Returns:
        The node data, or None if the declaration is skipped.
    """
    if not isinstance(decl.initializer, MappingExpr):
        diagnostics.add_warning(
            code="INVALID_NODE_DECLARATION",
            message=f"Node '{decl.name}' must be initialized with a mapping constructor",
            node=decl.name,
            line=decl.line,
        )
        return None

    fields = _fields(decl.initializer)
    node: dict[str, Any] = {
        "kind": _scalar(fields.get("kind")),
        "description": string_value(fields.get("description")),
        "template": string_value(fields.get("template")),
        "output": type_reference(fields.get("output")),
        "inputs": [],
    }

    inputs = fields.get("inputs")
    if inputs is not None:
        node["inputs"] = _extract_inputs(decl, inputs, diagnostics)

    return node


def _scalar(expr: Expr | None) -> str | None:
    # `kind: "Activity"` is the documented form; a bare name is tolerated
    match expr:
        case StringExpr():
            return expr.value
        case NameRefExpr():
            return expr.name
        case _:
            return None


def _extract_inputs(
    decl: NodeDecl, expr: Expr, diagnostics: DiagnosticReport
) -> list[dict[str, str]]:
    if not isinstance(expr, ListExpr):
        diagnostics.add_warning(
            code="INVALID_NODE_INPUT",
            message=f"Inputs of node '{decl.name}' must be a list",
            node=decl.name,
            line=expr.line,
        )
        return []

    inputs = []
    for item in expr.items:
        fields = _fields(item) if isinstance(item, MappingExpr) else {}
        name = string_value(fields.get("name")) or _scalar(fields.get("name"))
        input_type = type_reference(fields.get("type"))
        if not name or not input_type:
            diagnostics.add_warning(
                code="INVALID_NODE_INPUT",
                message=f"Skipping input of node '{decl.name}': expected {{name: \"...\", type: T}}",
                node=decl.name,
                line=item.line,
            )
            continue
        inputs.append({"name": name, "type": input_type})
    return inputs


def extract_edge(decl: EdgeDecl, diagnostics: DiagnosticReport) -> dict[str, Any] | None:
    """Extract edge data from an edge declaration.

    Returns:
        The edge data, or None if the declaration is skipped.
    """
    if not isinstance(decl.initializer, MappingExpr):
        diagnostics.add_warning(
            code="INVALID_EDGE_DECLARATION",
            message=f"Edge '{decl.name}' must be initialized with a mapping constructor",
            line=decl.line,
        )
        return None

    fields = _fields(decl.initializer)
    return {
        "startNode": node_reference(fields.get("startNode")),
        "endNode": node_reference(fields.get("endNode")),
        "condition": string_value(fields.get("condition")),
    }


def extract_descriptor(decl: DescriptorDecl) -> dict[str, Any]:
    """Extract the model name and description from the workflow descriptor.

    The descriptor's ``nodes`` and ``edges`` fields are not read; nodes and
    edges come from their own declarations.

    Raises:
        ParseFailure: If the descriptor is not a mapping constructor.
    """
    if not isinstance(decl.initializer, MappingExpr):
        raise ParseFailure(
            f"Workflow descriptor '{decl.name}' must be a record constructor",
            line=decl.line,
        )

    fields = _fields(decl.initializer)
    descriptor = {}
    for key in ("name", "description"):
        value = string_value(fields.get(key))
        if value is not None:
            descriptor[key] = value
    return descriptor
