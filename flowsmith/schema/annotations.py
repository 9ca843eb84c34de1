"""Best-effort extraction from annotation-style workflow records.

Older models describe a workflow as an annotated record type::

    @workflow:WorkflowModel
    type OrderFlow record {|
        @workflow:Activity boolean ship;
        string paymentTask;
    |};

This path works on raw text with regular expressions and whitespace
splitting. It is lossy: nested records, field annotations with values and
default expressions are not understood, and fields are skipped rather than
repaired. It never reads typed ``workflow:Node`` declarations; those go
through the structured path.
"""

import re
from dataclasses import dataclass, field
from typing import Any

from ..diagnostics import DiagnosticReport
from .models import DEFAULT_NODE_KIND

MODEL_ANNOTATION = "@workflow:WorkflowModel"
FIELD_ANNOTATION_PREFIX = "@workflow:"

TYPE_NAME_PATTERN = re.compile(r"type\s+(\w+)\s+record")
RECORD_OPEN_PATTERN = re.compile(r"record\s*\{\|")
RECORD_CLOSE = "|}"
FIELD_NAME_PATTERN = re.compile(r"'?([A-Za-z_][A-Za-z0-9_]*)")
COMMENT_PATTERN = re.compile(r"(//|#)[^\r\n]*")

# Substrings that mark an unannotated field as a node
NODE_TYPE_HINTS = ("Node", "Task", "Service")
NODE_NAME_HINTS = ("node", "task", "service")

# Returned for well-formed fields that are not nodes
_NOT_A_NODE = object()


@dataclass
class AnnotatedRecord:
    """What could be recovered from one annotated record."""

    name: str | None = None
    nodes: dict[str, dict[str, Any]] = field(default_factory=dict)


def looks_like_workflow_record(text: str) -> bool:
    """Check if a member's text is a candidate for this path."""
    return MODEL_ANNOTATION in text and "type" in text and "record" in text


def extract_annotated_record(
    text: str, diagnostics: DiagnosticReport, line: int | None = None
) -> AnnotatedRecord:
    """Recover a model name and nodes from an annotated record type.

    Args:
        text: Source text of the member.
        diagnostics: Report that skipped fields are added to.
        line: Line the member starts on, for diagnostics.

    Returns:
        The recovered record; empty when the text has no ``type X record``.
    """
    record = AnnotatedRecord()

    match = TYPE_NAME_PATTERN.search(text)
    if not match:
        return record
    record.name = match.group(1)

    opening = RECORD_OPEN_PATTERN.search(text, match.start())
    closing = text.rfind(RECORD_CLOSE)
    if opening is None or closing < opening.end():
        diagnostics.add_warning(
            code="MALFORMED_RECORD",
            message=f"Record '{record.name}' has no closed field list",
            line=line,
        )
        return record

    body = COMMENT_PATTERN.sub("", text[opening.end() : closing])
    for field_line in body.split(";"):
        field_line = field_line.strip()
        if not field_line:
            continue
        parsed = _parse_field(field_line)
        if parsed is None:
            diagnostics.add_warning(
                code="MALFORMED_FIELD",
                message=f"Could not parse field '{field_line}' in record '{record.name}'",
                line=line,
            )
            continue
        if parsed is _NOT_A_NODE:
            continue
        field_name, node = parsed
        record.nodes[field_name] = node

    return record


def _parse_field(field_line: str):
    """Parse one field declaration.

    Returns:
        ``(field_name, node_data)`` for a node field, ``_NOT_A_NODE`` for a
        well-formed plain field, or None for a malformed one.
    """
    parts = field_line.split()
    if len(parts) < 2:
        return None

    kind = field_type = raw_name = None
    for i, part in enumerate(parts):
        if part.startswith(FIELD_ANNOTATION_PREFIX):
            kind = part[len(FIELD_ANNOTATION_PREFIX) :]
            if i + 2 >= len(parts) or not kind:
                return None
            field_type, raw_name = parts[i + 1], parts[i + 2]
            break

    if kind is None:
        if parts[0].startswith("@"):
            # Some other annotation; the field is not a workflow node
            return _NOT_A_NODE
        field_type, raw_name = parts[0], parts[1]

    name_match = FIELD_NAME_PATTERN.match(raw_name)
    if not name_match:
        return None
    field_name = name_match.group(1)

    if kind is None:
        if not _looks_like_node(field_type, field_name):
            return _NOT_A_NODE
        kind = DEFAULT_NODE_KIND

    return field_name, {
        "kind": kind,
        "description": f"{field_name} node",
        "output": field_type or None,
        "inputs": [],
    }


def _looks_like_node(field_type: str, field_name: str) -> bool:
    lowered = field_name.lower()
    return any(hint in field_type for hint in NODE_TYPE_HINTS) or any(
        hint in lowered for hint in NODE_NAME_HINTS
    )
