"""Mapping of model type descriptors to Python annotations and placeholders."""

from ..naming import to_identifier
from ..schema.models import UNIT_TYPE, Node, NodeInput
from .models import Parameter

# Descriptor keywords with a direct Python counterpart
BASIC_TYPES = {
    "string": "str",
    "int": "int",
    "float": "float",
    "decimal": "Decimal",
    "boolean": "bool",
    "byte": "int",
    "json": "Any",
    "anydata": "Any",
    "any": "Any",
    "error": "Exception",
    "xml": "str",
    "()": "None",
}

_OPENERS = {"(": ")", "[": "]", "{": "}", "<": ">"}
_CLOSERS = {v: k for k, v in _OPENERS.items()}


def _split_top_level(text: str, separator: str) -> list[str]:
    """Split on a separator that is not nested in brackets."""
    parts = []
    depth = 0
    start = 0
    for i, ch in enumerate(text):
        if ch in _OPENERS:
            depth += 1
        elif ch in _CLOSERS:
            depth = max(depth - 1, 0)
        elif ch == separator and depth == 0:
            parts.append(text[start:i])
            start = i + 1
    parts.append(text[start:])
    return parts


class TypeMapper:
    """Translates type descriptors and records the imports they need.

    Annotations are rendered for modules that use
    ``from __future__ import annotations``, so names only have to be
    importable for tools that evaluate them.
    """

    def __init__(self):
        self.typing_names: set[str] = set()
        self.needs_decimal = False

    def annotation(self, descriptor: str | None) -> str:
        """Map a descriptor to a Python annotation.

        Args:
            descriptor: The model-level type descriptor.

        Returns:
            The annotation text; ``None`` for a missing or unit descriptor.
        """
        if descriptor is None:
            return "None"
        text = descriptor.strip()
        if not text or text == UNIT_TYPE:
            return "None"
        return self._map(text)

    def _map(self, text: str) -> str:
        text = text.strip()
        if text.startswith("readonly &"):
            text = text[len("readonly &"):].strip()

        if text.startswith("record") or text.startswith("{|"):
            return self._any_mapping()

        members = _split_top_level(text, "|")
        if len(members) > 1:
            mapped: list[str] = []
            for member in members:
                annotation = self._map(member)
                if annotation not in mapped:
                    mapped.append(annotation)
            return " | ".join(mapped)

        if text.endswith("?"):
            inner = self._map(text[:-1])
            return inner if inner == "None" else f"{inner} | None"

        if text.endswith("[]"):
            return f"list[{self._map(text[:-2])}]"

        if text.startswith("(") and text.endswith(")"):
            inner = text[1:-1].strip()
            return self._map(inner) if inner else "None"

        if text.startswith("map<") and text.endswith(">"):
            return f"dict[str, {self._map(text[4:-1])}]"

        if text in BASIC_TYPES:
            return self._basic(BASIC_TYPES[text])

        if ":" in text:
            text = text.rsplit(":", 1)[1].strip()

        if text.isidentifier():
            return text

        self.typing_names.add("Any")
        return "Any"

    def _basic(self, annotation: str) -> str:
        if annotation == "Any":
            self.typing_names.add("Any")
        elif annotation == "Decimal":
            self.needs_decimal = True
        return annotation

    def _any_mapping(self) -> str:
        self.typing_names.add("Any")
        return "dict[str, Any]"

    def import_lines(self, *extra_typing: str) -> list[str]:
        """Get the import statements for everything mapped so far."""
        lines = []
        if self.needs_decimal:
            lines.append("from decimal import Decimal")
        typing_names = self.typing_names | set(extra_typing)
        if typing_names:
            lines.append(f"from typing import {', '.join(sorted(typing_names))}")
        return lines

    def parameters(self, node: Node, reserved: tuple[str, ...] = ()) -> tuple[Parameter, ...]:
        """Build the method parameters for a node's inputs.

        Names are normalized to identifiers; names clashing with reserved
        or earlier parameters get a ``_`` suffix.
        """
        taken = set(reserved)
        params = []
        for node_input in node.inputs:
            name = to_identifier(node_input.name)
            while name in taken:
                name = f"{name}_"
            taken.add(name)
            params.append(Parameter(name=name, annotation=self.input_annotation(node_input)))
        return tuple(params)

    def input_annotation(self, node_input: NodeInput) -> str:
        return self.annotation(node_input.type)


def placeholder_value(output: str | None) -> str | None:
    """Get the placeholder return expression for a node output descriptor.

    Returns:
        Python source for the placeholder, or None when the stub should
        raise NotImplementedError instead.
    """
    if output is None:
        return None
    key = output.strip().lower()
    if not key or key == UNIT_TYPE:
        return None

    match key:
        case "string":
            return '""'
        case "int" | "integer" | "byte":
            return "0"
        case "float" | "decimal":
            return "0.0"
        case "boolean" | "bool":
            return "False"
        case "json":
            return "{}"

    if key.endswith("[]"):
        return "[]"
    if key.startswith(("map<", "{|")) or "record" in key:
        return "{}"
    return None
