"""Addition-only merging of generated methods into an implementation file."""

import ast
import re
from dataclasses import dataclass, field
from enum import Enum
from typing import TYPE_CHECKING

import structlog

from .models import MethodSpec

if TYPE_CHECKING:
    from .implementation import ImplementationGenerator

logger = structlog.get_logger(__name__)

# Each match is one line including its terminator; the last may lack one
_LINE_PATTERN = re.compile(r"[^\r\n]*(?:\r\n|\r|\n)|[^\r\n]+\Z")
_DEF_PATTERN = re.compile(r"(?:async\s+)?def\s+([A-Za-z_]\w*)\s*\(")
# Rendered stubs indent by four spaces per level
_STUB_INDENT = "    "
_STUB_INDENT_PATTERN = re.compile(r"^((?:    )+)", re.MULTILINE)


class MergeStrategy(str, Enum):
    """How the merge produced its output."""

    GENERATED = "generated"  # empty input, complete module written
    UNCHANGED = "unchanged"  # nothing missing
    SPLICED = "spliced"  # stubs inserted into an existing class
    APPENDED = "appended"  # stubs appended in a new class


@dataclass
class MergeResult:
    """Outcome of merging generated methods into existing text."""

    text: str
    added: list[str] = field(default_factory=list)
    strategy: MergeStrategy = MergeStrategy.UNCHANGED

    @property
    def changed(self) -> bool:
        return self.strategy != MergeStrategy.UNCHANGED


def split_lines(text: str) -> list[str]:
    """Split text into lines, keeping each line's own terminator."""
    return _LINE_PATTERN.findall(text)


def _scan_def_names(text: str) -> set[str]:
    names = set()
    for line in split_lines(text):
        stripped = line.strip()
        if stripped.startswith(("def ", "async def ")):
            match = _DEF_PATTERN.match(stripped)
            if match:
                names.add(match.group(1))
    return names


def _select_class(tree: ast.Module, class_name: str) -> ast.ClassDef | None:
    classes = [node for node in tree.body if isinstance(node, ast.ClassDef)]
    for node in reversed(classes):
        if node.name == class_name:
            return node
    return classes[-1] if classes else None


def class_method_names(node: ast.ClassDef) -> set[str]:
    """Collect the methods defined directly in a class body."""
    return {
        child.name
        for child in node.body
        if isinstance(child, (ast.FunctionDef, ast.AsyncFunctionDef))
    }


def existing_method_names(text: str, class_name: str) -> set[str]:
    """Collect the methods the implementation class already defines.

    When the text parses, only direct methods of the class chosen by
    ``find_insertion_class`` count; module-level functions and methods of
    other classes do not. Text without a class defines none. Text that
    does not parse falls back to scanning every line that starts with
    ``def`` or ``async def``.
    """
    try:
        tree = ast.parse(text)
    except SyntaxError:
        logger.debug("existing_methods_line_scan")
        return _scan_def_names(text)

    target = _select_class(tree, class_name)
    return class_method_names(target) if target is not None else set()


def find_insertion_class(text: str, class_name: str) -> ast.ClassDef | None:
    """Find the class generated methods should be added to.

    Prefers the last top-level class with the given name, the one the
    module binds, else the last top-level class. Returns None when the
    text does not parse or holds no top-level class.
    """
    try:
        tree = ast.parse(text)
    except SyntaxError:
        return None
    return _select_class(tree, class_name)


def body_indent(lines: list[str], node: ast.ClassDef) -> str | None:
    """Get the indentation of a class body.

    Returns None when the body starts on the ``class`` line itself, where
    no method can be added.
    """
    first = node.body[0]
    if first.lineno == node.lineno:
        return None
    return lines[first.lineno - 1][: first.col_offset]


def reindent(text: str, indent: str) -> str:
    """Replace each four-space level of leading indentation with ``indent``."""
    if indent == _STUB_INDENT:
        return text
    return _STUB_INDENT_PATTERN.sub(
        lambda m: indent * (len(m.group(1)) // len(_STUB_INDENT)), text
    )


def _newline_of(text: str) -> str:
    if "\r\n" in text:
        return "\r\n"
    if "\r" in text and "\n" not in text:
        return "\r"
    return "\n"


def _append_class(
    existing_text: str,
    generator: "ImplementationGenerator",
    missing: list[MethodSpec],
    newline: str,
    base: str | None = None,
) -> MergeResult:
    added = [m.name for m in missing]
    separator = "" if existing_text.endswith(("\n", "\r")) else "\n"
    appended = separator + "\n\n" + generator.render_class(missing, base=base)
    if newline != "\n":
        appended = appended.replace("\n", newline)
    logger.debug("merge_appended_class", added=added, base=base)
    return MergeResult(
        text=existing_text + appended,
        added=added,
        strategy=MergeStrategy.APPENDED,
    )


def merge_implementation(existing_text: str, generator: "ImplementationGenerator") -> MergeResult:
    """Add stubs for required methods the implementation class lacks.

    Nothing already in the text is changed or removed. Stubs are spliced
    in right after the last line of the implementation class body,
    indented the way that body is. Without a usable class they are
    appended inside a new implementation class; a class whose body sits
    on its ``class`` line is extended by a new class deriving from it.

    Args:
        existing_text: Current contents of the implementation file.
        generator: Generator for the current workflow model.

    Returns:
        The merged text, the names added and the strategy used.
    """
    if not existing_text.strip():
        methods = generator.required_methods()
        return MergeResult(
            text=generator.generate_complete(),
            added=[m.name for m in methods],
            strategy=MergeStrategy.GENERATED,
        )

    existing = existing_method_names(existing_text, generator.class_name)
    missing = [m for m in generator.required_methods() if m.name not in existing]
    if not missing:
        logger.debug("merge_unchanged", methods=len(existing))
        return MergeResult(text=existing_text)

    newline = _newline_of(existing_text)
    target = find_insertion_class(existing_text, generator.class_name)
    if target is None:
        return _append_class(existing_text, generator, missing, newline)

    lines = split_lines(existing_text)
    indent = body_indent(lines, target)
    if indent is None:
        base = target.name if target.name == generator.class_name else None
        return _append_class(existing_text, generator, missing, newline, base=base)

    added = [m.name for m in missing]
    stubs = "".join("\n" + reindent(generator.render_stub(m), indent) for m in missing)
    if newline != "\n":
        stubs = stubs.replace("\n", newline)

    end = target.end_lineno
    head = "".join(lines[:end])
    if not head.endswith(("\n", "\r")):
        head += newline

    logger.debug("merge_spliced", target=target.name, added=added, indent=len(indent))
    return MergeResult(
        text=head + stubs + "".join(lines[end:]),
        added=added,
        strategy=MergeStrategy.SPLICED,
    )
