"""Parsing of workflow model sources into WorkflowModel instances."""

from dataclasses import dataclass, field
from pathlib import Path
from typing import Any

import structlog
from pydantic import ValidationError

from ..diagnostics import DiagnosticReport, Stage
from .annotations import extract_annotated_record, looks_like_workflow_record
from .declarations import (
    DESCRIPTOR_TYPE,
    DeclarationSyntaxError,
    DescriptorDecl,
    EdgeDecl,
    NodeDecl,
    Unrecognized,
    classify,
    split_members,
)
from .errors import ModelLoadError, ParseFailure
from .lexer import tokenize
from .models import WorkflowModel
from .structured import extract_descriptor, extract_edge, extract_node

logger = structlog.get_logger(__name__)


@dataclass
class ParseResult:
    """A parsed model plus everything that was skipped on the way."""

    model: WorkflowModel
    diagnostics: DiagnosticReport = field(default_factory=DiagnosticReport)


@dataclass
class _ModelData:
    descriptor_name: str | None = None
    record_name: str | None = None
    description: str | None = None
    nodes: dict[str, dict[str, Any]] = field(default_factory=dict)
    edges: list[dict[str, Any]] = field(default_factory=list)


class ModelParser:
    """Recovers a WorkflowModel from model source text.

    Each top-level declaration is classified once. Typed node, edge and
    descriptor declarations go through the structured path; other members
    that look like annotated workflow records go through the annotation
    fallback. A broken node or edge declaration is skipped with a warning
    diagnostic; only a broken workflow descriptor fails the whole parse.
    """

    def parse(self, source: str) -> ParseResult:
        """Parse model source text.

        Args:
            source: The model source.

        Returns:
            The model and the parse diagnostics.

        Raises:
            ParseFailure: If the workflow descriptor is malformed or the
                collected data fails model validation.
        """
        diagnostics = DiagnosticReport(stage=Stage.PARSE)
        data = _ModelData()

        for member in split_members(source, tokenize(source)):
            if member.has_errors:
                diagnostics.add_warning(
                    code="UNPARSEABLE_MEMBER",
                    message="Skipping declaration with an unterminated string literal",
                    line=member.line,
                )
                continue

            try:
                declaration = classify(source, member)
            except DeclarationSyntaxError as e:
                if e.declared_type == DESCRIPTOR_TYPE:
                    raise ParseFailure(
                        f"Malformed workflow descriptor: {e}", line=e.line or member.line
                    ) from e
                diagnostics.add_warning(
                    code="UNPARSEABLE_MEMBER",
                    message=f"Skipping declaration: {e}",
                    line=e.line or member.line,
                )
                continue

            self._apply(declaration, data, diagnostics)

        return ParseResult(model=self._build_model(data), diagnostics=diagnostics)

    def _apply(self, declaration, data: _ModelData, diagnostics: DiagnosticReport) -> None:
        match declaration:
            case DescriptorDecl():
                descriptor = extract_descriptor(declaration)
                data.descriptor_name = descriptor.get("name", data.descriptor_name)
                data.description = descriptor.get("description", data.description)
                logger.debug("descriptor_parsed", name=data.descriptor_name)

            case NodeDecl(name=name, line=line):
                node = extract_node(declaration, diagnostics)
                if node is not None:
                    self._add_node(data, name, node, line, diagnostics)

            case EdgeDecl():
                edge = extract_edge(declaration, diagnostics)
                if edge is not None:
                    data.edges.append(edge)

            case Unrecognized(text=text, line=line) if looks_like_workflow_record(text):
                record = extract_annotated_record(text, diagnostics, line=line)
                if record.name and data.record_name is None:
                    data.record_name = record.name
                for name, node in record.nodes.items():
                    self._add_node(data, name, node, line, diagnostics)
                logger.debug(
                    "annotated_record_parsed", name=record.name, nodes=len(record.nodes)
                )

            case Unrecognized(line=line):
                logger.debug("member_ignored", line=line)

    @staticmethod
    def _add_node(
        data: _ModelData,
        name: str,
        node: dict[str, Any],
        line: int,
        diagnostics: DiagnosticReport,
    ) -> None:
        if name in data.nodes:
            diagnostics.add_warning(
                code="DUPLICATE_NODE",
                message=f"Node '{name}' is declared more than once; the last declaration wins",
                node=name,
                line=line,
            )
        data.nodes[name] = node

    @staticmethod
    def _build_model(data: _ModelData) -> WorkflowModel:
        raw = {
            "name": data.descriptor_name or data.record_name,
            "description": data.description,
            "nodes": data.nodes,
            "edges": data.edges,
        }
        try:
            return WorkflowModel.model_validate(raw)
        except ValidationError as e:
            errors = [
                {
                    "loc": ".".join(str(x) for x in err["loc"]),
                    "msg": err["msg"],
                    "type": err["type"],
                }
                for err in e.errors()
            ]
            raise ParseFailure(
                f"Model validation failed with {len(errors)} error(s)", errors=errors
            ) from e


def parse_source(source: str) -> ParseResult:
    """Parse model source text, keeping the diagnostics."""
    return ModelParser().parse(source)


def parse_model_from_string(source: str) -> WorkflowModel:
    """Parse model source text into a WorkflowModel.

    Raises:
        ParseFailure: If the source is structurally broken.
    """
    return parse_source(source).model


def read_source(path: str | Path) -> str:
    """Read a model source file.

    Raises:
        ModelLoadError: If the file cannot be read.
    """
    path = Path(path)

    if not path.exists():
        raise ModelLoadError(f"File not found: {path}", str(path))

    if not path.is_file():
        raise ModelLoadError(f"Not a file: {path}", str(path))

    try:
        return path.read_text(encoding="utf-8")
    except UnicodeDecodeError as e:
        raise ModelLoadError(f"File is not valid UTF-8: {e}", str(path)) from e
    except OSError as e:
        raise ModelLoadError(f"Cannot read file: {e}", str(path)) from e


def parse_model_file(path: str | Path) -> ParseResult:
    """Load and parse a model file.

    When the source declares no name, the model is named after the file.

    Raises:
        ModelLoadError: If the file cannot be read.
        ParseFailure: If the source is structurally broken.
    """
    path = Path(path)
    result = parse_source(read_source(path))
    if not result.model.name:
        result.model.name = path.stem
    return result


def parse_model(path: str | Path) -> WorkflowModel:
    """Load and parse a model file into a WorkflowModel."""
    return parse_model_file(path).model
