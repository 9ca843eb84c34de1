"""Schema layer: the workflow graph model and the model source parser."""

from .errors import ModelLoadError, ParseFailure
from .models import (
    DEFAULT_NODE_KIND,
    UNIT_TYPE,
    Edge,
    Node,
    NodeInput,
    NodeKind,
    WorkflowModel,
)
from .parser import (
    ModelParser,
    ParseResult,
    parse_model,
    parse_model_file,
    parse_model_from_string,
    parse_source,
)

__all__ = [
    "ModelLoadError",
    "ParseFailure",
    "DEFAULT_NODE_KIND",
    "UNIT_TYPE",
    "Edge",
    "Node",
    "NodeInput",
    "NodeKind",
    "WorkflowModel",
    "ModelParser",
    "ParseResult",
    "parse_model",
    "parse_model_file",
    "parse_model_from_string",
    "parse_source",
]
