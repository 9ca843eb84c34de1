"""Graph layer for representing workflow models as networkx graphs."""

from .builder import build_graph
from .workflow_graph import ENTRY_KINDS, WorkflowGraph

__all__ = [
    "ENTRY_KINDS",
    "WorkflowGraph",
    "build_graph",
]
