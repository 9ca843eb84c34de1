"""Pydantic models for workflow process graphs."""

import re
from enum import Enum

from pydantic import BaseModel, ConfigDict, Field, model_validator

# Output descriptor meaning "this node produces nothing"
UNIT_TYPE = "()"


class NodeKind(str, Enum):
    """Node kinds the generators know about.

    The kind tag on a node is an open set; anything outside these values is
    carried through untouched and treated as a plain node.
    """

    START_EVENT = "StartEvent"
    ACTIVITY = "Activity"
    EVENT = "Event"


# Kind assigned by the annotation fallback when it can only guess
DEFAULT_NODE_KIND = "Node"


class NodeInput(BaseModel):
    """A named, typed input of a node."""

    name: str
    type: str


class Node(BaseModel):
    """A unit of work in the process graph."""

    id: str = ""  # Will be set from the key
    kind: str | None = None
    description: str | None = None
    output: str | None = None
    template: str | None = None
    inputs: list[NodeInput] = Field(default_factory=list)

    def has_output(self) -> bool:
        """Check if the node declares an output type."""
        if self.output is None:
            return False
        output = self.output.strip()
        return bool(output) and output != UNIT_TYPE

    def is_kind(self, kind: NodeKind) -> bool:
        """Check the node kind against a known kind."""
        return self.kind == kind.value


class Edge(BaseModel):
    """A directed connection between two nodes."""

    model_config = ConfigDict(populate_by_name=True)

    start_node: str | None = Field(default=None, alias="startNode")
    end_node: str | None = Field(default=None, alias="endNode")
    condition: str | None = None


class WorkflowModel(BaseModel):
    """Root model for one workflow definition."""

    name: str | None = None
    description: str | None = None
    nodes: dict[str, Node] = Field(default_factory=dict)
    edges: list[Edge] = Field(default_factory=list)

    @model_validator(mode="before")
    @classmethod
    def normalize_model(cls, data: dict) -> dict:
        """Set node ids from their keys."""
        if not isinstance(data, dict):
            return data

        nodes = data.get("nodes", {})
        if isinstance(nodes, dict):
            for node_id, node_data in nodes.items():
                if isinstance(node_data, dict):
                    node_data["id"] = node_id

        return data

    @property
    def capitalized_name(self) -> str:
        """The model name as a PascalCase identifier."""
        if not self.name:
            return ""
        words = [w for w in re.split(r"[^A-Za-z0-9]+", self.name) if w]
        return "".join(w[0].upper() + w[1:] for w in words)

    def get_node(self, node_id: str) -> Node | None:
        """Get a node by id."""
        return self.nodes.get(node_id)

    def get_all_node_ids(self) -> list[str]:
        """Get all node ids."""
        return list(self.nodes.keys())

    def nodes_of_kind(self, kind: NodeKind) -> list[Node]:
        """Get the nodes of a kind, in declaration order."""
        return [node for node in self.nodes.values() if node.is_kind(kind)]

    def start_event_nodes(self) -> list[Node]:
        return self.nodes_of_kind(NodeKind.START_EVENT)

    def event_nodes(self) -> list[Node]:
        return self.nodes_of_kind(NodeKind.EVENT)

    def activity_nodes(self) -> list[Node]:
        return self.nodes_of_kind(NodeKind.ACTIVITY)

    def unique_conditions(self) -> list[str]:
        """Get distinct non-empty condition names in first-seen order."""
        seen: dict[str, None] = {}
        for edge in self.edges:
            if edge.condition:
                seen.setdefault(edge.condition, None)
        return list(seen)

    def incoming_edges(self, node_id: str) -> list[Edge]:
        """Get edges ending at a node."""
        return [edge for edge in self.edges if edge.end_node == node_id]

    def outgoing_edges(self, node_id: str) -> list[Edge]:
        """Get edges starting at a node."""
        return [edge for edge in self.edges if edge.start_node == node_id]
