"""WorkflowGraph wrapper around networkx for workflow models."""

from typing import Any, Iterator

import networkx as nx

from ..schema.models import NodeKind

# Kinds that are triggered from outside the graph
ENTRY_KINDS = {NodeKind.START_EVENT.value, NodeKind.EVENT.value}


class WorkflowGraph:
    """A graph representation of a workflow model.

    Wraps a networkx MultiDiGraph, since two nodes may be joined by several
    edges guarded by different conditions. Edge endpoints that are not
    declared nodes still get a graph node, marked ``declared=False``, so
    dangling references stay visible.
    """

    def __init__(self):
        """Initialize an empty workflow graph."""
        self._graph = nx.MultiDiGraph()

    @property
    def graph(self) -> nx.MultiDiGraph:
        """Get the underlying networkx graph."""
        return self._graph

    # -------------------------------------------------------------------------
    # Construction
    # -------------------------------------------------------------------------

    def add_node(self, node_id: str, kind: str | None = None, **attrs: Any) -> None:
        """Add a declared node.

        Args:
            node_id: The node id.
            kind: The node kind tag.
            **attrs: Additional attributes for the node.
        """
        self._graph.add_node(node_id, kind=kind, declared=True, **attrs)

    def add_edge(
        self,
        start_node: str,
        end_node: str,
        condition: str | None = None,
        index: int | None = None,
    ) -> None:
        """Add an edge, creating undeclared endpoint nodes as needed.

        Args:
            start_node: The source node id.
            end_node: The target node id.
            condition: Optional guard condition name.
            index: Position of the edge in the model.
        """
        for node_id in (start_node, end_node):
            if not self._graph.has_node(node_id):
                self._graph.add_node(node_id, kind=None, declared=False)

        self._graph.add_edge(start_node, end_node, condition=condition, index=index)

    # -------------------------------------------------------------------------
    # Queries
    # -------------------------------------------------------------------------

    def get_node_ids(self) -> list[str]:
        """Get all declared node ids."""
        return [
            node_id
            for node_id, data in self._graph.nodes(data=True)
            if data.get("declared")
        ]

    def get_node(self, node_id: str) -> dict[str, Any] | None:
        """Get a node's attributes."""
        if self._graph.has_node(node_id):
            return dict(self._graph.nodes[node_id])
        return None

    def get_undeclared_node_ids(self) -> list[str]:
        """Get ids that edges reference but no node declares."""
        return [
            node_id
            for node_id, data in self._graph.nodes(data=True)
            if not data.get("declared")
        ]

    def get_entry_nodes(self) -> list[str]:
        """Get declared nodes that are triggered externally."""
        return [
            node_id
            for node_id, data in self._graph.nodes(data=True)
            if data.get("declared") and data.get("kind") in ENTRY_KINDS
        ]

    def get_start_nodes(self) -> list[str]:
        """Get declared StartEvent nodes."""
        return [
            node_id
            for node_id, data in self._graph.nodes(data=True)
            if data.get("declared") and data.get("kind") == NodeKind.START_EVENT.value
        ]

    def get_successors(self, node_id: str) -> list[str]:
        """Get the distinct targets of a node's outgoing edges."""
        if not self._graph.has_node(node_id):
            return []
        return list(self._graph.successors(node_id))

    def get_reachable_nodes(self) -> set[str]:
        """Get declared nodes reachable from any entry node.

        Entry nodes count as reachable themselves.
        """
        reachable: set[str] = set()
        for entry in self.get_entry_nodes():
            reachable.add(entry)
            reachable |= nx.descendants(self._graph, entry)
        declared = set(self.get_node_ids())
        return reachable & declared

    def get_conditions(self, start_node: str, end_node: str) -> list[str]:
        """Get the conditions guarding edges between two nodes."""
        if not self._graph.has_edge(start_node, end_node):
            return []
        return [
            data["condition"]
            for data in self._graph.get_edge_data(start_node, end_node).values()
            if data.get("condition")
        ]

    def iter_edges(self) -> Iterator[tuple[str, str, str | None]]:
        """Iterate over all edges.

        Yields:
            Tuples of (start_node, end_node, condition).
        """
        for source, target, data in self._graph.edges(data=True):
            yield source, target, data.get("condition")
