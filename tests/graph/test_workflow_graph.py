"""Tests for WorkflowGraph."""

from flowsmith.graph.workflow_graph import WorkflowGraph


class TestWorkflowGraph:
    def test_add_node(self):
        graph = WorkflowGraph()
        graph.add_node("start", kind="StartEvent")

        assert graph.get_node_ids() == ["start"]
        assert graph.get_node("start")["kind"] == "StartEvent"
        assert graph.get_node("start")["declared"] is True
        assert graph.get_node("missing") is None

    def test_edge_creates_undeclared_nodes(self):
        graph = WorkflowGraph()
        graph.add_node("a", kind="StartEvent")
        graph.add_edge("a", "b")

        assert graph.get_node_ids() == ["a"]
        assert graph.get_undeclared_node_ids() == ["b"]
        assert graph.get_successors("a") == ["b"]

    def test_parallel_edges_keep_conditions(self):
        graph = WorkflowGraph()
        graph.add_edge("a", "b", condition="x")
        graph.add_edge("a", "b", condition="y")
        graph.add_edge("a", "b")

        assert sorted(graph.get_conditions("a", "b")) == ["x", "y"]
        assert graph.get_conditions("b", "a") == []
        assert len(list(graph.iter_edges())) == 3

    def test_entry_and_start_nodes(self):
        graph = WorkflowGraph()
        graph.add_node("start", kind="StartEvent")
        graph.add_node("paid", kind="Event")
        graph.add_node("ship", kind="Activity")

        assert sorted(graph.get_entry_nodes()) == ["paid", "start"]
        assert graph.get_start_nodes() == ["start"]

    def test_reachable_nodes(self):
        graph = WorkflowGraph()
        graph.add_node("start", kind="StartEvent")
        graph.add_node("a", kind="Activity")
        graph.add_node("b", kind="Activity")
        graph.add_node("island", kind="Activity")
        graph.add_edge("start", "a")
        graph.add_edge("a", "b")
        graph.add_edge("a", "ghost")

        assert graph.get_reachable_nodes() == {"start", "a", "b"}

    def test_successors_of_unknown_node(self):
        assert WorkflowGraph().get_successors("nope") == []
