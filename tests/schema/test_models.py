"""Tests for schema models."""

import pytest
from pydantic import ValidationError

from flowsmith.schema.models import Edge, Node, NodeInput, NodeKind, WorkflowModel


class TestNode:
    def test_basic_node(self):
        node = Node(kind="Activity")
        assert node.kind == "Activity"
        assert node.inputs == []
        assert node.has_output() is False

    @pytest.mark.parametrize("output", [None, "", "   ", "()", " () "])
    def test_no_output(self, output):
        assert Node(output=output).has_output() is False

    def test_has_output(self):
        assert Node(output="boolean").has_output() is True

    def test_is_kind(self):
        node = Node(kind="StartEvent")
        assert node.is_kind(NodeKind.START_EVENT)
        assert not node.is_kind(NodeKind.ACTIVITY)

    def test_inputs(self):
        node = Node(inputs=[{"name": "orderId", "type": "string"}])
        assert node.inputs == [NodeInput(name="orderId", type="string")]


class TestEdge:
    def test_aliases(self):
        edge = Edge.model_validate({"startNode": "a", "endNode": "b"})
        assert edge.start_node == "a"
        assert edge.end_node == "b"
        assert edge.condition is None

    def test_field_names(self):
        edge = Edge(start_node="a", end_node="b", condition="ok")
        assert edge.condition == "ok"


class TestWorkflowModel:
    def test_empty_model(self):
        model = WorkflowModel()
        assert model.nodes == {}
        assert model.edges == []
        assert model.capitalized_name == ""

    def test_node_ids_from_keys(self):
        model = WorkflowModel(nodes={"ship": {"kind": "Activity"}})
        assert model.nodes["ship"].id == "ship"

    def test_node_order_preserved(self):
        model = WorkflowModel(
            nodes={
                "c": {"kind": "Activity"},
                "a": {"kind": "StartEvent"},
                "b": {"kind": "Activity"},
            }
        )
        assert model.get_all_node_ids() == ["c", "a", "b"]
        assert [n.id for n in model.activity_nodes()] == ["c", "b"]
        assert [n.id for n in model.start_event_nodes()] == ["a"]

    def test_event_nodes(self):
        model = WorkflowModel(
            nodes={"paid": {"kind": "Event"}, "start": {"kind": "StartEvent"}}
        )
        assert [n.id for n in model.event_nodes()] == ["paid"]

    def test_unique_conditions(self):
        model = WorkflowModel(
            edges=[
                {"startNode": "a", "endNode": "b", "condition": "y"},
                {"startNode": "a", "endNode": "c", "condition": "x"},
                {"startNode": "b", "endNode": "c", "condition": "y"},
                {"startNode": "c", "endNode": "d", "condition": ""},
                {"startNode": "c", "endNode": "e"},
            ]
        )
        assert model.unique_conditions() == ["y", "x"]

    def test_incoming_and_outgoing_edges(self):
        model = WorkflowModel(
            edges=[
                {"startNode": "a", "endNode": "b"},
                {"startNode": "b", "endNode": "c"},
                {"startNode": "a", "endNode": "c"},
            ]
        )
        assert len(model.outgoing_edges("a")) == 2
        assert len(model.incoming_edges("c")) == 2
        assert model.incoming_edges("a") == []
        assert model.outgoing_edges("missing") == []

    def test_get_node(self):
        model = WorkflowModel(nodes={"ship": {}})
        assert model.get_node("ship").id == "ship"
        assert model.get_node("missing") is None

    @pytest.mark.parametrize(
        "name,expected",
        [
            ("OrderFlow", "OrderFlow"),
            ("order", "Order"),
            ("order flow", "OrderFlow"),
            ("order_flow", "OrderFlow"),
        ],
    )
    def test_capitalized_name(self, name, expected):
        assert WorkflowModel(name=name).capitalized_name == expected

    def test_invalid_nodes(self):
        with pytest.raises(ValidationError):
            WorkflowModel(nodes=["not", "a", "mapping"])
