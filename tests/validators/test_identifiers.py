"""Tests for the identifier validator."""

from flowsmith.schema.models import WorkflowModel
from flowsmith.validators.identifiers import check_identifiers


class TestIdentifiers:
    def test_valid_identifiers(self, minimal_model):
        assert check_identifiers(minimal_model).issues == []

    def test_node_id(self):
        result = check_identifiers(WorkflowModel(nodes={"ship-order": {"kind": "Activity"}}))
        issue = result.by_code("INVALID_IDENTIFIER")[0]
        assert issue.node == "ship-order"
        assert "ship_order" in issue.message

    def test_keyword(self):
        result = check_identifiers(WorkflowModel(nodes={"class": {"kind": "Activity"}}))
        assert "class_" in result.issues[0].message

    def test_input_and_condition(self):
        model = WorkflowModel(
            nodes={"a": {"kind": "Activity", "inputs": [{"name": "order id", "type": "string"}]}},
            edges=[{"startNode": "a", "endNode": "a", "condition": "is-paid"}],
        )
        result = check_identifiers(model)
        assert sorted(i.details["name"] for i in result.issues) == ["is-paid", "order id"]
