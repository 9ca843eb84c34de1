"""Tests for the model source parser."""

import pytest

from flowsmith.diagnostics import Stage
from flowsmith.schema.errors import ModelLoadError, ParseFailure
from flowsmith.schema.parser import (
    parse_model,
    parse_model_file,
    parse_model_from_string,
    parse_source,
)


class TestStructuredPath:
    def test_minimal_model(self, minimal_source):
        result = parse_source(minimal_source)
        model = result.model

        assert model.name == "Order"
        assert model.description == "Order workflow"
        assert list(model.nodes) == ["startOrder", "ship"]
        assert model.nodes["startOrder"].kind == "StartEvent"
        assert model.nodes["startOrder"].description == "Start an order"
        assert model.nodes["ship"].output == "boolean"
        assert model.nodes["ship"].id == "ship"
        assert result.diagnostics.issues == []

    def test_edge_fields(self, minimal_model):
        edge = minimal_model.edges[0]
        assert edge.start_node == "startOrder"
        assert edge.end_node == "ship"
        assert edge.condition == "isPaid"

    def test_inputs(self, typed_model):
        inputs = typed_model.nodes["startOrder"].inputs
        assert [(i.name, i.type) for i in inputs] == [
            ("orderId", "string"),
            ("amount", "decimal"),
        ]

    def test_type_expressions_keep_source_text(self, typed_model):
        assert typed_model.nodes["lookup"].output == "map<json>"
        assert typed_model.nodes["lookup"].inputs[0].type == "string[]"
        assert typed_model.nodes["cancelled"].inputs[0].type == "string?"

    def test_qualified_type_reference(self, typed_model):
        assert typed_model.nodes["customer"].output == "types:Customer"

    def test_unit_output(self):
        model = parse_model_from_string(
            'final workflow:Node a = { kind: "Activity", output: () };'
        )
        assert model.nodes["a"].output == "()"
        assert model.nodes["a"].has_output() is False

    def test_template_field(self):
        model = parse_model_from_string(
            'final workflow:Node a = { kind: "Activity", template: "http-call" };'
        )
        assert model.nodes["a"].template == "http-call"

    def test_unknown_fields_ignored(self):
        model = parse_model_from_string(
            'final workflow:Node a = { kind: "Activity", retries: 3, owner: "ops" };'
        )
        assert model.nodes["a"].kind == "Activity"

    def test_qualifiers_and_annotations(self):
        source = """
        @display { label: "Ship" }
        public final workflow:Node ship = { kind: "Activity" };
        """
        assert "ship" in parse_model_from_string(source).nodes

    def test_other_declarations_ignored(self):
        source = """
        import example/workflow;

        public type OrderData record {|
            string id;
        |};

        function helper() returns int {
            return 1;
        }

        final workflow:Node a = { kind: "Activity" };
        """
        result = parse_source(source)
        assert list(result.model.nodes) == ["a"]
        assert result.diagnostics.issues == []

    def test_edges_keep_order(self):
        source = """
        final workflow:Edge second = { startNode: b, endNode: c };
        final workflow:Edge first = { startNode: a, endNode: b };
        """
        model = parse_model_from_string(source)
        assert [(e.start_node, e.end_node) for e in model.edges] == [("b", "c"), ("a", "b")]

    def test_edge_endpoints_not_checked(self):
        model = parse_model_from_string(
            "final workflow:Edge e = { startNode: nowhere, endNode: elsewhere };"
        )
        assert model.nodes == {}
        assert model.edges[0].end_node == "elsewhere"

    def test_descriptor_name_wins_over_record(self):
        source = """
        @workflow:WorkflowModel
        type LegacyName record {|
            @workflow:Activity boolean ship;
        |};

        public final workflow:WorkflowModelDescriptor d = { name: "NewName" };
        """
        model = parse_model_from_string(source)
        assert model.name == "NewName"
        assert "ship" in model.nodes


class TestSkippedDeclarations:
    def test_node_not_a_mapping(self):
        result = parse_source(
            'final workflow:Node a = "nope";\nfinal workflow:Node b = { kind: "Activity" };'
        )
        assert list(result.model.nodes) == ["b"]
        issue = result.diagnostics.by_code("INVALID_NODE_DECLARATION")[0]
        assert issue.node == "a"
        assert issue.line == 1

    def test_edge_not_a_mapping(self):
        result = parse_source("final workflow:Edge e = other;")
        assert result.model.edges == []
        assert len(result.diagnostics.by_code("INVALID_EDGE_DECLARATION")) == 1

    def test_broken_node_initializer(self):
        source = 'final workflow:Node a = { kind: "Activity", 42: int };\nfinal workflow:Node b = {};'
        result = parse_source(source)
        assert list(result.model.nodes) == ["b"]
        assert len(result.diagnostics.by_code("UNPARSEABLE_MEMBER")) == 1

    def test_unterminated_string_skips_member(self):
        source = 'final workflow:Node a = { kind: "Activity };\nfinal workflow:Node b = { kind: "Activity" };'
        result = parse_source(source)
        assert "b" in result.model.nodes
        assert "a" not in result.model.nodes
        assert result.diagnostics.by_code("UNPARSEABLE_MEMBER")[0].line == 1

    def test_parse_diagnostics_tagged_with_stage(self):
        source = 'final workflow:Node a = { kind: "Activity };\n'
        result = parse_source(source)
        assert result.diagnostics.by_code("UNPARSEABLE_MEMBER")
        assert {i.stage for i in result.diagnostics.issues} == {Stage.PARSE}

    def test_invalid_input_skipped(self):
        source = """
        final workflow:Node a = {
            kind: "Activity",
            inputs: [{ name: "ok", type: int }, { type: string }]
        };
        """
        result = parse_source(source)
        assert [i.name for i in result.model.nodes["a"].inputs] == ["ok"]
        assert len(result.diagnostics.by_code("INVALID_NODE_INPUT")) == 1

    def test_inputs_not_a_list(self):
        result = parse_source('final workflow:Node a = { kind: "Activity", inputs: "x" };')
        assert result.model.nodes["a"].inputs == []
        assert len(result.diagnostics.by_code("INVALID_NODE_INPUT")) == 1

    def test_duplicate_node_last_wins(self):
        source = """
        final workflow:Node a = { kind: "Activity" };
        final workflow:Node a = { kind: "Event" };
        """
        result = parse_source(source)
        assert result.model.nodes["a"].kind == "Event"
        assert len(result.diagnostics.by_code("DUPLICATE_NODE")) == 1

    def test_diagnostics_are_warnings(self):
        result = parse_source('final workflow:Node a = "nope";')
        assert result.diagnostics.is_valid
        assert result.diagnostics.has_warnings


class TestDescriptorFailures:
    def test_descriptor_string_literal(self):
        with pytest.raises(ParseFailure) as exc_info:
            parse_model_from_string(
                'public final workflow:WorkflowModelDescriptor d = "OrderFlow";'
            )
        assert exc_info.value.line == 1

    def test_descriptor_broken_initializer(self):
        with pytest.raises(ParseFailure):
            parse_model_from_string(
                'public final workflow:WorkflowModelDescriptor d = { name: "X", 42 };'
            )


class TestParseFiles:
    def test_parse_example(self, examples_dir):
        model = parse_model(examples_dir / "order_flow.flow")
        assert model.name == "OrderFlow"
        assert [n.id for n in model.start_event_nodes()] == ["startOrder"]
        assert [n.id for n in model.event_nodes()] == ["paymentReceived"]
        assert model.unique_conditions() == ["isPaid"]

    def test_name_defaults_to_file_stem(self, tmp_path):
        path = tmp_path / "refunds.flow"
        path.write_text('final workflow:Node a = { kind: "Activity" };')
        assert parse_model_file(path).model.name == "refunds"

    def test_file_not_found(self):
        with pytest.raises(ModelLoadError) as exc_info:
            parse_model("/nonexistent/model.flow")
        assert "not found" in str(exc_info.value).lower()

    def test_not_a_file(self, tmp_path):
        with pytest.raises(ModelLoadError):
            parse_model(tmp_path)

    def test_not_utf8(self, tmp_path):
        path = tmp_path / "binary.flow"
        path.write_bytes(b"\xff\xfe\x00bad")
        with pytest.raises(ModelLoadError):
            parse_model(path)

    def test_bad_descriptor_example(self, examples_dir):
        with pytest.raises(ParseFailure):
            parse_model(examples_dir / "invalid" / "bad_descriptor.flow")
