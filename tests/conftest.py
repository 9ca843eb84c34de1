"""Shared fixtures for tests."""

from pathlib import Path

import pytest
import structlog

from flowsmith.graph.builder import build_graph
from flowsmith.schema.parser import parse_model_from_string


@pytest.fixture(autouse=True)
def reset_logging():
    """Undo logging configuration done by CLI invocations."""
    yield
    structlog.reset_defaults()


@pytest.fixture
def examples_dir() -> Path:
    """Return the path to the examples directory."""
    return Path(__file__).parent.parent / "examples"


@pytest.fixture
def minimal_source() -> str:
    """Return the smallest model with a start, an activity and a condition."""
    return """
final workflow:Node startOrder = {
    kind: "StartEvent",
    description: "Start an order"
};

final workflow:Node ship = {
    kind: "Activity",
    output: boolean
};

final workflow:Edge e1 = {
    startNode: startOrder,
    endNode: ship,
    condition: "isPaid"
};

public final workflow:WorkflowModelDescriptor order = {
    name: "Order",
    description: "Order workflow"
};
"""


@pytest.fixture
def typed_source() -> str:
    """Return a model with inputs, outputs of several types and an event."""
    return """
final workflow:Node startOrder = {
    kind: "StartEvent",
    inputs: [
        { name: "orderId", type: string },
        { name: "amount", type: decimal }
    ]
};

final workflow:Node lookup = {
    kind: "Activity",
    output: map<json>,
    inputs: [{ name: "keys", type: string[] }]
};

final workflow:Node count = { kind: "Activity", output: int };
final workflow:Node label = { kind: "Activity", output: string };
final workflow:Node customer = { kind: "Activity", output: types:Customer };
final workflow:Node cancelled = { kind: "Event", inputs: [{ name: "reason", type: string? }] };

final workflow:Edge a = { startNode: startOrder, endNode: lookup };
final workflow:Edge b = { startNode: lookup, endNode: count, condition: "hasKeys" };
final workflow:Edge c = { startNode: lookup, endNode: label, condition: "hasKeys" };
final workflow:Edge d = { startNode: cancelled, endNode: customer };

public final workflow:WorkflowModelDescriptor typed = { name: "TypedFlow" };
"""


@pytest.fixture
def minimal_model(minimal_source):
    """Return the parsed minimal model."""
    return parse_model_from_string(minimal_source)


@pytest.fixture
def typed_model(typed_source):
    """Return the parsed typed model."""
    return parse_model_from_string(typed_source)


@pytest.fixture
def minimal_graph(minimal_model):
    """Return the graph of the minimal model."""
    return build_graph(minimal_model)
