"""Generator for the workflow client and its supporting types."""

import structlog

from ..naming import to_identifier
from ..schema.models import Node, WorkflowModel
from .methods import class_prefix, required_methods
from .models import MethodKind, MethodSpec, Parameter
from .templating import render
from .type_mapping import TypeMapper

logger = structlog.get_logger(__name__)

# Instance ids are plain strings unless the start node declares an output
INSTANCE_ID_TYPE = "str"


class ClientGenerator:
    """Generates ``client.py`` and ``types.py`` for a workflow model.

    The client gets one method per StartEvent node and one per Event node.
    The types module holds the ``Results`` record, the ``Context`` passed to
    implementation methods, and the Protocol the implementation satisfies.
    Output is deterministic for a given model.
    """

    def __init__(self, model: WorkflowModel):
        self.model = model

    @property
    def workflow_name(self) -> str:
        return self.model.name or class_prefix(self.model) or "workflow"

    def generate(self) -> str:
        """Generate the client module source."""
        mapper = TypeMapper()
        start_methods = self._unique(
            self._start_method(node, mapper) for node in self.model.start_event_nodes()
        )
        event_methods = self._unique(
            self._event_method(node, mapper) for node in self.model.event_nodes()
        )
        # Start and event methods share one namespace; start methods win
        taken = {m.name for m in start_methods}
        event_methods = [m for m in event_methods if m.name not in taken]

        logger.debug(
            "client_generated",
            workflow=self.workflow_name,
            start_methods=len(start_methods),
            event_methods=len(event_methods),
        )
        return render(
            "client.py.j2",
            workflow_name=self.workflow_name,
            class_prefix=class_prefix(self.model),
            imports=mapper.import_lines(),
            start_methods=start_methods,
            event_methods=event_methods,
        )

    def generate_types(self) -> str:
        """Generate the types module source."""
        mapper = TypeMapper()
        result_fields = self._result_fields(mapper)
        methods = required_methods(self.model, mapper)

        imports = ["from dataclasses import dataclass, field"]
        imports.extend(mapper.import_lines("Protocol"))

        logger.debug(
            "types_generated",
            workflow=self.workflow_name,
            result_fields=len(result_fields),
            methods=len(methods),
        )
        return render(
            "types.py.j2",
            workflow_name=self.workflow_name,
            class_prefix=class_prefix(self.model),
            imports=sorted(imports),
            result_fields=result_fields,
            methods=methods,
        )

    def generate_package_init(self) -> str:
        """Generate the ``__init__.py`` re-exporting the generated names."""
        return render(
            "package_init.py.j2",
            workflow_name=self.workflow_name,
            class_prefix=class_prefix(self.model),
        )

    def _start_method(self, node: Node, mapper: TypeMapper) -> MethodSpec:
        name = to_identifier(node.id)
        return MethodSpec(
            name=name,
            kind=MethodKind.NODE,
            doc=node.description or f"Start a {self.workflow_name} workflow instance at {name}.",
            params=mapper.parameters(node, reserved=("self",)),
            returns=mapper.annotation(node.output) if node.has_output() else INSTANCE_ID_TYPE,
        )

    def _event_method(self, node: Node, mapper: TypeMapper) -> MethodSpec:
        name = to_identifier(node.id)
        return MethodSpec(
            name=name,
            kind=MethodKind.NODE,
            doc=node.description or f"Send the {name} event to a workflow instance.",
            params=mapper.parameters(node, reserved=("self", "workflow_id")),
        )

    def _result_fields(self, mapper: TypeMapper) -> list[Parameter]:
        fields: dict[str, Parameter] = {}

        for node in self.model.nodes.values():
            if not node.has_output():
                continue
            name = to_identifier(node.id)
            fields.setdefault(name, Parameter(name, _optional(mapper.annotation(node.output))))

        for condition in self.model.unique_conditions():
            name = to_identifier(condition)
            fields.setdefault(name, Parameter(name, "bool | None"))

        return list(fields.values())

    @staticmethod
    def _unique(methods) -> list[MethodSpec]:
        unique: dict[str, MethodSpec] = {}
        for method in methods:
            unique.setdefault(method.name, method)
        return list(unique.values())


def _optional(annotation: str) -> str:
    if annotation == "None" or annotation.endswith("| None"):
        return annotation
    return f"{annotation} | None"
