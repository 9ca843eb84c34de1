"""Generator for the hand-edited workflow implementation scaffold."""

import structlog

from ..config import ProjectConfig
from ..schema.models import WorkflowModel
from .generator import package_name_for, types_module_for
from .merge import MergeResult, merge_implementation
from .methods import class_prefix, required_methods
from .models import MethodSpec
from .templating import render
from .type_mapping import TypeMapper

logger = structlog.get_logger(__name__)


class ImplementationGenerator:
    """Generates the implementation class a developer fills in.

    Each StartEvent and Activity node becomes a method returning a
    placeholder for its output type; each edge condition becomes a method
    returning ``bool``. Once written, the file is only ever extended:
    ``update_existing`` adds methods for new nodes and conditions and
    leaves everything else as it was.

    Args:
        model: The workflow model.
        types_module: Module the implementation imports ``Context`` from;
            defaults to the package generated under the default output
            directory.
    """

    def __init__(self, model: WorkflowModel, types_module: str | None = None):
        self.model = model
        self.types_module = types_module or types_module_for(
            ProjectConfig().generated_dir, package_name_for(model)
        )

    @property
    def class_name(self) -> str:
        return f"{class_prefix(self.model)}WorkflowImpl"

    @property
    def workflow_name(self) -> str:
        return self.model.name or class_prefix(self.model) or "workflow"

    def required_methods(self, mapper: TypeMapper | None = None) -> list[MethodSpec]:
        """Get the methods the implementation class must define, in order."""
        return required_methods(self.model, mapper)

    def render_stub(self, method: MethodSpec) -> str:
        """Render one method stub, indented for the class body."""
        return render("method_stub.py.j2", method=method)

    def render_class(self, methods: list[MethodSpec], base: str | None = None) -> str:
        """Render the implementation class holding the given stubs."""
        return render(
            "impl_class.py.j2",
            base=base,
            class_prefix=class_prefix(self.model),
            workflow_name=self.workflow_name,
            stubs=[self.render_stub(m) for m in methods],
        )

    def generate_complete(self) -> str:
        """Generate the full implementation module."""
        mapper = TypeMapper()
        methods = self.required_methods(mapper)
        logger.debug("implementation_generated", workflow=self.workflow_name, methods=len(methods))
        return render(
            "implementation.py.j2",
            workflow_name=self.workflow_name,
            types_module=self.types_module,
            imports=mapper.import_lines(),
            class_block=self.render_class(methods),
        )

    def merge(self, existing_text: str) -> MergeResult:
        """Add missing methods to an existing implementation, reporting what changed."""
        return merge_implementation(existing_text, self)

    def update_existing(self, existing_text: str) -> str:
        """Add missing methods to an existing implementation.

        Empty or whitespace-only text yields the complete module. When no
        method is missing the text is returned unchanged.
        """
        return self.merge(existing_text).text
