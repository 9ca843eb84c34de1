"""Generation of the client package for a workflow model."""

from pathlib import Path, PurePath

import structlog

from ..config import ProjectConfig
from ..graph.builder import build_graph
from ..naming import snake_case
from ..schema.models import WorkflowModel
from ..schema.parser import parse_model_file
from ..validators.runner import run_validators
from .client import ClientGenerator
from .models import GeneratedFile, GenerationResult

logger = structlog.get_logger(__name__)


def package_name_for(model: WorkflowModel) -> str:
    """Get the generated package name for a model."""
    name = snake_case(model.name or "")
    if not name:
        return "workflow"
    if name[0].isdigit():
        return f"_{name}"
    return name


def types_module_for(output_dir: str | Path, package_name: str) -> str:
    """Get the dotted module path of the generated types module.

    Relative output directories map onto a dotted package path; for an
    absolute directory only the package itself can be named.
    """
    path = PurePath(output_dir)
    parts = [] if path.is_absolute() else [p for p in path.parts if p not in (".", "")]
    return ".".join([*parts, package_name, "types"])


def generate_workflow(model: WorkflowModel, config: ProjectConfig | None = None) -> GenerationResult:
    """Generate the client package files for a model.

    The files are ``__init__.py``, ``client.py`` and ``types.py`` under a
    directory named after the workflow. Validation findings are attached
    to the result; they never stop generation.

    Args:
        model: The workflow model.
        config: Project configuration.

    Returns:
        The generated files and validation diagnostics.
    """
    config = config or ProjectConfig()
    package = package_name_for(model)
    generator = ClientGenerator(model)

    result = GenerationResult(
        workflow_name=model.name or package, package_name=package, model=model
    )
    result.files = [
        GeneratedFile(f"{package}/__init__.py", generator.generate_package_init()),
        GeneratedFile(f"{package}/client.py", generator.generate()),
        GeneratedFile(f"{package}/types.py", generator.generate_types()),
    ]
    result.diagnostics.merge(run_validators(model, build_graph(model)))

    logger.debug(
        "workflow_generated",
        workflow=result.workflow_name,
        package=package,
        generated_dir=config.generated_dir,
        issues=len(result.diagnostics.issues),
    )
    return result


def generate_from_file(path: str | Path, config: ProjectConfig | None = None) -> GenerationResult:
    """Parse a model file and generate its client package.

    The result's diagnostics hold the parse diagnostics followed by the
    validation findings.

    Raises:
        ModelLoadError: If the file cannot be read.
        ParseFailure: If the source is structurally broken.
    """
    parsed = parse_model_file(path)
    result = generate_workflow(parsed.model, config)

    diagnostics = parsed.diagnostics
    diagnostics.merge(result.diagnostics)
    result.diagnostics = diagnostics
    return result
