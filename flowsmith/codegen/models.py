"""Data types shared by the code generators."""

from dataclasses import dataclass, field
from enum import Enum
from pathlib import Path

from ..diagnostics import DiagnosticReport
from ..schema.models import WorkflowModel


class MethodKind(str, Enum):
    """What a generated implementation method stands for."""

    NODE = "node"
    CONDITION = "condition"


@dataclass(frozen=True)
class Parameter:
    """A parameter of a generated method."""

    name: str
    annotation: str


@dataclass(frozen=True)
class MethodSpec:
    """A method the implementation class must provide."""

    name: str
    kind: MethodKind
    doc: str
    params: tuple[Parameter, ...] = ()
    returns: str = "None"
    placeholder: str | None = None  # None means the stub raises


@dataclass
class GeneratedFile:
    """A generated source file, relative to the output directory."""

    path: str
    content: str


@dataclass
class GenerationResult:
    """Everything produced for one workflow model."""

    workflow_name: str
    package_name: str
    model: WorkflowModel | None = None
    files: list[GeneratedFile] = field(default_factory=list)
    diagnostics: DiagnosticReport = field(default_factory=DiagnosticReport)

    def get_file(self, name: str) -> GeneratedFile | None:
        """Get a generated file by its base name."""
        for generated in self.files:
            if Path(generated.path).name == name:
                return generated
        return None

    def write(self, output_dir: str | Path) -> list[Path]:
        """Write the generated files under an output directory.

        Returns:
            The paths written, in generation order.
        """
        written = []
        for generated in self.files:
            target = Path(output_dir) / generated.path
            target.parent.mkdir(parents=True, exist_ok=True)
            target.write_text(generated.content, encoding="utf-8")
            written.append(target)
        return written
