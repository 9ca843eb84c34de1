"""Code generation for workflow clients, types and implementations."""

from .client import ClientGenerator
from .generator import generate_from_file, generate_workflow, package_name_for, types_module_for
from .implementation import ImplementationGenerator
from .merge import MergeResult, MergeStrategy, merge_implementation
from .methods import required_methods
from .model_template import render_model_template
from .models import GeneratedFile, GenerationResult, MethodKind, MethodSpec, Parameter
from .type_mapping import TypeMapper, placeholder_value

__all__ = [
    "ClientGenerator",
    "ImplementationGenerator",
    "MergeResult",
    "MergeStrategy",
    "merge_implementation",
    "generate_from_file",
    "generate_workflow",
    "package_name_for",
    "types_module_for",
    "required_methods",
    "render_model_template",
    "GeneratedFile",
    "GenerationResult",
    "MethodKind",
    "MethodSpec",
    "Parameter",
    "TypeMapper",
    "placeholder_value",
]
