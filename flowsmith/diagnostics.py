"""Diagnostics shared by the parser and the validators."""

from dataclasses import dataclass, field
from enum import Enum
from typing import Any


class Severity(str, Enum):
    """Severity level of a diagnostic."""

    ERROR = "error"
    WARNING = "warning"
    INFO = "info"


class Stage(str, Enum):
    """Pipeline stage that produced a diagnostic."""

    PARSE = "parse"
    VALIDATION = "validation"


@dataclass
class Diagnostic:
    """A single parse or validation finding."""

    code: str
    message: str
    severity: Severity
    node: str | None = None
    line: int | None = None
    details: dict[str, Any] = field(default_factory=dict)
    stage: Stage = Stage.VALIDATION

    @property
    def location(self) -> str:
        """Human-readable location, empty when unknown."""
        parts = []
        if self.node:
            parts.append(self.node)
        if self.line is not None:
            parts.append(f"line {self.line}")
        return ", ".join(parts)

    def __str__(self) -> str:
        location = f" [{self.location}]" if self.location else ""
        return f"{self.severity.value.upper()}: {self.code}{location} - {self.message}"


@dataclass
class DiagnosticReport:
    """Diagnostics collected while parsing or validating a model.

    Issues added through ``add_error`` and ``add_warning`` are tagged with
    the report's ``stage``; merged issues keep the stage they came with.
    """

    issues: list[Diagnostic] = field(default_factory=list)
    stage: Stage = Stage.VALIDATION

    @property
    def errors(self) -> list[Diagnostic]:
        """Get all error-level issues."""
        return [i for i in self.issues if i.severity == Severity.ERROR]

    @property
    def warnings(self) -> list[Diagnostic]:
        """Get all warning-level issues."""
        return [i for i in self.issues if i.severity == Severity.WARNING]

    @property
    def has_errors(self) -> bool:
        return len(self.errors) > 0

    @property
    def has_warnings(self) -> bool:
        return len(self.warnings) > 0

    @property
    def is_valid(self) -> bool:
        """Check if the model is valid (no errors)."""
        return not self.has_errors

    def by_code(self, code: str) -> list[Diagnostic]:
        """Get all issues with a given code."""
        return [i for i in self.issues if i.code == code]

    def by_stage(self, stage: Stage) -> list[Diagnostic]:
        """Get all issues produced by a given stage."""
        return [i for i in self.issues if i.stage == stage]

    def add_issue(self, issue: Diagnostic) -> None:
        self.issues.append(issue)

    def add_error(
        self,
        code: str,
        message: str,
        node: str | None = None,
        line: int | None = None,
        **details: Any,
    ) -> None:
        """Add an error issue."""
        self.issues.append(
            Diagnostic(
                code=code,
                message=message,
                severity=Severity.ERROR,
                node=node,
                line=line,
                details=details,
                stage=self.stage,
            )
        )

    def add_warning(
        self,
        code: str,
        message: str,
        node: str | None = None,
        line: int | None = None,
        **details: Any,
    ) -> None:
        """Add a warning issue."""
        self.issues.append(
            Diagnostic(
                code=code,
                message=message,
                severity=Severity.WARNING,
                node=node,
                line=line,
                details=details,
                stage=self.stage,
            )
        )

    def merge(self, other: "DiagnosticReport") -> None:
        """Merge another report into this one."""
        self.issues.extend(other.issues)
