"""Schema-related exceptions."""


class ModelLoadError(Exception):
    """Raised when a model source file cannot be read."""

    def __init__(self, message: str, path: str | None = None):
        self.path = path
        super().__init__(message)


class ParseFailure(Exception):
    """Raised when a model source is structurally broken.

    Only the workflow descriptor and whole-model validation can fail a parse;
    problems in individual node or edge declarations are reported as
    diagnostics instead.
    """

    def __init__(
        self,
        message: str,
        line: int | None = None,
        errors: list[dict] | None = None,
    ):
        self.line = line
        self.errors = errors or []
        super().__init__(message)
