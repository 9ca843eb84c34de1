"""flowsmith: code generation from workflow process-graph models."""

__version__ = "0.1.0"
