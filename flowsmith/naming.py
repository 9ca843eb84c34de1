"""Identifier helpers shared by the validators and the generators."""

import keyword
import re

UNKNOWN_IDENTIFIER = "unknown"


def is_identifier(name: str | None) -> bool:
    """Check if a name can be used verbatim as a Python identifier."""
    return bool(name) and name.isidentifier() and not keyword.iskeyword(name)


def to_identifier(name: str | None) -> str:
    """Turn a node id, condition or input name into a Python identifier.

    Valid identifiers are returned unchanged. Otherwise runs of other
    characters become ``_``, a leading digit gets a ``_`` prefix and
    keywords get a ``_`` suffix.
    """
    if is_identifier(name):
        return name
    if not name:
        return UNKNOWN_IDENTIFIER

    cleaned = re.sub(r"\W+", "_", name.strip()).strip("_") or UNKNOWN_IDENTIFIER
    if cleaned[0].isdigit():
        cleaned = f"_{cleaned}"
    if keyword.iskeyword(cleaned):
        cleaned = f"{cleaned}_"
    return cleaned


def snake_case(name: str) -> str:
    """Convert a workflow name to snake_case for file and package names."""
    s1 = re.sub(r"(.)([A-Z][a-z]+)", r"\1_\2", name.strip())
    s2 = re.sub(r"([a-z0-9])([A-Z])", r"\1_\2", s1)
    return re.sub(r"[^A-Za-z0-9]+", "_", s2).strip("_").lower()
