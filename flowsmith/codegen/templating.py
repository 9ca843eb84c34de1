"""Jinja2 environment for the code templates."""

from functools import lru_cache
from pathlib import Path

import jinja2

TEMPLATES_DIR = Path(__file__).parent / "templates"


def docstring_text(value: str | None) -> str:
    """Make text safe to place inside a triple-quoted docstring."""
    if not value:
        return ""
    text = " ".join(value.split())
    return text.replace("\\", "\\\\").replace('"', '\\"')


def string_literal(value: str | None) -> str:
    """Make text safe to place inside a double-quoted model string."""
    return (value or "").replace("\\", "\\\\").replace('"', '\\"')


@lru_cache(maxsize=1)
def get_environment() -> jinja2.Environment:
    """Get the shared template environment."""
    env = jinja2.Environment(
        loader=jinja2.FileSystemLoader(TEMPLATES_DIR),
        trim_blocks=True,
        lstrip_blocks=True,
        keep_trailing_newline=True,
        undefined=jinja2.StrictUndefined,
    )
    env.filters["docstring"] = docstring_text
    env.filters["string_literal"] = string_literal
    return env


def render(template_name: str, **context) -> str:
    """Render a template by file name."""
    return get_environment().get_template(template_name).render(**context)
