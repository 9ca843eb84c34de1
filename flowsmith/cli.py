"""Command-line interface for flowsmith."""

import logging
import sys
from pathlib import Path

import click
import structlog

from .codegen.generator import generate_from_file, types_module_for
from .codegen.implementation import ImplementationGenerator
from .codegen.merge import MergeStrategy
from .codegen.model_template import render_model_template
from .config import ConfigError, ProjectConfig, load_config
from .diagnostics import Diagnostic
from .naming import snake_case
from .output.formatter import format_diagnostic, format_report, source_excerpt
from .schema.errors import ModelLoadError, ParseFailure
from .schema.parser import read_source
from .validators.runner import validate_model_file


def configure_logging(verbose: bool = False) -> None:
    """Send library log events to stderr, at DEBUG when verbose."""
    structlog.configure(
        processors=[
            structlog.processors.add_log_level,
            structlog.dev.ConsoleRenderer(colors=False),
        ],
        wrapper_class=structlog.make_filtering_bound_logger(
            logging.DEBUG if verbose else logging.WARNING
        ),
        logger_factory=structlog.PrintLoggerFactory(file=sys.stderr),
    )


def _load_config(ctx: click.Context) -> ProjectConfig:
    try:
        return load_config(ctx.obj.get("config_path"))
    except ConfigError as e:
        click.echo(f"Configuration error: {e}", err=True)
        sys.exit(2)


def _report_parse_failure(e: ParseFailure) -> None:
    location = f" (line {e.line})" if e.line is not None else ""
    click.echo(f"Parse error{location}: {e}", err=True)
    for err in e.errors:
        click.echo(f"  - {err['loc']}: {err['msg']}", err=True)


def _echo_diagnostics(issues: list[Diagnostic], source: str) -> None:
    for issue in issues:
        click.echo(format_diagnostic(issue), err=True)
        excerpt = source_excerpt(source, issue.line)
        if excerpt:
            click.echo(f"  {excerpt}", err=True)


def _resolve_model_path(workflow: str, config: ProjectConfig) -> Path:
    """Treat WORKFLOW as a file path when it looks like one, else as a name."""
    candidate = Path(workflow)
    if candidate.exists() or candidate.suffix or len(candidate.parts) > 1:
        return candidate
    return config.model_path(snake_case(workflow))


@click.group()
@click.version_option()
@click.option("--verbose", is_flag=True, default=False, help="Show debug log output")
@click.option(
    "--config",
    "config_path",
    type=click.Path(dir_okay=False),
    envvar="FLOWSMITH_CONFIG",
    default=None,
    help="Path to flowsmith.yaml (defaults to FLOWSMITH_CONFIG, then ./flowsmith.yaml)",
)
@click.pass_context
def main(ctx: click.Context, verbose: bool, config_path: str | None):
    """flowsmith: generate workflow clients and implementations from process models."""
    configure_logging(verbose)
    ctx.ensure_object(dict)
    ctx.obj["config_path"] = config_path


@main.command()
@click.argument("name")
@click.pass_context
def new(ctx: click.Context, name: str):
    """Create a starter model for a new workflow.

    NAME is the workflow name; the model is written to
    <workflows_dir>/<snake_name><model_suffix>.

    Exit codes:
      0 - Model created
      1 - Model file already exists
      2 - Invalid name or configuration error
    """
    config = _load_config(ctx)

    snake_name = snake_case(name)
    if not snake_name:
        click.echo(f"Invalid workflow name: {name!r}", err=True)
        sys.exit(2)

    path = config.model_path(snake_name)
    if path.exists():
        click.echo(f"Workflow model already exists: {path}", err=True)
        sys.exit(1)

    try:
        content = render_model_template(name)
        path.parent.mkdir(parents=True, exist_ok=True)
        path.write_text(content, encoding="utf-8")
    except ValueError as e:
        click.echo(str(e), err=True)
        sys.exit(2)
    except OSError as e:
        click.echo(f"Cannot write {path}: {e}", err=True)
        sys.exit(2)

    click.echo(f"Created workflow model: {path}")
    sys.exit(0)


@main.command()
@click.argument("workflow")
@click.option(
    "--output-dir",
    default=None,
    help="Directory for the generated package (defaults to generated_dir)",
)
@click.option(
    "--create-impl",
    "impl_mode",
    flag_value="create",
    help="Create the implementation file; fails if it already exists",
)
@click.option(
    "--update-impl",
    "impl_mode",
    flag_value="update",
    help="Add missing methods to the implementation file, creating it if needed",
)
@click.option(
    "--impl-file",
    default=None,
    help="Implementation file path (defaults to implementation_file)",
)
@click.option(
    "--format",
    "output_format",
    type=click.Choice(["files", "text"]),
    default="files",
    help="Output format: 'files' writes to output-dir, 'text' prints to stdout",
)
@click.pass_context
def generate(
    ctx: click.Context,
    workflow: str,
    output_dir: str | None,
    impl_mode: str | None,
    impl_file: str | None,
    output_format: str,
):
    """Generate the client package for a workflow model.

    WORKFLOW is a model file path, or a workflow name looked up in the
    workflows directory.

    Exit codes:
      0 - Success
      2 - File, parse or configuration error
    """
    config = _load_config(ctx)
    model_path = _resolve_model_path(workflow, config)
    output_dir = output_dir or config.generated_dir

    try:
        result = generate_from_file(model_path, config)
        source = read_source(model_path)
    except ModelLoadError as e:
        click.echo(f"Error loading file: {e}", err=True)
        sys.exit(2)
    except ParseFailure as e:
        _report_parse_failure(e)
        sys.exit(2)

    _echo_diagnostics(result.diagnostics.issues, source)

    if output_format == "text":
        for generated in result.files:
            click.echo(f"# {'=' * 70}")
            click.echo(f"# {generated.path}")
            click.echo(f"# {'=' * 70}")
            click.echo()
            click.echo(generated.content)
    else:
        try:
            written = result.write(output_dir)
        except OSError as e:
            click.echo(f"Cannot write generated files: {e}", err=True)
            sys.exit(2)
        for path in written:
            click.echo(f"Generated: {path}")

    if impl_mode:
        generator = ImplementationGenerator(
            result.model,
            types_module=types_module_for(output_dir, result.package_name),
        )
        _write_implementation(
            generator, Path(impl_file or config.implementation_file), impl_mode
        )

    sys.exit(0)


def _write_implementation(generator: ImplementationGenerator, path: Path, mode: str) -> None:
    if path.exists() and mode == "create":
        click.echo(
            f"Implementation file already exists: {path} (use --update-impl to add new methods)",
            err=True,
        )
        sys.exit(2)

    try:
        existing = path.read_text(encoding="utf-8") if path.exists() else ""
        merged = generator.merge(existing)
        if merged.changed:
            path.parent.mkdir(parents=True, exist_ok=True)
            path.write_text(merged.text, encoding="utf-8")
    except (OSError, UnicodeDecodeError) as e:
        click.echo(f"Cannot update implementation file {path}: {e}", err=True)
        sys.exit(2)

    if merged.strategy == MergeStrategy.GENERATED:
        click.echo(f"Created implementation: {path}")
    elif merged.changed:
        click.echo(f"Updated implementation: {path} (added {', '.join(merged.added)})")
    else:
        click.echo(f"Implementation up to date: {path}")


@main.command()
@click.argument("model_file", type=click.Path(exists=True))
@click.option(
    "--format",
    "output_format",
    type=click.Choice(["text", "json"]),
    default="text",
    help="Output format",
)
@click.option(
    "--strict",
    is_flag=True,
    default=False,
    help="Treat warnings as errors",
)
def validate(model_file: str, output_format: str, strict: bool):
    """Validate a workflow model file.

    MODEL_FILE is the path to a model source file.

    Exit codes:
      0 - Validation passed
      1 - Validation failed (errors found)
      2 - File or parse error
    """
    try:
        report = validate_model_file(model_file)
        source = read_source(model_file)
    except ModelLoadError as e:
        click.echo(f"Error loading file: {e}", err=True)
        sys.exit(2)
    except ParseFailure as e:
        _report_parse_failure(e)
        sys.exit(2)

    click.echo(format_report(report, output_format, source=source))  # type: ignore

    if report.has_errors:
        sys.exit(1)
    elif strict and report.has_warnings:
        sys.exit(1)
    else:
        sys.exit(0)


if __name__ == "__main__":
    main()
