"""Kanon command-line interface.

Commands:
    kanon lint PATH...   Lint source files and print violations
    kanon rules          List the available rules
    kanon init [PATH]    Write a default .kanon/config.json

Exit codes for ``lint``: 0 when clean, 1 when violations were found,
2 when a file could not be linted or the configuration is invalid.
"""

from __future__ import annotations

import json
from pathlib import Path

import click

from kanon import __version__
from kanon.cli._context import resolve_config
from kanon.config import find_config, write_default_config
from kanon.constants import DEFAULT_MAX_WORKERS
from kanon.engine import Linter, collect_source_files, lint_paths
from kanon.reporting import ReportFormat, Reporter
from kanon.rules import build_default_registry
from kanon.types import ConfigurationError, RuleCategory
from kanon.utils.logger import configure_logging, logger

EXIT_CLEAN = 0
EXIT_VIOLATIONS = 1
EXIT_ERROR = 2

CATEGORY_CHOICES = [c.value for c in RuleCategory]
FORMAT_CHOICES = [f.value for f in ReportFormat]


@click.group(invoke_without_command=True)
@click.version_option(version=__version__, prog_name="Kanon", message="%(prog)s v%(version)s")
@click.pass_context
def cli(ctx: click.Context) -> None:
    """Kanon - Rule-based source style linter.

    Checks spacing, naming, braces, blank lines, line length,
    documentation comments and whitespace against a configurable
    style guide.
    """
    if ctx.invoked_subcommand is None:
        click.echo(ctx.get_help())


@cli.command()
@click.argument("paths", nargs=-1, required=True, type=click.Path(exists=True))
@click.option("--config", "config_path", type=click.Path(dir_okay=False), help="Configuration file")
@click.option(
    "--format",
    "output_format",
    type=click.Choice(FORMAT_CHOICES),
    default=ReportFormat.TEXT.value,
    show_default=True,
    help="Report format",
)
@click.option(
    "--category",
    "categories",
    multiple=True,
    type=click.Choice(CATEGORY_CHOICES),
    help="Only run rules in this category (repeatable)",
)
@click.option("--disable", "disabled", multiple=True, help="Disable a rule by id (repeatable)")
@click.option("--max-line-length", type=click.IntRange(min=1), help="Override the line length limit")
@click.option(
    "--workers",
    type=click.IntRange(min=1),
    default=DEFAULT_MAX_WORKERS,
    show_default=True,
    help="Files linted in parallel",
)
@click.option("--verbose", "-v", is_flag=True, help="Show debug logging")
@click.pass_context
def lint(
    ctx: click.Context,
    paths: tuple[str, ...],
    config_path: str | None,
    output_format: str,
    categories: tuple[str, ...],
    disabled: tuple[str, ...],
    max_line_length: int | None,
    workers: int,
    verbose: bool,
) -> None:
    """Lint source files or directories."""
    configure_logging(verbose)

    try:
        config = resolve_config(paths, config_path, categories, disabled, max_line_length)
    except ConfigurationError as e:
        click.echo(e.get_formatted_message(), err=True)
        ctx.exit(EXIT_ERROR)

    files = [f for path in paths for f in collect_source_files(path)]
    if not files:
        logger.warning("No source files found")

    results = lint_paths(files, Linter(config), max_workers=workers)
    report = Reporter(output_format).report_files(results)

    if report.content:
        click.echo(report.content)

    if output_format == ReportFormat.TEXT.value:
        failed = sum(1 for r in results if r.error is not None)
        count = sum(len(r.violations) for r in results)
        summary = f"{count} violation(s) in {len(files)} file(s)"
        if failed:
            summary += f", {failed} file(s) could not be linted"
        click.echo(summary)

    if any(r.error is not None for r in results):
        ctx.exit(EXIT_ERROR)
    ctx.exit(EXIT_CLEAN if report.clean else EXIT_VIOLATIONS)


@cli.command()
@click.option("--category", type=click.Choice(CATEGORY_CHOICES), help="Only list this category")
@click.option("--json", "as_json", is_flag=True, help="Print rules as JSON")
def rules(category: str | None, as_json: bool) -> None:
    """List the available rules."""
    registry = build_default_registry()
    selected = registry.select([RuleCategory(category)] if category else None)

    if as_json:
        click.echo(json.dumps([r.to_dict() for r in selected], indent=2))
        return

    width = max((len(r.id) for r in selected), default=0)
    for r in selected:
        click.echo(f"{r.id.ljust(width)}  {r.severity.value:<7}  {r.description}")


@cli.command()
@click.argument("path", default=".", type=click.Path(file_okay=False))
@click.option("--force", is_flag=True, help="Overwrite an existing configuration")
def init(path: str, force: bool) -> None:
    """Write a default configuration for a project."""
    root = Path(path)
    existing = find_config(root)
    if existing is not None and not force:
        click.echo(f"Configuration already exists: {existing}")
        return

    config_file = write_default_config(root)
    click.echo(f"Kanon initialized: {config_file}")


if __name__ == "__main__":
    cli()
