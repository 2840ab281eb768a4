"""Main CLI entry point for Form Profile.

Reshapes profile documents stored as YAML or JSON from the command line.
"""

from pathlib import Path
from typing import Any, NoReturn
import logging
import sys

import click
import yaml
from rich.console import Console
from rich.logging import RichHandler
from rich.panel import Panel
from rich.table import Table

from form_profile import __version__
from form_profile.engine.validation_engine import ValidationEngine, ValidationResult, Results
from form_profile.profiles.loader import ProfileLoader, load_profile
from form_profile.profiles.projector import ProfileProjector

console = Console()


@click.group()
@click.version_option(version=__version__, prog_name="form-profile")
@click.option("--verbose", "-v", is_flag=True, help="Enable verbose output")
@click.pass_context
def cli(ctx: click.Context, verbose: bool) -> None:
    """Form Profile - Manage validation profiles.

    Derive narrower sub-profiles from a master profile, or extend one with
    new fields, before handing it to a validation engine.
    """
    ctx.ensure_object(dict)
    ctx.obj["verbose"] = verbose
    if verbose:
        logging.basicConfig(
            level=logging.DEBUG,
            format="%(message)s",
            handlers=[RichHandler(console=console, show_path=False)],
        )


@cli.command()
@click.argument("profile_path", type=click.Path(exists=True))
@click.pass_context
def show(ctx: click.Context, profile_path: str) -> None:
    """Print a profile document.

    PROFILE_PATH is the path to the YAML or JSON profile file.
    """
    try:
        projector = load_profile(profile_path)
        click.echo(ProfileLoader().dump(projector.profile), nl=False)
    except Exception as e:
        _fail(ctx, e)


@cli.command()
@click.argument("profile_path", type=click.Path(exists=True))
@click.argument("fields", nargs=-1, required=True)
@click.option("--output", "-o", type=click.Path(), help="Output file (stdout if not specified)")
@click.pass_context
def only(ctx: click.Context, profile_path: str, fields: tuple[str, ...], output: str | None) -> None:
    """Reduce a profile to the given fields.

    PROFILE_PATH is the profile file, FIELDS are the field names to keep.
    """
    try:
        projector = load_profile(profile_path).only(fields)
        _emit(projector, output)
    except Exception as e:
        _fail(ctx, e)


@cli.command()
@click.argument("profile_path", type=click.Path(exists=True))
@click.argument("fields", nargs=-1, required=True)
@click.option("--output", "-o", type=click.Path(), help="Output file (stdout if not specified)")
@click.pass_context
def remove(ctx: click.Context, profile_path: str, fields: tuple[str, ...], output: str | None) -> None:
    """Remove the given fields from a profile.

    PROFILE_PATH is the profile file, FIELDS are the field names to drop.
    """
    try:
        projector = load_profile(profile_path).remove(fields)
        _emit(projector, output)
    except Exception as e:
        _fail(ctx, e)


@cli.command()
@click.argument("profile_path", type=click.Path(exists=True))
@click.argument("field")
@click.option("--required", "-r", is_flag=True, help="Declare the field as required")
@click.option("--default", "-d", "default", help="Default value")
@click.option("--filter", "-f", "filters", multiple=True, help="Filter name (repeatable)")
@click.option("--constraint", "-c", help="Regular expression the value must match")
@click.option("--depends-on", multiple=True, help="Field required alongside this one (repeatable)")
@click.option("--message", "-m", help="Message shown when the constraint fails")
@click.option("--output", "-o", type=click.Path(), help="Output file (stdout if not specified)")
@click.pass_context
def add(
    ctx: click.Context,
    profile_path: str,
    field: str,
    required: bool,
    default: str | None,
    filters: tuple[str, ...],
    constraint: str | None,
    depends_on: tuple[str, ...],
    message: str | None,
    output: str | None,
) -> None:
    """Add a field to a profile.

    PROFILE_PATH is the profile file, FIELD is the new field name.
    """
    options: dict[str, Any] = {"required": required}
    if default is not None:
        options["default"] = default
    if filters:
        options["filters"] = list(filters)
    if constraint is not None:
        options["constraints"] = constraint
    if depends_on:
        options["dependencies"] = list(depends_on)
    if message is not None:
        options["msgs"] = {field: message}

    try:
        projector = load_profile(profile_path).add(field, **options)
        _emit(projector, output)
    except Exception as e:
        _fail(ctx, e)


@cli.command()
@click.argument("profile_path", type=click.Path(exists=True))
@click.pass_context
def validate(ctx: click.Context, profile_path: str) -> None:
    """Check the shape of a profile file.

    PROFILE_PATH is the path to the profile file to validate.
    """
    try:
        document = yaml.safe_load(Path(profile_path).read_text(encoding="utf-8")) or {}
    except yaml.YAMLError as e:
        console.print(f"[red]Error loading file: {e}[/red]")
        sys.exit(1)

    result = ValidationEngine().validate_document(document)
    _print_validation_result(profile_path, result)
    if not result.valid:
        sys.exit(1)


@cli.command()
@click.argument("profile_path", type=click.Path(exists=True))
@click.argument("data_path", type=click.Path(exists=True))
@click.option("--only", "only_fields", multiple=True, help="Reduce the profile to these fields first")
@click.pass_context
def check(ctx: click.Context, profile_path: str, data_path: str, only_fields: tuple[str, ...]) -> None:
    """Check a data file against a profile.

    PROFILE_PATH is the profile file, DATA_PATH is a YAML or JSON mapping of
    field names to submitted values.
    """
    try:
        projector = load_profile(profile_path)
        if only_fields:
            projector.only(only_fields)

        data = yaml.safe_load(Path(data_path).read_text(encoding="utf-8")) or {}
        results = projector.check(data)
    except Exception as e:
        _fail(ctx, e)

    _print_results(results)
    if not results.success():
        sys.exit(1)


def _fail(ctx: click.Context, error: Exception) -> NoReturn:
    """Report an error and exit non-zero."""
    console.print(f"[red]Error: {error}[/red]")
    if ctx.obj.get("verbose", False):
        import traceback
        console.print(traceback.format_exc())
    sys.exit(1)


def _emit(projector: ProfileProjector, output: str | None) -> None:
    """Write the projected profile to a file, or print it."""
    loader = ProfileLoader()
    if output:
        loader.save_file(projector.profile, output)
        console.print(f"[green]Wrote profile to {output}[/green]")
    else:
        click.echo(loader.dump(projector.profile), nl=False)


def _print_results(results: Results) -> None:
    """Print a check outcome."""
    table = Table(title="Check Results")
    table.add_column("Field", style="cyan")
    table.add_column("Status")
    table.add_column("Value / Message")

    for name, value in results.valid().items():
        status = "[yellow]unknown[/yellow]" if name in results.unknown() else "[green]valid[/green]"
        table.add_row(name, status, str(value))
    for name in results.missing():
        table.add_row(name, "[red]missing[/red]", results.msgs().get(name, ""))
    for name in results.invalid():
        table.add_row(name, "[red]invalid[/red]", results.msgs().get(name, ""))

    console.print(table)
    if results.success():
        console.print(Panel.fit("[green]All fields passed[/green]", title="Check Complete"))
    else:
        console.print(Panel.fit(
            f"[red]{len(results.missing())} missing, {len(results.invalid())} invalid[/red]",
            title="Check Failed",
        ))


def _print_validation_result(name: str, result: ValidationResult) -> None:
    """Print validation results."""
    status = "[green]VALID[/green]" if result.valid else "[red]INVALID[/red]"
    console.print(f"\n{name}: {status}")

    if result.issues:
        for issue in result.issues:
            color = {
                "error": "red",
                "warning": "yellow",
                "info": "blue",
            }.get(issue.severity.value, "white")

            console.print(f"  [{color}]{issue.severity.value.upper()}[/{color}]: {issue.message}")
            if issue.path:
                console.print(f"    Path: {issue.path}")


if __name__ == "__main__":
    cli()
