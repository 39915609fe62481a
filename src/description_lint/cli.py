"""Command-line interface for description_lint.

Provides the main entry point and subcommands for validating DESCRIPTION
files, listing their dependencies and authors, comparing versions, and
normalising formatting.
"""

import logging
from pathlib import Path
from typing import Annotated, Optional

import typer
from rich.console import Console
from rich.markup import escape
from rich.table import Table

from description_lint.config import ValidatorConfig, load_config
from description_lint.dependencies import DEPENDENCY_FIELDS
from description_lint.errors import DescriptionError
from description_lint.models import ValidationResult, Violation
from description_lint.reader import load, resolve_path, serialize
from description_lint.reporters import get_reporter
from description_lint.validator import check_file
from description_lint.version import compare_versions

app = typer.Typer(
    name="description-lint",
    help="Parse and validate DESCRIPTION package metadata files.",
    no_args_is_help=True,
)

console = Console()
err_console = Console(stderr=True)

# Configure logging
logging.basicConfig(
    level=logging.WARNING,
    format="%(levelname)s: %(message)s",
)
logger = logging.getLogger("description_lint")

FORMATS = ("console", "markdown", "json")

PathArgument = Annotated[
    Path,
    typer.Argument(
        help="DESCRIPTION file or package directory",
        exists=True,
        readable=True,
    ),
]


def _setup_logging(verbose: bool) -> None:
    """Configure logging level based on verbosity flag."""
    level = logging.DEBUG if verbose else logging.WARNING
    logging.getLogger("description_lint").setLevel(level)


def _load_config(config: Optional[Path]) -> ValidatorConfig:
    try:
        return load_config(config)
    except DescriptionError as e:
        err_console.print(f"[red]Configuration error:[/red] {escape(str(e))}")
        raise typer.Exit(code=1)


def _format_violation(violation: Violation) -> str:
    colour = "red" if violation.is_error else "yellow"
    location = ""
    if violation.field:
        location = violation.field
        if violation.line:
            location += f":{violation.line}"
        location = f" [dim]({escape(location)})[/dim]"
    return (
        f"  [{colour}]{violation.severity.value}[/{colour}] "
        f"[bold]{violation.rule_id}[/bold] {escape(violation.message)}{location}"
    )


def _print_result(result: ValidationResult) -> None:
    title = result.package or "unnamed package"
    version = result.record.get("Version")
    if version:
        title = f"{title} {version}"
    console.print(f"[bold]{escape(title)}[/bold]")

    for violation in result.violations:
        console.print(_format_violation(violation))

    summary = f"{len(result.errors)} errors, {len(result.warnings)} warnings"
    if result.ok:
        console.print(f"\n[green]Passed[/green] ({summary})")
    else:
        console.print(f"\n[red]Failed[/red] ({summary})")


@app.command()
def check(
    path: PathArgument,
    config: Annotated[
        Optional[Path],
        typer.Option(
            "--config",
            "-c",
            help="Configuration file (TOML)",
            exists=True,
            readable=True,
        ),
    ] = None,
    output_format: Annotated[
        str,
        typer.Option(
            "--format",
            "-f",
            help="Output format: console, markdown or json",
        ),
    ] = "console",
    output: Annotated[
        Optional[Path],
        typer.Option(
            "--output",
            "-o",
            help="Write the markdown or json report to this file instead of stdout",
        ),
    ] = None,
    strict: Annotated[
        bool,
        typer.Option(
            "--strict",
            help="Treat warnings as failures",
        ),
    ] = False,
    verbose: Annotated[
        bool,
        typer.Option(
            "--verbose",
            "-v",
            help="Enable verbose output",
        ),
    ] = False,
) -> None:
    """Validate a DESCRIPTION file.

    Exit codes:
        0 - No errors (and no warnings with --strict)
        1 - Errors found, or the file could not be parsed
    """
    _setup_logging(verbose)

    if output_format not in FORMATS:
        err_console.print(
            f"[red]Error:[/red] Unknown format '{escape(output_format)}'. "
            f"Valid formats: {', '.join(FORMATS)}"
        )
        raise typer.Exit(code=1)

    if output is not None and output_format == "console":
        err_console.print(
            "[red]Error:[/red] --output needs a file format; "
            "use --format markdown or --format json"
        )
        raise typer.Exit(code=1)

    settings = _load_config(config)

    try:
        result = check_file(path, settings)
    except (DescriptionError, FileNotFoundError) as e:
        err_console.print(
            f"[red]Error reading {escape(str(path))}:[/red] {escape(str(e))}"
        )
        raise typer.Exit(code=1)

    if output_format == "console":
        _print_result(result)
    else:
        reporter = get_reporter(output_format)
        if output:
            reporter.write(result, output)
            console.print(f"[green]Generated:[/green] {escape(str(output))}")
        else:
            typer.echo(reporter.render(result), nl=False)

    failed = not result.ok or (strict and bool(result.warnings))
    raise typer.Exit(code=1 if failed else 0)


@app.command()
def deps(
    path: PathArgument,
    field: Annotated[
        Optional[str],
        typer.Option(
            "--field",
            help="Only list dependencies from this field (e.g. Imports)",
        ),
    ] = None,
) -> None:
    """List the dependencies declared in a DESCRIPTION file."""
    if field is not None and field not in DEPENDENCY_FIELDS:
        err_console.print(
            f"[red]Error:[/red] Unknown dependency field '{escape(field)}'. "
            f"Valid fields: {', '.join(DEPENDENCY_FIELDS)}"
        )
        raise typer.Exit(code=1)

    try:
        result = check_file(path)
    except (DescriptionError, FileNotFoundError) as e:
        err_console.print(f"[red]Error:[/red] {escape(str(e))}")
        raise typer.Exit(code=1)

    specs = result.dependencies_in(field) if field else result.dependencies
    if not specs:
        console.print("[yellow]No dependencies declared[/yellow]")
        raise typer.Exit(code=0)

    table = Table(title="Dependencies")
    table.add_column("Field")
    table.add_column("Package", style="bold")
    table.add_column("Constraint")
    for spec in specs:
        table.add_row(spec.field or "", spec.name, escape(str(spec.constraint or "")))
    console.print(table)

    dependency_errors = [v for v in result.errors if v.rule_id.startswith("DEP-")]
    for violation in dependency_errors:
        err_console.print(_format_violation(violation))
    if dependency_errors:
        raise typer.Exit(code=1)


@app.command()
def authors(path: PathArgument) -> None:
    """List the authors and their roles."""
    try:
        result = check_file(path)
    except (DescriptionError, FileNotFoundError) as e:
        err_console.print(f"[red]Error:[/red] {escape(str(e))}")
        raise typer.Exit(code=1)

    author_errors = [v for v in result.errors if v.rule_id.startswith("AUTH-")]
    if result.authors:
        table = Table(title="Authors")
        table.add_column("Name", style="bold")
        table.add_column("Email")
        table.add_column("Roles")
        table.add_column("ORCID")
        for author in result.authors:
            table.add_row(
                escape(author.full_name),
                escape(author.email or ""),
                ", ".join(sorted(author.roles)),
                author.orcid or "",
            )
        console.print(table)
    else:
        console.print("[yellow]No authors declared[/yellow]")

    for violation in author_errors:
        err_console.print(_format_violation(violation))
    if author_errors:
        raise typer.Exit(code=1)


@app.command()
def compare(
    first: Annotated[str, typer.Argument(help="First version")],
    second: Annotated[str, typer.Argument(help="Second version")],
) -> None:
    """Compare two versions using DESCRIPTION version ordering."""
    try:
        order = compare_versions(first, second)
    except DescriptionError as e:
        err_console.print(f"[red]Error:[/red] {escape(str(e))}")
        raise typer.Exit(code=1)

    symbol = {-1: "<", 0: "==", 1: ">"}[order]
    console.print(f"{escape(first)} {symbol} {escape(second)}")


@app.command()
def fmt(
    path: PathArgument,
    check_only: Annotated[
        bool,
        typer.Option(
            "--check",
            help="Report whether the file would change without writing it",
        ),
    ] = False,
) -> None:
    """Rewrite a DESCRIPTION file in canonical form.

    Fields are written in their original order; folded values are
    re-indented with four spaces.
    """
    source = resolve_path(path)
    try:
        record = load(source)
    except (DescriptionError, FileNotFoundError) as e:
        err_console.print(f"[red]Error:[/red] {escape(str(e))}")
        raise typer.Exit(code=1)

    original = source.read_text(encoding="utf-8")
    formatted = serialize(record, canonical=True)

    if formatted == original:
        console.print(f"[green]Already formatted:[/green] {escape(str(source))}")
        raise typer.Exit(code=0)

    if check_only:
        console.print(f"[yellow]Would reformat:[/yellow] {escape(str(source))}")
        raise typer.Exit(code=1)

    source.write_text(formatted, encoding="utf-8")
    console.print(f"[green]Reformatted:[/green] {escape(str(source))}")


if __name__ == "__main__":
    app()
