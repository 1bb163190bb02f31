"""
BluePrint CLI Utilities.

Shared utility functions used across CLI modules.
"""

import logging
import platform
from pathlib import Path

import typer

from blueprint_notation._version import get_version
from blueprint_notation.core import ir
from blueprint_notation.core.errors import ParseError


def version_callback(value: bool) -> None:
    """Display version and environment information."""
    if value:
        typer.echo(f"BluePrint Notation version {get_version()}")
        typer.echo("")
        typer.echo("Environment:")
        typer.echo(
            f"  Python:        {platform.python_implementation()} {platform.python_version()}"
        )
        typer.echo(f"  Platform:      {platform.system()} {platform.release()}")
        raise typer.Exit()


def configure_logging(verbose: bool) -> None:
    """Configure root logging for a CLI run; library modules only create loggers."""
    logging.basicConfig(
        level=logging.DEBUG if verbose else logging.WARNING,
        format="%(asctime)s [%(levelname)s] %(name)s: %(message)s",
    )


def relative_path(path: Path | str, root: Path) -> Path:
    try:
        return Path(path).resolve().relative_to(root.resolve())
    except ValueError:
        return Path(path)


def print_human_diagnostics(
    errors: list[ir.Diagnostic], warnings: list[ir.Diagnostic], file_count: int
) -> None:
    """Print diagnostics in human-readable format."""
    if errors:
        typer.echo("Validation failed:\n", err=True)
        for err in errors:
            typer.echo(f"ERROR: {err.format()}", err=True)

    if warnings:
        typer.echo("Validation warnings:\n", err=False)
        for warn in warnings:
            label = "INFO" if warn.severity == ir.Severity.INFO else "WARNING"
            typer.echo(f"{label}: {warn.format()}", err=False)

    if not errors and not warnings:
        typer.echo(f"OK: {file_count} file(s) valid.")


def print_vscode_diagnostics(diagnostics: list[ir.Diagnostic], root: Path) -> None:
    """
    Print diagnostics in VS Code format: file:line:col: severity: message
    """
    for diag in diagnostics:
        if diag.location is None:
            typer.echo(f"::{diag.severity.value}: {diag.message} [{diag.code}]", err=True)
            continue
        path = relative_path(diag.location.file, root)
        typer.echo(
            f"{path}:{diag.location.line}:{diag.location.column}: "
            f"{diag.severity.value}: {diag.message} [{diag.code}]",
            err=True,
        )

    if not diagnostics:
        typer.echo("::notice: Validation successful")


def print_vscode_parse_error(error: ParseError, root: Path) -> None:
    """Print parse error in VS Code format with location info."""
    if error.context and error.context.file:
        rel_path = relative_path(error.context.file, root)
        line = error.context.line or 1
        col = error.context.column or 1
        typer.echo(f"{rel_path}:{line}:{col}: error: {error.message}", err=True)
    else:
        typer.echo(f"::error: {error.message}", err=True)
