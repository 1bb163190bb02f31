"""
BluePrint CLI Package.

- project.py: parse, validate, lint, fmt and refs commands
- utils.py: Shared utilities (version, logging, diagnostic output)
"""

import typer

from blueprint_notation.cli.project import (
    fmt_command,
    lint_command,
    parse_command,
    refs_command,
    validate_command,
)
from blueprint_notation.cli.utils import configure_logging, version_callback

app = typer.Typer(
    help="""BluePrint notation toolkit for software design documents

Commands:
  • parse       Show the structure of a file
  • validate    Structural checks (files or the blueprint.toml project)
  • lint        validate + extended checks
  • fmt         Rewrite files in canonical form
  • refs        Resolve `found in` file references
""",
    no_args_is_help=True,
)


@app.callback()
def main_callback(
    version: bool | None = typer.Option(
        None,
        "--version",
        "-V",
        callback=version_callback,
        is_eager=True,
        help="Show version and environment information",
    ),
    verbose: bool = typer.Option(False, "--verbose", "-v", help="Enable debug logging"),
) -> None:
    """BluePrint CLI main callback for global options."""
    configure_logging(verbose)


app.command(name="parse")(parse_command)
app.command(name="validate")(validate_command)
app.command(name="lint")(lint_command)
app.command(name="fmt")(fmt_command)
app.command(name="refs")(refs_command)


def main() -> None:
    app(standalone_mode=True)


__all__ = ["app", "main"]
