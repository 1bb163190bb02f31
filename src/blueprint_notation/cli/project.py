"""
Project commands: parse, validate, lint, fmt, refs.
"""

import json
import logging
from pathlib import Path

import typer

from blueprint_notation.cli.utils import (
    print_human_diagnostics,
    print_vscode_diagnostics,
    print_vscode_parse_error,
    relative_path,
)
from blueprint_notation.cli_ui import console, render_document
from blueprint_notation.core import ir
from blueprint_notation.core.errors import BlueprintError, ParseError
from blueprint_notation.core.lint import lint_documents, split_diagnostics
from blueprint_notation.core.manifest import (
    MANIFEST_NAME,
    ProjectManifest,
    default_manifest,
    load_manifest,
)
from blueprint_notation.core.options import LintOptions
from blueprint_notation.core.parser import parse_file, parse_files
from blueprint_notation.core.project import load_project
from blueprint_notation.core.references import ReferenceResolver
from blueprint_notation.core.serializer import dumps

logger = logging.getLogger(__name__)


def _manifest_for(manifest: str | None) -> ProjectManifest:
    """
    Manifest for commands given explicit files.

    Uses --manifest when passed, else ./blueprint.toml if present, else defaults.
    """
    if manifest:
        return load_manifest(Path(manifest))
    if Path(MANIFEST_NAME).is_file():
        return load_manifest(Path(MANIFEST_NAME))
    return default_manifest()


def _load_inputs(
    files: list[Path] | None, manifest: str | None
) -> tuple[list[ir.Document], ProjectManifest, Path]:
    """
    Parse explicit files, or every file of the project described by the manifest.

    Returns:
        Tuple of (documents, manifest, project root)
    """
    if files:
        mf = _manifest_for(manifest)
        return parse_files(list(files), mf.parser), mf, Path.cwd()

    manifest_path = Path(manifest or MANIFEST_NAME).resolve()
    if not manifest_path.exists():
        typer.echo(
            f"No {MANIFEST_NAME} found at {manifest_path}. Pass files or --manifest.",
            err=True,
        )
        raise typer.Exit(code=1)

    root = manifest_path.parent
    documents, mf = load_project(root, manifest_path)
    return documents, mf, root


def _run_checks(
    files: list[Path] | None,
    manifest: str | None,
    format: str,
    extended: bool,
) -> None:
    root = Path.cwd()
    try:
        documents, mf, root = _load_inputs(files, manifest)
        options = LintOptions(
            extended=extended or mf.lint.extended,
            disabled=mf.lint.disabled,
        )
        diagnostics = lint_documents(documents, options, base_dir=root)
        errors, warnings = split_diagnostics(diagnostics)

        if format == "vscode":
            print_vscode_diagnostics(diagnostics, root)
        else:
            print_human_diagnostics(errors, warnings, len(documents))

        if errors:
            raise typer.Exit(code=1)

    except ParseError as e:
        if format == "vscode":
            print_vscode_parse_error(e, root)
        else:
            typer.echo(f"Parse error: {e}", err=True)
        raise typer.Exit(code=1)
    except BlueprintError as e:
        typer.echo(f"Error: {e}", err=True)
        raise typer.Exit(code=1)


def parse_command(
    file: Path = typer.Argument(
        ..., exists=True, dir_okay=False, help="BluePrint file (.bp or .bps)"
    ),
    format: str = typer.Option("tree", "--format", "-f", help="Output format: 'tree' or 'json'"),
    manifest: str | None = typer.Option(
        None, "--manifest", "-m", help="Path to blueprint.toml (parser settings)"
    ),
) -> None:
    """
    Parse a BluePrint file and print its structure.
    """
    try:
        document = parse_file(file, _manifest_for(manifest).parser)
    except ParseError as e:
        typer.echo(f"Parse error: {e}", err=True)
        raise typer.Exit(code=1)

    if format == "json":
        typer.echo(json.dumps(document.to_data(), indent=2))
    else:
        console.print(render_document(document))


def validate_command(
    files: list[Path] | None = typer.Argument(
        None, exists=True, dir_okay=False, help="Files to validate (default: project)"
    ),
    manifest: str | None = typer.Option(
        None, "--manifest", "-m", help="Path to blueprint.toml"
    ),
    format: str = typer.Option(
        "human", "--format", "-f", help="Output format: 'human' or 'vscode'"
    ),
) -> None:
    """
    Parse BluePrint files and run structural checks.

    Without FILES, validates every file under the module paths of blueprint.toml.
    """
    _run_checks(files, manifest, format, extended=False)


def lint_command(
    files: list[Path] | None = typer.Argument(
        None, exists=True, dir_okay=False, help="Files to lint (default: project)"
    ),
    manifest: str | None = typer.Option(None, "--manifest", "-m"),
    format: str = typer.Option("human", "--format", "-f", help="Output format"),
) -> None:
    """
    Run extended lint checks (validate + naming and duplicate-item warnings).
    """
    _run_checks(files, manifest, format, extended=True)


def fmt_command(
    files: list[Path] = typer.Argument(..., exists=True, dir_okay=False, help="Files to format"),
    check: bool = typer.Option(
        False, "--check", help="Only list files that would change; exit 1 if any"
    ),
    manifest: str | None = typer.Option(
        None, "--manifest", "-m", help="Path to blueprint.toml (parser settings)"
    ),
) -> None:
    """
    Rewrite BluePrint files in canonical form.

    Comments are not kept: the formatter writes the parsed tree back out.
    """
    options = _manifest_for(manifest).parser
    changed: list[Path] = []
    try:
        for path in files:
            original = path.read_text(encoding="utf-8")
            formatted = dumps(parse_file(path, options))
            if formatted == original:
                continue
            changed.append(path)
            if check:
                typer.echo(f"Would reformat {path}")
            else:
                path.write_text(formatted, encoding="utf-8")
                logger.debug("Rewrote %s", path)
                typer.echo(f"Formatted {path}")
    except ParseError as e:
        typer.echo(f"Parse error: {e}", err=True)
        raise typer.Exit(code=1)

    if check and changed:
        raise typer.Exit(code=1)
    if not changed:
        typer.echo(f"{len(files)} file(s) already formatted.")


def refs_command(
    file: Path = typer.Argument(
        ..., exists=True, dir_okay=False, help="BluePrint file whose references to resolve"
    ),
    base_dir: Path | None = typer.Option(
        None, "--base-dir", "-b", help="Fallback directory for relative paths"
    ),
    manifest: str | None = typer.Option(
        None, "--manifest", "-m", help="Path to blueprint.toml (parser settings)"
    ),
) -> None:
    """
    Resolve file references (`found in`) and list the files they load.
    """
    root = base_dir or file.parent
    try:
        options = _manifest_for(manifest).parser
        document = parse_file(file, options)
        resolved = ReferenceResolver(base_dir=root, options=options).resolve_all(document)
    except ParseError as e:
        typer.echo(f"Parse error: {e}", err=True)
        raise typer.Exit(code=1)
    except BlueprintError as e:
        typer.echo(f"Error: {e}", err=True)
        raise typer.Exit(code=1)

    if not resolved:
        typer.echo("No file references.")
        return

    for name, target in resolved.items():
        path = relative_path(target.file, root)
        typer.echo(f"{name} -> {path} ({len(target.declarations)} declarations)")
