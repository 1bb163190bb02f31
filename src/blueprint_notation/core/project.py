"""
Project loading utilities.

Provides convenient functions for the common manifest -> discover -> parse
pipeline.
"""

from pathlib import Path

from . import ir
from .fileset import discover_blueprint_files
from .lint import lint_documents
from .manifest import MANIFEST_NAME, ProjectManifest, default_manifest, load_manifest
from .parser import parse_files


def load_project(
    project_dir: Path | str,
    manifest_path: Path | str | None = None,
) -> tuple[list[ir.Document], ProjectManifest]:
    """
    Load every BluePrint document of a project.

    Args:
        project_dir: Path to the project root directory
        manifest_path: Optional explicit path to blueprint.toml.
                      If not provided, looks for blueprint.toml in project_dir
                      and falls back to defaults when there is none.

    Returns:
        Tuple of (documents, manifest)

    Raises:
        FileNotFoundError: If an explicit manifest does not exist
        ParseError: If a file is not valid BluePrint

    Example:
        >>> from blueprint_notation.core import load_project
        >>> documents, manifest = load_project("./specs")
        >>> print(manifest.name, len(documents))
    """
    project_dir = Path(project_dir).resolve()

    if manifest_path is None:
        candidate = project_dir / MANIFEST_NAME
        manifest = load_manifest(candidate) if candidate.exists() else default_manifest()
    else:
        manifest = load_manifest(Path(manifest_path).resolve())

    files = discover_blueprint_files(project_dir, manifest)
    return parse_files(files, manifest.parser), manifest


def lint_project(project_dir: Path | str) -> list[ir.Diagnostic]:
    """Load a project and validate it with the manifest's lint settings."""
    project_dir = Path(project_dir).resolve()
    documents, manifest = load_project(project_dir)
    return lint_documents(documents, manifest.lint, base_dir=project_dir)
