"""Core BluePrint functionality: tree types, parser, serializer, validator, reference resolution."""

from . import ir
from .errors import (
    BlueprintError,
    ErrorContext,
    LinkError,
    ParseError,
    ValidationError,
)
from .lint import lint_documents, raise_for_errors, split_diagnostics, validate
from .manifest import ProjectManifest, load_manifest
from .options import LintOptions, ParserOptions
from .parser import parse, parse_file, parse_files
from .project import lint_project, load_project
from .references import ReferenceResolver
from .serializer import dumps

__all__ = [
    "ir",
    "BlueprintError",
    "ParseError",
    "LinkError",
    "ValidationError",
    "ErrorContext",
    "ParserOptions",
    "LintOptions",
    "parse",
    "parse_file",
    "parse_files",
    "dumps",
    "validate",
    "lint_documents",
    "split_diagnostics",
    "raise_for_errors",
    "ReferenceResolver",
    "ProjectManifest",
    "load_manifest",
    "load_project",
    "lint_project",
]
