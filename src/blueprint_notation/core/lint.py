from collections.abc import Callable, Iterable
from pathlib import Path

from . import ir
from .errors import make_validation_error
from .options import LintOptions
from .validator import (
    validate_array_items,
    validate_call_parameters,
    validate_duplicate_declarations,
    validate_duplicate_keys,
    validate_empty_blocks,
    validate_file_references,
    validate_scenarios,
    validate_type_names,
)

DocumentRule = Callable[[ir.Document], list[ir.Diagnostic]]

BASIC_RULES: list[DocumentRule] = [
    validate_duplicate_keys,
    validate_empty_blocks,
    validate_scenarios,
    validate_call_parameters,
]

EXTENDED_RULES: list[DocumentRule] = [
    validate_type_names,
    validate_array_items,
]


def _document_diagnostics(
    document: ir.Document, extended: bool, base_dir: Path | None
) -> list[ir.Diagnostic]:
    diagnostics: list[ir.Diagnostic] = []
    for rule in BASIC_RULES:
        diagnostics.extend(rule(document))
    diagnostics.extend(validate_file_references(document, base_dir))
    if extended:
        for rule in EXTENDED_RULES:
            diagnostics.extend(rule(document))
    return diagnostics


def _finish(diagnostics: list[ir.Diagnostic], disabled: Iterable[str]) -> list[ir.Diagnostic]:
    skip = {code.upper() for code in disabled}
    kept = [d for d in diagnostics if d.code not in skip]
    return sorted(kept, key=lambda d: d.sort_key())


def validate(
    tree: ir.Document,
    extended: bool = False,
    base_dir: Path | None = None,
    disabled: Iterable[str] = (),
) -> list[ir.Diagnostic]:
    """
    Run structural checks over a parsed document.

    BluePrint has no formal semantics, so the result is advisory: nothing
    here raises, and an empty list only means no rule found a problem.

    Basic checks:
    - Duplicate property keys and root declarations
    - Empty blocks
    - Incomplete or free-form scenarios
    - Absolute (or, with base_dir, missing) file references
    - Repeated call parameters

    Extended mode adds:
    - PascalCase block types
    - Repeated scalar array items

    Args:
        tree: Parsed document
        extended: If True, also run the extended rules
        base_dir: Project root; enables the missing-file check
        disabled: Rule codes to skip

    Returns:
        Diagnostics sorted by location
    """
    diagnostics = _document_diagnostics(tree, extended, base_dir)
    diagnostics.extend(validate_duplicate_declarations([tree]))
    return _finish(diagnostics, disabled)


def lint_documents(
    documents: list[ir.Document],
    options: LintOptions | None = None,
    base_dir: Path | None = None,
) -> list[ir.Diagnostic]:
    """
    Validate several documents as one project.

    Root declaration names must be unique across all documents.

    Args:
        documents: Parsed documents
        options: Lint options (extended rules, disabled codes)
        base_dir: Project root; enables the missing-file check

    Returns:
        Diagnostics for every document, sorted by location
    """
    options = options or LintOptions()
    diagnostics: list[ir.Diagnostic] = []
    for document in documents:
        diagnostics.extend(_document_diagnostics(document, options.extended, base_dir))
    diagnostics.extend(validate_duplicate_declarations(documents))
    return _finish(diagnostics, options.disabled)


def split_diagnostics(
    diagnostics: list[ir.Diagnostic],
) -> tuple[list[ir.Diagnostic], list[ir.Diagnostic]]:
    """
    Group diagnostics for reporting.

    Returns:
        Tuple of (errors, warnings); info diagnostics go with warnings
    """
    errors = [d for d in diagnostics if d.is_error]
    warnings = [d for d in diagnostics if not d.is_error]
    return errors, warnings


def raise_for_errors(diagnostics: list[ir.Diagnostic]) -> None:
    """
    Turn error diagnostics into a ValidationError.

    Raises:
        ValidationError: Pointing at the first error, listing all of them
    """
    errors, _ = split_diagnostics(diagnostics)
    if not errors:
        return

    message = "Validation failed:\n" + "\n".join(f"  - {d.format()}" for d in errors)
    raise make_validation_error(message, errors[0].location)
