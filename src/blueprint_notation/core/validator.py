"""
Structural validation rules for BluePrint documents.

BluePrint has no type system, so every rule here is advisory: rules return
Diagnostics and never raise. ``lint.py`` decides which rules run.

Rule codes:
    BP001  duplicate property key in a block              error
    BP002  duplicate root-level declaration name          error
    BP003  empty block                                    warning
    BP004  incomplete or free-form scenario               warning / info
    BP005  absolute or missing file reference             warning
    BP006  duplicate parameter name in a call             warning
    BP101  block type not PascalCase (extended)           warning
    BP102  duplicate scalar item in an array (extended)   warning
"""

import re
from collections import Counter
from pathlib import Path

from . import ir
from .references import candidate_paths

_PASCAL_CASE = re.compile(r"^[A-Z][A-Za-z0-9]*$")


def _diagnostic(
    code: str,
    severity: ir.Severity,
    message: str,
    location: ir.SourceLocation | None,
) -> ir.Diagnostic:
    return ir.Diagnostic(code=code, severity=severity, message=message, location=location)


def describe_block(block: ir.Block) -> str:
    header = block.header()
    return f"block '{header}'" if header else "anonymous block"


def validate_duplicate_keys(document: ir.Document) -> list[ir.Diagnostic]:
    """Property keys must be unique within a block's immediate scope."""
    diagnostics: list[ir.Diagnostic] = []

    for block in ir.iter_blocks(document):
        first_seen: dict[str, ir.Property] = {}
        for prop in block.properties:
            original = first_seen.get(prop.key)
            if original is None:
                first_seen[prop.key] = prop
                continue
            where = f" (first defined at line {original.location.line})" if original.location else ""
            diagnostics.append(
                _diagnostic(
                    "BP001",
                    ir.Severity.ERROR,
                    f"Duplicate property '{prop.key}' in {describe_block(block)}{where}",
                    prop.location,
                )
            )

    return diagnostics


def declaration_name(declaration: ir.Block | ir.FileReference) -> str | None:
    """Name a root declaration is known by (generic parameters dropped)."""
    return declaration.name


def validate_duplicate_declarations(documents: list[ir.Document]) -> list[ir.Diagnostic]:
    """Root-level block identifiers and reference names must not repeat."""
    diagnostics: list[ir.Diagnostic] = []
    first_seen: dict[str, ir.Block | ir.FileReference] = {}

    for document in documents:
        for declaration in document.declarations:
            name = declaration_name(declaration)
            if name is None:
                continue
            original = first_seen.get(name)
            if original is None:
                first_seen[name] = declaration
                continue
            where = f" (first declared at {original.location})" if original.location else ""
            diagnostics.append(
                _diagnostic(
                    "BP002",
                    ir.Severity.ERROR,
                    f"'{name}' is declared more than once{where}",
                    declaration.location,
                )
            )

    return diagnostics


def validate_empty_blocks(document: ir.Document) -> list[ir.Diagnostic]:
    """Flag blocks with no properties (method bodies are allowed to be empty)."""
    bodies = {
        id(value.body)
        for value in ir.iter_values(document)
        if isinstance(value, ir.CallExpr) and value.body is not None
    }

    return [
        _diagnostic(
            "BP003",
            ir.Severity.WARNING,
            f"Empty {describe_block(block)}",
            block.location,
        )
        for block in ir.iter_blocks(document)
        if not block.properties and id(block) not in bodies
    ]


def validate_scenarios(document: ir.Document) -> list[ir.Diagnostic]:
    """Scenarios should name a trigger and an outcome."""
    diagnostics: list[ir.Diagnostic] = []

    for value in ir.iter_values(document):
        if not isinstance(value, ir.Scenario):
            continue
        if value.style == ir.ScenarioStyle.FREEFORM:
            diagnostics.append(
                _diagnostic(
                    "BP004",
                    ir.Severity.INFO,
                    f"Scenario is not written as Given/When/Then: {value.text!r}",
                    value.location,
                )
            )
            continue
        missing = [part for part in ("when", "then") if not getattr(value, part)]
        if missing:
            diagnostics.append(
                _diagnostic(
                    "BP004",
                    ir.Severity.WARNING,
                    f"Scenario has no '{missing[0]}' part: {value.text!r}",
                    value.location,
                )
            )

    return diagnostics


def validate_file_references(
    document: ir.Document, base_dir: Path | None = None
) -> list[ir.Diagnostic]:
    """
    File references should be relative, and exist when a base directory is known.

    Args:
        document: Document to check
        base_dir: Project root; enables the existence check
    """
    diagnostics: list[ir.Diagnostic] = []
    origin = Path(document.file) if document.file != "<string>" else None

    for reference in ir.iter_references(document):
        if Path(reference.path).is_absolute():
            diagnostics.append(
                _diagnostic(
                    "BP005",
                    ir.Severity.WARNING,
                    f"File reference '{reference.name}' uses an absolute path: {reference.path}",
                    reference.location,
                )
            )
            continue

        if base_dir is None:
            continue

        if not any(path.is_file() for path in candidate_paths(reference, origin, base_dir)):
            diagnostics.append(
                _diagnostic(
                    "BP005",
                    ir.Severity.WARNING,
                    f"File reference '{reference.name}' points to a missing file: "
                    f"{reference.path}",
                    reference.location,
                )
            )

    return diagnostics


def validate_call_parameters(document: ir.Document) -> list[ir.Diagnostic]:
    """Parameter names of a signature must be distinct."""
    diagnostics: list[ir.Diagnostic] = []

    for value in ir.iter_values(document):
        if not isinstance(value, ir.CallExpr):
            continue
        counts = Counter(name for name in value.parameter_names if name)
        for name, count in counts.items():
            if count > 1:
                diagnostics.append(
                    _diagnostic(
                        "BP006",
                        ir.Severity.WARNING,
                        f"Parameter '{name}' appears {count} times in '{value.signature()}'",
                        value.location,
                    )
                )

    return diagnostics


# =============================================================================
# Extended rules
# =============================================================================


def validate_type_names(document: ir.Document) -> list[ir.Diagnostic]:
    """Block types are written in PascalCase (``DataStructure``)."""
    diagnostics: list[ir.Diagnostic] = []

    for block in ir.iter_blocks(document):
        if block.type_name is None:
            continue
        last_segment = re.split(r"[.-]", block.type_name)[-1]
        if not _PASCAL_CASE.match(last_segment):
            diagnostics.append(
                _diagnostic(
                    "BP101",
                    ir.Severity.WARNING,
                    f"Block type '{block.type_name}' should be PascalCase",
                    block.location,
                )
            )

    return diagnostics


def validate_array_items(document: ir.Document) -> list[ir.Diagnostic]:
    """Scalar items of an array should not repeat."""
    diagnostics: list[ir.Diagnostic] = []

    for value in ir.iter_values(document):
        if not isinstance(value, ir.ArrayValue):
            continue
        seen: set[tuple[str, str]] = set()
        for item in value.items:
            if not isinstance(item, ir.Scalar):
                continue
            key = (item.kind.value, item.raw or str(item.value))
            if key in seen:
                diagnostics.append(
                    _diagnostic(
                        "BP102",
                        ir.Severity.WARNING,
                        f"Duplicate array item {key[1]!r}",
                        item.location,
                    )
                )
            seen.add(key)

    return diagnostics
