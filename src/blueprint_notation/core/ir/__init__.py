"""
BluePrint Intermediate Representation (IR) types.

The parser produces a Document tree built from these types; the validator
produces Diagnostics. All types are re-exported from this package.
"""

from .diagnostics import (
    Diagnostic,
    Severity,
)
from .location import SourceLocation
from .nodes import (
    ArrayValue,
    Block,
    CallExpr,
    Declaration,
    Document,
    DocumentKind,
    FileReference,
    Property,
    Scalar,
    ScalarKind,
    Scenario,
    ScenarioStyle,
    Value,
    iter_blocks,
    iter_references,
    iter_values,
)

__all__ = [
    # Locations
    "SourceLocation",
    # Tree nodes
    "ArrayValue",
    "Block",
    "CallExpr",
    "Declaration",
    "Document",
    "DocumentKind",
    "FileReference",
    "Property",
    "Scalar",
    "ScalarKind",
    "Scenario",
    "ScenarioStyle",
    "Value",
    # Traversal
    "iter_blocks",
    "iter_references",
    "iter_values",
    # Diagnostics
    "Diagnostic",
    "Severity",
]
