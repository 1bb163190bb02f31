"""
BluePrint Notation - parser, validator and formatter for BluePrint design documents.

BluePrint is a loosely structured notation for describing software designs
(services, data structures, algorithms, behaviour scenarios) before any code
is written. This package reads it into an immutable tree, checks it, and
writes it back in canonical form.
"""

from __future__ import annotations

from ._version import get_version

# Re-export commonly used types for convenience
from .core import ir
from .core.errors import BlueprintError, LinkError, ParseError, ValidationError
from .core.lint import validate
from .core.parser import parse, parse_file
from .core.serializer import dumps

__version__ = get_version()

__all__ = [
    "__version__",
    "ir",
    "parse",
    "parse_file",
    "dumps",
    "validate",
    "BlueprintError",
    "ParseError",
    "LinkError",
    "ValidationError",
]
