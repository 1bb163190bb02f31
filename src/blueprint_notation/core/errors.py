"""
Error types for BluePrint notation parsing, reference resolution, and validation.

Parse errors carry the source lines around the failure so the CLI can show
where a document broke; link and validation errors point at the tree node
(a file reference or a diagnostic) that caused them.
"""

from dataclasses import dataclass
from pathlib import Path
from typing import Optional

from .ir.location import SourceLocation

SNIPPET_CONTEXT_LINES = 2


class BlueprintError(Exception):
    """Base exception for all BluePrint errors."""

    def __init__(self, message: str, context: Optional["ErrorContext"] = None):
        self.message = message
        self.context = context
        super().__init__(self._format_message())

    def _format_message(self) -> str:
        """Format error message with context if available."""
        if self.context:
            return f"{self.context.format()}\n{self.message}"
        return self.message


class ParseError(BlueprintError):
    """
    Raised when BluePrint text is not syntactically valid.

    Examples:
    - Unbalanced braces or brackets
    - Property without a value
    - Root-level block without a required identifier
    - Unterminated string literal
    - Nesting deeper than the parser can follow
    """

    pass


class LinkError(BlueprintError):
    """
    Raised when a file reference cannot be resolved.

    Examples:
    - Referenced file does not exist
    - Circular chain of `found in` references
    """

    pass


class ValidationError(BlueprintError):
    """
    Raised when a caller asks for error diagnostics to become an exception.

    Validation itself is advisory and returns diagnostics; see
    ``lint.raise_for_errors``.
    """

    pass


@dataclass
class ErrorContext:
    """
    Where in a BluePrint document an error occurred.

    Attributes:
        file: Path to the document
        line: Line number (1-indexed)
        column: Column number (1-indexed)
        snippet: Source lines around ``line``, if the text was available
        snippet_start: Line number of the first snippet line
    """

    file: Path
    line: int
    column: int
    snippet: str | None = None
    snippet_start: int = 1

    @classmethod
    def from_source(cls, file: Path, line: int, column: int, source: str) -> "ErrorContext":
        """Build a context with the lines around ``line`` cut out of ``source``."""
        return cls(
            file=file,
            line=line,
            column=column,
            snippet=extract_snippet(source, line),
            snippet_start=max(1, line - SNIPPET_CONTEXT_LINES),
        )

    @classmethod
    def from_location(cls, location: SourceLocation) -> "ErrorContext":
        """Build a context pointing at a parsed tree node."""
        return cls(file=Path(location.file), line=location.line, column=location.column)

    def format(self) -> str:
        """
        Format error context as a human-readable string.

        Returns:
            ``specs/auth.bp:10:5``, followed by the numbered snippet if any
        """
        location = f"{self.file}:{self.line}:{self.column}"
        if self.snippet:
            return f"{location}\n{self._format_snippet()}"
        return location

    def _format_snippet(self) -> str:
        """Number the snippet lines and put a ``^^^`` marker under the column."""
        if not self.snippet:
            return ""

        formatted = []
        for line_num, line in enumerate(self.snippet.split("\n"), start=self.snippet_start):
            prefix = f"{line_num:4d} | "
            formatted.append(prefix + line)
            if line_num == self.line:
                formatted.append(" " * (len(prefix) + self.column - 1) + "^^^")

        return "\n".join(formatted)


def extract_snippet(text: str, line: int, context: int = SNIPPET_CONTEXT_LINES) -> str:
    """
    Cut the lines around ``line`` out of ``text``.

    Args:
        text: Full source text
        line: Line number (1-indexed) the error points at
        context: Lines to keep before and after

    Returns:
        The snippet, starting at ``max(1, line - context)``
    """
    lines = text.split("\n")
    start = max(1, line - context)
    end = min(len(lines), line + context)
    return "\n".join(lines[start - 1 : end])


def make_parse_error(
    message: str,
    file: Path,
    line: int,
    column: int,
    source: str | None = None,
) -> ParseError:
    """
    Helper to create a ParseError with context.

    Args:
        message: Error description
        file: Source file path
        line: Line number (1-indexed)
        column: Column number (1-indexed)
        source: Full document text; adds a snippet around ``line``

    Returns:
        ParseError with context attached
    """
    if source:
        context = ErrorContext.from_source(file, line, column, source)
    else:
        context = ErrorContext(file=file, line=line, column=column)
    return ParseError(message, context)


def make_link_error(message: str, location: SourceLocation | None = None) -> LinkError:
    """Helper to create a LinkError pointing at the file reference behind it."""
    if location is None:
        return LinkError(message)
    return LinkError(message, ErrorContext.from_location(location))


def make_validation_error(
    message: str, location: SourceLocation | None = None
) -> ValidationError:
    """Helper to create a ValidationError pointing at the first failing node."""
    if location is None:
        return ValidationError(message)
    return ValidationError(message, ErrorContext.from_location(location))
