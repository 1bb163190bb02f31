"""
Diagnostic types produced by BluePrint validation.

Validation is advisory: diagnostics describe problems, they never stop a parse.
"""

from __future__ import annotations

from enum import StrEnum

from pydantic import BaseModel, ConfigDict

from .location import SourceLocation


class Severity(StrEnum):
    """Diagnostic severity levels."""

    ERROR = "error"
    WARNING = "warning"
    INFO = "info"


class Diagnostic(BaseModel):
    """
    A single validation finding.

    Attributes:
        code: Stable rule code (``BP001``)
        severity: Error, warning or info
        message: Human-readable description
        location: Where the problem was found, if known
    """

    code: str
    severity: Severity
    message: str
    location: SourceLocation | None = None

    model_config = ConfigDict(frozen=True)

    @property
    def is_error(self) -> bool:
        return self.severity == Severity.ERROR

    def sort_key(self) -> tuple[str, int, int, str]:
        if self.location is None:
            return ("", 0, 0, self.code)
        return (*self.location.sort_key(), self.code)

    def format(self) -> str:
        """Format as ``file:line:col: severity[code]: message``."""
        where = str(self.location) if self.location else "<unknown>"
        return f"{where}: {self.severity.value}[{self.code}]: {self.message}"

    def __str__(self) -> str:
        return self.format()
