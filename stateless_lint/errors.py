# stateless_lint/errors.py
"""
Error Types for the Component Classification Engine

Error Hierarchy:
────────────────
┌─────────────────────────────────────────────────────────────────────────────┐
│  StatelessLintError (base)                                                  │
│  ├── AnalysisDegradation   - Non-fatal; always converted to the most       │
│  │   │                       conservative outcome inside the engine        │
│  │   ├── UnresolvedReference     → base type becomes UNKNOWN               │
│  │   ├── UnrecognizedSelfAccess  → USES_UNRESOLVABLE_SELF_MEMBER           │
│  │   └── MalformedDefinition     → candidate skipped                       │
│  ├── ConfigurationError    - Invalid options / unreadable config file      │
│  └── SourceReadError       - Input file could not be read                  │
└─────────────────────────────────────────────────────────────────────────────┘

Error Codes:
────────────
Codes follow ``SL-NNNN``:
  - 1000-1999: analysis degradations
  - 2000-2999: configuration errors
  - 3000-3999: input errors
"""

from __future__ import annotations

from enum import Enum, unique
from typing import Optional

from stateless_lint.ast_helper import SourceLocation


@unique
class ErrorCode(Enum):
    """Structured error codes."""

    UNRESOLVED_REFERENCE = 1001
    UNRECOGNIZED_SELF_ACCESS = 1002
    MALFORMED_DEFINITION = 1003

    INVALID_OPTION = 2001
    UNREADABLE_CONFIG = 2002

    UNREADABLE_SOURCE = 3001

    @property
    def code(self) -> str:
        return f"SL-{self.value:04d}"

    def __str__(self) -> str:
        return self.code


class StatelessLintError(Exception):
    """
    Base exception for all stateless-lint errors.

    Carries a structured code and, where known, the source location the
    error refers to.
    """

    default_code: ErrorCode = ErrorCode.INVALID_OPTION

    def __init__(
        self,
        message: str,
        code: Optional[ErrorCode] = None,
        location: Optional[SourceLocation] = None,
    ) -> None:
        super().__init__(message)
        self.message = message
        self.code = code or self.default_code
        self.location = location

    def __str__(self) -> str:
        where = f"{self.location}: " if self.location else ""
        return f"{where}{self.message} [{self.code}]"


class AnalysisDegradation(StatelessLintError):
    """A construct the engine cannot analyse; never fatal."""


class UnresolvedReference(AnalysisDegradation):
    """Base-type reference beyond the resolver's reach."""

    default_code = ErrorCode.UNRESOLVED_REFERENCE


class UnrecognizedSelfAccess(AnalysisDegradation):
    """Self access whose namespace root cannot be categorised."""

    default_code = ErrorCode.UNRECOGNIZED_SELF_ACCESS


class MalformedDefinition(AnalysisDegradation):
    """Factory-style call whose argument is not a member-list literal."""

    default_code = ErrorCode.MALFORMED_DEFINITION


class ConfigurationError(StatelessLintError):
    """Invalid configuration value or unreadable configuration file."""

    default_code = ErrorCode.INVALID_OPTION


class SourceReadError(StatelessLintError):
    """An input file could not be read."""

    default_code = ErrorCode.UNREADABLE_SOURCE


__all__ = [
    "ErrorCode",
    "StatelessLintError",
    "AnalysisDegradation",
    "UnresolvedReference",
    "UnrecognizedSelfAccess",
    "MalformedDefinition",
    "ConfigurationError",
    "SourceReadError",
]
