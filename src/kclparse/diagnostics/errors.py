"""kclparse exception hierarchy with structured diagnostics.

All exceptions can store Diagnostic objects for rich error information.
Inside the grammar, failures are returned as values; these exceptions are
raised only at the parser facade boundary.

Python 3.13+. Zero external dependencies.
"""

from __future__ import annotations

from typing import TYPE_CHECKING

from .codes import Diagnostic

if TYPE_CHECKING:
    from kclparse.syntax.cursor import TraceEntry

__all__ = ["KclError", "KclSyntaxError", "UnparsedInputError"]


class KclError(Exception):
    """Base exception for all kclparse errors.

    Attributes:
        diagnostic: Structured diagnostic information (optional)
    """

    def __init__(self, message: str | Diagnostic) -> None:
        """Initialize KclError.

        Args:
            message: Error message string OR Diagnostic object
        """
        if isinstance(message, Diagnostic):
            self.diagnostic: Diagnostic | None = message
            super().__init__(message.message)
        else:
            self.diagnostic = None
            super().__init__(message)


class KclSyntaxError(KclError):
    """Source did not parse.

    Attributes:
        trace: Parse failure trace, innermost (deepest) production first,
            grammar root last
    """

    def __init__(
        self,
        message: str | Diagnostic,
        trace: tuple[TraceEntry, ...] = (),
    ) -> None:
        """Initialize KclSyntaxError.

        Args:
            message: Error message string OR Diagnostic object
            trace: Ordered trace entries, deepest first
        """
        super().__init__(message)
        self.trace = trace


class UnparsedInputError(KclSyntaxError):
    """Program parsed, but trailing source text was not consumed.

    Attributes:
        remaining: The unconsumed source text
        trace: Why the parser could not continue past the last function
            definition (deepest first); may be empty
    """

    def __init__(
        self,
        message: str | Diagnostic,
        remaining: str,
        trace: tuple[TraceEntry, ...] = (),
    ) -> None:
        """Initialize UnparsedInputError.

        Args:
            message: Error message string OR Diagnostic object
            remaining: The unconsumed source text
            trace: Trace of the failed attempt to parse a further definition
        """
        super().__init__(message, trace)
        self.remaining = remaining
