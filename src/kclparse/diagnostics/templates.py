"""Error message templates.

Centralized error message templates for testable, consistent error messages.
Python 3.13+. Zero external dependencies.
"""

from kclparse.constants import MAX_NUMBER_VALUE

from .codes import Diagnostic, DiagnosticCode, SourceSpan

__all__ = ["ErrorTemplate"]


class ErrorTemplate:
    """Centralized error message templates.

    All error messages are created here. NO f-strings in exception constructors!
    This provides:
        - Testable error messages
        - Consistent formatting
        - Documentation of all error cases
    """

    @staticmethod
    def unexpected_eof(position: int) -> Diagnostic:
        """Cursor read past the end of the source.

        Args:
            position: Character offset where EOF was encountered

        Returns:
            Diagnostic for UNEXPECTED_EOF
        """
        msg = f"Unexpected EOF at position {position}"
        return Diagnostic(code=DiagnosticCode.UNEXPECTED_EOF, message=msg)

    @staticmethod
    def expected_token(description: str, span: SourceSpan | None = None) -> Diagnostic:
        """Literal token or character class not found.

        Args:
            description: What was expected, e.g. "expected ')'"
            span: Location of the mismatch

        Returns:
            Diagnostic for EXPECTED_TOKEN
        """
        return Diagnostic(
            code=DiagnosticCode.EXPECTED_TOKEN,
            message=description,
            span=span,
            hint="Separators such as ' = ', ' -> ' and ' =>' must match exactly, "
            "including their single spaces",
        )

    @staticmethod
    def reserved_keyword(word: str) -> Diagnostic:
        """Identifier-shaped word is reserved by the grammar.

        Args:
            word: The offending keyword

        Returns:
            Diagnostic for RESERVED_KEYWORD
        """
        msg = (
            f"{word} is a reserved keyword and cannot be used as the name of "
            "a function, binding, type etc"
        )
        return Diagnostic(
            code=DiagnosticCode.RESERVED_KEYWORD,
            message=msg,
            hint="Choose a different name",
        )

    @staticmethod
    def number_overflow(digits: str) -> Diagnostic:
        """Number literal exceeds the unsigned 64-bit range.

        Args:
            digits: The literal with underscores removed

        Returns:
            Diagnostic for NUMBER_OVERFLOW
        """
        msg = f"Number literal {digits} exceeds the maximum value {MAX_NUMBER_VALUE}"
        return Diagnostic(
            code=DiagnosticCode.NUMBER_OVERFLOW,
            message=msg,
            hint="Numbers are unsigned 64-bit integers",
        )

    @staticmethod
    def empty_numeral(raw: str) -> Diagnostic:
        """Number literal made only of underscores.

        Args:
            raw: The literal as written in the source

        Returns:
            Diagnostic for EMPTY_NUMERAL
        """
        msg = f"Number literal '{raw}' contains no digits"
        return Diagnostic(
            code=DiagnosticCode.EMPTY_NUMERAL,
            message=msg,
            hint="Underscores separate digits; at least one digit is required",
        )

    @staticmethod
    def nesting_depth_exceeded(max_depth: int) -> Diagnostic:
        """Expression nesting exceeded the configured limit.

        Args:
            max_depth: The configured maximum nesting depth

        Returns:
            Diagnostic for NESTING_DEPTH_EXCEEDED
        """
        msg = f"Maximum nesting depth ({max_depth}) exceeded"
        return Diagnostic(
            code=DiagnosticCode.NESTING_DEPTH_EXCEEDED,
            message=msg,
            hint="Flatten deeply nested expressions with let-in bindings",
        )

    @staticmethod
    def unparsed_input(remaining: str, span: SourceSpan | None = None) -> Diagnostic:
        """Program parsed but source text remained.

        Args:
            remaining: The unconsumed source text
            span: Location where the unparsed text starts

        Returns:
            Diagnostic for UNPARSED_INPUT
        """
        msg = f"Part of your source code was not parsed: {remaining}"
        return Diagnostic(
            code=DiagnosticCode.UNPARSED_INPUT,
            message=msg,
            span=span,
            hint="Only function definitions may appear at the top level",
        )

    @staticmethod
    def source_too_large(size: int, max_size: int) -> Diagnostic:
        """Source exceeds the configured size limit.

        Args:
            size: Source size in characters
            max_size: Configured maximum

        Returns:
            Diagnostic for SOURCE_TOO_LARGE
        """
        msg = (
            f"Source size ({size:,} characters) exceeds maximum "
            f"({max_size:,} characters)"
        )
        return Diagnostic(
            code=DiagnosticCode.SOURCE_TOO_LARGE,
            message=msg,
            hint="Configure max_source_size in the KclParser constructor to increase limit",
        )

    @staticmethod
    def source_unreadable(location: str, reason: str) -> Diagnostic:
        """Source file or stream could not be read.

        Args:
            location: Path or stream name
            reason: Underlying error text

        Returns:
            Diagnostic for SOURCE_UNREADABLE
        """
        msg = f"could not read {location}: {reason}"
        return Diagnostic(code=DiagnosticCode.SOURCE_UNREADABLE, message=msg)

    @staticmethod
    def source_missing() -> Diagnostic:
        """Neither a file nor piped input was supplied.

        Returns:
            Diagnostic for SOURCE_MISSING
        """
        msg = (
            "You must either supply a source code file via --file, "
            "or pipe source code in via stdin"
        )
        return Diagnostic(code=DiagnosticCode.SOURCE_MISSING, message=msg)
