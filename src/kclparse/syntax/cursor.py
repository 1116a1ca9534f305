"""Immutable cursor infrastructure for type-safe parsing.

Implements the immutable cursor pattern for backtracking parsers.
Python 3.13+. Zero external dependencies.

Design Philosophy:
    - Cursor is immutable (frozen dataclass)
    - EOF is a state (is_eof), not a return value
    - Every advance() returns NEW cursor, so a failed alternative can never
      leave partially consumed input behind
    - Line and column travel with the cursor, so diagnostics never rescan
      the source

Line Ending Support:
    - LF (\\n) is the line delimiter. CRLF works because the \\n is present;
      the \\r counts as an ordinary column.

Pattern Reference:
    - Rust nom parser combinator library (VerboseError context chains)
    - Haskell Parsec
"""

from dataclasses import dataclass

from kclparse.diagnostics import Diagnostic, DiagnosticCode, ErrorTemplate, SourceSpan
from kclparse.enums import TraceKind

__all__ = ["Cursor", "ParseError", "ParseResult", "TraceEntry"]

# Whitespace skipped by skip_whitespace() (multispace: spaces, tabs, line ends).
_MULTISPACE: frozenset[str] = frozenset(" \t\r\n")


@dataclass(frozen=True, slots=True, eq=False)
class Cursor:
    """Immutable source position tracker.

    Key Design Decisions:
        1. Frozen dataclass - Immutability enforced by Python
        2. Slots - Memory efficiency (one cursor per grammar step)
        3. Whole source plus offset - sub-views never copy the source
        4. Equality by offset only - content is implied by the source

    Example:
        >>> cursor = Cursor("a\\nbc")
        >>> cursor.line, cursor.column
        (1, 1)
        >>> moved = cursor.advance(3)
        >>> moved.current, moved.line, moved.column
        ('c', 2, 2)
        >>> cursor.current  # Original unchanged (immutability)
        'a'
    """

    source: str
    pos: int = 0
    line: int = 1
    column: int = 1

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, Cursor):
            return NotImplemented
        return self.pos == other.pos

    def __hash__(self) -> int:
        return hash(self.pos)

    @property
    def is_eof(self) -> bool:
        """Check if at end of input."""
        return self.pos >= len(self.source)

    @property
    def current(self) -> str:
        """Get current character.

        Raises:
            EOFError: If at end of input
        """
        if self.is_eof:
            diagnostic = ErrorTemplate.unexpected_eof(self.pos)
            raise EOFError(diagnostic.message)
        return self.source[self.pos]

    @property
    def remaining(self) -> str:
        """Source text from the current position to the end."""
        return self.source[self.pos :]

    def peek(self, offset: int = 0) -> str | None:
        """Peek at character with offset without advancing.

        Returns:
            Character at position + offset, or None if beyond EOF
        """
        target_pos = self.pos + offset
        if target_pos >= len(self.source):
            return None
        return self.source[target_pos]

    def startswith(self, prefix: str) -> bool:
        """Check whether the remaining input begins with prefix."""
        return self.source.startswith(prefix, self.pos)

    def advance(self, count: int = 1) -> "Cursor":
        """Return new cursor advanced by count characters.

        Consuming a newline increments the line and resets the column to 1;
        any other character increments the column. Advancing past the end
        clamps at EOF.

        Example:
            >>> cursor = Cursor("ab\\ncd")
            >>> cursor.advance(4).line, cursor.advance(4).column
            (2, 2)
        """
        new_pos = min(self.pos + count, len(self.source))
        consumed = new_pos - self.pos
        if consumed <= 0:
            return self

        newlines = self.source.count("\n", self.pos, new_pos)
        if newlines:
            last_newline = self.source.rfind("\n", self.pos, new_pos)
            return Cursor(self.source, new_pos, self.line + newlines, new_pos - last_newline)
        return Cursor(self.source, new_pos, self.line, self.column + consumed)

    def slice_to(self, end_pos: int) -> str:
        """Extract source slice from current position to end_pos."""
        return self.source[self.pos : end_pos]

    def skip_whitespace(self) -> "Cursor":
        """Skip spaces, tabs, carriage returns and newlines.

        Returns:
            New cursor advanced past all consecutive whitespace characters
        """
        end = self.pos
        source = self.source
        while end < len(source) and source[end] in _MULTISPACE:
            end += 1
        return self.advance(end - self.pos)

    def to_span(self, length: int = 0) -> SourceSpan:
        """Build a SourceSpan starting at this cursor."""
        return SourceSpan(
            start=self.pos,
            end=min(self.pos + length, len(self.source)),
            line=self.line,
            column=self.column,
        )


@dataclass(frozen=True, slots=True)
class TraceEntry:
    """One step of a parse failure trace.

    Attributes:
        position: Cursor where the failing production (or token match) began
        kind: Literal character, literal string, character class or context
        label: The expected token, or the context name
        code: Diagnostic code for entries that classify the failure
    """

    position: Cursor
    kind: TraceKind
    label: str
    code: DiagnosticCode | None = None

    def describe(self) -> str:
        """Human-readable description of this entry.

        Example:
            >>> TraceEntry(Cursor("x"), TraceKind.CHAR, "(").describe()
            "expected '('"
        """
        match self.kind:
            case TraceKind.CHAR | TraceKind.TAG:
                return f"expected '{self.label}'"
            case TraceKind.MATCHER:
                return f"expected {self.label}"
            case TraceKind.CONTEXT:
                return self.label


@dataclass(frozen=True, slots=True)
class ParseResult[T]:
    """Parser result containing parsed value and new cursor position.

    Every production has the signature:
        def parse_foo(cursor: Cursor, ctx: ParseContext) -> ParseResult[Foo] | ParseError

    Example:
        >>> cursor = Cursor("hello")
        >>> result = ParseResult("h", cursor.advance())
        >>> result.cursor.current
        'e'
    """

    value: T
    cursor: Cursor


@dataclass(frozen=True, slots=True)
class ParseError:
    """Parse failure carrying a deepest-first trace.

    A recoverable failure (fatal=False) lets alternation try the next
    candidate and lets repetition stop. A fatal failure comes from a
    production that had already committed past an unambiguous marker; it
    propagates unchanged through alternation and repetition.

    Attributes:
        trace: Entries ordered from the innermost failing match to the
            outermost production that was being attempted
        fatal: Whether alternatives may still be tried
    """

    trace: tuple[TraceEntry, ...]
    fatal: bool = False

    @staticmethod
    def at(
        cursor: Cursor,
        kind: TraceKind,
        label: str,
        *,
        code: DiagnosticCode | None = None,
        fatal: bool = False,
    ) -> "ParseError":
        """Create a failure with a single trace entry.

        Example:
            >>> error = ParseError.at(Cursor("x"), TraceKind.CHAR, "(")
            >>> error.deepest.describe()
            "expected '('"
        """
        return ParseError((TraceEntry(cursor, kind, label, code),), fatal)

    @property
    def deepest(self) -> TraceEntry:
        """The innermost entry: where the parser actually gave up."""
        return self.trace[0]

    @property
    def position(self) -> Cursor:
        """Cursor of the innermost entry."""
        return self.trace[0].position

    def with_context(self, cursor: Cursor, label: str) -> "ParseError":
        """Return a copy with an outer context entry appended."""
        entry = TraceEntry(cursor, TraceKind.CONTEXT, label)
        return ParseError((*self.trace, entry), self.fatal)

    def as_fatal(self) -> "ParseError":
        """Return a copy that alternation will not recover from."""
        if self.fatal:
            return self
        return ParseError(self.trace, fatal=True)

    def as_recoverable(self) -> "ParseError":
        """Return a copy that alternation may recover from."""
        if not self.fatal:
            return self
        return ParseError(self.trace, fatal=False)

    def to_diagnostic(self) -> Diagnostic:
        """Summarize the failure as a single Diagnostic.

        The code is taken from the innermost entry that carries one; plain
        token mismatches map to EXPECTED_TOKEN.
        """
        span = self.position.to_span()
        for entry in self.trace:
            if entry.code is not None:
                return Diagnostic(code=entry.code, message=entry.label, span=span)
        return ErrorTemplate.expected_token(self.deepest.describe(), span)

    def format_error(self) -> str:
        """Format the innermost failure with line:column.

        Example:
            >>> error = ParseError.at(Cursor("ab\\ncd").advance(4), TraceKind.CHAR, ")")
            >>> error.format_error()
            "2:2: expected ')'"
        """
        position = self.position
        return f"{position.line}:{position.column}: {self.deepest.describe()}"

    def source_excerpt(self, context_lines: int = 2) -> str:
        """Show the lines around the innermost failure and a caret under it.

        Example:
            >>> source = "f = ( -> T) => 1\\ng = (x T -> T) => x"
            >>> error = ParseError.at(Cursor(source).advance(23), TraceKind.TAG, ": ")
            >>> print(error.source_excerpt())
               1 | f = ( -> T) => 1
               2 | g = (x T -> T) => x
                 |       ^
        """
        position = self.position
        line, col = position.line, position.column
        lines = position.source.split("\n")

        result_lines: list[str] = []
        start_line = max(1, line - context_lines)
        end_line = min(len(lines), line + context_lines)

        for i in range(start_line, end_line + 1):
            line_num_str = f"{i:4} | "
            result_lines.append(line_num_str + lines[i - 1])

            if i == line:
                pointer = " " * (len(line_num_str) - 2) + "| " + " " * (col - 1) + "^"
                result_lines.append(pointer)

        return "\n".join(result_lines)
