"""Parser combinators: sequencing, alternation, repetition and context.

Every parser is a plain function ``(cursor, ctx) -> ParseResult[T] | ParseError``.
Cursors are immutable, so backtracking is free: an alternative that fails
simply drops the cursors it produced and the next alternative starts from
the original one.

Failure Semantics (mirrors nom's Error/Failure split):
    - Recoverable failures let ``alt`` try the next candidate and make
      repetition (``many0``, ``many1``, ``separated_list0``) stop.
    - Fatal failures (produced by ``cut``) propagate through everything.

Context Accumulation:
    ``context(label, parser)`` and the ``@production(label)`` decorator append
    a CONTEXT entry to a failure's trace. Because inner productions fail
    first, the finished trace reads deepest-first, grammar root last.
"""

from collections.abc import Callable
from dataclasses import dataclass
from functools import wraps
from typing import Any

from kclparse.constants import MAX_EXPRESSION_DEPTH
from kclparse.enums import TraceKind
from kclparse.syntax.cursor import Cursor, ParseError, ParseResult

__all__ = [
    "ParseContext",
    "Parser",
    "alt",
    "bracketed",
    "char",
    "context",
    "cut",
    "delimited",
    "many0",
    "many1",
    "map_value",
    "preceded",
    "production",
    "separated_list0",
    "sequence",
    "tag",
    "terminated",
]


@dataclass(frozen=True, slots=True)
class ParseContext:
    """Explicit context for parsing operations.

    Passed to every parser instead of thread-local or global state, so
    parses are independent and re-entrant.

    Attributes:
        max_nesting_depth: Maximum allowed expression nesting (0 disables)
        current_depth: Current nesting depth (0 = top level)
    """

    max_nesting_depth: int = MAX_EXPRESSION_DEPTH
    current_depth: int = 0

    def is_depth_exceeded(self) -> bool:
        """Check if maximum nesting depth has been exceeded."""
        return 0 < self.max_nesting_depth <= self.current_depth

    def enter_nested(self) -> "ParseContext":
        """Create new context with incremented depth for a nested expression."""
        return ParseContext(
            max_nesting_depth=self.max_nesting_depth,
            current_depth=self.current_depth + 1,
        )


type Parser[T] = Callable[[Cursor, ParseContext], ParseResult[T] | ParseError]


# =============================================================================
# Literal tokens
# =============================================================================


def char(expected: str) -> Parser[str]:
    """Match exactly one literal character."""

    def parse_char(cursor: Cursor, ctx: ParseContext) -> ParseResult[str] | ParseError:
        if not cursor.is_eof and cursor.current == expected:
            return ParseResult(expected, cursor.advance())
        return ParseError.at(cursor, TraceKind.CHAR, expected)

    return parse_char


def tag(expected: str) -> Parser[str]:
    """Match a literal string exactly, including any spaces it contains."""

    def parse_tag(cursor: Cursor, ctx: ParseContext) -> ParseResult[str] | ParseError:
        if cursor.startswith(expected):
            return ParseResult(expected, cursor.advance(len(expected)))
        return ParseError.at(cursor, TraceKind.TAG, expected)

    return parse_tag


# =============================================================================
# Context and commitment
# =============================================================================


def context[T](label: str, parser: Parser[T]) -> Parser[T]:
    """Label a parser; on failure, record the label at the starting cursor."""

    def parse_in_context(cursor: Cursor, ctx: ParseContext) -> ParseResult[T] | ParseError:
        result = parser(cursor, ctx)
        if isinstance(result, ParseError):
            return result.with_context(cursor, label)
        return result

    return parse_in_context


def production[T](label: str) -> Callable[[Parser[T]], Parser[T]]:
    """Decorator form of ``context`` for grammar rule functions.

    Example:
        >>> @production("parameter")
        ... def parse_parameter(cursor, ctx): ...
    """

    def decorate(parser: Parser[T]) -> Parser[T]:
        @wraps(parser)
        def parse_labelled(cursor: Cursor, ctx: ParseContext) -> ParseResult[T] | ParseError:
            result = parser(cursor, ctx)
            if isinstance(result, ParseError):
                return result.with_context(cursor, label)
            return result

        return parse_labelled

    return decorate


def cut[T](parser: Parser[T]) -> Parser[T]:
    """Commit: turn recoverable failures of parser into fatal ones."""

    def parse_committed(cursor: Cursor, ctx: ParseContext) -> ParseResult[T] | ParseError:
        result = parser(cursor, ctx)
        if isinstance(result, ParseError):
            return result.as_fatal()
        return result

    return parse_committed


# =============================================================================
# Alternation
# =============================================================================


def alt(*parsers: Parser[Any]) -> Parser[Any]:
    """Try parsers in order against the same cursor; first success wins.

    A fatal failure stops the search immediately. When every alternative
    fails recoverably, the failure that got furthest into the input is
    reported (ties go to the later alternative), so the trace explains the
    most promising attempt rather than the first one.

    Raises:
        ValueError: If called without parsers
    """
    if not parsers:
        msg = "alt() requires at least one parser"
        raise ValueError(msg)

    def parse_alt(cursor: Cursor, ctx: ParseContext) -> ParseResult[Any] | ParseError:
        furthest: ParseError | None = None
        for parser in parsers:
            result = parser(cursor, ctx)
            if isinstance(result, ParseResult):
                return result
            if result.fatal:
                return result
            if furthest is None or result.position.pos >= furthest.position.pos:
                furthest = result
        assert furthest is not None  # noqa: S101 - parsers is non-empty
        return furthest

    return parse_alt


# =============================================================================
# Sequencing
# =============================================================================


def sequence(*parsers: Parser[Any]) -> Parser[tuple[Any, ...]]:
    """Run parsers one after another, threading the cursor; collect values."""

    def parse_sequence(
        cursor: Cursor, ctx: ParseContext
    ) -> ParseResult[tuple[Any, ...]] | ParseError:
        values: list[Any] = []
        for parser in parsers:
            result = parser(cursor, ctx)
            if isinstance(result, ParseError):
                return result
            values.append(result.value)
            cursor = result.cursor
        return ParseResult(tuple(values), cursor)

    return parse_sequence


def map_value[T, U](parser: Parser[T], func: Callable[[T], U]) -> Parser[U]:
    """Transform the value of a successful parse."""

    def parse_mapped(cursor: Cursor, ctx: ParseContext) -> ParseResult[U] | ParseError:
        result = parser(cursor, ctx)
        if isinstance(result, ParseError):
            return result
        return ParseResult(func(result.value), result.cursor)

    return parse_mapped


def preceded[T](first: Parser[Any], second: Parser[T]) -> Parser[T]:
    """Run first then second; keep second's value."""
    return map_value(sequence(first, second), lambda values: values[1])


def terminated[T](first: Parser[T], second: Parser[Any]) -> Parser[T]:
    """Run first then second; keep first's value."""
    return map_value(sequence(first, second), lambda values: values[0])


def delimited[T](left: Parser[Any], inner: Parser[T], right: Parser[Any]) -> Parser[T]:
    """Run left, inner, right; keep inner's value."""
    return map_value(sequence(left, inner, right), lambda values: values[1])


def bracketed[T](inner: Parser[T]) -> Parser[T]:
    """Parse a '(', then the inner parser, then a ')'."""
    return delimited(char("("), inner, char(")"))


# =============================================================================
# Repetition
# =============================================================================


def many0[T](parser: Parser[T]) -> Parser[tuple[T, ...]]:
    """Apply parser until it fails recoverably; zero matches is a success.

    Stops early if parser succeeds without consuming input.
    """

    def parse_many0(cursor: Cursor, ctx: ParseContext) -> ParseResult[tuple[T, ...]] | ParseError:
        items: list[T] = []
        while True:
            result = parser(cursor, ctx)
            if isinstance(result, ParseError):
                if result.fatal:
                    return result
                return ParseResult(tuple(items), cursor)
            if result.cursor.pos == cursor.pos:
                return ParseResult(tuple(items), cursor)
            items.append(result.value)
            cursor = result.cursor

    return parse_many0


def many1[T](parser: Parser[T]) -> Parser[tuple[T, ...]]:
    """Like many0, but the first application must succeed."""
    rest = many0(parser)

    def parse_many1(cursor: Cursor, ctx: ParseContext) -> ParseResult[tuple[T, ...]] | ParseError:
        first = parser(cursor, ctx)
        if isinstance(first, ParseError):
            return first
        tail = rest(first.cursor, ctx)
        if isinstance(tail, ParseError):
            return tail
        return ParseResult((first.value, *tail.value), tail.cursor)

    return parse_many1


def separated_list0[T](separator: Parser[Any], element: Parser[T]) -> Parser[tuple[T, ...]]:
    """Zero or more elements separated by separator.

    A separator that is not followed by an element is left unconsumed.
    """

    def parse_separated(
        cursor: Cursor, ctx: ParseContext
    ) -> ParseResult[tuple[T, ...]] | ParseError:
        first = element(cursor, ctx)
        if isinstance(first, ParseError):
            if first.fatal:
                return first
            return ParseResult((), cursor)

        items = [first.value]
        cursor = first.cursor
        while True:
            sep = separator(cursor, ctx)
            if isinstance(sep, ParseError):
                if sep.fatal:
                    return sep
                break
            item = element(sep.cursor, ctx)
            if isinstance(item, ParseError):
                if item.fatal:
                    return item
                break
            items.append(item.value)
            cursor = item.cursor
        return ParseResult(tuple(items), cursor)

    return parse_separated
