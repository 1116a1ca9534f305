"""Primitive parsing utilities for the KCL parser.

This module provides low-level parsers for identifiers, number literals
and whitespace. Each returns ``ParseResult | ParseError``; failures carry a
single trace entry positioned where the primitive started.

Identifier letters follow the Unicode Alphabetic property, which also
covers combining vowel signs (Devanagari, Thai) that ``str.isalpha``
rejects.
"""

import regex

from kclparse.constants import MAX_NUMBER_VALUE, NUMBER_CHARS, RESERVED_KEYWORDS
from kclparse.diagnostics import ErrorTemplate
from kclparse.enums import TraceKind
from kclparse.syntax.ast import Identifier
from kclparse.syntax.cursor import Cursor, ParseError, ParseResult

from .combinators import ParseContext, char, production

__all__ = [
    "is_valid_identifier",
    "multispace0",
    "newline",
    "parse_identifier",
    "parse_identifier_maybe_reserved",
    "parse_number",
]

_MAX_NUMBER_DIGITS: int = len(str(MAX_NUMBER_VALUE))

# alpha1 alphanumeric0, with alphanumeric meaning Alphabetic or Number (Nd, Nl, No).
_IDENTIFIER = regex.compile(r"\p{Alphabetic}[\p{Alphabetic}\p{N}]*")

newline = char("\n")


def multispace0(cursor: Cursor, ctx: ParseContext) -> ParseResult[str]:
    """Skip zero or more spaces, tabs, carriage returns and newlines."""
    end = cursor.skip_whitespace()
    return ParseResult(cursor.slice_to(end.pos), end)


def is_valid_identifier(name: str) -> bool:
    """Whether the whole of ``name`` scans as one identifier (keywords included).

    Identifiers cannot start with a number, underscore or punctuation; after
    the first character they can include numbers. Unicode-aware: 亞當 and
    किताब are identifiers.
    """
    return _IDENTIFIER.fullmatch(name) is not None


def parse_identifier_maybe_reserved(
    cursor: Cursor, ctx: ParseContext
) -> ParseResult[Identifier] | ParseError:
    """Like parse_identifier except it doesn't check for reserved keywords.

    Grammar: alpha1 alphanumeric0

    Underscores are not identifier characters: `n_hello` matches only `n`,
    so an assignment such as `n_hello = 100` fails at the underscore.
    """
    match = _IDENTIFIER.match(cursor.source, cursor.pos)
    if match is None:
        return ParseError.at(cursor, TraceKind.MATCHER, "alphabetic character")

    end = match.end()
    identifier = Identifier(cursor.slice_to(end), cursor)
    return ParseResult(identifier, cursor.advance(end - cursor.pos))


@production("identifier")
def parse_identifier(cursor: Cursor, ctx: ParseContext) -> ParseResult[Identifier] | ParseError:
    """Parse an identifier that is not a reserved keyword.

    Examples:
        radius -> Identifier("radius")
        n123 -> Identifier("n123")
        let -> failure (reserved keyword)

    Returns:
        ParseResult(Identifier, new_cursor) on success
        ParseError with a RESERVED_KEYWORD context entry for `let` / `in`
    """
    result = parse_identifier_maybe_reserved(cursor, ctx)
    if isinstance(result, ParseError):
        return result

    if result.value.name in RESERVED_KEYWORDS:
        diagnostic = ErrorTemplate.reserved_keyword(result.value.name)
        return ParseError.at(
            cursor, TraceKind.CONTEXT, diagnostic.message, code=diagnostic.code
        )
    return result


@production("number")
def parse_number(cursor: Cursor, ctx: ParseContext) -> ParseResult[int] | ParseError:
    """Parse number literal: [0-9_]+

    Underscores are stripped and the remaining digits are read as an
    unsigned 64-bit integer.

    Examples:
        123 -> 123
        12_3 -> 123
        1_000_000 -> 1000000

    Once the digit span is matched, conversion failures are fatal: no
    other expression form can begin with a digit or an underscore, so
    there is nothing left for alternation to try.

    Returns:
        ParseResult(value, new_cursor) on success
        ParseError (recoverable) if the input does not start with [0-9_]
        ParseError (fatal) if the literal has no digits or overflows
    """
    source = cursor.source
    end = cursor.pos
    while end < len(source) and source[end] in NUMBER_CHARS:
        end += 1

    if end == cursor.pos:
        return ParseError.at(cursor, TraceKind.MATCHER, "digit or underscore")

    raw = cursor.slice_to(end)
    digits = raw.replace("_", "")
    if not digits:
        diagnostic = ErrorTemplate.empty_numeral(raw)
        return ParseError.at(
            cursor, TraceKind.CONTEXT, diagnostic.message, code=diagnostic.code, fatal=True
        )

    # Length check first: int() refuses very long digit strings outright.
    significant = digits.lstrip("0") or "0"
    if len(significant) > _MAX_NUMBER_DIGITS or int(significant) > MAX_NUMBER_VALUE:
        diagnostic = ErrorTemplate.number_overflow(digits)
        return ParseError.at(
            cursor, TraceKind.CONTEXT, diagnostic.message, code=diagnostic.code, fatal=True
        )

    return ParseResult(int(significant), cursor.advance(end - cursor.pos))
