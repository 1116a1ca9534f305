"""Grammar rules for the KCL parser.

This module provides the parsing rules for every KCL construct:
- Expressions (arithmetic, numbers, let-in blocks, invocations, names)
- Assignments, parameters and operators
- Function definitions and the program root

All grammar rules are co-located in a single module because expressions,
assignments and let-in blocks are mutually recursive.

Expression Alternatives:
    Tried in this fixed priority order:
    1. arithmetic      "(" expression " " operator " " expression ")"
    2. number          [0-9_]+
    3. let-in          "let" newline ...
    4. invocation      identifier "(" ...
    5. name            identifier

    A bare name is a prefix of an invocation, so invocation must come
    first. The first three start with syntax no invocation or name can
    start with ('(', a digit or underscore, the reserved word `let`), so
    their position ahead of invocation is safe. A new alternative must keep
    this property or be placed earlier.

Whitespace:
    The grammar is whitespace-significant at the token level: separators
    such as " = ", " -> " and " =>" match exactly. Inside let-in blocks,
    leading whitespace on each binding line is ignored.

Security:
    Includes configurable nesting depth limit to prevent stack exhaustion
    from deeply nested expressions.
"""

import logging

from kclparse.diagnostics import ErrorTemplate
from kclparse.enums import Operator, TraceKind
from kclparse.syntax.ast import (
    Arithmetic,
    Assignment,
    Expression,
    FnDef,
    FnInvocation,
    LetIn,
    Name,
    NumberLiteral,
    Parameter,
    Program,
)
from kclparse.syntax.cursor import Cursor, ParseError, ParseResult

from .combinators import (
    ParseContext,
    Parser,
    alt,
    bracketed,
    char,
    context,
    cut,
    delimited,
    many0,
    many1,
    map_value,
    preceded,
    production,
    separated_list0,
    sequence,
    tag,
    terminated,
)
from .primitives import multispace0, newline, parse_identifier, parse_number

__all__ = [
    "parse_arithmetic",
    "parse_assignment",
    "parse_expression",
    "parse_fn_definition",
    "parse_fn_invocation",
    "parse_let_in",
    "parse_number_literal",
    "parse_operator",
    "parse_parameter",
    "parse_program",
]

logger = logging.getLogger(__name__)

_OPERATOR_SYMBOLS: frozenset[str] = frozenset(op.value for op in Operator)


# =============================================================================
# Expressions
# =============================================================================


@production("expression")
def parse_expression(cursor: Cursor, ctx: ParseContext) -> ParseResult[Expression] | ParseError:
    """Parse any expression, trying each alternative in priority order.

    Each nested expression increments the nesting depth. Exceeding the
    configured limit is a fatal failure.
    """
    if ctx.is_depth_exceeded():
        diagnostic = ErrorTemplate.nesting_depth_exceeded(ctx.max_nesting_depth)
        return ParseError.at(
            cursor, TraceKind.CONTEXT, diagnostic.message, code=diagnostic.code, fatal=True
        )
    return _parse_expression_alternatives(cursor, ctx.enter_nested())


@production("operator")
def parse_operator(cursor: Cursor, ctx: ParseContext) -> ParseResult[Operator] | ParseError:
    """Parse one of + - * / into an Operator."""
    symbol = cursor.peek()
    logger.debug("Examining operator %r at %d:%d", symbol, cursor.line, cursor.column)
    if symbol is None or symbol not in _OPERATOR_SYMBOLS:
        return ParseError.at(cursor, TraceKind.MATCHER, "one of '+', '-', '*', '/'")
    return ParseResult(Operator(symbol), cursor.advance())


_ARITHMETIC: Parser[tuple[Expression, Operator, Expression]] = bracketed(
    sequence(
        parse_expression,
        delimited(char(" "), parse_operator, char(" ")),
        parse_expression,
    )
)


@production("arithmetic")
def parse_arithmetic(cursor: Cursor, ctx: ParseContext) -> ParseResult[Arithmetic] | ParseError:
    """Parse arithmetic: (lhs op rhs)

    Examples:
        (1 + 2)
        (radius * (2 / 3))
    """
    result = _ARITHMETIC(cursor, ctx)
    if isinstance(result, ParseError):
        return result
    lhs, op, rhs = result.value
    return ParseResult(Arithmetic(lhs, op, rhs), result.cursor)


parse_number_literal: Parser[NumberLiteral] = map_value(parse_number, NumberLiteral)


_INVOCATION = sequence(
    parse_identifier,
    char("("),
    separated_list0(tag(", "), parse_expression),
    char(")"),
)


@production("function invocation")
def parse_fn_invocation(cursor: Cursor, ctx: ParseContext) -> ParseResult[FnInvocation] | ParseError:
    """Parse function invocation: name(arg, arg, ...)

    Arguments are separated by exactly ", ".

    Examples:
        sphere(1, 2)
        now()
    """
    result = _INVOCATION(cursor, ctx)
    if isinstance(result, ParseError):
        return result
    fn_name, _, args, _ = result.value
    return ParseResult(FnInvocation(fn_name, args), result.cursor)


# =============================================================================
# Let-in blocks and assignments
# =============================================================================


_ASSIGNMENT = sequence(parse_identifier, tag(" = "), parse_expression)


@production("assignment")
def parse_assignment(cursor: Cursor, ctx: ParseContext) -> ParseResult[Assignment] | ParseError:
    """Parse assignment: name = expression

    Example:
        n = 100
    """
    result = _ASSIGNMENT(cursor, ctx)
    if isinstance(result, ParseError):
        return result
    identifier, _, value = result.value
    return ParseResult(Assignment(identifier, value), result.cursor)


_LET_HEADER = sequence(tag("let"), newline)

# Everything after "let" + newline. Committed: once the header matched, no
# other expression alternative can apply.
_LET_BODY = cut(
    sequence(
        many1(delimited(multispace0, parse_assignment, newline)),
        terminated(preceded(multispace0, tag("in")), multispace0),
        parse_expression,
    )
)


@production("let-in")
def parse_let_in(cursor: Cursor, ctx: ParseContext) -> ParseResult[LetIn] | ParseError:
    """Parse a let-in block.

    Grammar:
        "let" newline (whitespace* assignment newline)+ whitespace* "in" whitespace* expression

    Each binding occupies its own line; at least one binding is required.

    Example:
        let
            x = 1
            y = x
        in y
    """
    header = _LET_HEADER(cursor, ctx)
    if isinstance(header, ParseError):
        return header

    result = _LET_BODY(header.cursor, ctx)
    if isinstance(result, ParseError):
        return result
    bindings, _, body = result.value
    return ParseResult(LetIn(bindings, body), result.cursor)


_parse_expression_alternatives: Parser[Expression] = alt(
    parse_arithmetic,
    parse_number_literal,
    parse_let_in,
    parse_fn_invocation,
    map_value(parse_identifier, Name),
)


# =============================================================================
# Function definitions
# =============================================================================


_PARAMETER = sequence(parse_identifier, tag(": "), parse_identifier)


@production("parameter")
def parse_parameter(cursor: Cursor, ctx: ParseContext) -> ParseResult[Parameter] | ParseError:
    """Parse parameter: `radius: Distance`"""
    result = _PARAMETER(cursor, ctx)
    if isinstance(result, ParseError):
        return result
    name, _, kcl_type = result.value
    return ParseResult(Parameter(name, kcl_type), result.cursor)


_FN_DEF = sequence(
    context("function name", parse_identifier),
    context("= between function name and definition", tag(" = ")),
    context(
        "type signature",
        bracketed(
            sequence(
                context("parameter list", separated_list0(tag(", "), parse_parameter)),
                context("return type arrow ->", tag(" -> ")),
                parse_identifier,
            )
        ),
    ),
    context("=> between function header and body", terminated(tag(" =>"), multispace0)),
    context("function body", parse_expression),
)


@production("function definition")
def parse_fn_definition(cursor: Cursor, ctx: ParseContext) -> ParseResult[FnDef] | ParseError:
    """Parse function definition.

    Grammar:
        name " = " "(" (param (", " param)*)? " -> " type ")" " =>" whitespace* body

    Examples:
        myCircle = (radius: Distance -> Solid2D) => circle(radius)
        unit = ( -> Distance) => 1
    """
    result = _FN_DEF(cursor, ctx)
    if isinstance(result, ParseError):
        return result
    fn_name, _, (params, _, return_type), _, body = result.value
    return ParseResult(FnDef(fn_name, params, return_type, body), result.cursor)


# =============================================================================
# Program
# =============================================================================


_FN_DEFINITIONS = many0(preceded(multispace0, parse_fn_definition))


@production("program")
def parse_program(cursor: Cursor, ctx: ParseContext) -> ParseResult[Program] | ParseError:
    """Parse zero or more function definitions.

    Definitions may be separated and surrounded by whitespace. Parsing
    stops at the first position where no further definition starts; the
    returned cursor may therefore be short of EOF, and callers must check
    ``result.cursor.is_eof`` (KclParser.parse does).
    """
    result = _FN_DEFINITIONS(cursor, ctx)
    if isinstance(result, ParseError):
        return result
    end = result.cursor.skip_whitespace()
    return ParseResult(Program(result.value), end)
