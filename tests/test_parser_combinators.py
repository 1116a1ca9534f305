"""Tests for syntax.parser.combinators module.

Alternation (first success, fatal short-circuit, furthest failure wins),
commitment with cut, context accumulation order, repetition and
separated lists.
"""

from __future__ import annotations

import pytest

from kclparse.enums import TraceKind
from kclparse.syntax.cursor import Cursor, ParseError, ParseResult
from kclparse.syntax.parser.combinators import (
    ParseContext,
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

CTX = ParseContext()


def _fatal(cursor: Cursor, ctx: ParseContext) -> ParseResult[str] | ParseError:
    return ParseError.at(cursor, TraceKind.MATCHER, "never", fatal=True)


# ============================================================================
# Parse context
# ============================================================================


class TestParseContext:
    """Nesting depth bookkeeping."""

    def test_enter_nested_increments(self) -> None:
        """enter_nested returns a deeper copy."""
        ctx = ParseContext(max_nesting_depth=2)
        nested = ctx.enter_nested()

        assert nested.current_depth == 1
        assert ctx.current_depth == 0
        assert nested.max_nesting_depth == 2

    def test_depth_exceeded_at_limit(self) -> None:
        """The limit is reached when current depth equals the maximum."""
        ctx = ParseContext(max_nesting_depth=2)

        assert not ctx.is_depth_exceeded()
        assert not ctx.enter_nested().is_depth_exceeded()
        assert ctx.enter_nested().enter_nested().is_depth_exceeded()

    def test_zero_disables_limit(self) -> None:
        """max_nesting_depth=0 never reports exceeded."""
        ctx = ParseContext(max_nesting_depth=0, current_depth=10_000)

        assert not ctx.is_depth_exceeded()


# ============================================================================
# Literal tokens
# ============================================================================


class TestLiterals:
    """char and tag."""

    def test_char_matches(self) -> None:
        """char consumes exactly one matching character."""
        result = char("(")(Cursor("(1"), CTX)

        assert isinstance(result, ParseResult)
        assert result.cursor.pos == 1

    def test_char_at_eof(self) -> None:
        """char fails at EOF without raising."""
        result = char(")")(Cursor(""), CTX)

        assert isinstance(result, ParseError)
        assert result.deepest.kind is TraceKind.CHAR

    def test_tag_is_whitespace_exact(self) -> None:
        """tag(' = ') does not accept '='."""
        assert isinstance(tag(" = ")(Cursor(" = 1"), CTX), ParseResult)
        failed = tag(" = ")(Cursor("= 1"), CTX)

        assert isinstance(failed, ParseError)
        assert failed.deepest.describe() == "expected ' = '"


# ============================================================================
# Alternation
# ============================================================================


class TestAlt:
    """alt semantics."""

    def test_first_success_wins(self) -> None:
        """Later alternatives are not consulted once one succeeds."""
        parser = alt(tag("ab"), tag("a"))
        result = parser(Cursor("abc"), CTX)

        assert isinstance(result, ParseResult)
        assert result.value == "ab"

    def test_failed_alternative_leaves_no_consumption(self) -> None:
        """The next alternative starts from the original cursor."""
        parser = alt(sequence(tag("a"), tag("x")), tag("ab"))
        result = parser(Cursor("ab"), CTX)

        assert isinstance(result, ParseResult)
        assert result.value == "ab"
        assert result.cursor.is_eof

    def test_furthest_failure_reported(self) -> None:
        """The alternative that got furthest explains the failure."""
        parser = alt(sequence(tag("a"), tag("b"), tag("c")), tag("x"))
        result = parser(Cursor("abz"), CTX)

        assert isinstance(result, ParseError)
        assert result.position.pos == 2
        assert result.deepest.label == "c"

    def test_tie_goes_to_later_alternative(self) -> None:
        """Equal positions report the later alternative."""
        result = alt(tag("ab"), tag("ac"))(Cursor("xx"), CTX)

        assert isinstance(result, ParseError)
        assert result.deepest.label == "ac"

    def test_fatal_stops_search(self) -> None:
        """A fatal failure is returned without trying later alternatives."""
        result = alt(_fatal, tag("x"))(Cursor("x"), CTX)

        assert isinstance(result, ParseError)
        assert result.fatal
        assert result.deepest.label == "never"

    def test_empty_alt_rejected(self) -> None:
        """alt() needs at least one parser."""
        with pytest.raises(ValueError, match="at least one parser"):
            alt()


# ============================================================================
# Context and commitment
# ============================================================================


class TestContext:
    """Context labels and cut."""

    def test_context_passes_success_through(self) -> None:
        """Successful results are unchanged."""
        result = context("open", char("("))(Cursor("("), CTX)

        assert isinstance(result, ParseResult)
        assert result.value == "("

    def test_context_appends_outer_entry(self) -> None:
        """Labels nest innermost-first, recorded at their start cursor."""
        inner = context("return type arrow ->", tag(" -> "))
        outer = context("type signature", preceded(char("("), inner))
        result = outer(Cursor("(x"), CTX)

        assert isinstance(result, ParseError)
        labels = [(entry.label, entry.position.pos) for entry in result.trace]
        assert labels == [(" -> ", 1), ("return type arrow ->", 1), ("type signature", 0)]

    def test_production_decorator(self) -> None:
        """@production labels a rule function and keeps its name."""

        @production("open paren")
        def parse_open(cursor: Cursor, ctx: ParseContext) -> ParseResult[str] | ParseError:
            return char("(")(cursor, ctx)

        result = parse_open(Cursor("x"), CTX)

        assert parse_open.__name__ == "parse_open"
        assert isinstance(result, ParseError)
        assert result.trace[-1].label == "open paren"
        assert result.trace[-1].kind is TraceKind.CONTEXT

    def test_cut_makes_failure_fatal(self) -> None:
        """cut converts recoverable failures."""
        result = cut(char("("))(Cursor("x"), CTX)

        assert isinstance(result, ParseError)
        assert result.fatal

    def test_cut_blocks_alternatives(self) -> None:
        """A committed branch prevents alt from trying the next candidate."""
        committed = sequence(tag("let"), cut(char("\n")))
        result = alt(committed, tag("letter"))(Cursor("letter"), CTX)

        assert isinstance(result, ParseError)
        assert result.fatal


# ============================================================================
# Sequencing
# ============================================================================


class TestSequencing:
    """sequence and its projections."""

    def test_sequence_collects_values(self) -> None:
        """Values come back as a tuple in order."""
        result = sequence(char("a"), char("b"))(Cursor("ab"), CTX)

        assert isinstance(result, ParseResult)
        assert result.value == ("a", "b")

    def test_projections(self) -> None:
        """preceded / terminated / delimited keep one value."""
        source = Cursor("(x)")

        pre = preceded(char("("), char("x"))(source, CTX)
        term = terminated(char("("), char("x"))(source, CTX)
        mid = delimited(char("("), char("x"), char(")"))(source, CTX)

        assert isinstance(pre, ParseResult)
        assert isinstance(term, ParseResult)
        assert isinstance(mid, ParseResult)
        assert (pre.value, term.value, mid.value) == ("x", "(", "x")

    def test_bracketed_and_map_value(self) -> None:
        """bracketed requires both parentheses."""
        parser = map_value(bracketed(tag("ok")), str.upper)

        result = parser(Cursor("(ok)"), CTX)
        missing = parser(Cursor("(ok"), CTX)

        assert isinstance(result, ParseResult)
        assert result.value == "OK"
        assert isinstance(missing, ParseError)
        assert missing.deepest.describe() == "expected ')'"


# ============================================================================
# Repetition
# ============================================================================


class TestRepetition:
    """many0, many1 and separated_list0."""

    def test_many0_zero_matches(self) -> None:
        """Zero matches is a success at the original cursor."""
        result = many0(char("a"))(Cursor("b"), CTX)

        assert isinstance(result, ParseResult)
        assert result.value == ()
        assert result.cursor.pos == 0

    def test_many0_collects(self) -> None:
        """Repeats until the element fails."""
        result = many0(char("a"))(Cursor("aab"), CTX)

        assert isinstance(result, ParseResult)
        assert result.value == ("a", "a")
        assert result.cursor.remaining == "b"

    def test_many0_stops_without_progress(self) -> None:
        """An element that consumes nothing does not loop forever."""
        result = many0(tag(""))(Cursor("abc"), CTX)

        assert isinstance(result, ParseResult)
        assert result.value == ()

    def test_many0_propagates_fatal(self) -> None:
        """Fatal element failures are not swallowed."""
        result = many0(_fatal)(Cursor("a"), CTX)

        assert isinstance(result, ParseError)
        assert result.fatal

    def test_many1_requires_one(self) -> None:
        """many1 fails when the first element fails."""
        assert isinstance(many1(char("a"))(Cursor("b"), CTX), ParseError)
        result = many1(char("a"))(Cursor("aa"), CTX)
        assert isinstance(result, ParseResult)
        assert result.value == ("a", "a")

    def test_separated_list0_empty(self) -> None:
        """No elements is an empty success."""
        result = separated_list0(tag(", "), char("x"))(Cursor(")"), CTX)

        assert isinstance(result, ParseResult)
        assert result.value == ()

    def test_separated_list0_elements(self) -> None:
        """Elements separated exactly by the separator."""
        result = separated_list0(tag(", "), char("x"))(Cursor("x, x, x)"), CTX)

        assert isinstance(result, ParseResult)
        assert result.value == ("x", "x", "x")
        assert result.cursor.remaining == ")"

    def test_separated_list0_leaves_dangling_separator(self) -> None:
        """A separator without a following element is not consumed."""
        result = separated_list0(tag(", "), char("x"))(Cursor("x, )"), CTX)

        assert isinstance(result, ParseResult)
        assert result.value == ("x",)
        assert result.cursor.remaining == ", )"

    def test_separated_list0_propagates_fatal(self) -> None:
        """Fatal element failures are not swallowed."""
        element = alt(char("x"), _fatal)
        result = separated_list0(tag(", "), element)(Cursor("x, y"), CTX)

        assert isinstance(result, ParseError)
        assert result.fatal
