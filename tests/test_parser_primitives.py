"""Tests for syntax.parser.primitives module.

Identifiers (Unicode letters, reserved keywords, the underscore limitation),
number literals (underscores, u64 range, fatal conversion failures) and
whitespace skipping.
"""

from __future__ import annotations

import pytest
from hypothesis import event, example, given
from hypothesis import strategies as st

from kclparse.constants import MAX_NUMBER_VALUE
from kclparse.diagnostics import DiagnosticCode
from kclparse.enums import TraceKind
from kclparse.syntax.ast import Identifier
from kclparse.syntax.cursor import Cursor, ParseError, ParseResult
from kclparse.syntax.parser.combinators import ParseContext
from kclparse.syntax.parser.primitives import (
    is_valid_identifier,
    multispace0,
    parse_identifier,
    parse_identifier_maybe_reserved,
    parse_number,
)
from tests.strategies import KCL_RESERVED_KEYWORDS, kcl_identifiers, kcl_numerals

CTX = ParseContext()


# ============================================================================
# Character classification
# ============================================================================


class TestIdentifierCharacterClassification:
    """Which characters may start or continue an identifier."""

    @pytest.mark.parametrize("ch", ["a", "Z", "亞", "é", "Д"])
    def test_letters_start_identifiers(self, ch: str) -> None:
        """Any Unicode letter can start an identifier."""
        assert is_valid_identifier(ch)
        assert is_valid_identifier("a" + ch)

    @pytest.mark.parametrize("ch", ["ि", "ा", "ิ"])
    def test_dependent_vowel_signs_are_alphabetic(self, ch: str) -> None:
        """Combining vowel signs have the Alphabetic property although not isalpha()."""
        assert not ch.isalpha()
        assert is_valid_identifier("a" + ch)

    @pytest.mark.parametrize("ch", ["0", "9"])
    def test_digits_continue_but_not_start(self, ch: str) -> None:
        """Digits can continue identifiers but not start them."""
        assert not is_valid_identifier(ch)
        assert is_valid_identifier("a" + ch)

    @pytest.mark.parametrize("ch", ["_", "-", " ", "(", "="])
    def test_punctuation_never_in_identifiers(self, ch: str) -> None:
        """Underscores and punctuation are not identifier characters."""
        assert not is_valid_identifier(ch)
        assert not is_valid_identifier("a" + ch)


# ============================================================================
# Identifiers
# ============================================================================


class TestParseIdentifier:
    """Identifier parsing."""

    def test_simple_identifier(self) -> None:
        """Letters then alphanumerics are consumed."""
        result = parse_identifier(Cursor("radius: Distance"), CTX)

        assert isinstance(result, ParseResult)
        assert result.value == Identifier("radius")
        assert result.cursor.remaining == ": Distance"

    def test_identifier_records_position(self) -> None:
        """The identifier keeps the cursor where it starts."""
        cursor = Cursor("f = ( -> T) => x").advance(15)
        result = parse_identifier(cursor, CTX)

        assert isinstance(result, ParseResult)
        assert result.value.position == cursor
        span = result.value.span
        assert span is not None
        assert (span.start, span.end, span.column) == (15, 16, 16)

    def test_unicode_identifier(self) -> None:
        """Non-ASCII letters are accepted."""
        result = parse_identifier(Cursor("亞當2 = 1"), CTX)

        assert isinstance(result, ParseResult)
        assert result.value.name == "亞當2"

    def test_underscore_stops_identifier(self) -> None:
        """Underscore ends the identifier: `n_hello` matches only `n`."""
        result = parse_identifier(Cursor("n_hello"), CTX)

        assert isinstance(result, ParseResult)
        assert result.value.name == "n"
        assert result.cursor.remaining == "_hello"

    def test_leading_digit_fails(self) -> None:
        """Identifiers cannot start with a digit."""
        result = parse_identifier(Cursor("123"), CTX)

        assert isinstance(result, ParseError)
        assert not result.fatal
        assert result.deepest.kind is TraceKind.MATCHER
        assert result.deepest.describe() == "expected alphabetic character"
        assert [entry.label for entry in result.trace][1:] == ["identifier"]

    def test_eof_fails(self) -> None:
        """Empty input is a recoverable mismatch."""
        result = parse_identifier(Cursor(""), CTX)

        assert isinstance(result, ParseError)
        assert not result.fatal

    @pytest.mark.parametrize("keyword", ["let", "in"])
    def test_reserved_keyword_rejected(self, keyword: str) -> None:
        """Reserved keywords fail with a named-context entry."""
        result = parse_identifier(Cursor(f"{keyword} = 100"), CTX)

        assert isinstance(result, ParseError)
        assert not result.fatal
        deepest = result.deepest
        assert deepest.kind is TraceKind.CONTEXT
        assert deepest.code is DiagnosticCode.RESERVED_KEYWORD
        assert deepest.label == (
            f"{keyword} is a reserved keyword and cannot be used as the name of "
            "a function, binding, type etc"
        )

    def test_keyword_prefix_is_not_reserved(self) -> None:
        """Longer words that start with a keyword are ordinary identifiers."""
        for word in ("letter", "inner", "in2"):
            result = parse_identifier(Cursor(word), CTX)
            assert isinstance(result, ParseResult)
            assert result.value.name == word

    @given(keyword=st.sampled_from(KCL_RESERVED_KEYWORDS))
    def test_keywords_match_shape_but_fail(self, keyword: str) -> None:
        """PROPERTY: keywords satisfy the raw shape rule yet fail identifier parsing."""
        event(f"keyword={keyword}")
        raw = parse_identifier_maybe_reserved(Cursor(keyword), CTX)
        checked = parse_identifier(Cursor(keyword), CTX)

        assert isinstance(raw, ParseResult)
        assert raw.value.name == keyword
        assert isinstance(checked, ParseError)

    @given(name=kcl_identifiers())
    def test_valid_identifiers_consume_everything(self, name: str) -> None:
        """PROPERTY: generated identifiers parse completely."""
        event(f"length={min(len(name), 5)}")
        result = parse_identifier(Cursor(name), CTX)

        assert isinstance(result, ParseResult)
        assert result.value.name == name
        assert result.cursor.is_eof


# ============================================================================
# Numbers
# ============================================================================


class TestParseNumber:
    """Number literal parsing."""

    @pytest.mark.parametrize(
        ("source", "value"),
        [
            ("123", 123),
            ("12_3", 123),
            ("1_000_000", 1_000_000),
            ("_7", 7),
            ("0", 0),
            ("007", 7),
            ("18446744073709551615", MAX_NUMBER_VALUE),
        ],
    )
    def test_valid_numbers(self, source: str, value: int) -> None:
        """Digits and underscores parse to the digit value."""
        result = parse_number(Cursor(source), CTX)

        assert isinstance(result, ParseResult)
        assert result.value == value
        assert result.cursor.is_eof

    def test_number_stops_at_letter(self) -> None:
        """`123abc` consumes `123` and leaves `abc`."""
        result = parse_number(Cursor("123abc"), CTX)

        assert isinstance(result, ParseResult)
        assert result.value == 123
        assert result.cursor.remaining == "abc"

    def test_non_digit_is_recoverable(self) -> None:
        """Input without digits or underscores is a recoverable mismatch."""
        result = parse_number(Cursor("x"), CTX)

        assert isinstance(result, ParseError)
        assert not result.fatal
        assert result.deepest.describe() == "expected digit or underscore"
        assert result.trace[-1].label == "number"

    def test_overflow_is_fatal(self) -> None:
        """2**64 does not fit and cannot be anything else."""
        result = parse_number(Cursor("18446744073709551616"), CTX)

        assert isinstance(result, ParseError)
        assert result.fatal
        assert result.deepest.code is DiagnosticCode.NUMBER_OVERFLOW

    def test_huge_numeral_is_fatal_overflow(self) -> None:
        """Very long digit strings overflow without converting."""
        result = parse_number(Cursor("9" * 10_000), CTX)

        assert isinstance(result, ParseError)
        assert result.deepest.code is DiagnosticCode.NUMBER_OVERFLOW

    def test_leading_zeros_do_not_overflow(self) -> None:
        """Zero padding is not counted towards the range."""
        result = parse_number(Cursor("0" * 40 + "1"), CTX)

        assert isinstance(result, ParseResult)
        assert result.value == 1

    def test_underscores_only_is_fatal(self) -> None:
        """`___` has no digits."""
        result = parse_number(Cursor("___"), CTX)

        assert isinstance(result, ParseError)
        assert result.fatal
        assert result.deepest.code is DiagnosticCode.EMPTY_NUMERAL

    @given(numeral=kcl_numerals())
    @example(numeral=("1_8446744073709551615", MAX_NUMBER_VALUE))
    def test_numeral_roundtrip(self, numeral: tuple[str, int]) -> None:
        """PROPERTY: numerals parse to the value of their digits."""
        raw, value = numeral
        event(f"digits={len(str(value))}")
        result = parse_number(Cursor(raw), CTX)

        assert isinstance(result, ParseResult)
        assert result.value == value
        assert str(result.value) == (raw.replace("_", "").lstrip("0") or "0")

    @given(value=st.integers(min_value=MAX_NUMBER_VALUE + 1, max_value=2**80))
    def test_values_above_u64_overflow(self, value: int) -> None:
        """PROPERTY: every value above 2**64-1 fails with an overflow diagnostic."""
        event(f"bits={value.bit_length()}")
        result = parse_number(Cursor(str(value)), CTX)

        assert isinstance(result, ParseError)
        assert result.fatal
        assert result.to_diagnostic().code is DiagnosticCode.NUMBER_OVERFLOW


# ============================================================================
# Whitespace
# ============================================================================


class TestMultispace0:
    """multispace0 never fails."""

    def test_consumes_mixed_whitespace(self) -> None:
        """Spaces, tabs and newlines are consumed together."""
        result = multispace0(Cursor("  \n\tin y"), CTX)

        assert result.value == "  \n\t"
        assert result.cursor.remaining == "in y"

    def test_no_whitespace(self) -> None:
        """Zero whitespace is still a success."""
        result = multispace0(Cursor("x"), CTX)

        assert result.value == ""
        assert result.cursor.pos == 0
