"""Core KCL parser implementation.

This module provides the KclParser class that orchestrates parsing of KCL
source text into AST structures defined in :mod:`kclparse.syntax.ast`.

Architecture:
    The parser uses an immutable cursor pattern (:class:`~kclparse.syntax.cursor.Cursor`)
    to traverse source text. Each grammar rule (in :mod:`~kclparse.syntax.parser.rules`
    and :mod:`~kclparse.syntax.parser.primitives`) returns either a
    :class:`~kclparse.syntax.cursor.ParseResult` containing the parsed AST node
    and updated cursor position, or a :class:`~kclparse.syntax.cursor.ParseError`
    carrying a deepest-first trace of the productions that were being attempted.

Two entry points:
    - ``parse_prefix`` returns the raw grammar result: a Program plus a cursor
      that may stop short of the end of input, or a ParseError.
    - ``parse`` requires the whole source to be consumed and raises
      KclSyntaxError / UnparsedInputError otherwise.

Security:
    Includes configurable input size and expression nesting limits to
    prevent unbounded memory use and stack exhaustion.

See Also:
    - :mod:`kclparse.syntax.ast` - All AST node type definitions
    - :mod:`kclparse.syntax.cursor` - Cursor, ParseResult and ParseError types
    - :mod:`kclparse.syntax.parser.rules` - Grammar rules
"""

import logging

from kclparse.constants import FRAMES_PER_NESTING_LEVEL, MAX_EXPRESSION_DEPTH, MAX_SOURCE_SIZE
from kclparse.core.depth_guard import depth_clamp
from kclparse.diagnostics import (
    ErrorTemplate,
    KclSyntaxError,
    UnparsedInputError,
)
from kclparse.syntax.ast import Program
from kclparse.syntax.cursor import Cursor, ParseError, ParseResult

from .combinators import ParseContext, Parser
from .rules import parse_fn_definition, parse_program

__all__ = ["KclParser"]

logger = logging.getLogger(__name__)


class KclParser:
    """KCL parser using immutable cursor pattern.

    Design:
    - Immutable cursor makes backtracking free (failed alternatives leave
      nothing behind)
    - Failures are returned values; exceptions only at this boundary
    - Error traces include line:column for every production on the path

    Security:
    - Configurable max_source_size rejects oversized inputs before parsing
    - Configurable max_nesting_depth turns runaway expression nesting into
      a fatal parse failure instead of a RecursionError

    Attributes:
        max_source_size: Maximum allowed source size in characters (default: 10 MiB)
        max_nesting_depth: Maximum allowed expression nesting depth (default: 50)
    """

    __slots__ = ("_max_nesting_depth", "_max_source_size")

    def __init__(
        self,
        *,
        max_source_size: int | None = None,
        max_nesting_depth: int | None = None,
    ) -> None:
        """Initialize parser with optional size and nesting depth limits.

        Args:
            max_source_size: Maximum source size in characters (default: 10 MiB).
                            Set to 0 to disable the size limit.
            max_nesting_depth: Maximum expression nesting depth (default: 50).
                              Clamped against the interpreter recursion limit.
                              Set to 0 to disable the depth limit.
        """
        self._max_source_size = (
            max_source_size if max_source_size is not None else MAX_SOURCE_SIZE
        )
        requested_depth = (
            max_nesting_depth if max_nesting_depth is not None else MAX_EXPRESSION_DEPTH
        )
        if requested_depth > 0:
            requested_depth = depth_clamp(
                requested_depth, frames_per_level=FRAMES_PER_NESTING_LEVEL
            )
        self._max_nesting_depth = requested_depth

    @property
    def max_source_size(self) -> int:
        """Maximum allowed source size in characters."""
        return self._max_source_size

    @property
    def max_nesting_depth(self) -> int:
        """Maximum allowed expression nesting depth."""
        return self._max_nesting_depth

    def _check_size(self, source: str) -> None:
        if self._max_source_size > 0 and len(source) > self._max_source_size:
            diagnostic = ErrorTemplate.source_too_large(len(source), self._max_source_size)
            msg = (
                f"{diagnostic.message}. "
                "Configure max_source_size in KclParser constructor to increase limit."
            )
            raise ValueError(msg)

    def _context(self) -> ParseContext:
        return ParseContext(max_nesting_depth=self._max_nesting_depth)

    def parse_rule[T](self, rule: Parser[T], source: str) -> ParseResult[T] | ParseError:
        """Apply a single grammar rule to the start of source.

        Useful for tooling and tests that work on fragments (an expression,
        a parameter) rather than whole programs. Trailing input is left in
        the returned cursor.

        Raises:
            ValueError: If source exceeds max_source_size

        Example:
            >>> from kclparse.syntax.parser.rules import parse_expression
            >>> result = KclParser().parse_rule(parse_expression, "(1 + 2)")
            >>> result.cursor.is_eof
            True
        """
        self._check_size(source)
        return rule(Cursor(source), self._context())

    def parse_prefix(self, source: str) -> ParseResult[Program] | ParseError:
        """Parse as many function definitions as possible from source.

        Returns:
            ParseResult whose cursor marks the first unconsumed character
            (EOF when the whole source parsed), or ParseError when a
            committed production failed

        Raises:
            ValueError: If source exceeds max_source_size
        """
        logger.debug("Parsing %d characters", len(source))
        result = self.parse_rule(parse_program, source)
        if isinstance(result, ParseError):
            logger.debug("Parse failed: %s", result.format_error())
        else:
            logger.debug(
                "Parsed %d function definition(s), stopped at offset %d",
                len(result.value.functions),
                result.cursor.pos,
            )
        return result

    def parse(self, source: str) -> Program:
        """Parse KCL source into a Program, requiring all input to be consumed.

        Args:
            source: KCL source text

        Returns:
            :class:`~kclparse.syntax.ast.Program` with a tuple of function
            definitions in source order

        Raises:
            ValueError: If source exceeds max_source_size
            KclSyntaxError: If a committed production failed (trace attached)
            UnparsedInputError: If the program parsed but trailing text remains

        Example:
            >>> parser = KclParser()
            >>> program = parser.parse("unit = ( -> Distance) => 1")
            >>> program.functions[0].fn_name.name
            'unit'
        """
        result = self.parse_prefix(source)
        if isinstance(result, ParseError):
            raise KclSyntaxError(result.to_diagnostic(), result.trace)

        end = result.cursor
        if end.is_eof:
            return result.value

        # Re-run the rule that stopped the repetition to explain why the
        # remaining text is not a function definition.
        attempt = parse_fn_definition(end, self._context())
        trace = attempt.trace if isinstance(attempt, ParseError) else ()
        diagnostic = ErrorTemplate.unparsed_input(end.remaining, end.to_span(len(end.remaining)))
        raise UnparsedInputError(diagnostic, end.remaining, trace)
