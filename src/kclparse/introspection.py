"""KCL program introspection for function listings and call extraction.

Summarizes a parsed Program for display and tooling:
- Top-level function definitions with the source range of their names
- Functions invoked from each body (in first-call order)
- Parameter names and the return type

Python 3.13+.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import TYPE_CHECKING

from kclparse.syntax.ast import FnInvocation
from kclparse.syntax.visitor import ASTVisitor

if TYPE_CHECKING:
    from kclparse.syntax.ast import ASTNode, FnDef, Identifier, Program

__all__ = [
    "CallCollector",
    "FunctionSummary",
    "SourceRange",
    "list_functions",
    "summarize_function",
]


@dataclass(frozen=True, slots=True)
class SourceRange:
    """Where a name appears in the source.

    Attributes:
        start_line: 1-indexed line
        start_column: 1-indexed column (Unicode code points)
        length: Length of the name in characters
    """

    start_line: int
    start_column: int
    length: int

    @staticmethod
    def of(identifier: Identifier) -> SourceRange | None:
        """Source range of a parsed identifier (None if built programmatically)."""
        if identifier.position is None:
            return None
        return SourceRange(
            start_line=identifier.position.line,
            start_column=identifier.position.column,
            length=len(identifier.name),
        )


@dataclass(frozen=True, slots=True)
class FunctionSummary:
    """Immutable metadata about one top-level function definition."""

    name: str
    """Function name."""

    source_range: SourceRange | None
    """Position of the function name for IDE integration."""

    parameters: tuple[str, ...]
    """Parameter names in declaration order."""

    return_type: str
    """Declared return type name."""

    calls: frozenset[str]
    """Names of all functions invoked anywhere in the body."""


class CallCollector(ASTVisitor):
    """Collects the names of every function invoked under a node."""

    __slots__ = ("calls",)

    def __init__(self, *, max_depth: int | None = None) -> None:
        super().__init__(max_depth=max_depth)
        self.calls: set[str] = set()

    def visit_FnInvocation(self, node: FnInvocation) -> ASTNode:  # noqa: N802 - visitor naming
        self.calls.add(node.fn_name.name)
        return self.generic_visit(node)


def summarize_function(fn_def: FnDef) -> FunctionSummary:
    """Build the summary of a single function definition.

    Raises:
        DepthLimitExceededError: If the body nests deeper than MAX_DEPTH
    """
    collector = CallCollector()
    collector.visit(fn_def.body)
    return FunctionSummary(
        name=fn_def.fn_name.name,
        source_range=SourceRange.of(fn_def.fn_name),
        parameters=tuple(param.name.name for param in fn_def.params),
        return_type=fn_def.return_type.name,
        calls=frozenset(collector.calls),
    )


def list_functions(program: Program) -> tuple[FunctionSummary, ...]:
    """Summaries of every top-level function definition, in source order.

    Example:
        >>> from kclparse import parse_kcl
        >>> program = parse_kcl("unit = ( -> Distance) => 1")
        >>> list_functions(program)[0].source_range
        SourceRange(start_line=1, start_column=1, length=4)
    """
    return tuple(summarize_function(fn_def) for fn_def in program.functions)
