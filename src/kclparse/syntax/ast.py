"""KCL AST (Abstract Syntax Tree) node definitions.

For now, a KCL program is just a series of function definitions.

All nodes are frozen dataclasses. Structural equality ignores position
metadata: two identifiers are equal when their text is equal, wherever
they appear in the source.

Python 3.13+. Zero external dependencies.
"""

from dataclasses import dataclass, field

from kclparse.diagnostics import SourceSpan
from kclparse.enums import Operator

from .cursor import Cursor

# ruff: noqa: RUF022 - __all__ organized by category for readability
__all__ = [
    # Base types
    "Identifier",
    # Program structure
    "Program",
    "FnDef",
    "Parameter",
    # Expressions
    "NumberLiteral",
    "Name",
    "FnInvocation",
    "LetIn",
    "Arithmetic",
    "Assignment",
    "Operator",
    # Type aliases
    "Expression",
    "ASTNode",
]

# ============================================================================
# BASE TYPES
# ============================================================================


@dataclass(frozen=True, slots=True)
class Identifier:
    """Name of a constant, function, parameter or type.

    E.g. in `x = 1` the identifier is the name `x`.

    Attributes:
        name: Identifier text: a letter followed by letters or digits
        position: Cursor where the identifier starts (None when the node
            was built programmatically). Ignored by equality and hashing.
    """

    name: str
    position: Cursor | None = field(default=None, compare=False, repr=False)

    def __str__(self) -> str:
        return self.name

    @property
    def span(self) -> SourceSpan | None:
        """Source span covered by this identifier, if it came from the parser."""
        if self.position is None:
            return None
        return self.position.to_span(len(self.name))


# ============================================================================
# PROGRAM STRUCTURE
# ============================================================================


@dataclass(frozen=True, slots=True)
class Program:
    """Root AST node: the function definitions of a source file, in order."""

    functions: tuple["FnDef", ...] = ()


@dataclass(frozen=True, slots=True)
class FnDef:
    """Function definition.

    Example:
        myCircle = (radius: Distance -> Solid2D) => circle(radius)
    """

    fn_name: Identifier
    params: tuple["Parameter", ...]
    return_type: Identifier
    body: "Expression"


@dataclass(frozen=True, slots=True)
class Parameter:
    """Declared function parameter: `radius: Distance`"""

    name: Identifier
    kcl_type: Identifier


# ============================================================================
# EXPRESSIONS
# ============================================================================


@dataclass(frozen=True, slots=True)
class NumberLiteral:
    """Unsigned 64-bit integer literal: 42 or 1_000"""

    value: int


@dataclass(frozen=True, slots=True)
class Name:
    """Reference to a bound value. Evaluates to the bound value."""

    id: Identifier


@dataclass(frozen=True, slots=True)
class FnInvocation:
    """Function call: circle(radius, center)"""

    fn_name: Identifier
    args: tuple["Expression", ...] = ()


@dataclass(frozen=True, slots=True)
class LetIn:
    """Let-in block. Evaluates to the `in` part.

    Example:
        let
            x = 1
            y = x
        in y
    """

    bindings: tuple["Assignment", ...]
    body: "Expression"


@dataclass(frozen=True, slots=True)
class Arithmetic:
    """Parenthesized binary operation: (lhs op rhs)"""

    lhs: "Expression"
    op: Operator
    rhs: "Expression"


@dataclass(frozen=True, slots=True)
class Assignment:
    """Binding a value to a name, e.g. `n = 100`."""

    identifier: Identifier
    value: "Expression"


# ============================================================================
# TYPE ALIASES
# ============================================================================

type Expression = NumberLiteral | Name | FnInvocation | LetIn | Arithmetic

type ASTNode = (
    Program
    | FnDef
    | Parameter
    | NumberLiteral
    | Name
    | FnInvocation
    | LetIn
    | Arithmetic
    | Assignment
    | Identifier
)
