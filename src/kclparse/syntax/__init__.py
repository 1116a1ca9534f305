"""KCL syntax parsing package.

Provides parser, AST definitions, visitor pattern, and serialization.
Separate from the command line front end so tools can reuse it.

Python 3.13+.
"""

from .ast import (
    Arithmetic,
    Assignment,
    ASTNode,
    Expression,
    FnDef,
    FnInvocation,
    Identifier,
    LetIn,
    Name,
    NumberLiteral,
    Operator,
    Parameter,
    Program,
)
from .cursor import Cursor, ParseError, ParseResult, TraceEntry
from .parser import KclParser
from .serializer import SerializationValidationError, serialize
from .visitor import ASTVisitor

__all__ = [
    "ASTNode",
    "ASTVisitor",
    "Arithmetic",
    "Assignment",
    "Cursor",
    "Expression",
    "FnDef",
    "FnInvocation",
    "Identifier",
    "KclParser",
    "LetIn",
    "Name",
    "NumberLiteral",
    "Operator",
    "Parameter",
    "ParseError",
    "ParseResult",
    "Program",
    "SerializationValidationError",
    "TraceEntry",
    "parse",
    "serialize",
]


def parse(source: str) -> Program:
    """Parse KCL source into AST.

    Convenience function for KclParser.parse().

    Args:
        source: KCL source code

    Returns:
        Program containing the parsed function definitions

    Raises:
        KclSyntaxError: If the source does not parse
        UnparsedInputError: If trailing text was not consumed

    Example:
        >>> from kclparse.syntax import parse
        >>> program = parse("unit = ( -> Distance) => 1")
        >>> program.functions[0].fn_name.name
        'unit'
    """
    parser = KclParser()
    return parser.parse(source)
