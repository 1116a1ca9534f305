"""Enumerations for kclparse type-safe constants.

Uses StrEnum (Python 3.11+) for automatic string conversion.
StrEnum members are strings themselves, eliminating boilerplate __str__ methods.

Python 3.13+.
"""

from enum import StrEnum


class Operator(StrEnum):
    """Binary arithmetic operator.

    StrEnum provides automatic string conversion: str(Operator.ADD) == "+"
    """

    ADD = "+"
    """Addition: (a + b)"""

    SUB = "-"
    """Subtraction: (a - b)"""

    MUL = "*"
    """Multiplication: (a * b)"""

    DIV = "/"
    """Division: (a / b)"""


class TraceKind(StrEnum):
    """What a single entry in a parse failure trace describes.

    StrEnum provides automatic string conversion: str(TraceKind.CHAR) == "char"
    """

    CHAR = "char"
    """A literal character was expected: '('"""

    TAG = "tag"
    """A literal string was expected: ' = '"""

    MATCHER = "matcher"
    """A character class was expected: alphabetic character, newline"""

    CONTEXT = "context"
    """A named grammar production was being attempted: identifier"""


__all__ = [
    "Operator",
    "TraceKind",
]
