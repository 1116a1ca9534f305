"""Shared constants for kclparse.

Centralized configuration constants used by the parser, serializer and
visitor. Placing constants here avoids circular imports and provides a
single source of truth.

Constants are grouped by domain:
- Depth limits: Recursion protection for parsing/serialization/traversal
- Input limits: Resource bounds on source size
- Grammar: Reserved words and token sets

Python 3.13+. Zero external dependencies.
"""

# ruff: noqa: RUF022 - __all__ organized by category for readability
__all__ = [
    # Depth limits
    "MAX_DEPTH",
    "MAX_EXPRESSION_DEPTH",
    "FRAMES_PER_NESTING_LEVEL",
    # Input limits
    "MAX_SOURCE_SIZE",
    # Grammar
    "RESERVED_KEYWORDS",
    "NUMBER_CHARS",
    "MAX_NUMBER_VALUE",
]

# ============================================================================
# DEPTH LIMITS
# ============================================================================
#
# Serializer and AST visitor limit. Nesting deeper than this is treated as
# malformed input.

MAX_DEPTH: int = 100

# Parser limit on expression nesting (arithmetic operands, let-in bodies,
# invocation arguments). Lower than MAX_DEPTH because each parser level costs
# several stack frames.
MAX_EXPRESSION_DEPTH: int = 50

# Python stack frames consumed by one level of expression nesting in the
# recursive descent parser, worst case through a let-in binding (expression ->
# alternation -> let-in -> bindings -> assignment -> expression). Used to clamp
# MAX_EXPRESSION_DEPTH against sys.getrecursionlimit().
FRAMES_PER_NESTING_LEVEL: int = 14

# ============================================================================
# INPUT LIMITS
# ============================================================================

# Default maximum source size in characters (10 MiB).
MAX_SOURCE_SIZE: int = 10 * 1024 * 1024

# ============================================================================
# GRAMMAR
# ============================================================================

# These can't be used as names in KCL programs.
RESERVED_KEYWORDS: frozenset[str] = frozenset({"let", "in"})

# Number literals are a sequence of digits and underscores.
NUMBER_CHARS: frozenset[str] = frozenset("0123456789_")

# Number literals are unsigned 64-bit integers.
MAX_NUMBER_VALUE: int = 2**64 - 1
