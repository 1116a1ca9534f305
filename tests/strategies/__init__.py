"""Hypothesis strategies for kclparse property-based testing.

This package provides reusable strategies for generating test data
across multiple test modules.

Usage:
    from tests.strategies import kcl_identifiers, kcl_programs
    from tests.strategies.kcl import kcl_expressions
"""

from .kcl import (
    KCL_IDENTIFIER_FIRST_CHARS,
    KCL_IDENTIFIER_REST_CHARS,
    KCL_RESERVED_KEYWORDS,
    UNICODE_LETTERS,
    kcl_expressions,
    kcl_fn_defs,
    kcl_identifier_nodes,
    kcl_identifiers,
    kcl_numerals,
    kcl_programs,
)

__all__ = [
    "KCL_IDENTIFIER_FIRST_CHARS",
    "KCL_IDENTIFIER_REST_CHARS",
    "KCL_RESERVED_KEYWORDS",
    "UNICODE_LETTERS",
    "kcl_expressions",
    "kcl_fn_defs",
    "kcl_identifier_nodes",
    "kcl_identifiers",
    "kcl_numerals",
    "kcl_programs",
]
