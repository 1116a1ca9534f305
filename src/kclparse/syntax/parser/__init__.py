"""KCL parser module.

This module provides the main KclParser class and related parsing
utilities organized into focused submodules.

Module Organization:
- core.py: Main KclParser class (parse / parse_prefix entry points)
- combinators.py: ParseContext, sequencing, alternation, repetition, context labels
- primitives.py: Basic parsers (identifiers, numbers, whitespace)
- rules.py: All grammar rules (expressions, let-in, function definitions, program)

Public API:
    KclParser: Main parser class
    ParseContext: Parse context for depth tracking (advanced usage)
"""

from kclparse.syntax.parser.combinators import ParseContext
from kclparse.syntax.parser.core import KclParser

__all__ = ["KclParser", "ParseContext"]
