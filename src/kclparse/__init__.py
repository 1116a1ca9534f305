"""kclparse - parser for the KCL declarative CAD language.

Turns KCL source text into a typed AST of function definitions, with
deepest-first error traces that name every grammar production on the path
to a failure.

Public API:
    parse_kcl - Parse KCL source to a Program AST
    serialize_kcl - Serialize a Program AST to canonical KCL source
    KclParser - Configurable parser (size and nesting limits, prefix parsing)
    list_functions - Summaries of top-level function definitions

Exceptions:
    KclError - Base exception class
    KclSyntaxError - Parse errors (carries the failure trace)
    UnparsedInputError - Program parsed but trailing source remained

Submodules:
    kclparse.syntax.ast - AST node types (Program, FnDef, Expression, etc.)
    kclparse.syntax.parser - Grammar rules and combinators
    kclparse.introspection - Function listings and call extraction
    kclparse.diagnostics - Error types, codes and formatters
    kclparse.cli - Command line front end
"""

from .diagnostics import KclError, KclSyntaxError, UnparsedInputError
from .introspection import list_functions
from .syntax import KclParser
from .syntax import parse as parse_kcl
from .syntax import serialize as serialize_kcl

# Version information - Auto-populated from package metadata
# SINGLE SOURCE OF TRUTH: pyproject.toml [project] version
from importlib.metadata import PackageNotFoundError
from importlib.metadata import version as _get_version

try:
    __version__ = _get_version("kclparse")
except PackageNotFoundError:
    # Development mode: package not installed yet
    __version__ = "0.0.0+dev"

__all__ = [
    "KclError",
    "KclParser",
    "KclSyntaxError",
    "UnparsedInputError",
    "__version__",
    "list_functions",
    "parse_kcl",
    "serialize_kcl",
]
