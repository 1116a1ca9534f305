"""Diagnostic system for kclparse errors.

Provides structured error diagnostics with codes, spans and hints.
Inspired by Rust compiler diagnostics and Elm error messages.

Python 3.13+. Zero external dependencies.
"""

from .codes import Diagnostic, DiagnosticCode, SourceSpan
from .errors import KclError, KclSyntaxError, UnparsedInputError
from .formatter import DiagnosticFormatter, OutputFormat, render_table
from .templates import ErrorTemplate

__all__ = [
    "Diagnostic",
    "DiagnosticCode",
    "DiagnosticFormatter",
    "ErrorTemplate",
    "KclError",
    "KclSyntaxError",
    "OutputFormat",
    "SourceSpan",
    "UnparsedInputError",
    "render_table",
]
