"""Diagnostic formatting service.

Centralizes diagnostic output formatting with configurable options.
Python 3.13+. Zero external dependencies.
"""

from __future__ import annotations

import json
from collections.abc import Sequence
from dataclasses import dataclass
from enum import StrEnum
from typing import TYPE_CHECKING

from .codes import Diagnostic

if TYPE_CHECKING:
    from kclparse.syntax.cursor import TraceEntry

__all__ = [
    "DiagnosticFormatter",
    "OutputFormat",
    "render_table",
]

# Control characters are shown escaped so that source excerpts cannot break
# table layout or inject terminal sequences.
_CONTROL_ESCAPES: dict[int, str] = {
    ord("\n"): "\\n",
    ord("\r"): "\\r",
    ord("\t"): "\\t",
    0x1B: "\\x1b",
}

_TRACE_HEADERS: tuple[str, ...] = ("input", "line", "column", "error")


class OutputFormat(StrEnum):
    """Output format options for diagnostic formatting."""

    RUST = "rust"  # Rust compiler-style output (default)
    SIMPLE = "simple"  # Single-line format
    JSON = "json"  # JSON format for tooling integration


@dataclass(frozen=True, slots=True)
class DiagnosticFormatter:
    """Diagnostic formatting service.

    Centralizes formatting of Diagnostic objects and parse traces into
    human-readable or machine-readable output.

    Attributes:
        output_format: Output style (rust, simple, json)
        sanitize: Truncate content to prevent oversized output
        color: Enable ANSI color codes (for terminal output)
        max_content_length: Maximum content length when sanitizing
        excerpt_length: Characters of remaining input shown per trace row

    Example:
        >>> formatter = DiagnosticFormatter()
        >>> diagnostic = ErrorTemplate.reserved_keyword("let")
        >>> print(formatter.format(diagnostic))
        error[RESERVED_KEYWORD]: let is a reserved keyword and cannot be ...
          = help: Choose a different name

        >>> formatter = DiagnosticFormatter(output_format=OutputFormat.SIMPLE)
        >>> print(formatter.format(diagnostic))
        RESERVED_KEYWORD: let is a reserved keyword and cannot be ...
    """

    output_format: OutputFormat = OutputFormat.RUST
    sanitize: bool = False
    color: bool = False
    max_content_length: int = 100
    excerpt_length: int = 30

    def format(self, diagnostic: Diagnostic) -> str:
        """Format a single diagnostic.

        Args:
            diagnostic: Diagnostic to format

        Returns:
            Formatted diagnostic string
        """
        match self.output_format:
            case OutputFormat.RUST:
                return self._format_rust(diagnostic)
            case OutputFormat.SIMPLE:
                return self._format_simple(diagnostic)
            case OutputFormat.JSON:
                return self._format_json(diagnostic)

    def format_trace(self, trace: Sequence[TraceEntry]) -> str:
        """Format a parse failure trace as a table.

        One row per entry, in the order given (deepest production first).
        Each row shows an excerpt of the input at the failure point, its
        line and column, and what the parser expected there.

        Args:
            trace: Trace entries, deepest first

        Returns:
            ASCII table with a header row
        """
        rows = [
            (
                self._excerpt(entry.position.remaining),
                str(entry.position.line),
                str(entry.position.column),
                self._escape_control(entry.describe()),
            )
            for entry in trace
        ]
        return render_table(_TRACE_HEADERS, rows)

    def format_trace_json(self, trace: Sequence[TraceEntry]) -> str:
        """Format a parse failure trace as a JSON array.

        Args:
            trace: Trace entries, deepest first

        Returns:
            JSON array of objects, one per entry
        """
        data = [
            {
                "offset": entry.position.pos,
                "line": entry.position.line,
                "column": entry.position.column,
                "kind": str(entry.kind),
                "label": entry.label,
                "code": entry.code.name if entry.code is not None else None,
                "input": self._maybe_sanitize(entry.position.remaining),
            }
            for entry in trace
        ]
        return json.dumps(data, ensure_ascii=False)

    def _format_rust(self, diagnostic: Diagnostic) -> str:
        """Format diagnostic in Rust compiler style.

        Example output:
            error[EXPECTED_TOKEN]: expected ')'
              --> line 5, column 10
              = help: Separators such as ' = ' must match exactly
        """
        severity = diagnostic.severity if diagnostic.severity == "warning" else "error"

        if self.color:
            if severity == "error":
                severity_str = f"\033[1;31m{severity}\033[0m"  # Bold red
            else:
                severity_str = f"\033[1;33m{severity}\033[0m"  # Bold yellow
        else:
            severity_str = severity

        message = self._escape_control(self._maybe_sanitize(diagnostic.message))
        parts = [f"{severity_str}[{diagnostic.code.name}]: {message}"]

        if diagnostic.span:
            parts.append(f"  --> line {diagnostic.span.line}, column {diagnostic.span.column}")

        if diagnostic.hint:
            hint = self._maybe_sanitize(diagnostic.hint)
            parts.append(f"  = help: {hint}")

        return "\n".join(parts)

    def _format_simple(self, diagnostic: Diagnostic) -> str:
        """Format diagnostic in single-line format.

        Example output:
            EXPECTED_TOKEN: expected ')'
        """
        message = self._escape_control(self._maybe_sanitize(diagnostic.message))
        return f"{diagnostic.code.name}: {message}"

    def _format_json(self, diagnostic: Diagnostic) -> str:
        """Format diagnostic as JSON.

        Example output:
            {"code": "EXPECTED_TOKEN", "message": "...", "severity": "error"}
        """
        data: dict[str, str | int | None] = {
            "code": diagnostic.code.name,
            "code_value": diagnostic.code.value,
            "message": self._maybe_sanitize(diagnostic.message),
            "severity": diagnostic.severity,
        }

        if diagnostic.span:
            data["line"] = diagnostic.span.line
            data["column"] = diagnostic.span.column
            data["start"] = diagnostic.span.start
            data["end"] = diagnostic.span.end

        if diagnostic.hint:
            data["hint"] = self._maybe_sanitize(diagnostic.hint)

        return json.dumps(data, ensure_ascii=False)

    def _excerpt(self, text: str) -> str:
        """Shorten remaining input to a single table cell."""
        if len(text) > self.excerpt_length:
            text = text[: self.excerpt_length] + "..."
        return self._escape_control(text)

    def _maybe_sanitize(self, text: str) -> str:
        """Truncate text if sanitization is enabled.

        Args:
            text: Text to possibly truncate

        Returns:
            Original or truncated text
        """
        if self.sanitize and len(text) > self.max_content_length:
            return text[: self.max_content_length] + "..."
        return text

    @staticmethod
    def _escape_control(text: str) -> str:
        return text.translate(_CONTROL_ESCAPES)


def render_table(headers: Sequence[str], rows: Sequence[Sequence[str]]) -> str:
    """Render rows as an ASCII grid.

    Example:
        +-------+-------+
        | input | error |
        +-------+-------+
        | (1 +  | '('   |
        +-------+-------+
    """
    widths = [len(header) for header in headers]
    for row in rows:
        for i, cell in enumerate(row):
            widths[i] = max(widths[i], len(cell))

    border = "+" + "+".join("-" * (w + 2) for w in widths) + "+"

    def render_row(cells: Sequence[str]) -> str:
        padded = (f" {cell.ljust(width)} " for cell, width in zip(cells, widths, strict=True))
        return "|" + "|".join(padded) + "|"

    lines = [border, render_row(headers), border]
    for row in rows:
        lines.append(render_row(row))
        lines.append(border)
    return "\n".join(lines)
