"""Command line front end: parse a KCL program and report the result.

Usage:
    kclparse --file shapes.kcl
    cat shapes.kcl | kclparse
    kclparse --file shapes.kcl --format json
    python -m kclparse --file shapes.kcl --verbose

Source Selection:
    Piped stdin takes precedence; when stdin is a terminal, --file is read.

Exit Codes:
    0   Program parsed completely
    1   Parse failure, or part of the source was not parsed
    2   No input, unreadable input, or input over the size limit

Python 3.13+.
"""

from __future__ import annotations

import argparse
import logging
import sys
from pathlib import Path

from kclparse.diagnostics import (
    DiagnosticFormatter,
    ErrorTemplate,
    KclSyntaxError,
    OutputFormat,
    UnparsedInputError,
    render_table,
)
from kclparse.introspection import list_functions
from kclparse.syntax.cursor import ParseError
from kclparse.syntax.parser import KclParser

__all__ = ["main"]

logger = logging.getLogger(__name__)

EXIT_OK = 0
EXIT_PARSE_FAILURE = 1
EXIT_INPUT_ERROR = 2

TRACE_EXPLANATION = (
    "Your program did not parse. Here is the chain of parser errors. "
    "This is similar to a stack trace: the top row is the deepest parser in "
    "the parse tree. The bottom row is the parse tree root."
)

_FUNCTION_HEADERS: tuple[str, ...] = ("name", "line", "column", "length")


class _SourceError(Exception):
    """Input could not be obtained; carries the message to print."""


def _build_arg_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="kclparse",
        description="Parse a KCL program and list its function definitions.",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Examples:
  # Parse a file:
  kclparse --file shapes.kcl

  # Parse piped source, machine-readable errors:
  cat shapes.kcl | kclparse --format json
""",
    )
    parser.add_argument(
        "--file",
        type=Path,
        help="KCL source file (ignored when source is piped via stdin)",
    )
    parser.add_argument(
        "--format",
        choices=["table", *(fmt.value for fmt in OutputFormat)],
        default="table",
        help="How to report parse failures (default: table)",
    )
    parser.add_argument(
        "--max-depth",
        type=int,
        default=None,
        help="Maximum expression nesting depth (0 disables the limit)",
    )
    parser.add_argument(
        "--verbose",
        "-v",
        action="store_true",
        help="Log parser activity at DEBUG level",
    )
    return parser


def _read_source(file: Path | None) -> str:
    """Read piped stdin, else the --file argument.

    Raises:
        _SourceError: If neither is available or reading fails
    """
    stdin = sys.stdin
    if stdin is not None and not stdin.isatty():
        logger.debug("Reading source from stdin")
        try:
            return stdin.buffer.read().decode("utf-8")
        except (OSError, UnicodeDecodeError) as e:
            raise _SourceError(ErrorTemplate.source_unreadable("stdin", str(e)).message) from e

    if file is None:
        raise _SourceError(ErrorTemplate.source_missing().message)

    logger.debug("Reading source from %s", file)
    try:
        return file.read_text(encoding="utf-8")
    except (OSError, UnicodeDecodeError) as e:
        raise _SourceError(ErrorTemplate.source_unreadable(str(file), str(e)).message) from e


def _report_failure(error: KclSyntaxError, output_format: str) -> None:
    """Write a parse failure to stderr in the requested format."""
    formatter = DiagnosticFormatter(
        output_format=OutputFormat.RUST if output_format == "table" else OutputFormat(output_format)
    )
    match output_format:
        case "table":
            print(TRACE_EXPLANATION, file=sys.stderr)
            print(formatter.format_trace(error.trace), file=sys.stderr)
        case "json":
            print(formatter.format_trace_json(error.trace), file=sys.stderr)
        case "rust" if error.diagnostic is not None and error.trace:
            print(formatter.format(error.diagnostic), file=sys.stderr)
            print(file=sys.stderr)
            print(ParseError(error.trace).source_excerpt(), file=sys.stderr)
        case _:
            if error.diagnostic is not None:
                print(formatter.format(error.diagnostic), file=sys.stderr)
            else:
                print(str(error), file=sys.stderr)


def _report_unparsed(error: UnparsedInputError, output_format: str) -> None:
    if output_format == "table":
        print(str(error), file=sys.stderr)
        return
    formatter = DiagnosticFormatter(output_format=OutputFormat(output_format))
    if error.diagnostic is not None:
        print(formatter.format(error.diagnostic), file=sys.stderr)
    else:
        print(str(error), file=sys.stderr)


def main(argv: list[str] | None = None) -> int:
    """Main entry point.

    Args:
        argv: Arguments excluding the program name (default: sys.argv[1:])

    Returns:
        Process exit code
    """
    args = _build_arg_parser().parse_args(argv)

    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.WARNING,
        format="%(levelname)s %(name)s: %(message)s",
    )

    try:
        source = _read_source(args.file)
    except _SourceError as e:
        print(f"[ERROR] {e}", file=sys.stderr)
        return EXIT_INPUT_ERROR

    parser = KclParser(max_nesting_depth=args.max_depth)
    try:
        program = parser.parse(source)
    except ValueError as e:
        # Source over the size limit.
        print(f"[ERROR] {e}", file=sys.stderr)
        return EXIT_INPUT_ERROR
    except UnparsedInputError as e:
        _report_unparsed(e, args.format)
        return EXIT_PARSE_FAILURE
    except KclSyntaxError as e:
        _report_failure(e, args.format)
        return EXIT_PARSE_FAILURE

    print("Successfully parsed your program")
    rows = []
    for summary in list_functions(program):
        location = summary.source_range
        if location is None:
            continue
        rows.append(
            (summary.name, str(location.start_line), str(location.start_column), str(location.length))
        )
    print(render_table(_FUNCTION_HEADERS, rows))
    return EXIT_OK


if __name__ == "__main__":
    sys.exit(main())
