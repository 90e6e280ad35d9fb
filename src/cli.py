"""
Command-line interface for reporting scopes and bindings of JavaScript files.
"""

from __future__ import annotations

import argparse
import sys
from pathlib import Path
from typing import List

import esprima
from loguru import logger

from frontend import AnalysisOptions, run_frontend
from report import FORMATS, ReportOptions, render_report


def _format_location(line: int | None, column: int | None) -> str:
    if line is None:
        return ""
    if column is None:
        return f":{line}"
    return f":{line}:{column}"


def _print_diagnostics(messages: List[str]) -> None:
    for message in messages:
        sys.stderr.write(message + "\n")


def _configure_logging(verbose: bool) -> None:
    logger.remove()
    logger.enable("analyzer")
    logger.enable("frontend")
    logger.add(sys.stderr, level="DEBUG" if verbose else "WARNING")


def report_command(args: argparse.Namespace) -> int:
    input_path = Path(args.input).resolve()
    if not input_path.exists():
        sys.stderr.write(f"ERROR: Input file not found: {input_path}\n")
        return 1

    try:
        source = input_path.read_text(encoding="utf-8")
    except OSError as exc:
        sys.stderr.write(f"ERROR: Failed to read {input_path}: {exc}\n")
        return 1

    source_type = "module" if args.module else "script"
    options = AnalysisOptions(ambient=tuple(args.ambient or ()))

    try:
        frontend_result = run_frontend(
            source,
            source_name=str(input_path),
            tolerant=not args.strict,
            source_type=source_type,
            options=options,
        )
    except esprima.Error as exc:
        sys.stderr.write(f"ERROR {input_path}: {exc}\n")
        return 1

    if frontend_result.analysis is None:
        sys.stderr.write("ERROR: Parsing failed; no AST produced.\n")
        for error in frontend_result.parse.errors:
            loc = _format_location(error.line, error.column)
            sys.stderr.write(f"  {error.description}{loc}\n")
        return 1

    diagnostics = [
        f"WARNING {input_path}{_format_location(error.line, error.column)}: {error.description}"
        for error in frontend_result.parse.errors
    ]
    _print_diagnostics(diagnostics)

    report = render_report(
        frontend_result.analysis,
        ReportOptions(format=args.format, include_unreferenced=not args.referenced_only),
    )

    if args.out:
        output_path = Path(args.out)
        output_path.parent.mkdir(parents=True, exist_ok=True)
        output_path.write_text(report.text, encoding="utf-8")
    else:
        sys.stdout.write(report.text)

    if args.strict and diagnostics:
        return 1
    return 0


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="jsscope", description="Report lexical scopes and bindings of JavaScript files"
    )
    parser.add_argument("--verbose", action="store_true", help="Log analysis details to stderr.")
    subparsers = parser.add_subparsers(dest="command")

    report_parser = subparsers.add_parser("report", help="Report the bindings of a single JS file")
    report_parser.add_argument("input", help="Path to the JavaScript file")
    report_parser.add_argument("--out", help="Write the report to this file instead of stdout")
    report_parser.add_argument(
        "--format", choices=FORMATS, default="text", help="Report format (default: text)"
    )
    report_parser.add_argument(
        "--global",
        dest="ambient",
        action="append",
        metavar="NAME",
        help="Declare an ambient global name in the root scope (repeatable).",
    )
    report_parser.add_argument(
        "--referenced-only",
        action="store_true",
        help="Omit bindings that are never referenced.",
    )
    report_parser.add_argument(
        "--strict",
        action="store_true",
        help="Treat parse warnings as errors and disable tolerant parsing.",
    )
    report_parser.add_argument(
        "--module",
        action="store_true",
        help="Parse the input as an ES module (enables import/export syntax).",
    )
    report_parser.set_defaults(func=report_command)

    return parser


def main(argv: List[str] | None = None) -> int:
    parser = build_parser()
    args = parser.parse_args(argv)
    _configure_logging(args.verbose)
    if not hasattr(args, "func"):
        parser.print_help()
        return 1
    return args.func(args)


if __name__ == "__main__":
    sys.exit(main())
