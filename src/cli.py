"""
Command-line interface for reporting the ECMAScript features used by a file.
"""

from __future__ import annotations

import argparse
import json
import logging
import sys
from pathlib import Path
from typing import List

from features import EsVersion
from frontend import FrontEndResult, run_frontend
from parser import JsSyntaxError

logger = logging.getLogger(__name__)

EXIT_OK = 0
EXIT_ERROR = 1
EXIT_TARGET_EXCEEDED = 2


def _format_location(line: int | None, column: int | None) -> str:
    if line is None:
        return ""
    if column is None:
        return f":{line}"
    return f":{line}:{column}"


def _print_diagnostics(messages: List[str]) -> None:
    if not messages:
        return
    for message in messages:
        sys.stderr.write(message + "\n")


def _collect_diagnostics(frontend_result: FrontEndResult) -> List[str]:
    diagnostics: List[str] = []
    source_name = frontend_result.parse.source_name
    for error in frontend_result.diagnostics:
        loc = _format_location(error.line, error.column)
        diagnostics.append(f"WARNING {source_name}{loc}: {error.description}")
    return diagnostics


def _render_text(frontend_result: FrontEndResult) -> str:
    lines: List[str] = []
    features = sorted(
        frontend_result.features, key=lambda feature: (feature.edition, feature.name)
    )
    if not features:
        lines.append("No edition-specific features detected.")
        return "\n".join(lines) + "\n"

    lines.append("Features:")
    for feature in features:
        lines.append(f"  {feature.edition.label:<7} {feature.title}")
    lines.append(f"Minimum edition: {frontend_result.minimum_edition!s}")
    return "\n".join(lines) + "\n"


def _render_json(frontend_result: FrontEndResult) -> str:
    edition = frontend_result.minimum_edition
    payload = {
        "source": frontend_result.parse.source_name,
        "features": sorted(feature.name for feature in frontend_result.features),
        "minimum_edition": edition.label if edition is not None else None,
    }
    return json.dumps(payload, indent=2) + "\n"


def check_command(args: argparse.Namespace) -> int:
    input_path = Path(args.input).resolve()
    if not input_path.exists():
        sys.stderr.write(f"ERROR: Input file not found: {input_path}\n")
        return EXIT_ERROR

    try:
        source = input_path.read_bytes()
    except OSError as exc:
        sys.stderr.write(f"ERROR: Failed to read {input_path}: {exc}\n")
        return EXIT_ERROR

    try:
        frontend_result = run_frontend(
            source, source_name=str(input_path), tolerant=args.tolerant
        )
    except JsSyntaxError as exc:
        sys.stderr.write(f"ERROR: Parsing failed: {exc}\n")
        return EXIT_ERROR

    _print_diagnostics(_collect_diagnostics(frontend_result))

    if args.format == "json":
        sys.stdout.write(_render_json(frontend_result))
    else:
        sys.stdout.write(_render_text(frontend_result))

    edition = frontend_result.minimum_edition
    if args.target is not None and edition is not None and edition > args.target:
        sys.stderr.write(
            f"ERROR {input_path}: requires {edition.label}, "
            f"target is {args.target.label}\n"
        )
        return EXIT_TARGET_EXCEEDED
    return EXIT_OK


def _edition(value: str) -> EsVersion:
    try:
        return EsVersion.parse(value)
    except ValueError as exc:
        raise argparse.ArgumentTypeError(str(exc)) from exc


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="js-version-check",
        description="Detect the minimum ECMAScript edition required by JavaScript source",
    )
    parser.add_argument(
        "-v",
        "--verbose",
        action="store_true",
        help="Enable debug logging on stderr.",
    )
    subparsers = parser.add_subparsers(dest="command")

    check_parser = subparsers.add_parser(
        "check", help="Report the features and minimum edition of a JS file"
    )
    check_parser.add_argument("input", help="Path to the JavaScript file")
    check_parser.add_argument(
        "--tolerant",
        action="store_true",
        help="Analyse files with syntax errors, reporting them as warnings.",
    )
    check_parser.add_argument(
        "--format",
        choices=["text", "json"],
        default="text",
        help="Output format (default: text).",
    )
    check_parser.add_argument(
        "--target",
        type=_edition,
        default=None,
        help="Fail with exit code 2 when the file needs a later edition (e.g. ES2020).",
    )
    check_parser.add_argument(
        "-v",
        "--verbose",
        action="store_true",
        default=argparse.SUPPRESS,
        help="Enable debug logging on stderr.",
    )
    check_parser.set_defaults(func=check_command)

    return parser


def main(argv: List[str] | None = None) -> int:
    parser = build_parser()
    args = parser.parse_args(argv)
    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.WARNING,
        format="%(levelname)s %(name)s: %(message)s",
        stream=sys.stderr,
    )
    if not hasattr(args, "func"):
        parser.print_help()
        return EXIT_ERROR
    logger.debug("running %s", args.command)
    return args.func(args)


if __name__ == "__main__":
    sys.exit(main())
