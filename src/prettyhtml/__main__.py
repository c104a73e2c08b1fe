"""Command line entry point: ``prettyhtml [FILE ...]``."""

import argparse
import os
import sys
from pathlib import Path

from .api import format as format_markup
from .errors import FormatError
from .options import FormatOptions


def parse_args(argv=None) -> argparse.Namespace:
    parser = argparse.ArgumentParser(prog="prettyhtml", description="Pretty-print HTML templates.")
    parser.add_argument(
        "files",
        nargs="*",
        type=Path,
        help="Files to format (reads stdin and writes stdout when omitted)",
    )
    parser.add_argument("--indent", type=int, default=None, help="Spaces per indent level (default: 4)")
    parser.add_argument("--tabs", action="store_true", help="Indent with tabs instead of spaces")
    parser.add_argument(
        "--close-tag-same-line",
        action="store_true",
        help="Keep '>' on the last attribute line of elements with wrapped attributes",
    )
    parser.add_argument(
        "--compact",
        type=str,
        default=None,
        help="Tags whose content is collapsed onto one line (comma-separated, default: p,li,span)",
    )
    parser.add_argument(
        "--no-icu",
        action="store_true",
        help="Treat '{' in text as plain text instead of an ICU message form",
    )
    mode = parser.add_mutually_exclusive_group()
    mode.add_argument("-w", "--write", action="store_true", help="Rewrite files in place")
    mode.add_argument(
        "--check",
        action="store_true",
        help="Only report files that would change (exits 1 if any)",
    )
    parser.add_argument(
        "--debug",
        action="store_true",
        default=os.environ.get("PRETTYHTML_DEBUG", "0") == "1",
        help="Trace parsing and rendering decisions on stderr (also PRETTYHTML_DEBUG=1)",
    )
    return parser.parse_args(argv)


def build_options(args: argparse.Namespace) -> FormatOptions:
    return FormatOptions.from_mapping(
        {
            "indent_size": args.indent,
            "use_spaces": not args.tabs,
            "close_tag_same_line": args.close_tag_same_line,
            "compact_inline_tags": args.compact,
        }
    )


def _format_source(source, args, options):
    return format_markup(source, options, expansion_forms=not args.no_icu, debug=args.debug)


def main(argv=None) -> int:
    args = parse_args(argv)
    try:
        options = build_options(args)
    except (TypeError, ValueError) as exc:
        print(f"prettyhtml: {exc}", file=sys.stderr)
        return 2

    if not args.files:
        try:
            sys.stdout.write(_format_source(sys.stdin.read(), args, options))
        except FormatError as exc:
            print(f"<stdin>: {exc}", file=sys.stderr)
            return 2
        return 0

    status = 0
    for path in args.files:
        try:
            source = path.read_text(encoding="utf-8")
            formatted = _format_source(source, args, options)
        except (OSError, FormatError) as exc:
            print(f"{path}: {exc}", file=sys.stderr)
            status = 2
            continue

        if args.check:
            if formatted != source:
                print(f"would reformat {path}")
                status = max(status, 1)
        elif args.write:
            if formatted != source:
                path.write_text(formatted, encoding="utf-8")
                print(f"reformatted {path}")
        else:
            sys.stdout.write(formatted)
    return status


if __name__ == "__main__":
    sys.exit(main())
