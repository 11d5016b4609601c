"""
Command line entry point.

Re-indents Puppet manifests and prints them, rewrites them in place, or
checks that they are already indented.
"""

import argparse
import sys
from pathlib import Path
from typing import List, Optional, Tuple

from pydantic import ValidationError

from ppindent.config import Settings
from ppindent.services import Reindenter, UnsupportedFileError, get_reindenter
from ppindent.utils.logging import get_logger, setup_logging

logger = get_logger(__name__)

EXIT_OK = 0
EXIT_WOULD_CHANGE = 1
EXIT_ERROR = 2


def parse_line_range(value: str) -> Tuple[int, int]:
    """Parse ``START:END`` (1-indexed, inclusive)."""
    try:
        start, end = (int(part) for part in value.split(":", 1))
    except ValueError:
        raise argparse.ArgumentTypeError(f"Expected START:END, got '{value}'")
    if start < 1 or end < start:
        raise argparse.ArgumentTypeError(f"Invalid line range '{value}'")
    return start, end


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="ppindent",
        description="Re-indent Puppet manifests from their syntax tree.",
    )
    parser.add_argument("paths", nargs="+", type=Path, help="Manifest files to process")
    mode = parser.add_mutually_exclusive_group()
    mode.add_argument("-w", "--write", action="store_true", help="Rewrite files in place")
    mode.add_argument("--check", action="store_true", help="Exit 1 if any file would change")
    parser.add_argument("--lines", type=parse_line_range, help="Only re-indent START:END")
    parser.add_argument("--indent-width", type=int, help="Spaces per indent level")
    parser.add_argument("--use-tabs", action="store_true", default=None, help="Indent with tabs")
    parser.add_argument("--log-level", help="Log level (DEBUG, INFO, WARNING, ...)")
    return parser


def run(argv: Optional[List[str]] = None, reindenter: Optional[Reindenter] = None) -> int:
    """
    Run the command line and return its exit status.

    Args:
        argv: Arguments (defaults to sys.argv[1:])
        reindenter: Service to use (defaults to one with the bundled plugins)
    """
    args = build_parser().parse_args(argv)

    overrides = {}
    if args.indent_width is not None:
        overrides["indent_width"] = args.indent_width
    if args.use_tabs is not None:
        overrides["use_tabs"] = args.use_tabs
    if args.log_level is not None:
        overrides["log_level"] = args.log_level.upper()
    try:
        settings = Settings(**overrides)
    except ValidationError as e:
        print(f"ppindent: invalid settings: {e}", file=sys.stderr)
        return EXIT_ERROR

    setup_logging(settings.log_level, json_format=settings.json_logs)
    config = settings.indent_config()
    reindenter = reindenter or get_reindenter()

    start_line, end_line = args.lines if args.lines else (None, None)
    status = EXIT_OK

    for path in args.paths:
        try:
            content = path.read_bytes().decode("utf8")
            result = reindenter.reindent(
                str(path), content, config,
                start_line=start_line, end_line=end_line,
            )
        except (OSError, UnsupportedFileError, ValueError) as e:
            logger.error(f"Cannot re-indent {path}: {e}", extra={"file_path": str(path)})
            print(f"ppindent: {path}: {e}", file=sys.stderr)
            status = EXIT_ERROR
            continue

        if args.check:
            if result.is_changed:
                print(f"{path}: {len(result.changed_lines)} line(s) would be re-indented")
                status = max(status, EXIT_WOULD_CHANGE)
        elif args.write:
            if result.is_changed:
                path.write_bytes(result.formatted_text.encode("utf8"))
                logger.info(f"Re-indented {path}", extra={"file_path": str(path)})
        else:
            sys.stdout.write(result.formatted_text)

    return status


def main() -> None:
    sys.exit(run())


if __name__ == "__main__":
    main()
