#!/usr/bin/env -S uv run --script
# /// script
# requires-python = '>=3.11'
# dependencies = [
#   "colorama",
#   "tqdm"
# ]
# ///
"""
colorbindiff - side-by-side visual diff for binary files

Shows byte modifications, additions and deletions whatever the number of
changed bytes, keeping both files' columns aligned. The default engine runs
the external `diff` command (GNU diffutils, as found on Linux or Cygwin).
Not suited for large and very different files.

Usage:
    ./run_bindiff.py old.bin new.bin
    ./run_bindiff.py --cols 8 --only-changes old.bin new.bin
    ./run_bindiff.py --no-color old.bin new.bin > report.txt
    ./run_bindiff.py --engine difflib old.bin new.bin
"""

import argparse
import os
import sys
from pathlib import Path

import colorama

from colorbindiff.compare import write_comparison
from colorbindiff.config import DEFAULT_COLS, DEFAULT_ENGINE, ENGINES, DisplayOptions
from colorbindiff.stage2_align import AlignmentEngineError, MalformedAlignmentError


def positive_int(value: str) -> int:
    try:
        n = int(value)
    except ValueError:
        raise argparse.ArgumentTypeError(f"not an integer: {value!r}")
    if n < 1:
        raise argparse.ArgumentTypeError(f"must be at least 1: {n}")
    return n


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        description="Show a side-by-side binary comparison of FILE1 and FILE2.",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog=__doc__
    )

    parser.add_argument("file1", type=Path, help="Old file")
    parser.add_argument("file2", type=Path, help="New file")

    # Display options
    parser.add_argument(
        "--cols", type=positive_int, default=DEFAULT_COLS,
        help=f"Display N columns of bytes (default: {DEFAULT_COLS})"
    )
    parser.add_argument(
        "--no-color", action="store_true",
        help="Don't colorize output. Needed if you view the output in an editor."
    )
    parser.add_argument(
        "--no-marker", action="store_true",
        help="Don't use the change markers (+ added, - deleted, * modified)"
    )
    parser.add_argument(
        "--no-ascii", action="store_true",
        help="Don't show the ascii columns"
    )
    parser.add_argument(
        "--only-changes", action="store_true",
        help="Only display lines with changes"
    )
    parser.add_argument(
        "--no-header", action="store_true",
        help="Don't print the header line"
    )

    # Engine options
    parser.add_argument(
        "--engine", choices=ENGINES, default=DEFAULT_ENGINE,
        help=f"Byte alignment engine (default: {DEFAULT_ENGINE})"
    )
    parser.add_argument(
        "--progress", action="store_true",
        help="Show progress bars on stderr while encoding the inputs"
    )

    return parser


def options_from_args(args: argparse.Namespace) -> DisplayOptions:
    return DisplayOptions(
        cols=args.cols,
        color=not args.no_color,
        marker=not args.no_marker,
        ascii=not args.no_ascii,
        only_changes=args.only_changes,
        header=not args.no_header,
    )


def _silence_stdout():
    """Point stdout at devnull so the exit-time flush doesn't hit the closed pipe."""
    devnull = os.open(os.devnull, os.O_WRONLY)
    os.dup2(devnull, sys.stdout.fileno())
    os.close(devnull)


def main(argv=None) -> int:
    args = build_parser().parse_args(argv)
    options = options_from_args(args)

    if options.color:
        colorama.just_fix_windows_console()

    try:
        write_comparison(
            args.file1,
            args.file2,
            sys.stdout,
            options,
            engine=args.engine,
            show_progress=args.progress,
        )
    except BrokenPipeError:
        # Reader went away (e.g. piped into head); stop quietly
        _silence_stdout()
        return 0
    except OSError as e:
        print(f"Error: {e}", file=sys.stderr)
        return 1
    except (AlignmentEngineError, MalformedAlignmentError) as e:
        print(f"Error: {e}", file=sys.stderr)
        return 1

    return 0


if __name__ == "__main__":
    sys.exit(main())
