"""
BFFI command line

Compiles and runs each source file in turn, stopping at the first failure.
"""

import argparse
import sys
from typing import List, Optional

from . import __version__
from .api.context import Context
from .api.tape import DEFAULT_TAPE_SIZE
from .compiler.errors import BffiError


def positive_int(text: str) -> int:
    value = int(text)
    if value < 1:
        raise argparse.ArgumentTypeError(f"must be at least 1, got {value}")
    return value


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="bffi",
        description="Compile and run tape-language programs.",
    )
    parser.add_argument("files", nargs="*", metavar="FILE",
                        help="source files, run one after another")
    parser.add_argument("--tape-size", type=positive_int, default=DEFAULT_TAPE_SIZE,
                        help=f"number of tape cells (default: {DEFAULT_TAPE_SIZE})")
    parser.add_argument("--debug", action="store_true",
                        help="print compile and run diagnostics to stderr")
    parser.add_argument("--version", action="version", version=f"%(prog)s {__version__}")
    return parser


def main(argv: Optional[List[str]] = None) -> int:
    args = build_parser().parse_args(argv)
    ctx = Context(tape_size=args.tape_size, debug=args.debug)

    try:
        for path in args.files:
            try:
                ctx.run_file(path)
            except BffiError as e:
                print(f"bffi: {e}", file=sys.stderr)
                return 1
            except OSError:
                print(f"failed to open file '{path}'", file=sys.stderr)
                return 1
    except KeyboardInterrupt:
        return 130

    return 0


if __name__ == "__main__":
    sys.exit(main())
