from __future__ import annotations

import argparse
import logging
import sys

from .errors import LinknameGenError, UsageError
from .toolchain import debug_enabled

logger = logging.getLogger("linkname_gen")

_USAGE = """\
linkname-gen [flags] -symbol S -def F [directory]
       linkname-gen [flags] -symbol S -def F files... # Must be a single package"""

_DESCRIPTION = """\
Create a self-contained Go source file holding the go:linkname statement that
binds -def to -symbol, with the imports it needs resolved through the target
package's own import graph (vendored paths included).

With no arguments, the package in the current directory is processed.
Otherwise the arguments must name a single directory holding a Go package or a
set of Go source files that represent a single Go package."""


def _parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="linkname-gen",
        usage=_USAGE,
        description=_DESCRIPTION,
        formatter_class=argparse.RawDescriptionHelpFormatter,
        allow_abbrev=False,
    )
    parser.add_argument("-symbol", default="", help="name of the symbol to be bound to")
    parser.add_argument(
        "-def",
        dest="definition",
        default="",
        help="definition of the function to be bound to -symbol",
    )
    parser.add_argument(
        "-output",
        default=None,
        help="output file name; default srcdir/sym_linkname.go",
    )
    parser.add_argument("paths", nargs="*", help="package directory or source files")
    return parser


def main(argv: list[str] | None = None) -> None:
    if argv is None:
        argv = sys.argv[1:]
    logging.basicConfig(
        format="linkname-gen: %(message)s",
        level=logging.DEBUG if debug_enabled() else logging.WARNING,
    )

    parser = _parser()
    args = parser.parse_args(argv)
    if not args.symbol or not args.definition:
        parser.print_help(sys.stderr)
        raise SystemExit(2)

    from .generate import GenerateRequest, run

    request = GenerateRequest(
        symbol=args.symbol,
        definition=args.definition,
        paths=list(args.paths),
        output=args.output,
        argv=list(argv),
    )
    try:
        run(request)
    except UsageError as e:
        logger.error("%s", e)
        parser.print_usage(sys.stderr)
        raise SystemExit(2) from e
    except LinknameGenError as e:
        logger.error("%s", e)
        raise SystemExit(1) from e
