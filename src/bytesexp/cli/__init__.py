"""
Command-line interface for bytesexp.

    bytesexp print <file>     - Parse a file and print it in normalized form
    bytesexp bench <file>     - Time parsing and printing of a file
    bytesexp config           - Show or initialize configuration

Examples:
    bytesexp print data.sexp --mach
    bytesexp print stream.sexp --many
    bytesexp bench big.sexp --iterations 20 -o normalized.sexp
    bytesexp config --init
"""

import argparse
import sys
from typing import List, Optional

from bytesexp import __version__
from bytesexp.config import Config
from bytesexp.exceptions import SexpError

from . import bench_cmd, config_cmd, print_cmd
from .utils import print_error, setup_logging

__all__ = ["main", "build_parser"]

COMMANDS = {
    "print": (print_cmd, "Parse a file and print it in normalized form"),
    "bench": (bench_cmd, "Time repeated parsing and printing of a file"),
    "config": (config_cmd, "Show or initialize configuration"),
}


def build_parser() -> argparse.ArgumentParser:
    """Build the argument parser with all subcommands."""
    parser = argparse.ArgumentParser(
        prog="bytesexp",
        description="S-expression parsing and printing tools",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog=__doc__,
    )
    parser.add_argument("--version", action="version", version=f"bytesexp {__version__}")
    parser.add_argument(
        "-v", "--verbose", action="store_true", default=None, help="Enable debug logging"
    )
    parser.add_argument(
        "-q", "--quiet", action="store_true", default=None, help="Only log warnings and errors"
    )

    subparsers = parser.add_subparsers(dest="command", help="Available commands")
    for name, (module, help_text) in COMMANDS.items():
        module.add_arguments(subparsers.add_parser(name, help=help_text))

    return parser


def main(argv: Optional[List[str]] = None) -> int:
    """Main entry point for the bytesexp CLI."""
    parser = build_parser()
    args = parser.parse_args(argv)

    if not args.command:
        parser.print_help()
        return 0

    try:
        config = Config.load()
    except SexpError as e:
        print_error(e)
        return 1

    verbose = args.verbose if args.verbose is not None else config.defaults.verbose
    quiet = args.quiet if args.quiet is not None else config.defaults.quiet
    setup_logging(verbose=verbose, quiet=quiet)

    module, _ = COMMANDS[args.command]
    try:
        return module.run(args, config)
    except (SexpError, OSError) as e:
        print_error(e, verbose=verbose)
        return 1


if __name__ == "__main__":
    sys.exit(main())
