"""
Print command: read S-expressions and write them back in normalized form.

Usage:
    bytesexp print data.sexp            One datum, canonical form
    bytesexp print data.sexp --mach     Compact machine form
    bytesexp print data.sexp --many     Every datum in the file, one per line
"""

from __future__ import annotations

import argparse
import logging
from pathlib import Path

from bytesexp.config import Config
from bytesexp.parser import parse, parse_many
from bytesexp.printer import to_bytes, to_bytes_mach

from .utils import binary_stdout

logger = logging.getLogger(__name__)


def add_arguments(parser: argparse.ArgumentParser) -> None:
    """Register the print command's arguments."""
    parser.add_argument("input", help="S-expression file to read")
    parser.add_argument(
        "--mach",
        action="store_true",
        default=None,
        help="Print the compact machine form",
    )
    parser.add_argument(
        "--many",
        action="store_true",
        help="Read every datum in the file instead of exactly one",
    )


def run(args: argparse.Namespace, config: Config) -> int:
    """Run the print command. Parse and I/O errors propagate to the caller."""
    path = Path(args.input)
    contents = path.read_bytes()
    logger.debug("Read %d bytes from %s", len(contents), path)

    mach = args.mach if args.mach is not None else config.print.format == "mach"
    render = to_bytes_mach if mach else to_bytes
    options = {
        "max_depth": config.parse.depth_limit,
        "datum_comments": config.parse.datum_comments,
    }

    data = parse_many(contents, **options) if args.many else [parse(contents, **options)]

    out = binary_stdout()
    for datum in data:
        out.write(render(datum))
        out.write(b"\n")
    out.flush()
    return 0
