"""
Bench command: time repeated parsing and printing of an in-memory file.

Usage:
    bytesexp bench data.sexp --iterations 100
    bytesexp bench data.sexp -o normalized.sexp
"""

from __future__ import annotations

import argparse
import logging
import time
from pathlib import Path

from bytesexp.config import Config
from bytesexp.parser import parse
from bytesexp.types import Sexp

logger = logging.getLogger(__name__)


def add_arguments(parser: argparse.ArgumentParser) -> None:
    """Register the bench command's arguments."""
    parser.add_argument("input", help="S-expression file to use as input")
    parser.add_argument(
        "-o",
        "--output",
        help="Write the printed S-expression to this file",
    )
    parser.add_argument(
        "--iterations",
        type=int,
        default=1,
        help="Number of parse and print passes (default: 1)",
    )


def count_atoms(sexp: Sexp) -> tuple[int, int]:
    """Return (number of atoms, total atom bytes) in a tree."""
    atoms = 0
    size = 0
    for atom in sexp.iter_atoms():
        atoms += 1
        size += len(atom.data)
    return atoms, size


def run(args: argparse.Namespace, config: Config) -> int:
    """Run the bench command."""
    if args.iterations < 1:
        logger.error("--iterations must be at least 1, got %d", args.iterations)
        return 1

    path = Path(args.input)
    logger.info("Reading %s", path)
    contents = path.read_bytes()
    logger.info("Read %d bytes", len(contents))

    options = {
        "max_depth": config.parse.depth_limit,
        "datum_comments": config.parse.datum_comments,
    }

    start = time.perf_counter()
    for _ in range(args.iterations):
        value = parse(contents, **options)
    elapsed = time.perf_counter() - start
    logger.info(
        "Parsed %d times in %.3fs (%.1f MB/s)",
        args.iterations,
        elapsed,
        _throughput(len(contents) * args.iterations, elapsed),
    )

    atoms, size = count_atoms(value)
    logger.info("Found %d atoms, total of %d bytes", atoms, size)

    start = time.perf_counter()
    for _ in range(args.iterations):
        printed = value.to_bytes()
    elapsed = time.perf_counter() - start
    logger.info(
        "Printed %d times in %.3fs (%.1f MB/s)",
        args.iterations,
        elapsed,
        _throughput(len(printed) * args.iterations, elapsed),
    )

    if args.output:
        Path(args.output).write_bytes(printed)
        logger.info("Wrote %d bytes to %s", len(printed), args.output)

    return 0


def _throughput(size: int, elapsed: float) -> float:
    if elapsed <= 0:
        return 0.0
    return size / elapsed / 1e6
