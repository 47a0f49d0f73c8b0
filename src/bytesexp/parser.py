"""
S-expression parser.

Builds Atom/List trees from the scanner's token stream. Nesting is tracked
with an explicit stack of in-progress list frames rather than recursion, so
adversarially deep input cannot exhaust the interpreter stack; an optional
``max_depth`` bounds memory use as well.

Usage:
    from bytesexp.parser import parse, parse_many

    tree = parse(b"(a (b c) d)")
    for datum in parse_many(b"(x) y ; comment\\n(z)"):
        ...
"""

from __future__ import annotations

import logging
from pathlib import Path
from typing import Iterator, Optional, Tuple

from bytesexp.exceptions import (
    DanglingDatumCommentError,
    DepthExceededError,
    TrailingDataError,
    UnexpectedEofError,
    UnmatchedCloseError,
)
from bytesexp.scanner import Input, Scanner, TokenType
from bytesexp.types import Atom, List, Sexp

logger = logging.getLogger(__name__)


class Parser:
    """
    Parser over one in-memory input.

    Successive calls to next_datum() read successive top-level data. A
    parser is not reusable once an error has been raised.

    Args:
        data: Input bytes (text is encoded as UTF-8)
        max_depth: Maximum list nesting depth, or None for no limit
        datum_comments: Treat ``#;`` as a comment covering the next datum
    """

    def __init__(
        self,
        data: Input,
        max_depth: Optional[int] = None,
        datum_comments: bool = False,
    ):
        if max_depth is not None and max_depth < 0:
            raise ValueError(f"max_depth must be non-negative, got {max_depth}")
        self.scanner = Scanner(data, datum_comments=datum_comments)
        self.max_depth = max_depth
        self.datum_comments = datum_comments
        self.last_offset = 0  # offset of the most recent datum's first byte

    @property
    def offset(self) -> int:
        """Current cursor position in the input."""
        return self.scanner.pos

    def parse(self) -> Sexp:
        """Parse exactly one datum; anything but blanks after it is an error."""
        datum = self.next_datum()
        if datum is None:
            raise UnexpectedEofError(self.scanner.length)
        self._expect_end()
        return datum

    def iter_data(self) -> Iterator[Sexp]:
        """Yield every top-level datum until the end of input."""
        count = 0
        while True:
            datum = self.next_datum()
            if datum is None:
                logger.debug("Parsed %d data from %d bytes", count, self.scanner.length)
                return
            count += 1
            yield datum

    def next_datum(self) -> Optional[Sexp]:
        """
        Read the next complete top-level datum.

        Returns:
            The datum, or None if only whitespace and comments remain.
        """
        scanner = self.scanner
        frames: list[list[Sexp]] = []
        # Offsets of unresolved "#;" markers, one list per nesting level
        pending: list[list[int]] = [[]]
        start = 0

        while True:
            token = scanner.next_token()
            if token is None:
                break

            if not frames and token.type is not TokenType.CLOSE:
                start = token.offset

            if token.type is TokenType.OPEN:
                if self.max_depth is not None and len(frames) >= self.max_depth:
                    logger.debug("Nesting depth limit %d hit at offset %d", self.max_depth, token.offset)
                    raise DepthExceededError(
                        token.offset,
                        context={"max_depth": self.max_depth},
                    )
                frames.append([])
                pending.append([])
                continue

            if token.type is TokenType.DATUM_COMMENT:
                pending[-1].append(token.offset)
                continue

            if token.type is TokenType.ATOM:
                datum: Sexp = Atom(token.data)
            else:
                if not frames:
                    raise UnmatchedCloseError(token.offset)
                if pending[-1]:
                    raise DanglingDatumCommentError(pending[-1][0])
                pending.pop()
                datum = List(frames.pop())

            if pending[-1]:
                pending[-1].pop()
            elif frames:
                frames[-1].append(datum)
            else:
                self.last_offset = start
                return datum

        if frames:
            raise UnexpectedEofError(scanner.length, context={"open_lists": len(frames)})
        if pending[0]:
            raise DanglingDatumCommentError(pending[0][0])
        return None

    def _expect_end(self) -> None:
        """Fail with TrailingData unless only blanks and comments remain."""
        scanner = self.scanner
        while not scanner.at_end:
            offset = scanner.pos
            if not (self.datum_comments and scanner.data.startswith(b"#;", offset)):
                raise TrailingDataError(offset)
            # "#; x" is a comment; anything read after it is real trailing data
            if self.next_datum() is not None:
                raise TrailingDataError(self.last_offset)


def parse(data: Input, max_depth: Optional[int] = None, datum_comments: bool = False) -> Sexp:
    """
    Parse bytes holding exactly one S-expression.

    Raises:
        ParseError: On malformed input. Empty or comment-only input raises
            UnexpectedEofError; data after the first datum raises
            TrailingDataError at the offset of its first byte.
    """
    return Parser(data, max_depth=max_depth, datum_comments=datum_comments).parse()


def parse_many(
    data: Input, max_depth: Optional[int] = None, datum_comments: bool = False
) -> Iterator[Sexp]:
    """
    Lazily parse a sequence of S-expressions.

    Data are yielded as they complete. The first error is raised from the
    iterator where it occurs; data yielded before it remain valid and
    nothing after it is produced.
    """
    yield from Parser(data, max_depth=max_depth, datum_comments=datum_comments).iter_data()


def parse_prefix(
    data: Input, max_depth: Optional[int] = None, datum_comments: bool = False
) -> Tuple[Sexp, int]:
    """
    Parse the first datum and report where it ended.

    Returns:
        (datum, offset) where offset is the index just past the datum and
        any blanks and comments following it.
    """
    parser = Parser(data, max_depth=max_depth, datum_comments=datum_comments)
    datum = parser.next_datum()
    if datum is None:
        raise UnexpectedEofError(parser.scanner.length)
    parser.scanner.skip_blank()
    return datum, parser.offset


def parse_file(
    path: str | Path, max_depth: Optional[int] = None, datum_comments: bool = False
) -> Sexp:
    """Parse a file holding exactly one S-expression."""
    data = Path(path).read_bytes()
    return parse(data, max_depth=max_depth, datum_comments=datum_comments)


def parse_many_file(
    path: str | Path, max_depth: Optional[int] = None, datum_comments: bool = False
) -> list[Sexp]:
    """Parse every S-expression in a file."""
    data = Path(path).read_bytes()
    return list(parse_many(data, max_depth=max_depth, datum_comments=datum_comments))


__all__ = ["Parser", "parse", "parse_many", "parse_prefix", "parse_file", "parse_many_file"]
