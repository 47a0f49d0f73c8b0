"""
Tokenizer for S-expression bytes.

Turns a byte string into a lazy stream of tokens: OPEN, CLOSE and ATOM
(plus DATUM_COMMENT when datum comments are enabled). Whitespace, ``;``
line comments and nested ``#| ... |#`` block comments are skipped.

Quoted atoms understand the escapes ``\\\\ \\" \\n \\t \\b \\r``, ``\\xHH``,
``\\DDD`` (octal) and a backslash-newline line continuation. Unquoted atoms
are copied verbatim.
"""

from __future__ import annotations

import re
from dataclasses import dataclass
from enum import Enum
from typing import Iterator, Optional, Union

from bytesexp.exceptions import (
    InvalidEscapeError,
    UnexpectedSequenceError,
    UnterminatedCommentError,
    UnterminatedStringError,
)

Input = Union[bytes, bytearray, memoryview, str]

SPACE = 0x20
TAB = 0x09
LF = 0x0A
CR = 0x0D
LPAREN = 0x28
RPAREN = 0x29
QUOTE = 0x22
SEMICOLON = 0x3B
BACKSLASH = 0x5C
HASH = 0x23
PIPE = 0x7C

WHITESPACE = frozenset((SPACE, TAB, LF, CR))

# Escapes that map one byte to one byte
SIMPLE_ESCAPES = {
    BACKSLASH: BACKSLASH,
    QUOTE: QUOTE,
    ord("n"): LF,
    ord("t"): TAB,
    ord("b"): 0x08,
    ord("r"): CR,
}

HEX_DIGITS = frozenset(b"0123456789abcdefABCDEF")
OCTAL_DIGITS = frozenset(b"01234567")

_UNQUOTED_RUN = re.compile(rb'[^ \t\r\n()";]+')
_QUOTED_RUN = re.compile(rb'[^"\\]+')
_BLOCK_DELIMITER = re.compile(rb"#\||\|#")


def to_bytes_input(data: Input) -> bytes:
    """Normalize parser input to bytes, encoding text as UTF-8."""
    if isinstance(data, str):
        return data.encode("utf-8")
    if isinstance(data, (bytearray, memoryview)):
        return bytes(data)
    if not isinstance(data, bytes):
        raise TypeError(f"Expected bytes or str, not {type(data).__name__}")
    return data


class TokenType(Enum):
    """Kinds of scanner tokens."""

    OPEN = "("
    CLOSE = ")"
    ATOM = "atom"
    DATUM_COMMENT = "#;"


@dataclass(frozen=True)
class Token:
    """
    One scanner token.

    Attributes:
        type: Token kind
        offset: Byte offset of the token's first byte
        data: Atom payload after escape processing (ATOM only)
        quoted: True if the atom was written in double quotes (ATOM only)
    """

    type: TokenType
    offset: int
    data: bytes = b""
    quoted: bool = False


class Scanner:
    """
    Lazy tokenizer over an in-memory byte string.

    A scanner holds a cursor and cannot be rewound; create a new one to
    scan the same input again.

    Usage:
        for token in Scanner(b'(a "b c")'):
            print(token.type, token.data)
    """

    def __init__(self, data: Input, datum_comments: bool = False):
        self.data = to_bytes_input(data)
        self.pos = 0
        self.length = len(self.data)
        self.datum_comments = datum_comments

    def __iter__(self) -> Iterator[Token]:
        return self.tokens()

    def tokens(self) -> Iterator[Token]:
        """Yield tokens until the end of input."""
        while True:
            token = self.next_token()
            if token is None:
                return
            yield token

    @property
    def at_end(self) -> bool:
        """True once only whitespace and comments remain."""
        self.skip_blank()
        return self.pos >= self.length

    def next_token(self) -> Optional[Token]:
        """Scan one token, or return None at the end of input."""
        self.skip_blank()
        if self.pos >= self.length:
            return None

        start = self.pos
        char = self.data[start]

        if char == LPAREN:
            self.pos += 1
            return Token(TokenType.OPEN, start)
        elif char == RPAREN:
            self.pos += 1
            return Token(TokenType.CLOSE, start)
        elif char == QUOTE:
            return self._scan_quoted()
        elif self.datum_comments and char == HASH and self._peek(start + 1) == SEMICOLON:
            self.pos += 2
            return Token(TokenType.DATUM_COMMENT, start)
        else:
            return self._scan_unquoted()

    def skip_blank(self) -> None:
        """Advance past whitespace, line comments and block comments."""
        data = self.data
        while self.pos < self.length:
            char = data[self.pos]
            if char in WHITESPACE:
                self.pos += 1
            elif char == SEMICOLON:
                newline = data.find(b"\n", self.pos)
                self.pos = self.length if newline < 0 else newline + 1
            elif char == HASH and self._peek(self.pos + 1) == PIPE:
                self._skip_block_comment()
            else:
                break

    def _peek(self, index: int) -> Optional[int]:
        if index < self.length:
            return self.data[index]
        return None

    def _skip_block_comment(self) -> None:
        """Skip a ``#| ... |#`` comment, honoring nested pairs."""
        start = self.pos
        index = start + 2
        depth = 1
        while depth:
            match = _BLOCK_DELIMITER.search(self.data, index)
            if match is None:
                raise UnterminatedCommentError(start)
            depth += 1 if match.group() == b"#|" else -1
            index = match.end()
        self.pos = index

    def _scan_unquoted(self) -> Token:
        start = self.pos
        match = _UNQUOTED_RUN.match(self.data, start)
        # next_token() has already dispatched every byte the run excludes
        assert match is not None
        text = match.group()

        for delimiter in (b"|#", b"#|"):
            found = text.find(delimiter)
            if found >= 0:
                raise UnexpectedSequenceError(
                    start + found,
                    context={"sequence": delimiter.decode("ascii")},
                )

        self.pos = match.end()
        return Token(TokenType.ATOM, start, text, quoted=False)

    def _scan_quoted(self) -> Token:
        start = self.pos
        data = self.data
        result = bytearray()
        index = start + 1

        while index < self.length:
            run = _QUOTED_RUN.match(data, index)
            if run is not None:
                result += run.group()
                index = run.end()
                continue

            if data[index] == QUOTE:
                self.pos = index + 1
                return Token(TokenType.ATOM, start, bytes(result), quoted=True)

            index = self._scan_escape(start, index, result)

        raise UnterminatedStringError(start)

    def _scan_escape(self, start: int, index: int, result: bytearray) -> int:
        """
        Decode the escape whose backslash is at ``index`` into ``result``.

        Returns the index just past the escape. ``start`` is the offset of
        the enclosing opening quote, used for unterminated-string errors.
        """
        data = self.data
        index += 1
        if index >= self.length:
            raise UnterminatedStringError(start)

        char = data[index]

        if char in SIMPLE_ESCAPES:
            result.append(SIMPLE_ESCAPES[char])
            return index + 1

        if char == LF or (char == CR and self._peek(index + 1) == LF):
            # Line continuation: drop the newline and the next line's indentation
            index += 1 if char == LF else 2
            while index < self.length and data[index] in (SPACE, TAB):
                index += 1
            return index

        if char == ord("x"):
            digits = self._expect_digits(start, index + 1, 2, HEX_DIGITS)
            result.append(int(digits, 16))
            return index + 3

        if char in OCTAL_DIGITS:
            digits = self._expect_digits(start, index, 3, OCTAL_DIGITS)
            value = int(digits, 8)
            if value > 0xFF:
                raise InvalidEscapeError(index, char, context={"escape": digits.decode()})
            result.append(value)
            return index + 3

        raise InvalidEscapeError(index, char)

    def _expect_digits(self, start: int, index: int, count: int, allowed: frozenset) -> bytes:
        for position in range(index, index + count):
            if position >= self.length:
                raise UnterminatedStringError(start)
            if self.data[position] not in allowed:
                raise InvalidEscapeError(position, self.data[position])
        return self.data[index : index + count]


def tokenize(data: Input, datum_comments: bool = False) -> Iterator[Token]:
    """Tokenize bytes; shorthand for iter(Scanner(data))."""
    return Scanner(data, datum_comments=datum_comments).tokens()


__all__ = ["Scanner", "Token", "TokenType", "tokenize", "to_bytes_input"]
