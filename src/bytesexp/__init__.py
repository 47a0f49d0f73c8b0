"""
bytesexp: S-expressions over byte strings.

Parses and prints nested lists of byte-string atoms in the Sexplib text
format: ``;`` line comments, nested ``#| |#`` block comments, double-quoted
atoms with backslash escapes, and canonical single-line printing.

Modules:
    types: Atom / List tree types
    scanner: Tokenizer
    parser: Parser with an explicit frame stack
    printer: Canonical and compact printers
    convert: encode/decode contract and primitive converters
    config: TOML configuration for the command line tool

Quick Start::

    import bytesexp

    tree = bytesexp.parse(b'(a (b "c d") e)')
    assert tree == bytesexp.List([
        bytesexp.Atom(b"a"),
        bytesexp.List([bytesexp.Atom(b"b"), bytesexp.Atom(b"c d")]),
        bytesexp.Atom(b"e"),
    ])
    assert bytesexp.print(tree) == b'(a (b "c d") e)'

    for datum in bytesexp.parse_many(b"(x) y (z)"):
        ...

    with open("out.sexp", "wb") as f:
        bytesexp.write(tree, f)
"""

__version__ = "0.1.0"

from bytesexp.exceptions import (
    ConfigError,
    ConversionError,
    ConversionErrorKind,
    DanglingDatumCommentError,
    DepthExceededError,
    ErrorKind,
    InvalidEscapeError,
    ParseError,
    SexpError,
    TrailingDataError,
    UnexpectedEofError,
    UnexpectedSequenceError,
    UnmatchedCloseError,
    UnterminatedCommentError,
    UnterminatedStringError,
)
from bytesexp.parser import Parser, parse, parse_file, parse_many, parse_many_file, parse_prefix
from bytesexp.printer import to_bytes, to_bytes_mach, write, write_mach
from bytesexp.scanner import Scanner, Token, TokenType, tokenize
from bytesexp.types import Atom, List, Sexp

# The printer under its conventional name
print = to_bytes

__all__ = [
    # Version
    "__version__",
    # Tree types
    "Sexp",
    "Atom",
    "List",
    # Parsing
    "parse",
    "parse_many",
    "parse_prefix",
    "parse_file",
    "parse_many_file",
    "Parser",
    "Scanner",
    "Token",
    "TokenType",
    "tokenize",
    # Printing
    "print",
    "to_bytes",
    "to_bytes_mach",
    "write",
    "write_mach",
    # Errors
    "SexpError",
    "ErrorKind",
    "ParseError",
    "UnterminatedStringError",
    "UnterminatedCommentError",
    "UnmatchedCloseError",
    "UnexpectedEofError",
    "TrailingDataError",
    "InvalidEscapeError",
    "UnexpectedSequenceError",
    "DepthExceededError",
    "DanglingDatumCommentError",
    "ConversionError",
    "ConversionErrorKind",
    "ConfigError",
]
