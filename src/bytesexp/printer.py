"""
S-expression printer.

Produces the canonical single-line form: atoms unquoted unless quoting is
required, list elements separated by one space. The output always parses
back to an equal tree, and printing that tree again gives the same bytes.

The machine form (to_bytes_mach) drops every separator that is not needed
to keep two unquoted atoms apart:

    to_bytes(t)       → (foo "a b" (c) d)
    to_bytes_mach(t)  → (foo"a b"(c)d)
"""

from __future__ import annotations

import re
from typing import BinaryIO, Iterator

from bytesexp.types import Atom, Sexp

# Bytes that cannot appear in an unquoted atom, plus every control byte
_NEEDS_QUOTING = re.compile(rb'[\x00-\x20\x7f()";\\]|#\||\|#')

_ESCAPES = {
    ord('"'): b'\\"',
    ord("\\"): b"\\\\",
    ord("\n"): b"\\n",
    ord("\t"): b"\\t",
    ord("\r"): b"\\r",
}
for _byte in list(range(0x20)) + [0x7F]:
    _ESCAPES.setdefault(_byte, b"\\x%02x" % _byte)
del _byte

_ESCAPE_TABLE = [_ESCAPES.get(byte, bytes([byte])) for byte in range(256)]
_MUST_ESCAPE = re.compile(rb'[\x00-\x1f\x7f"\\]')


def needs_quoting(data: bytes) -> bool:
    """True if an atom with this payload must be written in double quotes."""
    return not data or _NEEDS_QUOTING.search(data) is not None


def escape_atom(data: bytes) -> bytes:
    """Quote and escape an atom payload."""
    if _MUST_ESCAPE.search(data) is None:
        return b'"' + data + b'"'
    return b'"' + b"".join(_ESCAPE_TABLE[byte] for byte in data) + b'"'


def format_atom(data: bytes) -> bytes:
    """Canonical representation of one atom."""
    if needs_quoting(data):
        return escape_atom(data)
    return data


def _chunks(sexp: Sexp, compact: bool) -> Iterator[bytes]:
    """Yield output fragments for a tree, walking it with an explicit stack."""
    stack = [iter((sexp,))]
    # Whether the previously emitted element was an unquoted atom
    previous_bare = False
    first = True

    while stack:
        node = next(stack[-1], None)
        if node is None:
            stack.pop()
            if stack:
                yield b")"
                previous_bare = False
                first = False
            continue

        if isinstance(node, Atom):
            text = format_atom(node.data)
            bare = not text.startswith(b'"')
            if not first and (not compact or (bare and previous_bare)):
                yield b" "
            yield text
            previous_bare = bare
            first = False
        else:
            if not first and not compact:
                yield b" "
            yield b"("
            stack.append(iter(node.children))
            previous_bare = False
            first = True


def to_bytes(sexp: Sexp) -> bytes:
    """Serialize a tree to canonical bytes."""
    if isinstance(sexp, Atom):
        return format_atom(sexp.data)
    return b"".join(_chunks(sexp, compact=False))


def to_bytes_mach(sexp: Sexp) -> bytes:
    """Serialize a tree in the compact machine form."""
    if isinstance(sexp, Atom):
        return format_atom(sexp.data)
    return b"".join(_chunks(sexp, compact=True))


def write(sexp: Sexp, sink: BinaryIO) -> None:
    """
    Write the canonical form of a tree to a binary sink.

    Errors raised by the sink propagate unchanged; nothing is retried.
    """
    sink.write(to_bytes(sexp))


def write_mach(sexp: Sexp, sink: BinaryIO) -> None:
    """Write the machine form of a tree to a binary sink."""
    sink.write(to_bytes_mach(sexp))


__all__ = [
    "to_bytes",
    "to_bytes_mach",
    "write",
    "write_mach",
    "needs_quoting",
    "escape_atom",
    "format_atom",
]
