"""
Conversion between native Python values and S-expression trees.

This module defines the contract a conversion layer implements for a type
(an ``encode``/``decode`` pair) together with converters for the primitive
types. Converters for records and other structured types are written on top
of these by the caller; decoding failures raise ConversionError, never
ParseError.

Example::

    from bytesexp.convert import decode_dict, decode_int, decode_str, encode

    tree = encode({"width": 3, "height": 4})
    # → ((width 3) (height 4))
    sizes = decode_dict(tree, decode_str, decode_int)
"""

from __future__ import annotations

import re
from typing import Any, Callable, Dict, List as ListOf, Optional, Protocol, Tuple, TypeVar

from bytesexp.exceptions import ConversionError, ConversionErrorKind
from bytesexp.types import Atom, List, Sexp

T = TypeVar("T")
K = TypeVar("K")
V = TypeVar("V")

Decoder = Callable[[Sexp], T]

# Plain decimal text only: no surrounding whitespace, no "_" separators
_INT_TEXT = re.compile(r"[+-]?[0-9]+")
_FLOAT_TEXT = re.compile(
    r"[+-]?(?:[0-9]+(?:\.[0-9]*)?|\.[0-9]+)(?:[eE][+-]?[0-9]+)?|[+-]?(?i:inf|infinity|nan)"
)


class Converter(Protocol[T]):
    """Conversion pair for one native type."""

    def encode(self, value: T) -> Sexp: ...

    def decode(self, sexp: Sexp) -> T: ...


def encode(value: Any) -> Sexp:
    """
    Encode a primitive Python value as a tree.

    bytes and str become atoms, bool becomes ``true``/``false``, numbers use
    their str() form, None becomes ``()``, lists and tuples become lists and
    dicts become lists of ``(key value)`` pairs.

    Raises:
        TypeError: For values with no primitive encoding
    """
    if isinstance(value, Sexp):
        return value
    if isinstance(value, (bytes, bytearray, memoryview)):
        return Atom(bytes(value))
    if isinstance(value, str):
        return Atom(value)
    # bool before int: bool is an int subclass
    if isinstance(value, bool):
        return Atom(b"true" if value else b"false")
    if isinstance(value, (int, float)):
        return Atom(str(value))
    if value is None:
        return List()
    if isinstance(value, (list, tuple)):
        return List(encode(item) for item in value)
    if isinstance(value, dict):
        return List(List((encode(k), encode(v))) for k, v in value.items())
    raise TypeError(f"No S-expression encoding for {type(value).__name__}")


def encode_option(value: Optional[T], item: Callable[[T], Sexp] = encode) -> Sexp:
    """Encode an optional value as ``()`` or ``(value)``."""
    if value is None:
        return List()
    return List((item(value),))


def _expect_atom(sexp: Sexp, type_name: str) -> bytes:
    if not isinstance(sexp, Atom):
        raise ConversionError(
            ConversionErrorKind.EXPECTED_ATOM,
            f"Expected an atom for {type_name}, got a list",
            context={"type": type_name, "list_len": len(sexp.children)},
        )
    return sexp.data


def _expect_list(sexp: Sexp, type_name: str, length: Optional[int] = None) -> Tuple[Sexp, ...]:
    if not isinstance(sexp, List):
        raise ConversionError(
            ConversionErrorKind.EXPECTED_LIST,
            f"Expected a list for {type_name}, got an atom",
            context={"type": type_name, "atom": sexp.data[:40]},
        )
    if length is not None and len(sexp.children) != length:
        raise ConversionError(
            ConversionErrorKind.LENGTH_MISMATCH,
            f"Expected a list of {length} elements for {type_name}",
            context={"type": type_name, "expected_len": length, "list_len": len(sexp.children)},
        )
    return sexp.children


def decode_bytes(sexp: Sexp) -> bytes:
    """Decode an atom's raw payload."""
    return _expect_atom(sexp, "bytes")


def decode_str(sexp: Sexp) -> str:
    """Decode an atom as UTF-8 text."""
    data = _expect_atom(sexp, "str")
    try:
        return data.decode("utf-8")
    except UnicodeDecodeError as e:
        raise ConversionError(
            ConversionErrorKind.INVALID_UTF8,
            "Atom is not valid UTF-8",
            context={"type": "str", "position": e.start},
        ) from e


def _decode_text(
    sexp: Sexp,
    type_name: str,
    convert: Callable[[str], T],
    pattern: Optional[re.Pattern] = None,
) -> T:
    data = _expect_atom(sexp, type_name)
    try:
        text = data.decode("ascii")
        if pattern is not None and pattern.fullmatch(text) is None:
            raise ValueError(f"not a plain {type_name} literal: {text!r}")
        return convert(text)
    except (UnicodeDecodeError, ValueError) as e:
        raise ConversionError(
            ConversionErrorKind.INVALID_VALUE,
            f"Cannot convert atom to {type_name}: {e}",
            context={"type": type_name, "atom": data[:40]},
        ) from e


def decode_int(sexp: Sexp) -> int:
    """Decode an atom holding a decimal integer."""
    return _decode_text(sexp, "int", int, _INT_TEXT)


def decode_float(sexp: Sexp) -> float:
    """Decode an atom holding a floating point number."""
    return _decode_text(sexp, "float", float, _FLOAT_TEXT)


def _parse_bool(text: str) -> bool:
    if text == "true":
        return True
    if text == "false":
        return False
    raise ValueError(f"expected 'true' or 'false', got {text!r}")


def decode_bool(sexp: Sexp) -> bool:
    """Decode ``true`` or ``false``."""
    return _decode_text(sexp, "bool", _parse_bool)


def decode_list(sexp: Sexp, item: Decoder[T]) -> ListOf[T]:
    """Decode a list whose elements all use the same decoder."""
    return [item(child) for child in _expect_list(sexp, "list")]


def decode_tuple(sexp: Sexp, *items: Decoder[Any]) -> Tuple[Any, ...]:
    """Decode a fixed-length list, one decoder per position."""
    children = _expect_list(sexp, f"tuple{len(items)}", length=len(items))
    return tuple(decode(child) for decode, child in zip(items, children))


def decode_option(sexp: Sexp, item: Decoder[T]) -> Optional[T]:
    """Decode ``()`` as None and ``(value)`` as the decoded value."""
    children = _expect_list(sexp, "option")
    if not children:
        return None
    if len(children) != 1:
        raise ConversionError(
            ConversionErrorKind.LENGTH_MISMATCH,
            "Expected a list of 0 or 1 elements for option",
            context={"type": "option", "expected_len": 1, "list_len": len(children)},
        )
    return item(children[0])


def decode_dict(sexp: Sexp, key: Decoder[K], value: Decoder[V]) -> Dict[K, V]:
    """Decode a list of ``(key value)`` pairs."""
    result: Dict[K, V] = {}
    for pair in _expect_list(sexp, "dict"):
        k, v = _expect_list(pair, "dict entry", length=2)
        result[key(k)] = value(v)
    return result


__all__ = [
    "Converter",
    "Decoder",
    "encode",
    "encode_option",
    "decode_bytes",
    "decode_str",
    "decode_int",
    "decode_float",
    "decode_bool",
    "decode_list",
    "decode_tuple",
    "decode_option",
    "decode_dict",
]
