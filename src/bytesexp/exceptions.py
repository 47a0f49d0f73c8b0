"""
Exception hierarchy for bytesexp.

All errors derive from SexpError, which carries a message, optional context
and suggestions, and formats them into a single readable message.

Parse errors always carry the kind of failure and the byte offset where it
was detected::

    from bytesexp import parse
    from bytesexp.exceptions import ErrorKind, ParseError

    try:
        parse(b"(a b")
    except ParseError as e:
        assert e.kind is ErrorKind.UNEXPECTED_EOF
        assert e.offset == 4

Conversion errors (raised by bytesexp.convert) form a separate taxonomy and
are never produced by the parser.
"""

from __future__ import annotations

from enum import Enum
from typing import Any, Dict, List, Optional


class SexpError(Exception):
    """
    Base exception for all bytesexp errors.

    Attributes:
        context: Dictionary of contextual information (offset, file, etc.)
        suggestions: List of actionable suggestions for fixing the error
    """

    def __init__(
        self,
        message: str,
        context: Optional[Dict[str, Any]] = None,
        suggestions: Optional[List[str]] = None,
    ):
        self.message = message
        self.context = context or {}
        self.suggestions = suggestions or []
        super().__init__(self._format_message())

    def _format_message(self) -> str:
        """Format the error message with context and suggestions."""
        parts = [self.message]

        if self.context:
            parts.append("\n\nContext:")
            for key, value in self.context.items():
                parts.append(f"\n  {key}: {value}")

        if self.suggestions:
            parts.append("\n\nSuggestions:")
            for suggestion in self.suggestions:
                parts.append(f"\n  - {suggestion}")

        return "".join(parts)

    def __str__(self) -> str:
        return self._format_message()


class ErrorKind(str, Enum):
    """Kinds of malformed input reported by the scanner and parser."""

    UNTERMINATED_STRING = "UnterminatedString"
    UNTERMINATED_COMMENT = "UnterminatedComment"
    UNMATCHED_CLOSE = "UnmatchedClose"
    UNEXPECTED_EOF = "UnexpectedEof"
    TRAILING_DATA = "TrailingData"
    INVALID_ESCAPE = "InvalidEscape"
    UNEXPECTED_SEQUENCE = "UnexpectedSequence"
    DEPTH_EXCEEDED = "DepthExceeded"
    DANGLING_DATUM_COMMENT = "DanglingDatumComment"

    def __str__(self) -> str:
        return self.value


class ParseError(SexpError):
    """
    Input bytes are not a well-formed S-expression.

    Use ParseError.create() to get the subclass matching a kind; catching
    ParseError catches all of them.

    Attributes:
        kind: What went wrong
        offset: Byte offset in the input where it was detected
    """

    kind: ErrorKind

    def __init__(
        self,
        kind: ErrorKind,
        offset: int,
        message: Optional[str] = None,
        context: Optional[Dict[str, Any]] = None,
        suggestions: Optional[List[str]] = None,
    ):
        self.kind = ErrorKind(kind)
        self.offset = offset
        ctx = {"kind": self.kind.value, "offset": offset}
        ctx.update(context or {})
        super().__init__(message or _DEFAULT_MESSAGES[self.kind], ctx, suggestions)

    @staticmethod
    def create(kind: ErrorKind, offset: int, **kwargs: Any) -> ParseError:
        """Instantiate the ParseError subclass registered for ``kind``."""
        return _KIND_CLASSES[ErrorKind(kind)](offset=offset, **kwargs)


class UnterminatedStringError(ParseError):
    """End of input inside a quoted atom."""

    def __init__(self, offset: int, **kwargs: Any):
        kwargs.setdefault("suggestions", ['Check for a missing closing \'"\''])
        super().__init__(ErrorKind.UNTERMINATED_STRING, offset, **kwargs)


class UnterminatedCommentError(ParseError):
    """End of input inside a ``#| ... |#`` block comment."""

    def __init__(self, offset: int, **kwargs: Any):
        kwargs.setdefault("suggestions", ["Check that every '#|' has a matching '|#'"])
        super().__init__(ErrorKind.UNTERMINATED_COMMENT, offset, **kwargs)


class UnmatchedCloseError(ParseError):
    """A ``)`` with no open list."""

    def __init__(self, offset: int, **kwargs: Any):
        super().__init__(ErrorKind.UNMATCHED_CLOSE, offset, **kwargs)


class UnexpectedEofError(ParseError):
    """Input ended before a complete datum was read."""

    def __init__(self, offset: int, **kwargs: Any):
        super().__init__(ErrorKind.UNEXPECTED_EOF, offset, **kwargs)


class TrailingDataError(ParseError):
    """More input follows the single datum expected by parse()."""

    def __init__(self, offset: int, **kwargs: Any):
        kwargs.setdefault("suggestions", ["Use parse_many() to read several data"])
        super().__init__(ErrorKind.TRAILING_DATA, offset, **kwargs)


class InvalidEscapeError(ParseError):
    """
    Unknown or incomplete backslash escape in a quoted atom.

    Attributes:
        byte: Value of the offending byte (found at ``offset``)
    """

    def __init__(self, offset: int, byte: int, **kwargs: Any):
        self.byte = byte
        context = {"byte": f"0x{byte:02x} ({bytes([byte])!r})"}
        context.update(kwargs.pop("context", None) or {})
        super().__init__(ErrorKind.INVALID_ESCAPE, offset, context=context, **kwargs)


class UnexpectedSequenceError(ParseError):
    """A byte sequence that starts no valid token, such as a stray ``|#``."""

    def __init__(self, offset: int, **kwargs: Any):
        kwargs.setdefault("suggestions", ['Quote atoms containing "#|" or "|#"'])
        super().__init__(ErrorKind.UNEXPECTED_SEQUENCE, offset, **kwargs)


class DepthExceededError(ParseError):
    """List nesting went deeper than the configured maximum."""

    def __init__(self, offset: int, **kwargs: Any):
        super().__init__(ErrorKind.DEPTH_EXCEEDED, offset, **kwargs)


class DanglingDatumCommentError(ParseError):
    """A ``#;`` datum comment with no datum after it."""

    def __init__(self, offset: int, **kwargs: Any):
        super().__init__(ErrorKind.DANGLING_DATUM_COMMENT, offset, **kwargs)


_DEFAULT_MESSAGES = {
    ErrorKind.UNTERMINATED_STRING: "Unterminated quoted atom",
    ErrorKind.UNTERMINATED_COMMENT: "Unterminated block comment",
    ErrorKind.UNMATCHED_CLOSE: "Unmatched ')'",
    ErrorKind.UNEXPECTED_EOF: "Unexpected end of input",
    ErrorKind.TRAILING_DATA: "Unexpected data after the end of the expression",
    ErrorKind.INVALID_ESCAPE: "Invalid escape sequence in quoted atom",
    ErrorKind.UNEXPECTED_SEQUENCE: "Unexpected byte sequence",
    ErrorKind.DEPTH_EXCEEDED: "Maximum nesting depth exceeded",
    ErrorKind.DANGLING_DATUM_COMMENT: "Datum comment is not followed by a datum",
}

_KIND_CLASSES = {
    ErrorKind.UNTERMINATED_STRING: UnterminatedStringError,
    ErrorKind.UNTERMINATED_COMMENT: UnterminatedCommentError,
    ErrorKind.UNMATCHED_CLOSE: UnmatchedCloseError,
    ErrorKind.UNEXPECTED_EOF: UnexpectedEofError,
    ErrorKind.TRAILING_DATA: TrailingDataError,
    ErrorKind.INVALID_ESCAPE: InvalidEscapeError,
    ErrorKind.UNEXPECTED_SEQUENCE: UnexpectedSequenceError,
    ErrorKind.DEPTH_EXCEEDED: DepthExceededError,
    ErrorKind.DANGLING_DATUM_COMMENT: DanglingDatumCommentError,
}


class ConversionErrorKind(str, Enum):
    """Kinds of failure when decoding a tree into a native value."""

    EXPECTED_ATOM = "ExpectedAtom"
    EXPECTED_LIST = "ExpectedList"
    LENGTH_MISMATCH = "LengthMismatch"
    INVALID_UTF8 = "InvalidUtf8"
    INVALID_VALUE = "InvalidValue"

    def __str__(self) -> str:
        return self.value


class ConversionError(SexpError):
    """
    A tree does not have the shape or content a decoder expects.

    Example::

        raise ConversionError(
            ConversionErrorKind.LENGTH_MISMATCH,
            "Expected a list of 2 elements for tuple",
            context={"type": "tuple", "expected_len": 2, "list_len": 3},
        )
    """

    def __init__(
        self,
        kind: ConversionErrorKind,
        message: str,
        context: Optional[Dict[str, Any]] = None,
        suggestions: Optional[List[str]] = None,
    ):
        self.kind = ConversionErrorKind(kind)
        super().__init__(message, context, suggestions)


class ConfigError(SexpError):
    """Configuration file is unreadable or invalid."""

    pass


__all__ = [
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
    "ConversionErrorKind",
    "ConversionError",
    "ConfigError",
]
