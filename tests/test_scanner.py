"""Tests for the tokenizer."""

import pytest

from bytesexp.exceptions import (
    ErrorKind,
    InvalidEscapeError,
    ParseError,
    UnexpectedSequenceError,
    UnterminatedCommentError,
    UnterminatedStringError,
)
from bytesexp.scanner import Scanner, Token, TokenType, tokenize


def kinds(data, **kwargs):
    return [t.type for t in tokenize(data, **kwargs)]


def atoms(data):
    return [t.data for t in tokenize(data) if t.type is TokenType.ATOM]


class TestBasicTokens:
    """Tests for parentheses, atoms and offsets."""

    def test_empty_input(self):
        """Empty input has no tokens."""
        assert list(tokenize(b"")) == []

    def test_parens(self):
        """Parentheses become OPEN/CLOSE regardless of spacing."""
        assert kinds(b"(()") == [TokenType.OPEN, TokenType.OPEN, TokenType.CLOSE]

    def test_offsets(self):
        """Each token records the offset of its first byte."""
        tokens = list(tokenize(b' (ab  "c")'))
        assert [t.offset for t in tokens] == [1, 2, 6, 9]

    def test_unquoted_atom_token(self):
        """Unquoted atoms carry their bytes and quoted=False."""
        (token,) = tokenize(b"hello")
        assert token == Token(TokenType.ATOM, 0, b"hello", quoted=False)

    def test_quoted_atom_token(self):
        """Quoted atoms are marked as quoted."""
        (token,) = tokenize(b'"hello"')
        assert token.quoted is True
        assert token.data == b"hello"

    def test_unquoted_atom_stops_at_delimiters(self):
        """Unquoted atoms end at whitespace, parens, quotes and semicolons."""
        assert atoms(b'a(b)c"d"e;f\ng h') == [b"a", b"b", b"c", b"d", b"e", b"g", b"h"]

    def test_unquoted_atom_is_verbatim(self):
        """Backslashes and other bytes in unquoted atoms are not interpreted."""
        assert atoms(b"a\\nb #x |y \xff\xfe") == [b"a\\nb", b"#x", b"|y", b"\xff\xfe"]

    def test_accepts_text(self):
        """Text input is encoded as UTF-8."""
        assert atoms("café") == ["café".encode("utf-8")]

    def test_rejects_other_types(self):
        """Non-bytes input raises TypeError."""
        with pytest.raises(TypeError):
            Scanner(42)

    def test_scanner_is_not_rewound(self):
        """A consumed scanner yields nothing more."""
        scanner = Scanner(b"(a)")
        assert len(list(scanner)) == 3
        assert list(scanner) == []


class TestWhitespaceAndComments:
    """Tests for skipped input."""

    def test_whitespace_kinds(self):
        """Space, tab, CR and LF all separate tokens."""
        assert atoms(b"a b\tc\rd\ne") == [b"a", b"b", b"c", b"d", b"e"]

    def test_line_comment(self):
        """A semicolon comments out the rest of the line."""
        assert atoms(b"a ; b c\nd") == [b"a", b"d"]

    def test_line_comment_at_eof(self):
        """A line comment may run to the end of input."""
        assert atoms(b"a ; no newline") == [b"a"]

    def test_line_comment_ends_atom(self):
        """A semicolon right after an atom ends the atom."""
        assert atoms(b"abc;def\nghi") == [b"abc", b"ghi"]

    def test_block_comment(self):
        """Block comments are skipped."""
        assert atoms(b"a #| b c |# d") == [b"a", b"d"]

    def test_nested_block_comment(self):
        """Inner block comments do not close the outer one."""
        assert atoms(b"a #| x #| y |# z |# b") == [b"a", b"b"]

    def test_block_comment_spanning_lines(self):
        """Block comments may span lines and contain parens and quotes."""
        assert kinds(b'#| ( " ;\n ) |#()') == [TokenType.OPEN, TokenType.CLOSE]

    def test_unterminated_block_comment(self):
        """End of input inside a block comment fails at the opening offset."""
        with pytest.raises(UnterminatedCommentError) as exc_info:
            list(tokenize(b"a #| x #| y |# z"))
        assert exc_info.value.kind is ErrorKind.UNTERMINATED_COMMENT
        assert exc_info.value.offset == 2

    def test_lone_block_close(self):
        """A stray |# is an error at its offset."""
        with pytest.raises(UnexpectedSequenceError) as exc_info:
            list(tokenize(b"(a |#)"))
        assert exc_info.value.offset == 3

    def test_block_delimiter_inside_atom(self):
        """#| or |# inside an unquoted atom is rejected."""
        with pytest.raises(UnexpectedSequenceError) as exc_info:
            list(tokenize(b"ab#|cd"))
        assert exc_info.value.offset == 2

    def test_datum_comment_disabled_by_default(self):
        """Without datum comments, #; is the atom # followed by a line comment."""
        assert atoms(b"#;a\nb") == [b"#", b"b"]

    def test_datum_comment_token(self):
        """With datum comments enabled, #; becomes its own token."""
        assert kinds(b"#;a b", datum_comments=True) == [
            TokenType.DATUM_COMMENT,
            TokenType.ATOM,
            TokenType.ATOM,
        ]


class TestQuotedAtoms:
    """Tests for quoted atoms and escape sequences."""

    @pytest.mark.parametrize(
        "source, expected",
        [
            (rb'"a\\b"', b"a\\b"),
            (rb'"a\"b"', b'a"b'),
            (rb'"a\nb"', b"a\nb"),
            (rb'"a\tb"', b"a\tb"),
            (rb'"a\bb"', b"a\x08b"),
            (rb'"a\rb"', b"a\rb"),
            (rb'"\x41\x7a\xFF"', b"Az\xff"),
            (rb'"\101\000\377"', b"A\x00\xff"),
        ],
    )
    def test_escapes(self, source, expected):
        """Each supported escape decodes to its byte."""
        assert atoms(source) == [expected]

    def test_empty_quoted_atom(self):
        """Two quotes make the empty atom."""
        assert atoms(b'""') == [b""]

    def test_quoted_delimiters(self):
        """Delimiters inside quotes are literal."""
        assert atoms(b'"(a b) ; #| c |#"') == [b"(a b) ; #| c |#"]

    def test_raw_newline_inside_quotes(self):
        """Unescaped newlines are kept."""
        assert atoms(b'"a\nb"') == [b"a\nb"]

    def test_line_continuation(self):
        """Backslash-newline is dropped along with the next line's indentation."""
        assert atoms(b'"abc\\\n    def"') == [b"abcdef"]

    def test_line_continuation_crlf(self):
        """Backslash followed by CRLF is also a continuation."""
        assert atoms(b'"abc\\\r\n\tdef"') == [b"abcdef"]

    def test_quoted_atom_adjacent_to_unquoted(self):
        """A quote ends an unquoted atom and starts a new one."""
        assert atoms(b'ab"c d"ef') == [b"ab", b"c d", b"ef"]

    def test_unterminated_string(self):
        """End of input inside quotes fails at the opening quote."""
        with pytest.raises(UnterminatedStringError) as exc_info:
            list(tokenize(b'(a "bc'))
        assert exc_info.value.offset == 3
        assert exc_info.value.kind is ErrorKind.UNTERMINATED_STRING

    def test_unterminated_after_backslash(self):
        """A trailing backslash leaves the string unterminated."""
        with pytest.raises(UnterminatedStringError):
            list(tokenize(b'"abc\\'))

    def test_unknown_escape(self):
        """An unknown escape reports the offending byte and its offset."""
        with pytest.raises(InvalidEscapeError) as exc_info:
            list(tokenize(b'"ab\\qc"'))
        error = exc_info.value
        assert error.kind is ErrorKind.INVALID_ESCAPE
        assert error.offset == 4
        assert error.byte == ord("q")

    def test_bad_hex_escape(self):
        """A non-hex digit after \\x is reported where it occurs."""
        with pytest.raises(InvalidEscapeError) as exc_info:
            list(tokenize(b'"\\x4z"'))
        assert exc_info.value.offset == 4
        assert exc_info.value.byte == ord("z")

    def test_short_octal_escape(self):
        """Octal escapes need exactly three digits."""
        with pytest.raises(InvalidEscapeError) as exc_info:
            list(tokenize(b'"\\12"'))
        assert exc_info.value.byte == ord('"')

    def test_octal_escape_out_of_range(self):
        """Octal escapes above 0o377 are rejected."""
        with pytest.raises(InvalidEscapeError):
            list(tokenize(b'"\\400"'))

    def test_non_octal_digit(self):
        """Digits 8 and 9 do not start an escape."""
        with pytest.raises(InvalidEscapeError) as exc_info:
            list(tokenize(b'"\\9"'))
        assert exc_info.value.byte == ord("9")

    def test_errors_are_parse_errors(self):
        """All scanner failures are ParseErrors."""
        for bad in (b'"abc', b"#| x", b'"\\q"', b"|#"):
            with pytest.raises(ParseError):
                list(tokenize(bad))
