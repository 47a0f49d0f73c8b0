"""Tests for the S-expression printer."""

import io

import pytest

import bytesexp
from bytesexp import Atom, List, parse, to_bytes, to_bytes_mach, write
from bytesexp.printer import escape_atom, needs_quoting, write_mach


class TestQuotingDecision:
    """Tests for needs_quoting()."""

    @pytest.mark.parametrize("data", [b"abc", b"a-b_c", b"#", b"|", b"a#b", b"12.5", b"\xc3\xa9"])
    def test_plain_atoms(self, data):
        """Atoms without special bytes print bare."""
        assert needs_quoting(data) is False

    @pytest.mark.parametrize(
        "data",
        [b"", b"a b", b"a\tb", b"a\nb", b"(", b")", b'"', b";", b"\\", b"\x00", b"\x7f", b"#|", b"a|#"],
    )
    def test_quoted_atoms(self, data):
        """Empty atoms and atoms with special bytes are quoted."""
        assert needs_quoting(data) is True


class TestAtomPrinting:
    """Tests for printing atoms."""

    def test_unquoted(self):
        """Plain atoms print verbatim."""
        assert to_bytes(Atom(b"abc")) == b"abc"

    def test_space_forces_quotes(self):
        """An atom with a space is quoted."""
        assert to_bytes(Atom(b"a b")) == b'"a b"'

    def test_empty_atom(self):
        """The empty atom prints as two quotes."""
        assert to_bytes(Atom(b"")) == b'""'

    def test_escaped_newline(self):
        """Newlines print as a two-character escape."""
        assert to_bytes(Atom(b"a\nb")) == b'"a\\nb"'

    def test_escape_table(self):
        """Quotes, backslashes and control bytes are escaped."""
        assert escape_atom(b'"\\\n\t\r\x00\x08\x1b\x7f') == b'"\\"\\\\\\n\\t\\r\\x00\\x08\\x1b\\x7f"'

    def test_high_bytes_kept_raw(self):
        """Bytes above 0x7f are not escaped."""
        assert to_bytes(Atom(b"\xff \xfe")) == b'"\xff \xfe"'
        assert to_bytes(Atom(b"\xff\xfe")) == b"\xff\xfe"

    def test_backslash_quoted(self):
        """A backslash forces quoting so it is not read as an escape."""
        assert to_bytes(Atom(b"C:\\dir")) == b'"C:\\\\dir"'


class TestListPrinting:
    """Tests for printing lists."""

    def test_empty_list(self):
        """An empty list prints as ()."""
        assert to_bytes(List()) == b"()"

    def test_single_spaces(self):
        """Children are separated by exactly one space."""
        tree = List([Atom(b"a"), List([Atom(b"b"), Atom(b"c")]), Atom(b"d")])
        assert to_bytes(tree) == b"(a (b c) d)"

    def test_nested_empty_lists(self):
        """Nested empty lists are separated like any other child."""
        assert to_bytes(parse(b"(()()(()()(())))")) == b"(() () (() () (())))"

    @pytest.mark.parametrize(
        "source, expected",
        [
            (b"(    ATOM)", b"(ATOM)"),
            (b' ( "foo bar"   baz "x\\"") ', b'("foo bar" baz "x\\"")'),
            (b"\t()", b"()"),
            (b'((foo bar)()(()()(("\n"))))', b'((foo bar) () (() () (("\\n"))))'),
            (b'("quoted" "for no reason")', b'(quoted "for no reason")'),
            (b"(a ; comment\n b #| block |# c)", b"(a b c)"),
        ],
    )
    def test_normalization(self, source, expected):
        """Printing normalizes whitespace, comments and needless quotes."""
        assert to_bytes(parse(source)) == expected

    def test_deep_tree(self):
        """Deep trees print without recursion."""
        depth = 50_000
        source = b"(" * depth + b")" * depth
        assert to_bytes(parse(source)) == source


class TestMachForm:
    """Tests for the compact machine form."""

    @pytest.mark.parametrize(
        "text",
        [
            b"(ATOM)",
            b"(A T O M)",
            b'("foo bar"baz"x\\"")',
            b"()",
            b"(((())))",
            b"(()()(()()(())))",
            b'((foo bar)()(()()(("\\n"))))',
            b'((foo"bar\\\\")()(()()(("\\\\n"))))',
            b'((g)(" "a" "b c)(e()d()(()a)b))',
        ],
    )
    def test_mach_is_minimal(self, text):
        """Machine form keeps only the spaces between bare atoms."""
        tree = parse(text)
        assert to_bytes_mach(tree) == text
        assert parse(to_bytes_mach(tree)) == tree

    def test_atom(self):
        """A single atom prints the same in both forms."""
        assert to_bytes_mach(Atom(b"a b")) == b'"a b"'


class TestWrite:
    """Tests for writing to sinks."""

    def test_write_to_buffer(self):
        """write() sends the canonical bytes to the sink."""
        sink = io.BytesIO()
        write(parse(b"( a  b )"), sink)
        assert sink.getvalue() == b"(a b)"

    def test_write_mach(self):
        """write_mach() sends the compact bytes to the sink."""
        sink = io.BytesIO()
        write_mach(parse(b'(a "b c" d)'), sink)
        assert sink.getvalue() == b'(a"b c"d)'

    def test_method(self):
        """Trees can write themselves."""
        sink = io.BytesIO()
        Atom(b"x y").write(sink)
        assert sink.getvalue() == b'"x y"'

    def test_sink_error_propagates(self):
        """Errors from the sink reach the caller unchanged."""

        class BrokenPipe:
            def write(self, data):
                raise BrokenPipeError("pipe closed")

        with pytest.raises(BrokenPipeError, match="pipe closed"):
            write(Atom(b"a"), BrokenPipe())

    def test_closed_file(self, tmp_path):
        """Writing to a closed file raises the file's own error."""
        with open(tmp_path / "out.sexp", "wb") as f:
            pass
        with pytest.raises(ValueError):
            write(Atom(b"a"), f)


class TestPublicApi:
    """Tests for the package-level names."""

    def test_print_is_to_bytes(self):
        """bytesexp.print is the canonical printer."""
        assert bytesexp.print(List([Atom(b"a b")])) == b'("a b")'

    def test_str(self):
        """str() shows the canonical form as text."""
        assert str(parse(b'(a  "b c")')) == '(a "b c")'
