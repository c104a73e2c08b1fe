"""Tests for parse error collection and format failures."""

import unittest

from prettyhtml import (
    Expansion,
    FormatError,
    MalformedInputError,
    ParseError,
    SourceSpan,
    UnsupportedNodeError,
    format,
    parse,
)


class TestErrorCollection(unittest.TestCase):
    def test_valid_markup_has_no_errors(self):
        """Well-formed markup collects no errors."""
        doc = parse("<div><p>a</p><img src=x></div>")
        assert doc.errors == []

    def test_errors_are_parse_errors(self):
        """Collected errors are ParseError records."""
        doc = parse("<div></span>")
        assert len(doc.errors) == 1
        assert all(isinstance(e, ParseError) for e in doc.errors)

    def test_error_column_after_newline(self):
        """Columns restart after a line break."""
        doc = parse("<div>\n  </span>\n</div>")
        error = doc.errors[0]
        assert error.line == 2
        assert error.column == 3

    def test_parsing_continues_after_error(self):
        """An error does not stop tree construction."""
        doc = parse("<div></span><b>x</b></div>")
        assert len(doc.errors) == 1
        div = doc.children[0]
        assert [child.name for child in div.children] == ["b"]

    def test_unexpected_closing_tag_code(self):
        """A stray end tag names the tag."""
        doc = parse("</div>")
        assert doc.errors[0].code == 'Unexpected closing tag "div"'

    def test_void_end_tag(self):
        """Void elements reject end tags."""
        doc = parse("<br></br>")
        assert doc.errors[0].code == 'Void elements do not have end tags "br"'

    def test_self_closed_html_element(self):
        """Ordinary HTML elements cannot be self-closed."""
        doc = parse("<div/>")
        assert doc.errors[0].code == 'Only void, custom and foreign elements can be self closed "div"'

    def test_self_closed_custom_and_foreign_elements(self):
        """Custom, foreign and void elements may use '/>'."""
        assert parse("<my-widget/>").errors == []
        assert parse("<svg><circle/></svg>").errors == []
        assert parse("<br/>").errors == []

    def test_eof_in_tag(self):
        """An unterminated tag is reported."""
        doc = parse("<div class")
        assert doc.errors[0].code == "EOF in tag"

    def test_eof_in_comment(self):
        """An unterminated comment is reported."""
        doc = parse("<!-- open")
        assert doc.errors[0].code == "EOF in comment"

    def test_unclosed_element_in_expansion_case(self):
        """Elements must close before their ICU case ends."""
        doc = parse("{n, plural, =1 {<b>one}}")
        assert [error.code for error in doc.errors] == ['Unclosed element "b"']

    def test_invalid_icu_message(self):
        """A brace without the ICU header is reported."""
        doc = parse("{n}")
        assert doc.errors[0].code == "Invalid ICU message. Missing ','."


class TestParseErrorRepr(unittest.TestCase):
    def test_str_with_location(self):
        """str() prefixes the position."""
        error = ParseError("EOF in tag", line=3, column=7)
        assert str(error) == "(3,7): EOF in tag"

    def test_str_with_message(self):
        """A distinct message is appended to the code."""
        error = ParseError("eof", line=1, column=2, message="Unexpected end of file")
        assert str(error) == "(1,2): eof - Unexpected end of file"

    def test_str_without_location(self):
        """Without a position str() is the code."""
        assert str(ParseError("EOF in tag")) == "EOF in tag"

    def test_repr(self):
        """repr() shows code and position."""
        assert repr(ParseError("x", line=1, column=1)) == "ParseError('x', line=1, column=1)"
        assert repr(ParseError("x")) == "ParseError('x')"

    def test_equality(self):
        """Errors compare by code and position."""
        assert ParseError("x", 1, 2) == ParseError("x", 1, 2)
        assert ParseError("x", 1, 2) != ParseError("x", 1, 3)
        assert ParseError("x") != "x"


class TestFormatErrors(unittest.TestCase):
    def test_malformed_input_reports_first_error(self):
        """The message is the first error plus a count."""
        with self.assertRaises(MalformedInputError) as ctx:
            format("<a></b></c>")
        exc = ctx.exception
        assert len(exc.errors) == 2
        assert exc.error is exc.errors[0]
        assert str(exc) == '(1,4): Unexpected closing tag "b" (and 1 more)'

    def test_malformed_input_is_format_error(self):
        """MalformedInputError is a FormatError."""
        with self.assertRaises(FormatError):
            format("</div>")

    def test_malformed_input_needs_errors(self):
        """An empty error list is rejected."""
        with self.assertRaises(ValueError):
            MalformedInputError([])

    def test_unsupported_node_message(self):
        """The message names the node kind and position."""
        source = "ab\n {x, select, a {b}}"
        node = Expansion("x", "select", SourceSpan(source, 4, len(source)))
        error = UnsupportedNodeError(node)
        assert error.node is node
        assert str(error) == "Cannot format node of kind '#expansion' at (2,2)"

    def test_unsupported_object_without_name(self):
        """Objects without a name are named by type."""
        error = UnsupportedNodeError(object())
        assert str(error) == "Cannot format node of kind 'object'"


if __name__ == "__main__":
    unittest.main()
