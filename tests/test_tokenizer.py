"""Tests for the template tokenizer."""

import unittest

from prettyhtml.tokenizer import Tokenizer, TokenizerOpts
from prettyhtml.tokens import (
    CharacterTokens,
    CommentToken,
    DoctypeToken,
    EOFToken,
    ExpansionCaseEnd,
    ExpansionCaseStart,
    ExpansionFormEnd,
    ExpansionFormStart,
    ParseError,
    Tag,
)


class RecordingSink:
    """Collects tokens instead of building a tree."""

    def __init__(self, namespace=None):
        self.tokens = []
        self.namespace = namespace

    def process_token(self, token):
        self.tokens.append(token)

    def current_namespace(self):
        return self.namespace


def tokenize(source, **opts):
    sink = RecordingSink()
    Tokenizer(sink, TokenizerOpts(**opts)).run(source)
    return sink.tokens


def describe(tokens):
    out = []
    for token in tokens:
        if isinstance(token, Tag):
            kind = "start" if token.kind == Tag.START else "end"
            out.append((kind, token.name))
        elif isinstance(token, CharacterTokens):
            out.append(("text", token.data))
        elif isinstance(token, CommentToken):
            out.append(("comment", token.data))
        elif isinstance(token, DoctypeToken):
            out.append(("doctype", token.data))
        elif isinstance(token, ParseError):
            out.append(("error", token.code))
        elif isinstance(token, ExpansionFormStart):
            out.append(("form", token.switch_value, token.type))
        elif isinstance(token, ExpansionCaseStart):
            out.append(("case", token.value))
        elif isinstance(token, ExpansionCaseEnd):
            out.append(("case-end",))
        elif isinstance(token, ExpansionFormEnd):
            out.append(("form-end",))
        elif isinstance(token, EOFToken):
            out.append(("eof",))
    return out


class TestTags(unittest.TestCase):
    def test_start_text_end(self):
        """Tags and text come out in order."""
        assert describe(tokenize("<a>t</a>")) == [("start", "a"), ("text", "t"), ("end", "a"), ("eof",)]

    def test_attributes_in_source_order(self):
        """All attribute value forms are read in order."""
        tag = tokenize('<a href="x" disabled data-n=3 title=\'q\'>')[0]
        assert [(attr.name, attr.value) for attr in tag.attrs] == [
            ("href", "x"),
            ("disabled", ""),
            ("data-n", "3"),
            ("title", "q"),
        ]

    def test_offsets(self):
        """Token offsets slice the source exactly."""
        source = '<div id="a">x</div>'
        start, text, end = tokenize(source)[:3]
        assert source[start.start : start.end] == '<div id="a">'
        assert source[text.start : text.end] == "x"
        assert source[end.start : end.end] == "</div>"
        attr = start.attrs[0]
        assert source[attr.start : attr.end] == 'id="a"'

    def test_self_closing(self):
        """'/>' marks the tag self-closing."""
        tag = tokenize("<my-el />")[0]
        assert tag.self_closing
        assert tag.name == "my-el"

    def test_prefixed_name(self):
        """A colon splits off the namespace prefix."""
        tag = tokenize("<svg:rect></svg:rect>")[0]
        assert tag.prefix == "svg"
        assert tag.name == "rect"

    def test_binding_attribute_names(self):
        """Template binding names are attribute names."""
        tag = tokenize('<b [x]="1" (y)="f()" *ngIf="z" #ref>')[0]
        assert [attr.name for attr in tag.attrs] == ["[x]", "(y)", "*ngIf", "#ref"]

    def test_duplicate_attribute(self):
        """The first duplicate attribute wins."""
        tokens = tokenize('<a x="1" x="2">')
        assert ("error", "Duplicate attribute") in describe(tokens)
        tag = [t for t in tokens if isinstance(t, Tag)][0]
        assert [attr.value for attr in tag.attrs] == ["1"]

    def test_lone_less_than_is_text(self):
        """'<' not followed by a name is text."""
        assert describe(tokenize("a < b <3")) == [("text", "a < b <3"), ("eof",)]

    def test_end_tag_with_attributes(self):
        """End tags may not carry attributes."""
        names = describe(tokenize('<a></a class="x">'))
        assert names == [("start", "a"), ("error", "Unexpected character in end tag"), ("end", "a"), ("eof",)]

    def test_eof_in_attribute_value(self):
        """An unterminated quoted value is reported."""
        assert ("error", "EOF in attribute value") in describe(tokenize('<a href="x'))

    def test_missing_attribute_value(self):
        """'=' without a value is reported."""
        assert describe(tokenize("<a href=>"))[0] == ("error", "Missing attribute value")


class TestMarkupDeclarations(unittest.TestCase):
    def test_comment(self):
        """Comment data excludes the delimiters."""
        assert describe(tokenize("<!-- hi -->")) == [("comment", " hi "), ("eof",)]

    def test_doctype(self):
        """Declarations are kept whole."""
        assert describe(tokenize("<!doctype html>")) == [("doctype", "<!doctype html>"), ("eof",)]

    def test_cdata_is_raw_text(self):
        """CDATA sections become text."""
        assert describe(tokenize("<![CDATA[<x>]]>")) == [("text", "<![CDATA[<x>]]>"), ("eof",)]


class TestRawText(unittest.TestCase):
    def test_script_content_is_not_tokenized(self):
        """Script content is raw until its end tag."""
        tokens = describe(tokenize("<script>if (a<b) { x = '</div>' }</script>"))
        assert tokens == [
            ("start", "script"),
            ("text", "if (a<b) { x = '</div>' }"),
            ("end", "script"),
            ("eof",),
        ]

    def test_end_tag_is_case_insensitive(self):
        """Raw text ends at any-case end tag."""
        tokens = describe(tokenize("<style>a{}</STYLE>"))
        assert tokens[1] == ("text", "a{}")
        assert tokens[2] == ("end", "STYLE")

    def test_foreign_style_is_not_raw(self):
        """<style> in foreign content holds markup."""
        sink = RecordingSink(namespace="svg")
        Tokenizer(sink, TokenizerOpts(expansion_forms=False)).run("<style><b></b></style>")
        assert [t.name for t in sink.tokens if isinstance(t, Tag)] == ["style", "b", "b", "style"]


class TestExpansionForms(unittest.TestCase):
    def test_plural_form(self):
        """ICU forms yield form and case tokens."""
        tokens = describe(tokenize("{count, plural, =0 {none} other {many}}"))
        assert tokens == [
            ("form", "count", "plural"),
            ("case", "=0"),
            ("text", "none"),
            ("case-end",),
            ("case", "other"),
            ("text", "many"),
            ("case-end",),
            ("form-end",),
            ("eof",),
        ]

    def test_interpolation_is_text(self):
        """'{{ }}' never opens a form."""
        assert describe(tokenize("a {{ b }} c")) == [("text", "a {{ b }} c"), ("eof",)]

    def test_interpolation_inside_case(self):
        """Interpolations work inside ICU cases."""
        tokens = describe(tokenize("{n, plural, other {{{n}} items}}"))
        assert ("text", "{{n}} items") in tokens

    def test_disabled(self):
        """With forms off, braces are text."""
        source = "{count, plural, =0 {none}}"
        assert describe(tokenize(source, expansion_forms=False)) == [("text", source), ("eof",)]

    def test_missing_closing_brace(self):
        """An unterminated form is reported."""
        tokens = describe(tokenize("{n, plural, =0 {none}"))
        assert ("error", "Invalid ICU message. Missing '}'.") in tokens


class TestErrorPositions(unittest.TestCase):
    def test_line_and_column(self):
        """Error positions are 1-based."""
        errors = [t for t in tokenize("<a>\n\n   <b") if isinstance(t, ParseError)]
        assert errors[0].code == "EOF in tag"
        assert (errors[0].line, errors[0].column) == (3, 4)


if __name__ == "__main__":
    unittest.main()
