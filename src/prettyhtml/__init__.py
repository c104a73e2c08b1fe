from .api import format
from .errors import FormatError, MalformedInputError, UnsupportedNodeError
from .formatter import Formatter
from .node import Attribute, Comment, Doctype, Document, Element, Expansion, ExpansionCase, SourceSpan, Text
from .options import FormatOptions
from .parser import MarkupParser, parse
from .tokens import ParseError

__all__ = [
    "Attribute",
    "Comment",
    "Doctype",
    "Document",
    "Element",
    "Expansion",
    "ExpansionCase",
    "FormatError",
    "FormatOptions",
    "Formatter",
    "MalformedInputError",
    "MarkupParser",
    "ParseError",
    "SourceSpan",
    "Text",
    "UnsupportedNodeError",
    "format",
    "parse",
]
