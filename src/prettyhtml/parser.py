"""Template markup parser entry point."""

import re

from .tokenizer import Tokenizer, TokenizerOpts
from .treebuilder import TreeBuilder

_LINE_BREAK = re.compile(r"\r\n?")


class MarkupParser:
    __slots__ = ("debug", "errors", "root", "source", "tokenizer", "tree_builder")

    def __init__(
        self,
        source,
        *,
        debug=False,
        tokenizer_opts=None,
        tree_builder=None,
    ):
        source = source or ""
        if source.startswith("\ufeff"):
            source = source[1:]
        # Offsets, spans and whitespace collapsing all assume "\n" line breaks.
        source = _LINE_BREAK.sub("\n", source)
        self.source = source
        self.debug = bool(debug)
        self.tree_builder = tree_builder or TreeBuilder(source, debug=self.debug)
        self.tokenizer = Tokenizer(self.tree_builder, tokenizer_opts or TokenizerOpts())
        self.tokenizer.run(source)
        self.root = self.tree_builder.finish()
        self.errors = self.root.errors


def parse(source, *, expansion_forms=True, debug=False):
    """Parse markup into a `Document`; problems are collected in ``errors``."""
    opts = TokenizerOpts(expansion_forms=expansion_forms)
    return MarkupParser(source, debug=debug, tokenizer_opts=opts).root
