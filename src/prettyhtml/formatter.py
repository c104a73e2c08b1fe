"""Tree-to-text rendering.

The formatter walks a parsed tree top-down and produces string fragments
which are joined, stripped and terminated with a single newline. Each
element renders into its own fragment list; children report back through
`RenderedChildren` whether their text was inlined, which decides the line
break before the closing tag.
"""

from __future__ import annotations

import re
import sys
from typing import Any

from .constants import INLINE_LINE_MAX_LENGTH, INLINE_TEXT_MAX_LENGTH, SELF_CLOSING_TAGS
from .errors import UnsupportedNodeError
from .node import Element
from .options import FormatOptions

_NEWLINE_RUN = re.compile(r"\n+")


class RenderContext:
    """What a parent allows its children to do.

    - inline_text_node: text may share a line with the surrounding tags
    - skip_formatting_children: text is emitted exactly as written
    - verbatim: nested elements are emitted exactly as written too
    """

    __slots__ = ("inline_text_node", "skip_formatting_children", "verbatim")

    def __init__(self, inline_text_node=False, skip_formatting_children=False, verbatim=False):
        self.inline_text_node = inline_text_node
        self.skip_formatting_children = skip_formatting_children
        self.verbatim = verbatim

    def __repr__(self):
        return (
            f"RenderContext(inline_text_node={self.inline_text_node}, "
            f"skip_formatting_children={self.skip_formatting_children}, verbatim={self.verbatim})"
        )


NEUTRAL_CONTEXT = RenderContext()
COMPACT_CONTEXT = RenderContext(inline_text_node=True, skip_formatting_children=True)


class RenderedChildren:
    __slots__ = ("fragments", "text_node_inlined")

    def __init__(self, fragments, text_node_inlined):
        self.fragments = fragments
        self.text_node_inlined = text_node_inlined


def collapse_whitespace(data: str) -> str:
    """Reduce whitespace-only text to at most one line break.

    The first line break goes (the following sibling brings its own), spaces
    and tabs go, and what is left of the line breaks collapses to one, so a
    blank line between siblings survives while source indentation does not.
    """
    data = data.replace("\n", "", 1).replace(" ", "").replace("\t", "")
    return _NEWLINE_RUN.sub("\n", data, count=1)


def compact_fragments(fragments: list[str], tags) -> list[str]:
    """Flatten a compact-inline element's rendering.

    Everything after the last opening-tag fragment of a compact tag loses the
    indentation that nested rendering added, and bare line-break fragments
    are dropped. Fragments up to that boundary are kept as they are, so a
    nested compact tag is not flattened a second time. Best effort: the
    result is not guaranteed to be a fixed point of formatting.
    """
    boundaries = tuple(f"<{tag}" for tag in tags)
    split = 0
    for index in range(len(fragments) - 1, 0, -1):
        if fragments[index].endswith(boundaries):
            split = index
            break
    compacted = fragments[: split + 1]
    for fragment in fragments[split + 1 :]:
        if fragment.startswith("  "):
            fragment = fragment.lstrip()
        if fragment != "\n":
            compacted.append(fragment)
    return compacted


def _quote_attr_value(value: str) -> str:
    if '"' in value and "'" not in value:
        return f"'{value}'"
    return f'"{value}"'


class Formatter:
    """Renders parsed nodes according to `FormatOptions`.

    A formatter only holds read-only options, so one instance can render any
    number of documents; all render state lives in the call.
    """

    __slots__ = ("debug_enabled", "options")

    def __init__(self, options: FormatOptions | None = None, *, debug: bool = False) -> None:
        self.options = options or FormatOptions()
        self.debug_enabled = bool(debug)

    def debug(self, message: str, indent: int = 4) -> None:
        if not self.debug_enabled:
            return
        print(f"{' ' * indent}{message}", file=sys.stderr)

    def render(self, nodes: Any) -> str:
        """Format a document (or any iterable of top-level nodes)."""
        if getattr(nodes, "name", None) in {"#document", "#document-fragment"}:
            nodes = nodes.children
        fragments: list[str] = []
        for node in nodes:
            lookback = fragments[-1] if fragments else ""
            fragments.extend(self._visit(node, 0, NEUTRAL_CONTEXT, lookback, bool(fragments)))
        return "".join(fragments).strip() + "\n"

    # ---------------------
    # Dispatch
    # ---------------------

    def _visit(self, node: Any, level: int, context: RenderContext, lookback: str, has_content: bool) -> list[str]:
        name = getattr(node, "name", None)
        if name == "#text":
            return self._visit_text(node, level, context, lookback)[0]
        if name == "#comment":
            if context.verbatim and node.source_span is not None:
                return [str(node.source_span)]
            return self._visit_comment(node, level)
        if name == "!doctype":
            return self._visit_doctype(node, level, has_content)
        if isinstance(node, Element):
            if context.verbatim:
                return [node.outer_source()]
            return self._visit_element(node, level, has_content)
        raise UnsupportedNodeError(node)

    def _render_children(
        self,
        children: list[Any],
        level: int,
        context: RenderContext,
        lookback: str,
        text_node_inlined: bool = False,
    ) -> RenderedChildren:
        fragments: list[str] = []
        for child in children:
            if fragments:
                lookback = fragments[-1]
            if getattr(child, "name", None) == "#text":
                rendered, inlined = self._visit_text(child, level, context, lookback)
                if inlined is not None:
                    text_node_inlined = inlined
            else:
                rendered = self._visit(child, level, context, lookback, True)
            fragments.extend(rendered)
        return RenderedChildren(fragments, text_node_inlined)

    # ---------------------
    # Elements
    # ---------------------

    def _visit_element(self, element: Element, level: int, has_content: bool) -> list[str]:
        options = self.options
        if element.namespace is not None and element.namespace in options.opaque_namespaces:
            return self._visit_opaque_element(element, level, has_content)
        if element.name in options.compact_inline_tags:
            return self._visit_compact_element(element, level, has_content)

        indent = options.indent(level)
        tag = element.name.lower()
        name = element.qualified_name
        children = element.children
        attr_new_lines = len(element.attrs) > 1 and tag not in options.inline_attribute_tags
        if self.debug_enabled:
            self.debug(f"<{name}> level={level} attrs={len(element.attrs)} wrap={attr_new_lines}")

        fragments = ["\n"] if has_content else []
        fragments.append(f"{indent}<{name}")
        fragments.extend(self._visit_attributes(element.attrs, level, attr_new_lines))
        if attr_new_lines and not options.close_tag_same_line:
            fragments.append("\n" + indent)
        fragments.append(">")

        verbatim = tag in options.verbatim_tags
        context = RenderContext(
            inline_text_node=not attr_new_lines and len(children) == 1,
            skip_formatting_children=verbatim,
            verbatim=verbatim,
        )
        rendered = self._render_children(children, level + 1, context, fragments[-1])
        fragments.extend(rendered.fragments)

        if children and not rendered.text_node_inlined and not context.skip_formatting_children:
            fragments.append("\n" + indent)
        if tag not in SELF_CLOSING_TAGS:
            fragments.append(f"</{name}>")
        return fragments

    def _visit_compact_element(self, element: Element, level: int, has_content: bool) -> list[str]:
        """Render a compact-inline element, then flatten it with `compact_fragments`.

        Not idempotent for every input: a comment or nested compact tag keeps
        the indentation it was emitted with, and text children are raw, so
        ``<p><!-- c --></p>`` gains one indented line per formatting pass.
        """
        options = self.options
        name = element.qualified_name
        attr_new_lines = len(element.attrs) > 1
        if self.debug_enabled:
            self.debug(f"<{name}> level={level} compact")

        fragments = [f"{options.indent(level)}<{name}"]
        fragments.extend(self._visit_attributes(element.attrs, level, attr_new_lines))
        fragments.append(">")
        rendered = self._render_children(element.children, level + 1, COMPACT_CONTEXT, ">", text_node_inlined=True)
        fragments.extend(rendered.fragments)
        fragments.append(f"</{name}>")

        compacted = compact_fragments(fragments, options.compact_inline_tags)
        if has_content:
            compacted.insert(0, "\n")
        return compacted

    def _visit_opaque_element(self, element: Element, level: int, has_content: bool) -> list[str]:
        indent = self.options.indent(level)
        opening = str(element.source_span)
        if self.debug_enabled:
            self.debug(f"<{element.qualified_name}> level={level} opaque ({element.namespace})")

        fragments = ["\n"] if has_content else []
        fragments.append(indent + opening)
        rendered = self._render_children(element.children, level + 1, NEUTRAL_CONTEXT, fragments[-1])
        fragments.extend(rendered.fragments)

        if element.children:
            fragments.append("\n" + indent)
        elif opening.endswith("/>"):
            return fragments
        if element.end_source_span is not None:
            fragments.append(str(element.end_source_span))
        else:
            fragments.append(f"</{element.qualified_name}>")
        return fragments

    def _visit_attributes(self, attrs: list[Any], level: int, attr_new_lines: bool) -> list[str]:
        prefix = "\n" + self.options.indent(level + 1) if attr_new_lines else " "
        fragments = []
        for attr in attrs:
            fragments.append(prefix + attr.name)
            if attr.value:
                fragments.append("=" + _quote_attr_value(attr.value.strip()))
        return fragments

    # ---------------------
    # Character data
    # ---------------------

    def _visit_text(self, text: Any, level: int, context: RenderContext, lookback: str) -> tuple[list[str], bool | None]:
        """Render a text node; the flag says whether it was inlined (None: emitted raw)."""
        data = text.data
        if context.skip_formatting_children:
            return [data], None

        content = data.strip()
        should_inline = (
            context.inline_text_node
            and len(content) < INLINE_TEXT_MAX_LENGTH
            and len(content) + len(lookback) < INLINE_LINE_MAX_LENGTH
        )
        if content:
            prefix = "" if should_inline else "\n" + self.options.indent(level)
            return [prefix + content], should_inline
        if not should_inline:
            return [collapse_whitespace(data)], should_inline
        return [], should_inline

    def _visit_comment(self, comment: Any, level: int) -> list[str]:
        return ["\n" + self.options.indent(level) + "<!-- " + comment.data.strip() + " -->"]

    def _visit_doctype(self, doctype: Any, level: int, has_content: bool) -> list[str]:
        fragments = ["\n"] if has_content else []
        fragments.append(self.options.indent(level) + doctype.data)
        return fragments
