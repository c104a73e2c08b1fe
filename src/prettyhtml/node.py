"""Parsed markup tree.

The tree builder produces these nodes; the formatter only reads them. Every
node keeps the `SourceSpan` it was parsed from so opaque regions can be
re-emitted exactly as written.
"""

from __future__ import annotations


class SourceSpan:
    """A ``[start, end)`` slice of the source text."""

    __slots__ = ("end", "source", "start")

    def __init__(self, source: str, start: int, end: int) -> None:
        if start < 0 or end < start:
            msg = f"Invalid source span {start}..{end}"
            raise ValueError(msg)
        self.source = source
        self.start = start
        self.end = end

    def __str__(self) -> str:
        return self.source[self.start : self.end]

    def __repr__(self) -> str:
        return f"SourceSpan({self.start}, {self.end}, {str(self)!r})"

    @property
    def line(self) -> int:
        return self.source.count("\n", 0, self.start) + 1

    @property
    def column(self) -> int:
        return self.start - (self.source.rfind("\n", 0, self.start) + 1) + 1


class Node:
    """Common base for tree nodes.

    - name: tag name for elements, '#text', '#comment', '!doctype',
      '#expansion' or '#expansion-case' for the other kinds
    - source_span: where the node (for elements: the opening tag) was parsed from
    - parent: containing node, or None for top-level nodes
    """

    __slots__ = ("name", "parent", "source_span")

    def __init__(self, name: str, source_span: SourceSpan | None = None) -> None:
        # Empty names would make kind dispatch ambiguous; fail loudly.
        if not name:
            msg = "Empty name passed to Node constructor"
            raise ValueError(msg)
        self.name = name
        self.source_span = source_span
        self.parent: Node | None = None

    @property
    def source_end(self) -> int | None:
        """Offset just past the last source character belonging to this node."""
        return self.source_span.end if self.source_span is not None else None


class Attribute:
    __slots__ = ("name", "source_span", "value")

    def __init__(self, name: str, value: str = "", source_span: SourceSpan | None = None) -> None:
        self.name = name
        # "" means a valueless (boolean) attribute
        self.value = value
        self.source_span = source_span

    def __repr__(self) -> str:
        return f"Attribute({self.name!r}, {self.value!r})"


class Element(Node):
    __slots__ = ("attrs", "children", "end_source_span", "namespace", "prefix")

    def __init__(
        self,
        name: str,
        attrs: list[Attribute] | None = None,
        *,
        namespace: str | None = None,
        prefix: str | None = None,
        source_span: SourceSpan | None = None,
        end_source_span: SourceSpan | None = None,
    ) -> None:
        super().__init__(name, source_span)
        self.attrs = attrs if attrs is not None else []
        self.children: list[Node] = []
        # None for HTML, "svg"/"math" for foreign content or an explicit prefix
        self.namespace = namespace
        # Prefix exactly as written ("svg" for <svg:rect>), None when implied
        self.prefix = prefix
        self.end_source_span = end_source_span

    def __repr__(self) -> str:
        ns = f"{self.namespace}:" if self.namespace else ""
        return f"<Element {ns}{self.name} attrs={len(self.attrs)} children={len(self.children)}>"

    @property
    def qualified_name(self) -> str:
        if self.prefix:
            return f"{self.prefix}:{self.name}"
        return self.name

    @property
    def source_end(self) -> int | None:
        if self.end_source_span is not None:
            return self.end_source_span.end
        for child in reversed(self.children):
            end = child.source_end
            if end is not None:
                return end
        return super().source_end

    def outer_source(self) -> str:
        """Return the element's full original markup, opening to closing tag."""
        span = self.source_span
        if span is None:
            msg = f"Element <{self.name}> has no source span"
            raise ValueError(msg)
        return span.source[span.start : self.source_end]

    def append_child(self, node: Node) -> None:
        self.children.append(node)
        node.parent = self


class Text(Node):
    __slots__ = ("data",)

    def __init__(self, data: str, source_span: SourceSpan | None = None) -> None:
        super().__init__("#text", source_span)
        self.data = data

    def __repr__(self) -> str:
        return f"Text({self.data!r})"


class Comment(Node):
    __slots__ = ("data",)

    def __init__(self, data: str, source_span: SourceSpan | None = None) -> None:
        super().__init__("#comment", source_span)
        self.data = data

    def __repr__(self) -> str:
        return f"Comment({self.data!r})"


class Doctype(Node):
    __slots__ = ("data",)

    def __init__(self, data: str, source_span: SourceSpan | None = None) -> None:
        super().__init__("!doctype", source_span)
        self.data = data

    def __repr__(self) -> str:
        return f"Doctype({self.data!r})"


class Expansion(Node):
    """ICU message form, e.g. ``{count, plural, =0 {none} other {many}}``."""

    __slots__ = ("cases", "switch_value", "type")

    def __init__(self, switch_value: str, type_: str, source_span: SourceSpan | None = None) -> None:
        super().__init__("#expansion", source_span)
        self.switch_value = switch_value
        self.type = type_
        self.cases: list[ExpansionCase] = []

    def __repr__(self) -> str:
        return f"Expansion({self.switch_value!r}, {self.type!r}, cases={len(self.cases)})"

    def append_child(self, node: ExpansionCase) -> None:
        self.cases.append(node)
        node.parent = self


class ExpansionCase(Node):
    __slots__ = ("children", "value")

    def __init__(self, value: str, source_span: SourceSpan | None = None) -> None:
        super().__init__("#expansion-case", source_span)
        self.value = value
        self.children: list[Node] = []

    def __repr__(self) -> str:
        return f"ExpansionCase({self.value!r}, children={len(self.children)})"

    def append_child(self, node: Node) -> None:
        self.children.append(node)
        node.parent = self


class Document:
    """Parse result: top-level nodes plus the errors collected on the way."""

    __slots__ = ("children", "errors", "source")

    name = "#document"

    def __init__(self, source: str = "") -> None:
        self.source = source
        self.children: list[Node] = []
        self.errors: list = []

    def __repr__(self) -> str:
        return f"<Document children={len(self.children)} errors={len(self.errors)}>"

    def append_child(self, node: Node) -> None:
        self.children.append(node)
        node.parent = None
