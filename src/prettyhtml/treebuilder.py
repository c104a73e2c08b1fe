import sys

from .constants import (
    AUTO_CLOSING_TAGS,
    CLOSE_ON_PARENT_CLOSE,
    IMPLICIT_NAMESPACES,
    NAMESPACE_BREAKOUT_ELEMENTS,
    SELF_CLOSING_TAGS,
)
from .node import Attribute, Comment, Doctype, Document, Element, Expansion, ExpansionCase, SourceSpan, Text
from .tokens import (
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


def _is_void(name, namespace):
    return namespace is None and name.lower() in SELF_CLOSING_TAGS


def _html_name(element):
    # HTML tag names compare case-insensitively, foreign ones exactly.
    if element.namespace is None:
        return element.name.lower()
    return element.name


class TreeBuilder:
    """Builds a template tree from tokenizer output.

    Unlike HTML5 tree construction nothing is moved or synthesized: elements
    nest as written, except for the optional-end-tag rules in
    AUTO_CLOSING_TAGS / CLOSE_ON_PARENT_CLOSE. Structural problems are
    recorded in ``errors`` and parsing continues.
    """

    __slots__ = ("debug_enabled", "document", "errors", "open_elements", "source")

    def __init__(self, source="", *, debug=False):
        self.source = source
        self.debug_enabled = bool(debug)
        self.document = Document(source)
        self.errors = self.document.errors
        # Elements, expansions and expansion cases that are still open.
        self.open_elements = []

    def debug(self, message, indent=4):
        if not self.debug_enabled:
            return
        print(f"{' ' * indent}{message}", file=sys.stderr)

    # ---------------------
    # Sink interface
    # ---------------------

    def process_token(self, token):
        if isinstance(token, Tag):
            if token.kind == Tag.START:
                self._process_start_tag(token)
            else:
                self._process_end_tag(token)
        elif isinstance(token, CharacterTokens):
            self._process_text(token)
        elif isinstance(token, CommentToken):
            self._append(Comment(token.data, self._span(token.start, token.end)))
        elif isinstance(token, DoctypeToken):
            self._append(Doctype(token.data, self._span(token.start, token.end)))
        elif isinstance(token, ExpansionFormStart):
            expansion = Expansion(token.switch_value, token.type, self._span(token.start, token.start))
            self._append(expansion)
            self.open_elements.append(expansion)
        elif isinstance(token, ExpansionCaseStart):
            self._process_expansion_case_start(token)
        elif isinstance(token, ExpansionCaseEnd):
            self._close_container(ExpansionCase, token.end)
        elif isinstance(token, ExpansionFormEnd):
            self._close_container(Expansion, token.end)
        elif isinstance(token, ParseError):
            self.debug(f"parse error: {token}")
            self.errors.append(token)
        elif isinstance(token, EOFToken):
            pass
        else:
            msg = f"Unexpected token {token!r}"
            raise TypeError(msg)

    def current_namespace(self):
        element = self._current_element()
        return element.namespace if element is not None else None

    def finish(self):
        if self.debug_enabled:
            unclosed = [node.name for node in self.open_elements if isinstance(node, Element)]
            if unclosed:
                self.debug(f"closing at EOF: {unclosed}")
        self.open_elements.clear()
        return self.document

    # ---------------------
    # Helpers
    # ---------------------

    def _span(self, start, end):
        return SourceSpan(self.source, start, end)

    def _error(self, code, offset):
        source = self.source
        line = source.count("\n", 0, offset) + 1
        column = offset - (source.rfind("\n", 0, offset) + 1) + 1
        error = ParseError(code, line=line, column=column)
        self.debug(f"parse error: {error}")
        self.errors.append(error)

    def _current_container(self):
        if self.open_elements:
            return self.open_elements[-1]
        return self.document

    def _current_element(self):
        top = self._current_container()
        return top if isinstance(top, Element) else None

    def _append(self, node):
        self._current_container().append_child(node)

    def _namespace_for(self, tag, parent):
        if tag.prefix is not None:
            return tag.prefix
        implicit = IMPLICIT_NAMESPACES.get(tag.name)
        if implicit is not None:
            return implicit
        if parent is None or parent.name in NAMESPACE_BREAKOUT_ELEMENTS:
            return None
        return parent.namespace

    # ---------------------
    # Token handlers
    # ---------------------

    def _process_start_tag(self, tag):
        parent = self._current_element()
        if parent is not None and parent.namespace is None:
            closers = AUTO_CLOSING_TAGS.get(parent.name.lower())
            if closers is not None and tag.name.lower() in closers:
                self.debug(f"<{tag.name}> implicitly closes <{parent.name}>")
                self.open_elements.pop()
                parent = self._current_element()

        namespace = self._namespace_for(tag, parent)
        attrs = [Attribute(attr.name, attr.value, self._span(attr.start, attr.end)) for attr in tag.attrs]
        element = Element(
            tag.name,
            attrs,
            namespace=namespace,
            prefix=tag.prefix,
            source_span=self._span(tag.start, tag.end),
        )
        void = _is_void(tag.name, namespace)
        if tag.self_closing and not (void or namespace is not None or "-" in tag.name):
            self._error(
                f"Only void, custom and foreign elements can be self closed \"{tag.name}\"",
                tag.start,
            )
        self._append(element)
        if not void and not tag.self_closing:
            self.open_elements.append(element)

    def _process_end_tag(self, tag):
        if tag.prefix is None and tag.name.lower() in SELF_CLOSING_TAGS:
            self._error(f"Void elements do not have end tags \"{tag.name}\"", tag.start)
            return

        for index in range(len(self.open_elements) - 1, -1, -1):
            node = self.open_elements[index]
            if not isinstance(node, Element):
                break
            if self._end_tag_matches(tag, node):
                node.end_source_span = self._span(tag.start, tag.end)
                del self.open_elements[index:]
                return
            if node.namespace is not None or _html_name(node) not in CLOSE_ON_PARENT_CLOSE:
                break
            self.debug(f"</{tag.name}> implicitly closes <{node.name}>")

        self._error(f"Unexpected closing tag \"{tag.name}\"", tag.start)

    def _end_tag_matches(self, tag, element):
        if tag.prefix is not None and tag.prefix != element.namespace:
            return False
        if element.namespace is None:
            return tag.name.lower() == element.name.lower()
        return tag.name == element.name

    def _process_text(self, token):
        container = self._current_container()
        children = container.children
        if children and isinstance(children[-1], Text):
            # Adjacent runs (text next to CDATA) form one text node.
            last = children[-1]
            last.data += token.data
            last.source_span = self._span(last.source_span.start, token.end)
            return
        container.append_child(Text(token.data, self._span(token.start, token.end)))

    def _process_expansion_case_start(self, token):
        expansion = self._current_container()
        if not isinstance(expansion, Expansion):
            msg = "Expansion case outside of an expansion form"
            raise TypeError(msg)
        case = ExpansionCase(token.value, self._span(token.start, token.start))
        expansion.append_child(case)
        self.open_elements.append(case)

    def _close_container(self, kind, end):
        # Elements left open inside a case end with it.
        while self.open_elements:
            node = self.open_elements.pop()
            if isinstance(node, kind):
                node.source_span = self._span(node.source_span.start, end)
                return
            if isinstance(node, Element) and _html_name(node) not in CLOSE_ON_PARENT_CLOSE:
                self._error(f"Unclosed element \"{node.name}\"", node.source_span.start)
        msg = f"No open {kind.__name__} to close"
        raise TypeError(msg)
