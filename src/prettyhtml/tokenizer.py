import re

from .constants import RAWTEXT_ELEMENTS
from .tokens import (
    AttributeToken,
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

_WHITESPACE = "\t\n\f\r "
_TAG_NAME_TERMINATORS = "\t\n\f\r />"
_ATTR_NAME_TERMINATORS = "\t\n\f\r />=\"'<"
_ATTR_VALUE_UNQUOTED_TERMINATORS = "\t\n\f\r >"

_TAG_NAME_TERMINATOR_PATTERN = re.compile(f"[{re.escape(_TAG_NAME_TERMINATORS)}]")
_ATTR_NAME_TERMINATOR_PATTERN = re.compile(f"[{re.escape(_ATTR_NAME_TERMINATORS)}]")
_ATTR_VALUE_UNQUOTED_PATTERN = re.compile(f"[{re.escape(_ATTR_VALUE_UNQUOTED_TERMINATORS)}]")
_NON_WHITESPACE_PATTERN = re.compile(f"[^{re.escape(_WHITESPACE)}]")

_RAWTEXT_END_PATTERNS = {}

# Expansion stack entries
_FORM = 0
_CASE = 1


def _rawtext_end_pattern(name):
    pattern = _RAWTEXT_END_PATTERNS.get(name)
    if pattern is None:
        pattern = re.compile(f"</{re.escape(name)}[{re.escape(_TAG_NAME_TERMINATORS)}]", re.IGNORECASE)
        _RAWTEXT_END_PATTERNS[name] = pattern
    return pattern


class TokenizerOpts:
    __slots__ = ("expansion_forms",)

    def __init__(self, expansion_forms=True):
        self.expansion_forms = bool(expansion_forms)


class Tokenizer:
    """Template markup tokenizer.

    Scans the source left to right and hands tokens to ``sink.process_token``.
    Every token carries ``start``/``end`` offsets into the source so the tree
    builder can attach verbatim source spans. Entities are not decoded.
    """

    DATA = 0
    TAG_OPEN = 1
    END_TAG_OPEN = 2
    TAG_NAME = 3
    BEFORE_ATTRIBUTE_NAME = 4
    ATTRIBUTE_NAME = 5
    AFTER_ATTRIBUTE_NAME = 6
    BEFORE_ATTRIBUTE_VALUE = 7
    ATTRIBUTE_VALUE_DOUBLE = 8
    ATTRIBUTE_VALUE_SINGLE = 9
    ATTRIBUTE_VALUE_UNQUOTED = 10
    MARKUP_DECLARATION_OPEN = 11
    RAWTEXT = 12
    EXPANSION_FORM_START = 13
    EXPANSION_FORM = 14

    __slots__ = (
        "buffer",
        "current_attr_name",
        "current_attr_start",
        "current_tag_attrs",
        "current_tag_kind",
        "current_tag_name",
        "current_tag_prefix",
        "current_tag_self_closing",
        "current_tag_start",
        "expansion_stack",
        "length",
        "opts",
        "pos",
        "rawtext_tag_name",
        "sink",
        "state",
    )

    def __init__(self, sink, opts=None):
        self.sink = sink
        self.opts = opts or TokenizerOpts()

        self.state = self.DATA
        self.buffer = ""
        self.length = 0
        self.pos = 0

        self.current_tag_kind = Tag.START
        self.current_tag_name = ""
        self.current_tag_prefix = None
        self.current_tag_attrs = []
        self.current_tag_self_closing = False
        self.current_tag_start = 0
        self.current_attr_name = ""
        self.current_attr_start = 0
        self.rawtext_tag_name = None
        self.expansion_stack = []

    def run(self, html):
        self.buffer = html or ""
        self.length = len(self.buffer)
        self.pos = 0
        self.state = self.DATA
        self.rawtext_tag_name = None
        self.expansion_stack = []
        self.current_tag_attrs = []

        while True:
            state = self.state
            if state == self.DATA:
                if self._state_data():
                    break
            elif state == self.TAG_OPEN:
                if self._state_tag_open():
                    break
            elif state == self.END_TAG_OPEN:
                if self._state_end_tag_open():
                    break
            elif state == self.TAG_NAME:
                if self._state_tag_name():
                    break
            elif state == self.BEFORE_ATTRIBUTE_NAME:
                if self._state_before_attribute_name():
                    break
            elif state == self.ATTRIBUTE_NAME:
                if self._state_attribute_name():
                    break
            elif state == self.AFTER_ATTRIBUTE_NAME:
                if self._state_after_attribute_name():
                    break
            elif state == self.BEFORE_ATTRIBUTE_VALUE:
                if self._state_before_attribute_value():
                    break
            elif state == self.ATTRIBUTE_VALUE_DOUBLE:
                if self._state_attribute_value_quoted('"'):
                    break
            elif state == self.ATTRIBUTE_VALUE_SINGLE:
                if self._state_attribute_value_quoted("'"):
                    break
            elif state == self.ATTRIBUTE_VALUE_UNQUOTED:
                if self._state_attribute_value_unquoted():
                    break
            elif state == self.MARKUP_DECLARATION_OPEN:
                if self._state_markup_declaration_open():
                    break
            elif state == self.RAWTEXT:
                if self._state_rawtext():
                    break
            elif state == self.EXPANSION_FORM_START:
                if self._state_expansion_form_start():
                    break
            elif state == self.EXPANSION_FORM:
                if self._state_expansion_form():
                    break
            else:
                # Unknown state fallback to data.
                self.state = self.DATA

    # ---------------------
    # Helper methods
    # ---------------------

    def _peek_char(self, offset):
        """Peek ahead at character at current position + offset without consuming"""
        peek_pos = self.pos + offset
        if peek_pos < self.length:
            return self.buffer[peek_pos]
        return None

    def _skip_whitespace(self):
        match = _NON_WHITESPACE_PATTERN.search(self.buffer, self.pos)
        self.pos = match.start() if match else self.length

    def _is_tag_start(self, pos):
        # '<' only opens markup when followed by a name, '!' or '</name'
        nxt = pos + 1
        if nxt >= self.length:
            return False
        c = self.buffer[nxt]
        if c.isalpha() or c == "!":
            return True
        return c == "/" and nxt + 1 < self.length and self.buffer[nxt + 1].isalpha()

    def _in_expansion_case(self):
        return bool(self.expansion_stack) and self.expansion_stack[-1] == _CASE

    # ---------------------
    # State handlers
    # ---------------------

    def _state_data(self):
        buffer = self.buffer
        length = self.length
        expansion_forms = self.opts.expansion_forms
        in_case = self._in_expansion_case()
        start = pos = self.pos
        while pos < length:
            c = buffer[pos]
            if c == "<":
                if self._is_tag_start(pos):
                    break
            elif c == "{":
                if buffer.startswith("{{", pos):
                    # Interpolations are plain text; braces inside never open a form.
                    close = buffer.find("}}", pos + 2)
                    pos = pos + 2 if close == -1 else close + 2
                    continue
                if expansion_forms:
                    break
            elif c == "}" and in_case:
                break
            pos += 1

        if pos > start:
            self._emit_token(CharacterTokens(buffer[start:pos], start, pos))
        self.pos = pos

        if pos >= length:
            if self.expansion_stack:
                self._emit_error("Invalid ICU message. Missing '}'.", pos)
            self._emit_token(EOFToken())
            return True

        c = buffer[pos]
        if c == "<":
            self.state = self.TAG_OPEN
        elif c == "{":
            self.state = self.EXPANSION_FORM_START
        else:
            self.expansion_stack.pop()
            self.pos = pos + 1
            self._emit_token(ExpansionCaseEnd(pos + 1))
            self.state = self.EXPANSION_FORM
        return False

    def _state_tag_open(self):
        # self.pos is at '<' and _is_tag_start() already held
        self.current_tag_start = self.pos
        c = self._peek_char(1)
        if c == "!":
            self.state = self.MARKUP_DECLARATION_OPEN
            return False
        if c == "/":
            self.pos += 2
            self.state = self.END_TAG_OPEN
            return False
        self.pos += 1
        self._start_tag(Tag.START)
        self.state = self.TAG_NAME
        return False

    def _state_end_tag_open(self):
        self._start_tag(Tag.END)
        self.state = self.TAG_NAME
        return False

    def _state_tag_name(self):
        buffer = self.buffer
        start = self.pos
        match = _TAG_NAME_TERMINATOR_PATTERN.search(buffer, start)
        end = match.start() if match else self.length
        raw_name = buffer[start:end]
        self.pos = end
        prefix, sep, local = raw_name.partition(":")
        if sep and prefix and local:
            self.current_tag_prefix = prefix
            self.current_tag_name = local
        else:
            self.current_tag_name = raw_name
        if end >= self.length:
            self._emit_error("EOF in tag", self.current_tag_start)
            self._emit_token(EOFToken())
            return True
        self.state = self.BEFORE_ATTRIBUTE_NAME
        return False

    def _state_before_attribute_name(self):
        self._skip_whitespace()
        pos = self.pos
        if pos >= self.length:
            self._emit_error("EOF in tag", self.current_tag_start)
            self._emit_token(EOFToken())
            return True
        c = self.buffer[pos]
        if c == ">":
            self.pos = pos + 1
            self._emit_current_tag()
            return False
        if c == "/":
            if self._peek_char(1) == ">":
                self.pos = pos + 2
                self.current_tag_self_closing = True
                self._emit_current_tag()
                return False
            # A stray solidus inside a tag is ignored.
            self.pos = pos + 1
            return False
        if self.current_tag_kind == Tag.END:
            self._emit_error("Unexpected character in end tag", pos)
            end = self.buffer.find(">", pos)
            if end == -1:
                self._emit_token(EOFToken())
                return True
            self.pos = end
            return False
        self.current_attr_start = pos
        self.state = self.ATTRIBUTE_NAME
        return False

    def _state_attribute_name(self):
        buffer = self.buffer
        start = self.pos
        # The first character may be one of '=', quotes or '<' and still belong to the name.
        match = _ATTR_NAME_TERMINATOR_PATTERN.search(buffer, start + 1)
        end = match.start() if match else self.length
        self.current_attr_name = buffer[start:end]
        self.pos = end
        self.state = self.AFTER_ATTRIBUTE_NAME
        return False

    def _state_after_attribute_name(self):
        attr_end = self.pos
        self._skip_whitespace()
        if self._peek_char(0) == "=":
            self.pos += 1
            self.state = self.BEFORE_ATTRIBUTE_VALUE
            return False
        self._finish_attribute("", attr_end)
        self.state = self.BEFORE_ATTRIBUTE_NAME
        return False

    def _state_before_attribute_value(self):
        self._skip_whitespace()
        c = self._peek_char(0)
        if c is None:
            self._emit_error("EOF before attribute value", self.pos)
            self._emit_token(EOFToken())
            return True
        if c == '"':
            self.pos += 1
            self.state = self.ATTRIBUTE_VALUE_DOUBLE
            return False
        if c == "'":
            self.pos += 1
            self.state = self.ATTRIBUTE_VALUE_SINGLE
            return False
        if c == ">":
            self._emit_error("Missing attribute value", self.pos)
            self._finish_attribute("", self.pos)
            self.state = self.BEFORE_ATTRIBUTE_NAME
            return False
        self.state = self.ATTRIBUTE_VALUE_UNQUOTED
        return False

    def _state_attribute_value_quoted(self, quote):
        start = self.pos
        end = self.buffer.find(quote, start)
        if end == -1:
            self._emit_error("EOF in attribute value", self.current_attr_start)
            self._emit_token(EOFToken())
            return True
        self.pos = end + 1
        self._finish_attribute(self.buffer[start:end], end + 1)
        self.state = self.BEFORE_ATTRIBUTE_NAME
        return False

    def _state_attribute_value_unquoted(self):
        start = self.pos
        match = _ATTR_VALUE_UNQUOTED_PATTERN.search(self.buffer, start)
        end = match.start() if match else self.length
        self.pos = end
        self._finish_attribute(self.buffer[start:end], end)
        self.state = self.BEFORE_ATTRIBUTE_NAME
        return False

    def _state_markup_declaration_open(self):
        buffer = self.buffer
        start = self.current_tag_start
        if buffer.startswith("<!--", start):
            end = buffer.find("-->", start + 4)
            if end == -1:
                self._emit_error("EOF in comment", start)
                self._emit_token(CommentToken(buffer[start + 4 :], start, self.length))
                self._emit_token(EOFToken())
                return True
            self.pos = end + 3
            self._emit_token(CommentToken(buffer[start + 4 : end], start, end + 3))
        elif buffer.startswith("<![CDATA[", start):
            end = buffer.find("]]>", start + 9)
            if end == -1:
                self._emit_error("EOF in CDATA section", start)
                self._emit_token(EOFToken())
                return True
            # Kept as raw text so the section survives formatting unchanged.
            self.pos = end + 3
            self._emit_token(CharacterTokens(buffer[start : end + 3], start, end + 3))
        else:
            end = buffer.find(">", start + 2)
            if end == -1:
                self._emit_error("EOF in DOCTYPE", start)
                self._emit_token(EOFToken())
                return True
            self.pos = end + 1
            self._emit_token(DoctypeToken(buffer[start : end + 1], start, end + 1))
        self.state = self.DATA
        return False

    def _state_rawtext(self):
        start = self.pos
        match = _rawtext_end_pattern(self.rawtext_tag_name).search(self.buffer, start)
        end = match.start() if match else self.length
        if end > start:
            self._emit_token(CharacterTokens(self.buffer[start:end], start, end))
        self.pos = end
        self.rawtext_tag_name = None
        if match is None:
            self._emit_token(EOFToken())
            return True
        self.state = self.TAG_OPEN
        return False

    def _state_expansion_form_start(self):
        buffer = self.buffer
        start = self.pos
        switch_end = buffer.find(",", start + 1)
        type_end = buffer.find(",", switch_end + 1) if switch_end != -1 else -1
        if type_end == -1 or "}" in buffer[start + 1 : type_end] or "{" in buffer[start + 1 : type_end]:
            self._emit_error("Invalid ICU message. Missing ','.", start)
            # Recover by treating the brace as text.
            self._emit_token(CharacterTokens("{", start, start + 1))
            self.pos = start + 1
            self.state = self.DATA
            return False
        switch_value = buffer[start + 1 : switch_end].strip()
        expansion_type = buffer[switch_end + 1 : type_end].strip()
        self.expansion_stack.append(_FORM)
        self.pos = type_end + 1
        self._emit_token(ExpansionFormStart(switch_value, expansion_type, start))
        self.state = self.EXPANSION_FORM
        return False

    def _state_expansion_form(self):
        self._skip_whitespace()
        buffer = self.buffer
        pos = self.pos
        if pos >= self.length:
            self._emit_error("Invalid ICU message. Missing '}'.", pos)
            self._emit_token(EOFToken())
            return True
        if buffer[pos] == "}":
            self.expansion_stack.pop()
            self.pos = pos + 1
            self._emit_token(ExpansionFormEnd(pos + 1))
            self.state = self.DATA
            return False
        brace = buffer.find("{", pos)
        if brace == -1 or "}" in buffer[pos:brace]:
            self._emit_error("Invalid ICU message. Missing '{'.", pos)
            self.expansion_stack.pop()
            self._emit_token(ExpansionFormEnd(pos))
            self.state = self.DATA
            return False
        self.expansion_stack.append(_CASE)
        self.pos = brace + 1
        self._emit_token(ExpansionCaseStart(buffer[pos:brace].strip(), pos))
        self.state = self.DATA
        return False

    # ---------------------
    # Token assembly
    # ---------------------

    def _start_tag(self, kind):
        self.current_tag_kind = kind
        self.current_tag_name = ""
        self.current_tag_prefix = None
        self.current_tag_attrs = []
        self.current_tag_self_closing = False
        self.current_attr_name = ""

    def _finish_attribute(self, value, end):
        name = self.current_attr_name
        self.current_attr_name = ""
        if not name:
            return
        for existing in self.current_tag_attrs:
            if existing.name == name:
                self._emit_error("Duplicate attribute", self.current_attr_start)
                return
        self.current_tag_attrs.append(AttributeToken(name, value, self.current_attr_start, end))

    def _emit_current_tag(self):
        kind = self.current_tag_kind
        name = self.current_tag_name
        tag = Tag(
            kind,
            name,
            self.current_tag_attrs,
            self.current_tag_self_closing,
            prefix=self.current_tag_prefix,
            start=self.current_tag_start,
            end=self.pos,
        )
        self.current_tag_attrs = []
        self._emit_token(tag)
        self.state = self.DATA
        if (
            kind == Tag.START
            and not tag.self_closing
            and tag.prefix is None
            and name.lower() in RAWTEXT_ELEMENTS
            and self.sink.current_namespace() is None
        ):
            self.state = self.RAWTEXT
            self.rawtext_tag_name = name

    def _emit_token(self, token):
        self.sink.process_token(token)

    def _emit_error(self, code, offset=None):
        if offset is None:
            offset = self.pos
        buffer = self.buffer
        line = buffer.count("\n", 0, offset) + 1
        column = offset - (buffer.rfind("\n", 0, offset) + 1) + 1
        self._emit_token(ParseError(code, line=line, column=column))
