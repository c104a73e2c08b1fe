class Tag:
    __slots__ = ("attrs", "end", "kind", "name", "prefix", "self_closing", "start")

    START = 0
    END = 1

    def __init__(self, kind, name, attrs, self_closing=False, prefix=None, start=0, end=0):
        self.kind = kind
        self.name = name
        self.prefix = prefix
        # list of AttributeToken, in source order
        self.attrs = attrs if attrs is not None else []
        self.self_closing = bool(self_closing)
        self.start = start
        self.end = end

    def __repr__(self):
        if self.attrs:
            attrs = " ".join(f"{attr.name}={attr.value!r}" for attr in self.attrs)
        else:
            attrs = ""
        closing = " /" if self.self_closing else ""
        kind_str = "start" if self.kind == self.START else "end"
        name = f"{self.prefix}:{self.name}" if self.prefix else self.name
        return f"<{kind_str}:{name}{closing} {attrs}>"


class AttributeToken:
    __slots__ = ("end", "name", "start", "value")

    def __init__(self, name, value, start, end):
        self.name = name
        self.value = value
        self.start = start
        self.end = end


class CharacterTokens:
    __slots__ = ("data", "end", "start")

    def __init__(self, data, start=0, end=0):
        self.data = data
        self.start = start
        self.end = end


class CommentToken:
    __slots__ = ("data", "end", "start")

    def __init__(self, data, start=0, end=0):
        self.data = data
        self.start = start
        self.end = end


class DoctypeToken:
    __slots__ = ("data", "end", "start")

    def __init__(self, data, start=0, end=0):
        # Full declaration as written, e.g. "<!DOCTYPE html>"
        self.data = data
        self.start = start
        self.end = end


class ExpansionFormStart:
    __slots__ = ("start", "switch_value", "type")

    def __init__(self, switch_value, expansion_type, start=0):
        self.switch_value = switch_value
        self.type = expansion_type
        self.start = start


class ExpansionCaseStart:
    __slots__ = ("start", "value")

    def __init__(self, value, start=0):
        self.value = value
        self.start = start


class ExpansionCaseEnd:
    __slots__ = ("end",)

    def __init__(self, end=0):
        self.end = end


class ExpansionFormEnd:
    __slots__ = ("end",)

    def __init__(self, end=0):
        self.end = end


class EOFToken:
    __slots__ = ()


class ParseError:
    """Represents a parse error with location information."""

    __slots__ = ("code", "column", "line", "message")

    def __init__(self, code, line=None, column=None, message=None):
        self.code = code
        self.line = line
        self.column = column
        self.message = message or code

    def __repr__(self):
        if self.line is not None and self.column is not None:
            return f"ParseError({self.code!r}, line={self.line}, column={self.column})"
        return f"ParseError({self.code!r})"

    def __str__(self):
        if self.line is not None and self.column is not None:
            if self.message != self.code:
                return f"({self.line},{self.column}): {self.code} - {self.message}"
            return f"({self.line},{self.column}): {self.code}"
        if self.message != self.code:
            return f"{self.code} - {self.message}"
        return self.code

    def __eq__(self, other):
        if not isinstance(other, ParseError):
            return NotImplemented
        return self.code == other.code and self.line == other.line and self.column == other.column

    __hash__ = None  # Unhashable since we define __eq__
