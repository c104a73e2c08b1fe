"""Exceptions raised by the formatter."""


class FormatError(Exception):
    """Base class for every failure of a format call."""


class MalformedInputError(FormatError):
    """The parser could not produce a clean tree for the source.

    ``errors`` holds every `ParseError` collected during parsing, ``error`` the
    first one (the one reported in the message).
    """

    def __init__(self, errors):
        self.errors = list(errors)
        if not self.errors:
            msg = "MalformedInputError needs at least one parse error"
            raise ValueError(msg)
        self.error = self.errors[0]
        extra = len(self.errors) - 1
        suffix = f" (and {extra} more)" if extra else ""
        super().__init__(f"{self.error}{suffix}")


class UnsupportedNodeError(FormatError):
    """The tree holds a node kind the formatter has no rule for."""

    def __init__(self, node):
        self.node = node
        name = getattr(node, "name", None)
        kind = name if name is not None else type(node).__name__
        location = ""
        span = getattr(node, "source_span", None)
        if span is not None:
            location = f" at ({span.line},{span.column})"
        super().__init__(f"Cannot format node of kind {kind!r}{location}")
