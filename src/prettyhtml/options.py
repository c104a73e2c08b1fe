from .constants import (
    DEFAULT_COMPACT_INLINE_TAGS,
    DEFAULT_INDENT_SIZE,
    DEFAULT_INLINE_ATTRIBUTE_TAGS,
    DEFAULT_OPAQUE_NAMESPACES,
    DEFAULT_VERBATIM_TAGS,
)


def _name_set(value, option):
    # "p,li" and ["p", "li"] are both accepted
    if isinstance(value, str):
        value = [part.strip() for part in value.split(",")]
    try:
        names = frozenset(name for name in value if name)
    except TypeError:
        msg = f"{option} must be a collection of names, got {value!r}"
        raise TypeError(msg) from None
    for name in names:
        if not isinstance(name, str):
            msg = f"{option} must contain strings, got {name!r}"
            raise TypeError(msg)
    return names


class FormatOptions:
    """Style rules for one format call.

    - indent_size: spaces per indent level (ignored when use_spaces is False)
    - use_spaces: indent with spaces, or with one tab per level
    - close_tag_same_line: keep a wrapped element's '>' after its last attribute
    - compact_inline_tags: tags whose content is collapsed onto their own line
    - verbatim_tags: tags whose content is emitted exactly as written
    - opaque_namespaces: namespaces whose tags are re-emitted from source
    - inline_attribute_tags: tags that never wrap their attributes
    """

    __slots__ = (
        "close_tag_same_line",
        "compact_inline_tags",
        "indent_size",
        "inline_attribute_tags",
        "opaque_namespaces",
        "use_spaces",
        "verbatim_tags",
    )

    def __init__(
        self,
        indent_size=DEFAULT_INDENT_SIZE,
        use_spaces=True,
        close_tag_same_line=False,
        compact_inline_tags=DEFAULT_COMPACT_INLINE_TAGS,
        verbatim_tags=DEFAULT_VERBATIM_TAGS,
        opaque_namespaces=DEFAULT_OPAQUE_NAMESPACES,
        inline_attribute_tags=DEFAULT_INLINE_ATTRIBUTE_TAGS,
    ):
        if isinstance(indent_size, bool) or not isinstance(indent_size, int):
            msg = f"indent_size must be an integer, got {indent_size!r}"
            raise TypeError(msg)
        if indent_size < 1:
            msg = f"indent_size must be positive, got {indent_size}"
            raise ValueError(msg)
        self.indent_size = indent_size
        self.use_spaces = bool(use_spaces)
        self.close_tag_same_line = bool(close_tag_same_line)
        self.compact_inline_tags = _name_set(compact_inline_tags, "compact_inline_tags")
        self.verbatim_tags = _name_set(verbatim_tags, "verbatim_tags")
        self.opaque_namespaces = _name_set(opaque_namespaces, "opaque_namespaces")
        self.inline_attribute_tags = _name_set(inline_attribute_tags, "inline_attribute_tags")

    def __repr__(self):
        fields = ", ".join(f"{name}={getattr(self, name)!r}" for name in self.__slots__)
        return f"FormatOptions({fields})"

    def __eq__(self, other):
        if not isinstance(other, FormatOptions):
            return NotImplemented
        return all(getattr(self, name) == getattr(other, name) for name in self.__slots__)

    __hash__ = None  # Unhashable since we define __eq__

    @classmethod
    def from_mapping(cls, values):
        """Build options from a mapping, skipping keys whose value is None."""
        unknown = sorted(set(values) - set(cls.__slots__))
        if unknown:
            msg = f"Unknown format options: {', '.join(unknown)}"
            raise TypeError(msg)
        return cls(**{key: value for key, value in values.items() if value is not None})

    def replace(self, **changes):
        values = {name: getattr(self, name) for name in self.__slots__}
        values.update(changes)
        return FormatOptions.from_mapping(values)

    def indent(self, level):
        if level < 0:
            msg = f"Indent level cannot be negative: {level}"
            raise ValueError(msg)
        if self.use_spaces:
            return " " * (level * self.indent_size)
        return "\t" * level
