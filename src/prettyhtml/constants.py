"""Markup Element Constants

This module defines the element sets shared by the template parser and the
formatter. Sets are kept as tuples/frozensets so they can be used both for
ordered iteration (option defaults) and fast membership checks.

Usage:
    from prettyhtml.constants import SELF_CLOSING_TAGS, AUTO_CLOSING_TAGS

References:
    - https://html.spec.whatwg.org/multipage/syntax.html#void-elements
    - https://html.spec.whatwg.org/multipage/syntax.html#optional-tags
"""

# Void elements: never have children and never get an end tag in output.
# "command" and "keygen" are obsolete but still show up in older templates.
SELF_CLOSING_TAGS = frozenset(
    {
        "area",
        "base",
        "br",
        "col",
        "command",
        "embed",
        "hr",
        "img",
        "input",
        "keygen",
        "link",
        "meta",
        "param",
        "source",
        "track",
        "wbr",
    }
)

# Content is raw text up to the matching end tag (no tags, no comments).
RAWTEXT_ELEMENTS = frozenset({"script", "style", "textarea", "title"})

# Formatter defaults
DEFAULT_INDENT_SIZE = 4
DEFAULT_COMPACT_INLINE_TAGS = ("p", "li", "span")
DEFAULT_VERBATIM_TAGS = ("pre", "style")
DEFAULT_OPAQUE_NAMESPACES = ("svg",)
# Multi-attribute elements that still keep their attributes on one line.
DEFAULT_INLINE_ATTRIBUTE_TAGS = ("link",)

# Inline-text heuristic thresholds
INLINE_TEXT_MAX_LENGTH = 40
INLINE_LINE_MAX_LENGTH = 140

# Tag names that imply a namespace for themselves and their descendants.
IMPLICIT_NAMESPACES = {
    "svg": "svg",
    "math": "math",
}

# Foreign elements whose children are parsed back in the HTML namespace.
NAMESPACE_BREAKOUT_ELEMENTS = frozenset({"foreignObject"})

_P_CLOSERS = (
    "address",
    "article",
    "aside",
    "blockquote",
    "div",
    "dl",
    "fieldset",
    "footer",
    "form",
    "h1",
    "h2",
    "h3",
    "h4",
    "h5",
    "h6",
    "header",
    "hgroup",
    "hr",
    "main",
    "nav",
    "ol",
    "p",
    "pre",
    "section",
    "table",
    "ul",
)

# open element -> start tags that implicitly close it when it is the current element
AUTO_CLOSING_TAGS = {
    "p": frozenset(_P_CLOSERS),
    "thead": frozenset({"tbody", "tfoot"}),
    "tbody": frozenset({"tbody", "tfoot"}),
    "tfoot": frozenset({"tbody"}),
    "tr": frozenset({"tr"}),
    "td": frozenset({"td", "th"}),
    "th": frozenset({"td", "th"}),
    "li": frozenset({"li"}),
    "dt": frozenset({"dt", "dd"}),
    "dd": frozenset({"dt", "dd"}),
    "rb": frozenset({"rb", "rt", "rtc", "rp"}),
    "rt": frozenset({"rb", "rt", "rtc", "rp"}),
    "rtc": frozenset({"rb", "rtc", "rp"}),
    "rp": frozenset({"rb", "rt", "rtc", "rp"}),
    "optgroup": frozenset({"optgroup"}),
    "option": frozenset({"option", "optgroup"}),
}

# Elements an ancestor's end tag may close implicitly. An end tag that would
# have to skip over any other open element is an error.
CLOSE_ON_PARENT_CLOSE = frozenset(
    {
        "p",
        "tbody",
        "tfoot",
        "tr",
        "td",
        "th",
        "li",
        "dd",
        "rb",
        "rt",
        "rtc",
        "rp",
        "optgroup",
        "option",
    }
)
