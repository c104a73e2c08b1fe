from .errors import MalformedInputError
from .formatter import Formatter
from .options import FormatOptions
from .parser import parse


def format(source, options=None, *, expansion_forms=True, debug=False, **overrides):  # noqa: A001
    """Pretty-print markup.

    ``options`` is a `FormatOptions`; keyword overrides such as
    ``indent_size=2`` are applied on top of it (or of the defaults).

    Raises `MalformedInputError` when the source does not parse cleanly and
    `UnsupportedNodeError` when the tree holds a node kind that has no
    formatting rule (ICU expansion forms). Nothing is returned on failure.
    """
    if options is None:
        options = FormatOptions.from_mapping(overrides)
    elif overrides:
        options = options.replace(**overrides)

    document = parse(source, expansion_forms=expansion_forms, debug=debug)
    if document.errors:
        raise MalformedInputError(document.errors)
    return Formatter(options, debug=debug).render(document)
