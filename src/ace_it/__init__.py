from ._version import version as __version__

__all__ = [
    "__version__",
    "ace_it",
    "expand",
    "expand_source",
    "parse_declaration",
    "DeclarationError",
    "DuplicatePayloadTypeError",
    "Expansion",
    "TaggedUnion",
    "Variant",
]

from .conversion_code import expand, Expansion
from .errors import DeclarationError, DuplicatePayloadTypeError
from .main import ace_it
from .parse import parse_declaration
from .runtime import TaggedUnion, Variant
from .source import expand_source
