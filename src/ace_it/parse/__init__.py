"""
In this subpackage, we focus on reading tagged union declarations out of Python source. Source is parsed with
`ast_comments` so that `# ACE-` directive comments are part of the tree, then class definitions are read into
`EnumDeclaration` instances.  Nothing is generated here, see `conversion_code` for that.
"""

from .ast_util import parse, unparse
from .declaration import EnumDeclaration, PayloadShape, TypeExpression, Variant, parse_declaration

__all__ = [
    "parse",
    "unparse",
    "parse_declaration",
    "EnumDeclaration",
    "PayloadShape",
    "TypeExpression",
    "Variant",
]
