import ast
from typing import Any
from typing import Mapping
from typing import Union

import ast_comments  # type: ignore
from typing_extensions import cast

__all__ = ["copy_ast_line_info", "first_line", "is_comment", "parse", "type_tokens", "unparse"]


def parse(source: Union[str, bytes], filename: str = "<unknown>") -> ast.Module:
    """
    Replace the ast.parse method with one which picks up comments. Comments show up in statement lists as
    `ast_comments.Comment` nodes, which is how `# ACE-` directives are found.
    """
    return cast(ast.Module, ast_comments.parse(source, filename, "exec"))


def unparse(ast_obj: ast.AST) -> str:
    return cast(str, ast_comments.unparse(ast_obj))


def is_comment(node: Any) -> bool:
    return isinstance(node, ast_comments.Comment)


def type_tokens(node: ast.expr) -> str:
    """
    The canonical token text of a type expression. Layout and whitespace are normalized away but spelling is not, so
    `Dict[str,int]` and `Dict[str, int]` are equal while `typing.List` and `List` are not.
    """
    return ast.unparse(node)


def copy_ast_line_info(node: ast.AST) -> Mapping[str, Any]:
    """Extract the line and position attributes from a node so they can initialize a new node"""
    return dict(
        lineno=node.lineno,
        col_offset=node.col_offset,
        end_lineno=node.end_lineno,
        end_col_offset=node.end_col_offset,
    )


def first_line(node: Union[ast.ClassDef, ast.FunctionDef]) -> int:
    """The first source line of a definition, counting its decorators"""
    return min([node.lineno, *(d.lineno for d in node.decorator_list)])
