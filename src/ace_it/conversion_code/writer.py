import ast
import copy
import textwrap
from ast import NodeTransformer
from dataclasses import dataclass
from typing import Any

from ace_it.parse.ast_util import copy_ast_line_info
from ace_it.parse.ast_util import unparse
from ace_it.parse.declaration import TypeExpression
from ace_it.util import iter_of_type

__all__ = ["ConversionImpl", "ConversionWriter"]

_CONVERSION_TEMPLATE = '''\
@__enum__.conversion(__payload__)
def __function__(value: __payload__) -> __enum__:
    """__docstring__"""
    return __enum__.__variant__(value)
'''
"""
Every conversion is this function with the placeholders filled in. The payload value is handed to the variant
constructor as it is: there is no check, no copy and nothing that can fail.
"""


@dataclass(frozen=True)
class ConversionImpl:
    """A generated conversion of one payload type into one variant of a union"""

    enum_name: str
    variant_name: str
    payload: TypeExpression

    @property
    def function_name(self) -> str:
        return f"_ace_it_{self.enum_name}_from_{self.variant_name}"

    def to_ast(self) -> ast.FunctionDef:
        return ConversionWriter(self).write()

    def to_source(self, indent: str = "") -> str:
        return textwrap.indent(unparse(self.to_ast()), indent)


class ConversionWriter(NodeTransformer):
    """
    Fills in the conversion template for a single conversion. Placeholder names are replaced with the union name, the
    variant name and (a copy of) the payload type expression as it was written in the declaration.
    """

    conversion: ConversionImpl

    def __init__(self, conversion: ConversionImpl) -> None:
        self.conversion = conversion

    def write(self) -> ast.FunctionDef:
        template = ast.parse(_CONVERSION_TEMPLATE)
        (function_def,) = iter_of_type(template.body, ast.FunctionDef)
        result = self.visit(function_def)
        assert isinstance(result, ast.FunctionDef)
        return result

    def visit_FunctionDef(self, node: ast.FunctionDef) -> Any:
        self.generic_visit(node)
        node.name = self.conversion.function_name
        return node

    def visit_Name(self, node: ast.Name) -> Any:
        if node.id == "__enum__":
            return ast.Name(id=self.conversion.enum_name, ctx=node.ctx, **copy_ast_line_info(node))
        elif node.id == "__payload__":
            payload = copy.deepcopy(self.conversion.payload.node)
            # Positions point into the template, not into the declaration the payload was copied from
            for child in ast.walk(payload):
                if "lineno" in child._attributes:
                    for attr, value in copy_ast_line_info(node).items():
                        setattr(child, attr, value)
            return payload
        return node

    def visit_Attribute(self, node: ast.Attribute) -> Any:
        self.generic_visit(node)
        if node.attr == "__variant__":
            node.attr = self.conversion.variant_name
        return node

    def visit_Constant(self, node: ast.Constant) -> Any:
        if node.value == "__docstring__":
            c = self.conversion
            node.value = f"Wrap a value of {c.payload} into {c.enum_name}.{c.variant_name}"
        return node
