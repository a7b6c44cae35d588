"""
The data model that the expansion works on: a tagged union declaration, read from the class definition that declares
it.  A declaration looks like:

```python
class Test(TaggedUnion):
    A = Variant()
    B = Variant(int)
    C = Variant(a=int, b=int)
```

Only the class body statements of the form `Name = Variant(...)` are variants. Their payload shape is decided by the
call syntax alone: no arguments, unnamed (positional) payload types or named fields.
"""
import ast
import enum
from dataclasses import dataclass
from dataclasses import field
from typing import Optional
from typing import Sequence
from typing import Tuple
from typing import Union

from typing_extensions import Self

from ace_it.errors import DeclarationError
from ace_it.parse.ast_util import first_line
from ace_it.parse.ast_util import parse
from ace_it.parse.ast_util import type_tokens
from ace_it.span import SourceSpan

__all__ = ["EnumDeclaration", "PayloadShape", "TypeExpression", "Variant", "parse_declaration"]


class PayloadShape(enum.Enum):
    UNIT = "unit"
    UNNAMED = "unnamed"
    NAMED = "named"


@dataclass(frozen=True)
class TypeExpression:
    """
    A payload type, as it was written.  Two type expressions are equal when their canonical token text is equal. There
    is no type resolution here: an alias and the type it aliases are different type expressions.
    """

    tokens: str
    node: ast.expr = field(compare=False, repr=False)

    @classmethod
    def from_node(cls, node: ast.expr) -> Self:
        return cls(type_tokens(node), node)

    def __str__(self) -> str:
        return self.tokens


def is_variant_call(node: Optional[ast.expr]) -> bool:
    """True for `Variant(...)` and `<anything>.Variant(...)`"""
    if not isinstance(node, ast.Call):
        return False
    func = node.func
    return (isinstance(func, ast.Name) and func.id == "Variant") or (
        isinstance(func, ast.Attribute) and func.attr == "Variant"
    )


@dataclass(frozen=True)
class Variant:
    """One arm of a tagged union declaration"""

    name: str
    shape: PayloadShape
    span: SourceSpan
    payload: Tuple[TypeExpression, ...] = ()
    # The unnamed payload types (UNNAMED shape only)
    fields: Tuple[Tuple[str, TypeExpression], ...] = ()
    # The named fields (NAMED shape only)

    @property
    def single_payload(self) -> Optional[TypeExpression]:
        """The payload type if this variant carries exactly one unnamed payload, otherwise None"""
        if self.shape is PayloadShape.UNNAMED and len(self.payload) == 1:
            return self.payload[0]
        return None

    @classmethod
    def parse_from(cls, statement: ast.AST, source_lines: Sequence[str], filename: str = "<unknown>") -> Optional[Self]:
        """
        Read a variant from a class body statement. Return None if the statement does not declare a variant
        """
        if isinstance(statement, ast.Assign) and len(statement.targets) == 1:
            target = statement.targets[0]
        elif isinstance(statement, ast.AnnAssign) and statement.value is not None:
            target = statement.target
        else:
            return None

        call = statement.value
        if not isinstance(target, ast.Name) or not is_variant_call(call):
            return None
        assert isinstance(call, ast.Call)

        span = SourceSpan.of(statement, source_lines, filename)
        if call.args and call.keywords:
            raise DeclarationError(
                f"Variant '{target.id}' mixes unnamed payload types and named fields. Use one or the other", span
            )
        if any(isinstance(a, ast.Starred) for a in call.args) or any(k.arg is None for k in call.keywords):
            raise DeclarationError(f"Variant '{target.id}' must spell out its payload, not unpack it", span)

        if call.keywords:
            fields = tuple((k.arg, TypeExpression.from_node(k.value)) for k in call.keywords if k.arg is not None)
            return cls(target.id, PayloadShape.NAMED, span, fields=fields)
        elif call.args:
            payload = tuple(TypeExpression.from_node(a) for a in call.args)
            return cls(target.id, PayloadShape.UNNAMED, span, payload=payload)
        else:
            return cls(target.id, PayloadShape.UNIT, span)


@dataclass(frozen=True)
class EnumDeclaration:
    """A tagged union declaration: its name, its variants in declaration order and the text it was declared with"""

    name: str
    variants: Tuple[Variant, ...]
    source_text: str
    # The declaration exactly as written, decorators included, from its first line to its last
    node: ast.ClassDef = field(compare=False, repr=False)
    filename: str = "<unknown>"

    @classmethod
    def parse_from(cls, node: ast.ClassDef, source: str, filename: str = "<unknown>") -> Self:
        source_lines = source.splitlines()
        variants = []
        for statement in node.body:
            variant = Variant.parse_from(statement, source_lines, filename)
            if variant is not None:
                variants.append(variant)

        all_lines = source.splitlines(keepends=True)
        source_text = "".join(all_lines[first_line(node) - 1 : node.end_lineno])
        return cls(node.name, tuple(variants), source_text, node, filename)


def parse_declaration(source: Union[str, Sequence[str]], filename: str = "<unknown>") -> EnumDeclaration:
    """Parse source holding a class definition (at top level) and read the first one as a tagged union declaration"""
    if not isinstance(source, str):
        source = "\n".join(source)
    tree = parse(source, filename)
    for node in tree.body:
        if isinstance(node, ast.ClassDef):
            return EnumDeclaration.parse_from(node, source, filename)

    raise DeclarationError(
        "No class definition found to read a tagged union declaration from",
        SourceSpan(filename, 1, 0, text=source.splitlines()[0] if source else None),
    )
