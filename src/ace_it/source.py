import ast
import inspect
import logging
from types import ModuleType
from typing import Any
from typing import Dict
from typing import Iterable
from typing import List
from typing import Optional
from typing import Sequence
from typing import Union

import more_itertools

from ace_it.conversion_code import expand
from ace_it.conversion_code import Expansion
from ace_it.errors import DeclarationError
from ace_it.parse import parse
from ace_it.parse.ast_util import first_line
from ace_it.parse.ast_util import is_comment
from ace_it.parse.declaration import EnumDeclaration
from ace_it.parse.directives import AceDirective
from ace_it.parse.directives import ExpandDirective
from ace_it.span import SourceSpan
from ace_it.util import leading_whitespace
from ace_it.util import not_optional

__all__ = ["SourceUnit", "expand_source"]

logger = logging.getLogger(__name__)


class SourceUnit:
    """
    Take a unit of Python source which may hold tagged union declarations. Find the declarations in it, either by
    class (for the `@ace_it` decorator) or by `# ACE-It` directive (for the build time pass).

    Keep track of the file and module the code came from and facilitate executing generated code.
    """

    filename: str
    """The filename, or '<unknown>' if source was a raw string and no filename was given"""

    module: Optional[ModuleType]
    """The module that the source came from. Or, None if source was a raw string (e.g. in a test case)"""

    source_code: str
    """The full source code, starting at line 1, so that node positions line up with it"""

    source_lines: Sequence[str]

    source_ast: ast.Module
    """The parsed source, comments included"""

    def __init__(self, code: Union[type, str, Iterable[str]], filename: Optional[str] = None) -> None:
        self.module = None
        if isinstance(code, str):
            self.source_code = code
            self.filename = filename or "<unknown>"
        elif isinstance(code, type):
            self.module = inspect.getmodule(code)
            try:
                self.filename = filename or not_optional(inspect.getsourcefile(code))
                self.source_code = inspect.getsource(not_optional(self.module))
            except (OSError, TypeError) as e:
                raise DeclarationError(
                    f"Source code of {code.__qualname__} is not available, it can not be expanded",
                    SourceSpan(filename or "<unknown>", 1, 0),
                ) from e
        else:
            self.source_code = "\n".join(code)
            self.filename = filename or "<unknown>"

        self.source_lines = self.source_code.splitlines()
        self.source_ast = parse(self.source_code, self.filename)

    def declaration_for(self, cls: type) -> EnumDeclaration:
        """Read the declaration of the given class, which must be defined in this source"""
        try:
            _, lineno = inspect.getsourcelines(cls)
        except (OSError, TypeError) as e:
            raise DeclarationError(
                f"Source code of {cls.__qualname__} is not available, it can not be expanded",
                SourceSpan(self.filename, 1, 0),
            ) from e

        for node in ast.walk(self.source_ast):
            # The reported line is the first decorator, or the class line itself on older interpreters
            if (
                isinstance(node, ast.ClassDef)
                and node.name == cls.__name__
                and lineno in (first_line(node), node.lineno)
            ):
                return EnumDeclaration.parse_from(node, self.source_code, self.filename)

        raise DeclarationError(
            f"Could not find the definition of {cls.__qualname__} in {self.filename}",
            SourceSpan(self.filename, lineno, 0),
        )

    def marked_declarations(self) -> List[EnumDeclaration]:
        """Read every class definition that follows an `# ACE-It` directive"""
        finder = _MarkedClassFinder(self)
        finder.visit(self.source_ast)
        return [EnumDeclaration.parse_from(node, self.source_code, self.filename) for node in finder.found]

    def expanded_source(self) -> str:
        """
        The source with the conversions of every marked declaration inserted right after the declaration. Every
        original line is kept as it is. If any declaration is rejected, its error is raised and there is no output.
        """
        expansions = [expand(d) for d in self.marked_declarations()]
        for expansion in expansions:
            expansion.raise_for_error()

        expansions = [e for e in expansions if e.conversions]
        if not expansions:
            return self.source_code

        lines = self.source_code.splitlines(keepends=True)
        if not lines[-1].endswith(("\n", "\r")):
            lines[-1] += "\n"

        # Insert from the bottom up, so that the line numbers of declarations above stay valid
        for expansion in sorted(expansions, key=lambda e: not_optional(e.declaration.node.end_lineno), reverse=True):
            node = expansion.declaration.node
            indent = leading_whitespace(lines[first_line(node) - 1])
            lines.insert(not_optional(node.end_lineno), f"\n\n{expansion.conversions_source(indent)}\n")

        return "".join(lines)

    def add_conversions(self, expansion: Expansion, namespace: Dict[str, Any]) -> None:
        """
        Execute the generated conversions within the given namespace. The union class must be bound in it under its
        own name, as must every name the payload types refer to.
        """
        if not expansion.conversions:
            return

        code = compile(expansion.conversions_source(), f"<ace_it {expansion.declaration.name}>", mode="exec")
        exec(code, namespace)


class _MarkedClassFinder(ast.NodeVisitor):
    """Walk the whole tree and collect the class definitions marked with an ExpandDirective"""

    found: List[ast.ClassDef]

    def __init__(self, unit: SourceUnit) -> None:
        self.unit = unit
        self.found = []

    def generic_visit(self, node: ast.AST) -> None:
        for _, value in ast.iter_fields(node):
            if isinstance(value, list):
                self.scan_statements(node, value)
        super().generic_visit(node)

    def scan_statements(self, parent: ast.AST, statements: Sequence[Any]) -> None:
        for i, statement in enumerate(statements):
            if not is_comment(statement):
                continue
            directive = AceDirective.from_comment(statement, self.unit.source_lines, self.unit.filename)
            if not isinstance(directive, ExpandDirective):
                continue

            span = SourceSpan.of(statement, self.unit.source_lines, self.unit.filename)
            following = more_itertools.first_true(statements[i + 1 :], pred=lambda s: not is_comment(s))
            if not isinstance(following, ast.ClassDef):
                raise DeclarationError(
                    f"The directive on line {statement.lineno} must be followed by a class definition", span
                )
            if isinstance(parent, ast.ClassDef):
                raise DeclarationError(
                    f"Class {following.name} is defined inside class {parent.name}. Only module or function level "
                    f"classes can be expanded",
                    span,
                )
            if following not in self.found:
                self.found.append(following)


def expand_source(source: str, filename: str = "<unknown>") -> str:
    """Expand every `# ACE-It` marked tagged union declaration found in a module's source"""
    unit = SourceUnit(source, filename)
    result = unit.expanded_source()
    logger.debug("Expanded %s", filename)
    return result
