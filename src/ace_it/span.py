import ast
from dataclasses import dataclass
from typing import Optional
from typing import Sequence
from typing import Tuple

from typing_extensions import Self

__all__ = ["SourceSpan"]


@dataclass(frozen=True)
class SourceSpan:
    """Where a node was found in the source. Used to locate diagnostics"""

    filename: str
    lineno: int
    col_offset: int
    # 0-based, as in the ast
    end_lineno: Optional[int] = None
    end_col_offset: Optional[int] = None
    text: Optional[str] = None
    # The full source line at `lineno`

    @classmethod
    def of(cls, node: ast.AST, source_lines: Sequence[str], filename: str = "<unknown>") -> Self:
        lineno = node.lineno
        text = source_lines[lineno - 1] if 0 < lineno <= len(source_lines) else None
        return cls(
            filename,
            lineno,
            node.col_offset,
            getattr(node, "end_lineno", None),
            getattr(node, "end_col_offset", None),
            text,
        )

    @property
    def offset(self) -> int:
        """1-based column, as SyntaxError reports it"""
        return self.col_offset + 1

    def syntax_error_details(self) -> Tuple[str, int, int, Optional[str]]:
        return self.filename, self.lineno, self.offset, self.text

    def __str__(self) -> str:
        return f"{self.filename}:{self.lineno}:{self.offset}"
