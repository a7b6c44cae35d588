from dataclasses import dataclass
from typing import Any
from typing import ClassVar
from typing import Optional
from typing import Sequence

from typing_extensions import Self

from ace_it.errors import DeclarationError
from ace_it.span import SourceSpan


@dataclass
class AceDirective:
    """A string directive parsed directly from a source comment"""

    PREFIX: ClassVar[str] = "# ACE-"
    TAG: ClassVar[Optional[str]] = None

    lineno: int
    # The line holding the directive comment
    directive: str
    # The directive (e.g. 'It')
    instruction_input: str
    # Everything read _after_ the directive name (possibly empty string)

    @classmethod
    def from_comment(cls, comment: Any, source_lines: Sequence[str], filename: str = "<unknown>") -> Optional["Self"]:
        """
        If the given `ast_comments.Comment` node holds a directive, return it. Otherwise, return None
        """
        result = cls.as_directive(comment.lineno, comment.value, filename)
        if result is not None and _is_inline(comment, source_lines):
            # The directive belongs to the class that follows it, so it needs its own line
            raise DeclarationError(
                f"ACE directives are not allowed in inline comments (line {comment.lineno})",
                SourceSpan.of(comment, source_lines, filename),
            )
        return result

    @classmethod
    def as_directive(cls, line_no: int, line: str, filename: str = "<unknown>") -> Optional["Self"]:
        """
        If the given line is a directive, find the subclass that matches it and instantiate it.  Otherwise, return None
        """
        result = cls._as_directive(line_no, line)
        stripped_line = line.lstrip(" ")
        if result is None and stripped_line.startswith(cls.PREFIX):
            raise DeclarationError(
                f"Source line {line_no} contains a comment that looks like an ACE directive but is "
                f"unrecognized. Possible spelling error for: '{stripped_line}'?",
                SourceSpan(filename, line_no, len(line) - len(stripped_line), text=line),
            )
        return result

    @classmethod
    def _as_directive(cls, line_no: int, line: str) -> Optional["Self"]:
        """
        Recursive worker
        """
        if cls.TAG is None:
            for sub_cls in cls.__subclasses__():
                result = sub_cls._as_directive(line_no, line)
                if result is not None:
                    return result
        else:
            stripped_line = line.lstrip(" ")
            if stripped_line == (cls.PREFIX + cls.TAG) or stripped_line.startswith(cls.PREFIX + cls.TAG + " "):
                return cls(
                    line_no,
                    cls.TAG,
                    stripped_line[len(cls.PREFIX + cls.TAG) :].strip(" "),
                )
        return None


class ExpandDirective(AceDirective):
    """
    Marks the class definition that follows as a tagged union whose conversions should be generated, e.g.:

    >>> # ACE-It
    >>> class Error(TaggedUnion):
    >>>     Io = Variant(OSError)
    """

    TAG = "It"


def _is_inline(comment: Any, source_lines: Sequence[str]) -> bool:
    """True if code precedes the comment on its line. `Comment.inline` counts tab indentation as code"""
    if not 0 < comment.lineno <= len(source_lines):
        return bool(comment.inline)
    return source_lines[comment.lineno - 1][: comment.col_offset].strip() != ""
