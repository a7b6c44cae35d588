from typing import Any
from typing import Iterable
from typing import Iterator
from typing import Optional
from typing import Type
from typing import TypeVar

__all__ = ["iter_of_type", "leading_whitespace", "not_optional"]

_T = TypeVar("_T")


def not_optional(val: Optional[_T]) -> _T:
    """Raise TypeError if the given value is None"""
    if val is None:
        raise TypeError("Value cannot be None")
    return val


def iter_of_type(it: Iterable[Any], t: Type[_T]) -> Iterator[_T]:
    """Typecast with type assertion.  TypeError will be raised if any item is not of the given type"""
    for i in it:
        if not isinstance(i, t):
            raise TypeError(f"Expected {t.__name__}, got {type(i).__name__}")
        yield i


def leading_whitespace(line: str) -> str:
    """The indentation of the given line, tabs and spaces as they are"""
    return line[: len(line) - len(line.lstrip())]
