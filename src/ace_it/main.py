import inspect
import logging
from types import FrameType
from types import ModuleType
from typing import Any
from typing import Dict
from typing import Optional
from typing import Type
from typing import TypeVar

from ace_it.conversion_code import expand
from ace_it.runtime import TaggedUnion
from ace_it.source import SourceUnit

__all__ = ["ace_it"]

logger = logging.getLogger(__name__)

_UnionT = TypeVar("_UnionT", bound=Type[TaggedUnion])


def ace_it(cls: _UnionT) -> _UnionT:
    """
    Class decorator which generates conversions for a tagged union. Every variant with exactly one unnamed payload gets
    a conversion from its payload type, so that e.g.:

    >>> @ace_it
    >>> class Error(TaggedUnion):
    >>>     Io = Variant(OSError)
    >>>     ParseInt = Variant(ValueError)
    >>>
    >>> Error.convert(OSError("disk")) == Error.Io(OSError("disk"))

    The class source is read back and expanded the same way the build time pass does it (see `expand_source()`). The
    generated conversion code is then executed with the names visible where the class is defined.

    If two variants carry the same payload type, `DuplicatePayloadTypeError` is raised (located at the second one) and
    no conversion is registered at all.
    """
    if not (isinstance(cls, type) and issubclass(cls, TaggedUnion)):
        raise TypeError(f"@ace_it can only decorate TaggedUnion subclasses, not {cls!r}")

    unit = SourceUnit(cls)
    expansion = expand(unit.declaration_for(cls))
    expansion.raise_for_error()

    frame = inspect.currentframe()
    try:
        namespace = _conversion_namespace(cls, unit.module, frame.f_back if frame is not None else None)
    finally:
        del frame

    unit.add_conversions(expansion, namespace)
    logger.debug("Registered %d conversion(s) on %s", len(expansion.conversions), cls.__qualname__)
    return cls


def _conversion_namespace(cls: type, module: Optional[ModuleType], caller: Optional[FrameType]) -> Dict[str, Any]:
    """
    The names visible to the class definition: the globals and locals of the frame running the decorator, or the module
    globals if there is no frame to look at. The class itself is bound too, since the decorator runs before the class
    name is assigned.
    """
    if caller is not None:
        namespace = {**caller.f_globals, **caller.f_locals}
    elif module is not None:
        namespace = dict(vars(module))
    else:
        namespace = {}
    namespace[cls.__name__] = cls
    return namespace
