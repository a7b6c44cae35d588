"""
The runtime side of a tagged union. A union is a `TaggedUnion` subclass whose arms are declared with `Variant`:

>>> class Test(TaggedUnion):
>>>     A = Variant()
>>>     B = Variant(int)
>>>     C = Variant(a=int, b=int)
>>>
>>> Test.A, Test.B(5), Test.C(a=1, b=2)

Conversions (from a payload type into the union) are registered with `Test.conversion(<type>)`, which is what the
generated code does, and applied with `Test.convert(value)`.
"""
import types
import typing
from types import MappingProxyType
from typing import Any
from typing import Callable
from typing import ClassVar
from typing import Dict
from typing import List
from typing import Mapping
from typing import MutableMapping
from typing import Optional
from typing import Tuple
from typing import Type
from typing import TypeVar

from typing_extensions import Self

from ace_it.parse.declaration import PayloadShape

__all__ = ["TaggedUnion", "Variant", "VariantConstructor"]

_F = TypeVar("_F", bound=Callable[..., Any])

# `X | Y` has its own origin from Python 3.10
_UNION_ORIGINS = tuple(o for o in (typing.Union, getattr(types, "UnionType", None)) if o is not None)


class Variant:
    """
    Declares one arm of a `TaggedUnion`, in the class body. The payload shape comes from the arguments: none for a unit
    variant, payload types for unnamed payloads, keyword arguments for named fields. Payload types are only recorded,
    values are never checked against them.
    """

    name: str
    types: Tuple[Any, ...]
    fields: Mapping[str, Any]

    def __init__(self, *types: Any, **fields: Any) -> None:
        if types and fields:
            raise TypeError("Variant() takes either unnamed payload types or named fields, not both")
        self.name = "<unbound>"
        self.types = types
        self.fields = MappingProxyType(dict(fields))

    @property
    def shape(self) -> PayloadShape:
        if self.fields:
            return PayloadShape.NAMED
        elif self.types:
            return PayloadShape.UNNAMED
        return PayloadShape.UNIT

    def __set_name__(self, owner: type, name: str) -> None:
        self.name = name

    def __get__(self, instance: Optional[Any], owner: Type["TaggedUnion"]) -> Any:
        if self.shape is PayloadShape.UNIT:
            return owner._build(self, (), {})
        return VariantConstructor(owner, self)

    def __repr__(self) -> str:
        args = [_type_name(t) for t in self.types] + [f"{k}={_type_name(t)}" for k, t in self.fields.items()]
        return f"{self.name} = Variant({', '.join(args)})"


class VariantConstructor:
    """Builds union values of one payload-carrying variant, e.g. `Test.B(5)`"""

    def __init__(self, owner: Type["TaggedUnion"], variant: Variant) -> None:
        self.owner = owner
        self.variant = variant

    @property
    def qualname(self) -> str:
        return f"{self.owner.__name__}.{self.variant.name}"

    def __call__(self, *args: Any, **kwargs: Any) -> Any:
        variant = self.variant
        if variant.shape is PayloadShape.UNNAMED:
            if kwargs or len(args) != len(variant.types):
                raise TypeError(
                    f"{self.qualname}() takes {len(variant.types)} unnamed payload value(s), "
                    f"got {len(args)} positional and {len(kwargs)} keyword argument(s)"
                )
            return self.owner._build(variant, args, {})

        if args:
            raise TypeError(f"{self.qualname}() takes named fields only ({', '.join(variant.fields)})")
        missing = [name for name in variant.fields if name not in kwargs]
        unexpected = [name for name in kwargs if name not in variant.fields]
        if missing or unexpected:
            raise TypeError(f"{self.qualname}() missing fields {missing}, unexpected fields {unexpected}")
        fields = {name: kwargs[name] for name in variant.fields}
        return self.owner._build(variant, tuple(fields.values()), fields)

    def __repr__(self) -> str:
        return f"<variant constructor {self.qualname}>"


class TaggedUnion:
    """
    Base class for tagged unions. A value holds exactly one variant: its name (`variant`), its payload values in
    declaration order (`payload`) and, for a named-field variant, the fields by name (`fields`, also readable as
    attributes). Values are immutable and compare equal when variant and payload are equal.
    """

    __variants__: ClassVar[Mapping[str, Variant]] = MappingProxyType({})
    __conversions__: ClassVar[MutableMapping[Any, Callable[[Any], Any]]] = {}

    variant: str
    payload: Tuple[Any, ...]
    fields: Mapping[str, Any]

    def __init_subclass__(cls, **kwargs: Any) -> None:
        super().__init_subclass__(**kwargs)
        variants: Dict[str, Variant] = {}
        for klass in reversed(cls.__mro__):
            for name, attr in vars(klass).items():
                if isinstance(attr, Variant):
                    variants[name] = attr
                else:
                    # Redefined as something else further down the hierarchy
                    variants.pop(name, None)
        cls.__variants__ = MappingProxyType(variants)
        cls.__conversions__ = {}

    def __init__(self, *args: Any, **kwargs: Any) -> None:
        raise TypeError(f"{type(self).__name__} values are built from a variant, e.g. {type(self).__name__}.<Variant>")

    @classmethod
    def _build(cls, variant: Variant, payload: Tuple[Any, ...], fields: Mapping[str, Any]) -> Self:
        self = cls.__new__(cls)
        object.__setattr__(self, "variant", variant.name)
        object.__setattr__(self, "payload", payload)
        object.__setattr__(self, "fields", MappingProxyType(dict(fields)))
        return self

    def __setattr__(self, name: str, value: Any) -> None:
        raise AttributeError(f"{type(self).__name__} values are immutable")

    def __getattr__(self, name: str) -> Any:
        try:
            return self.__dict__["fields"][name]
        except KeyError:
            raise AttributeError(f"{type(self).__name__!r} value has no attribute {name!r}") from None

    @property
    def value(self) -> Any:
        """The payload of a variant carrying exactly one unnamed payload"""
        if self.fields or len(self.payload) != 1:
            raise AttributeError(f"{self!r} does not carry a single unnamed payload")
        return self.payload[0]

    def __eq__(self, other: object) -> bool:
        if type(other) is not type(self):
            return NotImplemented
        assert isinstance(other, TaggedUnion)
        return (self.variant, self.payload) == (other.variant, other.payload)

    def __hash__(self) -> int:
        return hash((type(self), self.variant, self.payload))

    def __repr__(self) -> str:
        name = f"{type(self).__name__}.{self.variant}"
        if self.fields:
            return f"{name}({', '.join(f'{k}={v!r}' for k, v in self.fields.items())})"
        elif type(self).__variants__[self.variant].shape is PayloadShape.UNNAMED:
            return f"{name}({', '.join(repr(v) for v in self.payload)})"
        return name

    @classmethod
    def conversion(cls, source_type: Any) -> Callable[[_F], _F]:
        """
        Register the decorated function as the conversion of `source_type` values into this union. The same type
        object can only be registered once (e.g. an alias of an already registered type is a conflict).
        """

        def register(func: _F) -> _F:
            if source_type in cls.__conversions__:
                raise TypeError(f"Conflicting conversions from {_type_name(source_type)} into {cls.__name__}")
            cls.__conversions__[source_type] = func
            return func

        return register

    @classmethod
    def converts_from(cls, source_type: Any) -> bool:
        if source_type in cls.__conversions__:
            return True
        return isinstance(source_type, type) and cls._find_conversion(source_type) is not None

    @classmethod
    def convert(cls, value: Any) -> Self:
        """
        Convert a value into this union with its registered conversion. Union values are returned as they are.

        The conversion is looked up by the value's class, walking its MRO. Conversions registered for a parametrized
        generic (e.g. `List[int]`) apply to instances of its origin class (`list`), and those registered for a union of
        types (e.g. `Optional[int]`) to instances of any of its members, as long as only one conversion applies.
        """
        if isinstance(value, cls):
            return value
        func = cls._find_conversion(type(value))
        if func is None:
            raise TypeError(f"No conversion from {type(value).__name__} into {cls.__name__}")
        result = func(value)
        assert isinstance(result, cls)
        return result

    @classmethod
    def _find_conversion(cls, value_type: type) -> Optional[Callable[[Any], Any]]:
        for klass in value_type.__mro__:
            func = cls.__conversions__.get(klass)
            if func is not None:
                return func

        candidates: List[Tuple[Any, Callable[[Any], Any]]] = []
        for key, func in cls.__conversions__.items():
            if any(issubclass(value_type, klass) for klass in _key_classes(key)):
                candidates.append((key, func))
        if len(candidates) > 1:
            raise TypeError(
                f"Ambiguous conversion from {value_type.__name__} into {cls.__name__}: could be any of "
                f"{', '.join(_type_name(key) for key, _ in candidates)}"
            )
        return candidates[0][1] if candidates else None


def _key_classes(key: Any) -> Tuple[type, ...]:
    """
    The classes whose instances a non-class conversion key applies to: the origin class of a parametrized generic
    (`List[int]` -> `list`), every member of a union (`Optional[int]` -> `int`, `NoneType`), nothing for anything else
    """
    origin = typing.get_origin(key)
    if origin in _UNION_ORIGINS:
        members = [_key_classes(arg) if typing.get_origin(arg) else (arg,) for arg in typing.get_args(key)]
        return tuple(klass for classes in members for klass in classes if isinstance(klass, type))
    return (origin,) if isinstance(origin, type) else ()


def _type_name(t: Any) -> str:
    return t.__qualname__ if isinstance(t, type) else repr(t)
