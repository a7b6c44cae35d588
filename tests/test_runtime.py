from typing import List
from typing import Optional
from typing import Union

import pytest

from ace_it import TaggedUnion
from ace_it import Variant
from ace_it.parse import PayloadShape


class Shape(TaggedUnion):
    Empty = Variant()
    Circle = Variant(float)
    Rect = Variant(w=float, h=float)
    Point = Variant(int, int)


def test_variants_registry() -> None:
    assert list(Shape.__variants__) == ["Empty", "Circle", "Rect", "Point"]
    assert [v.shape for v in Shape.__variants__.values()] == [
        PayloadShape.UNIT,
        PayloadShape.UNNAMED,
        PayloadShape.NAMED,
        PayloadShape.UNNAMED,
    ]
    assert repr(Shape.__variants__["Rect"]) == "Rect = Variant(w=float, h=float)"
    assert TaggedUnion.__variants__ == {}


def test_unit_variant() -> None:
    assert Shape.Empty == Shape.Empty
    assert Shape.Empty.variant == "Empty"
    assert Shape.Empty.payload == ()
    assert repr(Shape.Empty) == "Shape.Empty"


def test_unnamed_payload() -> None:
    circle = Shape.Circle(1.5)
    assert circle.variant == "Circle"
    assert circle.value == 1.5
    assert circle.payload == (1.5,)
    assert repr(circle) == "Shape.Circle(1.5)"

    point = Shape.Point(1, 2)
    assert point.payload == (1, 2)
    assert repr(point) == "Shape.Point(1, 2)"
    with pytest.raises(AttributeError):
        _ = point.value


def test_named_fields() -> None:
    rect = Shape.Rect(h=2.0, w=1.0)
    assert (rect.w, rect.h) == (1.0, 2.0)
    assert rect.payload == (1.0, 2.0), "payload follows declaration order"
    assert dict(rect.fields) == {"w": 1.0, "h": 2.0}
    assert repr(rect) == "Shape.Rect(w=1.0, h=2.0)"
    assert rect == Shape.Rect(w=1.0, h=2.0)
    with pytest.raises(AttributeError):
        _ = rect.depth


@pytest.mark.parametrize(
    "build",
    [
        lambda: Shape.Circle(),
        lambda: Shape.Circle(1.0, 2.0),
        lambda: Shape.Circle(radius=1.0),
        lambda: Shape.Rect(1.0, 2.0),
        lambda: Shape.Rect(w=1.0),
        lambda: Shape.Rect(w=1.0, h=2.0, d=3.0),
        lambda: Shape(),
    ],
    ids=["too few", "too many", "keyword for unnamed", "positional for named", "missing", "unexpected", "direct"],
)
def test_bad_construction(build) -> None:
    with pytest.raises(TypeError):
        build()


def test_values_are_immutable() -> None:
    circle = Shape.Circle(1.0)
    with pytest.raises(AttributeError, match="immutable"):
        circle.variant = "Empty"  # type: ignore


def test_equality_and_hash() -> None:
    assert Shape.Circle(1.0) == Shape.Circle(1.0)
    assert Shape.Circle(1.0) != Shape.Circle(2.0)
    assert Shape.Point(1, 2) != Shape.Point(2, 1)
    assert Shape.Empty != "Empty"
    assert len({Shape.Circle(1.0), Shape.Circle(1.0), Shape.Empty}) == 2

    class Other(TaggedUnion):
        Circle = Variant(float)

    assert Other.Circle(1.0) != Shape.Circle(1.0)


def test_variant_rejects_mixed_payload() -> None:
    with pytest.raises(TypeError, match="not both"):
        Variant(int, b=str)


def test_registered_conversions() -> None:
    class Number(TaggedUnion):
        Int = Variant(int)
        Text = Variant(str)

    @Number.conversion(int)
    def from_int(value: int) -> Number:
        return Number.Int(value)

    assert Number.__conversions__ == {int: from_int}
    assert Shape.__conversions__ == {}, "every union keeps its own conversions"
    assert Number.convert(3) == Number.Int(3)
    assert Number.convert(True) == Number.Int(True), "subclasses convert through their base"
    assert Number.convert(Number.Text("x")) == Number.Text("x")
    assert Number.converts_from(int)
    assert Number.converts_from(bool)
    assert not Number.converts_from(str)
    with pytest.raises(TypeError, match="No conversion from str into Number"):
        Number.convert("x")


def test_conflicting_registration() -> None:
    class Number(TaggedUnion):
        Int = Variant(int)

    Number.conversion(int)(Number.Int)
    with pytest.raises(TypeError, match="Conflicting conversions from int into Number"):
        Number.conversion(int)(Number.Int)


def test_generic_payloads() -> None:
    class Data(TaggedUnion):
        Items = Variant(List[int])
        Names = Variant(List[str])

    Data.conversion(List[int])(Data.Items)
    assert Data.converts_from(List[int])
    assert Data.convert([1, 2]) == Data.Items([1, 2])

    Data.conversion(List[str])(Data.Names)
    with pytest.raises(TypeError, match="Ambiguous conversion from list into Data"):
        Data.convert(["a"])


def test_subclassed_union() -> None:
    class Base(TaggedUnion):
        A = Variant(int)
        B = Variant()

    class Sub(Base):
        C = Variant(name=str)

    assert list(Sub.__variants__) == ["A", "B", "C"]
    assert list(Base.__variants__) == ["A", "B"]
    assert repr(Sub.A(5)) == "Sub.A(5)"
    assert repr(Sub.B) == "Sub.B"
    assert repr(Sub.C(name="x")) == "Sub.C(name='x')"
    assert isinstance(Sub.A(5), Sub)
    assert Sub.A(5) != Base.A(5)


def test_union_payloads() -> None:
    class Maybe(TaggedUnion):
        Number = Variant(Optional[int])
        Text = Variant(str)

    Maybe.conversion(Optional[int])(Maybe.Number)
    assert Maybe.convert(5) == Maybe.Number(5)
    assert Maybe.convert(None) == Maybe.Number(None)
    assert Maybe.converts_from(int)
    assert not Maybe.converts_from(str)

    Maybe.conversion(Union[str, bytes])(Maybe.Text)
    assert Maybe.convert(b"x") == Maybe.Text(b"x")

    Maybe.conversion(Union[int, float])(Maybe.Number)
    with pytest.raises(TypeError, match="Ambiguous conversion from int into Maybe"):
        Maybe.convert(1)
