"""
Verify the conversion function written for one (union, variant, payload type) triple.
"""
import ast
from textwrap import dedent

import pytest

from ace_it.conversion_code import ConversionImpl
from ace_it.conversion_code.writer import ConversionWriter
from ace_it.parse import parse_declaration
from ace_it.parse import unparse


def conversion_for(payload_source: str, enum_name: str = "Test", variant_name: str = "B") -> ConversionImpl:
    declaration = parse_declaration(f"class {enum_name}(TaggedUnion):\n    {variant_name} = Variant({payload_source})\n")
    payload = declaration.variants[0].single_payload
    assert payload is not None
    return ConversionImpl(enum_name, variant_name, payload)


def test_write_conversion() -> None:
    function_def = ConversionWriter(conversion_for("int")).write()

    assert isinstance(function_def, ast.FunctionDef)
    assert unparse(function_def) == dedent(
        '''\
        @Test.conversion(int)
        def _ace_it_Test_from_B(value: int) -> Test:
            """Wrap a value of int into Test.B"""
            return Test.B(value)'''
    )


@pytest.mark.parametrize(
    ("payload_source", "expect_payload"),
    [
        ("typing.Dict[str,int]", "typing.Dict[str, int]"),
        ("Optional['Forward']", "Optional['Forward']"),
        ("pkg.errors.ParseError", "pkg.errors.ParseError"),
    ],
)
def test_payload_is_written_as_declared(payload_source: str, expect_payload: str) -> None:
    source = conversion_for(payload_source, "Error", "Parse").to_source()
    assert source.splitlines()[:2] == [
        f"@Error.conversion({expect_payload})",
        f"def _ace_it_Error_from_Parse(value: {expect_payload}) -> Error:",
    ]


def test_payload_is_not_shared_with_the_declaration() -> None:
    """The written function holds copies of the payload expression, positioned within the function"""
    conversion = conversion_for("List[int]")
    function_def = conversion.to_ast()

    annotation = function_def.args.args[0].annotation
    assert annotation is not None and annotation is not conversion.payload.node
    assert annotation.lineno == 2
    decorator = function_def.decorator_list[0]
    assert isinstance(decorator, ast.Call) and decorator.args[0] is not annotation
    compile(ast.Module(body=[function_def], type_ignores=[]), "<test>", "exec")


def test_to_source_indent() -> None:
    source = conversion_for("int").to_source(indent="    ")
    assert source.splitlines() == [
        "    @Test.conversion(int)",
        "    def _ace_it_Test_from_B(value: int) -> Test:",
        '        """Wrap a value of int into Test.B"""',
        "        return Test.B(value)",
    ]


def test_function_name() -> None:
    assert conversion_for("str", "Message", "Text").function_name == "_ace_it_Message_from_Text"
