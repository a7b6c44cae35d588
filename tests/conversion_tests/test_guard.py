from textwrap import dedent

from ace_it.conversion_code import find_duplicate_variant_type
from ace_it.parse import parse_declaration


def variants_of(source: str):
    return parse_declaration(dedent(source)).variants


def test_distinct_payload_types() -> None:
    variants = variants_of(
        """\
        class Test(TaggedUnion):
            A = Variant(int)
            B = Variant(str)
            C = Variant(List[int])
            D = Variant(List[str])
        """
    )
    assert find_duplicate_variant_type(variants) is None


def test_duplicate_is_located_at_the_second_variant() -> None:
    variants = variants_of(
        """\
        class Test(TaggedUnion):
            A = Variant()
            B = Variant(int)
            C = Variant(int)
            D = Variant(int)
        """
    )
    span = find_duplicate_variant_type(variants)
    assert span is not None
    assert (span.lineno, span.col_offset) == (4, 4)
    assert span.text == "    C = Variant(int)"


def test_only_single_unnamed_payloads_take_part() -> None:
    """Named fields, several unnamed payloads and unit variants never collide with a single payload of the same type"""
    variants = variants_of(
        """\
        class Test(TaggedUnion):
            A = Variant()
            B = Variant()
            C = Variant(a=int)
            D = Variant(a=int)
            E = Variant(int, int)
            F = Variant(int, int)
            G = Variant(int)
        """
    )
    assert find_duplicate_variant_type(variants) is None


def test_comparison_is_on_tokens() -> None:
    same_tokens = variants_of(
        """\
        class Test(TaggedUnion):
            A = Variant(Dict[str,int])
            B = Variant((Dict[str, int]))
        """
    )
    assert find_duplicate_variant_type(same_tokens) is not None

    different_spelling = variants_of(
        """\
        class Test(TaggedUnion):
            A = Variant(Number)
            B = Variant(int)
        """
    )
    assert find_duplicate_variant_type(different_spelling) is None
