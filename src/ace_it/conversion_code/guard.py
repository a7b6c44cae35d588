from typing import Iterable
from typing import Optional
from typing import Set

from ace_it.parse.declaration import TypeExpression
from ace_it.parse.declaration import Variant
from ace_it.span import SourceSpan

__all__ = ["find_duplicate_variant_type"]


def find_duplicate_variant_type(variants: Iterable[Variant]) -> Optional[SourceSpan]:
    """
    Find the first variant whose single unnamed payload type was already used by an earlier variant and return its
    location, or None if every such payload type is distinct.

    Comparison is on the token text of the type expressions. Variants without exactly one unnamed payload take no part.
    """
    seen: Set[TypeExpression] = set()
    for variant in variants:
        payload = variant.single_payload
        if payload is None:
            continue
        if payload in seen:
            return variant.span
        seen.add(payload)
    return None
