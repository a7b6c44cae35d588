from typing import Iterable
from typing import Iterator
from typing import NamedTuple

from ace_it.parse.declaration import TypeExpression
from ace_it.parse.declaration import Variant

__all__ = ["VariantPayload", "scan_variants"]


class VariantPayload(NamedTuple):
    variant_name: str
    payload: TypeExpression


def scan_variants(variants: Iterable[Variant]) -> Iterator[VariantPayload]:
    """
    Yield (variant name, payload type) for every variant carrying exactly one unnamed payload, in declaration order.
    Unit variants, named-field variants and variants with several unnamed payloads get no conversion and are skipped.
    """
    for variant in variants:
        payload = variant.single_payload
        if payload is not None:
            yield VariantPayload(variant.name, payload)
