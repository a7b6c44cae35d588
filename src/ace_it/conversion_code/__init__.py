"""
Conversion code is what gets generated for a tagged union: for every variant carrying a single, unnamed payload, a
function that wraps a value of the payload type into that variant and registers itself on the union.

Three steps run, in this order, for one declaration:

1. The duplicate guard (`guard`) rejects the declaration if two such variants share the same payload type, since the
   union could not tell which of them a value of that type should become.

2. The scanner (`scanner`) picks the (variant name, payload type) pairs out of the declaration.

3. The writer (`writer`) turns each pair into a function definition AST, ready to be unparsed.

`conversion.expand()` strings them together and produces an `Expansion`.
"""
from .conversion import Expansion, expand, process_variants  # noreorder
from .guard import find_duplicate_variant_type
from .scanner import scan_variants, VariantPayload
from .writer import ConversionImpl

__all__ = [
    "ConversionImpl",
    "Expansion",
    "VariantPayload",
    "expand",
    "find_duplicate_variant_type",
    "process_variants",
    "scan_variants",
]
