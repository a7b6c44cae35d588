"""
In this module, we go from a tagged union declaration to its expansion: the declaration followed by one conversion per
variant that carries a single unnamed payload.  The duplicate guard runs first and, if it finds two variants with the
same payload type, the whole expansion is rejected and nothing is generated.
"""
import logging
from dataclasses import dataclass
from dataclasses import field
from typing import Iterable
from typing import List
from typing import Optional
from typing import Tuple

from ace_it.conversion_code.guard import find_duplicate_variant_type
from ace_it.conversion_code.scanner import scan_variants
from ace_it.conversion_code.writer import ConversionImpl
from ace_it.errors import DuplicatePayloadTypeError
from ace_it.parse.ast_util import unparse
from ace_it.parse.declaration import EnumDeclaration
from ace_it.parse.declaration import Variant

__all__ = ["Expansion", "expand", "process_variants"]

logger = logging.getLogger(__name__)


def process_variants(variants: Iterable[Variant], enum_name: str) -> List[ConversionImpl]:
    """Generate a conversion for every variant having exactly one unnamed payload, in declaration order"""
    return [ConversionImpl(enum_name, p.variant_name, p.payload) for p in scan_variants(variants)]


@dataclass(frozen=True)
class Expansion:
    """
    The outcome of expanding one declaration. Either accepted, with `conversions` holding every generated conversion,
    or rejected, with `error` set and no conversions at all.
    """

    declaration: EnumDeclaration
    conversions: Tuple[ConversionImpl, ...] = ()
    error: Optional[DuplicatePayloadTypeError] = field(default=None, compare=False)

    @property
    def accepted(self) -> bool:
        return self.error is None

    def raise_for_error(self) -> None:
        if self.error is not None:
            raise self.error

    def conversions_source(self, indent: str = "") -> str:
        return "\n\n\n".join(c.to_source(indent) for c in self.conversions)

    def to_source(self) -> str:
        """
        The generated code. When accepted, this is the declaration text exactly as written followed by the
        conversions. When rejected, this is only code raising the error.
        """
        if self.error is not None:
            return unparse(self.error.to_compile_error())

        source_text = self.declaration.source_text
        if not self.conversions:
            return source_text
        if not source_text.endswith("\n"):
            source_text += "\n"
        return f"{source_text}\n\n{self.conversions_source()}\n"


def expand(declaration: EnumDeclaration) -> Expansion:
    """
    Expand a tagged union declaration. This never raises for a duplicate payload type: the rejected `Expansion` carries
    the error, located at the offending variant.
    """
    duplicate = find_duplicate_variant_type(declaration.variants)
    if duplicate is not None:
        logger.debug("Rejecting %s: duplicate payload type at %s", declaration.name, duplicate)
        return Expansion(declaration, error=DuplicatePayloadTypeError(duplicate))

    conversions = process_variants(declaration.variants, declaration.name)
    logger.debug("Expanded %s with %d conversion(s)", declaration.name, len(conversions))
    return Expansion(declaration, tuple(conversions))
