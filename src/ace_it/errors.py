import ast

from ace_it.span import SourceSpan

__all__ = ["DUPLICATE_VARIANT_TYPE_MESSAGE", "DeclarationError", "DuplicatePayloadTypeError"]

DUPLICATE_VARIANT_TYPE_MESSAGE = "Duplicate variant type, can't auto-generate From impls"


class DeclarationError(SyntaxError):
    """A tagged union declaration (or a directive marking one) is malformed and can not be expanded"""

    span: SourceSpan

    def __init__(self, message: str, span: SourceSpan) -> None:
        super().__init__(message, span.syntax_error_details())
        self.span = span
        self.end_lineno = span.end_lineno
        self.end_offset = None if span.end_col_offset is None else span.end_col_offset + 1


class DuplicatePayloadTypeError(SyntaxError):
    """
    Two variants carry the same single, unnamed payload type. Converting that type into the union would be ambiguous,
    so no conversions are generated at all. The error is located at the second of the two variants.
    """

    span: SourceSpan

    def __init__(self, span: SourceSpan) -> None:
        super().__init__(DUPLICATE_VARIANT_TYPE_MESSAGE, span.syntax_error_details())
        self.span = span
        self.end_lineno = span.end_lineno
        self.end_offset = None if span.end_col_offset is None else span.end_col_offset + 1

    def to_compile_error(self) -> ast.Module:
        """
        Render this error as code which raises it, e.g.:

        >>> raise SyntaxError("Duplicate variant type, can't auto-generate From impls", ("m.py", 4, 5, "    C = ..."))

        Generated output that embeds this in place of the expanded declaration fails, with the same location, as soon as
        it is imported.
        """
        details = ast.Tuple(elts=[ast.Constant(value=v) for v in self.span.syntax_error_details()], ctx=ast.Load())
        raise_stmt = ast.Raise(
            exc=ast.Call(
                func=ast.Name(id="SyntaxError", ctx=ast.Load()),
                args=[ast.Constant(value=DUPLICATE_VARIANT_TYPE_MESSAGE), details],
                keywords=[],
            ),
            cause=None,
        )
        return ast.fix_missing_locations(ast.Module(body=[raise_stmt], type_ignores=[]))
