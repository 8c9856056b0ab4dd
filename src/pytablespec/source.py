"""Read annotated record definitions from source text.

Example input::

    @table(public, accessor = entity)
    pub struct Entity {
        @primary_key
        @auto_inc
        id: u128,
        created_at: Timestamp,
    }
"""

from __future__ import annotations

import ast
from typing import Any, NamedTuple

from lark import Lark, Token, Transformer, v_args
from lark.exceptions import UnexpectedCharacters, UnexpectedEOF, UnexpectedInput, VisitError

from pytablespec._errors import AnnotationError, AnnotationSyntaxError
from pytablespec._grammar import GRAMMAR
from pytablespec.meta import ListValue, Literal, Meta, Path, Span
from pytablespec.record import FieldDef, RecordDef, RecordShape, TypeRef, Visibility

_parser = Lark(
    GRAMMAR,
    parser="lalr",
    start=["record", "meta_args"],
    propagate_positions=True,
    maybe_placeholders=True,
)


class _Body(NamedTuple):
    shape: RecordShape
    name: str
    fields: tuple[FieldDef, ...] = ()
    variants: tuple[str, ...] = ()


def _span(meta: Any) -> Span | None:
    if getattr(meta, "empty", True):
        return None
    return Span(
        line=meta.line,
        column=meta.column,
        end_line=meta.end_line,
        end_column=meta.end_column,
        start_pos=meta.start_pos,
        end_pos=meta.end_pos,
    )


def _present(children: list[Any]) -> list[Any]:
    return [c for c in children if c is not None]


@v_args(meta=True)
class _RecordBuilder(Transformer):
    """Turns the lark parse tree into Meta nodes and a RecordDef."""

    def __init__(self, source: str) -> None:
        super().__init__()
        self._source = source

    def _text(self, meta: Any) -> str:
        if getattr(meta, "empty", True):
            return ""
        return self._source[meta.start_pos : meta.end_pos]

    # --- Values ---

    def path(self, meta, children):
        return Path(
            segments=tuple(str(tok) for tok in children),
            source=self._text(meta),
            span=_span(meta),
        )

    def literal(self, meta, children):
        (tok,) = children
        return Literal(value=ast.literal_eval(str(tok)), source=str(tok), span=_span(meta))

    def list(self, meta, children):
        return ListValue(items=tuple(_present(children)), source=self._text(meta), span=_span(meta))

    # --- Meta items ---

    def meta_flag(self, meta, children):
        (path,) = children
        return Meta(path=path, span=_span(meta), source=self._text(meta))

    def meta_value(self, meta, children):
        path, value = children
        return Meta(path=path, span=_span(meta), source=self._text(meta), value=value)

    def meta_group(self, meta, children):
        path, args = children
        return Meta(path=path, span=_span(meta), source=self._text(meta), nested=args)

    def meta_literal(self, meta, children):
        (value,) = children
        return Meta(path=None, span=_span(meta), source=self._text(meta), value=value)

    def meta_args(self, meta, children):
        return tuple(_present(children))

    def attribute(self, meta, children):
        (item,) = children
        return item

    # --- Types ---

    def _type(self, meta, children):
        return TypeRef(source=self._text(meta), span=_span(meta))

    type_path = type_tuple = type_array = type_ref = _type

    def generic_args(self, meta, children):
        return None

    # --- Fields and records ---

    def visibility(self, meta, children):
        return Visibility.PUBLIC if _present(children) else Visibility.INHERITED

    def field(self, meta, children):
        *attrs, vis, name, ty = children
        return FieldDef(name=str(name), ty=ty, vis=vis, attrs=tuple(attrs), span=_span(meta))

    def tuple_field(self, meta, children):
        *attrs, vis, ty = children
        return FieldDef(name=None, ty=ty, vis=vis, attrs=tuple(attrs), span=_span(meta))

    def field_list(self, meta, children):
        return tuple(_present(children))

    tuple_field_list = field_list

    def variant(self, meta, children):
        name = next(c for c in children if isinstance(c, Token))
        return str(name)

    def variant_list(self, meta, children):
        return tuple(_present(children))

    def variant_payload(self, meta, children):
        return None

    def named_struct(self, meta, children):
        name, fields = children
        return _Body(RecordShape.STRUCT, str(name), fields)

    def tuple_struct(self, meta, children):
        name, fields = children[:2]
        return _Body(RecordShape.TUPLE, str(name), fields)

    def unit_struct(self, meta, children):
        (name,) = children
        return _Body(RecordShape.UNIT, str(name))

    def enum_def(self, meta, children):
        name, variants = children
        return _Body(RecordShape.ENUM, str(name), variants=variants)

    def record(self, meta, children):
        *attrs, vis, body = children
        return RecordDef(
            name=body.name,
            shape=body.shape,
            fields=body.fields,
            attrs=tuple(attrs),
            vis=vis,
            variants=body.variants,
            span=_span(meta),
        )


def _syntax_error(source: str, exc: UnexpectedInput) -> AnnotationSyntaxError:
    line = getattr(exc, "line", None)
    column = getattr(exc, "column", None)
    span = None
    if isinstance(line, int) and isinstance(column, int) and line > 0 and column > 0:
        span = Span(line, column, line, column + 1)
    if isinstance(exc, UnexpectedEOF):
        message = "unexpected end of input"
    elif isinstance(exc, UnexpectedCharacters):
        message = f"unexpected character `{source[exc.pos_in_stream]}`"
    else:
        token = getattr(exc, "token", None)
        message = f"unexpected `{token}`" if token else "invalid annotation syntax"
    return AnnotationSyntaxError(message, str(exc), exc, span=span)


def _parse(source: str, start: str) -> Any:
    try:
        tree = _parser.parse(source, start=start)
    except UnexpectedInput as e:
        raise _syntax_error(source, e) from e
    try:
        return _RecordBuilder(source).transform(tree)
    except VisitError as e:
        if isinstance(e.orig_exc, AnnotationError):
            raise e.orig_exc from e
        raise AnnotationSyntaxError(
            "invalid annotation syntax", str(e.orig_exc), e.orig_exc
        ) from e


def parse_record(source: str) -> RecordDef:
    """Parse an annotated record definition.

    Raises:
        AnnotationSyntaxError: If the text does not match the grammar.
    """
    return _parse(source, "record")


def parse_meta_list(source: str) -> tuple[Meta, ...]:
    """Parse a bare annotation argument list such as ``public, accessor = entity``."""
    return _parse(source, "meta_args")
