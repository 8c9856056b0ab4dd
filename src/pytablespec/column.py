"""Column classification: one ColumnSpec per record field, plus constraint markers."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any

from loguru import logger

from pytablespec._constants import MAX_COLUMNS
from pytablespec._diagnostics import OptionSlot
from pytablespec._errors import (
    ERR_MSG_ONE_PRIMARY_KEY,
    ERR_MSG_TABLE_NOT_STRUCT,
    ConflictingCardinalityError,
    StructuralShapeError,
)
from pytablespec._utils import is_identifier
from pytablespec.index import parse_index_attr
from pytablespec.meta import Meta, Span
from pytablespec.record import FieldDef, RecordDef, RecordShape, Visibility
from pytablespec.table import TableSpec


@dataclass(frozen=True)
class Expression:
    """A default-value expression, kept as source text for the code generator."""

    source: str
    node: Meta | None = field(default=None, compare=False, repr=False)
    span: Span | None = field(default=None, compare=False, repr=False)


@dataclass(frozen=True)
class ColumnSpec:
    position: int
    identifier: str
    visibility: Visibility
    ty: Any
    default_value: Expression | None = None


@dataclass(frozen=True)
class ColumnArgs:
    """Columns of a table and the constraint groups they fall into."""

    struct_name: str
    all_fields: tuple[FieldDef, ...]
    columns: list[ColumnSpec]
    unique_columns: list[ColumnSpec]
    sequenced_columns: list[ColumnSpec]
    primary_key_column: ColumnSpec | None = None


def _format_limit(limit: int) -> str:
    exponent = limit.bit_length() - 1
    if limit > 0 and limit == 1 << exponent and exponent >= 8:
        return f"2^{exponent}"
    return str(limit)


def _parse_default(attr: Meta) -> Expression:
    args = attr.nested_items()
    if len(args) != 1:
        raise attr.error("expected exactly one default value, e.g. `@default(0)`")
    arg = args[0]
    return Expression(source=arg.source or arg.name, node=arg, span=arg.span)


def classify_columns(
    table: TableSpec,
    record: RecordDef,
    *,
    max_columns: int = MAX_COLUMNS,
) -> ColumnArgs:
    """Build the column list of ``record`` and collect constraint markers.

    Inline ``@index(...)`` field tags are appended to ``table.indices``.
    Field annotations with other names belong to other tools and are skipped.

    Raises:
        StructuralShapeError: If the record is not a struct with named fields.
        ConflictingCardinalityError: On too many fields or a second primary key.
        DuplicateOptionError: If a field repeats a marker.
    """
    if record.shape is not RecordShape.STRUCT:
        raise StructuralShapeError(
            ERR_MSG_TABLE_NOT_STRUCT,
            f"`{record.name}` is a {record.shape} record",
            span=record.span,
        )

    if len(record.fields) > max_columns:
        raise ConflictingCardinalityError(
            f"too many columns; the most a table can have is {_format_limit(max_columns)}",
            f"`{record.name}` declares {len(record.fields)} fields",
            span=record.span,
        )

    columns: list[ColumnSpec] = []
    unique_columns: list[ColumnSpec] = []
    sequenced_columns: list[ColumnSpec] = []
    primary_key_column: OptionSlot[ColumnSpec] = OptionSlot("primary key")

    for position, field_def in enumerate(record.fields):
        name = field_def.name
        if name is None or not is_identifier(name):
            raise StructuralShapeError(
                ERR_MSG_TABLE_NOT_STRUCT,
                f"field {position} of `{record.name}` has no usable name",
                span=field_def.span,
            )

        unique: OptionSlot[Span] = OptionSlot("unique")
        auto_inc: OptionSlot[Span] = OptionSlot("auto_inc")
        primary_key: OptionSlot[Span] = OptionSlot("primary_key")
        default_value: OptionSlot[Expression] = OptionSlot("default")

        for attr in field_def.attrs:
            key = attr.key
            if key == "index":
                table.indices.append(parse_index_attr(name, attr))
            elif key in ("unique", "auto_inc", "primary_key"):
                slot = {"unique": unique, "auto_inc": auto_inc, "primary_key": primary_key}[key]
                slot.check(attr)
                attr.require_flag()
                slot.set(attr.span, attr)
            elif key == "default":
                default_value.check(attr)
                default_value.set(_parse_default(attr), attr)

        column = ColumnSpec(
            position=position,
            identifier=name,
            visibility=field_def.vis,
            ty=field_def.ty,
            default_value=default_value.value,
        )

        if unique.is_set or primary_key.is_set:
            unique_columns.append(column)
        if auto_inc.is_set:
            sequenced_columns.append(column)
        if primary_key.is_set:
            primary_key_column.set(
                column,
                primary_key.span,
                ERR_MSG_ONE_PRIMARY_KEY,
                ConflictingCardinalityError,
            )

        columns.append(column)

    logger.debug(
        "classified {} columns of {} ({} unique, {} sequenced)",
        len(columns),
        record.name,
        len(unique_columns),
        len(sequenced_columns),
    )
    return ColumnArgs(
        struct_name=record.name,
        all_fields=record.fields,
        columns=columns,
        unique_columns=unique_columns,
        sequenced_columns=sequenced_columns,
        primary_key_column=primary_key_column.value,
    )
