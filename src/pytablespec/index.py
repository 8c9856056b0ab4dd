"""Index declarations: table-level ``index(...)`` groups and inline ``@index(...)`` tags."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import ClassVar, Union

from pytablespec._diagnostics import OptionSlot
from pytablespec._errors import (
    ERR_MSG_INDEX_ALGORITHM_TWICE,
    ERR_MSG_INDEX_TYPE_TWICE,
    ERR_MSG_MISSING_INDEX_ACCESSOR,
    ERR_MSG_MISSING_INDEX_ALGORITHM,
    ERR_MSG_MISSING_INDEX_KIND,
    ConflictingCardinalityError,
)
from pytablespec.meta import ListValue, Meta, MetaShape, Span, read_nested


@dataclass(frozen=True)
class BTree:
    """Ordered index over one or more columns."""

    algorithm: ClassVar[str] = "btree"

    columns: tuple[str, ...]


@dataclass(frozen=True)
class Hash:
    """Hash index over one or more columns."""

    algorithm: ClassVar[str] = "hash"

    columns: tuple[str, ...]


@dataclass(frozen=True)
class Direct:
    """Direct-mapped index over a single column."""

    algorithm: ClassVar[str] = "direct"

    column: str

    @property
    def columns(self) -> tuple[str, ...]:
        return (self.column,)


IndexKind = Union[BTree, Hash, Direct]


@dataclass
class IndexSpec:
    """An index on the table.

    ``is_unique`` starts out False; the unique-index inference pass sets it
    once the column constraints are known. ``synthetic`` marks indices that
    inference created for a unique column nobody indexed explicitly.
    """

    accessor: str
    kind: IndexKind
    is_unique: bool = False
    synthetic: bool = False
    span: Span | None = field(default=None, compare=False, repr=False)

    @property
    def algorithm(self) -> str:
        return self.kind.algorithm

    @property
    def columns(self) -> tuple[str, ...]:
        return self.kind.columns


def parse_index_meta(meta: Meta) -> IndexSpec:
    """Parse ``index(accessor = X, btree(columns = [...]) | hash(...) | direct(...))``."""
    accessor: OptionSlot[str] = OptionSlot("accessor")
    algo: OptionSlot[IndexKind] = OptionSlot("algorithm")

    def on_accessor(m: Meta) -> None:
        accessor.set(m.ident_value(), m)

    def on_algorithm(parse):
        def handler(m: Meta) -> None:
            algo.check(m, ERR_MSG_INDEX_ALGORITHM_TWICE, ConflictingCardinalityError)
            algo.set(parse(m), m)

        return handler

    read_nested(
        meta.nested_items(),
        {
            "name": lambda m: None,
            "accessor": on_accessor,
            "btree": on_algorithm(_parse_btree),
            "hash": on_algorithm(_parse_hash),
            "direct": on_algorithm(_parse_direct),
        },
        context="index",
    )

    return IndexSpec(
        accessor=accessor.require(ERR_MSG_MISSING_INDEX_ACCESSOR, meta),
        kind=algo.require(ERR_MSG_MISSING_INDEX_ALGORITHM, meta),
        span=meta.span,
    )


def _parse_columns(meta: Meta, algorithm: str) -> tuple[str, ...]:
    columns: OptionSlot[tuple[str, ...]] = OptionSlot("columns")

    def on_columns(m: Meta) -> None:
        columns.check(m)
        value = m.ident_list_value()
        if not value:
            raise m.error(f"{algorithm} index needs at least one column")
        columns.set(value, m)

    read_nested(meta.nested_items(), {"columns": on_columns}, context=f"{algorithm} index")
    return columns.require(
        f"must specify columns for {algorithm} index, "
        f"e.g. `{algorithm}(columns = [col1, col2])`",
        meta,
    )


def _parse_btree(meta: Meta) -> BTree:
    return BTree(columns=_parse_columns(meta, "btree"))


def _parse_hash(meta: Meta) -> Hash:
    return Hash(columns=_parse_columns(meta, "hash"))


def _parse_direct(meta: Meta) -> Direct:
    column: OptionSlot[str] = OptionSlot("column")

    def on_column(m: Meta) -> None:
        # Accepts both `column = c` and `column = [c]`.
        if isinstance(m.value, ListValue):
            idents = m.ident_list_value()
            if len(idents) != 1:
                raise m.error("direct index takes exactly one column, e.g. `direct(column = col1)`")
            column.set(idents[0], m)
        else:
            column.set(m.ident_value(), m)

    read_nested(meta.nested_items(), {"column": on_column}, context="direct index")
    return Direct(
        column=column.require(
            "must specify the column for direct index, e.g. `direct(column = col1)`", meta
        )
    )


def parse_index_attr(field_name: str, attr: Meta) -> IndexSpec:
    """Parse an inline ``@index(btree)``, ``@index(hash)`` or ``@index(direct)`` field tag.

    The field's own name becomes both the accessor and the sole column.
    """
    kind: OptionSlot[IndexKind] = OptionSlot("index type")

    def on_kind(make):
        def handler(m: Meta) -> None:
            kind.check(m, ERR_MSG_INDEX_TYPE_TWICE, ConflictingCardinalityError)
            m.require_flag()
            kind.set(make(), m)

        return handler

    items = () if attr.shape is MetaShape.FLAG else attr.nested_items()
    read_nested(
        items,
        {
            "btree": on_kind(lambda: BTree(columns=(field_name,))),
            "hash": on_kind(lambda: Hash(columns=(field_name,))),
            "direct": on_kind(lambda: Direct(column=field_name)),
        },
        context="index",
    )
    return IndexSpec(
        accessor=field_name,
        kind=kind.require(ERR_MSG_MISSING_INDEX_KIND, attr),
        span=attr.span,
    )
