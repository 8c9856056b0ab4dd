"""Reconcile unique columns with the table's index list."""

from __future__ import annotations

from collections.abc import Sequence

from loguru import logger

from pytablespec.column import ColumnSpec
from pytablespec.index import BTree, Direct, Hash, IndexKind, IndexSpec
from pytablespec.table import TableSpec


def covers_exactly(kind: IndexKind, column: str) -> bool:
    """True if the index is over exactly the single column ``column``.

    Multi-column indices never match, even when ``column`` is one of them.
    """
    if isinstance(kind, (BTree, Hash)):
        return kind.columns == (column,)
    if isinstance(kind, Direct):
        return kind.column == column
    raise TypeError(f"unknown index kind: {kind!r}")


def infer_unique_indices(
    table: TableSpec, unique_columns: Sequence[ColumnSpec]
) -> list[IndexSpec]:
    """Mark or create a unique index for every unique column.

    For each unique column, the first index over exactly that column is
    marked unique. A column with no such index gets a new unique btree
    index named after the column, appended to ``table.indices``.

    Running this again on the same table changes nothing.

    Returns:
        The indices created by this call.
    """
    created: list[IndexSpec] = []
    for column in unique_columns:
        name = column.identifier
        covering = next(
            (index for index in table.indices if covers_exactly(index.kind, name)), None
        )
        if covering is not None:
            covering.is_unique = True
            continue
        # btree is the safest general-purpose choice when no algorithm was named.
        index = IndexSpec(
            accessor=name,
            kind=BTree(columns=(name,)),
            is_unique=True,
            synthetic=True,
        )
        table.indices.append(index)
        created.append(index)
        logger.debug("created unique btree index {} for table {}", name, table.accessor)
    return created
