"""pytablespec - Parse and validate table annotations into a storage IR."""

from __future__ import annotations

__version__ = "0.1.0"

from collections.abc import Sequence

from loguru import logger

from pytablespec._constants import DEFAULT_TABLE_ATTRIBUTE, MAX_COLUMNS
from pytablespec._errors import (
    AnnotationError,
    AnnotationSyntaxError,
    ConflictingCardinalityError,
    DuplicateOptionError,
    MalformedOptionError,
    MissingRequiredOptionError,
    StructuralShapeError,
    UnrecognizedOptionError,
)
from pytablespec._inference import infer_unique_indices
from pytablespec._utils import to_snake_case
from pytablespec.column import ColumnArgs, ColumnSpec, Expression, classify_columns
from pytablespec.index import BTree, Direct, Hash, IndexKind, IndexSpec
from pytablespec.meta import Meta, Path, Span
from pytablespec.record import (
    FieldDef,
    RecordDef,
    RecordShape,
    TypeRef,
    Visibility,
    find_table_attribute,
)
from pytablespec.scheduled import ScheduledSpec
from pytablespec.source import parse_meta_list, parse_record
from pytablespec.table import Access, AccessLevel, TableSpec, parse_table_spec

__all__ = [
    "parse_table",
    "parse_table_source",
    "parse_record",
    "parse_meta_list",
    "find_table_attribute",
    "infer_unique_indices",
    "to_snake_case",
    "Access",
    "AccessLevel",
    "BTree",
    "ColumnArgs",
    "ColumnSpec",
    "Direct",
    "Expression",
    "FieldDef",
    "Hash",
    "IndexKind",
    "IndexSpec",
    "Meta",
    "Path",
    "RecordDef",
    "RecordShape",
    "ScheduledSpec",
    "Span",
    "TableSpec",
    "TypeRef",
    "Visibility",
    "AnnotationError",
    "AnnotationSyntaxError",
    "ConflictingCardinalityError",
    "DuplicateOptionError",
    "MalformedOptionError",
    "MissingRequiredOptionError",
    "StructuralShapeError",
    "UnrecognizedOptionError",
]

# Library logging is off until the application calls logger.enable("pytablespec").
logger.disable(__name__)


def parse_table(
    args: Sequence[Meta],
    record: RecordDef,
    *,
    span: Span | None = None,
    max_columns: int = MAX_COLUMNS,
) -> tuple[TableSpec, ColumnArgs]:
    """Parse table options and record fields into the table IR.

    Runs the table option parser, classifies the record's columns, then
    reconciles unique columns with the index list.

    Args:
        args: Items of the table annotation, e.g. from
            :func:`find_table_attribute`.
        record: The annotated record.
        span: Location of the table annotation, for error reporting.
        max_columns: Maximum number of fields. Defaults to 2^16.

    Returns:
        The table spec and the column arguments.

    Raises:
        AnnotationError: On the first invalid option; no partial result is returned.
    """
    table = parse_table_spec(args, record.name, span=span)
    columns = classify_columns(table, record, max_columns=max_columns)
    infer_unique_indices(table, columns.unique_columns)
    return table, columns


def parse_table_source(
    source: str,
    *,
    attribute: str = DEFAULT_TABLE_ATTRIBUTE,
    max_columns: int = MAX_COLUMNS,
) -> tuple[TableSpec, ColumnArgs]:
    """Parse an annotated record definition from text into the table IR.

    Args:
        source: Record definition carrying an ``@table(...)`` annotation.
        attribute: Name of the table annotation.
        max_columns: Maximum number of fields. Defaults to 2^16.

    Returns:
        The table spec and the column arguments.

    Raises:
        AnnotationSyntaxError: If the text cannot be parsed.
        AnnotationError: If the annotations are invalid.
    """
    record = parse_record(source)
    table_attr = find_table_attribute(record, attribute)
    return parse_table(
        table_attr.nested_items(),
        record,
        span=table_attr.span,
        max_columns=max_columns,
    )
