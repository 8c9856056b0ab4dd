"""Record definitions: the annotated type and its fields."""

from __future__ import annotations

import enum
import re
from dataclasses import dataclass, field
from typing import Any

from pytablespec._constants import DEFAULT_TABLE_ATTRIBUTE
from pytablespec._diagnostics import missing_option
from pytablespec.meta import Meta, MetaShape, Span


class RecordShape(enum.StrEnum):
    STRUCT = "struct"
    TUPLE = "tuple"
    UNIT = "unit"
    ENUM = "enum"


class Visibility(enum.StrEnum):
    PUBLIC = "pub"
    INHERITED = ""


@dataclass(frozen=True)
class TypeRef:
    """A field type as written in source. Resolution happens downstream."""

    source: str
    span: Span | None = field(default=None, compare=False)

    def __str__(self) -> str:
        return self.source


@dataclass(frozen=True)
class FieldDef:
    """A record field with the annotations attached to it.

    ``name`` is None for positional (tuple struct) fields. ``ty`` is opaque
    to this package and passed through to the column spec.
    """

    name: str | None
    ty: Any
    vis: Visibility = Visibility.INHERITED
    attrs: tuple[Meta, ...] = ()
    span: Span | None = field(default=None, compare=False)


@dataclass(frozen=True)
class RecordDef:
    name: str
    shape: RecordShape = RecordShape.STRUCT
    fields: tuple[FieldDef, ...] = ()
    attrs: tuple[Meta, ...] = ()
    vis: Visibility = Visibility.INHERITED
    variants: tuple[str, ...] = ()
    span: Span | None = field(default=None, compare=False)


def find_table_attribute(record: RecordDef, name: str = DEFAULT_TABLE_ATTRIBUTE) -> Meta:
    """Return the record's ``@table(...)`` annotation.

    ``name`` may be a path such as ``orm::table``; ``::`` and ``.`` are
    interchangeable separators. A bare ``@table`` without an argument list
    is not a table annotation. If the name appears more than once, the last
    one wins.

    Raises:
        MissingRequiredOptionError: If no matching annotation is found.
    """
    segments = tuple(re.split(r"::|\.", name))
    found = None
    for attr in record.attrs:
        if attr.path is None or attr.shape is not MetaShape.GROUP:
            continue
        if attr.path.segments == segments:
            found = attr
    if found is None:
        raise missing_option(
            f"no `@{name}(...)` annotation found on `{record.name}`", record.span
        )
    return found
