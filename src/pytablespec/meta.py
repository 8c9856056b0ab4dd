"""Generic nested metadata tree and the reader that dispatches over it.

Annotation text is first parsed into :class:`Meta` nodes (see
:mod:`pytablespec.source`). Each node has one of four shapes:

- flag: ``public``
- key=value: ``accessor = entity``
- nested group: ``index(accessor = by_owner, btree(columns = [owner]))``
- literal: the ``0`` in ``default(0)``

The table, index and scheduled parsers walk these nodes with
:func:`read_nested`, which hands each item to the handler registered for
its key.
"""

from __future__ import annotations

import enum
from collections.abc import Callable, Iterable, Mapping
from dataclasses import dataclass
from typing import Any, Union

from pytablespec._errors import (
    AnnotationError,
    MalformedOptionError,
    UnrecognizedOptionError,
)


@dataclass(frozen=True)
class Span:
    """Source location, 1-based lines and columns."""

    line: int
    column: int
    end_line: int
    end_column: int
    start_pos: int = 0
    end_pos: int = 0

    def __str__(self) -> str:
        return f"line {self.line}, column {self.column}"


@dataclass(frozen=True)
class Path:
    """A dotted name such as ``entity`` or ``jobs.send_reminder``."""

    segments: tuple[str, ...]
    source: str = ""
    span: Span | None = None

    @property
    def ident(self) -> str | None:
        """The bare identifier, or None for a multi-segment path."""
        if len(self.segments) == 1:
            return self.segments[0]
        return None

    def __str__(self) -> str:
        return ".".join(self.segments)


@dataclass(frozen=True)
class Literal:
    """A number or string literal."""

    value: Any
    source: str
    span: Span | None = None


@dataclass(frozen=True)
class ListValue:
    """A bracketed list: ``[a, b, c]``."""

    items: tuple[Value, ...]
    source: str = ""
    span: Span | None = None


Value = Union[Path, Literal, ListValue]


class MetaShape(enum.StrEnum):
    FLAG = "flag"
    VALUE = "value"
    GROUP = "group"
    LITERAL = "literal"


@dataclass(frozen=True)
class Meta:
    """One item of an annotation list."""

    path: Path | None
    span: Span | None = None
    source: str = ""
    value: Value | None = None
    nested: tuple[Meta, ...] | None = None

    @property
    def shape(self) -> MetaShape:
        if self.path is None:
            return MetaShape.LITERAL
        if self.nested is not None:
            return MetaShape.GROUP
        if self.value is not None:
            return MetaShape.VALUE
        return MetaShape.FLAG

    @property
    def key(self) -> str | None:
        """The single-identifier key, or None for literals and dotted paths."""
        if self.path is None:
            return None
        return self.path.ident

    @property
    def name(self) -> str:
        if self.path is None:
            return self.source
        return str(self.path)

    def error(
        self, message: str, error: type[AnnotationError] = MalformedOptionError
    ) -> AnnotationError:
        return error(message, f"{message} (at `{self.source or self.name}`)", span=self.span)

    def require_flag(self) -> None:
        if self.shape is not MetaShape.FLAG:
            raise self.error(f"`{self.name}` does not take a value")

    def require_value(self) -> Value:
        if self.shape is not MetaShape.VALUE or self.value is None:
            raise self.error(f"expected `{self.name} = ...`")
        return self.value

    def ident_value(self) -> str:
        value = self.require_value()
        if isinstance(value, Path) and value.ident is not None:
            return value.ident
        raise self.error(
            f"expected an identifier for `{self.name}`, found `{value.source or value}`"
        )

    def ident_list_value(self) -> tuple[str, ...]:
        """Read ``key = [a, b, ...]`` as a tuple of identifiers."""
        value = self.require_value()
        if not isinstance(value, ListValue):
            raise self.error(
                f"expected a bracketed list for `{self.name}`, e.g. `{self.name} = [col1, col2]`"
            )
        idents = []
        for item in value.items:
            if not isinstance(item, Path) or item.ident is None:
                raise self.error(
                    f"expected an identifier in `{self.name}`, found `{item.source or item}`"
                )
            idents.append(item.ident)
        return tuple(idents)

    def nested_items(self) -> tuple[Meta, ...]:
        if self.shape is not MetaShape.GROUP or self.nested is None:
            raise self.error(f"expected `{self.name}(...)`")
        return self.nested


Handler = Callable[[Meta], None]
"""Callback invoked with each recognized item of a group."""


def read_nested(
    items: Iterable[Meta],
    handlers: Mapping[str, Handler],
    *,
    context: str,
) -> None:
    """Dispatch each item to the handler registered under its key.

    Args:
        items: The items of an annotation group, in source order.
        handlers: Mapping of accepted key to handler.
        context: Name of the group, used in error messages.

    Raises:
        UnrecognizedOptionError: If an item's key has no handler.
    """
    for meta in items:
        key = meta.key
        handler = handlers.get(key) if key is not None else None
        if handler is None:
            expected = ", ".join(f"`{k}`" for k in handlers)
            raise meta.error(
                f"unknown {context} option `{meta.name}`, expected one of: {expected}",
                UnrecognizedOptionError,
            )
        handler(meta)
