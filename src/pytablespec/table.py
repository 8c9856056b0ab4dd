"""Table-level options: ``@table(public, accessor = ..., index(...), scheduled(...), event)``."""

from __future__ import annotations

import enum
from collections.abc import Sequence
from dataclasses import dataclass, field

from loguru import logger

from pytablespec._diagnostics import OptionSlot
from pytablespec._errors import ERR_MSG_ACCESS_ALREADY_SPECIFIED
from pytablespec._utils import to_snake_case
from pytablespec.index import IndexSpec, parse_index_meta
from pytablespec.meta import Meta, Span, read_nested
from pytablespec.scheduled import ScheduledSpec, parse_scheduled_meta


class Access(enum.StrEnum):
    PUBLIC = "public"
    PRIVATE = "private"


@dataclass(frozen=True)
class AccessLevel:
    """Table visibility, with the location of the option that set it."""

    kind: Access
    span: Span | None = field(default=None, compare=False)


@dataclass
class TableSpec:
    """Parsed table options.

    ``indices`` grows after parsing: the column classifier appends inline
    field indices and unique-index inference appends synthetic ones.
    """

    accessor: str
    access: AccessLevel | None = None
    scheduled: ScheduledSpec | None = None
    indices: list[IndexSpec] = field(default_factory=list)
    event: bool = False

    @property
    def is_public(self) -> bool:
        return self.access is not None and self.access.kind is Access.PUBLIC


def parse_table_spec(
    args: Sequence[Meta],
    record_name: str,
    *,
    span: Span | None = None,
) -> TableSpec:
    """Parse the table annotation's argument list.

    Args:
        args: Items inside ``@table(...)``.
        record_name: Declared name of the annotated record, used to suggest
            an accessor when none is given.
        span: Location of the table annotation itself.

    Returns:
        The parsed TableSpec, with only table-level indices so far.

    Raises:
        DuplicateOptionError: If an option is given twice, or both
            ``public`` and ``private`` are given.
        MissingRequiredOptionError: If ``accessor`` is missing.
        UnrecognizedOptionError: If an unknown option is given.
    """
    access: OptionSlot[AccessLevel] = OptionSlot("access level")
    accessor: OptionSlot[str] = OptionSlot("accessor")
    scheduled: OptionSlot[ScheduledSpec] = OptionSlot("scheduled")
    event: OptionSlot[bool] = OptionSlot("event")
    indices: list[IndexSpec] = []

    def on_access(kind: Access):
        def handler(m: Meta) -> None:
            access.check(m, ERR_MSG_ACCESS_ALREADY_SPECIFIED)
            m.require_flag()
            access.set(AccessLevel(kind, m.span), m)

        return handler

    def on_accessor(m: Meta) -> None:
        accessor.check(m)
        accessor.set(m.ident_value(), m)

    def on_scheduled(m: Meta) -> None:
        scheduled.check(m)
        scheduled.set(parse_scheduled_meta(m), m)

    def on_event(m: Meta) -> None:
        event.check(m)
        m.require_flag()
        event.set(True, m)

    read_nested(
        args,
        {
            "public": on_access(Access.PUBLIC),
            "private": on_access(Access.PRIVATE),
            "name": lambda m: None,
            "accessor": on_accessor,
            "index": lambda m: indices.append(parse_index_meta(m)),
            "scheduled": on_scheduled,
            "event": on_event,
        },
        context="table",
    )

    suggestion = to_snake_case(record_name)
    table = TableSpec(
        accessor=accessor.require(
            f"must specify table accessor, e.g. `@table(accessor = {suggestion})`", span
        ),
        access=access.value,
        scheduled=scheduled.value,
        indices=indices,
        event=bool(event.value),
    )
    logger.debug(
        "parsed table {} (accessor={}, indices={})", record_name, table.accessor, len(indices)
    )
    return table
