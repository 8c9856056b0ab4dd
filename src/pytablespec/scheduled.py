"""The ``scheduled(job, at = column)`` table option."""

from __future__ import annotations

from dataclasses import dataclass, field

from pytablespec._diagnostics import OptionSlot
from pytablespec._errors import ERR_MSG_MISSING_SCHEDULED_JOB, ERR_MSG_ONE_SCHEDULED_JOB
from pytablespec.meta import Meta, MetaShape, Path, Span, read_nested


@dataclass(frozen=True)
class ScheduledSpec:
    """Job invoked on schedule, and optionally the column holding the fire time."""

    job_reference: Path
    at: str | None = None
    span: Span | None = field(default=None, compare=False, repr=False)


def parse_scheduled_meta(meta: Meta) -> ScheduledSpec:
    job: OptionSlot[Path] = OptionSlot("scheduled job")
    at: OptionSlot[str] = OptionSlot("at")

    def on_at(m: Meta) -> None:
        at.set(m.ident_value(), m)

    for item in meta.nested_items():
        if item.shape is MetaShape.FLAG:
            job.set(item.path, item, ERR_MSG_ONE_SCHEDULED_JOB)
        else:
            read_nested([item], {"at": on_at}, context="scheduled")

    return ScheduledSpec(
        job_reference=job.require(ERR_MSG_MISSING_SCHEDULED_JOB, meta),
        at=at.value,
        span=meta.span,
    )
