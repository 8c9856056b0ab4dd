"""Set-once option slots and the duplicate / missing option diagnostics."""

from __future__ import annotations

from typing import Generic, TypeVar

from pytablespec._errors import (
    AnnotationError,
    DuplicateOptionError,
    MissingRequiredOptionError,
)
from pytablespec.meta import Meta, Span

T = TypeVar("T")


def _span_of(at: Meta | Span | None) -> Span | None:
    if isinstance(at, Meta):
        return at.span
    return at


class OptionSlot(Generic[T]):
    """A cell that accepts one value and rejects a second write.

    Used for every option that may appear at most once in a group: access
    level, accessor, scheduled job, index algorithm, per-field markers.
    """

    __slots__ = ("name", "value", "span", "_filled")

    def __init__(self, name: str) -> None:
        self.name = name
        self.value: T | None = None
        self.span: Span | None = None
        self._filled = False

    @property
    def is_set(self) -> bool:
        return self._filled

    def check(
        self,
        at: Meta | Span | None,
        message: str | None = None,
        error: type[AnnotationError] = DuplicateOptionError,
    ) -> None:
        """Raise if the slot already holds a value."""
        if self.is_set:
            check_duplicate_msg(self, at, message or f"duplicate option `{self.name}`", error)

    def set(
        self,
        value: T,
        at: Meta | Span | None,
        message: str | None = None,
        error: type[AnnotationError] = DuplicateOptionError,
    ) -> None:
        self.check(at, message, error)
        self.value = value
        self.span = _span_of(at)
        self._filled = True

    def require(self, message: str, at: Meta | Span | None = None) -> T:
        """Return the value, or raise MissingRequiredOptionError."""
        if not self._filled:
            raise missing_option(message, at)
        return self.value


def check_duplicate_msg(
    slot: OptionSlot,
    at: Meta | Span | None,
    message: str,
    error: type[AnnotationError] = DuplicateOptionError,
) -> None:
    if not slot.is_set:
        return
    span = _span_of(at)
    details = message
    if slot.span is not None:
        details = f"{message}; first specified at {slot.span}"
    raise error(message, details, span=span)


def missing_option(message: str, at: Meta | Span | None = None) -> MissingRequiredOptionError:
    return MissingRequiredOptionError(message, span=_span_of(at))
