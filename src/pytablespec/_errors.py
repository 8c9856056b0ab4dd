"""Exception hierarchy for table annotation parsing."""

from __future__ import annotations

from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from pytablespec.meta import Span


class AnnotationError(Exception):
    """Base exception for table annotation errors.

    Provides dual messaging: a remediation-oriented user-facing message and
    internal details for logging, plus the source location of the option
    that caused the failure.
    """

    def __init__(
        self,
        user_message: str,
        internal_details: str = "",
        wrapped: Exception | None = None,
        *,
        span: Span | None = None,
    ) -> None:
        super().__init__(user_message)
        self.user_message = user_message
        self.internal_details = internal_details or user_message
        self.wrapped = wrapped
        self.span = span

    def internal(self) -> str:
        return self.internal_details

    def diagnostic(self) -> str:
        """Format the error as ``line L, column C: message``."""
        if self.span is None:
            return self.user_message
        return f"{self.span}: {self.user_message}"

    def render(self, source: str) -> str:
        """Format the error with the offending source line and a caret marker."""
        if self.span is None:
            return self.user_message
        lines = source.splitlines()
        if not 0 < self.span.line <= len(lines):
            return self.diagnostic()
        text = lines[self.span.line - 1]
        width = 1
        if self.span.end_line == self.span.line:
            width = max(1, self.span.end_column - self.span.column)
        marker = " " * (self.span.column - 1) + "^" * width
        return f"{self.diagnostic()}\n  {text}\n  {marker}"


class DuplicateOptionError(AnnotationError):
    """Raised when an option slot is written a second time."""


class MissingRequiredOptionError(AnnotationError):
    """Raised when a required option is absent at the end of a group."""


class ConflictingCardinalityError(AnnotationError):
    """Raised for structural violations such as two primary keys or two index algorithms."""


class StructuralShapeError(AnnotationError):
    """Raised when the annotated record is not a plain aggregate of named fields."""


class UnrecognizedOptionError(AnnotationError):
    """Raised when a group contains a key its parser does not accept."""


class MalformedOptionError(AnnotationError):
    """Raised when a recognized option has the wrong shape or value."""


class AnnotationSyntaxError(AnnotationError):
    """Raised when annotation source text cannot be tokenized or parsed."""


# User-facing error message constants
ERR_MSG_ACCESS_ALREADY_SPECIFIED = "already specified access level"
ERR_MSG_ONE_SCHEDULED_JOB = "can only specify one scheduled reducer or procedure"
ERR_MSG_MISSING_SCHEDULED_JOB = (
    "must specify scheduled reducer or procedure associated with the table: "
    "scheduled(function_name)"
)
ERR_MSG_INDEX_ALGORITHM_TWICE = "index algorithm specified twice"
ERR_MSG_INDEX_TYPE_TWICE = "index type specified twice"
ERR_MSG_MISSING_INDEX_ACCESSOR = "missing index accessor, e.g. accessor = my_index"
ERR_MSG_MISSING_INDEX_ALGORITHM = (
    "missing index algorithm, e.g., `btree(columns = [col1, col2])`, "
    "`hash(columns = [col1, col2])` or `direct(column = col1)`"
)
ERR_MSG_MISSING_INDEX_KIND = "must specify kind of index (`btree`, `hash` or `direct`)"
ERR_MSG_ONE_PRIMARY_KEY = "can only have one primary key per table"
ERR_MSG_TABLE_NOT_STRUCT = "table must be a struct"
