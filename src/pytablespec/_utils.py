"""Naming helpers."""

from __future__ import annotations

import re

IDENTIFIER_RE = re.compile(r"^[a-zA-Z_][a-zA-Z0-9_]*$")

_WORD_BOUNDARY_RE = re.compile(r"(?<=[a-z0-9])(?=[A-Z])|(?<=[A-Z])(?=[A-Z][a-z])")


def to_snake_case(name: str) -> str:
    """Convert a type name to snake_case: ``PlayerState`` -> ``player_state``."""
    return _WORD_BOUNDARY_RE.sub("_", name).lower()


def is_identifier(name: str) -> bool:
    return bool(IDENTIFIER_RE.match(name))
