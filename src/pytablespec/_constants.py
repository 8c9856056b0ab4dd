"""Limits and defaults for table annotation parsing."""

MAX_COLUMNS = 2**16
"""Maximum number of fields a table record may declare."""

DEFAULT_TABLE_ATTRIBUTE = "table"
"""Name of the record-level annotation that carries the table options."""
