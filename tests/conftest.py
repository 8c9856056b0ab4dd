"""Shared test fixtures."""

import pytest

from pytablespec import parse_record

ENTITY_SOURCE = """
@table(public, accessor = entity)
pub struct Entity {
    // The unique ID of the Entity.
    @primary_key
    @auto_inc
    id: u128,

    created_at: Timestamp,
}
"""


@pytest.fixture
def entity_record():
    return parse_record(ENTITY_SOURCE)


@pytest.fixture
def plain_record():
    return parse_record(
        """
        struct Player {
            id: u64,
            name: String,
            score: i32,
        }
        """
    )


@pytest.fixture
def entity_source():
    return ENTITY_SOURCE
