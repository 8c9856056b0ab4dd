"""Scheduled option parser tests."""

import pytest

from pytablespec import (
    DuplicateOptionError,
    MalformedOptionError,
    MissingRequiredOptionError,
    UnrecognizedOptionError,
    parse_meta_list,
)
from pytablespec.scheduled import parse_scheduled_meta


def _parse(source):
    (item,) = parse_meta_list(source)
    return parse_scheduled_meta(item)


class TestScheduled:
    def test_job_only(self):
        spec = _parse("scheduled(tick)")
        assert str(spec.job_reference) == "tick"
        assert spec.at is None

    def test_job_and_at(self):
        spec = _parse("scheduled(tick, at = fire_time)")
        assert str(spec.job_reference) == "tick"
        assert spec.at == "fire_time"

    def test_at_first(self):
        spec = _parse("scheduled(at = fire_time, tick)")
        assert str(spec.job_reference) == "tick"

    def test_dotted_job(self):
        spec = _parse("scheduled(jobs.send_reminder)")
        assert spec.job_reference.segments == ("jobs", "send_reminder")

    def test_span(self):
        assert _parse("scheduled(tick)").span.column == 1


class TestScheduledErrors:
    def test_two_jobs(self):
        with pytest.raises(DuplicateOptionError) as exc_info:
            _parse("scheduled(tick, tock)")
        assert str(exc_info.value) == "can only specify one scheduled reducer or procedure"

    def test_missing_job(self):
        with pytest.raises(MissingRequiredOptionError) as exc_info:
            _parse("scheduled(at = fire_time)")
        assert str(exc_info.value) == (
            "must specify scheduled reducer or procedure associated with the table: "
            "scheduled(function_name)"
        )

    def test_empty_group(self):
        with pytest.raises(MissingRequiredOptionError):
            _parse("scheduled()")

    def test_at_twice(self):
        with pytest.raises(DuplicateOptionError):
            _parse("scheduled(tick, at = a, at = b)")

    def test_unknown_keyed_option(self):
        with pytest.raises(UnrecognizedOptionError):
            _parse("scheduled(tick, every = 5)")

    def test_call_is_not_a_job(self):
        with pytest.raises(UnrecognizedOptionError):
            _parse("scheduled(tick(now))")

    def test_at_must_be_identifier(self):
        with pytest.raises(MalformedOptionError):
            _parse("scheduled(tick, at = 10)")

    def test_requires_group(self):
        with pytest.raises(MalformedOptionError):
            _parse("scheduled")
