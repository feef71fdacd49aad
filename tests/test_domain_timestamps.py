"""Regression tests for millisecond offset and timestamp formatting helpers."""

from datetime import datetime

from satlink.domain import domain_day_start, domain_format_timestamp, domain_instant_at, domain_offset_ms


def test_domain_offset_ms_round_trips_through_instant_at() -> None:
    start_instant = datetime(2027, 6, 1)
    value = datetime(2027, 6, 2, 0, 0, 1, 500000)

    offset = domain_offset_ms(start_instant, value)

    assert offset == 86401500
    assert domain_instant_at(start_instant, offset) == value


def test_domain_day_start_truncates_to_midnight() -> None:
    assert domain_day_start(datetime(2027, 6, 1, 13, 45, 10, 123000)) == datetime(2027, 6, 1)


def test_domain_format_timestamp_renders_milliseconds_for_fraction_directive() -> None:
    value = datetime(2027, 6, 1, 0, 0, 1, 999000)

    assert domain_format_timestamp(value, "%Y-%m-%d %H:%M:%S.%f") == "2027-06-01 00:00:01.999"
    assert domain_format_timestamp(value, "%H:%M:%S") == "00:00:01"
