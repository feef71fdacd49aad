"""Millisecond offset and timestamp formatting helpers."""

from __future__ import annotations

from datetime import datetime, timedelta

_ONE_MILLISECOND = timedelta(milliseconds=1)


def domain_day_start(value: datetime) -> datetime:
    """Truncate a timestamp to midnight of the same day."""

    return value.replace(hour=0, minute=0, second=0, microsecond=0)


def domain_offset_ms(start_instant: datetime, value: datetime) -> int:
    """Return whole milliseconds elapsed from `start_instant` to `value`."""

    return (value - start_instant) // _ONE_MILLISECOND


def domain_instant_at(start_instant: datetime, offset_ms: int) -> datetime:
    """Return the timestamp `offset_ms` milliseconds after `start_instant`."""

    return start_instant + timedelta(milliseconds=offset_ms)


def domain_format_timestamp(value: datetime, pattern: str) -> str:
    """Format a timestamp, rendering `%f` as three-digit milliseconds.

    Args:
        value: Timestamp to format.
        pattern: strftime pattern.

    Returns:
        str: Formatted timestamp.
    """

    milliseconds_pattern = pattern.replace("%f", f"{value.microsecond // 1000:03d}")
    return value.strftime(milliseconds_pattern)
