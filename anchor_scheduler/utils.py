"""Shared date and time helpers used across the scheduling engine."""

from datetime import date, datetime, time
from typing import Union


def parse_time(value: Union[str, time]) -> time:
    """Parse an ``HH:MM`` string into a ``time`` (passes ``time`` through).

    Examples:
        >>> parse_time("08:30")
        datetime.time(8, 30)
    """
    if isinstance(value, time):
        return value
    return datetime.strptime(value.strip(), "%H:%M").time()


def parse_date(value: Union[str, date]) -> date:
    """Parse a ``YYYY-MM-DD`` string into a ``date`` (passes ``date`` through)."""
    if isinstance(value, datetime):
        return value.date()
    if isinstance(value, date):
        return value
    return datetime.strptime(value.strip(), "%Y-%m-%d").date()


def time_to_minutes(value: Union[str, time]) -> int:
    """Minutes since midnight.

    Examples:
        >>> time_to_minutes("11:30")
        690
    """
    parsed = parse_time(value)
    return parsed.hour * 60 + parsed.minute


def format_time(value: time) -> str:
    return value.strftime("%H:%M")


def format_hour_slot(minutes: int) -> str:
    """Floor a minutes-since-midnight value to a whole-hour ``HH:00`` label.

    Examples:
        >>> format_hour_slot(630)
        '10:00'
    """
    return f"{minutes // 60:02d}:00"
