"""Working-day policy helpers."""

from collections.abc import Collection
from datetime import date, timedelta

# Upper bound on forward scans for a working day
MAX_WORKING_DAY_SHIFT = 14

ALL_DAYS = (0, 1, 2, 3, 4, 5, 6)


def is_working_day(day: date, working_days: Collection[int]) -> bool:
    """True if ``day.weekday()`` is an operating day. Empty policy means every day."""
    return day.weekday() in (working_days or ALL_DAYS)


def shift_to_working_day(day: date, working_days: Collection[int], include_start: bool = True) -> date:
    """Return the first working day on or after ``day`` (strictly after if not ``include_start``).

    Gives up after ``MAX_WORKING_DAY_SHIFT`` steps and returns wherever the scan stopped.
    """
    current = day if include_start else day + timedelta(days=1)
    steps = 0
    while not is_working_day(current, working_days) and steps < MAX_WORKING_DAY_SHIFT:
        current += timedelta(days=1)
        steps += 1
    return current


def week_range(day: date) -> tuple[date, date]:
    """Monday-to-Sunday week containing ``day``."""
    start = day - timedelta(days=day.weekday())
    return start, start + timedelta(days=6)
