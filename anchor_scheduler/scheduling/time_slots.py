"""
Time-of-day conflict detection and open-slot proposals.

All arithmetic is in minutes since midnight; there is no wraparound
across midnight.
"""

from collections.abc import Iterable, Sequence
from datetime import time
from typing import Optional

from anchor_scheduler.schemas.booking_schema import Booking
from anchor_scheduler.schemas.verdict_schema import TimeConflict
from anchor_scheduler.utils import format_hour_slot, parse_time, time_to_minutes

NO_AVAILABLE_SLOTS = "No available slots"


def find_time_conflicts(
    bookings: Iterable[Booking], requested: time, min_gap_minutes: int
) -> list[TimeConflict]:
    """Existing bookings that start less than ``min_gap_minutes`` from ``requested``."""
    requested_minutes = time_to_minutes(requested)
    conflicts = []
    for booking in bookings:
        apart = abs(requested_minutes - time_to_minutes(booking.booking_time))
        if apart < min_gap_minutes:
            conflicts.append(TimeConflict(
                time=booking.booking_time,
                customer_name=booking.customer_name or None,
                minutes_apart=apart,
            ))
    return conflicts


def find_open_slots(
    booked: Iterable[time],
    work_start_hour: int,
    work_end_hour: int,
    min_gap_minutes: int,
) -> list[str]:
    """
    Propose whole-hour start times that keep ``min_gap_minutes`` from existing bookings.

    Candidates are one slot before the first booking, the midpoint of every
    gap at least twice the minimum wide, and one slot after the last booking.
    Returns ``[NO_AVAILABLE_SLOTS]`` rather than an empty list.
    """
    work_start = work_start_hour * 60
    work_end = work_end_hour * 60
    times = sorted(time_to_minutes(t) for t in booked)
    if not times:
        return [NO_AVAILABLE_SLOTS]

    slots: list[str] = []

    before_first = times[0] - min_gap_minutes
    if before_first >= work_start:
        slots.append(format_hour_slot(before_first))

    for earlier, later in zip(times, times[1:]):
        if later - earlier >= 2 * min_gap_minutes:
            slots.append(format_hour_slot((earlier + later) // 2))

    after_last = times[-1] + min_gap_minutes
    if work_end - times[-1] >= min_gap_minutes and after_last // 60 < work_end_hour:
        slots.append(format_hour_slot(after_last))

    return slots or [NO_AVAILABLE_SLOTS]


def pick_preferred_slot(booked: Iterable[time], preferred: Sequence[str]) -> Optional[time]:
    """First preferred slot not already taken that day, in preference order."""
    taken = set(booked)
    for slot in preferred:
        candidate = parse_time(slot)
        if candidate not in taken:
            return candidate
    return None
