"""
Day capacity and anchor model.

A DayState is derived from the store on every call and never cached.
"""

from dataclasses import dataclass, field
from datetime import date, time
from typing import Optional

from anchor_scheduler.schemas.booking_schema import Booking
from anchor_scheduler.schemas.verdict_schema import DayStatistics
from anchor_scheduler.tools.booking_store import BookingStore


@dataclass(frozen=True)
class DayState:
    """Snapshot of one date's bookings, ordered by time of day."""
    day: date
    capacity: int
    bookings: tuple[Booking, ...] = field(default_factory=tuple)

    @property
    def count(self) -> int:
        return len(self.bookings)

    @property
    def is_empty(self) -> bool:
        return not self.bookings

    @property
    def is_full(self) -> bool:
        return self.count >= self.capacity

    @property
    def anchor(self) -> Optional[Booking]:
        for booking in self.bookings:
            if booking.is_anchor:
                return booking
        return None

    @property
    def route_anchor(self) -> Optional[Booking]:
        """The anchor, or the earliest booking by time when the anchor flag is missing."""
        return self.anchor or (self.bookings[0] if self.bookings else None)

    @property
    def booked_times(self) -> list[time]:
        return [b.booking_time for b in self.bookings]

    def statistics(self) -> DayStatistics:
        anchor = self.anchor
        return DayStatistics(
            date=self.day,
            booking_count=self.count,
            capacity=self.capacity,
            is_full=self.is_full,
            has_anchor=anchor is not None,
            anchor_address=anchor.address if anchor else None,
            bookings=list(self.bookings),
        )


def load_day_state(store: BookingStore, day: date, capacity: int) -> DayState:
    """Read ``day`` fresh from the store."""
    bookings = sorted(store.list_bookings_for_date(day), key=lambda b: b.booking_time)
    return DayState(day=day, capacity=capacity, bookings=tuple(bookings))
