"""
Booking service: the write path around the read-only scheduling engine.

Validation itself has no side effects, so the check-then-persist step is
where two racing requests could both claim the anchor role or the last
slot of a day. The service holds a per-date lock across validate and
insert so only one of them wins.

It also owns anchor promotion: when the anchor booking leaves the active
table (cancel, complete or delete), the earliest-created remaining
booking for that date becomes the anchor.
"""

import threading
import uuid
from collections import defaultdict
from collections.abc import Iterator
from contextlib import contextmanager
from datetime import date, datetime, time, timedelta, timezone
from typing import Callable, Optional

from anchor_scheduler.config import AppConfig, settings
from anchor_scheduler.exceptions import SchedulingError
from anchor_scheduler.logging_context import get_request_logger
from anchor_scheduler.schemas.booking_schema import Booking, BookingRequest
from anchor_scheduler.schemas.location_schema import DistanceResult
from anchor_scheduler.schemas.verdict_schema import (
    BookingOutcome,
    DayOverview,
    DayStatistics,
    RouteStop,
    WeekOverview,
)
from anchor_scheduler.scheduling.calendar_rules import is_working_day, week_range
from anchor_scheduler.scheduling.day_state import DayState, load_day_state
from anchor_scheduler.scheduling.time_slots import pick_preferred_slot
from anchor_scheduler.scheduling.validator import BookingValidator
from anchor_scheduler.tools.booking_store import WritableBookingStore
from anchor_scheduler.tools.distance_oracle import DistanceOracle

logger = get_request_logger(__name__)

DATE_LOCK_STRIPES = 64


class BookingService:
    """Serialized create, cancel, complete and delete plus calendar views."""

    def __init__(
        self,
        store: WritableBookingStore,
        oracle: DistanceOracle,
        config: Optional[AppConfig] = None,
        validator: Optional[BookingValidator] = None,
        id_factory: Callable[[], str] = lambda: f"BK-{uuid.uuid4().hex[:6].upper()}",
    ) -> None:
        self.store = store
        self.oracle = oracle
        self.config = config or settings
        self.validator = validator or BookingValidator(store, oracle, self.config)
        self._id_factory = id_factory
        self._date_locks = [threading.Lock() for _ in range(DATE_LOCK_STRIPES)]

    @contextmanager
    def date_lock(self, day: date) -> Iterator[None]:
        """Serialize writes touching ``day``."""
        with self._lock_for(day):
            yield

    def _lock_for(self, day: date) -> threading.Lock:
        """Fixed pool of locks; dates sharing a stripe also serialize with each other."""
        return self._date_locks[day.toordinal() % DATE_LOCK_STRIPES]

    # --- writes ---

    def create_booking(self, request: BookingRequest) -> BookingOutcome:
        """Validate and, if accepted, persist the booking under the date's lock."""
        with self.date_lock(request.booking_date):
            verdict = self.validator.validate(request)
            if not verdict.valid:
                return BookingOutcome(
                    success=False,
                    message="Booking validation failed",
                    validation=verdict,
                )

            booking = Booking(
                id=self._id_factory(),
                customer_name=request.customer_name or "",
                address=verdict.location.formatted_address,
                latitude=verdict.location.latitude,
                longitude=verdict.location.longitude,
                booking_date=request.booking_date,
                booking_time=request.booking_time or self._default_time(request.booking_date),
                service_type=request.service_type or "standard",
                is_anchor=bool(verdict.is_anchor),
                distance_from_base=verdict.distance_from_base,
                travel_time_from_base=verdict.travel_time_from_base,
                distance_from_anchor=verdict.distance_from_anchor,
                travel_time_from_anchor=verdict.travel_time_from_anchor,
                customer_phone=request.customer_phone,
                customer_email=request.customer_email,
                notes=request.notes,
                created_at=datetime.now(timezone.utc),
            )
            created = self.store.insert_booking(booking)

        return BookingOutcome(
            success=True,
            message="Booking created successfully",
            booking=created,
            validation=verdict,
        )

    def cancel_booking(self, booking_id: str) -> Booking:
        return self._remove(booking_id, self.store.cancel_booking)

    def complete_booking(self, booking_id: str) -> Booking:
        return self._remove(booking_id, self.store.complete_booking)

    def delete_booking(self, booking_id: str) -> Booking:
        return self._remove(booking_id, self.store.delete_booking)

    def _remove(self, booking_id: str, operation: Callable[[str], Booking]) -> Booking:
        """
        Take a booking out of the active table and repair the anchor if needed.

        Raises:
            BookingNotFoundError: If the id is not an active booking.
        """
        day = self.store.get_booking(booking_id).booking_date
        with self.date_lock(day):
            removed = operation(booking_id)
            if removed.is_anchor:
                self._promote_anchor(day)
        return removed

    def _promote_anchor(self, day: date) -> Optional[Booking]:
        remaining = self.store.list_bookings_for_date(day)
        if not remaining or any(b.is_anchor for b in remaining):
            return None
        successor = min(remaining, key=lambda b: b.created_at)
        promoted = self.store.update_booking(
            successor.id,
            is_anchor=True,
            distance_from_anchor=None,
            travel_time_from_anchor=None,
        )
        logger.info("Promoted %s to anchor for %s", promoted.id, day)
        return promoted

    def _default_time(self, day: date) -> time:
        """First free preferred slot, else the start of the working day."""
        state = load_day_state(self.store, day, self.config.calendar.max_bookings_per_day)
        slot = pick_preferred_slot(state.booked_times, self.config.calendar.default_time_slots)
        return slot or time(hour=self.config.calendar.work_start_hour)

    # --- views ---

    def date_statistics(self, day: date) -> DayStatistics:
        return load_day_state(self.store, day, self.config.calendar.max_bookings_per_day).statistics()

    def week_overview(self, week_of: date) -> WeekOverview:
        """Monday-start week with the drive between consecutive jobs of each day."""
        start, end = week_range(week_of)
        cal = self.config.calendar
        by_date: dict[date, list[Booking]] = defaultdict(list)
        for booking in self.store.list_bookings_for_range(start, end):
            by_date[booking.booking_date].append(booking)

        days = []
        for offset in range(7):
            day = start + timedelta(days=offset)
            bookings = sorted(by_date[day], key=lambda b: b.booking_time)
            stats = DayState(
                day=day, capacity=cal.max_bookings_per_day, bookings=tuple(bookings)
            ).statistics()
            stops = []
            previous = None
            for booking in stats.bookings:
                travel = None
                if previous is not None:
                    travel = self._leg(previous, booking)
                stops.append(RouteStop(booking=booking, travel_from_previous=travel))
                previous = booking
            days.append(DayOverview(
                date=day,
                label=f"{day:%A}, {day:%b} {day.day}",
                is_working_day=is_working_day(day, cal.working_days),
                booking_count=stats.booking_count,
                capacity=stats.capacity,
                is_full=stats.is_full,
                has_anchor=stats.has_anchor,
                anchor_address=stats.anchor_address,
                stops=stops,
            ))
        return WeekOverview(week_start=start, week_end=end, days=days)

    def _leg(self, origin: Booking, destination: Booking) -> Optional[DistanceResult]:
        try:
            return self.oracle.distance_between(origin.location, destination.location)
        except (SchedulingError, OSError) as exc:
            logger.warning("No travel estimate from %s to %s: %s", origin.id, destination.id, exc)
            return None
