"""
Booking store contract and an in-memory implementation.

The scheduling engine only reads from the store. Writes (insert, cancel,
complete, delete) are performed by the booking service. In production the
same contract would be backed by a relational database with the active,
cancelled and completed bookings in separate tables.
"""

import threading
import uuid
from datetime import date, datetime, timezone
from typing import Any, Optional, Protocol

from anchor_scheduler.exceptions import BookingNotFoundError
from anchor_scheduler.logging_context import get_request_logger
from anchor_scheduler.schemas.booking_schema import Booking, BookingStatus

logger = get_request_logger(__name__)


class BookingStore(Protocol):
    """Read side of the store used by the scheduling engine.

    Implementations wrap backend failures in ``BookingStoreError``. The
    validator and auto-scheduler also convert ``OSError`` (connection
    refused, timeouts) into error verdicts, but any other exception escapes.
    """

    def list_bookings_for_date(self, day: date) -> list[Booking]:
        ...

    def list_bookings_for_range(self, start: date, end: date) -> list[Booking]:
        ...

    def get_anchor_booking(self, day: date) -> Optional[Booking]:
        ...


class WritableBookingStore(BookingStore, Protocol):
    """Full store contract used by the booking service."""

    def get_booking(self, booking_id: str) -> Booking:
        ...

    def insert_booking(self, booking: Booking) -> Booking:
        ...

    def update_booking(self, booking_id: str, **changes: Any) -> Booking:
        ...

    def delete_booking(self, booking_id: str) -> Booking:
        ...

    def cancel_booking(self, booking_id: str) -> Booking:
        ...

    def complete_booking(self, booking_id: str) -> Booking:
        ...


def _by_time(booking: Booking) -> tuple:
    return (booking.booking_date, booking.booking_time)


class InMemoryBookingStore:
    """Thread-safe dict-backed store with active, cancelled and completed tables."""

    def __init__(self) -> None:
        self._lock = threading.RLock()
        self._bookings: dict[str, Booking] = {}
        self._cancelled: dict[str, Booking] = {}
        self._completed: dict[str, Booking] = {}

    # --- reads ---

    def list_bookings_for_date(self, day: date) -> list[Booking]:
        with self._lock:
            return sorted(
                (b for b in self._bookings.values() if b.booking_date == day), key=_by_time
            )

    def list_bookings_for_range(self, start: date, end: date) -> list[Booking]:
        with self._lock:
            return sorted(
                (b for b in self._bookings.values() if start <= b.booking_date <= end),
                key=_by_time,
            )

    def get_anchor_booking(self, day: date) -> Optional[Booking]:
        with self._lock:
            for booking in self._bookings.values():
                if booking.booking_date == day and booking.is_anchor:
                    return booking
        return None

    def get_booking(self, booking_id: str) -> Booking:
        with self._lock:
            if booking_id not in self._bookings:
                raise BookingNotFoundError(booking_id)
            return self._bookings[booking_id]

    def list_all(self) -> list[Booking]:
        with self._lock:
            return sorted(self._bookings.values(), key=_by_time)

    def list_cancelled(self) -> list[Booking]:
        with self._lock:
            return list(self._cancelled.values())

    def list_completed(self) -> list[Booking]:
        with self._lock:
            return list(self._completed.values())

    # --- writes ---

    def insert_booking(self, booking: Booking) -> Booking:
        with self._lock:
            if not booking.id:
                booking = booking.model_copy(update={"id": f"BK-{uuid.uuid4().hex[:6].upper()}"})
            self._bookings[booking.id] = booking
        logger.info(
            "Booking stored: %s on %s at %s (anchor=%s)",
            booking.id, booking.booking_date, booking.booking_time, booking.is_anchor,
        )
        return booking

    def update_booking(self, booking_id: str, **changes: Any) -> Booking:
        with self._lock:
            updated = self.get_booking(booking_id).model_copy(update=changes)
            self._bookings[booking_id] = updated
            return updated

    def delete_booking(self, booking_id: str) -> Booking:
        with self._lock:
            booking = self.get_booking(booking_id)
            del self._bookings[booking_id]
        logger.info("Booking deleted: %s", booking_id)
        return booking

    def cancel_booking(self, booking_id: str) -> Booking:
        """Move a booking from the active table to the cancelled table."""
        return self._move(booking_id, self._cancelled, BookingStatus.CANCELLED)

    def complete_booking(self, booking_id: str) -> Booking:
        """Move a booking from the active table to the completed table."""
        return self._move(booking_id, self._completed, BookingStatus.COMPLETED)

    def _move(self, booking_id: str, table: dict[str, Booking], status: BookingStatus) -> Booking:
        with self._lock:
            booking = self.get_booking(booking_id)
            del self._bookings[booking_id]
            moved = booking.model_copy(update={"status": status})
            table[booking_id] = moved
        logger.info("Booking %s: %s", status.value, booking_id)
        return moved

    def reset(self) -> None:
        """Clear all tables. Used by test fixtures for isolation."""
        with self._lock:
            self._bookings.clear()
            self._cancelled.clear()
            self._completed.clear()


def load_bookings(records: list[dict[str, Any]]) -> InMemoryBookingStore:
    """Build a store from plain dicts (e.g. a JSON export)."""
    store = InMemoryBookingStore()
    for index, record in enumerate(records):
        record = dict(record)
        record.setdefault("id", f"BK-{index + 1:04d}")
        record.setdefault("created_at", datetime.now(timezone.utc))
        store.insert_booking(Booking.model_validate(record))
    return store
