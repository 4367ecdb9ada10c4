"""Booking request and booking record models."""

from datetime import date, datetime, time, timezone
from enum import Enum
from typing import Optional

from pydantic import BaseModel, Field, field_validator

from anchor_scheduler.schemas.location_schema import ResolvedLocation

MIN_ADDRESS_LENGTH = 5


class BookingStatus(str, Enum):
    CONFIRMED = "confirmed"
    CANCELLED = "cancelled"
    COMPLETED = "completed"


def _check_address(value: str) -> str:
    value = value.strip()
    if len(value) < MIN_ADDRESS_LENGTH:
        raise ValueError(f"address must be at least {MIN_ADDRESS_LENGTH} characters")
    return value


class BookingRequest(BaseModel):
    """A candidate booking to validate. Never persisted by the engine."""
    address: str
    booking_date: date
    booking_time: Optional[time] = None
    service_type: Optional[str] = None
    customer_name: Optional[str] = None
    customer_phone: Optional[str] = None
    customer_email: Optional[str] = None
    notes: Optional[str] = None

    @field_validator("address")
    @classmethod
    def normalize_address(cls, value: str) -> str:
        return _check_address(value)


class AutoScheduleRequest(BaseModel):
    """Address-only request: the engine picks the date and time."""
    customer_name: str
    address: str
    preferred_start_date: Optional[date] = None
    service_type: Optional[str] = None
    notes: Optional[str] = None

    @field_validator("address")
    @classmethod
    def normalize_address(cls, value: str) -> str:
        return _check_address(value)


class Booking(BaseModel):
    """A persisted booking as held by the booking store."""

    id: str
    customer_name: str = ""
    address: str
    latitude: float
    longitude: float
    booking_date: date
    booking_time: time
    service_type: str = "standard"
    is_anchor: bool = False
    distance_from_base: float
    travel_time_from_base: int
    distance_from_anchor: Optional[float] = None
    travel_time_from_anchor: Optional[int] = None
    status: BookingStatus = BookingStatus.CONFIRMED
    customer_phone: Optional[str] = None
    customer_email: Optional[str] = None
    notes: Optional[str] = None
    created_at: datetime = Field(default_factory=lambda: datetime.now(timezone.utc))

    @property
    def location(self) -> ResolvedLocation:
        return ResolvedLocation(
            latitude=self.latitude,
            longitude=self.longitude,
            formatted_address=self.address,
        )
