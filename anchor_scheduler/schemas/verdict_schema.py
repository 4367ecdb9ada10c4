"""Verdict, suggestion and overview models returned by the scheduling engine."""

from datetime import date, time
from enum import Enum
from typing import Optional

from pydantic import BaseModel, Field

from anchor_scheduler.schemas.booking_schema import Booking
from anchor_scheduler.schemas.location_schema import DistanceResult, ResolvedLocation


class VerdictReason(str, Enum):
    """Machine-readable reason attached to every verdict."""
    # Accepted
    ANCHOR_BOOKING = "anchor_booking"
    NO_ANCHOR_FOUND = "no_anchor_found"
    VALID_BOOKING = "valid_booking"
    SCHEDULED = "scheduled"
    # Policy rejections
    NON_WORKING_DAY = "non_working_day"
    OUTSIDE_SERVICE_AREA = "outside_service_area"
    DAY_FULL = "day_full"
    TOO_FAR_FROM_ANCHOR = "too_far_from_anchor"
    TIME_CONFLICT = "time_conflict"
    NO_SLOT_AVAILABLE = "no_slot_available"
    # Resolution failures
    VALIDATION_ERROR = "validation_error"
    AUTO_SCHEDULE_ERROR = "auto_schedule_error"


class AlternateDate(BaseModel):
    """A better-fitting date proposed after a capacity or route rejection."""
    date: date
    reason: str


class TimeConflict(BaseModel):
    """An existing booking that sits too close to the requested time."""
    time: time
    customer_name: Optional[str] = None
    minutes_apart: int


class ValidationVerdict(BaseModel):
    """Outcome of validating a single booking request."""

    valid: bool
    reason: VerdictReason
    message: str
    is_anchor: Optional[bool] = None
    location: Optional[ResolvedLocation] = None
    distance_from_base: Optional[float] = None
    travel_time_from_base: Optional[int] = None
    distance_from_anchor: Optional[float] = None
    travel_time_from_anchor: Optional[int] = None
    anchor_address: Optional[str] = None
    alternate_date: Optional[AlternateDate] = None
    next_working_date: Optional[date] = None
    conflicts: list[TimeConflict] = Field(default_factory=list)
    suggested_times: list[str] = Field(default_factory=list)


class SchedulingResult(BaseModel):
    """Outcome of an auto-schedule search."""

    scheduled: bool
    reason: VerdictReason
    message: str
    customer_name: Optional[str] = None
    booking_date: Optional[date] = None
    booking_time: Optional[time] = None
    is_anchor: Optional[bool] = None
    location: Optional[ResolvedLocation] = None
    distance_from_base: Optional[float] = None
    travel_time_from_base: Optional[int] = None
    distance_from_anchor: Optional[float] = None
    travel_time_from_anchor: Optional[int] = None
    anchor_address: Optional[str] = None


class DayStatistics(BaseModel):
    """Capacity and anchor summary for one date."""
    date: date
    booking_count: int
    capacity: int
    is_full: bool
    has_anchor: bool
    anchor_address: Optional[str] = None
    bookings: list[Booking] = Field(default_factory=list)


class RouteStop(BaseModel):
    """A booking in a day's route with the leg driven to reach it."""
    booking: Booking
    travel_from_previous: Optional[DistanceResult] = None


class DayOverview(BaseModel):
    date: date
    label: str
    is_working_day: bool
    booking_count: int
    capacity: int
    is_full: bool
    has_anchor: bool
    anchor_address: Optional[str] = None
    stops: list[RouteStop] = Field(default_factory=list)


class WeekOverview(BaseModel):
    """Monday-to-Sunday calendar view."""
    week_start: date
    week_end: date
    days: list[DayOverview]


class BookingOutcome(BaseModel):
    """Result of a validate-then-persist request."""
    success: bool
    message: str
    booking: Optional[Booking] = None
    validation: ValidationVerdict
