"""
Booking validator built on an ordered gate pipeline.

Every gate either passes (returns None) or ends validation with a verdict.
The first gate to return a verdict wins; later gates never run. The order
of ``BookingValidator.gates`` is therefore the precedence of rejection
reasons:

1. working day        -> non_working_day
2. geocode            -> validation_error
3. service radius     -> outside_service_area
4. capacity           -> day_full
5. anchor assignment  -> anchor_booking (accept)
6. missing anchor     -> no_anchor_found (accept)
7. anchor proximity   -> too_far_from_anchor
8. time slot          -> time_conflict (only when a time was requested)

Passing every gate accepts the booking as a follower of the day's anchor.
The validator is read-only; persisting an accepted booking is the
caller's job and must be serialized per date.
"""

from dataclasses import dataclass
from typing import Callable, Optional

from anchor_scheduler.config import AppConfig, settings
from anchor_scheduler.exceptions import AddressNotFoundError, SchedulingError
from anchor_scheduler.logging_context import get_request_logger
from anchor_scheduler.schemas.booking_schema import BookingRequest
from anchor_scheduler.schemas.location_schema import DistanceResult, ResolvedLocation
from anchor_scheduler.schemas.verdict_schema import ValidationVerdict, VerdictReason
from anchor_scheduler.scheduling.alternate_dates import AlternateDateFinder
from anchor_scheduler.scheduling.calendar_rules import is_working_day, shift_to_working_day
from anchor_scheduler.scheduling.day_state import DayState, load_day_state
from anchor_scheduler.scheduling.proximity import AnchorCheck, check_anchor_proximity, check_service_radius
from anchor_scheduler.scheduling.time_slots import find_open_slots, find_time_conflicts
from anchor_scheduler.tools.booking_store import BookingStore
from anchor_scheduler.tools.distance_oracle import DistanceOracle
from anchor_scheduler.utils import format_time

logger = get_request_logger(__name__)


@dataclass
class ValidationContext:
    """Facts accumulated as the request moves through the gates."""
    request: BookingRequest
    location: Optional[ResolvedLocation] = None
    base_travel: Optional[DistanceResult] = None
    day: Optional[DayState] = None
    anchor_check: Optional[AnchorCheck] = None


Gate = Callable[[ValidationContext], Optional[ValidationVerdict]]


class BookingValidator:
    """Decides whether a booking request may be placed on its requested date."""

    def __init__(
        self,
        store: BookingStore,
        oracle: DistanceOracle,
        config: Optional[AppConfig] = None,
        finder: Optional[AlternateDateFinder] = None,
    ) -> None:
        self.store = store
        self.oracle = oracle
        self.config = config or settings
        self.finder = finder or AlternateDateFinder(store, oracle, self.config)
        self.gates: list[Gate] = [
            self._working_day_gate,
            self._geocode_gate,
            self._service_radius_gate,
            self._capacity_gate,
            self._anchor_assignment_gate,
            self._missing_anchor_gate,
            self._anchor_proximity_gate,
            self._time_slot_gate,
        ]

    def validate(self, request: BookingRequest) -> ValidationVerdict:
        """Run the gates in order and return the first terminal verdict."""
        ctx = ValidationContext(request=request)
        try:
            for gate in self.gates:
                verdict = gate(ctx)
                if verdict is not None:
                    return self._log(request, verdict)
            return self._log(request, self._accept_follower(ctx))
        except (SchedulingError, OSError) as exc:
            logger.warning("Validation of %r on %s failed: %s",
                           request.address, request.booking_date, exc)
            return ValidationVerdict(
                valid=False,
                reason=VerdictReason.VALIDATION_ERROR,
                message=f"Error validating booking: {exc}",
            )

    # --- gates ---

    def _working_day_gate(self, ctx: ValidationContext) -> Optional[ValidationVerdict]:
        day = ctx.request.booking_date
        working_days = self.config.calendar.working_days
        if is_working_day(day, working_days):
            return None
        return ValidationVerdict(
            valid=False,
            reason=VerdictReason.NON_WORKING_DAY,
            message=f"We do not operate on {day.strftime('%A')}s. Please choose a working day.",
            next_working_date=shift_to_working_day(day, working_days, include_start=False),
        )

    def _geocode_gate(self, ctx: ValidationContext) -> Optional[ValidationVerdict]:
        try:
            ctx.location = self.oracle.resolve(ctx.request.address)
        except AddressNotFoundError as exc:
            return ValidationVerdict(
                valid=False,
                reason=VerdictReason.VALIDATION_ERROR,
                message=f"Error validating booking: {exc}",
            )
        return None

    def _service_radius_gate(self, ctx: ValidationContext) -> Optional[ValidationVerdict]:
        check = check_service_radius(self.oracle, ctx.location, self.config)
        ctx.base_travel = check.travel
        if check.passed:
            return None
        return ValidationVerdict(
            valid=False,
            reason=VerdictReason.OUTSIDE_SERVICE_AREA,
            message=(
                f"This location is {check.travel.distance_miles} miles from "
                f"{self.config.base.name}, which exceeds our "
                f"{self.config.route.max_service_radius_miles:g}-mile service area."
            ),
            **self._base_fields(ctx),
        )

    def _capacity_gate(self, ctx: ValidationContext) -> Optional[ValidationVerdict]:
        ctx.day = load_day_state(
            self.store, ctx.request.booking_date, self.config.calendar.max_bookings_per_day
        )
        if not ctx.day.is_full:
            return None
        return ValidationVerdict(
            valid=False,
            reason=VerdictReason.DAY_FULL,
            message=(
                f"This day already has {ctx.day.count} bookings (maximum capacity). "
                "Try another date."
            ),
            alternate_date=self.finder.suggest(ctx.request.booking_date, ctx.location),
            **self._base_fields(ctx),
        )

    def _anchor_assignment_gate(self, ctx: ValidationContext) -> Optional[ValidationVerdict]:
        if not ctx.day.is_empty:
            return None
        return ValidationVerdict(
            valid=True,
            reason=VerdictReason.ANCHOR_BOOKING,
            message="Perfect! This will be the anchor booking for this day.",
            is_anchor=True,
            **self._base_fields(ctx),
        )

    def _missing_anchor_gate(self, ctx: ValidationContext) -> Optional[ValidationVerdict]:
        if ctx.day.anchor is not None:
            return None
        logger.warning("Date %s has %d bookings but no anchor; skipping route check",
                       ctx.day.day, ctx.day.count)
        return ValidationVerdict(
            valid=True,
            reason=VerdictReason.NO_ANCHOR_FOUND,
            message="Good to book.",
            is_anchor=False,
            **self._base_fields(ctx),
        )

    def _anchor_proximity_gate(self, ctx: ValidationContext) -> Optional[ValidationVerdict]:
        check = check_anchor_proximity(self.oracle, ctx.location, ctx.day.anchor, self.config)
        ctx.anchor_check = check
        if check.passed:
            return None
        route = self.config.route
        return ValidationVerdict(
            valid=False,
            reason=VerdictReason.TOO_FAR_FROM_ANCHOR,
            message=(
                f"This location is {check.travel.distance_miles} miles "
                f"({check.travel.duration_minutes} mins) from the day's route "
                f"(anchor: {check.anchor_address}). Maximum allowed is "
                f"{route.max_distance_from_anchor_miles:g} miles or "
                f"{route.max_travel_time_from_anchor_minutes} minutes."
            ),
            alternate_date=self.finder.suggest(ctx.request.booking_date, ctx.location),
            **self._base_fields(ctx),
            **self._anchor_fields(ctx),
        )

    def _time_slot_gate(self, ctx: ValidationContext) -> Optional[ValidationVerdict]:
        requested = ctx.request.booking_time
        if requested is None:
            return None
        cal = self.config.calendar
        conflicts = find_time_conflicts(ctx.day.bookings, requested, cal.min_booking_gap_minutes)
        if not conflicts:
            return None
        return ValidationVerdict(
            valid=False,
            reason=VerdictReason.TIME_CONFLICT,
            message=(
                f"Time conflict! Each booking needs {cal.min_booking_gap_minutes} minutes "
                f"including travel buffer. Existing booking at "
                f"{format_time(conflicts[0].time)} is too close."
            ),
            conflicts=conflicts,
            suggested_times=find_open_slots(
                ctx.day.booked_times, cal.work_start_hour, cal.work_end_hour,
                cal.min_booking_gap_minutes,
            ),
            **self._base_fields(ctx),
            **self._anchor_fields(ctx),
        )

    # --- helpers ---

    def _accept_follower(self, ctx: ValidationContext) -> ValidationVerdict:
        return ValidationVerdict(
            valid=True,
            reason=VerdictReason.VALID_BOOKING,
            message=(
                f"Great fit! This location is {ctx.anchor_check.travel.distance_miles} miles "
                "from the anchor booking."
            ),
            is_anchor=False,
            **self._base_fields(ctx),
            **self._anchor_fields(ctx),
        )

    @staticmethod
    def _base_fields(ctx: ValidationContext) -> dict:
        return {
            "location": ctx.location,
            "distance_from_base": ctx.base_travel.distance_miles,
            "travel_time_from_base": ctx.base_travel.duration_minutes,
        }

    @staticmethod
    def _anchor_fields(ctx: ValidationContext) -> dict:
        check = ctx.anchor_check
        return {
            "distance_from_anchor": check.travel.distance_miles,
            "travel_time_from_anchor": check.travel.duration_minutes,
            "anchor_address": check.anchor_address,
        }

    @staticmethod
    def _log(request: BookingRequest, verdict: ValidationVerdict) -> ValidationVerdict:
        if verdict.valid:
            logger.info("Accepted %r on %s (%s)",
                        request.address, request.booking_date, verdict.reason.value)
        else:
            logger.info("Rejected %r on %s (%s)",
                        request.address, request.booking_date, verdict.reason.value)
        return verdict
