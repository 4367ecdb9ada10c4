"""
Auto-scheduler: picks a date and a preferred time slot for an address.

Applies the same service-area, capacity and anchor rules as the
validator, but only ever proposes one of the configured default time
slots. Days where every preferred slot is taken are skipped.
"""

from datetime import date, timedelta
from typing import Callable, Optional

from anchor_scheduler.config import AppConfig, settings
from anchor_scheduler.exceptions import SchedulingError
from anchor_scheduler.logging_context import get_request_logger
from anchor_scheduler.schemas.booking_schema import AutoScheduleRequest
from anchor_scheduler.schemas.verdict_schema import SchedulingResult, VerdictReason
from anchor_scheduler.scheduling.calendar_rules import is_working_day, shift_to_working_day
from anchor_scheduler.scheduling.day_state import load_day_state
from anchor_scheduler.scheduling.proximity import check_anchor_proximity, check_service_radius
from anchor_scheduler.scheduling.time_slots import pick_preferred_slot
from anchor_scheduler.tools.booking_store import BookingStore
from anchor_scheduler.tools.distance_oracle import DistanceOracle

logger = get_request_logger(__name__)


class AutoScheduler:
    """Forward search over working days for the first date that fits the route."""

    def __init__(
        self,
        store: BookingStore,
        oracle: DistanceOracle,
        config: Optional[AppConfig] = None,
        today: Callable[[], date] = date.today,
    ) -> None:
        self.store = store
        self.oracle = oracle
        self.config = config or settings
        self._today = today

    def schedule_request(self, request: AutoScheduleRequest) -> SchedulingResult:
        return self.schedule(request.customer_name, request.address, request.preferred_start_date)

    def schedule(
        self,
        customer_name: str,
        address: str,
        preferred_start_date: Optional[date] = None,
    ) -> SchedulingResult:
        """
        Find the first working day with route fit and a free preferred slot.

        Returns:
            A scheduled result, or a terminal ``outside_service_area``,
            ``no_slot_available`` or ``auto_schedule_error`` result.
        """
        try:
            return self._search(customer_name, address, preferred_start_date)
        except (SchedulingError, OSError) as exc:
            logger.warning("Auto-schedule for %r failed: %s", address, exc)
            return SchedulingResult(
                scheduled=False,
                reason=VerdictReason.AUTO_SCHEDULE_ERROR,
                message=f"Error auto-scheduling booking: {exc}",
                customer_name=customer_name,
            )

    def start_date(self, preferred_start_date: Optional[date] = None) -> date:
        """Later of today and the preferred date, moved onto a working day."""
        today = self._today()
        baseline = max(today, preferred_start_date) if preferred_start_date else today
        return shift_to_working_day(baseline, self.config.calendar.working_days, include_start=True)

    def _search(
        self, customer_name: str, address: str, preferred_start_date: Optional[date]
    ) -> SchedulingResult:
        location = self.oracle.resolve(address)
        radius = check_service_radius(self.oracle, location, self.config)
        base_fields = {
            "customer_name": customer_name,
            "location": location,
            "distance_from_base": radius.travel.distance_miles,
            "travel_time_from_base": radius.travel.duration_minutes,
        }
        if not radius.passed:
            logger.info("Auto-schedule rejected %r: outside service area", address)
            return SchedulingResult(
                scheduled=False,
                reason=VerdictReason.OUTSIDE_SERVICE_AREA,
                message=(
                    f"This location is {radius.travel.distance_miles} miles from "
                    f"{self.config.base.name}, which exceeds our "
                    f"{self.config.route.max_service_radius_miles:g}-mile service area."
                ),
                **base_fields,
            )

        cal = self.config.calendar
        start = self.start_date(preferred_start_date)

        for offset in range(cal.max_days_to_suggest + 1):
            day = start + timedelta(days=offset)
            if not is_working_day(day, cal.working_days):
                continue

            state = load_day_state(self.store, day, cal.max_bookings_per_day)
            if state.is_full:
                continue

            anchor_check = None
            if not state.is_empty:
                anchor_check = check_anchor_proximity(
                    self.oracle, location, state.route_anchor, self.config
                )
                if not anchor_check.passed:
                    continue

            slot = pick_preferred_slot(state.booked_times, cal.default_time_slots)
            if slot is None:
                continue

            logger.info("Auto-scheduled %r on %s at %s (anchor=%s)",
                        address, day, slot, state.is_empty)
            if anchor_check is None:
                return SchedulingResult(
                    scheduled=True,
                    reason=VerdictReason.SCHEDULED,
                    message=f"Scheduled as the anchor for {day.isoformat()}.",
                    booking_date=day,
                    booking_time=slot,
                    is_anchor=True,
                    **base_fields,
                )
            return SchedulingResult(
                scheduled=True,
                reason=VerdictReason.SCHEDULED,
                message=(
                    f"Scheduled {anchor_check.travel.distance_miles} miles from anchor "
                    f"({anchor_check.anchor_address})."
                ),
                booking_date=day,
                booking_time=slot,
                is_anchor=False,
                distance_from_anchor=anchor_check.travel.distance_miles,
                travel_time_from_anchor=anchor_check.travel.duration_minutes,
                anchor_address=anchor_check.anchor_address,
                **base_fields,
            )

        logger.info("Auto-schedule found no slot for %r from %s", address, start)
        return SchedulingResult(
            scheduled=False,
            reason=VerdictReason.NO_SLOT_AVAILABLE,
            message=(
                f"Unable to auto-schedule within the next {cal.max_days_to_suggest} days. "
                "Consider widening the window."
            ),
            **base_fields,
        )
