"""
Alternate-date finder for capacity and route rejections.

Pass 1 looks for a best fit: an empty day, or a day with room whose anchor
is close enough to the candidate. Pass 2 settles for any working day with
room. Never used for service-area rejections, since no date changes the
distance from base.
"""

from datetime import date, timedelta
from typing import Iterator, Optional

from anchor_scheduler.config import AppConfig, settings
from anchor_scheduler.exceptions import SchedulingError
from anchor_scheduler.logging_context import get_request_logger
from anchor_scheduler.schemas.location_schema import ResolvedLocation
from anchor_scheduler.schemas.verdict_schema import AlternateDate
from anchor_scheduler.scheduling.calendar_rules import is_working_day
from anchor_scheduler.scheduling.day_state import DayState, load_day_state
from anchor_scheduler.scheduling.proximity import check_anchor_proximity
from anchor_scheduler.tools.booking_store import BookingStore
from anchor_scheduler.tools.distance_oracle import DistanceOracle

logger = get_request_logger(__name__)


class AlternateDateFinder:
    """Scans up to ``max_days_to_suggest`` days after a rejected date."""

    def __init__(
        self,
        store: BookingStore,
        oracle: DistanceOracle,
        config: Optional[AppConfig] = None,
    ) -> None:
        self.store = store
        self.oracle = oracle
        self.config = config or settings

    def suggest(self, requested_date: date, location: ResolvedLocation) -> Optional[AlternateDate]:
        """Return the best later date for ``location``, or ``None`` if the window is full."""
        try:
            return self._best_fit(requested_date, location) or self._any_availability(requested_date)
        except (SchedulingError, OSError) as exc:
            logger.warning("Alternate date search after %s failed: %s", requested_date, exc)
            return None

    def _candidate_days(self, requested_date: date) -> Iterator[DayState]:
        cal = self.config.calendar
        for offset in range(1, cal.max_days_to_suggest + 1):
            day = requested_date + timedelta(days=offset)
            if not is_working_day(day, cal.working_days):
                continue
            yield load_day_state(self.store, day, cal.max_bookings_per_day)

    def _best_fit(self, requested_date: date, location: ResolvedLocation) -> Optional[AlternateDate]:
        for state in self._candidate_days(requested_date):
            if state.is_empty:
                return AlternateDate(date=state.day, reason="Day is available (no bookings yet)")

            anchor = state.anchor
            if state.is_full or anchor is None:
                continue

            check = check_anchor_proximity(self.oracle, location, anchor, self.config)
            if check.passed:
                return AlternateDate(
                    date=state.day,
                    reason=(
                        f"Good fit with existing route "
                        f"({check.travel.distance_miles} miles from anchor)"
                    ),
                )
        return None

    def _any_availability(self, requested_date: date) -> Optional[AlternateDate]:
        for state in self._candidate_days(requested_date):
            if not state.is_full:
                return AlternateDate(date=state.day, reason="Day has availability")
        logger.info("No availability within %d days of %s",
                    self.config.calendar.max_days_to_suggest, requested_date)
        return None
