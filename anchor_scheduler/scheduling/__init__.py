from anchor_scheduler.scheduling.alternate_dates import AlternateDateFinder
from anchor_scheduler.scheduling.auto_scheduler import AutoScheduler
from anchor_scheduler.scheduling.booking_service import BookingService
from anchor_scheduler.scheduling.day_state import DayState, load_day_state
from anchor_scheduler.scheduling.validator import BookingValidator

__all__ = [
    "AlternateDateFinder",
    "AutoScheduler",
    "BookingService",
    "BookingValidator",
    "DayState",
    "load_day_state",
]
