"""Shared test fixtures and helpers."""

from datetime import date, datetime, time, timedelta, timezone
from typing import Optional

import pytest

from anchor_scheduler.config import (
    AppConfig,
    BaseLocationConfig,
    CalendarConfig,
    GeocoderConfig,
    RouteConfig,
)
from anchor_scheduler.exceptions import GeocoderUnavailableError
from anchor_scheduler.schemas.booking_schema import Booking
from anchor_scheduler.schemas.location_schema import DistanceResult, ResolvedLocation
from anchor_scheduler.tools.booking_store import InMemoryBookingStore
from anchor_scheduler.tools.distance_oracle import DistanceOracle
from anchor_scheduler.tools.geocoder import StaticGeocoder

BASE_NAME = "Lowell, Massachusetts"
BASE_LAT = 42.6334
BASE_LNG = -71.3162

# Week of Monday 2025-03-17
MONDAY = date(2025, 3, 17)
TUESDAY = date(2025, 3, 18)
WEDNESDAY = date(2025, 3, 19)
THURSDAY = date(2025, 3, 20)
FRIDAY = date(2025, 3, 21)
SATURDAY = date(2025, 3, 22)
SUNDAY = date(2025, 3, 23)
NEXT_MONDAY = date(2025, 3, 24)

# Points due north of the base. One degree of latitude is ~86.4 road miles,
# so these sit at roughly 4.3, 6.9, 13.0, 43.2 and 86.4 miles from base.
ADDRESSES: dict[str, tuple[float, float]] = {
    "1 Near St, Chelmsford, MA": (BASE_LAT + 0.05, BASE_LNG),
    "2 Close Rd, Chelmsford, MA": (BASE_LAT + 0.08, BASE_LNG),
    "3 Middle Ave, Nashua, NH": (BASE_LAT + 0.15, BASE_LNG),
    "4 Far Way, Manchester, NH": (BASE_LAT + 0.50, BASE_LNG),
    "5 Remote Ln, Concord, NH": (BASE_LAT + 1.00, BASE_LNG),
}
NEAR = "1 Near St, Chelmsford, MA"
CLOSE = "2 Close Rd, Chelmsford, MA"
MIDDLE = "3 Middle Ave, Nashua, NH"
FAR = "4 Far Way, Manchester, NH"
REMOTE = "5 Remote Ln, Concord, NH"


def make_config(**calendar_overrides) -> AppConfig:
    """Build a config with the standard thresholds, independent of the environment."""
    calendar = dict(
        max_bookings_per_day=3,
        work_start_hour=8,
        work_end_hour=18,
        working_days=(0, 1, 2, 3, 4),
        default_time_slots=("08:00", "11:30", "15:00"),
        max_days_to_suggest=14,
        min_booking_gap_minutes=240,
    )
    calendar.update(calendar_overrides)
    return AppConfig(
        base=BaseLocationConfig(name=BASE_NAME, latitude=BASE_LAT, longitude=BASE_LNG),
        route=RouteConfig(
            max_service_radius_miles=70.0,
            max_distance_from_anchor_miles=15.0,
            max_travel_time_from_anchor_minutes=30,
        ),
        calendar=CalendarConfig(**calendar),
        geocoder=GeocoderConfig(),
    )


class TableDistanceOracle(DistanceOracle):
    """Distance oracle with fixed answers for chosen address pairs.

    Pairs are unordered and keyed by formatted address (the base is keyed
    by its configured name). Unlisted pairs fall back to the haversine estimate.
    """

    def __init__(self, geocoder, table: Optional[dict[tuple[str, str], tuple[float, int]]] = None):
        super().__init__(geocoder)
        self.table = {
            frozenset(pair): DistanceResult(distance_miles=miles, duration_minutes=minutes)
            for pair, (miles, minutes) in (table or {}).items()
        }
        self.calls = 0

    def distance_between(self, origin: ResolvedLocation, destination: ResolvedLocation) -> DistanceResult:
        self.calls += 1
        key = frozenset((origin.formatted_address, destination.formatted_address))
        if key in self.table:
            return self.table[key]
        return super().distance_between(origin, destination)


class FailingOracle(DistanceOracle):
    """Oracle whose provider is down for every pair."""

    def distance_between(self, origin: ResolvedLocation, destination: ResolvedLocation) -> DistanceResult:
        raise GeocoderUnavailableError("Geocoding service unavailable")


class UnreachableStore(InMemoryBookingStore):
    """Store whose database connection is down for every read."""

    def __init__(self, error: Optional[Exception] = None) -> None:
        super().__init__()
        self.error = error or ConnectionError("database unreachable")

    def list_bookings_for_date(self, day: date) -> list[Booking]:
        raise self.error

    def list_bookings_for_range(self, start: date, end: date) -> list[Booking]:
        raise self.error


@pytest.fixture
def config():
    return make_config()


@pytest.fixture
def geocoder():
    return StaticGeocoder(ADDRESSES)


@pytest.fixture
def oracle(geocoder):
    return DistanceOracle(geocoder)


@pytest.fixture
def store():
    return InMemoryBookingStore()


def make_booking(
    booking_id: str,
    address: str = NEAR,
    booking_date: date = MONDAY,
    booking_time: str = "08:00",
    is_anchor: bool = False,
    created_offset_min: int = 0,
    customer_name: str = "",
    coords: Optional[tuple[float, float]] = None,
) -> Booking:
    """Helper to create a Booking at one of the known ADDRESSES."""
    lat, lng = coords or ADDRESSES[address]
    hour, minute = (int(part) for part in booking_time.split(":"))
    return Booking(
        id=booking_id,
        customer_name=customer_name,
        address=address,
        latitude=lat,
        longitude=lng,
        booking_date=booking_date,
        booking_time=time(hour, minute),
        is_anchor=is_anchor,
        distance_from_base=5.0,
        travel_time_from_base=9,
        created_at=datetime(2025, 3, 1, 9, 0, tzinfo=timezone.utc) + timedelta(minutes=created_offset_min),
    )


def fill_day(store: InMemoryBookingStore, day: date, address: str = NEAR, count: int = 3) -> None:
    """Put ``count`` bookings on ``day``, the first one flagged as anchor."""
    times = ["08:00", "12:00", "16:00", "17:00"]
    for i in range(count):
        store.insert_booking(make_booking(
            f"{day.isoformat()}-{i}",
            address=address,
            booking_date=day,
            booking_time=times[i],
            is_anchor=i == 0,
            created_offset_min=i,
        ))
