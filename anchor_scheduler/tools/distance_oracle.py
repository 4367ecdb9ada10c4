"""
Distance oracle: address resolution plus road distance and drive time estimates.

Road distance is the great-circle separation inflated by a fixed
indirection factor; drive time assumes a constant average speed.
"""

import math
import re
from typing import Optional

from anchor_scheduler.config import BaseLocationConfig, settings
from anchor_scheduler.exceptions import AddressNotFoundError
from anchor_scheduler.logging_context import get_request_logger
from anchor_scheduler.schemas.location_schema import DistanceResult, ResolvedLocation
from anchor_scheduler.tools.geocoder import Geocoder

logger = get_request_logger(__name__)

EARTH_RADIUS_MILES = 3959.0
ROAD_INDIRECTION_FACTOR = 1.25
AVERAGE_SPEED_MPH = 35.0

_COORDINATES_RE = re.compile(r"^\s*(-?\d+(?:\.\d+)?)\s*,\s*(-?\d+(?:\.\d+)?)\s*$")


def haversine_miles(lat1: float, lng1: float, lat2: float, lng2: float) -> float:
    """Great-circle distance in miles between two coordinates."""
    d_lat = math.radians(lat2 - lat1)
    d_lng = math.radians(lng2 - lng1)
    a = (
        math.sin(d_lat / 2) ** 2
        + math.cos(math.radians(lat1)) * math.cos(math.radians(lat2)) * math.sin(d_lng / 2) ** 2
    )
    return EARTH_RADIUS_MILES * 2 * math.atan2(math.sqrt(a), math.sqrt(1 - a))


def round_tenth(value: float) -> float:
    """Round half up to one decimal place."""
    return math.floor(value * 10 + 0.5) / 10


def parse_coordinates(value: str) -> Optional[ResolvedLocation]:
    """Turn a ``"lat,lng"`` string into a location, or ``None`` if it is not one."""
    match = _COORDINATES_RE.match(value)
    if not match:
        return None
    lat, lng = float(match.group(1)), float(match.group(2))
    if not (-90.0 <= lat <= 90.0 and -180.0 <= lng <= 180.0):
        return None
    return ResolvedLocation(latitude=lat, longitude=lng, formatted_address=f"{lat},{lng}")


class DistanceOracle:
    """Resolves addresses and estimates travel between resolved locations."""

    def __init__(self, geocoder: Geocoder) -> None:
        self.geocoder = geocoder

    def resolve(self, address: str) -> ResolvedLocation:
        """
        Resolve an address to coordinates.

        Raises:
            AddressNotFoundError: If the geocoder has no candidate.
            GeocoderUnavailableError: If the geocoder cannot be reached.
        """
        coordinates = parse_coordinates(address)
        if coordinates is not None:
            return coordinates

        location = self.geocoder.geocode(address)
        if location is None:
            raise AddressNotFoundError(address)
        logger.debug("Resolved %r -> (%s, %s)", address, location.latitude, location.longitude)
        return location

    def distance_between(self, origin: ResolvedLocation, destination: ResolvedLocation) -> DistanceResult:
        straight_line = haversine_miles(
            origin.latitude, origin.longitude, destination.latitude, destination.longitude
        )
        road_miles = straight_line * ROAD_INDIRECTION_FACTOR
        return DistanceResult(
            distance_miles=round_tenth(road_miles),
            duration_minutes=math.ceil(road_miles / AVERAGE_SPEED_MPH * 60),
        )

    def distance_between_addresses(self, origin: str, destination: str) -> DistanceResult:
        return self.distance_between(self.resolve(origin), self.resolve(destination))

    def distance_from_base(
        self, location: ResolvedLocation, base: Optional[BaseLocationConfig] = None
    ) -> DistanceResult:
        base = base or settings.base
        origin = ResolvedLocation(
            latitude=base.latitude, longitude=base.longitude, formatted_address=base.name
        )
        return self.distance_between(origin, location)
