"""Service-area and same-day route proximity checks shared by every scheduler path."""

from dataclasses import dataclass

from anchor_scheduler.config import AppConfig
from anchor_scheduler.schemas.booking_schema import Booking
from anchor_scheduler.schemas.location_schema import DistanceResult, ResolvedLocation
from anchor_scheduler.tools.distance_oracle import DistanceOracle


@dataclass(frozen=True)
class RadiusCheck:
    passed: bool
    travel: DistanceResult


@dataclass(frozen=True)
class AnchorCheck:
    passed: bool
    travel: DistanceResult
    anchor_address: str
    within_distance: bool
    within_time: bool


def check_service_radius(
    oracle: DistanceOracle, location: ResolvedLocation, config: AppConfig
) -> RadiusCheck:
    travel = oracle.distance_from_base(location, config.base)
    return RadiusCheck(
        passed=travel.distance_miles <= config.route.max_service_radius_miles,
        travel=travel,
    )


def check_anchor_proximity(
    oracle: DistanceOracle, location: ResolvedLocation, anchor: Booking, config: AppConfig
) -> AnchorCheck:
    """Either limit alone is enough to fail: the candidate must be within both."""
    travel = oracle.distance_between(anchor.location, location)
    within_distance = travel.distance_miles <= config.route.max_distance_from_anchor_miles
    within_time = travel.duration_minutes <= config.route.max_travel_time_from_anchor_minutes
    return AnchorCheck(
        passed=within_distance and within_time,
        travel=travel,
        anchor_address=anchor.address,
        within_distance=within_distance,
        within_time=within_time,
    )
