"""
Centralized configuration with environment variable overrides.

All route thresholds, calendar policy, and geocoder settings are
configurable here. Nothing is hardcoded in the scheduling logic.
"""

import logging
import os
from dataclasses import dataclass, field
from datetime import datetime

from dotenv import load_dotenv

from anchor_scheduler.logging_context import install_request_id_filter

load_dotenv()

logger = logging.getLogger(__name__)

LOG_FORMAT = "%(asctime)s [%(name)s] [%(request_id)s] %(levelname)s: %(message)s"


def _safe_int(env_var: str, default: str) -> int:
    """Parse an integer from an env var with a clear error on bad values."""
    raw = os.getenv(env_var, default)
    try:
        return int(raw)
    except (ValueError, TypeError):
        raise ValueError(
            f"Invalid integer for {env_var}: {raw!r}"
        ) from None


def _safe_float(env_var: str, default: str) -> float:
    """Parse a float from an env var with a clear error on bad values."""
    raw = os.getenv(env_var, default)
    try:
        return float(raw)
    except (ValueError, TypeError):
        raise ValueError(
            f"Invalid float for {env_var}: {raw!r}"
        ) from None


def _safe_int_list(env_var: str, default: str) -> tuple[int, ...]:
    """Parse a comma-separated list of integers, e.g. ``"0,1,2,3,4"``."""
    raw = os.getenv(env_var, default)
    try:
        return tuple(int(part) for part in raw.split(",") if part.strip())
    except (ValueError, TypeError, AttributeError):
        raise ValueError(
            f"Invalid integer list for {env_var}: {raw!r}"
        ) from None


def _str_list(env_var: str, default: str) -> tuple[str, ...]:
    raw = os.getenv(env_var, default)
    return tuple(part.strip() for part in raw.split(",") if part.strip())


@dataclass(frozen=True)
class BaseLocationConfig:
    """The depot every job is measured from."""

    name: str = os.getenv("BASE_LOCATION_NAME", "Lowell, Massachusetts")
    latitude: float = _safe_float("BASE_LATITUDE", "42.6334")
    longitude: float = _safe_float("BASE_LONGITUDE", "-71.3162")


@dataclass(frozen=True)
class RouteConfig:
    """Distance thresholds for the service area and same-day routing."""

    max_service_radius_miles: float = _safe_float("MAX_SERVICE_RADIUS_MILES", "70")
    max_distance_from_anchor_miles: float = _safe_float("MAX_DISTANCE_FROM_ANCHOR_MILES", "15")
    max_travel_time_from_anchor_minutes: int = _safe_int(
        "MAX_TRAVEL_TIME_FROM_ANCHOR_MINUTES", "30"
    )


@dataclass(frozen=True)
class CalendarConfig:
    """Capacity, working hours, and slot policy."""

    max_bookings_per_day: int = _safe_int("MAX_BOOKINGS_PER_DAY", "3")
    work_start_hour: int = _safe_int("WORK_START_HOUR", "8")
    work_end_hour: int = _safe_int("WORK_END_HOUR", "18")
    # Python weekday numbers: 0=Monday ... 6=Sunday. Empty means every day.
    working_days: tuple[int, ...] = _safe_int_list("WORKING_DAYS", "0,1,2,3,4")
    default_time_slots: tuple[str, ...] = _str_list("DEFAULT_TIME_SLOTS", "08:00,11:30,15:00")
    max_days_to_suggest: int = _safe_int("MAX_DAYS_TO_SUGGEST", "14")
    # 3 hours of service plus 1 hour of travel buffer
    min_booking_gap_minutes: int = _safe_int("MIN_BOOKING_GAP_MINUTES", "240")


@dataclass(frozen=True)
class GeocoderConfig:
    """External geocoding provider settings."""

    nominatim_url: str = os.getenv("NOMINATIM_URL", "https://nominatim.openstreetmap.org")
    user_agent: str = os.getenv("GEOCODER_USER_AGENT", "AnchorScheduler/1.0")
    timeout_sec: float = _safe_float("GEOCODER_TIMEOUT_SEC", "10.0")
    cache_size: int = _safe_int("GEOCODE_CACHE_SIZE", "1024")


@dataclass(frozen=True)
class AppConfig:
    """Root configuration aggregating all sub-configs."""

    base: BaseLocationConfig = field(default_factory=BaseLocationConfig)
    route: RouteConfig = field(default_factory=RouteConfig)
    calendar: CalendarConfig = field(default_factory=CalendarConfig)
    geocoder: GeocoderConfig = field(default_factory=GeocoderConfig)
    log_level: str = os.getenv("LOG_LEVEL", "INFO")
    service_name: str = os.getenv("SERVICE_NAME", "anchor-scheduler")


def _validate_config(config: AppConfig) -> None:
    """Validate configuration values are within acceptable ranges."""
    if not -90.0 <= config.base.latitude <= 90.0:
        raise ValueError(f"BASE_LATITUDE must be between -90 and 90, got {config.base.latitude}")
    if not -180.0 <= config.base.longitude <= 180.0:
        raise ValueError(
            f"BASE_LONGITUDE must be between -180 and 180, got {config.base.longitude}"
        )

    for name, value in [
        ("MAX_SERVICE_RADIUS_MILES", config.route.max_service_radius_miles),
        ("MAX_DISTANCE_FROM_ANCHOR_MILES", config.route.max_distance_from_anchor_miles),
        ("MAX_TRAVEL_TIME_FROM_ANCHOR_MINUTES", config.route.max_travel_time_from_anchor_minutes),
    ]:
        if value <= 0:
            raise ValueError(f"{name} must be > 0, got {value}")

    cal = config.calendar
    if cal.max_bookings_per_day < 1:
        raise ValueError(f"MAX_BOOKINGS_PER_DAY must be >= 1, got {cal.max_bookings_per_day}")
    if not 0 <= cal.work_start_hour < cal.work_end_hour <= 24:
        raise ValueError(
            "WORK_START_HOUR must be before WORK_END_HOUR within 0-24, "
            f"got {cal.work_start_hour}-{cal.work_end_hour}"
        )
    bad_days = [d for d in cal.working_days if not 0 <= d <= 6]
    if bad_days:
        raise ValueError(f"WORKING_DAYS must be weekday numbers 0-6, got {bad_days}")
    if not cal.default_time_slots:
        raise ValueError("DEFAULT_TIME_SLOTS must name at least one time")
    for slot in cal.default_time_slots:
        try:
            datetime.strptime(slot, "%H:%M")
        except ValueError:
            raise ValueError(f"DEFAULT_TIME_SLOTS entry is not HH:MM: {slot!r}") from None
    if cal.max_days_to_suggest < 1:
        raise ValueError(f"MAX_DAYS_TO_SUGGEST must be >= 1, got {cal.max_days_to_suggest}")
    if cal.min_booking_gap_minutes < 1:
        raise ValueError(
            f"MIN_BOOKING_GAP_MINUTES must be >= 1, got {cal.min_booking_gap_minutes}"
        )

    if config.geocoder.timeout_sec <= 0:
        raise ValueError(f"GEOCODER_TIMEOUT_SEC must be > 0, got {config.geocoder.timeout_sec}")
    if config.geocoder.cache_size < 0:
        raise ValueError(f"GEOCODE_CACHE_SIZE must be >= 0, got {config.geocoder.cache_size}")


def load_config() -> AppConfig:
    """Load and validate application configuration."""
    config = AppConfig()
    _validate_config(config)
    logging.basicConfig(
        level=getattr(logging, config.log_level.upper(), logging.INFO),
        format=LOG_FORMAT,
        datefmt="%Y-%m-%d %H:%M:%S",
    )
    install_request_id_filter(logging.getLogger())
    logger.info("Configuration loaded for base '%s'", config.base.name)
    return config


# Singleton instance
settings = load_config()
