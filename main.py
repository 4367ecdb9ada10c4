"""
Command-line entry point for the scheduling engine.

Bookings are read from a JSON file (a list of booking records) into an
in-memory store; addresses are geocoded with OpenStreetMap Nominatim.

Usage:
    python main.py validate --address "12 Main St, Nashua, NH" --date 2025-03-18 --time 11:30
    python main.py auto-schedule --name "Jo Client" --address "12 Main St, Nashua, NH"
    python main.py day --date 2025-03-18 --bookings bookings.json
    python main.py week --date 2025-03-18 --bookings bookings.json
"""

import argparse
import json
import logging
import sys
from pathlib import Path
from typing import Optional

from anchor_scheduler.config import settings
from anchor_scheduler.logging_context import new_request_id
from anchor_scheduler.schemas.booking_schema import AutoScheduleRequest, BookingRequest
from anchor_scheduler.scheduling import AutoScheduler, BookingService, BookingValidator
from anchor_scheduler.tools.booking_store import InMemoryBookingStore, load_bookings
from anchor_scheduler.tools.distance_oracle import DistanceOracle
from anchor_scheduler.tools.geocoder import LRUCache, NominatimGeocoder
from anchor_scheduler.utils import parse_date

logger = logging.getLogger(__name__)


def _load_store(path: Optional[str]) -> InMemoryBookingStore:
    if not path:
        return InMemoryBookingStore()
    bookings_file = Path(path)
    if not bookings_file.exists():
        logger.error("Bookings file not found: %s", bookings_file)
        sys.exit(1)
    return load_bookings(json.loads(bookings_file.read_text()))


def _build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        description="Validate and auto-schedule anchor-based service bookings."
    )
    parser.add_argument(
        "--bookings",
        type=str,
        default=None,
        help="Path to a JSON file of existing bookings (default: empty calendar).",
    )
    parser.add_argument("--verbose", action="store_true", help="Enable debug logging.")
    commands = parser.add_subparsers(dest="command", required=True)

    validate = commands.add_parser("validate", help="Validate a booking request.")
    validate.add_argument("--address", required=True)
    validate.add_argument("--date", required=True, help="YYYY-MM-DD")
    validate.add_argument("--time", default=None, help="HH:MM (optional)")

    auto = commands.add_parser("auto-schedule", help="Pick a date and time for an address.")
    auto.add_argument("--name", required=True)
    auto.add_argument("--address", required=True)
    auto.add_argument("--start", default=None, help="Earliest date, YYYY-MM-DD")

    day = commands.add_parser("day", help="Show capacity and anchor for a date.")
    day.add_argument("--date", required=True)

    week = commands.add_parser("week", help="Show the Monday-Sunday week containing a date.")
    week.add_argument("--date", required=True)
    return parser


def main() -> None:
    args = _build_parser().parse_args()
    if args.verbose:
        logging.getLogger().setLevel(logging.DEBUG)

    new_request_id()
    geocoder = NominatimGeocoder(settings.geocoder, cache=LRUCache(settings.geocoder.cache_size))
    oracle = DistanceOracle(geocoder)

    try:
        store = _load_store(args.bookings)
        if args.command == "validate":
            request = BookingRequest(
                address=args.address, booking_date=args.date, booking_time=args.time
            )
            result = BookingValidator(store, oracle).validate(request)
        elif args.command == "auto-schedule":
            request = AutoScheduleRequest(
                customer_name=args.name, address=args.address, preferred_start_date=args.start
            )
            result = AutoScheduler(store, oracle).schedule_request(request)
        elif args.command == "day":
            result = BookingService(store, oracle).date_statistics(parse_date(args.date))
        else:
            result = BookingService(store, oracle).week_overview(parse_date(args.date))
    except ValueError as exc:
        logger.error("Invalid input: %s", exc)
        sys.exit(2)
    finally:
        geocoder.close()

    print(result.model_dump_json(indent=2))


if __name__ == "__main__":
    main()
