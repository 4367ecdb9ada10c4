"""Exceptions raised by the scheduling engine and its collaborators.

Policy rejections (day full, too far from anchor, ...) are never raised;
they are returned as verdicts. These exceptions cover resolution and
storage failures only.
"""


class SchedulingError(Exception):
    """Base class for failures that prevent a scheduling decision."""


class AddressNotFoundError(SchedulingError):
    """Raised when the geocoder returns no candidate for an address."""

    def __init__(self, address: str) -> None:
        self.address = address
        super().__init__(
            f"Unable to find address: {address}. Please check the address and try again."
        )


class GeocoderUnavailableError(SchedulingError):
    """Raised when the geocoding provider cannot be reached or errors out."""


class BookingStoreError(SchedulingError):
    """Raised when the booking store cannot complete an operation."""


class BookingNotFoundError(BookingStoreError):
    """Raised when a booking id does not exist in the active table."""

    def __init__(self, booking_id: str) -> None:
        self.booking_id = booking_id
        super().__init__(f"Booking {booking_id} not found.")
