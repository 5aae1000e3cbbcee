from typing import Any, Optional, Protocol

from cleanclick.booking_models import Booking, BookingStatus, Cleaner


class Repository(Protocol):
    """
    Durable store for the ``cleaners`` and ``bookings`` record sets.

    ``insert_booking`` is the one write with a concurrency contract: it must
    reject, with ``ConflictError``, any booking whose (cleaner, date, block)
    is already held by a booking that is not cancelled, even when two
    requests race. Backend failures surface as ``StorageError``.
    """

    def get_cleaner(self, cleaner_id: str) -> Optional[Cleaner]: ...

    def list_cleaners(self) -> list[Cleaner]: ...

    def create_cleaner(self, cleaner: Cleaner) -> Cleaner:
        """Insert if absent; returns whatever profile ends up stored."""
        ...

    def update_cleaner(self, cleaner_id: str, patch: dict[str, Any]) -> Optional[Cleaner]: ...

    def get_booking(self, booking_id: str) -> Optional[Booking]: ...

    def list_bookings(self, cleaner_id: str) -> list[Booking]:
        """All bookings of a cleaner, oldest date first."""
        ...

    def active_bookings_for(self, cleaner_id: str, date: str) -> list[Booking]:
        """Non-cancelled bookings of a cleaner on one date."""
        ...

    def insert_booking(self, booking: Booking) -> Booking: ...

    def set_booking_status(
        self, booking_id: str, status: BookingStatus
    ) -> Optional[Booking]: ...


def booking_to_row(booking: Booking) -> dict[str, Any]:
    return booking.model_dump(mode="json")


def booking_sort_key(booking: Booking) -> tuple:
    return (booking.date, booking.created_at.isoformat())
