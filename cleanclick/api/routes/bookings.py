"""
API routes for bookings.
"""
from typing import Any, Optional

from fastapi import APIRouter, Query, status

from cleanclick.api.deps import CallerId, NowDep, RepositoryDep
from cleanclick.booking_models import Booking, BookingCreate, BookingSummaryPublic
from cleanclick.core.config import settings
from cleanclick.errors import InvalidInputError, NotFoundError
from cleanclick.scheduling.booking import booking_summary, cancel_booking, create_booking

router = APIRouter(prefix="/bookings", tags=["bookings"])


@router.get("", response_model=list[Booking])
def list_bookings(
    repository: RepositoryDep,
    cleaner_id: Optional[str] = Query(None, alias="cleanerId"),
) -> Any:
    """
    Get all bookings of a cleaner, ordered by date.
    """
    if not cleaner_id:
        raise InvalidInputError("cleanerId is required")
    return repository.list_bookings(cleaner_id)


@router.post("", response_model=Booking, status_code=status.HTTP_201_CREATED)
def create_booking_route(
    booking_in: BookingCreate,
    repository: RepositoryDep,
    now: NowDep,
) -> Any:
    """
    Create a booking. The price is computed server-side and the slot is
    re-checked at write time; 409 means someone else got it first.
    """
    return create_booking(
        repository,
        booking_in,
        now,
        enforce_schedule=settings.ENFORCE_SCHEDULE_ON_BOOKING,
    )


@router.delete("/{booking_id}", response_model=Booking)
def cancel_booking_route(
    booking_id: str,
    caller_id: CallerId,
    repository: RepositoryDep,
) -> Any:
    """
    Cancel a booking (set status to cancelled). Owner cleaner only.
    """
    return cancel_booking(repository, caller_id, booking_id)


@router.get("/{booking_id}/summary", response_model=BookingSummaryPublic)
def get_booking_summary(booking_id: str, repository: RepositoryDep) -> Any:
    """
    Plain-text summary for the SMS / Messenger hand-off.
    """
    booking = repository.get_booking(booking_id)
    if booking is None:
        raise NotFoundError("Booking not found")
    return BookingSummaryPublic(booking_id=booking.id, text=booking_summary(booking))
