"""
Booking transition: the only way a booking comes into existence.

The price is always recomputed here from the stored cleaner profile; any
price the wizard showed is just a preview. Availability is re-resolved at
write time and the insert itself is conditional on the slot being free, so
a customer who waited on the form too long gets ``ConflictError`` instead
of a double booking.
"""
import uuid
from datetime import datetime

from cleanclick.booking_models import (
    Booking,
    BookingCreate,
    BookingStatus,
    Frequency,
    ServiceType,
    TimeBlock,
)
from cleanclick.core.logging import get_logger
from cleanclick.errors import (
    ConflictError,
    InvalidInputError,
    NotFoundError,
    NotPricedError,
    UnauthorizedError,
)
from cleanclick.repositories.base import Repository
from cleanclick.scheduling.availability import BLOCK_WINDOWS, is_available
from cleanclick.scheduling.pricing import MAX_ROOMS, price, validate_house_size
from cleanclick.utils.dates import format_long_date, parse_iso_date

logger = get_logger(__name__)

FREQUENCY_LABELS = {
    Frequency.ONE_TIME: "One-Time",
    Frequency.WEEKLY: "Weekly",
    Frequency.BIWEEKLY: "Bi-Weekly",
    Frequency.MONTHLY: "Monthly",
}

SERVICE_LABELS = {
    ServiceType.REGULAR: "Regular Cleaning",
    ServiceType.DEEP: "Deep Cleaning",
    ServiceType.MOVE: "Move-In/Out Cleaning",
}


def create_booking(
    repository: Repository,
    request: BookingCreate,
    now: datetime,
    enforce_schedule: bool = True,
) -> Booking:
    """
    Create a confirmed booking or fail with NotFoundError,
    InvalidInputError or ConflictError. Writes nothing on failure.
    """
    cleaner = repository.get_cleaner(request.cleaner_id)
    if cleaner is None:
        raise NotFoundError("Cleaner not found")

    validate_house_size(request.bedrooms, request.bathrooms)
    day = parse_iso_date(request.date)

    try:
        total = price(
            cleaner,
            request.bedrooms,
            request.bathrooms,
            request.frequency,
            request.service_type,
        )
    except NotPricedError as e:
        raise InvalidInputError(f"No rate defined for this configuration: {e.message}") from e

    if enforce_schedule:
        existing = repository.active_bookings_for(cleaner.id, day.isoformat())
        if not is_available(cleaner, day, request.time_block, existing, now):
            _log_conflict(request, reason="unavailable")
            raise ConflictError("Time slot no longer available")

    window = BLOCK_WINDOWS[request.time_block]
    booking = Booking(
        id=str(uuid.uuid4()),
        cleaner_id=cleaner.id,
        customer_name=request.customer_name,
        customer_phone=request.customer_phone,
        customer_address=request.customer_address,
        has_pets=request.has_pets,
        bedrooms=request.bedrooms,
        bathrooms=request.bathrooms,
        service_type=request.service_type,
        frequency=request.frequency,
        date=day.isoformat(),
        time_block=request.time_block,
        start_time=window.start_time,
        end_time=window.end_time,
        total_price=total,
        status=BookingStatus.CONFIRMED,
    )

    try:
        created = repository.insert_booking(booking)
    except ConflictError:
        _log_conflict(request, reason="slot_taken")
        raise

    logger.info({
        "event_type": "booking",
        "event_name": "booking_created",
        "booking_id": created.id,
        "cleaner_id": created.cleaner_id,
        "date": created.date,
        "time_block": created.time_block.value,
        "total_price": str(created.total_price),
    })
    return created


def _log_conflict(request: BookingCreate, reason: str) -> None:
    logger.info({
        "event_type": "booking",
        "event_name": "booking_conflict",
        "reason": reason,
        "cleaner_id": request.cleaner_id,
        "date": request.date,
        "time_block": request.time_block.value,
    })


def cancel_booking(repository: Repository, caller_id: str, booking_id: str) -> Booking:
    """Cancel a booking on behalf of the cleaner who owns it; frees the slot."""
    booking = repository.get_booking(booking_id)
    if booking is None:
        raise NotFoundError("Booking not found")
    if booking.cleaner_id != caller_id:
        raise UnauthorizedError("Not authorized to cancel this booking")
    if booking.status == BookingStatus.CANCELLED:
        raise InvalidInputError("Booking is already cancelled")

    cancelled = repository.set_booking_status(booking_id, BookingStatus.CANCELLED)
    if cancelled is None:
        raise NotFoundError("Booking not found")

    logger.info({
        "event_type": "booking",
        "event_name": "booking_cancelled",
        "booking_id": booking_id,
        "cleaner_id": caller_id,
    })
    return cancelled


def _rooms(n: int) -> str:
    return f"{n}+" if n >= MAX_ROOMS else str(n)


def booking_summary(booking: Booking) -> str:
    """Hand-off text the customer sends to the cleaner by SMS or Messenger."""
    block = TimeBlock(booking.time_block)
    window = BLOCK_WINDOWS[block]
    cleaning = f"{_rooms(booking.bedrooms)} bed · {_rooms(booking.bathrooms)} bath"
    if booking.service_type != ServiceType.REGULAR:
        cleaning += f", {SERVICE_LABELS[booking.service_type]}"
    return "\n".join([
        f"Name: {booking.customer_name}",
        f"Date: {format_long_date(parse_iso_date(booking.date))} · "
        f"{block.value.capitalize()} ({window.hours_label()})",
        f"Address: {booking.customer_address}",
        f"Type of Cleaning: {cleaning} - {FREQUENCY_LABELS[booking.frequency]}",
        f"Notes: Pets: {'Yes' if booking.has_pets else 'No'}",
    ])
