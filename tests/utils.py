"""Builders shared by the unit and API tests."""
from datetime import datetime
from decimal import Decimal
from typing import Any
from zoneinfo import ZoneInfo

from cleanclick.booking_models import (
    Booking,
    BookingCreate,
    BookingStatus,
    Cleaner,
    Frequency,
    TimeBlock,
)
from cleanclick.scheduling.defaults import normalize_cleaner

UTC = ZoneInfo("UTC")

# Monday 2025-06-02, early enough that both blocks of the day are bookable.
FIXED_NOW = datetime(2025, 6, 2, 8, 0, tzinfo=UTC)

MONDAY = "2025-06-02"
TUESDAY = "2025-06-03"
SATURDAY = "2025-06-07"
SUNDAY = "2025-06-08"

PARTIAL_TABLE = {
    "1-1": 80,
    "2-1": 95,
    "2-1-deep": 140,
    "2-2": 115,
    "2-5": 175,
}


def at(day: str, hour: int, minute: int = 0) -> datetime:
    year, month, dom = (int(p) for p in day.split("-"))
    return datetime(year, month, dom, hour, minute, tzinfo=UTC)


def make_cleaner(cleaner_id: str = "c1", **row: Any) -> Cleaner:
    return normalize_cleaner({"id": cleaner_id, "name": "Test Cleaner", **row})


def make_flat_table_cleaner(cleaner_id: str = "c2", **row: Any) -> Cleaner:
    return make_cleaner(cleaner_id, pricing_table=PARTIAL_TABLE, **row)


def make_booking(
    cleaner_id: str = "c1",
    date: str = MONDAY,
    time_block: TimeBlock = TimeBlock.MORNING,
    status: BookingStatus = BookingStatus.CONFIRMED,
    booking_id: str = "b1",
) -> Booking:
    return Booking(
        id=booking_id,
        cleaner_id=cleaner_id,
        customer_name="Jane Doe",
        customer_phone="555-0101",
        customer_address="12 Oak Street",
        bedrooms=2,
        bathrooms=1,
        frequency=Frequency.ONE_TIME,
        date=date,
        time_block=time_block,
        start_time="09:00",
        end_time="13:00",
        total_price=Decimal("95.00"),
        status=status,
    )


def booking_request(**overrides: Any) -> BookingCreate:
    data = {
        "cleaner_id": "c1",
        "customer_name": "Jane Doe",
        "customer_phone": "555-0101",
        "customer_address": "12 Oak Street",
        "has_pets": False,
        "bedrooms": 2,
        "bathrooms": 1,
        "service_type": "regular",
        "frequency": "one_time",
        "date": MONDAY,
        "time_block": "morning",
    }
    data.update(overrides)
    return BookingCreate(**data)


def booking_payload(**overrides: Any) -> dict[str, Any]:
    """Camel-cased request body as the booking wizard sends it."""
    payload = {
        "cleanerId": "c1",
        "customerName": "Jane Doe",
        "customerPhone": "555-0101",
        "customerAddress": "12 Oak Street",
        "hasPets": True,
        "bedrooms": 2,
        "bathrooms": 1,
        "serviceType": "regular",
        "frequency": "one_time",
        "date": MONDAY,
        "timeBlock": "morning",
    }
    payload.update(overrides)
    return payload


def auth_headers(user_id: str) -> dict[str, str]:
    return {"Authorization": f"Bearer token-{user_id}"}
