"""
Availability and pricing engine.

Pure functions over a normalized ``Cleaner`` plus the booking transition
that writes through a ``Repository``.
"""
from cleanclick.scheduling.availability import (
    BLOCK_WINDOWS,
    CUTOFF_BUFFER,
    is_past_cutoff,
    resolve,
)
from cleanclick.scheduling.booking import booking_summary, cancel_booking, create_booking
from cleanclick.scheduling.pricing import price, quote, validate_house_size
from cleanclick.scheduling.schedule import is_open, next_open_days, weekday_of

__all__ = [
    "BLOCK_WINDOWS",
    "CUTOFF_BUFFER",
    "booking_summary",
    "cancel_booking",
    "create_booking",
    "is_open",
    "is_past_cutoff",
    "next_open_days",
    "price",
    "quote",
    "resolve",
    "validate_house_size",
    "weekday_of",
]
