"""
Calendar date helpers.

Dates travel as ``YYYY-MM-DD`` strings. They are always split into their
components and turned into a plain ``datetime.date`` so that no timezone
ever takes part in deciding which weekday a date falls on.
"""
import re
from datetime import date

from cleanclick.errors import InvalidInputError

_ISO_DATE = re.compile(r"^(\d{4})-(\d{2})-(\d{2})$")


def parse_iso_date(value: str) -> date:
    """Parse ``YYYY-MM-DD`` into a proleptic Gregorian ``date``."""
    match = _ISO_DATE.match(value.strip()) if isinstance(value, str) else None
    if not match:
        raise InvalidInputError(f"Invalid date {value!r}, expected YYYY-MM-DD")

    year, month, day = (int(part) for part in match.groups())
    try:
        return date(year, month, day)
    except ValueError:
        raise InvalidInputError(f"Invalid date {value!r}") from None


def format_long_date(day: date) -> str:
    """Format a date the way the booking wizard shows it: Monday, June 2, 2025."""
    return f"{day:%A}, {day:%B} {day.day}, {day.year}"
