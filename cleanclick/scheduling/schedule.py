"""
Schedule model: is a cleaner nominally open on a date and block?

Only the weekly template and the blocked dates are consulted here. Existing
bookings and the same-day cutoff belong to the availability resolver.
"""
from collections.abc import Iterator
from datetime import date, timedelta
from typing import NamedTuple, Union

from cleanclick.booking_models import Cleaner, TimeBlock, Weekday
from cleanclick.errors import InvalidInputError
from cleanclick.utils.dates import parse_iso_date

# Indexed by date.weekday(): Monday is 0.
WEEKDAYS: tuple[Weekday, ...] = tuple(Weekday)

DateLike = Union[date, str]


def as_date(day: DateLike) -> date:
    return parse_iso_date(day) if isinstance(day, str) else day


def as_block(block: Union[TimeBlock, str]) -> TimeBlock:
    try:
        return TimeBlock(block)
    except ValueError:
        raise InvalidInputError(f"Unknown time block {block!r}") from None


def weekday_of(day: DateLike) -> Weekday:
    """Weekday of a calendar date, independent of any timezone."""
    return WEEKDAYS[as_date(day).weekday()]


def is_blocked(cleaner: Cleaner, day: DateLike) -> bool:
    return as_date(day).isoformat() in cleaner.blocked_dates


def is_open(cleaner: Cleaner, day: DateLike, block: Union[TimeBlock, str]) -> bool:
    """True when the weekly template offers ``block`` on ``day`` and the day is not blocked."""
    day = as_date(day)
    if is_blocked(cleaner, day):
        return False
    return cleaner.availability[weekday_of(day)].is_open(as_block(block))


def is_day_open(cleaner: Cleaner, day: DateLike) -> bool:
    return any(is_open(cleaner, day, block) for block in TimeBlock)


class DayOpening(NamedTuple):
    date: date
    weekday_label: str
    is_open: bool


class OpenDays:
    """
    ``count`` consecutive days starting at ``start``, each annotated with
    whether the cleaner works that day. Days are computed lazily and the
    sequence can be iterated any number of times.
    """

    def __init__(self, cleaner: Cleaner, start: date, count: int) -> None:
        if count < 0:
            raise InvalidInputError("count must not be negative")
        self.cleaner = cleaner
        self.start = start
        self.count = count

    def __len__(self) -> int:
        return self.count

    def __iter__(self) -> Iterator[DayOpening]:
        for offset in range(self.count):
            day = self.start + timedelta(days=offset)
            yield DayOpening(
                date=day,
                weekday_label=weekday_of(day).value.capitalize(),
                is_open=is_day_open(self.cleaner, day),
            )


def next_open_days(cleaner: Cleaner, from_date: DateLike, count: int) -> OpenDays:
    return OpenDays(cleaner, as_date(from_date), count)
