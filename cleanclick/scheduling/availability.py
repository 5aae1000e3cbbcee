"""
Availability resolver.

A block is bookable when the schedule offers it, no live booking holds it,
and, for today only, it does not end within the next thirty minutes.
"""
from collections.abc import Iterable
from dataclasses import dataclass
from datetime import datetime, time, timedelta
from typing import Union

from cleanclick.booking_models import (
    BlockAvailability,
    Booking,
    BookingStatus,
    Cleaner,
    TimeBlock,
)
from cleanclick.scheduling.schedule import DateLike, as_block, as_date, is_open


@dataclass(frozen=True)
class BlockWindow:
    start: time
    end: time

    @property
    def start_time(self) -> str:
        return self.start.strftime("%H:%M")

    @property
    def end_time(self) -> str:
        return self.end.strftime("%H:%M")

    def hours_label(self) -> str:
        """Human readable window, e.g. ``9:00am - 1:00pm``."""
        return f"{_clock(self.start)} - {_clock(self.end)}"


def _clock(t: time) -> str:
    hour = t.hour % 12 or 12
    suffix = "am" if t.hour < 12 else "pm"
    return f"{hour}:{t.minute:02d}{suffix}"


BLOCK_WINDOWS: dict[TimeBlock, BlockWindow] = {
    TimeBlock.MORNING: BlockWindow(start=time(9, 0), end=time(13, 0)),
    TimeBlock.AFTERNOON: BlockWindow(start=time(13, 30), end=time(18, 0)),
}

CUTOFF_BUFFER = timedelta(minutes=30)


def is_past_cutoff(day: DateLike, block: Union[TimeBlock, str], now: datetime) -> bool:
    """
    True when ``day`` is today and ``now`` plus the lead-time buffer has
    reached the end of the block. Other dates are never past the cutoff.
    """
    day = as_date(day)
    if day != now.date():
        return False
    cutoff = datetime.combine(day, BLOCK_WINDOWS[as_block(block)].end, tzinfo=now.tzinfo)
    return now + CUTOFF_BUFFER >= cutoff


def taken_blocks(bookings: Iterable[Booking]) -> set[TimeBlock]:
    return {
        TimeBlock(b.time_block)
        for b in bookings
        if b.status != BookingStatus.CANCELLED
    }


def is_available(
    cleaner: Cleaner,
    day: DateLike,
    block: Union[TimeBlock, str],
    existing_bookings: Iterable[Booking],
    now: datetime,
) -> bool:
    block = as_block(block)
    return (
        is_open(cleaner, day, block)
        and block not in taken_blocks(existing_bookings)
        and not is_past_cutoff(day, block, now)
    )


def resolve(
    cleaner: Cleaner,
    day: DateLike,
    existing_bookings: Iterable[Booking],
    now: datetime,
) -> BlockAvailability:
    """Live bookability of both blocks of ``day``.

    ``existing_bookings`` are the cleaner's bookings on that date; cancelled
    ones are ignored.
    """
    day = as_date(day)
    existing_bookings = list(existing_bookings)
    return BlockAvailability(
        **{
            block.value: is_available(cleaner, day, block, existing_bookings, now)
            for block in TimeBlock
        }
    )
