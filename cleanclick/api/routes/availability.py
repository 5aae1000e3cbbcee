"""
API routes for availability.
"""
from typing import Any, Optional

from fastapi import APIRouter, Query

from cleanclick.api.deps import NowDep, RepositoryDep
from cleanclick.booking_models import BlockAvailability, OpenDayPublic
from cleanclick.errors import InvalidInputError, NotFoundError
from cleanclick.scheduling.availability import resolve
from cleanclick.scheduling.schedule import next_open_days
from cleanclick.utils.dates import parse_iso_date

router = APIRouter(prefix="/availability", tags=["availability"])


@router.get("", response_model=BlockAvailability)
def get_availability(
    repository: RepositoryDep,
    now: NowDep,
    cleaner_id: Optional[str] = Query(None, alias="cleanerId"),
    date: Optional[str] = Query(None),
) -> Any:
    """
    Live availability of the morning and afternoon blocks on one date.
    """
    if not cleaner_id or not date:
        raise InvalidInputError("cleanerId and date are required")
    day = parse_iso_date(date)

    cleaner = repository.get_cleaner(cleaner_id)
    if cleaner is None:
        raise NotFoundError("Cleaner not found")

    existing = repository.active_bookings_for(cleaner.id, day.isoformat())
    return resolve(cleaner, day, existing, now)


@router.get("/days", response_model=list[OpenDayPublic])
def get_open_days(
    repository: RepositoryDep,
    now: NowDep,
    cleaner_id: Optional[str] = Query(None, alias="cleanerId"),
    from_date: Optional[str] = Query(None, alias="from"),
    count: int = Query(14, ge=1, le=90),
) -> Any:
    """
    Day picker data: which of the next ``count`` days the cleaner works.
    Starts today unless ``from`` is given. Says nothing about bookings.
    """
    if not cleaner_id:
        raise InvalidInputError("cleanerId is required")
    start = parse_iso_date(from_date) if from_date else now.date()

    cleaner = repository.get_cleaner(cleaner_id)
    if cleaner is None:
        raise NotFoundError("Cleaner not found")

    return [
        OpenDayPublic(
            date=day.date.isoformat(),
            weekday_label=day.weekday_label,
            is_open=day.is_open,
        )
        for day in next_open_days(cleaner, start, count)
    ]
