"""
API routes for price previews.
"""
from typing import Any, Optional

from fastapi import APIRouter, Query

from cleanclick.api.deps import RepositoryDep
from cleanclick.booking_models import Frequency, QuotePublic, ServiceType
from cleanclick.errors import NotFoundError
from cleanclick.scheduling.pricing import quote

router = APIRouter(prefix="/pricing", tags=["pricing"])


@router.get("/quote", response_model=QuotePublic)
def get_quote(
    repository: RepositoryDep,
    cleaner_id: str = Query(..., alias="cleanerId"),
    bedrooms: int = Query(...),
    bathrooms: int = Query(...),
    frequency: Frequency = Query(Frequency.ONE_TIME),
    service_type: Optional[ServiceType] = Query(None, alias="serviceType"),
) -> Any:
    """
    Price preview. Same computation the booking uses, so the total shown
    is the total charged.
    """
    cleaner = repository.get_cleaner(cleaner_id)
    if cleaner is None:
        raise NotFoundError("Cleaner not found")
    return quote(cleaner, bedrooms, bathrooms, frequency, service_type)
