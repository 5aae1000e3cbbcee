"""
API routes for cleaner profiles.
"""
from typing import Any

from fastapi import APIRouter

from cleanclick.api.deps import CallerId, IdentityDep, RepositoryDep
from cleanclick.booking_models import Cleaner, CleanerUpdate
from cleanclick.core.config import settings
from cleanclick.core.logging import get_logger
from cleanclick.errors import NotFoundError, UnauthorizedError
from cleanclick.scheduling.defaults import default_cleaner, merge_update

router = APIRouter(prefix="/cleaners", tags=["cleaners"])

logger = get_logger(__name__)


@router.get("", response_model=list[Cleaner])
def list_cleaners(repository: RepositoryDep) -> Any:
    """
    Get all cleaner profiles.
    """
    return repository.list_cleaners()


@router.get("/{cleaner_id}", response_model=Cleaner)
def get_cleaner(
    cleaner_id: str,
    repository: RepositoryDep,
    identity: IdentityDep,
) -> Any:
    """
    Get a cleaner profile.
    A known identity without a profile gets a default one on first access.
    """
    cleaner = repository.get_cleaner(cleaner_id)
    if cleaner is not None:
        return cleaner

    user = identity.lookup_user(cleaner_id)
    if user is None:
        raise NotFoundError("Profile not found")

    created = repository.create_cleaner(
        default_cleaner(
            cleaner_id,
            name=user.name,
            email=user.email,
            strategy=settings.DEFAULT_PRICING_STRATEGY,
        )
    )
    logger.info({
        "event_type": "profile",
        "event_name": "profile_provisioned",
        "cleaner_id": cleaner_id,
    })
    return created


@router.put("/{cleaner_id}", response_model=Cleaner)
def update_cleaner(
    cleaner_id: str,
    cleaner_in: CleanerUpdate,
    caller_id: CallerId,
    repository: RepositoryDep,
) -> Any:
    """
    Update the caller's own profile. Only the fields sent are changed.
    """
    if caller_id != cleaner_id:
        raise UnauthorizedError("Unauthorized")

    cleaner = repository.get_cleaner(cleaner_id)
    if cleaner is None:
        raise NotFoundError("Profile not found")

    updated, patch = merge_update(cleaner, cleaner_in)
    if not patch:
        return cleaner

    saved = repository.update_cleaner(cleaner_id, patch)
    if saved is None:
        raise NotFoundError("Profile not found")

    logger.info({
        "event_type": "profile",
        "event_name": "profile_updated",
        "cleaner_id": cleaner_id,
        "fields": sorted(patch),
    })
    return saved
