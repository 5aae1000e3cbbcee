from datetime import datetime
from functools import lru_cache
from typing import Annotated, Optional
from zoneinfo import ZoneInfo

from fastapi import Depends, Header

from cleanclick.core.config import settings
from cleanclick.core.identity import (
    IdentityProvider,
    NullIdentityProvider,
    SupabaseIdentityProvider,
)
from cleanclick.errors import UnauthorizedError
from cleanclick.repositories import Repository, get_repository


@lru_cache()
def get_identity_provider() -> IdentityProvider:
    if settings.supabase_enabled:
        from cleanclick.core.supabase_client import get_supabase_client

        return SupabaseIdentityProvider(get_supabase_client())
    return NullIdentityProvider()


def get_now() -> datetime:
    """Current wall-clock time in the business timezone."""
    return datetime.now(ZoneInfo(settings.BUSINESS_TIMEZONE))


RepositoryDep = Annotated[Repository, Depends(get_repository)]
IdentityDep = Annotated[IdentityProvider, Depends(get_identity_provider)]
NowDep = Annotated[datetime, Depends(get_now)]


def get_caller_id(
    identity: IdentityDep,
    authorization: Optional[str] = Header(None),
) -> str:
    """Verified user id behind the ``Authorization: Bearer`` header."""
    if not authorization or not authorization.startswith("Bearer "):
        raise UnauthorizedError("Unauthorized")

    token = authorization.removeprefix("Bearer ").strip()
    user_id = identity.verify_token(token) if token else None
    if not user_id:
        raise UnauthorizedError("Unauthorized")
    return user_id


CallerId = Annotated[str, Depends(get_caller_id)]
