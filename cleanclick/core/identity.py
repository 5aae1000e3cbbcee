"""
External identity provider.

Cleaners sign in through Supabase Auth. The API only ever needs two things
from it: which user a bearer token belongs to, and the name and email of a
known user id so a profile can be provisioned on first access.
"""
from dataclasses import dataclass
from typing import Optional, Protocol

import httpx
from supabase import AuthApiError, AuthError, Client

from cleanclick.core.logging import get_logger
from cleanclick.errors import StorageError

logger = get_logger(__name__)

# Supabase answers an unknown or malformed user id with one of these.
_USER_NOT_FOUND_STATUSES = (400, 404, 422)


@dataclass(frozen=True)
class IdentityUser:
    id: str
    email: str = ""
    name: Optional[str] = None


class IdentityProvider(Protocol):
    def verify_token(self, token: str) -> Optional[str]:
        """Return the user id a bearer token belongs to, or None."""

    def lookup_user(self, user_id: str) -> Optional[IdentityUser]:
        """Return the user registered under ``user_id``, or None."""


class NullIdentityProvider:
    """Used when no identity provider is configured; knows nobody."""

    def verify_token(self, token: str) -> Optional[str]:
        return None

    def lookup_user(self, user_id: str) -> Optional[IdentityUser]:
        return None


class SupabaseIdentityProvider:
    """
    Identity backed by Supabase Auth.

    A rejected token or an unknown user id gives None. Failing to reach
    the provider at all raises ``StorageError``.
    """

    def __init__(self, client: Client) -> None:
        self.client = client

    def verify_token(self, token: str) -> Optional[str]:
        try:
            response = self.client.auth.get_user(token)
        except AuthApiError as e:
            if e.status >= 500:
                logger.error({
                    "event_type": "auth",
                    "event_name": "provider_unavailable",
                    "status": e.status,
                    "error": str(e),
                })
                raise StorageError("Identity provider unavailable") from e
            logger.info({
                "event_type": "auth",
                "event_name": "token_rejected",
                "error": str(e),
            })
            return None
        except (AuthError, httpx.HTTPError) as e:
            logger.error({
                "event_type": "auth",
                "event_name": "provider_unavailable",
                "error": str(e),
            })
            raise StorageError("Identity provider unavailable") from e
        if not response or not response.user:
            return None
        return str(response.user.id)

    def lookup_user(self, user_id: str) -> Optional[IdentityUser]:
        try:
            response = self.client.auth.admin.get_user_by_id(user_id)
        except AuthApiError as e:
            if e.status not in _USER_NOT_FOUND_STATUSES:
                logger.error({
                    "event_type": "auth",
                    "event_name": "user_lookup_failed",
                    "user_id": user_id,
                    "status": e.status,
                    "error": str(e),
                })
                raise StorageError("Identity provider unavailable") from e
            logger.info({
                "event_type": "auth",
                "event_name": "user_not_found",
                "user_id": user_id,
            })
            return None
        except (AuthError, httpx.HTTPError) as e:
            logger.error({
                "event_type": "auth",
                "event_name": "provider_unavailable",
                "user_id": user_id,
                "error": str(e),
            })
            raise StorageError("Identity provider unavailable") from e
        if not response or not response.user:
            return None
        user = response.user
        metadata = user.user_metadata or {}
        return IdentityUser(
            id=str(user.id),
            email=user.email or "",
            name=metadata.get("name") or metadata.get("full_name"),
        )
