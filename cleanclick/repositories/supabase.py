"""
Supabase (hosted Postgres) store, used in production.

Rows are read and written through the PostgREST table API with the
service-role client. The ``bookings`` table carries the partial unique index
``uq_bookings_active_slot`` (provisioned by ``init_db``); Postgres reports a
violation as SQLSTATE 23505, which becomes ``ConflictError``.
"""
from typing import Any, Optional

import httpx
from postgrest.exceptions import APIError
from supabase import Client

from cleanclick.booking_models import Booking, BookingStatus, Cleaner, utcnow
from cleanclick.core.logging import get_logger
from cleanclick.errors import ConflictError, NotFoundError, StorageError
from cleanclick.repositories.base import booking_to_row
from cleanclick.scheduling.defaults import cleaner_to_row, normalize_cleaner

logger = get_logger(__name__)

UNIQUE_VIOLATION = "23505"
FOREIGN_KEY_VIOLATION = "23503"


def _storage_error(action: str, e: Exception) -> StorageError:
    logger.error({
        "event_type": "storage",
        "event_name": "supabase_error",
        "action": action,
        "error": str(e),
    })
    return StorageError(f"Failed to {action}")


class SupabaseRepository:
    def __init__(self, client: Client, pricing_strategy: str = "formula") -> None:
        self.client = client
        self.pricing_strategy = pricing_strategy

    def _cleaner(self, row: dict[str, Any]) -> Cleaner:
        return normalize_cleaner(row, strategy=self.pricing_strategy)

    # ── Cleaners ──────────────────────────────────────────────────────────

    def get_cleaner(self, cleaner_id: str) -> Optional[Cleaner]:
        try:
            response = (
                self.client.table("cleaners").select("*").eq("id", cleaner_id).limit(1).execute()
            )
        except (APIError, httpx.HTTPError) as e:
            raise _storage_error("load cleaner", e) from e
        return self._cleaner(response.data[0]) if response.data else None

    def list_cleaners(self) -> list[Cleaner]:
        try:
            response = self.client.table("cleaners").select("*").execute()
        except (APIError, httpx.HTTPError) as e:
            raise _storage_error("list cleaners", e) from e
        return [self._cleaner(row) for row in response.data or []]

    def create_cleaner(self, cleaner: Cleaner) -> Cleaner:
        try:
            (
                self.client.table("cleaners")
                .upsert(cleaner_to_row(cleaner), on_conflict="id", ignore_duplicates=True)
                .execute()
            )
        except (APIError, httpx.HTTPError) as e:
            raise _storage_error("create cleaner", e) from e
        return self.get_cleaner(cleaner.id) or cleaner

    def update_cleaner(self, cleaner_id: str, patch: dict[str, Any]) -> Optional[Cleaner]:
        payload = {**patch, "updated_at": utcnow().isoformat()}
        try:
            response = self.client.table("cleaners").update(payload).eq("id", cleaner_id).execute()
        except (APIError, httpx.HTTPError) as e:
            raise _storage_error("update cleaner", e) from e
        return self._cleaner(response.data[0]) if response.data else None

    # ── Bookings ──────────────────────────────────────────────────────────

    def get_booking(self, booking_id: str) -> Optional[Booking]:
        try:
            response = (
                self.client.table("bookings").select("*").eq("id", booking_id).limit(1).execute()
            )
        except (APIError, httpx.HTTPError) as e:
            raise _storage_error("load booking", e) from e
        return Booking.model_validate(response.data[0]) if response.data else None

    def list_bookings(self, cleaner_id: str) -> list[Booking]:
        try:
            response = (
                self.client.table("bookings")
                .select("*")
                .eq("cleaner_id", cleaner_id)
                .order("date")
                .order("created_at")
                .execute()
            )
        except (APIError, httpx.HTTPError) as e:
            raise _storage_error("list bookings", e) from e
        return [Booking.model_validate(row) for row in response.data or []]

    def active_bookings_for(self, cleaner_id: str, date: str) -> list[Booking]:
        try:
            response = (
                self.client.table("bookings")
                .select("*")
                .eq("cleaner_id", cleaner_id)
                .eq("date", date)
                .neq("status", BookingStatus.CANCELLED.value)
                .execute()
            )
        except (APIError, httpx.HTTPError) as e:
            raise _storage_error("query bookings", e) from e
        return [Booking.model_validate(row) for row in response.data or []]

    def insert_booking(self, booking: Booking) -> Booking:
        try:
            response = self.client.table("bookings").insert(booking_to_row(booking)).execute()
        except APIError as e:
            if e.code == UNIQUE_VIOLATION:
                raise ConflictError("Time slot no longer available") from e
            if e.code == FOREIGN_KEY_VIOLATION:
                raise NotFoundError("Cleaner not found") from e
            raise _storage_error("insert booking", e) from e
        except httpx.HTTPError as e:
            raise _storage_error("insert booking", e) from e
        if not response.data:
            raise StorageError("Failed to create booking")
        return Booking.model_validate(response.data[0])

    def set_booking_status(
        self, booking_id: str, status: BookingStatus
    ) -> Optional[Booking]:
        try:
            response = (
                self.client.table("bookings")
                .update({"status": BookingStatus(status).value})
                .eq("id", booking_id)
                .execute()
            )
        except (APIError, httpx.HTTPError) as e:
            raise _storage_error("update booking", e) from e
        return Booking.model_validate(response.data[0]) if response.data else None
