"""
JSON file store for local development.

The whole database is one JSON document. Every operation reads the file,
and writes replace it atomically through a temporary file. A lock per file
path serializes read-modify-write cycles inside the process, which is what
makes ``insert_booking`` a single conditional insert here.
"""
import json
import os
import tempfile
import threading
from pathlib import Path
from typing import Any, Optional

from cleanclick.booking_models import Booking, BookingStatus, Cleaner, utcnow
from cleanclick.errors import ConflictError, NotFoundError, StorageError
from cleanclick.repositories.base import booking_sort_key, booking_to_row
from cleanclick.scheduling.defaults import (
    DEFAULT_PRICING_TABLE,
    cleaner_to_row,
    normalize_cleaner,
)


_locks: dict[str, threading.RLock] = {}
_locks_guard = threading.Lock()


def _lock_for(path: Path) -> threading.RLock:
    key = str(path.resolve())
    with _locks_guard:
        return _locks.setdefault(key, threading.RLock())


def seed_data() -> dict[str, list]:
    """A demo cleaner so a fresh checkout has something to book."""
    demo = normalize_cleaner({
        "id": "cleaner-1",
        "name": "Maria Santos",
        "email": "maria@sparkleclean.com",
        "pricing_table": DEFAULT_PRICING_TABLE,
    })
    return {"cleaners": [cleaner_to_row(demo)], "bookings": []}


class JsonFileRepository:
    def __init__(
        self,
        path: str | Path,
        pricing_strategy: str = "formula",
        seed: bool = True,
    ) -> None:
        self.path = Path(path)
        self.pricing_strategy = pricing_strategy
        self.seed = seed
        self._lock = _lock_for(self.path)

    # ── File access ───────────────────────────────────────────────────────

    def _read(self) -> dict[str, list]:
        try:
            if not self.path.exists():
                data = seed_data() if self.seed else {"cleaners": [], "bookings": []}
                self._write(data)
                return data
            with open(self.path, "r", encoding="utf-8") as f:
                data = json.load(f)
        except (OSError, ValueError) as e:
            raise StorageError(f"Cannot read {self.path}: {e}") from e
        data.setdefault("cleaners", [])
        data.setdefault("bookings", [])
        return data

    def _write(self, data: dict[str, list]) -> None:
        try:
            self.path.parent.mkdir(parents=True, exist_ok=True)
            fd, tmp = tempfile.mkstemp(dir=self.path.parent, suffix=".tmp")
            with os.fdopen(fd, "w", encoding="utf-8") as f:
                json.dump(data, f, indent=2)
            os.replace(tmp, self.path)
        except OSError as e:
            raise StorageError(f"Cannot write {self.path}: {e}") from e

    def _cleaner(self, row: dict[str, Any]) -> Cleaner:
        return normalize_cleaner(row, strategy=self.pricing_strategy)

    # ── Cleaners ──────────────────────────────────────────────────────────

    def get_cleaner(self, cleaner_id: str) -> Optional[Cleaner]:
        with self._lock:
            rows = self._read()["cleaners"]
        row = next((r for r in rows if r.get("id") == cleaner_id), None)
        return self._cleaner(row) if row else None

    def list_cleaners(self) -> list[Cleaner]:
        with self._lock:
            rows = self._read()["cleaners"]
        return [self._cleaner(r) for r in rows]

    def create_cleaner(self, cleaner: Cleaner) -> Cleaner:
        with self._lock:
            data = self._read()
            existing = next((r for r in data["cleaners"] if r.get("id") == cleaner.id), None)
            if existing:
                return self._cleaner(existing)
            data["cleaners"].append(cleaner_to_row(cleaner))
            self._write(data)
        return cleaner

    def update_cleaner(self, cleaner_id: str, patch: dict[str, Any]) -> Optional[Cleaner]:
        with self._lock:
            data = self._read()
            for i, row in enumerate(data["cleaners"]):
                if row.get("id") == cleaner_id:
                    data["cleaners"][i] = {**row, **patch}
                    self._write(data)
                    return self._cleaner(data["cleaners"][i])
        return None

    # ── Bookings ──────────────────────────────────────────────────────────

    def get_booking(self, booking_id: str) -> Optional[Booking]:
        with self._lock:
            rows = self._read()["bookings"]
        row = next((r for r in rows if r.get("id") == booking_id), None)
        return Booking.model_validate(row) if row else None

    def list_bookings(self, cleaner_id: str) -> list[Booking]:
        with self._lock:
            rows = self._read()["bookings"]
        bookings = [Booking.model_validate(r) for r in rows if r.get("cleaner_id") == cleaner_id]
        return sorted(bookings, key=booking_sort_key)

    def active_bookings_for(self, cleaner_id: str, date: str) -> list[Booking]:
        return [
            b
            for b in self.list_bookings(cleaner_id)
            if b.date == date and b.status != BookingStatus.CANCELLED
        ]

    def insert_booking(self, booking: Booking) -> Booking:
        with self._lock:
            data = self._read()
            if not any(r.get("id") == booking.cleaner_id for r in data["cleaners"]):
                raise NotFoundError("Cleaner not found")
            for row in data["bookings"]:
                if (
                    row.get("cleaner_id") == booking.cleaner_id
                    and row.get("date") == booking.date
                    and row.get("time_block") == booking.time_block.value
                    and row.get("status") != BookingStatus.CANCELLED.value
                ):
                    raise ConflictError("Time slot no longer available")
            data["bookings"].append(booking_to_row(booking))
            self._write(data)
        return booking

    def set_booking_status(
        self, booking_id: str, status: BookingStatus
    ) -> Optional[Booking]:
        with self._lock:
            data = self._read()
            for row in data["bookings"]:
                if row.get("id") == booking_id:
                    row["status"] = BookingStatus(status).value
                    row["updated_at"] = utcnow().isoformat()
                    self._write(data)
                    return Booking.model_validate(row)
        return None
