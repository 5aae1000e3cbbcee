"""
SQL store through SQLModel.

The partial unique index ``uq_bookings_active_slot`` declared on
``BookingDB`` lets the database itself refuse a second live booking for a
slot, so concurrent inserts cannot both succeed.
"""
from typing import Any, Optional

from sqlalchemy.engine import Engine
from sqlalchemy.exc import IntegrityError, SQLAlchemyError
from sqlmodel import Session, select

from cleanclick.booking_models import (
    Booking,
    BookingDB,
    BookingStatus,
    Cleaner,
    CleanerDB,
    utcnow,
)
from cleanclick.errors import ConflictError, NotFoundError, StorageError
from cleanclick.repositories.base import booking_to_row
from cleanclick.scheduling.defaults import cleaner_to_row, normalize_cleaner


def _booking_from_db(db_booking: BookingDB) -> Booking:
    return Booking.model_validate(db_booking.model_dump())


def _booking_to_db(booking: Booking) -> BookingDB:
    row = booking_to_row(booking)
    row["total_price"] = booking.total_price
    row["created_at"] = booking.created_at
    return BookingDB(**row)


class SqlRepository:
    def __init__(self, engine: Engine, pricing_strategy: str = "formula") -> None:
        self.engine = engine
        self.pricing_strategy = pricing_strategy

    def _cleaner(self, db_cleaner: CleanerDB) -> Cleaner:
        return normalize_cleaner(db_cleaner.model_dump(), strategy=self.pricing_strategy)

    # ── Cleaners ──────────────────────────────────────────────────────────

    def get_cleaner(self, cleaner_id: str) -> Optional[Cleaner]:
        try:
            with Session(self.engine) as session:
                db_cleaner = session.get(CleanerDB, cleaner_id)
                return self._cleaner(db_cleaner) if db_cleaner else None
        except SQLAlchemyError as e:
            raise StorageError(f"Failed to load cleaner: {e}") from e

    def list_cleaners(self) -> list[Cleaner]:
        try:
            with Session(self.engine) as session:
                rows = session.exec(select(CleanerDB).order_by(CleanerDB.created_at)).all()
                return [self._cleaner(r) for r in rows]
        except SQLAlchemyError as e:
            raise StorageError(f"Failed to list cleaners: {e}") from e

    def create_cleaner(self, cleaner: Cleaner) -> Cleaner:
        try:
            with Session(self.engine) as session:
                session.add(CleanerDB(**cleaner_to_row(cleaner)))
                try:
                    session.commit()
                except IntegrityError:
                    # Someone provisioned the same id first; keep theirs.
                    session.rollback()
                    existing = session.get(CleanerDB, cleaner.id)
                    if existing is None:
                        raise
                    return self._cleaner(existing)
            return cleaner
        except SQLAlchemyError as e:
            raise StorageError(f"Failed to create cleaner: {e}") from e

    def update_cleaner(self, cleaner_id: str, patch: dict[str, Any]) -> Optional[Cleaner]:
        try:
            with Session(self.engine) as session:
                db_cleaner = session.get(CleanerDB, cleaner_id)
                if db_cleaner is None:
                    return None
                for key, value in patch.items():
                    setattr(db_cleaner, key, value)
                db_cleaner.updated_at = utcnow()
                session.add(db_cleaner)
                session.commit()
                session.refresh(db_cleaner)
                return self._cleaner(db_cleaner)
        except SQLAlchemyError as e:
            raise StorageError(f"Failed to update cleaner: {e}") from e

    # ── Bookings ──────────────────────────────────────────────────────────

    def get_booking(self, booking_id: str) -> Optional[Booking]:
        try:
            with Session(self.engine) as session:
                db_booking = session.get(BookingDB, booking_id)
                return _booking_from_db(db_booking) if db_booking else None
        except SQLAlchemyError as e:
            raise StorageError(f"Failed to load booking: {e}") from e

    def list_bookings(self, cleaner_id: str) -> list[Booking]:
        statement = (
            select(BookingDB)
            .where(BookingDB.cleaner_id == cleaner_id)
            .order_by(BookingDB.date, BookingDB.created_at)
        )
        try:
            with Session(self.engine) as session:
                return [_booking_from_db(b) for b in session.exec(statement).all()]
        except SQLAlchemyError as e:
            raise StorageError(f"Failed to list bookings: {e}") from e

    def active_bookings_for(self, cleaner_id: str, date: str) -> list[Booking]:
        statement = select(BookingDB).where(
            BookingDB.cleaner_id == cleaner_id,
            BookingDB.date == date,
            BookingDB.status != BookingStatus.CANCELLED.value,
        )
        try:
            with Session(self.engine) as session:
                return [_booking_from_db(b) for b in session.exec(statement).all()]
        except SQLAlchemyError as e:
            raise StorageError(f"Failed to query bookings: {e}") from e

    def insert_booking(self, booking: Booking) -> Booking:
        try:
            with Session(self.engine) as session:
                if session.get(CleanerDB, booking.cleaner_id) is None:
                    raise NotFoundError("Cleaner not found")
                session.add(_booking_to_db(booking))
                try:
                    session.commit()
                except IntegrityError as e:
                    session.rollback()
                    raise ConflictError("Time slot no longer available") from e
            return booking
        except SQLAlchemyError as e:
            raise StorageError(f"Failed to insert booking: {e}") from e

    def set_booking_status(
        self, booking_id: str, status: BookingStatus
    ) -> Optional[Booking]:
        try:
            with Session(self.engine) as session:
                db_booking = session.get(BookingDB, booking_id)
                if db_booking is None:
                    return None
                db_booking.status = BookingStatus(status).value
                session.add(db_booking)
                session.commit()
                session.refresh(db_booking)
                return _booking_from_db(db_booking)
        except SQLAlchemyError as e:
            raise StorageError(f"Failed to update booking: {e}") from e
