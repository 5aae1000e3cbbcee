"""
SQLModel and Pydantic models for the booking system.
The table models mirror the Supabase ``cleaners`` and ``bookings`` tables.
"""
from datetime import datetime, timezone
from decimal import Decimal
from enum import Enum
from typing import Annotated, Literal, Optional, Union

from pydantic import (
    BaseModel,
    ConfigDict,
    Field,
    PlainSerializer,
    field_validator,
)
from pydantic.alias_generators import to_camel
from sqlalchemy import JSON, Column, Index, Numeric, text
from sqlmodel import Field as SQLField, SQLModel

from cleanclick.errors import InvalidInputError
from cleanclick.utils.dates import parse_iso_date


# ============== ENUMS ==============

class Weekday(str, Enum):
    """Weekday names, Monday first like ``date.weekday()``."""
    MONDAY = "monday"
    TUESDAY = "tuesday"
    WEDNESDAY = "wednesday"
    THURSDAY = "thursday"
    FRIDAY = "friday"
    SATURDAY = "saturday"
    SUNDAY = "sunday"


class TimeBlock(str, Enum):
    """Half-day scheduling windows."""
    MORNING = "morning"
    AFTERNOON = "afternoon"


class Frequency(str, Enum):
    ONE_TIME = "one_time"
    WEEKLY = "weekly"
    BIWEEKLY = "biweekly"
    MONTHLY = "monthly"


class ServiceType(str, Enum):
    REGULAR = "regular"
    DEEP = "deep"
    MOVE = "move"


class BookingStatus(str, Enum):
    """Booking status enum matching database."""
    PENDING = "pending"
    CONFIRMED = "confirmed"
    CANCELLED = "cancelled"


def utcnow() -> datetime:
    return datetime.now(timezone.utc)


# Money is kept as Decimal internally and sent to clients as a JSON number.
Money = Annotated[
    Decimal,
    PlainSerializer(float, return_type=float, when_used="json"),
]
NonNegativeMoney = Annotated[Money, Field(ge=0)]
Percent = Annotated[Money, Field(ge=0, le=100)]


class CamelModel(BaseModel):
    """API schemas speak camelCase and still accept snake_case input."""
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)


# ============== DATABASE MODELS (SQLModel) ==============

class CleanerDB(SQLModel, table=True):
    """Cleaner database model."""
    __tablename__ = "cleaners"

    id: str = SQLField(primary_key=True)
    name: str = SQLField(default="New Cleaner", max_length=255)
    email: str = SQLField(default="", max_length=255)
    phone: Optional[str] = None
    messenger_username: Optional[str] = None
    availability: Optional[dict] = SQLField(default=None, sa_column=Column(JSON))
    blocked_dates: Optional[list] = SQLField(default=None, sa_column=Column(JSON))
    pricing: Optional[dict] = SQLField(default=None, sa_column=Column(JSON))
    frequency_discounts: Optional[dict] = SQLField(default=None, sa_column=Column(JSON))
    created_at: datetime = SQLField(default_factory=utcnow)
    updated_at: datetime = SQLField(default_factory=utcnow)


class BookingDB(SQLModel, table=True):
    """Booking database model."""
    __tablename__ = "bookings"
    __table_args__ = (
        # At most one live booking per (cleaner, date, block).
        Index(
            "uq_bookings_active_slot",
            "cleaner_id",
            "date",
            "time_block",
            unique=True,
            sqlite_where=text("status != 'cancelled'"),
            postgresql_where=text("status <> 'cancelled'"),
        ),
        Index("ix_bookings_cleaner_date", "cleaner_id", "date"),
    )

    id: str = SQLField(primary_key=True)
    cleaner_id: str = SQLField(foreign_key="cleaners.id")
    customer_name: str
    customer_phone: str
    customer_address: str
    has_pets: bool = False
    bedrooms: int
    bathrooms: int
    service_type: str = SQLField(default=ServiceType.REGULAR.value)
    frequency: str
    date: str  # Stored as YYYY-MM-DD string
    time_block: str
    start_time: str
    end_time: str
    total_price: Decimal = SQLField(sa_column=Column(Numeric(10, 2), nullable=False))
    status: str = SQLField(default=BookingStatus.CONFIRMED.value)
    created_at: datetime = SQLField(default_factory=utcnow)


# ============== DOMAIN / API SCHEMAS (Pydantic) ==============

# --- Schedule ---
class DayAvailability(CamelModel):
    """Recurring availability of one weekday."""
    morning: bool = False
    afternoon: bool = False

    def is_open(self, block: TimeBlock) -> bool:
        return self.morning if block == TimeBlock.MORNING else self.afternoon


class DayAvailabilityUpdate(CamelModel):
    """Partial change to one weekday; an omitted block keeps its current value."""
    morning: Optional[bool] = None
    afternoon: Optional[bool] = None


class BlockAvailability(CamelModel):
    """Live bookability of both blocks on one date."""
    morning: bool
    afternoon: bool


class OpenDayPublic(CamelModel):
    """One entry of the day picker."""
    date: str
    weekday_label: str
    is_open: bool


# --- Pricing ---
class FrequencyDiscounts(CamelModel):
    """Percent off for recurring bookings."""
    weekly: Percent = Decimal("0")
    biweekly: Percent = Decimal("0")
    monthly: Percent = Decimal("0")


class ServiceAddons(CamelModel):
    """Flat surcharges on top of the formula subtotal."""
    deep: NonNegativeMoney = Decimal("0")
    move: NonNegativeMoney = Decimal("0")


class FlatTablePricing(CamelModel):
    """Exact lookup on ``"{bedrooms}-{bathrooms}"`` (optionally ``-{serviceType}``)."""
    kind: Literal["flat_table"] = "flat_table"
    table: dict[str, NonNegativeMoney] = Field(default_factory=dict)

    def subtotal(
        self, bedrooms: int, bathrooms: int, service_type: ServiceType
    ) -> Optional[Decimal]:
        key = f"{bedrooms}-{bathrooms}"
        if service_type != ServiceType.REGULAR:
            suffixed = f"{key}-{service_type.value}"
            if suffixed in self.table:
                return self.table[suffixed]
        return self.table.get(key)


class FormulaPricing(CamelModel):
    """Base price plus linear increments and service add-ons."""
    kind: Literal["formula"] = "formula"
    base: NonNegativeMoney
    extra_per_bedroom: NonNegativeMoney = Decimal("0")
    extra_per_bathroom: NonNegativeMoney = Decimal("0")
    service_addons: ServiceAddons = Field(default_factory=ServiceAddons)

    def subtotal(
        self, bedrooms: int, bathrooms: int, service_type: ServiceType
    ) -> Optional[Decimal]:
        addon = Decimal("0")
        if service_type == ServiceType.DEEP:
            addon = self.service_addons.deep
        elif service_type == ServiceType.MOVE:
            addon = self.service_addons.move
        return (
            self.base
            + (bedrooms - 1) * self.extra_per_bedroom
            + (bathrooms - 1) * self.extra_per_bathroom
            + addon
        )


PricingConfig = Annotated[
    Union[FlatTablePricing, FormulaPricing], Field(discriminator="kind")
]


class QuotePublic(CamelModel):
    """Price preview for the booking wizard."""
    subtotal: Money
    discount_percent: Money
    total: Money
    discount_label: str = ""


# --- Cleaner Schemas ---
def _check_dates(values: Optional[list[str]]) -> Optional[list[str]]:
    if values is None:
        return None
    try:
        return sorted({parse_iso_date(v).isoformat() for v in values})
    except InvalidInputError as exc:
        raise ValueError(exc.message) from None


class Cleaner(CamelModel):
    """Fully populated cleaner profile; built by ``normalize_cleaner``."""
    id: str
    name: str
    email: str = ""
    phone: Optional[str] = None
    messenger_username: Optional[str] = None
    availability: dict[Weekday, DayAvailability]
    blocked_dates: list[str] = Field(default_factory=list)
    pricing: PricingConfig
    frequency_discounts: FrequencyDiscounts

    @field_validator("blocked_dates")
    @classmethod
    def _valid_blocked_dates(cls, v: list[str]) -> list[str]:
        return _check_dates(v)


class CleanerUpdate(CamelModel):
    """Schema for updating a cleaner; only the fields sent are changed."""
    name: Optional[str] = None
    phone: Optional[str] = None
    messenger_username: Optional[str] = None
    availability: Optional[dict[Weekday, DayAvailabilityUpdate]] = None
    blocked_dates: Optional[list[str]] = None
    pricing: Optional[PricingConfig] = None
    frequency_discounts: Optional[FrequencyDiscounts] = None

    @field_validator("blocked_dates")
    @classmethod
    def _valid_blocked_dates(cls, v: Optional[list[str]]) -> Optional[list[str]]:
        return _check_dates(v)


# --- Booking Schemas ---
class BookingCreate(CamelModel):
    """Booking request submitted by the customer wizard.

    House size is range-checked by the booking transition, not here, so an
    out-of-range value is reported like any other invalid input.
    """
    cleaner_id: str
    customer_name: str
    customer_phone: str
    customer_address: str
    has_pets: bool = False
    bedrooms: int
    bathrooms: int
    service_type: ServiceType = ServiceType.REGULAR
    frequency: Frequency = Frequency.ONE_TIME
    date: str
    time_block: TimeBlock


class Booking(CamelModel):
    """Booking record; immutable apart from its status."""
    id: str
    cleaner_id: str
    customer_name: str
    customer_phone: str
    customer_address: str
    has_pets: bool = False
    bedrooms: int
    bathrooms: int
    service_type: ServiceType = ServiceType.REGULAR
    frequency: Frequency
    date: str
    time_block: TimeBlock
    start_time: str
    end_time: str
    total_price: Money
    status: BookingStatus = BookingStatus.CONFIRMED
    created_at: datetime = Field(default_factory=utcnow)


class BookingSummaryPublic(CamelModel):
    """Plain-text hand-off message for SMS or Messenger."""
    booking_id: str
    text: str


# --- Generic Response ---
class MessageResponse(BaseModel):
    """Generic message response."""
    message: str
