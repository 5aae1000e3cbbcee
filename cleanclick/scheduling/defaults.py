"""
Profile normalization.

Stored cleaner rows come in several shapes (NULL JSON columns, the legacy
``days_off``/``pricing_table``/``pricing_formula`` columns, camelCase keys
written by older clients). ``normalize_cleaner`` is the only place that
turns any of them into a complete ``Cleaner``; nothing past the repository
boundary ever sees a missing field.
"""
from collections.abc import Mapping
from decimal import Decimal
from typing import Any, Optional

from pydantic import TypeAdapter, ValidationError
from pydantic.alias_generators import to_snake

from cleanclick.booking_models import (
    Cleaner,
    CleanerUpdate,
    DayAvailability,
    FlatTablePricing,
    FormulaPricing,
    FrequencyDiscounts,
    PricingConfig,
    ServiceAddons,
    Weekday,
)
from cleanclick.errors import InvalidInputError, StorageError

DEFAULT_NAME = "New Cleaner"

DEFAULT_AVAILABILITY: dict[Weekday, DayAvailability] = {
    Weekday.MONDAY: DayAvailability(morning=True, afternoon=True),
    Weekday.TUESDAY: DayAvailability(morning=True, afternoon=True),
    Weekday.WEDNESDAY: DayAvailability(morning=True, afternoon=True),
    Weekday.THURSDAY: DayAvailability(morning=True, afternoon=True),
    Weekday.FRIDAY: DayAvailability(morning=True, afternoon=True),
    Weekday.SATURDAY: DayAvailability(morning=True, afternoon=False),
    Weekday.SUNDAY: DayAvailability(morning=False, afternoon=False),
}

DEFAULT_FORMULA = {
    "base": Decimal("90"),
    "extra_per_bedroom": Decimal("20"),
    "extra_per_bathroom": Decimal("15"),
}

DEFAULT_ADDONS = {"deep": Decimal("50"), "move": Decimal("80")}

DEFAULT_DISCOUNTS = {
    "weekly": Decimal("15"),
    "biweekly": Decimal("10"),
    "monthly": Decimal("5"),
}

DEFAULT_PRICING_TABLE = {
    "1-1": 80, "1-2": 95, "1-3": 110, "1-4": 130, "1-5": 150,
    "2-1": 95, "2-2": 115, "2-3": 135, "2-4": 155, "2-5": 175,
    "3-1": 115, "3-2": 140, "3-3": 160, "3-4": 185, "3-5": 210,
    "4-1": 135, "4-2": 165, "4-3": 190, "4-4": 220, "4-5": 250,
    "5-1": 160, "5-2": 195, "5-3": 225, "5-4": 260, "5-5": 295,
}

_pricing_adapter: TypeAdapter = TypeAdapter(PricingConfig)

_NULLABLE_FIELDS = ("phone", "messenger_username")


def _snake_keys(value: Any) -> dict[str, Any]:
    if not isinstance(value, Mapping):
        return {}
    return {to_snake(str(k)): v for k, v in value.items() if v is not None}


def default_pricing(strategy: str = "formula") -> PricingConfig:
    if strategy == "flat_table":
        return FlatTablePricing(table=DEFAULT_PRICING_TABLE)
    return FormulaPricing(**DEFAULT_FORMULA, service_addons=ServiceAddons(**DEFAULT_ADDONS))


def _normalize_availability(raw: Any) -> dict[Weekday, DayAvailability]:
    raw = raw if isinstance(raw, Mapping) else {}
    availability = {}
    for day in Weekday:
        fallback = DEFAULT_AVAILABILITY[day]
        entry = raw.get(day.value)
        entry = entry if isinstance(entry, Mapping) else {}
        availability[day] = DayAvailability(
            morning=bool(entry.get("morning", fallback.morning)),
            afternoon=bool(entry.get("afternoon", fallback.afternoon)),
        )
    return availability


def _normalize_pricing(row: Mapping[str, Any], strategy: str) -> PricingConfig:
    if isinstance(row.get("pricing"), Mapping) and row["pricing"].get("kind"):
        return _pricing_adapter.validate_python(row["pricing"])
    if row.get("pricing_table"):
        return FlatTablePricing(table=row["pricing_table"])
    if row.get("pricing_formula") or row.get("service_addons"):
        formula = {**DEFAULT_FORMULA, **_snake_keys(row.get("pricing_formula"))}
        addons = {**DEFAULT_ADDONS, **_snake_keys(row.get("service_addons"))}
        formula.pop("kind", None)
        formula.pop("service_addons", None)
        return FormulaPricing(**formula, service_addons=ServiceAddons(**addons))
    return default_pricing(strategy)


def normalize_cleaner(row: Mapping[str, Any], strategy: str = "formula") -> Cleaner:
    """Build a fully populated ``Cleaner`` from a stored row."""
    try:
        return Cleaner(
            id=str(row["id"]),
            name=row.get("name") or DEFAULT_NAME,
            email=row.get("email") or "",
            phone=row.get("phone") or None,
            messenger_username=row.get("messenger_username") or None,
            availability=_normalize_availability(row.get("availability")),
            blocked_dates=list(
                row["blocked_dates"]
                if row.get("blocked_dates") is not None
                else row.get("days_off") or []
            ),
            pricing=_normalize_pricing(row, strategy),
            frequency_discounts=FrequencyDiscounts(
                **{**DEFAULT_DISCOUNTS, **_snake_keys(row.get("frequency_discounts"))}
            ),
        )
    except (KeyError, ValidationError) as e:
        raise StorageError(f"Stored cleaner profile {row.get('id')!r} is invalid: {e}") from e


def default_cleaner(
    cleaner_id: str,
    name: Optional[str] = None,
    email: Optional[str] = None,
    strategy: str = "formula",
) -> Cleaner:
    """The profile provisioned for a cleaner on first access."""
    return normalize_cleaner(
        {"id": cleaner_id, "name": name, "email": email}, strategy=strategy
    )


def cleaner_to_row(cleaner: Cleaner) -> dict[str, Any]:
    """Serialize a cleaner to the JSON-safe snake_case row every backend stores."""
    return cleaner.model_dump(mode="json")


def merge_update(cleaner: Cleaner, update: CleanerUpdate) -> tuple[Cleaner, dict[str, Any]]:
    """
    Apply a partial update. Returns the updated cleaner and the row patch
    holding only the columns that changed hands.

    A partial ``availability`` mapping only replaces the blocks it names,
    and partial ``frequency_discounts`` only the frequencies it names.
    """
    changes = update.model_dump(exclude_unset=True)
    changes = {
        k: v for k, v in changes.items() if v is not None or k in _NULLABLE_FIELDS
    }
    if "availability" in changes:
        changes["availability"] = {
            **cleaner.availability,
            **{
                day: cleaner.availability[day].model_copy(
                    update={k: v for k, v in blocks.items() if v is not None}
                )
                for day, blocks in changes["availability"].items()
            },
        }
    if "frequency_discounts" in changes:
        changes["frequency_discounts"] = {
            **cleaner.frequency_discounts.model_dump(),
            **changes["frequency_discounts"],
        }

    try:
        updated = Cleaner.model_validate({**cleaner.model_dump(), **changes})
    except ValidationError as e:
        raise InvalidInputError(f"Invalid profile update: {e}") from e
    row = cleaner_to_row(updated)
    return updated, {k: row[k] for k in changes}
