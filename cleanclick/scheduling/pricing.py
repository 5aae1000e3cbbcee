"""
Pricing model.

Prices are computed in ``Decimal`` and rounded half-up to the cent, so the
same inputs always give the same total on the preview and on the booking.
"""
from decimal import ROUND_HALF_UP, Decimal
from typing import Union

from cleanclick.booking_models import (
    Cleaner,
    Frequency,
    FrequencyDiscounts,
    QuotePublic,
    ServiceType,
)
from cleanclick.errors import InvalidInputError, NotPricedError

MIN_ROOMS = 1
MAX_ROOMS = 5  # shown as "5+", priced as 5
CENT = Decimal("0.01")
HUNDRED = Decimal("100")


def validate_house_size(bedrooms: int, bathrooms: int) -> None:
    for label, value in (("bedrooms", bedrooms), ("bathrooms", bathrooms)):
        if isinstance(value, bool) or not isinstance(value, int):
            raise InvalidInputError(f"{label} must be a whole number")
        if not MIN_ROOMS <= value <= MAX_ROOMS:
            raise InvalidInputError(
                f"{label} must be between {MIN_ROOMS} and {MAX_ROOMS}, got {value}"
            )


def as_frequency(frequency: Union[Frequency, str]) -> Frequency:
    try:
        return Frequency(frequency)
    except ValueError:
        raise InvalidInputError(f"Unknown frequency {frequency!r}") from None


def as_service_type(service_type: Union[ServiceType, str, None]) -> ServiceType:
    if service_type is None:
        return ServiceType.REGULAR
    try:
        return ServiceType(service_type)
    except ValueError:
        raise InvalidInputError(f"Unknown service type {service_type!r}") from None


def round_money(value: Decimal) -> Decimal:
    return value.quantize(CENT, rounding=ROUND_HALF_UP)


def discount_percent(
    discounts: FrequencyDiscounts, frequency: Union[Frequency, str]
) -> Decimal:
    frequency = as_frequency(frequency)
    if frequency == Frequency.ONE_TIME:
        return Decimal("0")
    return Decimal(getattr(discounts, frequency.value))


def discount_label(percent: Decimal) -> str:
    return f"Save {percent.normalize():f}%" if percent > 0 else ""


def subtotal(
    cleaner: Cleaner,
    bedrooms: int,
    bathrooms: int,
    service_type: Union[ServiceType, str, None] = ServiceType.REGULAR,
) -> Decimal:
    validate_house_size(bedrooms, bathrooms)
    amount = cleaner.pricing.subtotal(bedrooms, bathrooms, as_service_type(service_type))
    if amount is None:
        raise NotPricedError(
            f"No rate defined for {bedrooms} bedroom(s) and {bathrooms} bathroom(s)"
        )
    return Decimal(amount)


def price(
    cleaner: Cleaner,
    bedrooms: int,
    bathrooms: int,
    frequency: Union[Frequency, str],
    service_type: Union[ServiceType, str, None] = ServiceType.REGULAR,
) -> Decimal:
    """Total price of a visit, after the frequency discount, rounded to the cent."""
    base = subtotal(cleaner, bedrooms, bathrooms, service_type)
    pct = discount_percent(cleaner.frequency_discounts, frequency)
    return round_money(base * (HUNDRED - pct) / HUNDRED)


def quote(
    cleaner: Cleaner,
    bedrooms: int,
    bathrooms: int,
    frequency: Union[Frequency, str],
    service_type: Union[ServiceType, str, None] = ServiceType.REGULAR,
) -> QuotePublic:
    """Price preview with the discount broken out for the booking wizard."""
    base = subtotal(cleaner, bedrooms, bathrooms, service_type)
    pct = discount_percent(cleaner.frequency_discounts, frequency)
    return QuotePublic(
        subtotal=round_money(base),
        discount_percent=pct,
        total=price(cleaner, bedrooms, bathrooms, frequency, service_type),
        discount_label=discount_label(pct),
    )
