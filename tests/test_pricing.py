"""
Tests for the pricing model.

Tests cover:
- Formula and flat-table subtotals
- Frequency discounts and rounding
- House size validation
"""
from decimal import Decimal

import pytest

from cleanclick.booking_models import Frequency, ServiceType
from cleanclick.errors import InvalidInputError, NotPricedError
from cleanclick.scheduling.pricing import price, quote, subtotal, validate_house_size
from tests.utils import make_cleaner, make_flat_table_cleaner


class TestFormulaPricing:
    """Tests for the default base-plus-increments formula."""

    def test_one_bed_one_bath_is_base(self) -> None:
        assert price(make_cleaner(), 1, 1, Frequency.ONE_TIME) == Decimal("90.00")

    def test_increments(self) -> None:
        # 90 + 2 * 20 + 1 * 15
        assert price(make_cleaner(), 3, 2, "one_time") == Decimal("145.00")

    def test_deep_weekly(self) -> None:
        """2 bed, 2 bath, deep: 90 + 20 + 15 + 50 = 175, weekly saves 15%."""
        total = price(make_cleaner(), 2, 2, Frequency.WEEKLY, ServiceType.DEEP)
        assert total == Decimal("148.75")

    def test_move_addon(self) -> None:
        assert subtotal(make_cleaner(), 1, 1, "move") == Decimal("170")

    def test_five_plus_priced_as_five(self) -> None:
        # 90 + 4 * 20 + 4 * 15
        assert price(make_cleaner(), 5, 5, "one_time") == Decimal("230.00")


class TestFlatTablePricing:
    """Tests for exact-key lookup pricing."""

    def test_lookup(self) -> None:
        assert price(make_flat_table_cleaner(), 2, 2, "one_time") == Decimal("115.00")

    def test_missing_key(self) -> None:
        with pytest.raises(NotPricedError):
            price(make_flat_table_cleaner(), 3, 5, "one_time")

    def test_not_priced_is_invalid_input(self) -> None:
        with pytest.raises(InvalidInputError):
            price(make_flat_table_cleaner(), 3, 5, "weekly")

    def test_service_suffix_key(self) -> None:
        cleaner = make_flat_table_cleaner()
        assert subtotal(cleaner, 2, 1, "deep") == Decimal("140")
        # No "2-1-move" entry: falls back to the plain key
        assert subtotal(cleaner, 2, 1, "move") == Decimal("95")


class TestDiscounts:
    """Tests for frequency discounts and rounding."""

    def test_one_time_never_discounted(self) -> None:
        cleaner = make_cleaner(frequency_discounts={"weekly": 50})
        assert price(cleaner, 2, 1, Frequency.ONE_TIME) == subtotal(cleaner, 2, 1)

    @pytest.mark.parametrize(
        "frequency,expected",
        [
            (Frequency.WEEKLY, Decimal("93.50")),
            (Frequency.BIWEEKLY, Decimal("99.00")),
            (Frequency.MONTHLY, Decimal("104.50")),
        ],
    )
    def test_default_discounts(self, frequency: Frequency, expected: Decimal) -> None:
        # Subtotal 110 for 2 bed, 1 bath
        assert price(make_cleaner(), 2, 1, frequency) == expected

    def test_rounds_half_up(self) -> None:
        """5.025 rounds to 5.03, not to the even 5.02."""
        cleaner = make_cleaner(
            pricing_table={"1-1": "10.05"}, frequency_discounts={"weekly": 50}
        )
        assert price(cleaner, 1, 1, "weekly") == Decimal("5.03")

    def test_idempotent(self) -> None:
        cleaner = make_cleaner()
        first = price(cleaner, 4, 3, "biweekly", "deep")
        assert all(price(cleaner, 4, 3, "biweekly", "deep") == first for _ in range(5))

    def test_unknown_frequency(self) -> None:
        with pytest.raises(InvalidInputError):
            price(make_cleaner(), 1, 1, "daily")


class TestQuote:
    """Tests for the price preview."""

    def test_quote_breaks_out_discount(self) -> None:
        q = quote(make_cleaner(), 2, 2, "weekly", "deep")
        assert q.subtotal == Decimal("175.00")
        assert q.discount_percent == Decimal("15")
        assert q.total == Decimal("148.75")
        assert q.discount_label == "Save 15%"

    def test_quote_matches_price(self) -> None:
        cleaner = make_flat_table_cleaner()
        assert quote(cleaner, 2, 5, "monthly").total == price(cleaner, 2, 5, "monthly")

    def test_one_time_has_no_label(self) -> None:
        assert quote(make_cleaner(), 1, 1, "one_time").discount_label == ""


class TestHouseSize:
    """Tests for bedroom and bathroom range checks."""

    @pytest.mark.parametrize("bedrooms,bathrooms", [(0, 1), (1, 0), (6, 1), (1, 6), (-1, 2)])
    def test_out_of_range(self, bedrooms: int, bathrooms: int) -> None:
        with pytest.raises(InvalidInputError):
            validate_house_size(bedrooms, bathrooms)

    def test_rejects_booleans(self) -> None:
        with pytest.raises(InvalidInputError):
            validate_house_size(True, 1)

    def test_limits_accepted(self) -> None:
        validate_house_size(1, 5)
        validate_house_size(5, 1)
