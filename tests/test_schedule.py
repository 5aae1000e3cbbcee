"""
Tests for the weekly schedule model.

Tests cover:
- Weekday of a calendar date
- Weekly template and blocked dates
- Day picker sequence
"""
from datetime import date

import pytest

from cleanclick.booking_models import TimeBlock, Weekday
from cleanclick.errors import InvalidInputError
from cleanclick.scheduling.schedule import (
    is_day_open,
    is_open,
    next_open_days,
    weekday_of,
)
from tests.utils import MONDAY, SATURDAY, SUNDAY, TUESDAY, make_cleaner


class TestWeekdayOf:
    """Tests for weekday computation."""

    def test_known_dates(self) -> None:
        assert weekday_of(MONDAY) == Weekday.MONDAY
        assert weekday_of(SUNDAY) == Weekday.SUNDAY
        assert weekday_of("2024-02-29") == Weekday.THURSDAY

    def test_accepts_date_objects(self) -> None:
        assert weekday_of(date(2025, 6, 7)) == Weekday.SATURDAY

    def test_year_boundary(self) -> None:
        """The first of January must not slip into the previous year."""
        assert weekday_of("2026-01-01") == Weekday.THURSDAY

    @pytest.mark.parametrize("value", ["2025-6-2", "2025-02-30", "tomorrow", ""])
    def test_rejects_malformed_dates(self, value: str) -> None:
        with pytest.raises(InvalidInputError):
            weekday_of(value)


class TestIsOpen:
    """Tests for nominal openness of a block."""

    def test_default_week(self) -> None:
        """Weekdays are fully open, Saturday mornings only, Sunday closed."""
        cleaner = make_cleaner()
        assert is_open(cleaner, MONDAY, TimeBlock.MORNING)
        assert is_open(cleaner, MONDAY, TimeBlock.AFTERNOON)
        assert is_open(cleaner, SATURDAY, TimeBlock.MORNING)
        assert not is_open(cleaner, SATURDAY, TimeBlock.AFTERNOON)
        assert not is_open(cleaner, SUNDAY, TimeBlock.MORNING)
        assert not is_open(cleaner, SUNDAY, TimeBlock.AFTERNOON)

    def test_blocked_date_closes_both_blocks(self) -> None:
        cleaner = make_cleaner(blocked_dates=[MONDAY])
        assert not is_open(cleaner, MONDAY, "morning")
        assert not is_open(cleaner, MONDAY, "afternoon")
        assert is_open(cleaner, TUESDAY, "morning")

    def test_custom_template(self) -> None:
        cleaner = make_cleaner(
            availability={"monday": {"morning": False, "afternoon": True}}
        )
        assert not is_open(cleaner, MONDAY, TimeBlock.MORNING)
        assert is_open(cleaner, MONDAY, TimeBlock.AFTERNOON)
        assert is_day_open(cleaner, MONDAY)

    def test_unknown_block(self) -> None:
        with pytest.raises(InvalidInputError):
            is_open(make_cleaner(), MONDAY, "evening")


class TestNextOpenDays:
    """Tests for the day picker sequence."""

    def test_marks_open_and_closed_days(self) -> None:
        days = list(next_open_days(make_cleaner(blocked_dates=[TUESDAY]), MONDAY, 7))
        assert len(days) == 7
        assert [d.date.isoformat() for d in days][:2] == [MONDAY, TUESDAY]
        assert [d.is_open for d in days] == [True, False, True, True, True, True, False]
        assert days[0].weekday_label == "Monday"
        assert days[-1].weekday_label == "Sunday"

    def test_restartable(self) -> None:
        days = next_open_days(make_cleaner(), MONDAY, 3)
        assert len(days) == 3
        assert list(days) == list(days)

    def test_zero_count(self) -> None:
        assert list(next_open_days(make_cleaner(), MONDAY, 0)) == []

    def test_negative_count(self) -> None:
        with pytest.raises(InvalidInputError):
            next_open_days(make_cleaner(), MONDAY, -1)

    def test_spans_month_end(self) -> None:
        days = list(next_open_days(make_cleaner(), "2025-06-29", 3))
        assert [d.date.isoformat() for d in days] == ["2025-06-29", "2025-06-30", "2025-07-01"]
