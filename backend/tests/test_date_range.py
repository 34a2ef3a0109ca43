from datetime import date, datetime

import pytest

from finassist.services.date_range import DateRange, resolve_date_range, shift_month


def test_last_month_rolls_back_into_previous_year() -> None:
    resolved = resolve_date_range("How much did I spend last month?", datetime(2024, 1, 15))
    assert resolved == DateRange(date(2023, 12, 1), date(2023, 12, 31), "Last Month")


def test_this_month_covers_whole_calendar_month() -> None:
    resolved = resolve_date_range("spending THIS MONTH", datetime(2024, 2, 10))
    assert resolved == DateRange(date(2024, 2, 1), date(2024, 2, 29), "This Month")


def test_last_month_takes_priority_over_this_month() -> None:
    resolved = resolve_date_range("this month vs previous month", datetime(2024, 5, 3))
    assert resolved is not None
    assert resolved.label == "Last Month"
    assert resolved.start == date(2024, 4, 1)


@pytest.mark.parametrize(
    ("now", "start", "end"),
    [
        (datetime(2024, 1, 15), date(2024, 1, 15), date(2024, 1, 21)),  # Monday
        (datetime(2024, 1, 17), date(2024, 1, 15), date(2024, 1, 21)),
        (datetime(2024, 1, 21), date(2024, 1, 15), date(2024, 1, 21)),  # Sunday
    ],
)
def test_this_week_runs_monday_to_sunday(now, start, end) -> None:
    resolved = resolve_date_range("this week", now)
    assert resolved == DateRange(start, end, "This Week")


def test_last_week() -> None:
    resolved = resolve_date_range("what about last week", datetime(2024, 1, 21))
    assert resolved == DateRange(date(2024, 1, 8), date(2024, 1, 14), "Last Week")


def test_years() -> None:
    now = datetime(2024, 6, 1)
    assert resolve_date_range("this year", now) == DateRange(date(2024, 1, 1), date(2024, 12, 31), "This Year")
    assert resolve_date_range("previous year", now) == DateRange(
        date(2023, 1, 1), date(2023, 12, 31), "Last Year"
    )


def test_bare_month_name_infers_most_recent_year() -> None:
    now = datetime(2024, 3, 10)
    assert resolve_date_range("income in October", now) == DateRange(
        date(2023, 10, 1), date(2023, 10, 31), "October"
    )
    assert resolve_date_range("income in february", now) == DateRange(
        date(2024, 2, 1), date(2024, 2, 29), "February"
    )
    assert resolve_date_range("expenses in march", now) == DateRange(
        date(2024, 3, 1), date(2024, 3, 31), "March"
    )


def test_month_names_match_whole_words_only() -> None:
    assert resolve_date_range("maybe I overspent", datetime(2024, 3, 10)) is None


def test_year_phrase_wins_over_month_name() -> None:
    resolved = resolve_date_range("october this year", datetime(2024, 3, 10))
    assert resolved == DateRange(date(2024, 1, 1), date(2024, 12, 31), "This Year")


def test_no_temporal_phrase() -> None:
    assert resolve_date_range("what's my balance?", datetime(2024, 3, 10)) is None


def test_contains_is_inclusive_on_calendar_days() -> None:
    window = DateRange(date(2024, 3, 1), date(2024, 3, 31), "March")
    assert window.contains(datetime(2024, 3, 31, 23, 59))
    assert window.contains(date(2024, 3, 1))
    assert not window.contains(datetime(2024, 4, 1))
    assert not window.contains(None)


def test_shift_month_crosses_year_boundary() -> None:
    assert shift_month(2024, 2, 0) == (2024, 2)
    assert shift_month(2024, 2, 2) == (2023, 12)
    assert shift_month(2024, 1, 13) == (2022, 12)
