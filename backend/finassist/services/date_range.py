from __future__ import annotations

import calendar
import re
from dataclasses import dataclass
from datetime import date, datetime, timedelta

MONTH_NAME_TO_NUMBER = {
    "january": 1,
    "february": 2,
    "march": 3,
    "april": 4,
    "may": 5,
    "june": 6,
    "july": 7,
    "august": 8,
    "september": 9,
    "october": 10,
    "november": 11,
    "december": 12,
}

_LAST_MONTH_RE = re.compile(r"\b(last month|previous month)\b")
_THIS_MONTH_RE = re.compile(r"\b(this month|current month)\b")
_LAST_WEEK_RE = re.compile(r"\b(last week|previous week)\b")
_THIS_WEEK_RE = re.compile(r"\b(this week|current week)\b")
_THIS_YEAR_RE = re.compile(r"\b(this year|current year)\b")
_LAST_YEAR_RE = re.compile(r"\b(last year|previous year)\b")


@dataclass(frozen=True, slots=True)
class DateRange:
    start: date
    end: date
    label: str

    def contains(self, moment: date | datetime | None) -> bool:
        if moment is None:
            return False
        day = moment.date() if isinstance(moment, datetime) else moment
        return self.start <= day <= self.end


def month_bounds(year: int, month: int) -> tuple[date, date]:
    last_day = calendar.monthrange(year, month)[1]
    return date(year, month, 1), date(year, month, last_day)


def previous_month(year: int, month: int) -> tuple[int, int]:
    if month == 1:
        return year - 1, 12
    return year, month - 1


def shift_month(year: int, month: int, offset: int) -> tuple[int, int]:
    """Move ``offset`` calendar months back from (year, month)."""
    index = year * 12 + (month - 1) - offset
    return index // 12, index % 12 + 1


def _week_start(today: date) -> date:
    return today - timedelta(days=today.weekday())


def resolve_date_range(message: str, now: datetime) -> DateRange | None:
    """Map a temporal phrase in ``message`` onto a concrete window.

    Phrases are tried in a fixed priority order; the first hit wins. A bare
    month name refers to the most recent occurrence of that month unless the
    message says "this year". Returns None when nothing temporal is found.
    """
    lowered = message.lower()
    today = now.date()

    if _LAST_MONTH_RE.search(lowered):
        year, month = previous_month(today.year, today.month)
        start, end = month_bounds(year, month)
        return DateRange(start, end, "Last Month")

    if _THIS_MONTH_RE.search(lowered):
        start, end = month_bounds(today.year, today.month)
        return DateRange(start, end, "This Month")

    if _LAST_WEEK_RE.search(lowered):
        start = _week_start(today) - timedelta(days=7)
        return DateRange(start, start + timedelta(days=6), "Last Week")

    if _THIS_WEEK_RE.search(lowered):
        start = _week_start(today)
        return DateRange(start, start + timedelta(days=6), "This Week")

    if _THIS_YEAR_RE.search(lowered):
        return DateRange(date(today.year, 1, 1), date(today.year, 12, 31), "This Year")

    if _LAST_YEAR_RE.search(lowered):
        return DateRange(
            date(today.year - 1, 1, 1), date(today.year - 1, 12, 31), "Last Year"
        )

    for month_name, month in MONTH_NAME_TO_NUMBER.items():
        if re.search(rf"\b{month_name}\b", lowered):
            year = today.year
            # "this year" is normally caught by the year rule above.
            if month > today.month and "this year" not in lowered:
                year -= 1
            start, end = month_bounds(year, month)
            return DateRange(start, end, month_name.capitalize())

    return None
