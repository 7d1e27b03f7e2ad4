from __future__ import annotations

import calendar
from datetime import date, timedelta
from typing import Iterator


def weekday_offset(d: date) -> int:
    """Monday -> 0 ... Sunday -> 6."""
    return d.weekday()


def count_working_days(start: date, end: date) -> int:
    """
    Number of Monday-Friday days in [start, end).

    Closed form: snap both dates back to their Mondays, count whole weeks
    between them, then correct for the partial first/last week. A weekend
    boundary is capped at 5 so Sunday counts like Saturday.
    end < start yields a negative count.
    """
    start_offset = weekday_offset(start)
    end_offset = weekday_offset(end)
    start_monday = start - timedelta(days=start_offset)
    end_monday = end - timedelta(days=end_offset)

    weeks = round((end_monday - start_monday).days / 7)
    days = -min(start_offset, 5) + min(end_offset, 5)
    return weeks * 5 + days


def month_start(d: date) -> date:
    return d.replace(day=1)


def next_month(d: date) -> date:
    if d.month == 12:
        return date(d.year + 1, 1, 1)
    return date(d.year, d.month + 1, 1)


def month_bounds(year: int, month: int) -> tuple[date, date]:
    """Half-open bounds of a calendar month: (first day, first day of next month)."""
    last_day = calendar.monthrange(year, month)[1]
    first = date(year, month, 1)
    return first, date(year, month, last_day) + timedelta(days=1)


def iter_month_starts(first: date, last: date) -> Iterator[date]:
    """First day of every month from first's month through last's month."""
    current = month_start(first)
    stop = month_start(last)
    while current <= stop:
        yield current
        current = next_month(current)
