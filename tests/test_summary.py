from datetime import date, datetime, timedelta, timezone

import pytest

from worklog.calculations import (
    ContractTerms,
    EntryCategory,
    Period,
    month_period,
    overtime_balance,
)
from worklog.summary import EntryFacts, summarize_entries


def entry(category, start, end):
    return EntryFacts(category=category, start_time=start, end_time=end)


def test_summarize_entries_groups_by_category():
    entries = [
        entry(EntryCategory.WORK, datetime(2023, 3, 1, 8, 0), datetime(2023, 3, 1, 12, 0)),
        entry(EntryCategory.WORK, datetime(2023, 3, 1, 13, 0), datetime(2023, 3, 1, 17, 30)),
        entry(EntryCategory.TRAVEL, datetime(2023, 3, 2, 7, 0), datetime(2023, 3, 2, 9, 0)),
    ]
    summary = summarize_entries(entries, month_period(2023, 3))
    assert summary.period == month_period(2023, 3)
    assert summary.elapsed(EntryCategory.WORK) == timedelta(hours=8, minutes=30)
    assert summary.elapsed(EntryCategory.TRAVEL) == timedelta(hours=2)
    assert summary.elapsed(EntryCategory.VACATION) == timedelta(0)
    assert summary.total() == timedelta(hours=10, minutes=30)


def test_summarize_entries_clips_to_period():
    entries = [
        # overlaps the start of March
        entry(EntryCategory.WORK, datetime(2023, 2, 28, 22, 0), datetime(2023, 3, 1, 2, 0)),
        # outside
        entry(EntryCategory.WORK, datetime(2023, 4, 1, 8, 0), datetime(2023, 4, 1, 10, 0)),
        # overlaps the end of March
        entry(EntryCategory.ILLNESS, datetime(2023, 3, 31, 23, 0), datetime(2023, 4, 1, 1, 0)),
    ]
    summary = summarize_entries(entries, month_period(2023, 3))
    assert summary.elapsed(EntryCategory.WORK) == timedelta(hours=2)
    assert summary.elapsed(EntryCategory.ILLNESS) == timedelta(hours=1)


def test_summarize_entries_rejects_inverted_entry():
    entries = [entry(EntryCategory.WORK, datetime(2023, 3, 1, 12, 0), datetime(2023, 3, 1, 8, 0))]
    with pytest.raises(ValueError):
        summarize_entries(entries, month_period(2023, 3))


def test_summary_feeds_overtime():
    contract = ContractTerms(
        first_day=date(2023, 1, 2),
        working_hours=[(date(2023, 1, 1), 8.0)],
    )
    # Monday 2023-01-02 .. Friday 2023-01-06, one 8.5 h day each
    entries = [
        entry(
            EntryCategory.WORK,
            datetime(2023, 1, d, 8, 0),
            datetime(2023, 1, d, 16, 30),
        )
        for d in range(2, 7)
    ]
    period = Period(start=date(2023, 1, 2), end=date(2023, 1, 7))
    result = overtime_balance(contract, summarize_entries(entries, period))
    assert result.target_hours == 40.0
    assert result.actual_hours == 42.5
    assert result.overtime_hours == 2.5


def test_summarize_entries_rejects_aware_times():
    entries = [
        entry(
            EntryCategory.WORK,
            datetime(2023, 3, 1, 8, 0, tzinfo=timezone.utc),
            datetime(2023, 3, 1, 16, 0, tzinfo=timezone.utc),
        )
    ]
    with pytest.raises(ValueError):
        summarize_entries(entries, month_period(2023, 3))
