from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime, time, timedelta
from typing import Iterable

from .calculations import EntryCategory, Period, WorkSummary


@dataclass(frozen=True)
class EntryFacts:
    category: EntryCategory
    start_time: datetime
    end_time: datetime


def summarize_entries(entries: Iterable[EntryFacts], period: Period) -> WorkSummary:
    """
    Sum elapsed time per category within period.

    Entries are clipped to [period.start 00:00, period.end 00:00); entries
    entirely outside the period are ignored.
    Times are naive local wall-clock values.
    """
    window_start = datetime.combine(period.start, time.min)
    window_end = datetime.combine(period.end, time.min)

    durations: dict[EntryCategory, timedelta] = {}
    for entry in entries:
        if entry.start_time.tzinfo is not None or entry.end_time.tzinfo is not None:
            raise ValueError(
                f"Entry times must be naive local times (got {entry.start_time} - {entry.end_time})"
            )
        if entry.end_time <= entry.start_time:
            raise ValueError(
                f"Entry end time must be after start time (got {entry.start_time} - {entry.end_time})"
            )
        start = max(entry.start_time, window_start)
        end = min(entry.end_time, window_end)
        if end <= start:
            continue
        category = EntryCategory(entry.category)
        durations[category] = durations.get(category, timedelta(0)) + (end - start)

    return WorkSummary(period=period, durations=durations)
