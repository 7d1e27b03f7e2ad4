from __future__ import annotations

from datetime import date
from typing import Any

from pydantic import TypeAdapter

from .calculations import (
    BalanceResult,
    EntryCategory,
    MonthBalance,
    compute_balance,
    lifetime_period,
    month_balance,
    month_period,
)
from .config import settings
from .schemas import ContractIn, EntryIn
from .summary import summarize_entries

_entries_adapter = TypeAdapter(list[EntryIn])

CATEGORY_LABELS = {
    EntryCategory.WORK: "Work",
    EntryCategory.TRAVEL: "Travel",
    EntryCategory.VACATION: "Vacation",
    EntryCategory.HOLIDAY: "Holiday",
    EntryCategory.ILLNESS: "Illness",
}


def format_hours(hours: float, decimals: int | None = None) -> str:
    """Signed fixed-point hours, e.g. '+3.25'."""
    if decimals is None:
        decimals = settings.hours_decimals
    text = f"{hours:+.{decimals}f}"
    # '-0.00' after rounding reads as a deficit
    if float(text) == 0:
        text = "+" + text[1:]
    return text


def format_plain_hours(hours: float, decimals: int | None = None) -> str:
    if decimals is None:
        decimals = settings.hours_decimals
    return f"{hours:.{decimals}f}"


def format_days(days: float, decimals: int | None = None) -> str:
    if decimals is None:
        decimals = settings.days_decimals
    return f"{days:.{decimals}f} days"


def render_balance(result: BalanceResult) -> str:
    overtime = result.overtime
    lines = [
        f"Balance as of {result.as_of.isoformat()}",
        f"  Target hours:    {format_plain_hours(overtime.target_hours)}",
        f"  Actual hours:    {format_plain_hours(overtime.actual_hours)}",
        f"  Overtime:        {format_hours(overtime.balance_hours)}",
        f"  Vacation left:   {format_days(result.remaining_vacation_days)}",
    ]
    return "\n".join(lines)


def render_month(balance: MonthBalance) -> str:
    lines = [f"Month {balance.year:04d}-{balance.month:02d}"]
    for category in EntryCategory:
        lines.append(
            f"  {CATEGORY_LABELS[category] + ':':<16} "
            f"{format_plain_hours(balance.category_hours[category])}"
            f" ({balance.category_percentages[category]}%)"
        )
    lines += [
        f"  Target hours:    {format_plain_hours(balance.target_hours)}",
        f"  Actual hours:    {format_plain_hours(balance.actual_hours)}",
        f"  Required today:  {format_plain_hours(balance.required_hours_as_of_today)}",
        f"  Balance:         {format_hours(balance.balance_hours)}",
        f"  Remaining hours: {format_plain_hours(balance.remaining_hours)}"
        f" ({balance.remaining_percentage}%)",
    ]
    return "\n".join(lines)


def build_report(payload: dict[str, Any], *, as_of: date, year: int, month: int) -> str:
    """
    Lifetime and month reports for a {"contract": ..., "entries": [...]} payload.

    Raises pydantic.ValidationError on malformed input.
    """
    contract = ContractIn.model_validate(payload.get("contract") or {}).to_terms()
    entries = [e.to_facts() for e in _entries_adapter.validate_python(payload.get("entries") or [])]

    lifetime = summarize_entries(entries, lifetime_period(contract, as_of))
    result = compute_balance(contract, lifetime, as_of=as_of)

    month_summary = summarize_entries(entries, month_period(year, month))
    balance = month_balance(contract, month_summary, today=as_of)

    return render_balance(result) + "\n\n" + render_month(balance)
