from __future__ import annotations

import logging
from dataclasses import dataclass, field
from datetime import date, timedelta
from enum import Enum
from typing import Mapping

from .timeline import RateTimeline
from .workdays import count_working_days, iter_month_starts, month_bounds

logger = logging.getLogger(__name__)

_HOUR = timedelta(hours=1)
_MINUTE_US = 60_000_000


class EntryCategory(str, Enum):
    WORK = "work"
    TRAVEL = "travel"
    VACATION = "vacation"
    HOLIDAY = "holiday"
    ILLNESS = "illness"


@dataclass(frozen=True)
class Period:
    start: date  # inclusive
    end: date    # exclusive


@dataclass(frozen=True)
class ContractTerms:
    first_day: date
    init_overtime_hours: float = 0.0
    init_vacation_days: float = 0.0
    working_hours: RateTimeline = field(default_factory=RateTimeline)  # daily hours
    vacation_days: RateTimeline = field(default_factory=RateTimeline)  # days per month

    def __post_init__(self) -> None:
        if not isinstance(self.working_hours, RateTimeline):
            object.__setattr__(self, "working_hours", RateTimeline(self.working_hours))
        if not isinstance(self.vacation_days, RateTimeline):
            object.__setattr__(self, "vacation_days", RateTimeline(self.vacation_days))


@dataclass(frozen=True)
class WorkSummary:
    """Elapsed time per category logged within period."""

    period: Period
    durations: Mapping[EntryCategory, timedelta] = field(default_factory=dict)

    def __post_init__(self) -> None:
        object.__setattr__(
            self,
            "durations",
            {EntryCategory(k): v for k, v in self.durations.items()},
        )

    def elapsed(self, category: EntryCategory) -> timedelta:
        return self.durations.get(category, timedelta(0))

    def total(self) -> timedelta:
        # every category counts toward the target, not only WORK
        return sum(self.durations.values(), timedelta(0))


@dataclass(frozen=True)
class OvertimeBalance:
    period: Period
    initial_hours: float
    target_hours: float
    actual_hours: float
    balance_hours: float  # signed
    overtime_hours: float
    undertime_hours: float


@dataclass(frozen=True)
class VacationBalance:
    accrued_hours: float
    taken_hours: float
    remaining_hours: float  # signed
    remaining_days: float   # never negative


@dataclass(frozen=True)
class BalanceResult:
    as_of: date
    overtime: OvertimeBalance
    vacation: VacationBalance

    @property
    def overtime_hours(self) -> float:
        return self.overtime.balance_hours

    @property
    def remaining_vacation_days(self) -> float:
        return self.vacation.remaining_days


@dataclass(frozen=True)
class MonthBalance:
    period: Period
    category_hours: dict[EntryCategory, float]
    actual_hours: float
    target_hours: float
    required_hours_as_of_today: float
    balance_hours: float
    overtime_hours: float
    undertime_hours: float
    remaining_hours: float
    category_percentages: dict[EntryCategory, int]
    remaining_percentage: int

    @property
    def year(self) -> int:
        return self.period.start.year

    @property
    def month(self) -> int:
        return self.period.start.month


# ---------------------------------------------------------------------------
# Rounding
# ---------------------------------------------------------------------------

def round_to_minute(duration: timedelta) -> timedelta:
    """Nearest whole minute, halves away from zero."""
    micros = duration // timedelta(microseconds=1)
    minutes = (abs(micros) + _MINUTE_US // 2) // _MINUTE_US
    return timedelta(minutes=-minutes if micros < 0 else minutes)


def rounded_hours(duration: timedelta) -> float:
    return round_to_minute(duration) / _HOUR


def round_hours(hours: float) -> float:
    return rounded_hours(timedelta(hours=hours))


def split_balance(balance_hours: float) -> tuple[float, float]:
    """Signed balance -> (overtime, undertime); at most one is non-zero."""
    if balance_hours >= 0:
        return balance_hours, 0.0
    return 0.0, -balance_hours


# ---------------------------------------------------------------------------
# Overtime
# ---------------------------------------------------------------------------

def target_duration(working_hours: RateTimeline, period: Period) -> timedelta:
    """
    Contracted working time within period.

    The period is cut at every rate change strictly inside it; each piece
    contributes its working days times the daily rate in effect at its start.
    """
    cuts = [period.start, *working_hours.boundaries_within(period.start, period.end), period.end]

    total = timedelta(0)
    for sub_start, sub_end in zip(cuts, cuts[1:]):
        rate = working_hours.rate_at(sub_start)
        days = count_working_days(sub_start, sub_end)
        logger.debug(
            "Interval %s - %s: %d working days at %.2f h", sub_start, sub_end, days, rate
        )
        total += days * timedelta(hours=rate)
    return total


def target_hours(working_hours: RateTimeline, period: Period) -> float:
    return rounded_hours(target_duration(working_hours, period))


def overtime_balance(contract: ContractTerms, summary: WorkSummary) -> OvertimeBalance:
    """
    Overtime over summary.period.

    The initial overtime of the contract is carried in only when the period
    starts on the contract's first day.
    """
    period = summary.period
    carry = timedelta(0)
    if period.start == contract.first_day:
        carry = timedelta(hours=contract.init_overtime_hours)

    actual = summary.total()
    target = target_duration(contract.working_hours, period)
    logger.debug(
        "Overtime %s - %s: carry %s, actual %s, target %s",
        period.start, period.end, carry, actual, target,
    )

    balance = rounded_hours(carry + actual - target)
    overtime, undertime = split_balance(balance)
    return OvertimeBalance(
        period=period,
        initial_hours=rounded_hours(carry),
        target_hours=rounded_hours(target),
        actual_hours=rounded_hours(actual),
        balance_hours=balance,
        overtime_hours=overtime,
        undertime_hours=undertime,
    )


# ---------------------------------------------------------------------------
# Vacation
# ---------------------------------------------------------------------------

def accrued_vacation_hours(contract: ContractTerms, as_of: date) -> float:
    """
    Initial vacation plus the monthly allowance of every month from the
    contract's first month through as_of's month, each converted to hours
    with the daily rate of that month.
    """
    daily = contract.working_hours
    accrued = contract.init_vacation_days * daily.rate_at(contract.first_day)
    logger.debug("Initial vacation: %.2f hours", accrued)

    for month in iter_month_starts(contract.first_day, as_of):
        accrued += contract.vacation_days.rate_at(month) * daily.rate_at(month)
    logger.debug("Accrued vacation: %.2f hours", accrued)
    return accrued


def vacation_balance(
    contract: ContractTerms,
    summary: WorkSummary,
    *,
    as_of: date,
) -> VacationBalance:
    """
    Remaining vacation as of as_of. summary must cover the contract lifetime.

    A negative remainder is reported as 0 days (hours keep the sign).
    """
    accrued = accrued_vacation_hours(contract, as_of)
    taken = summary.elapsed(EntryCategory.VACATION) / _HOUR
    remaining = accrued - taken
    logger.debug("Taken vacation: %.2f hours, remaining %.2f hours", taken, remaining)

    daily_rate = contract.working_hours.rate_at(as_of)
    remaining_days = 0.0
    if remaining > 0 and daily_rate > 0:
        remaining_days = remaining / daily_rate

    return VacationBalance(
        accrued_hours=round_hours(accrued),
        taken_hours=round_hours(taken),
        remaining_hours=round_hours(remaining),
        remaining_days=remaining_days,
    )


# ---------------------------------------------------------------------------
# Lifetime balance
# ---------------------------------------------------------------------------

def lifetime_period(contract: ContractTerms, as_of: date) -> Period:
    return Period(start=contract.first_day, end=as_of)


def compute_balance(
    contract: ContractTerms,
    summary: WorkSummary,
    *,
    as_of: date,
) -> BalanceResult:
    """Overtime over summary.period and vacation balance as of as_of."""
    return BalanceResult(
        as_of=as_of,
        overtime=overtime_balance(contract, summary),
        vacation=vacation_balance(contract, summary, as_of=as_of),
    )


# ---------------------------------------------------------------------------
# Month to date
# ---------------------------------------------------------------------------

def month_period(year: int, month: int) -> Period:
    start, end = month_bounds(year, month)
    return Period(start=start, end=end)


def month_target_hours(contract: ContractTerms, year: int, month: int) -> float:
    return target_hours(contract.working_hours, month_period(year, month))


def required_duration_as_of(contract: ContractTerms, period: Period, today: date) -> timedelta:
    """Target for the working days of period up to and including today."""
    end = min(today + timedelta(days=1), period.end)
    if end <= period.start:
        return timedelta(0)
    return target_duration(contract.working_hours, Period(start=period.start, end=end))


def _percentage(hours: float, total_hours: float) -> int:
    if total_hours <= 0:
        return 0
    return int(hours / total_hours * 100)


def category_percentages(
    category_hours: Mapping[EntryCategory, float],
    total_hours: float,
) -> dict[EntryCategory, int]:
    return {c: _percentage(category_hours.get(c, 0.0), total_hours) for c in EntryCategory}


def month_balance(
    contract: ContractTerms,
    summary: WorkSummary,
    *,
    today: date,
) -> MonthBalance:
    """
    Month-to-date figures for summary.period (one calendar month).

    The balance compares actual hours with the hours required up to today.
    Percentages are shares of max(target, actual).
    Each category is rounded to the minute before summing, so the category
    hours always add up to actual_hours. This differs from overtime_balance,
    which rounds the total once, and is intentional.
    """
    period = summary.period

    category_durations = {c: round_to_minute(summary.elapsed(c)) for c in EntryCategory}
    actual = sum(category_durations.values(), timedelta(0))
    target = round_to_minute(target_duration(contract.working_hours, period))
    required = round_to_minute(required_duration_as_of(contract, period, today))

    balance_hours = (actual - required) / _HOUR
    overtime, undertime = split_balance(balance_hours)

    category_hours = {c: d / _HOUR for c, d in category_durations.items()}
    total_hours = max(target, actual) / _HOUR
    percentages = category_percentages(category_hours, total_hours)

    logger.debug(
        "Month %s: actual %.2f h, target %.2f h, required %.2f h",
        period.start.strftime("%Y-%m"), actual / _HOUR, target / _HOUR, required / _HOUR,
    )

    return MonthBalance(
        period=period,
        category_hours=category_hours,
        actual_hours=actual / _HOUR,
        target_hours=target / _HOUR,
        required_hours_as_of_today=required / _HOUR,
        balance_hours=balance_hours,
        overtime_hours=overtime,
        undertime_hours=undertime,
        remaining_hours=max(target - actual, timedelta(0)) / _HOUR,
        category_percentages=percentages,
        remaining_percentage=100 - sum(percentages.values()),
    )
