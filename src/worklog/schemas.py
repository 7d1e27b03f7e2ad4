from __future__ import annotations

from datetime import date

from pydantic import BaseModel, Field, NaiveDatetime, field_validator, model_validator

from .calculations import (
    BalanceResult,
    ContractTerms,
    EntryCategory,
    MonthBalance,
)
from .summary import EntryFacts
from .timeline import RateChange, RateTimeline


def _check_month_start(value: date) -> date:
    if value.day != 1:
        raise ValueError("an interval must start at the first day of a month")
    return value


def _check_intervals(name: str, first_days: list[date], contract_first_day: date) -> None:
    if len(set(first_days)) != len(first_days):
        raise ValueError(f"{name} intervals must not share a first day")
    if min(first_days) > contract_first_day:
        raise ValueError(f"{name} intervals start must match contract start")


class WorkingHoursIn(BaseModel):
    first_day: date
    hours: float = Field(ge=0, le=24)

    @field_validator("first_day")
    @classmethod
    def check_month_start(cls, value: date) -> date:
        return _check_month_start(value)


class VacationDaysIn(BaseModel):
    first_day: date
    days: float = Field(ge=0)

    @field_validator("first_day")
    @classmethod
    def check_month_start(cls, value: date) -> date:
        return _check_month_start(value)


class ContractIn(BaseModel):
    first_day: date
    init_overtime_hours: float = 0.0
    init_vacation_days: float = 0.0
    working_hours: list[WorkingHoursIn] = Field(min_length=1)
    vacation_days: list[VacationDaysIn] = Field(min_length=1)

    @model_validator(mode="after")
    def check_intervals(self) -> "ContractIn":
        _check_intervals(
            "working hours", [wh.first_day for wh in self.working_hours], self.first_day
        )
        _check_intervals(
            "vacation days", [vd.first_day for vd in self.vacation_days], self.first_day
        )
        return self

    def to_terms(self) -> ContractTerms:
        return ContractTerms(
            first_day=self.first_day,
            init_overtime_hours=self.init_overtime_hours,
            init_vacation_days=self.init_vacation_days,
            working_hours=RateTimeline(
                RateChange(wh.first_day, wh.hours) for wh in self.working_hours
            ),
            vacation_days=RateTimeline(
                RateChange(vd.first_day, vd.days) for vd in self.vacation_days
            ),
        )


class EntryIn(BaseModel):
    category: EntryCategory
    # local wall-clock time; offsets are rejected
    start_time: NaiveDatetime
    end_time: NaiveDatetime
    description: str = ""

    @model_validator(mode="after")
    def check_times(self) -> "EntryIn":
        if self.end_time <= self.start_time:
            raise ValueError("end time must be after start time")
        return self

    def to_facts(self) -> EntryFacts:
        return EntryFacts(
            category=self.category,
            start_time=self.start_time,
            end_time=self.end_time,
        )


class BalanceOut(BaseModel):
    as_of: date
    period_start: date
    period_end: date
    target_hours: float
    actual_hours: float
    balance_hours: float
    overtime_hours: float
    undertime_hours: float
    accrued_vacation_hours: float
    taken_vacation_hours: float
    remaining_vacation_days: float

    @classmethod
    def from_result(cls, result: BalanceResult) -> "BalanceOut":
        overtime = result.overtime
        return cls(
            as_of=result.as_of,
            period_start=overtime.period.start,
            period_end=overtime.period.end,
            target_hours=overtime.target_hours,
            actual_hours=overtime.actual_hours,
            balance_hours=overtime.balance_hours,
            overtime_hours=overtime.overtime_hours,
            undertime_hours=overtime.undertime_hours,
            accrued_vacation_hours=result.vacation.accrued_hours,
            taken_vacation_hours=result.vacation.taken_hours,
            remaining_vacation_days=result.vacation.remaining_days,
        )


class MonthSummaryOut(BaseModel):
    period_start: date
    period_end: date
    target_hours: float
    actual_hours: float
    required_hours_as_of_today: float
    overtime_hours: float
    undertime_hours: float
    remaining_hours: float
    category_hours: dict[EntryCategory, float]
    category_percentages: dict[EntryCategory, int]
    remaining_percentage: int

    @classmethod
    def from_balance(cls, balance: MonthBalance) -> "MonthSummaryOut":
        return cls(
            period_start=balance.period.start,
            period_end=balance.period.end,
            target_hours=balance.target_hours,
            actual_hours=balance.actual_hours,
            required_hours_as_of_today=balance.required_hours_as_of_today,
            overtime_hours=balance.overtime_hours,
            undertime_hours=balance.undertime_hours,
            remaining_hours=balance.remaining_hours,
            category_hours=dict(balance.category_hours),
            category_percentages=dict(balance.category_percentages),
            remaining_percentage=balance.remaining_percentage,
        )
