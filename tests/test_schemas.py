from datetime import date, timedelta

import pytest
from pydantic import ValidationError

from worklog.calculations import (
    EntryCategory,
    WorkSummary,
    compute_balance,
    lifetime_period,
    month_balance,
    month_period,
)
from worklog.schemas import BalanceOut, ContractIn, EntryIn, MonthSummaryOut


def contract_payload(**overrides) -> dict:
    payload = {
        "first_day": "2023-01-01",
        "init_overtime_hours": 1.5,
        "init_vacation_days": 5,
        "working_hours": [
            {"first_day": "2023-06-01", "hours": 6},
            {"first_day": "2023-01-01", "hours": 8},
        ],
        "vacation_days": [{"first_day": "2023-01-01", "days": 2}],
    }
    payload.update(overrides)
    return payload


def test_contract_in_to_terms():
    terms = ContractIn.model_validate(contract_payload()).to_terms()
    assert terms.first_day == date(2023, 1, 1)
    assert terms.init_overtime_hours == 1.5
    assert terms.init_vacation_days == 5.0
    assert terms.working_hours.rate_at(date(2023, 5, 31)) == 8.0
    assert terms.working_hours.rate_at(date(2023, 6, 1)) == 6.0
    assert terms.vacation_days.rate_at(date(2023, 3, 1)) == 2.0


def test_interval_must_start_on_first_of_month():
    payload = contract_payload(working_hours=[{"first_day": "2023-01-15", "hours": 8}])
    with pytest.raises(ValidationError):
        ContractIn.model_validate(payload)


def test_negative_rates_are_rejected():
    with pytest.raises(ValidationError):
        ContractIn.model_validate(
            contract_payload(working_hours=[{"first_day": "2023-01-01", "hours": -1}])
        )
    with pytest.raises(ValidationError):
        ContractIn.model_validate(
            contract_payload(vacation_days=[{"first_day": "2023-01-01", "days": -2}])
        )


def test_empty_intervals_are_rejected():
    with pytest.raises(ValidationError):
        ContractIn.model_validate(contract_payload(vacation_days=[]))


def test_intervals_must_cover_contract_start():
    with pytest.raises(ValidationError):
        ContractIn.model_validate(
            contract_payload(working_hours=[{"first_day": "2023-02-01", "hours": 8}])
        )


def test_duplicate_interval_start_is_rejected():
    with pytest.raises(ValidationError):
        ContractIn.model_validate(
            contract_payload(
                vacation_days=[
                    {"first_day": "2023-01-01", "days": 2},
                    {"first_day": "2023-01-01", "days": 3},
                ]
            )
        )


def test_entry_in_rejects_inverted_times():
    with pytest.raises(ValidationError):
        EntryIn.model_validate(
            {
                "category": "work",
                "start_time": "2023-03-01T12:00:00",
                "end_time": "2023-03-01T08:00:00",
            }
        )


def test_entry_in_rejects_offset_times():
    with pytest.raises(ValidationError):
        EntryIn.model_validate(
            {
                "category": "work",
                "start_time": "2023-03-01T08:00:00+01:00",
                "end_time": "2023-03-01T16:00:00+01:00",
            }
        )


def test_entry_in_to_facts():
    facts = EntryIn.model_validate(
        {
            "category": "holiday",
            "start_time": "2023-03-01T08:00:00",
            "end_time": "2023-03-01T16:00:00",
        }
    ).to_facts()
    assert facts.category is EntryCategory.HOLIDAY
    assert facts.end_time - facts.start_time == timedelta(hours=8)


def test_balance_out_from_result():
    terms = ContractIn.model_validate(contract_payload(init_overtime_hours=0)).to_terms()
    as_of = date(2023, 3, 31)
    summary = WorkSummary(
        period=lifetime_period(terms, as_of),
        durations={EntryCategory.WORK: timedelta(hours=64 * 8 - 3)},
    )
    out = BalanceOut.from_result(compute_balance(terms, summary, as_of=as_of))
    assert out.balance_hours == -3.0
    assert out.overtime_hours == 0.0
    assert out.undertime_hours == 3.0
    assert out.remaining_vacation_days == 11.0
    assert out.period_start == date(2023, 1, 1)


def test_month_summary_out_serializes_categories():
    terms = ContractIn.model_validate(contract_payload()).to_terms()
    summary = WorkSummary(
        period=month_period(2023, 3),
        durations={EntryCategory.WORK: timedelta(hours=60)},
    )
    out = MonthSummaryOut.from_balance(month_balance(terms, summary, today=date(2023, 3, 10)))
    data = out.model_dump(mode="json")
    assert data["category_hours"]["work"] == 60.0
    assert data["category_percentages"]["work"] == 32
    assert data["target_hours"] == 184.0
