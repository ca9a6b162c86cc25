from datetime import UTC, date, datetime, timedelta

import pytest

from tokemon.config import BudgetConfig
from tokemon.pacemaker import (
    BudgetPeriod,
    evaluate,
    start_of_month,
    start_of_week,
    sum_cost_since,
)
from tokemon.records import Record

NOW = datetime(2026, 2, 20, 12, 0, tzinfo=UTC)
TODAY = NOW.date()


def dummy(cost, offset_days):
    return Record(timestamp=NOW + timedelta(days=offset_days), provider="test", cost_usd=cost)


def test_evaluate_no_budgets():
    status = evaluate([dummy(1.5, 0)], BudgetConfig(), today=TODAY)
    assert status.daily is None
    assert status.weekly is None
    assert status.monthly is None


def test_evaluate_daily_budget():
    entries = [dummy(2.0, 0), dummy(3.5, 0), dummy(1.0, -2)]
    status = evaluate(entries, BudgetConfig(daily=5.0), today=TODAY)
    assert status.daily == BudgetPeriod(spent=5.5, limit=5.0)
    assert status.weekly is None


def test_evaluate_all_budgets():
    entries = [dummy(10.0, 0), dummy(5.0, 0)]
    budget = BudgetConfig(daily=20.0, weekly=100.0, monthly=500.0)
    status = evaluate(entries, budget, today=TODAY)
    assert status.daily.spent == 15.0
    assert status.weekly.spent == 15.0
    assert status.monthly.spent == 15.0
    assert status.daily.limit == 20.0
    assert status.weekly.limit == 100.0
    assert status.monthly.limit == 500.0


def test_sum_cost_since():
    entries = [dummy(1.0, 0), dummy(2.0, 0)]
    assert sum_cost_since(entries, TODAY) == 3.0


def test_sum_cost_ignores_missing_cost():
    entries = [dummy(None, 0), dummy(2.0, 0)]
    assert sum_cost_since(entries, TODAY) == 2.0


def test_evaluate_accepts_generator():
    status = evaluate((dummy(1.0, 0) for _ in range(3)), BudgetConfig(daily=1.0, monthly=9.0), today=TODAY)
    assert status.daily.spent == 3.0
    assert status.monthly.spent == 3.0


@pytest.mark.parametrize("day", [date(2026, 2, 16), date(2026, 2, 20), date(2026, 2, 22), date(2025, 12, 31)])
def test_start_of_week_is_monday_within_week(day):
    start = start_of_week(day)
    assert start.weekday() == 0
    assert start <= day < start + timedelta(days=7)


def test_start_of_month():
    assert start_of_month(date(2026, 2, 20)) == date(2026, 2, 1)
    assert start_of_month(date(2026, 3, 1)) == date(2026, 3, 1)


def test_weekly_excludes_previous_week():
    # 2026-02-20 is a Friday; six days back falls in the previous week.
    entries = [dummy(1.0, 0), dummy(4.0, -6)]
    status = evaluate(entries, BudgetConfig(weekly=10.0), today=TODAY)
    assert status.weekly.spent == 1.0