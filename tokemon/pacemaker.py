"""Spending against configured budget limits."""

from __future__ import annotations

from collections.abc import Iterable
from dataclasses import dataclass
from datetime import UTC, date, datetime, timedelta

from tokemon.config import BudgetConfig
from tokemon.records import Record


@dataclass(frozen=True, slots=True)
class BudgetPeriod:
    """Spending versus limit for one budget period."""

    spent: float
    limit: float


@dataclass(frozen=True, slots=True)
class BudgetStatus:
    """Spending for every configured budget period; ``None`` where unset."""

    daily: BudgetPeriod | None = None
    weekly: BudgetPeriod | None = None
    monthly: BudgetPeriod | None = None


def _today() -> date:
    return datetime.now(UTC).date()


def start_of_week(day: date | None = None) -> date:
    """The Monday of the week holding ``day`` (today when omitted)."""
    day = day if day is not None else _today()
    return day - timedelta(days=day.weekday())


def start_of_month(day: date | None = None) -> date:
    """The first day of the month holding ``day`` (today when omitted)."""
    day = day if day is not None else _today()
    return day.replace(day=1)


def sum_cost_since(entries: Iterable[Record], since: date) -> float:
    """Total known cost of records dated on or after ``since``."""
    return sum(
        e.cost_usd
        for e in entries
        if e.cost_usd is not None and e.timestamp.astimezone(UTC).date() >= since
    )


def evaluate(
    entries: Iterable[Record],
    budget: BudgetConfig,
    today: date | None = None,
) -> BudgetStatus:
    """Spending and limits for each budget period that has a limit."""
    records = list(entries)
    today = today if today is not None else _today()

    def period(limit: float | None, since: date) -> BudgetPeriod | None:
        if limit is None:
            return None
        return BudgetPeriod(spent=sum_cost_since(records, since), limit=limit)

    return BudgetStatus(
        daily=period(budget.daily, today),
        weekly=period(budget.weekly, start_of_week(today)),
        monthly=period(budget.monthly, start_of_month(today)),
    )