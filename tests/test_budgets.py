import asyncio
from datetime import date
from decimal import Decimal

import pytest
from pydantic import ValidationError

from app.schemas.budgets import BudgetFilters, BudgetPeriod, GroupedTotal
from app.services.budgets import BudgetEvaluator, default_period, fetch_budget_summary
from app.settings.budgets import BudgetSettings
from conftest import FakeTransactionAggregates

TODAY = date(2024, 3, 15)


def totals(**spent: int) -> list[GroupedTotal]:
    return [GroupedTotal(key=key, total=Decimal(value)) for key, value in spent.items()]


def test_default_period_is_month_to_date():
    period = default_period(TODAY)

    assert period == BudgetPeriod(start=date(2024, 3, 1), end=date(2024, 3, 15))


def test_default_period_on_first_day_of_month():
    period = default_period(date(2024, 2, 1))

    assert period.start == period.end == date(2024, 2, 1)


def test_default_period_uses_current_utc_day():
    period = default_period()

    assert period.start.day == 1
    assert period.start <= period.end
    assert (period.start.year, period.start.month) == (period.end.year, period.end.month)


@pytest.mark.asyncio
async def test_no_limits_configured_returns_none():
    aggregates = FakeTransactionAggregates()
    settings = BudgetSettings(categories={}, accounts={})

    result = await fetch_budget_summary(aggregates, settings, today=TODAY)

    assert result is None
    assert aggregates.expense_calls == []


@pytest.mark.asyncio
async def test_category_without_spend_is_within_limit(budget_settings):
    aggregates = FakeTransactionAggregates()

    result = await fetch_budget_summary(aggregates, budget_settings, today=TODAY)

    groceries = result.categories[0]
    assert groceries.label == "Groceries"
    assert groceries.spent == 0
    assert groceries.remaining == groceries.limit == 1_000_000
    assert groceries.is_over_limit is False


@pytest.mark.asyncio
async def test_overspend_has_negative_remaining(budget_settings):
    aggregates = FakeTransactionAggregates(
        expenses={
            "category": totals(Groceries=1_250_000, Dining=500_000),
            "account": totals(Wallet=1_750_000),
        }
    )

    result = await fetch_budget_summary(aggregates, budget_settings, today=TODAY)

    groceries, dining = result.categories
    assert groceries.is_over_limit is True
    assert groceries.remaining == groceries.limit - groceries.spent == -250_000
    assert dining.remaining == 0
    assert dining.is_over_limit is False
    [wallet] = result.accounts
    assert wallet.label == "Wallet"
    assert wallet.spent == 1_750_000
    assert wallet.is_over_limit is False


@pytest.mark.asyncio
async def test_summary_carries_period_and_currency(budget_settings):
    result = await fetch_budget_summary(
        FakeTransactionAggregates(), budget_settings, today=TODAY
    )

    assert result.currency == "IDR"
    assert result.period == default_period(TODAY)
    assert result.model_dump(mode="json")["period"] == {
        "start": "2024-03-01",
        "end": "2024-03-15",
    }


@pytest.mark.asyncio
async def test_fetches_are_scoped_to_configured_names_and_account(budget_settings):
    aggregates = FakeTransactionAggregates()

    await fetch_budget_summary(
        aggregates, budget_settings, BudgetFilters(account="Wallet"), today=TODAY
    )

    assert sorted(aggregates.expense_calls) == [
        ("account", ["Wallet"], default_period(TODAY), "Wallet"),
        ("category", ["Groceries", "Dining"], default_period(TODAY), "Wallet"),
    ]


@pytest.mark.asyncio
async def test_side_without_limits_is_not_queried():
    aggregates = FakeTransactionAggregates(expenses={"account": totals(Wallet=10)})
    settings = BudgetSettings(categories={}, accounts={"Wallet": Decimal(5)})

    result = await fetch_budget_summary(aggregates, settings, today=TODAY)

    assert [call[0] for call in aggregates.expense_calls] == ["account"]
    assert result.categories == []
    assert result.accounts[0].is_over_limit is True


@pytest.mark.asyncio
async def test_unknown_and_repeated_keys(budget_settings):
    aggregates = FakeTransactionAggregates(
        expenses={
            "category": [
                GroupedTotal(key=None, total=Decimal(999)),
                GroupedTotal(key="Dining", total=Decimal(200)),
                GroupedTotal(key="Dining", total=None),
                GroupedTotal(key="Dining", total=Decimal(100)),
            ]
        }
    )

    result = await fetch_budget_summary(aggregates, budget_settings, today=TODAY)

    spent = {status.label: status.spent for status in result.categories}
    assert spent == {"Groceries": 0, "Dining": 300}


@pytest.mark.asyncio
async def test_data_source_failure_propagates(budget_settings):
    aggregates = FakeTransactionAggregates(error=RuntimeError("relation does not exist"))

    with pytest.raises(RuntimeError, match="relation does not exist"):
        await fetch_budget_summary(aggregates, budget_settings, today=TODAY)


class ConcurrencyProbe(FakeTransactionAggregates):
    """Each read waits until the other one has started as well."""

    def __init__(self):
        super().__init__()
        self.in_flight = 0
        self.both_started = asyncio.Event()

    async def expense_totals(self, dimension, names, period, account=None):
        self.in_flight += 1
        if self.in_flight == 2:
            self.both_started.set()
        await asyncio.wait_for(self.both_started.wait(), timeout=1)
        return await super().expense_totals(dimension, names, period, account)


@pytest.mark.asyncio
async def test_category_and_account_totals_are_read_concurrently(budget_settings):
    probe = ConcurrencyProbe()

    result = await fetch_budget_summary(probe, budget_settings, today=TODAY)

    assert result is not None
    assert len(probe.expense_calls) == 2


@pytest.mark.asyncio
async def test_evaluator_uses_injected_settings(budget_settings):
    aggregates = FakeTransactionAggregates(expenses={"category": totals(Dining=600_000)})
    evaluator = BudgetEvaluator(aggregates, budget_settings)

    result = await evaluator(BudgetFilters())

    assert [status.label for status in result.categories if status.is_over_limit] == [
        "Dining"
    ]


def test_budget_limits_must_be_positive():
    with pytest.raises(ValidationError):
        BudgetSettings(categories={"Dining": Decimal(0)})


def test_budget_settings_read_from_environment(monkeypatch):
    monkeypatch.setenv("BUDGET_CURRENCY", "EUR")
    monkeypatch.setenv("BUDGET_CATEGORIES", '{"Books": 120}')
    monkeypatch.setenv("BUDGET_ACCOUNTS", "{}")

    settings = BudgetSettings()

    assert settings.currency == "EUR"
    assert settings.categories == {"Books": Decimal(120)}
    assert settings.accounts == {}
    assert settings.enabled is True
