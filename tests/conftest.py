from decimal import Decimal

import pytest
from dishka import Provider, Scope
from fastapi.testclient import TestClient

from app.core.app import create_app
from app.deps import create_container
from app.schemas.budgets import BudgetOverspendPayload, BudgetPeriod, GroupedTotal
from app.schemas.summary import AggregateRow
from app.services.filters import SummaryFilters
from app.services.providers.protocols.aggregates import ITransactionAggregates
from app.services.providers.protocols.webhook import IWebhookDispatcher
from app.settings.budgets import BudgetSettings


class FakeTransactionAggregates(ITransactionAggregates):
    """In-memory data source returning canned grouped rows."""

    def __init__(
        self,
        totals: list[AggregateRow] | None = None,
        daily: list[AggregateRow] | None = None,
        categories: list[AggregateRow] | None = None,
        expenses: dict[str, list[GroupedTotal]] | None = None,
        error: Exception | None = None,
    ):
        self.totals_rows = totals or []
        self.daily_rows = daily or []
        self.category_rows = categories or []
        self.expenses = expenses or {}
        self.error = error
        self.filters_seen: list[SummaryFilters] = []
        self.expense_calls: list[tuple[str, list[str], BudgetPeriod, str | None]] = []

    def _check(self):
        if self.error is not None:
            raise self.error

    async def totals(self, filters: SummaryFilters) -> list[AggregateRow]:
        self.filters_seen.append(filters)
        self._check()
        return list(self.totals_rows)

    async def daily_totals(self, filters: SummaryFilters) -> list[AggregateRow]:
        self._check()
        return list(self.daily_rows)

    async def category_totals(self, filters: SummaryFilters) -> list[AggregateRow]:
        self._check()
        return list(self.category_rows)

    async def expense_totals(
        self,
        dimension,
        names: list[str],
        period: BudgetPeriod,
        account: str | None = None,
    ) -> list[GroupedTotal]:
        self.expense_calls.append((dimension, list(names), period, account))
        self._check()
        return list(self.expenses.get(dimension, []))


class RecordingWebhook(IWebhookDispatcher):
    def __init__(self, error: Exception | None = None):
        self.payloads: list[BudgetOverspendPayload] = []
        self.error = error

    async def dispatch(self, payload: BudgetOverspendPayload) -> None:
        self.payloads.append(payload)
        if self.error is not None:
            raise self.error


@pytest.fixture
def budget_settings() -> BudgetSettings:
    return BudgetSettings(
        currency="IDR",
        categories={"Groceries": Decimal(1_000_000), "Dining": Decimal(500_000)},
        accounts={"Wallet": Decimal(2_000_000)},
    )


@pytest.fixture
def aggregates() -> FakeTransactionAggregates:
    return FakeTransactionAggregates()


@pytest.fixture
def webhook() -> RecordingWebhook:
    return RecordingWebhook()


@pytest.fixture
def client(aggregates, budget_settings, webhook) -> TestClient:
    overrides = Provider(scope=Scope.APP)
    overrides.provide(lambda: aggregates, provides=ITransactionAggregates)
    overrides.provide(lambda: budget_settings, provides=BudgetSettings)
    overrides.provide(lambda: webhook, provides=IWebhookDispatcher)
    app = create_app(create_container(overrides))
    return TestClient(app)
