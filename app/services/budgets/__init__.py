import asyncio
import logging
from collections.abc import Iterable, Mapping
from datetime import UTC, date, datetime
from decimal import Decimal

from dishka import Provider, Scope, provide

from app.schemas.budgets import (
    BudgetAccountStatus,
    BudgetAlertSchema,
    BudgetCategoryStatus,
    BudgetFilters,
    BudgetOverspendPayload,
    BudgetPeriod,
    BudgetStatus,
    BudgetSummarySchema,
    GroupedTotal,
)
from app.services.providers.protocols.aggregates import ITransactionAggregates
from app.services.providers.protocols.webhook import IWebhookDispatcher
from app.settings.budgets import BudgetSettings

logger = logging.getLogger(__name__)


def default_period(today: date | None = None) -> BudgetPeriod:
    """Month to date in UTC, both ends inclusive."""
    today = today or datetime.now(UTC).date()
    return BudgetPeriod(start=today.replace(day=1), end=today)


def _spent_by_key(rows: Iterable[GroupedTotal]) -> dict[str, Decimal]:
    spent: dict[str, Decimal] = {}
    for row in rows:
        if not row.key:
            continue
        spent[row.key] = spent.get(row.key, Decimal(0)) + (row.total or Decimal(0))
    return spent


def _statuses[S: BudgetStatus](
    status_type: type[S],
    limits: Mapping[str, Decimal],
    spent: Mapping[str, Decimal],
) -> list[S]:
    statuses = []
    for label, limit in limits.items():
        spent_value = spent.get(label, Decimal(0))
        remaining = limit - spent_value
        statuses.append(
            status_type(
                label=label,
                limit=limit,
                spent=spent_value,
                remaining=remaining,
                is_over_limit=remaining < 0,
            )
        )
    return statuses


async def _no_totals() -> list[GroupedTotal]:
    return []


async def fetch_budget_summary(
    data_source: ITransactionAggregates,
    limits: BudgetSettings,
    filters: BudgetFilters | None = None,
    *,
    today: date | None = None,
) -> BudgetSummarySchema | None:
    """Compare month-to-date expense totals with the configured limits.

    Returns ``None`` when no limit is configured. Category and account
    totals are read concurrently; a data source failure propagates as is.
    """
    if not limits.enabled:
        return None

    filters = filters or BudgetFilters()
    period = default_period(today)

    category_rows, account_rows = await asyncio.gather(
        data_source.expense_totals(
            "category", list(limits.categories), period, filters.account
        )
        if limits.categories
        else _no_totals(),
        data_source.expense_totals(
            "account", list(limits.accounts), period, filters.account
        )
        if limits.accounts
        else _no_totals(),
    )

    return BudgetSummarySchema(
        period=period,
        currency=limits.currency,
        categories=_statuses(
            BudgetCategoryStatus, limits.categories, _spent_by_key(category_rows)
        ),
        accounts=_statuses(
            BudgetAccountStatus, limits.accounts, _spent_by_key(account_rows)
        ),
    )


class BudgetEvaluator:
    def __init__(self, aggregates: ITransactionAggregates, settings: BudgetSettings):
        self.aggregates = aggregates
        self.settings = settings

    async def __call__(
        self, filters: BudgetFilters | None = None
    ) -> BudgetSummarySchema | None:
        return await fetch_budget_summary(self.aggregates, self.settings, filters)


class BudgetAlertInteractor:
    disabled_message = (
        "No budgets configured. Set BUDGET_CATEGORIES or BUDGET_ACCOUNTS to enable alerts."
    )

    def __init__(self, evaluator: BudgetEvaluator, webhook: IWebhookDispatcher):
        self.evaluator = evaluator
        self.webhook = webhook

    async def __call__(self) -> BudgetAlertSchema:
        budgets = await self.evaluator()
        if budgets is None:
            return BudgetAlertSchema(status="disabled", message=self.disabled_message)

        overspent_categories = [item for item in budgets.categories if item.is_over_limit]
        overspent_accounts = [item for item in budgets.accounts if item.is_over_limit]
        has_overspend = bool(overspent_categories or overspent_accounts)

        if has_overspend:
            logger.warning(
                "Budget overspend detected (categories: %s, accounts: %s)",
                [item.label for item in overspent_categories],
                [item.label for item in overspent_accounts],
            )
            payload = BudgetOverspendPayload(
                period=budgets.period,
                currency=budgets.currency,
                overspent_categories=overspent_categories,
                overspent_accounts=overspent_accounts,
            )
            try:
                await self.webhook.dispatch(payload)
            except Exception:
                logger.exception("Failed to dispatch budget webhook")

        return BudgetAlertSchema(
            status="alert" if has_overspend else "ok",
            budgets=budgets,
            overspent_categories=overspent_categories,
            overspent_accounts=overspent_accounts,
            has_overspend=has_overspend,
        )


class BudgetServicesProvider(Provider):
    scope = Scope.REQUEST

    evaluator = provide(BudgetEvaluator)
    alerts = provide(BudgetAlertInteractor)
