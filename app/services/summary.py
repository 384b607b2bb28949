"""Reshape grouped SUM(amount) rows into the dashboard's summary blocks.

The datastore does the filtering and grouping; the functions here only fold
already-aggregated rows. Repeated keys are summed, never overwritten, so a
caller that does not group perfectly still gets correct totals.
"""

import asyncio
import logging
from collections.abc import Iterable
from decimal import Decimal

from dishka import Provider, Scope, provide

from app.models.enums import TransactionType
from app.schemas.budgets import BudgetFilters
from app.schemas.summary import (
    AggregateRow,
    CategorySeriesPoint,
    DailySeriesPoint,
    SummaryResponseSchema,
    TotalsSummary,
)
from app.services.budgets import BudgetEvaluator
from app.services.filters import SummaryFilters
from app.services.providers.protocols.aggregates import ITransactionAggregates

logger = logging.getLogger(__name__)

ZERO = Decimal(0)


def _total(row: AggregateRow) -> Decimal:
    return row.total if row.total is not None else ZERO


def _fold_by_key(
    rows: Iterable[AggregateRow], key: str
) -> dict[str, dict[TransactionType, Decimal]]:
    buckets: dict[str, dict[TransactionType, Decimal]] = {}
    for row in rows:
        value = getattr(row, key)
        if not value:
            logger.debug("Skipping aggregate row without %s: %r", key, row)
            continue
        bucket = buckets.setdefault(
            value, {TransactionType.INCOME: ZERO, TransactionType.EXPENSE: ZERO}
        )
        bucket[row.type] += _total(row)
    return buckets


def normalize_totals(rows: Iterable[AggregateRow]) -> TotalsSummary:
    income = ZERO
    expense = ZERO
    for row in rows:
        if row.type == TransactionType.INCOME:
            income += _total(row)
        else:
            expense += _total(row)
    return TotalsSummary(income=income, expense=expense, net=income - expense)


def normalize_daily_series(rows: Iterable[AggregateRow]) -> list[DailySeriesPoint]:
    # ISO calendar days sort correctly as plain strings
    buckets = _fold_by_key(rows, "date")
    return [
        DailySeriesPoint(
            date=day,
            income=totals[TransactionType.INCOME],
            expense=totals[TransactionType.EXPENSE],
        )
        for day, totals in sorted(buckets.items())
    ]


def normalize_category_series(
    rows: Iterable[AggregateRow],
) -> list[CategorySeriesPoint]:
    buckets = _fold_by_key(rows, "category")
    return [
        CategorySeriesPoint(
            category=category,
            income=totals[TransactionType.INCOME],
            expense=totals[TransactionType.EXPENSE],
        )
        for category, totals in sorted(buckets.items())
    ]


class SummaryInteractor:
    def __init__(
        self,
        aggregates: ITransactionAggregates,
        budgets: BudgetEvaluator,
    ):
        self.aggregates = aggregates
        self.budgets = budgets

    async def __call__(self, filters: SummaryFilters) -> SummaryResponseSchema:
        totals, by_day, by_category, budgets = await asyncio.gather(
            self.aggregates.totals(filters),
            self.aggregates.daily_totals(filters),
            self.aggregates.category_totals(filters),
            self.budgets(BudgetFilters(account=filters.account)),
        )
        return SummaryResponseSchema(
            totals=normalize_totals(totals),
            by_day=normalize_daily_series(by_day),
            by_category=normalize_category_series(by_category),
            budgets=budgets,
        )


class SummaryServicesProvider(Provider):
    scope = Scope.REQUEST

    summary = provide(SummaryInteractor)
