from typing import Any

from pydantic import TypeAdapter
from sqlalchemy import Select, func, select
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker

from app.models import Transaction
from app.models.enums import TransactionType
from app.schemas.budgets import BudgetPeriod, GroupedTotal
from app.schemas.summary import AggregateRow
from app.services.filters import SummaryFilters, apply_filters
from app.services.providers.protocols.aggregates import (
    BudgetDimension,
    ITransactionAggregates,
)

_rows_adapter = TypeAdapter(list[AggregateRow])
_totals_adapter = TypeAdapter(list[GroupedTotal])

total_column = func.sum(Transaction.amount).label("total")


def totals_query(filters: SummaryFilters | None = None) -> Select[Any]:
    return apply_filters(
        select(Transaction.type, total_column).group_by(Transaction.type),
        filters,
    )


def daily_totals_query(filters: SummaryFilters | None = None) -> Select[Any]:
    return apply_filters(
        select(Transaction.date, Transaction.type, total_column)
        .group_by(Transaction.date, Transaction.type)
        .order_by(Transaction.date),
        filters,
    )


def category_totals_query(filters: SummaryFilters | None = None) -> Select[Any]:
    return apply_filters(
        select(Transaction.category, Transaction.type, total_column)
        .group_by(Transaction.category, Transaction.type)
        .order_by(Transaction.category),
        filters,
    )


def expense_totals_query(
    dimension: BudgetDimension,
    names: list[str],
    period: BudgetPeriod,
    account: str | None = None,
) -> Select[Any]:
    column = getattr(Transaction, dimension)
    query = (
        select(column.label("key"), total_column)
        .where(
            Transaction.type == TransactionType.EXPENSE,
            Transaction.date >= period.start,
            Transaction.date <= period.end,
            column.in_(names),
        )
        .group_by(column)
    )
    if account:
        query = query.where(Transaction.account == account)
    return query


class SqlAlchemyTransactionAggregates(ITransactionAggregates):
    """Grouped totals read straight from the ``transactions`` table.

    Every read opens its own session: callers gather several of them at
    once and an ``AsyncSession`` must not be shared between concurrent tasks.
    """

    def __init__(self, session_maker: async_sessionmaker[AsyncSession]):
        self.session_maker = session_maker

    async def _fetch(self, query: Select[Any]) -> list[dict[str, Any]]:
        async with self.session_maker() as session:
            result = await session.execute(query)
            return [dict(row) for row in result.mappings()]

    async def totals(self, filters: SummaryFilters) -> list[AggregateRow]:
        return _rows_adapter.validate_python(await self._fetch(totals_query(filters)))

    async def daily_totals(self, filters: SummaryFilters) -> list[AggregateRow]:
        return _rows_adapter.validate_python(
            await self._fetch(daily_totals_query(filters))
        )

    async def category_totals(self, filters: SummaryFilters) -> list[AggregateRow]:
        return _rows_adapter.validate_python(
            await self._fetch(category_totals_query(filters))
        )

    async def expense_totals(
        self,
        dimension: BudgetDimension,
        names: list[str],
        period: BudgetPeriod,
        account: str | None = None,
    ) -> list[GroupedTotal]:
        return _totals_adapter.validate_python(
            await self._fetch(expense_totals_query(dimension, names, period, account))
        )
