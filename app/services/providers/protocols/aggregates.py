from typing import Literal, Protocol

from app.schemas.budgets import BudgetPeriod, GroupedTotal
from app.schemas.summary import AggregateRow
from app.services.filters import SummaryFilters

type BudgetDimension = Literal["category", "account"]


class ITransactionAggregates(Protocol):
    async def totals(self, filters: SummaryFilters) -> list[AggregateRow]: ...

    async def daily_totals(self, filters: SummaryFilters) -> list[AggregateRow]: ...

    async def category_totals(
        self, filters: SummaryFilters
    ) -> list[AggregateRow]: ...

    async def expense_totals(
        self,
        dimension: BudgetDimension,
        names: list[str],
        period: BudgetPeriod,
        account: str | None = None,
    ) -> list[GroupedTotal]: ...
