from datetime import date as date_type
from decimal import Decimal
from typing import Any

from pydantic import field_validator

from app.models.enums import TransactionType
from app.schemas.base import BaseSchema, Money
from app.schemas.budgets import BudgetSummarySchema


class AggregateRow(BaseSchema):
    """One grouped SUM(amount) row; ``date`` or ``category`` set by the grouping."""

    type: TransactionType
    total: Decimal | None = None
    date: str | None = None
    category: str | None = None

    @field_validator("date", mode="before")
    @classmethod
    def validate_date(cls, v: Any):
        if isinstance(v, date_type):
            return v.isoformat()
        return v


class TotalsSummary(BaseSchema):
    income: Money
    expense: Money
    net: Money


class DailySeriesPoint(BaseSchema):
    date: str
    income: Money
    expense: Money


class CategorySeriesPoint(BaseSchema):
    category: str
    income: Money
    expense: Money


class SummaryResponseSchema(BaseSchema):
    totals: TotalsSummary
    by_day: list[DailySeriesPoint]
    by_category: list[CategorySeriesPoint]
    budgets: BudgetSummarySchema | None = None
