from datetime import date
from decimal import Decimal
from typing import Literal

from app.schemas.base import BaseSchema, Money


class BudgetPeriod(BaseSchema):
    start: date
    end: date


class BudgetFilters(BaseSchema):
    account: str | None = None


class GroupedTotal(BaseSchema):
    """Expense total for one category or account within a budget period."""

    key: str | None
    total: Decimal | None = None


class BudgetStatus(BaseSchema):
    label: str
    limit: Money
    spent: Money
    remaining: Money
    is_over_limit: bool


class BudgetCategoryStatus(BudgetStatus):
    pass


class BudgetAccountStatus(BudgetStatus):
    pass


class BudgetSummarySchema(BaseSchema):
    period: BudgetPeriod
    currency: str
    categories: list[BudgetCategoryStatus]
    accounts: list[BudgetAccountStatus]


class BudgetOverspendPayload(BaseSchema):
    type: Literal["budget-overspend"] = "budget-overspend"
    period: BudgetPeriod
    currency: str
    overspent_categories: list[BudgetCategoryStatus]
    overspent_accounts: list[BudgetAccountStatus]


class BudgetAlertSchema(BaseSchema):
    status: Literal["disabled", "ok", "alert"]
    message: str | None = None
    budgets: BudgetSummarySchema | None = None
    overspent_categories: list[BudgetCategoryStatus] = []
    overspent_accounts: list[BudgetAccountStatus] = []
    has_overspend: bool = False
