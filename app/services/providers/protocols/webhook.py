from typing import Protocol

from app.schemas.budgets import BudgetOverspendPayload


class IWebhookDispatcher(Protocol):
    async def dispatch(self, payload: BudgetOverspendPayload) -> None: ...
