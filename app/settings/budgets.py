from decimal import Decimal
from typing import Annotated

from annotated_types import Gt
from pydantic import HttpUrl
from pydantic_settings import BaseSettings, SettingsConfigDict

BudgetLimit = Annotated[Decimal, Gt(gt=0)]


class BudgetSettings(BaseSettings):
    """Static spend limits per category and per account.

    Loaded once at startup, ``BUDGET_CATEGORIES`` and ``BUDGET_ACCOUNTS``
    are read as JSON objects (``{"Groceries": 3000000}``).
    """

    model_config = SettingsConfigDict(env_prefix="BUDGET_", frozen=True)

    currency: str = "IDR"
    categories: dict[str, BudgetLimit] = {
        "Groceries": Decimal(3_000_000),
        "Dining": Decimal(1_500_000),
        "Transport": Decimal(750_000),
        "Subscriptions": Decimal(600_000),
        "Utilities": Decimal(1_200_000),
        "Entertainment": Decimal(800_000),
    }
    accounts: dict[str, BudgetLimit] = {
        "BCA Debit": Decimal(5_000_000),
        "BCA Credit": Decimal(4_000_000),
    }
    notify_webhook_url: HttpUrl | None = None

    @property
    def enabled(self) -> bool:
        return bool(self.categories) or bool(self.accounts)
