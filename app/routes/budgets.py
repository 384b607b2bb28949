from typing import Annotated

from dishka import FromDishka
from dishka.integrations.fastapi import DishkaRoute
from fastapi import APIRouter
from fastapi.params import Query

from app.schemas.budgets import BudgetAlertSchema, BudgetFilters, BudgetSummarySchema
from app.services.budgets import BudgetAlertInteractor, BudgetEvaluator

router = APIRouter(prefix="/budgets", tags=["budgets"], route_class=DishkaRoute)


@router.get("")
async def get_budgets(
    evaluator: FromDishka[BudgetEvaluator],
    account: Annotated[str | None, Query()] = None,
) -> BudgetSummarySchema | None:
    return await evaluator(BudgetFilters(account=account or None))


@router.get("/notify")
async def notify_budgets(
    alerts: FromDishka[BudgetAlertInteractor],
) -> BudgetAlertSchema:
    return await alerts()
