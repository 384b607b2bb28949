from dishka import FromDishka
from dishka.integrations.fastapi import DishkaRoute
from fastapi import APIRouter

from app.schemas.summary import SummaryResponseSchema
from app.services.filters import Filters
from app.services.summary import SummaryInteractor

router = APIRouter(prefix="/summary", tags=["summary"], route_class=DishkaRoute)


@router.get("")
async def get_summary(
    filters: Filters,
    service: FromDishka[SummaryInteractor],
) -> SummaryResponseSchema:
    return await service(filters)
