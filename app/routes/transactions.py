import logging

from dishka import FromDishka
from dishka.integrations.fastapi import DishkaRoute
from fastapi import APIRouter
from pydantic import TypeAdapter
from starlette import status

from app.schemas.transactions import TransactionCreateSchema, TransactionSchema
from app.services.filters import Filters, Paginated, PaginatedResponseSchema
from app.services.transactions import (
    TransactionCreateInteractor,
    TransactionRetrieveInteractor,
)

router = APIRouter(
    prefix="/transactions",
    tags=["transactions"],
    route_class=DishkaRoute,
)
logger = logging.getLogger(__name__)


@router.post("", status_code=status.HTTP_201_CREATED)
async def create_transaction(
    data: TransactionCreateSchema,
    service: FromDishka[TransactionCreateInteractor],
) -> TransactionSchema:
    transaction = await service(data)
    return TransactionSchema.model_validate(transaction)


@router.get("")
async def list_transactions(
    filters: Filters,
    page: Paginated,
    service: FromDishka[TransactionRetrieveInteractor],
) -> PaginatedResponseSchema[TransactionSchema]:
    transactions = await service.all(filters, page=page)
    return TypeAdapter(PaginatedResponseSchema[TransactionSchema]).validate_python(
        transactions, from_attributes=True
    )
