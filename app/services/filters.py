from collections.abc import Sequence
from dataclasses import dataclass
from datetime import date
from typing import Annotated, Any

from annotated_types import Ge, Le
from fastapi.params import Depends, Query
from pydantic import field_validator
from sqlalchemy import ColumnElement, Select, func, select
from sqlalchemy.ext.asyncio import AsyncSession

from app.models import Transaction
from app.schemas.base import BaseSchema


type FilterType = ColumnElement[bool]


class SummaryFilters(BaseSchema):
    start_date: date | None = None
    end_date: date | None = None
    account: str | None = None
    category: str | None = None

    @field_validator("*", mode="before")
    @classmethod
    def blank_as_absent(cls, v: Any):
        if isinstance(v, str) and not v.strip():
            return None
        return v


def get_summary_filters(
    start_date: Annotated[str | None, Query()] = None,
    end_date: Annotated[str | None, Query()] = None,
    account: Annotated[str | None, Query()] = None,
    category: Annotated[str | None, Query()] = None,
) -> SummaryFilters:
    return SummaryFilters(
        start_date=start_date,
        end_date=end_date,
        account=account,
        category=category,
    )


Filters = Annotated[SummaryFilters, Depends(get_summary_filters)]


def filter_conditions(filters: SummaryFilters) -> list[FilterType]:
    conditions: list[FilterType] = []
    if filters.start_date is not None:
        conditions.append(Transaction.date >= filters.start_date)
    if filters.end_date is not None:
        conditions.append(Transaction.date <= filters.end_date)
    if filters.account:
        conditions.append(Transaction.account == filters.account)
    if filters.category:
        conditions.append(Transaction.category == filters.category)
    return conditions


def apply_filters[T: tuple[Any, ...]](
    query: Select[T], filters: SummaryFilters | None
) -> Select[T]:
    """Constrain ``query`` by every filter present, all of them at once.

    ``Select`` is generative, the statement passed in is left untouched.
    """
    if filters is None:
        return query
    conditions = filter_conditions(filters)
    if not conditions:
        return query
    return query.where(*conditions)


class PaginatedSchema(BaseSchema):
    limit: Annotated[int, Ge(ge=1), Le(le=100)] = 10
    offset: Annotated[int, Ge(ge=0)] = 0


def get_pagination(
    limit: Annotated[int, Query()] = 10,
    offset: Annotated[int, Query()] = 0,
):
    return PaginatedSchema(
        limit=limit,
        offset=offset,
    )


Paginated = Annotated[PaginatedSchema, Depends(get_pagination)]


def apply_pagination[T: tuple[Any, ...]](
    query: Select[T],
    page: PaginatedSchema,
    default_ordering: ColumnElement | Sequence[ColumnElement] | None = None,
) -> Select[T]:
    query = query.offset(page.offset).limit(page.limit)
    if default_ordering is not None:
        if not isinstance(default_ordering, Sequence):
            default_ordering = [default_ordering]
        query = query.order_by(*default_ordering)
    return query


@dataclass
class PaginatedResponse[M]:
    items: list[M]
    total: int
    limit: int
    offset: int

    @classmethod
    async def of(
        cls,
        session: AsyncSession,
        query: Select[tuple[M]],
        page: PaginatedSchema | None = None,
        default_ordering: ColumnElement | Sequence[ColumnElement] | None = None,
    ) -> "PaginatedResponse[M]":
        page = page or PaginatedSchema()
        total = await session.scalar(
            select(func.count()).select_from(query.order_by(None).subquery())
        )
        items = await session.scalars(
            apply_pagination(query, page, default_ordering=default_ordering)
        )
        return cls(
            items=list(items),
            total=total or 0,
            limit=page.limit,
            offset=page.offset,
        )


class PaginatedResponseSchema[S](BaseSchema):
    items: list[S]
    total: int
    limit: int
    offset: int
