import logging

from dishka import Provider, Scope, provide
from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from app.models.transaction import Transaction
from app.schemas.transactions import TransactionCreateSchema
from app.services.filters import (
    PaginatedResponse,
    PaginatedSchema,
    SummaryFilters,
    apply_filters,
)

logger = logging.getLogger(__name__)


class TransactionRetrieveInteractor:
    default_ordering = (Transaction.date.desc(), Transaction.created_at.desc())

    def __init__(self, session: AsyncSession):
        self.session = session

    async def all(
        self,
        filters: SummaryFilters | None = None,
        page: PaginatedSchema | None = None,
    ) -> PaginatedResponse[Transaction]:
        query = apply_filters(select(Transaction), filters)
        return await PaginatedResponse.of(
            self.session, query, page=page, default_ordering=self.default_ordering
        )


class TransactionCreateInteractor:
    def __init__(self, session: AsyncSession):
        self.session = session

    def _map(self, transaction: TransactionCreateSchema) -> Transaction:
        db_transaction = Transaction(
            date=transaction.date,
            account=transaction.account,
            category=transaction.category,
            subcategory=transaction.subcategory,
            note=transaction.note,
            amount=transaction.amount,
            type=transaction.type,
        )
        if transaction.id is not None:
            db_transaction.id = transaction.id
        return db_transaction

    async def __call__(self, data: TransactionCreateSchema) -> Transaction:
        transaction = self._map(data)
        if data.id is None:
            self.session.add(transaction)
        else:
            transaction = await self.session.merge(transaction)
        await self.session.commit()
        await self.session.refresh(transaction)
        logger.info(
            "Transaction saved (id: %s, %s %s on %s)",
            transaction.id,
            transaction.type,
            transaction.amount,
            transaction.account,
        )
        return transaction


class TransactionServicesProvider(Provider):
    scope = Scope.REQUEST

    retrieve = provide(TransactionRetrieveInteractor)
    create = provide(TransactionCreateInteractor)
