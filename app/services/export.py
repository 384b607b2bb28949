import csv
import logging
from dataclasses import dataclass
from datetime import UTC, datetime
from io import StringIO
from pathlib import Path

from dishka import Provider, Scope, provide
from pydantic import TypeAdapter
from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from app.models.transaction import Transaction
from app.schemas.transactions import TransactionSchema

logger = logging.getLogger(__name__)

EXPORT_COLUMNS = (
    "id",
    "date",
    "account",
    "category",
    "subcategory",
    "note",
    "amount",
    "type",
    "created_at",
)

_transactions_adapter = TypeAdapter(list[TransactionSchema])


def export_timestamp(now: datetime | None = None) -> str:
    now = now or datetime.now(UTC)
    return now.isoformat().replace(":", "-")


def transactions_to_csv(transactions: list[TransactionSchema]) -> str:
    buffer = StringIO()
    writer = csv.writer(buffer, lineterminator="\n")
    writer.writerow(EXPORT_COLUMNS)
    for transaction in transactions:
        row = transaction.model_dump(mode="json", include=set(EXPORT_COLUMNS))
        row["amount"] = str(transaction.amount)
        writer.writerow(row[column] for column in EXPORT_COLUMNS)
    return buffer.getvalue().rstrip("\n")


@dataclass(frozen=True)
class ExportResult:
    count: int
    json_path: Path
    csv_path: Path


class TransactionExporter:
    """Dumps every transaction to a JSON and a CSV backup side by side."""

    def __init__(self, session: AsyncSession):
        self.session = session

    async def fetch(self) -> list[TransactionSchema]:
        transactions = await self.session.scalars(
            select(Transaction).order_by(Transaction.date, Transaction.created_at)
        )
        return _transactions_adapter.validate_python(
            list(transactions), from_attributes=True
        )

    async def __call__(
        self, output_dir: Path, now: datetime | None = None
    ) -> ExportResult:
        transactions = await self.fetch()
        output_dir.mkdir(parents=True, exist_ok=True)
        base_path = output_dir / export_timestamp(now)

        json_path = base_path.with_name(f"{base_path.name}.json")
        csv_path = base_path.with_name(f"{base_path.name}.csv")
        json_path.write_bytes(_transactions_adapter.dump_json(transactions, indent=2))
        csv_path.write_text(transactions_to_csv(transactions), encoding="utf-8")

        logger.info(
            "Exported %d transactions to %s and %s",
            len(transactions),
            json_path,
            csv_path,
        )
        return ExportResult(count=len(transactions), json_path=json_path, csv_path=csv_path)


class ExportServicesProvider(Provider):
    scope = Scope.REQUEST

    exporter = provide(TransactionExporter)
