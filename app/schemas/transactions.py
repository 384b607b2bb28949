import re
from datetime import UTC, date, datetime
from decimal import ROUND_HALF_UP, Decimal, InvalidOperation
from typing import Any
from uuid import UUID

from pydantic import field_validator

from app.models.enums import TransactionType
from app.schemas.base import BaseSchema, Money

AMOUNT_SEPARATORS = re.compile(r"[_,\s]")
CENT = Decimal("0.01")


def calendar_day(value: datetime) -> date:
    if value.tzinfo is not None:
        value = value.astimezone(UTC)
    return value.date()


class TransactionCreateSchema(BaseSchema):
    id: UUID | None = None
    date: date
    account: str
    category: str
    subcategory: str | None = None
    note: str | None = None
    amount: Money
    type: TransactionType

    @field_validator("date", mode="before")
    @classmethod
    def validate_date(cls, v: Any):
        if isinstance(v, datetime):
            return calendar_day(v)
        if isinstance(v, str):
            value = v.strip()
            try:
                return date.fromisoformat(value)
            except ValueError:
                pass
            try:
                return calendar_day(datetime.fromisoformat(value))
            except ValueError:
                raise ValueError("Invalid transaction date")
        return v

    @field_validator("amount", mode="before")
    @classmethod
    def validate_amount(cls, v: Any) -> Decimal:
        if isinstance(v, bool):
            raise ValueError("Invalid transaction amount")
        if isinstance(v, str):
            v = AMOUNT_SEPARATORS.sub("", v)
        try:
            amount = Decimal(str(v))
        except InvalidOperation:
            raise ValueError("Invalid transaction amount")
        if not amount.is_finite():
            raise ValueError("Invalid transaction amount")
        if amount < 0:
            raise ValueError("Transaction amount must not be negative")
        return amount.quantize(CENT, rounding=ROUND_HALF_UP)

    @field_validator("account", "category")
    @classmethod
    def validate_required_text(cls, v: str) -> str:
        value = v.strip()
        if not value:
            raise ValueError("must be a non-empty string")
        return value

    @field_validator("subcategory", "note", mode="before")
    @classmethod
    def validate_optional_text(cls, v: Any) -> str | None:
        if v is None or v == "":
            return None
        if not isinstance(v, str):
            raise ValueError("Expected optional value to be a string when provided")
        return v.strip()


class TransactionSchema(TransactionCreateSchema):
    id: UUID
    created_at: datetime
