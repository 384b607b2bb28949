from decimal import Decimal
from typing import Annotated

from pydantic import BaseModel, ConfigDict, PlainSerializer


class BaseSchema(BaseModel):
    model_config = ConfigDict(from_attributes=True)


Money = Annotated[
    Decimal, PlainSerializer(float, return_type=float, when_used="json")
]
