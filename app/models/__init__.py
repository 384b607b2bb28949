from .base import BaseModel
from .transaction import Transaction

__all__ = [
    "BaseModel",
    "Transaction",
]
